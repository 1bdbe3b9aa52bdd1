from __future__ import annotations
from typing import Optional

from .base import SpeechSynthesizer
from phrasepair.contracts import SpeechRequest
from phrasepair.openai_api import OpenAIClient


class OpenAISynthesizer(SpeechSynthesizer):
    def __init__(self, client: Optional[OpenAIClient] = None, model: str = "tts-1"):
        self.client = client or OpenAIClient()
        self.model = model

    @property
    def name(self) -> str:
        return "openai"

    def default_voice(self, language: str) -> str:
        # OpenAI voices are multilingual
        return "nova"

    async def synthesize(self, req: SpeechRequest) -> bytes:
        return await self.client.speech(req.text, voice=req.voice, speed=req.speed, model=self.model)

from __future__ import annotations
from typing import Optional

from .base import Translator
from phrasepair.contracts import TranslationRequest, TranslationResult
from phrasepair.openai_api import OpenAIClient

LANGUAGE_NAMES = {
    "de": "German",
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "it": "Italian",
    "ja": "Japanese",
    "nl": "Dutch",
    "pt": "Portuguese",
}


def language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code.lower().strip(), code)


class OpenAITranslator(Translator):
    def __init__(self, client: Optional[OpenAIClient] = None, model: str = "gpt-4o-mini"):
        self.client = client or OpenAIClient()
        self.model = model

    @property
    def name(self) -> str:
        return "openai"

    async def translate(self, req: TranslationRequest) -> TranslationResult:
        out = await self.client.chat_translate(
            req.text,
            model=self.model,
            source_language=language_name(req.source_lang),
            target_language=language_name(req.target_lang),
        )
        return TranslationResult(source_text=req.text, translated_text=out, provider=self.name)

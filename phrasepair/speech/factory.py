from __future__ import annotations
import os
from typing import Optional

from .base import SpeechSynthesizer
from .edge import EdgeSynthesizer
from .openai import OpenAISynthesizer
from phrasepair.openai_api import OpenAIClient

def get_synthesizer(
    provider: str | None = None,
    *,
    client: Optional[OpenAIClient] = None,
    model: str = "tts-1",
) -> SpeechSynthesizer:
    provider = (provider or os.getenv("PHRASEPAIR_TTS", "openai")).lower().strip()

    if provider == "openai":
        return OpenAISynthesizer(client=client, model=model)
    if provider == "edge":
        return EdgeSynthesizer()

    raise ValueError(f"Unknown speech provider: {provider}")

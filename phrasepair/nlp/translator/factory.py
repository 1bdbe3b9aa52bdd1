from __future__ import annotations
import os
from typing import Optional

from .base import Translator
from .argos import ArgosTranslator
from .openai import OpenAITranslator
from .stub import StubTranslator
from phrasepair.openai_api import OpenAIClient

def get_translator(
    provider: str | None = None,
    *,
    client: Optional[OpenAIClient] = None,
    model: str = "gpt-4o-mini",
    source_lang: str = "en",
    target_lang: str = "fr",
) -> Translator:
    provider = (provider or os.getenv("PHRASEPAIR_TRANSLATOR", "openai")).lower().strip()

    if provider == "openai":
        return OpenAITranslator(client=client, model=model)
    if provider == "argos":
        return ArgosTranslator(from_code=source_lang, to_code=target_lang)
    if provider == "stub":
        return StubTranslator()

    raise ValueError(f"Unknown translator provider: {provider}")

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence

@dataclass(frozen=True)
class TranslationRequest:
    text: str
    # Optional: previously translated sentences, unused by the current providers
    context: Optional[Sequence[str]] = None
    source_lang: str = "en"
    target_lang: str = "fr"

@dataclass(frozen=True)
class TranslationResult:
    source_text: str
    translated_text: str
    provider: str

@dataclass(frozen=True)
class SpeechRequest:
    text: str
    voice: str
    speed: float = 1.0  # 1.0 = provider default pace

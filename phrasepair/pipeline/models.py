from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence


class PairStatus(str, Enum):
    PENDING = "pending"
    TRANSLATING = "translating"
    GENERATING_AUDIO = "generating-audio"
    COMPLETE = "complete"
    ERROR = "error"


class Language(str, Enum):
    SOURCE = "source"
    TARGET = "target"


@dataclass
class SentencePair:
    id: str
    source_text: str
    translated_text: Optional[str] = None
    source_audio: Optional[bytes] = None
    target_audio: Optional[bytes] = None
    status: PairStatus = PairStatus.PENDING
    error: Optional[str] = None

    def audio_for(self, language: Language) -> Optional[bytes]:
        if language == Language.SOURCE:
            return self.source_audio
        return self.target_audio


@dataclass(frozen=True)
class PlaybackEntry:
    index: int
    language: Language


@dataclass(frozen=True)
class PlaybackState:
    index: int = 0
    language: Language = Language.SOURCE
    is_playing: bool = False


def build_playback_sequence(pairs: Sequence[SentencePair]) -> tuple[PlaybackEntry, ...]:
    """Source then target for every pair, in order; always 2 * len(pairs) entries."""
    out: list[PlaybackEntry] = []
    for index in range(len(pairs)):
        out.append(PlaybackEntry(index, Language.SOURCE))
        out.append(PlaybackEntry(index, Language.TARGET))
    return tuple(out)

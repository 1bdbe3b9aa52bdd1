# phrasepair/nlp/segmenter.py
from __future__ import annotations

import re
from typing import List, Sequence

DEFAULT_ABBREVIATIONS: tuple[str, ...] = (
    "Mr.",
    "Mrs.",
    "Ms.",
    "Dr.",
    "Prof.",
    "Sr.",
    "Jr.",
    "etc.",
    "vs.",
    "e.g.",
    "i.e.",
    "Inc.",
    "Ltd.",
    "Co.",
    "St.",
    "Ave.",
    "Blvd.",
    "Rd.",
    "No.",
    "Vol.",
    "Rev.",
    "Gen.",
    "Col.",
    "Lt.",
    "Sgt.",
    "Capt.",
    "Maj.",
)

# Private-use code points: never produced by punctuation splitting, never in real text.
_MARK_OPEN = "\ue000"
_MARK_CLOSE = "\ue001"
_MARKER = re.compile(_MARK_OPEN + r"(\d+)" + _MARK_CLOSE)

_BOUNDARY = re.compile(r"(?<=[.!?])\s+|\n+")


class SentenceSegmenter:
    """
    Abbreviation-aware sentence splitter.

    Every abbreviation occurrence is swapped for a marker before splitting, so
    its period never counts as a sentence end, then the original text is put back.
    Table entries are applied in order; an earlier entry claims its matches first.
    """
    def __init__(self, abbreviations: Sequence[str] = DEFAULT_ABBREVIATIONS):
        self.abbreviations = tuple(abbreviations)
        # A match may not start mid-word: "Amr." must not hide "Mr.".
        self._patterns = tuple(
            re.compile(r"(?<![^\W_])" + re.escape(abbr), flags=re.IGNORECASE)
            for abbr in self.abbreviations
        )

    def segment(self, text: str) -> List[str]:
        if not text or not text.strip():
            return []

        originals: List[str] = []

        def protect(m: re.Match) -> str:
            originals.append(m.group(0))
            return f"{_MARK_OPEN}{len(originals) - 1}{_MARK_CLOSE}"

        processed = text
        for pattern in self._patterns:
            processed = pattern.sub(protect, processed)

        out: List[str] = []
        for piece in _BOUNDARY.split(processed):
            piece = piece.strip()
            if not piece:
                continue
            out.append(_MARKER.sub(lambda m: originals[int(m.group(1))], piece))
        return out


_default = SentenceSegmenter()


def split_into_sentences(text: str) -> List[str]:
    return _default.segment(text)

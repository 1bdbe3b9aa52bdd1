"""Speech synthesis via edge-tts (no API key required)."""

from __future__ import annotations

import edge_tts

from .base import SpeechSynthesizer
from phrasepair.contracts import SpeechRequest
from phrasepair.errors import ServiceUnknownError

EDGE_VOICES = {
    "de": "de-DE-KatjaNeural",
    "en": "en-US-AriaNeural",
    "es": "es-ES-ElviraNeural",
    "fr": "fr-FR-DeniseNeural",
    "it": "it-IT-ElsaNeural",
    "ja": "ja-JP-NanamiNeural",
    "nl": "nl-NL-ColetteNeural",
    "pt": "pt-BR-FranciscaNeural",
}


def speed_to_rate(speed: float) -> str:
    """Convert a speed multiplier to edge-tts's relative rate string, e.g. 1.25 -> "+25%"."""
    pct = int(round((float(speed) - 1.0) * 100))
    return f"{pct:+d}%"


class EdgeSynthesizer(SpeechSynthesizer):
    @property
    def name(self) -> str:
        return "edge"

    def default_voice(self, language: str) -> str:
        return EDGE_VOICES.get(language.lower().strip(), EDGE_VOICES["en"])

    async def synthesize(self, req: SpeechRequest) -> bytes:
        communicate = edge_tts.Communicate(req.text, req.voice, rate=speed_to_rate(req.speed))
        audio = bytearray()
        try:
            async for chunk in communicate.stream():
                if chunk.get("type") == "audio":
                    audio.extend(chunk["data"])
        except Exception as e:
            raise ServiceUnknownError(f"edge-tts synthesis failed: {e}") from e

        # Empty output counts as failure
        if not audio:
            raise ServiceUnknownError(f"edge-tts returned no audio for: {req.text[:50]}")
        return bytes(audio)

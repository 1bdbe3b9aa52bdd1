from __future__ import annotations

import asyncio
import io
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

import numpy as np

from phrasepair.errors import PlaybackError


@dataclass(frozen=True)
class DecodedAudio:
    """
    PCM frames ready for an output device.
    samples: float32 array shaped (frames, channels), values in [-1.0, 1.0].
    """
    samples: np.ndarray
    sample_rate: int

    @property
    def channels(self) -> int:
        return int(self.samples.shape[1]) if self.samples.ndim > 1 else 1

    @property
    def duration(self) -> float:
        return len(self.samples) / float(self.sample_rate)


class AudioOutput(Protocol):
    def start(self, clip: DecodedAudio, on_done: Callable[[Optional[BaseException]], None]) -> None:
        ...

    def stop(self) -> None:
        ...


def decode_audio(payload: bytes) -> DecodedAudio:
    """Decode an encoded payload (mp3, wav, ...) with pydub; needs ffmpeg for compressed formats."""
    from pydub import AudioSegment

    # WAV is read natively; anything else goes through ffmpeg
    fmt = "wav" if payload[:4] == b"RIFF" else None
    segment = AudioSegment.from_file(io.BytesIO(payload), format=fmt)
    samples = np.array(segment.get_array_of_samples(), dtype=np.float32)
    samples = samples.reshape((-1, max(1, segment.channels)))
    samples /= float(1 << (8 * segment.sample_width - 1))
    return DecodedAudio(samples=samples, sample_rate=int(segment.frame_rate))


class AudioPlayer:
    """
    Single-session player. `play()` resolves True on natural end and False when
    interrupted by `stop()` or a newer `play()`; it raises PlaybackError on failure.
    The decode buffer lives only as long as its session.
    """

    def __init__(
        self,
        output: AudioOutput,
        *,
        decoder: Callable[[bytes], DecodedAudio] = decode_audio,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.output = output
        self.decoder = decoder
        self.is_playing = False
        self._logger = logger or logging.getLogger(__name__)
        self._clip: Optional[DecodedAudio] = None
        self._pending: Optional[asyncio.Future] = None
        self._session = 0
        self._on_ended: Optional[Callable[[], None]] = None

    def on_ended(self, callback: Optional[Callable[[], None]]) -> None:
        self._on_ended = callback

    async def play(self, payload: bytes) -> bool:
        self.stop()

        loop = asyncio.get_running_loop()
        done: asyncio.Future = loop.create_future()
        self._session += 1
        session = self._session
        self._pending = done

        def on_done(error: Optional[BaseException]) -> None:
            # Called from the device's audio thread
            loop.call_soon_threadsafe(self._finish, session, error)

        try:
            try:
                self._clip = self.decoder(payload)
            except Exception as e:
                raise PlaybackError(f"Could not decode audio payload: {e}") from e
            self.output.start(self._clip, on_done)
            self.is_playing = True
            self._logger.debug(
                "playback_started",
                extra={"session": session, "duration_sec": round(self._clip.duration, 3)},
            )
            finished = await done
        finally:
            if self._pending is done:
                self._pending = None
                self.is_playing = False
                self.output.stop()
                self._release()

        if finished and self._on_ended is not None:
            self._on_ended()
        return finished

    def _finish(self, session: int, error: Optional[BaseException]) -> None:
        if session != self._session:
            return
        fut = self._pending
        if fut is None or fut.done():
            return
        if error is None:
            fut.set_result(True)
        else:
            fut.set_exception(PlaybackError(f"Audio playback failed: {error}"))

    def stop(self) -> None:
        self._session += 1
        fut, self._pending = self._pending, None
        self.output.stop()
        self.is_playing = False
        self._release()
        if fut is not None and not fut.done():
            fut.set_result(False)

    def _release(self) -> None:
        self._clip = None

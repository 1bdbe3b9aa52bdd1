from __future__ import annotations

from typing import Callable, Optional

import numpy as np

from phrasepair.audio.player import DecodedAudio
from phrasepair.errors import PlaybackError


def _import_sounddevice():
    try:
        import sounddevice as sd
    except ImportError as e:
        raise PlaybackError(
            "sounddevice is not installed. Install with: python -m pip install sounddevice"
        ) from e
    return sd


class SoundDeviceOutput:
    """
    Audio output device backed by the `sounddevice` package (PortAudio).
    Plays one decoded clip at a time through a callback-fed OutputStream.
    """

    def __init__(self, *, device: Optional[int] = None) -> None:
        self.device = device
        self._stream = None

    @staticmethod
    def list_devices() -> str:
        sd = _import_sounddevice()
        return str(sd.query_devices())

    def start(self, clip: DecodedAudio, on_done: Callable[[Optional[BaseException]], None]) -> None:
        sd = _import_sounddevice()
        frames = np.ascontiguousarray(clip.samples, dtype=np.float32)
        position = 0

        def callback(outdata, frame_count, time_info, status) -> None:
            nonlocal position
            chunk = frames[position:position + frame_count]
            n = len(chunk)
            outdata[:n] = chunk
            position += n
            if n < frame_count:
                outdata[n:] = 0
                raise sd.CallbackStop()

        try:
            stream = sd.OutputStream(
                samplerate=clip.sample_rate,
                channels=clip.channels,
                dtype="float32",
                device=self.device,
                callback=callback,
                finished_callback=lambda: on_done(None),
            )
            stream.start()
        except Exception as e:
            raise PlaybackError(
                "Failed to open audio output stream. "
                "Try --list-devices and select a device id with --device."
            ) from e
        self._stream = stream

    def stop(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        stream.abort()
        stream.close()

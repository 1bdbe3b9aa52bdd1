# phrasepair/pipeline/sequencer.py
from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol, Sequence

from phrasepair.app.logging_setup import log_event
from phrasepair.errors import PlaybackError
from phrasepair.pipeline.models import (
    Language,
    PairStatus,
    PlaybackEntry,
    PlaybackState,
    SentencePair,
    build_playback_sequence,
)
from phrasepair.ui.bridge import ChangeBus


class Player(Protocol):
    async def play(self, payload: bytes) -> bool:
        ...

    def stop(self) -> None:
        ...


class PlaybackSequencer:
    """
    Walks the interleaved (sentence, language) sequence and drives the player.

    Entries that are not ready yet, or whose pair failed, are skipped; the scan
    wraps to the start and gives up after one full lap. Pairs are only read here.
    """

    def __init__(
        self,
        player: Player,
        pairs: Callable[[], Sequence[SentencePair]],
        *,
        bus: Optional[ChangeBus] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.player = player
        self._pairs = pairs
        self.bus = bus
        self.logger = logger or logging.getLogger(__name__)
        self.cursor = 0
        self.state = PlaybackState()
        # Bumped on every start/stop; a playback that finds it changed was pre-empted.
        self._session = 0

    @property
    def sequence(self) -> tuple[PlaybackEntry, ...]:
        return build_playback_sequence(self._pairs())

    def _set_state(self, state: PlaybackState) -> None:
        self.state = state
        if self.bus is not None:
            self.bus.publish("playback", state)

    def _playable_audio(self, entry: PlaybackEntry) -> Optional[bytes]:
        pairs = self._pairs()
        if not 0 <= entry.index < len(pairs):
            return None
        pair = pairs[entry.index]
        if pair.status == PairStatus.ERROR:
            return None
        return pair.audio_for(entry.language) or None

    async def _play(self, entry: PlaybackEntry, payload: bytes) -> bool:
        """Play one entry; False if something else took over playback meanwhile."""
        self._session += 1
        session = self._session
        self._set_state(PlaybackState(index=entry.index, language=entry.language, is_playing=True))
        try:
            await self.player.play(payload)
        except PlaybackError as e:
            log_event(
                self.logger,
                logging.WARNING,
                "playback_failed",
                index=entry.index,
                language=entry.language.value,
                detail=str(e),
            )
        except Exception as e:
            self.logger.warning(
                "playback_failed",
                exc_info=True,
                extra={"index": entry.index, "language": entry.language.value, "detail": repr(e)},
            )
        finally:
            current = session == self._session
            if current:
                self._set_state(PlaybackState(index=entry.index, language=entry.language, is_playing=False))
        return current

    async def advance(self) -> Optional[PlaybackEntry]:
        sequence = self.sequence
        if not sequence:
            return None

        # Pressing "next" mid-clip skips the rest of it
        if self.state.is_playing:
            self.stop()
            self.cursor += 1

        attempts = 0
        while attempts < len(sequence):
            if self.cursor >= len(sequence):
                self.cursor = 0
            entry = sequence[self.cursor]
            payload = self._playable_audio(entry)
            if payload is None:
                self.cursor += 1
                attempts += 1
                continue

            if await self._play(entry, payload):
                self.cursor += 1
            return entry

        log_event(self.logger, logging.INFO, "nothing_playable", sequence_length=len(sequence))
        if self.bus is not None:
            self.bus.publish("playback.empty", None)
        return None

    async def play_sentence(self, index: int, language: Language) -> bool:
        pairs = self._pairs()
        if not 0 <= index < len(pairs):
            return False
        payload = pairs[index].audio_for(language)
        if not payload:
            return False

        entry = PlaybackEntry(index, language)
        sequence = self.sequence
        if entry in sequence:
            self.cursor = sequence.index(entry) + 1
        else:
            log_event(
                self.logger,
                logging.WARNING,
                "playback_entry_missing",
                index=index,
                language=language.value,
                sequence_length=len(sequence),
            )

        await self._play(entry, payload)
        return True

    def stop(self) -> None:
        self._session += 1
        self.player.stop()
        if self.state.is_playing:
            self._set_state(PlaybackState(index=self.state.index, language=self.state.language, is_playing=False))

    def reset(self) -> None:
        self.stop()
        self.cursor = 0
        self._set_state(PlaybackState())

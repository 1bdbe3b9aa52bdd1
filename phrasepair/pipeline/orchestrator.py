# phrasepair/pipeline/orchestrator.py
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from phrasepair.app.logging_setup import log_event
from phrasepair.app.state import PipelinePhase, PipelineProgress, ProgressTracker
from phrasepair.contracts import SpeechRequest, TranslationRequest
from phrasepair.nlp.segmenter import SentenceSegmenter
from phrasepair.nlp.translator.base import Translator
from phrasepair.pipeline.models import PairStatus, SentencePair
from phrasepair.pipeline.sequencer import PlaybackSequencer, Player
from phrasepair.pipeline.stages import StageResult, run_stage
from phrasepair.speech.base import SpeechSynthesizer
from phrasepair.ui.bridge import ChangeBus


class TranslationPipeline:
    """
    Turns a text block into translated, voiced sentence pairs.

    Sentences are handled strictly one after another. Each stage returns a
    StageResult; a failed stage marks only its own pair as `error`, records the
    message as `last_error` and the loop moves on to the next sentence.

    In-flight backend calls are not cancelled by reset() or a newer process():
    the abandoned run notices the generation change when its call returns and
    stops without touching the new state.
    """

    def __init__(
        self,
        *,
        translator: Translator,
        synthesizer: SpeechSynthesizer,
        player: Player,
        segmenter: Optional[SentenceSegmenter] = None,
        source_lang: str = "en",
        target_lang: str = "fr",
        source_voice: Optional[str] = None,
        target_voice: Optional[str] = None,
        speed: float = 1.0,
        bus: Optional[ChangeBus] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.translator = translator
        self.synthesizer = synthesizer
        self.segmenter = segmenter or SentenceSegmenter()
        self.source_lang = source_lang
        self.target_lang = target_lang
        self.source_voice = source_voice or synthesizer.default_voice(source_lang)
        self.target_voice = target_voice or synthesizer.default_voice(target_lang)
        self.speed = float(speed)
        self.bus = bus
        self.logger = logger or logging.getLogger(__name__)

        self._pairs: List[SentencePair] = []
        self._generation = 0
        self.tracker = ProgressTracker(on_change=self._publish_progress)
        self.playback = PlaybackSequencer(player, lambda: self._pairs, bus=bus, logger=self.logger)

    # -- read access -------------------------------------------------------

    @property
    def pairs(self) -> Sequence[SentencePair]:
        return tuple(self._pairs)

    @property
    def progress(self) -> PipelineProgress:
        return self.tracker.progress

    @property
    def last_error(self) -> Optional[str]:
        return self.tracker.last_error

    @property
    def is_processing(self) -> bool:
        return self.tracker.is_processing

    # -- notifications -----------------------------------------------------

    def _publish(self, topic: str, payload: object) -> None:
        if self.bus is not None:
            self.bus.publish(topic, payload)

    def _publish_progress(self, progress: PipelineProgress) -> None:
        self._publish("progress", progress)

    def _set_status(self, pair: SentencePair, status: PairStatus) -> None:
        pair.status = status
        self._publish("pair", pair)

    def _fail(self, pair: SentencePair, result: StageResult, fallback: str) -> None:
        pair.error = result.message or fallback
        self._set_status(pair, PairStatus.ERROR)
        self.tracker.record_error(pair.error)
        self._publish("error", pair.error)

    def _is_stale(self, generation: int) -> bool:
        if generation == self._generation:
            return False
        log_event(self.logger, logging.INFO, "pipeline_run_abandoned", generation=generation)
        return True

    # -- operations --------------------------------------------------------

    def dismiss_error(self) -> None:
        self.tracker.dismiss_error()
        self._publish("error", None)

    def reset(self) -> None:
        self._generation += 1
        self.playback.reset()
        self._pairs = []
        self._publish("pairs", self.pairs)
        self.tracker.dismiss_error()
        self.tracker.set_idle()

    async def _synthesize(self, text: str, voice: str) -> StageResult[bytes]:
        return await run_stage(
            "speech",
            self.synthesizer.synthesize,
            SpeechRequest(text=text, voice=voice, speed=self.speed),
            logger=self.logger,
        )

    async def _generate_audio(self, pair: SentencePair, generation: int) -> Optional[bool]:
        """Stages 3-4. Returns None if the run was abandoned meanwhile."""
        result = await self._synthesize(pair.source_text, self.source_voice)
        if self._is_stale(generation):
            return None
        if not result.ok:
            self._fail(pair, result, "Source audio generation failed")
            return False
        pair.source_audio = result.value

        if pair.translated_text:
            result = await self._synthesize(pair.translated_text, self.target_voice)
            if self._is_stale(generation):
                return None
            if not result.ok:
                self._fail(pair, result, "Target audio generation failed")
                return False
            pair.target_audio = result.value

        self._set_status(pair, PairStatus.COMPLETE)
        return True

    async def process(self, text: str) -> None:
        self._generation += 1
        generation = self._generation
        self.playback.reset()
        self.tracker.dismiss_error()

        sentences = self.segmenter.segment(text)
        self._pairs = [SentencePair(id=f"sentence-{i}", source_text=s) for i, s in enumerate(sentences)]
        self._publish("pairs", self.pairs)
        if not sentences:
            self.tracker.set_idle()
            return

        total = len(sentences)
        log_event(
            self.logger,
            logging.INFO,
            "pipeline_start",
            sentences=total,
            translator=self.translator.name,
            synthesizer=self.synthesizer.name,
        )
        self.tracker.start(PipelinePhase.TRANSLATING, total, "Starting translation...")

        pairs = self._pairs
        failed = 0
        for i, pair in enumerate(pairs, start=1):
            self.tracker.step(i, f"Translating sentence {i} of {total}...")
            self._set_status(pair, PairStatus.TRANSLATING)

            result = await run_stage(
                "translate",
                self.translator.translate,
                TranslationRequest(text=pair.source_text, source_lang=self.source_lang, target_lang=self.target_lang),
                logger=self.logger,
            )
            if self._is_stale(generation):
                return
            if not result.ok:
                self._fail(pair, result, "Translation failed")
                failed += 1
                continue
            pair.translated_text = result.value.translated_text

            self._set_status(pair, PairStatus.GENERATING_AUDIO)
            self.tracker.set_message(f"Generating audio for sentence {i}...")
            done = await self._generate_audio(pair, generation)
            if done is None:
                return
            if not done:
                failed += 1

        self.tracker.finish(total, "Complete!")
        log_event(self.logger, logging.INFO, "pipeline_complete", sentences=total, failed=failed)

    async def regenerate_audio(self) -> None:
        if not self._pairs:
            return
        if self.is_processing:
            log_event(self.logger, logging.INFO, "regenerate_ignored_busy", phase=self.progress.phase.value)
            return

        self._generation += 1
        generation = self._generation
        self.playback.stop()
        self.tracker.dismiss_error()

        selected = [p for p in self._pairs if p.source_text and p.translated_text]
        if not selected:
            return

        total = len(selected)
        self.tracker.start(PipelinePhase.GENERATING_AUDIO, total, "Regenerating audio...")
        for i, pair in enumerate(selected, start=1):
            self.tracker.step(i, f"Regenerating audio for sentence {i}...")
            pair.error = None
            self._set_status(pair, PairStatus.GENERATING_AUDIO)
            if await self._generate_audio(pair, generation) is None:
                return

        self.tracker.finish(total, "Audio regenerated!")
        self.playback.reset()
        log_event(self.logger, logging.INFO, "audio_regenerated", sentences=total)

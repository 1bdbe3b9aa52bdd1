from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from phrasepair.audio.output import SoundDeviceOutput
from phrasepair.audio.player import AudioPlayer
from phrasepair.nlp.translator.factory import get_translator
from phrasepair.openai_api import OpenAIClient
from phrasepair.pipeline.orchestrator import TranslationPipeline
from phrasepair.speech.factory import get_synthesizer
from phrasepair.ui.bridge import ChangeBus


@dataclass(frozen=True)
class SessionServices:
    client: OpenAIClient
    player: AudioPlayer
    bus: ChangeBus
    pipeline: TranslationPipeline


def build_session_services(args: Any, logger: Optional[logging.Logger] = None) -> SessionServices:
    client = OpenAIClient(
        base_url=str(args.api_base_url),
        timeout=max(1.0, float(args.request_timeout)),
        logger=logger,
    )
    translator = get_translator(
        str(args.translator),
        client=client,
        model=str(args.model),
        source_lang=str(args.source_lang),
        target_lang=str(args.target_lang),
    )
    synthesizer = get_synthesizer(str(args.tts), client=client, model=str(args.tts_model))
    player = AudioPlayer(SoundDeviceOutput(device=args.device), logger=logger)
    bus = ChangeBus()
    pipeline = TranslationPipeline(
        translator=translator,
        synthesizer=synthesizer,
        player=player,
        source_lang=str(args.source_lang),
        target_lang=str(args.target_lang),
        source_voice=args.voice_source,
        target_voice=args.voice_target,
        speed=min(4.0, max(0.25, float(args.speed))),
        bus=bus,
        logger=logger,
    )
    return SessionServices(client=client, player=player, bus=bus, pipeline=pipeline)

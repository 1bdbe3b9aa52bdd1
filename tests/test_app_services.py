from __future__ import annotations

import asyncio
import io
import logging
from argparse import Namespace
from types import SimpleNamespace

from phrasepair.app import main as app_main
from phrasepair.app import services as app_services
from phrasepair.nlp.translator.stub import StubTranslator
from phrasepair.pipeline.models import Language
from phrasepair.speech.edge import EdgeSynthesizer


def _args(**overrides) -> Namespace:
    values = dict(
        api_base_url="http://localhost:9999/v1",
        request_timeout=5.0,
        translator="stub",
        tts="edge",
        model="gpt-4o-mini",
        tts_model="tts-1",
        source_lang="en",
        target_lang="fr",
        voice_source=None,
        voice_target="fr-FR-HenriNeural",
        speed=9.0,
        device=None,
    )
    values.update(overrides)
    return Namespace(**values)


def test_build_session_services_wires_pipeline() -> None:
    services = app_services.build_session_services(_args())
    pipeline = services.pipeline
    assert isinstance(pipeline.translator, StubTranslator)
    assert isinstance(pipeline.synthesizer, EdgeSynthesizer)
    assert pipeline.source_voice == "en-US-AriaNeural"
    assert pipeline.target_voice == "fr-FR-HenriNeural"
    assert pipeline.speed == 4.0
    assert pipeline.playback.player is services.player
    assert services.client.base_url == "http://localhost:9999/v1"


def test_parse_command() -> None:
    assert app_main.parse_command("\n") == ("next", None, None)
    assert app_main.parse_command("3 t") == ("play", 3, Language.TARGET)
    assert app_main.parse_command("2") == ("play", 2, Language.SOURCE)
    assert app_main.parse_command("q") == ("quit", None, None)
    assert app_main.parse_command("r") == ("regenerate", None, None)
    assert app_main.parse_command("what") == ("help", None, None)


def test_read_input_text_prefers_arguments(tmp_path) -> None:
    path = tmp_path / "in.txt"
    path.write_text("From file.", encoding="utf-8")
    assert app_main.read_input_text(Namespace(text=["Hi", "there."], input=str(path))) == "Hi there."
    assert app_main.read_input_text(Namespace(text=[], input=str(path))) == "From file."


class _TtyStdin(io.StringIO):
    def isatty(self) -> bool:
        return True


def test_command_stream_is_stdin_on_a_terminal(monkeypatch) -> None:
    stdin = _TtyStdin()
    monkeypatch.setattr(app_main.sys, "stdin", stdin)
    assert app_main.open_command_stream() is stdin


def test_command_stream_falls_back_to_controlling_terminal(monkeypatch) -> None:
    opened = []
    monkeypatch.setattr(app_main.sys, "stdin", io.StringIO("piped text"))
    monkeypatch.setattr(app_main, "open", lambda path, **kw: opened.append(path) or io.StringIO(), raising=False)
    assert app_main.open_command_stream() is not None
    assert opened == ["/dev/tty"]


def test_command_stream_without_terminal(monkeypatch) -> None:
    def _no_tty(path, **kw):
        raise OSError("No such device or address")

    monkeypatch.setattr(app_main.sys, "stdin", io.StringIO("piped text"))
    monkeypatch.setattr(app_main, "open", _no_tty, raising=False)
    assert app_main.open_command_stream() is None


def test_interactive_waits_for_every_playback_task() -> None:
    class FakePlayback:
        def __init__(self):
            self.finished = 0

        async def advance(self):
            await asyncio.sleep(0.01)
            self.finished += 1

        def stop(self) -> None:
            pass

    class FakePipeline:
        def __init__(self):
            self.playback = FakePlayback()
            self.resets = 0

        def reset(self) -> None:
            self.resets += 1

    pipeline = FakePipeline()
    services = SimpleNamespace(pipeline=pipeline)
    commands = io.StringIO("\n\n\nq\n")

    asyncio.run(app_main._interactive(services, commands, logging.getLogger("phrasepair.test.main")))

    assert pipeline.playback.finished == 3
    assert pipeline.resets == 1

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

from phrasepair.app.config import resolve_args
from phrasepair.app.diagnostics import hint_for_exception, summarize_exception
from phrasepair.app.logging_setup import setup_app_logger
from phrasepair.app.services import SessionServices, build_session_services
from phrasepair.app.state import PipelineProgress
from phrasepair.audio.output import SoundDeviceOutput
from phrasepair.pipeline.models import Language, PlaybackState

HELP = "Enter=next  <n> s|t=play sentence n  s=stop  r=regenerate audio  d=dismiss error  q=quit"


def read_input_text(args: Any) -> str:
    if args.text:
        return " ".join(args.text)
    if args.input:
        return Path(args.input).read_text(encoding="utf-8")
    return sys.stdin.read()


def parse_command(line: str) -> tuple[str, int | None, Language | None]:
    """Map an input line to (command, sentence number, language)."""
    parts = line.strip().lower().split()
    if not parts:
        return "next", None, None
    if parts[0].isdigit():
        lang = Language.TARGET if len(parts) > 1 and parts[1].startswith("t") else Language.SOURCE
        return "play", int(parts[0]), lang
    commands = {"s": "stop", "r": "regenerate", "d": "dismiss", "q": "quit", "?": "help"}
    return commands.get(parts[0], "help"), None, None


def _print_event(topic: str, payload: Any) -> None:
    if topic == "progress" and isinstance(payload, PipelineProgress) and payload.message:
        print(f"[{payload.current}/{payload.total}] {payload.message}")
    elif topic == "error" and payload:
        print(f"error: {payload} ({hint_for_exception(str(payload))})")
    elif topic == "playback" and isinstance(payload, PlaybackState) and payload.is_playing:
        print(f"> playing sentence {payload.index + 1} ({payload.language.value})")
    elif topic == "playback.empty":
        print("Nothing to play yet.")


def open_command_stream() -> TextIO | None:
    """Commands come from the terminal, also when the text itself was piped in."""
    if sys.stdin.isatty():
        return sys.stdin
    try:
        return open("/dev/tty", encoding="utf-8")
    except OSError:
        return None


async def _interactive(services: SessionServices, commands: TextIO, logger: logging.Logger) -> None:
    pipeline = services.pipeline
    tasks: set[asyncio.Task] = set()

    def _spawn(coro) -> None:
        task = asyncio.create_task(coro)
        tasks.add(task)
        task.add_done_callback(tasks.discard)

    print(HELP)
    while True:
        line = await asyncio.to_thread(commands.readline)
        if not line:
            break
        command, number, lang = parse_command(line)
        logger.info("command", extra={"command": command})
        if command == "quit":
            break
        if command == "next":
            _spawn(pipeline.playback.advance())
        elif command == "play" and number is not None and lang is not None:
            _spawn(pipeline.playback.play_sentence(number - 1, lang))
        elif command == "stop":
            pipeline.playback.stop()
        elif command == "regenerate":
            await pipeline.regenerate_audio()
        elif command == "dismiss":
            pipeline.dismiss_error()
        else:
            print(HELP)

    pipeline.reset()
    if tasks:
        await asyncio.gather(*tasks)


async def _run(args: Any, text: str, logger: logging.Logger) -> int:
    services = build_session_services(args, logger=logger)
    try:
        if args.validate_key:
            ok = await services.client.validate_key()
            print("API key is valid." if ok else "API key is missing or invalid.")
            return 0 if ok else 1

        services.bus.subscribe(_print_event)
        await services.pipeline.process(text)
        pairs = services.pipeline.pairs
        if not pairs:
            print("No sentences found in input.")
            return 0
        for i, pair in enumerate(pairs, start=1):
            print(f"{i}. {pair.source_text}\n   {pair.translated_text or '-'} [{pair.status.value}]")
        commands = open_command_stream()
        if commands is None:
            logger.warning("no_command_terminal")
            print("No terminal available for playback commands.")
            return 0
        try:
            await _interactive(services, commands, logger)
        finally:
            if commands is not sys.stdin:
                commands.close()
        return 0
    finally:
        await services.client.aclose()


def main(argv: list[str] | None = None) -> int:
    args = resolve_args(argv)
    logger, log_dir, log_path = setup_app_logger(debug=bool(args.debug))
    logger.info("app_start", extra={"config_path": str(getattr(args, "config", "")), "argv": argv or []})

    if args.list_devices:
        print(SoundDeviceOutput.list_devices())
        return 0

    text = "" if args.validate_key else read_input_text(args)
    try:
        return asyncio.run(_run(args, text, logger))
    except KeyboardInterrupt:
        logger.info("app_interrupted")
        return 130
    except Exception as e:
        logger.exception("app_crash")
        summary = summarize_exception(str(e))
        print(f"{summary}\n{hint_for_exception(summary)}\nSee log: {log_path}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

"""Terminal front end: analyze a program, or replay a saved trace, step by step."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any

from . import constants
from .config import TracerConfig
from .errors import TraceViewerError
from .playback import PlaybackController, PlaybackEvent, PlaybackStatus
from .scheduling import AsyncioScheduler
from .session import TraceSession
from .text_render import render_document_header, render_step_view

SAMPLE_SOURCE = """\
function bubbleSort(arr) {
  let n = arr.length;
  for (let i = 0; i < n - 1; i++) {
    for (let j = 0; j < n - i - 1; j++) {
      if (arr[j] > arr[j + 1]) {
        // Swap
        let temp = arr[j];
        arr[j] = arr[j + 1];
        arr[j + 1] = temp;
      }
    }
  }
  return arr;
}
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="algotracer",
        description="Step through an LLM-generated execution trace of a program",
    )
    parser.add_argument("file", nargs="?", help="Source file to trace")
    parser.add_argument(
        "--trace-json",
        "-t",
        default=None,
        help="Replay a saved analyzer reply instead of calling the LLM",
    )
    parser.add_argument(
        "--provider",
        "-p",
        default=constants.PROVIDER_OPENAI,
        choices=list(constants.SUPPORTED_PROVIDERS),
        help="LLM provider (default: openai)",
    )
    parser.add_argument("--model", "-m", default="", help="Model name override")
    parser.add_argument(
        "--base-url", default="", help="Server URL override (ollama only)"
    )
    parser.add_argument(
        "--max-tokens",
        type=int,
        default=constants.DEFAULT_MAX_TOKENS,
        help=f"Reply token limit (default: {constants.DEFAULT_MAX_TOKENS})",
    )
    parser.add_argument(
        "--play",
        action="store_true",
        help="Auto-advance through the steps on a timer",
    )
    parser.add_argument(
        "--interval",
        "-i",
        type=float,
        default=constants.DEFAULT_TICK_INTERVAL,
        help="Seconds per step when playing (default: 1.0)",
    )
    parser.add_argument(
        "--step", "-s", type=int, default=None, help="Show only step N (1-based)"
    )
    parser.add_argument(
        "--no-pointers",
        action="store_true",
        help="Disable index-variable highlighting on arrays",
    )
    parser.add_argument(
        "--dump-json",
        action="store_true",
        help="Print the validated trace document as JSON and exit",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    return parser


def _read_source(path: str | None) -> str | None:
    if not path:
        return None
    with open(path, encoding="utf-8") as f:
        return f.read()


def _print_current(session: TraceSession, source: str | None) -> None:
    view = session.view()
    if view is not None:
        print(render_step_view(view, source))
        print()


async def _play(session: TraceSession, source: str | None) -> None:
    controller = session.controller
    finished = asyncio.Event()

    def on_event(event: PlaybackEvent) -> None:
        if event.reason in ("tick", "end"):
            _print_current(session, source)
        if event.status != PlaybackStatus.PLAYING:
            finished.set()

    unsubscribe = controller.subscribe(on_event)
    try:
        _print_current(session, source)
        controller.play()
        if not controller.is_playing:
            return
        await finished.wait()
    finally:
        unsubscribe()


async def _run(
    args: argparse.Namespace, config: TracerConfig, client: Any = None
) -> int:
    source = _read_source(args.file)
    scheduler = AsyncioScheduler()

    if args.trace_json:
        session = TraceSession(
            analyzer=None,
            controller=PlaybackController(scheduler, interval=config.tick_interval),
            annotate_pointers=config.annotate_pointers,
        )
        with open(args.trace_json, encoding="utf-8") as f:
            document = session.load_raw(f.read())
    else:
        if source is None:
            source = SAMPLE_SOURCE
            print("No file provided. Using built-in sample:\n")
            print(source)
        session = TraceSession.from_config(config, scheduler, client=client)
        document = await session.analyze(source)

    if document is None:
        return 1

    if args.dump_json:
        print(document.to_json())
        return 0

    print(render_document_header(document))
    print()
    controller = session.controller

    if args.step is not None:
        controller.seek(args.step - 1)
        _print_current(session, source)
    elif args.play:
        await _play(session, source)
    else:
        for index in range(controller.step_count):
            controller.seek(index)
            _print_current(session, source)

    session.close()
    return 0


def main(argv: list[str] | None = None, client: Any = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = TracerConfig.from_args(args)
    try:
        return asyncio.run(_run(args, config, client=client))
    except (TraceViewerError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

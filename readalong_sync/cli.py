"""Command-line interface for the read-along engine.

WHY: Segmentation rules and the speaking-rate estimate are much easier to
tune when you can see them on real book text. The CLI exposes the engine's
pieces — sentence splitting, pagination, and a full playback simulation —
behind a single command.

HOW: argparse with three subcommands:
  segment   — print one sentence per line (or a JSON list)
  paginate  — split a book into pages, print one page or all of them,
              optionally cut into narration-sized chunks
  simulate  — drive a SyncSession with synthetic progress ticks (or
              manual test-mode ticks) and print the formatted read model
              after every tick
Status messages go to stderr; data goes to stdout.

RULES:
- Input files are read as UTF-8; a missing file exits with code 1
- --format must be a key of FORMATTERS
- --translation LANG=FILE is repeatable and switches in translated text
  for sentence mode
- simulate defaults the duration to the estimated narration length
- KeyboardInterrupt exits with code 130
- Logging is configured here only (level from --verbose or LOG_LEVEL)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from readalong_sync.config import (
    DEFAULT_LANGUAGE,
    DEFAULT_WORDS_PER_PAGE,
    LOG_LEVEL,
    TTS_MAX_CHUNK_CHARS,
    language_name,
)
from readalong_sync.core.estimator import estimated_duration
from readalong_sync.core.ir import ReadingMode, ReadModel
from readalong_sync.core.pagination import get_page, paginate, split_for_tts
from readalong_sync.core.segmenter import segment
from readalong_sync.core.session import SyncSession
from readalong_sync.core.ticker import ManualTicker
from readalong_sync.formatters import FORMATTERS
from readalong_sync.formatters.base import BaseFormatter

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _read_text(path_str: str) -> str:
    path = Path(path_str)
    if not path.is_file():
        _fail("File not found: {}".format(path))
    return path.read_text(encoding="utf-8")


def _parse_translations(pairs: Optional[List[str]]) -> Dict[str, str]:
    """Load ``LANG=FILE`` translation arguments into {lang: text}."""
    translations: Dict[str, str] = {}
    for pair in pairs or []:
        lang, sep, file_path = pair.partition("=")
        if not sep or not lang.strip() or not file_path.strip():
            _fail("Invalid --translation '{}'. Expected LANG=FILE.".format(pair))
        translations[lang.strip().lower()] = _read_text(file_path.strip())
    return translations


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _emit(formatter: BaseFormatter, read_model: ReadModel, header: str) -> None:
    print(header)
    for output in formatter.format(read_model):
        sys.stdout.write(output.content)
        if not output.content.endswith("\n"):
            sys.stdout.write("\n")
    sys.stdout.flush()


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_segment(args: argparse.Namespace) -> None:
    sentences = segment(_read_text(args.input_file))
    _status("{} sentence(s)".format(len(sentences)))
    if args.json:
        print(json.dumps(sentences, indent=2, ensure_ascii=False))
        return
    for sentence in sentences:
        print(sentence)


def _print_page(number: int, page_text: str, max_chars: Optional[int]) -> None:
    if max_chars is None:
        print("--- page {} ---".format(number))
        print(page_text)
        return
    for chunk_number, chunk in enumerate(split_for_tts(page_text, max_chars), start=1):
        print("--- page {}, chunk {} ---".format(number, chunk_number))
        print(chunk)


def _cmd_paginate(args: argparse.Namespace) -> None:
    content = _read_text(args.input_file)
    if args.page is not None:
        try:
            page = get_page(content, args.page, args.words_per_page)
        except ValueError as e:
            _fail(str(e))
        _status("Page {} of {}".format(page.page_number, page.total_pages))
        if args.tts_chunks is None:
            print(page.content)
        else:
            _print_page(page.page_number, page.content, args.tts_chunks)
        return

    pages = paginate(content, args.words_per_page)
    _status("{} page(s) at {} words per page".format(len(pages), args.words_per_page))
    for number, page_text in enumerate(pages, start=1):
        _print_page(number, page_text, args.tts_chunks)


def _cmd_simulate(args: argparse.Namespace) -> None:
    text = _read_text(args.input_file)
    translations = _parse_translations(args.translation)
    formatter = FORMATTERS[args.format]()

    tickers: List[ManualTicker] = []

    def _ticker_factory(interval_s, callback):
        ticker = ManualTicker(interval_s, callback)
        tickers.append(ticker)
        return ticker

    with SyncSession(
        text,
        primary_language=args.language,
        reading_mode=args.mode,
        languages=list(translations) or None,
        ticker_factory=_ticker_factory,
    ) as session:
        if translations:
            session.set_translations(translations)
        if args.narrate:
            session.select_narration_language(args.narrate)

        sentences = session.active_sentences
        _status("{} sentence(s), narration language: {} ({})".format(
            len(sentences), session.narration_language, language_name(session.narration_language),
        ))

        if args.test_mode:
            read_model = session.start_test_mode()
            _emit(formatter, read_model, "# test tick 0")
            for tick in range(1, args.steps + 1):
                tickers[-1].fire()
                _emit(formatter, session.read_model, "# test tick {}".format(tick))
            session.stop_test_mode()
            return

        duration = args.duration
        if duration is None:
            duration = estimated_duration(" ".join(sentences), session.narration_language)
        _status("Simulating {:.1f}s of narration in {} step(s)".format(duration, args.steps))

        session.play_whole(duration)
        for step in range(args.steps + 1):
            fraction = step / args.steps
            read_model = session.update_progress(fraction, duration)
            _emit(formatter, read_model, "# t={:.1f}s ({:.0f}%)".format(fraction * duration, fraction * 100))
        session.stop(reason="completed")


# ---------------------------------------------------------------------------
# Parser and entry point
# ---------------------------------------------------------------------------


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable — tests can inspect the parser without running anything.
    """
    parser = argparse.ArgumentParser(
        prog="readalong_sync",
        description="Split page text into sentences and simulate read-along "
                    "highlighting driven by narration playback.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log estimator and session details to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    seg = subparsers.add_parser("segment", help="Print one sentence per line.")
    seg.add_argument("input_file", help="UTF-8 text file to segment.")
    seg.add_argument("--json", action="store_true", help="Print a JSON list instead.")
    seg.set_defaults(handler=_cmd_segment)

    pag = subparsers.add_parser("paginate", help="Split a book into pages.")
    pag.add_argument("input_file", help="UTF-8 book text.")
    pag.add_argument(
        "--words-per-page",
        type=_positive_int,
        default=DEFAULT_WORDS_PER_PAGE,
        help="Target words per page (default: %(default)s).",
    )
    pag.add_argument("--page", type=int, default=None, help="Print only this 1-based page.")
    pag.add_argument(
        "--tts-chunks",
        type=_positive_int,
        nargs="?",
        const=TTS_MAX_CHUNK_CHARS,
        default=None,
        metavar="MAX_CHARS",
        help="Split each page into narration requests of at most MAX_CHARS "
             "characters (default when given: %(const)s).",
    )
    pag.set_defaults(handler=_cmd_paginate)

    sim = subparsers.add_parser("simulate", help="Simulate highlighting during playback.")
    sim.add_argument("input_file", help="UTF-8 page text.")
    sim.add_argument(
        "--language",
        default=DEFAULT_LANGUAGE,
        help="Primary narration language ISO 639-1 code (default: %(default)s).",
    )
    sim.add_argument(
        "--mode",
        choices=[m.value for m in ReadingMode],
        default=ReadingMode.PARAGRAPH.value,
        help="Reading mode (default: %(default)s).",
    )
    sim.add_argument(
        "--translation",
        action="append",
        default=None,
        metavar="LANG=FILE",
        help="Translated page text for sentence mode. Can be specified multiple times.",
    )
    sim.add_argument("--narrate", default=None, help="Narration language to select in sentence mode.")
    sim.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Narration length in seconds (default: estimated from the speaking rate).",
    )
    sim.add_argument(
        "--steps",
        type=_positive_int,
        default=10,
        help="Number of progress (or test-mode) ticks (default: %(default)s).",
    )
    sim.add_argument(
        "--format",
        choices=sorted(FORMATTERS),
        default="plain_text",
        help="Output format (default: %(default)s).",
    )
    sim.add_argument(
        "--test-mode",
        action="store_true",
        help="Drive the highlight with synthetic test-mode ticks instead of playback.",
    )
    sim.set_defaults(handler=_cmd_simulate)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    logger.debug("Running %s on %s", args.command, args.input_file)
    try:
        args.handler(args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)


if __name__ == "__main__":
    main()

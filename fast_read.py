#!/usr/bin/env -S uv run
# /// script
# requires-python = ">=3.11"
# dependencies = []
# ///
"""Speed-read text in the terminal, one focus-anchored word at a time."""

from __future__ import annotations

import argparse
import io
import logging
import os
import stat
import sys
from typing import BinaryIO, NoReturn, Sequence

from domain.speed_read import (
    DEFAULT_COLOR_NAME,
    DEFAULT_ENCODING,
    DEFAULT_WORDS_PER_MINUTE,
    INPUT_FILE_CODE,
    INPUT_OPEN_CODE,
    INVALID_ARGUMENT_CODE,
    ReadPipelineError,
    ReadValidationError,
    ReaderConfig,
    format_color_help,
    resolve_highlight_color,
)
from service.layout import DEFAULT_FOCUS_COLUMN
from service.pacing import ReadSummary, run_reader
from service.tokenizer import BUFSIZE, iter_chunk_tokens

LOGGER = logging.getLogger("fast_read")
INTERRUPTED_EXIT_CODE = 130
DESCRIPTION = (
    "A speed reading tool that displays words one at a time with the\n"
    "center character highlighted to help focus your eyes."
)
EPILOG_FOOTER = (
    "If no file is specified, reads from stdin.\n"
    "Color names are case-insensitive."
)


class ReaderArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors as validation errors."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        raise ReadValidationError(INVALID_ARGUMENT_CODE, message)


def configure_logging() -> None:
    """Configure logging for CLI output."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")


def build_parser() -> ReaderArgumentParser:
    parser = ReaderArgumentParser(
        prog="fast_read.py",
        description=DESCRIPTION,
        epilog=f"{format_color_help()}\n\n{EPILOG_FOOTER}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=True,
    )
    parser.add_argument("file", nargs="?", default=None)
    parser.add_argument(
        "-c",
        "--color",
        default=DEFAULT_COLOR_NAME,
        metavar="NAME",
        help="highlight color for the center character",
    )
    parser.add_argument(
        "-w",
        "--wpm",
        type=int,
        default=DEFAULT_WORDS_PER_MINUTE,
        help=f"words per minute (default {DEFAULT_WORDS_PER_MINUTE})",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def parse_args(argv: Sequence[str]) -> tuple[ReaderConfig, bool]:
    """Parse CLI arguments into a ReaderConfig and the verbosity flag."""
    parsed = build_parser().parse_args(argv)
    highlight = resolve_highlight_color(parsed.color)
    config = ReaderConfig(
        input_file=parsed.file,
        highlight=highlight,
        words_per_minute=parsed.wpm,
        focus_column=DEFAULT_FOCUS_COLUMN,
        chunk_size=BUFSIZE,
        encoding=DEFAULT_ENCODING,
    )
    return config, parsed.verbose


def validate_input_file(file_path: str) -> None:
    """Ensure the input path names an existing regular file."""
    try:
        mode = os.stat(file_path).st_mode
    except OSError as exc:
        raise ReadValidationError(
            INPUT_FILE_CODE, f"input file not found: {file_path}"
        ) from exc
    if not stat.S_ISREG(mode):
        raise ReadValidationError(
            INPUT_FILE_CODE, f"input file is not a regular file: {file_path}"
        )


def open_input_file(file_path: str) -> BinaryIO:
    """Open the input file for binary reading."""
    try:
        return open(file_path, "rb")
    except OSError as exc:
        raise ReadPipelineError(
            INPUT_OPEN_CODE, f"error opening input file: {file_path}: {exc.strerror}"
        ) from exc


def preserve_undecodable_output() -> None:
    """Let bytes that failed to decode pass through to stdout unchanged."""
    if isinstance(sys.stdout, io.TextIOWrapper):
        sys.stdout.reconfigure(errors="surrogateescape")


def read_stream(stream: BinaryIO, config: ReaderConfig) -> ReadSummary:
    chunks = iter_chunk_tokens(stream, config.chunk_size, config.encoding)
    return run_reader(chunks, config)


def main() -> int:
    """CLI entrypoint."""
    configure_logging()

    try:
        config, verbose = parse_args(sys.argv[1:])
        if verbose:
            logging.getLogger().setLevel(logging.DEBUG)
        preserve_undecodable_output()
        if config.input_file is None:
            summary = read_stream(sys.stdin.buffer, config)
        else:
            validate_input_file(config.input_file)
            with open_input_file(config.input_file) as stream:
                summary = read_stream(stream, config)
        LOGGER.debug(
            "fast_read.done: %d tokens, %d blank lines",
            summary.tokens_rendered,
            summary.blank_lines,
        )
        return 0
    except KeyboardInterrupt:
        sys.stdout.write("\n")
        sys.stdout.flush()
        return INTERRUPTED_EXIT_CODE
    except ReadValidationError as exc:
        LOGGER.error("%s: %s", exc.code, str(exc).strip())
        return 1
    except ReadPipelineError as exc:
        LOGGER.error("%s: %s", exc.code, str(exc).strip())
        return 1
    except Exception as exc:
        LOGGER.error("fast_read.unhandled_error: %s", str(exc).strip())
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

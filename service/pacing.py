"""Pacing and render loop for fast_read."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import sys
import time
from typing import Callable, Iterable, TextIO

from domain.speed_read import (
    INVALID_CONFIG_CODE,
    ReadValidationError,
    ReaderConfig,
    ends_with_punctuation,
)
from service.layout import render_line
from service.tokenizer import ChunkTokens

PUNCTUATION_MULTIPLIER = 2
BLANK_LINE_MULTIPLIER = 4
CLEAR_LINE = "\x1b[0K"
CURSOR_UP = "\x1b[1A"
LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadSummary:
    """Counts reported after a stream has been displayed."""

    tokens_rendered: int
    blank_lines: int


def compute_base_interval(words_per_minute: int) -> float:
    """Return the seconds each plain token stays on screen."""
    if words_per_minute <= 0:
        raise ReadValidationError(
            INVALID_CONFIG_CODE, "words_per_minute must be positive"
        )
    return 60.0 / words_per_minute


def compute_token_delay(token: str, base_interval: float) -> float:
    """Return the display time for a token, longer after punctuation."""
    if ends_with_punctuation(token):
        return base_interval * PUNCTUATION_MULTIPLIER
    return base_interval


def write_token(output: TextIO, token: str, config: ReaderConfig) -> None:
    """Draw a token, then step the cursor back onto the same row."""
    output.write(
        render_line(token, config.highlight.escape_code, config.focus_column)
    )
    output.write(CLEAR_LINE)
    output.write(CURSOR_UP + "\n")
    output.flush()


def run_reader(
    chunks: Iterable[ChunkTokens],
    config: ReaderConfig,
    output: TextIO | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ReadSummary:
    """Display every token from the chunk stream at the configured pace."""
    if output is None:
        output = sys.stdout
    base_interval = compute_base_interval(config.words_per_minute)

    tokens_rendered = 0
    blank_lines = 0
    for chunk in chunks:
        if chunk.blank:
            blank_lines += 1
            sleep(base_interval * BLANK_LINE_MULTIPLIER)
            continue
        for token in chunk.tokens:
            write_token(output, token, config)
            tokens_rendered += 1
            sleep(compute_token_delay(token, base_interval))

    output.write("\n")
    output.flush()
    LOGGER.debug(
        "rendered %d tokens, paused on %d blank lines", tokens_rendered, blank_lines
    )
    return ReadSummary(tokens_rendered=tokens_rendered, blank_lines=blank_lines)

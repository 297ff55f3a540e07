"""Domain types and parsing for fast_read."""

from __future__ import annotations

import codecs
from dataclasses import dataclass
import string
from typing import Tuple

INVALID_COLOR_CODE = "fast_read.input.invalid_color"
INVALID_ARGUMENT_CODE = "fast_read.input.invalid_argument"
INVALID_CONFIG_CODE = "fast_read.input.invalid_config"
INPUT_FILE_CODE = "fast_read.input.file_error"
INPUT_OPEN_CODE = "fast_read.input.open_error"
STREAM_READ_CODE = "fast_read.stream.read_error"

DELIMITERS = b';\n "'
PUNCTUATION = frozenset(string.punctuation)
DEFAULT_WORDS_PER_MINUTE = 400
DEFAULT_COLOR_NAME = "red"
DEFAULT_ENCODING = "utf-8"


class ReadValidationError(ValueError):
    """Validation error with a stable error code."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class ReadPipelineError(RuntimeError):
    """Runtime error with a stable error code."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class HighlightColor:
    """Named terminal color used for the focus character."""

    name: str
    escape_code: str
    description: str


HIGHLIGHT_COLORS: Tuple[HighlightColor, ...] = (
    HighlightColor("red", "\x1b[31;1m", "Bright red (default)"),
    HighlightColor("green", "\x1b[32;1m", "Bright green"),
    HighlightColor("yellow", "\x1b[33;1m", "Bright yellow"),
    HighlightColor("blue", "\x1b[34;1m", "Bright blue"),
    HighlightColor("magenta", "\x1b[35;1m", "Bright magenta"),
    HighlightColor("cyan", "\x1b[36;1m", "Bright cyan"),
    HighlightColor("white", "\x1b[37;1m", "Bright white"),
    HighlightColor("orange", "\x1b[38;5;208m", "Orange (256-color mode)"),
)


def list_color_names() -> Tuple[str, ...]:
    """Return the selectable color names in display order."""
    return tuple(color.name for color in HIGHLIGHT_COLORS)


def resolve_highlight_color(name: str) -> HighlightColor:
    """Look up a highlight color by case-insensitive name."""
    normalized = name.lower()
    for color in HIGHLIGHT_COLORS:
        if color.name == normalized:
            return color
    raise ReadValidationError(
        INVALID_COLOR_CODE,
        f"unknown color: {name!r}; available colors: "
        + ", ".join(list_color_names()),
    )


def format_color_help() -> str:
    """Render the color table shown in help output."""
    width = max(len(name) for name in list_color_names())
    lines = ["Available colors:"]
    for color in HIGHLIGHT_COLORS:
        lines.append(f"  {color.name.ljust(width)}  {color.description}")
    return "\n".join(lines)


def ends_with_punctuation(token: str) -> bool:
    """Return True when the token's last character is ASCII punctuation."""
    return bool(token) and token[-1] in PUNCTUATION


@dataclass(frozen=True)
class ReaderConfig:
    """Validated configuration for fast_read."""

    input_file: str | None
    highlight: HighlightColor
    words_per_minute: int
    focus_column: int
    chunk_size: int
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self) -> None:
        if self.input_file is not None and not self.input_file:
            raise ReadValidationError(
                INVALID_CONFIG_CODE, "input_file must be non-empty"
            )
        if not isinstance(self.highlight, HighlightColor):
            raise ReadValidationError(INVALID_COLOR_CODE, "highlight is invalid")
        if self.words_per_minute <= 0:
            raise ReadValidationError(
                INVALID_CONFIG_CODE, "words_per_minute must be positive"
            )
        if self.focus_column < 0:
            raise ReadValidationError(
                INVALID_CONFIG_CODE, "focus_column must be non-negative"
            )
        if self.chunk_size <= 0:
            raise ReadValidationError(
                INVALID_CONFIG_CODE, "chunk_size must be positive"
            )
        if not self.encoding.strip():
            raise ReadValidationError(
                INVALID_CONFIG_CODE, "encoding must be non-empty"
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError as exc:
            raise ReadValidationError(
                INVALID_CONFIG_CODE, f"unknown encoding: {self.encoding!r}"
            ) from exc

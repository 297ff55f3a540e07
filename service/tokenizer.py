"""Streaming tokenizer that stitches tokens split across read boundaries."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import BinaryIO, Iterator, Tuple

from domain.speed_read import (
    DEFAULT_ENCODING,
    DELIMITERS,
    STREAM_READ_CODE,
    ReadPipelineError,
)

BUFSIZE = 1024
DELIMITER_PATTERN = re.compile(b"[" + re.escape(DELIMITERS) + b"]")
LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChunkTokens:
    """Tokens completed by one read; blank when the read held only delimiters."""

    tokens: Tuple[str, ...]
    blank: bool


def spans_boundary(chunk: bytes) -> bool:
    """Return True when the chunk ends in the middle of a token."""
    return bool(chunk) and chunk[-1] not in DELIMITERS


def split_chunk(
    chunk: bytes, pending: bytes | None
) -> Tuple[Tuple[bytes, ...], bytes | None]:
    """Split one chunk into complete tokens and the fragment to carry forward.

    The pending fragment is joined to the first piece of the chunk, which is
    empty when the chunk opens with a delimiter, so the fragment then stands
    as a token of its own.
    """
    pieces = DELIMITER_PATTERN.split(chunk)
    if pending is not None:
        pieces[0] = pending + pieces[0]

    carry = None
    if spans_boundary(chunk):
        carry = pieces.pop()

    tokens = tuple(piece for piece in pieces if piece)
    return tokens, carry


def read_chunk(stream: BinaryIO, chunk_size: int) -> bytes:
    """Read up to chunk_size bytes, stopping after a newline."""
    try:
        return stream.readline(chunk_size)
    except OSError as exc:
        raise ReadPipelineError(
            STREAM_READ_CODE, f"failed to read input stream: {exc}"
        ) from exc


def iter_chunk_tokens(
    stream: BinaryIO,
    chunk_size: int = BUFSIZE,
    encoding: str = DEFAULT_ENCODING,
) -> Iterator[ChunkTokens]:
    """Yield the tokens completed by each read of the stream.

    A token cut off by the end of a read is held back and finished by the
    next read. A fragment still held at end of stream was never terminated
    by a delimiter and is dropped.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    pending: bytes | None = None
    while True:
        chunk = read_chunk(stream, chunk_size)
        if not chunk:
            break

        raw_tokens, pending = split_chunk(chunk, pending)
        if pending is not None:
            LOGGER.debug(
                "carrying %d byte fragment across read boundary", len(pending)
            )

        yield ChunkTokens(
            tokens=tuple(
                token.decode(encoding, errors="surrogateescape")
                for token in raw_tokens
            ),
            blank=not raw_tokens and pending is None,
        )

    if pending is not None:
        LOGGER.debug(
            "dropping %d byte trailing fragment without terminating delimiter",
            len(pending),
        )


def iter_tokens(
    stream: BinaryIO,
    chunk_size: int = BUFSIZE,
    encoding: str = DEFAULT_ENCODING,
) -> Iterator[str]:
    """Yield every complete token in the stream."""
    for chunk_tokens in iter_chunk_tokens(stream, chunk_size, encoding):
        yield from chunk_tokens.tokens

"""Unit tests for the streaming tokenizer."""

from __future__ import annotations

import io
import logging

import pytest

from domain.speed_read import STREAM_READ_CODE, ReadPipelineError
from service.tokenizer import (
    ChunkTokens,
    iter_chunk_tokens,
    iter_tokens,
    spans_boundary,
    split_chunk,
)

SAMPLE_TEXT = (
    b'She said "read faster"; then stopped.\n'
    b"\n"
    b"Long   gaps  and\ttabs stay inside tokens;;end\n"
    b"trailing"
)


class FailingStream(io.BytesIO):
    """Stream that fails after the first read."""

    def __init__(self, initial: bytes) -> None:
        super().__init__(initial)
        self.reads = 0

    def readline(self, size: int | None = -1) -> bytes:
        self.reads += 1
        if self.reads > 1:
            raise OSError("device went away")
        return super().readline(size)


def tokenize(data: bytes, chunk_size: int = 1024) -> list[str]:
    """Tokenize bytes through an in-memory stream."""
    return list(iter_tokens(io.BytesIO(data), chunk_size))


def test_unterminated_trailing_token_is_dropped() -> None:
    """Drop the last token when no delimiter follows it."""
    assert tokenize(b"hello world") == ["hello"]


def test_semicolon_and_newline_delimit_tokens() -> None:
    """Split on semicolons and newlines."""
    assert tokenize(b"a;b\n") == ["a", "b"]


def test_quotes_and_repeated_delimiters_yield_no_empty_tokens() -> None:
    """Skip empty pieces between consecutive delimiters."""
    assert tokenize(b'"quoted"  ;; words\n') == ["quoted", "words"]


def test_bare_newline_is_blank_chunk() -> None:
    """Report a delimiter-only read as blank with no tokens."""
    chunks = list(iter_chunk_tokens(io.BytesIO(b"\n")))

    assert chunks == [ChunkTokens(tokens=(), blank=True)]


def test_token_split_across_reads_is_reassembled() -> None:
    """Join a fragment cut by the read size onto the next read."""
    chunks = list(iter_chunk_tokens(io.BytesIO(b"hello world\n"), chunk_size=3))

    assert [chunk.tokens for chunk in chunks] == [
        (),
        ("hello",),
        (),
        ("world",),
    ]
    assert not any(chunk.blank for chunk in chunks)


def test_fragment_before_leading_delimiter_stands_alone() -> None:
    """Emit a carried fragment by itself when the next read opens on a delimiter."""
    assert tokenize(b"abc def\n", chunk_size=3) == ["abc", "def"]


@pytest.mark.parametrize("chunk_size", range(1, 48))
def test_tokens_do_not_depend_on_read_size(chunk_size: int) -> None:
    """Produce the same tokens for every read size."""
    expected = tokenize(SAMPLE_TEXT)

    assert expected == [
        "She",
        "said",
        "read",
        "faster",
        "then",
        "stopped.",
        "Long",
        "gaps",
        "and\ttabs",
        "stay",
        "inside",
        "tokens",
        "end",
    ]
    assert tokenize(SAMPLE_TEXT, chunk_size) == expected


def test_multibyte_characters_survive_read_boundaries() -> None:
    """Decode tokens after joining so split UTF-8 sequences stay intact."""
    data = "naïve café\n".encode("utf-8")

    assert tokenize(data, chunk_size=3) == ["naïve", "café"]


def test_split_chunk_carries_fragment() -> None:
    """Hold back the last piece when the chunk ends mid-token."""
    tokens, carry = split_chunk(b"one two thr", None)

    assert tokens == (b"one", b"two")
    assert carry == b"thr"

    tokens, carry = split_chunk(b"ee;\n", carry)

    assert tokens == (b"three",)
    assert carry is None


def test_spans_boundary() -> None:
    """Detect reads that stop inside a token."""
    assert spans_boundary(b"abc")
    assert not spans_boundary(b"abc ")
    assert not spans_boundary(b'abc"')
    assert not spans_boundary(b"")


def test_read_error_raises_pipeline_error() -> None:
    """Abort with a coded error when the stream fails mid-run."""
    stream = FailingStream(b"first line\nsecond line\n")

    with pytest.raises(ReadPipelineError) as excinfo:
        list(iter_tokens(stream))

    assert excinfo.value.code == STREAM_READ_CODE


def test_dropped_fragment_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    """Log the trailing fragment that is discarded at end of stream."""
    with caplog.at_level(logging.DEBUG, logger="service.tokenizer"):
        assert tokenize(b"kept dropped") == ["kept"]

    assert "dropping 7 byte trailing fragment" in caplog.text


def test_rejects_non_positive_chunk_size() -> None:
    """Refuse a read size that can never make progress."""
    with pytest.raises(ValueError):
        tokenize(b"a\n", chunk_size=0)


def test_undecodable_bytes_round_trip() -> None:
    """Keep bytes that are not valid in the encoding recoverable unchanged."""
    tokens = tokenize(b"caf\xe9 x\n")

    assert [token.encode("utf-8", errors="surrogateescape") for token in tokens] == [
        b"caf\xe9",
        b"x",
    ]

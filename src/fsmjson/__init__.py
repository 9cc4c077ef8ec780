"""
Single-pass, table-driven JSON decoder for byte streams.

A finite-state machine with an explicit control stack lexes, parses and
builds values in one interleaved pass over the input, one byte at a time,
without buffering the document or building a token stream. Nesting depth is
limited only by memory.

Entry points:

- ``decode(source)`` for bytes, binary files and iterables of byte chunks
- ``loads(s)`` for ``str`` or bytes-like documents
- ``load(fp)`` for binary or text file objects
- ``StreamDecoder`` for push-style incremental feeding
"""

from __future__ import annotations

import io
from collections.abc import Iterable
from collections.abc import Iterator
from typing import IO
from typing import Any
from typing import TypeAlias

from ._config import DecodeConfig
from ._config import HotPathStats
from ._config import ProfileContext
from ._config import clear_hot_path_stats
from ._config import get_hot_path_stats
from ._config import resolve_config
from ._engine import StreamDecoder
from ._tables import check_tables
from ._utf8_mapper import UTF8PositionMapper
from ._values import DecoderDefect
from ._values import ErrorKind
from ._values import InvalidEscapeError
from ._values import JSONDecodeError
from ._values import JsonValue
from ._values import JsonValueOrTransformed
from ._values import JSONSyntaxError
from ._values import MultipleDocumentsError
from ._values import NoDocumentError
from ._values import SourceReadError
from ._values import TruncatedError

__version__ = "0.1.0"

ByteSource: TypeAlias = (
    bytes | bytearray | memoryview | IO[bytes] | Iterable[bytes | bytearray]
)

_BYTES_LIKE = (bytes, bytearray, memoryview)


def _iter_chunks(source: Any, chunk_size: int) -> Iterator[Any]:
    """Yields the source's bytes in order as bytes-like chunks."""
    if isinstance(source, memoryview):
        yield source.cast("B") if source.format != "B" else source
    elif isinstance(source, _BYTES_LIKE):
        yield source
    elif isinstance(source, str):
        raise TypeError(
            "the JSON source must be bytes, not str; use loads() for text"
        )
    elif hasattr(source, "read"):
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                return
            if isinstance(chunk, str):
                raise TypeError("the JSON source must be opened in binary mode")
            yield chunk
    elif isinstance(source, Iterable):
        for chunk in source:
            if not isinstance(chunk, _BYTES_LIKE):
                raise TypeError(
                    "byte source chunks must be bytes-like, "
                    f"not {type(chunk).__name__}"
                )
            yield chunk
    else:
        raise TypeError(
            "the JSON source must be bytes-like, a binary file or an "
            f"iterable of bytes, not {type(source).__name__}"
        )


def decode(
    source: ByteSource, *, config: DecodeConfig | None = None, **kwargs: Any
) -> JsonValueOrTransformed:
    """
    Decodes exactly one JSON document from a byte source.

    The source is read once, front to back. Errors raised while reading it
    surface as ``SourceReadError`` with the original exception chained.

    Args:
        source: bytes-like object, binary file object, or iterable of chunks
        config: a ``DecodeConfig``; alternatively pass its fields as keywords

    Raises:
        JSONDecodeError: one of its subclasses, naming the failure kind
    """
    config = resolve_config(config, kwargs)
    decoder = StreamDecoder(config)
    with ProfileContext("decode") as profile:
        chunks = _iter_chunks(source, config.chunk_size)
        while True:
            try:
                chunk = next(chunks, None)
            except OSError as exc:
                raise SourceReadError(
                    f"Failed to read from source: {exc}",
                    decoder.position,
                ) from exc
            if chunk is None:
                break
            decoder.feed(chunk)
            profile.add_bytes(len(chunk))
        return decoder.close()


def loads(
    s: str | bytes | bytearray | memoryview,
    *,
    config: DecodeConfig | None = None,
    **kwargs: Any,
) -> JsonValueOrTransformed:
    """
    Decodes a complete JSON document held in memory.

    Text is encoded to UTF-8 before decoding; error positions are then
    reported as character offsets into ``s``.
    """
    if isinstance(s, _BYTES_LIKE):
        return decode(s, config=config, **kwargs)
    if not isinstance(s, str):
        raise TypeError(
            "the JSON object must be str, bytes or bytearray, "
            f"not {type(s).__name__}"
        )

    data = s.encode("utf-8", "surrogateescape")
    try:
        return decode(data, config=config, **kwargs)
    except JSONDecodeError as exc:
        if len(data) != len(s):
            mapper = UTF8PositionMapper(s)
            char_pos = mapper.byte_to_char(exc.pos)
            exc.relocate(char_pos, mapper.column(char_pos))
        raise


def load(
    fp: IO[bytes] | IO[str],
    *,
    config: DecodeConfig | None = None,
    **kwargs: Any,
) -> JsonValueOrTransformed:
    """
    Decodes a JSON document from a file object.

    Binary files are streamed in ``chunk_size`` reads. Text files are read
    whole and handed to ``loads``.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")
    if isinstance(fp, io.TextIOBase):
        return loads(fp.read(), config=config, **kwargs)
    return decode(fp, config=config, **kwargs)


__all__ = [
    "DecodeConfig",
    "DecoderDefect",
    "ErrorKind",
    "HotPathStats",
    "InvalidEscapeError",
    "JSONDecodeError",
    "JSONSyntaxError",
    "JsonValue",
    "MultipleDocumentsError",
    "NoDocumentError",
    "SourceReadError",
    "StreamDecoder",
    "TruncatedError",
    "check_tables",
    "clear_hot_path_stats",
    "decode",
    "get_hot_path_stats",
    "load",
    "loads",
]

"""
JSON decoding performance benchmarks comparing fsmjson against other libraries.

Compares decoding speed across document shapes and sizes:
- Standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)
- fsmjson (this package), from memory and from a chunked stream
"""

import io
import json
from collections.abc import Callable
from typing import Any

import orjson
import pytest
import ujson  # type: ignore[import-untyped]

import fsmjson
from benchmarks.data_generators import DOCUMENT_KINDS
from benchmarks.data_generators import generate_document

PARSERS = [
    ("stdlib_json", json.loads),
    ("orjson", orjson.loads),
    ("ujson", ujson.loads),
    ("fsmjson", fsmjson.loads),
]


class TestDecodingBenchmarks:
    """Benchmarks for JSON decoding performance across libraries."""

    @pytest.mark.parametrize("kind", DOCUMENT_KINDS)
    @pytest.mark.parametrize("parser,parse_func", PARSERS)
    def test_decode_from_memory(
        self,
        benchmark: Any,
        kind: str,
        parser: str,
        parse_func: Callable[[bytes], Any],
    ) -> None:
        """Benchmarks decoding a document held in memory as bytes."""
        benchmark.group = kind
        document = generate_document(kind)

        result = benchmark(parse_func, document)

        assert result == json.loads(document)

    @pytest.mark.benchmark(group="streaming")
    @pytest.mark.parametrize("chunk_size", [64, 4096, 64 * 1024])
    def test_decode_from_stream(self, benchmark: Any, chunk_size: int) -> None:
        """Benchmarks fsmjson reading a binary file in fixed-size chunks."""
        document = generate_document("record_batch")

        def run() -> Any:
            return fsmjson.decode(io.BytesIO(document), chunk_size=chunk_size)

        result = benchmark(run)
        assert len(result["records"]) == 400

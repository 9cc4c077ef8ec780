"""
Benchmark suite for fsmjson decoding performance.

Compares the table-driven decoder against:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures decoding speed, streaming cost per chunk size and peak memory.
"""

"""
Test document generators for JSON decoding benchmarks.

Every generator is seeded so repeated runs decode identical bytes:
- Record-shaped objects (small and batched)
- Arrays mixing every scalar type
- Deep nesting that exercises the control stack
- String-heavy content with short and ``\\u`` escapes
- Number-heavy content with fractions and exponents
"""

import json
import random
import string
from collections.abc import Callable
from typing import Any

SEED = 20240115
_ESCAPE_PROBABILITY = 0.3
_SHORT_ESCAPES = ['\\"', "\\\\", "\\/", "\\b", "\\f", "\\n", "\\r", "\\t"]

DOCUMENT_KINDS = (
    "small_object",
    "record_batch",
    "mixed_array",
    "deep_nesting",
    "string_heavy",
    "number_heavy",
)


def generate_document(kind: str) -> bytes:
    """Builds the UTF-8 encoded benchmark document of the given kind."""
    generators: dict[str, Callable[[random.Random], str]] = {
        "small_object": _small_object,
        "record_batch": _record_batch,
        "mixed_array": _mixed_array,
        "deep_nesting": _deep_nesting,
        "string_heavy": _string_heavy,
        "number_heavy": _number_heavy,
    }

    if kind not in generators:
        raise ValueError(f"Unknown document kind: {kind}")

    return generators[kind](random.Random(SEED)).encode("utf-8")


def _small_object(rng: random.Random) -> str:
    """A single record well under 1KB."""
    return json.dumps(_record(rng, 0))


def _record_batch(rng: random.Random) -> str:
    """A page of records as an API would return it, around 100KB."""
    return json.dumps(
        {
            "page": 1,
            "total": 400,
            "records": [_record(rng, i) for i in range(400)],
        }
    )


def _record(rng: random.Random, index: int) -> dict[str, Any]:
    return {
        "id": index,
        "name": f"{_word(rng, 6).title()} {_word(rng, 9).title()}",
        "email": f"{_word(rng, 8)}@example.com",
        "active": rng.random() < 0.5,
        "balance": round(rng.uniform(-500.0, 5000.0), 2),
        "tags": [_word(rng, 5) for _ in range(rng.randint(0, 4))],
        "manager": None,
        "address": {
            "city": _word(rng, 10).title(),
            "zip": f"{rng.randint(10000, 99999)}",
        },
    }


def _mixed_array(rng: random.Random) -> str:
    """A flat array drawing from every JSON value type."""
    makers: list[Callable[[], Any]] = [
        lambda: rng.randint(-(10**6), 10**6),
        lambda: rng.uniform(-1e6, 1e6),
        lambda: _word(rng, rng.randint(1, 24)),
        lambda: rng.random() < 0.5,
        lambda: None,
        lambda: [],
        lambda: {},
    ]
    return json.dumps([rng.choice(makers)() for _ in range(2000)])


def _deep_nesting(rng: random.Random) -> str:
    """Alternating arrays and objects nested 500 levels deep."""
    depth = 500
    opening = []
    closing = []
    for level in range(depth):
        if level % 2:
            opening.append(f'{{"k{level % 7}": ')
            closing.append("}")
        else:
            opening.append(f"[{rng.randint(0, 9)}, ")
            closing.append("]")
    return "".join(opening) + "null" + "".join(reversed(closing))


def _string_heavy(rng: random.Random) -> str:
    """Strings dense with short escapes and non-ASCII ``\\u`` escapes."""

    def escaped(length: int) -> str:
        parts = []
        for _ in range(length):
            roll = rng.random()
            if roll < _ESCAPE_PROBABILITY / 2:
                parts.append(rng.choice(_SHORT_ESCAPES))
            elif roll < _ESCAPE_PROBABILITY:
                parts.append(f"\\u{rng.randint(0x00A0, 0xD7FF):04x}")
            else:
                parts.append(rng.choice(string.ascii_letters + " "))
        return '"' + "".join(parts) + '"'

    items = ", ".join(
        f'"s{i}": {escaped(rng.randint(20, 120))}' for i in range(300)
    )
    return "{" + items + "}"


def _number_heavy(rng: random.Random) -> str:
    """Integers, decimals and exponent forms in equal measure."""
    numbers = []
    for _ in range(3000):
        form = rng.randrange(3)
        if form == 0:
            numbers.append(str(rng.randint(-(10**12), 10**12)))
        elif form == 1:
            numbers.append(f"{rng.uniform(-1e3, 1e3):.6f}")
        else:
            numbers.append(f"{rng.uniform(1, 10):.4f}E{rng.randint(-30, 30)}")
    return "[" + ",".join(numbers) + "]"


def _word(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(string.ascii_lowercase, k=length))

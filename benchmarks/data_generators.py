"""
Test data generators for parsing and profiling benchmarks.

Documents are produced with the standard library encoder so every input is
valid JSON; a fixed seed keeps runs comparable.
"""

import json
import random
import string
from typing import Any

_SEED = 20240115
_ESCAPED_CHARS = '"\\/\b\f\n\r\t'
_ESCAPE_PROBABILITY = 0.3
_OPTIONAL_FIELD_PROBABILITY = 0.5

DATA_TYPES = [
    "small_object",
    "record_array",
    "mixed_array",
    "nested_structure",
    "string_heavy",
]


def generate_test_data(data_type: str, seed: int = _SEED) -> str:
    """Generates one JSON document of the given kind."""
    generators = {
        "small_object": _small_object,
        "record_array": _record_array,
        "mixed_array": _mixed_array,
        "nested_structure": _nested_structure,
        "string_heavy": _string_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    rng = random.Random(seed)
    return json.dumps(generators[data_type](rng))


def generate_record_stream(count: int, seed: int = _SEED) -> list[str]:
    """
    Generates separate record documents for profiling.

    Every record has `id` and `kind`; the other fields appear at random, so
    the stream exercises the optional-key detection.
    """
    rng = random.Random(seed)
    return [json.dumps(_record(rng, i)) for i in range(count)]


def _record(rng: random.Random, index: int) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": index,
        "kind": rng.choice(["click", "view", "purchase"]),
    }
    if rng.random() < _OPTIONAL_FIELD_PROBABILITY:
        record["amount"] = round(rng.uniform(1.0, 500.0), 2)
    if rng.random() < _OPTIONAL_FIELD_PROBABILITY:
        record["tags"] = [_word(rng, 5) for _ in range(rng.randint(0, 4))]
    if rng.random() < _OPTIONAL_FIELD_PROBABILITY:
        record["client"] = {
            "agent": f"Mozilla/5.0 ({_word(rng, 12)})",
            "mobile": rng.choice([True, False]),
            "ref": rng.choice([None, _word(rng, 8)]),
        }
    return record


def _small_object(rng: random.Random) -> dict[str, Any]:
    return {
        "id": rng.randint(1, 99999),
        "name": _word(rng, 12),
        "email": f"{_word(rng, 6)}@example.com",
        "active": rng.choice([True, False]),
        "balance": round(rng.uniform(0.0, 5000.0), 2),
        "metadata": {"created": "2024-01-15T10:30:00Z", "source": "api"},
    }


def _record_array(rng: random.Random) -> list[dict[str, Any]]:
    return [_record(rng, i) for i in range(100)]


def _mixed_array(rng: random.Random) -> list[Any]:
    makers = [
        lambda: rng.randint(-1000, 1000),
        lambda: round(rng.uniform(-100.0, 100.0), 3),
        lambda: _word(rng, rng.randint(5, 30)),
        lambda: rng.choice([True, False]),
        lambda: None,
        lambda: [rng.randint(0, 9) for _ in range(3)],
        lambda: {"value": _word(rng, 10), "score": rng.random()},
    ]
    return [rng.choice(makers)() for _ in range(200)]


def _nested_structure(rng: random.Random) -> dict[str, Any]:
    def level(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _word(rng, 10)}
        return {
            "level": depth,
            "items": [level(depth - 1) for _ in range(2)],
            "nested": level(depth - 1),
        }

    return level(7)


def _string_heavy(rng: random.Random) -> dict[str, Any]:
    def escaped() -> str:
        chars = []
        for _ in range(50):
            if rng.random() < _ESCAPE_PROBABILITY:
                chars.append(rng.choice(_ESCAPED_CHARS))
            else:
                chars.append(rng.choice(string.ascii_letters + " "))
        return "".join(chars)

    return {
        "strings": [escaped() for _ in range(100)],
        "unicode": [chr(rng.randint(0x00A0, 0x2FFF)) * 4 for _ in range(50)],
        "paths": {
            f"key_{i}": f"C:\\Users\\{_word(rng, 8)}\\file_{i}.txt"
            for i in range(20)
        },
    }


def _word(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(string.ascii_letters, k=length))

"""
Parsing and profiling benchmarks.

Compares jsonstat.loads against standard libraries on the same documents:
- Standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

jsonstat builds floats for every number and reports positioned errors, so
it is expected to trail the C parsers by a wide margin; these numbers track
regressions, not a race.
"""

import json
from collections.abc import Callable
from typing import Any

import orjson
import pytest
import ujson  # type: ignore[import-untyped]

import jsonstat
from benchmarks.data_generators import DATA_TYPES
from benchmarks.data_generators import generate_record_stream
from benchmarks.data_generators import generate_test_data

PARSERS = [
    ("stdlib_json", json.loads),
    ("orjson", orjson.loads),
    ("ujson", ujson.loads),
    ("jsonstat", jsonstat.loads),
]


class TestParsingBenchmarks:
    """Benchmarks for JSON parsing performance across libraries."""

    @pytest.mark.parametrize("data_type", DATA_TYPES)
    @pytest.mark.parametrize("parser,parse_func", PARSERS)
    def test_parsing(
        self,
        benchmark: Any,
        data_type: str,
        parser: str,
        parse_func: Callable[[Any], Any],
    ) -> None:
        """Benchmarks one library on one document kind."""
        benchmark.group = data_type
        test_data = generate_test_data(data_type)

        if parser == "orjson":
            # orjson expects bytes for optimal performance
            result = benchmark(parse_func, test_data.encode("utf-8"))
        else:
            result = benchmark(parse_func, test_data)

        assert isinstance(result, dict | list)

    @pytest.mark.benchmark(group="raw_strings")
    def test_raw_string_parsing(self, benchmark: Any) -> None:
        """Benchmarks skipping escape decoding on string-heavy input."""
        test_data = generate_test_data("string_heavy")

        result = benchmark(jsonstat.loads, test_data, decode_escapes=False)

        assert isinstance(result, dict)


class TestProfilingBenchmarks:
    """Benchmarks for folding parsed documents into one profile."""

    @pytest.mark.benchmark(group="sniff")
    @pytest.mark.parametrize("count", [10, 1000])
    def test_sniff_record_stream(self, benchmark: Any, count: int) -> None:
        """Benchmarks profiling already-parsed records."""
        documents = [jsonstat.loads(d) for d in generate_record_stream(count)]

        result = benchmark(jsonstat.sniff_documents, documents)

        assert result.merged == count

    @pytest.mark.benchmark(group="sniff")
    def test_parse_and_sniff(self, benchmark: Any) -> None:
        """Benchmarks the whole stat pipeline: parse, profile and render."""
        stream = generate_record_stream(200)

        def run() -> str:
            parsed = (jsonstat.loads(d) for d in stream)
            result = jsonstat.sniff_documents(parsed)
            assert result.profile is not None
            return jsonstat.format_profile(result.profile)

        report = benchmark(run)

        assert report.startswith("Type: object")

"""
Benchmark suite for jsonstat parsing and profiling.

Compares jsonstat.loads against established JSON libraries:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Also times profile building over record streams, which has no counterpart
in those libraries.
"""

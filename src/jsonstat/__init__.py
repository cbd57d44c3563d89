"""
JSON parsing with positioned errors and structural profiling.

Parses documents with a backtracking combinator grammar and infers a
lightweight profile of one or more parsed documents: value types per
position, likely optional keys, number extremes and distinct strings.
"""

from ._profiling import HotPathStats
from ._profiling import clear_hot_path_stats
from ._profiling import get_hot_path_stats
from .parser import JsonValue
from .parser import ParseConfig
from .parser import ParseError
from .parser import load
from .parser import loads
from .parser import parse_document
from .report import format_profile
from .sniffer import ArrayStats
from .sniffer import ComplexTypeStats
from .sniffer import JsonType
from .sniffer import NumberStats
from .sniffer import ObjectStats
from .sniffer import ProfileShapeError
from .sniffer import SniffResult
from .sniffer import from_value
from .sniffer import json_type
from .sniffer import merge_into
from .sniffer import sniff_documents

__version__ = "0.1.0"

__all__ = [
    "ArrayStats",
    "ComplexTypeStats",
    "HotPathStats",
    "JsonType",
    "JsonValue",
    "NumberStats",
    "ObjectStats",
    "ParseConfig",
    "ParseError",
    "ProfileShapeError",
    "SniffResult",
    "clear_hot_path_stats",
    "format_profile",
    "from_value",
    "get_hot_path_stats",
    "json_type",
    "load",
    "loads",
    "merge_into",
    "parse_document",
    "sniff_documents",
]

"""
Structural and statistical profiling of parsed JSON values.

A ComplexTypeStats profile describes one position of a document: the
members of an array or the values of an object. Profiles are created the
first time a position is seen and afterwards only merged into, which lets a
single profile summarize the same position across many documents.
"""

import heapq
import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field
from enum import StrEnum
from typing import Any

from ._profiling import ProfileContext

logger = logging.getLogger(__name__)

DEFAULT_NUMBERS_LIMIT = 10


class JsonType(StrEnum):
    """Type tags recorded for the values seen at a position."""

    STRING = "string"
    NUMBER = "number"
    OBJECT = "object"
    ARRAY = "array"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"


COMPLEX_TYPES = frozenset({JsonType.OBJECT, JsonType.ARRAY})


class ProfileShapeError(TypeError):
    """An array was merged into an object profile, or the other way round."""


def json_type(value: Any) -> JsonType:  # noqa: PLR0911
    """Returns the type tag of a value from a parsed tree."""
    if value is True:
        return JsonType.TRUE
    elif value is False:
        return JsonType.FALSE
    elif value is None:
        return JsonType.NULL
    elif isinstance(value, str):
        return JsonType.STRING
    elif isinstance(value, int | float):
        return JsonType.NUMBER
    elif isinstance(value, dict):
        return JsonType.OBJECT
    elif isinstance(value, list):
        return JsonType.ARRAY
    else:
        msg = f"Object of type {type(value).__name__} is not a JSON value"
        raise TypeError(msg)


class NumberStats:
    """
    Bounded summary of the numbers seen at a position.

    Keeps the `limit` smallest and `limit` largest values together with a
    running sum and count. Each insertion costs O(log limit).
    """

    def __init__(self, limit: int = DEFAULT_NUMBERS_LIMIT) -> None:
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise TypeError("limit must be an integer")
        if limit < 1:
            raise ValueError("limit must be positive")

        self.limit = limit
        self.count = 0
        self.sum = 0.0
        # Max-heap of the smallest values, stored negated
        self._minimums: list[float] = []
        # Min-heap of the largest values
        self._maximums: list[float] = []

    def add(self, number: float) -> None:
        """Feeds one number into the tracker; NaN is rejected."""
        number = float(number)
        if math.isnan(number):
            raise ValueError("NaN has no total order and cannot be tracked")

        if len(self._minimums) < self.limit:
            heapq.heappush(self._minimums, -number)
        else:
            heapq.heappushpop(self._minimums, -number)

        if len(self._maximums) < self.limit:
            heapq.heappush(self._maximums, number)
        else:
            heapq.heappushpop(self._maximums, number)

        self.count += 1
        self.sum += number

    @property
    def minimums(self) -> list[float]:
        """The smallest values seen, ascending."""
        return sorted(-n for n in self._minimums)

    @property
    def maximums(self) -> list[float]:
        """The largest values seen, descending."""
        return sorted(self._maximums, reverse=True)

    @property
    def mean(self) -> float | None:
        return self.sum / self.count if self.count else None

    def __repr__(self) -> str:
        return (
            f"NumberStats(limit={self.limit}, count={self.count}, "
            f"sum={self.sum!r})"
        )


@dataclass
class ArrayStats:
    """
    Array-specific part of a profile.

    Elements that are arrays and elements that are objects are summarized by
    two independent child profiles.
    """

    inner_arrays: "ComplexTypeStats | None" = None
    inner_objects: "ComplexTypeStats | None" = None


@dataclass
class ObjectStats:
    """Object-specific part of a profile."""

    primitive_keys: dict[str, set[JsonType]] = field(default_factory=dict)
    complex_stats: dict[str, "ComplexTypeStats"] = field(default_factory=dict)
    nonobligatory: set[str] = field(default_factory=set)

    @property
    def keys(self) -> set[str]:
        return set(self.primitive_keys) | set(self.complex_stats)

    @property
    def mandatory(self) -> set[str]:
        return self.keys - self.nonobligatory

    def __contains__(self, key: str) -> bool:
        return key in self.primitive_keys or key in self.complex_stats


class ComplexTypeStats:
    """
    Profile of one array or object position.

    The shape (array or object) is fixed at creation; only values of that
    shape can be merged into it.
    """

    def __init__(
        self, shape: JsonType, numbers_limit: int = DEFAULT_NUMBERS_LIMIT
    ) -> None:
        if shape not in COMPLEX_TYPES:
            raise ValueError(
                f"profile shape must be array or object, not {shape}"
            )

        self.value_types: set[JsonType] = set()
        self.numbers = NumberStats(numbers_limit)
        self.strings: set[str] = set()
        self.type_stats: ArrayStats | ObjectStats = (
            ArrayStats() if shape is JsonType.ARRAY else ObjectStats()
        )

    @property
    def shape(self) -> JsonType:
        if isinstance(self.type_stats, ArrayStats):
            return JsonType.ARRAY
        return JsonType.OBJECT

    @property
    def is_array(self) -> bool:
        return isinstance(self.type_stats, ArrayStats)

    @property
    def is_object(self) -> bool:
        return isinstance(self.type_stats, ObjectStats)

    def matches(self, value: Any) -> bool:
        """True when value has the same complex shape as this profile."""
        return json_type(value) is self.shape

    def record(self, value: Any) -> JsonType:
        """Records a member's type tag and, for primitives, its content."""
        kind = json_type(value)
        self.value_types.add(kind)
        if kind is JsonType.NUMBER:
            self.numbers.add(value)
        elif kind is JsonType.STRING:
            self.strings.add(value)
        return kind

    def __repr__(self) -> str:
        types = ", ".join(sorted(self.value_types))
        return f"ComplexTypeStats({self.shape}, value_types={{{types}}})"


def from_value(
    value: Any, numbers_limit: int = DEFAULT_NUMBERS_LIMIT
) -> ComplexTypeStats:
    """
    Builds a fresh profile from one value.

    A primitive value is profiled as if it were the only element of an
    array.
    """
    kind = json_type(value)
    if kind is JsonType.OBJECT:
        profile = ComplexTypeStats(JsonType.OBJECT, numbers_limit)
    else:
        profile = ComplexTypeStats(JsonType.ARRAY, numbers_limit)

    if kind in COMPLEX_TYPES:
        merge_into(profile, value)
    else:
        profile.record(value)
    return profile


def merge_into(profile: ComplexTypeStats, value: Any) -> ComplexTypeStats:
    """
    Folds one more value into an existing profile and returns the profile.

    Raises ProfileShapeError when value is an array or object whose shape
    differs from the profile's; a primitive value is recorded as a member.
    """
    kind = json_type(value)
    if kind not in COMPLEX_TYPES:
        profile.record(value)
        return profile

    if kind is not profile.shape:
        raise ProfileShapeError(
            f"cannot merge {kind} into a profile of shape {profile.shape}"
        )

    if isinstance(profile.type_stats, ArrayStats):
        _merge_array(profile, profile.type_stats, value)
    else:
        _merge_object(profile, profile.type_stats, value)
    return profile


def _merge_or_create(
    existing: ComplexTypeStats | None, value: Any, numbers_limit: int
) -> ComplexTypeStats:
    if existing is None:
        return from_value(value, numbers_limit)
    return merge_into(existing, value)


def _merge_array(
    profile: ComplexTypeStats, stats: ArrayStats, array: list[Any]
) -> None:
    limit = profile.numbers.limit
    for element in array:
        kind = profile.record(element)
        if kind is JsonType.ARRAY:
            stats.inner_arrays = _merge_or_create(
                stats.inner_arrays, element, limit
            )
        elif kind is JsonType.OBJECT:
            stats.inner_objects = _merge_or_create(
                stats.inner_objects, element, limit
            )


def _merge_object(
    profile: ComplexTypeStats, stats: ObjectStats, obj: dict[str, Any]
) -> None:
    limit = profile.numbers.limit
    for key, value in obj.items():
        # Recurrence heuristic: a key met again is flagged as optional
        if key in stats:
            stats.nonobligatory.add(key)

        kind = profile.record(value)
        if kind not in COMPLEX_TYPES:
            stats.primitive_keys.setdefault(key, set()).add(kind)
            continue

        nested = stats.complex_stats.get(key)
        if nested is None:
            stats.complex_stats[key] = from_value(value, limit)
        elif nested.matches(value):
            merge_into(nested, value)
        else:
            # Shape changed between records; keep the tag, skip the contents
            logger.debug(
                "Key %r holds %s after %s; contents not profiled",
                key,
                kind,
                nested.shape,
            )
            nested.value_types.add(kind)


def _fits_profile(profile: ComplexTypeStats, value: Any) -> bool:
    return json_type(value) not in COMPLEX_TYPES or profile.matches(value)


@dataclass
class SniffResult:
    """Outcome of folding several documents into one profile."""

    profile: ComplexTypeStats | None
    merged: int = 0
    skipped: int = 0


def sniff_documents(
    values: Iterable[Any], numbers_limit: int = DEFAULT_NUMBERS_LIMIT
) -> SniffResult:
    """
    Merges parsed documents, in order, into a single profile.

    The first document fixes the profile's shape; later documents whose
    root is an array or object of the other shape are skipped.
    """
    result = SniffResult(profile=None)
    for index, value in enumerate(values):
        with ProfileContext("sniff"):
            if result.profile is None:
                result.profile = from_value(value, numbers_limit)
            elif not _fits_profile(result.profile, value):
                logger.warning(
                    "Skipping document %d: root is %s but profile is %s",
                    index,
                    json_type(value),
                    result.profile.shape,
                )
                result.skipped += 1
                continue
            else:
                merge_into(result.profile, value)
        result.merged += 1
        logger.debug("Merged document %d into profile", index)
    return result

"""Plain-text rendering of a finished profile."""

from .sniffer import ArrayStats
from .sniffer import ComplexTypeStats
from .sniffer import NumberStats
from .sniffer import ObjectStats

_EXACT_INTEGER_LIMIT = 2**53


def _format_number(n: float) -> str:
    """Integral values print without a trailing .0."""
    if n.is_integer() and abs(n) < _EXACT_INTEGER_LIMIT:
        return str(int(n))
    return repr(n)


def _printable(text: str) -> str:
    """Escapes lone surrogates, which UTF-8 output cannot encode."""
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


def _quoted(items: set[str]) -> str:
    return ", ".join(f"'{_printable(item)}'" for item in sorted(items))


def _format_numbers(numbers: NumberStats) -> list[str]:
    mean = numbers.mean if numbers.mean is not None else 0.0
    maximums = numbers.maximums
    minimums = numbers.minimums
    return [
        "=== Numbers info ===",
        f"Encountered {numbers.count} numbers, "
        f"sum = {_format_number(numbers.sum)}, avg = {_format_number(mean)}",
        f"{len(maximums)} most maximum numbers: "
        + ", ".join(_format_number(n) for n in maximums),
        f"{len(minimums)} most minimum numbers: "
        + ", ".join(_format_number(n) for n in minimums),
    ]


def _format_array(stats: ArrayStats) -> list[str]:
    lines = ["=== Array specific info ==="]
    if stats.inner_arrays is not None:
        lines.append("*** Inner arrays info ***")
        lines.extend(_format_lines(stats.inner_arrays))
    if stats.inner_objects is not None:
        lines.append("*** Inner objects info ***")
        lines.extend(_format_lines(stats.inner_objects))
    return lines


def _format_object(stats: ObjectStats) -> list[str]:
    lines = [
        "=== Object specific info ===",
        f"{len(stats.nonobligatory)} keys are likely nonobligatory: "
        + _quoted(stats.nonobligatory),
        f"{len(stats.mandatory)} keys are likely mandatory: "
        + _quoted(stats.mandatory),
        f"{len(stats.primitive_keys)} keys have primitive values:",
    ]
    for key in sorted(stats.primitive_keys):
        types = ", ".join(sorted(stats.primitive_keys[key]))
        lines.append(f"- {_printable(key)} is {types}")
    for key in sorted(stats.complex_stats):
        lines.append(f"*** Info for value at key {_printable(key)} ***")
        lines.extend(_format_lines(stats.complex_stats[key]))
    return lines


def _format_lines(profile: ComplexTypeStats) -> list[str]:
    lines = [
        f"Type: {profile.shape}",
        "--- Common info ---",
        "Containing types: " + ", ".join(sorted(profile.value_types)),
    ]
    if profile.numbers.count:
        lines.extend(_format_numbers(profile.numbers))
    if profile.strings:
        lines.append("=== Strings info ===")
        lines.append(
            f"Encountered {len(profile.strings)} unique strings: "
            + _quoted(profile.strings)
        )

    if isinstance(profile.type_stats, ArrayStats):
        lines.extend(_format_array(profile.type_stats))
    else:
        lines.extend(_format_object(profile.type_stats))
    lines.append("")
    return lines


def format_profile(profile: ComplexTypeStats) -> str:
    """
    Renders a profile and every nested profile below it.

    Sets are sorted so the same profile always renders the same text.
    """
    return "\n".join(_format_lines(profile))

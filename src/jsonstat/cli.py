"""
Command line interface: verify JSON files and profile their structure.

    jsonstat check FILE [FILE ...]
    jsonstat stat FILE [FILE ...]
"""

import argparse
import logging
import os
import sys
from collections.abc import Iterator
from pathlib import Path

from . import __version__
from ._profiling import PROFILE_HOT_PATHS
from ._profiling import format_hot_path_stats
from ._profiling import get_hot_path_stats
from .parser import DEFAULT_MAX_DEPTH
from .parser import MAX_DEPTH_LIMIT
from .parser import JsonValue
from .parser import ParseConfig
from .parser import ParseError
from .parser import parse_document
from .report import format_profile
from .sniffer import DEFAULT_NUMBERS_LIMIT
from .sniffer import sniff_documents

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
EXIT_OK = 0
EXIT_INVALID = 1


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        msg = f"invalid integer: {text!r}"
        raise argparse.ArgumentTypeError(msg) from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return value


def _max_depth(text: str) -> int:
    value = _positive_int(text)
    if value > MAX_DEPTH_LIMIT:
        msg = f"must be at most {MAX_DEPTH_LIMIT}: {value}"
        raise argparse.ArgumentTypeError(msg)
    return value


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "files", nargs="+", metavar="JSON", help="Path to JSON file"
    )
    common.add_argument(
        "--lenient",
        action="store_true",
        help="ignore text after the root value",
    )
    common.add_argument(
        "--raw-strings",
        action="store_true",
        help="keep escape sequences in strings as written",
    )
    common.add_argument(
        "--max-depth",
        type=_max_depth,
        default=DEFAULT_MAX_DEPTH,
        help="maximum array/object nesting (default: %(default)s)",
    )

    ap = argparse.ArgumentParser(
        prog="jsonstat", description="Tool for verifying and analyzing JSON"
    )
    ap.add_argument("--version", action="version", version=__version__)
    verbosity = ap.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true")
    verbosity.add_argument("-q", "--quiet", action="store_true")
    ap.add_argument(
        "--profile",
        action="store_true",
        help="print hot path timings (needs JSONSTAT_PROFILE)",
    )

    sub = ap.add_subparsers(dest="command", required=True)
    sub.add_parser("check", parents=[common], help="Verifies JSON file(s)")
    stat = sub.add_parser(
        "stat", parents=[common], help="Analyzes structure of JSON file(s)"
    )
    stat.add_argument(
        "--limit",
        type=_positive_int,
        default=DEFAULT_NUMBERS_LIMIT,
        help="how many extreme numbers to keep (default: %(default)s)",
    )
    return ap


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    unknown_level = None
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        name = os.environ.get("JSONSTAT_LOG_LEVEL", "WARNING").upper()
        levels = logging.getLevelNamesMapping()
        if name not in levels:
            unknown_level = name
        level = levels.get(name, logging.WARNING)

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    if unknown_level is not None:
        logger.warning(
            "Unknown JSONSTAT_LOG_LEVEL %r; using WARNING", unknown_level
        )


def _parse_files(
    files: list[str], config: ParseConfig, report_valid: bool
) -> Iterator[JsonValue | Exception]:
    """Yields the parsed value or the failure for every file, in order."""
    for file in files:
        try:
            text = Path(file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            reason = getattr(exc, "strerror", None) or str(exc)
            print(f"{file} is not readable: {reason}")
            logger.warning("Cannot read %s: %s", file, exc)
            yield exc
            continue

        try:
            value = parse_document(text, config)
        except ParseError as exc:
            print(f"{file} has error at ({exc.row}, {exc.column}): {exc.msg}")
            logger.warning("Invalid JSON in %s: %s", file, exc)
            yield exc
            continue

        if report_valid:
            print(f"{file} is valid JSON")
        yield value


def _is_failure(outcome: object) -> bool:
    return isinstance(outcome, Exception)


def run_check(files: list[str], config: ParseConfig) -> int:
    outcomes = list(_parse_files(files, config, report_valid=True))
    return EXIT_INVALID if any(map(_is_failure, outcomes)) else EXIT_OK


def run_stat(files: list[str], config: ParseConfig, limit: int) -> int:
    failures = 0

    def documents() -> Iterator[JsonValue]:
        nonlocal failures
        for outcome in _parse_files(files, config, report_valid=False):
            if isinstance(outcome, Exception):
                failures += 1
            else:
                yield outcome

    # Each document is merged as soon as it is parsed, then released
    result = sniff_documents(documents(), numbers_limit=limit)
    if result.profile is None:
        print("No valid JSON documents to analyze")
    else:
        print(format_profile(result.profile))
    if result.skipped:
        print(f"{result.skipped} document(s) skipped: root shape differs")

    return EXIT_INVALID if failures else EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    config = ParseConfig(
        strict=not args.lenient,
        decode_escapes=not args.raw_strings,
        max_depth=args.max_depth,
    )
    logger.debug("Running %s on %d file(s)", args.command, len(args.files))

    if args.command == "check":
        status = run_check(args.files, config)
    else:
        status = run_stat(args.files, config, args.limit)

    if args.profile:
        if not PROFILE_HOT_PATHS:
            logger.warning("Profiling disabled; set JSONSTAT_PROFILE")
        print(format_hot_path_stats(get_hot_path_stats()), file=sys.stderr)
    return status


if __name__ == "__main__":
    sys.exit(main())

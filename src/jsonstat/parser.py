"""
JSON grammar, value builder and parser facade.

The grammar is a backtracking recursive descent built from the acceptors in
_combinators. Scalar rules capture the raw text they matched and turn it
into a value once the match is complete; array and object rules assemble
their members in a loop, so only nesting depth costs stack frames.
"""

import logging
from dataclasses import dataclass
from typing import IO
from typing import Any
from typing import TypeAlias

from ._combinators import alternation
from ._combinators import char
from ._combinators import char_if
from ._combinators import char_ignoring_case
from ._combinators import digit
from ._combinators import digits
from ._combinators import hex_digit
from ._combinators import literal
from ._combinators import nonzero_digit
from ._combinators import optional
from ._combinators import repetition
from ._combinators import sequence
from ._combinators import whitespace
from ._cursor import Accepted
from ._cursor import Cursor
from ._cursor import Position
from ._cursor import Rejected
from ._cursor import Result
from ._cursor import further
from ._profiling import ProfileContext

logger = logging.getLogger(__name__)

# Type aliases for domain concepts - recursive definition
JsonValue = (
    str | float | bool | None | dict[str, "JsonValue"] | list["JsonValue"]
)
# One object member; only ever lives inside the object rule
KeyValue: TypeAlias = tuple[str, JsonValue]

DEFAULT_MAX_DEPTH = 128
# Each nesting level costs up to three frames (value, object, member), so
# deeper limits would hit the interpreter recursion limit first
MAX_DEPTH_LIMIT = 200

_HIGH_SURROGATES = range(0xD800, 0xDC00)
_LOW_SURROGATES = range(0xDC00, 0xE000)


class ParseError(ValueError):
    """
    Handles JSON parsing failures with precise position information.

    row and column are 0-based and identify the first character the grammar
    could not interpret; lineno and colno are the 1-based equivalents.
    """

    def __init__(self, msg: str, doc: str = "", pos: Position = 0) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.doc = doc
        self.pos = pos

        # Compute row and column from position
        self.row = doc.count("\n", 0, pos)
        self.column = pos - (doc.rfind("\n", 0, pos) + 1)

        super().__init__(f"{msg} at ({self.row}, {self.column})")

    @property
    def lineno(self) -> int:
        return self.row + 1

    @property
    def colno(self) -> int:
        return self.column + 1

    @classmethod
    def at(cls, msg: str, cursor: Cursor) -> "ParseError":
        return cls(msg, cursor.text, cursor.pos)


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures parsing behavior with immutable settings.

    strict rejects text after the root value; decode_escapes turns escape
    sequences into the characters they denote instead of keeping the source
    text; max_depth bounds array/object nesting.
    """

    strict: bool = True
    decode_escapes: bool = True
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if not isinstance(self.strict, bool):
            raise TypeError("strict must be a boolean")
        if not isinstance(self.decode_escapes, bool):
            raise TypeError("decode_escapes must be a boolean")
        if isinstance(self.max_depth, bool) or not isinstance(
            self.max_depth, int
        ):
            raise TypeError("max_depth must be an integer")
        if self.max_depth < 1:
            raise ValueError("max_depth must be positive")
        if self.max_depth > MAX_DEPTH_LIMIT:
            raise ValueError(f"max_depth must be at most {MAX_DEPTH_LIMIT}")


# Scalar grammar

_integer = sequence(
    optional(char("-")),
    alternation(char("0"), sequence(nonzero_digit, repetition(digit))),
)
_fraction = sequence(char("."), digits)
_exponent = sequence(
    char_ignoring_case("e"),
    optional(alternation(char("+"), char("-"))),
    digits,
)
accept_number = sequence(_integer, optional(_fraction), optional(_exponent))

_unicode_escape = sequence(
    char("u"), hex_digit, hex_digit, hex_digit, hex_digit
)
_escape = sequence(
    char("\\"),
    alternation(
        char('"'),
        char("\\"),
        char("/"),
        char("b"),
        char("f"),
        char("n"),
        char("r"),
        char("t"),
        _unicode_escape,
    ),
)
_symbol = alternation(char_if(lambda c: c not in '"\\'), _escape)
_symbols = repetition(_symbol)
_quote = char('"')

# Structural characters
_open_bracket = char("[")
_close_bracket = char("]")
_open_brace = char("{")
_close_brace = char("}")
_comma = char(",")
_colon = char(":")

accept_true = literal("true")
accept_false = literal("false")
accept_null = literal("null")

_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


def decode_escapes(raw: str) -> str:
    """
    Replaces escape sequences in a grammar-validated string body.

    A \\uXXXX high surrogate immediately followed by a \\uXXXX low surrogate
    becomes a single code point; any other \\uXXXX maps to chr() of its value.
    """
    if "\\" not in raw:
        return raw

    result = []
    i = 0
    while i < len(raw):
        if raw[i] != "\\":
            result.append(raw[i])
            i += 1
            continue

        escaped = raw[i + 1]
        if escaped != "u":
            result.append(_SIMPLE_ESCAPES[escaped])
            i += 2
            continue

        code_point = int(raw[i + 2 : i + 6], 16)
        i += 6
        if code_point in _HIGH_SURROGATES and raw.startswith("\\u", i):
            low = int(raw[i + 2 : i + 6], 16)
            if low in _LOW_SURROGATES:
                code_point = 0x10000 + ((code_point - 0xD800) << 10) + (
                    low - 0xDC00
                )
                i += 6
        result.append(chr(code_point))

    return "".join(result)


class JsonGrammar:
    """
    Value-building rules of the JSON grammar.

    Each rule takes a cursor and the current nesting depth and returns
    Accepted carrying the built value, or Rejected with the start cursor
    untouched. One instance serves one configuration and holds no parse
    state, so it can be shared between parses.
    """

    def __init__(self, config: ParseConfig):
        self.config = config
        self._rules = (
            self.parse_string,
            self.parse_number,
            self.parse_object,
            self.parse_array,
            self.parse_true,
            self.parse_false,
            self.parse_null,
        )

    def parse_value(self, cursor: Cursor, depth: int = 0) -> Result:
        """Ordered choice over the value rules, plus surrounding whitespace."""
        start = whitespace(cursor).cursor
        furthest = start
        for rule in self._rules:
            result = rule(start, depth)
            if result:
                return Accepted(whitespace(result.cursor).cursor, result.value)
            furthest = further(furthest, result.furthest)
        return Rejected(cursor, furthest)

    def parse_true(self, cursor: Cursor, _depth: int = 0) -> Result:
        result = accept_true(cursor)
        return Accepted(result.cursor, True) if result else result

    def parse_false(self, cursor: Cursor, _depth: int = 0) -> Result:
        result = accept_false(cursor)
        return Accepted(result.cursor, False) if result else result

    def parse_null(self, cursor: Cursor, _depth: int = 0) -> Result:
        result = accept_null(cursor)
        return Accepted(result.cursor, None) if result else result

    def parse_number(self, cursor: Cursor, _depth: int = 0) -> Result:
        result = accept_number(cursor)
        if not result:
            return result

        raw = result.cursor.captured_since(cursor)
        with ProfileContext("parse_number", len(raw)):
            return Accepted(result.cursor, float(raw))

    def parse_string(self, cursor: Cursor, _depth: int = 0) -> Result:
        opening = _quote(cursor)
        if not opening:
            return opening

        body = _symbols(opening.cursor)
        closing = _quote(body.cursor)
        if not closing:
            return Rejected(cursor, closing.furthest)

        raw = body.cursor.captured_since(opening.cursor)
        with ProfileContext("parse_string", len(raw)):
            if self.config.decode_escapes:
                return Accepted(closing.cursor, decode_escapes(raw))
            return Accepted(closing.cursor, raw)

    def _enter(self, cursor: Cursor, depth: int) -> int:
        if depth >= self.config.max_depth:
            raise ParseError.at("Maximum nesting depth exceeded", cursor)
        return depth + 1

    def parse_array(self, cursor: Cursor, depth: int = 0) -> Result:
        opening = _open_bracket(cursor)
        if not opening:
            return opening

        inner_depth = self._enter(cursor, depth)
        current = whitespace(opening.cursor).cursor
        values: list[JsonValue] = []

        closing = _close_bracket(current)
        if closing:
            return Accepted(closing.cursor, values)

        with ProfileContext("parse_array"):
            while True:
                item = self.parse_value(current, inner_depth)
                if not item:
                    return Rejected(cursor, item.furthest)
                values.append(item.value)
                current = item.cursor

                comma = _comma(current)
                if comma:
                    current = comma.cursor
                    continue

                closing = _close_bracket(current)
                if closing:
                    return Accepted(closing.cursor, values)
                return Rejected(cursor, current)

    def parse_member(self, cursor: Cursor, depth: int = 0) -> Result:
        """Parses one `"key": value` pair into a transient KeyValue."""
        key = self.parse_string(whitespace(cursor).cursor, depth)
        if not key:
            return Rejected(cursor, key.furthest)

        colon = _colon(whitespace(key.cursor).cursor)
        if not colon:
            return Rejected(cursor, colon.furthest)

        value = self.parse_value(colon.cursor, depth)
        if not value:
            return Rejected(cursor, value.furthest)

        pair: KeyValue = (key.value, value.value)
        return Accepted(value.cursor, pair)

    def parse_object(self, cursor: Cursor, depth: int = 0) -> Result:
        opening = _open_brace(cursor)
        if not opening:
            return opening

        inner_depth = self._enter(cursor, depth)
        current = whitespace(opening.cursor).cursor
        members: dict[str, JsonValue] = {}

        closing = _close_brace(current)
        if closing:
            return Accepted(closing.cursor, members)

        with ProfileContext("parse_object"):
            while True:
                member = self.parse_member(current, inner_depth)
                if not member:
                    return Rejected(cursor, member.furthest)
                key, value = member.value
                members[key] = value
                current = member.cursor

                comma = _comma(current)
                if comma:
                    current = comma.cursor
                    continue

                closing = _close_brace(current)
                if closing:
                    return Accepted(closing.cursor, members)
                return Rejected(cursor, current)


def _failure_message(cursor: Cursor) -> str:
    if cursor.at_end:
        return "Unexpected end of input"
    return f"Unexpected symbol {cursor.peek()!r}"


def parse_document(text: str, config: ParseConfig | None = None) -> JsonValue:
    """
    Parses a whole document into a value tree.

    Raises ParseError positioned at the furthest character the grammar
    reached, or at the first extra character when config.strict is set and
    text follows the root value.
    """
    config = config or ParseConfig()
    logger.debug("Parsing document of %d characters", len(text))

    with ProfileContext("parse_document", len(text)):
        result = JsonGrammar(config).parse_value(Cursor(text))

    if not result:
        raise ParseError.at(_failure_message(result.furthest), result.furthest)
    if config.strict and not result.cursor.at_end:
        raise ParseError.at("Extra data", result.cursor)
    return result.value


def loads(s: str, **kwargs: Any) -> JsonValue:
    """
    Parses a JSON string into Python values.

    Keyword arguments are ParseConfig fields.
    """
    if not isinstance(s, str):
        raise TypeError(
            f"the JSON object must be str, not {type(s).__name__}"
        )

    config = ParseConfig(**kwargs)
    return parse_document(s, config)


def load(fp: IO[str], **kwargs: Any) -> JsonValue:
    """
    Parses JSON from a file-like object, reading it fully first.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return loads(fp.read(), **kwargs)

"""
Character- and rule-level acceptors and the ways to compose them.

An acceptor takes a Cursor and returns Accepted with an advanced cursor or
Rejected with the cursor it was given. Acceptors never raise on bad input
and never move the start cursor on failure.
"""

from collections.abc import Callable
from typing import TypeAlias

from ._cursor import Accepted
from ._cursor import Cursor
from ._cursor import Rejected
from ._cursor import Result
from ._cursor import further

Acceptor: TypeAlias = Callable[[Cursor], Result]

WHITESPACE_CHARS = " \n\r\t"


def accept_char(cursor: Cursor, expected: str) -> Result:
    """Consumes one character if it equals expected."""
    if cursor.peek() == expected:
        return Accepted(cursor.advance())
    return Rejected(cursor, cursor)


def char(expected: str) -> Acceptor:
    """Builds an acceptor for a single literal character."""
    if len(expected) != 1:
        raise ValueError("char() expects exactly one character")

    def _accept(cursor: Cursor) -> Result:
        return accept_char(cursor, expected)

    return _accept


def char_ignoring_case(expected: str) -> Acceptor:
    """Accepts the lowercase form of expected, then the uppercase form."""
    return alternation(char(expected.lower()), char(expected.upper()))


def char_if(predicate: Callable[[str], bool]) -> Acceptor:
    """Accepts any single character the predicate approves."""

    def _accept(cursor: Cursor) -> Result:
        actual = cursor.peek()
        if actual is not None and predicate(actual):
            return Accepted(cursor.advance())
        return Rejected(cursor, cursor)

    return _accept


def literal(word: str) -> Acceptor:
    """Accepts an exact, case-sensitive run of characters."""
    return sequence(*(char(c) for c in word))


def succeed(cursor: Cursor) -> Result:
    """Accepts without consuming anything."""
    return Accepted(cursor)


def sequence(*acceptors: Acceptor) -> Acceptor:
    """
    Runs acceptors one after another.

    Fails as soon as one step fails, reporting the original start cursor
    and the furthest position the failing step reached.
    """

    def _accept(cursor: Cursor) -> Result:
        current = cursor
        for acceptor in acceptors:
            result = acceptor(current)
            if not result:
                return Rejected(cursor, result.furthest)
            current = result.cursor
        return Accepted(current)

    return _accept


def alternation(*acceptors: Acceptor) -> Acceptor:
    """
    Ordered choice: the first acceptor to succeed from the same start wins.

    Order matters when one alternative is a prefix of another.
    """

    def _accept(cursor: Cursor) -> Result:
        furthest = cursor
        for acceptor in acceptors:
            result = acceptor(cursor)
            if result:
                return result
            furthest = further(furthest, result.furthest)
        return Rejected(cursor, furthest)

    return _accept


def repetition(acceptor: Acceptor) -> Acceptor:
    """Zero or more matches, stopping at the first failure. Always succeeds."""

    def _accept(cursor: Cursor) -> Result:
        current = cursor
        while True:
            result = acceptor(current)
            if not result or result.cursor.pos == current.pos:
                return Accepted(current)
            current = result.cursor

    return _accept


def one_or_more(acceptor: Acceptor) -> Acceptor:
    return sequence(acceptor, repetition(acceptor))


def optional(acceptor: Acceptor) -> Acceptor:
    return alternation(acceptor, succeed)


# Character classes used by the JSON grammar

whitespace = repetition(char_if(lambda c: c in WHITESPACE_CHARS))
nonzero_digit = char_if(lambda c: "1" <= c <= "9")
digit = alternation(nonzero_digit, char("0"))
digits = one_or_more(digit)
hex_digit = alternation(
    digit,
    *(char_ignoring_case(c) for c in "abcdef"),
)

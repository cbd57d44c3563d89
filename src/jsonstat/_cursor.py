"""
Immutable parse cursor and the results acceptors return.

A Cursor is never mutated: advancing produces a new cursor, so a failed
alternative can retry from the cursor it was handed without any undo step.
"""

from dataclasses import dataclass
from typing import Any
from typing import TypeAlias

Position: TypeAlias = int


@dataclass(frozen=True, slots=True)
class Cursor:
    """
    Position in the document being parsed.

    Tracks the offset into the full text together with the 0-based row and
    column of the next unread character.
    """

    text: str
    pos: Position = 0
    row: int = 0
    column: int = 0

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str | None:
        """Returns the next unread character, or None at end of input."""
        return self.text[self.pos] if self.pos < len(self.text) else None

    def advance(self) -> "Cursor":
        """Returns a cursor moved past exactly one character."""
        char = self.text[self.pos]
        if char == "\n":
            return Cursor(self.text, self.pos + 1, self.row + 1, 0)
        return Cursor(self.text, self.pos + 1, self.row, self.column + 1)

    def captured_since(self, start: "Cursor") -> str:
        """Returns the raw text consumed between start and this cursor."""
        return self.text[start.pos : self.pos]

    @property
    def remaining(self) -> str:
        return self.text[self.pos :]


@dataclass(frozen=True, slots=True)
class Accepted:
    """Successful match: the advanced cursor and the value built, if any."""

    cursor: Cursor
    value: Any = None

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Rejected:
    """
    Failed match.

    start is the cursor the acceptor was handed, unchanged. furthest is the
    deepest position any step of the attempt reached before failing; it is
    what error reporting points at.
    """

    start: Cursor
    furthest: Cursor

    def __bool__(self) -> bool:
        return False


Result: TypeAlias = Accepted | Rejected


def further(a: Cursor, b: Cursor) -> Cursor:
    """Returns whichever cursor got deeper into the text."""
    return b if b.pos > a.pos else a

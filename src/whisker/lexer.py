"""Delimiter scanner for Whisker templates.

The scanner has no token stream of its own: the parser asks it for "the
text up to the next occurrence of this delimiter" and gets back the skipped
text plus a new cursor. Cursors are immutable values, so the parser threads
them explicitly through its recursion instead of sharing a mutable position.

Example:
    >>> scan = next_token("Hi {{name}}!", Cursor(), "{{")
    >>> scan.text, scan.cursor.pos, scan.at_end
    ('Hi ', 5, False)

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

# Extra character that turns a tag into a raw (unescaped) triple-brace tag
RAW_MARKER = "{"
RAW_CLOSE = "}"


@dataclass(frozen=True, slots=True)
class Cursor:
    """Scan position in template source.

    Attributes:
        pos: Offset of the next unread character
        line: 1-based line number of that character
    """

    pos: int = 0
    line: int = 1


class Scan(NamedTuple):
    """Result of scanning for a delimiter."""

    text: str
    cursor: Cursor
    at_end: bool


def next_token(source: str, cursor: Cursor, delimiter: str) -> Scan:
    """Scan forward from *cursor* to the next *delimiter*.

    Returns the text between the cursor and the delimiter, and a cursor
    positioned just past the delimiter. Every newline in the skipped text
    advances the line counter.

    If the delimiter does not occur, the rest of the source is returned with
    ``at_end=True`` and the cursor is left at the end of the source.
    """
    index = source.find(delimiter, cursor.pos)
    if index == -1:
        text = source[cursor.pos :]
        end = Cursor(len(source), cursor.line + text.count("\n"))
        return Scan(text, end, True)

    text = source[cursor.pos : index]
    line = cursor.line + text.count("\n") + delimiter.count("\n")
    return Scan(text, Cursor(index + len(delimiter), line), False)


def closing_delimiter(source: str, cursor: Cursor, close: str) -> str:
    """Pick the delimiter that closes the tag opened just before *cursor*.

    A tag whose body starts with ``{`` is a triple-brace raw tag and is
    closed by ``close + "}"``.
    """
    if source.startswith(RAW_MARKER, cursor.pos):
        return close + RAW_CLOSE
    return close


def skip_line_break(source: str, cursor: Cursor) -> Cursor:
    """Consume a single ``\\n`` or ``\\r\\n`` directly at *cursor*, if present."""
    if source.startswith("\n", cursor.pos):
        return Cursor(cursor.pos + 1, cursor.line + 1)
    if source.startswith("\r\n", cursor.pos):
        return Cursor(cursor.pos + 2, cursor.line + 1)
    return cursor

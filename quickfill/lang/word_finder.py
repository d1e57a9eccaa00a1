"""Identifier boundary helpers working on any document buffer."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quickfill.editor.document import DocumentBuffer


def is_identifier_part(ch: str) -> bool:
    """Return True if ``ch`` may appear inside an identifier."""

    return ch.isalnum() or ch in "_$"


def ident_length_at(buffer: "DocumentBuffer", offset: int) -> int:
    """Length of the identifier enclosing ``offset``, or 0 if there is none.

    The scan runs backward as well as forward, so the result is the length of
    the identifier starting at a completion's ``start_pos`` only when
    ``start_pos`` is the first character of that identifier.
    """

    length = buffer.length()
    start = min(max(offset, 0), length)
    end = start
    while start > 0 and is_identifier_part(buffer.char_at(start - 1)):
        start -= 1
    while end < length and is_identifier_part(buffer.char_at(end)):
        end += 1
    return end - start

"""Document buffers and the atomic multi-edit operation."""
from __future__ import annotations

import logging
from typing import Iterable, Protocol

from PySide6.QtGui import QTextCursor, QTextDocument

from quickfill.completion.edits import EditApplicationError, TextChange, TextSelection

logger = logging.getLogger(__name__)


class DocumentBuffer(Protocol):
    def char_at(self, offset: int) -> str:
        ...

    def length(self) -> int:
        ...

    def text(self) -> str:
        ...


class EditableDocument(DocumentBuffer, Protocol):
    def apply_changes(self, selection: TextSelection, changes: list[TextChange]) -> TextSelection:
        """Apply all changes at once or raise ``EditApplicationError``."""
        ...


class StringBuffer:
    """Plain in-memory buffer for headless hosts."""

    def __init__(self, text: str = "") -> None:
        self._text = text

    def char_at(self, offset: int) -> str:
        return self._text[offset]

    def length(self) -> int:
        return len(self._text)

    def text(self) -> str:
        return self._text

    def apply_changes(self, selection: TextSelection, changes: list[TextChange]) -> TextSelection:
        ordered = _validated(changes, self.length())
        text = self._text
        for change in ordered:
            text = text[: change.start] + change.text + text[change.end :]
        self._text = text
        return selection.map_through(changes)


def _utf16_position(text: str, offset: int) -> int:
    """Qt position of code-point ``offset``; astral characters take two units."""

    return offset + sum(1 for ch in text[:offset] if ord(ch) > 0xFFFF)


def _code_point_offset(text: str, position: int) -> int:
    units = 0
    for index, ch in enumerate(text):
        if units >= position:
            return index
        units += 2 if ord(ch) > 0xFFFF else 1
    return len(text)


class QtDocumentBuffer:
    """Plain-text view of a ``QTextDocument`` that can also apply edits.

    Offsets are Python code points, like everywhere else in quickfill.
    ``QTextDocument`` counts UTF-16 units instead; ``to_qt_position`` and
    ``from_qt_position`` convert at this boundary.
    """

    def __init__(self, document: QTextDocument) -> None:
        self.document = document

    def char_at(self, offset: int) -> str:
        text = self.text()
        if offset < 0 or offset >= len(text):
            raise IndexError(f"Offset {offset} outside document of length {len(text)}")
        return text[offset]

    def length(self) -> int:
        return len(self.text())

    def text(self) -> str:
        # toPlainText() turns block separators into "\n"
        return self.document.toPlainText()

    def to_qt_position(self, offset: int) -> int:
        return _utf16_position(self.text(), offset)

    def from_qt_position(self, position: int) -> int:
        return _code_point_offset(self.text(), position)

    def apply_changes(self, selection: TextSelection, changes: list[TextChange]) -> TextSelection:
        return apply_changes_to_document(self.document, selection, changes)


def _validated(changes: Iterable[TextChange], length: int) -> list[TextChange]:
    """Check all changes and return them in the order they must be applied.

    Insertions at the same offset end up in reverse list order, so secondary
    edits such as an added import land in front of the primary one.
    """

    indexed = list(enumerate(changes))
    for _, change in indexed:
        if change.end > length:
            raise EditApplicationError(
                f"Change [{change.start}, {change.end}) exceeds document length {length}"
            )
    by_position = sorted(indexed, key=lambda item: (item[1].start, item[1].end, -item[0]))
    for (_, previous), (_, current) in zip(by_position, by_position[1:]):
        if current.start < previous.end:
            raise EditApplicationError(
                f"Overlapping changes [{previous.start}, {previous.end}) and [{current.start}, {current.end})"
            )
    # back to front so earlier offsets stay valid
    return [change for _, change in reversed(by_position)]


def apply_changes_to_document(
    document: QTextDocument, selection: TextSelection, changes: list[TextChange]
) -> TextSelection:
    """Apply ``changes`` as a single undoable edit and return the mapped selection.

    Change and selection offsets are code points. Nothing is modified when any
    change is out of range or overlaps another.
    """

    text = document.toPlainText()
    ordered = _validated(changes, len(text))
    cursor = QTextCursor(document)
    cursor.beginEditBlock()
    try:
        for change in ordered:
            # positions before this change are untouched, so the original text still maps them
            cursor.setPosition(_utf16_position(text, change.start))
            cursor.setPosition(_utf16_position(text, change.end), QTextCursor.MoveMode.KeepAnchor)
            cursor.insertText(change.text)
    finally:
        cursor.endEditBlock()
    logger.debug("Applied %d change(s) to document", len(ordered))
    return selection.map_through(changes)

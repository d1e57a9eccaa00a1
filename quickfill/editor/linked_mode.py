"""Insert proposals into a Qt editor and walk their argument placeholders."""
from __future__ import annotations

import logging
from typing import Sequence

from PySide6.QtGui import QTextCursor
from PySide6.QtWidgets import QPlainTextEdit

from quickfill.completion.proposal import CompletionProposal
from quickfill.core.config import ConfigManager
from quickfill.editor.document import QtDocumentBuffer
from quickfill.lang.compilation_unit import InteractiveCompilationUnit
from quickfill.lang.word_finder import ident_length_at

logger = logging.getLogger(__name__)


class LinkedModeModel:
    """Manages tab navigation through the argument names of an inserted proposal.

    ``groups`` and ``exit_position`` are editor (UTF-16) positions.
    """

    def __init__(self, editor: QPlainTextEdit, groups: Sequence[tuple[int, int]], exit_position: int) -> None:
        self.editor = editor
        document = editor.document()
        # QTextCursors follow later edits, so placeholders stay in place while the user types
        self._groups: list[QTextCursor] = []
        for offset, length in groups:
            cursor = QTextCursor(document)
            cursor.setPosition(offset)
            cursor.setPosition(offset + length, QTextCursor.MoveMode.KeepAnchor)
            self._groups.append(cursor)
        self._exit = QTextCursor(document)
        self._exit.setPosition(exit_position)
        self.current_group = 0
        self.active = bool(self._groups)

    def jump_to_next(self) -> bool:
        """Select the next placeholder. Returns False once the mode has been left."""

        if not self.active:
            return False
        if self.current_group >= len(self._groups):
            self.editor.setTextCursor(QTextCursor(self._exit))
            self.cancel()
            return False

        group = self._groups[self.current_group]
        cursor = self.editor.textCursor()
        cursor.setPosition(group.selectionStart())
        cursor.setPosition(group.selectionEnd(), QTextCursor.MoveMode.KeepAnchor)
        self.editor.setTextCursor(cursor)
        self.current_group += 1
        return True

    def cancel(self) -> None:
        self.active = False
        self._groups = []
        self.current_group = 0


def insert_proposal(
    editor: QPlainTextEdit,
    proposal: CompletionProposal,
    compilation_unit: InteractiveCompilationUnit,
    overwrite: bool | None = None,
    config: ConfigManager | None = None,
) -> LinkedModeModel | None:
    """Apply ``proposal`` at the editor caret and start linked mode if it asks for it."""

    config = config or ConfigManager()
    if overwrite is None:
        overwrite = config.completion_overwrite()

    document = QtDocumentBuffer(editor.document())
    offset = document.from_qt_position(editor.textCursor().position())
    end_pos = proposal.start_pos + ident_length_at(document, offset) if overwrite else offset
    length_before = document.length()

    result = proposal.apply_completion_to_document(document, compilation_unit, offset, overwrite)
    if result is None:
        return None

    caret = result.caret_offset
    groups = proposal.linked_mode_groups()
    if result.linked_mode:
        # imports are inserted above the completion and move it down
        shift = document.length() - length_before - (caret - end_pos)
        caret += shift
        groups = [(start + shift, length) for start, length in groups]

    cursor = editor.textCursor()
    cursor.setPosition(document.to_qt_position(caret))
    editor.setTextCursor(cursor)

    if not (result.linked_mode and config.linked_mode_enabled()):
        return None
    qt_groups = [
        (document.to_qt_position(start), document.to_qt_position(start + length) - document.to_qt_position(start))
        for start, length in groups
    ]
    model = LinkedModeModel(editor, qt_groups, document.to_qt_position(caret))
    model.jump_to_next()
    logger.debug("Entered linked mode with %d group(s)", len(groups))
    return model

"""Inserting proposals into a Qt editor."""
from __future__ import annotations

from pathlib import Path

import pytest
from PySide6.QtGui import QTextCursor, QTextDocument
from PySide6.QtWidgets import QPlainTextEdit

from quickfill.completion.edits import ApplyResult
from quickfill.completion.kinds import CompletionContext, ContextType, MemberKind
from quickfill.completion.proposal import CompletionProposal
from quickfill.core.config import ConfigManager
from quickfill.editor.document import QtDocumentBuffer
from quickfill.editor.linked_mode import insert_proposal
from quickfill.lang.compilation_unit import DocumentCompilationUnit


@pytest.fixture
def config(tmp_path: Path) -> ConfigManager:
    return ConfigManager(user_settings_path=tmp_path / "settings.yaml")


def editor_with(text: str) -> tuple[QPlainTextEdit, DocumentCompilationUnit]:
    editor = QPlainTextEdit()
    editor.setPlainText(text)
    cursor = editor.textCursor()
    cursor.movePosition(QTextCursor.MoveOperation.End)
    editor.setTextCursor(cursor)
    return editor, DocumentCompilationUnit(Path("module.py"), QtDocumentBuffer(editor.document()))


def curried(start_pos: int) -> CompletionProposal:
    return CompletionProposal(
        kind=MemberKind.DEF,
        context=CompletionContext(ContextType.DEFAULT),
        start_pos=start_pos,
        completion="f",
        param_names_provider=lambda: [["a"], ["b"]],
        param_types=[["int"], ["str"]],
    )


def test_tab_walks_argument_names(qt_app, config) -> None:
    editor, unit = editor_with("x = f")

    model = insert_proposal(editor, curried(4), unit, config=config)

    assert model is not None
    assert editor.toPlainText() == "x = f(a)(b)"
    assert editor.textCursor().selectedText() == "a"
    assert model.jump_to_next() is True
    assert editor.textCursor().selectedText() == "b"
    assert model.jump_to_next() is False
    assert editor.textCursor().position() == 11
    assert not model.active


def test_groups_follow_typed_arguments(qt_app, config) -> None:
    editor, unit = editor_with("x = f")
    model = insert_proposal(editor, curried(4), unit, config=config)

    editor.textCursor().insertText("alpha")
    assert model.jump_to_next() is True
    assert editor.textCursor().selectedText() == "b"
    model.jump_to_next()

    assert editor.toPlainText() == "x = f(alpha)(b)"
    assert editor.textCursor().position() == len("x = f(alpha)(b)")


def test_groups_account_for_added_import(qt_app, config) -> None:
    editor, unit = editor_with("import os\n\nx = Ord")
    proposal = CompletionProposal(
        kind=MemberKind.CLASS,
        context=CompletionContext(ContextType.NEW),
        start_pos=15,
        completion="OrderedDict",
        param_names_provider=lambda: [["data"]],
        param_types=[["dict"]],
        fully_qualified_name="collections.OrderedDict",
        need_import=True,
    )

    model = insert_proposal(editor, proposal, unit, config=config)

    assert editor.toPlainText() == "import os\nfrom collections import OrderedDict\n\nx = OrderedDict(data)"
    assert model is not None
    assert editor.textCursor().selectedText() == "data"


def test_linked_mode_can_be_disabled(qt_app, config) -> None:
    config.set("completion", {"linked_mode": False})
    editor, unit = editor_with("x = f")

    assert insert_proposal(editor, curried(4), unit, config=config) is None
    assert editor.toPlainText() == "x = f(a)(b)"
    assert editor.textCursor().position() == 11


def test_overwrite_mode_comes_from_config(qt_app, config) -> None:
    config.set("completion", {"overwrite": True, "linked_mode": True})
    editor, unit = editor_with("xs.map(g)")
    cursor = editor.textCursor()
    cursor.setPosition(4)
    editor.setTextCursor(cursor)
    proposal = CompletionProposal(
        kind=MemberKind.DEF,
        context=CompletionContext(),
        start_pos=3,
        completion="max",
        param_names_provider=lambda: [["f"]],
    )

    assert insert_proposal(editor, proposal, unit, config=config) is None
    assert editor.toPlainText() == "xs.max(g)"
    assert editor.textCursor().position() == 6


def test_closed_unit_leaves_editor_untouched(qt_app, config) -> None:
    editor, unit = editor_with("x = f")
    unit.close()

    assert insert_proposal(editor, curried(4), unit, config=config) is None
    assert editor.toPlainText() == "x = f"


def test_groups_after_astral_characters(qt_app, config) -> None:
    editor, unit = editor_with('s = "😀"\nx = f')

    model = insert_proposal(editor, curried(12), unit, config=config)

    assert editor.toPlainText() == 's = "😀"\nx = f(a)(b)'
    assert model is not None
    assert editor.textCursor().selectedText() == "a"
    model.jump_to_next()
    assert editor.textCursor().selectedText() == "b"
    model.jump_to_next()
    assert editor.textCursor().position() == editor.document().characterCount() - 1


def test_import_below_astral_docstring(qt_app) -> None:
    document = QTextDocument('"""Docs 😀😀"""\nx = Ord')
    buffer = QtDocumentBuffer(document)
    proposal = CompletionProposal(
        kind=MemberKind.CLASS,
        context=CompletionContext(),
        start_pos=18,
        completion="OrderedDict",
        fully_qualified_name="collections.OrderedDict",
        need_import=True,
    )

    result = proposal.apply_completion_to_document(
        buffer, DocumentCompilationUnit(Path("module.py"), buffer), 21, overwrite=False
    )

    assert document.toPlainText() == '"""Docs 😀😀"""\nfrom collections import OrderedDict\nx = OrderedDict'
    assert result == ApplyResult(buffer.length(), False)

"""Add-import refactoring for Python source files."""
from __future__ import annotations

import ast
import logging

from quickfill.completion.edits import ImportRefactoringError, TextChange
from quickfill.lang.compilation_unit import SourceFile

logger = logging.getLogger(__name__)


def _line_starts(text: str) -> list[int]:
    return [0] + [index + 1 for index, ch in enumerate(text) if ch == "\n"]


class AddImportStatement:
    """Computes the edits needed to make a fully qualified name importable.

    ``a.b.Name`` is imported as ``from a.b import Name`` and a dotless name as
    ``import name``. The source does not have to parse as a whole: only the
    part before the first syntax error is inspected.
    """

    def add_import(self, source_file: SourceFile, fully_qualified_name: str) -> list[TextChange]:
        parts = fully_qualified_name.split(".")
        if not all(part.isidentifier() for part in parts):
            raise ImportRefactoringError(f"Cannot import {fully_qualified_name!r}: not a qualified name")
        module, _, name = fully_qualified_name.rpartition(".")

        text = source_file.text
        tree = self._parse_header(text)
        imports = [node for node in tree.body if isinstance(node, (ast.Import, ast.ImportFrom))]
        if self._already_imported(imports, module, name):
            logger.debug("%s is already imported in %s", fully_qualified_name, source_file.path)
            return []

        starts = _line_starts(text)
        if module:
            for node in imports:
                if self._can_extend(text, node, module):
                    offset = self._offset(text, starts, node.end_lineno, node.end_col_offset)
                    return [TextChange(source_file.path, offset, offset, f", {name}")]
            statement = f"from {module} import {name}\n"
        else:
            statement = f"import {name}\n"

        line = self._insertion_line(tree)
        if line < len(starts):
            offset = starts[line]
        else:
            offset = len(text)
            if text and not text.endswith("\n"):
                statement = "\n" + statement
        return [TextChange(source_file.path, offset, offset, statement)]

    def _parse_header(self, text: str) -> ast.Module:
        try:
            return ast.parse(text)
        except SyntaxError as exc:
            if not exc.lineno or exc.lineno <= 1:
                return ast.Module(body=[], type_ignores=[])
            prefix = "".join(text.splitlines(keepends=True)[: exc.lineno - 1])
            return self._parse_header(prefix)

    def _already_imported(self, imports: list[ast.stmt], module: str, name: str) -> bool:
        for node in imports:
            if module and isinstance(node, ast.ImportFrom):
                if node.level == 0 and node.module == module:
                    if any(alias.name == name and alias.asname is None for alias in node.names):
                        return True
            elif not module and isinstance(node, ast.Import):
                if any(alias.name == name and alias.asname is None for alias in node.names):
                    return True
        return False

    def _can_extend(self, text: str, node: ast.stmt, module: str) -> bool:
        if not isinstance(node, ast.ImportFrom) or node.level != 0 or node.module != module:
            return False
        if node.lineno != node.end_lineno or any(alias.name == "*" for alias in node.names):
            return False
        segment = ast.get_source_segment(text, node) or ""
        return not segment.rstrip().endswith(")")

    def _insertion_line(self, tree: ast.Module) -> int:
        """0-based line before which a new import statement goes."""

        line = 0
        for index, node in enumerate(tree.body):
            is_docstring = (
                index == 0
                and isinstance(node, ast.Expr)
                and isinstance(node.value, ast.Constant)
                and isinstance(node.value.value, str)
            )
            if is_docstring or isinstance(node, (ast.Import, ast.ImportFrom)):
                line = node.end_lineno
            else:
                break
        return line

    def _offset(self, text: str, starts: list[int], lineno: int, col_offset: int) -> int:
        # ast columns count UTF-8 bytes
        start = starts[lineno - 1]
        end = starts[lineno] if lineno < len(starts) else len(text)
        prefix = text[start:end].encode("utf-8")[:col_offset]
        return start + len(prefix.decode("utf-8", errors="ignore"))

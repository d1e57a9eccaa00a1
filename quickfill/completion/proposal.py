"""Completion proposals and the logic that inserts them into a document."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from quickfill.completion.edits import ApplyResult, CompletionError, TextChange, TextSelection
from quickfill.completion.kinds import CompletionContext, HasArgs, MemberKind
from quickfill.editor.document import DocumentBuffer, EditableDocument
from quickfill.lang.compilation_unit import InteractiveCompilationUnit, SourceFile
from quickfill.lang.imports import AddImportStatement
from quickfill.lang.word_finder import ident_length_at, is_identifier_part

logger = logging.getLogger(__name__)

ParameterSignature = Sequence[Sequence[str]]

_TERMINATES_EXPRESSION = re.compile(r"[a-zA-Z_;)},.\n]")
_UNSET = object()


def _no_params() -> ParameterSignature:
    return []


@dataclass(frozen=True)
class CompletionProposal:
    """A resolved completion choice and how to insert it.

    Proposals are built by whatever computes completions; this class only knows
    how to render one and splice it into a buffer. Parameter names are fetched
    through ``param_names_provider`` the first time they are needed, since the
    lookup can be slow, and reused afterwards.

    ``param_types`` is stored as a tuple of tuples so proposals stay hashable.
    """

    kind: MemberKind
    context: CompletionContext
    start_pos: int
    completion: str
    display: str = ""
    display_detail: str = ""
    relevance: int = 0
    is_java: bool = False
    param_names_provider: Callable[[], ParameterSignature] = field(
        default=_no_params, repr=False, compare=False
    )
    param_types: ParameterSignature = ()
    fully_qualified_name: str = ""
    need_import: bool = False
    _param_names: object = field(default=_UNSET, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "param_types", tuple(tuple(section) for section in self.param_types))

    def explicit_param_names(self) -> ParameterSignature:
        """Parameter names per explicit section, computed at most once."""

        if self._param_names is _UNSET:
            object.__setattr__(self, "_param_names", self.param_names_provider())
        return self._param_names  # type: ignore[return-value]

    def has_args(self) -> HasArgs:
        return HasArgs.from_params(self.explicit_param_names())

    def tooltip(self) -> str:
        """Signature shown once the proposal is activated, e.g. ``(name: str)(age: int)``.

        Name and type sections are paired up positionally; when the two do not
        line up the extra entries are dropped.
        """

        names = self.explicit_param_names()
        types = self.param_types
        if len(names) != len(types) or any(len(n) != len(t) for n, t in zip(names, types)):
            logger.warning("Parameter names and types of %r differ in shape; truncating", self.completion)
        sections = (
            ", ".join(f"{name}: {tpe}" for name, tpe in zip(section_names, section_types))
            for section_names, section_types in zip(names, types)
        )
        return "".join(f"({section})" for section in sections)

    def completion_string(self, overwrite: bool, params_probably_exist: Callable[[], bool]) -> str:
        """Text inserted at ``start_pos`` when this proposal is chosen.

        The bare ``completion`` is returned for imports, and when arguments
        probably exist already while either overwriting or completing a member
        without parameter sections:

        ====================  =========  ======================  ==========
        parameter sections    overwrite  params_probably_exist   result
        ====================  =========  ======================  ==========
        none                  any        True                    bare
        none                  any        False                   bare
        one or more           False      not evaluated           with args
        one or more           True       True                    bare
        one or more           True       False                   with args
        ====================  =========  ======================  ==========

        A member with only empty sections, like ``def f()()``, renders as
        ``f()()``. ``params_probably_exist`` is only called when it matters.
        """

        if self.context.is_import:
            return self.completion
        names = self.explicit_param_names()
        if (not names or overwrite) and params_probably_exist():
            return self.completion
        return self.completion + "".join(f"({', '.join(section)})" for section in names)

    def linked_mode_groups(self) -> list[tuple[int, int]]:
        """``(offset, length)`` of every argument name in the inserted text."""

        groups: list[tuple[int, int]] = []
        offset = self.start_pos + len(self.completion)
        for section in self.explicit_param_names():
            offset += 1  # open parenthesis
            for index, name in enumerate(section):
                # each argument but the last is followed by ", "
                groups.append((offset + 2 * index, len(name)))
                offset += len(name)
            offset += 1 + 2 * max(len(section) - 1, 0)
        return groups

    def do_params_probably_exist(self, buffer: DocumentBuffer, offset: int) -> bool:
        """Guess whether the expression at ``offset`` already has its argument list.

        Only consulted in overwrite mode, where completing ``List(1).ma|p(f)``
        must not produce ``map(f)(f)``. The rest of the identifier and any
        blanks are skipped; if the next character could not start an argument
        list (an identifier, ``;``, ``)``, ``}``, ``,``, ``.`` or a newline),
        the arguments are assumed missing. Reaching the end of the buffer
        counts as missing too. This is a heuristic, not a parser.
        """

        length = buffer.length()
        position = offset
        while position < length and is_identifier_part(buffer.char_at(position)):
            position += 1
        while position < length and buffer.char_at(position) in " \t":
            position += 1
        if position >= length:
            return False
        return not _TERMINATES_EXPRESSION.match(buffer.char_at(position))

    def apply_completion_to_document(
        self,
        document: EditableDocument,
        compilation_unit: InteractiveCompilationUnit,
        offset: int,
        overwrite: bool,
        importer: AddImportStatement | None = None,
    ) -> Optional[ApplyResult]:
        """Insert the proposal, plus an import if needed, as one change.

        Returns the caret offset after insertion and whether the argument
        names should be walked in linked mode, or None when nothing was
        applied.
        """

        importer = importer or AddImportStatement()
        probably_exist: list[bool] = []

        def params_probably_exist() -> bool:
            # must run before the document changes
            if not probably_exist:
                probably_exist.append(self.do_params_probably_exist(document, offset))
            return probably_exist[0]

        completion_text = self.completion_string(overwrite, params_probably_exist)

        def _apply(source_file: SourceFile) -> ApplyResult:
            end_pos = self.start_pos + ident_length_at(document, offset) if overwrite else offset
            changes = [TextChange(source_file.path, self.start_pos, end_pos, completion_text)]
            if self.need_import:
                changes.extend(importer.add_import(source_file, self.fully_qualified_name))

            linked_mode = (
                not self.context.is_import
                and (not overwrite or not params_probably_exist())
                and any(name for section in self.explicit_param_names() for name in section)
            )
            logger.debug(
                "Completing %r over [%d, %d) with %r (%s, linked mode: %s)",
                self.completion,
                self.start_pos,
                end_pos,
                completion_text,
                self.has_args().value,
                linked_mode,
            )

            # the import shifts positions, so both edits go in together
            selection = document.apply_changes(TextSelection(end_pos), changes)
            if linked_mode:
                return ApplyResult(self.start_pos + len(completion_text), True)
            return ApplyResult(selection.offset, False)

        try:
            return compilation_unit.with_source_file(_apply)
        except CompletionError:
            logger.warning("Could not apply completion %r", self.completion, exc_info=True)
            return None

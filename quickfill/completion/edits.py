"""Edit values exchanged between proposals and documents."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple


class CompletionError(RuntimeError):
    """Base class for failures while applying a completion."""


class EditApplicationError(CompletionError):
    """Raised when a set of edits cannot be applied as one change."""


class ImportRefactoringError(CompletionError):
    """Raised when an import statement cannot be computed."""


@dataclass(frozen=True)
class TextChange:
    """Replace ``[start, end)`` of ``file`` with ``text``."""

    file: Path | None
    start: int
    end: int
    text: str

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid change range [{self.start}, {self.end})")

    @property
    def delta(self) -> int:
        return len(self.text) - (self.end - self.start)


@dataclass(frozen=True)
class TextSelection:
    offset: int
    length: int = 0

    def map_through(self, changes: list[TextChange]) -> "TextSelection":
        """Return where this caret lands once ``changes`` have been applied."""

        position = self.offset
        for change in changes:
            if change.end <= self.offset:
                position += change.delta
            elif change.start < self.offset < change.end:
                # caret was inside the replaced span
                position += change.start + len(change.text) - self.offset
        return TextSelection(position, 0)


class ApplyResult(NamedTuple):
    caret_offset: int
    linked_mode: bool

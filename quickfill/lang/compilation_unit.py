"""Compilation units hand out analysis bindings only while they are usable."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Protocol, TypeVar

from quickfill.editor.document import DocumentBuffer

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SourceFile:
    """Snapshot of a unit's path and text at the time it was requested."""

    path: Path
    text: str


class InteractiveCompilationUnit(Protocol):
    def with_source_file(self, fn: Callable[[SourceFile], T]) -> T | None:
        """Run ``fn`` with the current source if it is available."""
        ...


class DocumentCompilationUnit:
    """Compilation unit backed by an open editor buffer."""

    def __init__(self, path: Path, buffer: DocumentBuffer) -> None:
        self.path = Path(path)
        self.buffer = buffer
        self._closed = False

    @property
    def is_open(self) -> bool:
        return not self._closed

    def close(self) -> None:
        self._closed = True

    def with_source_file(self, fn: Callable[[SourceFile], T]) -> T | None:
        if self._closed:
            logger.debug("Compilation unit %s is closed; no source available", self.path)
            return None
        return fn(SourceFile(self.path, self.buffer.text()))

"""Closed tag sets describing completion proposals."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence


class MemberKind(Enum):
    """The kind of symbol a completion proposal refers to."""

    CLASS = "class"
    TRAIT = "trait"
    TYPE = "type"
    OBJECT = "object"
    PACKAGE = "package"
    PACKAGE_OBJECT = "package_object"
    DEF = "def"
    VAL = "val"
    VAR = "var"


class ContextType(Enum):
    """Syntactic position in which completion was invoked."""

    DEFAULT = "default"
    APPLY = "apply"
    NEW = "new"
    IMPORT = "import"


@dataclass(frozen=True)
class CompletionContext:
    """Context related to the invocation of the completion."""

    context_type: ContextType = ContextType.DEFAULT

    @property
    def is_import(self) -> bool:
        return self.context_type is ContextType.IMPORT


class HasArgs(Enum):
    """Arity shape of a parameter signature."""

    NO_ARGS = "no_args"
    EMPTY_ARGS = "empty_args"
    NON_EMPTY_ARGS = "non_empty_args"

    @classmethod
    def from_params(cls, params: Sequence[Sequence[object]]) -> "HasArgs":
        """Tell whether a member should be adorned with parentheses.

        ``[]`` is a field-like member, ``[[]]`` a zero-argument method and
        anything else has at least one parameter list worth rendering.
        """

        if not params:
            return cls.NO_ARGS
        if len(params) == 1 and not params[0]:
            return cls.EMPTY_ARGS
        return cls.NON_EMPTY_ARGS

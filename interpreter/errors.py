"""
interpreter/errors.py
=====================
Exceptions raised while resolving names in a scenario.

Every resolution failure is a :class:`SemanticError`: the syntax node
that triggered it cannot be evaluated and the interpreter driver should
abort it.
"""

from __future__ import annotations


class SemanticError(Exception):
    """The scenario refers to something that cannot be resolved."""


class NameNotFoundError(SemanticError):
    """No binding exists for *name* in the searched frames."""

    def __init__(self, name: str, where: str = "") -> None:
        self.name = name
        self.where = where
        detail = f" in scope {where!r}" if where else ""
        super().__init__(f"No such name {name!r}{detail}")


class AmbiguousReferenceError(SemanticError):
    """A qualified name matched in more than one same-named child scope."""

    def __init__(self, name: str, matches: int) -> None:
        self.name = name
        self.matches = matches
        super().__init__(
            f"Qualified name {name!r} is ambiguous ({matches} candidates)"
        )

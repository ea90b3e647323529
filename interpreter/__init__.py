"""
interpreter — Scenario name resolution
======================================

Modules
-------
scope
    :class:`Scope`, :class:`GlobalEnvironment` and the frame tree behind
    them (:class:`FrameArena`, :class:`EnvironmentFrame`).
element
    :class:`Element` tagged variant and :class:`ElementKind`.
errors
    :class:`SemanticError` and its resolution-failure subclasses.
"""

from .element import Element, ElementKind
from .errors import AmbiguousReferenceError, NameNotFoundError, SemanticError
from .scope import EnvironmentFrame, FrameArena, GlobalEnvironment, Scope

__all__ = [
    "Element",
    "ElementKind",
    "SemanticError",
    "NameNotFoundError",
    "AmbiguousReferenceError",
    "EnvironmentFrame",
    "FrameArena",
    "GlobalEnvironment",
    "Scope",
]

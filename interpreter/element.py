"""
interpreter/element.py
======================
Values bound to names in a scenario scope.

:class:`Element` is a closed tagged variant: the set of construct kinds
is the :class:`ElementKind` enum and grows only by adding members to it.
The resolver stores and returns elements without looking inside
``value``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ElementKind(Enum):
    """Scenario construct kinds the interpreter can bind to a name."""
    SCENARIO_OBJECT = "ScenarioObject"
    ENTITY_SELECTION = "EntitySelection"
    PARAMETER = "Parameter"
    VARIABLE = "Variable"
    STORYBOARD_ELEMENT = "StoryboardElement"
    CATALOG_ENTRY = "CatalogEntry"
    UNSPECIFIED = "Unspecified"


# Kinds that may be registered as spawned entities.
ENTITY_KINDS = frozenset({ElementKind.SCENARIO_OBJECT, ElementKind.ENTITY_SELECTION})


@dataclass(frozen=True)
class Element:
    """A resolved scenario construct.

    Attributes
    ----------
    kind : ElementKind
        Variant tag.
    value : Any
        Opaque payload (parsed syntax node, parameter value, ...).
    name : str or None
        Name the construct was declared with, when it has one.
    """

    kind: ElementKind
    value: Any = None
    name: Optional[str] = None

    # ── constructors ──────────────────────────────────────────────────────

    @classmethod
    def scenario_object(cls, name: str, value: Any = None) -> "Element":
        return cls(ElementKind.SCENARIO_OBJECT, value, name)

    @classmethod
    def entity_selection(cls, name: str, members: Any = ()) -> "Element":
        return cls(ElementKind.ENTITY_SELECTION, tuple(members), name)

    @classmethod
    def parameter(cls, name: str, value: Any) -> "Element":
        return cls(ElementKind.PARAMETER, value, name)

    @classmethod
    def variable(cls, name: str, value: Any) -> "Element":
        return cls(ElementKind.VARIABLE, value, name)

    @classmethod
    def storyboard_element(cls, name: str, value: Any = None) -> "Element":
        return cls(ElementKind.STORYBOARD_ELEMENT, value, name)

    @classmethod
    def unspecified(cls) -> "Element":
        return cls(ElementKind.UNSPECIFIED)

    # ── predicates ────────────────────────────────────────────────────────

    def is_entity(self) -> bool:
        """True for scenario objects and entity selections."""
        return self.kind in ENTITY_KINDS

#!/usr/bin/env python3
"""
interpreter/scope.py
====================
Lexical name resolution for the scenario interpreter.

A scenario nests acts inside a storyboard, maneuvers inside acts, events
inside maneuvers, and every level may declare names of its own.  This
module keeps one tree of :class:`EnvironmentFrame` objects per scenario
and answers two kinds of question against it:

* **unqualified** lookup (``"speed"``) walks *up* from the current frame
  to the root; the nearest enclosing binding wins.
* **qualified** lookup (``"act_1.maneuver.speed"``) walks *down* a path
  of child-scope names and then reads the final name from the frame it
  reached.

Frames are stored in a :class:`FrameArena` and refer to each other by
integer handle, so parent links never form ownership cycles.
:class:`Scope` is the cheap, copyable handle the interpreter passes
around; every Scope derived from one root shares the same arena and the
same :class:`GlobalEnvironment`.
"""

from __future__ import annotations

import copy
import logging
import os
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Union

from interpreter.element import Element
from interpreter.errors import (
    AmbiguousReferenceError,
    NameNotFoundError,
    SemanticError,
)

log = logging.getLogger("scope")

SEPARATOR = "."
DIRNAME_SUBSTITUTION = "$(dirname)"

PathLike = Union[str, "os.PathLike[str]"]


# ── Frame ─────────────────────────────────────────────────────────────────────

@dataclass
class EnvironmentFrame:
    """One node of the scope tree.

    Attributes
    ----------
    name : str
        Scope name; ``""`` for the root and for anonymous frames.
    parent : int or None
        Handle of the enclosing frame, ``None`` only at the root.
    bindings : dict[str, list[Element]]
        Every element inserted under a name, oldest first.
    named_children : dict[str, list[int]]
        Child handles by name; several children may share one name.
    anonymous_children : list[int]
        Handles of children declared without a name.
    """

    name: str
    parent: Optional[int]
    bindings: Dict[str, List[Element]] = field(default_factory=dict)
    named_children: Dict[str, List[int]] = field(default_factory=dict)
    anonymous_children: List[int] = field(default_factory=list)

    def lookup(self, name: str) -> Optional[Element]:
        """Latest binding of *name* in this frame only."""
        elements = self.bindings.get(name)
        return elements[-1] if elements else None


class FrameArena:
    """Owns every frame of one scope tree; handle ``ROOT`` is the root."""

    ROOT = 0

    def __init__(self) -> None:
        self._frames: List[EnvironmentFrame] = [EnvironmentFrame(name="", parent=None)]

    def __getitem__(self, handle: int) -> EnvironmentFrame:
        return self._frames[handle]

    def __len__(self) -> int:
        return len(self._frames)

    # ── structure ─────────────────────────────────────────────────────────

    def add_child(self, parent: int, name: str) -> int:
        """Create a frame under *parent* and return its handle."""
        handle = len(self._frames)
        self._frames.append(EnvironmentFrame(name=name, parent=parent))
        owner = self._frames[parent]
        if name:
            owner.named_children.setdefault(name, []).append(handle)
        else:
            owner.anonymous_children.append(handle)
        return handle

    def ancestors(self, handle: int) -> Iterator[int]:
        """Yield *handle* and then each enclosing frame up to the root."""
        current: Optional[int] = handle
        while current is not None:
            yield current
            current = self._frames[current].parent

    def qualified_name(self, handle: int) -> str:
        """Dotted path of named frames from the root down to *handle*."""
        names = [self._frames[h].name for h in self.ancestors(handle)]
        return SEPARATOR.join(reversed([n for n in names if n]))

    def insert(self, handle: int, name: str, element: Element) -> None:
        self._frames[handle].bindings.setdefault(name, []).append(element)

    # ── child traversal ───────────────────────────────────────────────────

    def child_scopes(self, handle: int, name: str) -> List[int]:
        """Children of *handle* called *name*, looking through anonymous frames."""
        frame = self._frames[handle]
        found = list(frame.named_children.get(name, ()))
        for anonymous in frame.anonymous_children:
            found.extend(self.child_scopes(anonymous, name))
        return found

    def _lookup_anonymous(self, handle: int, name: str) -> Optional[Element]:
        # Breadth-first over the anonymous descendants of *handle*.
        queue = deque(self._frames[handle].anonymous_children)
        while queue:
            frame = self._frames[queue.popleft()]
            element = frame.lookup(name)
            if element is not None:
                return element
            queue.extend(frame.anonymous_children)
        return None

    # ── lookup ────────────────────────────────────────────────────────────

    def lookup_unqualified(self, handle: int, name: str) -> Element:
        """Nearest binding of *name* from *handle* upward."""
        for current in self.ancestors(handle):
            element = self._frames[current].lookup(name)
            if element is None:
                element = self._lookup_anonymous(current, name)
            if element is not None:
                return element
        log.debug("unqualified lookup failed name=%s scope=%s",
                  name, self.qualified_name(handle))
        raise NameNotFoundError(name, self.qualified_name(handle))

    def lookup_qualified(
        self, handle: int, segments: Sequence[str], name: str,
    ) -> Element:
        """Resolve ``segments[0]. ... .segments[-1].name`` from *handle*.

        The outermost segment is found lexically: the nearest frame (from
        *handle* upward) that has a child of that name anchors the path.
        The rest of the path only descends.
        """
        qualified = SEPARATOR.join([*segments, name])
        for current in self.ancestors(handle):
            if not self.child_scopes(current, segments[0]):
                continue
            matches = self._match_path(current, segments, name)
            if len(matches) == 1:
                return matches[0]
            if len(matches) > 1:
                log.warning("ambiguous qualified name=%s anchor=%s matches=%d",
                            qualified, self.qualified_name(current), len(matches))
                raise AmbiguousReferenceError(qualified, len(matches))
            break
        log.debug("qualified lookup failed name=%s scope=%s",
                  qualified, self.qualified_name(handle))
        raise NameNotFoundError(qualified, self.qualified_name(handle))

    def _match_path(
        self, handle: int, segments: Sequence[str], name: str,
    ) -> List[Element]:
        matches: List[Element] = []
        for child in self.child_scopes(handle, segments[0]):
            if len(segments) == 1:
                element = self._frames[child].lookup(name)
                if element is not None:
                    matches.append(element)
            else:
                matches.extend(self._match_path(child, segments[1:], name))
        return matches


# ── Global environment ────────────────────────────────────────────────────────

class GlobalEnvironment:
    """Scenario-wide state shared by every Scope derived from one root.

    Parameters
    ----------
    pathname : str or PathLike
        Path of the scenario file; its directory replaces ``$(dirname)``.
    """

    def __init__(self, pathname: PathLike = "") -> None:
        self.pathname = Path(pathname)
        self.entities: Dict[str, Element] = {}

    def entity_ref(self, name: str) -> Element:
        """Return the spawned entity called *name*."""
        try:
            return self.entities[name]
        except KeyError:
            raise NameNotFoundError(name, "global entities") from None

    def is_added_entity(self, name: str) -> bool:
        return name in self.entities

    def add_entity(self, name: str, element: Element) -> None:
        """Register a spawned scenario object or entity selection."""
        if not element.is_entity():
            raise SemanticError(
                f"Entity {name!r} must be a ScenarioObject or EntitySelection, "
                f"got {element.kind.value}"
            )
        if name in self.entities:
            raise SemanticError(f"Entity {name!r} is already added")
        self.entities[name] = element
        log.info("entity added name=%s kind=%s", name, element.kind.value)

    def remove_entity(self, name: str) -> Element:
        """Forget a despawned entity and return its element."""
        element = self.entity_ref(name)
        del self.entities[name]
        log.info("entity removed name=%s", name)
        return element

    def substitute(self, text: str) -> str:
        """Expand ``$(dirname)`` to the scenario file's directory."""
        return text.replace(DIRNAME_SUBSTITUTION, str(self.pathname.parent))


# ── Scope handle ──────────────────────────────────────────────────────────────

class Scope:
    """Copyable handle onto one frame of a scope tree.

    ``Scope(pathname)`` creates a new tree (root frame plus a fresh
    :class:`GlobalEnvironment`).  :meth:`make_child_scope` and
    :func:`copy.copy` derive handles that share that tree.

    Attributes
    ----------
    name : str
        Human-readable name of the scope.
    actors : list[str]
        Entity names the current scope may act upon.
    """

    def __init__(self, pathname: PathLike = "", name: str = "") -> None:
        self._arena = FrameArena()
        self._frame = FrameArena.ROOT
        self._global = GlobalEnvironment(pathname)
        self.name = name
        self.actors: List[str] = []

    @classmethod
    def _derive(
        cls,
        arena: FrameArena,
        frame: int,
        global_environment: GlobalEnvironment,
        name: str,
        actors: Sequence[str] = (),
    ) -> "Scope":
        scope = cls.__new__(cls)
        scope._arena = arena
        scope._frame = frame
        scope._global = global_environment
        scope.name = name
        scope.actors = list(actors)
        return scope

    def __copy__(self) -> "Scope":
        return Scope._derive(self._arena, self._frame, self._global, self.name, self.actors)

    def copy(self) -> "Scope":
        """Shallow copy: same frame, same global environment."""
        return copy.copy(self)

    def __repr__(self) -> str:
        return f"Scope(name={self.name!r}, qualified_name={self.qualified_name!r})"

    # ── accessors ─────────────────────────────────────────────────────────

    @property
    def frame(self) -> EnvironmentFrame:
        return self._arena[self._frame]

    @property
    def global_environment(self) -> GlobalEnvironment:
        return self._global

    @property
    def qualified_name(self) -> str:
        return self._arena.qualified_name(self._frame)

    def shares_tree_with(self, other: "Scope") -> bool:
        return self._arena is other._arena and self._global is other._global

    # ── binding ───────────────────────────────────────────────────────────

    def make_child_scope(self, name: str) -> "Scope":
        """New frame under this one; ``name=""`` makes it anonymous."""
        handle = self._arena.add_child(self._frame, name)
        log.debug("child scope %r created under %r", name, self.qualified_name)
        return Scope._derive(self._arena, handle, self._global, name)

    def insert(self, name: str, element: Element) -> None:
        """Bind *element* to *name* here; earlier bindings are kept."""
        _check_name(name)
        self._arena.insert(self._frame, name, element)

    def find_element(self, name: str) -> Element:
        """Resolve a bare or dotted name from this scope.

        Raises
        ------
        NameNotFoundError
            Nothing matched.
        AmbiguousReferenceError
            A qualified path matched in more than one same-named scope.
        """
        _check_name(name)
        *segments, last = name.split(SEPARATOR)
        if any(not part for part in segments) or not last:
            raise SemanticError(f"Malformed qualified name {name!r}")
        if segments:
            return self._arena.lookup_qualified(self._frame, segments, last)
        return self._arena.lookup_unqualified(self._frame, last)


def _check_name(name: str) -> None:
    if not name:
        raise SemanticError("Name must not be empty")

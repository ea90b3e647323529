#!/usr/bin/env python3
"""
Name-resolution tests for scopes, frames and the global environment.
"""

from __future__ import annotations

import copy
import unittest

from interpreter.element import Element, ElementKind
from interpreter.errors import (
    AmbiguousReferenceError,
    NameNotFoundError,
    SemanticError,
)
from interpreter.scope import FrameArena, GlobalEnvironment, Scope


class UnqualifiedLookupTests(unittest.TestCase):
    def setUp(self) -> None:
        self.root = Scope("/scenarios/cut_in.xosc")
        self.storyboard = self.root.make_child_scope("storyboard")
        self.act = self.storyboard.make_child_scope("act")

    def test_child_binding_shadows_parent(self) -> None:
        self.storyboard.insert("x", Element.parameter("x", 1))
        self.act.insert("x", Element.parameter("x", 2))

        self.assertEqual(self.act.find_element("x").value, 2)
        self.assertEqual(self.storyboard.find_element("x").value, 1)

    def test_falls_back_to_nearest_ancestor(self) -> None:
        self.root.insert("speed", Element.parameter("speed", 10.0))
        self.storyboard.insert("speed", Element.parameter("speed", 20.0))
        maneuver = self.act.make_child_scope("maneuver")

        self.assertEqual(maneuver.find_element("speed").value, 20.0)

    def test_missing_everywhere_raises(self) -> None:
        with self.assertRaises(NameNotFoundError) as ctx:
            self.act.find_element("nowhere")
        self.assertEqual(ctx.exception.name, "nowhere")
        self.assertIsInstance(ctx.exception, SemanticError)

    def test_later_insertion_is_preferred_without_removing_earlier(self) -> None:
        first = Element.parameter("x", "first")
        second = Element.parameter("x", "second")
        self.act.insert("x", first)
        self.act.insert("x", second)

        self.assertIs(self.act.find_element("x"), second)
        self.assertEqual(self.act.frame.bindings["x"], [first, second])

    def test_child_bindings_are_invisible_to_parent(self) -> None:
        self.act.insert("local", Element.variable("local", 3))
        with self.assertRaises(NameNotFoundError):
            self.storyboard.find_element("local")

    def test_anonymous_child_bindings_are_visible_to_parent(self) -> None:
        anonymous = self.act.make_child_scope("")
        anonymous.insert("hidden", Element.parameter("hidden", 5))

        self.assertEqual(self.act.find_element("hidden").value, 5)
        with self.assertRaises(NameNotFoundError):
            self.storyboard.find_element("hidden")

    def test_empty_name_is_rejected(self) -> None:
        with self.assertRaises(SemanticError):
            self.act.insert("", Element.unspecified())
        with self.assertRaises(SemanticError):
            self.act.find_element("")


class QualifiedLookupTests(unittest.TestCase):
    def setUp(self) -> None:
        self.a = Scope()
        self.b = self.a.make_child_scope("B")
        self.c = self.b.make_child_scope("C")
        self.a.insert("v", Element.parameter("v", "a"))
        self.b.insert("v", Element.parameter("v", "b"))
        self.c.insert("v", Element.parameter("v", "c"))

    def test_descends_path_and_reads_final_frame(self) -> None:
        self.assertEqual(self.a.find_element("B.C.v").value, "c")
        self.assertEqual(self.a.find_element("B.v").value, "b")

    def test_final_name_is_not_searched_upward(self) -> None:
        self.a.insert("only_in_a", Element.parameter("only_in_a", 0))
        with self.assertRaises(NameNotFoundError):
            self.a.find_element("B.C.only_in_a")

    def test_unknown_segment_raises(self) -> None:
        with self.assertRaises(NameNotFoundError):
            self.a.find_element("B.X.v")

    def test_first_segment_is_found_lexically(self) -> None:
        sibling = self.a.make_child_scope("D")
        self.assertEqual(sibling.find_element("B.C.v").value, "c")

    def test_same_named_children_branch_on_remaining_path(self) -> None:
        twin = self.a.make_child_scope("B")
        twin.make_child_scope("E").insert("w", Element.parameter("w", "twin"))

        self.assertEqual(self.a.find_element("B.E.w").value, "twin")
        self.assertEqual(self.a.find_element("B.C.v").value, "c")

    def test_two_full_matches_are_ambiguous(self) -> None:
        twin = self.a.make_child_scope("B")
        twin.insert("v", Element.parameter("v", "twin"))

        with self.assertRaises(AmbiguousReferenceError) as ctx:
            self.a.find_element("B.v")
        self.assertEqual(ctx.exception.matches, 2)

    def test_named_scope_inside_anonymous_frame_is_reachable(self) -> None:
        anonymous = self.a.make_child_scope("")
        anonymous.make_child_scope("F").insert("z", Element.parameter("z", 9))

        self.assertEqual(self.a.find_element("F.z").value, 9)

    def test_malformed_path_is_rejected(self) -> None:
        for name in ("B..v", ".v", "B.C."):
            with self.subTest(name=name):
                with self.assertRaises(SemanticError):
                    self.a.find_element(name)


class ScopeHandleTests(unittest.TestCase):
    def test_copy_shares_frame_and_global_environment(self) -> None:
        root = Scope(name="root")
        root.actors.append("ego")
        clone = copy.copy(root)
        clone.insert("x", Element.parameter("x", 1))

        self.assertTrue(clone.shares_tree_with(root))
        self.assertIs(clone.frame, root.frame)
        self.assertEqual(root.find_element("x").value, 1)
        self.assertEqual(clone.actors, ["ego"])
        clone.actors.append("npc")
        self.assertEqual(root.actors, ["ego"])

    def test_child_scope_starts_without_actors(self) -> None:
        root = Scope()
        root.actors.append("ego")
        child = root.make_child_scope("act")

        self.assertEqual(child.actors, [])
        self.assertEqual(child.name, "act")
        self.assertIs(child.global_environment, root.global_environment)

    def test_qualified_name_skips_anonymous_frames(self) -> None:
        root = Scope()
        act = root.make_child_scope("story").make_child_scope("").make_child_scope("act")
        self.assertEqual(act.qualified_name, "story.act")
        self.assertEqual(root.qualified_name, "")

    def test_arena_tracks_parent_handles(self) -> None:
        arena = FrameArena()
        child = arena.add_child(FrameArena.ROOT, "a")
        grandchild = arena.add_child(child, "b")

        self.assertEqual(arena[grandchild].parent, child)
        self.assertEqual(list(arena.ancestors(grandchild)), [grandchild, child, FrameArena.ROOT])
        self.assertEqual(len(arena), 3)


class GlobalEnvironmentTests(unittest.TestCase):
    def setUp(self) -> None:
        self.env = GlobalEnvironment("/scenarios/highway/cut_in.xosc")

    def test_entity_ref_and_existence_check(self) -> None:
        ego = Element.scenario_object("ego", {"category": "car"})
        self.env.add_entity("ego", ego)

        self.assertIs(self.env.entity_ref("ego"), ego)
        self.assertTrue(self.env.is_added_entity("ego"))
        self.assertFalse(self.env.is_added_entity("npc"))
        with self.assertRaises(NameNotFoundError):
            self.env.entity_ref("npc")

    def test_only_entities_can_be_added_once(self) -> None:
        with self.assertRaises(SemanticError):
            self.env.add_entity("p", Element.parameter("p", 1))
        self.env.add_entity("group", Element.entity_selection("group", ["a", "b"]))
        with self.assertRaises(SemanticError):
            self.env.add_entity("group", Element.entity_selection("group"))
        self.assertEqual(self.env.entity_ref("group").kind, ElementKind.ENTITY_SELECTION)

    def test_remove_entity(self) -> None:
        self.env.add_entity("npc", Element.scenario_object("npc"))
        self.env.remove_entity("npc")
        self.assertFalse(self.env.is_added_entity("npc"))
        with self.assertRaises(NameNotFoundError):
            self.env.remove_entity("npc")

    def test_dirname_substitution(self) -> None:
        self.assertEqual(
            self.env.substitute("$(dirname)/map/lanelet2_map.osm"),
            "/scenarios/highway/map/lanelet2_map.osm",
        )


if __name__ == "__main__":
    unittest.main()

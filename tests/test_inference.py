"""Tests for naming-convention foreign key inference."""

import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "packages" / "core_engine" / "src"))

from erd_core.inference import infer_relationships, resolve_target
from erd_core.model import Column, Relationship, Table


def _table(name, *column_names):
    return Table(id=name, name=name, columns=[Column(name=c, type="int") for c in column_names])


class ResolveTargetTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tables = [
            _table("user"),
            _table("users"),
            _table("posts"),
            _table("boxes"),
            _table("nodes", "parent_id"),
        ]
        self.lookup = {t.name: t for t in self.tables}
        self.owner = self.tables[-1]

    def test_exact_match_wins_over_plural(self) -> None:
        target = resolve_target("user_id", self.owner, self.lookup)
        self.assertEqual("user", target.name)

    def test_simple_plural(self) -> None:
        self.assertEqual("posts", resolve_target("post_id", self.owner, self.lookup).name)

    def test_alternate_plural(self) -> None:
        self.assertEqual("boxes", resolve_target("box_id", self.owner, self.lookup).name)

    def test_parent_id_is_self_reference(self) -> None:
        self.assertIs(self.owner, resolve_target("parent_id", self.owner, self.lookup))

    def test_unresolved(self) -> None:
        self.assertIsNone(resolve_target("carrier_id", self.owner, self.lookup))

    def test_non_id_column(self) -> None:
        self.assertIsNone(resolve_target("users", self.owner, self.lookup))

    def test_no_dictionary_pluralization(self) -> None:
        lookup = {"categories": _table("categories")}
        self.assertIsNone(resolve_target("category_id", self.owner, lookup))


class InferRelationshipsTests(unittest.TestCase):
    def test_marks_foreign_keys_and_builds_edges(self) -> None:
        users = _table("users", "id")
        posts = _table("posts", "id", "user_id")
        comments = _table("comments", "id", "post_id", "user_id")

        relationships, messages = infer_relationships([users, posts, comments])

        self.assertEqual(
            [
                Relationship(source="posts", target="users", label="user_id"),
                Relationship(source="comments", target="posts", label="post_id"),
                Relationship(source="comments", target="users", label="user_id"),
            ],
            relationships,
        )
        self.assertEqual(3, len(messages))
        self.assertIn("posts.user_id → users", messages[0])
        self.assertTrue(posts.get_column("user_id").is_foreign_key)
        self.assertFalse(posts.get_column("id").is_foreign_key)
        self.assertFalse(users.get_column("id").is_foreign_key)

    def test_parent_id_without_parent_table(self) -> None:
        categories = _table("categories", "id", "parent_id")
        relationships, _ = infer_relationships([categories])
        self.assertEqual([Relationship("categories", "categories", "parent_id")], relationships)
        self.assertTrue(relationships[0].is_self_reference)
        self.assertTrue(categories.get_column("parent_id").is_foreign_key)

    def test_parent_id_ignores_parents_table(self) -> None:
        parents = _table("parents", "id")
        nodes = _table("nodes", "id", "parent_id")
        relationships, _ = infer_relationships([parents, nodes])
        self.assertEqual("nodes", relationships[0].target)

    def test_unresolved_id_column_is_left_plain(self) -> None:
        orders = _table("orders", "id", "external_id")
        relationships, messages = infer_relationships([orders])
        self.assertEqual([], relationships)
        self.assertEqual([], messages)
        self.assertFalse(orders.get_column("external_id").is_foreign_key)

    def test_table_declared_later_is_resolved(self) -> None:
        orders = _table("orders", "id", "customer_id")
        customers = _table("customers", "id")
        relationships, _ = infer_relationships([orders, customers])
        self.assertEqual("customers", relationships[0].target)

    def test_duplicate_table_names_resolve_to_first(self) -> None:
        first = _table("users", "id")
        second = _table("users", "id", "email")
        posts = _table("posts", "user_id")
        relationships, _ = infer_relationships([first, second, posts])
        self.assertEqual(1, len(relationships))
        self.assertEqual("users", relationships[0].target)

    def test_empty(self) -> None:
        self.assertEqual(([], []), infer_relationships([]))


if __name__ == "__main__":
    unittest.main()

"""Tests for the song catalog index."""

from __future__ import annotations

import io

import pytest

from smf_library.errors import DuplicateKeyError, NotFoundError, ValidationError
from smf_library.model.catalog import CatalogIndex, TraversalOrder
from smf_library.model.song import Song


def song(name: str) -> Song:
    return Song(name=name)


def build(*names: str) -> CatalogIndex:
    catalog = CatalogIndex()
    for name in names:
        catalog.insert(song(name))
    return catalog


BALANCED = ("m", "d", "t", "b", "f", "p", "z")


# ---------------------------------------------------------------------------
# Insert / lookup
# ---------------------------------------------------------------------------

class TestInsert:
    def test_in_order_is_sorted(self):
        catalog = build("c", "a", "b")
        assert catalog.names() == ["a", "b", "c"]
        assert [s.name for s in catalog] == ["a", "b", "c"]
        assert len(catalog) == 3

    def test_shape_follows_insertion(self):
        catalog = build("c", "a", "b")
        assert catalog.root.key == "c"
        assert catalog.root.left.key == "a"
        assert catalog.root.left.right.key == "b"
        assert catalog.root.right is None

    def test_duplicate_rejected(self):
        catalog = build("a", "b")
        original = catalog.find("a")
        with pytest.raises(DuplicateKeyError):
            catalog.insert(song("a"))
        assert len(catalog) == 2
        assert catalog.find("a") is original

    def test_unnamed_song_rejected(self):
        with pytest.raises(ValidationError):
            CatalogIndex().insert(Song())

    def test_find_and_contains(self):
        catalog = build(*BALANCED)
        assert catalog.find("p").name == "p"
        assert catalog.find("q") is None
        assert "z" in catalog
        assert "q" not in catalog
        assert 3 not in catalog

    def test_empty_catalog(self):
        catalog = CatalogIndex()
        assert catalog.names() == []
        assert list(catalog) == []
        assert catalog.find("a") is None

    def test_sorted_inserts_do_not_recurse(self):
        names = [f"song{index:05d}.mid" for index in range(2000)]
        catalog = build(*names)
        assert catalog.names() == names
        assert catalog.names(TraversalOrder.POST_ORDER)[-1] == names[0]
        assert catalog.remove(names[0]).name == names[0]
        assert len(catalog) == 1999


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------

class TestTraversal:
    def test_pre_order(self):
        assert build(*BALANCED).names(TraversalOrder.PRE_ORDER) == list("mdbftpz")

    def test_in_order(self):
        assert build(*BALANCED).names(TraversalOrder.IN_ORDER) == list("bdfmptz")

    def test_post_order(self):
        assert build(*BALANCED).names(TraversalOrder.POST_ORDER) == list("bfdpztm")

    def test_traverse_calls_visitor(self):
        seen = []
        build(*BALANCED).traverse(TraversalOrder.IN_ORDER, lambda node: seen.append(node.key))
        assert seen == list("bdfmptz")

    def test_write_names(self):
        fp = io.StringIO()
        build("b", "a").write_names(fp)
        assert fp.getvalue() == "a\nb\n"


# ---------------------------------------------------------------------------
# Remove
# ---------------------------------------------------------------------------

class TestRemove:
    def test_leaf(self):
        catalog = build(*BALANCED)
        assert catalog.remove("b").name == "b"
        assert catalog.root.left.left is None
        assert catalog.names() == list("dfmptz")

    def test_remove_keeps_order(self):
        catalog = build("c", "a", "b")
        catalog.remove("a")
        assert catalog.names() == ["b", "c"]

    def test_one_child(self):
        catalog = build("m", "d", "b")
        catalog.remove("d")
        assert catalog.root.left.key == "b"
        assert catalog.names() == ["b", "m"]

    def test_two_children_takes_successor(self):
        catalog = build(*BALANCED)
        removed = catalog.remove("d")
        assert removed.name == "d"
        assert catalog.root.left.key == "f"
        assert catalog.root.left.song.name == "f"
        assert catalog.root.left.right is None
        assert catalog.names() == list("bfmptz")
        assert len(catalog) == 6

    def test_root_with_two_children(self):
        catalog = build(*BALANCED)
        catalog.remove("m")
        assert catalog.root.key == "p"
        assert catalog.names() == list("bdfptz")

    def test_single_root(self):
        catalog = build("a")
        catalog.remove("a")
        assert catalog.root is None
        assert len(catalog) == 0

    def test_missing(self):
        catalog = build(*BALANCED)
        with pytest.raises(NotFoundError):
            catalog.remove("q")
        with pytest.raises(LookupError):
            CatalogIndex().remove("q")
        assert len(catalog) == 7

    def test_remove_all(self):
        catalog = build(*BALANCED)
        for name in ("m", "t", "b", "z", "d", "p", "f"):
            catalog.remove(name)
        assert catalog.root is None
        assert len(catalog) == 0

    def test_clear(self):
        catalog = build(*BALANCED)
        catalog.clear()
        assert len(catalog) == 0
        assert catalog.names() == []

"""Catalog of parsed songs: a binary search tree keyed by song name.

Each node owns its Song and its two children; nodes never point back at
their parent.  Removal walks down from the root keeping track of the slot
(parent + side) that holds the current node, and a node with two children
takes over its in-order successor's payload before the successor's old
position is unlinked.

Walks are iterative: catalogs built from sorted directory listings are
degenerate (one long right spine) and would exceed the recursion limit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, TextIO

from smf_library.errors import DuplicateKeyError, NotFoundError, ValidationError
from smf_library.model.song import Song


class TraversalOrder(Enum):
    PRE_ORDER = "pre"
    IN_ORDER = "in"
    POST_ORDER = "post"


@dataclass
class CatalogNode:
    key: str
    song: Song
    left: CatalogNode | None = None
    right: CatalogNode | None = None


Visitor = Callable[[CatalogNode], None]


class CatalogIndex:
    """Ordered, key-unique index of songs by name."""

    def __init__(self) -> None:
        self.root: CatalogNode | None = None
        self._size = 0

    # -- insert / remove ----------------------------------------------------

    def insert(self, song: Song) -> None:
        """Catalog *song* under ``song.name``.

        Raises :class:`DuplicateKeyError` (leaving the tree untouched) when
        the name is taken; the caller keeps the song.
        """
        key = song.name
        if not key:
            raise ValidationError("cannot catalog a song without a name")

        new_node = CatalogNode(key=key, song=song)
        if self.root is None:
            self.root = new_node
            self._size += 1
            return

        node = self.root
        while True:
            if key == node.key:
                raise DuplicateKeyError(f"song '{key}' is already cataloged")
            if key < node.key:
                if node.left is None:
                    node.left = new_node
                    break
                node = node.left
            else:
                if node.right is None:
                    node.right = new_node
                    break
                node = node.right
        self._size += 1

    def remove(self, name: str) -> Song:
        """Remove and return the song cataloged as *name*."""
        parent: CatalogNode | None = None
        side = ""
        node = self.root
        while node is not None and node.key != name:
            parent = node
            side = "left" if name < node.key else "right"
            node = getattr(node, side)
        if node is None:
            raise NotFoundError(f"song '{name}' is not cataloged")

        removed = node.song
        if node.left is not None and node.right is not None:
            # Swap payloads with the in-order successor, then unlink the
            # successor's position (it has no left child).
            parent, side, successor = node, "right", node.right
            while successor.left is not None:
                parent, side, successor = successor, "left", successor.left
            node.key, successor.key = successor.key, node.key
            node.song, successor.song = successor.song, node.song
            node = successor

        child = node.left if node.left is not None else node.right
        if parent is None:
            self.root = child
        else:
            setattr(parent, side, child)
        self._size -= 1
        return removed

    def clear(self) -> None:
        self.root = None
        self._size = 0

    # -- lookup -------------------------------------------------------------

    def find_node(self, name: str) -> CatalogNode | None:
        node = self.root
        while node is not None:
            if name == node.key:
                return node
            node = node.left if name < node.key else node.right
        return None

    def find(self, name: str) -> Song | None:
        """Return the song cataloged as *name*, or None."""
        node = self.find_node(name)
        return node.song if node is not None else None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find_node(name) is not None

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Song]:
        """Songs in ascending name order."""
        for node in self.iter_nodes(TraversalOrder.IN_ORDER):
            yield node.song

    # -- traversal ----------------------------------------------------------

    def iter_nodes(self, order: TraversalOrder = TraversalOrder.IN_ORDER) -> Iterator[CatalogNode]:
        if self.root is None:
            return
        if order is TraversalOrder.PRE_ORDER:
            pending = [self.root]
            while pending:
                node = pending.pop()
                yield node
                if node.right is not None:
                    pending.append(node.right)
                if node.left is not None:
                    pending.append(node.left)
        elif order is TraversalOrder.IN_ORDER:
            stack: list[CatalogNode] = []
            current = self.root
            while stack or current is not None:
                while current is not None:
                    stack.append(current)
                    current = current.left
                current = stack.pop()
                yield current
                current = current.right
        elif order is TraversalOrder.POST_ORDER:
            # Reverse of a root-right-left pre-order walk.
            pending = [self.root]
            visited: list[CatalogNode] = []
            while pending:
                node = pending.pop()
                visited.append(node)
                if node.left is not None:
                    pending.append(node.left)
                if node.right is not None:
                    pending.append(node.right)
            yield from reversed(visited)
        else:
            raise ValueError(f"Unknown traversal order {order!r}")

    def traverse(self, order: TraversalOrder, visitor: Visitor) -> None:
        """Call *visitor* with every node in *order*."""
        for node in self.iter_nodes(order):
            visitor(node)

    def names(self, order: TraversalOrder = TraversalOrder.IN_ORDER) -> list[str]:
        return [node.key for node in self.iter_nodes(order)]

    def write_names(self, fp: TextIO, order: TraversalOrder = TraversalOrder.IN_ORDER) -> None:
        """Write one song name per line to *fp*."""
        self.traverse(order, lambda node: fp.write(f"{node.key}\n"))

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/ast/tree.py
"""Id-indexed trees over parsed elements.

The tree is an arena: a flat ``dict`` from node id to :class:`ElementNode`,
where parents and children are stored as ids rather than references. It is
built once by a pre-order walk of a finished element (ids are allocated
before children are visited) and is read-only afterwards, except for
:meth:`ElementForest.merge_unchecked`.

Offset lookup relies on children being enumerated in reading order and on
every child region lying inside its parent's region.

Examples
--------
    >>> from vimwiki_ast import parse_page
    >>> from vimwiki_ast.ast.ids import IdAllocator
    >>> page = parse_page("abc*bold*def")
    >>> forest = ElementForest.from_page(page, IdAllocator())
    >>> node = forest.find_at_offset(5)
    >>> node.data.element
    Text(content='bold')

"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Iterator, Optional

from vimwiki_ast.ast.ids import IdAllocator, IdPool
from vimwiki_ast.ast.location import Located, Region

if TYPE_CHECKING:
    from vimwiki_ast.ast.nodes import Element, Page

logger = logging.getLogger(__name__)


@dataclass
class ElementNode:
    """One located element inside a tree.

    Parameters
    ----------
    id : int
        Unique id of the node within its allocator
    parent : int or None
        Id of the parent node, None for a root
    children : list of int
        Ids of child nodes in reading order
    data : Located[Element]
        The element and its region

    """

    id: int
    parent: Optional[int]
    data: Located[Element]
    children: list[int] = field(default_factory=list)

    @property
    def region(self) -> Region:
        return self.data.region

    @property
    def element(self) -> Element:
        return self.data.element

    def is_root(self) -> bool:
        return self.parent is None

    def is_leaf(self) -> bool:
        return not self.children


class _ElementNodes:
    """Navigation shared by single-root trees and forests."""

    def __init__(self, nodes: dict[int, ElementNode], roots: list[int], pools: list[IdPool]):
        self._nodes = nodes
        self._roots = roots
        self._pools = pools

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[ElementNode]:
        return iter(self._nodes.values())

    def node(self, node_id: int) -> Optional[ElementNode]:
        return self._nodes.get(node_id)

    def nodes(self) -> list[ElementNode]:
        return list(self._nodes.values())

    def roots(self) -> list[ElementNode]:
        return [self._nodes[root] for root in self._roots]

    def parent(self, node_id: int) -> Optional[ElementNode]:
        node = self._nodes.get(node_id)
        if node is None or node.parent is None:
            return None
        return self._nodes[node.parent]

    def children(self, node_id: int) -> list[ElementNode]:
        node = self._nodes.get(node_id)
        if node is None:
            return []
        return [self._nodes[child] for child in node.children]

    def ancestors(self, node_id: int) -> list[ElementNode]:
        """Parent, grandparent and so on up to the root."""
        ancestors = []
        parent = self.parent(node_id)
        while parent is not None:
            ancestors.append(parent)
            parent = self.parent(parent.id)
        return ancestors

    def descendants(self, node_id: int) -> list[ElementNode]:
        """All nodes below ``node_id``, breadth-first, level by level."""
        found = []
        queue = deque(self._nodes[node_id].children if node_id in self._nodes else [])
        while queue:
            node = self._nodes[queue.popleft()]
            found.append(node)
            queue.extend(node.children)
        return found

    def root_for(self, node_id: int) -> Optional[ElementNode]:
        """The root of the tree containing ``node_id``."""
        node = self._nodes.get(node_id)
        if node is None:
            return None
        while node.parent is not None:
            node = self._nodes[node.parent]
        return node

    def depth(self, node_id: int) -> int:
        return len(self.ancestors(node_id))

    def _sibling_ids(self, node_id: int) -> list[int]:
        node = self._nodes.get(node_id)
        if node is None:
            return []
        if node.parent is None:
            return self._roots
        return self._nodes[node.parent].children

    def siblings_before(self, node_id: int) -> list[ElementNode]:
        ids = self._sibling_ids(node_id)
        if node_id not in ids:
            return []
        return [self._nodes[i] for i in ids[: ids.index(node_id)]]

    def siblings_after(self, node_id: int) -> list[ElementNode]:
        ids = self._sibling_ids(node_id)
        if node_id not in ids:
            return []
        return [self._nodes[i] for i in ids[ids.index(node_id) + 1 :]]

    def siblings(self, node_id: int) -> list[ElementNode]:
        return self.siblings_before(node_id) + self.siblings_after(node_id)

    def find_at_offset(self, offset: int) -> Optional[ElementNode]:
        """Return the deepest node whose region contains ``offset``.

        Roots are searched in order and the first root yielding a node
        wins; later roots are never consulted. Returns None when no root
        contains the offset.
        """
        for root in self._roots:
            found = self._find_at_offset(root, offset, 0)
            if found is not None:
                return self._nodes[found[0]]
        return None

    def _find_at_offset(self, node_id: int, offset: int, depth: int) -> Optional[tuple[int, int]]:
        node = self._nodes[node_id]
        if not node.region.contains(offset):
            return None

        best: tuple[int, int] = (node_id, depth)
        for child in node.children:
            found = self._find_at_offset(child, offset, depth + 1)
            if found is not None and found[1] > best[1]:
                best = found
        return best

    def release(self) -> None:
        """Return every id range drawn by this structure to its allocator."""
        for pool in self._pools:
            pool.release()

    @staticmethod
    def _build(located: Located[Element], pool: IdPool, nodes: dict[int, ElementNode]) -> int:
        """Pre-order walk: allocate this node's id before its children's."""
        root_id = pool.next_id()
        nodes[root_id] = ElementNode(id=root_id, parent=None, data=located)

        stack: list[tuple[int, Iterator[Located[Element]]]] = [(root_id, iter(located.into_children()))]
        while stack:
            parent_id, remaining = stack[-1]
            child = next(remaining, None)
            if child is None:
                stack.pop()
                continue
            child_id = pool.next_id()
            nodes[child_id] = ElementNode(id=child_id, parent=parent_id, data=child)
            nodes[parent_id].children.append(child_id)
            stack.append((child_id, iter(child.into_children())))
        return root_id


class ElementTree(_ElementNodes):
    """Tree with a single root element.

    Parameters
    ----------
    root : int
        Id of the root node
    nodes : dict of int to ElementNode
        Every node, keyed by id
    pool : IdPool
        Pool the ids were drawn from

    """

    def __init__(self, root: int, nodes: dict[int, ElementNode], pool: IdPool):
        super().__init__(nodes, [root], [pool])
        self.pool = pool

    @classmethod
    def from_located(cls, located: Located[Element], pool: IdPool) -> ElementTree:
        """Index ``located`` and everything nested inside it."""
        nodes: dict[int, ElementNode] = {}
        root = cls._build(located, pool, nodes)
        return cls(root, nodes, pool)

    def root(self) -> ElementNode:
        return self._nodes[self._roots[0]]

    @property
    def root_id(self) -> int:
        return self._roots[0]


class ElementForest(_ElementNodes):
    """Ordered collection of trees sharing one id namespace."""

    def __init__(self, roots: list[int], nodes: dict[int, ElementNode], pools: list[IdPool]):
        super().__init__(nodes, roots, pools)

    @classmethod
    def from_page(cls, page: Page, allocator: IdAllocator) -> ElementForest:
        """Build one tree per top-level element of ``page``.

        Every tree gets its own :class:`IdPool` drawing from ``allocator``.
        """
        trees = [
            ElementTree.from_located(element, IdPool(allocator))  # type: ignore[arg-type]
            for element in page.elements
        ]
        forest = cls.merge_unchecked(trees)
        logger.debug("Indexed page into %d tree(s) with %d node(s)", len(trees), len(forest))
        return forest

    @classmethod
    def merge_unchecked(cls, trees: Iterable[_ElementNodes]) -> ElementForest:
        """Concatenate trees and forests into one forest.

        Ids are not checked for collisions: the inputs must have drawn their
        ids from disjoint pools (for instance pools of one shared allocator).
        """
        nodes: dict[int, ElementNode] = {}
        roots: list[int] = []
        pools: list[IdPool] = []
        for tree in trees:
            nodes.update(tree._nodes)
            roots.extend(tree._roots)
            pools.extend(tree._pools)
        return cls(roots, nodes, pools)


__all__ = ["ElementNode", "ElementTree", "ElementForest"]

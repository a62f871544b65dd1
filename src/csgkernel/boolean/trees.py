"""BSP trees for exact boolean operations on polygon sets.

Two structures cooperate here:

* :class:`PolygonTreeNode` records the provenance of every polygon.  When
  a plane splits a polygon the fragments become children of its node, but
  the node keeps the original polygon until one of the fragments is
  removed.  Polygons that were cut but survived whole can therefore be
  returned unsplit.
* :class:`Node` is the spatial BSP tree proper.  Each node owns a
  splitting plane and the polygon tree nodes lying in that plane.

A :class:`Tree` bundles one of each for a single boolean operation.  All
traversals use explicit worklists, never recursion, so very deep trees do
not exhaust the interpreter stack.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import List, Optional, Sequence

from csgkernel.boolean.split import (BACK, COPLANAR_BACK, COPLANAR_FRONT, FRONT,
                                     SPANNING, split_polygon_by_plane)
from csgkernel.constants import EPS
from csgkernel.errors import ContractError
from csgkernel.plane import Plane
from csgkernel.polygon import Polygon

logger = logging.getLogger(__name__)


class PolygonTreeNode:
    """Node of the polygon provenance forest.

    The root holds no polygon and only anchors the forest.  A leaf holds a
    live polygon.  A split node keeps its polygon alongside its fragment
    children until a descendant is removed, at which point the polygon is
    invalidated for it and every ancestor.
    """

    __slots__ = ('parent', 'children', 'polygon', 'removed')

    def __init__(self, parent: Optional['PolygonTreeNode'] = None,
                 polygon: Optional[Polygon] = None):
        self.parent = parent
        self.children: List[PolygonTreeNode] = []
        self.polygon = polygon
        self.removed = False

    def is_root(self) -> bool:
        return self.parent is None

    def is_removed(self) -> bool:
        return self.removed

    def add_child(self, polygon: Polygon) -> 'PolygonTreeNode':
        child = PolygonTreeNode(self, polygon)
        self.children.append(child)
        return child

    def add_polygons(self, polygons: Sequence[Polygon]) -> List['PolygonTreeNode']:
        if not self.is_root():
            raise ContractError('add_polygons called on a non-root polygon tree node')
        return [self.add_child(p) for p in polygons]

    def remove(self):
        """Detach this node and invalidate the polygons of its ancestors."""
        if self.removed:
            return
        if self.is_root():
            raise ContractError('cannot remove the root of a polygon tree')
        self.removed = True
        siblings = self.parent.children
        try:
            siblings.remove(self)
        except ValueError:
            raise ContractError('polygon tree node missing from its parent') from None
        self.parent._invalidate_polygon()

    def _invalidate_polygon(self):
        node = self
        # stops at the root, which never holds a polygon
        while node is not None and node.polygon is not None:
            node.polygon = None
            node = node.parent

    def get_polygon(self) -> Polygon:
        if self.polygon is None:
            raise ContractError('polygon tree node has no live polygon')
        return self.polygon

    def get_polygons(self, out: Optional[List[Polygon]] = None) -> List[Polygon]:
        """Collect live polygons breadth first.  A node with a live
        polygon is emitted whole and its fragments are not visited."""
        if out is None:
            out = []
        queue = deque([self])
        while queue:
            node = queue.popleft()
            if node.polygon is not None:
                out.append(node.polygon)
            else:
                queue.extend(node.children)
        return out

    def split_by_plane(self, plane: Plane, coplanar_front: list, coplanar_back: list,
                       front: list, back: list):
        """Classify every leaf below this node against ``plane``."""
        if not self.children:
            self._split_leaf(plane, coplanar_front, coplanar_back, front, back)
            return
        queue = deque(self.children)
        while queue:
            node = queue.popleft()
            if node.children:
                queue.extend(node.children)
            else:
                node._split_leaf(plane, coplanar_front, coplanar_back, front, back)

    def _split_leaf(self, plane: Plane, coplanar_front: list, coplanar_back: list,
                    front: list, back: list):
        polygon = self.polygon
        if polygon is None:
            return
        center, radius = polygon.bounding_sphere()
        sphereradius = radius + EPS
        d = plane.normal.dot(center) - plane.w
        if d > sphereradius:
            front.append(self)
            return
        if d < -sphereradius:
            back.append(self)
            return

        result = split_polygon_by_plane(plane, polygon)
        kind = result.type
        if kind == COPLANAR_FRONT:
            coplanar_front.append(self)
        elif kind == COPLANAR_BACK:
            coplanar_back.append(self)
        elif kind == FRONT:
            front.append(self)
        elif kind == BACK:
            back.append(self)
        elif kind == SPANNING:
            if result.front is not None:
                front.append(self.add_child(result.front))
            if result.back is not None:
                back.append(self.add_child(result.back))
            if result.front is None or result.back is None:
                logger.debug('dropped degenerate fragment splitting %d-gon', len(polygon.vertices))

    def invert(self):
        if not self.is_root():
            raise ContractError('invert called on a non-root polygon tree node')
        queue = deque([self])
        while queue:
            node = queue.popleft()
            if node.polygon is not None:
                node.polygon = node.polygon.flipped()
            queue.extend(node.children)


class Node:
    """BSP tree node.

    Holds an optional splitting plane, lazily created ``front`` and
    ``back`` children and the polygon tree nodes coplanar with the plane.
    A missing back child stands for solid space, a missing front child
    for empty space.
    """

    __slots__ = ('plane', 'front', 'back', 'polygontreenodes')

    def __init__(self):
        self.plane: Optional[Plane] = None
        self.front: Optional[Node] = None
        self.back: Optional[Node] = None
        self.polygontreenodes: List[PolygonTreeNode] = []

    def invert(self):
        """Swap solid and empty space for the whole subtree."""
        queue = [self]
        while queue:
            node = queue.pop()
            if node.plane is not None:
                node.plane = node.plane.flipped()
            if node.front is not None:
                queue.append(node.front)
            if node.back is not None:
                queue.append(node.back)
            node.front, node.back = node.back, node.front

    def clip_polygons(self, polygontreenodes: List[PolygonTreeNode],
                      also_remove_coplanar_front: bool):
        """Remove every fragment of ``polygontreenodes`` lying inside the
        solid this subtree describes.

        Coplanar fragments facing the same way as the splitting plane are
        treated as outside, unless ``also_remove_coplanar_front`` is set.
        """
        stack = [(self, polygontreenodes)]
        while stack:
            node, nodes = stack.pop()
            if node.plane is None:
                continue
            backnodes = []
            frontnodes = []
            coplanarfrontnodes = backnodes if also_remove_coplanar_front else frontnodes
            plane = node.plane
            for ptn in nodes:
                if not ptn.is_removed():
                    ptn.split_by_plane(plane, coplanarfrontnodes, backnodes, frontnodes, backnodes)
            if node.front is not None and frontnodes:
                stack.append((node.front, frontnodes))
            if node.back is not None and backnodes:
                stack.append((node.back, backnodes))
            else:
                for ptn in backnodes:
                    ptn.remove()

    def clip_to(self, tree: 'Tree', also_remove_coplanar_front: bool = False):
        """Clip the polygons stored in this subtree against ``tree``."""
        stack = [self]
        while stack:
            node = stack.pop()
            if node.polygontreenodes:
                tree.rootnode.clip_polygons(node.polygontreenodes, also_remove_coplanar_front)
            if node.front is not None:
                stack.append(node.front)
            if node.back is not None:
                stack.append(node.back)

    def add_polygon_tree_nodes(self, polygontreenodes: List[PolygonTreeNode]):
        """Insert polygons, choosing splitting planes on demand.

        Fragments coplanar with a node and facing the same way stay at the
        node.  Opposite facing coplanar fragments continue to the back
        child together with the back fragments.
        """
        stack = [(self, polygontreenodes)]
        while stack:
            node, nodes = stack.pop()
            if not nodes:
                continue
            if node.plane is None:
                node.plane = nodes[0].get_polygon().plane
            frontnodes = []
            backnodes = []
            for ptn in nodes:
                ptn.split_by_plane(node.plane, node.polygontreenodes, backnodes, frontnodes, backnodes)
            if frontnodes:
                if node.front is None:
                    node.front = Node()
                stack.append((node.front, frontnodes))
            if backnodes:
                if node.back is None:
                    node.back = Node()
                stack.append((node.back, backnodes))

    def depth(self) -> int:
        """Depth of the deepest node below this one (a lone node is 1)."""
        deepest = 0
        stack = [(self, 1)]
        while stack:
            node, d = stack.pop()
            deepest = max(deepest, d)
            for child in (node.front, node.back):
                if child is not None:
                    stack.append((child, d + 1))
        return deepest


class Tree:
    """Polygon provenance forest plus BSP tree for one operand."""

    def __init__(self, polygons: Sequence[Polygon] = ()):
        self.polygontree = PolygonTreeNode()
        self.rootnode = Node()
        if polygons:
            self.add_polygons(polygons)

    def invert(self):
        self.polygontree.invert()
        self.rootnode.invert()

    def clip_to(self, tree: 'Tree', also_remove_coplanar_front: bool = False):
        self.rootnode.clip_to(tree, also_remove_coplanar_front)

    def all_polygons(self) -> List[Polygon]:
        return self.polygontree.get_polygons()

    def add_polygons(self, polygons: Sequence[Polygon]):
        polygontreenodes = self.polygontree.add_polygons(polygons)
        self.rootnode.add_polygon_tree_nodes(polygontreenodes)

"""Unit tests for polygons, polygon splitting and the BSP trees"""

import sys

import pytest

from csgkernel.boolean import (BACK, COPLANAR_BACK, COPLANAR_FRONT, FRONT, SPANNING,
                               PolygonTreeNode, Tree, split_polygon_by_plane)
from csgkernel.boolean.split import _remove_close_neighbours
from csgkernel.errors import ContractError, NonConvexPolygonError
from csgkernel.plane import Plane
from csgkernel.polygon import Polygon, Vertex3D
from csgkernel.primitives import cube
from csgkernel.vector import Vector3D


def square(z=0.0, size=1.0, offset=0.0):
    pts = [(offset, offset, z), (offset + size, offset, z),
           (offset + size, offset + size, z), (offset, offset + size, z)]
    return Polygon([Vertex3D(Vector3D.create(p)) for p in pts])


class TestPolygon:
    """construction checks"""

    def test_convexity_check(self):
        pts = [(0, 0, 0), (2, 0, 0), (2, 2, 0), (1, 1, 0), (0, 2, 0)]
        vertices = [Vertex3D(Vector3D.create(p)) for p in pts]
        with pytest.raises(NonConvexPolygonError):
            Polygon(vertices, check_convex=True)
        # without the check the loop is accepted as given
        assert len(Polygon(vertices).vertices) == 5
        assert square().check_if_convex()
        Polygon(square().vertices, check_convex=True)

    def test_close_neighbours(self):
        pts = [(0, 0, 0), (0.6e-5, 0, 0), (1.2e-5, 0, 0), (1, 1, 0), (0, 1, 0)]
        kept = _remove_close_neighbours([Vertex3D(Vector3D.create(p)) for p in pts])
        # each vertex is compared with the last one kept
        assert [v.pos.x for v in kept] == [0.0, 1.2e-5, 1.0, 0.0]



class TestSplit:
    """classification of a polygon against a plane"""

    def test_classification(self):
        plane = Plane(Vector3D(0, 0, 1), 0)
        assert split_polygon_by_plane(plane, square(z=1)).type == FRONT
        assert split_polygon_by_plane(plane, square(z=-1)).type == BACK
        assert split_polygon_by_plane(plane, square()).type == COPLANAR_FRONT
        assert split_polygon_by_plane(plane, square().flipped()).type == COPLANAR_BACK
        # within tolerance of the plane counts as on it
        assert split_polygon_by_plane(plane, square(z=1e-6)).type == COPLANAR_FRONT

    def test_split_shares_edge(self):
        plane = Plane(Vector3D(1, 0, 0), 0.5)
        result = split_polygon_by_plane(plane, square())
        assert result.type == SPANNING
        assert len(result.front.vertices) == 4
        assert len(result.back.vertices) == 4
        shared = {id(v) for v in result.front.vertices} & {id(v) for v in result.back.vertices}
        assert len(shared) == 2
        assert result.front.get_area() == pytest.approx(0.5)
        assert result.back.get_area() == pytest.approx(0.5)
        assert result.front.plane is result.back.plane

    def test_diagonal_split(self):
        n = Vector3D(1, -1, 0).unit()
        plane = Plane(n, 0)
        result = split_polygon_by_plane(plane, square())
        assert result.type == SPANNING
        assert len(result.front.vertices) == 3
        assert len(result.back.vertices) == 3
        assert result.front.get_area() == pytest.approx(0.5)
        assert result.back.get_area() == pytest.approx(0.5)


class TestPolygonTreeNode:
    """provenance tracking"""

    def test_contract_errors(self):
        root = PolygonTreeNode()
        child = root.add_polygons([square()])[0]
        with pytest.raises(ContractError):
            child.add_polygons([square()])
        with pytest.raises(ContractError):
            root.get_polygon()
        with pytest.raises(ContractError):
            root.remove()
        with pytest.raises(ContractError):
            child.invert()

    def test_split_keeps_original(self):
        root = PolygonTreeNode()
        poly = square()
        node = root.add_polygons([poly])[0]
        cf, cb, front, back = [], [], [], []
        node.split_by_plane(Plane(Vector3D(1, 0, 0), 0.5), cf, cb, front, back)
        assert len(front) == 1 and len(back) == 1
        # nothing removed yet: the unsplit polygon is still reported
        assert root.get_polygons() == [poly]

    def test_remove_invalidates(self):
        root = PolygonTreeNode()
        node = root.add_polygons([square()])[0]
        cf, cb, front, back = [], [], [], []
        node.split_by_plane(Plane(Vector3D(1, 0, 0), 0.5), cf, cb, front, back)
        back[0].remove()
        assert back[0].is_removed()
        assert node.polygon is None
        polygons = root.get_polygons()
        assert polygons == [front[0].get_polygon()]
        # removing twice is harmless
        back[0].remove()

    def test_invert(self):
        root = PolygonTreeNode()
        root.add_polygons([square()])
        root.invert()
        assert root.get_polygons()[0].plane.normal == Vector3D(0, 0, -1)


class TestTree:
    """BSP construction and clipping"""

    def test_depth(self):
        tree = Tree(cube().polygons)
        # every face of a convex solid lies behind every other face
        assert tree.rootnode.depth() == 6
        assert len(tree.all_polygons()) == 6

    def test_clip(self):
        solid = Tree(cube().polygons)
        inside = Tree([square(z=0, size=0.2, offset=-0.1)])
        inside.clip_to(solid)
        assert inside.all_polygons() == []
        outside = Tree([square(z=5, size=0.2, offset=-0.1)])
        outside.clip_to(solid)
        assert len(outside.all_polygons()) == 1

    def test_invert(self):
        tree = Tree(cube().polygons)
        tree.invert()
        inside = Tree([square(z=0, size=0.2, offset=-0.1)])
        inside.clip_to(tree)
        # after inversion the inside is empty space
        assert len(inside.all_polygons()) == 1
        assert all(p.plane.normal.dot(p.vertices[0].pos) < 0 for p in tree.all_polygons())

    def test_deep_tree(self):
        n = 1000
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(300)
        try:
            stack = Tree([square(z=float(i)) for i in range(n)])
            assert stack.rootnode.depth() == n
            above = Tree([square(z=n + 1.0)])
            above.clip_to(stack)
            assert len(above.all_polygons()) == 1
            stack.clip_to(Tree([square(z=-1.0)]))
            stack.invert()
            polygons = stack.all_polygons()
        finally:
            sys.setrecursionlimit(limit)
        assert len(polygons) == n
        assert all(p.plane.normal.z == -1 for p in polygons)

"""Unit tests for csgkernel solids and their boolean operations"""

import math

import pytest

from csgkernel.canonicalize import canonicalize_csg
from csgkernel.csg import CSG, group
from csgkernel.plane import Plane
from csgkernel.polygon import Shared
from csgkernel.primitives import cube, cylinder, sphere
from csgkernel.vector import Vector3D
from csgkernel.xform import Mirroring


def top_faces(csg):
    return [p for p in csg.polygons if p.plane.normal.z > 0.99]


class TestPrimitives:
    """basic solids are closed and outward facing"""

    def test_cube(self):
        c = cube(radius=1)
        assert len(c.polygons) == 6
        assert c.volume() == pytest.approx(8.0)
        assert c.area() == pytest.approx(24.0)
        lo, hi = c.get_bounds()
        assert lo == Vector3D(-1, -1, -1) and hi == Vector3D(1, 1, 1)
        box = cube(center=(1, 2, 3), radius=(1, 2, 3))
        assert box.volume() == pytest.approx(48.0)
        with pytest.raises(ValueError):
            cube(radius=0)

    def test_sphere(self):
        s = sphere(radius=1, resolution=16)
        v = s.volume()
        assert 0.8 * 4.0 / 3.0 * math.pi < v < 4.0 / 3.0 * math.pi

    def test_cylinder(self):
        n = 32
        c = cylinder(radius=1, resolution=n)
        expected = 0.5 * n * math.sin(2 * math.pi / n) * 2.0
        assert c.volume() == pytest.approx(expected)


class TestBooleans:
    """union, subtract and intersect"""

    def test_union_two_cubes(self):
        a = cube(radius=0.5)
        b = cube(center=(0.5, 0, 0), radius=0.5)
        u = a.union(b)
        assert u.volume() == pytest.approx(1.5)
        assert u.is_canonicalized and u.is_retesselated
        lo, hi = u.get_bounds()
        assert lo.x == pytest.approx(-0.5)
        assert hi.x == pytest.approx(1.0)
        # coplanar fragments are merged into single faces
        assert len(top_faces(u)) == 1
        assert len(u.polygons) == 6

    def test_union_many(self):
        cubes = [cube(center=(i * 0.5, 0, 0), radius=0.5) for i in range(4)]
        u = cubes[0].union(cubes[1:])
        assert u.volume() == pytest.approx(2.5)
        assert cubes[0].union(*cubes[1:]).volume() == pytest.approx(2.5)

    def test_union_commutes(self):
        a = cube(radius=0.5)
        b = cube(center=(0.3, 0.2, 0.1), radius=0.5)
        expected = 2.0 - 0.7 * 0.8 * 0.9
        assert a.union(b).volume() == pytest.approx(expected)
        assert b.union(a).volume() == pytest.approx(expected)

    def test_non_overlapping_fast_path(self):
        a = cube(radius=0.5)
        b = cube(center=(5, 0, 0), radius=0.5)
        assert not a.may_overlap(b)
        u = a.union_sub(b)
        assert u.polygons == a.polygons + b.polygons
        assert not u.is_canonicalized
        assert not a.may_overlap(CSG())
        assert a.union(b).volume() == pytest.approx(2.0)

    def test_fast_path_flags(self):
        a = cube(radius=0.5).canonicalized()
        b = cube(center=(5, 0, 0), radius=0.5)
        assert not a.union_for_non_intersecting(b).is_canonicalized
        assert a.union_for_non_intersecting(b.canonicalized()).is_canonicalized

    def test_subtract(self):
        a = cube(radius=0.5)
        b = cube(center=(0.5, 0, 0), radius=0.5)
        assert a.subtract(b).volume() == pytest.approx(0.5)
        assert a.subtract([b]).volume() == pytest.approx(0.5)
        # the operands are untouched
        assert a.volume() == pytest.approx(1.0)
        assert len(b.polygons) == 6

    def test_subtract_self_is_empty(self):
        a = cube(radius=0.5)
        assert a.subtract(a).polygons == []

    def test_subtract_enclosing_sphere(self):
        c = cube(radius=1)
        s = sphere(radius=2, resolution=16)
        assert c.subtract(s).polygons == []

    def test_intersect(self):
        a = cube(radius=0.5)
        b = cube(center=(0.5, 0, 0), radius=0.5)
        assert a.intersect(b).volume() == pytest.approx(0.5)
        assert a.intersect(a).volume() == pytest.approx(1.0)

    def test_subtract_hole(self):
        block = cube(radius=1)
        hole = cylinder(start=(0, -2, 0), end=(0, 2, 0), radius=0.5, resolution=16)
        result = block.subtract(hole)
        plug = 0.5 * 16 * math.sin(2 * math.pi / 16) * 0.25 * 2.0
        assert result.volume() == pytest.approx(8.0 - plug)


class TestCleanup:
    """canonicalization and re-tessellation"""

    def test_canonicalize_idempotent(self):
        a = cube(radius=0.5)
        b = cube(center=(0.5, 0.5, 0), radius=0.5)
        u = a.union_sub(b)
        c1 = u.canonicalized()
        assert c1.is_canonicalized
        assert c1.canonicalized() is c1
        c2 = canonicalize_csg(c1)
        assert len(c2.polygons) == len(c1.polygons)
        assert c2.volume() == pytest.approx(c1.volume())

    def test_retesselate_conserves_area(self):
        a = cube(radius=0.5)
        b = cube(center=(0.5, 0.5, 0), radius=0.5)
        u = a.union_sub(b)
        r = u.retesselated()
        assert r.is_retesselated
        assert r.retesselated() is r
        assert r.area() == pytest.approx(u.area())
        assert r.volume() == pytest.approx(u.volume())
        assert len(r.polygons) <= len(u.polygons)


class TestTransform:
    """transformations keep solids closed and outward facing"""

    def test_translate_and_scale(self):
        c = cube(radius=0.5)
        t = c.translate((1, 2, 3))
        lo, hi = t.get_bounds()
        assert lo == Vector3D(0.5, 1.5, 2.5)
        assert t.volume() == pytest.approx(1.0)
        assert c.scale(2).volume() == pytest.approx(8.0)
        assert c.scale((1, 2, 3)).volume() == pytest.approx(6.0)

    def test_mirror_keeps_orientation(self):
        c = cube(center=(2, 0, 0), radius=0.5)
        m = c.mirrored_x()
        assert m.volume() == pytest.approx(1.0)
        assert m.get_bounds()[1].x == pytest.approx(-1.5)
        p = c.mirrored(Plane(Vector3D(0, 0, 1), 0))
        assert p.volume() == pytest.approx(1.0)
        assert c.transform(Mirroring(Plane(Vector3D(0, 1, 0), 0))).volume() == pytest.approx(1.0)

    def test_rotate(self):
        c = cube(center=(2, 0, 0), radius=0.5)
        r = c.rotate_z(90)
        lo, hi = r.get_bounds()
        assert lo.y == pytest.approx(1.5)
        assert hi.y == pytest.approx(2.5)
        r2 = c.rotate((0, 0, 0), (0, 0, 1), 90)
        assert r2.get_bounds()[0].y == pytest.approx(1.5)

    def test_center(self):
        c = cube(center=(5, 6, 7), radius=0.5).center()
        lo, hi = c.get_bounds()
        assert lo.x == pytest.approx(-0.5)
        assert hi.z == pytest.approx(0.5)
        only_x = cube(center=(5, 6, 7), radius=0.5).center('x')
        assert only_x.get_bounds()[0].y == pytest.approx(5.5)

    def test_flags_preserved(self):
        u = cube(radius=0.5).union(cube(center=(0.5, 0, 0), radius=0.5))
        t = u.translate((1, 0, 0))
        assert t.is_canonicalized and t.is_retesselated

    def test_invert(self):
        c = cube(radius=0.5)
        assert c.invert().volume() == pytest.approx(-1.0)


class TestMisc:
    """attributes, triangulation and grouping"""

    def test_to_triangles(self):
        tris = cube().to_triangles()
        assert len(tris) == 12
        assert all(len(t.vertices) == 3 for t in tris)
        assert sum(t.get_area() for t in tris) == pytest.approx(24.0)

    def test_set_color(self):
        c = cube().set_color(1, 0, 0)
        assert all(p.shared.color == (1.0, 0.0, 0.0, 1.0) for p in c.polygons)
        s = cube().set_shared(Shared((0, 1, 0, 0.5)))
        assert s.polygons[0].shared.get_hash() == '0.0/1.0/0.0/0.5'

    def test_color_survives_union(self):
        a = cube(radius=0.5).set_color(1, 0, 0)
        b = cube(center=(0.5, 0, 0), radius=0.5).set_color(0, 0, 1)
        u = a.union(b)
        colors = {p.shared.color for p in u.polygons}
        assert colors == {(1.0, 0.0, 0.0, 1.0), (0.0, 0.0, 1.0, 1.0)}

    def test_group(self):
        a = cube(radius=0.5)
        b = cube(center=(5, 0, 0), radius=0.5)
        g = group(a, b)
        assert len(g.polygons) == 12
        assert group([a, b]).volume() == pytest.approx(2.0)
        assert group().polygons == []

    def test_polygon_extrude(self):
        square = cube(radius=0.5).polygons[5]
        prism = square.extrude((0, 0, 2))
        assert len(prism.polygons) == 6
        assert abs(prism.volume()) == pytest.approx(2.0)

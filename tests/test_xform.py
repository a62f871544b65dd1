"""Unit tests for csgkernel vectors, matrices, planes and lines"""

import math

import numpy as np
import pytest

from csgkernel.errors import ParallelPlanesError
from csgkernel.plane import Line2D, Line3D, OrthoNormalBasis, Plane
from csgkernel.vector import Vector2D, Vector3D
from csgkernel.xform import (Matrix, Mirroring, Rotation, RotationZ, Scale,
                             Translation)


def close(a, b, tol=1e-9):
    return all(abs(x - y) < tol for x, y in zip(a, b))


class TestVector:
    """vector arithmetic"""

    def test_arithmetic(self):
        a = Vector3D(1, 2, 3)
        b = Vector3D(1, 1, 1)
        assert a.plus(b) == Vector3D(2, 3, 4)
        assert a - b == Vector3D(0, 1, 2)
        assert a * 2 == Vector3D(2, 4, 6)
        assert -a == Vector3D(-1, -2, -3)
        assert a.dot(b) == 6
        assert Vector3D(1, 0, 0).cross(Vector3D(0, 1, 0)) == Vector3D(0, 0, 1)
        assert Vector3D(3, 4, 0).length() == 5
        assert Vector3D(3, 4, 0).unit().length() == pytest.approx(1.0)
        assert list(a) == [1.0, 2.0, 3.0]
        assert a[2] == 3.0

    def test_create(self):
        assert Vector3D.create([1, 2]) == Vector3D(1, 2, 0)
        assert Vector3D.create((1, 2, 3)) == Vector3D(1, 2, 3)
        assert Vector3D.create(Vector2D(1, 2)) == Vector3D(1, 2, 0)
        assert Vector3D.create(np.array([1.0, 2.0, 3.0])) == Vector3D(1, 2, 3)
        with pytest.raises(ValueError):
            Vector3D.create('foo')
        with pytest.raises(ValueError):
            Vector3D(1, 2, 3).times('x')

    def test_vector2d(self):
        v = Vector2D(1, 0)
        assert v.cross(Vector2D(0, 1)) == 1
        assert v.normal() == Vector2D(0, -1)
        assert Vector2D.from_angle_degrees(90).x == pytest.approx(0.0, abs=1e-12)
        assert Vector2D(0, 2).angle_degrees() == pytest.approx(90.0)
        assert v.to_vector3d(5) == Vector3D(1, 0, 5)


class TestMatrix:
    """matrix construction and composition"""

    def test_identity(self):
        bar = Matrix([[1, 0, 0, 1], [0, 1, 0, 1], [0, 0, 1, 1], [0, 0, 0, 1]])
        I = Matrix()
        assert I.mul(bar).m == bar.m
        assert bar.mul([1, 2, 3, 1]) == [2, 3, 4, 1]
        with pytest.raises(ValueError):
            Matrix([1, 2, 3])

    def test_translation_rotation(self):
        assert Translation((1, 2, 3)).transform_point((0, 0, 0)) == (1.0, 2.0, 3.0)
        assert close(RotationZ(90).transform_point((1, 0, 0)), (0, 1, 0))
        # the right hand matrix is applied first
        m = Translation((1, 0, 0)).mul(RotationZ(90))
        assert close(m.transform_point((1, 0, 0)), (1, 1, 0))
        r = Rotation((0, 0, 1), 180, center=(1, 0, 0))
        assert close(r.transform_point((0, 0, 0)), (2, 0, 0))

    def test_mirroring(self):
        m = Mirroring(Plane(Vector3D(1, 0, 0), 0))
        assert close(m.transform_point((1, 2, 3)), (-1, 2, 3))
        assert m.is_mirroring()
        assert Scale(-1, 1, 1).is_mirroring()
        assert not Scale(2).is_mirroring()
        assert not RotationZ(30).is_mirroring()


class TestPlane:
    """planes, lines and projections"""

    def test_from_points(self):
        p = Plane.from_points(Vector3D(0, 0, 1), Vector3D(1, 0, 1), Vector3D(0, 1, 1))
        assert p.normal == Vector3D(0, 0, 1)
        assert p.w == 1
        assert p.signed_distance_to_point(Vector3D(5, 5, 3)) == 2
        f = p.flipped()
        assert f.normal == Vector3D(0, 0, -1) and f.w == -1
        assert p.equals(Plane(Vector3D(0, 0, 1), 1))

    def test_split_line(self):
        p = Plane(Vector3D(0, 0, 1), 0)
        assert p.split_line_between_points(Vector3D(0, 0, -1), Vector3D(0, 0, 3)) == Vector3D(0, 0, 0)
        # parallel segment resolves to the first point
        a = Vector3D(0, 0, 1)
        assert p.split_line_between_points(a, Vector3D(1, 0, 1)) == a

    def test_transform(self):
        p = Plane(Vector3D(0, 0, 1), 0).transform(Translation((0, 0, 2)))
        assert close(p.normal, (0, 0, 1))
        assert p.w == pytest.approx(2.0)
        m = Plane(Vector3D(0, 0, 1), 1).transform(Mirroring(Plane(Vector3D(0, 0, 1), 0)))
        assert close(m.normal, (0, 0, -1))
        assert m.w == pytest.approx(1.0)

    def test_intersections(self):
        a = Plane(Vector3D(0, 0, 1), 0)
        b = Plane(Vector3D(1, 0, 0), 0)
        line = a.intersect_with_plane(b)
        assert abs(line.direction.y) == pytest.approx(1.0)
        assert close(line.closest_point(Vector3D(0, 5, 0)), (0, 5, 0))
        assert line.distance_to_point(Vector3D(1, 5, 0)) == pytest.approx(1.0)
        with pytest.raises(ParallelPlanesError):
            a.intersect_with_plane(Plane(Vector3D(0, 0, 1), 3))
        l3 = Line3D.from_points((0, 0, -1), (0, 0, 1))
        assert close(a.intersect_with_line(l3), (0, 0, 0))

    def test_line2d(self):
        line = Line2D.from_points(Vector2D(0, 0), Vector2D(2, 0))
        assert close(line.direction(), (1, 0))
        diagonal = Line2D.from_points(Vector2D(0, 0), Vector2D(1, 1))
        assert diagonal.x_at_y(0.5) == pytest.approx(0.5)
        crossing = Line2D.from_points(Vector2D(0, 1), Vector2D(1, 0))
        assert close(diagonal.intersect_with_line(crossing), (0.5, 0.5))
        assert close(line.reverse().direction(), (-1, 0))

    def test_orthonormal_basis(self):
        basis = OrthoNormalBasis.z0_plane()
        assert basis.to_2d(Vector3D(3, 4, 5)) == Vector2D(3, 4)
        assert basis.to_3d(Vector2D(3, 4)) == Vector3D(3, 4, 0)
        plane = Plane.from_normal_and_point((1, 1, 1), (1, 0, 0))
        basis = OrthoNormalBasis(plane)
        p = Vector3D(1, 0, 0)
        assert close(basis.to_3d(basis.to_2d(p)), p)
        proj = basis.get_projection_matrix()
        inv = basis.get_inverse_projection_matrix()
        q = inv.transform_point(proj.transform_point((0.3, -2, 7)))
        assert close(q, (0.3, -2, 7))
        assert math.isclose(basis.u.dot(basis.v), 0.0, abs_tol=1e-12)

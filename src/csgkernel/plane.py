"""Planes, lines and plane-local coordinate frames.

A :class:`Plane` is a unit normal ``n`` plus an offset ``w``; a point
``p`` lies on the plane when ``n.p == w``.  Planes compare exactly;
near-equal planes are merged by the fuzzy factories in
:mod:`csgkernel.fuzzy`, never here.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

from csgkernel.constants import EPS, get_tag
from csgkernel.errors import ParallelPlanesError
from csgkernel.vector import Vector2D, Vector3D
from csgkernel.xform import Matrix


def solve_2_linear(a, b, c, d, u, v) -> Tuple[float, float]:
    """Solve [[a, b], [c, d]] . [x, y] = [u, v]."""
    det = a * d - b * c
    invdet = 1.0 / det
    x = u * d - b * v
    y = -u * c + a * v
    return (x * invdet, y * invdet)


class Plane:
    """Represents a plane in 3D space."""

    __slots__ = ('normal', 'w', '_tag')

    def __init__(self, normal: Vector3D, w: float):
        self.normal = normal
        self.w = float(w)
        self._tag = None

    def __repr__(self):
        return 'Plane(normal={!r}, w={})'.format(self.normal, self.w)

    def get_tag(self) -> int:
        if self._tag is None:
            self._tag = get_tag()
        return self._tag

    def flipped(self) -> 'Plane':
        return Plane(self.normal.negated(), -self.w)

    def equals(self, plane: 'Plane') -> bool:
        return self.normal.equals(plane.normal) and self.w == plane.w

    def signed_distance_to_point(self, point: Vector3D) -> float:
        return self.normal.dot(point) - self.w

    def mirror_point(self, point: Vector3D) -> Vector3D:
        distance = self.signed_distance_to_point(point)
        return point.minus(self.normal.times(distance * 2.0))

    def split_line_between_points(self, p1: Vector3D, p2: Vector3D) -> Vector3D:
        """Intersect segment p1-p2 with the plane.

        Works for lines parallel to the plane: the parameter is clamped to
        [0, 1] and a division by zero resolves to p1.
        """
        direction = p2.minus(p1)
        denom = self.normal.dot(direction)
        num = self.w - self.normal.dot(p1)
        if denom == 0.0:
            labda = 0.0 if num == 0.0 else math.copysign(math.inf, num)
        else:
            labda = num / denom
        if math.isnan(labda):
            labda = 0.0
        if labda > 1.0:
            labda = 1.0
        if labda < 0.0:
            labda = 0.0
        return p1.plus(direction.times(labda))

    def intersect_with_line(self, line3d: 'Line3D') -> Vector3D:
        return line3d.intersect_with_plane(self)

    def intersect_with_plane(self, plane: 'Plane') -> 'Line3D':
        return Line3D.from_planes(self, plane)

    def transform(self, matrix: Matrix) -> 'Plane':
        # three points in the plane, transformed, define the new plane
        r = self.normal.random_non_parallel_vector()
        u = self.normal.cross(r)
        v = self.normal.cross(u)
        point1 = self.normal.times(self.w)
        point2 = point1.plus(u)
        point3 = point1.plus(v)
        newplane = Plane.from_vector3ds(point1.transform(matrix),
                                        point2.transform(matrix),
                                        point3.transform(matrix))
        if matrix.is_mirroring():
            newplane = newplane.flipped()
        return newplane

    def to_list(self):
        return [self.normal.x, self.normal.y, self.normal.z, self.w]

    @classmethod
    def from_vector3ds(cls, a: Vector3D, b: Vector3D, c: Vector3D) -> 'Plane':
        n = b.minus(a).cross(c.minus(a)).unit()
        return cls(n, n.dot(a))

    from_points = from_vector3ds

    @classmethod
    def any_plane_from_vector3ds(cls, a: Vector3D, b: Vector3D, c: Vector3D) -> 'Plane':
        """Like from_vector3ds, but tolerates coincident or collinear points
        by picking some plane through them."""
        v1 = b.minus(a)
        v2 = c.minus(a)
        if v1.length() < EPS:
            v1 = v2.random_non_parallel_vector()
        if v2.length() < EPS:
            v2 = v1.random_non_parallel_vector()
        normal = v1.cross(v2)
        if normal.length() < EPS:
            v2 = v1.random_non_parallel_vector()
            normal = v1.cross(v2)
        normal = normal.unit()
        return cls(normal, normal.dot(a))

    @classmethod
    def from_normal_and_point(cls, normal, point) -> 'Plane':
        normal = Vector3D.create(normal).unit()
        return cls(normal, Vector3D.create(point).dot(normal))

    @classmethod
    def from_object(cls, obj) -> 'Plane':
        if isinstance(obj, dict):
            return cls(Vector3D.create(obj['normal']), obj['w'])
        return cls(Vector3D(obj[0], obj[1], obj[2]), obj[3])


class Line2D:
    """Directional line in 2D: ``normal.p == w`` with a unit normal
    rotated 90 degrees counter clockwise from the direction."""

    __slots__ = ('normal', 'w')

    def __init__(self, normal: Vector2D, w: float):
        l = normal.length()
        self.normal = normal.times(1.0 / l)
        self.w = w * l

    @classmethod
    def from_points(cls, p1: Vector2D, p2: Vector2D) -> 'Line2D':
        direction = p2.minus(p1)
        normal = direction.normal().negated().unit()
        return cls(normal, p1.dot(normal))

    def reverse(self) -> 'Line2D':
        return Line2D(self.normal.negated(), -self.w)

    def equals(self, l: 'Line2D') -> bool:
        return l.normal.equals(self.normal) and l.w == self.w

    def origin(self) -> Vector2D:
        return self.normal.times(self.w)

    def direction(self) -> Vector2D:
        return self.normal.normal()

    def x_at_y(self, y: float) -> float:
        return (self.w - self.normal.y * y) / self.normal.x

    def abs_distance_to_point(self, point: Vector2D) -> float:
        return abs(point.dot(self.normal) - self.w)

    def intersect_with_line(self, line2d: 'Line2D') -> Vector2D:
        x, y = solve_2_linear(self.normal.x, self.normal.y,
                              line2d.normal.x, line2d.normal.y,
                              self.w, line2d.w)
        return Vector2D(x, y)

    def transform(self, matrix: Matrix) -> 'Line2D':
        origin = Vector2D(0, 0)
        point_on_line = self.normal.times(self.w)
        neworigin = origin.transform(matrix)
        newnormal = self.normal.transform(matrix).minus(neworigin)
        neww = newnormal.dot(point_on_line.transform(matrix))
        return Line2D(newnormal, neww)


class Line3D:
    """Line in 3D: a point on the line plus a unit direction."""

    __slots__ = ('point', 'direction')

    def __init__(self, point, direction):
        self.point = Vector3D.create(point)
        self.direction = Vector3D.create(direction).unit()

    @classmethod
    def from_points(cls, p1, p2) -> 'Line3D':
        p1 = Vector3D.create(p1)
        return cls(p1, Vector3D.create(p2).minus(p1))

    @classmethod
    def from_planes(cls, p1: Plane, p2: Plane) -> 'Line3D':
        direction = p1.normal.cross(p2.normal)
        l = direction.length()
        if l < EPS:
            raise ParallelPlanesError('Parallel planes', (p1.to_list(), p2.to_list()))
        direction = direction.times(1.0 / l)
        mabsx = abs(direction.x)
        mabsy = abs(direction.y)
        mabsz = abs(direction.z)
        if mabsx >= mabsy and mabsx >= mabsz:
            # mostly along x: find the point where x is zero
            r = solve_2_linear(p1.normal.y, p1.normal.z, p2.normal.y, p2.normal.z, p1.w, p2.w)
            origin = Vector3D(0, r[0], r[1])
        elif mabsy >= mabsx and mabsy >= mabsz:
            r = solve_2_linear(p1.normal.x, p1.normal.z, p2.normal.x, p2.normal.z, p1.w, p2.w)
            origin = Vector3D(r[0], 0, r[1])
        else:
            r = solve_2_linear(p1.normal.x, p1.normal.y, p2.normal.x, p2.normal.y, p1.w, p2.w)
            origin = Vector3D(r[0], r[1], 0)
        return cls(origin, direction)

    def intersect_with_plane(self, plane: Plane) -> Vector3D:
        labda = (plane.w - plane.normal.dot(self.point)) / plane.normal.dot(self.direction)
        return self.point.plus(self.direction.times(labda))

    def reverse(self) -> 'Line3D':
        return Line3D(self.point, self.direction.negated())

    def transform(self, matrix: Matrix) -> 'Line3D':
        newpoint = self.point.transform(matrix)
        newdir = self.point.plus(self.direction).transform(matrix).minus(newpoint)
        return Line3D(newpoint, newdir)

    def closest_point(self, point: Vector3D) -> Vector3D:
        t = point.minus(self.point).dot(self.direction) / self.direction.dot(self.direction)
        return self.point.plus(self.direction.times(t))

    def distance_to_point(self, point: Vector3D) -> float:
        return point.minus(self.closest_point(point)).length()

    def equals(self, line3d: 'Line3D') -> bool:
        if not self.direction.equals(line3d.direction):
            return False
        return self.distance_to_point(line3d.point) <= EPS


class OrthoNormalBasis:
    """Right handed 2D coordinate frame lying in a plane.

    ``u`` and ``v`` span the plane and ``plane.normal`` completes the
    basis.  If no ``right_vector`` is given the coordinate axis least
    aligned with the normal is used to seed it.
    """

    def __init__(self, plane: Plane, right_vector: Optional[Vector3D] = None):
        if right_vector is None:
            right_vector = plane.normal.random_non_parallel_vector()
        else:
            right_vector = Vector3D.create(right_vector)
        self.v = plane.normal.cross(right_vector).unit()
        self.u = self.v.cross(plane.normal)
        self.plane = plane
        self.planeorigin = plane.normal.times(plane.w)

    @classmethod
    def z0_plane(cls) -> 'OrthoNormalBasis':
        plane = Plane(Vector3D(0, 0, 1), 0)
        return cls(plane, Vector3D(1, 0, 0))

    def get_projection_matrix(self) -> Matrix:
        u, v, n = self.u, self.v, self.plane.normal
        return Matrix([[u.x, u.y, u.z, 0],
                       [v.x, v.y, v.z, 0],
                       [n.x, n.y, n.z, -self.plane.w],
                       [0, 0, 0, 1]])

    def get_inverse_projection_matrix(self) -> Matrix:
        u, v, n = self.u, self.v, self.plane.normal
        p = self.planeorigin
        return Matrix([[u.x, v.x, n.x, p.x],
                       [u.y, v.y, n.y, p.y],
                       [u.z, v.z, n.z, p.z],
                       [0, 0, 0, 1]])

    def to_2d(self, vec3: Vector3D) -> Vector2D:
        return Vector2D(vec3.dot(self.u), vec3.dot(self.v))

    def to_3d(self, vec2: Vector2D) -> Vector3D:
        return (self.planeorigin
                .plus(self.u.times(vec2.x))
                .plus(self.v.times(vec2.y)))

    def line_to_2d(self, line3d: Line3D) -> Line2D:
        a = self.to_2d(line3d.point)
        b = self.to_2d(line3d.point.plus(line3d.direction))
        return Line2D.from_points(a, b)

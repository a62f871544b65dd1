"""Planar areas bounded by directed sides, and their booleans.

A :class:`CAG` is the 2D counterpart of :class:`~csgkernel.csg.CSG`.
Its boolean operations reuse the 3D engine: every side is stood up as a
vertical wall rectangle between z=-1 and z=1, the walls are combined as
solids, and the sides are read back from the surviving wall polygons.

Copyright (c) 2025 csgkernel contributors
MIT License
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from csgkernel import validation
from csgkernel.canonicalize import canonicalize_cag
from csgkernel.constants import AREA_EPS
from csgkernel.csg import CSG
from csgkernel.errors import DegeneratePolygonError, GeometryError, SelfIntersectionError
from csgkernel.polygon import Polygon, Vertex3D
from csgkernel.side import Side, Vertex2D
from csgkernel.transforms import Transformable
from csgkernel.vector import Vector2D, Vector3D
from csgkernel.xform import RotationZ, Translation

logger = logging.getLogger(__name__)


def _compact():
    from csgkernel.io import compact
    return compact


def _operands(args) -> list:
    if len(args) == 1 and isinstance(args[0], (list, tuple)):
        return list(args[0])
    return list(args)


class CAG(Transformable):
    """A 2D area; the enclosed region lies to the left of every side."""

    def __init__(self, sides: Optional[Sequence[Side]] = None):
        self.sides: List[Side] = list(sides) if sides else []
        self.is_canonicalized = False
        self._bounds: Optional[Tuple[Vector2D, Vector2D]] = None

    def __repr__(self):
        return 'CAG({} sides)'.format(len(self.sides))

    # -- construction ----------------------------------------------------

    @classmethod
    def from_sides(cls, sides: Sequence[Side]) -> 'CAG':
        return cls(sides)

    @classmethod
    def from_points_no_check(cls, points) -> 'CAG':
        """Closed outline through ``points``, without any validation."""
        sides = []
        vertices = [Vertex2D(Vector2D.create(p)) for p in points]
        if vertices:
            prevvertex = vertices[-1]
            for vertex in vertices:
                sides.append(Side(prevvertex, vertex))
                prevvertex = vertex
        return cls.from_sides(sides)

    @classmethod
    def from_points(cls, points) -> 'CAG':
        """Closed outline through ``points``.

        The outline is oriented counter clockwise and canonicalized.
        Raises :class:`DegeneratePolygonError` for fewer than three points
        or a (near) zero area, and :class:`SelfIntersectionError` if the
        outline crosses itself.
        """
        points = list(points)
        if len(points) < 3:
            raise DegeneratePolygonError('CAG shape needs at least 3 points', points)
        result = cls.from_points_no_check(points)
        if result.is_self_intersecting():
            raise SelfIntersectionError('polygon is self intersecting',
                                        [p.to_list() for p in result.to_points()])
        area = result.area()
        if abs(area) < AREA_EPS:
            raise DegeneratePolygonError('degenerate polygon', {'area': area})
        if area < 0:
            result = result.flipped()
        return result.canonicalized()

    @classmethod
    def from_nested_points(cls, loops) -> 'CAG':
        """Area from several closed outlines.  An outline lying inside an
        odd number of others is a hole."""
        cags = [cls.from_points(loop) for loop in loops]
        depths = []
        for i, cag in enumerate(cags):
            depth = sum(1 for j, other in enumerate(cags)
                        if j != i and other.contains(cag))
            depths.append(depth)
        result = cls()
        for depth, cag in sorted(zip(depths, cags), key=lambda item: item[0]):
            if depth % 2 == 0:
                result = cag if not result.sides else result.union(cag)
            else:
                result = result.subtract(cag)
        return result

    @classmethod
    def from_fake_csg(cls, csg: CSG) -> 'CAG':
        """Read the sides back from a wall solid built by ``_to_csg_wall``."""
        sides = []
        for polygon in csg.polygons:
            side = Side.from_fake_polygon(polygon)
            if side is not None:
                sides.append(side)
        return cls.from_sides(sides)

    # -- fake wall helpers -----------------------------------------------

    def _to_csg_wall(self, z0: float, z1: float) -> CSG:
        return CSG.from_polygons([side.to_polygon3d(z0, z1) for side in self.sides])

    def _to_plane_polygons(self, flipped: bool = False, translation=(0, 0, 0),
                           twist_angle: float = 0.0) -> List[Polygon]:
        """Tessellate the area into convex polygons in the z=0 plane,
        then rotate them about z and move them by ``translation``."""
        cag = self.canonicalized()
        lo, hi = cag.get_bounds()
        lo = lo.minus(Vector2D(1, 1))
        hi = hi.plus(Vector2D(1, 1))
        csgshell = cag._to_csg_wall(-1, 1)
        csgplane = CSG.from_polygons([Polygon([
            Vertex3D(Vector3D(lo.x, lo.y, 0)),
            Vertex3D(Vector3D(hi.x, lo.y, 0)),
            Vertex3D(Vector3D(hi.x, hi.y, 0)),
            Vertex3D(Vector3D(lo.x, hi.y, 0))])])
        if flipped:
            csgplane = csgplane.invert()
        csgplane = csgplane.intersect_sub(csgshell)
        # drop the remains of the walls
        polygons = [p for p in csgplane.polygons if abs(p.plane.normal.z) > 0.99]
        matrix = Translation(Vector3D.create(translation)).mul(RotationZ(twist_angle))
        return [p.transform(matrix) for p in polygons]

    def _to_wall_polygons(self, bottom_matrix, top_matrix, reverse: bool = False) -> List[Polygon]:
        polygons = []
        for side in self.sides:
            b0 = side.vertex0.pos.to_vector3d(0).transform(bottom_matrix)
            b1 = side.vertex1.pos.to_vector3d(0).transform(bottom_matrix)
            t0 = side.vertex0.pos.to_vector3d(0).transform(top_matrix)
            t1 = side.vertex1.pos.to_vector3d(0).transform(top_matrix)
            for points in ([t1, t0, b0], [t1, b0, b1]):
                if reverse:
                    points.reverse()
                polygons.append(Polygon.from_points(points))
        return polygons

    # -- booleans --------------------------------------------------------

    def union(self, *others) -> 'CAG':
        cags = _operands(others)
        logger.debug('CAG union of %d areas', len(cags) + 1)
        r = self._to_csg_wall(-1, 1)
        r = r.union([cag._to_csg_wall(-1, 1).retesselated() for cag in cags])
        return CAG.from_fake_csg(r).canonicalized()

    def subtract(self, *others) -> 'CAG':
        cags = _operands(others)
        logger.debug('CAG subtract of %d areas', len(cags))
        r = self._to_csg_wall(-1, 1)
        for cag in cags:
            r = r.subtract_sub(cag._to_csg_wall(-1, 1), False, False)
        r = r.retesselated().canonicalized()
        return CAG.from_fake_csg(r).canonicalized()

    def intersect(self, *others) -> 'CAG':
        cags = _operands(others)
        logger.debug('CAG intersect of %d areas', len(cags))
        r = self._to_csg_wall(-1, 1)
        for cag in cags:
            r = r.intersect_sub(cag._to_csg_wall(-1, 1), False, False)
        r = r.retesselated().canonicalized()
        return CAG.from_fake_csg(r).canonicalized()

    # -- transformation --------------------------------------------------

    def transform(self, matrix) -> 'CAG':
        result = CAG.from_sides([side.transform(matrix) for side in self.sides])
        if matrix.is_mirroring():
            result = result.flipped()
        return result

    def flipped(self) -> 'CAG':
        newsides = [side.flipped() for side in self.sides]
        newsides.reverse()
        return CAG.from_sides(newsides)

    # -- queries ---------------------------------------------------------

    def area(self) -> float:
        """Signed area, positive for counter clockwise outlines."""
        area = 0.0
        for side in self.sides:
            area += side.vertex0.pos.cross(side.vertex1.pos)
        return area * 0.5

    def get_bounds(self) -> Tuple[Vector2D, Vector2D]:
        if self._bounds is None:
            minpoint = maxpoint = None
            for side in self.sides:
                for pos in (side.vertex0.pos, side.vertex1.pos):
                    if minpoint is None:
                        minpoint = maxpoint = pos
                    else:
                        minpoint = minpoint.min(pos)
                        maxpoint = maxpoint.max(pos)
            if minpoint is None:
                minpoint = maxpoint = Vector2D(0, 0)
            self._bounds = (minpoint, maxpoint)
        return self._bounds

    def to_points(self) -> List[Vector2D]:
        """Start points of the sides; for an outline made by
        :meth:`from_points` these are the original points in order."""
        points = [side.vertex0.pos for side in self.sides]
        if points:
            points.append(points.pop(0))
        return points

    def canonicalized(self) -> 'CAG':
        if self.is_canonicalized:
            return self
        return canonicalize_cag(self)

    def is_self_intersecting(self) -> bool:
        return validation.is_self_intersecting(self)

    def has_point_inside(self, point) -> bool:
        return validation.has_point_inside(self, point)

    def contains(self, other: 'CAG') -> bool:
        return validation.contains(self, other)

    def check(self):
        """Raise :class:`GeometryError` if the area is not a valid closed
        region."""
        errors = validation.validate_cag(self)
        if errors:
            raise GeometryError('CAG is invalid', errors)

    # -- extrusion -------------------------------------------------------

    def extrude(self, offset=(0, 0, 1), twist_angle: float = 0.0, twist_steps: int = 1) -> CSG:
        """Sweep the area along ``offset`` into a solid.

        With a ``twist_angle`` (degrees) the top is rotated about the z
        axis, the walls being built in ``twist_steps`` slices.
        """
        offset = Vector3D.create(offset)
        if offset.z == 0:
            raise ValueError('bad offset passed to extrude, z must be nonzero: {}'.format(offset))
        if twist_steps < 1:
            raise ValueError('bad twist_steps passed to extrude: {}'.format(twist_steps))
        if not self.sides:
            return CSG()
        negative = offset.z < 0
        polygons = []
        polygons.extend(self._to_plane_polygons(flipped=not negative))
        polygons.extend(self._to_plane_polygons(flipped=negative, translation=offset,
                                                twist_angle=twist_angle))

        def slice_matrix(i):
            return (Translation(offset.times(i / float(twist_steps)))
                    .mul(RotationZ(i * twist_angle / float(twist_steps))))

        for i in range(twist_steps):
            polygons.extend(self._to_wall_polygons(slice_matrix(i), slice_matrix(i + 1),
                                                   reverse=negative))
        logger.debug('extruded %d sides into %d polygons', len(self.sides), len(polygons))
        return CSG.from_polygons(polygons)

    # -- serialization ---------------------------------------------------

    def to_compact_binary(self) -> dict:
        return _compact().cag_to_compact_binary(self)

    @classmethod
    def from_compact_binary(cls, data) -> 'CAG':
        return _compact().cag_from_compact_binary(data)

    def to_object(self) -> dict:
        return _compact().cag_to_object(self)

    @classmethod
    def from_object(cls, obj) -> 'CAG':
        return _compact().cag_from_object(obj)


from_sides = CAG.from_sides
from_points = CAG.from_points

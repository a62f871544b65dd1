"""Vertices, shared attributes and convex planar polygons.

A polygon is an ordered loop of at least three coplanar vertices forming
a convex loop, wound counter clockwise when viewed from the side its
plane normal points to.  Every polygon carries a :class:`Shared`
attribute (currently only a color) that survives splitting, so
fragments of one face can be merged again after a boolean operation.

Copyright (c) 2025 csgkernel contributors
MIT License
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from csgkernel.constants import get_tag
from csgkernel.errors import DegeneratePolygonError, NonConvexPolygonError
from csgkernel.plane import Plane
from csgkernel.vector import Vector3D
from csgkernel.xform import Matrix, Translation


def _csg():
    from csgkernel import csg
    return csg


class Vertex3D:
    """A polygon corner.  Immutable; identity tag assigned on first use."""

    __slots__ = ('pos', '_tag')

    def __init__(self, pos: Vector3D):
        self.pos = pos
        self._tag = None

    def __repr__(self):
        return 'Vertex3D({!r})'.format(self.pos)

    def get_tag(self) -> int:
        if self._tag is None:
            self._tag = get_tag()
        return self._tag

    # vertices carry no orientation specific data
    def flipped(self) -> 'Vertex3D':
        return self

    def interpolate(self, other: 'Vertex3D', t: float) -> 'Vertex3D':
        return Vertex3D(self.pos.lerp(other.pos, t))

    def transform(self, matrix: Matrix) -> 'Vertex3D':
        return Vertex3D(self.pos.transform(matrix))

    @classmethod
    def from_object(cls, obj) -> 'Vertex3D':
        if isinstance(obj, dict):
            obj = obj['pos']
        return cls(Vector3D.create(obj))


class Shared:
    """Per-polygon attributes shared by all fragments of a face."""

    __slots__ = ('color', '_tag')

    def __init__(self, color: Optional[Sequence[float]] = None):
        if color is not None:
            color = tuple(float(c) for c in color)
            if len(color) != 4:
                raise ValueError('bad color passed to Shared, expecting 4 elements: {}'.format(color))
        self.color = color
        self._tag = None

    def __repr__(self):
        return 'Shared({!r})'.format(self.color)

    def get_tag(self) -> int:
        if self._tag is None:
            self._tag = get_tag()
        return self._tag

    # a string uniquely identifying the attribute content
    def get_hash(self) -> str:
        if self.color is None:
            return 'null'
        return '/'.join(repr(c) for c in self.color)

    @classmethod
    def from_color(cls, *args) -> 'Shared':
        """``from_color(r, g, b[, a])`` or ``from_color([r, g, b[, a]])``."""
        if len(args) == 1:
            color = list(args[0])
        else:
            color = list(args)
        if len(color) == 3:
            color.append(1.0)
        elif len(color) != 4:
            raise ValueError('from_color expects 3 or 4 color components, got {}'.format(color))
        return cls(color)

    @classmethod
    def from_object(cls, obj) -> 'Shared':
        if isinstance(obj, dict):
            return cls(obj.get('color'))
        return cls(obj)


DEFAULT_SHARED = Shared(None)


class Polygon:
    """Convex planar polygon.

    The plane is computed from the first three vertices unless given.
    With ``check_convex=True`` a concave loop raises
    :class:`NonConvexPolygonError`.
    """

    __slots__ = ('vertices', 'shared', 'plane', '_bounding_box', '_bounding_sphere')

    def __init__(self, vertices: Sequence[Vertex3D], shared: Optional[Shared] = None,
                 plane: Optional[Plane] = None, check_convex: bool = False):
        if len(vertices) < 3:
            raise DegeneratePolygonError('polygon needs at least 3 vertices',
                                         [v.pos.to_list() for v in vertices])
        self.vertices = list(vertices)
        self.shared = DEFAULT_SHARED if shared is None else shared
        if plane is None:
            plane = Plane.from_vector3ds(self.vertices[0].pos,
                                         self.vertices[1].pos,
                                         self.vertices[2].pos)
        self.plane = plane
        self._bounding_box = None
        self._bounding_sphere = None
        if check_convex and not self.check_if_convex():
            raise NonConvexPolygonError('polygon is not convex',
                                        [v.pos.to_list() for v in self.vertices])

    def __repr__(self):
        return 'Polygon({} vertices, plane={!r})'.format(len(self.vertices), self.plane)

    @classmethod
    def from_points(cls, points, shared: Optional[Shared] = None,
                    plane: Optional[Plane] = None) -> 'Polygon':
        return cls([Vertex3D(Vector3D.create(p)) for p in points], shared, plane)

    @classmethod
    def from_object(cls, obj) -> 'Polygon':
        vertices = [Vertex3D.from_object(v) for v in obj['vertices']]
        shared = Shared.from_object(obj.get('shared'))
        plane = Plane.from_object(obj['plane']) if obj.get('plane') is not None else None
        return cls(vertices, shared, plane)

    def check_if_convex(self) -> bool:
        return Polygon.vertices_convex(self.vertices, self.plane.normal)

    def get_signed_volume(self) -> float:
        """Signed volume of the tetrahedra fan from the origin."""
        signed_volume = 0.0
        v0 = self.vertices[0].pos
        for i in range(len(self.vertices) - 2):
            signed_volume += v0.dot(self.vertices[i + 1].pos.cross(self.vertices[i + 2].pos))
        return signed_volume / 6.0

    def get_area(self) -> float:
        area = 0.0
        v0 = self.vertices[0].pos
        for i in range(len(self.vertices) - 2):
            a = self.vertices[i + 1].pos
            b = self.vertices[i + 2].pos
            area += a.minus(v0).cross(b.minus(a)).length()
        return area / 2.0

    def bounding_box(self) -> Tuple[Vector3D, Vector3D]:
        if self._bounding_box is None:
            minpoint = maxpoint = self.vertices[0].pos
            for v in self.vertices[1:]:
                minpoint = minpoint.min(v.pos)
                maxpoint = maxpoint.max(v.pos)
            self._bounding_box = (minpoint, maxpoint)
        return self._bounding_box

    def bounding_sphere(self) -> Tuple[Vector3D, float]:
        if self._bounding_sphere is None:
            lo, hi = self.bounding_box()
            middle = lo.plus(hi).times(0.5)
            self._bounding_sphere = (middle, hi.minus(middle).length())
        return self._bounding_sphere

    def flipped(self) -> 'Polygon':
        newvertices = [v.flipped() for v in reversed(self.vertices)]
        return Polygon(newvertices, self.shared, self.plane.flipped())

    def transform(self, matrix: Matrix) -> 'Polygon':
        newvertices = [v.transform(matrix) for v in self.vertices]
        newplane = self.plane.transform(matrix)
        if matrix.is_mirroring():
            # keep the inside/outside orientation
            newvertices.reverse()
        return Polygon(newvertices, self.shared, newplane)

    def translate(self, offset) -> 'Polygon':
        return self.transform(Translation(Vector3D.create(offset)))

    def set_shared(self, shared: Shared) -> 'Polygon':
        return Polygon(self.vertices, shared, self.plane)

    def set_color(self, *args) -> 'Polygon':
        return self.set_shared(Shared.from_color(*args))

    def to_points(self) -> List[Vector3D]:
        return [v.pos for v in self.vertices]

    def to_object(self):
        return {'vertices': [v.pos.to_list() for v in self.vertices],
                'shared': {'color': None if self.shared.color is None else list(self.shared.color)},
                'plane': self.plane.to_list()}

    def extrude(self, offsetvector):
        """Sweep the polygon along ``offsetvector`` into a closed prism."""
        offsetvector = Vector3D.create(offsetvector)
        polygon1 = self
        if polygon1.plane.normal.dot(offsetvector) > 0:
            polygon1 = polygon1.flipped()
        polygons = [polygon1]
        polygon2 = polygon1.translate(offsetvector)
        n = len(self.vertices)
        for i in range(n):
            nexti = (i + 1) % n
            sidefacepoints = [polygon1.vertices[i].pos,
                              polygon2.vertices[i].pos,
                              polygon2.vertices[nexti].pos,
                              polygon1.vertices[nexti].pos]
            polygons.append(Polygon.from_points(sidefacepoints, self.shared))
        polygons.append(polygon2.flipped())
        return _csg().CSG.from_polygons(polygons)

    @staticmethod
    def vertices_convex(vertices: Sequence[Vertex3D], planenormal: Vector3D) -> bool:
        count = len(vertices)
        if count < 3:
            return False
        prevprevpos = vertices[count - 2].pos
        prevpos = vertices[count - 1].pos
        for v in vertices:
            pos = v.pos
            if not Polygon.is_convex_point(prevprevpos, prevpos, pos, planenormal):
                return False
            prevprevpos = prevpos
            prevpos = pos
        return True

    @staticmethod
    def is_convex_point(prevpoint: Vector3D, point: Vector3D, nextpoint: Vector3D,
                        normal: Vector3D) -> bool:
        crossproduct = point.minus(prevpoint).cross(nextpoint.minus(point))
        return crossproduct.dot(normal) >= 0

"""2D vertices and sides, the boundary elements of a CAG area."""

from __future__ import annotations

import math
from typing import Optional

from csgkernel.constants import get_tag
from csgkernel.errors import FakePolygonError
from csgkernel.polygon import Polygon, Vertex3D
from csgkernel.vector import Vector2D


class Vertex2D:
    __slots__ = ('pos', '_tag')

    def __init__(self, pos: Vector2D):
        self.pos = pos
        self._tag = None

    def __repr__(self):
        return '({:.5f},{:.5f})'.format(self.pos.x, self.pos.y)

    def get_tag(self) -> int:
        if self._tag is None:
            self._tag = get_tag()
        return self._tag

    @classmethod
    def from_object(cls, obj) -> 'Vertex2D':
        if isinstance(obj, dict):
            obj = obj['pos']
        return cls(Vector2D.create(obj))


class Side:
    """Directed boundary segment from ``vertex0`` to ``vertex1``.

    The enclosed area lies to the left of the side, so a counter
    clockwise outline has positive area.
    """

    __slots__ = ('vertex0', 'vertex1', '_tag')

    def __init__(self, vertex0: Vertex2D, vertex1: Vertex2D):
        self.vertex0 = vertex0
        self.vertex1 = vertex1
        self._tag = None

    def __repr__(self):
        return '{!r} -> {!r}'.format(self.vertex0, self.vertex1)

    def get_tag(self) -> int:
        if self._tag is None:
            self._tag = get_tag()
        return self._tag

    def to_polygon3d(self, z0: float, z1: float) -> Polygon:
        """Vertical rectangle standing on this side between z0 and z1."""
        vertices = [Vertex3D(self.vertex0.pos.to_vector3d(z0)),
                    Vertex3D(self.vertex1.pos.to_vector3d(z0)),
                    Vertex3D(self.vertex1.pos.to_vector3d(z1)),
                    Vertex3D(self.vertex0.pos.to_vector3d(z1))]
        return Polygon(vertices)

    def transform(self, matrix) -> 'Side':
        return Side(Vertex2D(self.vertex0.pos.transform(matrix)),
                    Vertex2D(self.vertex1.pos.transform(matrix)))

    def flipped(self) -> 'Side':
        return Side(self.vertex1, self.vertex0)

    def direction(self) -> Vector2D:
        return self.vertex1.pos.minus(self.vertex0.pos)

    def length_squared(self) -> float:
        x = self.vertex1.pos.x - self.vertex0.pos.x
        y = self.vertex1.pos.y - self.vertex0.pos.y
        return x * x + y * y

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def to_object(self):
        return {'vertex0': self.vertex0.pos.to_list(),
                'vertex1': self.vertex1.pos.to_list()}

    @classmethod
    def from_object(cls, obj) -> 'Side':
        return cls(Vertex2D.from_object(obj['vertex0']),
                   Vertex2D.from_object(obj['vertex1']))

    @classmethod
    def from_fake_polygon(cls, polygon: Polygon) -> Optional['Side']:
        """Recover the side a wall polygon was built from.

        Returns None for the triangular residue a boolean operation can
        leave behind.  Raises :class:`FakePolygonError` if the polygon
        does not look like a wall.
        """
        if len(polygon.vertices) < 4:
            return None
        indices = []
        pts2d = []
        for i, v in enumerate(polygon.vertices):
            if v.pos.z > 0:
                indices.append(i)
                pts2d.append(Vector2D(v.pos.x, v.pos.y))
        if len(pts2d) != 2:
            raise FakePolygonError('from_fake_polygon: not enough points found',
                                   [v.pos.to_list() for v in polygon.vertices])
        d = indices[1] - indices[0]
        if d == 1:
            pts2d.reverse()
        elif d != 3:
            raise FakePolygonError('from_fake_polygon: unknown index ordering', indices)
        return cls(Vertex2D(pts2d[0]), Vertex2D(pts2d[1]))

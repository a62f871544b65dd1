"""Classification and splitting of a convex polygon by a plane."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from csgkernel.constants import EPS
from csgkernel.plane import Plane
from csgkernel.polygon import Polygon, Vertex3D

COPLANAR_FRONT = 0
COPLANAR_BACK = 1
FRONT = 2
BACK = 3
SPANNING = 4


@dataclass
class SplitResult:
    type: int
    front: Optional[Polygon] = None
    back: Optional[Polygon] = None


def _remove_close_neighbours(vertices: List[Vertex3D]) -> List[Vertex3D]:
    # cyclic: the first vertex is compared with the last
    if len(vertices) < 3:
        return vertices
    eps_squared = EPS * EPS
    result = []
    prev = vertices[-1]
    for vertex in vertices:
        if vertex.pos.distance_to_squared(prev.pos) >= eps_squared:
            result.append(vertex)
            prev = vertex
    return result


def split_polygon_by_plane(plane: Plane, polygon: Polygon) -> SplitResult:
    """Classify ``polygon`` against ``plane``, splitting it when it spans.

    Vertices within ``EPS`` of the plane count as lying on it.  For a
    spanning polygon the front and back fragments share the exact same
    intersection vertices; a fragment that degenerates to fewer than
    three vertices is returned as None.
    """
    if polygon.plane.equals(plane):
        return SplitResult(COPLANAR_FRONT)

    normal = plane.normal
    w = plane.w
    vertices = polygon.vertices
    has_front = False
    has_back = False
    vertex_is_back = []
    for vertex in vertices:
        t = normal.dot(vertex.pos) - w
        vertex_is_back.append(t < 0)
        if t > EPS:
            has_front = True
        if t < -EPS:
            has_back = True

    if not has_front and not has_back:
        t = normal.dot(polygon.plane.normal)
        return SplitResult(COPLANAR_FRONT if t >= 0 else COPLANAR_BACK)
    if not has_back:
        return SplitResult(FRONT)
    if not has_front:
        return SplitResult(BACK)

    front_vertices = []
    back_vertices = []
    n = len(vertices)
    is_back = vertex_is_back[0]
    for i, vertex in enumerate(vertices):
        nexti = (i + 1) % n
        next_is_back = vertex_is_back[nexti]
        if is_back == next_is_back:
            if is_back:
                back_vertices.append(vertex)
            else:
                front_vertices.append(vertex)
        else:
            point = plane.split_line_between_points(vertex.pos, vertices[nexti].pos)
            intersection = Vertex3D(point)
            if is_back:
                back_vertices.append(vertex)
                back_vertices.append(intersection)
                front_vertices.append(intersection)
            else:
                front_vertices.append(vertex)
                front_vertices.append(intersection)
                back_vertices.append(intersection)
        is_back = next_is_back

    back_vertices = _remove_close_neighbours(back_vertices)
    front_vertices = _remove_close_neighbours(front_vertices)

    result = SplitResult(SPANNING)
    if len(front_vertices) >= 3:
        result.front = Polygon(front_vertices, polygon.shared, polygon.plane)
    if len(back_vertices) >= 3:
        result.back = Polygon(back_vertices, polygon.shared, polygon.plane)
    return result

"""Validity checks for 2D areas.

These are the checks :class:`~csgkernel.cag.CAG` relies on when an
outline is built from user supplied points: self intersection, point
containment by ray casting and the closed-outline test.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from csgkernel.constants import EPS
from csgkernel.plane import solve_2_linear
from csgkernel.vector import Vector2D


def lines_intersect(p0: Vector2D, p1: Vector2D, p2: Vector2D, p3: Vector2D) -> bool:
    """True if segment p0-p1 properly crosses segment p2-p3.

    Segments sharing an end point and parallel segments never count as
    intersecting.
    """
    if p0.equals(p2) or p0.equals(p3) or p1.equals(p2) or p1.equals(p3):
        return False
    d0 = p1.minus(p0)
    d1 = p3.minus(p2)
    if abs(d0.cross(d1)) < 1e-9:
        return False
    alpha0, alpha1 = solve_2_linear(-d0.x, d1.x, -d0.y, d1.y, p0.x - p2.x, p0.y - p2.y)
    return 1e-6 < alpha0 < 0.999999 and 1e-5 < alpha1 < 0.999999


def is_self_intersecting(cag) -> bool:
    sides = cag.sides
    numsides = len(sides)
    for i in range(numsides):
        side0 = sides[i]
        for ii in range(i + 1, numsides):
            side1 = sides[ii]
            if lines_intersect(side0.vertex0.pos, side0.vertex1.pos,
                               side1.vertex0.pos, side1.vertex1.pos):
                return True
    return False


def _crosses_ray(p0: Vector2D, p1: Vector2D, p2: Vector2D) -> bool:
    # does side p1-p2 cross the ray from p0 towards +x?
    if (p1.y > p0.y) == (p2.y > p0.y):
        return False
    return p0.x < (p2.x - p1.x) * (p0.y - p1.y) / (p2.y - p1.y) + p1.x


def has_point_inside(cag, point) -> bool:
    """Even-odd containment test for ``point``."""
    p0 = Vector2D.create(point)
    numfound = 0
    for side in cag.sides:
        if _crosses_ray(p0, side.vertex0.pos, side.vertex1.pos):
            numfound += 1
    return numfound % 2 == 1


def contains(cag, other) -> bool:
    """True if every vertex of ``other`` lies inside ``cag``."""
    for side in other.sides:
        if not has_point_inside(cag, side.vertex0.pos):
            return False
    return True


def validate_cag(cag) -> List[str]:
    """Return a list of problems with ``cag``; empty if it is valid.

    A valid area has no crossing sides, every vertex is the end point of
    an even number of sides, and its area is not negative.
    """
    errors = []
    if is_self_intersecting(cag):
        errors.append('self intersects')
    pointcount: Dict[Tuple[float, float], int] = {}
    for side in cag.sides:
        for pos in (side.vertex0.pos, side.vertex1.pos):
            key = (pos.x, pos.y)
            pointcount[key] = pointcount.get(key, 0) + 1
    for key, count in pointcount.items():
        if count % 2:
            errors.append('uneven number of sides ({}) for point {}'.format(count, key))
    area = cag.area()
    if area < EPS * EPS:
        errors.append('area is {}'.format(area))
    return errors

"""Builders for basic solids and areas.

All curved shapes are approximated by planar facets; ``resolution`` is
the number of segments per full revolution.
"""

from __future__ import annotations

import math

from csgkernel.cag import CAG
from csgkernel.constants import DEFAULT_RESOLUTION_2D, DEFAULT_RESOLUTION_3D
from csgkernel.csg import CSG
from csgkernel.polygon import Polygon, Vertex3D
from csgkernel.vector import Vector2D, Vector3D

# corner index bits select -radius (0) or +radius (1) along x, y, z
_CUBE_FACES = (
    (0, 4, 6, 2),
    (1, 3, 7, 5),
    (0, 1, 5, 4),
    (2, 6, 7, 3),
    (0, 2, 3, 1),
    (4, 5, 7, 6),
)


def _radius3(radius) -> Vector3D:
    if isinstance(radius, (int, float)):
        return Vector3D(radius, radius, radius)
    return Vector3D.create(radius)


def _radius2(radius) -> Vector2D:
    if isinstance(radius, (int, float)):
        return Vector2D(radius, radius)
    return Vector2D.create(radius)


def cube(center=(0, 0, 0), radius=1) -> CSG:
    """Axis aligned box; ``radius`` is half the edge length, a number or
    one value per axis."""
    c = Vector3D.create(center)
    r = _radius3(radius)
    if r.x <= 0 or r.y <= 0 or r.z <= 0:
        raise ValueError('bad radius passed to cube: {}'.format(radius))
    polygons = []
    for face in _CUBE_FACES:
        vertices = []
        for i in face:
            pos = Vector3D(c.x + r.x * (2 * bool(i & 1) - 1),
                           c.y + r.y * (2 * bool(i & 2) - 1),
                           c.z + r.z * (2 * bool(i & 4) - 1))
            vertices.append(Vertex3D(pos))
        polygons.append(Polygon(vertices))
    return CSG.from_polygons(polygons)


def sphere(center=(0, 0, 0), radius=1.0, resolution=DEFAULT_RESOLUTION_3D) -> CSG:
    """UV sphere with ``resolution`` slices around the y axis and half as
    many stacks from pole to pole."""
    c = Vector3D.create(center)
    if radius <= 0:
        raise ValueError('bad radius passed to sphere: {}'.format(radius))
    slices = max(int(resolution), 4)
    stacks = max(slices // 2, 2)

    def vertex(theta, phi):
        theta *= 2.0 * math.pi
        phi *= math.pi
        direction = Vector3D(math.cos(theta) * math.sin(phi),
                             math.cos(phi),
                             math.sin(theta) * math.sin(phi))
        return Vertex3D(c.plus(direction.times(radius)))

    polygons = []
    for i in range(slices):
        for j in range(stacks):
            vertices = [vertex(i / slices, j / stacks)]
            if j > 0:
                vertices.append(vertex((i + 1) / slices, j / stacks))
            if j < stacks - 1:
                vertices.append(vertex((i + 1) / slices, (j + 1) / stacks))
            vertices.append(vertex(i / slices, (j + 1) / stacks))
            polygons.append(Polygon(vertices))
    return CSG.from_polygons(polygons)


def cylinder(start=(0, -1, 0), end=(0, 1, 0), radius=1.0,
             resolution=DEFAULT_RESOLUTION_3D) -> CSG:
    """Circular cylinder from ``start`` to ``end``."""
    s = Vector3D.create(start)
    e = Vector3D.create(end)
    ray = e.minus(s)
    if ray.length() == 0 or radius <= 0:
        raise ValueError('bad dimensions passed to cylinder: {} {} {}'.format(start, end, radius))
    slices = max(int(resolution), 3)
    axisz = ray.unit()
    isy = abs(axisz.y) > 0.5
    axisx = Vector3D(1 if isy else 0, 0 if isy else 1, 0).cross(axisz).unit()
    axisy = axisx.cross(axisz).unit()
    startvertex = Vertex3D(s)
    endvertex = Vertex3D(e)

    def point(stack, t):
        angle = t * 2.0 * math.pi
        out = axisx.times(math.cos(angle)).plus(axisy.times(math.sin(angle)))
        return Vertex3D(s.plus(ray.times(stack)).plus(out.times(radius)))

    polygons = []
    for i in range(slices):
        t0 = i / slices
        t1 = (i + 1) / slices
        polygons.append(Polygon([startvertex, point(0, t0), point(0, t1)]))
        polygons.append(Polygon([point(0, t1), point(0, t0), point(1, t0), point(1, t1)]))
        polygons.append(Polygon([endvertex, point(1, t1), point(1, t0)]))
    return CSG.from_polygons(polygons)


def circle(center=(0, 0), radius=1.0, resolution=DEFAULT_RESOLUTION_2D) -> CAG:
    c = Vector2D.create(center)
    if radius <= 0:
        raise ValueError('bad radius passed to circle: {}'.format(radius))
    n = max(int(resolution), 3)
    points = []
    for i in range(n):
        radians = 2.0 * math.pi * i / n
        points.append(c.plus(Vector2D.from_angle_radians(radians).times(radius)))
    return CAG.from_points(points)


def rectangle(center=(0, 0), radius=1, corner1=None, corner2=None) -> CAG:
    """Axis aligned rectangle given by center and half size, or by two
    opposite corners."""
    if corner1 is not None or corner2 is not None:
        if corner1 is None or corner2 is None:
            raise ValueError('rectangle needs both corner1 and corner2')
        c1 = Vector2D.create(corner1)
        c2 = Vector2D.create(corner2)
        c = c1.plus(c2).times(0.5)
        r = c2.minus(c1).abs().times(0.5)
    else:
        c = Vector2D.create(center)
        r = _radius2(radius)
    points = [Vector2D(c.x - r.x, c.y - r.y),
              Vector2D(c.x + r.x, c.y - r.y),
              Vector2D(c.x + r.x, c.y + r.y),
              Vector2D(c.x - r.x, c.y + r.y)]
    return CAG.from_points(points)

"""Compact binary and plain-object serialization of solids and areas.

The compact form is a dict of numpy arrays indexing shared vertex,
plane and attribute tables.  Values are canonicalized before writing so
the tables can be keyed by identity tag.  The plain-object form uses
nested lists and dicts only, suitable for JSON.
"""

from __future__ import annotations

from typing import Any, Dict, List

import numpy as np

from csgkernel.cag import CAG
from csgkernel.csg import CSG
from csgkernel.errors import SerializationError
from csgkernel.plane import Plane
from csgkernel.polygon import Polygon, Shared, Vertex3D
from csgkernel.side import Side, Vertex2D
from csgkernel.vector import Vector2D, Vector3D


def _check_class(data, expected: str):
    if not isinstance(data, dict) or data.get('class') != expected:
        found = data.get('class') if isinstance(data, dict) else type(data).__name__
        raise SerializationError('not a {} compact binary'.format(expected), {'class': found})


def _shared_to_object(shared: Shared):
    return None if shared.color is None else list(shared.color)


def csg_to_compact_binary(csg: CSG) -> Dict[str, Any]:
    csg = csg.canonicalized()
    numpolygons = len(csg.polygons)
    numpolygonvertices = sum(len(p.vertices) for p in csg.polygons)

    vertexmap: Dict[int, int] = {}
    vertices: List[Vector3D] = []
    planemap: Dict[int, int] = {}
    planes: List[Plane] = []
    sharedmap: Dict[int, int] = {}
    shareds: List[Shared] = []

    num_vertices_per_polygon = np.zeros(numpolygons, dtype=np.uint32)
    polygon_vertices = np.zeros(numpolygonvertices, dtype=np.uint32)
    polygon_plane_indexes = np.zeros(numpolygons, dtype=np.uint32)
    polygon_shared_indexes = np.zeros(numpolygons, dtype=np.uint32)

    polygonvertexindex = 0
    for polygonindex, polygon in enumerate(csg.polygons):
        for vertex in polygon.vertices:
            tag = vertex.get_tag()
            if tag not in vertexmap:
                vertexmap[tag] = len(vertices)
                vertices.append(vertex.pos)
            polygon_vertices[polygonvertexindex] = vertexmap[tag]
            polygonvertexindex += 1
        num_vertices_per_polygon[polygonindex] = len(polygon.vertices)

        tag = polygon.plane.get_tag()
        if tag not in planemap:
            planemap[tag] = len(planes)
            planes.append(polygon.plane)
        polygon_plane_indexes[polygonindex] = planemap[tag]

        tag = polygon.shared.get_tag()
        if tag not in sharedmap:
            sharedmap[tag] = len(shareds)
            shareds.append(polygon.shared)
        polygon_shared_indexes[polygonindex] = sharedmap[tag]

    vertex_data = np.array([v.to_list() for v in vertices], dtype=np.float64).reshape(-1)
    plane_data = np.array([p.to_list() for p in planes], dtype=np.float64).reshape(-1)

    return {
        'class': 'CSG',
        'num_polygons': numpolygons,
        'num_vertices_per_polygon': num_vertices_per_polygon,
        'polygon_vertices': polygon_vertices,
        'polygon_plane_indexes': polygon_plane_indexes,
        'polygon_shared_indexes': polygon_shared_indexes,
        'vertex_data': vertex_data,
        'plane_data': plane_data,
        'shared': [_shared_to_object(s) for s in shareds],
    }


def csg_from_compact_binary(data) -> CSG:
    """Rebuild a solid written by :func:`csg_to_compact_binary`.

    The result is flagged canonicalized and re-tessellated.
    """
    _check_class(data, 'CSG')
    try:
        num_vertices_per_polygon = np.asarray(data['num_vertices_per_polygon'], dtype=np.int64)
        polygon_vertices = np.asarray(data['polygon_vertices'], dtype=np.int64)
        polygon_plane_indexes = np.asarray(data['polygon_plane_indexes'], dtype=np.int64)
        polygon_shared_indexes = np.asarray(data['polygon_shared_indexes'], dtype=np.int64)
        vertex_data = np.asarray(data['vertex_data'], dtype=np.float64)
        plane_data = np.asarray(data['plane_data'], dtype=np.float64)
        shareddata = data['shared']
    except KeyError as e:
        raise SerializationError('missing field in compact binary', str(e)) from None

    numpolygons = len(num_vertices_per_polygon)
    if data.get('num_polygons', numpolygons) != numpolygons:
        raise SerializationError('polygon count mismatch',
                                 {'num_polygons': data.get('num_polygons'), 'found': numpolygons})
    if len(vertex_data) % 3 or len(plane_data) % 4:
        raise SerializationError('vertex or plane data has the wrong length',
                                 {'vertex_data': len(vertex_data), 'plane_data': len(plane_data)})
    if int(num_vertices_per_polygon.sum()) != len(polygon_vertices):
        raise SerializationError('polygon vertex count mismatch',
                                 {'expected': int(num_vertices_per_polygon.sum()),
                                  'found': len(polygon_vertices)})
    if len(polygon_plane_indexes) != numpolygons or len(polygon_shared_indexes) != numpolygons:
        raise SerializationError('per-polygon index arrays have the wrong length')

    vertices = [Vertex3D(Vector3D(*row)) for row in vertex_data.reshape(-1, 3).tolist()]
    planes = [Plane(Vector3D(row[0], row[1], row[2]), row[3])
              for row in plane_data.reshape(-1, 4).tolist()]
    shareds = [Shared(color) for color in shareddata]

    if numpolygons:
        if (polygon_vertices.size and polygon_vertices.max() >= len(vertices)) \
                or polygon_plane_indexes.max() >= len(planes) \
                or polygon_shared_indexes.max() >= len(shareds):
            raise SerializationError('index out of range in compact binary')

    polygons = []
    offset = 0
    for polygonindex in range(numpolygons):
        count = int(num_vertices_per_polygon[polygonindex])
        polygonvertices = [vertices[i] for i in polygon_vertices[offset:offset + count].tolist()]
        offset += count
        polygons.append(Polygon(polygonvertices,
                                shareds[polygon_shared_indexes[polygonindex]],
                                planes[polygon_plane_indexes[polygonindex]]))
    result = CSG.from_polygons(polygons)
    result.is_canonicalized = True
    result.is_retesselated = True
    return result


def cag_to_compact_binary(cag: CAG) -> Dict[str, Any]:
    cag = cag.canonicalized()
    vertexmap: Dict[int, int] = {}
    vertices: List[Vector2D] = []
    side_vertex_indices = np.zeros(2 * len(cag.sides), dtype=np.uint32)
    i = 0
    for side in cag.sides:
        for vertex in (side.vertex0, side.vertex1):
            tag = vertex.get_tag()
            if tag not in vertexmap:
                vertexmap[tag] = len(vertices)
                vertices.append(vertex.pos)
            side_vertex_indices[i] = vertexmap[tag]
            i += 1
    vertex_data = np.array([v.to_list() for v in vertices], dtype=np.float64).reshape(-1)
    return {
        'class': 'CAG',
        'side_vertex_indices': side_vertex_indices,
        'vertex_data': vertex_data,
    }


def cag_from_compact_binary(data) -> CAG:
    _check_class(data, 'CAG')
    try:
        side_vertex_indices = np.asarray(data['side_vertex_indices'], dtype=np.int64)
        vertex_data = np.asarray(data['vertex_data'], dtype=np.float64)
    except KeyError as e:
        raise SerializationError('missing field in compact binary', str(e)) from None
    if len(side_vertex_indices) % 2 or len(vertex_data) % 2:
        raise SerializationError('side or vertex data has the wrong length',
                                 {'side_vertex_indices': len(side_vertex_indices),
                                  'vertex_data': len(vertex_data)})
    vertices = [Vertex2D(Vector2D(x, y)) for x, y in vertex_data.reshape(-1, 2).tolist()]
    if side_vertex_indices.size and side_vertex_indices.max() >= len(vertices):
        raise SerializationError('index out of range in compact binary')
    sides = [Side(vertices[a], vertices[b])
             for a, b in side_vertex_indices.reshape(-1, 2).tolist()]
    result = CAG.from_sides(sides)
    result.is_canonicalized = True
    return result


def csg_to_object(csg: CSG) -> Dict[str, Any]:
    return {
        'class': 'CSG',
        'polygons': [p.to_object() for p in csg.polygons],
        'is_retesselated': csg.is_retesselated,
    }


def csg_from_object(obj) -> CSG:
    _check_class(obj, 'CSG')
    try:
        polygons = [Polygon.from_object(p) for p in obj['polygons']]
    except (KeyError, TypeError) as e:
        raise SerializationError('malformed polygon data', str(e)) from None
    result = CSG.from_polygons(polygons)
    result.is_retesselated = bool(obj.get('is_retesselated', False))
    return result


def cag_to_object(cag: CAG) -> Dict[str, Any]:
    return {
        'class': 'CAG',
        'sides': [s.to_object() for s in cag.sides],
    }


def cag_from_object(obj) -> CAG:
    _check_class(obj, 'CAG')
    try:
        sides = [Side.from_object(s) for s in obj['sides']]
    except (KeyError, TypeError) as e:
        raise SerializationError('malformed side data', str(e)) from None
    return CAG.from_sides(sides)

"""STL import and export for csgkernel solids."""

from __future__ import annotations

import re
import struct
from typing import List, NamedTuple, Tuple

from csgkernel.csg import CSG
from csgkernel.polygon import Polygon, Vertex3D
from csgkernel.vector import Vector3D

_HEADER_SIZE = 80
_STRUCT_TRIANGLE = struct.Struct('<12fH')

Point3 = Tuple[float, float, float]


class Triangle(NamedTuple):
    normal: Point3
    v0: Point3
    v1: Point3
    v2: Point3


def _triangles_from_csg(csg: CSG) -> List[Triangle]:
    triangles = []
    for polygon in csg.to_triangles():
        n = polygon.plane.normal
        v0, v1, v2 = (tuple(v.pos) for v in polygon.vertices)
        triangles.append(Triangle(normal=(n.x, n.y, n.z), v0=v0, v1=v1, v2=v2))
    return triangles


def write_stl(csg: CSG, path_or_file, *, binary: bool = True, name: str = 'csgkernel') -> None:
    """Write ``csg`` to STL.

    ``path_or_file`` can be a filesystem path or an open binary/text stream.
    """

    triangles = _triangles_from_csg(csg)

    if binary:
        _write_binary(triangles, path_or_file, name)
    else:
        _write_ascii(triangles, path_or_file, name)


def _write_binary(triangles: List[Triangle], path_or_file, name: str) -> None:
    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        stream = open(path_or_file, 'wb')
        close_when_done = True

    try:
        header = (name[:_HEADER_SIZE]).encode('ascii', errors='replace')
        header = header.ljust(_HEADER_SIZE, b' ')
        stream.write(header)
        stream.write(struct.pack('<I', len(triangles)))

        for tri in triangles:
            data = _STRUCT_TRIANGLE.pack(
                *tri.normal,
                *tri.v0,
                *tri.v1,
                *tri.v2,
                0,
            )
            stream.write(data)
    finally:
        if close_when_done:
            stream.close()


def _write_ascii(triangles: List[Triangle], path_or_file, name: str) -> None:
    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        stream = open(path_or_file, 'w', encoding='ascii')
        close_when_done = True

    try:
        print(f"solid {name}", file=stream)
        for tri in triangles:
            print(f"  facet normal {tri.normal[0]:.6e} {tri.normal[1]:.6e} {tri.normal[2]:.6e}", file=stream)
            print("    outer loop", file=stream)
            for v in (tri.v0, tri.v1, tri.v2):
                print(f"      vertex {v[0]:.9e} {v[1]:.9e} {v[2]:.9e}", file=stream)
            print("    endloop", file=stream)
            print("  endfacet", file=stream)
        print(f"endsolid {name}", file=stream)
    finally:
        if close_when_done:
            stream.close()


# ---------------------------------------------------------------------------
# STL Import
# ---------------------------------------------------------------------------


def _is_binary_stl(data: bytes) -> bool:
    """Binary STL has an 80-byte header and a 4-byte count, then 50 bytes
    per triangle.  ASCII STL starts with the 'solid' keyword, but so do
    some binary headers."""
    if len(data) < 84:
        return False
    header = data[:80].decode('ascii', errors='ignore').strip().lower()
    if not header.startswith('solid'):
        return True
    tri_count = struct.unpack('<I', data[80:84])[0]
    if len(data) != 84 + tri_count * 50:
        return False
    rest = data[84:min(200, len(data))]
    return not (b'facet' in rest or b'vertex' in rest)


def _parse_binary_stl(data: bytes) -> List[Triangle]:
    if len(data) < 84:
        raise ValueError("Invalid binary STL: file too small")

    tri_count = struct.unpack('<I', data[80:84])[0]
    triangles = []
    offset = 84

    for _ in range(tri_count):
        if offset + 50 > len(data):
            break
        values = _STRUCT_TRIANGLE.unpack(data[offset:offset + 50])
        triangles.append(Triangle(normal=values[0:3], v0=values[3:6],
                                  v1=values[6:9], v2=values[9:12]))
        offset += 50

    return triangles


_NUM = r'([eE\d.+-]+)'
_FACET_PATTERN = re.compile(
    r'facet\s+normal\s+' + r'\s+'.join([_NUM] * 3) + r'\s+'
    r'outer\s+loop\s+'
    r'vertex\s+' + r'\s+'.join([_NUM] * 3) + r'\s+'
    r'vertex\s+' + r'\s+'.join([_NUM] * 3) + r'\s+'
    r'vertex\s+' + r'\s+'.join([_NUM] * 3) + r'\s+'
    r'endloop\s+endfacet',
    re.IGNORECASE
)


def _parse_ascii_stl(text: str) -> List[Triangle]:
    triangles = []
    for match in _FACET_PATTERN.finditer(text):
        values = [float(g) for g in match.groups()]
        triangles.append(Triangle(normal=tuple(values[0:3]), v0=tuple(values[3:6]),
                                  v1=tuple(values[6:9]), v2=tuple(values[9:12])))
    return triangles


def read_stl(path_or_file) -> CSG:
    """Read an STL file and return a solid made of its triangles.

    Zero area facets are skipped.  The solid is neither re-tessellated
    nor canonicalized.
    """
    if hasattr(path_or_file, 'read'):
        data = path_or_file.read()
        if isinstance(data, str):
            data = data.encode('utf-8')
    else:
        with open(path_or_file, 'rb') as f:
            data = f.read()

    if _is_binary_stl(data):
        triangles = _parse_binary_stl(data)
    else:
        triangles = _parse_ascii_stl(data.decode('utf-8', errors='replace'))

    polygons = []
    for tri in triangles:
        points = [Vector3D(*tri.v0), Vector3D(*tri.v1), Vector3D(*tri.v2)]
        if points[1].minus(points[0]).cross(points[2].minus(points[0])).length() == 0:
            continue
        polygons.append(Polygon([Vertex3D(p) for p in points]))
    return CSG.from_polygons(polygons)


__all__ = ['write_stl', 'read_stl']

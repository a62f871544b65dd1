import io
import struct

from csgkernel.io.stl import read_stl, write_stl
from csgkernel.primitives import cube


def test_write_stl_binary(tmp_path):
    box = cube()
    path = tmp_path / 'box.stl'
    write_stl(box, path, binary=True, name='test')

    data = path.read_bytes()
    assert len(data) == 80 + 4 + 12 * 50  # header + count + two triangles per face
    assert data[0:4] == b'test'
    count = struct.unpack('<I', data[80:84])[0]
    assert count == 12


def test_write_stl_ascii():
    buf = io.StringIO()
    write_stl(cube(), buf, binary=False, name='ascii_test')

    text = buf.getvalue()
    assert 'solid ascii_test' in text
    assert text.count('facet normal') == 12
    assert 'vertex' in text
    assert text.strip().endswith('endsolid ascii_test')


# ---------------------------------------------------------------------------
# STL Import Tests
# ---------------------------------------------------------------------------


def test_read_stl_binary_roundtrip():
    """Test binary STL round-trip: export then import."""
    buf = io.BytesIO()
    write_stl(cube(radius=2), buf, binary=True)
    buf.seek(0)

    imported = read_stl(buf)
    assert len(imported.polygons) == 12
    assert all(len(p.vertices) == 3 for p in imported.polygons)
    assert abs(imported.volume() - 64.0) < 1e-9


def test_read_stl_ascii_roundtrip(tmp_path):
    """Test ASCII STL round-trip: export then import."""
    path = tmp_path / 'box_ascii.stl'
    write_stl(cube(center=(1, 0, 0)), path, binary=False)

    imported = read_stl(path)
    assert len(imported.polygons) == 12
    lo, hi = imported.get_bounds()
    assert lo.x == 0.0 and hi.x == 2.0


def test_read_stl_union(tmp_path):
    """Imported meshes take part in boolean operations."""
    path = tmp_path / 'box.stl'
    write_stl(cube(radius=0.5), path)
    imported = read_stl(path)
    result = imported.union(cube(center=(0.5, 0, 0), radius=0.5))
    assert abs(result.volume() - 1.5) < 1e-9


def test_read_stl_skips_degenerate():
    facet = struct.pack('<12fH', 0, 0, 1, 0, 0, 0, 1, 0, 0, 2, 0, 0, 0)
    good = struct.pack('<12fH', 0, 0, 1, 0, 0, 0, 1, 0, 0, 0, 1, 0, 0)
    data = b'x' * 80 + struct.pack('<I', 2) + facet + good
    imported = read_stl(io.BytesIO(data))
    assert len(imported.polygons) == 1

"""Unit tests for compact binary, plain object and DXF output"""

import json

import ezdxf
import numpy as np
import pytest

from csgkernel.cag import CAG
from csgkernel.csg import CSG
from csgkernel.errors import SerializationError
from csgkernel.io import write_dxf
from csgkernel.io.compact import csg_from_compact_binary, csg_to_compact_binary
from csgkernel.primitives import cube, rectangle


class TestCompactBinary:
    """shared vertex and plane tables"""

    def test_csg_tables(self):
        data = csg_to_compact_binary(cube().set_color(1, 0, 0))
        assert data['class'] == 'CSG'
        assert data['num_polygons'] == 6
        assert len(data['vertex_data']) == 8 * 3
        assert len(data['plane_data']) == 6 * 4
        assert len(data['polygon_vertices']) == 24
        assert data['polygon_vertices'].dtype == np.uint32
        assert data['shared'] == [[1.0, 0.0, 0.0, 1.0]]

    def test_csg_roundtrip(self):
        solid = cube(radius=0.5).union(cube(center=(0.5, 0, 0), radius=0.5))
        restored = CSG.from_compact_binary(solid.to_compact_binary())
        assert restored.volume() == pytest.approx(1.5)
        assert len(restored.polygons) == len(solid.polygons)
        assert restored.is_canonicalized and restored.is_retesselated
        # vertices are shared between polygons again
        ids = {id(v) for p in restored.polygons for v in p.vertices}
        assert len(ids) < sum(len(p.vertices) for p in restored.polygons)

    def test_csg_bad_data(self):
        data = cube().to_compact_binary()
        with pytest.raises(SerializationError):
            CSG.from_compact_binary(dict(data, **{'class': 'CAG'}))
        with pytest.raises(SerializationError):
            CSG.from_compact_binary(dict(data, vertex_data=data['vertex_data'][:-1]))
        with pytest.raises(SerializationError):
            CSG.from_compact_binary(dict(data, polygon_vertices=data['polygon_vertices'][:-1]))
        bad_index = data['polygon_vertices'].copy()
        bad_index[0] = 100
        with pytest.raises(SerializationError):
            csg_from_compact_binary(dict(data, polygon_vertices=bad_index))
        missing = dict(data)
        del missing['plane_data']
        with pytest.raises(SerializationError):
            CSG.from_compact_binary(missing)

    def test_empty(self):
        restored = CSG.from_compact_binary(CSG().to_compact_binary())
        assert restored.polygons == []

    def test_cag_roundtrip(self):
        shape = rectangle(radius=2).subtract(rectangle(radius=1))
        data = shape.to_compact_binary()
        assert data['class'] == 'CAG'
        restored = CAG.from_compact_binary(data)
        assert restored.area() == pytest.approx(12.0)
        assert restored.is_canonicalized
        with pytest.raises(SerializationError):
            CAG.from_compact_binary(cube().to_compact_binary())


class TestObject:
    """plain lists and dicts"""

    def test_csg_json(self):
        solid = cube().set_color(0, 1, 0)
        text = json.dumps(solid.to_object())
        restored = CSG.from_object(json.loads(text))
        assert len(restored.polygons) == 6
        assert restored.volume() == pytest.approx(8.0)
        assert restored.polygons[0].shared.color == (0.0, 1.0, 0.0, 1.0)

    def test_cag_json(self):
        shape = rectangle(radius=(2, 1))
        restored = CAG.from_object(json.loads(json.dumps(shape.to_object())))
        assert restored.area() == pytest.approx(8.0)

    def test_malformed(self):
        with pytest.raises(SerializationError):
            CSG.from_object({'class': 'CSG', 'polygons': [{'plane': None}]})
        with pytest.raises(SerializationError):
            CAG.from_object({'class': 'CSG', 'sides': []})
        with pytest.raises(SerializationError):
            CAG.from_object({'class': 'CAG', 'sides': [{'vertex0': [0, 0]}]})


class TestDXF:
    """ezdxf output"""

    def test_write(self, tmp_path):
        path = write_dxf(rectangle(radius=1), tmp_path / 'square')
        assert path.suffix == '.dxf'
        doc = ezdxf.readfile(str(path))
        lines = doc.modelspace().query('LINE')
        assert len(lines) == 4
        assert all(line.dxf.layer == 'PATHS' for line in lines)

    def test_layer(self, tmp_path):
        path = write_dxf(rectangle(radius=1), tmp_path / 'square.dxf', layer='OUTLINE')
        doc = ezdxf.readfile(str(path))
        assert 'OUTLINE' in doc.layers
        assert len(doc.modelspace().query('LINE[layer=="OUTLINE"]')) == 4

"""Unit tests for connectors and property sets"""

from csgkernel.primitives import cube
from csgkernel.properties import EMPTY_PROPERTIES, Connector, Properties
from csgkernel.vector import Vector3D


def close(a, b, tol=1e-9):
    return all(abs(x - y) < tol for x, y in zip(a, b))


class TestConnector:
    """connectors follow their solid"""

    def test_normalized(self):
        c = Connector((0, 0, 0), (0, 0, 5), (2, 0, 0))
        assert c.axisvector == Vector3D(0, 0, 1)
        assert c.normalvector == Vector3D(1, 0, 0)

    def test_transform(self):
        c = Connector((1, 0, 0), (0, 0, 1), (1, 0, 0))
        moved = c.translate((0, 0, 3))
        assert close(moved.point, (1, 0, 3))
        assert close(moved.axisvector, (0, 0, 1))
        turned = c.rotate_z(90)
        assert close(turned.point, (0, 1, 0))
        assert close(turned.normalvector, (0, 1, 0))
        assert close(c.flipped().axisvector, (0, 0, -1))


class TestProperties:
    """named connector sets"""

    def test_merge(self):
        a = Properties().with_connector('top', Connector((0, 0, 1), (0, 0, 1), (1, 0, 0)))
        b = Properties().with_connector('top', Connector((0, 0, 9), (0, 0, 1), (1, 0, 0)))
        b = b.with_connector('side', Connector((1, 0, 0), (1, 0, 0), (0, 0, 1)))
        merged = a.merge(b)
        assert set(merged) == {'top', 'side'}
        assert merged['top'].point == Vector3D(0, 0, 1)
        assert EMPTY_PROPERTIES.merge(a) is not a
        assert a.merge(EMPTY_PROPERTIES) is a

    def test_solid_properties(self):
        box = cube(radius=0.5)
        box.properties = box.properties.with_connector(
            'top', Connector((0, 0, 0.5), (0, 0, 1), (1, 0, 0)))
        moved = box.translate((0, 0, 2))
        assert close(moved.properties['top'].point, (0, 0, 2.5))
        # the source solid keeps its own set
        assert close(box.properties['top'].point, (0, 0, 0.5))
        other = cube(center=(0.5, 0, 0), radius=0.5)
        other.properties = other.properties.with_connector(
            'side', Connector((1, 0, 0), (1, 0, 0), (0, 0, 1)))
        union = box.union(other)
        assert 'top' in union.properties and 'side' in union.properties
        assert 'top' in box.subtract(other).properties
        assert len(box.invert().properties) == 1


"""Immutable 2D and 3D vectors used throughout csgkernel.

Vectors are small value objects.  Arithmetic methods return new vectors,
and instances compare and hash by their exact coordinates.
"""

from __future__ import annotations

import math
from typing import Iterable, Iterator, Sequence, Union

import numpy as np

Number = Union[int, float]


def _isgoodnum(n) -> bool:
    return (not isinstance(n, bool)) and isinstance(n, (int, float))


class Vector3D:
    """Represents a 3D vector with x, y, z coordinates."""

    __slots__ = ('_x', '_y', '_z')

    def __init__(self, x: Number = 0.0, y: Number = 0.0, z: Number = 0.0):
        self._x = float(x)
        self._y = float(y)
        self._z = float(z)

    @classmethod
    def create(cls, value) -> 'Vector3D':
        """Build a vector from a Vector3D, a Vector2D or a 2/3 element sequence."""
        if isinstance(value, Vector3D):
            return value
        if isinstance(value, Vector2D):
            return cls(value.x, value.y, 0.0)
        if isinstance(value, (list, tuple)):
            if len(value) == 3:
                return cls(value[0], value[1], value[2])
            if len(value) == 2:
                return cls(value[0], value[1], 0.0)
        if isinstance(value, np.ndarray) and value.shape in ((2,), (3,)):
            return cls.create(value.tolist())
        raise ValueError('bad thing passed to Vector3D.create: {}'.format(value))

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    @property
    def z(self) -> float:
        return self._z

    def __repr__(self):
        return 'Vector3D({}, {}, {})'.format(self._x, self._y, self._z)

    def __iter__(self) -> Iterator[float]:
        yield self._x
        yield self._y
        yield self._z

    def __len__(self):
        return 3

    def __getitem__(self, i):
        return (self._x, self._y, self._z)[i]

    def __eq__(self, other):
        if not isinstance(other, Vector3D):
            return NotImplemented
        return self._x == other._x and self._y == other._y and self._z == other._z

    def __hash__(self):
        return hash((self._x, self._y, self._z))

    def __add__(self, other):
        return self.plus(other)

    def __sub__(self, other):
        return self.minus(other)

    def __mul__(self, f):
        return self.times(f)

    __rmul__ = __mul__

    def __neg__(self):
        return self.negated()

    def negated(self) -> 'Vector3D':
        return Vector3D(-self._x, -self._y, -self._z)

    def abs(self) -> 'Vector3D':
        return Vector3D(abs(self._x), abs(self._y), abs(self._z))

    def plus(self, a: 'Vector3D') -> 'Vector3D':
        return Vector3D(self._x + a.x, self._y + a.y, self._z + a.z)

    def minus(self, a: 'Vector3D') -> 'Vector3D':
        return Vector3D(self._x - a.x, self._y - a.y, self._z - a.z)

    def times(self, f: Number) -> 'Vector3D':
        if not _isgoodnum(f):
            raise ValueError('bad scale factor passed to times: {}'.format(f))
        return Vector3D(self._x * f, self._y * f, self._z * f)

    def divided_by(self, f: Number) -> 'Vector3D':
        return Vector3D(self._x / f, self._y / f, self._z / f)

    def dot(self, a: 'Vector3D') -> float:
        return self._x * a.x + self._y * a.y + self._z * a.z

    def lerp(self, a: 'Vector3D', t: float) -> 'Vector3D':
        return self.plus(a.minus(self).times(t))

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def unit(self) -> 'Vector3D':
        return self.divided_by(self.length())

    def cross(self, a: 'Vector3D') -> 'Vector3D':
        return Vector3D(self._y * a.z - self._z * a.y,
                        self._z * a.x - self._x * a.z,
                        self._x * a.y - self._y * a.x)

    def distance_to(self, a: 'Vector3D') -> float:
        return self.minus(a).length()

    def distance_to_squared(self, a: 'Vector3D') -> float:
        return self.minus(a).length_squared()

    def equals(self, a: 'Vector3D') -> bool:
        return self == a

    def min(self, p: 'Vector3D') -> 'Vector3D':
        return Vector3D(min(self._x, p.x), min(self._y, p.y), min(self._z, p.z))

    def max(self, p: 'Vector3D') -> 'Vector3D':
        return Vector3D(max(self._x, p.x), max(self._y, p.y), max(self._z, p.z))

    def transform(self, matrix) -> 'Vector3D':
        """Right multiply a 4x4 matrix by this point (w = 1)."""
        return Vector3D(*matrix.transform_point(self))

    def random_non_parallel_vector(self) -> 'Vector3D':
        """Return the coordinate axis least aligned with this vector."""
        a = self.abs()
        if a.x <= a.y and a.x <= a.z:
            return Vector3D(1, 0, 0)
        elif a.y <= a.x and a.y <= a.z:
            return Vector3D(0, 1, 0)
        return Vector3D(0, 0, 1)

    def to_list(self):
        return [self._x, self._y, self._z]


class Vector2D:
    """Represents a 2D vector with x, y coordinates."""

    __slots__ = ('_x', '_y')

    def __init__(self, x: Number = 0.0, y: Number = 0.0):
        self._x = float(x)
        self._y = float(y)

    @classmethod
    def create(cls, value) -> 'Vector2D':
        if isinstance(value, Vector2D):
            return value
        if isinstance(value, Vector3D):
            return cls(value.x, value.y)
        if isinstance(value, (list, tuple)) and len(value) >= 2:
            return cls(value[0], value[1])
        raise ValueError('bad thing passed to Vector2D.create: {}'.format(value))

    @classmethod
    def from_angle_radians(cls, radians: float) -> 'Vector2D':
        return cls(math.cos(radians), math.sin(radians))

    @classmethod
    def from_angle_degrees(cls, degrees: float) -> 'Vector2D':
        return cls.from_angle_radians(math.radians(degrees))

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    def __repr__(self):
        return 'Vector2D({}, {})'.format(self._x, self._y)

    def __iter__(self) -> Iterator[float]:
        yield self._x
        yield self._y

    def __len__(self):
        return 2

    def __getitem__(self, i):
        return (self._x, self._y)[i]

    def __eq__(self, other):
        if not isinstance(other, Vector2D):
            return NotImplemented
        return self._x == other._x and self._y == other._y

    def __hash__(self):
        return hash((self._x, self._y))

    def __add__(self, other):
        return self.plus(other)

    def __sub__(self, other):
        return self.minus(other)

    def __mul__(self, f):
        return self.times(f)

    __rmul__ = __mul__

    def __neg__(self):
        return self.negated()

    def negated(self) -> 'Vector2D':
        return Vector2D(-self._x, -self._y)

    def abs(self) -> 'Vector2D':
        return Vector2D(abs(self._x), abs(self._y))

    def plus(self, a: 'Vector2D') -> 'Vector2D':
        return Vector2D(self._x + a.x, self._y + a.y)

    def minus(self, a: 'Vector2D') -> 'Vector2D':
        return Vector2D(self._x - a.x, self._y - a.y)

    def times(self, f: Number) -> 'Vector2D':
        if not _isgoodnum(f):
            raise ValueError('bad scale factor passed to times: {}'.format(f))
        return Vector2D(self._x * f, self._y * f)

    def divided_by(self, f: Number) -> 'Vector2D':
        return Vector2D(self._x / f, self._y / f)

    def dot(self, a: 'Vector2D') -> float:
        return self._x * a.x + self._y * a.y

    def lerp(self, a: 'Vector2D', t: float) -> 'Vector2D':
        return self.plus(a.minus(self).times(t))

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def unit(self) -> 'Vector2D':
        return self.divided_by(self.length())

    # z component of the 3D cross product
    def cross(self, a: 'Vector2D') -> float:
        return self._x * a.y - self._y * a.x

    # vector rotated 90 degrees clockwise
    def normal(self) -> 'Vector2D':
        return Vector2D(self._y, -self._x)

    def angle_radians(self) -> float:
        return math.atan2(self._y, self._x)

    def angle_degrees(self) -> float:
        return math.degrees(self.angle_radians())

    def distance_to(self, a: 'Vector2D') -> float:
        return self.minus(a).length()

    def distance_to_squared(self, a: 'Vector2D') -> float:
        return self.minus(a).length_squared()

    def equals(self, a: 'Vector2D') -> bool:
        return self == a

    def min(self, p: 'Vector2D') -> 'Vector2D':
        return Vector2D(min(self._x, p.x), min(self._y, p.y))

    def max(self, p: 'Vector2D') -> 'Vector2D':
        return Vector2D(max(self._x, p.x), max(self._y, p.y))

    def transform(self, matrix) -> 'Vector2D':
        x, y, _ = matrix.transform_point((self._x, self._y, 0.0))
        return Vector2D(x, y)

    def to_vector3d(self, z: Number = 0.0) -> Vector3D:
        return Vector3D(self._x, self._y, z)

    def to_list(self):
        return [self._x, self._y]


def vectors3d(points: Iterable[Sequence[float]]):
    """Convert an iterable of 3D-like points into a list of Vector3D."""
    return [Vector3D.create(p) for p in points]

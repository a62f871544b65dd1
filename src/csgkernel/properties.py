"""Typed properties attached to solids.

A :class:`Properties` set maps names to :class:`Connector` annotations.
Transforming a solid transforms every connector with it; union merges
the sets of both operands.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator

from csgkernel.transforms import Transformable
from csgkernel.vector import Vector3D


@dataclass(frozen=True)
class Connector(Transformable):
    """A point with an axis and a normal, for example a mounting point."""

    point: Vector3D
    axisvector: Vector3D
    normalvector: Vector3D

    def __post_init__(self):
        object.__setattr__(self, 'point', Vector3D.create(self.point))
        object.__setattr__(self, 'axisvector', Vector3D.create(self.axisvector).unit())
        object.__setattr__(self, 'normalvector', Vector3D.create(self.normalvector).unit())

    def transform(self, matrix) -> 'Connector':
        newpoint = self.point.transform(matrix)
        newaxis = self.point.plus(self.axisvector).transform(matrix).minus(newpoint)
        newnormal = self.point.plus(self.normalvector).transform(matrix).minus(newpoint)
        return Connector(newpoint, newaxis, newnormal)

    def flipped(self) -> 'Connector':
        return Connector(self.point, self.axisvector.negated(), self.normalvector)


@dataclass(frozen=True)
class Properties:
    connectors: Dict[str, Connector] = field(default_factory=dict)

    def __len__(self):
        return len(self.connectors)

    def __iter__(self) -> Iterator[str]:
        return iter(self.connectors)

    def __contains__(self, name):
        return name in self.connectors

    def __getitem__(self, name) -> Connector:
        return self.connectors[name]

    def with_connector(self, name: str, connector: Connector) -> 'Properties':
        connectors = dict(self.connectors)
        connectors[name] = connector
        return Properties(connectors)

    def transform(self, matrix) -> 'Properties':
        if not self.connectors:
            return self
        return Properties({name: c.transform(matrix) for name, c in self.connectors.items()})

    # names already present in self win
    def merge(self, other: 'Properties') -> 'Properties':
        if not other.connectors:
            return self
        connectors = dict(other.connectors)
        connectors.update(self.connectors)
        return Properties(connectors)


EMPTY_PROPERTIES = Properties()

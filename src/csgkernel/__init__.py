# -*- coding: utf-8 -*-
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("csgkernel")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from csgkernel.cag import CAG
from csgkernel.csg import CSG, group
from csgkernel.errors import (ContractError, DegeneratePolygonError, FakePolygonError,
                              GeometryError, NonConvexPolygonError, ParallelPlanesError,
                              SelfIntersectionError, SerializationError)
from csgkernel.plane import Line2D, Line3D, OrthoNormalBasis, Plane
from csgkernel.polygon import Polygon, Shared, Vertex3D
from csgkernel.primitives import circle, cube, cylinder, rectangle, sphere
from csgkernel.properties import Connector, Properties
from csgkernel.side import Side, Vertex2D
from csgkernel.vector import Vector2D, Vector3D

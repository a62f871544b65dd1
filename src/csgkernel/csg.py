"""Solids as sets of convex polygons, and their boolean combination.

A :class:`CSG` is an immutable value: every operation returns a new
solid and never mutates its operands.  Boolean operations build one
BSP :class:`~csgkernel.boolean.trees.Tree` per operand, clip the trees
against each other and collect the surviving polygons.  Fragments
produced along the way are merged again by re-tessellation, and
near-coincident vertices are collapsed by canonicalization.

Copyright (c) 2025 csgkernel contributors
MIT License
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from csgkernel.boolean.trees import Tree
from csgkernel.canonicalize import canonicalize_csg
from csgkernel.polygon import Polygon, Shared, Vertex3D
from csgkernel.properties import EMPTY_PROPERTIES
from csgkernel.retesselate import retesselate_csg
from csgkernel.transforms import Transformable
from csgkernel.vector import Vector3D

logger = logging.getLogger(__name__)


def _compact():
    from csgkernel.io import compact
    return compact


def _operands(args) -> list:
    # accept op(a, b, c) as well as op([a, b, c])
    if len(args) == 1 and isinstance(args[0], (list, tuple)):
        return list(args[0])
    return list(args)


class CSG(Transformable):
    """A solid bounded by convex polygons whose normals point outwards."""

    def __init__(self, polygons: Optional[Sequence[Polygon]] = None):
        self.polygons: List[Polygon] = list(polygons) if polygons else []
        self.properties = EMPTY_PROPERTIES
        self.is_canonicalized = False
        self.is_retesselated = False
        self._bounds: Optional[Tuple[Vector3D, Vector3D]] = None

    def __repr__(self):
        return 'CSG({} polygons)'.format(len(self.polygons))

    @classmethod
    def from_polygons(cls, polygons: Sequence[Polygon]) -> 'CSG':
        return cls(polygons)

    # -- booleans --------------------------------------------------------

    def union(self, *others) -> 'CSG':
        """Union of this solid with one or more others.

        Operands are combined pairwise so the work forms a balanced
        binary tree.  The result is re-tessellated and canonicalized.
        """
        csgs = [self] + _operands(others)
        logger.debug('union of %d solids', len(csgs))
        i = 1
        while i < len(csgs):
            csgs.append(csgs[i - 1].union_sub(csgs[i]))
            i += 2
        return csgs[i - 1].retesselated().canonicalized()

    def union_sub(self, csg: 'CSG', retesselate: bool = False,
                  canonicalize: bool = False) -> 'CSG':
        if not self.may_overlap(csg):
            return self.union_for_non_intersecting(csg)
        a = Tree(self.polygons)
        b = Tree(csg.polygons)
        a.clip_to(b, False)
        b.clip_to(a)
        b.invert()
        b.clip_to(a)
        b.invert()
        newpolygons = a.all_polygons() + b.all_polygons()
        logger.debug('union_sub: %d + %d polygons -> %d',
                     len(self.polygons), len(csg.polygons), len(newpolygons))
        result = CSG.from_polygons(newpolygons)
        result.properties = self.properties.merge(csg.properties)
        if retesselate:
            result = result.retesselated()
        if canonicalize:
            result = result.canonicalized()
        return result

    def union_for_non_intersecting(self, csg: 'CSG') -> 'CSG':
        """Union of two solids known not to overlap: the polygon lists are
        simply concatenated."""
        result = CSG.from_polygons(self.polygons + csg.polygons)
        result.properties = self.properties.merge(csg.properties)
        result.is_canonicalized = self.is_canonicalized and csg.is_canonicalized
        result.is_retesselated = self.is_retesselated and csg.is_retesselated
        return result

    def subtract(self, *others) -> 'CSG':
        """Remove every other solid from this one, in order."""
        csgs = _operands(others)
        logger.debug('subtract of %d solids', len(csgs))
        result = self
        for i, csg in enumerate(csgs):
            islast = i == len(csgs) - 1
            result = result.subtract_sub(csg, islast, islast)
        return result

    def subtract_sub(self, csg: 'CSG', retesselate: bool = False,
                     canonicalize: bool = False) -> 'CSG':
        a = Tree(self.polygons)
        b = Tree(csg.polygons)
        a.invert()
        a.clip_to(b)
        b.clip_to(a, True)
        a.add_polygons(b.all_polygons())
        a.invert()
        result = CSG.from_polygons(a.all_polygons())
        result.properties = self.properties
        if retesselate:
            result = result.retesselated()
        if canonicalize:
            result = result.canonicalized()
        return result

    def intersect(self, *others) -> 'CSG':
        """Common volume of this solid and every other one."""
        csgs = _operands(others)
        logger.debug('intersect of %d solids', len(csgs))
        result = self
        for i, csg in enumerate(csgs):
            islast = i == len(csgs) - 1
            result = result.intersect_sub(csg, islast, islast)
        return result

    def intersect_sub(self, csg: 'CSG', retesselate: bool = False,
                      canonicalize: bool = False) -> 'CSG':
        a = Tree(self.polygons)
        b = Tree(csg.polygons)
        a.invert()
        b.clip_to(a)
        b.invert()
        a.clip_to(b)
        b.clip_to(a)
        a.add_polygons(b.all_polygons())
        a.invert()
        result = CSG.from_polygons(a.all_polygons())
        result.properties = self.properties
        if retesselate:
            result = result.retesselated()
        if canonicalize:
            result = result.canonicalized()
        return result

    def invert(self) -> 'CSG':
        """Swap inside and outside."""
        result = CSG.from_polygons([p.flipped() for p in self.polygons])
        result.properties = self.properties
        return result

    # -- cleanup ---------------------------------------------------------

    def canonicalized(self) -> 'CSG':
        if self.is_canonicalized:
            return self
        return canonicalize_csg(self)

    def retesselated(self) -> 'CSG':
        if self.is_retesselated:
            return self
        return retesselate_csg(self)

    # -- transformation --------------------------------------------------

    def transform(self, matrix) -> 'CSG':
        ismirror = matrix.is_mirroring()
        # polygons share planes and vertices after canonicalization;
        # transform each of them once
        transformedplanes: Dict[int, object] = {}
        transformedvertices: Dict[int, Vertex3D] = {}
        newpolygons = []
        for polygon in self.polygons:
            plane = polygon.plane
            newplane = transformedplanes.get(id(plane))
            if newplane is None:
                newplane = plane.transform(matrix)
                transformedplanes[id(plane)] = newplane
            newvertices = []
            for vertex in polygon.vertices:
                newvertex = transformedvertices.get(id(vertex))
                if newvertex is None:
                    newvertex = vertex.transform(matrix)
                    transformedvertices[id(vertex)] = newvertex
                newvertices.append(newvertex)
            if ismirror:
                newvertices.reverse()
            newpolygons.append(Polygon(newvertices, polygon.shared, newplane))
        result = CSG.from_polygons(newpolygons)
        result.properties = self.properties.transform(matrix)
        result.is_retesselated = self.is_retesselated
        result.is_canonicalized = self.is_canonicalized
        return result

    # -- queries ---------------------------------------------------------

    def get_bounds(self) -> Tuple[Vector3D, Vector3D]:
        """Axis aligned bounding box as ``(min, max)``; both corners are
        the origin for an empty solid."""
        if self._bounds is None:
            minpoint = maxpoint = None
            for polygon in self.polygons:
                lo, hi = polygon.bounding_box()
                if minpoint is None:
                    minpoint, maxpoint = lo, hi
                else:
                    minpoint = minpoint.min(lo)
                    maxpoint = maxpoint.max(hi)
            if minpoint is None:
                minpoint = maxpoint = Vector3D(0, 0, 0)
            self._bounds = (minpoint, maxpoint)
        return self._bounds

    def may_overlap(self, csg: 'CSG') -> bool:
        if not self.polygons or not csg.polygons:
            return False
        mylo, myhi = self.get_bounds()
        otherlo, otherhi = csg.get_bounds()
        for i in range(3):
            if myhi[i] < otherlo[i] or mylo[i] > otherhi[i]:
                return False
        return True

    def volume(self) -> float:
        return sum(p.get_signed_volume() for p in self.polygons)

    def area(self) -> float:
        return sum(p.get_area() for p in self.polygons)

    def to_polygons(self) -> List[Polygon]:
        return list(self.polygons)

    def to_triangles(self) -> List[Polygon]:
        """Fan triangulation of every polygon."""
        triangles = []
        for polygon in self.polygons:
            first = polygon.vertices[0]
            for i in range(len(polygon.vertices) - 2):
                triangles.append(Polygon([first, polygon.vertices[i + 1], polygon.vertices[i + 2]],
                                         polygon.shared, polygon.plane))
        return triangles

    # -- attributes ------------------------------------------------------

    def set_shared(self, shared: Shared) -> 'CSG':
        result = CSG.from_polygons([Polygon(p.vertices, shared, p.plane) for p in self.polygons])
        result.properties = self.properties
        result.is_retesselated = self.is_retesselated
        return result

    def set_color(self, r, g, b, a=1.0) -> 'CSG':
        return self.set_shared(Shared((r, g, b, a)))

    # -- serialization ---------------------------------------------------

    def to_compact_binary(self) -> dict:
        return _compact().csg_to_compact_binary(self)

    @classmethod
    def from_compact_binary(cls, data) -> 'CSG':
        return _compact().csg_from_compact_binary(data)

    def to_object(self) -> dict:
        return _compact().csg_to_object(self)

    @classmethod
    def from_object(cls, obj) -> 'CSG':
        return _compact().csg_from_object(obj)


from_polygons = CSG.from_polygons


def group(*solids) -> CSG:
    """Combine solids that are known not to overlap, without any
    boolean processing."""
    solids = _operands(solids)
    if not solids:
        return CSG()
    result = solids[0]
    for solid in solids[1:]:
        result = result.union_for_non_intersecting(solid)
    return result

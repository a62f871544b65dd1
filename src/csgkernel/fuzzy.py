"""Tolerance based deduplication of points, planes and attributes.

:class:`FuzzyPointFactory` hashes coordinates onto a grid whose cell
size equals the tolerance.  A lookup checks the point's own cell and
every neighbouring cell (3**dim cells in total) and returns the first
stored value lying within tolerance in every dimension.  On a miss the
``create`` callback is invoked and its result stored at the primary
cell, so the first-seen point of a neighbourhood becomes canonical.
"""

from __future__ import annotations

import itertools
import math
from typing import Callable, Dict, Optional, Sequence, Tuple

from csgkernel.constants import EPS
from csgkernel.polygon import Polygon, Shared
from csgkernel.side import Side

_PROBE_ORDER = (0, -1, 1)


class FuzzyPointFactory:
    """Map n-dimensional coordinates to canonical objects within ``tolerance``."""

    def __init__(self, numdimensions: int, tolerance: float = EPS):
        if numdimensions < 1:
            raise ValueError('bad dimension count passed to FuzzyPointFactory: {}'.format(numdimensions))
        self.numdimensions = numdimensions
        self.tolerance = tolerance
        self.multiplier = 1.0 / tolerance
        self._offsets = list(itertools.product(_PROBE_ORDER, repeat=numdimensions))
        self._cells: Dict[Tuple[int, ...], Tuple[Tuple[float, ...], object]] = {}

    def __len__(self):
        return len(self._cells)

    def _key(self, coords: Sequence[float]) -> Tuple[int, ...]:
        return tuple(math.floor(c * self.multiplier) for c in coords)

    def lookup(self, coords: Sequence[float]):
        """Return the canonical object near ``coords``, or None."""
        if len(coords) != self.numdimensions:
            raise ValueError('expected {} coordinates, got {}'.format(self.numdimensions, coords))
        key = self._key(coords)
        tol = self.tolerance
        for offset in self._offsets:
            entry = self._cells.get(tuple(k + o for k, o in zip(key, offset)))
            if entry is None:
                continue
            stored, value = entry
            if all(abs(a - b) < tol for a, b in zip(stored, coords)):
                return value
        return None

    def lookup_or_create(self, coords: Sequence[float], create: Callable[[Sequence[float]], object]):
        found = self.lookup(coords)
        if found is not None:
            return found
        value = create(coords)
        self._cells.setdefault(self._key(coords), (tuple(coords), value))
        return value


class FuzzyCSGFactory:
    """Canonicalizes the vertices, planes and shared attributes of polygons."""

    def __init__(self, tolerance: float = EPS):
        self.vertexfactory = FuzzyPointFactory(3, tolerance)
        self.planefactory = FuzzyPointFactory(4, tolerance)
        self.polygonsharedfactory: Dict[str, Shared] = {}

    def get_polygon_shared(self, sourceshared: Shared) -> Shared:
        return self.polygonsharedfactory.setdefault(sourceshared.get_hash(), sourceshared)

    def get_vertex(self, sourcevertex):
        pos = sourcevertex.pos
        return self.vertexfactory.lookup_or_create((pos.x, pos.y, pos.z),
                                                   lambda els: sourcevertex)

    def get_plane(self, sourceplane):
        n = sourceplane.normal
        return self.planefactory.lookup_or_create((n.x, n.y, n.z, sourceplane.w),
                                                  lambda els: sourceplane)

    def get_polygon(self, sourcepolygon: Polygon) -> Optional[Polygon]:
        newplane = self.get_plane(sourcepolygon.plane)
        newshared = self.get_polygon_shared(sourcepolygon.shared)
        newvertices = [self.get_vertex(v) for v in sourcepolygon.vertices]
        # close vertices may now be the very same object
        dedup = []
        if newvertices:
            prevtag = newvertices[-1].get_tag()
            for vertex in newvertices:
                tag = vertex.get_tag()
                if tag != prevtag:
                    dedup.append(vertex)
                prevtag = tag
        if len(dedup) < 3:
            return None
        return Polygon(dedup, newshared, newplane)


class FuzzyCAGFactory:
    """Canonicalizes the vertices of CAG sides."""

    def __init__(self, tolerance: float = EPS):
        self.vertexfactory = FuzzyPointFactory(2, tolerance)

    def get_vertex(self, sourcevertex):
        pos = sourcevertex.pos
        return self.vertexfactory.lookup_or_create((pos.x, pos.y), lambda els: sourcevertex)

    def get_side(self, sourceside: Side) -> Side:
        return Side(self.get_vertex(sourceside.vertex0), self.get_vertex(sourceside.vertex1))

"""Re-tessellation of coplanar polygon fragments.

Boolean operations chop faces into many convex fragments.  This module
groups the polygons of a solid by (plane, shared attribute) and merges
each group back into as few convex polygons as possible.

The merge is a sweep over the group projected into its plane.  In the
2D frame "top" is the smallest y and "bottom" the largest.  Distinct y
values of all vertices form the sweep levels.  Between two levels every
active source polygon contributes a trapezoid; trapezoids touching left
to right are joined into one row segment, and a row segment whose top
edge matches the bottom edge of a segment in the previous row extends
that output polygon as long as both of its sides stay convex.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Set

from csgkernel.constants import EPS
from csgkernel.fuzzy import FuzzyCSGFactory
from csgkernel.plane import Line2D, OrthoNormalBasis
from csgkernel.polygon import Polygon, Vertex3D
from csgkernel.vector import Vector2D

logger = logging.getLogger(__name__)

_Y_BINNING_FACTOR = 10.0 / EPS


def interpolate_between_2d_points_for_y(p1: Vector2D, p2: Vector2D, y: float) -> float:
    """x coordinate where segment p1-p2 crosses the horizontal line at y,
    clamped to the segment."""
    f1 = y - p1.y
    f2 = p2.y - p1.y
    if f2 < 0:
        f1 = -f1
        f2 = -f2
    if f1 <= 0:
        t = 0.0
    elif f1 >= f2:
        t = 1.0
    elif f2 < 1e-10:
        t = 0.5
    else:
        t = f1 / f2
    return p1.x + t * (p2.x - p1.x)


class _ActivePolygon:
    __slots__ = ('polygonindex', 'leftvertexindex', 'rightvertexindex',
                 'topleft', 'topright', 'bottomleft', 'bottomright')

    def __init__(self, polygonindex, leftvertexindex, rightvertexindex,
                 topleft, topright, bottomleft, bottomright):
        self.polygonindex = polygonindex
        self.leftvertexindex = leftvertexindex
        self.rightvertexindex = rightvertexindex
        self.topleft = topleft
        self.topright = topright
        self.bottomleft = bottomleft
        self.bottomright = bottomright


class _OutPolygon:
    __slots__ = ('leftpoints', 'rightpoints')

    def __init__(self):
        self.leftpoints: List[Vector2D] = []
        self.rightpoints: List[Vector2D] = []


class _RowSegment:
    __slots__ = ('topleft', 'topright', 'bottomleft', 'bottomright',
                 'leftline', 'rightline', 'outpolygon',
                 'leftlinecontinues', 'rightlinecontinues')

    def __init__(self, topleft, topright, bottomleft, bottomright):
        self.topleft = topleft
        self.topright = topright
        self.bottomleft = bottomleft
        self.bottomright = bottomright
        self.leftline = Line2D.from_points(topleft, bottomleft)
        self.rightline = Line2D.from_points(bottomright, topright)
        self.outpolygon: Optional[_OutPolygon] = None
        self.leftlinecontinues = False
        self.rightlinecontinues = False


def _insert_sorted(array: list, element, key):
    # insert left of equal keys
    k = key(element)
    lo, hi = 0, len(array)
    while lo < hi:
        mid = (lo + hi) // 2
        if k > key(array[mid]):
            lo = mid + 1
        else:
            hi = mid
    array.insert(lo, element)


def retesselate_coplanar_polygons(sourcepolygons: List[Polygon],
                                  destpolygons: Optional[List[Polygon]] = None) -> List[Polygon]:
    """Merge polygons sharing one plane and one shared attribute.

    The merged polygons are appended to ``destpolygons`` (a new list if
    omitted), which is returned.  They carry the plane and shared
    attribute of the first source polygon.
    """
    if destpolygons is None:
        destpolygons = []
    if not sourcepolygons:
        return destpolygons

    plane = sourcepolygons[0].plane
    shared = sourcepolygons[0].shared
    orthobasis = OrthoNormalBasis(plane)

    ycoordinatebins: Dict[int, float] = {}
    polygonvertices2d: Dict[int, List[Vector2D]] = {}
    polygontopvertexindexes: Dict[int, int] = {}
    topy2polygonindexes: Dict[float, List[int]] = {}
    ycoordinatetopolygonindexes: Dict[float, Set[int]] = {}

    for polygonindex, poly3d in enumerate(sourcepolygons):
        numvertices = len(poly3d.vertices)
        vertices2d = []
        minindex = -1
        miny = maxy = None
        for i, vertex in enumerate(poly3d.vertices):
            pos2d = orthobasis.to_2d(vertex.pos)
            # vertices with nearly the same y get exactly the same y
            ybin = math.floor(pos2d.y * _Y_BINNING_FACTOR)
            if ybin in ycoordinatebins:
                newy = ycoordinatebins[ybin]
            elif ybin + 1 in ycoordinatebins:
                newy = ycoordinatebins[ybin + 1]
            elif ybin - 1 in ycoordinatebins:
                newy = ycoordinatebins[ybin - 1]
            else:
                newy = pos2d.y
                ycoordinatebins[ybin] = newy
            vertices2d.append(Vector2D(pos2d.x, newy))
            if i == 0 or newy < miny:
                miny = newy
                minindex = i
            if i == 0 or newy > maxy:
                maxy = newy

        # all vertices on one horizontal line: nothing to sweep
        if miny >= maxy:
            continue

        for v in vertices2d:
            ycoordinatetopolygonindexes.setdefault(v.y, set()).add(polygonindex)
        topy2polygonindexes.setdefault(miny, []).append(polygonindex)
        vertices2d.reverse()
        polygonvertices2d[polygonindex] = vertices2d
        polygontopvertexindexes[polygonindex] = numvertices - minindex - 1

    ycoordinates = sorted(ycoordinatetopolygonindexes)

    activepolygons: List[_ActivePolygon] = []
    prevoutpolygonrow: List[_RowSegment] = []
    for yindex, ycoordinate in enumerate(ycoordinates):
        # advance polygons that have a corner at this y, dropping those
        # whose bottom vertex has been reached
        withcorner = ycoordinatetopolygonindexes[ycoordinate]
        i = 0
        while i < len(activepolygons):
            activepolygon = activepolygons[i]
            polygonindex = activepolygon.polygonindex
            if polygonindex not in withcorner:
                i += 1
                continue
            vertices2d = polygonvertices2d[polygonindex]
            numvertices = len(vertices2d)
            newleftvertexindex = activepolygon.leftvertexindex
            newrightvertexindex = activepolygon.rightvertexindex
            while True:
                nextleftvertexindex = (newleftvertexindex + 1) % numvertices
                if vertices2d[nextleftvertexindex].y != ycoordinate:
                    break
                newleftvertexindex = nextleftvertexindex
            nextrightvertexindex = (newrightvertexindex - 1) % numvertices
            if vertices2d[nextrightvertexindex].y == ycoordinate:
                newrightvertexindex = nextrightvertexindex
            if (newleftvertexindex != activepolygon.leftvertexindex
                    and newleftvertexindex == newrightvertexindex):
                del activepolygons[i]
                continue
            activepolygon.leftvertexindex = newleftvertexindex
            activepolygon.rightvertexindex = newrightvertexindex
            activepolygon.topleft = vertices2d[newleftvertexindex]
            activepolygon.topright = vertices2d[newrightvertexindex]
            activepolygon.bottomleft = vertices2d[(newleftvertexindex + 1) % numvertices]
            activepolygon.bottomright = vertices2d[(newrightvertexindex - 1) % numvertices]
            i += 1

        if yindex >= len(ycoordinates) - 1:
            # last row: every polygon ends here
            activepolygons = []
            nextycoordinate = None
        else:
            nextycoordinate = ycoordinates[yindex + 1]
            middleycoordinate = 0.5 * (ycoordinate + nextycoordinate)

            def _x_at_middle(el):
                return interpolate_between_2d_points_for_y(el.topleft, el.bottomleft,
                                                           middleycoordinate)

            for polygonindex in topy2polygonindexes.get(ycoordinate, ()):
                vertices2d = polygonvertices2d[polygonindex]
                numvertices = len(vertices2d)
                topvertexindex = polygontopvertexindexes[polygonindex]
                # the top may be a horizontal edge; find both of its ends
                topleftvertexindex = topvertexindex
                while True:
                    j = (topleftvertexindex + 1) % numvertices
                    if vertices2d[j].y != ycoordinate or j == topvertexindex:
                        break
                    topleftvertexindex = j
                toprightvertexindex = topvertexindex
                while True:
                    j = (toprightvertexindex - 1) % numvertices
                    if vertices2d[j].y != ycoordinate or j == topleftvertexindex:
                        break
                    toprightvertexindex = j
                newactivepolygon = _ActivePolygon(
                    polygonindex, topleftvertexindex, toprightvertexindex,
                    vertices2d[topleftvertexindex], vertices2d[toprightvertexindex],
                    vertices2d[(topleftvertexindex + 1) % numvertices],
                    vertices2d[(toprightvertexindex - 1) % numvertices])
                _insert_sorted(activepolygons, newactivepolygon, _x_at_middle)

        newoutpolygonrow: List[_RowSegment] = []
        for activepolygon in activepolygons:
            x = interpolate_between_2d_points_for_y(activepolygon.topleft, activepolygon.bottomleft, ycoordinate)
            topleft = Vector2D(x, ycoordinate)
            x = interpolate_between_2d_points_for_y(activepolygon.topright, activepolygon.bottomright, ycoordinate)
            topright = Vector2D(x, ycoordinate)
            x = interpolate_between_2d_points_for_y(activepolygon.topleft, activepolygon.bottomleft, nextycoordinate)
            bottomleft = Vector2D(x, nextycoordinate)
            x = interpolate_between_2d_points_for_y(activepolygon.topright, activepolygon.bottomright, nextycoordinate)
            bottomright = Vector2D(x, nextycoordinate)
            segment = _RowSegment(topleft, topright, bottomleft, bottomright)
            if newoutpolygonrow:
                prev = newoutpolygonrow[-1]
                d1 = segment.topleft.distance_to(prev.topright)
                d2 = segment.bottomleft.distance_to(prev.bottomright)
                if d1 < EPS and d2 < EPS:
                    # join with the segment to the left
                    segment.topleft = prev.topleft
                    segment.leftline = prev.leftline
                    segment.bottomleft = prev.bottomleft
                    newoutpolygonrow.pop()
            newoutpolygonrow.append(segment)

        if yindex > 0:
            prevcontinued = set()
            matched = set()
            for thispolygon in newoutpolygonrow:
                for ii, prevpolygon in enumerate(prevoutpolygonrow):
                    if ii in matched:
                        continue
                    if (prevpolygon.bottomleft.distance_to(thispolygon.topleft) < EPS and
                            prevpolygon.bottomright.distance_to(thispolygon.topright) < EPS):
                        matched.add(ii)
                        # would the joined polygon stay convex?
                        d1 = thispolygon.leftline.direction().x - prevpolygon.leftline.direction().x
                        d2 = thispolygon.rightline.direction().x - prevpolygon.rightline.direction().x
                        leftlinecontinues = abs(d1) < EPS
                        rightlinecontinues = abs(d2) < EPS
                        leftlineisconvex = leftlinecontinues or d1 >= 0
                        rightlineisconvex = rightlinecontinues or d2 >= 0
                        if leftlineisconvex and rightlineisconvex:
                            thispolygon.outpolygon = prevpolygon.outpolygon
                            thispolygon.leftlinecontinues = leftlinecontinues
                            thispolygon.rightlinecontinues = rightlinecontinues
                            prevcontinued.add(ii)
                        break

            for ii, prevpolygon in enumerate(prevoutpolygonrow):
                if ii in prevcontinued:
                    continue
                # the polygon ends here
                outpolygon = prevpolygon.outpolygon
                outpolygon.rightpoints.append(prevpolygon.bottomright)
                if prevpolygon.bottomright.distance_to(prevpolygon.bottomleft) > EPS:
                    # ends with a horizontal edge
                    outpolygon.leftpoints.append(prevpolygon.bottomleft)
                # counter clockwise loop: right side down, left side up
                points2d = outpolygon.rightpoints + outpolygon.leftpoints[::-1]
                vertices3d = [Vertex3D(orthobasis.to_3d(p)) for p in points2d]
                destpolygons.append(Polygon(vertices3d, shared, plane))

        for thispolygon in newoutpolygonrow:
            if thispolygon.outpolygon is None:
                # a polygon starts here
                thispolygon.outpolygon = _OutPolygon()
                thispolygon.outpolygon.leftpoints.append(thispolygon.topleft)
                if thispolygon.topleft.distance_to(thispolygon.topright) > EPS:
                    # starts with a horizontal edge
                    thispolygon.outpolygon.rightpoints.append(thispolygon.topright)
            else:
                if not thispolygon.leftlinecontinues:
                    thispolygon.outpolygon.leftpoints.append(thispolygon.topleft)
                if not thispolygon.rightlinecontinues:
                    thispolygon.outpolygon.rightpoints.append(thispolygon.topright)

        prevoutpolygonrow = newoutpolygonrow

    return destpolygons


def retesselate_csg(csg):
    """Merge the coplanar fragments of every face of ``csg``."""
    if csg.is_retesselated:
        return csg
    is_canonicalized = csg.is_canonicalized
    fuzzyfactory = FuzzyCSGFactory()
    polygonsperplane: Dict[tuple, List[Polygon]] = {}
    for polygon in csg.polygons:
        plane = polygon.plane
        shared = polygon.shared
        if not is_canonicalized:
            # only planes and attributes are needed to group polygons
            plane = fuzzyfactory.get_plane(plane)
            shared = fuzzyfactory.get_polygon_shared(shared)
        tag = (plane.get_tag(), shared.get_tag())
        polygonsperplane.setdefault(tag, []).append(polygon)

    destpolygons: List[Polygon] = []
    for sourcepolygons in polygonsperplane.values():
        if len(sourcepolygons) < 2:
            destpolygons.extend(sourcepolygons)
        else:
            retesselate_coplanar_polygons(sourcepolygons, destpolygons)

    logger.debug('retesselated %d polygons in %d groups into %d polygons',
                 len(csg.polygons), len(polygonsperplane), len(destpolygons))
    result = type(csg).from_polygons(destpolygons)
    result.is_retesselated = True
    result.properties = csg.properties
    return result

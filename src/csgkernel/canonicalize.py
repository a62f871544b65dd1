"""Canonicalization: collapse near-coincident vertices, planes and attributes.

Boolean operations create many vertices that differ only by floating
point noise.  Running a solid or area through a fresh fuzzy factory
maps all of them onto the first-seen representative, after which
vertex and plane identity tags can be used as exact dictionary keys.
"""

import logging

from csgkernel.constants import EPS
from csgkernel.fuzzy import FuzzyCAGFactory, FuzzyCSGFactory

logger = logging.getLogger(__name__)


def csg_from_fuzzy_factory(factory, sourcecsg):
    newpolygons = []
    for polygon in sourcecsg.polygons:
        newpolygon = factory.get_polygon(polygon)
        # degenerate after vertex merging
        if newpolygon is not None:
            newpolygons.append(newpolygon)
    dropped = len(sourcecsg.polygons) - len(newpolygons)
    if dropped:
        logger.debug('canonicalize dropped %d degenerate polygons', dropped)
    return type(sourcecsg).from_polygons(newpolygons)


def cag_from_fuzzy_factory(factory, sourcecag):
    newsides = [factory.get_side(side) for side in sourcecag.sides]
    # zero length sides are mostly a user input issue
    newsides = [side for side in newsides if side.length() > EPS]
    dropped = len(sourcecag.sides) - len(newsides)
    if dropped:
        logger.debug('canonicalize dropped %d zero length sides', dropped)
    return type(sourcecag).from_sides(newsides)


def canonicalize_csg(csg):
    """Return a canonicalized copy of ``csg``."""
    result = csg_from_fuzzy_factory(FuzzyCSGFactory(), csg)
    result.is_canonicalized = True
    result.is_retesselated = csg.is_retesselated
    result.properties = csg.properties
    return result


def canonicalize_cag(cag):
    """Return a canonicalized copy of ``cag``."""
    result = cag_from_fuzzy_factory(FuzzyCAGFactory(), cag)
    result.is_canonicalized = True
    return result

"""Numeric constants and the identity tag allocator for csgkernel.

All plane-side tests, vertex coincidence tests and fuzzy lookups in the
kernel use the same absolute tolerance ``EPS``.  Redefine these at your
peril: the canonicalization grid, the split classification and the
re-tessellation y-binning all assume a single shared value.

Copyright (c) 2025 csgkernel contributors
MIT License
"""

import itertools
from math import sin

#: number of polygons per 360 degree revolution for 2D objects
DEFAULT_RESOLUTION_2D = 32

#: number of polygons per 360 degree revolution for 3D objects
DEFAULT_RESOLUTION_3D = 12

#: distance below which two coordinates are considered coincident
EPS = 1e-5

#: angle (radians) used to derive the minimal admissible area
ANGLE_EPS = 0.1

#: area of the smallest polygon we are willing to keep
AREA_EPS = 0.5 * EPS * EPS * sin(ANGLE_EPS)

_tag_counter = itertools.count(1)


def get_tag():
    """Return the next process-wide identity tag.  Tags are never reused."""
    return next(_tag_counter)

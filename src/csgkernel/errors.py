"""Exception types raised by csgkernel.

Every exception derives from :class:`GeometryError`, which is itself a
``ValueError`` so existing ``except ValueError`` handlers keep working.
The optional ``details`` payload carries the offending coordinates or
indices where they are known.
"""

from __future__ import annotations

from typing import Any, Optional


class GeometryError(ValueError):
    """Base class for csgkernel failures."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details is None:
            return self.message
        return f"{self.message}: {self.details}"


class ContractError(GeometryError):
    """A kernel structure was used in a state that its contract forbids."""


class DegeneratePolygonError(GeometryError):
    """Too few vertices, or an outline enclosing (almost) no area."""


class NonConvexPolygonError(GeometryError):
    """Polygon vertices do not form a convex loop."""


class SelfIntersectionError(GeometryError):
    """A 2D outline crosses itself."""


class ParallelPlanesError(GeometryError):
    """Two planes have no well defined intersection line."""


class FakePolygonError(ContractError):
    """A synthetic wall polygon could not be converted back into a side."""


class SerializationError(GeometryError):
    """Serialized data has the wrong class or inconsistent array sizes."""

"""Shape-specific geometry carried by particles and obstacles.

Geometry is a tagged variant: each class carries its own ``kind`` tag and
only the fields that kind needs, fixed at creation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar

from dlasim.spatial.index import ShapeKind


@dataclass(frozen=True)
class PointGeometry:
    """Lattice point with no extent."""

    kind: ClassVar[ShapeKind] = ShapeKind.POINT


@dataclass(frozen=True)
class CircleGeometry:
    """Circle of fixed radius."""

    radius: float

    kind: ClassVar[ShapeKind] = ShapeKind.CIRCLE


@dataclass(frozen=True)
class PolygonGeometry:
    """Convex polygon; vertices are relative to the particle position."""

    vertices: tuple[tuple[float, float], ...]
    rotation: float = 0.0  # radians

    kind: ClassVar[ShapeKind] = ShapeKind.POLYGON


Geometry = PointGeometry | CircleGeometry | PolygonGeometry


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity."""
    return math.floor(value + 0.5)

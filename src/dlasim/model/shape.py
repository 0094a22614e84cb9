"""Static obstacle shapes and captured aggregation edges."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dlasim.model.geometry import PolygonGeometry
    from dlasim.spatial.index import Body


@dataclass(eq=False)
class Shape:
    """An immovable polygon boundary.

    Shapes never stick themselves; any walker touching one sticks with
    probability 1.
    """

    id: str
    x: float
    y: float
    geometry: PolygonGeometry
    handle: Body | None = field(default=None, repr=False)


@dataclass(frozen=True)
class Line:
    """Edge captured when a walker sticks to a cluster particle.

    Runs from the walker's position to the contacted particle's position.
    """

    x1: float
    y1: float
    x2: float
    y2: float

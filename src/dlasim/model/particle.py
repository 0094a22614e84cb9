"""Particle dataclass: a walker or a member of the growing cluster."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dlasim.model.geometry import CircleGeometry, Geometry

if TYPE_CHECKING:
    from dlasim.spatial.index import Body, ShapeKind


@dataclass(eq=False)
class Particle:
    """A simulation entity that random-walks until it sticks.

    ``stuck`` is terminal: once a particle joins the cluster it never moves
    again and never becomes a walker. Position changes go through ``move``
    so the spatial handle follows the particle.
    """

    id: str
    x: float
    y: float
    geometry: Geometry = field(default_factory=lambda: CircleGeometry(radius=2.5))

    # Set once at creation
    origin_x: float = 0.0
    origin_y: float = 0.0

    # Lifecycle
    age: int = 0  # ticks survived while free
    stuck: bool = False

    # Optional point this particle is pulled toward when per-walker bias is on
    bias_towards: tuple[float, float] | None = None

    handle: Body | None = field(default=None, repr=False)

    @property
    def kind(self) -> ShapeKind:
        return self.geometry.kind

    def move(self, dx: float, dy: float) -> None:
        """Displace the particle and its spatial handle."""
        self.x += dx
        self.y += dy
        if self.handle is not None:
            self.handle.move_to(self.x, self.y)

    def distance_from_origin(self) -> float:
        return math.hypot(self.x - self.origin_x, self.y - self.origin_y)

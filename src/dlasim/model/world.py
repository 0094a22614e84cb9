"""World: the single owned container of simulation state."""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dlasim.config import SimulationSettings
from dlasim.spatial.index import SpatialIndex

if TYPE_CHECKING:
    from dlasim.model.particle import Particle
    from dlasim.model.shape import Line, Shape

# custom_force(particle, world) -> (dx, dy)
CustomForce = Callable[["Particle", "World"], tuple[float, float]]


@dataclass
class Edges:
    """Rectangular simulation bounds. Left and top are always 0."""

    right: float
    bottom: float
    left: float = 0.0
    top: float = 0.0

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center_x(self) -> float:
        return (self.left + self.right) / 2

    @property
    def center_y(self) -> float:
        return (self.top + self.bottom) / 2


@dataclass
class World:
    """Container holding all simulation state.

    ``num_walkers`` is maintained incrementally by the engine and must equal
    the number of particles with ``stuck=False`` (see the aggregation module
    for the one case where it intentionally does not).
    """

    settings: SimulationSettings = field(default_factory=SimulationSettings)
    index: SpatialIndex = field(default_factory=SpatialIndex)

    particles: list[Particle] = field(default_factory=list)  # walkers and cluster members
    shapes: list[Shape] = field(default_factory=list)  # static obstacles
    lines: list[Line] = field(default_factory=list)  # append-only

    num_walkers: int = 0
    tick: int = 0

    edges: Edges | None = None
    rng: random.Random = field(default_factory=random.Random)
    custom_force: CustomForce | None = None

    def __post_init__(self) -> None:
        if self.edges is None:
            self.edges = Edges(right=self.settings.width, bottom=self.settings.height)

    def walkers(self) -> list[Particle]:
        """Particles that are still free."""
        return [p for p in self.particles if not p.stuck]

    def cluster(self) -> list[Particle]:
        """Particles that have joined the aggregate."""
        return [p for p in self.particles if p.stuck]

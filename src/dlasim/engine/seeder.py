"""Cluster seeding: initial stationary layouts created before the first tick."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from dlasim.config import BiasAxis, ClusterPattern
from dlasim.engine.store import create_cluster_from_specs, create_cluster_particle
from dlasim.model.spec import ParticleSpec

if TYPE_CHECKING:
    from dlasim.model.particle import Particle
    from dlasim.model.world import World

logger = logging.getLogger(__name__)


def wall_count(span: float, diameter: float) -> int:
    """Number of tangent circles needed to cover ``span`` end to end."""
    return math.ceil(span / diameter) + 1


def create_vertical_wall(world: World, x: float, diameter: float | None = None) -> list[ParticleSpec]:
    """Specs for a column of tangent circles at ``x`` spanning top to bottom."""
    edges = world.edges
    d = diameter if diameter is not None else world.settings.circle_diameter
    return [
        ParticleSpec(x=x, y=edges.top + i * d, diameter=d)
        for i in range(wall_count(edges.height, d))
    ]


def create_horizontal_wall(
    world: World, y: float, diameter: float | None = None
) -> list[ParticleSpec]:
    """Specs for a row of tangent circles at ``y`` spanning left to right."""
    edges = world.edges
    d = diameter if diameter is not None else world.settings.circle_diameter
    return [
        ParticleSpec(x=edges.left + i * d, y=y, diameter=d)
        for i in range(wall_count(edges.width, d))
    ]


def create_wall(world: World, axis: BiasAxis) -> list[Particle]:
    """Seed a wall on the centerline matching ``axis``.

    Equator gives a horizontal wall; Meridian, or no axis at all, a vertical one.
    """
    if axis is BiasAxis.EQUATOR:
        specs = create_horizontal_wall(world, world.edges.center_y)
    else:
        specs = create_vertical_wall(world, world.edges.center_x)
    return create_cluster_from_specs(world, specs)


def create_default_clusters(world: World) -> list[Particle]:
    """Create the configured default cluster pattern."""
    pattern = world.settings.default_cluster
    if pattern is ClusterPattern.WALL:
        seeded = create_wall(world, world.settings.bias_towards)
    elif pattern is ClusterPattern.POINT:
        seed = create_cluster_particle(
            world, ParticleSpec(x=world.edges.center_x, y=world.edges.center_y)
        )
        seeded = [seed] if seed is not None else []
    else:
        seeded = []

    logger.debug("Seeded %d cluster particle(s) with pattern %s", len(seeded), pattern.value)
    return seeded

"""Walker motion: Brownian step plus one bias source plus an optional custom force.

Per free particle and tick:
1. Brownian term: two independent uniform draws in [-1, 1]
2. Bias, first match wins:
   a. per-walker target (when enabled and the walker has one): fixed-magnitude
      pull straight toward the target
   b. uniform axis bias: Equator pulls y toward the horizontal centerline,
      Meridian pulls x toward the vertical centerline
3. Custom force from ``world.custom_force``, always additive

Point walkers round their displacement so they stay on the integer lattice.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from dlasim.config import BiasAxis
from dlasim.model.geometry import round_half_up
from dlasim.spatial.index import ShapeKind

if TYPE_CHECKING:
    from dlasim.model.particle import Particle
    from dlasim.model.world import World


def compute_displacement(particle: Particle, world: World) -> tuple[float, float]:
    """Compute this tick's (dx, dy) for a free particle without applying it."""
    settings = world.settings
    rng = world.rng

    dx = rng.uniform(-1, 1)
    dy = rng.uniform(-1, 1)

    force = settings.bias_force
    if settings.use_per_walker_bias and particle.bias_towards is not None:
        tx, ty = particle.bias_towards
        theta = math.atan2(ty - particle.y, tx - particle.x)
        dx += force * math.cos(theta)
        dy += force * math.sin(theta)
    elif settings.bias_towards is BiasAxis.EQUATOR:
        dy += force if particle.y < world.edges.center_y else -force
    elif settings.bias_towards is BiasAxis.MERIDIAN:
        dx += force if particle.x < world.edges.center_x else -force

    if world.custom_force is not None:
        fx, fy = world.custom_force(particle, world)
        dx += fx
        dy += fy

    if particle.kind is ShapeKind.POINT:
        dx = round_half_up(dx)
        dy = round_half_up(dy)

    return dx, dy


def move_walkers(world: World) -> None:
    """Displace and age every free particle. Stuck particles are untouched."""
    for particle in world.particles:
        if particle.stuck:
            continue
        dx, dy = compute_displacement(particle, world)
        particle.move(dx, dy)
        particle.age += 1

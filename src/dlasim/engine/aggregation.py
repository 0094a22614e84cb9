"""Aggregation resolver: turns walker contacts into cluster growth.

Runs after the spatial index has been rebuilt for the tick.

Shape contacts stick unconditionally. Particle contacts qualify when the
candidate is already stuck and either the walker is a Point (broad-phase
proximity is enough on the lattice) or the exact shapes overlap. Each
qualifying hit draws once against ``stick_probability``.

Every qualifying hit decrements ``num_walkers``, accepted or not. With
``stick_probability < 1`` a rejected walker stays free while the counter
drops, so the counter under-reports the free population and replenishment
tops the population up past the true count.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dlasim.model.particle import Particle
from dlasim.model.shape import Line
from dlasim.spatial.index import ShapeKind

if TYPE_CHECKING:
    from dlasim.model.world import World

logger = logging.getLogger(__name__)


def handle_shape_collisions(world: World) -> int:
    """Stick every free particle that overlaps a static shape.

    Returns:
        Number of walkers that stuck.
    """
    stuck_count = 0
    for shape in world.shapes:
        if shape.handle is None:
            continue
        for candidate in shape.handle.potentials():
            particle = candidate.owner
            if not isinstance(particle, Particle) or particle.stuck:
                continue
            if shape.handle.collides(candidate):
                particle.stuck = True
                world.num_walkers -= 1
                stuck_count += 1
    return stuck_count


def handle_particle_collisions(world: World) -> int:
    """Resolve walker contacts with cluster particles.

    A walker stops testing candidates as soon as it sticks. Rejected hits
    leave it free and it keeps testing its remaining candidates.

    Returns:
        Number of walkers that stuck.
    """
    p = world.settings.stick_probability
    capture = world.settings.capture_lines
    stuck_count = 0
    rejected = 0

    for particle in world.particles:
        if particle.stuck or particle.handle is None:
            continue

        for candidate in particle.handle.potentials():
            other = candidate.owner
            if not isinstance(other, Particle) or not other.stuck:
                continue
            # Points are lattice-aligned: broad-phase adjacency is the hit
            if particle.kind is not ShapeKind.POINT and not particle.handle.collides(candidate):
                continue

            world.num_walkers -= 1
            if world.rng.random() <= p:
                particle.stuck = True
                stuck_count += 1
                if capture:
                    world.lines.append(Line(particle.x, particle.y, other.x, other.y))
                break
            rejected += 1

    if rejected:
        logger.debug(
            "%d contact(s) rejected by stick probability",
            rejected,
            extra={"tick": world.tick, "walkers": world.num_walkers},
        )
    return stuck_count


def handle_collisions(world: World) -> int:
    """Resolve shape contacts, then particle contacts."""
    return handle_shape_collisions(world) + handle_particle_collisions(world)

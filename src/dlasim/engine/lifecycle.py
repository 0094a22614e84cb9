"""Walker lifecycle: spawning, replenishment and pruning of stale walkers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dlasim.config import ParticleKindSetting, WalkerSource
from dlasim.engine.store import create_walker
from dlasim.model.spec import ParticleSpec
from dlasim.spatial.index import ShapeKind

if TYPE_CHECKING:
    import random

    from dlasim.model.world import Edges, World

logger = logging.getLogger(__name__)


def spawn_position(edges: Edges, source: WalkerSource, rng: random.Random) -> tuple[float, float]:
    """Pick a spawn point inside ``edges`` for the given source region."""
    if source is WalkerSource.CENTER:
        # Central half-box
        return (
            rng.uniform(edges.left + edges.width / 4, edges.right - edges.width / 4),
            rng.uniform(edges.top + edges.height / 4, edges.bottom - edges.height / 4),
        )
    if source is WalkerSource.TOP:
        return rng.uniform(edges.left, edges.right), edges.top
    if source is WalkerSource.BOTTOM:
        return rng.uniform(edges.left, edges.right), edges.bottom
    if source is WalkerSource.LEFT:
        return edges.left, rng.uniform(edges.top, edges.bottom)
    if source is WalkerSource.RIGHT:
        return edges.right, rng.uniform(edges.top, edges.bottom)
    if source is WalkerSource.EDGES:
        # Weight sides by length so spawns are uniform along the perimeter
        side = rng.choices(
            [WalkerSource.TOP, WalkerSource.BOTTOM, WalkerSource.LEFT, WalkerSource.RIGHT],
            weights=[edges.width, edges.width, edges.height, edges.height],
        )[0]
        return spawn_position(edges, side, rng)
    return rng.uniform(edges.left, edges.right), rng.uniform(edges.top, edges.bottom)


def create_default_walkers(
    world: World,
    count: int | None = None,
    source: WalkerSource | None = None,
) -> int:
    """Spawn ``count`` walkers (default: ``max_walkers``) from ``source``.

    Returns:
        Number of walkers created.
    """
    settings = world.settings
    if count is None:
        count = settings.max_walkers
    if source is None:
        source = settings.walker_source

    kind = ShapeKind.POINT if settings.walker_kind is ParticleKindSetting.POINT else ShapeKind.CIRCLE

    created = 0
    for _ in range(count):
        x, y = spawn_position(world.edges, source, world.rng)
        if create_walker(world, ParticleSpec(x=x, y=y, kind=kind)) is not None:
            created += 1
    return created


def replenish_walkers(world: World) -> int:
    """Top the walker count back up to ``max_walkers`` when enabled."""
    settings = world.settings
    if not settings.replenish_walkers:
        return 0
    missing = settings.max_walkers - world.num_walkers
    if missing <= 0:
        return 0
    return create_default_walkers(world, missing, settings.replenish_source)


def is_stale(particle_age: int, distance: float, world: World) -> bool:
    """True when an enabled pruning rule applies: older than ``max_age`` or
    further than ``max_wander_distance`` from its origin. Both limits are strict.
    """
    settings = world.settings
    if settings.prune_old_walkers and particle_age > settings.max_age:
        return True
    return settings.prune_drifters and distance > settings.max_wander_distance


def prune_walkers(world: World) -> int:
    """Drop free particles that are too old or too far from their origin.

    Pruned walkers leave no line and never become stuck.

    Returns:
        Number of walkers removed.
    """
    settings = world.settings
    if not (settings.prune_old_walkers or settings.prune_drifters):
        return 0

    kept = []
    pruned = 0
    for particle in world.particles:
        if not particle.stuck and is_stale(particle.age, particle.distance_from_origin(), world):
            if particle.handle is not None:
                world.index.remove(particle.handle)
            pruned += 1
        else:
            kept.append(particle)

    if pruned:
        world.particles[:] = kept
        world.num_walkers -= pruned
        logger.debug(
            "Pruned %d stale walker(s)",
            pruned,
            extra={"tick": world.tick, "walkers": world.num_walkers},
        )
    return pruned

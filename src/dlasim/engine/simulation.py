"""World tick driver, reset and resize."""

from __future__ import annotations

import logging
import random

from dlasim.config import SimulationSettings
from dlasim.engine.aggregation import handle_collisions
from dlasim.engine.lifecycle import create_default_walkers, prune_walkers, replenish_walkers
from dlasim.engine.motion import move_walkers
from dlasim.engine.seeder import create_default_clusters
from dlasim.engine.store import remove_all
from dlasim.model.world import Edges, World

logger = logging.getLogger(__name__)

LOG_INTERVAL = 100  # ticks between debug summaries


def tick_world(world: World) -> None:
    """Advance the simulation by one tick.

    Tick sequence:
    1. Replenish walkers up to the population target
    2. Move every free particle
    3. Rebuild the spatial index
    4. Resolve shape and particle collisions
    5. Prune stale walkers
    6. Increment world.tick

    Args:
        world: The world to advance

    Side effects:
        - Mutates world.particles, world.lines and world.num_walkers
        - Mutates particle positions, ages and stuck flags
    """
    # 1. Replenish
    replenish_walkers(world)

    # 2. Move
    move_walkers(world)

    # 3. Rebuild broad phase
    world.index.update()

    # 4. Aggregate
    handle_collisions(world)

    # 5. Prune
    prune_walkers(world)

    # 6. Clock
    world.tick += 1

    if world.tick % LOG_INTERVAL == 0:
        logger.debug(
            "Simulation progress",
            extra={
                "tick": world.tick,
                "walkers": world.num_walkers,
                "particles": len(world.particles),
                "lines": len(world.lines),
            },
        )


def reset_world(world: World) -> None:
    """Restore the tick-0 state: default walkers plus the default cluster."""
    remove_all(world)
    world.tick = 0
    create_default_walkers(world)
    create_default_clusters(world)
    logger.info(
        "World reset: %d cluster particles",
        len(world.particles) - world.num_walkers,
        extra={"tick": world.tick, "walkers": world.num_walkers},
    )


def resize_world(world: World, width: float, height: float) -> None:
    """Recompute the bounds. Existing particles are not moved or clipped."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Bounds must be positive, got {width}x{height}")
    world.edges = Edges(right=width, bottom=height)


def create_world(
    settings: SimulationSettings | None = None,
    rng: random.Random | None = None,
) -> World:
    """Build a world from settings and populate it with the default layout."""
    world = World(
        settings=settings if settings is not None else SimulationSettings(),
        rng=rng if rng is not None else random.Random(),
    )
    reset_world(world)
    return world

"""Aggregation engine: store, motion, collision resolution, lifecycle, seeding, tick driver."""

from dlasim.engine.aggregation import (
    handle_collisions,
    handle_particle_collisions,
    handle_shape_collisions,
)
from dlasim.engine.lifecycle import (
    create_default_walkers,
    prune_walkers,
    replenish_walkers,
    spawn_position,
)
from dlasim.engine.motion import compute_displacement, move_walkers
from dlasim.engine.seeder import (
    create_default_clusters,
    create_horizontal_wall,
    create_vertical_wall,
    create_wall,
    wall_count,
)
from dlasim.engine.simulation import create_world, reset_world, resize_world, tick_world
from dlasim.engine.store import (
    create_cluster_from_specs,
    create_cluster_particle,
    create_particle,
    create_shape,
    create_walker,
    remove_all,
    remove_particle,
)

__all__ = [
    "compute_displacement",
    "create_cluster_from_specs",
    "create_cluster_particle",
    "create_default_clusters",
    "create_default_walkers",
    "create_horizontal_wall",
    "create_particle",
    "create_shape",
    "create_vertical_wall",
    "create_walker",
    "create_wall",
    "create_world",
    "handle_collisions",
    "handle_particle_collisions",
    "handle_shape_collisions",
    "move_walkers",
    "prune_walkers",
    "remove_all",
    "remove_particle",
    "replenish_walkers",
    "reset_world",
    "resize_world",
    "spawn_position",
    "tick_world",
    "wall_count",
]

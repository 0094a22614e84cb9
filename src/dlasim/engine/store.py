"""Particle store: creation and removal of particles and obstacle shapes.

Every creation path inserts the entity into the world's spatial index and
records it in the matching world list. Malformed requests are dropped with a
debug log; a single bad spawn must never halt the simulation.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from dlasim.model.geometry import CircleGeometry, PointGeometry, PolygonGeometry, round_half_up
from dlasim.model.particle import Particle
from dlasim.model.shape import Shape
from dlasim.model.spec import ParticleSpec, ShapeSpec
from dlasim.spatial.index import ShapeKind

if TYPE_CHECKING:
    from dlasim.model.world import World

logger = logging.getLogger(__name__)


def _parse(model: type[ParticleSpec] | type[ShapeSpec], spec: Any) -> Any:
    """Validate a spec, returning None for anything unusable."""
    if isinstance(spec, model):
        return spec
    if not isinstance(spec, Mapping):
        logger.debug("Ignoring %s request of type %s", model.__name__, type(spec).__name__)
        return None
    try:
        return model.model_validate(dict(spec))
    except ValidationError as e:
        logger.debug("Ignoring malformed %s: %d error(s)", model.__name__, e.error_count())
        return None


def create_particle(
    world: World,
    spec: ParticleSpec | Mapping[str, Any] | Any,
    stuck: bool | None = None,
) -> Particle | None:
    """Build a particle from ``spec``, index it and append it to the world.

    Args:
        world: World receiving the particle.
        spec: ParticleSpec or mapping with at least ``x`` and ``y``.
        stuck: Overrides ``spec.stuck`` when given.

    Returns:
        The stored particle, or None if the spec was malformed.
    """
    parsed: ParticleSpec | None = _parse(ParticleSpec, spec)
    if parsed is None:
        return None

    is_stuck = parsed.stuck if stuck is None else stuck
    x, y = parsed.x, parsed.y

    if parsed.kind is ShapeKind.POINT:
        # Points live on the integer lattice
        x, y = round_half_up(x), round_half_up(y)
        geometry = PointGeometry()
        handle = world.index.create_point(x, y)
    elif parsed.kind is ShapeKind.POLYGON:
        geometry = PolygonGeometry(
            vertices=tuple(parsed.vertices or ()),
            rotation=parsed.rotation,
        )
        handle = world.index.create_polygon(x, y, geometry.vertices, geometry.rotation)
    else:
        diameter = parsed.diameter if parsed.diameter is not None else world.settings.circle_diameter
        geometry = CircleGeometry(radius=diameter / 2)
        handle = world.index.create_circle(x, y, geometry.radius)

    particle = Particle(
        id=str(uuid.uuid4()),
        x=x,
        y=y,
        geometry=geometry,
        origin_x=x,
        origin_y=y,
        stuck=is_stuck,
        bias_towards=parsed.bias_towards,
        handle=handle,
    )
    handle.owner = particle
    world.particles.append(particle)
    return particle


def create_walker(world: World, spec: ParticleSpec | Mapping[str, Any] | Any) -> Particle | None:
    """Create a free particle and count it as a walker."""
    particle = create_particle(world, spec, stuck=False)
    if particle is not None:
        world.num_walkers += 1
    return particle


def create_cluster_particle(
    world: World, spec: ParticleSpec | Mapping[str, Any] | Any
) -> Particle | None:
    """Create a particle that is already part of the cluster."""
    return create_particle(world, spec, stuck=True)


def create_cluster_from_specs(
    world: World, specs: Iterable[ParticleSpec | Mapping[str, Any]]
) -> list[Particle]:
    """Create a batch of cluster particles, skipping malformed entries."""
    created = []
    for spec in specs:
        particle = create_cluster_particle(world, spec)
        if particle is not None:
            created.append(particle)
    return created


def create_shape(world: World, spec: ShapeSpec | Mapping[str, Any] | Any) -> Shape | None:
    """Create a static obstacle polygon."""
    parsed: ShapeSpec | None = _parse(ShapeSpec, spec)
    if parsed is None:
        return None

    geometry = PolygonGeometry(vertices=tuple(parsed.vertices), rotation=parsed.rotation)
    handle = world.index.create_polygon(
        parsed.x, parsed.y, geometry.vertices, geometry.rotation, static=True
    )
    shape = Shape(id=str(uuid.uuid4()), x=parsed.x, y=parsed.y, geometry=geometry, handle=handle)
    handle.owner = shape
    world.shapes.append(shape)
    return shape


def remove_particle(world: World, particle: Particle) -> None:
    """Evict one particle from the index and the world."""
    if particle.handle is not None:
        world.index.remove(particle.handle)
    world.particles.remove(particle)
    if not particle.stuck:
        world.num_walkers -= 1


def remove_all(world: World) -> None:
    """Clear every particle, shape and line and zero the walker count."""
    for particle in world.particles:
        if particle.handle is not None:
            world.index.remove(particle.handle)
    for shape in world.shapes:
        if shape.handle is not None:
            world.index.remove(shape.handle)

    world.particles.clear()
    world.shapes.clear()
    world.lines.clear()
    world.num_walkers = 0

"""Frame projector: World state to a read-only snapshot for rendering.

A Frame holds everything a renderer needs to draw one tick: particles,
obstacles, captured lines, the render mode and colours. Nothing in a Frame
refers back into the live world.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dlasim.model.geometry import CircleGeometry

if TYPE_CHECKING:
    from dlasim.config import HSBAColor
    from dlasim.model.particle import Particle
    from dlasim.model.shape import Line, Shape
    from dlasim.model.world import World


@dataclass
class ParticleVisual:
    """One walker or cluster particle."""

    id: str
    kind: str  # "Point", "Circle" or "Polygon"
    x: float
    y: float
    stuck: bool
    radius: float = 0.0
    vertices: list[tuple[float, float]] = field(default_factory=list)  # world coordinates


@dataclass
class ShapeVisual:
    """A static obstacle outline."""

    id: str
    vertices: list[tuple[float, float]] = field(default_factory=list)


@dataclass
class LineVisual:
    """A captured aggregation edge."""

    x1: float
    y1: float
    x2: float
    y2: float


@dataclass
class Frame:
    """A complete snapshot for rendering one tick."""

    tick: int
    width: float
    height: float
    num_walkers: int
    render_mode: str
    colors: dict[str, Any] = field(default_factory=dict)

    particles: list[ParticleVisual] = field(default_factory=list)
    shapes: list[ShapeVisual] = field(default_factory=list)
    lines: list[LineVisual] = field(default_factory=list)


def hsla_string(color: HSBAColor) -> str:
    """CSS-style colour string, e.g. ``hsla(210, 60%, 50%, 1.0)``."""
    return f"hsla({color.h:g}, {color.s:g}%, {color.b:g}%, {color.a})"


def _project_particle(particle: Particle) -> ParticleVisual:
    radius = particle.geometry.radius if isinstance(particle.geometry, CircleGeometry) else 0.0
    vertices = particle.handle.world_vertices() if particle.handle is not None else []
    return ParticleVisual(
        id=particle.id,
        kind=particle.kind.value,
        x=particle.x,
        y=particle.y,
        stuck=particle.stuck,
        radius=radius,
        vertices=vertices,
    )


def _project_shape(shape: Shape) -> ShapeVisual:
    vertices = shape.handle.world_vertices() if shape.handle is not None else []
    return ShapeVisual(id=shape.id, vertices=vertices)


def _project_line(line: Line) -> LineVisual:
    return LineVisual(line.x1, line.y1, line.x2, line.y2)


def project(world: World) -> Frame:
    """Snapshot the world for a renderer."""
    settings = world.settings
    return Frame(
        tick=world.tick,
        width=world.edges.width,
        height=world.edges.height,
        num_walkers=world.num_walkers,
        render_mode=settings.render_mode.value,
        colors={
            "use_colors": settings.use_colors,
            "use_stroke": settings.use_stroke,
            "background": hsla_string(settings.background_color),
            "walker": hsla_string(settings.walker_color),
            "cluster": hsla_string(settings.cluster_color),
        },
        particles=[_project_particle(p) for p in world.particles],
        shapes=[_project_shape(s) for s in world.shapes],
        lines=[_project_line(line) for line in world.lines],
    )


def frame_to_dict(frame: Frame) -> dict[str, Any]:
    """Convert a Frame to a JSON-serializable dict."""
    return asdict(frame)


def export_frame(world: World, path: str | Path | None = None) -> str:
    """Serialize the current visual state to JSON, optionally writing it to ``path``."""
    payload = json.dumps(frame_to_dict(project(world)))
    if path is not None:
        Path(path).write_text(payload, encoding="utf-8")
    return payload

"""Domain model: Particle, Shape, Line, geometry variants, World."""

from dlasim.model.geometry import (
    CircleGeometry,
    Geometry,
    PointGeometry,
    PolygonGeometry,
    round_half_up,
)
from dlasim.model.particle import Particle
from dlasim.model.shape import Line, Shape
from dlasim.model.spec import ParticleSpec, ShapeSpec
from dlasim.model.world import CustomForce, Edges, World
from dlasim.spatial.index import ShapeKind

__all__ = [
    "CircleGeometry",
    "CustomForce",
    "Edges",
    "Geometry",
    "Line",
    "Particle",
    "ParticleSpec",
    "PointGeometry",
    "PolygonGeometry",
    "Shape",
    "ShapeKind",
    "ShapeSpec",
    "World",
    "round_half_up",
]

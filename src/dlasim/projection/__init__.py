"""Frame projection: World state to read-only render snapshots."""

from dlasim.projection.projector import (
    Frame,
    LineVisual,
    ParticleVisual,
    ShapeVisual,
    export_frame,
    frame_to_dict,
    hsla_string,
    project,
)

__all__ = [
    "Frame",
    "LineVisual",
    "ParticleVisual",
    "ShapeVisual",
    "export_frame",
    "frame_to_dict",
    "hsla_string",
    "project",
]

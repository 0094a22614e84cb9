"""Validated creation requests for particles and obstacle shapes."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from dlasim.spatial.index import ShapeKind


class ParticleSpec(BaseModel):
    """Request to create one particle.

    Coordinates are required. Everything else falls back to the world's
    settings (circle diameter) or a free, unbiased circle.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, allow_inf_nan=False)

    x: float
    y: float
    kind: ShapeKind = ShapeKind.CIRCLE
    diameter: float | None = Field(default=None, gt=0)
    vertices: list[tuple[float, float]] | None = None
    rotation: float = 0.0
    stuck: bool = False
    bias_towards: tuple[float, float] | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: Any) -> Any:
        if isinstance(v, str):
            for member in ShapeKind:
                if member.value.lower() == v.lower():
                    return member
        return v

    @model_validator(mode="after")
    def check_polygon(self) -> ParticleSpec:
        if self.kind is ShapeKind.POLYGON and (self.vertices is None or len(self.vertices) < 3):
            raise ValueError("polygon particles need at least 3 vertices")
        return self


class ShapeSpec(BaseModel):
    """Request to create a static obstacle polygon."""

    model_config = ConfigDict(extra="ignore", frozen=True, allow_inf_nan=False)

    x: float
    y: float
    vertices: list[tuple[float, float]] = Field(min_length=3)
    rotation: float = 0.0

"""Simulation settings.

Pydantic-settings model loaded from ``DLA_``-prefixed environment variables
and an optional .env file. Render-only options live here too so a renderer
can read them from the same place, but the engine never consults them.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class BiasAxis(StrEnum):
    """Uniform directional bias applied to every walker."""

    NONE = "None"
    EQUATOR = "Equator"  # pull toward the horizontal centerline
    MERIDIAN = "Meridian"  # pull toward the vertical centerline


class WalkerSource(StrEnum):
    """Region new walkers are spawned in."""

    RANDOM = "Random"
    CENTER = "Center"
    EDGES = "Edges"
    TOP = "Top"
    BOTTOM = "Bottom"
    LEFT = "Left"
    RIGHT = "Right"


class ClusterPattern(StrEnum):
    """Initial stationary layout created on reset."""

    WALL = "Wall"
    POINT = "Point"
    NONE = "None"


class RenderMode(StrEnum):
    """How a renderer should draw the state. No effect on the simulation."""

    SHAPES = "Shapes"
    LINES = "Lines"


class ParticleKindSetting(StrEnum):
    """Shape kind used for default walkers."""

    POINT = "Point"
    CIRCLE = "Circle"


def _match_enum(enum_cls: type[StrEnum], value: Any) -> Any:
    """Case-insensitive lookup of a StrEnum member by value."""
    if isinstance(value, str) and not isinstance(value, enum_cls):
        for member in enum_cls:
            if member.value.lower() == value.lower():
                return member
    return value


class HSBAColor(BaseModel):
    """Hue/saturation/brightness colour with optional alpha."""

    h: float = Field(ge=0, le=360)
    s: float = Field(ge=0, le=100)
    b: float = Field(ge=0, le=100)
    a: float = Field(default=1.0, ge=0, le=1)


class SimulationSettings(BaseSettings):
    """Recognized simulation options.

    Environment Variables (all prefixed with ``DLA_``):
        STICK_PROBABILITY: chance a qualifying contact sticks (0.0-1.0)
        MAX_WALKERS: walker population target
        WALKER_SOURCE: spawn region (Random, Center, Edges, Top, Bottom, Left, Right)
        BIAS_TOWARDS: None, Equator or Meridian
        BIAS_FORCE: magnitude of the directional bias
        REPLENISH_WALKERS / PRUNE_OLD_WALKERS / PRUNE_DRIFTERS / CAPTURE_LINES: toggles

    Example:
        >>> settings = SimulationSettings(stick_probability=0.6, bias_towards="Meridian")
    """

    model_config = SettingsConfigDict(
        env_prefix="DLA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Aggregation
    stick_probability: float = Field(
        default=1.0,
        ge=0.0,
        le=1.0,
        description="Probability that a qualifying collision converts a walker",
    )

    # Population
    max_walkers: int = Field(default=2000, ge=0, description="Walker population target")
    walker_source: WalkerSource = Field(
        default=WalkerSource.RANDOM,
        description="Spawn region for default walkers",
    )
    walker_kind: ParticleKindSetting = Field(
        default=ParticleKindSetting.CIRCLE,
        description="Shape kind of default walkers",
    )
    circle_diameter: float = Field(
        default=5.0,
        gt=0,
        description="Default circle diameter, also used for seeded walls",
    )

    # Motion
    bias_towards: BiasAxis = Field(default=BiasAxis.NONE, description="Uniform bias axis")
    bias_force: float = Field(default=1.0, ge=0.0, description="Bias magnitude per tick")
    use_per_walker_bias: bool = Field(
        default=False,
        description="Honour per-particle bias targets",
    )

    # Lifecycle
    replenish_walkers: bool = Field(default=False, description="Top up walkers every tick")
    replenish_source: WalkerSource = Field(
        default=WalkerSource.RANDOM,
        description="Spawn region for replenished walkers",
    )
    prune_old_walkers: bool = Field(default=False, description="Remove walkers past max_age")
    max_age: int = Field(default=5000, ge=0, description="Maximum walker age in ticks")
    prune_drifters: bool = Field(
        default=False,
        description="Remove walkers that wander past max_wander_distance",
    )
    max_wander_distance: float = Field(
        default=150.0,
        ge=0.0,
        description="Maximum distance from a walker's origin",
    )

    # Capture and seeding
    capture_lines: bool = Field(default=False, description="Record aggregation edges")
    default_cluster: ClusterPattern = Field(
        default=ClusterPattern.WALL,
        description="Initial cluster pattern created on reset",
    )

    # Bounds
    width: float = Field(default=800.0, gt=0, description="Initial bounds width")
    height: float = Field(default=600.0, gt=0, description="Initial bounds height")

    # Rendering only
    render_mode: RenderMode = Field(default=RenderMode.SHAPES, description="Draw mode")
    use_colors: bool = Field(default=False)
    use_stroke: bool = Field(default=True)
    background_color: HSBAColor = Field(default_factory=lambda: HSBAColor(h=0, s=0, b=100))
    walker_color: HSBAColor = Field(default_factory=lambda: HSBAColor(h=0, s=0, b=20))
    cluster_color: HSBAColor = Field(default_factory=lambda: HSBAColor(h=210, s=60, b=50))

    @field_validator("bias_towards", mode="before")
    @classmethod
    def normalize_bias(cls, v: Any) -> Any:
        """Accept bias axis names in any case."""
        if v is None:
            return BiasAxis.NONE
        return _match_enum(BiasAxis, v)

    @field_validator("walker_source", "replenish_source", mode="before")
    @classmethod
    def normalize_source(cls, v: Any) -> Any:
        """Accept spawn region names in any case."""
        return _match_enum(WalkerSource, v)

    @field_validator("walker_kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: Any) -> Any:
        return _match_enum(ParticleKindSetting, v)

    @field_validator("default_cluster", mode="before")
    @classmethod
    def normalize_cluster(cls, v: Any) -> Any:
        return _match_enum(ClusterPattern, v)

    @field_validator("render_mode", mode="before")
    @classmethod
    def normalize_render_mode(cls, v: Any) -> Any:
        return _match_enum(RenderMode, v)

    def __repr__(self) -> str:
        return (
            f"SimulationSettings("
            f"p={self.stick_probability}, "
            f"max_walkers={self.max_walkers}, "
            f"source={self.walker_source.value}, "
            f"bias={self.bias_towards.value}x{self.bias_force}, "
            f"replenish={self.replenish_walkers}, "
            f"cluster={self.default_cluster.value}, "
            f"bounds={self.width:g}x{self.height:g}"
            f")"
        )


@lru_cache
def get_settings() -> SimulationSettings:
    """Get the cached settings singleton.

    To reload from the environment, call ``get_settings.cache_clear()`` first.
    """
    settings = SimulationSettings()
    logger.info("Loaded simulation settings: %s", settings)
    return settings

"""Tests for simulation settings."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from dlasim.config import (
    BiasAxis,
    ClusterPattern,
    HSBAColor,
    ParticleKindSetting,
    RenderMode,
    SimulationSettings,
    WalkerSource,
    get_settings,
)


@pytest.fixture
def clean_env():
    """Run with no DLA_ variables and no .env file in play."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("DLA_")}
    with patch.dict(os.environ, env, clear=True):
        yield


@pytest.mark.usefixtures("clean_env")
class TestDefaults:
    """Tests for default values."""

    def test_aggregation_defaults(self):
        settings = SimulationSettings(_env_file=None)

        assert settings.stick_probability == 1.0
        assert settings.max_walkers == 2000
        assert settings.walker_source is WalkerSource.RANDOM
        assert settings.walker_kind is ParticleKindSetting.CIRCLE
        assert settings.circle_diameter == 5.0

    def test_motion_defaults(self):
        settings = SimulationSettings(_env_file=None)

        assert settings.bias_towards is BiasAxis.NONE
        assert settings.bias_force == 1.0
        assert settings.use_per_walker_bias is False

    def test_lifecycle_defaults(self):
        settings = SimulationSettings(_env_file=None)

        assert settings.replenish_walkers is False
        assert settings.prune_old_walkers is False
        assert settings.max_age == 5000
        assert settings.prune_drifters is False
        assert settings.max_wander_distance == 150.0
        assert settings.capture_lines is False
        assert settings.default_cluster is ClusterPattern.WALL

    def test_render_defaults(self):
        settings = SimulationSettings(_env_file=None)

        assert settings.render_mode is RenderMode.SHAPES
        assert settings.use_stroke is True
        assert settings.cluster_color == HSBAColor(h=210, s=60, b=50)


@pytest.mark.usefixtures("clean_env")
class TestEnvironment:
    """Tests for DLA_-prefixed environment loading."""

    def test_reads_prefixed_variables(self):
        with patch.dict(
            os.environ,
            {
                "DLA_STICK_PROBABILITY": "0.25",
                "DLA_MAX_WALKERS": "40",
                "DLA_BIAS_TOWARDS": "meridian",
                "DLA_CAPTURE_LINES": "true",
            },
        ):
            settings = SimulationSettings(_env_file=None)

        assert settings.stick_probability == 0.25
        assert settings.max_walkers == 40
        assert settings.bias_towards is BiasAxis.MERIDIAN
        assert settings.capture_lines is True

    def test_unprefixed_variables_ignored(self):
        with patch.dict(os.environ, {"MAX_WALKERS": "7"}):
            settings = SimulationSettings(_env_file=None)

        assert settings.max_walkers == 2000


class TestValidation:
    """Tests for field validation."""

    @pytest.mark.parametrize(
        "field,value,expected",
        [
            ("bias_towards", "EQUATOR", BiasAxis.EQUATOR),
            ("bias_towards", None, BiasAxis.NONE),
            ("walker_source", "edges", WalkerSource.EDGES),
            ("replenish_source", "TOP", WalkerSource.TOP),
            ("walker_kind", "point", ParticleKindSetting.POINT),
            ("default_cluster", "none", ClusterPattern.NONE),
            ("render_mode", "lines", RenderMode.LINES),
        ],
    )
    def test_enums_are_case_insensitive(self, field, value, expected):
        settings = SimulationSettings(_env_file=None, **{field: value})

        assert getattr(settings, field) is expected

    @pytest.mark.parametrize("p", [-0.1, 1.5])
    def test_stick_probability_bounds(self, p):
        with pytest.raises(ValidationError):
            SimulationSettings(_env_file=None, stick_probability=p)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("max_walkers", -1),
            ("circle_diameter", 0),
            ("width", 0),
            ("bias_force", -1),
            ("walker_source", "Sideways"),
        ],
    )
    def test_rejects_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            SimulationSettings(_env_file=None, **{field: value})

    def test_color_bounds(self):
        with pytest.raises(ValidationError):
            HSBAColor(h=400, s=0, b=0)

    def test_repr_summarizes(self):
        text = repr(SimulationSettings(_env_file=None, bias_towards="Equator", bias_force=2))

        assert "bias=Equatorx2.0" in text
        assert "bounds=800x600" in text


@pytest.mark.usefixtures("clean_env")
class TestGetSettings:
    """Tests for the cached settings singleton."""

    def test_returns_cached_instance(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()

    def test_cache_clear_reloads(self):
        get_settings.cache_clear()
        try:
            with patch.dict(os.environ, {"DLA_MAX_WALKERS": "3"}):
                get_settings.cache_clear()
                assert get_settings().max_walkers == 3
        finally:
            get_settings.cache_clear()

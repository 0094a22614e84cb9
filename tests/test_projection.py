"""Tests for the frame projection module."""

import json
import math
import random

import pytest

from dlasim.config import HSBAColor, RenderMode, SimulationSettings
from dlasim.engine.store import create_cluster_particle, create_shape, create_walker
from dlasim.model import Line, World
from dlasim.projection import (
    Frame,
    LineVisual,
    ParticleVisual,
    ShapeVisual,
    export_frame,
    frame_to_dict,
    hsla_string,
    project,
)

TRIANGLE = [(0, 0), (10, 0), (0, 10)]


def make_world(**overrides) -> World:
    """Create an empty 200x100 world."""
    overrides.setdefault("max_walkers", 0)
    overrides.setdefault("width", 200)
    overrides.setdefault("height", 100)
    return World(settings=SimulationSettings(**overrides), rng=random.Random(0))


class TestHslaString:
    """Tests for hsla_string()."""

    def test_formats_components(self):
        assert hsla_string(HSBAColor(h=210, s=60, b=50)) == "hsla(210, 60%, 50%, 1.0)"

    def test_fractional_values(self):
        assert hsla_string(HSBAColor(h=12.5, s=0, b=100, a=0.5)) == "hsla(12.5, 0%, 100%, 0.5)"


class TestProject:
    """Tests for project()."""

    def test_empty_world(self):
        world = make_world()

        frame = project(world)

        assert isinstance(frame, Frame)
        assert frame.tick == 0
        assert (frame.width, frame.height) == (200, 100)
        assert frame.num_walkers == 0
        assert frame.particles == []
        assert frame.shapes == []
        assert frame.lines == []

    def test_render_options(self):
        world = make_world(render_mode=RenderMode.LINES, use_colors=True, use_stroke=False)

        frame = project(world)

        assert frame.render_mode == "Lines"
        assert frame.colors["use_colors"] is True
        assert frame.colors["use_stroke"] is False
        assert frame.colors["cluster"] == "hsla(210, 60%, 50%, 1.0)"
        assert frame.colors["background"] == "hsla(0, 0%, 100%, 1.0)"

    def test_particle_visuals(self):
        world = make_world()
        walker = create_walker(world, {"x": 10, "y": 20, "diameter": 6})
        seed = create_cluster_particle(world, {"x": 30.4, "y": 40.6, "kind": "Point"})

        frame = project(world)

        assert frame.num_walkers == 1
        assert frame.particles[0] == ParticleVisual(
            id=walker.id, kind="Circle", x=10, y=20, stuck=False, radius=3.0
        )
        assert frame.particles[1] == ParticleVisual(
            id=seed.id, kind="Point", x=30, y=41, stuck=True
        )

    def test_polygon_particle_world_vertices(self):
        world = make_world()
        create_cluster_particle(
            world, {"x": 50, "y": 50, "kind": "Polygon", "vertices": TRIANGLE}
        )

        visual = project(world).particles[0]

        assert visual.kind == "Polygon"
        assert sorted(visual.vertices) == sorted([(50, 50), (60, 50), (50, 60)])

    def test_rotated_shape_vertices(self):
        world = make_world()
        shape = create_shape(
            world, {"x": 100, "y": 50, "vertices": TRIANGLE, "rotation": math.pi / 2}
        )

        visual = project(world).shapes[0]

        assert isinstance(visual, ShapeVisual)
        assert visual.id == shape.id
        expected = [(100, 50), (100, 60), (90, 50)]
        for vx, vy in visual.vertices:
            assert any(
                math.isclose(vx, ex, abs_tol=1e-9) and math.isclose(vy, ey, abs_tol=1e-9)
                for ex, ey in expected
            )

    def test_line_visuals(self):
        world = make_world()
        world.lines.append(Line(1, 2, 3, 4))

        frame = project(world)

        assert frame.lines == [LineVisual(1, 2, 3, 4)]

    def test_frame_is_detached_from_world(self):
        """Mutating the world after projection leaves the frame unchanged."""
        world = make_world()
        walker = create_walker(world, {"x": 10, "y": 20})
        frame = project(world)

        walker.move(5, 5)
        walker.stuck = True

        assert (frame.particles[0].x, frame.particles[0].y) == (10, 20)
        assert frame.particles[0].stuck is False


class TestExport:
    """Tests for frame_to_dict() and export_frame()."""

    def test_frame_to_dict(self):
        world = make_world()
        create_walker(world, {"x": 10, "y": 20})

        data = frame_to_dict(project(world))

        assert data["num_walkers"] == 1
        assert data["particles"][0]["kind"] == "Circle"

    def test_export_returns_json(self):
        world = make_world()
        create_cluster_particle(world, {"x": 5, "y": 5})
        world.tick = 42

        data = json.loads(export_frame(world))

        assert data["tick"] == 42
        assert data["particles"][0]["stuck"] is True

    def test_export_writes_file(self, tmp_path):
        world = make_world(capture_lines=True)
        world.lines.append(Line(0, 0, 1, 1))
        path = tmp_path / "frame.json"

        payload = export_frame(world, path)

        assert path.read_text(encoding="utf-8") == payload
        assert json.loads(payload)["lines"] == [{"x1": 0, "y1": 0, "x2": 1, "y2": 1}]

    @pytest.mark.parametrize("as_str", [True, False])
    def test_export_accepts_str_or_path(self, tmp_path, as_str):
        world = make_world()
        path = tmp_path / "out.json"

        export_frame(world, str(path) if as_str else path)

        assert path.exists()

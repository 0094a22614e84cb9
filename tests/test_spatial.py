"""Tests for the pymunk-backed spatial index."""

import math

import pytest

from dlasim.spatial import POINT_PADDING, ShapeKind, SpatialIndex


class TestCreation:
    """Tests for inserting handles."""

    def test_handles_carry_kind_and_position(self):
        """Each factory should tag its handle with the right kind."""
        index = SpatialIndex()

        point = index.create_point(1, 2)
        circle = index.create_circle(3, 4, 5)
        polygon = index.create_polygon(6, 7, [(0, 0), (2, 0), (0, 2)])

        assert point.kind is ShapeKind.POINT
        assert circle.kind is ShapeKind.CIRCLE
        assert polygon.kind is ShapeKind.POLYGON
        assert (circle.x, circle.y) == (3, 4)
        assert len(index) == 3

    def test_static_polygon(self):
        """Obstacles are created on static bodies."""
        index = SpatialIndex()

        obstacle = index.create_polygon(0, 0, [(0, 0), (10, 0), (10, 10), (0, 10)], static=True)
        walker = index.create_circle(0, 0, 1)

        assert obstacle.static is True
        assert walker.static is False

    def test_world_vertices_apply_rotation(self):
        """Polygon vertices are reported in world coordinates."""
        index = SpatialIndex()
        square = [(-1, -1), (1, -1), (1, 1), (-1, 1)]

        handle = index.create_polygon(10, 10, square, rotation=math.pi / 4)

        xs = sorted(round(x, 6) for x, _ in handle.world_vertices())
        assert xs[0] == pytest.approx(10 - math.sqrt(2))
        assert xs[-1] == pytest.approx(10 + math.sqrt(2))

    def test_world_vertices_empty_for_circles(self):
        """Circles and points have no outline vertices."""
        index = SpatialIndex()
        assert index.create_circle(0, 0, 1).world_vertices() == []


class TestQueries:
    """Tests for broad and narrow phase queries."""

    def test_potentials_exclude_self(self):
        """A handle never appears among its own candidates."""
        index = SpatialIndex()
        a = index.create_circle(0, 0, 5)

        assert list(a.potentials()) == []

    def test_potentials_find_overlapping_boxes(self):
        """Nearby handles are candidates, distant ones are not."""
        index = SpatialIndex()
        a = index.create_circle(0, 0, 5)
        near = index.create_circle(8, 0, 5)
        index.create_circle(100, 100, 5)

        assert list(a.potentials()) == [near]

    def test_potentials_are_lazy(self):
        """potentials() returns an iterator, not a list."""
        index = SpatialIndex()
        a = index.create_circle(0, 0, 5)
        index.create_circle(1, 0, 5)

        candidates = a.potentials()
        assert next(candidates) is not None
        assert list(candidates) == []

    def test_overlapping_circles_collide(self):
        """Circles closer than the sum of radii overlap."""
        index = SpatialIndex()
        a = index.create_circle(0, 0, 5)
        b = index.create_circle(9, 0, 5)

        assert a.collides(b)
        assert b.collides(a)

    def test_tangent_circles_do_not_collide(self):
        """Touching circles are broad-phase candidates but do not overlap."""
        index = SpatialIndex()
        a = index.create_circle(0, 0, 5)
        b = index.create_circle(10, 0, 5)

        assert b in list(a.potentials())
        assert not a.collides(b)

    def test_diagonal_boxes_overlap_without_contact(self):
        """Bounding boxes can overlap while the circles do not."""
        index = SpatialIndex()
        a = index.create_circle(0, 0, 5)
        b = index.create_circle(8, 8, 5)

        assert b in list(a.potentials())
        assert not a.collides(b)

    def test_point_reaches_lattice_neighbours(self):
        """A point's query box is padded to reach adjacent lattice sites."""
        index = SpatialIndex()
        point = index.create_point(10, 10)
        neighbour = index.create_point(10 + POINT_PADDING, 10)
        index.create_point(13, 10)

        assert list(point.potentials()) == [neighbour]

    def test_circle_overlapping_polygon(self):
        """Circles and polygons are tested exactly."""
        index = SpatialIndex()
        square = index.create_polygon(0, 0, [(0, 0), (10, 0), (10, 10), (0, 10)], static=True)
        inside = index.create_circle(5, 5, 1)
        outside = index.create_circle(20, 5, 1)

        assert square.collides(inside)
        assert not square.collides(outside)


class TestUpdateAndRemove:
    """Tests for rebuilding and eviction."""

    def test_update_reindexes_moved_handles(self):
        """Moves become visible to queries after update()."""
        index = SpatialIndex()
        a = index.create_circle(0, 0, 5)
        b = index.create_circle(100, 0, 5)

        b.move_to(6, 0)
        index.update()

        assert list(a.potentials()) == [b]
        assert a.collides(b)

    def test_remove_evicts_handle(self):
        """Removed handles are no longer candidates."""
        index = SpatialIndex()
        a = index.create_circle(0, 0, 5)
        b = index.create_circle(1, 0, 5)

        index.remove(b)

        assert list(a.potentials()) == []
        assert len(index) == 1

    def test_remove_twice_is_noop(self):
        """Removing an unknown handle does nothing."""
        index = SpatialIndex()
        a = index.create_circle(0, 0, 5)

        index.remove(a)
        index.remove(a)

        assert len(index) == 0

    def test_clear(self):
        """clear() evicts everything."""
        index = SpatialIndex()
        index.create_point(0, 0)
        index.create_polygon(0, 0, [(0, 0), (1, 0), (0, 1)], static=True)

        index.clear()

        assert len(index) == 0

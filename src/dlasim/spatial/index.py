"""Broad-phase collision index backed by a pymunk space.

The space is used purely as a spatial database: it is never stepped, so
bodies only move when the engine moves them. Walkers and cluster particles
live on kinematic bodies; immovable obstacles live on static bodies.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from enum import StrEnum
from typing import Any

import pymunk

logger = logging.getLogger(__name__)

# Lattice-neighbour reach of a Point's broad-phase query box
POINT_PADDING = 1.0

_ALL_SHAPES = pymunk.ShapeFilter()


class ShapeKind(StrEnum):
    """Geometry tag carried by every handle in the index."""

    POINT = "Point"
    CIRCLE = "Circle"
    POLYGON = "Polygon"


class Body:
    """Opaque handle to one object stored in a SpatialIndex.

    ``owner`` is set by whoever inserted the handle (a Particle or Shape) so
    that broad-phase candidates can be mapped back to simulation entities.
    """

    def __init__(
        self,
        index: SpatialIndex,
        kind: ShapeKind,
        body: pymunk.Body,
        shape: pymunk.Shape,
    ) -> None:
        self._index = index
        self.kind = kind
        self.body = body
        self.shape = shape
        self.owner: Any = None

    @property
    def x(self) -> float:
        return self.body.position.x

    @property
    def y(self) -> float:
        return self.body.position.y

    @property
    def static(self) -> bool:
        return self.body.body_type == pymunk.Body.STATIC

    def move_to(self, x: float, y: float) -> None:
        """Place the handle. Takes effect in queries after the next update()."""
        self.body.position = (x, y)

    def potentials(self) -> Iterator[Body]:
        """Lazily yield handles whose bounding boxes overlap this one."""
        return self._index.potentials(self)

    def collides(self, other: Body) -> bool:
        """Exact narrow-phase overlap test against another handle."""
        return self._index.collides(self, other)

    def world_vertices(self) -> list[tuple[float, float]]:
        """Polygon vertices in world coordinates (empty for points and circles)."""
        if not isinstance(self.shape, pymunk.Poly):
            return []
        return [
            (v.x, v.y) for v in (self.body.local_to_world(p) for p in self.shape.get_vertices())
        ]

    def __repr__(self) -> str:
        return f"Body({self.kind.value}, x={self.x:.2f}, y={self.y:.2f})"


class SpatialIndex:
    """Insert, rebuild and query circles, points and convex polygons."""

    def __init__(self) -> None:
        self.space = pymunk.Space()
        self._handles: dict[pymunk.Shape, Body] = {}

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self) -> Iterator[Body]:
        return iter(list(self._handles.values()))

    def _insert(self, kind: ShapeKind, body: pymunk.Body, shape: pymunk.Shape) -> Body:
        self.space.add(body, shape)
        handle = Body(self, kind, body, shape)
        self._handles[shape] = handle
        return handle

    def create_point(self, x: float, y: float) -> Body:
        """Insert a zero-radius point."""
        body = pymunk.Body(body_type=pymunk.Body.KINEMATIC)
        body.position = (x, y)
        return self._insert(ShapeKind.POINT, body, pymunk.Circle(body, 0))

    def create_circle(self, x: float, y: float, radius: float) -> Body:
        """Insert a circle centred on (x, y)."""
        body = pymunk.Body(body_type=pymunk.Body.KINEMATIC)
        body.position = (x, y)
        return self._insert(ShapeKind.CIRCLE, body, pymunk.Circle(body, radius))

    def create_polygon(
        self,
        x: float,
        y: float,
        vertices: Sequence[tuple[float, float]],
        rotation: float = 0.0,
        static: bool = False,
    ) -> Body:
        """Insert a convex polygon.

        Args:
            x: Anchor x; vertices are relative to the anchor.
            y: Anchor y.
            vertices: Polygon outline. Non-convex input is replaced by its hull.
            rotation: Rotation about the anchor in radians.
            static: True for immovable obstacles.
        """
        body_type = pymunk.Body.STATIC if static else pymunk.Body.KINEMATIC
        body = pymunk.Body(body_type=body_type)
        body.position = (x, y)
        body.angle = rotation
        shape = pymunk.Poly(body, [tuple(v) for v in vertices])
        return self._insert(ShapeKind.POLYGON, body, shape)

    def remove(self, handle: Body) -> None:
        """Evict a handle. Removing an unknown handle is a no-op."""
        if self._handles.pop(handle.shape, None) is None:
            return
        self.space.remove(handle.body, handle.shape)

    def update(self) -> None:
        """Rebuild the broad phase from the current handle positions."""
        for handle in self._handles.values():
            if not handle.static:
                self.space.reindex_shapes_for_body(handle.body)

    def potentials(self, handle: Body) -> Iterator[Body]:
        """Yield every other handle whose bounding box overlaps ``handle``'s."""
        bb = handle.shape.bb
        if handle.kind is ShapeKind.POINT:
            bb = pymunk.BB(
                bb.left - POINT_PADDING,
                bb.bottom - POINT_PADDING,
                bb.right + POINT_PADDING,
                bb.top + POINT_PADDING,
            )
        for shape in self.space.bb_query(bb, _ALL_SHAPES):
            if shape is handle.shape:
                continue
            other = self._handles.get(shape)
            if other is not None:
                yield other

    def collides(self, a: Body, b: Body) -> bool:
        """Exact overlap test. Tangent shapes do not collide."""
        return len(a.shape.shapes_collide(b.shape).points) > 0

    def clear(self) -> None:
        for handle in list(self._handles.values()):
            self.remove(handle)

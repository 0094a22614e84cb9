"""Broad-phase spatial index used for collision candidates."""

from dlasim.spatial.index import POINT_PADDING, Body, ShapeKind, SpatialIndex

__all__ = ["POINT_PADDING", "Body", "ShapeKind", "SpatialIndex"]

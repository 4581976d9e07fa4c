# tests/test_geometry.py
"""
Geometry primitives: point-to-segment, segment intersection, vectorised
closest points, hexagon outline and lead-line connection point.
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from maplabel.core.geometry import (
    closest_point_on_hexagon,
    closest_point_on_segment,
    closest_points_on_segments,
    distance_point_to_segment,
    hexagon_polygon,
    hexagon_vertices,
    segments_intersect,
)


def test_closest_point_on_segment_interior_and_clamped() -> None:
    assert closest_point_on_segment(5, 3, 0, 0, 10, 0) == pytest.approx((5.0, 0.0))
    assert closest_point_on_segment(-5, 3, 0, 0, 10, 0) == pytest.approx((0.0, 0.0))
    assert closest_point_on_segment(15, -2, 0, 0, 10, 0) == pytest.approx((10.0, 0.0))


def test_zero_length_segment_is_a_point() -> None:
    assert closest_point_on_segment(4, 5, 1, 1, 1, 1) == (1, 1)
    assert distance_point_to_segment(4, 5, 1, 1, 1, 1) == pytest.approx(5.0)


def test_distance_point_to_segment_uses_segment_not_line() -> None:
    # the infinite line would give 0; the segment end is 5 away
    assert distance_point_to_segment(15, 0, 0, 0, 10, 0) == pytest.approx(5.0)


def test_segments_intersect_cross() -> None:
    assert segments_intersect(0, 0, 10, 10, 0, 10, 10, 0) is True


def test_segments_intersect_touching_endpoint() -> None:
    assert segments_intersect(0, 0, 10, 0, 5, 0, 5, 5) is True


def test_segments_intersect_disjoint() -> None:
    assert segments_intersect(0, 0, 1, 1, 5, 0, 6, -1) is False


def test_parallel_and_collinear_never_intersect() -> None:
    assert segments_intersect(0, 0, 10, 0, 0, 1, 10, 1) is False
    assert segments_intersect(0, 0, 10, 0, 5, 0, 15, 0) is False


def test_zero_length_segment_never_intersects() -> None:
    assert segments_intersect(5, 5, 5, 5, 0, 0, 10, 10) is False


def test_closest_points_on_segments_matches_scalar() -> None:
    rng = np.random.default_rng(0)
    points = rng.uniform(-50, 150, size=(7, 2))
    segments = np.array([
        [0, 0, 100, 0],
        [0, 0, 0, 100],
        [20, 80, 90, 10],
        [40, 40, 40, 40],
    ], dtype=float)
    closest, dist = closest_points_on_segments(points, segments)
    assert closest.shape == (7, 4, 2)
    assert dist.shape == (7, 4)
    for i, (px, py) in enumerate(points):
        for j, seg in enumerate(segments):
            cx, cy = closest_point_on_segment(px, py, *seg)
            assert closest[i, j] == pytest.approx((cx, cy))
            assert dist[i, j] == pytest.approx(distance_point_to_segment(px, py, *seg))


def test_hexagon_vertices_on_circumcircle() -> None:
    verts = hexagon_vertices(10, 20, 5)
    assert len(verts) == 6
    for x, y in verts:
        assert math.hypot(x - 10, y - 20) == pytest.approx(5.0)
    # first corner at 30 degrees
    assert verts[0] == pytest.approx((10 + 5 * math.cos(math.pi / 6), 20 + 2.5))


def test_hexagon_polygon_area() -> None:
    size = 10.0
    poly = hexagon_polygon(0, 0, size)
    assert poly.area == pytest.approx(3 * math.sqrt(3) / 2 * size * size)
    assert hexagon_polygon(0, 0, 0).is_empty


def test_closest_point_on_hexagon_foot_of_perpendicular() -> None:
    # corners at +-30 degrees make the right-hand edge vertical at x = size * cos(30)
    x, y = closest_point_on_hexagon(0, 0, 10, 100, 0)
    assert x == pytest.approx(10 * math.cos(math.pi / 6))
    assert y == pytest.approx(0.0, abs=1e-9)


def test_closest_point_on_hexagon_corner() -> None:
    # straight above the center lies the corner at 90 degrees
    x, y = closest_point_on_hexagon(0, 0, 10, 0, 100)
    assert (x, y) == pytest.approx((0.0, 10.0), abs=1e-9)


def test_closest_point_on_hexagon_degenerate_size() -> None:
    assert closest_point_on_hexagon(3, 4, 0, 100, 100) == (3, 4)

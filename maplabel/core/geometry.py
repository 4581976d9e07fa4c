# maplabel/core/geometry.py
"""
Geometry helpers: point-to-segment distance, segment intersection,
vectorised closest points for route repulsion, hexagon outlines and
lead-line connection points. Pure functions; degenerate input returns a safe
default instead of raising.
"""

from __future__ import annotations

import math

import numpy as np
from shapely.geometry import Point, Polygon
from shapely.ops import nearest_points

from maplabel.core.config import PARALLEL_EPSILON


def closest_point_on_segment(
    px: float, py: float, x1: float, y1: float, x2: float, y2: float
) -> tuple[float, float]:
    """Closest point to (px, py) on the segment; t is clamped to [0, 1]."""
    dx = x2 - x1
    dy = y2 - y1
    len_sq = dx * dx + dy * dy
    if len_sq == 0.0:
        return (x1, y1)
    t = ((px - x1) * dx + (py - y1) * dy) / len_sq
    t = max(0.0, min(1.0, t))
    return (x1 + t * dx, y1 + t * dy)


def distance_point_to_segment(
    px: float, py: float, x1: float, y1: float, x2: float, y2: float
) -> float:
    """Distance from (px, py) to the segment (not the infinite line). Zero-length segment -> point distance."""
    cx, cy = closest_point_on_segment(px, py, x1, y1, x2, y2)
    return math.hypot(px - cx, py - cy)


def segments_intersect(
    ax1: float, ay1: float, ax2: float, ay2: float,
    bx1: float, by1: float, bx2: float, by2: float,
    epsilon: float = PARALLEL_EPSILON,
) -> bool:
    """
    True if segment A crosses segment B. Solves for the parameters ua, ub and
    requires both in [0, 1]. Parallel (and zero-length) segments never intersect.
    """
    denom = (by2 - by1) * (ax2 - ax1) - (bx2 - bx1) * (ay2 - ay1)
    if abs(denom) < epsilon:
        return False
    ua = ((bx2 - bx1) * (ay1 - by1) - (by2 - by1) * (ax1 - bx1)) / denom
    ub = ((ax2 - ax1) * (ay1 - by1) - (ay2 - ay1) * (ax1 - bx1)) / denom
    return 0.0 <= ua <= 1.0 and 0.0 <= ub <= 1.0


def closest_points_on_segments(
    points: np.ndarray,
    segments: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Vectorised closest_point_on_segment for N points against M segments.
    points: (N, 2); segments: (M, 4) as x1, y1, x2, y2.
    Returns (closest (N, M, 2), distance (N, M)).
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    segs = np.asarray(segments, dtype=np.float64).reshape(-1, 4)
    a = segs[:, 0:2]
    ab = segs[:, 2:4] - a
    len_sq = np.einsum("ij,ij->i", ab, ab)
    ap = pts[:, None, :] - a[None, :, :]
    dot = np.einsum("nmk,mk->nm", ap, ab)
    t = np.divide(dot, len_sq[None, :], out=np.zeros_like(dot), where=len_sq[None, :] > 0)
    t = np.clip(t, 0.0, 1.0)
    closest = a[None, :, :] + t[..., None] * ab[None, :, :]
    dist = np.linalg.norm(pts[:, None, :] - closest, axis=2)
    return closest, dist


def hexagon_vertices(cx: float, cy: float, size: float) -> list[tuple[float, float]]:
    """Six vertices at 30 + k * 60 degrees; matches the row-offset tiling in candidates_hex."""
    out: list[tuple[float, float]] = []
    for i in range(6):
        angle = math.pi / 3.0 * i + math.pi / 6.0
        out.append((cx + size * math.cos(angle), cy + size * math.sin(angle)))
    return out


def hexagon_polygon(cx: float, cy: float, size: float) -> Polygon:
    """Hexagon cell as a shapely Polygon. Empty for non-positive size."""
    if size <= 0:
        return Polygon()
    return Polygon(hexagon_vertices(cx, cy, size))


def closest_point_on_hexagon(
    cx: float, cy: float, size: float, px: float, py: float
) -> tuple[float, float]:
    """
    Point on the hexagon outline closest to (px, py): the foot of the
    perpendicular on an edge, or a corner. Used as the lead-line end.
    """
    poly = hexagon_polygon(cx, cy, size)
    if poly.is_empty:
        return (cx, cy)
    on_outline, _ = nearest_points(poly.exterior, Point(px, py))
    return (float(on_outline.x), float(on_outline.y))

# maplabel/core/scoring.py
"""
Layout quality metrics: spacing between labels, lead-line length and
crossings, labels too close to routes. Used by reports, the playground
and regression tests.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from maplabel.core.geometry import closest_points_on_segments, segments_intersect
from maplabel.core.types import Label, LayoutConfig, LayoutResult, RouteSegment


def _leader(label: Label) -> tuple[float, float, float, float]:
    """Lead line from marker to where it meets the label cell."""
    cx = label.x if label.connection_x is None else label.connection_x
    cy = label.y if label.connection_y is None else label.connection_y
    return label.location_x, label.location_y, cx, cy


def min_label_spacing(labels: Sequence[Label]) -> float | None:
    """Smallest center-to-center distance; None for fewer than two labels."""
    if len(labels) < 2:
        return None
    pos = np.array([(lb.x, lb.y) for lb in labels], dtype=np.float64)
    dist = np.linalg.norm(pos[:, None, :] - pos[None, :, :], axis=2)
    iu = np.triu_indices(len(labels), k=1)
    return float(dist[iu].min())


def leader_crossings(labels: Sequence[Label]) -> int:
    """Number of lead-line pairs that intersect."""
    leaders = [_leader(lb) for lb in labels]
    count = 0
    for i in range(len(leaders)):
        for j in range(i + 1, len(leaders)):
            if segments_intersect(*leaders[i], *leaders[j]):
                count += 1
    return count


def labels_near_routes(labels: Sequence[Label], routes: Sequence[RouteSegment], threshold: float) -> int:
    """Labels whose center lies closer than threshold to any route segment."""
    if not labels or not routes:
        return 0
    pos = np.array([(lb.x, lb.y) for lb in labels], dtype=np.float64)
    _, dist = closest_points_on_segments(pos, np.asarray(routes, dtype=np.float64))
    return int((dist.min(axis=1) < threshold).sum())


def layout_metrics(
    result: LayoutResult,
    routes: Sequence[RouteSegment] = (),
    config: LayoutConfig | None = None,
) -> dict:
    """Summary metrics for one layout result."""
    config = config or LayoutConfig()
    labels = result.labels
    lengths = [math.hypot(x2 - x1, y2 - y1) for x1, y1, x2, y2 in map(_leader, labels)]
    snapped = sum(1 for lb in labels if lb.snapped)
    return {
        "label_count": len(labels),
        "snapped_count": snapped,
        "fallback_count": len(labels) - snapped,
        "min_label_spacing_px": min_label_spacing(labels),
        "mean_leader_length_px": (sum(lengths) / len(lengths)) if lengths else 0.0,
        "leader_crossings": leader_crossings(labels),
        "labels_near_routes": labels_near_routes(labels, routes, config.route_repulsion_px),
    }

# maplabel/core/relaxation.py
"""
Force relaxation over continuous label positions. A fixed number of damped
iterations; every iteration computes all forces from the previous positions
and applies them at once, so the result does not depend on label order.

Forces per label:
1. anchor attraction toward the assigned slot,
2. unit pull toward the marker,
3. repulsion from labels closer than label_width + min_label_spacing,
4. perpendicular nudge when two lead lines cross,
5. repulsion from route segments closer than route_repulsion_px.
"""

from __future__ import annotations

import logging

import numpy as np

from maplabel.core.config import LAYOUT_DEBUG
from maplabel.core.geometry import closest_points_on_segments, segments_intersect
from maplabel.core.types import LayoutConfig, RouteSegment

logger = logging.getLogger(__name__)


def _anchor_forces(pos: np.ndarray, anchors: np.ndarray, strength: float) -> np.ndarray:
    return strength * (anchors - pos)


def _source_forces(pos: np.ndarray, sources: np.ndarray, strength: float) -> np.ndarray:
    v = sources - pos
    n = np.linalg.norm(v, axis=1, keepdims=True)
    unit = np.divide(v, n, out=np.zeros_like(v), where=n > 0)
    return strength * unit


def _repulsion_forces(pos: np.ndarray, min_distance: float, strength: float) -> np.ndarray:
    """Push apart labels within min_distance; magnitude strength * (min_distance - d) / d."""
    diff = pos[:, None, :] - pos[None, :, :]
    dist = np.linalg.norm(diff, axis=2)
    mask = (dist > 0) & (dist < min_distance)
    if not mask.any():
        return np.zeros_like(pos)
    # unit vector (diff / d) times magnitude, folded into one coefficient
    coef = np.zeros_like(dist)
    coef[mask] = strength * (min_distance - dist[mask]) / (dist[mask] ** 2)
    return (diff * coef[..., None]).sum(axis=1)


def _crossing_forces(pos: np.ndarray, sources: np.ndarray, strength: float) -> np.ndarray:
    """Nudge both labels of every crossing lead-line pair sideways, away from each other."""
    out = np.zeros_like(pos)
    n = len(pos)
    for i in range(n):
        for j in range(i + 1, n):
            if not segments_intersect(
                sources[i, 0], sources[i, 1], pos[i, 0], pos[i, 1],
                sources[j, 0], sources[j, 1], pos[j, 0], pos[j, 1],
            ):
                continue
            for k, other in ((i, j), (j, i)):
                lead = pos[k] - sources[k]
                length = float(np.hypot(lead[0], lead[1]))
                if length == 0.0:
                    continue
                perp = np.array([-lead[1], lead[0]]) / length
                if float(np.dot(perp, pos[k] - pos[other])) < 0:
                    perp = -perp
                out[k] += strength * perp
    return out


def _route_forces(
    pos: np.ndarray,
    segments: np.ndarray,
    threshold: float,
    strength: float,
) -> np.ndarray:
    """Push labels away from the nearest point of every segment closer than threshold."""
    if segments.size == 0:
        return np.zeros_like(pos)
    closest, dist = closest_points_on_segments(pos, segments)
    mask = dist < threshold
    if not mask.any():
        return np.zeros_like(pos)
    away = pos[:, None, :] - closest
    unit = np.divide(away, dist[..., None], out=np.zeros_like(away), where=dist[..., None] > 0)
    # label sitting exactly on a segment: push along the segment normal
    on_line = mask & (dist == 0)
    if on_line.any():
        d = segments[:, 2:4] - segments[:, 0:2]
        length = np.linalg.norm(d, axis=1, keepdims=True)
        normal = np.divide(np.column_stack([-d[:, 1], d[:, 0]]), length,
                           out=np.zeros_like(d), where=length > 0)
        unit = np.where(on_line[..., None], normal[None, :, :], unit)
    magnitude = np.where(mask, (threshold - dist) / threshold * strength, 0.0)
    return (unit * magnitude[..., None]).sum(axis=1)


def iteration_forces(
    pos: np.ndarray,
    anchors: np.ndarray,
    sources: np.ndarray,
    segments: np.ndarray,
    config: LayoutConfig,
) -> np.ndarray:
    """Sum of all five forces for every label, evaluated at pos."""
    forces = _anchor_forces(pos, anchors, config.anchor_strength)
    forces += _source_forces(pos, sources, config.source_strength)
    forces += _repulsion_forces(pos, config.repulsion_distance_px, config.repulsion_strength)
    forces += _crossing_forces(pos, sources, config.crossing_strength)
    forces += _route_forces(pos, segments, config.route_repulsion_px, config.route_strength)
    return forces


def relax_positions(
    anchors: np.ndarray,
    sources: np.ndarray,
    routes: list[RouteSegment] | None,
    config: LayoutConfig,
) -> np.ndarray:
    """
    Run config.iteration_count damped iterations starting from the anchors.
    anchors, sources: (N, 2). Returns relaxed positions (N, 2).
    """
    anchors = np.asarray(anchors, dtype=np.float64).reshape(-1, 2)
    sources = np.asarray(sources, dtype=np.float64).reshape(-1, 2)
    segments = np.asarray(list(routes or []), dtype=np.float64).reshape(-1, 4)
    pos = anchors.copy()
    if len(pos) == 0:
        return pos
    for it in range(config.iteration_count):
        forces = iteration_forces(pos, anchors, sources, segments, config)
        pos = pos + config.damping * forces
        if LAYOUT_DEBUG:
            logger.debug(
                "iteration %d: max displacement from anchor %.2f px",
                it, float(np.max(np.linalg.norm(pos - anchors, axis=1))),
            )
    return pos

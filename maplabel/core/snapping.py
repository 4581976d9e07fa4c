# maplabel/core/snapping.py
"""
Snap relaxed positions back onto the discrete slot grid. Labels are processed
in order; each takes the nearest slot that is unused in this pass and at
least snap_distance from every label snapped before it. Slots lying on a
route are only taken when no route-clear slot is legal. A label with no legal
slot keeps its relaxed position.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from maplabel.core.geometry import closest_points_on_segments
from maplabel.core.types import CandidateSlot, LayoutConfig, RouteSegment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapOutcome:
    """Final position of one label; slot is None for a relaxed-position fallback."""
    x: float
    y: float
    slot: CandidateSlot | None


def route_clear_mask(
    slots: list[CandidateSlot],
    routes: list[RouteSegment] | None,
    clearance: float,
) -> np.ndarray:
    """True for slots at least clearance px from every route segment."""
    if not slots:
        return np.zeros(0, dtype=bool)
    if not routes:
        return np.ones(len(slots), dtype=bool)
    centers = np.array([(s.x, s.y) for s in slots], dtype=np.float64)
    _, dist = closest_points_on_segments(centers, np.asarray(routes, dtype=np.float64))
    return dist.min(axis=1) >= clearance


def snap_to_slots(
    relaxed: np.ndarray,
    slots: list[CandidateSlot],
    config: LayoutConfig,
    routes: list[RouteSegment] | None = None,
) -> list[SnapOutcome]:
    """One SnapOutcome per relaxed position, in the same order."""
    relaxed = np.asarray(relaxed, dtype=np.float64).reshape(-1, 2)
    if not slots:
        return [SnapOutcome(float(x), float(y), None) for x, y in relaxed]

    centers = np.array([(s.x, s.y) for s in slots], dtype=np.float64)
    clear = route_clear_mask(slots, routes, config.route_repulsion_px)
    free = np.ones(len(slots), dtype=bool)
    placed: list[tuple[float, float]] = []
    min_distance = config.snap_distance_px
    out: list[SnapOutcome] = []

    for x, y in relaxed:
        order = np.argsort(np.hypot(centers[:, 0] - x, centers[:, 1] - y), kind="stable")
        if placed:
            p = np.array(placed)
            spacing_ok = (
                np.linalg.norm(centers[:, None, :] - p[None, :, :], axis=2) >= min_distance
            ).all(axis=1)
        else:
            spacing_ok = np.ones(len(slots), dtype=bool)
        legal = free & spacing_ok
        chosen: int | None = None
        for tier in (legal & clear, legal):
            hits = order[tier[order]]
            if hits.size:
                chosen = int(hits[0])
                break
        if chosen is None:
            out.append(SnapOutcome(float(x), float(y), None))
            continue
        free[chosen] = False
        slot = slots[chosen]
        placed.append((slot.x, slot.y))
        out.append(SnapOutcome(slot.x, slot.y, slot))

    fallbacks = sum(1 for o in out if o.slot is None)
    if fallbacks:
        logger.debug("%d label(s) kept their relaxed position", fallbacks)
    return out

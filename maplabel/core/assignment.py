# maplabel/core/assignment.py
"""
Initial assignment: each projected location, in input order, claims the
unused slot with the lowest score. Edge strategy scores plain distance; the
hex strategy subtracts a share of the slot's distance from the viewport
center so labels ring the outside of the map.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from maplabel.core.config import EXHAUSTION_KEEP, STRATEGY_HEXAGONAL
from maplabel.core.projector import ProjectedLocation
from maplabel.core.types import CandidateSlot, LayoutConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Assignment:
    """
    Anchor chosen for one location. claimed is False when the grid was
    exhausted and the anchor is only the best slot regardless of use
    (or the marker itself when there are no slots at all).
    """
    projected: ProjectedLocation
    slot: CandidateSlot | None
    anchor_x: float
    anchor_y: float
    claimed: bool


def score_matrix(
    projected: list[ProjectedLocation],
    slots: list[CandidateSlot],
    viewport_w: float,
    viewport_h: float,
    config: LayoutConfig,
) -> np.ndarray:
    """(locations, slots) assignment scores; lower is better."""
    locs = np.array([(p.point.x, p.point.y) for p in projected], dtype=np.float64).reshape(-1, 2)
    centers = np.array([(s.x, s.y) for s in slots], dtype=np.float64).reshape(-1, 2)
    scores = np.linalg.norm(locs[:, None, :] - centers[None, :, :], axis=2)
    if config.strategy == STRATEGY_HEXAGONAL:
        mid = np.array([viewport_w / 2.0, viewport_h / 2.0])
        from_center = np.linalg.norm(centers - mid, axis=1)
        scores = scores - config.hex_edge_bias * from_center[None, :]
    return scores


def assign_slots(
    projected: list[ProjectedLocation],
    slots: list[CandidateSlot],
    viewport_w: float,
    viewport_h: float,
    config: LayoutConfig,
) -> tuple[list[Assignment], set[str]]:
    """
    Greedy assignment in input order. Returns (assignments, used_slot_ids).
    Locations left without a slot are omitted under the "drop" policy and
    anchored unclaimed under "keep".
    """
    used: set[str] = set()
    out: list[Assignment] = []
    if not projected:
        return out, used
    scores = score_matrix(projected, slots, viewport_w, viewport_h, config) if slots else None
    free = np.ones(len(slots), dtype=bool)

    for i, p in enumerate(projected):
        if scores is not None and free.any():
            row = np.where(free, scores[i], np.inf)
            j = int(np.argmin(row))
            slot = slots[j]
            free[j] = False
            used.add(slot.id)
            out.append(Assignment(p, slot, slot.x, slot.y, claimed=True))
            continue
        if config.exhaustion_policy != EXHAUSTION_KEEP:
            logger.debug("No slot left for location %s; dropped", p.location.id)
            continue
        if scores is not None:
            slot = slots[int(np.argmin(scores[i]))]
            out.append(Assignment(p, slot, slot.x, slot.y, claimed=False))
        else:
            out.append(Assignment(p, None, p.point.x, p.point.y, claimed=False))
        logger.debug("No slot left for location %s; anchored unclaimed", p.location.id)
    return out, used

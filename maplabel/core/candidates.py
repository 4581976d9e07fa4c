# maplabel/core/candidates.py
"""
Candidate grid contract: generate_slots(viewport_w, viewport_h, config) picks
the configured strategy. Deterministic and side-effect free; identical inputs
give an identical grid.
"""

from __future__ import annotations

import numpy as np

from maplabel.core.candidates_edge import generate_edge_slots
from maplabel.core.candidates_hex import generate_hex_slots, hex_size_for_viewport
from maplabel.core.config import STRATEGY_HEXAGONAL
from maplabel.core.types import CandidateSlot, LayoutConfig, ScreenPoint


def generate_slots(
    viewport_w: float,
    viewport_h: float,
    config: LayoutConfig,
) -> list[CandidateSlot]:
    """Candidate slots for the configured strategy. Empty for a viewport without area."""
    if viewport_w <= 0 or viewport_h <= 0:
        return []
    if config.strategy == STRATEGY_HEXAGONAL:
        return generate_hex_slots(viewport_w, viewport_h, config)
    return generate_edge_slots(viewport_w, viewport_h, config)


def grid_cell_size(viewport_w: float, viewport_h: float, config: LayoutConfig) -> float:
    """Hexagon circumradius for the hex strategy; 0.0 for the edge strategy."""
    if config.strategy != STRATEGY_HEXAGONAL:
        return 0.0
    return hex_size_for_viewport(viewport_w, viewport_h, config)


def filter_slots_near_markers(
    slots: list[CandidateSlot],
    markers: list[ScreenPoint],
    radius: float,
) -> list[CandidateSlot]:
    """Drop slots whose center is strictly closer than radius to any marker. Order is preserved."""
    if not slots or not markers or radius <= 0:
        return list(slots)
    centers = np.array([(s.x, s.y) for s in slots], dtype=np.float64)
    pts = np.array([(p.x, p.y) for p in markers], dtype=np.float64)
    dist = np.linalg.norm(centers[:, None, :] - pts[None, :, :], axis=2)
    blocked = (dist < radius).any(axis=1)
    return [s for s, b in zip(slots, blocked.tolist()) if not b]

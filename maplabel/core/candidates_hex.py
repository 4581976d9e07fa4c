# maplabel/core/candidates_hex.py
"""
Hexagonal strategy: a hexagon grid covering the viewport, odd rows shifted by
half a column. Cell size blends the label diagonal with the viewport diagonal
so the grid density follows the screen size.
"""

from __future__ import annotations

import math

import numpy as np

from maplabel.core.types import CandidateSlot, LayoutConfig


def hex_size_for_viewport(viewport_w: float, viewport_h: float, config: LayoutConfig) -> float:
    """
    Circumradius of a grid cell:
    mean(label_diagonal / 2, viewport_diagonal / (2 * target_across_diagonal)).
    """
    if viewport_w <= 0 or viewport_h <= 0:
        return 0.0
    label_diagonal = math.hypot(config.label_width_px, config.label_height_px)
    viewport_diagonal = math.hypot(viewport_w, viewport_h)
    from_label = label_diagonal / 2.0
    from_viewport = viewport_diagonal / (config.hex_target_across_diagonal * 2.0)
    return (from_label + from_viewport) / 2.0


def generate_hex_slots(
    viewport_w: float,
    viewport_h: float,
    config: LayoutConfig,
) -> list[CandidateSlot]:
    """
    Hexagon centers in row-major order; keeps only centers within
    [-hex_size, viewport + hex_size] on both axes.
    """
    size = hex_size_for_viewport(viewport_w, viewport_h, config)
    if size <= 0:
        return []
    horizontal = math.sqrt(3.0) * size
    vertical = 1.5 * size
    cols = math.ceil(viewport_w / horizontal) + 2
    rows = math.ceil(viewport_h / vertical) + 2

    row_idx, col_idx = np.meshgrid(np.arange(rows), np.arange(cols), indexing="ij")
    xs = col_idx * horizontal + (row_idx % 2) * (horizontal / 2.0)
    ys = row_idx * vertical
    keep = (xs >= -size) & (xs <= viewport_w + size) & (ys >= -size) & (ys <= viewport_h + size)

    slots: list[CandidateSlot] = []
    for row, col in zip(row_idx[keep].tolist(), col_idx[keep].tolist()):
        slots.append(
            CandidateSlot(
                id=f"hex-{row}-{col}",
                x=float(xs[row, col]),
                y=float(ys[row, col]),
                col=col,
                row=row,
            )
        )
    return slots

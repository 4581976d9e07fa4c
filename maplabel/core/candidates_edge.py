# maplabel/core/candidates_edge.py
"""
Edge strategy: label-center slots walked clockwise along the four viewport
edges at a fixed spacing, inset so every label box stays on screen.
"""

from __future__ import annotations

import math

from maplabel.core.types import CandidateSlot, LayoutConfig


def _walk_edge(
    start: tuple[float, float],
    end: tuple[float, float],
    spacing: float,
    include_end: bool = False,
) -> list[tuple[float, float]]:
    """
    Points from start toward end every `spacing` px. The start corner is always
    included; the end corner belongs to the next edge, and steps closer than
    half a spacing to it are skipped.
    """
    x0, y0 = start
    x1, y1 = end
    length = math.hypot(x1 - x0, y1 - y0)
    out = [(x0, y0)]
    if length > 0:
        ux = (x1 - x0) / length
        uy = (y1 - y0) / length
        k = 1
        while k * spacing <= length - spacing / 2.0 + 1e-9:
            out.append((x0 + ux * k * spacing, y0 + uy * k * spacing))
            k += 1
        if include_end:
            out.append((x1, y1))
    return out


def generate_edge_slots(
    viewport_w: float,
    viewport_h: float,
    config: LayoutConfig,
) -> list[CandidateSlot]:
    """
    Slots on the top, right, bottom and left edges (in that order), inset by
    margin + half the label box. A viewport narrower (or shorter) than the
    inset collapses that axis onto the viewport center line.
    """
    if viewport_w <= 0 or viewport_h <= 0:
        return []
    half_w = config.label_width_px / 2.0
    half_h = config.label_height_px / 2.0
    left_x = config.margin_px + half_w
    right_x = viewport_w - config.margin_px - half_w
    top_y = config.margin_px + half_h
    bottom_y = viewport_h - config.margin_px - half_h

    collapse_x = right_x <= left_x
    collapse_y = bottom_y <= top_y
    if collapse_x:
        left_x = right_x = viewport_w / 2.0
    if collapse_y:
        top_y = bottom_y = viewport_h / 2.0
    if collapse_x and collapse_y:
        return [CandidateSlot(id="edge-top-0", x=left_x, y=top_y, edge="top")]

    edges = [
        ("top", (left_x, top_y), (right_x, top_y)),
        ("right", (right_x, top_y), (right_x, bottom_y)),
        ("bottom", (right_x, bottom_y), (left_x, bottom_y)),
        ("left", (left_x, bottom_y), (left_x, top_y)),
    ]
    include_end = False
    if collapse_x:
        edges = [e for e in edges if e[0] == "right"]
        include_end = True
    elif collapse_y:
        edges = [e for e in edges if e[0] == "top"]
        include_end = True

    slots: list[CandidateSlot] = []
    for edge, start, end in edges:
        for i, (x, y) in enumerate(_walk_edge(start, end, config.slot_spacing_px, include_end)):
            slots.append(CandidateSlot(id=f"edge-{edge}-{i}", x=x, y=y, edge=edge))
    return slots

# maplabel/core/layout.py
"""
Full label layout pipeline: project -> candidate grid -> initial assignment
-> force relaxation -> snap. compute_labels is the public entry point; it
never raises for degraded input and reports it in LayoutResult.warnings.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from maplabel.core.assignment import assign_slots
from maplabel.core.candidates import filter_slots_near_markers, generate_slots, grid_cell_size
from maplabel.core.config import DEFAULT_PALETTE, EXHAUSTION_KEEP, STRATEGY_HEXAGONAL
from maplabel.core.error_codes import (
    NO_LOCATIONS,
    NO_PROJECTED_LOCATIONS,
    SLOTS_EXHAUSTED,
    SNAP_FALLBACK,
    VIEWPORT_INVALID,
)
from maplabel.core.geometry import closest_point_on_hexagon
from maplabel.core.projector import Projector, project_locations
from maplabel.core.relaxation import relax_positions
from maplabel.core.snapping import snap_to_slots
from maplabel.core.types import Label, LayoutConfig, LayoutResult, Location, RouteSegment

logger = logging.getLogger(__name__)


def label_color(palette: Sequence[str], color_index: int | None, index: int) -> str:
    """palette[color_index % len(palette)]; color_index defaults to the location's input index."""
    colors = palette if palette else DEFAULT_PALETTE
    i = index if color_index is None else color_index
    return colors[i % len(colors)]


def _viewport_ok(width: float, height: float) -> bool:
    return math.isfinite(width) and math.isfinite(height) and width > 0 and height > 0


def compute_labels(
    locations: Sequence[Location],
    project: Projector,
    viewport_width: float,
    viewport_height: float,
    palette: Sequence[str] = DEFAULT_PALETTE,
    routes: Sequence[RouteSegment] = (),
    config: LayoutConfig | None = None,
) -> LayoutResult:
    """
    Compute label positions for the current viewport. Location order breaks
    ties in assignment and snapping. Unprojectable locations are excluded.
    Deterministic: identical inputs give identical output.
    """
    config = config or LayoutConfig()
    if not locations:
        return LayoutResult(warnings=[NO_LOCATIONS])
    if not _viewport_ok(viewport_width, viewport_height):
        logger.debug("Viewport %sx%s has no area; skipping layout", viewport_width, viewport_height)
        return LayoutResult(warnings=[VIEWPORT_INVALID])

    slots = generate_slots(viewport_width, viewport_height, config)
    hex_size = grid_cell_size(viewport_width, viewport_height, config)
    projected = project_locations(locations, project)
    if not projected:
        return LayoutResult(
            candidate_slots=slots,
            available_slots=list(slots),
            hex_size=hex_size,
            warnings=[NO_PROJECTED_LOCATIONS],
        )

    available = slots
    if config.strategy == STRATEGY_HEXAGONAL:
        available = filter_slots_near_markers(
            slots, [p.point for p in projected], hex_size * config.hex_exclusion_factor
        )

    warnings: list[str] = []
    assignments, _ = assign_slots(projected, available, viewport_width, viewport_height, config)
    if len(assignments) < len(projected) or any(not a.claimed for a in assignments):
        warnings.append(SLOTS_EXHAUSTED)

    route_list = list(routes or [])
    anchors = np.array([(a.anchor_x, a.anchor_y) for a in assignments], dtype=np.float64)
    sources = np.array([(a.projected.point.x, a.projected.point.y) for a in assignments], dtype=np.float64)
    relaxed = relax_positions(anchors, sources, route_list, config)
    outcomes = snap_to_slots(relaxed, available, config, route_list)

    labels: list[Label] = []
    for a, snap in zip(assignments, outcomes):
        if snap.slot is None and config.exhaustion_policy != EXHAUSTION_KEEP:
            continue
        loc = a.projected.location
        point = a.projected.point
        conn_x, conn_y = snap.x, snap.y
        if snap.slot is not None and config.strategy == STRATEGY_HEXAGONAL:
            conn_x, conn_y = closest_point_on_hexagon(snap.x, snap.y, hex_size, point.x, point.y)
        labels.append(
            Label(
                id=loc.id,
                name=loc.name,
                x=snap.x,
                y=snap.y,
                candidate_slot_id=snap.slot.id if snap.slot is not None else None,
                location_x=point.x,
                location_y=point.y,
                color=label_color(palette, loc.color_index, a.projected.index),
                photo_reference=loc.photo_reference,
                connection_x=conn_x,
                connection_y=conn_y,
                snapped=snap.slot is not None,
            )
        )
    if any(o.slot is None for o in outcomes):
        warnings.append(SNAP_FALLBACK)

    used = frozenset(lb.candidate_slot_id for lb in labels if lb.candidate_slot_id is not None)
    logger.debug(
        "Layout: %d location(s), %d projected, %d slot(s), %d available, %d label(s)",
        len(locations), len(projected), len(slots), len(available), len(labels),
    )
    return LayoutResult(
        labels=labels,
        candidate_slots=slots,
        used_slot_ids=used,
        available_slots=available,
        hex_size=hex_size,
        warnings=warnings,
    )

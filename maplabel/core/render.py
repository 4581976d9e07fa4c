# maplabel/core/render.py
"""
Matplotlib PNG rendering of one layout in screen space: candidate slots,
claimed slots, routes, markers, lead lines and label pills. y grows
downward like the viewport.
"""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import FancyBboxPatch
from matplotlib.patches import Polygon as MplPolygon

from maplabel.core.config import DEFAULT_FONT_FAMILY, LABEL_FONT_SIZE_PX
from maplabel.core.geometry import hexagon_vertices
from maplabel.core.types import Label, LayoutConfig, LayoutResult, RouteSegment


def _new_fig(width_px: float, height_px: float, scale: int) -> tuple[plt.Figure, plt.Axes]:
    fig = plt.figure(
        figsize=(max(1.0, width_px) * scale / 100.0, max(1.0, height_px) * scale / 100.0),
        dpi=100,
        constrained_layout=False,
    )
    ax = fig.add_axes([0, 0, 1, 1])  # full-canvas axes
    ax.set_xlim(0, width_px)
    ax.set_ylim(height_px, 0)
    ax.set_aspect("equal", adjustable="box")
    ax.axis("off")
    return fig, ax


def _draw_slots(ax: plt.Axes, result: LayoutResult) -> None:
    available = {s.id for s in result.available_slots}
    if result.hex_size > 0:
        for s in result.candidate_slots:
            used = s.id in result.used_slot_ids
            ax.add_patch(
                MplPolygon(
                    hexagon_vertices(s.x, s.y, result.hex_size),
                    closed=True,
                    facecolor="#DBEAFE" if used else "none",
                    edgecolor="#94A3B8" if s.id in available else "#E2E8F0",
                    linewidth=0.6,
                    zorder=1,
                )
            )
        return
    if not result.candidate_slots:
        return
    xy = np.array([(s.x, s.y) for s in result.candidate_slots])
    ax.scatter(xy[:, 0], xy[:, 1], s=10, color="#94A3B8", zorder=1)
    used = [s for s in result.candidate_slots if s.id in result.used_slot_ids]
    if used:
        uxy = np.array([(s.x, s.y) for s in used])
        ax.scatter(uxy[:, 0], uxy[:, 1], s=40, facecolors="none", edgecolors="#1E3A8A", zorder=2)


def _draw_label(ax: plt.Axes, label: Label, width: float, height: float, font_size: float) -> None:
    cx = label.x if label.connection_x is None else label.connection_x
    cy = label.y if label.connection_y is None else label.connection_y
    ax.plot([label.location_x, cx], [label.location_y, cy], color=label.color, linewidth=1.2, zorder=3)
    ax.scatter([label.location_x], [label.location_y], s=36, color=label.color,
               edgecolors="white", linewidths=1.0, zorder=4)
    ax.add_patch(
        FancyBboxPatch(
            (label.x - width / 2.0, label.y - height / 2.0),
            width,
            height,
            boxstyle=f"round,pad=0,rounding_size={height / 2.0}",
            facecolor=label.color,
            edgecolor="white" if label.snapped else "black",
            linestyle="-" if label.snapped else "--",
            linewidth=1.0,
            zorder=5,
        )
    )
    ax.text(
        label.x, label.y, label.name,
        fontsize=font_size * 0.75,  # px -> pt at 100 dpi
        fontfamily=DEFAULT_FONT_FAMILY,
        ha="center", va="center",
        color="white",
        clip_on=True,
        zorder=6,
    )


def render_debug(
    result: LayoutResult,
    width_px: float,
    height_px: float,
    output_path: str | Path,
    routes: Sequence[RouteSegment] = (),
    config: LayoutConfig | None = None,
    scale: int = 1,
) -> None:
    """Render the layout overlay to a PNG. scale multiplies output resolution (1x, 2x, 4x)."""
    config = config or LayoutConfig()
    fig, ax = _new_fig(width_px, height_px, scale)
    ax.add_patch(
        MplPolygon(
            [(0, 0), (width_px, 0), (width_px, height_px), (0, height_px)],
            closed=True, facecolor="#F8FAFC", edgecolor="#CBD5E1", linewidth=1, zorder=0,
        )
    )
    _draw_slots(ax, result)
    for x1, y1, x2, y2 in routes:
        ax.plot([x1, x2], [y1, y2], color="#64748B", linewidth=3, alpha=0.6, zorder=2)
    for label in result.labels:
        _draw_label(ax, label, config.label_width_px, config.label_height_px, LABEL_FONT_SIZE_PX)
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message=".*constrained_layout.*", category=UserWarning)
        fig.savefig(output_path, dpi=100, facecolor="white")
    plt.close(fig)

# maplabel/core/config.py
"""
Central configuration for map label placement.
All tunable values live here; no magic numbers in other modules.
LayoutConfig (types.py) takes its defaults from these constants.
"""

from __future__ import annotations
import os

# ----- Paths (repo-relative) -----
REPORTS_DIR: str = "reports"

# ----- Label box -----
LABEL_WIDTH_PX: float = 120.0
"""Nominal label width (px) used for slot insets, spacing and repulsion."""

LABEL_HEIGHT_PX: float = 32.0
"""Nominal label height (px)."""

LABEL_MAX_WIDTH_PX: float = 150.0
"""Widest label pill the renderer allows; measured widths are clamped to this."""

LABEL_PADDING_X_PX: float = 12.0
LABEL_PADDING_Y_PX: float = 6.0
LABEL_FONT_SIZE_PX: float = 12.0

# ----- Grid strategy -----
STRATEGY_EDGE: str = "edge"
STRATEGY_HEXAGONAL: str = "hexagonal"
DEFAULT_STRATEGY: str = STRATEGY_EDGE

# ----- Edge strategy -----
EDGE_SLOT_SPACING_PX: float = 80.0
"""Distance between consecutive slots along a viewport edge."""

EDGE_MARGIN_PX: float = 20.0
"""Inset from the viewport border, added to half the label box."""

# ----- Hexagonal strategy -----
HEX_TARGET_ACROSS_DIAGONAL: int = 8
"""Target hexagon count across the viewport diagonal when sizing the grid."""

HEX_MARKER_EXCLUSION_FACTOR: float = 1.2
"""Hexagons with a marker closer than factor * hex_size are not offered as slots."""

HEX_EDGE_BIAS: float = 0.3
"""Assignment score = distance_to_location - bias * distance_from_viewport_center."""

# ----- Force relaxation -----
RELAX_ITERATIONS: int = 50
RELAX_DAMPING: float = 0.5

ANCHOR_STRENGTH: float = 2.0
"""Pull toward the assigned slot; dominant term."""

SOURCE_STRENGTH: float = 0.3
"""Unit-vector pull toward the marker."""

REPULSION_STRENGTH: float = 2.0
LABEL_SPACING_EXTRA_PX: float = 40.0
"""Repulsion acts within label_width + this many px."""

CROSSING_STRENGTH: float = 1.0
"""Perpendicular nudge applied when two lead lines cross."""

ROUTE_REPULSION_PX: float = 60.0
ROUTE_STRENGTH: float = 1.5

PARALLEL_EPSILON: float = 1e-4
"""Segments whose intersection denominator is below this are treated as parallel."""

# ----- Snap -----
SNAP_SPACING_EXTRA_PX: float = 20.0
"""Snapped labels keep at least label_width + this many px between centers."""

EXHAUSTION_KEEP: str = "keep"
EXHAUSTION_DROP: str = "drop"
DEFAULT_EXHAUSTION_POLICY: str = EXHAUSTION_KEEP
"""What happens to a label that finds no slot: keep relaxed position, or drop it."""

# ----- Incremental updates -----
SIGNATURE_PRECISION: int = 4
"""Decimal places kept for coordinates and zoom in view signatures."""

# ----- Camera -----
TILE_SIZE_PX: int = 512
MAX_MERCATOR_LAT: float = 85.05112878
FIT_ZOOM_STEPS: tuple[tuple[float, float], ...] = (
    (0.01, 14),
    (0.05, 12),
    (0.1, 11),
    (0.5, 9),
    (1.0, 8),
    (5.0, 6),
    (10.0, 5),
    (20.0, 4),
    (50.0, 3),
)
"""(max span in degrees, zoom) pairs checked in order by fit_view."""

FIT_ZOOM_DEFAULT: float = 2.0

# ----- Palette -----
DEFAULT_PALETTE: tuple[str, ...] = (
    "#3B82F6",  # blue
    "#8B5CF6",  # purple
    "#10B981",  # green
    "#F59E0B",  # amber
    "#EF4444",  # red
    "#EC4899",  # pink
    "#06B6D4",  # cyan
    "#84CC16",  # lime
    "#F97316",  # orange
    "#6366F1",  # indigo
)

# ----- Rendering -----
RENDER_WIDTH_PX: int = 800
RENDER_HEIGHT_PX: int = 600
DEFAULT_FONT_FAMILY: str = "DejaVu Sans"

# ----- Debug flags -----
LAYOUT_DEBUG: bool = os.environ.get("LAYOUT_DEBUG", "").lower() in ("1", "true", "yes")
"""Log per-iteration relaxation state. Set env LAYOUT_DEBUG=1 to enable."""

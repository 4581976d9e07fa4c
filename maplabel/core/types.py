# maplabel/core/types.py
"""
Dataclasses for locations, candidate slots, labels, layout results and the
layout configuration record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, NamedTuple

from maplabel.core.config import (
    ANCHOR_STRENGTH,
    CROSSING_STRENGTH,
    DEFAULT_EXHAUSTION_POLICY,
    DEFAULT_STRATEGY,
    EDGE_MARGIN_PX,
    EDGE_SLOT_SPACING_PX,
    EXHAUSTION_DROP,
    EXHAUSTION_KEEP,
    HEX_EDGE_BIAS,
    HEX_MARKER_EXCLUSION_FACTOR,
    HEX_TARGET_ACROSS_DIAGONAL,
    LABEL_HEIGHT_PX,
    LABEL_SPACING_EXTRA_PX,
    LABEL_WIDTH_PX,
    RELAX_DAMPING,
    RELAX_ITERATIONS,
    REPULSION_STRENGTH,
    ROUTE_REPULSION_PX,
    ROUTE_STRENGTH,
    SNAP_SPACING_EXTRA_PX,
    SOURCE_STRENGTH,
    STRATEGY_EDGE,
    STRATEGY_HEXAGONAL,
)


Strategy = Literal["edge", "hexagonal"]
Edge = Literal["top", "right", "bottom", "left"]


class ScreenPoint(NamedTuple):
    """Viewport pixel position. Stale as soon as the camera moves."""
    x: float
    y: float


class RouteSegment(NamedTuple):
    """One straight piece of a projected route polyline."""
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class Location:
    """A point of interest supplied by the map view."""
    id: str
    name: str
    lat: float
    lng: float
    color_index: int | None = None
    photo_reference: str | None = None


@dataclass(frozen=True)
class CandidateSlot:
    """A discrete label-center position. edge is set for the edge strategy, col/row for hexagons."""
    id: str
    x: float
    y: float
    edge: Edge | None = None
    col: int | None = None
    row: int | None = None


@dataclass
class Label:
    """
    Placed label. candidate_slot_id is None (and snapped False) when the label
    found no legal slot and kept its relaxed position.
    """
    id: str
    name: str
    x: float
    y: float
    candidate_slot_id: str | None
    location_x: float
    location_y: float
    color: str
    photo_reference: str | None = None
    connection_x: float | None = None
    connection_y: float | None = None
    snapped: bool = True


@dataclass
class LayoutResult:
    """Output of one full recompute."""
    labels: list[Label] = field(default_factory=list)
    candidate_slots: list[CandidateSlot] = field(default_factory=list)
    used_slot_ids: frozenset[str] = frozenset()
    available_slots: list[CandidateSlot] = field(default_factory=list)
    hex_size: float = 0.0
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class LayoutConfig:
    """
    Closed configuration record for one layout engine. Validated once at
    construction; raises ValueError on out-of-domain values.
    """
    strategy: Strategy = DEFAULT_STRATEGY  # type: ignore[assignment]
    label_width_px: float = LABEL_WIDTH_PX
    label_height_px: float = LABEL_HEIGHT_PX
    slot_spacing_px: float = EDGE_SLOT_SPACING_PX
    margin_px: float = EDGE_MARGIN_PX
    iteration_count: int = RELAX_ITERATIONS
    damping: float = RELAX_DAMPING
    min_label_spacing_px: float = LABEL_SPACING_EXTRA_PX
    snap_spacing_px: float = SNAP_SPACING_EXTRA_PX
    route_repulsion_px: float = ROUTE_REPULSION_PX
    anchor_strength: float = ANCHOR_STRENGTH
    source_strength: float = SOURCE_STRENGTH
    repulsion_strength: float = REPULSION_STRENGTH
    crossing_strength: float = CROSSING_STRENGTH
    route_strength: float = ROUTE_STRENGTH
    hex_edge_bias: float = HEX_EDGE_BIAS
    hex_target_across_diagonal: int = HEX_TARGET_ACROSS_DIAGONAL
    hex_exclusion_factor: float = HEX_MARKER_EXCLUSION_FACTOR
    exhaustion_policy: Literal["keep", "drop"] = DEFAULT_EXHAUSTION_POLICY  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.strategy not in (STRATEGY_EDGE, STRATEGY_HEXAGONAL):
            raise ValueError(f"Unknown grid strategy: {self.strategy!r}")
        if self.exhaustion_policy not in (EXHAUSTION_KEEP, EXHAUSTION_DROP):
            raise ValueError(f"Unknown exhaustion policy: {self.exhaustion_policy!r}")
        for name in ("label_width_px", "label_height_px", "slot_spacing_px", "route_repulsion_px"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0, got {getattr(self, name)}")
        for name in ("margin_px", "min_label_spacing_px", "snap_spacing_px", "hex_exclusion_factor"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.iteration_count < 0:
            raise ValueError(f"iteration_count must be >= 0, got {self.iteration_count}")
        if not 0.0 < self.damping <= 1.0:
            raise ValueError(f"damping must be in (0, 1], got {self.damping}")
        if self.hex_target_across_diagonal < 1:
            raise ValueError("hex_target_across_diagonal must be >= 1")

    @property
    def repulsion_distance_px(self) -> float:
        """Labels closer than this push each other apart during relaxation."""
        return self.label_width_px + self.min_label_spacing_px

    @property
    def snap_distance_px(self) -> float:
        """Minimum center distance between two snapped labels."""
        return self.label_width_px + self.snap_spacing_px

    @classmethod
    def from_dict(cls, data: dict) -> "LayoutConfig":
        """Build from a plain mapping (scenario files, UI). Unknown keys raise ValueError."""
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown layout config keys: {', '.join(unknown)}")
        return cls(**data)

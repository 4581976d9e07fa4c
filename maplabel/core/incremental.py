# maplabel/core/incremental.py
"""
Incremental update control. For every viewport event the host computes a
view signature and asks should_recompute() what to do:

- NOOP: nothing changed (after rounding), keep the last output;
- TRANSLATE: only the center moved, shift the last labels by a pixel offset;
- RECOMPUTE: zoom, location set or viewport size changed, rerun the pipeline.

All state is explicit (LayoutState) and threaded through update_layout().
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Sequence

from maplabel.core.config import DEFAULT_PALETTE, SIGNATURE_PRECISION
from maplabel.core.layout import compute_labels
from maplabel.core.projection import ViewState
from maplabel.core.projector import Projector, project_point
from maplabel.core.types import Label, LayoutConfig, LayoutResult, Location, RouteSegment

logger = logging.getLogger(__name__)


class UpdateAction(str, Enum):
    RECOMPUTE = "recompute"
    TRANSLATE = "translate"
    NOOP = "noop"


@dataclass(frozen=True)
class ViewSignature:
    """Rounded snapshot of everything that decides whether labels must be recomputed."""
    locations_key: tuple[tuple[str, float, float], ...]
    zoom: float
    center: tuple[float, float]
    width: float
    height: float


def view_signature(
    locations: Sequence[Location],
    view: ViewState,
    width: float,
    height: float,
    precision: int = SIGNATURE_PRECISION,
) -> ViewSignature:
    """Signature with coordinates and zoom rounded to `precision` decimals, so float jitter compares equal."""
    key = tuple((loc.id, round(loc.lat, precision), round(loc.lng, precision)) for loc in locations)
    return ViewSignature(
        locations_key=key,
        zoom=round(view.zoom, precision),
        center=(round(view.lng, precision), round(view.lat, precision)),
        width=float(width),
        height=float(height),
    )


def bounds_key(locations: Sequence[Location], zoom: float, precision: int = SIGNATURE_PRECISION) -> str | None:
    """String key of the location bounds and zoom; used to skip refitting to identical bounds."""
    if not locations:
        return None
    lats = [loc.lat for loc in locations]
    lngs = [loc.lng for loc in locations]
    p = precision
    return f"{min(lats):.{p}f},{max(lats):.{p}f},{min(lngs):.{p}f},{max(lngs):.{p}f},{zoom}"


def should_recompute(prev: ViewSignature | None, nxt: ViewSignature) -> UpdateAction:
    """Decide between full recompute, pan translation and no-op."""
    if prev is None:
        return UpdateAction.RECOMPUTE
    if (
        prev.zoom != nxt.zoom
        or prev.locations_key != nxt.locations_key
        or prev.width != nxt.width
        or prev.height != nxt.height
    ):
        return UpdateAction.RECOMPUTE
    if prev.center != nxt.center:
        return UpdateAction.TRANSLATE
    return UpdateAction.NOOP


@dataclass(frozen=True)
class LayoutState:
    """
    State carried between viewport events: the last signature, the last full
    recompute, the pan offset accumulated since, and the (lng, lat) center the
    offset was last brought up to date with.
    """
    signature: ViewSignature | None = None
    result: LayoutResult = field(default_factory=LayoutResult)
    offset: tuple[float, float] = (0.0, 0.0)
    center: tuple[float, float] | None = None


def update_layout(
    state: LayoutState,
    locations: Sequence[Location],
    view: ViewState,
    project: Projector,
    width: float,
    height: float,
    palette: Sequence[str] = DEFAULT_PALETTE,
    routes: Sequence[RouteSegment] = (),
    config: LayoutConfig | None = None,
) -> tuple[LayoutState, UpdateAction]:
    """
    Apply one viewport event. project must be the projection for `view`.
    Returns the new state and the action taken.
    """
    sig = view_signature(locations, view, width, height)
    action = should_recompute(state.signature, sig)
    if action == UpdateAction.NOOP:
        return state, action

    if action == UpdateAction.TRANSLATE and state.center is not None:
        prev = project_point(project, state.center[0], state.center[1])
        cur = project_point(project, view.lng, view.lat)
        if prev is not None and cur is not None:
            # map center moving right shifts the labels left
            offset = (state.offset[0] + prev.x - cur.x, state.offset[1] + prev.y - cur.y)
            return replace(state, signature=sig, offset=offset, center=(view.lng, view.lat)), action
        logger.debug("Pan delta not projectable; recomputing instead")

    result = compute_labels(locations, project, width, height, palette, routes, config)
    new_state = LayoutState(signature=sig, result=result, offset=(0.0, 0.0), center=(view.lng, view.lat))
    return new_state, UpdateAction.RECOMPUTE


def translated_labels(state: LayoutState) -> list[Label]:
    """Labels of the last recompute shifted by the pan offset (label and marker ends of the lead line)."""
    ox, oy = state.offset
    if ox == 0.0 and oy == 0.0:
        return list(state.result.labels)
    out: list[Label] = []
    for label in state.result.labels:
        out.append(
            replace(
                label,
                x=label.x + ox,
                y=label.y + oy,
                location_x=label.location_x + ox,
                location_y=label.location_y + oy,
                connection_x=None if label.connection_x is None else label.connection_x + ox,
                connection_y=None if label.connection_y is None else label.connection_y + oy,
            )
        )
    return out


class RecomputeQueue:
    """
    Last-writer-wins holder of at most one pending recompute request. Each
    submit() supersedes the previous request; a result published for a
    superseded ticket is discarded.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ticket = 0
        self._pending: tuple[int, Any] | None = None
        self._result: Any = None

    def submit(self, request: Any) -> int:
        with self._lock:
            self._ticket += 1
            self._pending = (self._ticket, request)
            return self._ticket

    def take(self) -> tuple[int, Any] | None:
        """Pop the pending request, if any."""
        with self._lock:
            pending, self._pending = self._pending, None
            return pending

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._ticket

    def publish(self, ticket: int, result: Any) -> bool:
        """Store result if ticket is still the newest; return whether it was kept."""
        with self._lock:
            if ticket != self._ticket:
                logger.debug("Discarding result of superseded ticket %d", ticket)
                return False
            self._result = result
            return True

    @property
    def result(self) -> Any:
        with self._lock:
            return self._result

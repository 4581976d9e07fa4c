# maplabel/core/projection.py
"""
Web Mercator camera used by the CLI, the playground and tests as the
project(lng, lat) collaborator, plus the fit-to-locations view heuristic.
Map hosts with their own camera pass their own projector instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from maplabel.core.config import FIT_ZOOM_DEFAULT, FIT_ZOOM_STEPS, MAX_MERCATOR_LAT, TILE_SIZE_PX
from maplabel.core.types import Location, ScreenPoint


@dataclass(frozen=True)
class ViewState:
    """Camera center (degrees) and zoom level."""
    lng: float
    lat: float
    zoom: float


def world_pixel(lng: float, lat: float, zoom: float, tile_size: int = TILE_SIZE_PX) -> tuple[float, float]:
    """Web Mercator world pixel coordinates at the given zoom."""
    world_size = tile_size * (2 ** zoom)
    x = (lng + 180.0) / 360.0 * world_size
    siny = math.sin(math.radians(lat))
    y = (0.5 - math.log((1.0 + siny) / (1.0 - siny)) / (4.0 * math.pi)) * world_size
    return x, y


class MercatorCamera:
    """Projects (lng, lat) to viewport pixels for a given view and viewport size."""

    def __init__(self, view: ViewState, width: float, height: float, tile_size: int = TILE_SIZE_PX) -> None:
        self.view = view
        self.width = width
        self.height = height
        self.tile_size = tile_size
        lat = max(-MAX_MERCATOR_LAT, min(MAX_MERCATOR_LAT, view.lat))
        self._center = world_pixel(view.lng, lat, view.zoom, tile_size)

    def project(self, lng: float, lat: float) -> ScreenPoint | None:
        """Screen position, or None for non-finite input or latitudes outside the Mercator range."""
        if not (math.isfinite(lng) and math.isfinite(lat)):
            return None
        if abs(lat) > MAX_MERCATOR_LAT:
            return None
        wx, wy = world_pixel(lng, lat, self.view.zoom, self.tile_size)
        return ScreenPoint(wx - self._center[0] + self.width / 2.0, wy - self._center[1] + self.height / 2.0)

    __call__ = project


def fit_zoom_for_span(span_deg: float) -> float:
    """Step table: the larger the location spread, the lower the zoom."""
    for max_span, zoom in FIT_ZOOM_STEPS:
        if span_deg < max_span:
            return float(zoom)
    return FIT_ZOOM_DEFAULT


def fit_view(locations: Sequence[Location]) -> ViewState | None:
    """Center on the bounding box of the locations with a zoom fitted to its largest span."""
    if not locations:
        return None
    lats = [loc.lat for loc in locations]
    lngs = [loc.lng for loc in locations]
    min_lat, max_lat = min(lats), max(lats)
    min_lng, max_lng = min(lngs), max(lngs)
    span = max(max_lat - min_lat, max_lng - min_lng)
    return ViewState(
        lng=(min_lng + max_lng) / 2.0,
        lat=(min_lat + max_lat) / 2.0,
        zoom=fit_zoom_for_span(span),
    )

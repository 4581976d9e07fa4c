# maplabel/core/projector.py
"""
Adapter between domain locations / route polylines and the externally
supplied projection function project(lng, lat) -> ScreenPoint | None.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from shapely.geometry import LineString

from maplabel.core.types import Location, RouteSegment, ScreenPoint

logger = logging.getLogger(__name__)

Projector = Callable[[float, float], object]


@dataclass(frozen=True)
class ProjectedLocation:
    """A location with its screen position; index is its position in the caller's list."""
    index: int
    location: Location
    point: ScreenPoint


def project_point(project: Projector, lng: float, lat: float) -> ScreenPoint | None:
    """
    Call the projector and normalise its answer. None, non-finite coordinates
    and projectors failing with ValueError/ArithmeticError all mean "not on screen".
    """
    try:
        raw = project(lng, lat)
    except (ValueError, ArithmeticError) as e:
        logger.debug("Projection failed for (%s, %s): %s", lng, lat, e)
        return None
    if raw is None:
        return None
    if hasattr(raw, "x") and hasattr(raw, "y"):
        x, y = raw.x, raw.y  # type: ignore[attr-defined]
    else:
        x, y = raw  # type: ignore[misc]
    x = float(x)
    y = float(y)
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return ScreenPoint(x, y)


def project_locations(
    locations: Sequence[Location],
    project: Projector,
) -> list[ProjectedLocation]:
    """Project every location, silently dropping the ones that do not project. Input order is kept."""
    out: list[ProjectedLocation] = []
    for i, loc in enumerate(locations):
        point = project_point(project, loc.lng, loc.lat)
        if point is None:
            continue
        out.append(ProjectedLocation(index=i, location=loc, point=point))
    if len(out) < len(locations):
        logger.debug("Dropped %d unprojectable location(s)", len(locations) - len(out))
    return out


def _polyline_coords(polyline: LineString | Sequence[Sequence[float]]) -> list[tuple[float, float]]:
    if isinstance(polyline, LineString):
        return [(float(c[0]), float(c[1])) for c in polyline.coords]
    return [(float(c[0]), float(c[1])) for c in polyline]


def route_segments_from_polylines(
    polylines: Iterable[LineString | Sequence[Sequence[float]]],
    project: Projector,
) -> list[RouteSegment]:
    """
    Flatten (lng, lat) route polylines into projected RouteSegments, one per
    consecutive vertex pair. Pairs with an unprojectable vertex are skipped.
    """
    segments: list[RouteSegment] = []
    for polyline in polylines:
        coords = _polyline_coords(polyline)
        projected = [project_point(project, lng, lat) for lng, lat in coords]
        for a, b in zip(projected, projected[1:]):
            if a is None or b is None:
                continue
            segments.append(RouteSegment(a.x, a.y, b.x, b.y))
    return segments

# maplabel/core/io.py
"""
Load layout scenarios from JSON.

Scenario file:
    {
      "viewport": {"width": 400, "height": 300},
      "view": {"lng": 13.40, "lat": 52.52, "zoom": 12},      # optional, fitted when missing
      "locations": [{"id": "a", "name": "Museum", "lat": 52.52, "lng": 13.40}, ...],
      "routes": [[[13.39, 52.51], [13.41, 52.53]], "LINESTRING (13.3 52.5, 13.5 52.6)"],
      "palette": ["#3B82F6", ...],                           # optional
      "config": {"strategy": "hexagonal", ...}               # optional LayoutConfig fields
    }

Routes are (lng, lat) polylines, either as coordinate lists or as WKT
LINESTRING / MULTILINESTRING strings.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from shapely import wkt
from shapely.errors import ShapelyError
from shapely.geometry import LineString, MultiLineString

from maplabel.core.config import DEFAULT_PALETTE
from maplabel.core.projection import ViewState, fit_view
from maplabel.core.types import LayoutConfig, Location


@dataclass
class Scenario:
    """Everything one compute_labels run needs, minus the projector."""
    locations: list[Location]
    view: ViewState | None
    width: float
    height: float
    routes: list[LineString] = field(default_factory=list)
    palette: tuple[str, ...] = DEFAULT_PALETTE
    config: LayoutConfig = field(default_factory=LayoutConfig)


def _resolve_path(path: str | Path, repo_root: Path | None) -> Path:
    """Resolve path; if relative, against repo_root (or cwd if repo_root is None)."""
    p = Path(path)
    if not p.is_absolute() and repo_root is not None:
        p = repo_root / p
    return p.resolve()


def _number(obj: dict, key: str, where: str) -> float:
    if key not in obj:
        raise ValueError(f"{where}: missing '{key}'")
    try:
        value = float(obj[key])
    except (TypeError, ValueError):
        raise ValueError(f"{where}: '{key}' must be a number, got {obj[key]!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"{where}: '{key}' must be finite")
    return value


def parse_location(obj: Any, index: int) -> Location:
    """One location entry; id defaults to the entry index."""
    where = f"locations[{index}]"
    if not isinstance(obj, dict):
        raise ValueError(f"{where}: expected an object")
    color_index = obj.get("color_index")
    return Location(
        id=str(obj.get("id", index)),
        name=str(obj.get("name", "")),
        lat=_number(obj, "lat", where),
        lng=_number(obj, "lng", where),
        color_index=int(color_index) if color_index is not None else None,
        photo_reference=obj.get("photo_reference"),
    )


def parse_route(obj: Any, index: int) -> list[LineString]:
    """A coordinate list or a WKT (MULTI)LINESTRING string."""
    where = f"routes[{index}]"
    if isinstance(obj, str):
        try:
            geom = wkt.loads(obj)
        except ShapelyError as e:
            raise ValueError(f"{where}: invalid WKT: {e}") from e
        if isinstance(geom, LineString):
            return [geom]
        if isinstance(geom, MultiLineString):
            return list(geom.geoms)
        raise ValueError(f"{where}: expected LINESTRING or MULTILINESTRING, got {geom.geom_type}")
    try:
        coords = [(float(c[0]), float(c[1])) for c in obj]
    except (TypeError, ValueError, IndexError):
        raise ValueError(f"{where}: expected a list of [lng, lat] pairs") from None
    if len(coords) < 2:
        raise ValueError(f"{where}: a route needs at least two points")
    return [LineString(coords)]


def scenario_from_dict(data: dict) -> Scenario:
    """Validate a decoded scenario mapping. Raises ValueError with the offending field."""
    if not isinstance(data, dict):
        raise ValueError("Scenario must be a JSON object")
    viewport = data.get("viewport")
    if not isinstance(viewport, dict):
        raise ValueError("Scenario: missing 'viewport' object")
    width = _number(viewport, "width", "viewport")
    height = _number(viewport, "height", "viewport")

    raw_locations = data.get("locations", [])
    if not isinstance(raw_locations, list):
        raise ValueError("Scenario: 'locations' must be a list")
    locations = [parse_location(obj, i) for i, obj in enumerate(raw_locations)]

    view_obj = data.get("view")
    if view_obj is None:
        view = fit_view(locations)
    elif isinstance(view_obj, dict):
        view = ViewState(
            lng=_number(view_obj, "lng", "view"),
            lat=_number(view_obj, "lat", "view"),
            zoom=_number(view_obj, "zoom", "view"),
        )
    else:
        raise ValueError("Scenario: 'view' must be an object")

    routes: list[LineString] = []
    for i, obj in enumerate(data.get("routes") or []):
        routes.extend(parse_route(obj, i))

    palette = tuple(str(c) for c in (data.get("palette") or DEFAULT_PALETTE))
    config = LayoutConfig.from_dict(data.get("config") or {})
    return Scenario(
        locations=locations,
        view=view,
        width=width,
        height=height,
        routes=routes,
        palette=palette,
        config=config,
    )


def load_scenario(path: str | Path, repo_root: Path | None = None) -> Scenario:
    """
    Read and validate a scenario JSON file.
    Raises FileNotFoundError if path is missing, ValueError if the content is invalid.
    """
    resolved = _resolve_path(path, repo_root)
    if not resolved.exists():
        raise FileNotFoundError(f"Scenario file not found: {resolved}")
    try:
        data = json.loads(resolved.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Scenario file is not valid JSON: {resolved}: {e}") from e
    return scenario_from_dict(data)

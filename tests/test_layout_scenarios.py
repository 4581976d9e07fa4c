# tests/test_layout_scenarios.py
"""
End-to-end compute_labels behaviour on a 400x300 viewport. The projector
maps (lng, lat) straight to pixels so expected positions can be read off
the edge grid: top (80|160|240, 36), right (320, 36|116|196),
bottom (320|240|160, 264), left (80, 264|184|104).
"""

from __future__ import annotations

import math

import pytest

from maplabel.core.config import DEFAULT_PALETTE
from maplabel.core.error_codes import (
    NO_LOCATIONS,
    NO_PROJECTED_LOCATIONS,
    SLOTS_EXHAUSTED,
    SNAP_FALLBACK,
    VIEWPORT_INVALID,
)
from maplabel.core.geometry import distance_point_to_segment
from maplabel.core.layout import compute_labels, label_color
from maplabel.core.types import LayoutConfig, Location, RouteSegment

W, H = 400, 300


def pixel_projector(lng: float, lat: float):
    """Identity projection; latitudes above 1000 are off the map."""
    if lat > 1000:
        return None
    return (lng, lat)


def _loc(i: int, x: float, y: float, **kw) -> Location:
    return Location(id=f"loc{i}", name=f"Place {i}", lat=y, lng=x, **kw)


def _scattered(n: int) -> list[Location]:
    return [_loc(i, 40 + (i * 53) % 320, 30 + (i * 37) % 240) for i in range(n)]


def test_single_location_snaps_to_nearest_edge_slot() -> None:
    result = compute_labels([_loc(0, 100, 50)], pixel_projector, W, H)
    assert len(result.labels) == 1
    label = result.labels[0]
    assert label.candidate_slot_id == "edge-top-0"
    assert (label.x, label.y) == (80, 36)
    assert (label.location_x, label.location_y) == (100, 50)
    assert label.color == DEFAULT_PALETTE[0]
    assert label.snapped is True
    assert result.used_slot_ids == frozenset({"edge-top-0"})
    assert result.warnings == []


def test_near_duplicate_locations_are_spread_apart() -> None:
    config = LayoutConfig()
    locations = [_loc(0, 100, 100), _loc(1, 102, 101), _loc(2, 300, 250)]
    result = compute_labels(locations, pixel_projector, W, H, config=config)
    by_id = {lb.id: lb for lb in result.labels}
    a, b, c = by_id["loc0"], by_id["loc1"], by_id["loc2"]
    assert math.hypot(a.x - b.x, a.y - b.y) >= config.snap_distance_px
    # the isolated location keeps its nearest slot
    assert c.candidate_slot_id == "edge-bottom-0"
    assert math.hypot(c.x - 320, c.y - 264) < config.slot_spacing_px
    assert all(lb.snapped for lb in result.labels)


def test_label_moves_off_route() -> None:
    route = RouteSegment(0, 36, 400, 36)
    result = compute_labels([_loc(0, 100, 50)], pixel_projector, W, H, routes=[route])
    label = result.labels[0]
    nearest_slot_distance = distance_point_to_segment(80, 36, *route)
    assert distance_point_to_segment(label.x, label.y, *route) > nearest_slot_distance
    assert label.candidate_slot_id == "edge-left-2"


def test_no_locations_gives_empty_result_without_grid() -> None:
    result = compute_labels([], pixel_projector, W, H)
    assert result.labels == []
    assert result.candidate_slots == []
    assert result.used_slot_ids == frozenset()
    assert result.warnings == [NO_LOCATIONS]


def test_deterministic() -> None:
    locations = _scattered(8)
    routes = [RouteSegment(0, 150, 400, 150)]
    a = compute_labels(locations, pixel_projector, W, H, routes=routes)
    b = compute_labels(locations, pixel_projector, W, H, routes=routes)
    assert a.labels == b.labels
    assert a.used_slot_ids == b.used_slot_ids


def test_slot_uniqueness_and_subset() -> None:
    locations = _scattered(10)
    result = compute_labels(locations, pixel_projector, W, H)
    slot_ids = [lb.candidate_slot_id for lb in result.labels if lb.candidate_slot_id is not None]
    assert len(slot_ids) == len(set(slot_ids))
    assert set(slot_ids) == set(result.used_slot_ids)
    assert set(slot_ids) <= {s.id for s in result.candidate_slots}
    label_ids = [lb.id for lb in result.labels]
    assert len(label_ids) == len(set(label_ids))
    assert set(label_ids) <= {loc.id for loc in locations}


def test_keep_policy_labels_every_projected_location() -> None:
    locations = _scattered(20)
    result = compute_labels(locations, pixel_projector, W, H, config=LayoutConfig(exhaustion_policy="keep"))
    assert len(result.labels) == 20
    fallbacks = [lb for lb in result.labels if not lb.snapped]
    assert fallbacks
    assert all(lb.candidate_slot_id is None for lb in fallbacks)
    assert SLOTS_EXHAUSTED in result.warnings
    assert SNAP_FALLBACK in result.warnings


def test_drop_policy_only_returns_snapped_labels() -> None:
    locations = _scattered(20)
    result = compute_labels(locations, pixel_projector, W, H, config=LayoutConfig(exhaustion_policy="drop"))
    assert 0 < len(result.labels) <= 12
    assert all(lb.snapped for lb in result.labels)
    assert len(result.used_slot_ids) == len(result.labels)


def test_snapped_labels_keep_snap_spacing() -> None:
    config = LayoutConfig()
    result = compute_labels(_scattered(10), pixel_projector, W, H, config=config)
    snapped = [lb for lb in result.labels if lb.snapped]
    for i in range(len(snapped)):
        for j in range(i + 1, len(snapped)):
            d = math.hypot(snapped[i].x - snapped[j].x, snapped[i].y - snapped[j].y)
            assert d >= config.snap_distance_px - 1e-9


def test_unprojectable_locations_are_skipped() -> None:
    locations = [_loc(0, 100, 50), _loc(1, 100, 5000), _loc(2, 300, 250)]
    result = compute_labels(locations, pixel_projector, W, H)
    assert [lb.id for lb in result.labels] == ["loc0", "loc2"]
    # colour index follows the caller's list, not the projected subset
    assert result.labels[1].color == DEFAULT_PALETTE[2]


def test_nothing_projects() -> None:
    result = compute_labels([_loc(0, 100, 5000)], pixel_projector, W, H)
    assert result.labels == []
    assert len(result.candidate_slots) == 12
    assert result.warnings == [NO_PROJECTED_LOCATIONS]


@pytest.mark.parametrize("size", [(0, 300), (400, 0), (-10, 300), (float("nan"), 300)])
def test_viewport_without_area(size: tuple[float, float]) -> None:
    result = compute_labels([_loc(0, 100, 50)], pixel_projector, *size)
    assert result.labels == []
    assert result.candidate_slots == []
    assert result.warnings == [VIEWPORT_INVALID]


def test_palette_and_color_index() -> None:
    palette = ("#111111", "#222222")
    locations = [_loc(0, 100, 50, color_index=3), _loc(1, 300, 250)]
    result = compute_labels(locations, pixel_projector, W, H, palette=palette)
    assert [lb.color for lb in result.labels] == ["#222222", "#222222"]
    assert label_color((), None, 1) == DEFAULT_PALETTE[1]


def test_photo_reference_is_carried() -> None:
    result = compute_labels([_loc(0, 100, 50, photo_reference="photos/abc")], pixel_projector, W, H)
    assert result.labels[0].photo_reference == "photos/abc"


def test_hexagonal_strategy() -> None:
    config = LayoutConfig(strategy="hexagonal")
    locations = [_loc(0, 200, 150), _loc(1, 600, 450), _loc(2, 400, 300)]
    result = compute_labels(locations, pixel_projector, 800, 600, config=config)
    size = result.hex_size
    assert size > 0
    available = {s.id for s in result.available_slots}
    assert available < {s.id for s in result.candidate_slots}
    for s in result.available_slots:
        for loc in locations:
            assert math.hypot(s.x - loc.lng, s.y - loc.lat) >= size * config.hex_exclusion_factor
    apothem = size * math.sqrt(3) / 2
    for label in result.labels:
        assert label.candidate_slot_id in available
        d = math.hypot(label.connection_x - label.x, label.connection_y - label.y)
        assert apothem - 1e-6 <= d <= size + 1e-6


def test_hexagonal_strategy_deterministic() -> None:
    config = LayoutConfig(strategy="hexagonal")
    locations = _scattered(6)
    a = compute_labels(locations, pixel_projector, W, H, config=config)
    b = compute_labels(locations, pixel_projector, W, H, config=config)
    assert a.labels == b.labels

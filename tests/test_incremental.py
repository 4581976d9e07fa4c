# tests/test_incremental.py
"""
Incremental updates: signature rounding, recompute/translate/no-op
decisions, pan offsets through a Mercator camera (pan and pan back returns
the same labels), last-writer-wins recompute queue.
"""

from __future__ import annotations

from dataclasses import replace

import pytest

from maplabel.core.incremental import (
    LayoutState,
    RecomputeQueue,
    UpdateAction,
    bounds_key,
    should_recompute,
    translated_labels,
    update_layout,
    view_signature,
)
from maplabel.core.projection import MercatorCamera, ViewState
from maplabel.core.types import Location

W, H = 800, 600
HOME = ViewState(lng=13.405, lat=52.52, zoom=13)
LOCATIONS = [
    Location("a", "Museum", 52.5169, 13.4019),
    Location("b", "Tower", 52.5208, 13.4094),
    Location("c", "Gate", 52.5163, 13.3777),
]


def _update(state: LayoutState, view: ViewState, locations=LOCATIONS, width=W, height=H):
    camera = MercatorCamera(view, width, height)
    return update_layout(state, locations, view, camera, width, height)


def test_signature_rounds_float_jitter() -> None:
    a = view_signature(LOCATIONS, ViewState(13.405, 52.52, 13.000001), W, H)
    b = view_signature(LOCATIONS, ViewState(13.4050000001, 52.52, 13.0000012), W, H)
    assert a == b
    assert should_recompute(a, b) == UpdateAction.NOOP


def test_should_recompute_decisions() -> None:
    base = view_signature(LOCATIONS, HOME, W, H)
    assert should_recompute(None, base) == UpdateAction.RECOMPUTE
    zoomed = view_signature(LOCATIONS, replace(HOME, zoom=14), W, H)
    assert should_recompute(base, zoomed) == UpdateAction.RECOMPUTE
    panned = view_signature(LOCATIONS, replace(HOME, lng=13.41), W, H)
    assert should_recompute(base, panned) == UpdateAction.TRANSLATE
    resized = view_signature(LOCATIONS, HOME, W, H + 1)
    assert should_recompute(base, resized) == UpdateAction.RECOMPUTE
    fewer = view_signature(LOCATIONS[:2], HOME, W, H)
    assert should_recompute(base, fewer) == UpdateAction.RECOMPUTE
    moved = view_signature([replace(LOCATIONS[0], lat=52.6)] + LOCATIONS[1:], HOME, W, H)
    assert should_recompute(base, moved) == UpdateAction.RECOMPUTE


def test_first_update_recomputes() -> None:
    state, action = _update(LayoutState(), HOME)
    assert action == UpdateAction.RECOMPUTE
    assert len(state.result.labels) == 3
    assert state.offset == (0.0, 0.0)
    assert state.center == (HOME.lng, HOME.lat)


def test_same_view_is_noop() -> None:
    state, _ = _update(LayoutState(), HOME)
    again, action = _update(state, HOME)
    assert action == UpdateAction.NOOP
    assert again is state


def test_pan_translates_by_projected_center_delta() -> None:
    state, _ = _update(LayoutState(), HOME)
    panned_view = replace(HOME, lng=HOME.lng + 0.01)
    panned, action = _update(state, panned_view)
    assert action == UpdateAction.TRANSLATE
    assert panned.result is state.result
    old_center = MercatorCamera(panned_view, W, H).project(HOME.lng, HOME.lat)
    assert panned.offset == pytest.approx((old_center.x - W / 2, old_center.y - H / 2))
    # map moved east, so labels slide west
    assert panned.offset[0] < 0
    shifted = translated_labels(panned)
    for before, after in zip(state.result.labels, shifted):
        assert after.x == pytest.approx(before.x + panned.offset[0])
        assert after.location_y == pytest.approx(before.location_y + panned.offset[1])
        assert after.candidate_slot_id == before.candidate_slot_id


def test_translated_labels_follow_markers() -> None:
    state, _ = _update(LayoutState(), HOME)
    panned_view = replace(HOME, lng=HOME.lng - 0.004, lat=HOME.lat + 0.002)
    panned, _ = _update(state, panned_view)
    camera = MercatorCamera(panned_view, W, H)
    for label, loc in zip(translated_labels(panned), LOCATIONS):
        p = camera.project(loc.lng, loc.lat)
        assert (label.location_x, label.location_y) == pytest.approx((p.x, p.y), abs=1e-6)


def test_pan_and_pan_back_restores_layout() -> None:
    state, _ = _update(LayoutState(), HOME)
    away, _ = _update(state, replace(HOME, lng=HOME.lng + 0.02, lat=HOME.lat - 0.01))
    back, action = _update(away, HOME)
    assert action == UpdateAction.TRANSLATE
    assert back.offset == pytest.approx((0.0, 0.0), abs=1e-6)
    for original, restored in zip(state.result.labels, translated_labels(back)):
        assert (restored.x, restored.y) == pytest.approx((original.x, original.y), abs=1e-6)


def test_zoom_recomputes_and_resets_offset() -> None:
    state, _ = _update(LayoutState(), HOME)
    panned, _ = _update(state, replace(HOME, lng=HOME.lng + 0.01))
    zoomed, action = _update(panned, replace(HOME, lng=HOME.lng + 0.01, zoom=14))
    assert action == UpdateAction.RECOMPUTE
    assert zoomed.offset == (0.0, 0.0)
    assert zoomed.result is not state.result


def test_bounds_key() -> None:
    locations = [Location("a", "A", 1.0, 3.0), Location("b", "B", 2.5, 4.0)]
    assert bounds_key(locations, 12) == "1.0000,2.5000,3.0000,4.0000,12"
    assert bounds_key([], 12) is None


def test_recompute_queue_last_writer_wins() -> None:
    queue = RecomputeQueue()
    first = queue.submit("view-1")
    second = queue.submit("view-2")
    assert queue.take() == (second, "view-2")
    assert queue.take() is None
    assert queue.publish(first, "stale") is False
    assert queue.result is None
    assert queue.is_current(second)
    assert queue.publish(second, "fresh") is True
    assert queue.result == "fresh"

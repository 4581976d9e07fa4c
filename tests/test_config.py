# tests/test_config.py
"""
LayoutConfig validation and derived distances; error-code messages.
"""

from __future__ import annotations

import pytest

from maplabel.core.error_codes import SNAP_FALLBACK, USER_MESSAGES, user_message
from maplabel.core.types import LayoutConfig


def test_defaults() -> None:
    config = LayoutConfig()
    assert config.strategy == "edge"
    assert config.exhaustion_policy == "keep"
    assert config.repulsion_distance_px == pytest.approx(160.0)
    assert config.snap_distance_px == pytest.approx(140.0)


@pytest.mark.parametrize(
    "overrides",
    [
        {"strategy": "spiral"},
        {"exhaustion_policy": "ignore"},
        {"label_width_px": 0},
        {"slot_spacing_px": -5},
        {"margin_px": -1},
        {"iteration_count": -1},
        {"damping": 0.0},
        {"damping": 1.5},
        {"hex_target_across_diagonal": 0},
    ],
)
def test_invalid_values_raise(overrides: dict) -> None:
    with pytest.raises(ValueError):
        LayoutConfig(**overrides)


def test_from_dict() -> None:
    config = LayoutConfig.from_dict({"strategy": "hexagonal", "iteration_count": 10})
    assert config.strategy == "hexagonal"
    assert config.iteration_count == 10
    with pytest.raises(ValueError, match="Unknown layout config keys"):
        LayoutConfig.from_dict({"strategy": "edge", "speed": 3})


def test_user_message() -> None:
    assert user_message(SNAP_FALLBACK) == USER_MESSAGES[SNAP_FALLBACK]
    assert user_message("unknown_key") == "Something went wrong."
    assert user_message(None, fallback="x") == "x"

# maplabel/core/text_metrics.py
"""
Measure label text in px using Pillow and derive the label pill size.
Layout uses a fixed nominal box by default; label_box_for_names lets a
host size the box from the names it actually shows.
"""

from __future__ import annotations

import warnings
from typing import Iterable

from maplabel.core.config import (
    DEFAULT_FONT_FAMILY,
    LABEL_FONT_SIZE_PX,
    LABEL_HEIGHT_PX,
    LABEL_MAX_WIDTH_PX,
    LABEL_PADDING_X_PX,
    LABEL_PADDING_Y_PX,
)

_font_warning_emitted: set[str] = set()


def _load_font(font_family: str, font_size_px: float):
    """Load PIL ImageFont; fallback with warning if font not found."""
    from PIL import ImageFont

    size = max(1, int(round(font_size_px)))
    candidates = [
        font_family + ".ttf",
        font_family.replace(" ", "") + ".ttf",
        "DejaVuSans.ttf",
        "arial.ttf",
        "Arial.ttf",
    ]
    for name in candidates:
        try:
            return ImageFont.truetype(name, size=size)
        except OSError:
            continue
    if font_family not in _font_warning_emitted:
        _font_warning_emitted.add(font_family)
        warnings.warn(f"Font not found: {font_family!r}; using default.", UserWarning)
    return ImageFont.load_default()


def measure_label_px(
    text: str,
    font_size_px: float = LABEL_FONT_SIZE_PX,
    font_family: str = DEFAULT_FONT_FAMILY,
) -> tuple[float, float]:
    """Return (width_px, height_px) of the rendered text, without padding."""
    from PIL import Image, ImageDraw

    if not text:
        return 0.0, 0.0
    font = _load_font(font_family, font_size_px)
    draw = ImageDraw.Draw(Image.new("RGB", (1, 1)))
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    # bitmap default font ignores the requested size
    scale = font_size_px / max(1.0, float(getattr(font, "size", font_size_px)))
    return float(right - left) * scale, float(bottom - top) * scale


def label_box_for_names(
    names: Iterable[str],
    font_size_px: float = LABEL_FONT_SIZE_PX,
    font_family: str = DEFAULT_FONT_FAMILY,
    min_width_px: float = 0.0,
    max_width_px: float = LABEL_MAX_WIDTH_PX,
) -> tuple[float, float]:
    """
    Pill size fitting the widest name plus padding, width clamped to
    [min_width_px, max_width_px]. Height never drops below LABEL_HEIGHT_PX.
    """
    width = 0.0
    height = 0.0
    for name in names:
        w, h = measure_label_px(name, font_size_px, font_family)
        width = max(width, w)
        height = max(height, h)
    width = min(max_width_px, max(min_width_px, width + 2 * LABEL_PADDING_X_PX))
    height = max(LABEL_HEIGHT_PX, height + 2 * LABEL_PADDING_Y_PX)
    return width, height

# maplabel/core/render_svg.py
"""
Export a layout as a self-contained SVG overlay in viewport pixels:
hexagon outlines (hex strategy), routes, lead lines, markers and label pills.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Sequence

from maplabel.core.config import DEFAULT_FONT_FAMILY, LABEL_FONT_SIZE_PX
from maplabel.core.geometry import hexagon_vertices
from maplabel.core.types import LayoutConfig, LayoutResult, RouteSegment

SVG_NS = "http://www.w3.org/2000/svg"


def hexagon_path_d(cx: float, cy: float, size: float) -> str:
    """Closed hexagon outline as SVG path d (M L ... Z); empty for size <= 0."""
    if size <= 0:
        return ""
    vertices = hexagon_vertices(cx, cy, size)
    parts = [f"M {vertices[0][0]:.2f} {vertices[0][1]:.2f}"]
    for x, y in vertices[1:]:
        parts.append(f"L {x:.2f} {y:.2f}")
    parts.append("Z")
    return " ".join(parts)


def layout_to_svg(
    result: LayoutResult,
    width_px: float,
    height_px: float,
    routes: Sequence[RouteSegment] = (),
    config: LayoutConfig | None = None,
) -> ET.Element:
    """Build the SVG element tree for one layout."""
    config = config or LayoutConfig()
    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": f"{width_px:.0f}",
            "height": f"{height_px:.0f}",
            "viewBox": f"0 0 {width_px:.2f} {height_px:.2f}",
        },
    )

    if result.hex_size > 0:
        g_grid = ET.SubElement(root, "g", {"id": "grid", "fill": "none", "stroke": "#94A3B8", "stroke-width": "0.6"})
        for s in result.candidate_slots:
            attrs = {"d": hexagon_path_d(s.x, s.y, result.hex_size), "data-slot": s.id}
            if s.id in result.used_slot_ids:
                attrs["fill"] = "#DBEAFE"
            ET.SubElement(g_grid, "path", attrs)

    if routes:
        g_routes = ET.SubElement(
            root, "g", {"id": "routes", "stroke": "#64748B", "stroke-width": "3", "stroke-opacity": "0.6"}
        )
        for x1, y1, x2, y2 in routes:
            ET.SubElement(
                g_routes, "line",
                {"x1": f"{x1:.2f}", "y1": f"{y1:.2f}", "x2": f"{x2:.2f}", "y2": f"{y2:.2f}"},
            )

    w = config.label_width_px
    h = config.label_height_px
    g_labels = ET.SubElement(root, "g", {"id": "labels"})
    for label in result.labels:
        g = ET.SubElement(g_labels, "g", {"data-id": label.id})
        cx = label.x if label.connection_x is None else label.connection_x
        cy = label.y if label.connection_y is None else label.connection_y
        ET.SubElement(
            g, "line",
            {
                "x1": f"{label.location_x:.2f}", "y1": f"{label.location_y:.2f}",
                "x2": f"{cx:.2f}", "y2": f"{cy:.2f}",
                "stroke": label.color, "stroke-width": "1.5",
            },
        )
        ET.SubElement(
            g, "circle",
            {
                "cx": f"{label.location_x:.2f}", "cy": f"{label.location_y:.2f}", "r": "5",
                "fill": label.color, "stroke": "white", "stroke-width": "1.5",
            },
        )
        rect = {
            "x": f"{label.x - w / 2.0:.2f}", "y": f"{label.y - h / 2.0:.2f}",
            "width": f"{w:.2f}", "height": f"{h:.2f}",
            "rx": f"{h / 2.0:.2f}", "fill": label.color,
        }
        if not label.snapped:
            rect.update({"stroke": "black", "stroke-dasharray": "4 2"})
        ET.SubElement(g, "rect", rect)
        text = ET.SubElement(
            g, "text",
            {
                "x": f"{label.x:.2f}", "y": f"{label.y:.2f}",
                "font-family": DEFAULT_FONT_FAMILY,
                "font-size": f"{LABEL_FONT_SIZE_PX:.0f}",
                "fill": "white",
                "text-anchor": "middle",
                "dominant-baseline": "central",
            },
        )
        text.text = label.name
    return root


def export_layout_svg(
    result: LayoutResult,
    width_px: float,
    height_px: float,
    out_path: str | Path,
    routes: Sequence[RouteSegment] = (),
    config: LayoutConfig | None = None,
) -> Path:
    """Write the SVG overlay to out_path and return the path."""
    root = layout_to_svg(result, width_px, height_px, routes, config)
    out = Path(out_path)
    out_str = ET.tostring(root, encoding="unicode", method="xml")
    out.write_text('<?xml version="1.0" encoding="UTF-8"?>\n' + out_str, encoding="utf-8")
    return out

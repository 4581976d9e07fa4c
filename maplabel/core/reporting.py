# maplabel/core/reporting.py
"""
Create reports/<run_name>/ and write labels.json (layout result plus
metrics) and run_metadata.json (timestamp and config snapshot).
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from maplabel.core.config import REPORTS_DIR
from maplabel.core.error_codes import user_message
from maplabel.core.projection import ViewState
from maplabel.core.scoring import layout_metrics
from maplabel.core.types import LayoutConfig, LayoutResult, RouteSegment

SCHEMA_VERSION = "1.0"


def layout_to_dict(
    result: LayoutResult,
    routes: Sequence[RouteSegment] = (),
    config: LayoutConfig | None = None,
) -> dict:
    """Structure of labels.json."""
    return {
        "schema_version": SCHEMA_VERSION,
        "labels": [
            {
                "id": lb.id,
                "name": lb.name,
                "x": lb.x,
                "y": lb.y,
                "candidate_slot_id": lb.candidate_slot_id,
                "location": {"x": lb.location_x, "y": lb.location_y},
                "connection": (
                    {"x": lb.connection_x, "y": lb.connection_y}
                    if lb.connection_x is not None and lb.connection_y is not None
                    else None
                ),
                "color": lb.color,
                "photo_reference": lb.photo_reference,
                "snapped": lb.snapped,
            }
            for lb in result.labels
        ],
        "candidate_slots": [
            {k: v for k, v in asdict(s).items() if v is not None} for s in result.candidate_slots
        ],
        "used_slot_ids": sorted(result.used_slot_ids),
        "available_slot_count": len(result.available_slots),
        "hex_size": result.hex_size,
        "metrics": layout_metrics(result, routes, config),
        "warnings": [{"code": w, "message": user_message(w)} for w in result.warnings],
    }


def run_metadata_dict(
    run_name: str,
    scenario_path: str,
    width: float,
    height: float,
    view: ViewState | None,
    config: LayoutConfig,
) -> dict:
    """Timestamp and config snapshot for run_metadata.json."""
    return {
        "run_name": run_name,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "scenario_path": scenario_path,
        "viewport": {"width": width, "height": height},
        "view": asdict(view) if view is not None else None,
        "config": asdict(config),
    }


def ensure_report_dir(
    repo_root: Path,
    run_name: str,
    output_dir: str | None = None,
) -> Path:
    """Create output_dir/<run_name>/ under repo_root; return path. Default output_dir from config."""
    base = output_dir if output_dir is not None else REPORTS_DIR
    out = (repo_root / base).resolve() / run_name
    out.mkdir(parents=True, exist_ok=True)
    return out


def write_labels_json(
    report_dir: Path,
    result: LayoutResult,
    routes: Sequence[RouteSegment] = (),
    config: LayoutConfig | None = None,
) -> Path:
    """Write labels.json to report_dir. Returns path to file."""
    path = report_dir / "labels.json"
    data = layout_to_dict(result, routes, config)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def write_run_metadata_json(
    report_dir: Path,
    run_name: str,
    scenario_path: str,
    width: float,
    height: float,
    view: ViewState | None,
    config: LayoutConfig,
) -> Path:
    """Write run_metadata.json to report_dir."""
    path = report_dir / "run_metadata.json"
    data = run_metadata_dict(run_name, scenario_path, width, height, view, config)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path

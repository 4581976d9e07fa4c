# maplabel/core/runner.py
"""
CLI entrypoint: load a scenario JSON, compute the label layout through a
Web Mercator camera, write labels.json, run_metadata.json, debug.png and
overlay.svg under reports/<run_name>/.

    python -m maplabel.core.runner --scenario examples/scenario.json --run-name demo
"""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path

from maplabel.core.config import FIT_ZOOM_DEFAULT, REPORTS_DIR
from maplabel.core.error_codes import user_message
from maplabel.core.io import Scenario, load_scenario
from maplabel.core.layout import compute_labels
from maplabel.core.projection import MercatorCamera, ViewState
from maplabel.core.projector import route_segments_from_polylines
from maplabel.core.render import render_debug
from maplabel.core.render_svg import export_layout_svg
from maplabel.core.reporting import ensure_report_dir, write_labels_json, write_run_metadata_json
from maplabel.core.types import LayoutResult, RouteSegment

logger = logging.getLogger(__name__)


@dataclass
class ScenarioRun:
    """Result of laying out one scenario, with the screen-space routes used."""
    scenario: Scenario
    camera: MercatorCamera
    routes: list[RouteSegment]
    result: LayoutResult


def run_scenario(scenario: Scenario) -> ScenarioRun:
    """Project routes and compute labels for the scenario's view."""
    view = scenario.view or ViewState(0.0, 0.0, FIT_ZOOM_DEFAULT)
    camera = MercatorCamera(view, scenario.width, scenario.height)
    routes = route_segments_from_polylines(scenario.routes, camera)
    result = compute_labels(
        scenario.locations,
        camera,
        scenario.width,
        scenario.height,
        palette=scenario.palette,
        routes=routes,
        config=scenario.config,
    )
    return ScenarioRun(scenario=scenario, camera=camera, routes=routes, result=result)


def write_run_outputs(run: ScenarioRun, report_dir: Path, run_name: str, scenario_path: str) -> list[Path]:
    """Write every report artefact for run into report_dir; returns the written paths."""
    sc = run.scenario
    labels_path = write_labels_json(report_dir, run.result, run.routes, sc.config)
    meta_path = write_run_metadata_json(report_dir, run_name, scenario_path, sc.width, sc.height, sc.view, sc.config)
    png_path = report_dir / "debug.png"
    render_debug(run.result, sc.width, sc.height, png_path, run.routes, sc.config)
    svg_path = export_layout_svg(run.result, sc.width, sc.height, report_dir / "overlay.svg", run.routes, sc.config)
    return [labels_path, meta_path, png_path, svg_path]


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Map label placement for a scenario file.")
    p.add_argument("--scenario", type=str, required=True, help="Scenario JSON path (repo-relative)")
    p.add_argument("--run-name", type=str, default="run", dest="run_name", help="Reports subdir name")
    p.add_argument("--output-dir", type=str, default=REPORTS_DIR, dest="output_dir", help="Output directory (repo-relative)")
    p.add_argument("--repo-root", type=str, default=None, dest="repo_root", help="Repo root (default: cwd)")
    p.add_argument("--strategy", type=str, choices=("edge", "hexagonal"), default=None,
                   help="Override the scenario's grid strategy")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO))
    args = _parse_args(argv)
    repo_root = Path(args.repo_root).resolve() if args.repo_root else Path.cwd().resolve()

    scenario = load_scenario(args.scenario, repo_root=repo_root)
    if args.strategy:
        scenario.config = replace(scenario.config, strategy=args.strategy)

    run = run_scenario(scenario)
    for code in run.result.warnings:
        logger.warning("%s: %s", code, user_message(code))

    report_dir = ensure_report_dir(repo_root, args.run_name, output_dir=args.output_dir)
    for p in write_run_outputs(run, report_dir, args.run_name, args.scenario):
        print(p)
    print("Labels placed:", len(run.result.labels))


if __name__ == "__main__":
    main()

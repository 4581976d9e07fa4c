# maplabel/ui/app.py
"""
Streamlit playground: load a scenario, tweak grid strategy and force
strengths, preview the debug rendering and metrics, and pan the camera to
see translate vs. recompute decisions.

    streamlit run maplabel/ui/app.py
"""

from __future__ import annotations

import io
import json
import logging
import os
import xml.etree.ElementTree as ET
from dataclasses import asdict, replace
from pathlib import Path

# Configure logging from env (e.g. LOG_LEVEL=DEBUG for development)
_log_level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, _log_level_name, logging.INFO))

import streamlit as st

from maplabel.core.config import STRATEGY_EDGE, STRATEGY_HEXAGONAL
from maplabel.core.error_codes import NO_LOCATIONS, RUN_FAILED, user_message
from maplabel.core.incremental import LayoutState, translated_labels, update_layout
from maplabel.core.io import Scenario, scenario_from_dict
from maplabel.core.projection import MercatorCamera
from maplabel.core.projector import route_segments_from_polylines
from maplabel.core.render import render_debug
from maplabel.core.render_svg import layout_to_svg
from maplabel.core.reporting import layout_to_dict
from maplabel.core.scoring import layout_metrics
from maplabel.core.types import LayoutConfig, LayoutResult

logger = logging.getLogger(__name__)

DEFAULT_SCENARIO_PATH = Path(__file__).resolve().parent.parent.parent / "examples" / "scenario.json"


def _load_scenario_source(uploaded_file) -> tuple[Scenario | None, str | None]:
    """Scenario from upload, else the bundled example. Returns (scenario, error_key or message)."""
    try:
        if uploaded_file is not None:
            data = json.loads(uploaded_file.getvalue().decode("utf-8"))
        elif DEFAULT_SCENARIO_PATH.exists():
            data = json.loads(DEFAULT_SCENARIO_PATH.read_text(encoding="utf-8"))
        else:
            return None, "No scenario loaded. Upload a scenario JSON file."
        return scenario_from_dict(data), None
    except (ValueError, UnicodeDecodeError) as e:
        logger.warning("Scenario load failed: %s", e)
        return None, f"{user_message(RUN_FAILED)} ({e})"


def _render_png(result: LayoutResult, width: float, height: float, routes, config: LayoutConfig) -> bytes:
    buf = io.BytesIO()
    render_debug(result, width, height, buf, routes, config)
    return buf.getvalue()


st.set_page_config(page_title="maplabel", layout="wide")

with st.sidebar:
    st.header("maplabel")
    uploaded = st.file_uploader("Scenario JSON", type=["json"])
    scenario, load_error = _load_scenario_source(uploaded)
    if load_error:
        st.error(load_error)
        st.stop()

    st.subheader("Grid")
    base = scenario.config
    strategy = st.radio(
        "Strategy",
        [STRATEGY_EDGE, STRATEGY_HEXAGONAL],
        index=0 if base.strategy == STRATEGY_EDGE else 1,
        format_func=lambda s: {"edge": "Viewport edges", "hexagonal": "Hexagonal grid"}[s],
    )
    exhaustion = st.selectbox("When no slot is free", ["keep", "drop"], index=0 if base.exhaustion_policy == "keep" else 1)

    st.subheader("Forces")
    iterations = st.slider("Iterations", 0, 200, int(base.iteration_count))
    anchor = st.slider("Anchor strength", 0.0, 5.0, float(base.anchor_strength), 0.1)
    repulsion = st.slider("Label repulsion", 0.0, 5.0, float(base.repulsion_strength), 0.1)
    route_strength = st.slider("Route repulsion", 0.0, 5.0, float(base.route_strength), 0.1)
    route_px = st.slider("Route clearance (px)", 10.0, 200.0, float(base.route_repulsion_px), 5.0)

    st.subheader("Camera")
    pan_x = st.slider("Pan east/west (px)", -200, 200, 0, 10)
    pan_y = st.slider("Pan north/south (px)", -200, 200, 0, 10)

try:
    config = replace(
        base,
        strategy=strategy,
        exhaustion_policy=exhaustion,
        iteration_count=iterations,
        anchor_strength=anchor,
        repulsion_strength=repulsion,
        route_strength=route_strength,
        route_repulsion_px=route_px,
    )
except ValueError as e:
    st.error(str(e))
    st.stop()

if scenario.view is None:
    st.info(user_message(NO_LOCATIONS))
    st.stop()

# panning moves the view center by a pixel offset at the current zoom
home = MercatorCamera(scenario.view, scenario.width, scenario.height)
view = scenario.view
if pan_x or pan_y:
    scale = 360.0 / (home.tile_size * 2 ** view.zoom)
    view = replace(view, lng=view.lng + pan_x * scale, lat=view.lat - pan_y * scale)
camera = MercatorCamera(view, scenario.width, scenario.height)

# layout state survives reruns; config changes force a recompute
state_key = json.dumps(asdict(config), sort_keys=True)
if st.session_state.get("layout_config_key") != state_key:
    st.session_state["layout_state"] = LayoutState()
    st.session_state["layout_config_key"] = state_key

routes = route_segments_from_polylines(scenario.routes, camera)
state, action = update_layout(
    st.session_state["layout_state"],
    scenario.locations,
    view,
    camera,
    scenario.width,
    scenario.height,
    scenario.palette,
    routes,
    config,
)
st.session_state["layout_state"] = state
shown = replace(state.result, labels=translated_labels(state))

col_img, col_info = st.columns([3, 2])
with col_img:
    st.image(_render_png(shown, scenario.width, scenario.height, routes, config), caption=f"Update: {action.value}")
with col_info:
    for code in shown.warnings:
        st.warning(user_message(code))
    st.subheader("Metrics")
    st.json(layout_metrics(shown, routes, config))
    st.caption(f"Pan offset: ({state.offset[0]:.1f}, {state.offset[1]:.1f}) px")
    st.download_button(
        "Download labels.json",
        data=json.dumps(layout_to_dict(shown, routes, config), indent=2),
        file_name="labels.json",
        mime="application/json",
    )
    st.download_button(
        "Download overlay.svg",
        data=ET.tostring(layout_to_svg(shown, scenario.width, scenario.height, routes, config), encoding="unicode"),
        file_name="overlay.svg",
        mime="image/svg+xml",
    )

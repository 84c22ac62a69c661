from __future__ import annotations

import logging
import random
import sys
import time
from typing import MutableMapping, Tuple

import plotly.graph_objects as go
import streamlit as st

from double_pendulum.commands import KEY_BINDINGS, handle_command, handle_resize
from double_pendulum.config import MIN_SCREEN_SIZE, Config, parse_config
from double_pendulum.controller import SceneSnapshot, SimulationController
from double_pendulum.driver import FpsCounter, SimulationDriver, TickAccumulator
from double_pendulum.log import setup_logging

logger = logging.getLogger(__name__)

BACKGROUND = "rgb(26,51,77)"
FRAME_INTERVAL = 1.0 / 30.0  # seconds between reruns while running
MAX_FRAME_ELAPSED = 1.0  # longer gaps are pauses, not slow frames
CENTER_RADIUS = 10.0


def _rgba(color: Tuple[float, float, float, float]) -> str:
    r, g, b, a = color
    return f"rgba({int(r * 255)},{int(g * 255)},{int(b * 255)},{a})"


def _ensure_session(config: Config) -> SimulationDriver:
    if "driver" not in st.session_state:
        controller = SimulationController.new(
            size=config.size,
            show_trail=config.show_trail,
            center=config.center,
            rng=random.Random(config.seed),
            gravity=config.gravity,
        )
        st.session_state.driver = SimulationDriver(
            controller=controller,
            accumulator=TickAccumulator(config.tick_rate, max_elapsed=MAX_FRAME_ELAPSED),
            fps_counter=FpsCounter(),
        )
        st.session_state.screen = (config.width, config.height)
        logger.info("Started with %d pendulum(s), trail=%s", config.size, config.show_trail)
    if "running" not in st.session_state:
        st.session_state.running = True
    if "last_time" not in st.session_state:
        st.session_state.last_time = time.time()
    return st.session_state.driver


def _screen_from_sidebar(driver: SimulationDriver) -> Tuple[float, float]:
    width, height = st.session_state.screen
    new_width = st.sidebar.number_input("Width", min_value=MIN_SCREEN_SIZE, max_value=4000.0, value=float(width), step=50.0)
    new_height = st.sidebar.number_input("Height", min_value=MIN_SCREEN_SIZE, max_value=4000.0, value=float(height), step=50.0)
    if (new_width, new_height) != (width, height):
        handle_resize(driver.controller, new_width, new_height)
        st.session_state.screen = (new_width, new_height)
    return st.session_state.screen


def apply_key_command(state: MutableMapping) -> None:
    """Run the typed key command, then clear the field so the same key can be sent again."""
    key = state.get("key_command", "")
    state["key_command"] = ""
    if key and not handle_command(state["driver"].controller, key):
        state["running"] = False
        state["quit"] = True


def _command_buttons(driver: SimulationDriver) -> None:
    columns = st.columns(len(KEY_BINDINGS) + 1)
    with columns[0]:
        if not st.session_state.get("running", False):
            if st.button("Start", type="primary"):
                st.session_state.running = True
                st.session_state.last_time = time.time()
        else:
            if st.button("Stop", type="secondary"):
                st.session_state.running = False
    for column, (key, label) in zip(columns[1:], KEY_BINDINGS.items()):
        with column:
            if st.button(f"{label} ({key.upper()})", key=f"cmd_{key}"):
                if not handle_command(driver.controller, key):
                    st.session_state.running = False
                    st.session_state.quit = True


def _build_figure(scene: SceneSnapshot, screen: Tuple[float, float]) -> go.Figure:
    width, height = screen
    fig = go.Figure()

    for body in scene.bodies:
        color = _rgba(body.color)
        if body.trail:
            fig.add_trace(go.Scatter(
                x=[p[0] for p in body.trail], y=[p[1] for p in body.trail], mode="lines",
                line=dict(color=color, width=2), opacity=0.6, hoverinfo="skip", showlegend=False,
            ))
        # rods
        xs = [body.origin[0], body.joint1[0], body.joint2[0]]
        ys = [body.origin[1], body.joint1[1], body.joint2[1]]
        fig.add_trace(go.Scatter(x=xs, y=ys, mode="lines", line=dict(color=color, width=2), hoverinfo="skip", showlegend=False))
        # bobs, marker size is a diameter
        fig.add_trace(go.Scatter(
            x=[body.joint1[0], body.joint2[0]], y=[body.joint1[1], body.joint2[1]], mode="markers",
            marker=dict(size=[2.0 * r for r in body.radii], color=color), hoverinfo="skip", showlegend=False,
        ))

    cx, cy = scene.center
    fig.add_shape(
        type="circle", x0=cx - CENTER_RADIUS, y0=cy - CENTER_RADIUS, x1=cx + CENTER_RADIUS, y1=cy + CENTER_RADIUS,
        fillcolor="white", line=dict(color="white"),
    )

    fig.update_layout(
        width=int(width),
        height=int(height),
        plot_bgcolor=BACKGROUND,
        paper_bgcolor=BACKGROUND,
        margin=dict(l=0, r=0, t=0, b=0),
        xaxis=dict(range=[0, width], visible=False, fixedrange=True),
        # screen coordinates, y grows downwards
        yaxis=dict(range=[height, 0], visible=False, fixedrange=True, scaleanchor="x", scaleratio=1.0),
        dragmode=False,
    )
    return fig


def main() -> None:
    config = parse_config(sys.argv[1:])
    setup_logging(config.log_level)

    st.set_page_config(page_title="Double Pendulum", layout="wide")
    driver = _ensure_session(config)

    st.title("Double Pendulum")
    if st.session_state.get("quit", False):
        st.info("Simulation ended. Reload the page to start again.")
        return

    screen = _screen_from_sidebar(driver)
    _command_buttons(driver)

    st.sidebar.text_input(
        "Key command", key="key_command", max_chars=1, help="c, r, t or q",
        on_change=apply_key_command, args=(st.session_state,),
    )

    now = time.time()
    elapsed = max(0.0, now - float(st.session_state.get("last_time", now)))
    st.session_state.last_time = now
    if st.session_state.get("running", False):
        try:
            driver.advance(elapsed)
        except Exception:
            # keep the page responsive instead of rerunning into the same failure
            logger.exception("Simulation step failed, pausing")
            st.session_state.running = False

    scene = driver.snapshot(now)
    st.text(driver.status_text())
    st.plotly_chart(_build_figure(scene, screen), use_container_width=False, config={"staticPlot": True, "displayModeBar": False})

    with st.expander("Details", expanded=False):
        st.write({
            "ticks": driver.ticks,
            "removed": driver.controller.removed_count,
            "show_trail": scene.show_trail,
            "center": scene.center,
            "energies": driver.controller.energies(),
        })

    if st.session_state.get("running", False):
        time.sleep(FRAME_INTERVAL)
        st.rerun()


if __name__ == "__main__":
    main()

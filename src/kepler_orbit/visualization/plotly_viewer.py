from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import plotly.graph_objects as go

from kepler_orbit.core.frames import Vector3
from kepler_orbit.physics.orbit import (
    OrbitalElements,
    focus_point,
    position_at,
    sample_auxiliary_circle,
    sample_path,
    sample_transform_stages,
)
from kepler_orbit.simulation.engine import PlaybackLog
from kepler_orbit.simulation.scenario import Scenario


def _line(points: List[Vector3], name: str, **kwargs) -> go.Scatter3d:
    return go.Scatter3d(
        x=[p[0] for p in points],
        y=[p[1] for p in points],
        z=[p[2] for p in points],
        mode="lines",
        name=name,
        **kwargs,
    )


def _marker(p: Vector3, name: str, size: int) -> go.Scatter3d:
    return go.Scatter3d(x=[p[0]], y=[p[1]], z=[p[2]], mode="markers", name=name, marker=dict(size=size))


def _scene_layout(title: str) -> dict:
    return dict(
        title=title,
        scene=dict(xaxis_title="X", yaxis_title="Y", zaxis_title="Z", aspectmode="data"),
        margin=dict(l=0, r=0, t=40, b=0),
        legend=dict(orientation="h"),
    )


def render_orbit_scene(
    elements: OrbitalElements,
    out_html: str = "out/orbit_scene.html",
    t_s: Optional[float] = None,
    show_stages: bool = False,
    show_auxiliary_circle: bool = False,
) -> str:
    """
    Renders a static 3D scene:
      - Central body at the origin
      - Oriented orbit path and focus marker
      - Optional: body position at t_s, per-rotation stages, auxiliary circle
    """
    fig = go.Figure()

    fig.add_trace(_marker((0.0, 0.0, 0.0), "central body", size=8))

    if show_stages:
        stages = sample_transform_stages(elements)
        fig.add_trace(_line(stages.flat, "flat", opacity=0.4))
        fig.add_trace(_line(stages.inclined, "inclined", opacity=0.4))
        fig.add_trace(_line(stages.node, "argument of periapsis", opacity=0.4))

    if show_auxiliary_circle:
        fig.add_trace(_line(sample_auxiliary_circle(elements), "auxiliary circle", opacity=0.4))

    fig.add_trace(_line(sample_path(elements), "orbit"))
    fig.add_trace(_marker(focus_point(elements), "focus", size=3))

    if t_s is not None:
        fig.add_trace(_marker(position_at(elements, t_s), f"body @ {t_s:g}s", size=5))

    fig.update_layout(**_scene_layout("Keplerian Orbit"))

    Path(out_html).parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out_html, auto_open=False)
    return out_html


def render_animated_body(
    scenario: Scenario,
    log: PlaybackLog,
    body_id: str,
    out_html: str = "out/orbit_animated.html",
) -> str:
    """
    Renders an animated 3D scene for ONE body:
      - Central body and focus marker
      - Full orbit path
      - A moving marker across timesteps
    """
    if body_id not in log.body_positions:
        raise ValueError(f"body_id '{body_id}' not found in log.body_positions")
    if body_id not in scenario.bodies:
        raise ValueError(f"body_id '{body_id}' not found in scenario")

    elements = scenario.bodies[body_id].elements
    samples = log.body_positions[body_id]
    times = [t for (t, _r) in samples]
    positions = [r for (_t, r) in samples]

    fig = go.Figure()
    fig.add_trace(_marker((0.0, 0.0, 0.0), "central body", size=8))
    fig.add_trace(_line(sample_path(elements), f"{body_id} orbit"))
    fig.add_trace(_marker(focus_point(elements), "focus", size=3))
    fig.add_trace(_marker(positions[0], f"{body_id} marker", size=6))

    # Frames update the marker trace (the last trace)
    fig.frames = [
        go.Frame(
            name=str(i),
            data=[go.Scatter3d(x=[r[0]], y=[r[1]], z=[r[2]], mode="markers", marker=dict(size=6))],
            traces=[3],
        )
        for i, r in enumerate(positions)
    ]

    layout = _scene_layout(f"Animated Playback: {body_id}")
    layout["updatemenus"] = [dict(
        type="buttons",
        showactive=True,
        buttons=[
            dict(label="Play", method="animate",
                 args=[None, {"frame": {"duration": 50, "redraw": True}, "fromcurrent": True}]),
            dict(label="Pause", method="animate",
                 args=[[None], {"frame": {"duration": 0, "redraw": False}, "mode": "immediate"}]),
        ],
    )]
    layout["sliders"] = [dict(
        steps=[dict(method="animate", args=[[str(i)], {"mode": "immediate", "frame": {"duration": 0, "redraw": True}}],
                    label=f"{times[i]:g}s") for i in range(0, len(times), max(1, len(times)//20))],
        active=0,
    )]
    fig.update_layout(**layout)

    Path(out_html).parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out_html, auto_open=False)
    return out_html

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from kepler_orbit.simulation.engine import PlaybackLog
from kepler_orbit.simulation.scenario import Scenario


def export_playback_bundle(
    scenario: Scenario,
    log: PlaybackLog,
    out_path: str = "out/playback_bundle.json",
) -> str:
    """
    Export a bundle for a Three.js (or any) renderer:
      - times: global time vector
      - body_positions: per-body positions aligned to times_s
      - paths / focus_points: static orbit geometry per body
      - events: solver events recorded during playback

    JSON shape:
    {
      "times_s": [0,0.5,1.0,...],
      "body_positions": { "SAT-001": [[x,y,z], ...], ... },
      "paths": { "SAT-001": [[x,y,z], ...], ... },
      "focus_points": { "SAT-001": [x,y,z], ... },
      "events": [{"kind": "...", "t": ..., ...}, ...]
    }
    """
    body_ids = sorted(log.body_positions.keys())
    if not body_ids:
        raise ValueError("No body positions found in log.")

    # Reference times (assume uniform sampling across bodies)
    ref_samples = log.body_positions[body_ids[0]]
    times_s: List[float] = [t for (t, _r) in ref_samples]

    data: Dict[str, Any] = {
        "times_s": times_s,
        "body_positions": {},
        "paths": {},
        "focus_points": {},
        "events": list(log.events),
    }

    for body_id in body_ids:
        samples = log.body_positions[body_id]
        if len(samples) != len(times_s):
            raise ValueError(f"{body_id} samples length mismatch.")
        data["body_positions"][body_id] = [[r[0], r[1], r[2]] for (_t, r) in samples]

    # Static geometry comes from the scenario's current elements
    for body_id, body in scenario.bodies.items():
        geometry = body.geometry()
        data["paths"][body_id] = [[p[0], p[1], p[2]] for p in geometry.path]
        data["focus_points"][body_id] = list(geometry.focus)

    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(data, f)

    return out_path

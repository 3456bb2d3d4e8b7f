from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, Tuple

from kepler_orbit.core.frames import Vector3
from kepler_orbit.simulation.scenario import Scenario

logger = logging.getLogger(__name__)


class System(Protocol):
    """
    Plugin interface for playback systems.
    Each system runs per tick and can write to the log.
    """
    name: str

    def on_step(self, t_s: float, scenario: Scenario, log: "PlaybackLog") -> None:
        ...


@dataclass
class PlaybackLog:
    """
    Stores outputs from a playback run.
    Keep it simple and serializable.
    """
    # Positions: body_id -> list of (t, r)
    body_positions: Dict[str, List[Tuple[float, Vector3]]] = field(default_factory=dict)

    # Free-form events (e.g. solver non-convergence)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def record_position(self, body_id: str, t_s: float, r: Vector3) -> None:
        self.body_positions.setdefault(body_id, []).append((t_s, r))

    def record_event(self, kind: str, t_s: float, **details: Any) -> None:
        self.events.append({"kind": kind, "t": t_s, **details})


@dataclass
class Engine:
    """
    Fixed-step playback driver standing in for a renderer's frame loop.
    Deterministic replay: given same scenario + dt + start/end => same output.
    """
    dt_s: float
    systems: List[System] = field(default_factory=list)

    def run(self, scenario: Scenario, t_start_s: float, t_end_s: float) -> PlaybackLog:
        if self.dt_s <= 0:
            raise ValueError("dt_s must be positive.")
        if t_end_s < t_start_s:
            raise ValueError("t_end_s must be >= t_start_s.")

        log = PlaybackLog()
        logger.debug("Running scenario %r from %s s to %s s (dt=%s s)",
                     scenario.name, t_start_s, t_end_s, self.dt_s)

        # Tick times come from the tick index so long runs do not accumulate drift.
        # Inclusive end if it lands exactly; otherwise last tick < end
        tick = 0
        t = t_start_s
        while t <= t_end_s + 1e-9:
            for sys in self.systems:
                sys.on_step(t, scenario, log)
            tick += 1
            t = t_start_s + tick * self.dt_s

        logger.debug("Scenario %r finished after %d ticks, %d events", scenario.name, tick, len(log.events))
        return log

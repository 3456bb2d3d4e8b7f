from __future__ import annotations

import warnings
from dataclasses import dataclass

from kepler_orbit.physics.kepler import KeplerConvergenceWarning
from kepler_orbit.simulation.scenario import Scenario
from kepler_orbit.simulation.engine import PlaybackLog


@dataclass
class StateRecorderSystem:
    name: str = "state_recorder"

    def on_step(self, t_s: float, scenario: Scenario, log: PlaybackLog) -> None:
        for body in scenario.body_list():
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always", KeplerConvergenceWarning)
                r = body.position_at(t_s)
            log.record_position(body.body_id, t_s, r)

            for w in caught:
                if issubclass(w.category, KeplerConvergenceWarning):
                    log.record_event("kepler_nonconvergence", t_s, body_id=body.body_id, message=str(w.message))
                else:
                    warnings.warn(w.message, w.category, stacklevel=2)

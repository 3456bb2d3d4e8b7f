from __future__ import annotations

from dataclasses import dataclass

from kepler_orbit.physics.orbit import OrbitalElements, position_at, sample_orbit, OrbitGeometry
from kepler_orbit.core.frames import Vector3


@dataclass
class OrbitingBody:
    """
    A named body on a Keplerian orbit.
    Holds no propagated state; positions are recomputed on every call.
    """
    body_id: str
    name: str
    elements: OrbitalElements

    def __post_init__(self):
        if not self.body_id or not self.body_id.strip():
            raise ValueError("Body ID cannot be empty.")
        if not self.name or not self.name.strip():
            raise ValueError("Body name cannot be empty.")

    def position_at(self, t_s: float) -> Vector3:
        """Display-frame position at t_s (seconds since scenario start)."""
        return position_at(self.elements, t_s)

    def geometry(self) -> OrbitGeometry:
        return sample_orbit(self.elements)

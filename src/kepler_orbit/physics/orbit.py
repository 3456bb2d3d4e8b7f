# src/kepler_orbit/physics/orbit.py

from __future__ import annotations

import dataclasses
import math
import numbers
from dataclasses import dataclass
from typing import List

from kepler_orbit.core.constants import (
    DEFAULT_A,
    DEFAULT_E,
    DEFAULT_INC_RAD,
    DEFAULT_OMEGA_RAD,
    DEFAULT_PERIOD_S,
    DEFAULT_RAAN_RAD,
    DEFAULT_TAU_S,
    NUM_POINTS,
    TWO_PI,
)
from kepler_orbit.core.frames import Vector3, orient_yzx, rot1, rot2, rot3
from kepler_orbit.physics.kepler import EccentricAnomalySolution, solve_kepler


class InvalidOrbitError(ValueError):
    """Orbital elements outside the domain of a closed Keplerian ellipse."""


@dataclass
class OrbitalElements:
    """
    Keplerian elements of a closed orbit as edited by a host (GUI, script).

    Units:
        a: semi-major axis (scene units)
        e: eccentricity (0<=e<1)
        inc_rad: inclination in radians (pitch, about Y)
        raan_rad: right ascension of ascending node in radians (roll, about X)
        omega_rad: argument of periapsis in radians (yaw, about Z)
        period_s: seconds per revolution
        tau_s: time of periapsis passage in seconds
        num_points: segments used to draw the closed curve

    b, c and mean_motion_rad_s are derived on every read and cannot be set.
    Construction accepts any values; call validate() (the geometry functions
    do) before using the record.
    """
    a: float = DEFAULT_A
    e: float = DEFAULT_E
    inc_rad: float = DEFAULT_INC_RAD
    raan_rad: float = DEFAULT_RAAN_RAD
    omega_rad: float = DEFAULT_OMEGA_RAD
    period_s: float = DEFAULT_PERIOD_S
    tau_s: float = DEFAULT_TAU_S
    num_points: int = NUM_POINTS

    @property
    def b(self) -> float:
        """Semi-minor axis, a*sqrt(1 - e^2)."""
        return self.a * math.sqrt(1.0 - self.e * self.e)

    @property
    def c(self) -> float:
        """Center-to-focus distance, e*a."""
        return self.e * self.a

    @property
    def mean_motion_rad_s(self) -> float:
        """n = 2π / T."""
        return TWO_PI / self.period_s

    def validate(self) -> None:
        if not (math.isfinite(self.a) and self.a > 0):
            raise InvalidOrbitError(f"Semi-major axis must be positive. Got: {self.a}")
        if not (0.0 <= self.e < 1.0):
            raise InvalidOrbitError(f"Eccentricity must be in range [0, 1) for a closed orbit. Got: {self.e}")
        if not (math.isfinite(self.period_s) and self.period_s > 0):
            raise InvalidOrbitError(f"Period must be positive. Got: {self.period_s}")
        if not math.isfinite(self.inc_rad):
            raise InvalidOrbitError(f"Inclination must be finite. Got: {self.inc_rad}")
        if not math.isfinite(self.raan_rad):
            raise InvalidOrbitError(f"RAAN must be finite. Got: {self.raan_rad}")
        if not math.isfinite(self.omega_rad):
            raise InvalidOrbitError(f"Argument of periapsis must be finite. Got: {self.omega_rad}")
        if not math.isfinite(self.tau_s):
            raise InvalidOrbitError(f"Time of periapsis passage must be finite. Got: {self.tau_s}")
        if isinstance(self.num_points, bool) or not isinstance(self.num_points, numbers.Integral) or self.num_points < 1:
            raise InvalidOrbitError(f"Number of points must be a positive integer. Got: {self.num_points!r}")

    def update(self, validate: bool = True, **changes) -> None:
        """
        Change one or more input fields.

        With validate=True (default) the changed record is checked first and
        an InvalidOrbitError leaves this record untouched. Derived fields
        (b, c, mean_motion_rad_s) are not accepted.
        """
        candidate = dataclasses.replace(self, **changes)
        if validate:
            candidate.validate()
        for name in changes:
            setattr(self, name, getattr(candidate, name))

    def copy(self) -> "OrbitalElements":
        return dataclasses.replace(self)


def default_scene_elements() -> OrbitalElements:
    """Elements of the reference scene (a=1, e=1/√2, T=120 s)."""
    return OrbitalElements()


@dataclass(frozen=True)
class TransformStages:
    """Sampled ellipse after each step of the orientation transform."""
    flat: List[Vector3]
    inclined: List[Vector3]
    node: List[Vector3]
    oriented: List[Vector3]


@dataclass(frozen=True)
class OrbitGeometry:
    """Everything a host needs to (re)draw a static orbit."""
    path: List[Vector3]
    focus: Vector3


def _sample_angles(num_points: int) -> List[float]:
    # Uniform over [-π, π], endpoints included so the curve closes
    num_points = int(num_points)
    return [-math.pi + (i / num_points) * TWO_PI for i in range(num_points + 1)]


def perifocal_point(elements: OrbitalElements, E_rad: float) -> Vector3:
    """(a(cos E - e), b sin E, 0)."""
    return (elements.a * (math.cos(E_rad) - elements.e), elements.b * math.sin(E_rad), 0.0)


def orient(v: Vector3, elements: OrbitalElements) -> Vector3:
    return orient_yzx(v, elements.inc_rad, elements.omega_rad, elements.raan_rad)


def sample_path(elements: OrbitalElements) -> List[Vector3]:
    """
    Closed orbit polyline in the display frame.

    Eccentric anomaly is the sampling parameter, so coverage is even along
    the curve for any eccentricity. Returns num_points + 1 points; the first
    and last coincide.
    """
    elements.validate()
    return [orient(perifocal_point(elements, E), elements) for E in _sample_angles(elements.num_points)]


def focus_point(elements: OrbitalElements) -> Vector3:
    """Focus marker (-c, 0, 0) carried through the orientation transform."""
    elements.validate()
    return orient((-elements.c, 0.0, 0.0), elements)


def sample_orbit(elements: OrbitalElements) -> OrbitGeometry:
    return OrbitGeometry(path=sample_path(elements), focus=focus_point(elements))


def sample_auxiliary_circle(elements: OrbitalElements) -> List[Vector3]:
    """
    Auxiliary circle of radius a sharing the ellipse center, in the
    perifocal plane (no orientation applied).
    """
    elements.validate()
    return [
        (elements.a * math.cos(u) - elements.c, elements.a * math.sin(u), 0.0)
        for u in _sample_angles(elements.num_points)
    ]


def sample_transform_stages(elements: OrbitalElements) -> TransformStages:
    """Sampled ellipse after each rotation; the last stage equals sample_path."""
    elements.validate()
    flat: List[Vector3] = []
    inclined: List[Vector3] = []
    node: List[Vector3] = []
    oriented: List[Vector3] = []
    for E in _sample_angles(elements.num_points):
        v = perifocal_point(elements, E)
        flat.append(v)
        v = rot2(elements.inc_rad, v)
        inclined.append(v)
        v = rot3(elements.omega_rad, v)
        node.append(v)
        v = rot1(elements.raan_rad, v)
        oriented.append(v)
    return TransformStages(flat=flat, inclined=inclined, node=node, oriented=oriented)


def mean_anomaly_at(elements: OrbitalElements, t_s: float) -> float:
    """M = n (t - tau), not reduced."""
    return elements.mean_motion_rad_s * (t_s - elements.tau_s)


def eccentric_anomaly_at(elements: OrbitalElements, t_s: float) -> EccentricAnomalySolution:
    elements.validate()
    return solve_kepler(elements.e, mean_anomaly_at(elements, t_s))


def position_at(elements: OrbitalElements, t_s: float) -> Vector3:
    """
    Position of the body at time t_s (seconds, same clock as tau_s).

    Pure in (elements, t_s). If the Kepler solve does not converge, a
    KeplerConvergenceWarning is issued and the best estimate is used.
    """
    solution = eccentric_anomaly_at(elements, t_s)
    return orient(perifocal_point(elements, solution.E_rad), elements)


def radius_at(elements: OrbitalElements, t_s: float) -> float:
    """Distance from the perifocal origin, r = a (1 - e cos E)."""
    solution = eccentric_anomaly_at(elements, t_s)
    return elements.a * (1.0 - elements.e * math.cos(solution.E_rad))


def propagate(elements: OrbitalElements, times_s: List[float]) -> List[tuple[float, Vector3]]:
    """
    Evaluate position_at across a list of time stamps.
    Returns list of (t, r).
    """
    return [(t, position_at(elements, t)) for t in times_s]

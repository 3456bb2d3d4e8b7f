from __future__ import annotations

import math
from typing import Tuple

Vector3 = Tuple[float, float, float]


def rot1(angle_rad: float, v: Vector3) -> Vector3:
    """Right-handed rotation about the X axis."""
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (x, c * y - s * z, s * y + c * z)


def rot2(angle_rad: float, v: Vector3) -> Vector3:
    """Right-handed rotation about the Y axis."""
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (c * x + s * z, y, -s * x + c * z)


def rot3(angle_rad: float, v: Vector3) -> Vector3:
    """Right-handed rotation about the Z axis."""
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (c * x - s * y, s * x + c * y, z)


def orient_yzx(v: Vector3, inc_rad: float, omega_rad: float, raan_rad: float) -> Vector3:
    """
    Place a perifocal-frame vector in the display frame.

    Rotation sequence (order is fixed):
        1. about Y by the inclination (pitch)
        2. about Z by the argument of periapsis (yaw)
        3. about X by the RAAN (roll)

    This is not the textbook Z-X-Z orbital-elements sequence; swapping the
    order changes the rendered geometry.

    Args:
        v: Vector in the perifocal frame
        inc_rad: Inclination (radians)
        omega_rad: Argument of periapsis (radians)
        raan_rad: Right ascension of ascending node (radians)

    Returns:
        Vector in the display frame
    """
    v = rot2(inc_rad, v)
    v = rot3(omega_rad, v)
    return rot1(raan_rad, v)

from __future__ import annotations

import math

TWO_PI: float = 2.0 * math.pi

# Kepler solver: stop when successive estimates differ by less than this (rad)
KEPLER_TOL_RAD: float = 1.0e-14

# A refined E whose residual |E - e sin(E) - M| exceeds this is not accepted as a root
KEPLER_RESIDUAL_TOL: float = 1.0e-10

# Kepler solver iteration cap, applied separately to the third-order refinement
# and to the bracketed fallback; bounds worst-case latency per position query
KEPLER_MAX_ITER: int = 100

# Number of segments used to approximate each closed curve
NUM_POINTS: int = 50

# Reference scene (scene units, seconds, radians)
DEFAULT_A: float = 1.0
DEFAULT_E: float = 1.0 / math.sqrt(2.0)
DEFAULT_RAAN_RAD: float = math.pi / 4     # roll, about X
DEFAULT_INC_RAD: float = math.pi / 5      # pitch, about Y
DEFAULT_OMEGA_RAD: float = math.pi / 4    # yaw, about Z
DEFAULT_PERIOD_S: float = 120.0
DEFAULT_TAU_S: float = 0.0

# Kepler's equation for elliptic orbits

from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass
from typing import Tuple

from kepler_orbit.core.constants import KEPLER_MAX_ITER, KEPLER_RESIDUAL_TOL, KEPLER_TOL_RAD, TWO_PI

logger = logging.getLogger(__name__)


class KeplerConvergenceWarning(RuntimeWarning):
    """The solver hit its iteration cap; the last estimate was returned."""


@dataclass(frozen=True)
class EccentricAnomalySolution:
    """
    Result of one Kepler solve.

    Attributes:
        E_rad: eccentric anomaly (rad)
        M_rad: normalized mean anomaly the solve was run against (rad)
        e: eccentricity
        iterations: refinement steps taken, fallback included
        converged: False if the iteration cap was reached first
        safeguarded: True if the bracketed fallback produced E_rad
    """
    E_rad: float
    M_rad: float
    e: float
    iterations: int
    converged: bool
    safeguarded: bool = False

    @property
    def residual(self) -> float:
        """E - e sin(E) - M."""
        return self.E_rad - self.e * math.sin(self.E_rad) - self.M_rad


def normalize_mean_anomaly(M_rad: float) -> float:
    """
    Reduce M modulo 2π with fmod semantics.

    The result keeps the sign of M, so negative inputs land in (-2π, 0].
    The eccentric anomaly found from it differs from the [0, 2π) one by a
    whole turn, which leaves positions unchanged.
    """
    return math.fmod(M_rad, TWO_PI)


def kepler_start3(e: float, M_rad: float) -> float:
    """Third-order starting value for E."""
    e2 = e * e
    e3 = e * e2
    cos_M = math.cos(M_rad)
    return M_rad + (-0.5 * e3 + e + (e2 + 1.5 * cos_M * e3) * cos_M) * math.sin(M_rad)


def eps3(e: float, M_rad: float, x: float) -> float:
    """Third-order correction to subtract from the current estimate x."""
    cos_x = math.cos(x)
    sin_x = math.sin(x)
    t2 = -1.0 + e * cos_x
    t4 = e * sin_x
    t5 = -x + t4 + M_rad
    t6 = t5 / (0.5 * t5 * t4 / t2 + t2)
    return t5 / ((0.5 * sin_x - (1.0 / 6.0) * cos_x * t6) * e * t6 + t2)


def _residual(e: float, M_rad: float, E_rad: float) -> float:
    return E_rad - e * math.sin(E_rad) - M_rad


def solve_bracketed(e: float, M_rad: float, E_start: float, tol: float = KEPLER_TOL_RAD,
                    max_iter: int = KEPLER_MAX_ITER) -> Tuple[float, int, bool]:
    """
    Newton iteration kept inside [M - e, M + e], bisecting whenever a step
    would leave the bracket.

    E - e sin(E) - M is increasing in E for e < 1 and changes sign over that
    bracket, so the root is always found, including near e = 1 where the
    third-order refinement can run away.

    Returns:
        (E_rad, iterations, converged)
    """
    lo = M_rad - e
    hi = M_rad + e
    E = E_start if lo <= E_start <= hi else M_rad

    for count in range(1, max_iter + 1):
        f = _residual(e, M_rad, E)
        if f == 0.0:
            return E, count, True
        if f > 0.0:
            hi = E
        else:
            lo = E

        fp = 1.0 - e * math.cos(E)
        E_new = E - f / fp if fp > 0.0 else 0.5 * (lo + hi)
        if not (lo < E_new < hi):
            E_new = 0.5 * (lo + hi)

        dE = abs(E_new - E)
        E = E_new
        if dE <= tol or hi - lo <= tol:
            return E, count, True

    return E, max_iter, False


def solve_kepler(e: float, M_rad: float, tol: float = KEPLER_TOL_RAD,
                 max_iter: int = KEPLER_MAX_ITER) -> EccentricAnomalySolution:
    """
    Solve Kepler's equation
        M = E - e sin(E)
    for E, starting from kepler_start3 and refining with eps3.

    If that refinement hits the cap, or settles outside [M - e, M + e], the
    solve is restarted with solve_bracketed (its own cap of max_iter steps).

    Args:
        e: eccentricity (0 <= e < 1)
        M_rad: mean anomaly (rad), any real value
        tol: convergence tolerance on |E_k+1 - E_k|
        max_iter: iteration cap

    Returns:
        EccentricAnomalySolution. If neither pass converges, the last estimate
        is returned with converged=False and a KeplerConvergenceWarning is issued.
    """
    M = normalize_mean_anomaly(M_rad)

    E0 = kepler_start3(e, M)
    dE = tol + 1.0
    count = 0

    while dE > tol:
        E = E0 - eps3(e, M, E0)
        dE = abs(E - E0)
        E0 = E
        count += 1
        if count >= max_iter:
            break

    converged = (
        dE <= tol
        and M - e <= E0 <= M + e
        and abs(_residual(e, M, E0)) <= KEPLER_RESIDUAL_TOL
    )
    safeguarded = False
    if not converged:
        logger.debug("Third-order refinement failed (e=%r M=%r E=%r dE=%r); using bracketed Newton",
                     e, M, E0, dE)
        E0, extra, converged = solve_bracketed(e, M, E0, tol=tol, max_iter=max_iter)
        count += extra
        safeguarded = True

    if not converged:
        logger.warning("Kepler solver failed to converge: e=%r M=%r E=%r after %d iterations",
                       e, M, E0, count)
        warnings.warn(
            f"Kepler solver did not converge within {max_iter} iterations (e={e}, M={M}).",
            KeplerConvergenceWarning,
            stacklevel=2,
        )

    return EccentricAnomalySolution(E_rad=E0, M_rad=M, e=e, iterations=count, converged=converged,
                                    safeguarded=safeguarded)


def solve_keplers_equation(M_rad: float, e: float, tol: float = KEPLER_TOL_RAD,
                           max_iter: int = KEPLER_MAX_ITER) -> float:
    """Eccentric anomaly (rad) for mean anomaly M_rad; see solve_kepler."""
    return solve_kepler(e, M_rad, tol=tol, max_iter=max_iter).E_rad

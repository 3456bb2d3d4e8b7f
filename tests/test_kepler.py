"""
Tests for the Kepler equation solver.
"""
import logging
import math
import warnings

import pytest

from kepler_orbit.physics.kepler import (
    EccentricAnomalySolution,
    KeplerConvergenceWarning,
    eps3,
    kepler_start3,
    normalize_mean_anomaly,
    solve_bracketed,
    solve_kepler,
    solve_keplers_equation,
)

ECCENTRICITIES = [0.0, 0.1, 0.3, 1.0 / math.sqrt(2), 0.9, 0.95, 0.99]
MEAN_ANOMALIES = [-10 * math.pi, -31.0, -7.5, -1.0, -1e-3, 0.0, 1e-3, 0.3, 1.0, 2.5,
                  math.pi, 4.0, 5.9, 6.28, 12.0, 31.0, 10 * math.pi]


def test_kepler_zero_eccentricity():
    # If e=0, E=M exactly
    for M in [0.0, 0.5, 1.0, 2.0, 5.0, 7.0, -3.0]:
        E = solve_keplers_equation(M, 0.0)
        assert E == normalize_mean_anomaly(M)


def test_kepler_converges_typical():
    E = solve_keplers_equation(M_rad=1.0, e=0.4)
    # Verify equation residual
    res = E - 0.4 * math.sin(E) - math.fmod(1.0, 2 * math.pi)
    assert abs(res) < 1e-12


@pytest.mark.parametrize("e", ECCENTRICITIES)
def test_kepler_residual_across_domain(e):
    for M in MEAN_ANOMALIES:
        with warnings.catch_warnings():
            warnings.simplefilter("error", KeplerConvergenceWarning)
            solution = solve_kepler(e, M)
        assert solution.converged
        res = solution.E_rad - e * math.sin(solution.E_rad) - math.fmod(M, 2 * math.pi)
        assert abs(res) < 1e-12, (e, M, res)


class TestNormalization:
    def test_positive_wraps(self):
        assert abs(normalize_mean_anomaly(2 * math.pi + 0.25) - 0.25) < 1e-14

    def test_negative_keeps_sign(self):
        # fmod semantics: no shift into [0, 2π)
        assert normalize_mean_anomaly(-1.0) == -1.0
        assert -2 * math.pi < normalize_mean_anomaly(-7.0) < 0.0

    def test_solution_reports_normalized_mean_anomaly(self):
        solution = solve_kepler(0.5, -1.0)
        assert solution.M_rad == -1.0
        assert solution.E_rad < 0.0
        assert abs(solution.residual) < 1e-12

    def test_negative_and_wrapped_anomalies_give_same_point(self):
        e = 0.6
        E_neg = solve_keplers_equation(-1.0, e)
        E_pos = solve_keplers_equation(2 * math.pi - 1.0, e)
        assert abs(math.cos(E_neg) - math.cos(E_pos)) < 1e-12
        assert abs(math.sin(E_neg) - math.sin(E_pos)) < 1e-12


class TestStarterAndCorrection:
    def test_starter_circular_is_identity(self):
        for M in [0.0, 0.7, 3.0]:
            assert kepler_start3(0.0, M) == M

    def test_starter_fixed_points(self):
        # sin(M) = 0 -> starter returns M
        assert kepler_start3(0.8, 0.0) == 0.0

    def test_correction_vanishes_at_root(self):
        e = 0.3
        E = solve_keplers_equation(2.0, e)
        assert abs(eps3(e, 2.0, E)) < 1e-14

    def test_starter_is_close_for_moderate_eccentricity(self):
        e, M = 0.2, 1.0
        E = solve_keplers_equation(M, e)
        assert abs(kepler_start3(e, M) - E) < 1e-2


class TestConvergenceFailure:
    def test_iteration_cap_returns_estimate_with_warning(self):
        with pytest.warns(KeplerConvergenceWarning, match="did not converge"):
            solution = solve_kepler(0.9, 0.5, max_iter=1)

        assert isinstance(solution, EccentricAnomalySolution)
        assert not solution.converged
        # one refinement step plus one fallback step
        assert solution.iterations == 2
        assert solution.safeguarded
        assert math.isfinite(solution.E_rad)

    def test_iteration_cap_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="kepler_orbit.physics.kepler"):
            with pytest.warns(KeplerConvergenceWarning):
                solve_kepler(0.9, 0.5, max_iter=1)
        assert "failed to converge" in caplog.text

    def test_converged_solution_is_silent(self, caplog):
        with caplog.at_level(logging.WARNING, logger="kepler_orbit.physics.kepler"):
            with warnings.catch_warnings():
                warnings.simplefilter("error")
                solution = solve_kepler(0.5, 1.0)
        assert solution.converged
        assert solution.iterations < 10
        assert caplog.text == ""


class TestNearParabolic:
    @pytest.mark.parametrize("e", [0.9999, 0.999999, 1.0 - 1e-9])
    def test_small_mean_anomaly_converges(self, e):
        for M in [-0.01, -0.0094247780, -0.0062831853, -1e-3, 1e-3, 0.0062831853, 0.0094247780, 0.01]:
            with warnings.catch_warnings():
                warnings.simplefilter("error", KeplerConvergenceWarning)
                solution = solve_kepler(e, M)
            assert solution.converged
            assert abs(solution.residual) < 1e-12, (e, M, solution)
            # |E - M| = e |sin E| <= e
            assert abs(solution.E_rad - M) <= e
            # Just after periapsis E has the sign of M
            assert solution.E_rad * M > 0.0

    def test_position_near_periapsis_is_on_the_near_side(self):
        from kepler_orbit.physics.orbit import OrbitalElements, position_at

        elements = OrbitalElements(a=1.0, e=0.9999, inc_rad=0.0, raan_rad=0.0, omega_rad=0.0,
                                   period_s=120.0, tau_s=0.0)
        for t in [-0.12, -0.05, 0.05, 0.12]:
            x, _y, _z = position_at(elements, t)
            # Periapsis is at x = a(1 - e); apoapsis at x = -a(1 + e)
            assert x > -0.5

    def test_converging_refinement_is_kept(self):
        # The fallback only runs when the third-order refinement fails
        for e in [0.0, 0.3, 0.9, 0.99]:
            for M in [-2.0, 0.5, 3.0, 6.0]:
                assert not solve_kepler(e, M).safeguarded

    def test_bracketed_solve_from_a_bad_start(self):
        E, iterations, converged = solve_bracketed(0.9999, 0.0062831853, E_start=-951.9)
        assert converged
        assert iterations <= 100
        assert abs(E - 0.9999 * math.sin(E) - 0.0062831853) < 1e-12

    def test_bracketed_solve_matches_refinement(self):
        e, M = 0.6, 2.2
        E, _iterations, converged = solve_bracketed(e, M, E_start=M)
        assert converged
        assert abs(E - solve_keplers_equation(M, e)) < 1e-12

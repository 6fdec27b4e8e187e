import math
from dataclasses import replace

import numpy as np
import pytest

from kepler.bodies import EARTH
from kepler.conversion import cartesian_to_kepler, kepler_to_cartesian
from kepler.errors import ConvergenceError, DegenerateOrbitError
from kepler.kepler import KeplerConfig
from kepler.propagator import KeplerPropagator, propagate
from kepler.state import CartesianState

MU = EARTH.mu


def _make_prop(**kwargs):
    return KeplerPropagator(KeplerConfig(**kwargs))


def assert_state_close(result, expected, rtol=1e-9):
    np.testing.assert_allclose(result.r, expected.r, rtol=0.0, atol=rtol * expected.r_norm)
    np.testing.assert_allclose(result.v, expected.v, rtol=0.0, atol=rtol * expected.v_norm)


def specific_energy(state):
    return 0.5 * state.v_norm**2 - MU / state.r_norm


ELLIPTIC = CartesianState(
    r=[-4047156.98661689, 11226472.58091381, 21567275.45640172],
    v=[-3192.37799809, -2471.09015579, 1018.50143148],
)
CALIBRATION = CartesianState(r=[6750e3, 0.0, 0.0], v=[0.0, 8059.5973215, 0.0])
HYPERBOLIC = CartesianState(r=[7000e3, -1000e3, 500e3], v=[2000.0, 12500.0, -1500.0])
PARABOLIC = CartesianState(r=[7000e3, 0.0, 0.0], v=[0.0, 0.0, math.sqrt(2.0 * MU / 7000e3)])
RETROGRADE = CartesianState(r=[0.0, 7200e3, 0.0], v=[7900.0, 0.0, 0.0])

ALL_STATES = [ELLIPTIC, CALIBRATION, HYPERBOLIC, PARABOLIC, RETROGRADE]


@pytest.mark.parametrize("state", ALL_STATES)
def test_zero_elapsed_time_is_identity(state):
    result = KeplerPropagator().propagate(state, MU, 0.0)

    assert_state_close(result, state)


@pytest.mark.parametrize("state", ALL_STATES)
@pytest.mark.parametrize("dt", [600.0, -2500.0, 4000.0])
def test_forward_then_backward_returns_to_start(state, dt):
    prop = KeplerPropagator()

    there = prop.propagate(state, MU, dt)
    back = prop.propagate(there, MU, -dt)

    assert_state_close(back, state)


@pytest.mark.parametrize("state", [ELLIPTIC, CALIBRATION, RETROGRADE])
def test_one_period_returns_to_start(state):
    prop = KeplerPropagator()
    T = prop.period(state, MU)

    assert_state_close(prop.propagate(state, MU, T), prop.propagate(state, MU, 0.0))
    assert_state_close(prop.propagate(state, MU, -3 * T), state)


def periapsis_state(e, rp=7000e3, inclination=0.3):
    """state at periapsis for eccentricity e, node along x"""
    vp = math.sqrt(MU * (1.0 + e) / rp)
    return CartesianState(r=[rp, 0.0, 0.0], v=[0.0, vp * math.cos(inclination), vp * math.sin(inclination)])


@pytest.mark.parametrize("e", [0.9, 0.999, 0.99999, 1.0 - 1e-9, 1.0 + 1e-6, 1.0001])
@pytest.mark.parametrize("nu", [0.0, 1.0, -2.0])
def test_zero_elapsed_time_is_identity_near_parabolic(e, nu):
    # move off periapsis first so M0 != 0 as well
    state = periapsis_state(e)
    if nu != 0.0:
        el = cartesian_to_kepler(state, MU)
        state = kepler_to_cartesian(replace(el, nu=nu), MU)

    result = KeplerPropagator().propagate(state, MU, 0.0)

    assert_state_close(result, state)


@pytest.mark.parametrize("e", [0.9, 0.999, 0.99999, 1.0 + 1e-6, 1.0001])
@pytest.mark.parametrize("dt", [1000.0, -1000.0, 5000.0])
def test_forward_then_backward_near_parabolic(e, dt):
    prop = KeplerPropagator()
    state = periapsis_state(e)

    there = prop.propagate(state, MU, dt)
    back = prop.propagate(there, MU, -dt)

    assert there.r_norm > state.r_norm
    assert_state_close(back, state)


@pytest.mark.parametrize("e", [0.9, 0.999])
def test_one_period_returns_to_start_high_eccentricity(e):
    prop = KeplerPropagator()
    state = periapsis_state(e)
    T = prop.period(state, MU)

    assert_state_close(prop.propagate(state, MU, T), state)
    assert_state_close(prop.propagate(state, MU, -3 * T), state)


def test_period_of_calibration_orbit():
    a = 6750e3 / 0.9  # periapsis at 6750 km, e = 0.1
    expected = 2 * math.pi * math.sqrt(a**3 / MU)

    assert KeplerPropagator().period(CALIBRATION, MU) == pytest.approx(expected, rel=1e-6)


@pytest.mark.parametrize("state", [HYPERBOLIC, PARABOLIC])
def test_open_orbits_have_no_period(state):
    with pytest.raises(ValueError, match="no period"):
        KeplerPropagator().period(state, MU)


@pytest.mark.parametrize("dt", [1.0, 1234.5, -300.0])
def test_circular_orbit_moves_at_mean_motion(dt):
    radius = 7_000_000.0
    angular_speed = math.sqrt(MU / radius ** 3)
    velocity_mag = math.sqrt(MU / radius)
    state = CartesianState(r=[radius, 0.0, 0.0], v=[0.0, velocity_mag, 0.0])

    next_state = KeplerPropagator().propagate(state, MU, dt)

    angle = angular_speed * dt
    expected_r = np.array([radius * math.cos(angle), radius * math.sin(angle), 0.0])
    expected_v = np.array([-velocity_mag * math.sin(angle), velocity_mag * math.cos(angle), 0.0])

    np.testing.assert_allclose(next_state.r, expected_r, atol=1e-6, rtol=0.0)
    np.testing.assert_allclose(next_state.v, expected_v, atol=1e-9, rtol=0.0)


@pytest.mark.parametrize("state", ALL_STATES)
def test_energy_and_angular_momentum_are_conserved(state):
    result = KeplerPropagator().propagate(state, MU, 7200.0)

    h0 = np.cross(state.r, state.v)
    h1 = np.cross(result.r, result.v)

    np.testing.assert_allclose(h1, h0, rtol=0.0, atol=1e-9 * np.linalg.norm(h0))
    assert specific_energy(result) == pytest.approx(specific_energy(state), rel=1e-9, abs=1e-9 * MU / state.r_norm)


def test_half_period_reaches_apoapsis():
    prop = KeplerPropagator()
    T = prop.period(CALIBRATION, MU)

    result = prop.propagate(CALIBRATION, MU, T / 2.0)

    # e = 0.1: apoapsis radius = a (1 + e) = 6750 km * 1.1 / 0.9
    a = 6750e3 / 0.9
    np.testing.assert_allclose(result.r, [-a * 1.1, 0.0, 0.0], rtol=0.0, atol=1.0)
    assert result.v[0] == pytest.approx(0.0, abs=1e-6)
    assert result.v[1] < 0.0


def test_module_level_propagate_matches_propagator():
    expected = KeplerPropagator().propagate(ELLIPTIC, MU, 3600.0)

    assert propagate(ELLIPTIC, MU, 3600.0) == expected


def test_propagator_keeps_no_state_between_calls():
    prop = KeplerPropagator()

    first = prop.propagate(CALIBRATION, MU, 1800.0)
    prop.propagate(HYPERBOLIC, MU, 900.0)
    again = prop.propagate(CALIBRATION, MU, 1800.0)

    assert first == again


def test_degenerate_state_raises():
    state = CartesianState(r=[7000e3, 0.0, 0.0], v=[-1000.0, 0.0, 0.0])

    with pytest.raises(DegenerateOrbitError):
        KeplerPropagator().propagate(state, MU, 60.0)


def test_convergence_failure_is_surfaced():
    prop = _make_prop(tol=1e-15, max_iter=1)

    with pytest.raises(ConvergenceError):
        prop.propagate(CALIBRATION, MU, 1000.0)

import logging
from dataclasses import replace

import numpy as np

from kepler.conversion import cartesian_to_kepler, kepler_to_cartesian
from kepler.kepler import (
    DEFAULT_CONFIG,
    TWOPI,
    anomaly_to_true,
    solve_kepler,
    true_to_mean,
    wrap_to_pi,
)
from kepler.keplerelement import OrbitType

logger = logging.getLogger(__name__)


def mean_motion(el, mu, orbit_type):
    """n for the kepler equation of each branch (rad/s)"""
    if orbit_type.is_closed:
        return float(np.sqrt(mu / el.a**3))
    if orbit_type is OrbitType.HYPERBOLIC:
        return float(np.sqrt(mu / (-el.a)**3))
    # barker: D + D^3/3 = 2 sqrt(mu/p^3) (t - T)
    return float(2.0 * np.sqrt(mu / el.p**3))


class KeplerPropagator:
    """
    Analytic two-body propagator.

    Only the anomaly changes, a, e, i, raan and w are held fixed. No state
    is kept between calls, propagate() is a pure function of its inputs.
    """

    def __init__(self, cfg=DEFAULT_CONFIG):
        self.cfg = cfg

    def _orbit_type(self, el):
        return el.orbit_type(self.cfg.orbit_type_tol)

    def propagate(self, state, mu, dt):
        """ propagate the state by dt seconds (dt < 0 goes backwards) """
        el = cartesian_to_kepler(state, mu, self.cfg)
        orbit_type = self._orbit_type(el)

        M0 = true_to_mean(el.nu, el.e, orbit_type)
        M = M0 + mean_motion(el, mu, orbit_type) * dt
        if orbit_type.is_closed:
            M = wrap_to_pi(M)

        E = solve_kepler(M, el.e, orbit_type, self.cfg)
        nu = anomaly_to_true(E, el.e, orbit_type)

        logger.debug("%s orbit: M0=%.12f M=%.12f nu=%.12f dt=%s", orbit_type.value, M0, M, nu, dt)

        return kepler_to_cartesian(replace(el, nu=nu), mu)

    def period(self, state, mu):
        """orbital period 2pi sqrt(a^3/mu), closed orbits only"""
        el = cartesian_to_kepler(state, mu, self.cfg)
        orbit_type = self._orbit_type(el)
        if not orbit_type.is_closed:
            raise ValueError(f"A {orbit_type.value} orbit has no period.")
        return TWOPI / mean_motion(el, mu, orbit_type)


def propagate(state, mu, dt, cfg=None):
    return KeplerPropagator(cfg or DEFAULT_CONFIG).propagate(state, mu, dt)

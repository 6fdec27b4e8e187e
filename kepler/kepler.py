import logging
import math
from dataclasses import dataclass

import numpy as np

from kepler.errors import ConvergenceError, InvalidConfigurationError
from kepler.keplerelement import OrbitType

logger = logging.getLogger(__name__)

TWOPI = 2.0 * np.pi


@dataclass(frozen=True)
class KeplerConfig:
    tol: float = 1e-12  # newton stop: |f| and |dx| below tol (|f| scaled by max(1, |M|) for hyperbolas)
    max_iter: int = 100  # newton iteration cap

    orbit_type_tol: float = 1e-11  # e ~ 0 and e ~ 1 comparisons
    equatorial_tol: float = 1e-11  # |n| <= tol * |h| -> equatorial, i.e. sin(i) <= tol

    angular_momentum_floor: float = 1e-10  # |h| <= floor * |r| * |v| -> degenerate

    def __post_init__(self):
        if not self.tol > 0.0:
            raise InvalidConfigurationError(f"tol must be positive. Got: {self.tol}")
        if int(self.max_iter) != self.max_iter or self.max_iter < 1:
            raise InvalidConfigurationError(f"max_iter must be a positive integer. Got: {self.max_iter}")
        if not self.orbit_type_tol >= 0.0:
            raise InvalidConfigurationError(f"orbit_type_tol must be non-negative. Got: {self.orbit_type_tol}")
        if not 0.0 <= self.equatorial_tol < 1.0:
            raise InvalidConfigurationError(f"equatorial_tol must be in [0, 1). Got: {self.equatorial_tol}")
        if not self.angular_momentum_floor >= 0.0:
            raise InvalidConfigurationError(
                f"angular_momentum_floor must be non-negative. Got: {self.angular_momentum_floor}"
            )


DEFAULT_CONFIG = KeplerConfig()


def wrap_to_pi(angle):
    """wrap angle to [-pi, pi], exact for angles already in range"""
    return math.remainder(angle, TWOPI)


def _x_minus_sin(x):
    """x - sin(x) without the cancellation near x = 0"""
    if abs(x) >= 1.0:
        return x - np.sin(x)
    x2 = x * x
    term = x * x2 / 6.0
    total = 0.0
    for k in range(4, 24, 2):
        total += term
        term *= -x2 / (k * (k + 1))
    return total


def _sinh_minus_x(x):
    """sinh(x) - x without the cancellation near x = 0"""
    if abs(x) >= 1.0:
        return np.sinh(x) - x
    x2 = x * x
    term = x * x2 / 6.0
    total = 0.0
    for k in range(4, 24, 2):
        total += term
        term *= x2 / (k * (k + 1))
    return total


def _newton(f, fp, x, M, e, cfg, res_tol):
    """
    Newton-Raphson on f(x) = 0.

    Stops when the residual is below res_tol and the step is below
    tol * max(1, |x|). Near e = 1 the slope at periapsis goes to 0, so a small
    residual alone does not pin x down.
    """
    #https://en.wikipedia.org/wiki/Kepler%27s_equation#Numerical_approximation_of_inverse_problem
    for it in range(cfg.max_iter + 1):
        res = f(x)
        dx = res / fp(x)
        if abs(res) < res_tol and abs(dx) < cfg.tol * max(1.0, abs(x)):
            return x - dx
        if it == cfg.max_iter:
            break
        x -= dx

    logger.debug("newton failed: M=%r e=%r x=%r residual=%r step=%r", M, e, x, res, dx)
    raise ConvergenceError(M, e, cfg.max_iter, abs(res))


def kepler_solve_E(M, e, cfg=DEFAULT_CONFIG):
    """newton's method for the elliptic kepler equation M = E - e sin(E)"""
    if e < 0.8:
        E = float(M)
    else:
        # danby's seed, on the side of the root newton approaches monotonically
        E = float(M + 0.85 * e * np.sign(np.sin(M)))

    # (1 - e) E + e (E - sin E) keeps its precision as e -> 1, E -> 0
    return _newton(
        lambda E: (1.0 - e) * E + e * _x_minus_sin(E) - M,
        lambda E: (1.0 - e) + 2.0 * e * np.sin(E / 2.0) ** 2,
        E, M, e, cfg, cfg.tol,
    )


def kepler_solve_H(M, e, cfg=DEFAULT_CONFIG):
    """newton's method for the hyperbolic kepler equation M = e sinh(H) - H"""
    # seed from the large |M| asymptote, lands on the convex side for small |M|
    H = float(np.sign(M) * np.log(2.0 * abs(M) / e + 1.8))

    # |M| is unbounded here, the residual can only be resolved relative to it
    return _newton(
        lambda H: (e - 1.0) * H + e * _sinh_minus_x(H) - M,
        lambda H: (e - 1.0) + 2.0 * e * np.sinh(H / 2.0) ** 2,
        H, M, e, cfg, cfg.tol * max(1.0, abs(M)),
    )


def barker_solve_D(M):
    """
    Closed form root of Barker's equation M = D + D^3/3, D = tan(nu/2).

    With D = Y - 1/Y the equation becomes Y^3 - Y^-3 = 3M, a quadratic in Y^3.
    """
    W = 1.5 * M
    root = np.sqrt(W * W + 1.0)
    # avoid cancellation in W + sqrt(W^2 + 1) for large negative W
    u = W + root if W >= 0.0 else 1.0 / (root - W)
    Y = np.cbrt(u)
    return float(Y - 1.0 / Y)


def solve_kepler(M, e, orbit_type, cfg=DEFAULT_CONFIG):
    """
    Eccentric (elliptic), hyperbolic or parabolic anomaly for mean anomaly M.

    Circular orbits skip the iteration, E = M.
    """
    if orbit_type is OrbitType.CIRCULAR:
        return float(M)
    if orbit_type is OrbitType.ELLIPTICAL:
        return kepler_solve_E(M, e, cfg)
    if orbit_type is OrbitType.HYPERBOLIC:
        return kepler_solve_H(M, e, cfg)
    if orbit_type is OrbitType.PARABOLIC:
        return barker_solve_D(M)
    raise ValueError(f"Unknown orbit type: {orbit_type!r}")


def true_to_anomaly(nu, e, orbit_type):
    """true anomaly -> E, H or D depending on the branch"""
    if orbit_type.is_closed:
        return float(2.0 * np.arctan2(np.sqrt(1.0 - e) * np.sin(nu / 2.0),
                                      np.sqrt(1.0 + e) * np.cos(nu / 2.0)))
    if orbit_type is OrbitType.HYPERBOLIC:
        return float(2.0 * np.arctanh(np.sqrt((e - 1.0) / (e + 1.0)) * np.tan(nu / 2.0)))
    return float(np.tan(nu / 2.0))


def anomaly_to_true(E, e, orbit_type):
    """E, H or D -> true anomaly"""
    if orbit_type.is_closed:
        return float(2.0 * np.arctan2(np.sqrt(1.0 + e) * np.sin(E / 2.0),
                                      np.sqrt(1.0 - e) * np.cos(E / 2.0)))
    if orbit_type is OrbitType.HYPERBOLIC:
        return float(2.0 * np.arctan2(np.sqrt(e + 1.0) * np.sinh(E / 2.0),
                                      np.sqrt(e - 1.0) * np.cosh(E / 2.0)))
    return float(2.0 * np.arctan(E))


def anomaly_to_mean(E, e, orbit_type):
    """left hand side of the kepler equation for each branch"""
    # same split as the newton residuals, so propagating by 0 s is exact near e = 1
    if orbit_type.is_closed:
        return float((1.0 - e) * E + e * _x_minus_sin(E))
    if orbit_type is OrbitType.HYPERBOLIC:
        return float((e - 1.0) * E + e * _sinh_minus_x(E))
    return float(E + E ** 3 / 3.0)


def true_to_mean(nu, e, orbit_type):
    return anomaly_to_mean(true_to_anomaly(nu, e, orbit_type), e, orbit_type)

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OrbitType(Enum):
    CIRCULAR = "circular"
    ELLIPTICAL = "elliptical"
    PARABOLIC = "parabolic"
    HYPERBOLIC = "hyperbolic"

    @property
    def is_closed(self):
        return self in (OrbitType.CIRCULAR, OrbitType.ELLIPTICAL)


def classify_orbit(e, tol=1e-11):
    """orbit type from eccentricity, |e - 0| and |e - 1| compared against tol"""
    if e < 0.0:
        raise ValueError(f"Eccentricity must be non-negative. Got: {e}")
    if e <= tol:
        return OrbitType.CIRCULAR
    if abs(e - 1.0) <= tol:
        return OrbitType.PARABOLIC
    if e < 1.0:
        return OrbitType.ELLIPTICAL
    return OrbitType.HYPERBOLIC


@dataclass(frozen=True)
class KeplerElements:
    """
    Classical orbital elements, SI units and radians.

    a is None for parabolic orbits (only p is defined there) and negative
    for hyperbolic ones. nu is the true anomaly, measured from the node
    (circular) or from the x axis (circular equatorial) when periapsis is
    undefined.
    """

    a: Optional[float]  # semi-major axis
    e: float  # eccentricity
    i: float  # inclination
    raan: float  # right ascension of ascending node
    w: float  # argument of periapsis
    nu: float  # true anomaly
    p: float  # semi-latus rectum

    def __post_init__(self):
        if not (math.isfinite(self.e) and self.e >= 0.0):
            raise ValueError(f"Eccentricity must be finite and non-negative. Got: {self.e}")
        if not (math.isfinite(self.p) and self.p > 0.0):
            raise ValueError(f"Semi-latus rectum must be positive. Got: {self.p}")
        if self.a is not None and not (math.isfinite(self.a) and self.a != 0.0):
            raise ValueError(f"Semi-major axis must be finite and nonzero. Got: {self.a}")
        if not (0.0 <= self.i <= math.pi):
            raise ValueError(f"Inclination must be in range [0, π] radians. Got: {self.i}")
        for name in ("raan", "w", "nu"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite. Got: {getattr(self, name)}")

    def orbit_type(self, tol=1e-11):
        if self.a is None:
            return OrbitType.PARABOLIC
        return classify_orbit(self.e, tol)

    def __str__(self):
        a = "undefined (parabolic)" if self.a is None else f"{self.a:.3f} m"
        return (
            f"Kepler Elements:\n"
            f"  Semi-major Axis (a): {a}\n"
            f"  Eccentricity (e): {self.e:.6f}\n"
            f"  Inclination (i): {self.i:.6f} rad\n"
            f"  RAAN (Ω): {self.raan:.6f} rad\n"
            f"  Argument of Periapsis (ω): {self.w:.6f} rad\n"
            f"  True Anomaly (ν): {self.nu:.6f} rad\n"
            f"  Semi-latus Rectum (p): {self.p:.3f} m"
        )

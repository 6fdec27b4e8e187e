import math
from dataclasses import dataclass

from kepler.state import CartesianState


@dataclass(frozen=True)
class CentralBody:
    name: str
    mu: float  # m^3/s^2 gravitational parameter G*M

    def __post_init__(self):
        if not (math.isfinite(self.mu) and self.mu > 0.0):
            raise ValueError(f"Gravitational parameter must be positive. Got: {self.mu}")


@dataclass(frozen=True)
class PropagatedBody:
    """A body's initial state paired with the central body it orbits (not owned)."""

    name: str
    state: CartesianState
    central_body: CentralBody


EARTH = CentralBody(name="Earth", mu=3.986004418e14)  # m^3/s^2 standard gravitational parameter for Earth

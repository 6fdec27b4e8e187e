from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class CartesianState:
    """Position [m] and velocity [m/s] of a body, state = [r(3), v(3)]."""

    r: np.ndarray
    v: np.ndarray

    def __post_init__(self):
        r = np.array(self.r, dtype=float, copy=True).reshape(-1)
        v = np.array(self.v, dtype=float, copy=True).reshape(-1)

        if r.shape != (3,) or v.shape != (3,):
            raise ValueError(f"r and v must be 3-vectors, got {r.shape} and {v.shape}")
        if not (np.all(np.isfinite(r)) and np.all(np.isfinite(v))):
            raise ValueError("Cartesian state components must be finite.")

        # frozen dataclass, so go through object.__setattr__
        object.__setattr__(self, "r", r)
        object.__setattr__(self, "v", v)

    @classmethod
    def from_array(cls, x):
        """x = [x, y, z, vx, vy, vz]"""
        x = np.asarray(x, dtype=float).reshape(-1)
        if x.shape != (6,):
            raise ValueError(f"Expected a 6 element state, got shape {x.shape}")
        return cls(r=x[:3], v=x[3:])

    @property
    def state(self):
        return np.hstack((self.r, self.v))

    @property
    def r_norm(self):
        return float(np.linalg.norm(self.r))

    @property
    def v_norm(self):
        return float(np.linalg.norm(self.v))

    def __eq__(self, other):
        if not isinstance(other, CartesianState):
            return NotImplemented
        return bool(np.array_equal(self.state, other.state))

    def __str__(self):
        return (
            f"Cartesian State:\n"
            f"  r: [{self.r[0]:.6f}, {self.r[1]:.6f}, {self.r[2]:.6f}] m\n"
            f"  v: [{self.v[0]:.9f}, {self.v[1]:.9f}, {self.v[2]:.9f}] m/s"
        )

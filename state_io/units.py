import numpy as np

from kepler.state import CartesianState
from simulator.history import TrajectoryHistory

KM = 1000.0  # m


def km_to_m(x):
    """state in km, km/s -> m, m/s (CartesianState or array-like)"""
    if isinstance(x, CartesianState):
        return CartesianState(r=x.r * KM, v=x.v * KM)
    return np.asarray(x, dtype=float) * KM


def m_to_km(x):
    """state in m, m/s -> km, km/s"""
    if isinstance(x, CartesianState):
        return CartesianState(r=x.r / KM, v=x.v / KM)
    return np.asarray(x, dtype=float) / KM


def history_m_to_km(history):
    """copy of a history with every sample converted to km, km/s"""
    out = TrajectoryHistory(history.interval, t_start=history.t_start)
    for k in history.indices():
        out.add(k, m_to_km(history.state_at_index(k)))
    return out

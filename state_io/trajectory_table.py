# read/write benchmark trajectory tables: one row per tick, "t x y z vx vy vz"

import logging
from pathlib import Path

import numpy as np

from simulator.history import TrajectoryHistory

logger = logging.getLogger(__name__)


def load_trajectory_table(path, interval):
    """
    Load a whitespace separated table into a TrajectoryHistory.

    Row k is keyed by k * interval, the first column (elapsed time) is only
    checked against that key.
    """
    path = Path(path)
    data = np.loadtxt(path, dtype=float, ndmin=2)

    if data.size == 0:
        raise ValueError(f"No samples in trajectory table {path}")
    if data.shape[1] != 7:
        raise ValueError(f"Expected 7 columns (t, x, y, z, vx, vy, vz) in {path}, got {data.shape[1]}")

    history = TrajectoryHistory(interval)
    for k, row in enumerate(data):
        if abs(row[0] - k * interval) > 1e-6 * max(1.0, abs(row[0])):
            raise ValueError(f"Row {k} of {path} has t={row[0]}, expected {k * interval}")
        history.add(k, row[1:])

    logger.debug("loaded %d samples from %s", len(history), path)
    return history


def save_trajectory_table(history, path, fmt="%.10f"):
    path = Path(path)
    np.savetxt(path, history.as_array(), fmt=fmt)
    logger.debug("wrote %d samples to %s", len(history), path)


def compare_trajectories(history, reference):
    """
    Absolute difference of every state component, shape (N, 6).

    Both histories must cover the same elapsed times. Every sample is
    compared, from t = 0 up to and including the last tick.
    """
    if len(history) != len(reference) or not np.allclose(history.times, reference.times, rtol=0.0, atol=1e-6):
        raise ValueError(
            f"Trajectories cover different times: {len(history)} vs {len(reference)} samples"
        )

    ours = history.as_array()[:, 1:]
    theirs = reference.as_array()[:, 1:]
    return np.abs(ours - theirs)

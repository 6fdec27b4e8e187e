import numpy as np

from kepler.state import CartesianState


class TrajectoryHistory:
    """
    Samples of a fixed-interval propagation keyed by elapsed time.

    Keys are stored as integer sample indices, elapsed time = index * interval
    only shows up at the interface, so lookups never depend on float equality.
    """

    def __init__(self, interval, t_start=0.0):
        if interval <= 0.0:
            raise ValueError(f"interval must be positive. Got: {interval}")
        self.interval = float(interval)
        self.t_start = float(t_start)
        self._samples = {}

    def _index(self, t):
        k = int(round(t / self.interval))
        if k < 0 or abs(k * self.interval - t) > 1e-9 * max(1.0, abs(t)):
            raise KeyError(t)
        return k

    def add(self, index, state):
        if self._samples and index <= next(reversed(self._samples)):
            raise ValueError(f"Samples must be added in increasing order, got index {index}")
        if not isinstance(state, CartesianState):
            state = CartesianState.from_array(state)
        self._samples[index] = state

    def __getitem__(self, t):
        """state at elapsed time t (seconds since the start of the series)"""
        try:
            return self._samples[self._index(t)]
        except KeyError:
            raise KeyError(f"No sample at elapsed time {t} s") from None

    def __contains__(self, t):
        try:
            return self._index(t) in self._samples
        except KeyError:
            return False

    def __len__(self):
        return len(self._samples)

    def __iter__(self):
        return iter(self.times)

    def items(self):
        for k, state in self._samples.items():
            yield k * self.interval, state

    def indices(self):
        return list(self._samples)

    def state_at_index(self, index):
        return self._samples[index]

    @property
    def times(self):
        """elapsed times [s] of the samples"""
        return np.array([k * self.interval for k in self._samples], dtype=float)

    @property
    def epochs(self):
        """absolute times [s], t_start + elapsed"""
        return self.t_start + self.times

    def as_array(self):
        """rows of [t, x, y, z, vx, vy, vz], same layout as the benchmark tables"""
        if not self._samples:
            return np.empty((0, 7))
        return np.array([np.hstack((t, s.state)) for t, s in self.items()])

    def __repr__(self):
        return f"TrajectoryHistory(n={len(self)}, interval={self.interval})"

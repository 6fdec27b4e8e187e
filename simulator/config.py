import math
from dataclasses import dataclass

from kepler.errors import InvalidConfigurationError


def check_series_params(t_start, t_end, interval):
    """finite times, positive interval, t_end after t_start"""
    for name, value in (("t_start", t_start), ("t_end", t_end), ("interval", interval)):
        if not math.isfinite(value):
            raise InvalidConfigurationError(f"{name} must be finite. Got: {value}")
    if interval <= 0.0:
        raise InvalidConfigurationError(f"interval must be positive. Got: {interval}")
    if t_end <= t_start:
        raise InvalidConfigurationError(f"t_end must be after t_start. Got: t_start={t_start}, t_end={t_end}")


def series_tick_count(t_start, t_end, interval):
    """number of output samples, the tick at t_end included when it lands on the grid"""
    span = (t_end - t_start) / interval
    return int(math.floor(span + 1e-9)) + 1


@dataclass(frozen=True)
class SeriesConfig:
    t_start: float  # s
    t_end: float  # s

    interval: float  # fixed output interval, s

    def __post_init__(self):
        check_series_params(self.t_start, self.t_end, self.interval)

    @property
    def n_ticks(self):
        return series_tick_count(self.t_start, self.t_end, self.interval)

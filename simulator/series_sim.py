import logging
from enum import Enum
from time import perf_counter

from kepler.errors import (
    ConvergenceError,
    DegenerateOrbitError,
    PropagationCancelledError,
    PropagationStateError,
)
from simulator.config import check_series_params, series_tick_count
from simulator.history import TrajectoryHistory

logger = logging.getLogger(__name__)


class SeriesStatus(Enum):
    CONFIGURED = "configured"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class SeriesPropagator:
    # fixed output interval propagation loop

    def __init__(self, propagator, body, cfg):

        self.propagator = propagator  # KeplerPropagator-like: propagate(state, mu, dt) -> state
        self.body = body  # PropagatedBody, initial state + central body
        # checked again here, cfg may be any object with t_start, t_end, interval
        check_series_params(cfg.t_start, cfg.t_end, cfg.interval)
        self.cfg = cfg  # SeriesConfig

        self.status = SeriesStatus.CONFIGURED
        self.partial_history = None
        self.error = None
        self._history = None

    def execute(self, cancel=None):
        """
        Propagate the initial state to every output tick.

        Every tick is measured from the initial epoch, t_k = t_start + k * interval,
        not chained from the previous sample. cancel is anything with is_set()
        (threading.Event) and is checked between ticks.

        On a failed tick the run goes to FAILED and the error is re-raised with
        tick, elapsed and partial_history attached.
        """
        if self.status is not SeriesStatus.CONFIGURED:
            raise PropagationStateError(f"execute() needs a configured run, status is {self.status.value}")

        t_wall0 = perf_counter()
        self.status = SeriesStatus.RUNNING

        n_ticks = series_tick_count(self.cfg.t_start, self.cfg.t_end, self.cfg.interval)
        interval = self.cfg.interval
        x0 = self.body.state
        mu = self.body.central_body.mu

        history = TrajectoryHistory(interval, t_start=self.cfg.t_start)

        logger.info(
            "series propagation of %s about %s: t=[%s, %s] s every %s s (%d ticks)",
            self.body.name, self.body.central_body.name,
            self.cfg.t_start, self.cfg.t_end, interval, n_ticks,
        )

        for k in range(n_ticks):
            elapsed = k * interval

            if cancel is not None and cancel.is_set():
                err = PropagationCancelledError(f"Series propagation cancelled before tick {k} (t={elapsed} s)")
                self._fail(err, k, elapsed, history)
                raise err

            try:
                x = self.propagator.propagate(x0, mu, elapsed)
            except (DegenerateOrbitError, ConvergenceError) as err:
                self._fail(err, k, elapsed, history)
                raise

            history.add(k, x)
            logger.debug("tick %d t=%s s |r|=%.3f m |v|=%.6f m/s", k, elapsed, x.r_norm, x.v_norm)

        self._history = history
        self.status = SeriesStatus.COMPLETED

        logger.info("series propagation finished: %d samples in %.3f s wall", len(history), perf_counter() - t_wall0)

    def _fail(self, err, tick, elapsed, history):
        err.tick = tick
        err.elapsed = elapsed
        err.partial_history = history

        self.partial_history = history
        self.error = err
        self.status = SeriesStatus.FAILED

        logger.error("series propagation failed at tick %d (t=%s s): %s", tick, elapsed, err)

    def get_propagation_history(self):
        """history of a completed run, handed over to the caller"""
        if self.status is not SeriesStatus.COMPLETED:
            raise PropagationStateError(f"No propagation history, status is {self.status.value}")
        if self._history is None:
            raise PropagationStateError("Propagation history was already handed over.")

        history = self._history
        self._history = None
        return history

class KeplerPropagationError(Exception):
    """base for everything raised by the kepler / simulator packages"""


class InvalidConfigurationError(KeplerPropagationError, ValueError):
    """bad solver or series parameters, raised before anything is computed"""


class DegenerateOrbitError(KeplerPropagationError):
    """angular momentum (or r itself) vanishes, no orbit plane exists"""


class ConvergenceError(KeplerPropagationError):
    """Newton-Raphson hit max_iter without meeting the tolerance"""

    def __init__(self, M, e, iterations, residual):
        self.M = M
        self.e = e
        self.iterations = iterations
        self.residual = residual
        super().__init__(
            f"Kepler solver did not converge for M={M:.6e}, e={e:.6e} "
            f"after {iterations} iterations (residual {residual:.3e})"
        )


class PropagationCancelledError(KeplerPropagationError):
    """series run stopped through its cancel flag"""


class PropagationStateError(KeplerPropagationError, RuntimeError):
    """series propagator used out of order (e.g. history before completion)"""

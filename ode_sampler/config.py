import numbers
from typing import Any, Dict, Sequence, Text, Union

import numpy as np

from ode_sampler import defaults
from ode_sampler.algorithms import Algorithm, get_algorithm
from ode_sampler.constants import ConfigKeys
from ode_sampler.exceptions import ConfigurationError
from ode_sampler.stepfunctions import SingleStepMethod
from ode_sampler.types import TimeSpan

__all__ = ["SolverConfig"]


def _positive_float(name: Text, value: Any) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError("{0} must be a positive float, got {1!r}.".format(name, value))

    if not np.isfinite(value) or value <= 0.0:
        raise ConfigurationError("{0} must be a positive float, got {1}.".format(name, value))

    return value


class SolverConfig:
    """
    Configuration of a single solve. All arguments are optional and validated on construction,
    so that misconfiguration surfaces before any integration work is done.
    """

    def __init__(self,
                 alg: Union[Text, Algorithm, SingleStepMethod] = None,
                 reltol: float = None,
                 abstol: float = None,
                 saveat: Union[float, Sequence[float], np.ndarray] = None,
                 dt: float = None,
                 max_steps: int = None,
                 dense: bool = False,
                 **solver_options):
        """
        SolverConfig constructor.

        Args:
            alg: Algorithm selector, see ode_sampler.algorithms.get_algorithm.
            reltol: Relative tolerance for adaptive step size control.
            abstol: Absolute tolerance for adaptive step size control.
            saveat: Either an ordered sequence of times to sample the solution at, or a positive
             scalar spacing of a uniform sample grid.
            dt: Step size. Required for fixed-step algorithms, used as the initial step size proposal
             for adaptive ones.
            max_steps: Maximum number of integration steps in a solve.
            dense: Whether to keep a dense interpolant of the solution.
            **solver_options: Additional keyword arguments for the scipy integrator,
             e.g. max_step or first_step.

        Raises:
            ConfigurationError: On any invalid option.
        """
        self.algorithm = get_algorithm(alg)

        self.reltol = _positive_float("reltol", defaults.RELTOL if reltol is None else reltol)
        self.abstol = _positive_float("abstol", defaults.ABSTOL if abstol is None else abstol)

        self.dt = None if dt is None else _positive_float("dt", dt)

        if max_steps is None:
            max_steps = defaults.MAX_STEPS
        if isinstance(max_steps, bool) or not isinstance(max_steps, numbers.Integral) or max_steps <= 0:
            raise ConfigurationError("max_steps must be a positive integer, got {!r}.".format(max_steps))
        self.max_steps = int(max_steps)

        self.dense = bool(dense)

        if not self.algorithm.is_adaptive:
            if self.dt is None:
                raise ConfigurationError("Fixed-step algorithm {} requires a step size "
                                         "dt.".format(self.algorithm.name))
            if self.dense:
                raise ConfigurationError("Dense output is only available for adaptive "
                                         "algorithms, got {}.".format(self.algorithm.name))
            if solver_options:
                raise ConfigurationError("Fixed-step algorithm {0} does not accept solver "
                                         "options {1}.".format(self.algorithm.name, sorted(solver_options)))
        elif self.dt is not None:
            solver_options.setdefault("first_step", self.dt)

        self.saveat = saveat
        self.solver_options = solver_options

    def resolve_saveat(self, tspan: TimeSpan) -> Union[None, np.ndarray]:
        """
        Turn the saveat option into an array of sample times for the given time span.

        Args:
            tspan: Ordered pair (t_start, t_end).

        Returns:
            None if no sample times were configured, otherwise a 1-D float array.

        Raises:
            ConfigurationError: If the sample times are unordered or outside the time span.
        """
        if self.saveat is None:
            return None

        t0, t1 = tspan

        if np.ndim(self.saveat) == 0:
            spacing = _positive_float("saveat", self.saveat)
            num = int(np.floor((t1 - t0) / spacing))
            grid = t0 + spacing * np.arange(num + 1)
            # drop only round-off duplicates of the end point, which is appended exactly
            tol = max(1e-10 * spacing, 8 * np.finfo(np.float64).eps * max(abs(t0), abs(t1)))
            grid = grid[t1 - grid > tol]
            return np.append(grid, t1)

        try:
            saveat = np.asarray(self.saveat, dtype=np.float64)
        except (TypeError, ValueError):
            raise ConfigurationError("saveat must be a sequence of numbers.")

        if saveat.ndim != 1 or len(saveat) == 0:
            raise ConfigurationError("saveat must be a non-empty one-dimensional sequence of times.")

        if not np.all(np.isfinite(saveat)):
            raise ConfigurationError("saveat must contain finite values only.")

        if np.any(np.diff(saveat) < 0):
            raise ConfigurationError("saveat must be sorted in non-decreasing order.")

        if saveat[0] < t0 or saveat[-1] > t1:
            raise ConfigurationError("saveat values must lie within the time span "
                                     "[{0}, {1}], got [{2}, {3}].".format(t0, t1, saveat[0], saveat[-1]))

        return saveat

    def to_dict(self) -> Dict[Text, Any]:
        """
        Return a JSON-serializable dict representation of the config.
        """
        saveat = self.saveat
        if saveat is not None:
            saveat = np.asarray(saveat, dtype=np.float64).tolist()

        return {ConfigKeys.ALGORITHM: self.algorithm.name,
                ConfigKeys.LOOP_TYPE: self.algorithm.loop_type,
                ConfigKeys.RELTOL: self.reltol,
                ConfigKeys.ABSTOL: self.abstol,
                ConfigKeys.SAVEAT: saveat,
                ConfigKeys.STEP_SIZE: self.dt,
                ConfigKeys.MAX_STEPS: self.max_steps,
                ConfigKeys.DENSE: self.dense,
                ConfigKeys.SOLVER_OPTIONS: {k: repr(v) for k, v in self.solver_options.items()}}

    def __repr__(self):
        return "SolverConfig(alg={0!r}, reltol={1}, abstol={2}, dt={3}, max_steps={4})".format(
            self.algorithm.name, self.reltol, self.abstol, self.dt, self.max_steps)

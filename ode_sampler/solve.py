"""
The solve entry point: pose an initial value problem and sample its solution.
"""
import copy
from typing import Sequence, Union

import numpy as np

from ode_sampler.config import SolverConfig
from ode_sampler.exceptions import ConfigurationError
from ode_sampler.integrators import integrate
from ode_sampler.models import ODEModel
from ode_sampler.trajectory import Trajectory
from ode_sampler.types import Parameters, RHSFunction, TimeSpan
from ode_sampler.utils.helpers import is_scalar

__all__ = ["ODEProblem", "solve"]


def _validate_tspan(tspan) -> TimeSpan:
    try:
        t0, t1 = tspan
        t0, t1 = float(t0), float(t1)
    except (TypeError, ValueError):
        raise ConfigurationError("tspan must be a pair (t_start, t_end) of numbers, "
                                 "got {!r}.".format(tspan))

    if not (np.isfinite(t0) and np.isfinite(t1)):
        raise ConfigurationError("tspan must be finite, got ({0}, {1}).".format(t0, t1))

    if t0 > t1:
        raise ConfigurationError("The end of the time span has to be larger than its "
                                 "start, got ({0}, {1}).".format(t0, t1))

    return t0, t1


def _validate_u0(u0):
    try:
        arr = np.asarray(u0, dtype=np.float64)
    except (TypeError, ValueError):
        raise ConfigurationError("Initial state must be numeric, got {!r}.".format(u0))

    scalar = is_scalar(arr)
    arr = np.atleast_1d(arr).copy()

    if arr.ndim != 1:
        raise ConfigurationError("Initial state must be a scalar or a one-dimensional vector, "
                                 "got an array of shape {}.".format(arr.shape))

    if arr.size == 0:
        raise ConfigurationError("Initial state must not be empty.")

    if not np.all(np.isfinite(arr)):
        raise ConfigurationError("Initial state must be finite.")

    return arr, scalar


class ODEProblem:
    """
    An initial value problem u'(t) = f(u, p, t), u(t_start) = u0 on the time span
    [t_start, t_end].

    Construction validates the time span and the initial state and probes the derivative
    function once, so that shape mismatches surface before any integration.

    Attributes:
        model: ODEModel wrapping the derivative function.
        u0: Initial state as a 1-D float array.
        tspan: Time span (t_start, t_end).
        scalar: Whether the problem was posed with a scalar initial state.
    """

    def __init__(self,
                 f: Union[RHSFunction, ODEModel],
                 u0: Union[float, Sequence[float], np.ndarray],
                 tspan: TimeSpan,
                 p: Parameters = None,
                 compile: bool = False):
        """
        ODEProblem constructor.

        Args:
            f: Derivative function f(u, p, t) or f(du, u, p, t), or an ODEModel.
            u0: Initial state, a scalar or a non-empty vector.
            tspan: Ordered pair (t_start, t_end).
            p: Parameters passed unchanged to f. Overrides the parameters of a given ODEModel.
            compile: Whether to compile f with numba. Ignored if f is an ODEModel.

        Raises:
            ConfigurationError: On invalid input.
        """
        self.tspan = _validate_tspan(tspan)
        self.u0, self.scalar = _validate_u0(u0)

        if isinstance(f, ODEModel):
            model = copy.copy(f)
            if p is not None:
                model.update_params(p)
        else:
            model = ODEModel(ode_fn=f, params=p, compile=compile)

        model.initialize(self.u0, t0=self.tspan[0], scalar=self.scalar)

        self.model = model

    @property
    def p(self) -> Parameters:
        return self.model.params

    @property
    def dim(self) -> int:
        return len(self.u0)

    def remake(self, u0=None, tspan=None, p=None) -> "ODEProblem":
        """
        Return a new problem with some of the fields replaced.
        """
        if u0 is None:
            u0 = self.u0[0] if self.scalar else self.u0
        return ODEProblem(self.model,
                          u0=u0,
                          tspan=self.tspan if tspan is None else tspan,
                          p=self.p if p is None else p)

    def solve(self, **kwargs) -> Trajectory:
        """
        Solve the problem, see ode_sampler.solve for the keyword arguments.
        """
        return solve(self, **kwargs)

    def __repr__(self):
        return "ODEProblem(dim={0}, tspan={1}, scalar={2})".format(self.dim, self.tspan, self.scalar)


def solve(f: Union[RHSFunction, ODEModel, ODEProblem],
          u0=None,
          tspan: TimeSpan = None,
          p: Parameters = None,
          alg=None,
          reltol: float = None,
          abstol: float = None,
          saveat=None,
          dt: float = None,
          max_steps: int = None,
          dense: bool = False,
          progress_bar: bool = False,
          **solver_options) -> Trajectory:
    """
    Solve an initial value problem and return the sampled trajectory.

    Args:
        f: Derivative function f(u, p, t) or f(du, u, p, t), an ODEModel, or a complete ODEProblem
         (in which case u0, tspan and p must be omitted).
        u0: Initial state, a scalar or a non-empty vector.
        tspan: Ordered pair (t_start, t_end).
        p: Parameters passed unchanged to f.
        alg: Algorithm name from ode_sampler.algorithms, an Algorithm, or a step function instance.
         Defaults to "RK45".
        reltol: Relative tolerance, defaults to 1e-3.
        abstol: Absolute tolerance, defaults to 1e-6.
        saveat: Ordered sample times within tspan, or a positive uniform sample spacing. If not
         given, the accepted integration steps are returned.
        dt: Step size, required for fixed-step algorithms.
        max_steps: Integration step budget.
        dense: Whether to keep a dense interpolant, making the trajectory callable.
        progress_bar: Bool, whether to display a progress bar.
        **solver_options: Additional keyword arguments for the scipy integrator.

    Returns:
        The sampled trajectory.

    Raises:
        ConfigurationError: On invalid input, before integration starts.
        NumericalFailure: If the integration cannot be completed. Carries the partial trajectory.
    """
    if isinstance(f, ODEProblem):
        if any(arg is not None for arg in (u0, tspan, p)):
            raise ConfigurationError("u0, tspan and p are taken from the ODEProblem and must not "
                                     "be given separately.")
        problem = f
    else:
        if u0 is None or tspan is None:
            raise ConfigurationError("Both an initial state u0 and a time span tspan are required.")
        problem = ODEProblem(f, u0=u0, tspan=tspan, p=p)

    config = SolverConfig(alg=alg,
                          reltol=reltol,
                          abstol=abstol,
                          saveat=saveat,
                          dt=dt,
                          max_steps=max_steps,
                          dense=dense,
                          **solver_options)

    return integrate(problem=problem, config=config, progress_bar=progress_bar)

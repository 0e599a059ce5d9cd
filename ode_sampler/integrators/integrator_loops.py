import logging
from typing import List

import numpy as np
from scipy.integrate import OdeSolution
from tqdm import trange

from ode_sampler.exceptions import ConfigurationError, NumericalFailure
from ode_sampler.trajectory import Trajectory

__all__ = ["adaptive_loop", "fixed_step_loop"]

progress_funcs = {True: trange, False: range}

logger = logging.getLogger(__name__)


def _make_trajectory(problem,
                     config,
                     ts: List[float],
                     ys: List[np.ndarray],
                     nfev: int,
                     num_steps: int,
                     success: bool,
                     message: str,
                     interpolant=None) -> Trajectory:
    u = np.array(ys, dtype=np.float64).reshape((len(ts), problem.dim))

    return Trajectory(t=np.array(ts, dtype=np.float64),
                      u=u,
                      scalar=problem.scalar,
                      alg=config.algorithm.name,
                      nfev=int(nfev),
                      num_steps=int(num_steps),
                      success=success,
                      message=message,
                      interpolant=interpolant,
                      dim_names=problem.model.get_dim_names())


def _fail(message: str, partial: Trajectory):
    logger.error(message)
    return NumericalFailure(message, trajectory=partial)


def adaptive_loop(problem, config, progress_bar: bool = False) -> Trajectory:
    """
    Integrate a problem with one of the adaptive scipy.integrate solvers, advancing it step by step.

    Without sample times, every accepted step is recorded. With sample times, the dense output of
    each step is evaluated at the sample times that fall into it.

    Args:
        problem: ODEProblem to integrate.
        config: SolverConfig holding an adaptive algorithm.
        progress_bar: Bool, whether to display a progress bar over the step budget.

    Returns:
        The sampled trajectory.

    Raises:
        NumericalFailure: If the solver fails, the state becomes non-finite or the step budget is
         exhausted. The partial trajectory is attached to the exception.
    """
    model = problem.model
    algorithm = config.algorithm
    t0, t1 = problem.tspan
    y0 = problem.u0
    saveat = config.resolve_saveat(problem.tspan)

    if saveat is None:
        idx = 0
        ts, ys = [t0], [y0.copy()]
    else:
        # sample times at the start need no integration
        idx = int(np.searchsorted(saveat, t0, side="right"))
        ts, ys = list(saveat[:idx]), [y0.copy() for _ in range(idx)]

    if t0 == t1:
        return _make_trajectory(problem, config, ts, ys, nfev=0, num_steps=0, success=True,
                                message="Empty time span, nothing to integrate.")

    try:
        solver = algorithm.factory(model, t0, y0, t1,
                                   rtol=config.reltol,
                                   atol=config.abstol,
                                   **config.solver_options)
    except (TypeError, ValueError) as e:
        raise ConfigurationError("Could not set up integrator {0}: {1}".format(algorithm.name, e))

    dense_ts, interpolants = [t0], []
    num_steps = 0

    iterator = progress_funcs.get(bool(progress_bar))(config.max_steps)

    for _ in iterator:
        message = solver.step()

        if solver.status == "failed":
            partial = _make_trajectory(problem, config, ts, ys, solver.nfev, num_steps,
                                       success=False, message=message)
            raise _fail("Integrator {0} failed at t={1}: {2}".format(algorithm.name, solver.t, message),
                        partial)

        t, y = solver.t, solver.y

        if not np.all(np.isfinite(y)):
            message = "State diverged to a non-finite value at t={}.".format(t)
            partial = _make_trajectory(problem, config, ts, ys, solver.nfev, num_steps,
                                       success=False, message=message)
            raise _fail(message, partial)

        num_steps += 1

        if saveat is None:
            ts.append(t)
            ys.append(y.copy())
        else:
            j = int(np.searchsorted(saveat, t, side="right"))
            if j > idx:
                sol = solver.dense_output()
                ts.extend(saveat[idx:j])
                ys.extend(np.asarray(sol(saveat[idx:j])).T)
                idx = j

        if config.dense:
            dense_ts.append(t)
            interpolants.append(solver.dense_output())

        if solver.status == "finished":
            break
    else:
        message = "Step budget of {0} steps exhausted at t={1}.".format(config.max_steps, solver.t)
        partial = _make_trajectory(problem, config, ts, ys, solver.nfev, num_steps,
                                   success=False, message=message)
        raise _fail(message, partial)

    interpolant = OdeSolution(dense_ts, interpolants) if config.dense else None

    return _make_trajectory(problem, config, ts, ys, solver.nfev, num_steps, success=True,
                            message="The solver successfully reached the end of the integration interval.",
                            interpolant=interpolant)


def _uniform_grid(t0: float, t1: float, dt: float) -> np.ndarray:
    if t1 == t0:
        return np.array([t0])

    num_steps = max(int(np.ceil((t1 - t0) / dt - 1e-10)), 1)

    return np.append(t0 + dt * np.arange(num_steps), t1)


def _num_substeps(span: float, dt: float) -> int:
    if span <= 0.0:
        return 0
    return max(int(np.ceil(span / dt - 1e-10)), 1)


def fixed_step_loop(problem, config, progress_bar: bool = False) -> Trajectory:
    """
    Integrate a problem with a fixed-step Runge-Kutta method.

    Each segment between two consecutive output times is covered by equally sized steps no larger
    than dt, so that the output times are hit exactly.

    Args:
        problem: ODEProblem to integrate.
        config: SolverConfig holding a fixed-step algorithm and a step size.
        progress_bar: Bool, whether to display a progress bar over the output times.

    Returns:
        The sampled trajectory.

    Raises:
        NumericalFailure: If the state becomes non-finite, an implicit stage solve fails or the
         step budget is exhausted. The partial trajectory is attached to the exception.
    """
    model = problem.model
    step_func = config.algorithm.make_step_func()
    step_func.reset()

    t0, t1 = problem.tspan
    dt = config.dt
    saveat = config.resolve_saveat(problem.tspan)

    output_times = saveat if saveat is not None else _uniform_grid(t0, t1, dt)

    ts, ys = [], []
    state = step_func.make_new_state(t=t0, y=problem.u0.copy())
    t_prev = t0
    num_steps = 0

    def partial(message):
        return _make_trajectory(problem, config, ts, ys, step_func.nfev, num_steps,
                                success=False, message=message)

    iterator = progress_funcs.get(bool(progress_bar))(len(output_times))

    for i in iterator:
        target = output_times[i]
        num_sub = _num_substeps(target - t_prev, dt)

        if num_steps + num_sub > config.max_steps:
            message = "Step budget of {0} steps exhausted at t={1}.".format(config.max_steps, t_prev)
            raise _fail(message, partial(message))

        h = (target - t_prev) / num_sub if num_sub else 0.0

        for _ in range(num_sub):
            try:
                state = step_func.forward(model, state, h)
            except NumericalFailure as e:
                raise NumericalFailure(str(e), trajectory=partial(str(e))) from e

            num_steps += 1

            _, y = step_func.get_data_from_state(state=state)
            if not np.all(np.isfinite(y)):
                message = "State diverged to a non-finite value after step {}.".format(num_steps)
                raise _fail(message, partial(message))

        _, y = step_func.get_data_from_state(state=state)
        ts.append(target)
        ys.append(np.array(y, dtype=np.float64))

        # snap the time to the output time to avoid accumulating round-off
        state = step_func.make_new_state(t=target, y=y)
        t_prev = target

    return _make_trajectory(problem, config, ts, ys, step_func.nfev, num_steps, success=True,
                            message="Reached the end of the integration interval.")

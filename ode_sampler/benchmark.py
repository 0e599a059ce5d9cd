"""
Wall-clock comparison of solves with interpreted and numba-compiled derivative functions.

The derivative function is evaluated many times per solve, so for right-hand sides with a
non-trivial amount of work the per-call cost dominates the total runtime. Compiling the
function removes the interpreter overhead from every evaluation while leaving the integration
itself unchanged, so both variants produce the same trajectory within tolerance.
"""
import logging
import time
from typing import Text, Tuple

import numpy as np
import pandas as pd
from tabulate import tabulate

from ode_sampler import defaults
from ode_sampler.solve import ODEProblem, solve
from ode_sampler.trajectory import Trajectory
from ode_sampler.types import Parameters, RHSFunction, TimeSpan

__all__ = ["BenchmarkResult", "time_solve", "compare_compiled"]

logger = logging.getLogger(__name__)


class BenchmarkResult:
    """
    Outcome of a compiled vs. interpreted comparison.

    Attributes:
        table: DataFrame with one row per variant, holding best and mean wall-clock
         times in seconds, function evaluations and steps.
        speedup: Ratio of the best interpreted time to the best compiled time.
        max_abs_diff: Largest absolute deviation between the two trajectories.
        interpreted: Trajectory computed with the interpreted function.
        compiled: Trajectory computed with the compiled function.
    """

    def __init__(self,
                 table: pd.DataFrame,
                 interpreted: Trajectory,
                 compiled: Trajectory):
        self.table = table
        self.interpreted = interpreted
        self.compiled = compiled

        times = table.set_index("variant")["best_time"]
        self.speedup = float(times["interpreted"] / times["compiled"])
        self.max_abs_diff = float(np.max(np.abs(interpreted.u - compiled.u)))

    def to_string(self, tablefmt: Text = "github") -> Text:
        table = tabulate(self.table, headers="keys", tablefmt=tablefmt, showindex=False)
        return "{0}\n\nspeedup: {1:.2f}x, max. deviation: {2:.3e}".format(table, self.speedup,
                                                                           self.max_abs_diff)

    def __str__(self):
        return self.to_string()


def time_solve(problem: ODEProblem,
               repeats: int = 3,
               warmup: bool = True,
               **solve_kwargs) -> Tuple[float, float, Trajectory]:
    """
    Time repeated solves of a problem.

    Args:
        problem: The problem to solve.
        repeats: Number of timed solves.
        warmup: Whether to run one untimed solve first, e.g. to trigger numba compilation.
        **solve_kwargs: Keyword arguments passed to ode_sampler.solve.

    Returns:
        A tuple (best, mean, trajectory) of the best and mean wall-clock time in seconds and the
        trajectory of the last solve.
    """
    if repeats < 1:
        raise ValueError("repeats must be at least 1, got {}.".format(repeats))

    if warmup:
        solve(problem, **solve_kwargs)

    timings = []
    trajectory = None
    for _ in range(repeats):
        start = time.perf_counter()
        trajectory = solve(problem, **solve_kwargs)
        timings.append(time.perf_counter() - start)

    return min(timings), float(np.mean(timings)), trajectory


def compare_compiled(f: RHSFunction,
                     u0,
                     tspan: TimeSpan,
                     p: Parameters = None,
                     repeats: int = 3,
                     **solve_kwargs) -> BenchmarkResult:
    """
    Solve the same problem with an interpreted and a numba-compiled derivative function and
    compare wall-clock times and results. Compilation happens in an untimed warm-up solve.

    Args:
        f: Derivative function, written so that numba can compile it in nopython mode.
        u0: Initial state.
        tspan: Time span.
        p: Parameters passed to f.
        repeats: Number of timed solves per variant.
        **solve_kwargs: Keyword arguments passed to ode_sampler.solve. If saveat is not given,
         both variants are sampled on a common uniform grid.

    Returns:
        A BenchmarkResult.
    """
    # always interpret the plain python function
    f = getattr(f, "py_func", f)

    interpreted_problem = ODEProblem(f, u0=u0, tspan=tspan, p=p)
    compiled_problem = ODEProblem(f, u0=u0, tspan=tspan, p=p, compile=True)

    if solve_kwargs.get("saveat") is None:
        t0, t1 = interpreted_problem.tspan
        solve_kwargs["saveat"] = np.linspace(t0, t1, defaults.SAVEAT_POINTS)

    rows = []
    trajectories = {}
    for variant, problem in [("interpreted", interpreted_problem), ("compiled", compiled_problem)]:
        best, mean, trajectory = time_solve(problem, repeats=repeats, warmup=True, **solve_kwargs)

        logger.info("{0} solve: best {1:.4f}s, mean {2:.4f}s over {3} "
                    "repeats.".format(variant, best, mean, repeats))

        rows.append({"variant": variant,
                     "best_time": best,
                     "mean_time": mean,
                     "nfev": trajectory.nfev,
                     "num_steps": trajectory.num_steps})
        trajectories[variant] = trajectory

    return BenchmarkResult(table=pd.DataFrame(rows),
                           interpreted=trajectories["interpreted"],
                           compiled=trajectories["compiled"])

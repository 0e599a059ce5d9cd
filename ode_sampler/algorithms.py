"""
The enumerated set of integration algorithms a solve can select from.

Adaptive algorithms are the integrators of ``scipy.integrate``, fixed-step algorithms are the
Runge-Kutta step functions in ``ode_sampler.stepfunctions``.
"""
import copy
from typing import Callable, Dict, Text, Union

import pandas as pd
from scipy import integrate

from ode_sampler import defaults
from ode_sampler.constants import LoopTypes
from ode_sampler.exceptions import ConfigurationError
from ode_sampler.stepfunctions import (
    SingleStepMethod,
    ForwardEulerMethod,
    HeunMethod,
    RungeKutta4,
    GaussLegendre4
)

__all__ = ["Algorithm", "ALGORITHMS", "get_algorithm", "list_algorithms"]


class Algorithm:
    """
    An entry in the algorithm registry.

    Attributes:
        name: Canonical algorithm name.
        loop_type: Either "adaptive" or "fixed".
        factory: For adaptive algorithms, a scipy.integrate.OdeSolver subclass. For fixed-step
         algorithms, a callable returning a fresh SingleStepMethod.
        order: Order of the method.
        stiff: Whether the method is suited for stiff problems.
        description: Short human-readable description.
    """

    def __init__(self,
                 name: Text,
                 loop_type: Text,
                 factory: Callable,
                 order: int,
                 stiff: bool = False,
                 description: Text = ""):
        self.name = name
        self.loop_type = loop_type
        self.factory = factory
        self.order = order
        self.stiff = stiff
        self.description = description

    @property
    def is_adaptive(self) -> bool:
        return self.loop_type == LoopTypes.ADAPTIVE

    def make_step_func(self) -> SingleStepMethod:
        if self.is_adaptive:
            raise TypeError("Adaptive algorithm {} has no step function.".format(self.name))
        return self.factory()

    def __repr__(self):
        return "Algorithm(name={0!r}, loop_type={1!r})".format(self.name, self.loop_type)


def _entries():
    adaptive = LoopTypes.ADAPTIVE
    fixed = LoopTypes.FIXED
    return [
        Algorithm("RK45", adaptive, integrate.RK45, 5,
                  description="Explicit Runge-Kutta 5(4), Dormand-Prince pair"),
        Algorithm("RK23", adaptive, integrate.RK23, 3,
                  description="Explicit Runge-Kutta 3(2), Bogacki-Shampine pair"),
        Algorithm("DOP853", adaptive, integrate.DOP853, 8,
                  description="Explicit Runge-Kutta 8(5,3), Dormand-Prince"),
        Algorithm("Radau", adaptive, integrate.Radau, 5, stiff=True,
                  description="Implicit Runge-Kutta, Radau IIA family"),
        Algorithm("BDF", adaptive, integrate.BDF, 5, stiff=True,
                  description="Implicit backward differentiation formulas of variable order"),
        Algorithm("LSODA", adaptive, integrate.LSODA, 12, stiff=True,
                  description="Adams/BDF with automatic stiffness detection"),
        Algorithm("Euler", fixed, ForwardEulerMethod, 1,
                  description="Explicit forward Euler"),
        Algorithm("Heun", fixed, HeunMethod, 2,
                  description="Explicit Heun method"),
        Algorithm("RK4", fixed, RungeKutta4, 4,
                  description="Classic explicit Runge-Kutta"),
        Algorithm("GaussLegendre4", fixed, GaussLegendre4, 4, stiff=True,
                  description="Two-stage implicit Gauss-Legendre Runge-Kutta"),
    ]


ALGORITHMS = {alg.name: alg for alg in _entries()}  # type: Dict[Text, Algorithm]

_lookup = {name.lower(): alg for name, alg in ALGORITHMS.items()}


def get_algorithm(alg: Union[Text, Algorithm, SingleStepMethod] = None) -> Algorithm:
    """
    Resolve an algorithm selector.

    Args:
        alg: Algorithm name (case-insensitive), an Algorithm instance, a SingleStepMethod instance
         for a custom fixed-step method, or None for the default algorithm.

    Returns:
        The resolved Algorithm.

    Raises:
        ConfigurationError: If the name is not in the registry or the selector has a wrong type.
    """
    if alg is None:
        alg = defaults.ALGORITHM

    if isinstance(alg, Algorithm):
        return alg

    if isinstance(alg, SingleStepMethod):
        # custom method, e.g. an ExplicitRungeKuttaMethod built from a Butcher tableau
        # each solve gets its own copy of the stage buffers and evaluation counter
        return Algorithm(alg.__class__.__name__, LoopTypes.FIXED, lambda: copy.deepcopy(alg),
                         alg.order,
                         description="Custom fixed-step method")

    if not isinstance(alg, str):
        raise ConfigurationError("Algorithm must be given by name, got "
                                 "{}.".format(type(alg).__name__))

    try:
        return _lookup[alg.lower()]
    except KeyError:
        raise ConfigurationError("Unknown algorithm \"{0}\". Options are: "
                                 "{1}".format(alg, list(ALGORITHMS)))


def list_algorithms() -> pd.DataFrame:
    """
    Tabulate the available algorithms.

    Returns:
        A DataFrame with one row per algorithm.
    """
    rows = [{"name": a.name,
             "loop_type": a.loop_type,
             "order": a.order,
             "stiff": a.stiff,
             "description": a.description} for a in ALGORITHMS.values()]

    return pd.DataFrame(rows)

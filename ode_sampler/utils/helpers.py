import inspect
from typing import Callable, List, Text

import numpy as np

from ode_sampler import defaults
from ode_sampler.exceptions import ConfigurationError

__all__ = ["is_scalar", "infer_variable_names", "infer_inplace"]


def is_scalar(y) -> bool:
    return np.ndim(y) == 0


def _unwrap(rhs: Callable) -> Callable:
    # numba dispatchers keep the original python function around
    return getattr(rhs, "py_func", rhs)


def infer_variable_names(rhs: Callable) -> List[Text]:
    """
    Infer the variable names from the signature of a derivative function.

    Args:
        rhs: Derivative function to infer variable names from.

    Returns:
        A list containing the names of the positional arguments without defaults.

    Raises:
        ConfigurationError: If the function does not take three or four positional arguments.
    """
    try:
        sig = inspect.signature(_unwrap(rhs))
    except (TypeError, ValueError):
        # builtins and C extensions, assume the standard out-of-place form
        return list(defaults.out_of_place_rhs)

    kinds = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)

    params = sig.parameters.values()
    if any(p.kind == inspect.Parameter.VAR_POSITIONAL for p in params):
        return list(defaults.out_of_place_rhs)

    args = [p.name for p in params if p.kind in kinds and p.default is inspect.Parameter.empty]

    if len(args) not in (3, 4):
        raise ConfigurationError("Incompatible derivative function signature {0}{1}. Expected "
                                 "f(u, p, t) or f(du, u, p, t).".format(getattr(rhs, "__name__", rhs), sig))

    return args


def infer_inplace(rhs: Callable) -> bool:
    """
    Infer whether a derivative function writes its result into a preallocated array,
    i.e. whether it has the signature f(du, u, p, t) instead of f(u, p, t).
    """
    return len(infer_variable_names(rhs)) == 4

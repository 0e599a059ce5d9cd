import logging
from typing import Callable

import numba
from numba.core.dispatcher import Dispatcher

__all__ = ["compile_rhs", "is_compiled"]

logger = logging.getLogger(__name__)


def is_compiled(fn: Callable) -> bool:
    """Whether fn is a numba-compiled function."""
    return isinstance(fn, Dispatcher)


def compile_rhs(fn: Callable, cache: bool = False, fastmath: bool = False) -> Callable:
    """
    Compile a derivative function to machine code with numba in nopython mode.

    Compilation is lazy, the first call with a new argument type signature triggers it.
    Already compiled functions are returned unchanged.

    Args:
        fn: Derivative function f(u, p, t) or f(du, u, p, t), written against numpy.
        cache: Whether numba should cache the compiled code on disk.
        fastmath: Whether to allow numba's unsafe floating point transforms.

    Returns:
        A numba dispatcher with the same call signature as fn.
    """
    if is_compiled(fn):
        return fn

    logger.debug("Compiling derivative function {} with numba.".format(getattr(fn, "__name__", fn)))

    return numba.njit(cache=cache, fastmath=fastmath)(fn)

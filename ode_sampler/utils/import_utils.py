import importlib
import importlib.machinery
import types
from typing import Text, Callable

from ode_sampler.exceptions import ConfigurationError

__all__ = ["import_func_from_source", "import_func_from_module"]


def import_func_from_source(source_path: Text, fn_name: Text) -> Callable:
    """
    Imports a function from a module provided as source file. Missing or unparsable files raise
    a ConfigurationError, exceptions raised while executing the module propagate.
    """

    try:
        loader = importlib.machinery.SourceFileLoader(
            fullname='user_module',
            path=source_path,
        )
        user_module = types.ModuleType(loader.name)
        loader.exec_module(user_module)
    except (IOError, SyntaxError) as e:
        raise ConfigurationError("Could not load {0} from {1}: {2}".format(fn_name, source_path, e))

    return _get_func(user_module, fn_name)


def import_func_from_module(module_path: Text, fn_name: Text) -> Callable:
    """
    Imports a function from a module provided as source file or module path.
    """
    if module_path.endswith(".py"):
        return import_func_from_source(module_path, fn_name)

    try:
        user_module = importlib.import_module(module_path)
    except ImportError as e:
        raise ConfigurationError("Could not import module {}: {}".format(module_path, e))

    return _get_func(user_module, fn_name)


def _get_func(module, fn_name: Text) -> Callable:
    try:
        fn = getattr(module, fn_name)
    except AttributeError:
        raise ConfigurationError("Module {} has no attribute {}.".format(module.__name__, fn_name))

    if not callable(fn):
        raise ConfigurationError("{} in module {} is not callable.".format(fn_name, module.__name__))

    return fn

import logging
from typing import Any, Text, List

import numpy as np

from ode_sampler.compilation import compile_rhs, is_compiled
from ode_sampler.constants import ModelMetadataKeys
from ode_sampler.exceptions import ConfigurationError
from ode_sampler.models.base_model import BaseModel
from ode_sampler.models import messages
from ode_sampler.types import Parameters, RHSFunction
from ode_sampler.utils.data_utils import initialize_dim_names
from ode_sampler.utils.helpers import infer_inplace, infer_variable_names
from ode_sampler.utils.import_utils import import_func_from_module

logger = logging.getLogger(__name__)


class ODEModel(BaseModel):
    """
    Base class for all ODE models.

    An ODEModel implements the right-hand side (RHS) ``f`` of an ordinary differential equation ::

        u'(t) = f(u, p, t),

    where ``p`` is an opaque parameter object passed through to ``f`` unchanged. The function
    can alternatively be given in in-place form ``f(du, u, p, t)``, writing the derivative into
    the preallocated array ``du``.

    In addition to the actual right-hand side, the ODEModel class keeps a minimal amount of state
    around, mainly for bookkeeping and easier visualization using pandas.

    Attributes:
        ode_fn: Right-hand side of the ODE.
        params: Parameters passed to the ode_fn.
        inplace: Whether ode_fn has the in-place signature.
        compiled: Whether ode_fn is a numba-compiled function.
        variable_names: List of ODE variable names, taken from the signature of the ode_fn.
        dim_names: Optional list of dimension names for result data saving. These will become column
         headers in result pandas.DataFrame objects.
    """

    def __init__(self,
                 ode_fn: RHSFunction = None,
                 module_path: Text = None,
                 ode_fn_name: Text = None,
                 params: Parameters = None,
                 inplace: bool = None,
                 compile: bool = False,
                 dim_names: List[Text] = None) -> None:
        """
        ODEModel constructor.

        Args:
            ode_fn: Callable implementing the right-hand side of the model.
            module_path: Optional, path to a module where the right-hand side is defined. May be
             used instead of the direct function definition.
            ode_fn_name: Name of the function to be used as ode_fn. Needs to be present in the module
             specified in the module_path argument.
            params: Parameters for ode_fn.
            inplace: Whether ode_fn writes into a preallocated derivative array. Inferred from the
             function signature if not given.
            compile: Whether to compile ode_fn with numba.
            dim_names: Optional list of dimension names for result data saving. These will become column
             headers in result pandas.DataFrame objects.
        """
        if not any([bool(module_path), bool(ode_fn_name), ode_fn is not None]):
            raise ConfigurationError(messages.MISSING_INFO)

        if any([bool(module_path), bool(ode_fn_name)]) and ode_fn is not None:
            raise ConfigurationError(messages.BAD_MODEL_DEF)

        if ode_fn is not None:
            if not callable(ode_fn):
                raise ConfigurationError("Derivative function must be callable, got "
                                         "{}.".format(type(ode_fn).__name__))
            fn = ode_fn
        else:
            fn = import_func_from_module(module_path, ode_fn_name)

        self.variable_names = infer_variable_names(rhs=fn)
        self.inplace = infer_inplace(fn) if inplace is None else bool(inplace)

        self.ode_fn = compile_rhs(fn) if compile else fn
        self.compiled = is_compiled(self.ode_fn)

        self.params = params
        self.dim_names = dim_names or []

        # set on initialization with an initial state
        self.dim = 0
        self.scalar_state = False

    @property
    def call_params(self) -> Any:
        # numba refuses reflected lists
        if self.compiled and isinstance(self.params, list):
            return np.asarray(self.params, dtype=np.float64)
        return self.params

    def update_params(self, params: Parameters):
        """
        Replace the model's parameters.

        Args:
            params: New parameters passed to the derivative function.
        """
        self.params = params

    def initialize(self, u0: np.ndarray, t0: float = 0.0, scalar: bool = False):
        """
        Prepare the model for an integration starting at (t0, u0). Probes the derivative function
        once to check its output.

        Args:
            u0: Initial state as a 1-D float array.
            t0: Initial time.
            scalar: Whether the state is passed to the function as a scalar.

        Raises:
            ConfigurationError: If the derivative does not match the shape of the initial state.
        """
        self.scalar_state = scalar
        self.dim = len(u0)

        if self.dim_names and len(self.dim_names) != self.dim:
            raise ConfigurationError(messages.NAME_MISMATCH.format(len(self.dim_names), self.dim))

        du = self._evaluate(t0, u0)

        try:
            du = np.asarray(du, dtype=np.float64)
        except (TypeError, ValueError):
            raise ConfigurationError(messages.NON_NUMERIC_OUTPUT.format(type(du).__name__))

        expected = () if scalar else u0.shape
        if du.shape != expected and not (scalar and du.shape == (1,)):
            raise ConfigurationError(messages.DIMENSION_MISMATCH.format(du.shape, expected))

    def get_dim_names(self) -> List[Text]:
        if self.dim_names:
            return list(self.dim_names)
        return initialize_dim_names(self.dim, scalar=self.scalar_state)

    def get_metadata(self):
        """
        Return model metadata information. Used for constructing result pandas DataFrame objects.

        Returns:
            A dict with model metadata information.
        """

        return {ModelMetadataKeys.VARIABLE_NAMES: self.variable_names,
                ModelMetadataKeys.DIM_NAMES: self.get_dim_names(),
                ModelMetadataKeys.INPLACE: self.inplace,
                ModelMetadataKeys.COMPILED: self.compiled}

    def _evaluate(self, t: float, y: np.ndarray):
        p = self.call_params
        if self.inplace:
            du = np.empty_like(y)
            self.ode_fn(du, y, p, t)
            return du
        if self.scalar_state:
            return self.ode_fn(y[0], p, t)
        return self.ode_fn(y, p, t)

    def __call__(self, t: float, y: np.ndarray) -> np.ndarray:
        """
        ODE model call operator, in the (t, y) argument order used by scipy and the step functions.

        Args:
            t: Time variable at the current state.
            y: State vector at the current state, a 1-D float array.

        Returns:
            A 1-D float array holding the derivative at (t, y).

        """
        return np.atleast_1d(np.asarray(self._evaluate(t, y), dtype=np.float64))

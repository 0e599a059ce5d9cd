import logging

import numpy as np
from scipy.optimize import root

from ode_sampler.exceptions import ConfigurationError, NumericalFailure
from ode_sampler.models import BaseModel
from ode_sampler.types import ModelState

logger = logging.getLogger(__name__)

__all__ = ["SingleStepMethod",
           "ExplicitRungeKuttaMethod",
           "ImplicitRungeKuttaMethod"]


class SingleStepMethod:
    """
    Base class for all fixed-step single step functions for ODE solving. Override this class and
    its methods to make your own custom single-step functions.
    """

    def __init__(self, order: int = 0):
        """
        Base SingleStepMethod constructor.

        Args:
            order: Order of the method.
        """
        self.order = order
        self.num_stages = 0
        self.nfev = 0
        self.k = np.zeros(0)

    def _adjust_dims(self, y: np.ndarray):
        self.k = np.zeros(shape=self._get_shape(y))

    def _get_shape(self, y: np.ndarray):
        return self.num_stages, len(y)

    @staticmethod
    def get_data_from_state(state: ModelState):
        """
        Custom member function for getting the raw numpy-compatible data from a ModelState object.
        Override this if you intend to use a custom state type such as a NamedTuple.

        Args:
            state: State object holding the numpy-compatible data.

        Returns:
            Raw numpy-compatible state data for use in the forward member function.
        """
        return state

    @staticmethod
    def make_new_state(t: float, y: np.ndarray) -> ModelState:
        """
        Custom function for constructing a new state from numpy data.
        Override this if you intend to use a custom state type such as a NamedTuple.

        Args:
            t: Time variable at the new state.
            y: State vector at the new state.

        Returns:
            A new state object holding the raw data.
        """
        return t, y

    def reset(self):
        """
        Resets the function evaluation counter.
        """
        self.nfev = 0

    def forward(self,
                model: BaseModel,
                state: ModelState,
                h: float,
                **kwargs) -> ModelState:
        """
        Main method to advance an ODE in time by computing a new state using a single-step method.
        Override this to define your own single-step functions.

        Args:
            model: ODEModel object implementing the ODE model.
            state: Input state.
            h: Step size to use in the step function.
            **kwargs: Additional keyword arguments, unused for now.

        Returns:
            A new state containing the ODE model data at time t+h.
        """
        raise NotImplementedError


def _tableau_errors(alphas: np.ndarray, betas: np.ndarray, gammas: np.ndarray):
    _error_msg = []
    if len(alphas) != len(gammas):
        _error_msg.append("Alpha and gamma vectors are not the same length")

    if betas.ndim != 2 or betas.shape[0] != betas.shape[1] or betas.shape[0] != len(alphas):
        _error_msg.append("Betas must be a quadratic matrix with the same "
                          "dimension as the alphas/gammas arrays")

    return _error_msg


def _raise_on_errors(_error_msg):
    if _error_msg:
        raise ConfigurationError("An error occurred while validating the input "
                                 "Butcher tableau. More information: "
                                 "{}.".format(", ".join(_error_msg)))


class ExplicitRungeKuttaMethod(SingleStepMethod):
    """
    Base class template for explicit Runge-Kutta (RK) methods.

    A Runge-Kutta method is a generalized s-stage algorithm for advancing an ODE in time.
    It is defined by three sets of coefficients commonly called a Butcher tableau.
    An explicit Runge-Kutta method is characterized by a strictly lower-diagonal b-coefficient matrix.

    For more information on Runge-Kutta methods and the Butcher tableau, see
    https://en.wikipedia.org/wiki/Runge%E2%80%93Kutta_methods.
    """
    def __init__(self,
                 alphas: np.ndarray,
                 betas: np.ndarray,
                 gammas: np.ndarray,
                 order: int = 0):
        """
        Explicit Runge-Kutta method constructor.

        Args:
            alphas: Alpha- or a-array in the Butcher tableau (commonly the left column).
            betas: Beta- or b-matrix in the Butcher tableau (commonly in the upper right).
            gammas: Gamma- or c-array in the Butcher tableau (commonly the bottom row).
            order: Order of the resulting explicit RK method.
        """

        super(ExplicitRungeKuttaMethod, self).__init__(order=order)

        alphas, betas, gammas = np.asarray(alphas), np.asarray(betas), np.asarray(gammas)

        self._validate_butcher_tableau(alphas=alphas, betas=betas, gammas=gammas)

        self.alphas = alphas
        self.betas = betas
        self.gammas = gammas
        self.num_stages = len(self.alphas)

    @staticmethod
    def _validate_butcher_tableau(alphas: np.ndarray,
                                  betas: np.ndarray,
                                  gammas: np.ndarray) -> None:
        _error_msg = _tableau_errors(alphas, betas, gammas)

        # for an explicit method, betas must be lower triangular
        if not _error_msg and not np.allclose(betas, np.tril(betas, k=-1)):
            _error_msg.append("The beta matrix has to be lower triangular for "
                              "an explicit Runge-Kutta method, i.e. "
                              "b_ij = 0 for i <= j")

        _raise_on_errors(_error_msg)

    def forward(self,
                model: BaseModel,
                state: ModelState,
                h: float,
                **kwargs) -> ModelState:
        """
        Main method to advance an ODE in time by computing a new state with a
        multi-stage explicit Runge-Kutta method.

        This function is templated and not meant to be directly overridden. If you want more
        control over your step function, consider implementing an explicit RK method by subclassing the
        ``SingleStepMethod`` class.

        Args:
            model: ODEModel object implementing the ODE model.
            state: Input state.
            h: Step size to use in the step function.
            **kwargs: Additional keyword arguments, unused for now.

        Returns:
            A new state containing the ODE model data at time t+h.
        """

        t, y = self.get_data_from_state(state=state)

        if self._get_shape(y) != self.k.shape:
            self._adjust_dims(y)

        self.k[0] = model(t, y)

        for i in range(1, self.num_stages):
            # first row of betas is a zero row because it is an explicit RK
            self.k[i] = model(t + h * self.alphas[i], y + h * np.dot(self.betas[i], self.k))

        self.nfev += self.num_stages

        y_new = y + h * np.dot(self.gammas, self.k)

        return self.make_new_state(t=t + h, y=y_new)


class ImplicitRungeKuttaMethod(SingleStepMethod):
    """
    Base class template for implicit Runge-Kutta (RK) methods.

    A Runge-Kutta method is a generalized s-stage algorithm for advancing an ODE in time.
    It is defined by three sets of coefficients commonly called a Butcher tableau.

    An implicit Runge-Kutta method incurs generally much more computational effort than an explicit one,
    as a non-linear system of equations needs to be solved in each step. However, implicit methods
    have better properties when used on stiff equations, and can achieve very high order with a
    comparably low number of stages s.

    For more information on implicit Runge-Kutta methods and the Butcher tableau, see
    https://en.wikipedia.org/wiki/Runge%E2%80%93Kutta_methods#Implicit_Runge%E2%80%93Kutta_methods.
    """
    def __init__(self,
                 alphas: np.ndarray,
                 betas: np.ndarray,
                 gammas: np.ndarray,
                 order: int = 0,
                 **kwargs):
        """
        Implicit Runge-Kutta method constructor.

        Args:
            alphas: Alpha- or a-array in the Butcher tableau (commonly the left column).
            betas: Beta- or b-matrix in the Butcher tableau (commonly in the upper right).
            gammas: Gamma- or c-array in the Butcher tableau (commonly the bottom row).
            order: Order of the resulting implicit RK method.
            **kwargs: Additional keyword arguments used in the call to scipy.optimize.root.
        """

        super(ImplicitRungeKuttaMethod, self).__init__(order=order)

        alphas, betas, gammas = np.asarray(alphas), np.asarray(betas), np.asarray(gammas)

        self.validate_butcher_tableau(alphas=alphas, betas=betas, gammas=gammas)

        self.alphas = alphas
        self.betas = betas
        self.gammas = gammas
        self.num_stages = len(self.alphas)

        # scipy.optimize.root options
        self.solver_kwargs = kwargs

    @staticmethod
    def validate_butcher_tableau(alphas: np.ndarray,
                                 betas: np.ndarray,
                                 gammas: np.ndarray) -> None:
        _raise_on_errors(_tableau_errors(alphas, betas, gammas))

    def forward(self,
                model: BaseModel,
                state: ModelState,
                h: float,
                **kwargs) -> ModelState:
        """
        Main method to advance an ODE in time by computing a new state with a
        multi-stage implicit Runge-Kutta method.

        This function is templated and not meant to be directly overridden. If you want more
        control over your step function, consider implementing an implicit RK method by subclassing the
        ``SingleStepMethod`` class instead.

        Args:
            model: ODEModel object implementing the ODE model.
            state: Input state.
            h: Step size to use in the step function.
            **kwargs: Additional keyword arguments, unused for now.

        Raises:
            NumericalFailure: If the stage equations could not be solved.

        Returns:
            A new state containing the ODE model data at time t+h.
        """

        t, y = self.get_data_from_state(state=state)

        if self._get_shape(y) != self.k.shape:
            self._adjust_dims(y)

        initial_shape = self.k.shape
        shape_prod = np.prod(initial_shape)

        def F(x: np.ndarray) -> np.ndarray:
            k = x.reshape(initial_shape)
            model_stack = np.concatenate(
                [model(t + h * self.alphas[i], y + h * np.dot(self.betas[i], k))
                 for i in range(self.num_stages)])
            self.nfev += self.num_stages

            return model_stack - x

        # initial guess: all stages equal to the derivative at the current state
        f0 = model(t, y)
        self.nfev += 1
        x0 = np.tile(f0, self.num_stages).reshape((shape_prod,))

        root_res = root(F, x0=x0, **self.solver_kwargs)

        if not root_res.success:
            logger.error("Stage equations did not converge at t={0}: {1}".format(t, root_res.message))
            raise NumericalFailure("Implicit Runge-Kutta stage equations did not converge at "
                                   "t={0}: {1}".format(t, root_res.message))

        self.k = root_res.x.reshape(initial_shape)

        y_new = y + h * np.dot(self.gammas, self.k)

        return self.make_new_state(t=t + h, y=y_new)

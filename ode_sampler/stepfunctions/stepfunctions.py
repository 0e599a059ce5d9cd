import numpy as np

from ode_sampler.stepfunctions.templates import ExplicitRungeKuttaMethod, ImplicitRungeKuttaMethod

__all__ = ["ForwardEulerMethod",
           "HeunMethod",
           "RungeKutta4",
           "GaussLegendre4"]


class ForwardEulerMethod(ExplicitRungeKuttaMethod):
    """
    Forward Euler method for ODE integration.
    """
    def __init__(self):
        super(ForwardEulerMethod, self).__init__(alphas=np.zeros(1),
                                                 betas=np.zeros((1, 1)),
                                                 gammas=np.ones(1),
                                                 order=1)


class HeunMethod(ExplicitRungeKuttaMethod):
    """
    Heun method for ODE integration.
    """
    def __init__(self):
        super(HeunMethod, self).__init__(alphas=np.array([0.0, 1.0]),
                                         betas=np.array([[0.0, 0.0],
                                                         [1.0, 0.0]]),
                                         gammas=np.array([0.5, 0.5]),
                                         order=2)


class RungeKutta4(ExplicitRungeKuttaMethod):
    """
    Classic Runge Kutta of order 4 for ODE integration.
    """
    def __init__(self):
        # notation follows that in
        # https://en.wikipedia.org/wiki/Runge%E2%80%93Kutta_methods
        super(RungeKutta4, self).__init__(alphas=np.array([0.0, 0.5, 0.5, 1.0]),
                                          betas=np.array([[0.0, 0.0, 0.0, 0.0],
                                                          [0.5, 0.0, 0.0, 0.0],
                                                          [0.0, 0.5, 0.0, 0.0],
                                                          [0.0, 0.0, 1.0, 0.0]]),
                                          gammas=np.array([1.0, 2.0, 2.0, 1.0]) / 6,
                                          order=4)


class GaussLegendre4(ImplicitRungeKuttaMethod):
    """
    Two-stage Gauss-Legendre method, an implicit Runge-Kutta method of order 4.
    """
    def __init__(self, **kwargs):
        c = np.sqrt(3) / 6
        super(GaussLegendre4, self).__init__(alphas=np.array([0.5 - c, 0.5 + c]),
                                             betas=np.array([[0.25, 0.25 - c],
                                                             [0.25 + c, 0.25]]),
                                             gammas=np.array([0.5, 0.5]),
                                             order=4,
                                             **kwargs)

from ode_sampler.stepfunctions.stepfunctions import (
    ForwardEulerMethod,
    HeunMethod,
    RungeKutta4,
    GaussLegendre4
)

from ode_sampler.stepfunctions.templates import (
    SingleStepMethod,
    ExplicitRungeKuttaMethod,
    ImplicitRungeKuttaMethod
)


from ode_sampler.version import PACKAGE_NAME, PACKAGE_VERSION

from ode_sampler.exceptions import ConfigurationError, NumericalFailure
from ode_sampler.algorithms import Algorithm, get_algorithm, list_algorithms
from ode_sampler.config import SolverConfig
from ode_sampler.models import ODEModel
from ode_sampler.trajectory import Trajectory
from ode_sampler.integrators import Integrator
from ode_sampler.solve import ODEProblem, solve
from ode_sampler.compilation import compile_rhs, is_compiled
from ode_sampler.benchmark import compare_compiled, time_solve

__version__ = PACKAGE_VERSION

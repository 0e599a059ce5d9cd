from ode_sampler.integrators.integrator import Integrator, integrate

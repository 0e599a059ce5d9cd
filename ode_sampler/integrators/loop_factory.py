from ode_sampler.constants import LoopTypes
from ode_sampler.integrators import integrator_loops as loops

loop_factory = {LoopTypes.ADAPTIVE: loops.adaptive_loop,
                LoopTypes.FIXED: loops.fixed_step_loop}

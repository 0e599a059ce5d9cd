from ode_sampler.models.base_model import BaseModel
from ode_sampler.models.model import ODEModel

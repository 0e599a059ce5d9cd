
class BaseModel:
    """
    Base model class. Override this to define your own ODE model classes.
    """
    def initialize(self, *args, **kwargs):
        """
        Prepares the model for integration from an initial state.
        """
        raise NotImplementedError

    def get_metadata(self):
        raise NotImplementedError

    def __call__(self, *args, **kwargs):
        """
        BaseModel call operator. Overload this to use your model with builtin step functions
        and the scipy integrators.

        Returns:
            A state vector corresponding to the right hand side of u' = f(u, p, t).

        """
        raise NotImplementedError

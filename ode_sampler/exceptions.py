__all__ = ["ConfigurationError", "NumericalFailure"]


class ConfigurationError(ValueError):
    """
    Raised for malformed problem or solver input. Always raised before
    integration begins.
    """


class NumericalFailure(RuntimeError):
    """
    Raised when an integration cannot proceed, e.g. because the integrator
    rejected a step, the state diverged or the step budget was exhausted.

    Attributes:
        trajectory: Partial trajectory computed up to the point of failure,
         or None if nothing was computed.
    """

    def __init__(self, message, trajectory=None):
        super(NumericalFailure, self).__init__(message)
        self.trajectory = trajectory

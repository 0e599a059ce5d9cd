from typing import List, Text, Union

import numpy as np
import pandas as pd

from ode_sampler.exceptions import ConfigurationError
from ode_sampler.utils.data_utils import initialize_dim_names, make_result_frame

__all__ = ["Trajectory"]


class Trajectory:
    """
    Sampled solution of an ODE problem.

    A trajectory holds the sample times ``t`` (shape (n,)) and the states ``u`` (shape (n, dim)),
    together with statistics of the solve that produced it. For scalar problems, ``states``
    returns the flattened (n,)-shaped view.

    If the solve was run with ``dense=True``, the trajectory can be called with a time or an
    array of times to evaluate the continuous interpolant of the solution.

    Attributes:
        t: Array of sample times, non-decreasing.
        u: Array of state vectors, one row per sample time.
        scalar: Whether the problem was posed with a scalar initial state.
        alg: Name of the algorithm used.
        nfev: Number of derivative function evaluations.
        num_steps: Number of integration steps taken.
        success: Whether the solve ran to the end of the time span.
        message: Status message of the solve.
        dim_names: Column names of the state dimensions.
    """

    def __init__(self,
                 t: np.ndarray,
                 u: np.ndarray,
                 scalar: bool = False,
                 alg: Text = None,
                 nfev: int = 0,
                 num_steps: int = 0,
                 success: bool = True,
                 message: Text = "",
                 interpolant=None,
                 dim_names: List[Text] = None):
        self.t = np.asarray(t, dtype=np.float64)
        self.u = np.asarray(u, dtype=np.float64)
        if self.u.ndim == 1:
            self.u = self.u.reshape((-1, 1))
        self.scalar = scalar
        self.alg = alg
        self.nfev = nfev
        self.num_steps = num_steps
        self.success = success
        self.message = message
        self.interpolant = interpolant
        self.dim_names = dim_names or initialize_dim_names(self.dim, scalar=scalar)

    @property
    def dim(self) -> int:
        return self.u.shape[1]

    @property
    def states(self) -> np.ndarray:
        return self.u[:, 0] if self.scalar else self.u

    @property
    def final_state(self) -> Union[float, np.ndarray]:
        if len(self) == 0:
            raise IndexError("Trajectory is empty.")
        return self[-1][1]

    def __len__(self):
        return len(self.t)

    def __getitem__(self, i):
        u = self.u[i]
        return self.t[i], (u[0] if self.scalar else u)

    def __iter__(self):
        for i in range(len(self)):
            yield self[i]

    def __call__(self, t: Union[float, np.ndarray]) -> np.ndarray:
        """
        Evaluate the dense interpolant of the solution.

        Args:
            t: A time or an array of times within the integrated time span.

        Returns:
            The interpolated state(s). For an array of times, one row per time.

        Raises:
            ConfigurationError: If the trajectory has no interpolant.
        """
        if self.interpolant is None:
            raise ConfigurationError("This trajectory has no dense output. Solve with an adaptive "
                                     "algorithm and dense=True to enable interpolation.")

        values = np.asarray(self.interpolant(t))

        if np.ndim(t) == 0:
            return values[0] if self.scalar else values

        values = values.T
        return values[:, 0] if self.scalar else values

    def to_dataframe(self, time_name: Text = None) -> pd.DataFrame:
        """
        Convert the trajectory into a data frame with one row per sample.

        Args:
            time_name: Column header for the sample times, defaults to "t".

        Returns:
            A pandas DataFrame with a time column and one column per state dimension.
        """
        return make_result_frame(self.t, self.u, dim_names=self.dim_names, time_name=time_name)

    def to_csv(self, path: Text, **kwargs):
        """
        Write the trajectory to a csv file.

        Args:
            path: Target file path.
            **kwargs: Additional keyword arguments passed to pandas.DataFrame.to_csv.
        """
        kwargs.setdefault("index", False)
        self.to_dataframe().to_csv(path, **kwargs)

    def __repr__(self):
        return "Trajectory(alg={0!r}, samples={1}, dim={2}, success={3})".format(
            self.alg, len(self), self.dim, self.success)

import os
from typing import List, Text

import numpy as np
import pandas as pd

from ode_sampler import defaults

__all__ = ["initialize_dim_names", "make_result_frame", "write_result_to_csv"]


def initialize_dim_names(dim: int, scalar: bool = False, variable_name: Text = None) -> List[Text]:
    """
    Initialize the dimension names for saving data to disk using pandas.
    The dimension names will be used as column headers in the resulting pd.DataFrame.
    Useful if you plan to label and plot your data automatically.

    Args:
        dim: Dimension of the state vector.
        scalar: Whether the state is a scalar.
        variable_name: Name of the state variable, defaults to "u".

    Returns:
        A list of dimension names.
    """
    name = variable_name or defaults.state_name

    if scalar:
        return [name]

    return ["{0}_{1}".format(name, i) for i in range(1, dim + 1)]


def make_result_frame(t: np.ndarray,
                      u: np.ndarray,
                      dim_names: List[Text],
                      time_name: Text = None) -> pd.DataFrame:
    """
    Build a data frame with one row per sample, holding the sample time and one column
    per state dimension.

    Args:
        t: Array of sample times, shape (n,).
        u: Array of states, shape (n, dim).
        dim_names: Column headers for the state dimensions.
        time_name: Column header for the sample times, defaults to "t".

    Returns:
        A pandas DataFrame containing the result data.
    """
    time_name = time_name or defaults.time_name

    if len(dim_names) != u.shape[1]:
        raise ValueError("Got {0} dimension names for a state of dimension "
                         "{1}.".format(len(dim_names), u.shape[1]))

    df = pd.DataFrame(data=u, columns=dim_names)
    df.insert(0, time_name, t)

    return df


def write_result_to_csv(result: pd.DataFrame,
                        out_dir: Text,
                        outfile_name: Text,
                        **kwargs) -> Text:
    """
    Write a result data frame to disk as a csv file.

    Args:
        result: Result data frame.
        out_dir: Designated output directory.
        outfile_name: Designated output file name, without extension.
        **kwargs: Additional keyword arguments passed to pandas.DataFrame.to_csv.

    Returns:
        The path of the written file.
    """
    if not os.path.exists(out_dir):
        os.makedirs(out_dir)

    file_ext = ".csv"

    out_file = os.path.join(out_dir, outfile_name + file_ext)

    kwargs.setdefault("index", False)
    result.to_csv(out_file, **kwargs)

    return out_file

import json
import os
from typing import Dict, Text, Any

from ode_sampler.constants import ResultKeys, ConfigKeys
from ode_sampler.utils.data_utils import write_result_to_csv

__all__ = ["get_result_metadata", "write_result_to_disk"]


def get_result_metadata(config: Dict[Text, Any]):
    """
    Get metadata from a result.

    Args:
        config: Result config object saved in an Integrator instance.

    Returns:
        A dict with run metadata information.
    """

    metadata_keys = [ConfigKeys.TIMESTAMP, ConfigKeys.ID, ConfigKeys.ALGORITHM,
                     ConfigKeys.NUM_STEPS, ConfigKeys.NFEV, ConfigKeys.STATUS]
    metadata = {k: config[k] for k in metadata_keys if k in config}

    return metadata


def write_result_to_disk(result: Dict, out_dir: Text, **kwargs):
    """
    Save a result to disk, including the sampled trajectory and the solve config.

    Args:
        result: Result object saved in an Integrator instance.
        out_dir: Designated output directory.
        **kwargs: Additional keyword arguments passed to pandas.DataFrame.to_csv.
    """
    trajectory = result[ResultKeys.RESULT_DATA]
    result_config = result[ResultKeys.CONFIG]

    result_filename = "result_info.json"

    # write trajectory samples to csv file
    write_result_to_csv(result=trajectory.to_dataframe(),
                        out_dir=out_dir,
                        outfile_name=ResultKeys.RESULT_DATA,
                        **kwargs)

    outfile = os.path.join(out_dir, result_filename)
    with open(outfile, "w") as f:
        json.dump(result_config, f)

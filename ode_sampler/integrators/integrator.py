import datetime
import logging
import os
import uuid
from typing import Dict, Text, List, Any

import absl.logging
import pandas as pd
from tabulate import tabulate

from ode_sampler.config import SolverConfig
from ode_sampler.constants import ResultKeys, ConfigKeys
from ode_sampler.exceptions import NumericalFailure
from ode_sampler.integrators.loop_factory import loop_factory
from ode_sampler.trajectory import Trajectory
from ode_sampler.utils.result_utils import get_result_metadata, write_result_to_disk

logger = logging.getLogger(__name__)

# package-wide handler so that all ode_sampler modules log in the same format
package_logger = logging.getLogger("ode_sampler")
package_logger.setLevel(logging.INFO)

if not package_logger.handlers:
    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO)
    ch.setFormatter(absl.logging.PythonFormatter())
    package_logger.addHandler(ch)

__all__ = ["integrate", "Integrator"]


def integrate(problem, config: SolverConfig, progress_bar: bool = False) -> Trajectory:
    """
    Run the integration loop matching the configured algorithm.

    Args:
        problem: ODEProblem to integrate.
        config: Validated solver configuration.
        progress_bar: Bool, whether to display a progress bar during the integration.

    Returns:
        The sampled trajectory.
    """
    loop = loop_factory.get(config.algorithm.loop_type)

    logger.debug("Starting integration with {0} on [{1}, {2}].".format(config.algorithm.name,
                                                                      *problem.tspan))

    trajectory = loop(problem=problem, config=config, progress_bar=progress_bar)

    logger.debug("Finished integration after {0} steps and {1} function "
                 "evaluations.".format(trajectory.num_steps, trajectory.nfev))

    return trajectory


class Integrator:
    """
    ODE integrator keeping a registry of solve results. The integrator keeps minimal state to
    facilitate IO and logging of integration results, and can be queried for specific results
    by ID.
    """

    def __init__(self,
                 base_log_dir: Text = None,
                 logfile_name: Text = None,
                 base_output_dir: Text = None):
        """
        Integrator constructor.

        Args:
            base_log_dir: Base directory for saving ODE integration logs. If not given, logs only
             go to the console.
            logfile_name: Name of the log file inside the log directory.
            base_output_dir: Base output directory for saving result data.
        """
        # empty list holding the different executed ODE integration results
        self.results = []

        self.base_log_dir = base_log_dir

        self.logfile_name = logfile_name or "logs.txt"

        if self.base_log_dir:
            self._set_up_logger(log_dir=self.base_log_dir)

        self.base_output_dir = base_output_dir or os.path.join(os.getcwd(), "results")

        logger.info("Created an Integrator instance.")

    def _reset(self):
        # Hard reset all data
        self.results = []

    def _set_up_logger(self, log_dir):
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)

        self._flush_stale_file_handlers()

        fh = logging.FileHandler(os.path.join(log_dir, self.logfile_name))
        fh.setLevel(logging.INFO)
        fh.setFormatter(absl.logging.PythonFormatter())
        package_logger.addHandler(fh)

    def _flush_stale_file_handlers(self):
        for handler in list(package_logger.handlers):
            if isinstance(handler, logging.FileHandler):
                package_logger.removeHandler(handler)
                handler.close()

    def _make_config(self,
                     problem,
                     config: SolverConfig,
                     trajectory: Trajectory) -> Dict[Text, Any]:

        start, end = problem.tspan

        result_config = {ConfigKeys.TIMESTAMP: datetime.datetime.now().strftime("%c"),
                         ConfigKeys.ID: str(uuid.uuid4()),
                         ConfigKeys.START: start,
                         ConfigKeys.END: end,
                         ConfigKeys.NFEV: trajectory.nfev,
                         ConfigKeys.NUM_STEPS: trajectory.num_steps,
                         ConfigKeys.STATUS: trajectory.message}

        result_config.update(config.to_dict())

        return result_config

    def solve(self,
              problem,
              alg=None,
              reltol: float = None,
              abstol: float = None,
              saveat=None,
              dt: float = None,
              max_steps: int = None,
              dense: bool = False,
              reset: bool = False,
              verbosity: int = logging.INFO,
              progress_bar: bool = False,
              **solver_options) -> Trajectory:
        """
        Solve an ODE problem and record the result.

        Args:
            problem: ODEProblem instance of your ODE problem.
            alg: Algorithm name, Algorithm or step function instance.
            reltol: Relative tolerance for adaptive algorithms.
            abstol: Absolute tolerance for adaptive algorithms.
            saveat: Sample times, or a uniform sample spacing.
            dt: Step size, required for fixed-step algorithms.
            max_steps: Maximum allowed steps during the integration.
            dense: Whether to keep a dense interpolant of the solution.
            reset: Bool, whether to reset the integrator (this deletes all previous results).
            verbosity: Logging verbosity, default logging.INFO.
            progress_bar: Bool, whether to display a progress bar during the integration.
            **solver_options: Additional keyword arguments for the scipy integrator.

        Returns:
            The sampled trajectory.
        """
        config = SolverConfig(alg=alg,
                              reltol=reltol,
                              abstol=abstol,
                              saveat=saveat,
                              dt=dt,
                              max_steps=max_steps,
                              dense=dense,
                              **solver_options)

        for handler in package_logger.handlers:
            handler.setLevel(verbosity)

        if reset:
            self._reset()

        logger.info("Starting integration with {}.".format(config.algorithm.name))

        try:
            trajectory = integrate(problem=problem, config=config, progress_bar=progress_bar)
        except NumericalFailure as e:
            logger.error("Integration with {0} failed: {1}".format(config.algorithm.name, e))
            raise

        logger.info("Finished integration.")

        result_dict = {ResultKeys.RESULT_DATA: trajectory,
                       ResultKeys.CONFIG: self._make_config(problem, config, trajectory)}

        self.results.append(result_dict)

        return trajectory

    def list_results(self, tablefmt: Text = "github"):
        """
        Lists metadata of all available previous results.

        Args:
            tablefmt: Table format, passed to tabulate.
        """

        if len(self.results) == 0:
            print("No results available!")
            return

        metadata_list = [get_result_metadata(result[ResultKeys.CONFIG]) for result in self.results]

        print(tabulate(metadata_list, headers="keys", tablefmt=tablefmt))

    def _get_result(self, result_id: Text) -> Dict[Text, Any]:
        if len(self.results) == 0:
            raise ValueError("No results available. Please solve a problem first!")
        if result_id == "latest":
            return self.results[-1]
        try:
            result = next(r for r in self.results if result_id in str(r[ResultKeys.CONFIG][ConfigKeys.ID]))
        except StopIteration:
            raise ValueError(f"Result with ID {result_id} not found.")

        return result

    def get_result_by_id(self, result_id: Text) -> Trajectory:
        """
        Returns a previous ODE integration result by (partial) ID.

        Args:
            result_id: ID of the chosen integration result object, or "latest".

        Raises:
            ValueError: If no result matches the given result ID.

        """
        return self._get_result(result_id)[ResultKeys.RESULT_DATA]

    def get_config_by_id(self, result_id: Text) -> Dict[Text, Any]:
        """
        Returns the config of a previous ODE integration result by (partial) ID.

        Args:
            result_id: ID of the chosen integration result object, or "latest".
        """
        return self._get_result(result_id)[ResultKeys.CONFIG]

    def return_result_data(self, result_id: Text) -> pd.DataFrame:
        """
        Return data of a previous integration result.

        Args:
            result_id: ID of the chosen integration result object.

        Returns:
            A DataFrame containing the sampled trajectory, one row per sample.
        """
        return self.get_result_by_id(result_id=result_id).to_dataframe()

    def save_result(self, result_id: Text, output_dir: Text) -> Text:
        """
        Saves a result object to an output directory on disk.

        Args:
            result_id: ID of the chosen integration result object.
            output_dir: Target directory to save the result to, relative to the base output directory.

        Returns:
            The directory the result was written to.
        """
        out_dir = os.path.join(self.base_output_dir, output_dir)

        write_result_to_disk(result=self._get_result(result_id), out_dir=out_dir)

        logger.info("Results saved to directory {}.".format(out_dir))

        return out_dir

    def summary(self) -> List[Dict[Text, Any]]:
        return [get_result_metadata(result[ResultKeys.CONFIG]) for result in self.results]

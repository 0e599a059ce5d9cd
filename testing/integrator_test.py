import json
import logging
import os

import numpy as np
import pandas as pd
import pytest

from ode_sampler import Integrator, ODEProblem, NumericalFailure
from ode_sampler.integrators.integrator import package_logger

y_0 = np.ones(3)
lamb = 0.5


def ode_func(u, p, t):
    return -p * u


@pytest.fixture
def problem():
    return ODEProblem(ode_func, y_0, (0.0, 2.0), p=lamb)


@pytest.fixture
def integrator(tmp_path):
    integrator = Integrator(base_output_dir=str(tmp_path / "results"))
    yield integrator
    integrator._flush_stale_file_handlers()


def test_results_are_registered(integrator, problem):
    first = integrator.solve(problem, saveat=[1.0, 2.0])
    second = integrator.solve(problem, alg="RK4", dt=0.1)

    assert len(integrator.results) == 2
    assert integrator.get_result_by_id("latest") is second

    result_id = integrator.results[0]["config"]["result_id"]
    assert integrator.get_result_by_id(result_id[:8]) is first

    config = integrator.get_config_by_id("latest")
    assert config["alg"] == "RK4"
    assert config["loop_type"] == "fixed"
    assert config["dt"] == 0.1
    assert config["num_steps"] == 20


def test_reset(integrator, problem):
    integrator.solve(problem)
    integrator.solve(problem, reset=True)

    assert len(integrator.results) == 1


def test_unknown_result_id(integrator, problem):
    with pytest.raises(ValueError):
        integrator.get_result_by_id("latest")

    integrator.solve(problem)

    with pytest.raises(ValueError):
        integrator.get_result_by_id("no-such-id")


def test_list_results(integrator, problem, capsys):
    integrator.list_results()
    assert "No results available!" in capsys.readouterr().out

    integrator.solve(problem, alg="DOP853")
    integrator.list_results()

    out = capsys.readouterr().out
    assert "DOP853" in out
    assert "result_id" in out

    summary = integrator.summary()
    assert len(summary) == 1
    assert summary[0]["alg"] == "DOP853"


def test_return_result_data(integrator, problem):
    integrator.solve(problem, saveat=0.5)

    df = integrator.return_result_data("latest")

    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ["t", "u_1", "u_2", "u_3"]
    np.testing.assert_allclose(df["t"], [0.0, 0.5, 1.0, 1.5, 2.0])


def test_save_result(integrator, problem, tmp_path):
    integrator.solve(problem, saveat=[0.0, 1.0, 2.0])

    out_dir = integrator.save_result("latest", output_dir="my_run123")

    assert out_dir == os.path.join(str(tmp_path / "results"), "my_run123")

    df = pd.read_csv(os.path.join(out_dir, "result_data.csv"))
    assert len(df) == 3
    np.testing.assert_allclose(df["u_1"], np.exp(-lamb * df["t"]), rtol=1e-3)

    with open(os.path.join(out_dir, "result_info.json")) as f:
        info = json.load(f)

    assert info["alg"] == "RK45"
    assert info["saveat"] == [0.0, 1.0, 2.0]
    assert info["start"] == 0.0
    assert info["end"] == 2.0


def test_log_file(tmp_path, problem):
    log_dir = tmp_path / "logs"
    integrator = Integrator(base_log_dir=str(log_dir), base_output_dir=str(tmp_path))

    try:
        integrator.solve(problem, verbosity=logging.INFO)

        for handler in package_logger.handlers:
            handler.flush()

        with open(os.path.join(str(log_dir), "logs.txt")) as f:
            logs = f.read()
    finally:
        integrator._flush_stale_file_handlers()

    assert "Finished integration." in logs


def test_failed_solves_are_not_registered(integrator):
    blow_up = ODEProblem(lambda u, p, t: u ** 2, 1.0, (0.0, 2.0))

    with pytest.raises(NumericalFailure):
        integrator.solve(blow_up)

    assert integrator.results == []

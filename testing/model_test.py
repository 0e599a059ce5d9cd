import numpy as np
import pytest

from ode_sampler import ODEModel, ODEProblem, ConfigurationError, solve, list_algorithms, get_algorithm
from ode_sampler.models.library import lorenz, LORENZ_PARAMS


def test_model_from_module_path():
    model = ODEModel(module_path="ode_sampler.models.library", ode_fn_name="lorenz",
                     params=LORENZ_PARAMS)

    trajectory = solve(model, [1.0, 0.0, 0.0], (0.0, 1.0), saveat=[1.0])

    assert model.variable_names == ["u", "p", "t"]
    assert not model.inplace
    assert trajectory.u.shape == (1, 3)


def test_model_from_source_file(tmp_path):
    source = tmp_path / "my_model.py"
    source.write_text("def decay(u, p, t):\n"
                      "    return -u\n")

    model = ODEModel(module_path=str(source), ode_fn_name="decay")

    trajectory = solve(model, 1.0, (0.0, 1.0), saveat=[1.0], reltol=1e-8, abstol=1e-10)

    assert trajectory.states[0] == pytest.approx(np.exp(-1.0), rel=1e-6)


def test_model_from_broken_source_file(tmp_path):
    source = tmp_path / "broken_model.py"
    source.write_text("def decay(u, p, t:\n"
                      "    return -u\n")

    with pytest.raises(ConfigurationError):
        ODEModel(module_path=str(source), ode_fn_name="decay")

    with pytest.raises(ConfigurationError):
        ODEModel(module_path=str(tmp_path / "missing.py"), ode_fn_name="decay")


@pytest.mark.parametrize("kwargs", [{},
                                    {"ode_fn": lorenz, "module_path": "ode_sampler.models.library"},
                                    {"module_path": "ode_sampler.models.library", "ode_fn_name": "missing"},
                                    {"module_path": "no.such.module", "ode_fn_name": "f"},
                                    {"ode_fn": 42}])
def test_bad_model_definitions(kwargs):
    with pytest.raises(ConfigurationError):
        ODEModel(**kwargs)


def test_inplace_inference():
    assert ODEModel(ode_fn=lambda du, u, p, t: None).inplace
    assert not ODEModel(ode_fn=lambda u, p, t: u).inplace
    assert not ODEModel(ode_fn=lambda u, p, t, scale=1.0: u).inplace
    assert ODEModel(ode_fn=lambda u, p, t: u, inplace=True).inplace


def test_dim_names():
    model = ODEModel(ode_fn=lorenz, dim_names=["x", "y", "z"])
    problem = ODEProblem(model, [1.0, 0.0, 0.0], (0.0, 1.0), p=LORENZ_PARAMS)

    df = problem.solve(saveat=0.5).to_dataframe()
    assert list(df.columns) == ["t", "x", "y", "z"]
    assert model.get_metadata()["dim_names"] == ["x", "y", "z"]

    with pytest.raises(ConfigurationError):
        ODEProblem(ODEModel(ode_fn=lorenz, dim_names=["x", "y"]), [1.0, 0.0, 0.0], (0.0, 1.0),
                   p=LORENZ_PARAMS)


def test_problem_parameters_override_model_parameters():
    model = ODEModel(ode_fn=lambda u, p, t: p * u, params=1.0)

    problem = ODEProblem(model, 1.0, (0.0, 1.0), p=-1.0)

    assert problem.p == -1.0
    assert model.params == 1.0


def test_algorithm_registry():
    table = list_algorithms()

    assert len(table) == 10
    assert {"RK45", "RK23", "DOP853", "Radau", "BDF", "LSODA",
            "Euler", "Heun", "RK4", "GaussLegendre4"} == set(table["name"])

    assert get_algorithm().name == "RK45"
    assert get_algorithm("lsoda").is_adaptive
    assert not get_algorithm("rk4").is_adaptive

    with pytest.raises(ConfigurationError):
        get_algorithm(3)

import numpy as np
import pandas as pd
import pytest

from ode_sampler import solve, ODEProblem, SolverConfig, ConfigurationError, NumericalFailure
from ode_sampler.models.library import exponential_growth, van_der_pol

k = 1.01
u0 = 0.5
tspan = (0.0, 1.0)


def ode_func(u, p, t):
    return k * u


def sol(t):
    return u0 * np.exp(k * t)


def test_scalar_linear_matches_analytic_solution():
    trajectory = solve(ode_func, u0, tspan, reltol=1e-8, abstol=1e-8)

    assert trajectory.success
    np.testing.assert_allclose(trajectory.states, sol(trajectory.t), rtol=1e-6)


@pytest.mark.parametrize("alg", ["RK45", "RK23", "DOP853", "Radau", "BDF", "LSODA"])
def test_adaptive_algorithms_match_analytic_solution(alg):
    trajectory = solve(exponential_growth, u0, tspan, p=k, alg=alg, reltol=1e-8, abstol=1e-10,
                       saveat=np.linspace(0.0, 1.0, 11))

    assert trajectory.alg == alg
    np.testing.assert_allclose(trajectory.states, sol(trajectory.t), rtol=1e-5)


def test_algorithm_names_are_case_insensitive():
    trajectory = solve(ode_func, u0, tspan, alg="dop853")

    assert trajectory.alg == "DOP853"


def test_saveat_times_are_returned_exactly():
    saveat = [0.0, 0.1, 0.25, 0.5, 0.75, 1.0]

    trajectory = solve(ode_func, u0, tspan, saveat=saveat, reltol=1e-8, abstol=1e-8)

    np.testing.assert_array_equal(trajectory.t, saveat)
    np.testing.assert_allclose(trajectory.states, sol(trajectory.t), rtol=1e-6)


def test_saveat_without_start_point():
    saveat = np.array([0.3, 0.6, 0.9])

    trajectory = solve(ode_func, u0, tspan, saveat=saveat)

    np.testing.assert_array_equal(trajectory.t, saveat)
    assert len(trajectory) == 3


def test_saveat_spacing():
    trajectory = solve(ode_func, u0, tspan, saveat=0.1)

    assert trajectory.t[0] == 0.0
    assert trajectory.t[-1] == 1.0
    np.testing.assert_allclose(trajectory.t, np.linspace(0.0, 1.0, 11))


def test_times_are_increasing_and_span_the_interval():
    trajectory = solve(ode_func, u0, tspan)

    assert trajectory.t[0] == tspan[0]
    assert trajectory.t[-1] == tspan[1]
    assert np.all(np.diff(trajectory.t) > 0)
    assert trajectory.num_steps == len(trajectory) - 1
    assert trajectory.nfev > 0


def test_scalar_state_is_flattened():
    trajectory = solve(ode_func, u0, tspan)

    assert trajectory.scalar
    assert trajectory.u.shape == (len(trajectory), 1)
    assert trajectory.states.shape == (len(trajectory),)

    t, u = trajectory[0]
    assert t == 0.0
    assert u == u0
    assert np.isscalar(trajectory.final_state) or np.ndim(trajectory.final_state) == 0


def test_vector_state():
    y0 = np.array([1.0, 2.0, 3.0])

    trajectory = solve(lambda u, p, t: -u, y0, (0.0, 2.0), reltol=1e-8, abstol=1e-10, saveat=[1.0, 2.0])

    assert trajectory.u.shape == (2, 3)
    np.testing.assert_allclose(trajectory.states, np.outer(np.exp(-trajectory.t), y0), rtol=1e-6)
    assert list(trajectory.to_dataframe().columns) == ["t", "u_1", "u_2", "u_3"]


def test_parameters_are_passed_unchanged():
    params = {"rate": -0.5}
    received = []

    def f(u, p, t):
        received.append(p)
        return p["rate"] * u

    solve(f, 1.0, tspan, p=params)

    assert len(received) > 1
    assert all(p is params for p in received)


def test_inplace_derivative_function():
    def f(du, u, p, t):
        du[0] = u[1]
        du[1] = -u[0]

    trajectory = solve(f, [1.0, 0.0], (0.0, np.pi), reltol=1e-8, abstol=1e-10, saveat=[np.pi])

    np.testing.assert_allclose(trajectory.states[-1], [-1.0, 0.0], atol=1e-6)


def test_empty_time_span():
    trajectory = solve(ode_func, u0, (1.0, 1.0))

    np.testing.assert_array_equal(trajectory.t, [1.0])
    np.testing.assert_array_equal(trajectory.states, [u0])


def test_dense_output_matches_analytic_solution():
    trajectory = solve(ode_func, u0, tspan, reltol=1e-8, abstol=1e-8, dense=True)

    assert trajectory(0.37) == pytest.approx(sol(0.37), rel=1e-6)

    ts = np.array([0.1, 0.55, 0.9])
    values = trajectory(ts)
    assert values.shape == (3,)
    np.testing.assert_allclose(values, sol(ts), rtol=1e-6)


def test_interpolation_requires_dense_output():
    trajectory = solve(ode_func, u0, tspan)

    with pytest.raises(ConfigurationError):
        trajectory(0.5)


def test_problem_solve_and_remake():
    problem = ODEProblem(ode_func, u0, tspan)

    trajectory = problem.solve(saveat=[1.0], reltol=1e-8, abstol=1e-8)
    assert trajectory.states[0] == pytest.approx(sol(1.0), rel=1e-6)

    doubled = problem.remake(u0=2 * u0).solve(saveat=[1.0], reltol=1e-8, abstol=1e-8)
    assert doubled.states[0] == pytest.approx(2 * sol(1.0), rel=1e-6)


def test_problem_fields_cannot_be_given_twice():
    problem = ODEProblem(ode_func, u0, tspan)

    with pytest.raises(ConfigurationError):
        solve(problem, u0=1.0)


@pytest.mark.parametrize("bad_tspan", [(1.0, 0.0), (0.0,), "ab", (0.0, np.inf)])
def test_bad_time_span(bad_tspan):
    with pytest.raises(ConfigurationError):
        solve(ode_func, u0, bad_tspan)


def test_reversed_time_span_is_a_value_error():
    with pytest.raises(ValueError):
        solve(ode_func, u0, (1.0, 0.0))


@pytest.mark.parametrize("bad_u0", [[], "abc", [[1.0, 2.0]], [np.nan]])
def test_bad_initial_state(bad_u0):
    with pytest.raises(ConfigurationError):
        solve(lambda u, p, t: u, bad_u0, tspan)


def test_dimension_mismatch():
    with pytest.raises(ConfigurationError):
        solve(lambda u, p, t: np.zeros(2), np.ones(3), tspan)

    with pytest.raises(ConfigurationError):
        solve(lambda u, p, t: np.zeros(2), 1.0, tspan)

    with pytest.raises(ConfigurationError):
        solve(lambda u, p, t: np.zeros((3, 1)), np.ones(3), tspan)


def test_bad_signature():
    with pytest.raises(ConfigurationError):
        solve(lambda u: u, u0, tspan)


@pytest.mark.parametrize("tolerances", [{"reltol": 0.0}, {"abstol": -1e-6}, {"reltol": "tight"}])
def test_non_positive_tolerances(tolerances):
    with pytest.raises(ConfigurationError):
        solve(ode_func, u0, tspan, **tolerances)


def test_unknown_algorithm():
    with pytest.raises(ConfigurationError, match="Unknown algorithm"):
        solve(ode_func, u0, tspan, alg="Tsit5")


@pytest.mark.parametrize("saveat", [[0.5, 0.2], [-0.1, 0.5], [0.5, 1.5], [], -0.1])
def test_bad_saveat(saveat):
    with pytest.raises(ConfigurationError):
        solve(ode_func, u0, tspan, saveat=saveat)


@pytest.mark.parametrize("options", [{"alg": "RK4"},
                                     {"alg": "RK4", "dt": 0.1, "dense": True},
                                     {"max_steps": 0},
                                     {"max_steps": 1.5},
                                     {"dt": -0.1}])
def test_bad_solver_options(options):
    with pytest.raises(ConfigurationError):
        solve(ode_func, u0, tspan, **options)


def test_blow_up_raises_numerical_failure_with_partial_trajectory():
    # u' = u^2, u(0) = 1 has the solution 1 / (1 - t) with a pole at t = 1
    with pytest.raises(NumericalFailure) as exc_info:
        solve(lambda u, p, t: u ** 2, 1.0, (0.0, 2.0))

    partial = exc_info.value.trajectory
    assert partial is not None
    assert not partial.success
    assert len(partial) > 1
    assert partial.t[0] == 0.0
    assert np.all(np.isfinite(partial.u))
    assert partial.t[-1] < 2.0


def test_step_budget_raises_numerical_failure():
    with pytest.raises(NumericalFailure, match="budget") as exc_info:
        solve(ode_func, u0, tspan, reltol=1e-10, abstol=1e-10, max_steps=3)

    partial = exc_info.value.trajectory
    assert len(partial) == 4
    assert partial.num_steps == 3
    assert not partial.success


@pytest.mark.parametrize("span, spacing, num", [((0.0, 1e4), 0.01, 10 ** 6 + 1),
                                                ((0.0, 1e-6), 1e-8, 101),
                                                ((0.0, 100.0), 0.001, 100001),
                                                ((0.0, 1.05), 0.1, 12)])
def test_saveat_spacing_keeps_every_grid_point(span, spacing, num):
    grid = SolverConfig(saveat=spacing).resolve_saveat(span)

    assert len(grid) == num
    assert grid[0] == span[0]
    assert grid[-1] == span[1]
    assert np.all(np.diff(grid) > 0)
    np.testing.assert_allclose(np.diff(grid)[:-1], spacing, rtol=1e-6)


def test_saveat_spacing_keeps_point_just_before_end():
    grid = SolverConfig(saveat=0.001).resolve_saveat((0.0, 100.0))

    assert grid[-2] == pytest.approx(99.999, abs=1e-9)


@pytest.mark.parametrize("alg", ["Radau", "BDF"])
def test_stiff_van_der_pol(alg):
    trajectory = solve(van_der_pol, [2.0, 0.0], (0.0, 3000.0), p=1000.0, alg=alg,
                       reltol=1e-6, abstol=1e-8)

    assert trajectory.success
    assert trajectory.t[-1] == 3000.0
    assert np.all(np.isfinite(trajectory.u))
    # relaxation oscillation amplitude
    assert np.max(np.abs(trajectory.u[:, 0])) < 2.05


def test_trajectory_to_csv(tmp_path):
    trajectory = solve(exponential_growth, u0, tspan, p=k, saveat=0.25)
    path = str(tmp_path / "trajectory.csv")

    trajectory.to_csv(path)
    df = pd.read_csv(path)

    assert list(df.columns) == ["t", "u"]
    np.testing.assert_allclose(df["t"], [0.0, 0.25, 0.5, 0.75, 1.0])
    np.testing.assert_allclose(df["u"], trajectory.states)


@pytest.mark.parametrize("alg, dt", [("RK45", None), ("RK4", 0.01)])
def test_progress_bar(alg, dt):
    trajectory = solve(exponential_growth, u0, tspan, p=k, alg=alg, dt=dt, saveat=0.1,
                       reltol=1e-8, abstol=1e-10, progress_bar=True)

    assert trajectory.success
    np.testing.assert_allclose(trajectory.states, sol(trajectory.t), rtol=1e-6)

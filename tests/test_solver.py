"""
Tests for the fixed-count and convergence drivers.

Run with: pytest tests/test_solver.py -v
"""

import math
import warnings
from pathlib import Path

import numpy as np
import pytest

from odesolver import (
    EvaluationDomainError,
    FormulaSyntaxError,
    NonConvergenceWarning,
    Point,
    Solver,
    StepConfig,
    Termination,
    compile_equation,
    integrate_fixed,
    integrate_until_convergence,
)
from odesolver.model import SolveMode


class TestStepConfig:
    """Test validation of the stepping parameters."""

    def test_modes(self):
        assert StepConfig(0.0, 1.0, 0.1, n=10).mode is SolveMode.FIXED
        assert StepConfig(0.0, 1.0, 0.1).mode is SolveMode.CONVERGENCE

    def test_defaults(self):
        config = StepConfig(0.0, 1.0, 0.1)
        assert config.tolerance == 1e-4
        assert config.max_iterations == 1000

    def test_x_end(self):
        assert StepConfig(1.0, 1.0, 0.5, n=4).x_end == pytest.approx(3.0)

    @pytest.mark.parametrize("kwargs", [
        dict(h=0.0),
        dict(h=float("nan")),
        dict(x0=float("inf")),
        dict(y0="1"),
        dict(n=-1),
        dict(n=1.5),
        dict(n=True),
        dict(tolerance=0.0),
        dict(tolerance=-1e-3),
        dict(max_iterations=-5),
        dict(max_iterations=2.0),
    ])
    def test_invalid(self, kwargs):
        values = dict(x0=0.0, y0=1.0, h=0.1)
        values.update(kwargs)
        with pytest.raises(ValueError):
            StepConfig(**values)

    def test_frozen(self):
        config = StepConfig(0.0, 1.0, 0.1, n=1)
        with pytest.raises(AttributeError):
            config.h = 0.2


class TestFixedDriver:
    """Test stepping a fixed number of times."""

    @pytest.mark.parametrize("n", [0, 1, 5, 37])
    def test_length(self, n):
        """n steps give n + 1 points."""
        trajectory = integrate_fixed("x + y", "euler", 0.0, 1.0, 0.1, n)
        assert len(trajectory) == n + 1
        assert trajectory.steps == n

    def test_zero_steps(self):
        """n = 0 returns the initial condition only."""
        trajectory = integrate_fixed("x + y", "rk4", 2.0, 3.0, 0.1, 0)
        assert list(trajectory) == [Point(2.0, 3.0)]
        assert trajectory.converged

    def test_first_euler_step(self):
        """dy/dx = x + y from (0, 1): y1 = 1 + 0.1 * (0 + 1)."""
        trajectory = integrate_fixed(compile_equation("x + y"), "euler", 0.0, 1.0, 0.1, 10)
        assert trajectory[0] == Point(0.0, 1.0)
        assert trajectory[1].x == pytest.approx(0.1)
        assert trajectory[1].y == pytest.approx(1.1)

    def test_rk4_closer_than_euler(self):
        """At x = 0.1 RK4 is closer than Euler to y = 2e^x - x - 1."""
        exact = 2 * math.exp(0.1) - 0.1 - 1
        euler = integrate_fixed("x + y", "euler", 0.0, 1.0, 0.1, 10)[1].y
        rk4 = integrate_fixed("x + y", "rk4", 0.0, 1.0, 0.1, 10)[1].y
        assert abs(rk4 - exact) < abs(euler - exact)
        assert rk4 == pytest.approx(1.1103, abs=1e-4)

    def test_x_advances_by_h(self):
        trajectory = integrate_fixed("1", "heun", 1.0, 0.0, 0.25, 8)
        np.testing.assert_allclose(trajectory.xs, 1.0 + 0.25 * np.arange(9))
        np.testing.assert_allclose(trajectory.ys, 0.25 * np.arange(9))

    def test_backward_integration(self):
        """dy/dx = y from (1, e) with h < 0 reaches y(0) = 1."""
        trajectory = integrate_fixed("y", "rk4", 1.0, math.e, -0.1, 10)
        assert trajectory.final.x == pytest.approx(0.0, abs=1e-12)
        assert trajectory.final.y == pytest.approx(1.0, rel=1e-5)

    def test_termination(self):
        trajectory = integrate_fixed("x", "euler", 0.0, 0.0, 0.1, 3)
        assert trajectory.termination is Termination.FIXED_STEPS
        assert trajectory.integrator == "euler"

    def test_invalid_inputs(self):
        with pytest.raises(ValueError):
            integrate_fixed("x", "euler", 0.0, 0.0, 0.0, 3)
        with pytest.raises(ValueError):
            integrate_fixed("x", "euler", 0.0, 0.0, 0.1, -1)
        with pytest.raises(FormulaSyntaxError):
            integrate_fixed("(x", "euler", 0.0, 0.0, 0.1, 3)
        with pytest.raises(FormulaSyntaxError):
            integrate_fixed("+".join(["y"] * 3000), "euler", 0.0, 1.0, 0.1, 1)

    def test_domain_error_aborts_run(self, caplog):
        """An undefined evaluation stops the run instead of plotting a zero."""
        with caplog.at_level("ERROR", logger="odesolver"):
            with pytest.raises(EvaluationDomainError):
                integrate_fixed("sqrt(x)", "euler", 1.0, 0.0, -0.5, 4)
        assert "aborted at step 4" in caplog.text

    def test_divergence_aborts_run(self):
        """A blow-up to a non-finite value is an error, not a data point."""
        with pytest.raises(EvaluationDomainError):
            integrate_fixed("y^2", "euler", 0.0, 1.0, 0.5, 50)

    def test_explicit_fallback(self):
        """A caller opting into the fallback keeps the run going."""
        f = compile_equation("log(x)").with_fallback(0.0)
        trajectory = integrate_fixed(f, "euler", 0.0, 1.0, 0.1, 1)
        assert trajectory[1].y == pytest.approx(1.0)

    def test_plain_callable(self):
        trajectory = integrate_fixed(lambda x, y: 2.0, "euler", 0.0, 0.0, 0.5, 2)
        assert trajectory.final.y == pytest.approx(2.0)

    def test_result_is_fresh(self):
        """Two runs with the same inputs give equal but independent results."""
        a = integrate_fixed("x + y", "rk4", 0.0, 1.0, 0.1, 5)
        b = integrate_fixed("x + y", "rk4", 0.0, 1.0, 0.1, 5)
        assert a == b
        assert a.points is not b.points


class TestConvergenceDriver:
    """Test stepping until y stabilizes."""

    def test_constant_solution_converges_immediately(self):
        trajectory = integrate_until_convergence("0", "euler", 0.0, 1.0, 0.1)
        assert trajectory.converged
        assert trajectory.termination is Termination.CONVERGED
        assert len(trajectory) == 2

    def test_converges_to_equilibrium(self):
        """dy/dx = 1 - y from (0, 0) settles near y = 1."""
        trajectory = integrate_until_convergence("1 - y", "euler", 0.0, 0.0, 0.1)
        assert trajectory.converged
        assert 2 < len(trajectory) < 1001
        assert trajectory.final.y == pytest.approx(1.0, abs=1e-2)
        last, previous = trajectory[-1].y, trajectory[-2].y
        assert abs(last - previous) / abs(last) <= 1e-4

    def test_cap_is_flagged(self):
        """dy/dx = -y never meets the tolerance; the cap ends the run."""
        with pytest.warns(NonConvergenceWarning):
            trajectory = integrate_until_convergence("-y", "rk4", 0.0, 1.0, 0.1, max_iterations=50)
        assert not trajectory.converged
        assert trajectory.termination is Termination.MAX_ITERATIONS
        assert len(trajectory) == 51

    @pytest.mark.parametrize("max_iterations", [0, 1, 7, 100])
    def test_never_exceeds_cap(self, max_iterations):
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", NonConvergenceWarning)
            trajectory = integrate_until_convergence("y", "heun", 0.0, 1.0, 0.1, max_iterations=max_iterations)
        assert len(trajectory) <= max_iterations + 1
        assert not trajectory.converged

    def test_zero_denominator(self):
        """Landing exactly on y = 0 ends the run as not converged."""
        with pytest.warns(NonConvergenceWarning):
            trajectory = integrate_until_convergence("-10y", "euler", 0.0, 1.0, 0.1)
        assert trajectory.termination is Termination.ZERO_DENOMINATOR
        assert not trajectory.converged
        assert trajectory.final == Point(0.1, 0.0)
        assert all(math.isfinite(p.y) for p in trajectory)

    def test_negative_values_use_magnitude(self):
        """A negative y does not make the relative change look small."""
        with pytest.warns(NonConvergenceWarning):
            trajectory = integrate_until_convergence("y", "euler", 0.0, -1.0, 0.1, max_iterations=20)
        assert len(trajectory) == 21

    def test_x_is_rounded(self):
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", NonConvergenceWarning)
            trajectory = integrate_until_convergence("-y", "euler", 0.0, 1.0, 0.1, max_iterations=40)
        assert all(p.x == round(p.x, 10) for p in trajectory)
        assert trajectory[30].x == 3.0

    def test_cap_logged(self, caplog):
        with caplog.at_level("WARNING", logger="odesolver"):
            with pytest.warns(NonConvergenceWarning):
                integrate_until_convergence("-y", "euler", 0.0, 1.0, 0.1, max_iterations=3)
        assert "without converging" in caplog.text

    def test_warning_points_at_caller(self):
        """The warning is attributed to the code that asked for the run."""
        with pytest.warns(NonConvergenceWarning) as record:
            integrate_until_convergence("-y", "euler", 0.0, 1.0, 0.1, max_iterations=3)
        assert Path(record[0].filename).name == Path(__file__).name

        config = StepConfig(x0=0.0, y0=1.0, h=0.1, max_iterations=3)
        with pytest.warns(NonConvergenceWarning) as record:
            Solver("-y", "euler").solve(config)
        assert Path(record[0].filename).name == Path(__file__).name


class TestSolver:
    """Test the Solver class dispatching on the configuration."""

    def test_dispatch_fixed(self):
        solver = Solver("x + y", "heun")
        trajectory = solver.solve(StepConfig(0.0, 1.0, 0.1, n=4))
        assert len(trajectory) == 5
        assert trajectory.integrator == "heun"

    def test_dispatch_convergence(self):
        trajectory = Solver("0", "euler").solve(StepConfig(0.0, 1.0, 0.1))
        assert trajectory.termination is Termination.CONVERGED

    def test_label(self):
        assert Solver("x + y", "rk4").label == "dy/dx = x + y [Runge-Kutta 4]"

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            Solver(3.0, "euler")

    def test_arrays(self):
        trajectory = Solver("x", "euler").solve_fixed(0.0, 0.0, 0.5, 2)
        assert trajectory.xs.dtype == np.float64
        np.testing.assert_allclose(trajectory.ys, [0.0, 0.0, 0.25])

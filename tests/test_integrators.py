"""
Tests for the single-step formulas.

Run with: pytest tests/test_integrators.py -v
"""

import math

import pytest

from odesolver.solvers import (
    EulerIntegrator,
    HeunIntegrator,
    Integrator,
    IntegratorKind,
    RungeKutta4Integrator,
    get_integrator,
    integrate_fixed,
)


def f_linear(x, y):
    return x + y


class TestSingleStep:
    """Test one step of each formula against hand-computed values."""

    def test_euler(self):
        assert EulerIntegrator().step(f_linear, 0.0, 1.0, 0.1) == pytest.approx(1.1)

    def test_heun(self):
        """Predictor 1.1, corrector 1 + 0.05 * (1 + 1.2)."""
        assert HeunIntegrator().step(f_linear, 0.0, 1.0, 0.1) == pytest.approx(1.11)

    def test_rk4(self):
        """k = 0.1, 0.11, 0.1105, 0.12105."""
        expected = 1.0 + (0.1 + 2 * 0.11 + 2 * 0.1105 + 0.12105) / 6
        assert RungeKutta4Integrator().step(f_linear, 0.0, 1.0, 0.1) == pytest.approx(expected, abs=1e-15)

    def test_callable(self):
        """Integrators are interchangeable plain callables."""
        for integrator in (EulerIntegrator(), HeunIntegrator(), RungeKutta4Integrator()):
            assert integrator(f_linear, 0.0, 1.0, 0.1) == integrator.step(f_linear, 0.0, 1.0, 0.1)

    def test_backward_step(self):
        """A negative step size integrates towards smaller x."""
        y = RungeKutta4Integrator().step(lambda x, y: y, 0.0, 1.0, -0.1)
        assert y == pytest.approx(math.exp(-0.1), rel=1e-6)


class TestRegistry:
    """Test resolving integrators by kind."""

    @pytest.mark.parametrize("kind, cls", [
        (IntegratorKind.EULER, EulerIntegrator),
        ("heun", HeunIntegrator),
        ("rk4", RungeKutta4Integrator),
    ])
    def test_lookup(self, kind, cls):
        integrator = get_integrator(kind)
        assert isinstance(integrator, cls)
        assert integrator.KIND == IntegratorKind(kind)

    def test_instance_passes_through(self):
        integrator = HeunIntegrator()
        assert get_integrator(integrator) is integrator

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown integrator 'midpoint'"):
            get_integrator("midpoint")

    def test_orders(self):
        assert [get_integrator(k).ORDER for k in IntegratorKind] == [1, 2, 4]

    def test_abstract(self):
        with pytest.raises(TypeError):
            Integrator()


class TestAccuracy:
    """Test the global error behaviour of each formula."""

    def test_y_independent_slope(self):
        """dy/dx = x from (0, 0): y(1) = 0.5; Euler loosest, Heun and RK4 exact for a linear slope."""
        errors = {
            kind: abs(integrate_fixed("x", kind, 0.0, 0.0, 0.1, 10).final.y - 0.5)
            for kind in IntegratorKind
        }
        assert errors[IntegratorKind.EULER] == pytest.approx(0.05)
        assert errors[IntegratorKind.HEUN] < 1e-12
        assert errors[IntegratorKind.RK4] < 1e-12
        assert errors[IntegratorKind.EULER] > errors[IntegratorKind.HEUN]

    def test_error_decreases_with_order(self):
        """dy/dx = x + y from (0, 1): y(1) = 2e - 2; error shrinks strictly with the order."""
        exact = 2 * math.e - 2
        errors = [
            abs(integrate_fixed("x + y", kind, 0.0, 1.0, 0.1, 10).final.y - exact)
            for kind in (IntegratorKind.EULER, IntegratorKind.HEUN, IntegratorKind.RK4)
        ]
        assert errors[0] > errors[1] > errors[2]
        assert errors[2] < 1e-5

    @pytest.mark.parametrize("kind, low, high", [
        (IntegratorKind.EULER, 1.8, 2.2),
        (IntegratorKind.HEUN, 3.5, 4.5),
        (IntegratorKind.RK4, 14.0, 18.0),
    ])
    def test_convergence_order(self, kind, low, high):
        """Halving h divides the error at x = 1 by roughly 2^order."""
        error_h = abs(integrate_fixed("y", kind, 0.0, 1.0, 0.1, 10).final.y - math.e)
        error_h2 = abs(integrate_fixed("y", kind, 0.0, 1.0, 0.05, 20).final.y - math.e)
        assert low < error_h / error_h2 < high

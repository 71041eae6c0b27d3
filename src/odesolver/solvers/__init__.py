"""
Integration Engine
==================
Single-step formulas (Euler, Heun, RK4) and the drivers that apply them.

Note: This package is pure Python/NumPy and does not import matplotlib.
"""
from odesolver.solvers.integrators import (
    INTEGRATORS,
    EulerIntegrator,
    HeunIntegrator,
    Integrator,
    IntegratorKind,
    RungeKutta4Integrator,
    get_integrator,
)
from odesolver.solvers.solver import (
    Solver,
    integrate_fixed,
    integrate_until_convergence,
    resolve_equation,
)

__all__ = [
    "INTEGRATORS",
    "EulerIntegrator",
    "HeunIntegrator",
    "Integrator",
    "IntegratorKind",
    "RungeKutta4Integrator",
    "Solver",
    "get_integrator",
    "integrate_fixed",
    "integrate_until_convergence",
    "resolve_equation",
]

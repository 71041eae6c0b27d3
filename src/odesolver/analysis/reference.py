"""
Reference Solutions
===================
Exact (or high-accuracy) solutions to compare approximations against.

Why is this file needed?
------------------------
1. Coupling: An error percentage only means something when the exact solution
   solves the same equation that was integrated. ReferenceProblem keeps the
   right-hand side and its exact solution together as one value.
2. Presets: The classic textbook equations with known closed forms.
3. No closed form: numerical_reference() builds a high-accuracy oracle with
   scipy for any equation, so it is consistent with the formula by construction.

Classes:
    ExactSolution: Closed form y(x) parameterized by the initial condition (x0, y0).
    ReferenceProblem: Matched pair of an Equation and its ExactSolution.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Callable

from scipy.integrate import solve_ivp

from odesolver.analysis.comparator import compare_to_exact
from odesolver.config import REFERENCE_ATOL, REFERENCE_METHOD, REFERENCE_RTOL
from odesolver.expression import Equation, Expression, compile_equation, compile_expression
from odesolver.model import StepConfig, TableRow, Trajectory
from odesolver.solvers import Solver
from odesolver.solvers.solver import IntegratorLike

logger = logging.getLogger(__name__)

EXACT_SOLUTION_VARIABLES: tuple[str, ...] = ("x", "x0", "y0")


@dataclass(frozen=True)
class ExactSolution:
    """
    Closed-form solution written in the variables x, x0 and y0.

    Example: "(y0 + x0 + 1)*exp(x - x0) - x - 1" solves dy/dx = x + y.
    """
    expression: Expression

    @classmethod
    def from_formula(cls, formula: str) -> ExactSolution:
        return cls(compile_expression(formula, EXACT_SOLUTION_VARIABLES))

    @property
    def formula(self) -> str:
        return self.expression.formula

    def __call__(self, x: float, x0: float, y0: float) -> float:
        return self.expression.evaluate(x=x, x0=x0, y0=y0)

    def bind(self, x0: float, y0: float) -> Callable[[float], float]:
        """Fix the initial condition, leaving a function of x alone."""
        def exact(x: float) -> float:
            return self(x, x0, y0)

        return exact


@dataclass(frozen=True)
class ReferenceProblem:
    """
    An equation together with the exact solution it is compared against.
    """
    name: str
    equation: Equation
    exact: ExactSolution
    description: str = field(default="", compare=False)

    @classmethod
    def from_formulas(cls, name: str, formula: str, exact_formula: str, description: str = "") -> ReferenceProblem:
        return cls(
            name=name,
            equation=compile_equation(formula),
            exact=ExactSolution.from_formula(exact_formula),
            description=description,
        )

    def solve(self, integrator: IntegratorLike, config: StepConfig) -> Trajectory:
        return Solver(self.equation, integrator).solve(config, stacklevel=3)

    def compare(self, trajectory: Trajectory) -> list[TableRow]:
        """
        Comparison table of a run of this problem.

        The initial condition is taken from the first point of the trajectory.
        """
        start = trajectory[0]
        return compare_to_exact(trajectory, self.exact.bind(start.x, start.y))


REFERENCE_PROBLEMS: dict[str, ReferenceProblem] = {
    problem.name: problem
    for problem in (
        ReferenceProblem.from_formulas(
            "x + y", "x + y", "(y0 + x0 + 1)*exp(x - x0) - x - 1",
            description="Linear, y = C e^x - x - 1",
        ),
        ReferenceProblem.from_formulas(
            "y", "y", "y0*exp(x - x0)",
            description="Exponential growth",
        ),
        ReferenceProblem.from_formulas(
            "-2y", "-2*y", "y0*exp(-2(x - x0))",
            description="Exponential decay",
        ),
        ReferenceProblem.from_formulas(
            "x", "x", "y0 + (x^2 - x0^2)/2",
            description="Independent of y, parabola",
        ),
        ReferenceProblem.from_formulas(
            "2xy", "2*x*y", "y0*exp(x^2 - x0^2)",
            description="Separable, y = C e^(x^2)",
        ),
        ReferenceProblem.from_formulas(
            "y - x", "y - x", "x + 1 + (y0 - x0 - 1)*exp(x - x0)",
            description="Linear, y = x + 1 + C e^x",
        ),
        ReferenceProblem.from_formulas(
            "cos(x)", "cos(x)", "y0 + sin(x) - sin(x0)",
            description="Independent of y, periodic",
        ),
    )
}


def get_reference_problem(name: str) -> ReferenceProblem:
    if name not in REFERENCE_PROBLEMS:
        raise KeyError(f"No reference problem named '{name}'. Available: {', '.join(REFERENCE_PROBLEMS)}")
    return REFERENCE_PROBLEMS[name]


def numerical_reference(
    equation: Callable[[float, float], float],
    x0: float,
    y0: float,
    x_end: float,
) -> Callable[[float], float]:
    """
    High-accuracy solution of dy/dx = f(x, y) on [x0, x_end].

    Uses scipy.integrate.solve_ivp with tight tolerances and dense output, for
    equations that have no closed-form solution at hand.

    Args:
        equation: Right-hand side f(x, y).
        x0: Initial x.
        y0: Initial y.
        x_end: Other end of the interval (may be below x0).

    Raises:
        ValueError: If the interval is empty.
        RuntimeError: If the integration fails.
        EvaluationDomainError: If f is undefined somewhere along the way.

    Returns:
        Function of x valid on the interval.
    """
    if x_end == x0:
        raise ValueError("Reference interval is empty (x_end == x0).")

    solution = solve_ivp(
        lambda x, y: [equation(x, y[0])],
        t_span=(x0, x_end),
        y0=[y0],
        method=REFERENCE_METHOD,
        rtol=REFERENCE_RTOL,
        atol=REFERENCE_ATOL,
        dense_output=True,
    )
    if not solution.success:
        raise RuntimeError(f"Reference integration failed: {solution.message}")
    logger.debug(f"Reference solution on [{x0:g}, {x_end:g}] used {solution.nfev} evaluations")

    dense = solution.sol

    def reference(x: float) -> float:
        return float(dense(x)[0])

    return reference


def numerical_reference_for(
    equation: Callable[[float, float], float],
    trajectory: Trajectory,
) -> Callable[[float], float]:
    """High-accuracy reference covering the x range of a trajectory."""
    start, end = trajectory[0], trajectory.final
    return numerical_reference(equation, start.x, start.y, end.x)

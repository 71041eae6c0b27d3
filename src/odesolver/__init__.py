"""
odesolver
=========
Numerical solution of first-order ODEs dy/dx = f(x, y) entered as text.

    >>> from odesolver import compile_equation, integrate_fixed
    >>> trajectory = integrate_fixed(compile_equation("x + y"), "rk4", 0.0, 1.0, 0.1, 10)
    >>> len(trajectory)
    11
"""
from odesolver.analysis import (
    REFERENCE_PROBLEMS,
    ExactSolution,
    PaddingPolicy,
    ReferenceProblem,
    combine_dual,
    compare_dual,
    compare_to_exact,
    numerical_reference,
)
from odesolver.errors import (
    EvaluationDomainError,
    EvaluationError,
    FormulaSyntaxError,
    NonConvergenceWarning,
    UndefinedErrorMetric,
)
from odesolver.expression import Equation, Expression, compile_equation, compile_expression
from odesolver.model import (
    DualPoint,
    DualTableRow,
    Point,
    StepConfig,
    TableRow,
    Termination,
    Trajectory,
    TrajectoryPair,
)
from odesolver.solvers import IntegratorKind, Solver, get_integrator, integrate_fixed, integrate_until_convergence

__version__ = "0.1.0"

__all__ = [
    "REFERENCE_PROBLEMS",
    "DualPoint",
    "DualTableRow",
    "Equation",
    "EvaluationDomainError",
    "EvaluationError",
    "ExactSolution",
    "Expression",
    "FormulaSyntaxError",
    "IntegratorKind",
    "NonConvergenceWarning",
    "PaddingPolicy",
    "Point",
    "ReferenceProblem",
    "Solver",
    "StepConfig",
    "TableRow",
    "Termination",
    "Trajectory",
    "TrajectoryPair",
    "UndefinedErrorMetric",
    "combine_dual",
    "compare_dual",
    "compare_to_exact",
    "compile_equation",
    "compile_expression",
    "get_integrator",
    "integrate_fixed",
    "integrate_until_convergence",
    "numerical_reference",
]

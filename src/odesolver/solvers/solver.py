from __future__ import annotations

import logging
import math
from typing import Callable, Union
import warnings

from odesolver.config import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE, X_ROUND_DECIMALS
from odesolver.errors import EvaluationDomainError, EvaluationError, NonConvergenceWarning
from odesolver.expression import Equation, compile_equation
from odesolver.model import Point, SolveMode, StepConfig, Termination, Trajectory
from odesolver.solvers.integrators import Integrator, IntegratorKind, get_integrator

logger = logging.getLogger(__name__)

EquationLike = Union[Equation, str, Callable[[float, float], float]]
IntegratorLike = Union[IntegratorKind, str, Integrator]


def resolve_equation(equation: EquationLike) -> Callable[[float, float], float]:
    """Compile formula text; pass compiled equations and plain callables through."""
    if isinstance(equation, str):
        return compile_equation(equation)
    if not callable(equation):
        raise TypeError(f"Expected an Equation, formula text or callable, got {type(equation).__name__}.")
    return equation


def describe_equation(f: Callable[[float, float], float]) -> str:
    if isinstance(f, Equation):
        return f.formula
    return getattr(f, "__name__", repr(f))


class Solver:
    """
    Class for the iteration drivers.

    Applies one integrator repeatedly to one equation, either a fixed number
    of times or until successive y values stop changing.
    """

    def __init__(
        self,
        equation: EquationLike,
        integrator: IntegratorLike = IntegratorKind.RK4,
    ) -> None:
        """
        Initialize the solver.

        Args:
            equation: Right-hand side f(x, y), as an Equation, formula text or callable.
            integrator: Kind (or instance) of the single-step formula.

        Raises:
            FormulaSyntaxError: If `equation` is formula text that does not compile.
            ValueError: If `integrator` names no known integrator.
        """
        self.f = resolve_equation(equation)
        self.integrator = get_integrator(integrator)

    @property
    def label(self) -> str:
        return f"dy/dx = {describe_equation(self.f)} [{self.integrator.NAME}]"

    def solve(self, config: StepConfig, *, stacklevel: int = 2) -> Trajectory:
        """
        Run the driver selected by the configuration's mode.

        `stacklevel` is counted from this method, as in warnings.warn, and
        decides which caller a NonConvergenceWarning is attributed to.
        """
        if config.mode is SolveMode.FIXED:
            return self.solve_fixed(config.x0, config.y0, config.h, config.n)
        return self.solve_until_convergence(
            config.x0, config.y0, config.h,
            tolerance=config.tolerance,
            max_iterations=config.max_iterations,
            stacklevel=stacklevel + 1,
        )

    def _advance(self, x: float, y: float, h: float, step: int) -> float:
        try:
            y_next = self.integrator(self.f, x, y, h)
        except EvaluationError as e:
            logger.error(f"{self.label}: run aborted at step {step} (x={x:g}, y={y:g}): {e}")
            raise

        if not math.isfinite(y_next):
            error = EvaluationDomainError(
                describe_equation(self.f), "Solution is no longer a finite number", {"x": x, "y": y}
            )
            logger.error(f"{self.label}: run aborted at step {step}: {error}")
            raise error
        return y_next

    def solve_fixed(self, x0: float, y0: float, h: float, n: int) -> Trajectory:
        """
        Take exactly `n` steps of size `h` from (x0, y0).

        Returns:
            Trajectory of n + 1 points, the first being the initial condition.
        """
        logger.info(f"{self.label}: {n} fixed steps from ({x0:g}, {y0:g}) with h={h:g}")

        points = [Point(x0, y0)]
        x, y = x0, y0
        for step in range(1, n + 1):
            y = self._advance(x, y, h, step)
            x += h
            points.append(Point(x, y))
            logger.debug(f"Step {step}: x={x:.10g}, y={y:.10g}")

        return Trajectory(tuple(points), self.integrator.KIND.value, Termination.FIXED_STEPS)

    def solve_until_convergence(
        self,
        x0: float,
        y0: float,
        h: float,
        tolerance: float = DEFAULT_TOLERANCE,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        *,
        stacklevel: int = 2,
    ) -> Trajectory:
        """
        Step from (x0, y0) until the relative change of y drops to `tolerance`.

        The relative change after a step is |y_next - y| / |y_next|. A step
        landing exactly on y_next == 0 ends the run as not converged. x is
        rounded to X_ROUND_DECIMALS digits after every step.

        Returns:
            Trajectory of at most max_iterations + 1 points. Its `converged`
            flag is False when the run stopped for any reason other than
            meeting the tolerance.
        """
        logger.info(
            f"{self.label}: stepping from ({x0:g}, {y0:g}) with h={h:g} "
            f"until relative change <= {tolerance:g} (max {max_iterations} iterations)"
        )

        points = [Point(x0, y0)]
        x, y = x0, y0
        termination = Termination.MAX_ITERATIONS
        for step in range(1, max_iterations + 1):
            y_next = self._advance(x, y, h, step)
            x = round(x + h, X_ROUND_DECIMALS)
            points.append(Point(x, y_next))

            if y_next == 0.0:
                termination = Termination.ZERO_DENOMINATOR
                break

            change = abs(y_next - y) / abs(y_next)
            logger.debug(f"Step {step}: x={x:.10g}, y={y_next:.10g}, relative change={change:.3e}")
            y = y_next
            if change <= tolerance:
                termination = Termination.CONVERGED
                break

        trajectory = Trajectory(tuple(points), self.integrator.KIND.value, termination)
        if trajectory.converged:
            logger.info(f"{self.label}: converged after {trajectory.steps} steps at x={x:g}")
        else:
            message = (
                f"{self.label}: stopped after {trajectory.steps} steps without converging "
                f"({termination.value})"
            )
            logger.warning(message)
            warnings.warn(message, NonConvergenceWarning, stacklevel=stacklevel)
        return trajectory


def integrate_fixed(
    equation: EquationLike,
    integrator_kind: IntegratorLike,
    x0: float,
    y0: float,
    h: float,
    n: int,
) -> Trajectory:
    """
    Fixed-count driver: apply the integrator exactly `n` times.

    Raises:
        ValueError: On an invalid step size or step count.
        EvaluationError: If the formula does not compile or cannot be evaluated along the way.
    """
    config = StepConfig(x0=x0, y0=y0, h=h, n=n)
    return Solver(equation, integrator_kind).solve(config, stacklevel=3)


def integrate_until_convergence(
    equation: EquationLike,
    integrator_kind: IntegratorLike,
    x0: float,
    y0: float,
    h: float,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> Trajectory:
    """
    Convergence driver: apply the integrator until y stabilizes or the cap is hit.

    Check `Trajectory.converged` (or `Trajectory.termination`) to tell a
    converged run from one that ran into the cap.
    """
    config = StepConfig(x0=x0, y0=y0, h=h, tolerance=tolerance, max_iterations=max_iterations)
    return Solver(equation, integrator_kind).solve(config, stacklevel=3)

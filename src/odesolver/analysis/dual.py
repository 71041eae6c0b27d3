from __future__ import annotations

from enum import StrEnum
from itertools import zip_longest
import logging
from typing import Optional

from odesolver.analysis.comparator import ExactFunction, compare_to_exact
from odesolver.config import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE
from odesolver.model import DualPoint, DualTableRow, StepConfig, Trajectory, TrajectoryPair
from odesolver.solvers import Solver
from odesolver.solvers.solver import EquationLike, IntegratorLike

logger = logging.getLogger(__name__)


class PaddingPolicy(StrEnum):
    PAD = "pad"
    TRUNCATE = "truncate"


def merge_trajectories(
    first: Trajectory,
    second: Trajectory,
    padding: PaddingPolicy = PaddingPolicy.PAD,
) -> TrajectoryPair:
    """
    Merge two trajectories index by index.

    With PaddingPolicy.PAD the merged sequence is as long as the longer input
    and the missing side is None; x comes from whichever input has the index.
    With PaddingPolicy.TRUNCATE it is as long as the shorter input.
    """
    padding = PaddingPolicy(padding)
    if len(first) != len(second):
        logger.info(
            f"Trajectories differ in length ({len(first)} vs {len(second)} points), "
            f"applying '{padding.value}' policy"
        )

    if padding is PaddingPolicy.TRUNCATE:
        points = tuple(DualPoint(a.x, a.y, b.y) for a, b in zip(first, second))
    else:
        points = tuple(
            DualPoint(
                x=a.x if a is not None else b.x,
                y1=a.y if a is not None else None,
                y2=b.y if b is not None else None,
            )
            for a, b in zip_longest(first, second)
        )
    return TrajectoryPair(first, second, points)


def combine_dual(
    equation_a: EquationLike,
    equation_b: EquationLike,
    integrator_kind: IntegratorLike,
    x0: float,
    y0: float,
    h: float,
    n: Optional[int] = None,
    *,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    padding: PaddingPolicy = PaddingPolicy.PAD,
) -> TrajectoryPair:
    """
    Run two equations under the same stepping parameters and merge the results.

    Both runs use the fixed-count driver when `n` is given, otherwise the
    convergence driver. Only the convergence driver can produce runs of
    different lengths; `padding` decides how those are merged.
    """
    config = StepConfig(x0=x0, y0=y0, h=h, n=n, tolerance=tolerance, max_iterations=max_iterations)
    first = Solver(equation_a, integrator_kind).solve(config, stacklevel=3)
    second = Solver(equation_b, integrator_kind).solve(config, stacklevel=3)
    return merge_trajectories(first, second, padding)


def compare_dual(
    pair: TrajectoryPair,
    exact_a: ExactFunction,
    exact_b: Optional[ExactFunction] = None,
) -> list[DualTableRow]:
    """
    Side by side comparison table of both runs of a pair.

    Args:
        pair: Result of combine_dual().
        exact_a: Exact solution (function of x) for the first equation.
        exact_b: Exact solution for the second equation, defaults to `exact_a`.

    Returns:
        One row per merged point; a side without data at that index is None.
    """
    rows_a = compare_to_exact(pair.first, exact_a)
    rows_b = compare_to_exact(pair.second, exact_b if exact_b is not None else exact_a)

    return [
        DualTableRow(iteration=i, x=point.x, first=row_a, second=row_b)
        for i, (point, row_a, row_b) in enumerate(
            zip(pair.points, _padded(rows_a, len(pair)), _padded(rows_b, len(pair))),
            start=1,
        )
    ]


def _padded(rows: list, length: int) -> list:
    return (rows + [None] * length)[:length]

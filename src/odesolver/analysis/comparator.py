from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

import numpy as np

from odesolver.errors import UndefinedErrorMetric
from odesolver.model import Point, TableRow

logger = logging.getLogger(__name__)

ExactFunction = Callable[..., float]


def percentage_error(approximate: float, exact: float) -> float:
    """
    Relative error of `approximate` in percent of `exact`.

    Raises:
        UndefinedErrorMetric: If `exact` is zero or not finite.
    """
    if exact == 0 or not math.isfinite(exact):
        raise UndefinedErrorMetric(f"Percentage error is undefined for an exact value of {exact}.")
    return abs(approximate - exact) / abs(exact) * 100


def compare_to_exact(
    points: Iterable[Point],
    exact_fn: ExactFunction,
    y0: Optional[float] = None,
) -> list[TableRow]:
    """
    Build the comparison table of an approximate solution against an exact one.

    The exact solution is trusted as given: nothing checks that it actually
    solves the equation the points were computed from. See ReferenceProblem
    for a formula and exact solution supplied as a matched pair.

    Args:
        points: Points of a run (a Trajectory or any iterable of Point).
        exact_fn: Exact solution, called as exact_fn(x), or exact_fn(x, y0)
            when `y0` is given.
        y0: Initial value forwarded to parameterized exact solutions.

    Returns:
        One row per point, numbered from 1.
    """
    rows: list[TableRow] = []
    for iteration, point in enumerate(points, start=1):
        exact = float(exact_fn(point.x) if y0 is None else exact_fn(point.x, y0))
        try:
            error: Optional[float] = percentage_error(point.y, exact)
        except UndefinedErrorMetric:
            logger.debug(f"Row {iteration}: exact value {exact} at x={point.x:g}, error not applicable")
            error = None
        rows.append(TableRow(iteration, point.x, exact, point.y, error))
    return rows


@dataclass(frozen=True)
class ErrorSummary:
    max_error_percentage: Optional[float]
    mean_error_percentage: Optional[float]
    undefined_rows: int


def summarize(rows: Sequence[TableRow]) -> ErrorSummary:
    """Maximum and mean of the defined error percentages of a table."""
    errors = np.array([row.error_percentage for row in rows if row.error_defined], dtype=np.float64)
    undefined = len(rows) - errors.size
    if errors.size == 0:
        return ErrorSummary(None, None, undefined)
    return ErrorSummary(float(errors.max()), float(errors.mean()), undefined)


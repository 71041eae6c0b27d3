"""
Result Values
=============
Immutable values produced by the drivers, the comparator and the dual combiner.

Classes:
    Point: One (x, y) sample of an approximate solution.
    Termination: Why a driver stopped.
    Trajectory: Ordered points of one run and how the run ended.
    TableRow: One comparison row (exact vs approximate).
    DualPoint: Merged sample of two trajectories.
    TrajectoryPair: Two trajectories and their merged points.
    DualTableRow: One comparison row for two trajectories.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Iterator, Optional, overload

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class Point:
    x: float
    y: float


class Termination(StrEnum):
    FIXED_STEPS = "fixed_steps"
    CONVERGED = "converged"
    MAX_ITERATIONS = "max_iterations"
    ZERO_DENOMINATOR = "zero_denominator"


@dataclass(frozen=True)
class Trajectory:
    """
    Points visited by one run, starting with the initial condition.

    Behaves as a read-only sequence of Point.
    """
    points: tuple[Point, ...]
    integrator: str
    termination: Termination

    @property
    def converged(self) -> bool:
        """False whenever the convergence driver stopped without meeting its tolerance."""
        return self.termination in (Termination.FIXED_STEPS, Termination.CONVERGED)

    @property
    def steps(self) -> int:
        return len(self.points) - 1

    @property
    def final(self) -> Point:
        return self.points[-1]

    @property
    def xs(self) -> npt.NDArray[np.float64]:
        return np.fromiter((p.x for p in self.points), dtype=np.float64, count=len(self.points))

    @property
    def ys(self) -> npt.NDArray[np.float64]:
        return np.fromiter((p.y for p in self.points), dtype=np.float64, count=len(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    @overload
    def __getitem__(self, index: int) -> Point: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Point, ...]: ...

    def __getitem__(self, index):
        return self.points[index]


@dataclass(frozen=True)
class TableRow:
    """
    Comparison of one point against the exact solution.

    `error_percentage` is None where the percentage is undefined (exact value of zero).
    """
    iteration: int
    x: float
    exact: float
    approximate: float
    error_percentage: Optional[float]

    @property
    def error_defined(self) -> bool:
        return self.error_percentage is not None


@dataclass(frozen=True)
class DualPoint:
    """Merged sample; a missing side of an unequal-length pair is None."""
    x: float
    y1: Optional[float]
    y2: Optional[float]


@dataclass(frozen=True)
class TrajectoryPair:
    first: Trajectory
    second: Trajectory
    points: tuple[DualPoint, ...]

    @property
    def aligned(self) -> bool:
        """True when both runs produced the same number of points."""
        return len(self.first) == len(self.second)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[DualPoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> DualPoint:
        return self.points[index]


@dataclass(frozen=True)
class DualTableRow:
    iteration: int
    x: float
    first: Optional[TableRow]
    second: Optional[TableRow]

"""
Stepping Parameters
===================
Defines the validated configuration shared by both iteration drivers.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import math
from numbers import Integral, Real
from typing import Optional

from odesolver.config import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE


class SolveMode(StrEnum):
    FIXED = "fixed"
    CONVERGENCE = "convergence"


@dataclass(frozen=True)
class StepConfig:
    """
    Initial condition and stepping parameters of one run.

    Giving `n` selects the fixed-count driver; leaving it out selects the
    convergence driver, which uses `tolerance` and `max_iterations`.
    """
    x0: float
    y0: float
    h: float
    n: Optional[int] = None
    tolerance: float = DEFAULT_TOLERANCE
    max_iterations: int = DEFAULT_MAX_ITERATIONS

    def __post_init__(self):
        for name in ("x0", "y0", "h"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
                raise ValueError(f"'{name}' must be a finite real number, got {value!r}.")
        if self.h == 0:
            raise ValueError("Step size 'h' must be non-zero.")

        if self.n is not None and not _is_non_negative_int(self.n):
            raise ValueError(f"Step count 'n' must be a non-negative integer, got {self.n!r}.")

        if isinstance(self.tolerance, bool) or not isinstance(self.tolerance, Real) or not self.tolerance > 0:
            raise ValueError(f"'tolerance' must be a positive number, got {self.tolerance!r}.")
        if not _is_non_negative_int(self.max_iterations):
            raise ValueError(f"'max_iterations' must be a non-negative integer, got {self.max_iterations!r}.")

    @property
    def mode(self) -> SolveMode:
        return SolveMode.FIXED if self.n is not None else SolveMode.CONVERGENCE

    @property
    def x_end(self) -> float:
        """Last x the run can reach (after n steps, or after max_iterations steps)."""
        steps = self.n if self.n is not None else self.max_iterations
        return self.x0 + steps * self.h


def _is_non_negative_int(value: object) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool) and value >= 0

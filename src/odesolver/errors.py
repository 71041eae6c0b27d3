"""
Error Kinds
===========
Exceptions and warnings raised by the evaluator, the drivers and the comparator.

Classes:
    EvaluationError: Base class, carries the offending formula and the reason.
    FormulaSyntaxError: Malformed or unsupported formula (raised at compile time).
    EvaluationDomainError: A single evaluation left the domain of the formula.
    NonConvergenceWarning: The convergence driver stopped without converging.
    UndefinedErrorMetric: Percentage error requested against an exact value of zero.
"""
from __future__ import annotations

from typing import Mapping, Optional


class EvaluationError(Exception):
    """
    Base class for everything that can go wrong with a user formula.

    Args:
        formula: The formula text as entered by the user.
        reason: Human readable description of the failure.
    """

    def __init__(self, formula: str, reason: str) -> None:
        self.formula = formula
        self.reason = reason
        super().__init__(f"{reason} in formula '{formula}'")


class FormulaSyntaxError(EvaluationError):
    """The formula could not be tokenized or parsed."""

    def __init__(self, formula: str, reason: str, position: Optional[int] = None) -> None:
        self.position = position
        if position is not None:
            reason = f"{reason} (at position {position})"
        super().__init__(formula, reason)


class EvaluationDomainError(EvaluationError):
    """Evaluation produced an undefined value (log of a non-positive number, division by zero, ...)."""

    def __init__(self, formula: str, reason: str, scope: Optional[Mapping[str, float]] = None) -> None:
        self.scope = dict(scope) if scope is not None else {}
        if self.scope:
            binding = ", ".join(f"{name}={value:g}" for name, value in self.scope.items())
            reason = f"{reason} at {binding}"
        super().__init__(formula, reason)


class NonConvergenceWarning(UserWarning):
    """Issued when the convergence driver stops on its iteration cap or a zero denominator."""


class UndefinedErrorMetric(ArithmeticError):
    """Percentage error is undefined because the exact value is zero (or not finite)."""

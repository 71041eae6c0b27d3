"""
Analysis Layer
==============
Compares approximations with exact solutions and combines two runs.

Plotting lives in odesolver.analysis.plotting and is imported on demand, so
that the numerical core does not pull in matplotlib.
"""
from odesolver.analysis.comparator import (
    ErrorSummary,
    compare_to_exact,
    percentage_error,
    summarize,
)
from odesolver.analysis.dual import PaddingPolicy, combine_dual, compare_dual, merge_trajectories
from odesolver.analysis.reference import (
    REFERENCE_PROBLEMS,
    ExactSolution,
    ReferenceProblem,
    get_reference_problem,
    numerical_reference,
    numerical_reference_for,
)

__all__ = [
    "REFERENCE_PROBLEMS",
    "ErrorSummary",
    "ExactSolution",
    "PaddingPolicy",
    "ReferenceProblem",
    "combine_dual",
    "compare_dual",
    "compare_to_exact",
    "get_reference_problem",
    "merge_trajectories",
    "numerical_reference",
    "numerical_reference_for",
    "percentage_error",
    "summarize",
]

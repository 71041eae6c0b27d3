"""
The MODEL layer contains the immutable values passed between pipeline stages.
It has NO knowledge of formulas, integrators or plotting.
"""
from odesolver.model.results import (
    DualPoint,
    DualTableRow,
    Point,
    TableRow,
    Termination,
    Trajectory,
    TrajectoryPair,
)
from odesolver.model.step_config import SolveMode, StepConfig

__all__ = [
    "DualPoint",
    "DualTableRow",
    "Point",
    "SolveMode",
    "StepConfig",
    "TableRow",
    "Termination",
    "Trajectory",
    "TrajectoryPair",
]

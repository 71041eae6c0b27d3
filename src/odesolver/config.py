"""
Configuration & Global Constants
================================
This module serves as the central registry for the numerical defaults.

Why is this file needed?
------------------------
1. Single source: The stopping rule of the convergence driver and the x rounding
   are referenced from the drivers, the combiner and the demo runner.
2. Presentation defaults: A consumer building a form can pre-fill its inputs from
   the DEFAULT_* values.

Exports:
    DEFAULT_TOLERANCE (float): Relative change at which the convergence driver stops.
    DEFAULT_MAX_ITERATIONS (int): Hard cap on steps taken by the convergence driver.
    X_ROUND_DECIMALS (int): Decimal digits x is rounded to after each convergence step.
    MAX_TREE_DEPTH (int): Deepest expression tree a formula may compile to.
"""

# Convergence driver
DEFAULT_TOLERANCE: float = 1e-4
DEFAULT_MAX_ITERATIONS: int = 1000
X_ROUND_DECIMALS: int = 10

# Expression trees are evaluated recursively, so their depth must stay well
# below the interpreter recursion limit
MAX_TREE_DEPTH: int = 200

# Initial values pre-filled by the demo runner
DEFAULT_X0: float = 0.0
DEFAULT_Y0: float = 1.0
DEFAULT_H: float = 0.1
DEFAULT_N: int = 10

# High-accuracy reference (scipy.integrate.solve_ivp)
REFERENCE_METHOD: str = "DOP853"
REFERENCE_RTOL: float = 1e-10
REFERENCE_ATOL: float = 1e-12

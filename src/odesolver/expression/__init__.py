"""
Expression Evaluator
====================
Restricted interpreter for user-entered formulas: tokenize, parse into an
immutable tree, walk the tree against a variable binding.
"""
from odesolver.expression.equation import (
    EQUATION_VARIABLES,
    Equation,
    Expression,
    compile_equation,
    compile_expression,
)

__all__ = [
    "EQUATION_VARIABLES",
    "Equation",
    "Expression",
    "compile_equation",
    "compile_expression",
]

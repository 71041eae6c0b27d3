"""
Expression Tree
===============
Immutable nodes produced by the parser and walked by the evaluator.

Every node evaluates to a numpy float64 so that the caller can run the walk
under a raising ``numpy.errstate`` and get an exception for every undefined
operation instead of a silent NaN or inf.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Mapping

import numpy as np

CONSTANTS: dict[str, float] = {
    "pi": float(np.pi),
    "π": float(np.pi),
    "e": float(np.e),
}

FUNCTIONS: dict[str, Callable[[np.float64], np.float64]] = {
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
    "sqrt": np.sqrt,
    "ln": np.log,
    "log": np.log10,
    "exp": np.exp,
    "abs": np.abs,
}

BINARY_OPERATORS: dict[str, Callable[[np.float64, np.float64], np.float64]] = {
    "+": np.add,
    "-": np.subtract,
    "*": np.multiply,
    "/": np.divide,
    "^": np.power,
}

UNARY_OPERATORS: dict[str, Callable[[np.float64], np.float64]] = {
    "+": np.positive,
    "-": np.negative,
}


class Node(ABC):
    """
    Abstract base class for expression tree nodes.
    """

    @abstractmethod
    def evaluate(self, scope: Mapping[str, float]) -> np.float64:
        """
        Evaluate the subtree.

        Args:
            scope: Values of the variables, by name.

        Returns:
            The value of the subtree.
        """
        pass

    @property
    def children(self) -> tuple[Node, ...]:
        return ()


@dataclass(frozen=True)
class Number(Node):
    value: float

    def evaluate(self, scope: Mapping[str, float]) -> np.float64:
        return np.float64(self.value)


@dataclass(frozen=True)
class Constant(Node):
    name: str

    def evaluate(self, scope: Mapping[str, float]) -> np.float64:
        return np.float64(CONSTANTS[self.name])


@dataclass(frozen=True)
class Variable(Node):
    name: str

    def evaluate(self, scope: Mapping[str, float]) -> np.float64:
        return np.float64(scope[self.name])


@dataclass(frozen=True)
class UnaryOperation(Node):
    operator: str
    operand: Node

    def evaluate(self, scope: Mapping[str, float]) -> np.float64:
        return UNARY_OPERATORS[self.operator](self.operand.evaluate(scope))

    @property
    def children(self) -> tuple[Node, ...]:
        return (self.operand,)


@dataclass(frozen=True)
class BinaryOperation(Node):
    operator: str
    left: Node
    right: Node

    def evaluate(self, scope: Mapping[str, float]) -> np.float64:
        return BINARY_OPERATORS[self.operator](self.left.evaluate(scope), self.right.evaluate(scope))

    @property
    def children(self) -> tuple[Node, ...]:
        return (self.left, self.right)


@dataclass(frozen=True)
class FunctionCall(Node):
    name: str
    argument: Node

    def evaluate(self, scope: Mapping[str, float]) -> np.float64:
        return FUNCTIONS[self.name](self.argument.evaluate(scope))

    @property
    def children(self) -> tuple[Node, ...]:
        return (self.argument,)


def tree_depth(root: Node) -> int:
    """
    Number of nodes on the longest path from `root` to a leaf.

    Walks the tree with an explicit stack, so it also works on trees too deep
    to evaluate.
    """
    depth = 0
    stack = [(root, 1)]
    while stack:
        node, level = stack.pop()
        depth = max(depth, level)
        stack.extend((child, level + 1) for child in node.children)
    return depth

"""
Formula Parser
==============
Recursive-descent parser turning formula text into an expression tree.

Grammar, lowest precedence first::

    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/") unary | <implicit> unary)*
    unary      := ("+" | "-") unary | power
    power      := primary (("^" | "**") unary)?
    primary    := NUMBER | CONSTANT | VARIABLE
                | FUNCTION "(" expression ")"
                | "(" expression ")"

Implicit multiplication applies when an identifier or an opening parenthesis
directly follows a complete factor ("2x", "3(x + 1)", "x sin(y)").
"""
from __future__ import annotations

import math
from typing import Iterable

from odesolver.config import MAX_TREE_DEPTH
from odesolver.errors import FormulaSyntaxError
from odesolver.expression.nodes import (
    CONSTANTS,
    FUNCTIONS,
    BinaryOperation,
    Constant,
    FunctionCall,
    Node,
    Number,
    UnaryOperation,
    Variable,
    tree_depth,
)
from odesolver.expression.tokenizer import Token, TokenKind, tokenize


class Parser:
    """
    Single-use parser for one formula.

    Args:
        formula: The formula text.
        variables: Names that are allowed as free variables.
    """

    def __init__(self, formula: str, variables: Iterable[str]) -> None:
        self.formula = formula
        self.variables = frozenset(variables)
        self.tokens = tokenize(formula)
        self.index = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind is not TokenKind.END:
            self.index += 1
        return token

    def _error(self, reason: str, token: Token | None = None) -> FormulaSyntaxError:
        token = token or self.current
        return FormulaSyntaxError(self.formula, reason, token.position)

    def _is_operator(self, *symbols: str) -> bool:
        return self.current.kind is TokenKind.OPERATOR and self.current.text in symbols

    def parse(self) -> Node:
        """
        Parse the whole formula.

        Raises:
            FormulaSyntaxError: If the formula is empty, malformed or uses an unknown name.

        Returns:
            Root node of the expression tree.
        """
        if self.current.kind is TokenKind.END:
            raise self._error("Formula is empty")

        try:
            tree = self._expression()
        except RecursionError:
            raise FormulaSyntaxError(self.formula, "Formula is nested too deeply") from None

        if self.current.kind is TokenKind.RPAREN:
            raise self._error("Unbalanced parentheses: unexpected ')'")
        if self.current.kind is not TokenKind.END:
            raise self._error(f"Unexpected '{self.current.text}'")

        depth = tree_depth(tree)
        if depth > MAX_TREE_DEPTH:
            raise FormulaSyntaxError(
                self.formula, f"Formula is too deeply nested to evaluate ({depth} levels, at most {MAX_TREE_DEPTH})"
            )
        return tree

    def _expression(self) -> Node:
        node = self._term()
        while self._is_operator("+", "-"):
            operator = self._advance().text
            node = BinaryOperation(operator, node, self._term())
        return node

    def _term(self) -> Node:
        node = self._unary()
        while True:
            if self._is_operator("*", "/"):
                operator = self._advance().text
                node = BinaryOperation(operator, node, self._unary())
            elif self.current.kind in (TokenKind.IDENTIFIER, TokenKind.LPAREN):
                node = BinaryOperation("*", node, self._unary())
            else:
                return node

    def _unary(self) -> Node:
        if self._is_operator("+", "-"):
            operator = self._advance().text
            return UnaryOperation(operator, self._unary())
        return self._power()

    def _power(self) -> Node:
        base = self._primary()
        if self._is_operator("^", "**"):
            self._advance()
            # right-associative: 2^3^2 == 2^(3^2)
            return BinaryOperation("^", base, self._unary())
        return base

    def _primary(self) -> Node:
        token = self.current

        if token.kind is TokenKind.NUMBER:
            self._advance()
            value = float(token.text)
            if not math.isfinite(value):
                raise self._error(f"Number '{token.text}' is out of range", token)
            return Number(value)

        if token.kind is TokenKind.IDENTIFIER:
            self._advance()
            return self._identifier(token)

        if token.kind is TokenKind.LPAREN:
            self._advance()
            node = self._expression()
            self._expect_closing(token)
            return node

        if token.kind is TokenKind.END:
            raise self._error("Unexpected end of formula")
        if token.kind is TokenKind.RPAREN:
            raise self._error("Unexpected ')'")
        raise self._error(f"Unexpected '{token.text}'")

    def _identifier(self, token: Token) -> Node:
        name = token.text
        if name in FUNCTIONS:
            if self.current.kind is not TokenKind.LPAREN:
                raise self._error(f"Function '{name}' must be followed by '('")
            opening = self._advance()
            argument = self._expression()
            self._expect_closing(opening)
            return FunctionCall(name, argument)
        if name in self.variables:
            return Variable(name)
        if name in CONSTANTS:
            return Constant(name)
        raise self._error(f"Unknown identifier '{name}'", token)

    def _expect_closing(self, opening: Token) -> None:
        if self.current.kind is not TokenKind.RPAREN:
            raise self._error(f"Unbalanced parentheses: '(' at position {opening.position} is never closed")
        self._advance()


def parse(formula: str, variables: Iterable[str] = ("x", "y")) -> Node:
    """Parse a formula into an expression tree."""
    return Parser(formula, variables).parse()

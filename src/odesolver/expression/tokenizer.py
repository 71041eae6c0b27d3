from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re

from odesolver.errors import FormulaSyntaxError


class TokenKind(Enum):
    NUMBER = "number"
    IDENTIFIER = "identifier"
    OPERATOR = "operator"
    LPAREN = "("
    RPAREN = ")"
    END = "end"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: int


_TOKEN_PATTERN = re.compile(
    r"""
    (?P<space>\s+)
    | (?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
    | (?P<identifier>π|[A-Za-z_][A-Za-z0-9_]*)
    | (?P<operator>\*\*|[-+*/^])
    | (?P<lparen>\()
    | (?P<rparen>\))
    """,
    re.VERBOSE,
)

_GROUP_TO_KIND = {
    "number": TokenKind.NUMBER,
    "identifier": TokenKind.IDENTIFIER,
    "operator": TokenKind.OPERATOR,
    "lparen": TokenKind.LPAREN,
    "rparen": TokenKind.RPAREN,
}


def tokenize(formula: str) -> list[Token]:
    """
    Split a formula into tokens.

    The returned list always ends with a single END token.

    Args:
        formula: Formula text, e.g. "2x + sin(y)".

    Raises:
        FormulaSyntaxError: On a character that cannot start any token.

    Returns:
        The tokens in input order.
    """
    tokens: list[Token] = []
    position = 0
    while position < len(formula):
        match = _TOKEN_PATTERN.match(formula, position)
        if match is None:
            raise FormulaSyntaxError(formula, f"Unexpected character '{formula[position]}'", position)

        group = match.lastgroup
        if group != "space":
            tokens.append(Token(_GROUP_TO_KIND[group], match.group(), position))
        position = match.end()

    tokens.append(Token(TokenKind.END, "", len(formula)))
    return tokens

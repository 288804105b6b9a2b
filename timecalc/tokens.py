from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from timecalc.duration import Duration
from timecalc.values import canonical


class TokenKind(Enum):
    NUMBER = "number"
    DATETIME = "datetime"
    DURATION = "duration"
    OPERATOR = "operator"
    UNARY_MINUS = "unary-minus"
    LPAREN = "("
    RPAREN = ")"
    NOW = "now"


OPERAND_KINDS = frozenset(
    {TokenKind.NUMBER, TokenKind.DATETIME, TokenKind.DURATION, TokenKind.NOW}
)

BINARY_OPERATORS = frozenset("+-*/")


@dataclass(frozen=True, kw_only=True)
class Token:
    kind: TokenKind
    value: Any = None

    @property
    def is_operand(self) -> bool:
        return self.kind in OPERAND_KINDS

    def __str__(self) -> str:
        """Compact form used in debug logs, e.g. ``2024-01-01T00:00:00``, ``+``, ``u-``."""
        if self.kind is TokenKind.UNARY_MINUS:
            return "u-"
        if self.kind is TokenKind.OPERATOR:
            return str(self.value)
        if self.kind in (TokenKind.NUMBER, TokenKind.DATETIME, TokenKind.DURATION):
            return canonical(self.value)
        return self.kind.value


def number(value: float) -> Token:
    return Token(kind=TokenKind.NUMBER, value=float(value))


def date_time(value: datetime) -> Token:
    return Token(kind=TokenKind.DATETIME, value=value)


def duration(value: Duration) -> Token:
    return Token(kind=TokenKind.DURATION, value=value)


def operator(symbol: str) -> Token:
    if symbol not in BINARY_OPERATORS:
        raise ValueError(
            f"Unknown binary operator {symbol!r}. Valid operators: + - * /"
        )
    return Token(kind=TokenKind.OPERATOR, value=symbol)


UNARY_MINUS = Token(kind=TokenKind.UNARY_MINUS)
LPAREN = Token(kind=TokenKind.LPAREN)
RPAREN = Token(kind=TokenKind.RPAREN)
NOW = Token(kind=TokenKind.NOW)

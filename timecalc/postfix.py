"""Infix to postfix (Reverse Polish) conversion."""

import logging
from collections.abc import Iterable

from timecalc.tokens import Token, TokenKind

logger = logging.getLogger(__name__)

PRECEDENCE = {
    "+": 1,
    "-": 1,
    "*": 2,
    "/": 2,
    "u-": 3,
}


def _precedence(token: Token) -> int:
    if token.kind is TokenKind.UNARY_MINUS:
        return PRECEDENCE["u-"]
    return PRECEDENCE[token.value]


def to_postfix(tokens: Iterable[Token]) -> list[Token]:
    """Reorder infix tokens into postfix order with the shunting-yard algorithm.

    Binary operators are left-associative; unary minus is a prefix operator
    and never pops anything off the stack.

    The conversion does not validate the expression. Unmatched parentheses
    are tolerated on both sides: a stray ``)`` empties the operator stack and
    an unclosed ``(`` is dropped at the end, so ``(1+2`` reads as ``1+2``.
    Malformed input surfaces as an evaluation error instead.
    """
    output: list[Token] = []
    stack: list[Token] = []

    for token in tokens:
        if token.is_operand:
            output.append(token)
        elif token.kind is TokenKind.LPAREN:
            stack.append(token)
        elif token.kind is TokenKind.RPAREN:
            while stack and stack[-1].kind is not TokenKind.LPAREN:
                output.append(stack.pop())
            if stack:
                stack.pop()
        elif token.kind is TokenKind.UNARY_MINUS:
            stack.append(token)
        else:
            incoming = _precedence(token)
            while (
                stack
                and stack[-1].kind is not TokenKind.LPAREN
                and _precedence(stack[-1]) >= incoming
            ):
                output.append(stack.pop())
            stack.append(token)

    while stack:
        token = stack.pop()
        if token.kind is not TokenKind.LPAREN:
            output.append(token)

    logger.debug("postfix order: %s", " ".join(map(str, output)))
    return output

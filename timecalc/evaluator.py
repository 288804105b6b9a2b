"""Postfix evaluation over numbers, date-times and durations.

Binary operators dispatch on ``(operator, kind of a, kind of b)`` through
:data:`BINARY_RULES`. A combination missing from the table is a type mismatch;
nothing is ever coerced from one kind to another.
"""

import logging
import math
import operator as op
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from timecalc.duration import Duration, Unit
from timecalc.errors import (
    DivisionByZero,
    InvalidExpression,
    OutOfRange,
    TypeMismatch,
    UnknownOperator,
)
from timecalc.tokens import Token, TokenKind
from timecalc.util import UNITS
from timecalc.values import CalcValue, ValueKind, canonical, format_number, kind_of

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Rule = Callable[[Any, Any], CalcValue]

NUMBER, DATETIME, DURATION = ValueKind.NUMBER, ValueKind.DATETIME, ValueKind.DURATION

_UNIT_ORDER = list(UNITS)


def _describe(value: CalcValue) -> str:
    return f"{kind_of(value)} ({canonical(value)})"


def _checked(func: Callable[[float, float], float]) -> Rule:
    def apply(a: float, b: float) -> float:
        result = func(a, b)
        if not math.isfinite(result):
            raise OutOfRange(
                f"Result of {format_number(a)} and {format_number(b)} is not a finite number"
            )
        return result

    return apply


def _divide(a: float, b: float) -> float:
    if b == 0:
        raise DivisionByZero()
    return a / b


def _as_float(span: Duration) -> float:
    try:
        return float(span.total_milliseconds())
    except OverflowError:
        raise OutOfRange(f"Duration {span} is too long for arithmetic") from None


def _round_ms(value: float) -> int:
    """Nearest whole millisecond, halves rounded up."""
    if not math.isfinite(value):
        raise OutOfRange(f"Duration of {format_number(value)} milliseconds is out of range")
    return math.floor(value + 0.5)


def _shift(moment: datetime, span: Duration, sign: int = 1) -> datetime:
    offset = span.to_relativedelta()
    try:
        return moment + offset if sign > 0 else moment - offset
    except (OverflowError, ValueError) as e:
        raise OutOfRange(
            f"{canonical(moment)} {'+' if sign > 0 else '-'} {span} "
            f"falls outside the supported date range (years 1-9999)"
        ) from e


def _since(later: datetime, earlier: datetime) -> Duration:
    return Duration.from_timedelta(later - earlier)


def _balance_unit(*spans: Duration) -> Unit:
    """Largest unit used by any operand, capped at days."""
    largest = min((span.largest_unit() for span in spans), key=_UNIT_ORDER.index)
    return max(largest, "days", key=_UNIT_ORDER.index)  # pyright: ignore[reportReturnType]


def _combine(a: Duration, b: Duration, sign: int) -> Duration:
    total = a.total_milliseconds() + sign * b.total_milliseconds()
    return Duration.from_milliseconds(total, largest=_balance_unit(a, b))


def _scale(span: Duration, factor: float) -> Duration:
    return Duration.from_milliseconds(_round_ms(_as_float(span) * factor))


def _shrink(span: Duration, divisor: float) -> Duration:
    if divisor == 0:
        raise DivisionByZero()
    return Duration.from_milliseconds(_round_ms(_as_float(span) / divisor))


def _ratio(a: Duration, b: Duration) -> Duration:
    # The quotient is reported as a millisecond count
    if b.total_milliseconds() == 0:
        raise DivisionByZero()
    return Duration.from_milliseconds(_round_ms(_as_float(a) / _as_float(b)))


BINARY_RULES: dict[tuple[str, ValueKind, ValueKind], Rule] = {
    ("+", NUMBER, NUMBER): _checked(op.add),
    ("+", DATETIME, DURATION): _shift,
    ("+", DURATION, DATETIME): lambda a, b: _shift(b, a),
    ("+", DURATION, DURATION): lambda a, b: _combine(a, b, 1),
    ("-", NUMBER, NUMBER): _checked(op.sub),
    ("-", DATETIME, DURATION): lambda a, b: _shift(a, b, -1),
    ("-", DATETIME, DATETIME): _since,
    ("-", DURATION, DURATION): lambda a, b: _combine(a, b, -1),
    ("*", NUMBER, NUMBER): _checked(op.mul),
    ("*", DURATION, NUMBER): _scale,
    ("*", NUMBER, DURATION): lambda a, b: _scale(b, a),
    ("/", NUMBER, NUMBER): _checked(_divide),
    ("/", DURATION, DURATION): _ratio,
    ("/", DURATION, NUMBER): _shrink,
}

_MISMATCH = {
    "+": "Cannot add {a} and {b}",
    "-": "Cannot subtract {a} and {b}",
    "*": "Cannot multiply {a} and {b}",
    "/": "Cannot divide {a} by {b}",
}


def apply_binary(symbol: str, a: CalcValue, b: CalcValue) -> CalcValue:
    """Apply a binary operator to two values, ``a`` being the left operand.

    Raises:
        UnknownOperator: If ``symbol`` is not one of ``+ - * /``.
        TypeMismatch: If the operator has no rule for the operand kinds.
        DivisionByZero: If the divisor is zero or a zero-length duration.
        OutOfRange: If the result cannot be represented.
    """
    if symbol not in _MISMATCH:
        raise UnknownOperator(symbol)
    rule = BINARY_RULES.get((symbol, kind_of(a), kind_of(b)))
    if rule is None:
        raise TypeMismatch(_MISMATCH[symbol].format(a=_describe(a), b=_describe(b)))
    return rule(a, b)


def negate(value: CalcValue) -> CalcValue:
    kind = kind_of(value)
    if kind is NUMBER:
        return -value  # pyright: ignore[reportOperatorIssue]
    if kind is DURATION:
        return Duration.from_milliseconds(-value.total_milliseconds())  # pyright: ignore[reportAttributeAccessIssue]
    raise TypeMismatch(f"Cannot apply unary minus to {_describe(value)}")


def evaluate(postfix: Iterable[Token], *, clock: Clock | None = None) -> CalcValue:
    """Reduce a postfix token sequence to a single value.

    Each ``now`` token reads ``clock`` (default :meth:`datetime.now`) when it
    is reached, so two ``now`` tokens in one expression are sampled separately.

    Raises:
        EvalError: If the sequence is malformed or an operator fails.
    """
    read_clock = clock or datetime.now
    stack: list[CalcValue] = []

    for token in postfix:
        if token.kind is TokenKind.NOW:
            stack.append(read_clock())
        elif token.is_operand:
            stack.append(token.value)
        elif token.kind is TokenKind.UNARY_MINUS:
            if not stack:
                raise InvalidExpression("unary minus without an operand")
            stack.append(negate(stack.pop()))
        elif token.kind is TokenKind.OPERATOR:
            if len(stack) < 2:
                raise InvalidExpression(f"operator {token.value} needs two operands")
            b = stack.pop()
            a = stack.pop()
            stack.append(apply_binary(token.value, a, b))
        else:
            raise UnknownOperator(token)

    if not stack:
        raise InvalidExpression("nothing to evaluate")
    if len(stack) > 1:
        raise InvalidExpression(f"{len(stack)} values are not joined by operators")

    logger.debug("evaluated to %s", _describe(stack[0]))
    return stack[0]

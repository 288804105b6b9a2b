"""Expression pipeline: tokenize, reorder to postfix, evaluate."""

import logging

from timecalc.evaluator import Clock, evaluate
from timecalc.lexer import tokenize
from timecalc.postfix import to_postfix
from timecalc.values import CalcValue

logger = logging.getLogger(__name__)


def calculate(expression: str, *, clock: Clock | None = None) -> CalcValue:
    """Evaluate an infix expression over numbers, dates, durations and ``now``.

    Args:
        expression: Text such as ``"2024-01-31 + P1M"`` or ``"(now - 2024-01-01) / 7"``.
            Whitespace is insignificant.
        clock: Callable returning the naive datetime used for ``now``;
            defaults to the local wall clock.

    Returns:
        A float, a naive datetime or a :class:`~timecalc.duration.Duration`.

    Raises:
        LexError: If the text cannot be tokenized.
        EvalError: If the tokens do not form a valid computation.

    Example:
        >>> calculate("2024-01-01 + PT36H")
        datetime.datetime(2024, 1, 2, 12, 0)
        >>> str(calculate("2024-03-01 - 2024-02-01"))
        'P29D'
    """
    logger.debug("calculating %r", expression)
    return evaluate(to_postfix(tokenize(expression)), clock=clock)

"""Tests for postfix evaluation and the operand-kind rules."""

import itertools
from datetime import datetime

import pytest

from timecalc import (
    Duration,
    InvalidExpression,
    OutOfRange,
    Token,
    TokenKind,
    TypeMismatch,
    UnknownOperator,
    ValueKind,
    evaluate,
    kind_of,
    to_postfix,
    tokenize,
)
from timecalc import tokens as tk
from timecalc.evaluator import BINARY_RULES, apply_binary, negate

NUMBER, DATETIME, DURATION = ValueKind.NUMBER, ValueKind.DATETIME, ValueKind.DURATION

SAMPLES = {
    NUMBER: 2.0,
    DATETIME: datetime(2024, 1, 1),
    DURATION: Duration(hours=1),
}

RESULT_KINDS = {
    ("+", NUMBER, NUMBER): NUMBER,
    ("+", DATETIME, DURATION): DATETIME,
    ("+", DURATION, DATETIME): DATETIME,
    ("+", DURATION, DURATION): DURATION,
    ("-", NUMBER, NUMBER): NUMBER,
    ("-", DATETIME, DURATION): DATETIME,
    ("-", DATETIME, DATETIME): DURATION,
    ("-", DURATION, DURATION): DURATION,
    ("*", NUMBER, NUMBER): NUMBER,
    ("*", DURATION, NUMBER): DURATION,
    ("*", NUMBER, DURATION): DURATION,
    ("/", NUMBER, NUMBER): NUMBER,
    ("/", DURATION, DURATION): DURATION,
    ("/", DURATION, NUMBER): DURATION,
}


def run(text, clock=None):
    return evaluate(to_postfix(tokenize(text)), clock=clock)


def test_rule_table_is_closed():
    """Test that the dispatch table holds exactly the legal combinations."""
    assert set(BINARY_RULES) == set(RESULT_KINDS)


@pytest.mark.parametrize(
    ("symbol", "left", "right"),
    list(itertools.product("+-*/", ValueKind, ValueKind)),
)
def test_every_kind_pair(symbol, left, right):
    """Test each (operator, kind, kind) combination either applies or mismatches."""
    a, b = SAMPLES[left], SAMPLES[right]
    expected = RESULT_KINDS.get((symbol, left, right))

    if expected is None:
        with pytest.raises(TypeMismatch, match=f"{left} .* {right}"):
            apply_binary(symbol, a, b)
    else:
        assert kind_of(apply_binary(symbol, a, b)) is expected


def test_operands_pop_in_push_order():
    """Test that the first pushed operand is the left operand."""
    postfix = [tk.number(8), tk.number(2), tk.operator("-")]

    assert evaluate(postfix) == 6


def test_datetime_shifts():
    assert run("2024-01-01 + P1D") == datetime(2024, 1, 2)
    assert run("P1D + 2024-01-01") == datetime(2024, 1, 2)
    assert run("2024-01-01T10:00 - PT30M") == datetime(2024, 1, 1, 9, 30)


def test_datetime_shift_is_calendar_aware():
    """Test that months clamp to the end of the target month."""
    assert run("2024-01-31 + P1M") == datetime(2024, 2, 29)
    assert run("2024-03-31 - P1M") == datetime(2024, 2, 29)
    assert run("2023-02-28 + P1Y") == datetime(2024, 2, 28)


def test_datetime_difference_is_balanced_to_days():
    assert run("2024-03-01 - 2024-02-01") == Duration(days=29)
    assert run("2024-01-01 - 2024-01-02T01:00") == Duration(days=-1, hours=-1)
    assert run("2024-01-01T10:30 - 2024-01-01T10:00") == Duration(minutes=30)


def test_duration_sum_balances_from_largest_operand_unit():
    """Test duration addition keeps the operands' largest unit."""
    assert run("PT1H + PT30M") == Duration(hours=1, minutes=30)
    assert run("PT36H + PT1H") == Duration(hours=37)
    assert run("P1D + PT1H") == Duration(days=1, hours=1)
    # Weeks, months and years balance into days
    assert run("P1W - P1D") == Duration(days=6)
    assert run("P1M + P1D") == Duration(days=31)
    assert run("PT1H - PT2H") == Duration(hours=-1)


def test_duration_scaling_rounds_to_milliseconds():
    assert run("P1D * 1.5") == Duration(milliseconds=129_600_000)
    assert run("2 * PT1H") == Duration(milliseconds=7_200_000)
    assert run("PT1S / 3") == Duration(milliseconds=333)
    assert run("PT2S / 3") == Duration(milliseconds=667)
    assert run("PT1S * 0.0005") == Duration(milliseconds=1)


def test_duration_ratio_is_a_millisecond_duration():
    """Test that duration / duration reports the quotient as milliseconds."""
    assert run("P1D / PT1H") == Duration(milliseconds=24)


def test_unary_minus():
    assert run("-5") == -5
    assert run("--5") == 5
    assert run("-P1D") == Duration(milliseconds=-86_400_000)
    assert negate(Duration(hours=1)) == Duration(milliseconds=-3_600_000)


def test_unary_minus_on_datetime_is_mismatch():
    with pytest.raises(
        TypeMismatch, match=r"Cannot apply unary minus to DateTime \(2024-01-01T00:00:00\)"
    ):
        run("-2024-01-01")


@pytest.mark.parametrize(
    ("text", "message"),
    [
        (
            "2024-01-01 + 2024-01-02",
            r"Cannot add DateTime \(2024-01-01T00:00:00\) and DateTime \(2024-01-02T00:00:00\)",
        ),
        ("P1D * P1D", r"Cannot multiply Duration \(P1D\) and Duration \(P1D\)"),
        ("5 - 2024-01-01", r"Cannot subtract Number \(5\) and DateTime \(2024-01-01T00:00:00\)"),
        ("5 / P1D", r"Cannot divide Number \(5\) by Duration \(P1D\)"),
        ("1 + P1D", r"Cannot add Number \(1\) and Duration \(P1D\)"),
        ("P1D - 2024-01-01", r"Cannot subtract Duration \(P1D\) and DateTime"),
    ],
)
def test_type_mismatch_names_both_operands(text, message):
    """Test that mismatches never coerce and name both kinds and values."""
    with pytest.raises(TypeMismatch, match=message):
        run(text)


def test_type_mismatch_is_type_error():
    with pytest.raises(TypeError):
        run("now + now")


@pytest.mark.parametrize(
    "postfix",
    [
        [],
        [tk.operator("+")],
        [tk.number(1), tk.operator("+")],
        [tk.UNARY_MINUS],
        [tk.number(1), tk.number(2)],
    ],
)
def test_malformed_postfix(postfix):
    """Test stack underflow and leftover operands."""
    with pytest.raises(InvalidExpression, match="Invalid expression"):
        evaluate(postfix)


def test_unknown_operator():
    """Test operators outside + - * / and stray structural tokens."""
    with pytest.raises(UnknownOperator, match=r"Unknown operator: \^"):
        evaluate([tk.number(1), tk.number(2), Token(kind=TokenKind.OPERATOR, value="^")])
    with pytest.raises(UnknownOperator):
        evaluate([tk.number(1), tk.LPAREN])
    with pytest.raises(UnknownOperator):
        apply_binary("%", 1.0, 2.0)


def test_now_uses_clock(clock):
    """Test that now reads the injected clock."""
    assert run("now", clock=clock) == datetime(2024, 6, 15, 12, 30, 45)
    assert run("now - 2024-06-14", clock=clock) == Duration(
        days=1, hours=12, minutes=30, seconds=45
    )


def test_now_is_sampled_per_token_at_evaluation():
    """Test that each now token reads the clock when evaluated, not when tokenized."""
    readings = iter([datetime(2024, 1, 1, 0, 0, 0), datetime(2024, 1, 1, 0, 0, 1)])
    calls = []

    def ticking_clock():
        calls.append(None)
        return next(readings)

    postfix = to_postfix(tokenize("now - now"))
    assert calls == []

    assert evaluate(postfix, clock=ticking_clock) == Duration(seconds=-1)
    assert len(calls) == 2


def test_datetime_out_of_range():
    with pytest.raises(OutOfRange):
        run("9999-12-31 + P1D")
    with pytest.raises(OutOfRange):
        run("0001-01-01 - P1D")


def test_numeric_overflow_is_out_of_range():
    """Test that no infinite number is returned."""
    huge = "1" + "0" * 300
    with pytest.raises(OutOfRange):
        run(f"{huge} * {huge}")
    with pytest.raises(OverflowError):
        run(f"P1D * {huge} * {huge}")

"""Runtime values produced by the evaluator and their canonical forms."""

import math
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TypeAlias

from dateutil.parser import isoparse

from timecalc.duration import Duration

CalcValue: TypeAlias = float | datetime | Duration


class ValueKind(Enum):
    NUMBER = "Number"
    DATETIME = "DateTime"
    DURATION = "Duration"

    def __str__(self) -> str:
        return self.value


def kind_of(value: CalcValue) -> ValueKind:
    """Classify a runtime value.

    Raises:
        TypeError: If ``value`` is not a float, datetime or Duration.
    """
    if isinstance(value, datetime):
        return ValueKind.DATETIME
    if isinstance(value, Duration):
        return ValueKind.DURATION
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return ValueKind.NUMBER
    raise TypeError(
        f"Unsupported calculator value {type(value).__name__!r}: {value!r}\n"
        f"Values must be a float, a naive datetime or a Duration"
    )


def parse_datetime(text: str) -> datetime:
    """Parse ``YYYY-MM-DD[THH[:MM[:SS]]]`` into a naive datetime.

    Missing time fields default to zero and the ``T`` separator is
    case-insensitive. Hours run from 00 to 23; ``T24`` is not midnight.

    Raises:
        ValueError: If the text names a date or time that does not exist.
    """
    date_part, _, time_part = text.upper().partition("T")
    fields = time_part.split(":") if time_part else []
    fields += ["00"] * (3 - len(fields))
    hours, minutes, seconds = (field.rjust(2, "0") for field in fields[:3])
    if int(hours) > 23:
        raise ValueError(f"Hour out of range in {text!r}: expected 00-23")
    return isoparse(f"{date_part}T{hours}:{minutes}:{seconds}")


def format_number(value: float) -> str:
    """Shortest round-tripping text for a number, laid out like JavaScript.

    Digits come from the shortest ``repr`` of the float. Values from 1e-6 up
    to 1e21 print positionally (``1152921504606847000``, ``0.00001``); others
    use an exponent without zero padding (``1e-7``, ``1e+21``).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    _, digit_tuple, exponent = Decimal(repr(abs(float(value)))).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    # Decimal point sits after the first `point` digits
    point = len(digits) + exponent  # pyright: ignore[reportOperatorIssue]
    sign = "-" if value < 0 else ""

    if len(digits) <= point <= 21:
        return sign + digits + "0" * (point - len(digits))
    if 0 < point <= 21:
        return f"{sign}{digits[:point]}.{digits[point:]}"
    if -6 < point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"

    mantissa = digits if len(digits) == 1 else f"{digits[0]}.{digits[1:]}"
    return f"{sign}{mantissa}e{'+' if point > 0 else '-'}{abs(point - 1)}"


def format_datetime(value: datetime) -> str:
    if value.microsecond:
        return value.isoformat(timespec="microseconds").rstrip("0")
    return value.isoformat(timespec="seconds")


def canonical(value: CalcValue) -> str:
    """Unambiguous machine-readable form of a value."""
    kind = kind_of(value)
    if kind is ValueKind.DATETIME:
        return format_datetime(value)  # pyright: ignore[reportArgumentType]
    if kind is ValueKind.DURATION:
        return str(value)
    return format_number(value)  # pyright: ignore[reportArgumentType]

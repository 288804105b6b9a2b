"""Human-readable rendering of calculator results.

The canonical form comes from :func:`timecalc.values.canonical`; this module
adds the locale-aware display form in front of it using Babel's CLDR data.
"""

from babel.dates import format_datetime
from babel.lists import format_list
from babel.units import format_unit

from timecalc.duration import Duration
from timecalc.util import DEFAULT_LOCALE
from timecalc.values import CalcValue, ValueKind, canonical, format_number, kind_of

_DISPLAY_UNITS = (
    ("days", "duration-day"),
    ("hours", "duration-hour"),
    ("minutes", "duration-minute"),
    ("seconds", "duration-second"),
)


def _localize_duration(span: Duration, locale: str) -> str:
    # Displayed with days as the largest unit and seconds as the smallest
    rounded = span.round(smallest="seconds", largest="days")
    amounts = [
        (abs(getattr(rounded, name)), unit)
        for name, unit in _DISPLAY_UNITS
        if getattr(rounded, name)
    ]
    if not amounts:
        return format_unit(0, "duration-second", length="short", locale=locale)

    if rounded.sign < 0:
        amounts[0] = (-amounts[0][0], amounts[0][1])
    parts = [
        format_unit(amount, unit, length="short", locale=locale) for amount, unit in amounts
    ]
    return format_list(parts, style="unit-short", locale=locale)


def localize(value: CalcValue, locale: str = DEFAULT_LOCALE) -> str:
    """Locale-specific display text for a value.

    Numbers are shown in canonical form, date-times with the locale's medium
    date-time pattern, and durations as a list of short units such as
    ``1 day, 2 hr, 3 sec``.
    """
    kind = kind_of(value)
    if kind is ValueKind.DATETIME:
        return format_datetime(value, format="medium", locale=locale)
    if kind is ValueKind.DURATION:
        return _localize_duration(value, locale)  # pyright: ignore[reportArgumentType]
    return format_number(value)  # pyright: ignore[reportArgumentType]


def present(value: CalcValue, locale: str = DEFAULT_LOCALE) -> str:
    """``<localized value> (<canonical value>)``."""
    return f"{localize(value, locale)} ({canonical(value)})"

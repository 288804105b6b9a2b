"""Signed ISO-8601 durations.

A :class:`Duration` keeps the calendar fields it was written with (``P1M`` stays
one month) so it can be applied to a date-time with calendar awareness. For
arithmetic with numbers and other durations it is normalized to a whole
millisecond count using the fixed unit lengths in :mod:`timecalc.util`.
"""

import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Literal

from dateutil.relativedelta import relativedelta

from timecalc.util import UNITS

Unit = Literal[
    "years",
    "months",
    "weeks",
    "days",
    "hours",
    "minutes",
    "seconds",
    "milliseconds",
]

_ISO_PATTERN = re.compile(
    r"^(?P<sign>[-+])?P"
    r"(?:(?P<years>\d+)Y)?"
    r"(?:(?P<months>\d+)M)?"
    r"(?:(?P<weeks>\d+)W)?"
    r"(?:(?P<days>\d+)D)?"
    r"(?:T(?=\d)"
    r"(?:(?P<hours>\d+)H)?"
    r"(?:(?P<minutes>\d+)M)?"
    r"(?:(?P<seconds>\d+)(?:[.,](?P<fraction>\d+))?S)?"
    r")?$",
    re.IGNORECASE,
)

_DATE_DESIGNATORS = (("years", "Y"), ("months", "M"), ("weeks", "W"), ("days", "D"))


@dataclass(frozen=True, kw_only=True)
class Duration:
    years: int = 0
    months: int = 0
    weeks: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    milliseconds: int = 0

    def __post_init__(self) -> None:
        values = [getattr(self, name) for name in UNITS]
        if any(v > 0 for v in values) and any(v < 0 for v in values):
            raise ValueError(
                f"Duration fields must all share one sign, got {self!r}.\n"
                f"Hint: Build mixed spans from a millisecond total instead:\n"
                f"  Duration.from_milliseconds(ms, largest='days')"
            )

    @classmethod
    def parse(cls, text: str) -> "Duration":
        """Parse an ISO-8601 duration such as ``P1Y2M``, ``P2W`` or ``pt1h30m``.

        Fractional digits are accepted on the seconds field only and are
        truncated to whole milliseconds.

        Raises:
            ValueError: If ``text`` is not a well-formed duration.
        """
        match = _ISO_PATTERN.match(text)
        if match is None or not any(
            value is not None
            for name, value in match.groupdict().items()
            if name in UNITS
        ):
            raise ValueError(
                f"Invalid ISO-8601 duration: {text!r}\n"
                f"Expected P[nY][nM][nW][nD][T[nH][nM][nS]], e.g. P1DT2H or PT30M"
            )

        parts = match.groupdict()
        sign = -1 if parts.pop("sign") == "-" else 1
        fraction = parts.pop("fraction")
        values = {
            name: sign * int(value) for name, value in parts.items() if value is not None
        }
        if fraction:
            values["milliseconds"] = sign * int(fraction[:3].ljust(3, "0"))
        return cls(**values)

    @classmethod
    def from_milliseconds(cls, total: int, largest: Unit = "milliseconds") -> "Duration":
        """Build a duration from a millisecond count.

        The count is balanced into fields from ``largest`` downwards, so
        ``from_milliseconds(90_000, largest="minutes")`` is ``PT1M30S`` while the
        default keeps everything in milliseconds (``PT90S``).
        """
        names = list(UNITS)
        sign = -1 if total < 0 else 1
        remaining = abs(total)
        values: dict[str, int] = {}
        for name in names[names.index(largest) :]:
            values[name], remaining = divmod(remaining, UNITS[name])
        return cls(**{name: sign * value for name, value in values.items()})

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> "Duration":
        """Convert a timedelta, balanced from days down.

        Sub-millisecond remainders are truncated toward zero.
        """
        micros = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
        millis = abs(micros) // 1000
        return cls.from_milliseconds(-millis if micros < 0 else millis, largest="days")

    @property
    def sign(self) -> int:
        for name in UNITS:
            value = getattr(self, name)
            if value:
                return 1 if value > 0 else -1
        return 0

    def largest_unit(self) -> Unit:
        """Name of the largest non-zero field (``milliseconds`` when zero)."""
        for name in UNITS:
            if getattr(self, name):
                return name  # pyright: ignore[reportReturnType]
        return "milliseconds"

    def total_milliseconds(self) -> int:
        return sum(getattr(self, name) * length for name, length in UNITS.items())

    def round(self, smallest: Unit = "seconds", largest: Unit = "days") -> "Duration":
        """Round half away from zero to ``smallest`` and rebalance from ``largest``."""
        step = UNITS[smallest]
        total = self.total_milliseconds()
        magnitude = (abs(total) + step // 2) // step * step
        return Duration.from_milliseconds(
            -magnitude if total < 0 else magnitude, largest=largest
        )

    def to_relativedelta(self) -> relativedelta:
        """Calendar-aware offset: years and months first, then the rest."""
        return relativedelta(
            years=self.years,
            months=self.months,
            weeks=self.weeks,
            days=self.days,
            hours=self.hours,
            minutes=self.minutes,
            seconds=self.seconds,
            microseconds=self.milliseconds * 1000,
        )

    def __str__(self) -> str:
        """Canonical ISO-8601 form, e.g. ``P1DT2H``, ``-PT1.5S`` or ``PT0S``."""
        if self.sign == 0:
            return "PT0S"

        size = {name: abs(getattr(self, name)) for name in UNITS}
        date_part = "".join(
            f"{size[name]}{designator}"
            for name, designator in _DATE_DESIGNATORS
            if size[name]
        )

        time_part = ""
        if size["hours"]:
            time_part += f"{size['hours']}H"
        if size["minutes"]:
            time_part += f"{size['minutes']}M"
        whole, millis = divmod(size["seconds"] * 1000 + size["milliseconds"], 1000)
        if millis:
            time_part += f"{whole}.{millis:03d}".rstrip("0") + "S"
        elif whole:
            time_part += f"{whole}S"

        prefix = "-P" if self.sign < 0 else "P"
        return prefix + date_part + (f"T{time_part}" if time_part else "")

"""Date-only value type.

``CalendarDate`` is an immutable (year, month, day) triple. A missing date is
represented by :data:`essentials_time.absent.ABSENT` (or ``None``), which
orders before every concrete date.
"""

import calendar
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from enum import IntEnum
from typing import TYPE_CHECKING

from .absent import ABSENT, Absent, NullOrdered
from .culture import Culture, ParseStyles, get_culture
from .errors import ArgumentError, FormatError, RangeError
from .patterns import DateTimeFields, expand_format, format_fields, parse_exact, parse_general

if TYPE_CHECKING:
    from .instant import ZonedInstant
    from .offsets import ZoneLike

__all__ = ["CalendarDate", "DayOfWeek", "shift_months"]


class DayOfWeek(IntEnum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


def shift_months(value: date, months: int) -> date:
    """Move ``value`` by whole months, clamping the day to the target month's length."""
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    if not 1 <= year <= 9999:
        raise RangeError(f"Adding {months} months to {value} leaves the supported year range")
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


@dataclass(frozen=True, eq=False)
class CalendarDate(NullOrdered):
    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        try:
            date(self.year, self.month, self.day)
        except (TypeError, ValueError) as e:
            raise RangeError(f"Invalid date {self.year}-{self.month}-{self.day}: {e}") from e

    def _sort_key(self) -> tuple[int, int, int]:
        return (self.year, self.month, self.day)

    def __str__(self) -> str:
        return self.iso8601

    # -- construction --------------------------------------------------------

    @classmethod
    def today(cls) -> "CalendarDate":
        return cls.from_date(date.today())

    @classmethod
    def from_date(cls, value: date) -> "CalendarDate":
        return cls(value.year, value.month, value.day)

    @classmethod
    def parse(
        cls,
        text: str | None,
        culture: Culture | str | None = None,
        styles: ParseStyles = ParseStyles.NONE,
    ) -> "CalendarDate":
        """Parse a date; any time part in the text is ignored.

        Without a culture only ISO 8601 text is accepted; with one, the
        culture's date (and date + time) patterns are tried as well.
        """
        if text is None:
            raise ArgumentError("text is required", name="text")
        resolved = get_culture(culture) if culture is not None else None
        fields = parse_general(text, resolved, styles)
        return cls(fields.year, fields.month, fields.day)

    @classmethod
    def try_parse(
        cls,
        text: str | None,
        culture: Culture | str | None = None,
        styles: ParseStyles = ParseStyles.NONE,
    ) -> tuple["CalendarDate | Absent", bool]:
        """Like :meth:`parse` but returns ``(ABSENT, False)`` instead of raising."""
        resolved = get_culture(culture) if culture is not None else None
        try:
            return cls.parse(text, resolved, styles), True
        except (FormatError, ArgumentError):
            return ABSENT, False

    @classmethod
    def parse_exact(
        cls,
        text: str | None,
        patterns: str | Sequence[str],
        culture: Culture | str | None = None,
        styles: ParseStyles = ParseStyles.NONE,
    ) -> "CalendarDate":
        if text is None:
            raise ArgumentError("text is required", name="text")
        fields = parse_exact(text, patterns, get_culture(culture), styles)
        return cls(fields.year, fields.month, fields.day)

    @classmethod
    def try_parse_exact(
        cls,
        text: str | None,
        patterns: str | Sequence[str],
        culture: Culture | str | None = None,
        styles: ParseStyles = ParseStyles.NONE,
    ) -> tuple["CalendarDate | Absent", bool]:
        resolved = get_culture(culture)
        try:
            return cls.parse_exact(text, patterns, resolved, styles), True
        except (FormatError, ArgumentError):
            return ABSENT, False

    # -- queries -------------------------------------------------------------

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    @property
    def day_of_week(self) -> DayOfWeek:
        return DayOfWeek(self.to_date().weekday())

    @property
    def day_of_year(self) -> int:
        return self.to_date().timetuple().tm_yday

    @property
    def is_leap_year(self) -> bool:
        return calendar.isleap(self.year)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def week_number(self) -> int:
        from .week import iso_week_of

        return iso_week_of(self.to_date())[1]

    @property
    def iso8601(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def to_string(self, fmt: str | None = "d", culture: Culture | str | None = None) -> str:
        """Format with a standard (``"d"``, ``"D"``, ...) or custom pattern.

        Time tokens render as midnight; offset tokens are not available.
        """
        pattern, pattern_culture, _ = expand_format(fmt or "d", get_culture(culture))
        return format_fields(DateTimeFields(self.year, self.month, self.day), pattern, pattern_culture)

    # -- arithmetic ----------------------------------------------------------

    def add_days(self, days: int) -> "CalendarDate":
        try:
            return CalendarDate.from_date(self.to_date() + timedelta(days=days))
        except OverflowError as e:
            raise RangeError(f"Adding {days} days to {self} is out of range") from e

    def add_months(self, months: int) -> "CalendarDate":
        return CalendarDate.from_date(shift_months(self.to_date(), months))

    def add_years(self, years: int) -> "CalendarDate":
        return self.add_months(years * 12)

    def to_zoned_instant(self, tz: "ZoneLike | None" = None) -> "ZonedInstant":
        """Midnight of this date in ``tz`` (default: the configured zone)."""
        from .instant import ZonedInstant

        return ZonedInstant(self.year, self.month, self.day, tz=tz)


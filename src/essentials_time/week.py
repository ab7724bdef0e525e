"""ISO 8601 weeks bound to a time zone.

Helpers:
* parse week strings in full form (``YYYYWww`` / ``YYYY-Www``) or short form
  (``ww`` => current ISO year)
* ``IsoWeek``: a (year, week) pair in a zone, with ``start`` (Monday 00:00)
  and ``end`` (Sunday 23:59:59.999) resolved in that zone
* resolve a start/end week range where the end boundary is Monday of the week
  *after* ``end_week``; when ``end_week`` is omitted the range ends with the
  latest fully completed week (previous week).

Week 1 is the week containing the year's first Thursday, so a year has 53
weeks exactly when 28 December falls in week 53.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from .absent import NullOrdered
from .errors import ArgumentError, FormatError, RangeError
from .offsets import ZoneLike, get_zone, zone_key, zone_name

if TYPE_CHECKING:
    from .date import CalendarDate
    from .instant import ZonedInstant

__all__ = [
    "IsoWeek",
    "WeekRange",
    "iso_week_of",
    "iso_week_number",
    "weeks_in_year",
    "parse_week_str",
    "week_range",
    "resolve_week_range",
]


def iso_week_of(value: date) -> tuple[int, int]:
    """Return the ISO ``(year, week)`` containing ``value``."""
    iso = value.isocalendar()
    return iso.year, iso.week


def iso_week_number(value: "date | CalendarDate") -> int:
    if not isinstance(value, date):
        value = value.to_date()
    return iso_week_of(value)[1]


def weeks_in_year(year: int) -> int:
    return date(year, 12, 28).isocalendar().week


def parse_week_str(value: str, now: datetime | None = None) -> tuple[int, int]:
    """Parse a week string.

    Accepts:
      - Full form: 'YYYYWww' or 'YYYY-Www' (e.g. '2025W43', '2025-W43')
      - Short form: 'ww' which resolves using the current ISO year.

    Returns (year, week_number).
    Raises FormatError on invalid format and RangeError for a week the year
    does not have.
    """
    if value is None:
        raise ArgumentError("Week value is required", name="value")
    value = value.strip()
    if not value:
        raise FormatError("Week value is empty", value)
    if "W" in value.upper():
        year_part, week_part = value.upper().split("W", 1)
        year_part = year_part.removesuffix("-")
        if not (year_part.isdigit() and week_part.isdigit()):
            raise FormatError(f"Invalid week format '{value}'", value)
        year, week_num = int(year_part), int(week_part)
    else:
        if not value.isdigit():
            raise FormatError(f"Invalid short week format '{value}'", value)
        if now is None:
            now = datetime.now()
        year = now.isocalendar().year
        week_num = int(value)
    if not 1 <= year <= 9999:
        raise RangeError(f"Year out of range 1..9999: {year}")
    if not 1 <= week_num <= weeks_in_year(year):
        raise RangeError(f"Week number out of range 1..{weeks_in_year(year)} for {year}: {week_num}")
    return year, week_num


@dataclass(frozen=True, eq=False)
class IsoWeek(NullOrdered):
    """An ISO week in a named zone or at a fixed offset.

    ``start`` and ``end`` are computed on access and each gets the offset the
    zone has at that local moment; across a DST change they differ.
    """

    year: int
    week_number: int
    tz: ZoneLike

    def __post_init__(self) -> None:
        if self.tz is None:
            raise ArgumentError("A time zone is required", name="tz")
        get_zone(self.tz)
        if not 1 <= self.year <= 9999:
            raise RangeError(f"Year out of range 1..9999: {self.year}")
        if not 1 <= self.week_number <= weeks_in_year(self.year):
            raise RangeError(
                f"Week number out of range 1..{weeks_in_year(self.year)} for {self.year}: {self.week_number}"
            )

    def _sort_key(self) -> tuple[int, int, int, str]:
        return (self.start.utc_ticks, self.year, self.week_number, str(zone_key(self.tz)))

    @classmethod
    def from_date(cls, value: "date | CalendarDate | ZonedInstant", tz: ZoneLike) -> "IsoWeek":
        """The week containing ``value``'s calendar date.

        For a ``ZonedInstant`` that is its local date.
        """
        if value is None:
            raise ArgumentError("value is required", name="value")
        if not isinstance(value, date):
            from .instant import ZonedInstant

            if isinstance(value, ZonedInstant):
                value = value.date
            value = value.to_date()
        year, week_num = iso_week_of(value)
        return cls(year, week_num, tz)

    @classmethod
    def current(cls, tz: ZoneLike) -> "IsoWeek":
        from .instant import ZonedInstant

        return cls.from_date(ZonedInstant.now(tz), tz)

    @classmethod
    def parse(cls, text: str, tz: ZoneLike, now: datetime | None = None) -> "IsoWeek":
        year, week_num = parse_week_str(text, now=now)
        return cls(year, week_num, tz)

    def _weekday_date(self, weekday: int) -> date:
        try:
            return date.fromisocalendar(self.year, self.week_number, weekday)
        except ValueError as e:
            raise RangeError(f"Week {self.code} extends past 9999-12-31") from e

    @property
    def monday(self) -> date:
        return self._weekday_date(1)

    @property
    def sunday(self) -> date:
        return self._weekday_date(7)

    @property
    def start(self) -> "ZonedInstant":
        """Monday 00:00:00.000 local time."""
        from .instant import ZonedInstant

        monday = self.monday
        return ZonedInstant(monday.year, monday.month, monday.day, tz=self.tz)

    @property
    def end(self) -> "ZonedInstant":
        """Sunday 23:59:59.999 local time."""
        from .instant import ZonedInstant

        sunday = self.sunday
        return ZonedInstant(sunday.year, sunday.month, sunday.day, 23, 59, 59, 999, tz=self.tz)

    def _shifted(self, days: int) -> "IsoWeek":
        try:
            target = self.monday + timedelta(days=days)
        except OverflowError as e:
            raise RangeError(f"No week {'before' if days < 0 else 'after'} {self.code}") from e
        return IsoWeek.from_date(target, self.tz)

    def get_previous_week(self) -> "IsoWeek":
        return self._shifted(-7)

    def get_next_week(self) -> "IsoWeek":
        return self._shifted(7)

    @property
    def code(self) -> str:
        return f"{self.year}W{self.week_number:02d}"

    @property
    def iso_code(self) -> str:
        return f"{self.year}-W{self.week_number:02d}"

    def contains(self, instant: "ZonedInstant") -> bool:
        """True when ``instant`` lies in [Monday 00:00, next Monday 00:00) of this week."""
        if instant is None:
            return False
        lower = self.start.utc_ticks
        try:
            upper = self.get_next_week().start.utc_ticks
        except RangeError:
            return lower <= instant.utc_ticks
        return lower <= instant.utc_ticks < upper

    def __str__(self) -> str:
        return self.iso_code

    def __repr__(self) -> str:
        return f"IsoWeek({self.year}, {self.week_number}, {zone_name(self.tz)!r})"


def iter_weeks(first: IsoWeek, last: IsoWeek) -> Iterator[IsoWeek]:
    current = first
    while (current.year, current.week_number) <= (last.year, last.week_number):
        yield current
        if (current.year, current.week_number) == (last.year, last.week_number):
            return
        current = current.get_next_week()


def week_range(start: IsoWeek, end: IsoWeek, tz: ZoneLike | None = None) -> tuple[IsoWeek, ...]:
    """All consecutive weeks from ``start`` to ``end`` inclusive, in ``tz`` (default: ``start.tz``)."""
    zone = start.tz if tz is None else tz
    first = IsoWeek(start.year, start.week_number, zone)
    last = IsoWeek(end.year, end.week_number, zone)
    if (last.year, last.week_number) < (first.year, first.week_number):
        raise ArgumentError(f"End week {last.code} is before start week {first.code}", name="end")
    return tuple(iter_weeks(first, last))


@dataclass(frozen=True)
class WeekRange:
    start: "ZonedInstant"  # inclusive Monday 00:00
    end: "ZonedInstant"  # exclusive Monday 00:00 of week after end_week (or current week when implicit)
    weeks: tuple[IsoWeek, ...]

    @property
    def start_week_code(self) -> str:
        return self.weeks[0].code

    @property
    def end_week_code(self) -> str:
        """Code of the last fully included week."""
        return self.weeks[-1].code


def resolve_week_range(
    start_week: str,
    end_week: str | None = None,
    now: datetime | None = None,
    tz: ZoneLike | None = None,
) -> WeekRange:
    """Resolve a week range into concrete bounds.

    If end_week is omitted, the range ends at Monday of the current week (exclusive) and
    the last fully included week is the previous week.

    Returns WeekRange with inclusive start and exclusive end.
    """
    if tz is None:
        from .config import get_settings

        tz = get_settings().default_time_zone
    if now is None:
        now = datetime.now()

    first = IsoWeek.parse(start_week, tz, now=now)
    if end_week is not None:
        last = IsoWeek.parse(end_week, tz, now=now)
    else:
        last = IsoWeek.from_date(now.date(), tz).get_previous_week()

    weeks = week_range(first, last)
    return WeekRange(start=first.start, end=last.get_next_week().start, weeks=weeks)

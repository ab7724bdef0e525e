"""Zoned point-in-time value type.

A ``ZonedInstant`` stores the UTC moment as 100 ns ticks since
0001-01-01T00:00:00Z, the UTC offset that was in effect for the local wall
clock it was built from, whether that offset was a daylight-saving one, and a
:class:`DateTimeKind`. The offset is resolved once, at construction, from the
zone the caller supplies; the zone itself is not kept, so an instance is a
frozen snapshot and arithmetic keeps its offset unchanged.

Equality and ordering look at the UTC moment only: ``12:00+02:00`` equals
``10:00Z``. ``None``/``ABSENT`` orders before every instant.
"""

import calendar
import logging
import math
import time
from collections.abc import Sequence
from datetime import date, datetime, timedelta, timezone
from email.utils import format_datetime, parsedate_to_datetime
from enum import Enum
from typing import TYPE_CHECKING

from .absent import ABSENT, Absent, NullOrdered
from .culture import INVARIANT, Culture, ParseStyles, get_culture
from .date import CalendarDate, DayOfWeek, shift_months
from .errors import ArgumentError, FormatError, RangeError
from .offsets import (
    ZoneLike,
    fixed_offset_zone,
    get_zone,
    is_utc,
    local_zone,
    resolve_offset,
)
from .patterns import (
    MAX_OFFSET,
    DateTimeFields,
    expand_format,
    format_fields,
    parse_exact,
    parse_general,
    parse_iso8601,
)
from .text import first_char_upper

if TYPE_CHECKING:
    from .week import IsoWeek

__all__ = [
    "ZonedInstant",
    "DateTimeKind",
    "TICKS_PER_MILLISECOND",
    "TICKS_PER_SECOND",
    "TICKS_PER_MINUTE",
    "TICKS_PER_HOUR",
    "TICKS_PER_DAY",
    "MAX_TICKS",
    "UNIX_EPOCH_TICKS",
]

logger = logging.getLogger(__name__)

TICKS_PER_MILLISECOND = 10_000
TICKS_PER_SECOND = 1_000 * TICKS_PER_MILLISECOND
TICKS_PER_MINUTE = 60 * TICKS_PER_SECOND
TICKS_PER_HOUR = 60 * TICKS_PER_MINUTE
TICKS_PER_DAY = 24 * TICKS_PER_HOUR

# 9999-12-31T23:59:59.9999999
MAX_TICKS = date(9999, 12, 31).toordinal() * TICKS_PER_DAY - 1
UNIX_EPOCH_TICKS = (date(1970, 1, 1).toordinal() - 1) * TICKS_PER_DAY

ISO_8601_PATTERN = "yyyy-MM-ddTHH:mm:sszzz"


class DateTimeKind(Enum):
    UNSPECIFIED = "unspecified"
    UTC = "utc"
    LOCAL = "local"


def _timedelta_to_ticks(value: timedelta) -> int:
    return (value.days * 86_400 + value.seconds) * TICKS_PER_SECOND + value.microseconds * 10


def _ticks_to_timedelta(ticks: int) -> timedelta:
    # Truncates toward zero below one microsecond.
    micros = abs(ticks) // 10
    return timedelta(microseconds=micros if ticks >= 0 else -micros)


def _fields_to_ticks(fields: DateTimeFields) -> int:
    days = date(fields.year, fields.month, fields.day).toordinal() - 1
    return (
        days * TICKS_PER_DAY
        + fields.hour * TICKS_PER_HOUR
        + fields.minute * TICKS_PER_MINUTE
        + fields.second * TICKS_PER_SECOND
        + fields.fraction
    )


def _ticks_to_fields(ticks: int, offset: timedelta | None) -> DateTimeFields:
    days, rest = divmod(ticks, TICKS_PER_DAY)
    day = date.fromordinal(days + 1)
    hour, rest = divmod(rest, TICKS_PER_HOUR)
    minute, rest = divmod(rest, TICKS_PER_MINUTE)
    second, fraction = divmod(rest, TICKS_PER_SECOND)
    return DateTimeFields(day.year, day.month, day.day, hour, minute, second, fraction, offset)


def _round_half_away(value: float) -> int:
    return int(math.floor(value + 0.5)) if value >= 0 else int(math.ceil(value - 0.5))


def _scaled_ticks(value: int | float, unit_ticks: int) -> int:
    """Ticks for ``value`` units; fractional values are rounded to whole milliseconds."""
    if isinstance(value, int):
        return value * unit_ticks
    if not math.isfinite(value):
        raise RangeError(f"Cannot add a non-finite amount: {value}")
    return _round_half_away(value * unit_ticks / TICKS_PER_MILLISECOND) * TICKS_PER_MILLISECOND


def _default_zone() -> str:
    from .config import get_settings

    return get_settings().default_time_zone


def _kind_for(zone: ZoneLike) -> DateTimeKind:
    return DateTimeKind.UTC if is_utc(zone) else DateTimeKind.UNSPECIFIED


def _host_is_dst(utc_ticks: int) -> bool:
    try:
        return time.localtime((utc_ticks - UNIX_EPOCH_TICKS) // TICKS_PER_SECOND).tm_isdst > 0
    except (OverflowError, OSError, ValueError):
        return False


def _host_local_offset(moment: datetime) -> timedelta:
    try:
        offset = moment.replace(tzinfo=None).astimezone().utcoffset()
    except (OverflowError, OSError, ValueError) as e:
        raise RangeError(f"Cannot resolve the host offset for {moment}") from e
    assert offset is not None
    return offset


class ZonedInstant(NullOrdered):
    """Immutable date and time bound to a frozen UTC offset."""

    __slots__ = ("_utc_ticks", "_offset", "_kind", "_is_dst")

    _utc_ticks: int
    _offset: timedelta
    _kind: DateTimeKind
    _is_dst: bool

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        millisecond: int = 0,
        *,
        tz: ZoneLike | None = None,
    ) -> None:
        """Build from local wall clock fields, resolving the offset in ``tz`` once.

        ``tz`` is a zone id (IANA or Windows), a ``tzinfo`` or a fixed
        ``timedelta`` offset; it defaults to the configured default zone.
        """
        if not 0 <= millisecond <= 999:
            raise RangeError(f"Millisecond out of range 0..999: {millisecond}")
        try:
            naive = datetime(year, month, day, hour, minute, second)
        except (TypeError, ValueError) as e:
            raise RangeError(f"Invalid date/time fields: {e}") from e
        zone = tz if tz is not None else _default_zone()
        resolved = resolve_offset(zone, naive)
        local_ticks = _fields_to_ticks(
            DateTimeFields(year, month, day, hour, minute, second, millisecond * TICKS_PER_MILLISECOND)
        )
        self._assign(
            local_ticks - _timedelta_to_ticks(resolved.offset), resolved.offset, _kind_for(zone), resolved.is_dst
        )

    def _assign(self, utc_ticks: int, offset: timedelta, kind: DateTimeKind, is_dst: bool = False) -> None:
        local_ticks = utc_ticks + _timedelta_to_ticks(offset)
        if not 0 <= utc_ticks <= MAX_TICKS or not 0 <= local_ticks <= MAX_TICKS:
            raise RangeError("The resulting date/time is outside 0001-01-01..9999-12-31")
        object.__setattr__(self, "_utc_ticks", utc_ticks)
        object.__setattr__(self, "_offset", offset)
        object.__setattr__(self, "_kind", kind)
        object.__setattr__(self, "_is_dst", is_dst)

    @classmethod
    def _create(
        cls, utc_ticks: int, offset: timedelta, kind: DateTimeKind, is_dst: bool = False
    ) -> "ZonedInstant":
        instance = cls.__new__(cls)
        instance._assign(utc_ticks, offset, kind, is_dst)
        return instance

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self):
        return (_restore, (self._utc_ticks, self._offset, self._kind, self._is_dst))

    def _sort_key(self) -> int:
        return self._utc_ticks

    def compare_to(self, other: object) -> int:
        """Return -1, 0 or 1; a ``datetime`` is read with :meth:`from_datetime`."""
        if isinstance(other, datetime):
            other = ZonedInstant.from_datetime(other)
        return super().compare_to(other)

    # -- alternative constructors ---------------------------------------------

    @classmethod
    def from_ticks(cls, ticks: int, offset: timedelta = timedelta(0)) -> "ZonedInstant":
        """From local ticks (wall clock) and the offset that applies to them."""
        fixed_offset_zone(offset)
        return cls._create(ticks - _timedelta_to_ticks(offset), offset, _kind_for(offset))

    @classmethod
    def from_utc_ticks(cls, utc_ticks: int, offset: timedelta = timedelta(0)) -> "ZonedInstant":
        fixed_offset_zone(offset)
        return cls._create(utc_ticks, offset, _kind_for(offset))

    @classmethod
    def _from_local_fields(
        cls, fields: DateTimeFields, offset: timedelta, kind: DateTimeKind, is_dst: bool = False
    ) -> "ZonedInstant":
        fixed_offset_zone(offset)
        return cls._create(_fields_to_ticks(fields) - _timedelta_to_ticks(offset), offset, kind, is_dst)

    @classmethod
    def from_datetime(cls, value: datetime, tz: ZoneLike | None = None) -> "ZonedInstant":
        """From a Python datetime.

        An aware datetime keeps its own offset unless ``tz`` is given, in which
        case the moment is converted to ``tz``. A naive datetime is taken as
        wall clock time in ``tz`` (default: the configured zone).
        """
        if value is None:
            raise ArgumentError("value is required", name="value")
        fields = DateTimeFields(
            value.year, value.month, value.day,
            value.hour, value.minute, value.second, value.microsecond * 10,
        )
        offset = value.utcoffset()
        if offset is not None:
            instant = cls._from_local_fields(fields, offset, _kind_for(offset), bool(value.dst()))
            return instant if tz is None else instant.to_time_zone(tz)
        zone = tz if tz is not None else _default_zone()
        resolved = resolve_offset(zone, value)
        return cls._from_local_fields(fields, resolved.offset, _kind_for(zone), resolved.is_dst)

    @classmethod
    def now(cls, tz: ZoneLike | None = None) -> "ZonedInstant":
        """The current moment in ``tz``, or in the host's local zone."""
        if tz is None:
            return cls.from_datetime(datetime.now(local_zone()))._as_host_local()
        return cls.utc_now().to_time_zone(tz)

    @classmethod
    def utc_now(cls) -> "ZonedInstant":
        return cls.from_datetime(datetime.now(timezone.utc))

    @classmethod
    def today(cls, tz: ZoneLike | None = None) -> "ZonedInstant":
        """Midnight of the current date in ``tz``, or in the host's local zone."""
        if tz is None:
            midnight = datetime.combine(date.today(), datetime.min.time())
            offset = _host_local_offset(midnight)
            return cls._from_local_fields(
                DateTimeFields(midnight.year, midnight.month, midnight.day), offset, DateTimeKind.LOCAL
            )._as_host_local()
        current = cls.now(tz)
        return cls(current.year, current.month, current.day, tz=tz)

    @classmethod
    def zero(cls) -> "ZonedInstant":
        """The start of the Unix epoch, 1970-01-01T00:00:00Z."""
        return cls.from_unix_timestamp(0)

    # -- Unix time -------------------------------------------------------------

    @classmethod
    def from_unix_timestamp(cls, seconds: int | float, tz: ZoneLike | None = None) -> "ZonedInstant":
        """From seconds since 1970-01-01T00:00:00Z; floats keep millisecond precision.

        The result is in UTC unless ``tz`` is given.
        """
        if seconds is None:
            raise ArgumentError("seconds is required", name="seconds")
        utc = cls._create(
            UNIX_EPOCH_TICKS + _scaled_ticks(seconds, TICKS_PER_SECOND), timedelta(0), DateTimeKind.UTC
        )
        return utc if tz is None else utc.to_time_zone(tz)

    @classmethod
    def from_unix_timestamp_millis(cls, millis: int, tz: ZoneLike | None = None) -> "ZonedInstant":
        if millis is None:
            raise ArgumentError("millis is required", name="millis")
        utc = cls._create(
            UNIX_EPOCH_TICKS + _scaled_ticks(millis, TICKS_PER_MILLISECOND), timedelta(0), DateTimeKind.UTC
        )
        return utc if tz is None else utc.to_time_zone(tz)

    @classmethod
    def current_unix_timestamp(cls) -> int:
        return cls.utc_now().to_unix_timestamp()

    def to_unix_timestamp(self) -> int:
        """Whole seconds since the Unix epoch, truncated toward zero."""
        delta = self._utc_ticks - UNIX_EPOCH_TICKS
        seconds = abs(delta) // TICKS_PER_SECOND
        return seconds if delta >= 0 else -seconds

    @property
    def unix_timestamp(self) -> int:
        return self.to_unix_timestamp()

    @property
    def is_zero(self) -> bool:
        return self.unix_timestamp == 0

    @property
    def is_negative(self) -> bool:
        return self.unix_timestamp < 0

    @property
    def is_positive(self) -> bool:
        return self.unix_timestamp > 0

    # -- parsing -----------------------------------------------------------------

    @classmethod
    def _from_parsed(
        cls, fields: DateTimeFields, tz: ZoneLike | None, styles: ParseStyles
    ) -> "ZonedInstant":
        if fields.offset is not None:
            instant = cls._from_local_fields(fields, fields.offset, _kind_for(fields.offset))
        elif ParseStyles.ASSUME_UNIVERSAL in styles:
            instant = cls._from_local_fields(fields, timedelta(0), DateTimeKind.UTC)
        elif ParseStyles.ASSUME_LOCAL in styles:
            offset = _host_local_offset(fields.to_naive())
            instant = cls._from_local_fields(fields, offset, DateTimeKind.LOCAL)._as_host_local()
        else:
            zone = tz if tz is not None else _default_zone()
            resolved = resolve_offset(zone, fields.to_naive())
            instant = cls._from_local_fields(fields, resolved.offset, _kind_for(zone), resolved.is_dst)
        if ParseStyles.ADJUST_TO_UNIVERSAL in styles:
            return instant.to_utc()
        return instant

    @classmethod
    def from_iso8601(cls, text: str | None, tz: ZoneLike | None = None) -> "ZonedInstant":
        """Parse ``yyyy-MM-ddTHH:mm:ss[.fffffff][zzz]``.

        The offset in the text is kept as is. Text without an offset is wall
        clock time in ``tz`` (default: the configured zone).
        """
        if text is None:
            raise ArgumentError("text is required", name="text")
        return cls._from_parsed(parse_iso8601(text), tz, ParseStyles.NONE)

    @classmethod
    def from_rfc822(cls, text: str | None) -> "ZonedInstant":
        """Parse ``ddd, dd MMM yyyy HH:mm:ss zzzz`` (also accepts zone names such as GMT)."""
        if text is None:
            raise ArgumentError("text is required", name="text")
        if not text.strip():
            raise FormatError("Text is empty", text)
        try:
            parsed = parsedate_to_datetime(text.strip())
        except (TypeError, ValueError, IndexError) as e:
            raise FormatError(f"'{text}' is not a valid RFC 822/2822 date: {e}", text) from e
        if parsed.tzinfo is None:
            # "-0000" means UTC with no information about the local offset.
            logger.debug("No usable offset in %r; assuming UTC", text)
            parsed = parsed.replace(tzinfo=timezone.utc)
        offset = parsed.utcoffset()
        if offset is not None and abs(offset) > MAX_OFFSET:
            raise FormatError(f"UTC offset out of range in '{text}'", text)
        return cls.from_datetime(parsed)

    @classmethod
    def from_rfc2822(cls, text: str | None) -> "ZonedInstant":
        return cls.from_rfc822(text)

    @classmethod
    def parse(
        cls,
        text: str | None,
        culture: Culture | str | None = None,
        styles: ParseStyles = ParseStyles.NONE,
        tz: ZoneLike | None = None,
    ) -> "ZonedInstant":
        """Parse ISO 8601, RFC 822/2822 or (when given) culture specific text."""
        if text is None:
            raise ArgumentError("text is required", name="text")
        resolved = get_culture(culture) if culture is not None else None
        try:
            fields = parse_general(text, resolved, styles)
        except FormatError:
            try:
                return cls.from_rfc822(text)
            except FormatError:
                raise FormatError(f"'{text}' is not a recognized date/time", text) from None
        return cls._from_parsed(fields, tz, styles)

    @classmethod
    def try_parse(
        cls,
        text: str | None,
        culture: Culture | str | None = None,
        styles: ParseStyles = ParseStyles.NONE,
        tz: ZoneLike | None = None,
    ) -> tuple["ZonedInstant | Absent", bool]:
        resolved = get_culture(culture) if culture is not None else None
        if tz is not None:
            get_zone(tz)
        try:
            return cls.parse(text, resolved, styles, tz), True
        except (FormatError, ArgumentError, RangeError):
            return ABSENT, False

    @classmethod
    def parse_exact(
        cls,
        text: str | None,
        patterns: str | Sequence[str],
        culture: Culture | str | None = None,
        styles: ParseStyles = ParseStyles.NONE,
        tz: ZoneLike | None = None,
    ) -> "ZonedInstant":
        if text is None:
            raise ArgumentError("text is required", name="text")
        fields = parse_exact(text, patterns, get_culture(culture), styles)
        return cls._from_parsed(fields, tz, styles)

    @classmethod
    def try_parse_exact(
        cls,
        text: str | None,
        patterns: str | Sequence[str],
        culture: Culture | str | None = None,
        styles: ParseStyles = ParseStyles.NONE,
        tz: ZoneLike | None = None,
    ) -> tuple["ZonedInstant | Absent", bool]:
        resolved = get_culture(culture)
        if tz is not None:
            get_zone(tz)
        try:
            return cls.parse_exact(text, patterns, resolved, styles, tz), True
        except (FormatError, ArgumentError, RangeError):
            return ABSENT, False

    # -- primitive accessors ---------------------------------------------------

    @property
    def utc_ticks(self) -> int:
        return self._utc_ticks

    @property
    def ticks(self) -> int:
        """Local (wall clock) ticks."""
        return self._utc_ticks + _timedelta_to_ticks(self._offset)

    @property
    def offset(self) -> timedelta:
        return self._offset

    @property
    def kind(self) -> DateTimeKind:
        return self._kind

    @property
    def is_daylight_saving_time(self) -> bool:
        """Whether daylight saving time applied in the zone this instant was created in."""
        return self._is_dst

    def _fields(self) -> DateTimeFields:
        return _ticks_to_fields(self.ticks, self._offset)

    @property
    def year(self) -> int:
        return self._fields().year

    @property
    def month(self) -> int:
        return self._fields().month

    @property
    def day(self) -> int:
        return self._fields().day

    @property
    def hour(self) -> int:
        return self._fields().hour

    @property
    def minute(self) -> int:
        return self._fields().minute

    @property
    def second(self) -> int:
        return self._fields().second

    @property
    def millisecond(self) -> int:
        return self._fields().fraction // TICKS_PER_MILLISECOND

    @property
    def date(self) -> CalendarDate:
        fields = self._fields()
        return CalendarDate(fields.year, fields.month, fields.day)

    @property
    def time_of_day(self) -> timedelta:
        return _ticks_to_timedelta(self.ticks % TICKS_PER_DAY)

    # -- calendar queries --------------------------------------------------------

    @property
    def day_of_week(self) -> DayOfWeek:
        return self.date.day_of_week

    @property
    def day_of_year(self) -> int:
        return self.date.day_of_year

    @property
    def is_leap_year(self) -> bool:
        return calendar.isleap(self.year)

    @property
    def is_weekend(self) -> bool:
        return self.day_of_week in (DayOfWeek.SATURDAY, DayOfWeek.SUNDAY)

    @property
    def is_weekday(self) -> bool:
        return not self.is_weekend

    @property
    def days_in_month(self) -> int:
        return self.date.days_in_month

    @property
    def week_number(self) -> int:
        """ISO 8601 week number of the local date."""
        return self.date.week_number

    @property
    def week(self) -> "IsoWeek":
        """The ISO week containing this instant, bound to this instant's offset."""
        from .week import IsoWeek

        return IsoWeek.from_date(self.date.to_date(), self._offset)

    def _at_local_midnight(self, value: date) -> "ZonedInstant":
        return self._from_local_fields(
            DateTimeFields(value.year, value.month, value.day), self._offset, self._kind
        )

    def first_day_of_month(self) -> "ZonedInstant":
        """Midnight of the first day of this month, with this instant's offset."""
        return self._at_local_midnight(self.date.to_date().replace(day=1))

    def last_day_of_month(self) -> "ZonedInstant":
        return self._at_local_midnight(self.date.to_date().replace(day=self.days_in_month))

    def first_day_of_week(self, start_of_week: DayOfWeek = DayOfWeek.MONDAY) -> "ZonedInstant":
        current = self.date.to_date()
        days_back = (current.weekday() - int(start_of_week)) % 7
        try:
            return self._at_local_midnight(current - timedelta(days=days_back))
        except OverflowError as e:
            raise RangeError("First day of week is before 0001-01-01") from e

    def last_day_of_week(self, start_of_week: DayOfWeek = DayOfWeek.MONDAY) -> "ZonedInstant":
        first = self.first_day_of_week(start_of_week)
        try:
            return self._at_local_midnight(first.date.to_date() + timedelta(days=6))
        except OverflowError as e:
            raise RangeError("Last day of week is after 9999-12-31") from e

    @property
    def day_name(self) -> str:
        return INVARIANT.day_name(self.day_of_week)

    @property
    def month_name(self) -> str:
        return INVARIANT.month_name(self.month)

    def local_day_name(self, culture: Culture | str | None = None) -> str:
        return first_char_upper(get_culture(culture).day_name(self.day_of_week))

    def local_month_name(self, culture: Culture | str | None = None) -> str:
        return first_char_upper(get_culture(culture).month_name(self.month))

    # -- arithmetic ----------------------------------------------------------------

    def _shift(self, ticks: int) -> "ZonedInstant":
        return self._create(self._utc_ticks + ticks, self._offset, self._kind, self._is_dst)

    def add(self, value: timedelta) -> "ZonedInstant":
        if value is None:
            raise ArgumentError("value is required", name="value")
        return self._shift(_timedelta_to_ticks(value))

    def add_days(self, value: int | float) -> "ZonedInstant":
        return self._shift(_scaled_ticks(value, TICKS_PER_DAY))

    def add_hours(self, value: int | float) -> "ZonedInstant":
        return self._shift(_scaled_ticks(value, TICKS_PER_HOUR))

    def add_minutes(self, value: int | float) -> "ZonedInstant":
        return self._shift(_scaled_ticks(value, TICKS_PER_MINUTE))

    def add_seconds(self, value: int | float) -> "ZonedInstant":
        return self._shift(_scaled_ticks(value, TICKS_PER_SECOND))

    def add_milliseconds(self, value: int | float) -> "ZonedInstant":
        return self._shift(_scaled_ticks(value, TICKS_PER_MILLISECOND))

    def add_ticks(self, value: int) -> "ZonedInstant":
        return self._shift(value)

    def add_months(self, months: int) -> "ZonedInstant":
        """Calendar month arithmetic on the wall clock; the day is clamped to the month's length."""
        local = self.ticks
        shifted = shift_months(date.fromordinal(local // TICKS_PER_DAY + 1), months)
        new_local = (shifted.toordinal() - 1) * TICKS_PER_DAY + local % TICKS_PER_DAY
        return self._create(
            new_local - _timedelta_to_ticks(self._offset), self._offset, self._kind, self._is_dst
        )

    def add_years(self, years: int) -> "ZonedInstant":
        return self.add_months(years * 12)

    def subtract(self, value: "ZonedInstant | datetime | timedelta") -> "ZonedInstant | timedelta":
        """``instant - instant`` gives a timedelta; ``instant - timedelta`` an instant.

        A ``datetime`` operand is read with :meth:`from_datetime`.
        """
        if isinstance(value, datetime):
            value = ZonedInstant.from_datetime(value)
        if isinstance(value, ZonedInstant):
            return _ticks_to_timedelta(self._utc_ticks - value._utc_ticks)
        if isinstance(value, timedelta):
            return self._shift(-_timedelta_to_ticks(value))
        raise ArgumentError(f"Cannot subtract {type(value).__name__} from ZonedInstant", name="value")

    def __add__(self, other: object) -> "ZonedInstant":
        if isinstance(other, timedelta):
            return self.add(other)
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other: object):
        if isinstance(other, (ZonedInstant, datetime, timedelta)):
            return self.subtract(other)
        return NotImplemented

    # -- conversion ------------------------------------------------------------------

    def to_utc(self) -> "ZonedInstant":
        return self._create(self._utc_ticks, timedelta(0), DateTimeKind.UTC)

    def to_offset(self, offset: timedelta) -> "ZonedInstant":
        """The same moment seen with a different fixed offset."""
        fixed_offset_zone(offset)
        return self._create(self._utc_ticks, offset, _kind_for(offset))

    def to_time_zone(self, tz: ZoneLike) -> "ZonedInstant":
        """The same moment with the offset ``tz`` has at that moment."""
        zone = get_zone(tz)
        utc = self.to_utc().to_datetime()
        try:
            local = utc.astimezone(zone)
        except OverflowError as e:
            raise RangeError(f"Cannot convert {self!r} to {tz}") from e
        offset = local.utcoffset()
        assert offset is not None
        return self._create(self._utc_ticks, offset, _kind_for(tz), bool(local.dst()))

    def to_local_time(self) -> "ZonedInstant":
        """The same moment with the host's local offset at that moment."""
        try:
            local = self.to_utc().to_datetime().astimezone()
        except (OverflowError, OSError, ValueError) as e:
            raise RangeError(f"Cannot convert {self!r} to local time") from e
        offset = local.utcoffset()
        assert offset is not None
        return self._create(self._utc_ticks, offset, DateTimeKind.LOCAL, _host_is_dst(self._utc_ticks))

    def _as_host_local(self) -> "ZonedInstant":
        return self._create(self._utc_ticks, self._offset, DateTimeKind.LOCAL, _host_is_dst(self._utc_ticks))

    def to_datetime(self) -> datetime:
        """Aware datetime with a fixed offset (precision reduced to microseconds)."""
        fields = self._fields()
        return datetime(
            fields.year, fields.month, fields.day,
            fields.hour, fields.minute, fields.second, fields.fraction // 10,
            tzinfo=fixed_offset_zone(self._offset),
        )

    # -- formatting --------------------------------------------------------------------

    def to_string(self, fmt: str | None = None, culture: Culture | str | None = None) -> str:
        """Format with a standard (``"G"``, ``"o"``, ``"r"``, ...) or custom pattern.

        The default is the general ``"G"`` format of the configured culture.
        """
        pattern, pattern_culture, in_utc = expand_format(fmt, get_culture(culture))
        source = self.to_utc() if in_utc else self
        return format_fields(source._fields(), pattern, pattern_culture)

    @property
    def iso8601(self) -> str:
        """``yyyy-MM-ddTHH:mm:sszzz``, e.g. ``2019-08-17T12:30:45+02:00``."""
        return format_fields(self._fields(), ISO_8601_PATTERN, INVARIANT)

    @property
    def rfc822(self) -> str:
        """``ddd, dd MMM yyyy HH:mm:ss zzzz``, e.g. ``Sat, 17 Aug 2019 12:30:45 +0200``."""
        return format_datetime(self.to_datetime().replace(microsecond=0))

    @property
    def rfc2822(self) -> str:
        return self.rfc822

    def __str__(self) -> str:
        return self.to_string()

    def __format__(self, format_spec: str) -> str:
        return self.to_string(format_spec) if format_spec else str(self)

    def __repr__(self) -> str:
        return f"ZonedInstant('{self.to_string('o')}')"


def _restore(utc_ticks: int, offset: timedelta, kind: DateTimeKind, is_dst: bool = False) -> ZonedInstant:
    return ZonedInstant._create(utc_ticks, offset, kind, is_dst)

"""Culture data used for formatting and parsing: names, designators and patterns.

Only a handful of cultures are built in. Patterns use the custom pattern
tokens understood by :mod:`essentials_time.patterns`; ``/`` and ``:`` in a
pattern stand for the culture's date and time separators.
"""

from dataclasses import dataclass
from enum import Flag

from .errors import ConfigurationError

__all__ = [
    "Culture",
    "ParseStyles",
    "INVARIANT",
    "EN_US",
    "EN_GB",
    "DA_DK",
    "CULTURES",
    "get_culture",
    "current_culture",
]


class ParseStyles(Flag):
    NONE = 0
    ALLOW_LEADING_WHITE = 1
    ALLOW_TRAILING_WHITE = 2
    ALLOW_INNER_WHITE = 4
    ALLOW_WHITE_SPACES = 7
    # Text without an offset is taken as UTC instead of the default zone.
    ASSUME_UNIVERSAL = 8
    # Text without an offset is taken as host local time.
    ASSUME_LOCAL = 16
    # The parsed instant is converted to UTC.
    ADJUST_TO_UNIVERSAL = 32


_ENGLISH_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_ENGLISH_DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


@dataclass(frozen=True)
class Culture:
    name: str
    month_names: tuple[str, ...]
    abbreviated_month_names: tuple[str, ...]
    # Monday first, matching date.weekday().
    day_names: tuple[str, ...]
    abbreviated_day_names: tuple[str, ...]
    short_date_pattern: str
    long_date_pattern: str
    short_time_pattern: str
    long_time_pattern: str
    month_day_pattern: str
    year_month_pattern: str
    date_separator: str = "/"
    time_separator: str = ":"
    am_designator: str = "AM"
    pm_designator: str = "PM"

    @property
    def full_date_time_pattern(self) -> str:
        return f"{self.long_date_pattern} {self.long_time_pattern}"

    def month_name(self, month: int, abbreviated: bool = False) -> str:
        names = self.abbreviated_month_names if abbreviated else self.month_names
        return names[month - 1]

    def day_name(self, weekday: int, abbreviated: bool = False) -> str:
        names = self.abbreviated_day_names if abbreviated else self.day_names
        return names[weekday]

    def date_patterns(self) -> tuple[str, ...]:
        """Patterns tried, in order, when parsing a date in this culture."""
        return (self.short_date_pattern, self.long_date_pattern)

    def date_time_patterns(self) -> tuple[str, ...]:
        """Patterns tried, in order, when parsing a date and time in this culture."""
        patterns: list[str] = []
        for date_pattern in self.date_patterns():
            for time_pattern in (self.long_time_pattern, self.short_time_pattern):
                patterns.append(f"{date_pattern} {time_pattern}")
        return (*patterns, *self.date_patterns())


INVARIANT = Culture(
    name="",
    month_names=_ENGLISH_MONTHS,
    abbreviated_month_names=tuple(m[:3] for m in _ENGLISH_MONTHS),
    day_names=_ENGLISH_DAYS,
    abbreviated_day_names=tuple(d[:3] for d in _ENGLISH_DAYS),
    short_date_pattern="MM/dd/yyyy",
    long_date_pattern="dddd, dd MMMM yyyy",
    short_time_pattern="HH:mm",
    long_time_pattern="HH:mm:ss",
    month_day_pattern="MMMM dd",
    year_month_pattern="yyyy MMMM",
)

EN_US = Culture(
    name="en-US",
    month_names=_ENGLISH_MONTHS,
    abbreviated_month_names=tuple(m[:3] for m in _ENGLISH_MONTHS),
    day_names=_ENGLISH_DAYS,
    abbreviated_day_names=tuple(d[:3] for d in _ENGLISH_DAYS),
    short_date_pattern="M/d/yyyy",
    long_date_pattern="dddd, MMMM d, yyyy",
    short_time_pattern="h:mm tt",
    long_time_pattern="h:mm:ss tt",
    month_day_pattern="MMMM d",
    year_month_pattern="MMMM yyyy",
)

EN_GB = Culture(
    name="en-GB",
    month_names=_ENGLISH_MONTHS,
    abbreviated_month_names=tuple(m[:3] for m in _ENGLISH_MONTHS),
    day_names=_ENGLISH_DAYS,
    abbreviated_day_names=tuple(d[:3] for d in _ENGLISH_DAYS),
    short_date_pattern="dd/MM/yyyy",
    long_date_pattern="dd MMMM yyyy",
    short_time_pattern="HH:mm",
    long_time_pattern="HH:mm:ss",
    month_day_pattern="d MMMM",
    year_month_pattern="MMMM yyyy",
    am_designator="am",
    pm_designator="pm",
)

_DANISH_MONTHS = (
    "januar", "februar", "marts", "april", "maj", "juni",
    "juli", "august", "september", "oktober", "november", "december",
)

DA_DK = Culture(
    name="da-DK",
    month_names=_DANISH_MONTHS,
    abbreviated_month_names=tuple(m[:3] for m in _DANISH_MONTHS),
    day_names=("mandag", "tirsdag", "onsdag", "torsdag", "fredag", "lørdag", "søndag"),
    abbreviated_day_names=("man", "tir", "ons", "tor", "fre", "lør", "søn"),
    short_date_pattern="dd/MM/yyyy",
    long_date_pattern="dddd 'den' d. MMMM yyyy",
    short_time_pattern="HH:mm",
    long_time_pattern="HH:mm:ss",
    month_day_pattern="d. MMMM",
    year_month_pattern="MMMM yyyy",
    date_separator="-",
    am_designator="",
    pm_designator="",
)

CULTURES: dict[str, Culture] = {
    "": INVARIANT,
    "invariant": INVARIANT,
    "en-us": EN_US,
    "en-gb": EN_GB,
    "da-dk": DA_DK,
}


def get_culture(culture: "Culture | str | None") -> Culture:
    """Resolve a culture name (case-insensitive, ``_`` or ``-``) or pass through a Culture.

    ``None`` means the configured current culture.
    """
    if culture is None:
        return current_culture()
    if isinstance(culture, Culture):
        return culture
    key = culture.strip().replace("_", "-").lower()
    try:
        return CULTURES[key]
    except KeyError:
        raise ConfigurationError(f"Unknown culture '{culture}'") from None


def current_culture() -> Culture:
    from .config import get_settings

    return get_culture(get_settings().culture)

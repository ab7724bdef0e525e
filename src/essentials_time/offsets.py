"""Time zone lookup and UTC offset resolution.

Zones are looked up in the IANA database through :mod:`zoneinfo`. Windows
zone identifiers (``"Romance Standard Time"``) are translated to their IANA
equivalent first, so settings written for either platform work.

Offsets are always resolved for one concrete local moment: two moments a few
days apart can legitimately get different offsets when a daylight saving
transition lies between them.

Local times that occur twice (clocks set back) or never (clocks set forward)
resolve to the zone's standard-time offset.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ArgumentError, ConfigurationError, RangeError

__all__ = [
    "ZoneLike",
    "ResolvedOffset",
    "WINDOWS_ZONES",
    "get_zone",
    "fixed_offset_zone",
    "resolve_offset",
    "zone_key",
    "zone_name",
    "is_utc",
    "local_zone",
    "format_offset",
]

logger = logging.getLogger(__name__)

ZoneLike = str | tzinfo | timedelta

# Windows zone id -> IANA zone (territory "001" of the CLDR windowsZones table).
WINDOWS_ZONES: dict[str, str] = {
    "UTC": "Etc/UTC",
    "Coordinated Universal Time": "Etc/UTC",
    "GMT Standard Time": "Europe/London",
    "Greenwich Standard Time": "Atlantic/Reykjavik",
    "W. Europe Standard Time": "Europe/Berlin",
    "Central Europe Standard Time": "Europe/Budapest",
    "Central European Standard Time": "Europe/Warsaw",
    "Romance Standard Time": "Europe/Paris",
    "E. Europe Standard Time": "Europe/Chisinau",
    "FLE Standard Time": "Europe/Kiev",
    "GTB Standard Time": "Europe/Bucharest",
    "Russian Standard Time": "Europe/Moscow",
    "Turkey Standard Time": "Europe/Istanbul",
    "Israel Standard Time": "Asia/Jerusalem",
    "South Africa Standard Time": "Africa/Johannesburg",
    "Arabian Standard Time": "Asia/Dubai",
    "India Standard Time": "Asia/Calcutta",
    "China Standard Time": "Asia/Shanghai",
    "Tokyo Standard Time": "Asia/Tokyo",
    "Korea Standard Time": "Asia/Seoul",
    "Singapore Standard Time": "Asia/Singapore",
    "AUS Eastern Standard Time": "Australia/Sydney",
    "New Zealand Standard Time": "Pacific/Auckland",
    "Eastern Standard Time": "America/New_York",
    "Central Standard Time": "America/Chicago",
    "Mountain Standard Time": "America/Denver",
    "US Mountain Standard Time": "America/Phoenix",
    "Pacific Standard Time": "America/Los_Angeles",
    "Alaskan Standard Time": "America/Anchorage",
    "Hawaiian Standard Time": "Pacific/Honolulu",
    "Atlantic Standard Time": "America/Halifax",
    "Newfoundland Standard Time": "America/St_Johns",
    "E. South America Standard Time": "America/Sao_Paulo",
    "Argentina Standard Time": "America/Buenos_Aires",
}

_UTC_KEYS = frozenset({"UTC", "Etc/UTC", "Etc/UCT", "Etc/Universal", "Etc/Zulu", "Universal", "Zulu"})


@dataclass(frozen=True)
class ResolvedOffset:
    offset: timedelta
    is_dst: bool


def fixed_offset_zone(offset: timedelta) -> tzinfo:
    """Return a ``tzinfo`` with a constant offset (no transitions)."""
    if not timedelta(hours=-24) < offset < timedelta(hours=24):
        raise RangeError(f"UTC offset out of range (-24h, 24h): {offset}")
    if offset == timedelta(0):
        return timezone.utc
    return timezone(offset)


@lru_cache(maxsize=256)
def _lookup_zone(name: str) -> tzinfo:
    key = name.strip()
    if not key:
        raise ConfigurationError("Time zone identifier is empty")
    iana = WINDOWS_ZONES.get(key, key)
    try:
        zone = ZoneInfo(iana)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown time zone '{name}'") from e
    if iana != key:
        logger.debug("Mapped Windows time zone %r to %r", key, iana)
    return zone


def get_zone(zone: ZoneLike | None) -> tzinfo:
    """Return a ``tzinfo`` for a zone identifier, ``tzinfo`` or fixed offset.

    Raises ArgumentError for ``None`` and ConfigurationError for unknown ids.
    """
    if zone is None:
        raise ArgumentError("A time zone is required", name="zone")
    if isinstance(zone, tzinfo):
        return zone
    if isinstance(zone, timedelta):
        return fixed_offset_zone(zone)
    if isinstance(zone, str):
        return _lookup_zone(zone)
    raise ArgumentError(f"Unsupported time zone value: {zone!r}", name="zone")


def _is_standard(moment: datetime) -> bool:
    return not moment.dst()


def resolve_offset(zone: ZoneLike | None, moment: datetime) -> ResolvedOffset:
    """Return the UTC offset and DST flag in effect at a local moment.

    Any ``tzinfo`` already attached to ``moment`` is ignored; only its wall
    clock fields are used.
    """
    tz = get_zone(zone)
    naive = moment.replace(tzinfo=None)
    first = naive.replace(tzinfo=tz, fold=0)
    second = naive.replace(tzinfo=tz, fold=1)
    first_offset, second_offset = first.utcoffset(), second.utcoffset()
    if first_offset is None or second_offset is None:
        raise ConfigurationError(f"Time zone {tz!r} does not provide a UTC offset")
    chosen = first
    if first_offset != second_offset:
        if _is_standard(second) and not _is_standard(first):
            chosen = second
        logger.debug(
            "Local time %s is ambiguous or skipped in %s (%s / %s); using %s",
            naive.isoformat(),
            zone_name(tz),
            format_offset(first_offset),
            format_offset(second_offset),
            format_offset(chosen.utcoffset()),
        )
    return ResolvedOffset(offset=chosen.utcoffset(), is_dst=bool(chosen.dst()))


def zone_key(zone: ZoneLike) -> str | timedelta:
    """Identity used to decide whether two zone arguments are the same zone."""
    tz = get_zone(zone)
    if isinstance(tz, ZoneInfo):
        return "UTC" if tz.key in _UTC_KEYS else tz.key
    if isinstance(tz, timezone):
        offset = tz.utcoffset(None)
        return "UTC" if offset == timedelta(0) else offset
    return repr(tz)


def zone_name(zone: ZoneLike) -> str:
    key = zone_key(zone)
    if isinstance(key, timedelta):
        return format_offset(key)
    return key


def is_utc(zone: ZoneLike) -> bool:
    return zone_key(zone) == "UTC"


def local_zone() -> tzinfo:
    """The host's current local zone (fixed at its present offset)."""
    tz = datetime.now().astimezone().tzinfo
    assert tz is not None
    return tz


def format_offset(offset: timedelta | None, separator: str = ":") -> str:
    """Render an offset as ``+HH:MM`` (or ``+HHMM`` with an empty separator)."""
    if offset is None:
        return ""
    total = int(offset.total_seconds())
    sign = "-" if total < 0 else "+"
    hours, rest = divmod(abs(total), 3600)
    return f"{sign}{hours:02d}{separator}{rest // 60:02d}"

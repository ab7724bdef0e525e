"""Date/time pattern formatting and parsing.

Custom patterns are built from repeated letters (``yyyy``, ``MM``, ``dd``,
``HH``, ``mm``, ``ss``, ``fff``, ``K``, ``zzz`` ...); anything else is copied
literally. Text inside single or double quotes and characters escaped with a
backslash are always literal. ``/`` and ``:`` are replaced by the culture's
date and time separators.

A one character format such as ``"d"`` or ``"G"`` is a *standard* format and
expands to one of the culture's patterns (see :func:`expand_format`); prefix
it with ``%`` to use the single letter as a custom pattern instead.

Parsing reverses a pattern into a regular expression and validates the
captured fields. The same matcher backs the raising and the ``try_*`` entry
points of the value types, so both accept exactly the same text.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from functools import lru_cache

from .culture import INVARIANT, Culture, ParseStyles
from .errors import FormatError
from .offsets import format_offset

__all__ = [
    "DateTimeFields",
    "TICKS_PER_SECOND",
    "MAX_OFFSET",
    "tokenize",
    "expand_format",
    "format_fields",
    "parse_exact",
    "parse_iso8601",
    "parse_general",
]

TICKS_PER_SECOND = 10_000_000

_LETTERS = frozenset("yMdhHmsfFtKzg")
MAX_OFFSET = timedelta(hours=14)


@dataclass(frozen=True)
class DateTimeFields:
    """Broken-down calendar fields; ``fraction`` is in 100 ns ticks."""

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    fraction: int = 0
    offset: timedelta | None = None

    @property
    def weekday(self) -> int:
        return date(self.year, self.month, self.day).weekday()

    @property
    def has_offset(self) -> bool:
        return self.offset is not None

    def to_naive(self) -> datetime:
        """The wall clock as a naive datetime (fraction truncated to microseconds)."""
        return datetime(
            self.year, self.month, self.day, self.hour, self.minute, self.second, self.fraction // 10
        )


@dataclass(frozen=True)
class _Token:
    char: str  # pattern letter or separator; empty for literal text
    count: int = 1
    text: str = ""


def _literal(text: str) -> _Token:
    return _Token("", 0, text)


@lru_cache(maxsize=512)
def tokenize(pattern: str) -> tuple[_Token, ...]:
    tokens: list[_Token] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c in _LETTERS:
            j = i
            while j < n and pattern[j] == c:
                j += 1
            tokens.append(_Token(c, j - i))
            i = j
        elif c in "'\"":
            end = pattern.find(c, i + 1)
            if end < 0:
                raise FormatError(f"Unterminated quoted text in pattern '{pattern}'", pattern)
            tokens.append(_literal(pattern[i + 1 : end]))
            i = end + 1
        elif c == "\\":
            if i + 1 >= n:
                raise FormatError(f"Pattern ends with an escape character: '{pattern}'", pattern)
            tokens.append(_literal(pattern[i + 1]))
            i += 2
        elif c == "%":
            i += 1
        elif c in "/:":
            tokens.append(_Token(c))
            i += 1
        else:
            tokens.append(_literal(c))
            i += 1
    return tuple(tokens)


_INVARIANT_FORMATS = {
    "o": ("yyyy'-'MM'-'dd'T'HH':'mm':'ss'.'fffffffK", False),
    "O": ("yyyy'-'MM'-'dd'T'HH':'mm':'ss'.'fffffffK", False),
    "s": ("yyyy'-'MM'-'dd'T'HH':'mm':'ss", False),
    "u": ("yyyy'-'MM'-'dd HH':'mm':'ss'Z'", True),
    "r": ("ddd, dd MMM yyyy HH':'mm':'ss 'GMT'", True),
    "R": ("ddd, dd MMM yyyy HH':'mm':'ss 'GMT'", True),
}


def expand_format(fmt: str | None, culture: Culture) -> tuple[str, Culture, bool]:
    """Resolve a format string to ``(custom pattern, culture, render in UTC)``.

    Empty or ``None`` means the general ``"G"`` format.
    """
    if not fmt:
        fmt = "G"
    if len(fmt) != 1:
        return fmt, culture, False
    if fmt in _INVARIANT_FORMATS:
        pattern, to_utc = _INVARIANT_FORMATS[fmt]
        return pattern, INVARIANT, to_utc
    culture_formats = {
        "d": culture.short_date_pattern,
        "D": culture.long_date_pattern,
        "t": culture.short_time_pattern,
        "T": culture.long_time_pattern,
        "f": f"{culture.long_date_pattern} {culture.short_time_pattern}",
        "F": culture.full_date_time_pattern,
        "g": f"{culture.short_date_pattern} {culture.short_time_pattern}",
        "G": f"{culture.short_date_pattern} {culture.long_time_pattern}",
        "m": culture.month_day_pattern,
        "M": culture.month_day_pattern,
        "y": culture.year_month_pattern,
        "Y": culture.year_month_pattern,
    }
    try:
        return culture_formats[fmt], culture, False
    except KeyError:
        raise FormatError(f"Unknown standard format '{fmt}'", fmt) from None


def _offset_hours(offset: timedelta) -> tuple[str, int]:
    total = int(offset.total_seconds())
    return ("-" if total < 0 else "+"), abs(total) // 3600


def _render(token: _Token, fields: DateTimeFields, culture: Culture) -> str:
    c, count = token.char, token.count
    if c == "y":
        if count <= 2:
            return f"{fields.year % 100:0{count}d}"
        return f"{fields.year:0{count}d}"
    if c == "M":
        if count >= 4:
            return culture.month_name(fields.month)
        if count == 3:
            return culture.month_name(fields.month, abbreviated=True)
        return f"{fields.month:0{count}d}"
    if c == "d":
        if count >= 4:
            return culture.day_name(fields.weekday)
        if count == 3:
            return culture.day_name(fields.weekday, abbreviated=True)
        return f"{fields.day:0{count}d}"
    if c == "h":
        return f"{fields.hour % 12 or 12:0{min(count, 2)}d}"
    if c in "Hms":
        value = {"H": fields.hour, "m": fields.minute, "s": fields.second}[c]
        return f"{value:0{min(count, 2)}d}"
    if c in "fF":
        if count > 7:
            raise FormatError(f"Too many fraction digits: {c * count}", c * count)
        digits = f"{fields.fraction:07d}"[:count]
        return digits if c == "f" else digits.rstrip("0")
    if c == "t":
        designator = culture.am_designator if fields.hour < 12 else culture.pm_designator
        return designator[:1] if count == 1 else designator
    if c == "K":
        return format_offset(fields.offset)
    if c == "z":
        if fields.offset is None:
            raise FormatError("Pattern requires a UTC offset but the value has none", c * count)
        if count >= 3:
            return format_offset(fields.offset)
        sign, hours = _offset_hours(fields.offset)
        return f"{sign}{hours:0{count}d}"
    if c == "g":
        return "A.D."
    if c == "/":
        return culture.date_separator
    if c == ":":
        return culture.time_separator
    raise FormatError(f"Unsupported pattern token '{c * count}'", c * count)


def format_fields(fields: DateTimeFields, pattern: str, culture: Culture) -> str:
    out: list[str] = []
    for token in tokenize(pattern):
        if not token.char:
            out.append(token.text)
            continue
        rendered = _render(token, fields, culture)
        if token.char == "F" and not rendered and out and out[-1].endswith("."):
            # An empty optional fraction also drops its decimal point.
            out[-1] = out[-1][:-1]
        out.append(rendered)
    return "".join(out)


# -- parsing -----------------------------------------------------------------


def _names_regex(names: Sequence[str]) -> str:
    options = sorted((n for n in names if n), key=len, reverse=True)
    if not options:
        return ""
    return "(?i:" + "|".join(re.escape(n) for n in options) + ")"


def _numeric_regex(count: int) -> str:
    return r"\d{1,2}" if count == 1 else r"\d{2}"


def _token_regex(token: _Token, culture: Culture, styles: ParseStyles) -> str:
    c, count = token.char, token.count
    if not c:
        parts = []
        for ch in token.text:
            if ch.isspace() and ParseStyles.ALLOW_INNER_WHITE in styles:
                parts.append(r"\s+")
            else:
                parts.append(re.escape(ch))
        return "".join(parts)
    if c == "y":
        if count == 1:
            return r"\d{1,2}"
        if count == 3:
            return r"\d{3,4}"
        return rf"\d{{{count}}}"
    if c == "M" and count >= 3:
        names = culture.month_names if count >= 4 else culture.abbreviated_month_names
        return _names_regex(names)
    if c == "d" and count >= 3:
        names = culture.day_names if count >= 4 else culture.abbreviated_day_names
        return _names_regex(names)
    if c in "MdhHms":
        return _numeric_regex(count)
    if c == "f":
        return rf"\d{{{count}}}"
    if c == "F":
        return rf"\d{{0,{count}}}"
    if c == "t":
        designators = [culture.am_designator, culture.pm_designator]
        if count == 1:
            designators = [d[:1] for d in designators]
        return _names_regex(designators)
    if c == "K":
        return r"(?:[Zz]|[+-]\d{2}:\d{2})?"
    if c == "z":
        if count == 1:
            return r"[+-]\d{1,2}"
        if count == 2:
            return r"[+-]\d{2}"
        return r"[+-]\d{2}:\d{2}"
    if c == "g":
        return r"(?i:A\.?D\.?)"
    if c == "/":
        return re.escape(culture.date_separator)
    if c == ":":
        return re.escape(culture.time_separator)
    raise FormatError(f"Unsupported pattern token '{c * count}'", c * count)


@lru_cache(maxsize=512)
def _compile(pattern: str, culture: Culture, styles: ParseStyles) -> tuple[re.Pattern[str], tuple[_Token, ...]]:
    tokens = tokenize(pattern)
    parts = []
    for index, token in enumerate(tokens):
        regex = _token_regex(token, culture, styles)
        if token.char and token.char not in "/:":
            parts.append(f"(?P<g{index}>{regex})")
        else:
            parts.append(regex)
    return re.compile("".join(parts)), tokens


def _parse_offset(raw: str) -> timedelta:
    if raw in ("Z", "z"):
        return timedelta(0)
    sign = -1 if raw[0] == "-" else 1
    digits = raw[1:].replace(":", "")
    hours = int(digits[:-2]) if len(digits) > 2 else int(digits)
    minutes = int(digits[-2:]) if len(digits) > 2 else 0
    if minutes >= 60:
        raise FormatError(f"Invalid UTC offset '{raw}'", raw)
    offset = sign * timedelta(hours=hours, minutes=minutes)
    if abs(offset) > MAX_OFFSET:
        raise FormatError(f"UTC offset out of range: '{raw}'", raw)
    return offset


def _index_of(name: str, names: Sequence[str]) -> int:
    lowered = [n.lower() for n in names]
    return lowered.index(name.lower())


def _expand_two_digit_year(value: int) -> int:
    # Same window as .NET's default TwoDigitYearMax (2029).
    return 2000 + value if value < 30 else 1900 + value


def _build_fields(text: str, values: dict[str, int | timedelta | None]) -> DateTimeFields:
    today = date.today()
    has_date = any(key in values for key in ("year", "month", "day"))
    if has_date:
        year = values.get("year", today.year)
        month = values.get("month", 1)
        day = values.get("day", 1)
    else:
        year, month, day = today.year, today.month, today.day
    hour = values.get("hour", 0)
    if "hour12" in values:
        hour12 = values["hour12"]
        if not 1 <= hour12 <= 12:
            raise FormatError(f"Hour out of range in '{text}'", text)
        hour = hour12 % 12 + (12 if values.get("pm") else 0)
    elif values.get("pm") and hour < 12:
        hour += 12
    try:
        moment = datetime(year, month, day, hour, values.get("minute", 0), values.get("second", 0))
    except (TypeError, ValueError) as e:
        raise FormatError(f"'{text}' is not a valid date/time: {e}", text) from e
    weekday = values.get("weekday")
    if weekday is not None and weekday != moment.weekday():
        raise FormatError(f"Day of week does not match the date in '{text}'", text)
    return DateTimeFields(
        year=moment.year,
        month=moment.month,
        day=moment.day,
        hour=moment.hour,
        minute=moment.minute,
        second=moment.second,
        fraction=values.get("fraction", 0),
        offset=values.get("offset"),
    )


def _collect(match: re.Match[str], tokens: Sequence[_Token], culture: Culture) -> dict:
    values: dict[str, int | timedelta | None] = {}
    for index, token in enumerate(tokens):
        if not token.char or token.char in "/:":
            continue
        raw = match.group(f"g{index}")
        c, count = token.char, token.count
        if c == "y":
            values["year"] = _expand_two_digit_year(int(raw)) if count <= 2 else int(raw)
        elif c == "M":
            if count >= 4:
                values["month"] = _index_of(raw, culture.month_names) + 1
            elif count == 3:
                values["month"] = _index_of(raw, culture.abbreviated_month_names) + 1
            else:
                values["month"] = int(raw)
        elif c == "d":
            if count >= 4:
                values["weekday"] = _index_of(raw, culture.day_names)
            elif count == 3:
                values["weekday"] = _index_of(raw, culture.abbreviated_day_names)
            else:
                values["day"] = int(raw)
        elif c == "h":
            values["hour12"] = int(raw)
        elif c == "H":
            values["hour"] = int(raw)
        elif c == "m":
            values["minute"] = int(raw)
        elif c == "s":
            values["second"] = int(raw)
        elif c in "fF":
            values["fraction"] = int(raw.ljust(7, "0")) if raw else 0
        elif c == "t":
            pm = culture.pm_designator[:1] if count == 1 else culture.pm_designator
            values["pm"] = bool(pm) and raw.lower() == pm.lower()
        elif c in "Kz":
            if raw:
                values["offset"] = _parse_offset(raw)
    return values


def _strip(text: str, styles: ParseStyles) -> str:
    if ParseStyles.ALLOW_LEADING_WHITE in styles:
        text = text.lstrip()
    if ParseStyles.ALLOW_TRAILING_WHITE in styles:
        text = text.rstrip()
    return text


def _parse_one(text: str, pattern: str, culture: Culture, styles: ParseStyles) -> DateTimeFields:
    regex, tokens = _compile(pattern, culture, styles)
    match = regex.fullmatch(_strip(text, styles))
    if match is None:
        raise FormatError(f"'{text}' does not match the pattern '{pattern}'", text)
    return _build_fields(text, _collect(match, tokens, culture))


def parse_exact(
    text: str,
    patterns: str | Sequence[str],
    culture: Culture,
    styles: ParseStyles = ParseStyles.NONE,
) -> DateTimeFields:
    """Parse text that must match one of ``patterns`` completely.

    Standard one character formats are expanded against ``culture`` first.
    Raises FormatError when no pattern matches.
    """
    if isinstance(patterns, str):
        patterns = [patterns]
    if not patterns:
        raise FormatError("At least one pattern is required", text)
    if not text or not text.strip():
        raise FormatError("Text is empty", text)
    for fmt in patterns:
        if not fmt:
            raise FormatError("Pattern is empty", text)
        pattern, pattern_culture, _ = expand_format(fmt, culture)
        try:
            return _parse_one(text, pattern, pattern_culture, styles)
        except FormatError:
            continue
    raise FormatError(f"'{text}' does not match any of the patterns {list(patterns)}", text)


_ISO_8601 = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:[Tt ](?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:[.,](?P<fraction>\d+))?)?"
    r"\s*(?P<offset>[Zz]|[+-]\d{2}(?::?\d{2})?)?)?"
)


def parse_iso8601(text: str) -> DateTimeFields:
    """Parse ``yyyy-MM-dd[THH:mm[:ss[.fffffff]][zzz]]``; raises FormatError."""
    match = _ISO_8601.fullmatch(text.strip())
    if match is None:
        raise FormatError(f"'{text}' is not a valid ISO 8601 date/time", text)
    groups = match.groupdict()
    values: dict[str, int | timedelta | None] = {
        key: int(groups[key])
        for key in ("year", "month", "day", "hour", "minute", "second")
        if groups[key] is not None
    }
    if groups["fraction"]:
        values["fraction"] = int(groups["fraction"][:7].ljust(7, "0"))
    if groups["offset"]:
        values["offset"] = _parse_offset(groups["offset"])
    return _build_fields(text, values)


def parse_general(
    text: str, culture: Culture | None, styles: ParseStyles = ParseStyles.NONE
) -> DateTimeFields:
    """Lenient parse: ISO 8601 first, then the culture's own patterns if one is given.

    Surrounding whitespace is always ignored; whitespace inside culture
    patterns may vary.
    """
    if not text or not text.strip():
        raise FormatError("Text is empty", text)
    try:
        return parse_iso8601(text)
    except FormatError:
        if culture is None:
            raise
    return parse_exact(
        text.strip(), culture.date_time_patterns(), culture, styles | ParseStyles.ALLOW_INNER_WHITE
    )

from datetime import datetime  # used for current time reference
from pathlib import Path

import pandas as pd
from cyclopts import App

from .config import get_settings
from .errors import EssentialsTimeError
from .instant import ZonedInstant
from .log_setup import setup_logging
from .offsets import format_offset
from .week import IsoWeek, WeekRange, resolve_week_range

app = App(help="Inspect ISO weeks and convert timestamps between ISO 8601, RFC 2822 and Unix time.")

WEEK_TABLE_COLS: tuple[str, ...] = (
    "Week number",
    "Start",
    "End",
    "Start offset",
    "End offset",
)


def _week_table(week_range: WeekRange) -> pd.DataFrame:
    """One row per ISO week with its local start/end and the offsets in effect."""
    rows = []
    for week in week_range.weeks:
        start, end = week.start, week.end
        rows.append(
            {
                "Week number": week.code,
                "Start": start.to_string("yyyy-MM-dd HH:mm:ss"),
                "End": end.to_string("yyyy-MM-dd HH:mm:ss.fff"),
                "Start offset": format_offset(start.offset),
                "End offset": format_offset(end.offset),
            }
        )
    return pd.DataFrame(rows, columns=list(WEEK_TABLE_COLS))


def _parse_value(value: str, tz: str | None) -> ZonedInstant:
    text = value.strip()
    try:
        seconds = int(text)
    except ValueError:
        return ZonedInstant.parse(text, tz=tz)
    return ZonedInstant.from_unix_timestamp(seconds, tz=tz)


@app.command(help="Print the start and end of one ISO week (e.g. 2025W43, 2025-W43 or 43).")
def week(code: str, tz: str | None = None) -> None:  # noqa: D401
    zone = tz or get_settings().default_time_zone
    iso_week = IsoWeek.parse(code, zone, now=datetime.now())
    print(f"Week:  {iso_week.iso_code}")
    print(f"Start: {iso_week.start.iso8601}")
    print(f"End:   {iso_week.end.to_string('yyyy-MM-ddTHH:mm:ss.fffzzz')}")


@app.command(
    help=(
        "List consecutive ISO weeks with their start, end and UTC offsets. "
        "Without --end-week the list ends with the previous (last completed) week."
    ),
)
def weeks(
    start_week: str,
    end_week: str | None = None,
    tz: str | None = None,
    output_path: Path | None = None,
    overwrite: bool = False,
) -> None:  # noqa: D401
    """Print the week table, or write it as CSV when ``--output-path`` is given."""
    zone = tz or get_settings().default_time_zone
    week_range = resolve_week_range(start_week, end_week=end_week, now=datetime.now(), tz=zone)
    table = _week_table(week_range)

    if output_path is None:
        print(table.to_string(index=False))
        return

    if output_path.suffix.lower() != ".csv":
        output_path = output_path.with_suffix(".csv")
    if output_path.exists() and not overwrite:
        raise SystemExit(f"Refusing to overwrite existing file: {output_path} (use --overwrite)")
    table.to_csv(output_path, index=False)
    print(f"Wrote {len(table)} weeks ({week_range.start_week_code}-{week_range.end_week_code}) to {output_path}")


@app.command(help="Convert an ISO 8601, RFC 2822 or Unix timestamp value and print every rendering.")
def convert(value: str, tz: str | None = None, format: str | None = None) -> None:  # noqa: A002, D401
    instant = _parse_value(value, tz)
    if tz is not None:
        instant = instant.to_time_zone(tz)
    print(f"ISO 8601: {instant.iso8601}")
    print(f"RFC 2822: {instant.rfc2822}")
    print(f"Unix:     {instant.to_unix_timestamp()}")
    if format:
        print(f"Custom:   {instant.to_string(format)}")


@app.command(name="config-dir", help="Print the path to the configuration directory.")
def config_dir() -> None:  # noqa: D401
    from .config import get_config_dir

    print(get_config_dir())


def main() -> None:
    try:
        setup_logging(get_settings().log_level)
        app()
    except EssentialsTimeError as e:
        raise SystemExit(str(e)) from e

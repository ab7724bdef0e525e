import pickle
from datetime import datetime, timedelta, timezone

import pytest

from essentials_time.absent import ABSENT
from essentials_time.config import get_settings
from essentials_time.culture import ParseStyles
from essentials_time.date import CalendarDate, DayOfWeek
from essentials_time.errors import ArgumentError, ConfigurationError, FormatError, RangeError
from essentials_time.instant import MAX_TICKS, UNIX_EPOCH_TICKS, DateTimeKind, ZonedInstant

FORMAT = "yyyy-MM-dd HH:mm:ss:fff K"
ROMANCE = "Romance Standard Time"


@pytest.mark.parametrize(
    "expected,args",
    [
        ("2019-03-01 00:00:00:000 +01:00", (2019, 3, 1)),
        ("2019-03-31 00:00:00:000 +01:00", (2019, 3, 31)),
        ("2019-04-01 00:00:00:000 +02:00", (2019, 4, 1)),
        ("2019-03-01 12:30:45:000 +01:00", (2019, 3, 1, 12, 30, 45)),
        ("2019-03-31 12:30:45:000 +02:00", (2019, 3, 31, 12, 30, 45)),
        ("2019-04-01 12:30:45:000 +02:00", (2019, 4, 1, 12, 30, 45)),
        ("2019-03-01 12:30:45:500 +01:00", (2019, 3, 1, 12, 30, 45, 500)),
        ("2019-03-31 12:30:45:500 +02:00", (2019, 3, 31, 12, 30, 45, 500)),
        ("2019-04-01 12:30:45:500 +02:00", (2019, 4, 1, 12, 30, 45, 500)),
    ],
)
def test_constructor_resolves_offset_per_moment(expected, args):
    assert ZonedInstant(*args, tz=ROMANCE).to_string(FORMAT) == expected


def test_constructor_defaults_to_configured_zone(isolated_config):
    assert ZonedInstant(2019, 8, 17).offset == timedelta(0)
    assert ZonedInstant(2019, 8, 17).kind == DateTimeKind.UTC

    (isolated_config / "config.toml").write_text('[time]\ndefault_time_zone = "Europe/Copenhagen"\n')
    get_settings.cache_clear()
    instant = ZonedInstant(2019, 8, 17, 12)
    assert instant.offset == timedelta(hours=2)
    assert instant.kind == DateTimeKind.UNSPECIFIED


def test_unknown_zone_never_falls_back_to_utc():
    with pytest.raises(ConfigurationError):
        ZonedInstant(2019, 8, 17, tz="Mars/Olympus_Mons")


def test_ambiguous_and_skipped_times_use_standard_offset():
    # 2019-10-27 02:30 happens twice in Paris; 2019-03-31 02:30 never happens.
    assert ZonedInstant(2019, 10, 27, 2, 30, tz="Europe/Paris").offset == timedelta(hours=1)
    assert ZonedInstant(2019, 3, 31, 2, 30, tz="Europe/Paris").offset == timedelta(hours=1)


def test_equality_uses_utc_moment():
    paris = ZonedInstant(2019, 8, 17, 12, tz="Europe/Paris")
    utc = ZonedInstant(2019, 8, 17, 10, tz="UTC")
    assert paris == utc
    assert hash(paris) == hash(utc)
    assert paris.iso8601 != utc.iso8601
    assert paris > ZonedInstant(2019, 8, 17, 9, tz="UTC")


EARLY = ZonedInstant(2019, 8, 17, 12, tz="Europe/Paris")
LATE = ZonedInstant(2019, 8, 17, 11, tz="UTC")


@pytest.mark.parametrize(
    "left,right,eq,ne,lt,le,gt,ge",
    [
        (EARLY, EARLY, True, False, False, True, False, True),
        (EARLY, LATE, False, True, True, True, False, False),
        (LATE, EARLY, False, True, False, False, True, True),
        (EARLY, ABSENT, False, True, False, False, True, True),
        (ABSENT, EARLY, False, True, True, True, False, False),
        (ABSENT, ABSENT, True, False, False, True, False, True),
        (None, EARLY, False, True, True, True, False, False),
    ],
)
def test_operator_tables(left, right, eq, ne, lt, le, gt, ge):
    assert (left == right) is eq
    assert (left != right) is ne
    assert (left < right) is lt
    assert (left <= right) is le
    assert (left > right) is gt
    assert (left >= right) is ge


def test_compare_to_and_subtract_accept_datetime():
    instant = ZonedInstant(2019, 8, 17, 14, tz="Europe/Paris")
    same = datetime(2019, 8, 17, 12, tzinfo=timezone.utc)
    assert instant.compare_to(same) == 0
    assert instant.compare_to(datetime(2019, 8, 17, 13, tzinfo=timezone.utc)) == -1
    assert instant.subtract(datetime(2019, 8, 17, 10, tzinfo=timezone.utc)) == timedelta(hours=2)
    assert instant - same == timedelta(0)
    assert instant.subtract(timedelta(hours=1)) == ZonedInstant(2019, 8, 17, 11, tz="UTC")


def test_null_as_minimum():
    instant = ZonedInstant(2019, 8, 17, tz="UTC")
    assert ABSENT < instant
    assert None < instant
    assert not (instant < ABSENT)
    assert instant.compare_to(None) == 1
    assert sorted([instant, ABSENT]) == [ABSENT, instant]


def test_iso8601_round_trip():
    instant = ZonedInstant(2019, 8, 17, 12, 30, 45, tz="Europe/Paris")
    assert instant.iso8601 == "2019-08-17T12:30:45+02:00"
    parsed = ZonedInstant.from_iso8601(instant.iso8601)
    assert parsed == instant
    assert parsed.offset == instant.offset


@pytest.mark.parametrize(
    "text,expected",
    [
        ("2019-08-17T12:30:45Z", "2019-08-17T12:30:45+00:00"),
        ("2019-08-17T12:30:45+0200", "2019-08-17T12:30:45+02:00"),
        ("2019-08-17 12:30:45-05:00", "2019-08-17T12:30:45-05:00"),
        ("2019-08-17T12:30:45.1234567+02:00", "2019-08-17T12:30:45+02:00"),
        ("2019-08-17T12:30:45", "2019-08-17T12:30:45+00:00"),
    ],
)
def test_from_iso8601_variants(text, expected):
    assert ZonedInstant.from_iso8601(text).iso8601 == expected


def test_from_iso8601_naive_uses_given_zone():
    assert ZonedInstant.from_iso8601("2019-01-17T12:00:00", "Europe/Paris").iso8601 == "2019-01-17T12:00:00+01:00"


def test_rfc2822_round_trip():
    instant = ZonedInstant(2019, 8, 17, 12, 30, 45, tz="Europe/Paris")
    assert instant.rfc2822 == "Sat, 17 Aug 2019 12:30:45 +0200"
    assert instant.rfc822 == instant.rfc2822
    parsed = ZonedInstant.from_rfc2822(instant.rfc2822)
    assert parsed == instant
    assert parsed.offset == timedelta(hours=2)


def test_rfc822_accepts_zone_names():
    assert ZonedInstant.from_rfc822("Sat, 17 Aug 2019 10:30:45 GMT").iso8601 == "2019-08-17T10:30:45+00:00"


@pytest.mark.parametrize("text", ["Sat, 17 Aug 2019 12:30:45 +1500", "Sat, 17 Aug 2019 12:30:45 -1401"])
def test_rfc822_rejects_offsets_beyond_fourteen_hours(text):
    with pytest.raises(FormatError):
        ZonedInstant.from_rfc822(text)
    assert ZonedInstant.try_parse(text) == (ABSENT, False)
    assert ZonedInstant.from_rfc822("Sat, 17 Aug 2019 12:30:45 +1400").offset == timedelta(hours=14)


@pytest.mark.parametrize("text", ["", "   ", "yesterday", "2019-02-30T00:00:00Z", "Sat, 99 Foo 2019"])
def test_parse_failures(text):
    with pytest.raises(FormatError):
        ZonedInstant.parse(text)
    assert ZonedInstant.try_parse(text) == (ABSENT, False)


def test_parse_accepts_iso_and_rfc():
    iso = ZonedInstant.parse("2019-08-17T12:30:45+02:00")
    rfc = ZonedInstant.parse("Sat, 17 Aug 2019 12:30:45 +0200")
    assert iso == rfc


def test_parse_with_culture():
    instant, ok = ZonedInstant.try_parse("8/17/2019 1:30:45 PM", "en-US", tz="UTC")
    assert ok
    assert instant.iso8601 == "2019-08-17T13:30:45+00:00"


def test_parse_styles():
    text = "2019-08-17 12:00:00"
    assert ZonedInstant.parse(text, styles=ParseStyles.ASSUME_UNIVERSAL, tz="Europe/Paris").offset == timedelta(0)
    adjusted = ZonedInstant.parse("2019-08-17T12:00:00+02:00", styles=ParseStyles.ADJUST_TO_UNIVERSAL)
    assert adjusted.iso8601 == "2019-08-17T10:00:00+00:00"
    assert adjusted.kind == DateTimeKind.UTC


def test_parse_exact_with_fraction_and_offset():
    instant = ZonedInstant.parse_exact("2019-03-31 12:30:45:500 +02:00", FORMAT)
    assert instant.millisecond == 500
    assert instant.offset == timedelta(hours=2)
    assert instant.to_string(FORMAT) == "2019-03-31 12:30:45:500 +02:00"
    assert ZonedInstant.try_parse_exact("2019-03-31", FORMAT) == (ABSENT, False)


def test_standard_formats():
    instant = ZonedInstant(2019, 8, 17, 12, 30, 45, 123, tz="Europe/Paris")
    assert instant.to_string("o") == "2019-08-17T12:30:45.1230000+02:00"
    assert instant.to_string("s") == "2019-08-17T12:30:45"
    assert instant.to_string("u") == "2019-08-17 10:30:45Z"
    assert instant.to_string("r") == "Sat, 17 Aug 2019 10:30:45 GMT"
    assert instant.to_string("G") == "08/17/2019 12:30:45"
    assert instant.to_string("D", "da-DK") == "lørdag den 17. august 2019"
    assert f"{instant:yyyy}" == "2019"
    with pytest.raises(FormatError):
        instant.to_string("Q")


def test_arithmetic_keeps_offset():
    instant = ZonedInstant(2019, 3, 30, 12, tz="Europe/Paris")
    later = instant.add_days(1)
    # The offset is frozen: no switch to summer time.
    assert later.offset == timedelta(hours=1)
    assert later.iso8601 == "2019-03-31T12:00:00+01:00"
    assert (later - instant) == timedelta(days=1)
    assert instant + timedelta(hours=2) == instant.add_hours(2)
    assert later - timedelta(days=1) == instant


def test_fractional_additions_round_to_milliseconds():
    instant = ZonedInstant(2019, 8, 17, tz="UTC")
    assert instant.add_seconds(1.0004).millisecond == 0
    assert instant.add_seconds(1.0006).millisecond == 1
    assert instant.add_milliseconds(0.5).millisecond == 1
    assert instant.add_days(0.5).hour == 12
    assert instant.add_milliseconds(-0.5).to_string("HH:mm:ss.fff") == "23:59:59.999"


def test_add_months_clamps_day():
    instant = ZonedInstant(2020, 1, 31, 8, tz="UTC")
    assert instant.add_months(1).iso8601 == "2020-02-29T08:00:00+00:00"
    assert instant.add_years(1).add_months(1).iso8601 == "2021-02-28T08:00:00+00:00"


def test_overflow_raises_range_error():
    last = ZonedInstant.from_utc_ticks(MAX_TICKS)
    with pytest.raises(RangeError):
        last.add_ticks(1)
    with pytest.raises(RangeError):
        ZonedInstant(1, 1, 1, tz="UTC").add_milliseconds(-1)
    with pytest.raises(RangeError):
        ZonedInstant(9999, 12, 31, 23, tz="UTC").add_years(1)
    with pytest.raises(RangeError):
        ZonedInstant(2019, 2, 29, tz="UTC")


def test_unix_timestamps():
    assert ZonedInstant.zero().utc_ticks == UNIX_EPOCH_TICKS
    assert ZonedInstant.zero().is_zero
    instant = ZonedInstant.from_unix_timestamp(1566037845)
    assert instant.iso8601 == "2019-08-17T10:30:45+00:00"
    assert instant.to_unix_timestamp() == 1566037845
    assert instant.is_positive
    assert ZonedInstant.from_unix_timestamp(1566037845, tz="Europe/Paris").iso8601 == "2019-08-17T12:30:45+02:00"
    assert ZonedInstant.from_unix_timestamp(1.5).millisecond == 500
    assert ZonedInstant.from_unix_timestamp_millis(-1500).to_unix_timestamp() == -1
    assert ZonedInstant.from_unix_timestamp(-1).is_negative
    assert abs(ZonedInstant.current_unix_timestamp() - int(datetime.now(timezone.utc).timestamp())) <= 2


def test_conversions():
    instant = ZonedInstant(2019, 8, 17, 12, tz="Europe/Paris")
    assert instant.to_utc().iso8601 == "2019-08-17T10:00:00+00:00"
    assert instant.to_offset(timedelta(hours=-5)).iso8601 == "2019-08-17T05:00:00-05:00"
    assert instant.to_time_zone("Asia/Tokyo").iso8601 == "2019-08-17T19:00:00+09:00"
    assert instant.to_datetime() == datetime(2019, 8, 17, 10, tzinfo=timezone.utc)
    assert ZonedInstant.from_datetime(instant.to_datetime()) == instant
    assert ZonedInstant.from_datetime(datetime(2019, 1, 1), tz="Europe/Paris").offset == timedelta(hours=1)
    with pytest.raises(ArgumentError):
        ZonedInstant.from_datetime(None)


def test_calendar_queries():
    instant = ZonedInstant(2019, 8, 17, 12, 30, tz="Europe/Paris")
    assert instant.date == CalendarDate(2019, 8, 17)
    assert instant.time_of_day == timedelta(hours=12, minutes=30)
    assert instant.day_of_week == DayOfWeek.SATURDAY
    assert instant.is_weekend and not instant.is_weekday
    assert instant.day_of_year == 229
    assert instant.week_number == 33
    assert instant.week.code == "2019W33"
    assert instant.days_in_month == 31
    assert not instant.is_leap_year
    assert instant.day_name == "Saturday"
    assert instant.month_name == "August"
    assert instant.local_day_name("da-DK") == "Lørdag"
    assert instant.local_month_name("da-DK") == "August"


def test_day_boundaries():
    instant = ZonedInstant(2019, 8, 17, 12, 30, tz="Europe/Paris")
    assert instant.first_day_of_month().iso8601 == "2019-08-01T00:00:00+02:00"
    assert instant.last_day_of_month().iso8601 == "2019-08-31T00:00:00+02:00"
    assert instant.first_day_of_week().iso8601 == "2019-08-12T00:00:00+02:00"
    assert instant.last_day_of_week().iso8601 == "2019-08-18T00:00:00+02:00"
    assert instant.first_day_of_week(DayOfWeek.SUNDAY).iso8601 == "2019-08-11T00:00:00+02:00"


def test_now_and_today():
    assert ZonedInstant.now().kind == DateTimeKind.LOCAL
    assert ZonedInstant.utc_now().kind == DateTimeKind.UTC
    today = ZonedInstant.today("Europe/Paris")
    assert today.hour == 0 and today.minute == 0


def test_immutable_and_picklable():
    instant = ZonedInstant(2019, 8, 17, 12, tz="Europe/Paris")
    with pytest.raises(AttributeError):
        instant.year = 2020
    restored = pickle.loads(pickle.dumps(instant))
    assert restored == instant
    assert restored.offset == instant.offset
    assert repr(instant) == "ZonedInstant('2019-08-17T12:00:00.0000000+02:00')"


def test_daylight_saving_flag():
    summer = ZonedInstant(2019, 8, 17, 12, tz="Europe/Paris")
    winter = ZonedInstant(2019, 1, 17, 12, tz="Europe/Paris")
    assert summer.is_daylight_saving_time
    assert not winter.is_daylight_saving_time
    assert not ZonedInstant(2019, 8, 17, 12, tz="UTC").is_daylight_saving_time
    assert not ZonedInstant(2019, 8, 17, 12, tz=timedelta(hours=2)).is_daylight_saving_time
    assert summer.add_days(1).is_daylight_saving_time
    assert not winter.add_months(6).is_daylight_saving_time
    assert winter.add_months(6).to_time_zone("Europe/Paris").is_daylight_saving_time
    assert not summer.to_utc().is_daylight_saving_time
    assert pickle.loads(pickle.dumps(summer)).is_daylight_saving_time
    assert ZonedInstant.from_iso8601("2019-08-17T12:00:00", tz="Europe/Paris").is_daylight_saving_time


def test_to_local_time_keeps_moment():
    instant = ZonedInstant(2019, 8, 17, 12, tz="Europe/Paris")
    local = instant.to_local_time()
    assert local.kind == DateTimeKind.LOCAL
    assert local == instant
    expected = instant.to_datetime().astimezone().utcoffset()
    assert local.offset == expected

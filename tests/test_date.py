import pickle

import pytest

from essentials_time.absent import ABSENT, compare
from essentials_time.culture import EN_US
from essentials_time.date import CalendarDate, DayOfWeek
from essentials_time.errors import ArgumentError, ConfigurationError, FormatError, RangeError

A = CalendarDate(2012, 7, 30)
B = CalendarDate(2019, 8, 17)


def test_try_parse_iso_only_without_culture():
    result1, success1 = CalendarDate.try_parse("2019-08-17")
    result2, success2 = CalendarDate.try_parse("08/17/2019")

    assert success1 is True
    assert success2 is False
    assert (result1.year, result1.month, result1.day) == (2019, 8, 17)
    assert result2 is ABSENT


def test_try_parse_with_culture():
    result1, success1 = CalendarDate.try_parse("2019-08-17", "en-US")
    result2, success2 = CalendarDate.try_parse("08/17/2019", EN_US)

    assert success1 and success2
    assert result1 == result2 == CalendarDate(2019, 8, 17)


@pytest.mark.parametrize(
    "text,patterns",
    [
        ("2019-08-17", "yyyy-MM-dd"),
        ("08/17/2019", "MM/dd/yyyy"),
        ("2019-08-17", ["yyyy-MM-dd"]),
        ("08/17/2019", ["dd-MM-yyyy", "MM/dd/yyyy"]),
    ],
)
def test_try_parse_exact(text, patterns):
    result, success = CalendarDate.try_parse_exact(text, patterns)
    assert success
    assert result == CalendarDate(2019, 8, 17)


@pytest.mark.parametrize("text", ["", "   ", "2019-13-01", "17/08/2019", "not a date"])
def test_parse_and_try_parse_agree_on_failures(text):
    assert CalendarDate.try_parse(text) == (ABSENT, False)
    with pytest.raises(FormatError):
        CalendarDate.parse(text)


def test_parse_none_raises_argument_error():
    with pytest.raises(ArgumentError):
        CalendarDate.parse(None)
    assert CalendarDate.try_parse(None) == (ABSENT, False)


def test_try_parse_unknown_culture_propagates():
    with pytest.raises(ConfigurationError):
        CalendarDate.try_parse("2019-08-17", "xx-YY")


def test_parse_ignores_time_part():
    assert CalendarDate.parse("2019-08-17T23:30:00+02:00") == B


def test_invalid_date_raises_range_error():
    with pytest.raises(RangeError):
        CalendarDate(2019, 2, 29)


def test_compare_to():
    assert A.compare_to(B) == -1
    assert A.compare_to(A) == 0
    assert B.compare_to(A) == 1
    assert A.compare_to(None) == 1
    assert A.compare_to(ABSENT) == 1
    assert compare(None, A) == -1
    assert compare(None, ABSENT) == 0


def test_equals():
    assert A == CalendarDate(2012, 7, 30)
    assert A != B
    assert A != None  # noqa: E711
    assert not (A == ABSENT)
    assert hash(A) == hash(CalendarDate(2012, 7, 30))


@pytest.mark.parametrize(
    "left,right,eq,ne,lt,le,gt,ge",
    [
        (A, A, True, False, False, True, False, True),
        (A, B, False, True, True, True, False, False),
        (B, A, False, True, False, False, True, True),
        (A, ABSENT, False, True, False, False, True, True),
        (ABSENT, A, False, True, True, True, False, False),
        (ABSENT, ABSENT, True, False, False, True, False, True),
        (None, A, False, True, True, True, False, False),
        (A, None, False, True, False, False, True, True),
    ],
)
def test_operator_tables(left, right, eq, ne, lt, le, gt, ge):
    assert (left == right) is eq
    assert (left != right) is ne
    assert (left < right) is lt
    assert (left <= right) is le
    assert (left > right) is gt
    assert (left >= right) is ge


def test_sorting_mixed_with_absent():
    assert sorted([B, ABSENT, A]) == [ABSENT, A, B]


def test_absent_and_none_are_one_set_member():
    assert ABSENT == None  # noqa: E711
    assert hash(ABSENT) == hash(None)
    assert len({ABSENT, None}) == 1
    assert {ABSENT: "missing"}[None] == "missing"


def test_calendar_queries():
    assert B.day_of_week == DayOfWeek.SATURDAY
    assert B.day_of_year == 229
    assert CalendarDate(2020, 2, 1).is_leap_year
    assert CalendarDate(2020, 2, 1).days_in_month == 29
    assert CalendarDate(2020, 12, 31).week_number == 53
    assert CalendarDate(2021, 1, 3).week_number == 53
    assert CalendarDate(2021, 1, 4).week_number == 1


def test_arithmetic():
    assert B.add_days(15) == CalendarDate(2019, 9, 1)
    assert CalendarDate(2020, 1, 31).add_months(1) == CalendarDate(2020, 2, 29)
    assert CalendarDate(2020, 2, 29).add_years(1) == CalendarDate(2021, 2, 28)
    with pytest.raises(RangeError):
        CalendarDate(9999, 12, 31).add_days(1)
    with pytest.raises(RangeError):
        CalendarDate(1, 1, 1).add_months(-1)


def test_formatting():
    assert str(B) == "2019-08-17"
    assert B.to_string() == "08/17/2019"
    assert B.to_string("D", "en-US") == "Saturday, August 17, 2019"
    assert B.to_string("dd-MM-yyyy") == "17-08-2019"


def test_to_zoned_instant_is_start_of_day():
    instant = B.to_zoned_instant("Europe/Paris")
    assert instant.iso8601 == "2019-08-17T00:00:00+02:00"


def test_pickle_keeps_value():
    assert pickle.loads(pickle.dumps(B)) == B
    assert pickle.loads(pickle.dumps(ABSENT)) is ABSENT

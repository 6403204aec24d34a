import dataclasses
from datetime import datetime

import pytest

from app.nlp.parser import (
    DEFAULT_HOUR,
    DEFAULT_PRIORITY,
    PRIORITIES,
    InvalidTaskInput,
    extract_priority,
    extract_time,
    parse_task_input,
    split_task_name,
)

NOW = datetime(2026, 10, 18, 9, 30, 15)


def parse(text: str):
    return parse_task_input(text, now=NOW)


@pytest.mark.parametrize("text", ["", "   ", "\t\n", "!!! ...", "__"])
def test_parser_rejects_input_without_words(text):
    with pytest.raises(InvalidTaskInput):
        parse(text)


def test_priority_is_case_insensitive_and_position_independent():
    assert parse("Buy milk p2").priority == "P2"
    assert parse("p1 buy milk").priority == "P1"
    assert parse("Buy milk").priority == DEFAULT_PRIORITY == "P3"


def test_priority_takes_first_tag():
    assert extract_priority("p3 then P1") == "P3"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Submit report by 4pm", (16, 0)),
        ("Call by 12am", (0, 0)),
        ("Call by 12pm", (12, 0)),
        ("Standup at 10:30 am", (10, 30)),
        ("Ship it 7:05PM", (19, 5)),
        ("Call mom tomorrow", (12, 0)),
        ("Shift at 13pm", (12, 0)),
    ],
)
def test_extract_time(text, expected):
    assert extract_time(text) == expected


def test_no_time_defaults_to_noon():
    r = parse("Call mom tomorrow")
    assert (r.due_date.hour, r.due_date.minute) == (DEFAULT_HOUR, 0)
    assert r.due_date.second == 0 and r.due_date.microsecond == 0


def test_relative_dates():
    assert parse("Email Raj by tomorrow").due_date == datetime(2026, 10, 19, 12, 0)
    assert parse("Email Raj by next week").due_date == datetime(2026, 10, 25, 12, 0)
    # tomorrow is checked first
    assert parse("Plan next week tomorrow").due_date.date() == datetime(2026, 10, 19).date()


def test_relative_date_keeps_parsed_time():
    r = parse("Pay rent tomorrow 9:15am")
    assert r.due_date == datetime(2026, 10, 19, 9, 15)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("5 March", datetime(2026, 3, 5, 12, 0)),
        ("5 Mar", datetime(2026, 3, 5, 12, 0)),
        ("March 5", datetime(2026, 3, 5, 12, 0)),
        ("Mar 5", datetime(2026, 3, 5, 12, 0)),
        ("5 March 2027", datetime(2027, 3, 5, 12, 0)),
        ("5 Mar 2027", datetime(2027, 3, 5, 12, 0)),
    ],
)
def test_calendar_patterns_against_whole_input(text, expected):
    assert parse(text).due_date == expected


def test_leap_day_uses_reference_year():
    r = parse_task_input("29 February", now=datetime(2028, 1, 10, 8, 0))
    assert r.due_date == datetime(2028, 2, 29, 12, 0)


@pytest.mark.parametrize("text", ["31 February", "29 February", "February 30"])
def test_impossible_date_falls_back_to_today(text):
    # 2026 is not a leap year
    assert parse(text).due_date == datetime(2026, 10, 18, 12, 0)


def test_calendar_pattern_with_stray_words_falls_back_to_today():
    r = parse("Submit report 5 March")
    assert r.due_date == datetime(2026, 10, 18, 12, 0)


def test_no_date_is_today():
    assert parse("Submit report by 4pm").due_date == datetime(2026, 10, 18, 16, 0)


def test_assignee_is_first_plain_word_after_connector():
    # Reproduces the split literally: the time is skipped and the weekday wins.
    r = parse("Submit report Riya by 4pm Friday")
    assert r.task_name == "Submit report Riya"
    assert r.assignee == "Friday"
    assert r.priority == "P3"
    assert r.due_date == datetime(2026, 10, 18, 16, 0)


def test_assignee_skips_priority_and_time_tokens():
    r = parse("Fix bug by p1 5pm Dana")
    assert r.task_name == "Fix bug"
    assert r.assignee == "Dana"
    assert r.priority == "P1"
    assert r.due_date.hour == 17


def test_assignee_empty_when_only_excluded_tokens_follow():
    assert split_task_name("Fix bug by P2 5pm") == ("Fix bug", "")


def test_only_first_connector_counts():
    assert split_task_name("Meet at office by Sam") == ("Meet", "office")


def test_no_connector_keeps_whole_input_as_name():
    r = parse("Buy   milk")
    assert r.task_name == "Buy milk"
    assert r.assignee == ""


def test_connector_glued_by_tab_is_stripped_from_name():
    assert split_task_name("Call\tby") == ("Call", "")


def test_words_ending_in_connector_letters_are_kept():
    assert split_task_name("Feed the cat") == ("Feed the cat", "")


def test_empty_name_falls_back_to_input():
    r = parse("by Raj")
    assert r.task_name == "by Raj"
    assert r.assignee == "Raj"


def test_parse_is_repeatable_and_immutable():
    a = parse("Email Raj by tomorrow p2")
    b = parse("Email Raj by tomorrow p2")
    assert a == b
    with pytest.raises(dataclasses.FrozenInstanceError):
        a.priority = "P1"


def test_non_ascii_sentence_is_parsed():
    r = parse("Позвонить маме завтра")
    assert r.task_name == "Позвонить маме завтра"
    assert r.assignee == ""
    assert r.due_date == datetime(2026, 10, 18, 12, 0)


@pytest.mark.parametrize(
    "text",
    [
        "x",
        "by",
        "at at at",
        "p9 99pm 31 February",
        "Call 12:75pm by p1",
        "naïve café ☕ tomorrow",
        "   padded\ttext   ",
        "by p1 4pm 5pm p2",
        "5 March 2027 tomorrow next week",
    ],
)
def test_any_input_with_words_yields_valid_record(text):
    r = parse(text)
    assert r.priority in PRIORITIES
    assert isinstance(r.due_date, datetime)
    assert r.due_date.second == 0
    assert r.task_name.strip()

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

import dateparser

from ..utils.text import collapse_spaces, tokenize

logger = logging.getLogger(__name__)

# Inline patterns; both are unanchored searches
PRIORITY_PAT = re.compile(r"P[1-3]", re.IGNORECASE)
TIME_PAT = re.compile(r"(\d{1,2})(?::(\d{2}))?\s*(am|pm)", re.IGNORECASE)
TRAILING_CONNECTOR_PAT = re.compile(r"(?:^|\s)(?:by|at)$", re.IGNORECASE)

CONNECTORS = frozenset({"by", "at"})
PRIORITIES = ("P1", "P2", "P3")

DEFAULT_PRIORITY = "P3"
DEFAULT_HOUR = 12  # no time given -> noon
DEFAULT_MINUTE = 0

DATE_SETTINGS = {
    "PARSERS": ["custom-formats"],
}


class InvalidTaskInput(ValueError):
    """Raised when the input sentence has no words at all."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message)


@dataclass(frozen=True)
class ParsedTask:
    task_name: str
    assignee: str
    due_date: datetime
    priority: str


def extract_priority(text: str) -> str:
    m = PRIORITY_PAT.search(text)
    return m.group(0).upper() if m else DEFAULT_PRIORITY


def extract_time(text: str) -> tuple[int, int]:
    """
    Return (hour, minute) on a 24h clock for the first '<h>[:mm] am|pm' in text.
    Falls back to noon when nothing usable is found.
    """
    m = TIME_PAT.search(text)
    if not m:
        return DEFAULT_HOUR, DEFAULT_MINUTE

    hour = int(m.group(1))
    minute = int(m.group(2)) if m.group(2) else 0
    if hour > 12 or minute > 59:
        return DEFAULT_HOUR, DEFAULT_MINUTE

    meridiem = m.group(3).lower()
    if meridiem == "pm" and hour != 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0
    return hour, minute


def _format_matcher(fmt: str, has_year: bool) -> Callable[[str, datetime], datetime | None]:
    def match(text: str, today: datetime) -> datetime | None:
        if has_year:
            return dateparser.parse(text, date_formats=[fmt], languages=["en"], settings=DATE_SETTINGS)
        # Match against the reference year so Feb 29 resolves in leap years
        return dateparser.parse(
            f"{text} {today.year}", date_formats=[f"{fmt} %Y"], languages=["en"], settings=DATE_SETTINGS
        )

    match.__name__ = f"match_{fmt}"
    return match


# Tried in order against the whole sentence; first hit wins.
DATE_MATCHERS = (
    _format_matcher("%d %B", has_year=False),
    _format_matcher("%d %b", has_year=False),
    _format_matcher("%B %d", has_year=False),
    _format_matcher("%b %d", has_year=False),
    _format_matcher("%d %B %Y", has_year=True),
    _format_matcher("%d %b %Y", has_year=True),
)


def extract_date(text: str, today: datetime) -> datetime:
    """Calendar day the task is due; the time of day is not meaningful here."""
    lowered = text.lower()
    if "tomorrow" in lowered:
        return today + timedelta(days=1)
    if "next week" in lowered:
        return today + timedelta(days=7)

    for matcher in DATE_MATCHERS:
        dt = matcher(text, today)
        if dt is not None:
            return dt
    return today


def split_task_name(text: str) -> tuple[str, str]:
    """
    Split the sentence at the first 'by'/'at'.

    Words before the connector form the task name. After it, the first word
    that is neither a priority tag nor a time becomes the assignee and the
    rest of the sentence is ignored.
    """
    words = [w for w in text.split(" ") if w]
    name_words: list[str] = []
    assignee = ""
    in_assignee = False

    for word in words:
        if not in_assignee:
            if word.lower() in CONNECTORS:
                in_assignee = True
                continue
            name_words.append(word)
        elif not PRIORITY_PAT.search(word) and not TIME_PAT.search(word):
            assignee = word
            break

    task_name = collapse_spaces(" ".join(name_words))
    if TRAILING_CONNECTOR_PAT.search(task_name):
        task_name = task_name[:-2].strip()
    return task_name, assignee


def parse_task_input(text: str, now: datetime | None = None) -> ParsedTask:
    """
    Turn one sentence into a task record, e.g.
    'Submit report Riya by 4pm Friday' -> name, assignee, due date, priority.

    Every field has a default; only input without any words raises
    InvalidTaskInput.
    """
    if text is None or not tokenize(text):
        raise InvalidTaskInput()

    now = now or datetime.now()

    priority = extract_priority(text)
    hour, minute = extract_time(text)
    day = extract_date(text, now)
    due_date = day.replace(hour=hour, minute=minute, second=0, microsecond=0)

    task_name, assignee = split_task_name(text)
    if not task_name:
        task_name = collapse_spaces(text)

    parsed = ParsedTask(task_name=task_name, assignee=assignee, due_date=due_date, priority=priority)
    logger.debug("Parsed %r -> %s", text, parsed)
    return parsed

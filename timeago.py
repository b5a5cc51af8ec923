"""Fuzzy relative timestamps ("about an hour ago", "3 days from now").

``in_words`` turns a signed distance in milliseconds into a phrase using an
ordered table of magnitude buckets. ``parse`` accepts the loose ISO-8601 shapes
found in the results feed (fractional seconds, ``T``/``Z`` separators, offsets
with or without a colon) and returns an aware datetime, or ``None`` when the
text can't be understood.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, NamedTuple

from bs4 import Tag
from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

Template = str | Callable[[int, int], str]


class ConfigurationError(ValueError):
    """Settings that make every distance unrenderable."""


@dataclass
class Strings:
    prefix_ago: str | None = None
    prefix_from_now: str | None = None
    suffix_ago: str | None = "ago"
    suffix_from_now: str | None = "from now"
    in_past: str = "any moment now"
    seconds: Template = "less than a minute"
    minute: Template = "about a minute"
    minutes: Template = "%d minutes"
    hour: Template = "about an hour"
    hours: Template = "about %d hours"
    day: Template = "a day"
    days: Template = "%d days"
    month: Template = "about a month"
    months: Template = "%d months"
    year: Template = "about a year"
    years: Template = "%d years"
    word_separator: str | None = " "  # None falls back to a single space
    numbers: list[str] = field(default_factory=list)


@dataclass
class Settings:
    refresh_millis: int = 60000
    allow_past: bool = True
    allow_future: bool = False
    locale_title: bool = False
    cutoff: int = 0  # 0 = always re-render
    auto_dispose: bool = True
    strings: Strings = field(default_factory=Strings)


class Span(NamedTuple):
    """One absolute distance expressed in every unit the buckets test against."""

    seconds: float
    minutes: float
    hours: float
    days: float
    years: float

    @classmethod
    def from_millis(cls, distance_millis: float) -> "Span":
        seconds = abs(distance_millis) / 1000
        minutes = seconds / 60
        hours = minutes / 60
        days = hours / 24
        return cls(seconds, minutes, hours, days, days / 365)


def _round(value: float) -> int:
    """Round half up, the way browsers round."""
    return int(math.floor(value + 0.5))


# (unit, exclusive upper limit, Strings attribute, value for the placeholder).
# Evaluated top to bottom; the first row whose unit is below its limit wins.
BUCKETS: tuple[tuple[str, float, str, Callable[[Span], int]], ...] = (
    ("seconds", 45, "seconds", lambda s: _round(s.seconds)),
    ("seconds", 90, "minute", lambda s: 1),
    ("minutes", 45, "minutes", lambda s: _round(s.minutes)),
    ("minutes", 90, "hour", lambda s: 1),
    ("hours", 24, "hours", lambda s: _round(s.hours)),
    ("hours", 42, "day", lambda s: 1),
    ("days", 30, "days", lambda s: _round(s.days)),
    ("days", 45, "month", lambda s: 1),
    ("days", 365, "months", lambda s: _round(s.days / 30)),
    ("years", 1.5, "year", lambda s: 1),
    ("years", math.inf, "years", lambda s: _round(s.years)),
)


def select_bucket(span: Span) -> tuple[str, int]:
    """Return the Strings key and placeholder value for a distance."""
    for unit, limit, key, value_fn in BUCKETS:
        if getattr(span, unit) < limit:
            return key, value_fn(span)
    raise AssertionError("bucket table has no catch-all row")


def substitute(template: Template, number: int, distance_millis: int, numbers: list[str] | None = None) -> str:
    """Fill the first %d in a template, translating the numeral when a table is set."""
    text = template(number, distance_millis) if callable(template) else template
    value = number
    if numbers and 0 <= number < len(numbers) and numbers[number]:
        value = numbers[number]
    return re.sub(r"%d", lambda _m: str(value), text, count=1, flags=re.IGNORECASE)


def in_words(distance_millis: int, settings: Settings) -> str:
    """Phrase for a distance; positive means the timestamp is in the past."""
    if not settings.allow_past and not settings.allow_future:
        raise ConfigurationError("allow_past and allow_future can not both be False")

    strings = settings.strings
    prefix = strings.prefix_ago
    suffix = strings.suffix_ago
    if settings.allow_future and distance_millis < 0:
        prefix = strings.prefix_from_now
        suffix = strings.suffix_from_now

    if not settings.allow_past and distance_millis >= 0:
        return strings.in_past

    key, number = select_bucket(Span.from_millis(distance_millis))
    words = substitute(getattr(strings, key), number, distance_millis, strings.numbers)

    separator = " " if strings.word_separator is None else strings.word_separator
    return separator.join(part or "" for part in (prefix, words, suffix)).strip()


# Fields a partial timestamp leaves out: "2008-07" parses as 2008-07-01.
_PARSE_DEFAULT = datetime(2000, 1, 1)


def normalize(text: str) -> str:
    """Rewrite a loose ISO-8601 string into something dateutil reads unambiguously."""
    s = text.strip()
    s = re.sub(r"\.\d+", "", s, count=1)
    s = s.replace("-", "/", 1).replace("-", "/", 1)
    s = s.replace("T", " ", 1).replace("Z", " UTC", 1)
    s = re.sub(r"([+\-]\d\d):?(\d\d)", r" \1\2", s, count=1)  # -04:00 -> -0400
    s = re.sub(r"([+\-]\d\d)$", r" \g<1>00", s, count=1)  # +09 -> +0900
    return s


def parse(text) -> datetime | None:
    """Parse a timestamp string. Returns None instead of raising."""
    if not isinstance(text, str):
        return None
    normalized = normalize(text)
    if not normalized:
        return None
    try:
        parsed = date_parser.parse(normalized, default=_PARSE_DEFAULT)
    except (ValueError, OverflowError) as e:
        logger.debug(f"Unparseable timestamp {text!r}: {e}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_valid(timestamp) -> bool:
    return isinstance(timestamp, datetime)


def distance(timestamp: datetime, now: datetime | None = None) -> int:
    """Milliseconds elapsed since timestamp; negative for future timestamps."""
    if now is None:
        now = datetime.now(timezone.utc)
    return (now - timestamp) // timedelta(milliseconds=1)


def locale_string(timestamp: datetime) -> str:
    """Absolute local-time rendering used for element titles."""
    return timestamp.astimezone().strftime("%c")


def is_time(tag: Tag) -> bool:
    return (tag.name or "").lower() == "time"


def element_datetime(tag: Tag) -> datetime | None:
    """Read a <time> element's datetime attribute, or any other element's title."""
    raw = tag.get("datetime") if is_time(tag) else tag.get("title")
    return parse(raw)


def coerce(timestamp) -> datetime | None:
    """Accept a datetime, string, epoch milliseconds or element and return a datetime."""
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            return timestamp.replace(tzinfo=timezone.utc)
        return timestamp
    if isinstance(timestamp, str):
        return parse(timestamp)
    if isinstance(timestamp, (int, float)) and not isinstance(timestamp, bool):
        return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
    if isinstance(timestamp, Tag):
        return element_datetime(timestamp)
    return None


def timeago(timestamp, settings: Settings | None = None) -> str:
    """Relative phrase for a timestamp measured against the current time."""
    if settings is None:
        settings = Settings()
    parsed = coerce(timestamp)
    if parsed is None:
        raise ValueError(f"Invalid timestamp: {timestamp!r}")
    return in_words(distance(parsed), settings)

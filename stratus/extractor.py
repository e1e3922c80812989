# ABOUTME: Best-effort location and day-reference extraction from free-text weather questions.
# ABOUTME: Applies a prioritized rule list (slang, ZIP, direct patterns, proper nouns, short fallback).

import logging
import re
from datetime import date
from typing import NamedTuple, Sequence

from stratus.models import ForecastDay

logger = logging.getLogger(__name__)

# City nicknames, checked before every other rule. Matched case-insensitively on word boundaries.
SLANG_LOCATIONS: dict[str, str] = {
    "nyc": "New York",
    "big apple": "New York",
    "philly": "Philadelphia",
    "chi-town": "Chicago",
    "chitown": "Chicago",
    "windy city": "Chicago",
    "san fran": "San Francisco",
    "frisco": "San Francisco",
    "sf": "San Francisco",
    "vegas": "Las Vegas",
    "sin city": "Las Vegas",
    "nola": "New Orleans",
    "big easy": "New Orleans",
    "beantown": "Boston",
    "h-town": "Houston",
    "atl": "Atlanta",
    "motor city": "Detroit",
    "mile high city": "Denver",
    "emerald city": "Seattle",
    "dc": "Washington",
    "big smoke": "London",
}

# A candidate equal to one of these is never a location.
STOP_WORDS = frozenset(
    {
        "weather", "climate", "forecast", "temperature", "conditions", "rain", "snow",
        "hot", "cold", "is", "it", "what", "how", "the", "today", "tomorrow", "now",
        "hi", "hello", "hey", "thanks", "ok", "okay", "yes", "no", "help",
    }
)

# Words that do not occur in place names; a candidate containing one is conversation, not a place.
FILLER_WORDS = frozenset(
    {
        "weather", "forecast", "climate", "temperature", "what", "whats", "how", "hows",
        "today", "tonight", "tomorrow", "now", "i", "me", "my", "you", "your", "we",
        "is", "it", "should", "wear", "tell", "please", "about", "like", "will", "can",
        "do", "does", "plan", "day", "week", "joke",
    }
)

MAX_LOCATION_WORDS = 4
SHORT_MESSAGE_WORDS = 3

ZIP_PATTERN = re.compile(r"\b(\d{5})\b")

# Ordered; the first pattern whose capture validates wins.
DIRECT_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    (
        "weather-in",
        re.compile(
            r"(?:weather|forecast|climate|conditions?|temperature)\s+(?:like\s+)?(?:in|for|at|near|of)\s+"
            r"([A-Za-z][A-Za-z\s,.-]+?)"
            r"(?:\s*[?.!]?\s*$|\s+(?:weather|forecast|climate|today|tomorrow|now|is|please))",
            re.IGNORECASE,
        ),
    ),
    (
        "place-weather",
        re.compile(
            r"(?:^|\s)(?:in\s+)?([A-Za-z][A-Za-z\s,.-]+?)\s+(?:weather|forecast|climate|conditions?|temperature)",
            re.IGNORECASE,
        ),
    ),
    (
        "hows-place",
        re.compile(
            r"(?:how'?s|what'?s)\s+(?:the\s+)?(?:weather\s+)?(?:like\s+)?(?:in\s+|for\s+|at\s+)?"
            r"([A-Za-z][A-Za-z\s,.-]+?)"
            r"(?:\s*[?.!]?\s*$|\s+(?:like|today|now))",
            re.IGNORECASE,
        ),
    ),
    (
        "whole-message",
        re.compile(r"^([A-Za-z][A-Za-z\s,.-]+?)(?:\s*[?.!]?\s*$)", re.IGNORECASE),
    ),
)

PROPER_NOUN_PATTERN = re.compile(r"\b(?:in|for|at|near)\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]*)*)")

_CANDIDATE_CHARS = re.compile(r"^[A-Za-z][A-Za-z\s.-]*$")
_TOKEN_CHARS = re.compile(r"^[A-Za-z][A-Za-z.-]*$")
_TRAILING_PUNCTUATION = re.compile(r"[,.?!]+$")
_LEADING_THE = re.compile(r"^\s*(?:the\s+)?", re.IGNORECASE)


class LocationMatch(NamedTuple):
    """An extracted location and the name of the rule that produced it."""

    value: str
    rule: str


def _slang_pattern(nickname: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![A-Za-z0-9]){re.escape(nickname)}(?![A-Za-z0-9])", re.IGNORECASE)


_SLANG_PATTERNS = [(_slang_pattern(nick), name) for nick, name in SLANG_LOCATIONS.items()]


def extract_location(message: str) -> str | None:
    """Best-guess location named in a user message, or None if there is none."""
    match = match_location(message)
    return match.value if match else None


def match_location(message: str) -> LocationMatch | None:
    """Run the extraction rules in priority order and report which one matched."""
    for pattern, canonical in _SLANG_PATTERNS:
        if pattern.search(message):
            logger.debug("Slang match %r -> %r", pattern.pattern, canonical)
            return LocationMatch(canonical, "slang")

    zip_match = ZIP_PATTERN.search(message)
    if zip_match:
        return LocationMatch(zip_match.group(1), "zip")

    for name, pattern in DIRECT_PATTERNS:
        m = pattern.search(message)
        if not m:
            continue
        candidate = clean_candidate(m.group(1))
        if is_valid_location(candidate):
            logger.debug("Pattern %s extracted %r", name, candidate)
            return LocationMatch(candidate, name)

    for m in PROPER_NOUN_PATTERN.finditer(message):
        candidate = m.group(1).strip()
        if len(candidate) > 2 and candidate.lower() not in STOP_WORDS:
            return LocationMatch(candidate, "proper-noun")

    words = message.strip().split()
    if len(words) <= SHORT_MESSAGE_WORDS:
        for word in words:
            if len(word) >= 2 and _TOKEN_CHARS.match(word) and word.lower() not in STOP_WORDS:
                return LocationMatch(word, "short-message")

    logger.debug("No location found in %r", message)
    return None


def clean_candidate(raw: str) -> str:
    """Trim, strip trailing punctuation and a leading "the", and keep the part before the first comma."""
    candidate = _TRAILING_PUNCTUATION.sub("", raw.strip())
    candidate = _LEADING_THE.sub("", candidate)
    return re.split(r",\s*", candidate)[0].strip()


def is_valid_location(candidate: str) -> bool:
    if len(candidate) < 2 or candidate.lower() in STOP_WORDS:
        return False
    if not _CANDIDATE_CHARS.match(candidate):
        return False
    words = candidate.lower().split()
    if len(words) > MAX_LOCATION_WORDS:
        return False
    return not any(w.strip(".-") in FILLER_WORDS for w in words)


# Relative day phrases and their offset from today, in match order.
RELATIVE_DAYS: tuple[tuple[str, int], ...] = (
    ("day after tomorrow", 2),
    ("tomorrow", 1),
    ("next week", 7),
    ("tonight", 0),
    ("today", 0),
)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def find_today_index(forecast_days: Sequence[ForecastDay], today: date | None = None) -> int:
    """Index of the forecast day dated today, or 0 when today is outside the window."""
    today_iso = (today or date.today()).isoformat()
    for i, day in enumerate(forecast_days):
        if day.date == today_iso:
            return i
    return 0


def resolve_day_index(forecast_days: Sequence[ForecastDay], message: str, today: date | None = None) -> int:
    """Forecast-day index a message refers to ("tomorrow", "friday", ...), defaulting to today.

    Keywords are tried in a fixed order and the first one that lands inside the
    forecast window wins.
    """
    today_index = find_today_index(forecast_days, today)
    text = message.lower()

    for phrase, offset in RELATIVE_DAYS:
        if phrase in text:
            index = today_index + offset
            if 0 <= index < len(forecast_days):
                return index

    for weekday_number, weekday in enumerate(WEEKDAYS):
        if not re.search(rf"\b{weekday}\b", text):
            continue
        for i in range(today_index, len(forecast_days)):
            try:
                day = date.fromisoformat(forecast_days[i].date)
            except ValueError:
                continue
            if day.weekday() == weekday_number:
                return i

    return today_index

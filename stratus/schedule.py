# ABOUTME: Parses schedule-style assistant replies into timed items with weather and outfit notes.
# ABOUTME: Lines with a clock time start items; header lines set the title; other lines annotate the last item.

import re

from stratus.models import Schedule, ScheduleItem

TIME_PATTERN = re.compile(r"(\d{1,2}:\d{2}\s*(AM|PM)|\d{1,2}\s*(AM|PM))", re.IGNORECASE)

_EDGE_PUNCTUATION = re.compile(r"^[\s\-•:]+|[\s\-•:]+$")

OUTFIT_WORDS = ("wear", "outfit", "clothing")
WEATHER_WORDS = ("weather", "temperature", "°")


def is_schedule_reply(content: str) -> bool:
    """Whether an assistant reply reads like a schedule or plan."""
    lower = content.lower()
    return "schedule" in lower or "plan" in lower or (":" in content and "AM" in content) or "PM" in content


def parse_schedule(content: str) -> Schedule | None:
    """Extract timed schedule items from a reply; None when no line carries a time."""
    title = ""
    items: list[dict[str, str]] = []

    for line in content.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            continue

        time_match = TIME_PATTERN.search(trimmed)
        if time_match:
            time = time_match.group(0)
            activity = _EDGE_PUNCTUATION.sub("", trimmed.replace(time, "", 1))
            if activity:
                items.append({"time": time, "activity": activity, "weather": "", "outfit": ""})
        elif "**" in trimmed or "Schedule" in trimmed or "Plan" in trimmed:
            title = trimmed.replace("**", "")
        elif items:
            last = items[-1]
            lower = trimmed.lower()
            if any(word in lower for word in OUTFIT_WORDS):
                last["outfit"] = trimmed
            elif any(word in lower for word in WEATHER_WORDS):
                last["weather"] = trimmed
            else:
                last["activity"] += f" - {trimmed}"

    if not items:
        return None
    return Schedule(title=title or "Daily Schedule", items=[ScheduleItem(**item) for item in items])

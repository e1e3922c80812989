# ABOUTME: Explicit per-user session state and the turn handler that updates it.
# ABOUTME: Appends user/assistant turns, keeps the latest weather snapshot, day selection, and schedule.

import logging

import httpx
from pydantic import BaseModel

from stratus.chat import build_and_send_chat_turn
from stratus.config import Settings
from stratus.extractor import resolve_day_index
from stratus.models import ChatTurnResult, ConversationTurn, Schedule, WeatherSnapshot
from stratus.schedule import is_schedule_reply, parse_schedule

logger = logging.getLogger(__name__)

GREETING = "Hi! Ask me about the weather in any location, climate information, or anything else!"
FALLBACK_ERROR = "Failed to process your request. Please try again."


class ChatSession(BaseModel):
    """Conversation and display state for one user, passed by reference to handle_turn."""

    history: list[ConversationTurn] = []
    weather: WeatherSnapshot | None = None
    selected_day: int = 0
    schedule: Schedule | None = None
    last_result: ChatTurnResult | None = None


async def handle_turn(
    session: ChatSession,
    message: str,
    *,
    http_client: httpx.AsyncClient,
    settings: Settings,
    location_override: str | None = None,
) -> ConversationTurn:
    """Run one turn against the session and return the assistant entry that was appended.

    Failures of the chat call end the turn with an "Error: <message>" assistant entry
    instead of raising.
    """
    prior = list(session.history)
    session.history.append(ConversationTurn(role="user", content=message))

    try:
        result = await build_and_send_chat_turn(
            message,
            prior,
            http_client=http_client,
            settings=settings,
            location_override=location_override,
        )
    except Exception as e:
        logger.exception("Chat turn failed")
        reply = ConversationTurn(role="assistant", content=f"Error: {str(e) or FALLBACK_ERROR}")
        session.history.append(reply)
        session.last_result = None
        return reply

    reply = ConversationTurn(role="assistant", content=result.reply)
    session.history.append(reply)
    session.last_result = result

    if result.weather is not None:
        session.weather = result.weather
        session.selected_day = resolve_day_index(result.weather.forecast.forecastday, message)

    if is_schedule_reply(result.reply):
        schedule = parse_schedule(result.reply)
        if schedule is not None:
            session.schedule = schedule

    return reply

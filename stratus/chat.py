# ABOUTME: Orchestrates one chat turn: extract a location, fetch weather, and call the chat model.
# ABOUTME: Weather failures degrade to a generic answer; chat-completion failures raise ChatCompletionError.

import logging

import httpx
from pydantic_ai.exceptions import ModelHTTPError
from pydantic_ai.messages import ModelMessage, ModelRequest, ModelResponse, TextPart, UserPromptPart
from pydantic_ai.settings import ModelSettings

from stratus.agent import agent, build_chat_model
from stratus.config import Settings
from stratus.deps import ChatDeps
from stratus.exceptions import ChatCompletionError
from stratus.extractor import extract_location
from stratus.models import ChatTurnResult, ConversationTurn, WeatherSnapshot
from stratus.weather_service import get_weather

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Failed to get response from the chat model"

QUICK_ACTIONS = {
    "schedule": "Create a detailed schedule for my day based on the current weather conditions",
    "outfit": "What should I wear today? Please recommend an outfit based on the weather",
    "activities": "Suggest some activities I can do today given the current weather conditions",
    "planning": "Help me plan my day with weather-appropriate activities and timing",
}


def quick_action_message(action: str) -> str:
    """Canned user message for a quick action button. Raises KeyError for unknown actions."""
    return QUICK_ACTIONS[action]


def to_model_messages(history: list[ConversationTurn]) -> list[ModelMessage]:
    """Convert conversation turns into pydantic-ai message history, preserving order."""
    messages: list[ModelMessage] = []
    for turn in history:
        if turn.role == "user":
            messages.append(ModelRequest(parts=[UserPromptPart(content=turn.content)]))
        else:
            messages.append(ModelResponse(parts=[TextPart(content=turn.content)]))
    return messages


def upstream_error_message(body: object) -> str:
    """Pull a human-readable message out of a chat endpoint error body.

    Accepts both the raw `{"error": {"message": ...}}` shape and the inner error object.
    """
    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    if isinstance(body, str) and body:
        return body
    return DEFAULT_ERROR_MESSAGE


async def build_and_send_chat_turn(
    message: str,
    history: list[ConversationTurn],
    *,
    http_client: httpx.AsyncClient,
    settings: Settings,
    location_override: str | None = None,
) -> ChatTurnResult:
    """Answer one user message, grounding the reply in real-time weather when a location is found.

    Configuration is checked before any request. Weather is fetched before the chat call
    and any failure on that path only drops the weather context.
    """
    settings.validate_keys()

    extracted = location_override or extract_location(message)
    logger.info("Extracted location %r from %r", extracted, message)

    weather: WeatherSnapshot | None = None
    if extracted:
        try:
            weather = await get_weather(http_client, settings, extracted)
        except Exception:
            # The chat call must go ahead without weather context
            logger.exception("Weather lookup failed for %r", extracted)
        if weather is None:
            logger.info("No weather data for %r, answering without real-time context", extracted)

    if settings.history_limit is not None:
        history = history[-settings.history_limit :]

    try:
        result = await agent.run(
            message,
            message_history=to_model_messages(history),
            deps=ChatDeps(weather=weather),
            model=build_chat_model(settings, http_client),
            model_settings=ModelSettings(temperature=settings.llm_temperature, max_tokens=settings.llm_max_tokens),
        )
    except ModelHTTPError as e:
        raise ChatCompletionError(upstream_error_message(e.body), status_code=e.status_code) from e

    return ChatTurnResult(
        reply=result.output,
        location=extracted if weather is not None else None,
        extracted_location=extracted,
        weather=weather,
    )

# ABOUTME: Pydantic AI agent definition for the weather assistant.
# ABOUTME: Sets the persona, injects the date and real-time weather as instructions, and builds the chat model.

from datetime import date

import httpx
from pydantic_ai import Agent, RunContext
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider

from stratus.config import Settings
from stratus.deps import ChatDeps
from stratus.formatting import format_weather_context

PERSONA = (
    "You are Storm, a helpful and friendly weather assistant. "
    "Be conversational, accurate, and engaging. "
    "You can build daily schedules around the weather and recommend outfits for the conditions. "
    "When you lay out a schedule, put each entry on its own line starting with a time such as 9:00 AM."
)

WITH_WEATHER = (
    "You have been provided with REAL-TIME weather data. Use this accurate current data in your "
    "response and reference it specifically."
)

WITHOUT_WEATHER = "Provide helpful weather information based on typical climate patterns."

# The model is chosen per run from Settings, so no model is bound here.
agent = Agent(
    deps_type=ChatDeps,
    instructions=PERSONA,
)


@agent.instructions
def add_current_date(ctx: RunContext[ChatDeps]) -> str:
    """Inject the current date so the LLM knows what 'today' and 'tomorrow' mean."""
    today = date.today()
    return f"Today's date is {today.isoformat()} ({today.strftime('%A')})."


@agent.instructions
def add_weather_context(ctx: RunContext[ChatDeps]) -> str:
    """Embed the normalized weather summary when this turn resolved one."""
    if ctx.deps.weather is None:
        return WITHOUT_WEATHER
    return f"{WITH_WEATHER}\n{format_weather_context(ctx.deps.weather)}"


def build_chat_model(settings: Settings, http_client: httpx.AsyncClient | None = None) -> OpenAIChatModel:
    """OpenAI-compatible chat-completions model for the configured endpoint and key."""
    provider = OpenAIProvider(
        base_url=settings.llm_base_url,
        api_key=settings.require_llm_key(),
        http_client=http_client,
    )
    return OpenAIChatModel(settings.llm_model, provider=provider)

# ABOUTME: ASGI web entry point for the weather assistant.
# ABOUTME: Starlette routes for chat turns, quick actions, direct weather lookups, and session history.

import logging
from contextlib import asynccontextmanager

import httpx
from pydantic import BaseModel, ValidationError
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from stratus.chat import QUICK_ACTIONS, quick_action_message
from stratus.config import Settings, load_settings
from stratus.deps import create_http_client
from stratus.exceptions import ConfigError
from stratus.session import GREETING, ChatSession, handle_turn
from stratus.weather_service import get_weather

logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    """Body of POST /api/chat. `action` selects a quick-action prompt instead of `message`."""

    message: str = ""
    action: str | None = None
    location: str | None = None


def parse_chat_request(body: bytes) -> ChatRequest | None:
    """Parse a chat request body, resolving quick actions into their canned message."""
    try:
        chat_request = ChatRequest.model_validate_json(body)
    except ValidationError:
        return None
    if chat_request.action:
        if chat_request.action not in QUICK_ACTIONS:
            return None
        chat_request = chat_request.model_copy(update={"message": quick_action_message(chat_request.action)})
    if not chat_request.message.strip():
        return None
    return chat_request


async def chat(request: Request) -> JSONResponse:
    chat_request = parse_chat_request(await request.body())
    if chat_request is None:
        return JSONResponse(
            {"error": f"Send a non-empty 'message' or an 'action' from {sorted(QUICK_ACTIONS)}"},
            status_code=400,
        )

    state = request.app.state
    session: ChatSession = state.session
    reply = await handle_turn(
        session,
        chat_request.message,
        http_client=state.http_client,
        settings=state.settings,
        location_override=chat_request.location,
    )

    result = session.last_result
    return JSONResponse(
        {
            "reply": reply.content,
            "location": result.location if result else None,
            "weather": result.weather.model_dump(mode="json") if result and result.weather else None,
            "selected_day": session.selected_day,
            "schedule": session.schedule.model_dump(mode="json") if session.schedule else None,
        }
    )


async def weather(request: Request) -> JSONResponse:
    query = request.query_params.get("q", "").strip()
    if not query:
        return JSONResponse({"error": "Missing 'q' query parameter"}, status_code=400)

    state = request.app.state
    try:
        snapshot = await get_weather(state.http_client, state.settings, query)
    except ConfigError as e:
        return JSONResponse({"error": str(e)}, status_code=500)
    if snapshot is None:
        return JSONResponse({"error": f"No weather data found for {query}"}, status_code=404)
    return JSONResponse(snapshot.model_dump(mode="json"))


async def history(request: Request) -> JSONResponse:
    session: ChatSession = request.app.state.session
    return JSONResponse(
        {
            "greeting": GREETING,
            "history": [turn.model_dump() for turn in session.history],
        }
    )


async def reset(request: Request) -> JSONResponse:
    request.app.state.session = ChatSession()
    return JSONResponse({"greeting": GREETING, "history": []})


def create_app(settings: Settings | None = None, http_client: httpx.AsyncClient | None = None) -> Starlette:
    """Build the ASGI app with one in-process chat session.

    A client passed in is left open on shutdown; one created here is closed.
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: Starlette):
        client = http_client or create_http_client(settings.http_timeout)
        app.state.http_client = client
        try:
            yield
        finally:
            if http_client is None:
                await client.aclose()

    app = Starlette(
        routes=[
            Route("/api/chat", chat, methods=["POST"]),
            Route("/api/weather", weather, methods=["GET"]),
            Route("/api/history", history, methods=["GET"]),
            Route("/api/reset", reset, methods=["POST"]),
        ],
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session = ChatSession()
    logger.info("Weather provider: %s, chat model: %s", settings.weather_provider.value, settings.llm_model)
    return app


app = create_app()

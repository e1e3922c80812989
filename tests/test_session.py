# ABOUTME: Contract tests for session state updates across chat turns.
# ABOUTME: Stubs the chat turn to check history, weather, day selection, schedule, and error entries.

from datetime import date
from unittest.mock import AsyncMock

import httpx
import pytest

from stratus.exceptions import ChatCompletionError
from stratus.models import (
    ChatTurnResult,
    Condition,
    CurrentConditions,
    DaySummary,
    Forecast,
    ForecastDay,
    Location,
    WeatherSnapshot,
)
from stratus.session import ChatSession, handle_turn


def _snapshot() -> WeatherSnapshot:
    condition = Condition(text="Clear sky", icon="☀️")
    today = date.today().isoformat()
    return WeatherSnapshot(
        location=Location(name="Tokyo", latitude=35.69, longitude=139.69),
        current=CurrentConditions(
            temp_c=20.0, temp_f=68.0, humidity=50, wind_kph=5.0, feelslike_c=19.0, condition=condition
        ),
        forecast=Forecast(forecastday=[ForecastDay(date=today, day=DaySummary(condition=condition))]),
    )


def _stub_turn(monkeypatch, result: ChatTurnResult | None = None, error: Exception | None = None) -> AsyncMock:
    stub = AsyncMock(return_value=result, side_effect=error)
    monkeypatch.setattr("stratus.session.build_and_send_chat_turn", stub)
    return stub


class TestHandleTurn:
    @pytest.mark.asyncio
    async def test_appends_user_and_assistant(self, monkeypatch, settings):
        """A turn appends the user message and the reply, in order.

        Implementation: Stubs the chat turn with a plain reply.
        Passing implies: History grows by exactly two entries per turn.
        """
        _stub_turn(monkeypatch, ChatTurnResult(reply="Hello!"))
        session = ChatSession()
        client = AsyncMock(spec=httpx.AsyncClient)

        reply = await handle_turn(session, "Hi", http_client=client, settings=settings)

        assert reply.content == "Hello!"
        assert [(t.role, t.content) for t in session.history] == [("user", "Hi"), ("assistant", "Hello!")]
        assert session.last_result.reply == "Hello!"

    @pytest.mark.asyncio
    async def test_passes_prior_history_only(self, monkeypatch, settings):
        """The chat turn receives the history before the new message.

        Implementation: Runs two turns and inspects the second call's history.
        Passing implies: The new message is not duplicated in the replay.
        """
        stub = _stub_turn(monkeypatch, ChatTurnResult(reply="ok"))
        session = ChatSession()
        client = AsyncMock(spec=httpx.AsyncClient)

        await handle_turn(session, "first", http_client=client, settings=settings)
        await handle_turn(session, "second", http_client=client, settings=settings)

        message, history = stub.call_args.args
        assert message == "second"
        assert [t.content for t in history] == ["first", "ok"]

    @pytest.mark.asyncio
    async def test_stores_weather_and_selects_day(self, monkeypatch, settings):
        """A turn with weather updates the snapshot and the selected day.

        Implementation: Stubs a result carrying a one-day snapshot dated today.
        Passing implies: The weather card follows the latest place asked about.
        """
        snapshot = _snapshot()
        _stub_turn(monkeypatch, ChatTurnResult(reply="Sunny", location="Tokyo", weather=snapshot))
        session = ChatSession()

        await handle_turn(session, "weather in Tokyo", http_client=AsyncMock(spec=httpx.AsyncClient), settings=settings)

        assert session.weather == snapshot
        assert session.selected_day == 0

    @pytest.mark.asyncio
    async def test_keeps_previous_weather_when_none_resolved(self, monkeypatch, settings):
        """A turn without weather leaves the previous snapshot in place.

        Implementation: Seeds the session with a snapshot, then stubs a weatherless result.
        Passing implies: Small talk does not clear the weather card.
        """
        snapshot = _snapshot()
        _stub_turn(monkeypatch, ChatTurnResult(reply="Ha ha"))
        session = ChatSession(weather=snapshot)

        await handle_turn(session, "Tell me a joke", http_client=AsyncMock(spec=httpx.AsyncClient), settings=settings)

        assert session.weather == snapshot

    @pytest.mark.asyncio
    async def test_parses_schedule_reply(self, monkeypatch, settings):
        """A schedule-like reply is parsed into the session schedule.

        Implementation: Stubs a reply with two timed lines.
        Passing implies: Quick-action schedules reach the schedule panel.
        """
        _stub_turn(monkeypatch, ChatTurnResult(reply="Your schedule:\n9:00 AM Walk\n1:00 PM Lunch"))
        session = ChatSession()

        await handle_turn(session, "plan my day", http_client=AsyncMock(spec=httpx.AsyncClient), settings=settings)

        assert session.schedule is not None
        assert [item.activity for item in session.schedule.items] == ["Walk", "Lunch"]

    @pytest.mark.asyncio
    async def test_failure_appends_error_entry(self, monkeypatch, settings):
        """A failed chat call ends the turn with an 'Error: ...' entry.

        Implementation: Stubs the chat turn to raise ChatCompletionError.
        Passing implies: Failures are shown in the conversation instead of crashing it.
        """
        _stub_turn(monkeypatch, error=ChatCompletionError("Incorrect API key provided", status_code=401))
        session = ChatSession()

        reply = await handle_turn(session, "Hi", http_client=AsyncMock(spec=httpx.AsyncClient), settings=settings)

        assert reply.content == "Error: Incorrect API key provided"
        assert [t.role for t in session.history] == ["user", "assistant"]
        assert session.last_result is None

    @pytest.mark.asyncio
    async def test_failure_without_message_uses_fallback(self, monkeypatch, settings):
        """An exception without a message gets the generic fallback text.

        Implementation: Stubs the chat turn to raise a bare RuntimeError.
        Passing implies: The error entry is never just 'Error: '.
        """
        _stub_turn(monkeypatch, error=RuntimeError())
        session = ChatSession()

        reply = await handle_turn(session, "Hi", http_client=AsyncMock(spec=httpx.AsyncClient), settings=settings)

        assert reply.content == "Error: Failed to process your request. Please try again."

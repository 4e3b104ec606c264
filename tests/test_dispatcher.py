from __future__ import annotations

import pytest

from conftest import FakeBot, FakeInference, make_update
from hfrelay.dispatcher import (
    APOLOGY_MESSAGE,
    WELCOME_MESSAGE,
    Outcome,
    WebhookDispatcher,
)
from hfrelay.inference.client import InferenceError
from hfrelay.telegram.models import Update


def _dispatcher(bot: FakeBot, inference: FakeInference) -> WebhookDispatcher:
    return WebhookDispatcher(bot=bot, inference=inference)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_start_command_sends_welcome_without_inference() -> None:
    bot, inference = FakeBot(), FakeInference()

    result = await _dispatcher(bot, inference).dispatch(
        Update.model_validate(make_update("/start", chat_id=555))
    )

    assert result.outcome is Outcome.WELCOME
    assert bot.sent == [(555, WELCOME_MESSAGE)]
    assert inference.prompts == []
    assert not result.acknowledged


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["/start now", " /start", "/START", "/start@relay_test_bot"])
async def test_start_command_requires_exact_match(text: str) -> None:
    bot, inference = FakeBot(), FakeInference(reply="generated")

    result = await _dispatcher(bot, inference).dispatch(Update.model_validate(make_update(text)))

    assert result.outcome is Outcome.REPLY
    assert inference.prompts == [text]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        make_update(text=None),
        make_update(text=""),
        {"update_id": 7},
        {"update_id": 8, "edited_message": {"chat": {"id": 1}, "text": "edited"}},
    ],
)
async def test_updates_without_text_make_no_calls(payload: dict) -> None:
    bot, inference = FakeBot(), FakeInference()

    result = await _dispatcher(bot, inference).dispatch(Update.model_validate(payload))

    assert result.outcome is Outcome.IGNORED
    assert not result.acknowledged
    assert bot.sent == []
    assert inference.prompts == []


@pytest.mark.asyncio
async def test_free_text_is_relayed_verbatim() -> None:
    bot, inference = FakeBot(), FakeInference(reply="Hello!")

    result = await _dispatcher(bot, inference).dispatch(
        Update.model_validate(make_update("Say hello", chat_id=-100200))
    )

    assert result.outcome is Outcome.REPLY
    assert inference.prompts == ["Say hello"]
    assert bot.sent == [(-100200, "Hello!")]


@pytest.mark.asyncio
async def test_inference_failure_sends_apology_only() -> None:
    bot = FakeBot()
    inference = FakeInference(
        error=InferenceError("non-200 status code: 503", status_code=503, body="model loading")
    )

    result = await _dispatcher(bot, inference).dispatch(Update.model_validate(make_update("hi")))

    assert result.outcome is Outcome.APOLOGY
    assert bot.sent == [(123, APOLOGY_MESSAGE)]
    assert "503" not in bot.sent[0][1]


@pytest.mark.asyncio
async def test_failed_send_is_reported_not_raised() -> None:
    bot, inference = FakeBot(send_ok=False), FakeInference(reply="text")

    result = await _dispatcher(bot, inference).dispatch(Update.model_validate(make_update("hi")))

    assert result.outcome is Outcome.REPLY
    assert result.send is not None and not result.send.ok
    assert result.acknowledged


@pytest.mark.asyncio
async def test_same_update_twice_gives_identical_outcomes() -> None:
    bot, inference = FakeBot(), FakeInference(reply="same")
    dispatcher = _dispatcher(bot, inference)
    update = Update.model_validate(make_update("repeat", chat_id=9))

    first = await dispatcher.dispatch(update)
    second = await dispatcher.dispatch(update)

    assert first == second
    assert bot.sent == [(9, "same"), (9, "same")]
    assert inference.prompts == ["repeat", "repeat"]

"""Webhook dispatcher: one Telegram update in, at most one reply out."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog

from hfrelay.inference.client import InferenceClient, InferenceError
from hfrelay.telegram.client import SendResult, TelegramBotClient
from hfrelay.telegram.models import Update

logger = structlog.get_logger()

WELCOME_TRIGGER = "/start"
WELCOME_MESSAGE = "Welcome! Type anything to receive an AI-generated response."
APOLOGY_MESSAGE = "Sorry, I couldn't process your request. Please try again later."


class Outcome(str, Enum):
    IGNORED = "ignored"
    WELCOME = "welcome"
    REPLY = "reply"
    APOLOGY = "apology"


@dataclass
class DispatchResult:
    """What the dispatcher did with one update."""

    outcome: Outcome
    chat_id: int | str | None = None
    reply_text: str | None = None
    send: SendResult | None = None

    @property
    def acknowledged(self) -> bool:
        """Whether the caller gets the acknowledgment text.

        The welcome command stops right after its reply, like ignored updates.
        """
        return self.outcome in (Outcome.REPLY, Outcome.APOLOGY)


class WebhookDispatcher:
    """Routes a decoded update to the welcome, generation or apology path.

    Holds only the two shared clients, so concurrent calls are independent.
    """

    def __init__(self, *, bot: TelegramBotClient, inference: InferenceClient) -> None:
        self.bot = bot
        self.inference = inference

    async def dispatch(self, update: Update) -> DispatchResult:
        chat_id = update.chat_id
        text = update.text
        if chat_id is None or text is None:
            logger.debug("dispatch.ignored", update_id=update.update_id)
            return DispatchResult(outcome=Outcome.IGNORED)

        log = logger.bind(update_id=update.update_id, chat_id=chat_id)

        if text == WELCOME_TRIGGER:
            log.info("dispatch.welcome")
            return await self._reply(Outcome.WELCOME, chat_id, WELCOME_MESSAGE)

        try:
            generated = await self.inference.generate(text)
        except InferenceError as e:
            log.error(
                "inference.failed",
                error=str(e),
                status_code=e.status_code,
                body=(e.body or "")[:500] or None,
            )
            return await self._reply(Outcome.APOLOGY, chat_id, APOLOGY_MESSAGE)

        log.info("dispatch.reply", chars=len(generated))
        return await self._reply(Outcome.REPLY, chat_id, generated)

    async def _reply(self, outcome: Outcome, chat_id: int | str, text: str) -> DispatchResult:
        # Best effort: the result is logged by the client and not acted on
        sent = await self.bot.send_message(chat_id, text)
        return DispatchResult(outcome=outcome, chat_id=chat_id, reply_text=text, send=sent)

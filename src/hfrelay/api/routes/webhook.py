"""Telegram webhook ingress."""

from __future__ import annotations

import secrets

import structlog
from fastapi import APIRouter, Header, HTTPException, Request, Response
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from hfrelay.telegram.models import Update

logger = structlog.get_logger()

ACKNOWLEDGMENT = "Update processed"


async def telegram_webhook(
    request: Request,
    x_telegram_bot_api_secret_token: str | None = Header(default=None),
) -> Response:
    """Handle one Telegram update.

    Decode failures, ignored updates and the welcome command end with an
    empty 200 so Telegram does not redeliver them. Prompts that reached the
    model (reply or apology) get the acknowledgment text.
    """
    config = request.app.state.config
    expected_secret = (config.telegram.webhook_secret or "").strip()
    if expected_secret and not secrets.compare_digest(
        (x_telegram_bot_api_secret_token or "").strip(), expected_secret
    ):
        logger.warning("webhook.invalid_secret", path=request.url.path)
        raise HTTPException(status_code=401, detail="Invalid webhook secret")

    body = await request.body()
    logger.info("webhook.received", bytes=len(body))

    try:
        update = Update.decode(body)
    except ValidationError as e:
        logger.warning("webhook.decode_failed", error=str(e))
        return Response(status_code=200)

    result = await request.app.state.dispatcher.dispatch(update)
    if not result.acknowledged:
        return Response(status_code=200)
    return PlainTextResponse(ACKNOWLEDGMENT)


def build_router(path: str) -> APIRouter:
    """Mount the webhook handler at the configured path."""
    router = APIRouter()
    router.add_api_route(path, telegram_webhook, methods=["POST"])
    return router

"""Telegram Bot API client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from hfrelay.config import ConfigError, TelegramConfig

logger = structlog.get_logger()


@dataclass
class SendResult:
    """Outcome of a best-effort sendMessage call."""

    ok: bool
    status_code: int | None = None
    error: str | None = None


class TelegramBotClient:
    """Thin async wrapper over the Bot API methods the relay needs.

    One instance is built at startup and shared by all requests; it carries
    no per-request state.
    """

    def __init__(
        self,
        config: TelegramConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.username: str | None = None
        self._api_base = f"{config.api_base.rstrip('/')}/bot{config.token.strip()}"
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout_s),
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def authorize(self) -> str:
        """Check the token with getMe and remember the bot username."""
        try:
            resp = await self._client.get(f"{self._api_base}/getMe")
        except httpx.HTTPError as e:
            raise ConfigError(f"Telegram getMe failed: {e}") from e

        payload = _json_or_none(resp)
        if resp.status_code != 200 or not isinstance(payload, dict) or not payload.get("ok"):
            description = payload.get("description") if isinstance(payload, dict) else None
            raise ConfigError(
                f"Telegram rejected the bot token (status {resp.status_code}): "
                f"{description or resp.text[:200]}"
            )

        result = payload.get("result") or {}
        username = result.get("username") if isinstance(result, dict) else None
        self.username = username if isinstance(username, str) and username else None
        logger.info("telegram.authorized", username=self.username)
        return self.username or ""

    async def send_message(self, chat_id: int | str, text: str) -> SendResult:
        """Send ``text`` to ``chat_id``. Failures are logged, never raised."""
        try:
            resp = await self._client.post(
                f"{self._api_base}/sendMessage",
                json={"chat_id": chat_id, "text": text},
            )
        except httpx.HTTPError as e:
            logger.warning("telegram.send_failed", chat_id=chat_id, error=str(e))
            return SendResult(ok=False, error=str(e))

        payload = _json_or_none(resp)
        if resp.status_code >= 400 or (isinstance(payload, dict) and payload.get("ok") is False):
            logger.warning(
                "telegram.send_failed",
                chat_id=chat_id,
                status_code=resp.status_code,
                body=resp.text[:300],
            )
            return SendResult(ok=False, status_code=resp.status_code, error=resp.text[:300])

        return SendResult(ok=True, status_code=resp.status_code)


def _json_or_none(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None

from __future__ import annotations

from typing import Any

import pytest

from hfrelay.inference.client import InferenceError
from hfrelay.telegram.client import SendResult


class FakeBot:
    """Records sendMessage calls instead of talking to Telegram."""

    def __init__(self, *, send_ok: bool = True) -> None:
        self.username: str | None = None
        self.sent: list[tuple[int | str, str]] = []
        self.closed = False
        self._send_ok = send_ok

    async def authorize(self) -> str:
        self.username = "relay_test_bot"
        return self.username

    async def send_message(self, chat_id: int | str, text: str) -> SendResult:
        self.sent.append((chat_id, text))
        if not self._send_ok:
            return SendResult(ok=False, status_code=403, error="Forbidden: bot was blocked")
        return SendResult(ok=True, status_code=200)

    async def close(self) -> None:
        self.closed = True


class FakeInference:
    """Returns canned text or raises a canned InferenceError."""

    def __init__(self, reply: str | None = "Hello!", error: InferenceError | None = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []
        self.closed = False

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        assert self.reply is not None
        return self.reply

    async def close(self) -> None:
        self.closed = True

    @property
    def stats(self) -> dict[str, Any]:
        return {"request_count": len(self.prompts)}


def make_update(text: str | None = "hi", chat_id: int | str = 123, update_id: int = 1) -> dict:
    message: dict[str, Any] = {
        "message_id": 10,
        "chat": {"id": chat_id, "type": "private"},
        "from": {"id": 42, "is_bot": False, "first_name": "Ada"},
        "date": 1700000000,
    }
    if text is not None:
        message["text"] = text
    return {"update_id": update_id, "message": message}


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path) -> None:
    for name in (
        "TELEGRAM_TOKEN",
        "HF_API_TOKEN",
        "HFRELAY_HOST",
        "HFRELAY_PORT",
        "HFRELAY_LOG_LEVEL",
        "HFRELAY_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

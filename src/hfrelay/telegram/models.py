"""Inbound Telegram update models.

Only the fields the relay acts on are declared; everything else Telegram
sends is ignored during validation.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Chat(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | str
    type: str | None = None


class Message(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    message_id: int | None = None
    chat: Chat
    text: str | None = None


class Update(BaseModel):
    """A single notification from Telegram describing a new message."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    update_id: int | None = None
    message: Message | None = None

    @classmethod
    def decode(cls, body: bytes | str) -> Update:
        """Parse a raw webhook body. Raises ``pydantic.ValidationError`` on bad input."""
        return cls.model_validate_json(body)

    @property
    def chat_id(self) -> int | str | None:
        return self.message.chat.id if self.message is not None else None

    @property
    def text(self) -> str | None:
        """Message text, or ``None`` when there is nothing to act on."""
        if self.message is None or not self.message.text:
            return None
        return self.message.text

"""Telegram update decoding and Bot API access."""

from hfrelay.telegram.client import SendResult, TelegramBotClient
from hfrelay.telegram.models import Chat, Message, Update

__all__ = [
    "Chat",
    "Message",
    "SendResult",
    "TelegramBotClient",
    "Update",
]

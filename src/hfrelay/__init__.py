"""hfrelay: Telegram webhook relay to a hosted text-generation model."""

__version__ = "1.0.0"

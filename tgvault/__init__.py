"""tgvault: Telegram Mini App backend for file collections and a notes wiki."""

__version__ = "1.0.0"

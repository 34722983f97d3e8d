"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str


class BotCommand(Enum):
    """Enum of bot commands (single source of truth)."""

    START = TelegramCommand("start", "Start the bot")
    HELP = TelegramCommand("help", "Show how to use the bot")
    TODAY = TelegramCommand("today", "Today's nutrition totals")
    HISTORY = TelegramCommand("history", "Your last 10 logged meals")


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


def parse_command(text: str) -> str | None:
    """Return the bare command name for ``/cmd`` or ``/cmd@bot`` text."""
    if not text.startswith("/"):
        return None
    parts = text[1:].split(maxsplit=1)
    if not parts:
        return None
    return parts[0].split("@", maxsplit=1)[0].lower() or None


CHAT_MENU_BUTTON: dict[str, object] = {"type": "commands"}

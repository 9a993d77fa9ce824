from typing import Iterable, Optional

from aiogram.types import BotCommand, InlineKeyboardButton, InlineKeyboardMarkup

from quest_bot.replies import Control


def build_keyboard(controls: Iterable[Control]) -> Optional[InlineKeyboardMarkup]:
    """Build a single-row inline keyboard, or None when there are no controls."""
    buttons = [
        InlineKeyboardButton(text=control.text, callback_data=control.token)
        for control in controls
    ]
    if not buttons:
        return None
    return InlineKeyboardMarkup(inline_keyboard=[buttons])


def build_commands(commands: Iterable[tuple[str, str]]) -> list[BotCommand]:
    """Build the bot command menu."""
    return [
        BotCommand(command=command, description=description)
        for command, description in commands
    ]

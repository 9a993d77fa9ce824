from quest_bot.keyboards.builders import (
    build_keyboard,
    build_commands,
)

__all__ = [
    "build_keyboard",
    "build_commands",
]

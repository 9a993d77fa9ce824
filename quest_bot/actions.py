from dataclasses import dataclass
from enum import Enum
from typing import Optional

from quest_bot.states import Language


class Action(str, Enum):
    """Inline button actions."""

    CHOOSE_LANGUAGE = "choose_language"
    START = "command_start"
    HINT = "command_hint"
    RESTART = "command_restart"


class Command(str, Enum):
    """Reserved text commands."""

    RESTART = "restart"
    REPEAT_QUESTION = "repeat_question"
    SHOW_MAP = "map"
    REVEAL_ANSWER = "answer"


@dataclass(frozen=True)
class ButtonPress:
    action: Action
    language: Optional[Language] = None


def language_token(language: Language) -> str:
    """Build callback data for a language button."""
    return f"{Action.CHOOSE_LANGUAGE.value}_{language.value}"


def parse_button(token: Optional[str]) -> Optional[ButtonPress]:
    """
    Decode callback data into a button press.

    Returns None for anything that is not one of our tokens.
    """
    if not token:
        return None

    prefix = f"{Action.CHOOSE_LANGUAGE.value}_"
    if token.startswith(prefix):
        try:
            language = Language(token[len(prefix):])
        except ValueError:
            return None
        return ButtonPress(Action.CHOOSE_LANGUAGE, language)

    try:
        action = Action(token)
    except ValueError:
        return None
    if action is Action.CHOOSE_LANGUAGE:
        return None
    return ButtonPress(action)


def parse_command(text: str) -> Optional[Command]:
    """Recognize "/name" or "/name@botname" as a reserved command."""
    if not text.startswith("/"):
        return None
    name, _, mention = text[1:].partition("@")
    if "@" in text and not mention:
        return None
    try:
        return Command(name)
    except ValueError:
        return None

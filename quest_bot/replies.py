from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


@dataclass(frozen=True)
class Control:
    """Inline button attached to a message."""

    text: str
    token: str


@dataclass(frozen=True)
class TextReply:
    text: str
    controls: tuple[Control, ...] = ()


@dataclass(frozen=True)
class PhotoReply:
    path: Path
    caption: Optional[str] = None


@dataclass(frozen=True)
class CommandsReply:
    """Replace the chat's command menu with (command, description) pairs."""

    commands: tuple[tuple[str, str], ...]


Reply = Union[TextReply, PhotoReply, CommandsReply]

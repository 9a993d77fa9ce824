from dataclasses import dataclass

from quest_bot.actions import Command


@dataclass(frozen=True)
class Features:
    """Optional commands and behaviours that can be switched off."""

    repeat_question: bool = True
    show_map: bool = True
    reveal_answer: bool = True
    special_incorrect_answers: bool = True

    def allows(self, command: Command) -> bool:
        """Check whether a text command is reserved."""
        if command is Command.REPEAT_QUESTION:
            return self.repeat_question
        if command is Command.SHOW_MAP:
            return self.show_map
        if command is Command.REVEAL_ANSWER:
            return self.reveal_answer
        return True

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Language(str, Enum):
    """Languages the quest is available in."""

    RU = "ru"
    EN = "en"


class Stage(str, Enum):
    """Coarse phase of a user's conversation."""

    CHOOSE_LANGUAGE = "choose_language"  # Waiting for a language button
    AWAITING_START = "awaiting_start"  # Language chosen, waiting for start
    IN_QUIZ = "in_quiz"  # Answering questions
    FINISHED = "finished"  # All questions answered


@dataclass(frozen=True)
class ChooseLanguage:
    stage = Stage.CHOOSE_LANGUAGE


@dataclass(frozen=True)
class AwaitingStart:
    language: Language

    stage = Stage.AWAITING_START


@dataclass(frozen=True)
class InQuiz:
    language: Language
    question_index: int
    hint_index: Optional[int] = None  # Last hint shown for the current question

    stage = Stage.IN_QUIZ


@dataclass(frozen=True)
class Finished:
    language: Language
    question_index: int  # Equals the number of questions

    stage = Stage.FINISHED


# Language display names, in keyboard order
LANGUAGES = {
    Language.RU: "Русский",
    Language.EN: "English",
}


Session = Union[ChooseLanguage, AwaitingStart, InQuiz, Finished]

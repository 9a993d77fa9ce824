import json
import string
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from quest_bot.states import Language

DATA_DIR = Path(__file__).parent.parent / "data"
QUESTIONS_FILE = "questions.json"
TRANSLATIONS_FILE = "translations.json"


class ContentError(Exception):
    """Static content is missing or malformed."""


class MessageKey(str, Enum):
    """Keys of the per-language UI strings table."""

    TO_START = "toStart"
    START = "start"
    PRESS_START = "pressStart"
    HINT = "hint"
    NO_MORE_HINTS = "noMoreHints"
    REREAD_QUESTION = "rereadQuestionMessage"
    CORRECT_ANSWER_MESSAGE = "correctAnswerMessage"
    INCORRECT_ANSWER = "incorrectAnswer"
    CONGRATULATIONS = "congratulations"
    RESTART = "restart"
    FINISHED = "finished"
    REPEAT_QUESTION = "repeatQuestion"
    MAP = "map"
    CORRECT_ANSWER = "correctAnswer"
    CORRECT_ANSWER_IS = "correctAnswerIs"
    WAIT_MAP_LOADING = "waitAMomentMapLoading"
    MAP_NOTES = "mapNotes"


@dataclass(frozen=True)
class QuizItem:
    """One question with its answers and hints."""

    question: str
    answers: tuple[str, ...]
    special_incorrect_answers: tuple[str, ...] = ()
    hints: tuple[str, ...] = ()

    def accepts(self, text: str) -> bool:
        """Check text against accepted answers, ignoring case."""
        folded = text.lower()
        return any(answer.lower() == folded for answer in self.answers)

    def is_special_incorrect(self, text: str) -> bool:
        """Check text against known near-miss answers, ignoring case."""
        folded = text.lower()
        return any(answer.lower() == folded for answer in self.special_incorrect_answers)


class LocalizedStrings:
    """UI strings for one language."""

    def __init__(self, texts: Mapping[MessageKey, str]):
        self._texts = dict(texts)

    def __getitem__(self, key: MessageKey) -> str:
        return self._texts[key]


# Strings filled in with str.format, and the fields each must use
TEMPLATE_FIELDS = {
    MessageKey.CORRECT_ANSWER_IS: {"answers"},
}


def _check_template(key: MessageKey, text: str, where: str) -> None:
    expected = TEMPLATE_FIELDS.get(key)
    if expected is None:
        return
    try:
        parts = list(string.Formatter().parse(text))
    except ValueError as e:
        raise ContentError(f"{where}: broken template: {e}") from e

    fields = set()
    for _, name, spec, conversion in parts:
        if name is None:
            continue
        if spec or conversion:
            raise ContentError(f"{where}: fields take no format spec or conversion")
        fields.add(name)
    if fields != expected:
        raise ContentError(
            f"{where}: template must use exactly {sorted(expected)}, got {sorted(fields)}"
        )


def _string_list(value: Any, where: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ContentError(f"{where}: expected a list of strings")
    return tuple(value)


def _parse_item(raw: Any, where: str) -> QuizItem:
    if not isinstance(raw, dict):
        raise ContentError(f"{where}: expected an object")

    question = raw.get("question")
    if not isinstance(question, str) or not question.strip():
        raise ContentError(f"{where}: question text is missing")

    answers = _string_list(raw.get("answers"), f"{where}.answers")
    if not answers:
        raise ContentError(f"{where}: at least one answer is required")

    return QuizItem(
        question=question,
        answers=answers,
        # Older content revisions have no special answers at all
        special_incorrect_answers=_string_list(
            raw.get("specialIncorrectAnswers", []), f"{where}.specialIncorrectAnswers"
        ),
        hints=_string_list(raw.get("hints", []), f"{where}.hints"),
    )


def _read_json(path: Path) -> Any:
    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise ContentError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


class ContentStore:
    """Read-only quiz items and UI strings, keyed by language."""

    def __init__(
        self,
        questions: Mapping[Language, tuple[QuizItem, ...]],
        strings: Mapping[Language, LocalizedStrings],
    ):
        self._questions = dict(questions)
        self._strings = dict(strings)

    @classmethod
    def from_dict(cls, questions: Any, translations: Any) -> "ContentStore":
        """Validate parsed JSON content and build the store."""
        if not isinstance(questions, dict):
            raise ContentError("questions: expected an object keyed by language")
        if not isinstance(translations, dict):
            raise ContentError("translations: expected an object keyed by language")

        parsed_questions = {}
        parsed_strings = {}
        for language in Language:
            items = questions.get(language.value)
            if not isinstance(items, list) or not items:
                raise ContentError(f"questions.{language.value}: no questions")
            parsed_questions[language] = tuple(
                _parse_item(raw, f"questions.{language.value}[{i}]")
                for i, raw in enumerate(items)
            )

            table = translations.get(language.value)
            if not isinstance(table, dict):
                raise ContentError(f"translations.{language.value}: missing")
            texts = {}
            for key in MessageKey:
                text = table.get(key.value)
                if not isinstance(text, str):
                    raise ContentError(
                        f"translations.{language.value}.{key.value}: missing"
                    )
                _check_template(key, text, f"translations.{language.value}.{key.value}")
                texts[key] = text
            parsed_strings[language] = LocalizedStrings(texts)

        return cls(parsed_questions, parsed_strings)

    @classmethod
    def load(cls, data_dir: Path = DATA_DIR) -> "ContentStore":
        """Load content from the JSON files in data_dir."""
        return cls.from_dict(
            _read_json(data_dir / QUESTIONS_FILE),
            _read_json(data_dir / TRANSLATIONS_FILE),
        )

    def questions_for(self, language: Language) -> tuple[QuizItem, ...]:
        """Get the ordered quiz items for a language."""
        return self._questions[language]

    def strings_for(self, language: Language) -> LocalizedStrings:
        """Get the UI strings for a language."""
        return self._strings[language]

    def question_count(self, language: Language) -> int:
        """Get number of quiz items for a language."""
        return len(self._questions[language])

    def item(self, language: Language, index: int) -> QuizItem:
        """Get a specific quiz item."""
        items = self._questions[language]
        if 0 <= index < len(items):
            return items[index]
        raise IndexError(f"No question {index} for {language.value}")

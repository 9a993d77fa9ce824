import pytest

from quest_bot.features import Features
from quest_bot.replies import CommandsReply, TextReply
from quest_bot.services.content_service import ContentStore, MessageKey
from quest_bot.services.quiz_engine import QuizEngine
from quest_bot.services.session_service import SessionStore

USER_ID = 42

QUESTIONS = {
    "en": [
        {
            "question": "Who is on the emblem?",
            "answers": ["Lion", "lions"],
            "specialIncorrectAnswers": ["Tiger"],
            "hints": ["Look up", "King of beasts"],
        },
        {
            "question": "How many giraffes?",
            "answers": ["3", "three"],
            "specialIncorrectAnswers": ["2", "THREE"],
            "hints": [],
        },
        {
            "question": "Snake name?",
            "answers": ["Kaa"],
            "hints": ["From a book"],
        },
    ],
    "ru": [
        {
            "question": "Кто на гербе?",
            "answers": ["Лев"],
            "specialIncorrectAnswers": ["тигр"],
            "hints": ["Посмотри наверх"],
        },
    ],
}


def make_translations() -> dict:
    translations = {}
    for language in ("en", "ru"):
        table = {key.value: f"{language}:{key.value}" for key in MessageKey}
        table[MessageKey.CORRECT_ANSWER_IS.value] = f"{language}:answer is {{answers}}"
        translations[language] = table
    return translations


def text(key: MessageKey, language: str = "en") -> str:
    """Expected UI string for a key in the test content."""
    return f"{language}:{key.value}"


def texts(replies) -> list[str]:
    """Texts of the text replies, in order."""
    return [reply.text for reply in replies if isinstance(reply, TextReply)]


def commands(replies) -> list[str]:
    """Command names of the last command menu update."""
    updates = [reply for reply in replies if isinstance(reply, CommandsReply)]
    assert updates, "no command menu update"
    return [name for name, _ in updates[-1].commands]


@pytest.fixture
def content() -> ContentStore:
    return ContentStore.from_dict(QUESTIONS, make_translations())


@pytest.fixture
def sessions() -> SessionStore:
    return SessionStore()


@pytest.fixture
def map_path(tmp_path):
    path = tmp_path / "map.jpg"
    path.write_bytes(b"\xff\xd8\xff\xd9")
    return path


@pytest.fixture
def engine(content, sessions, map_path) -> QuizEngine:
    return QuizEngine(content, sessions, Features(), map_path)


@pytest.fixture
def in_quiz(engine):
    """Engine whose user has chosen English and pressed start."""
    engine.handle_text(USER_ID, "hello")
    engine.handle_button(USER_ID, "choose_language_en")
    engine.handle_button(USER_ID, "command_start")
    return engine

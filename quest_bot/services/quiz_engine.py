import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional, assert_never

from quest_bot.actions import (
    Action,
    ButtonPress,
    Command,
    language_token,
    parse_button,
    parse_command,
)
from quest_bot.features import Features
from quest_bot.replies import CommandsReply, Control, PhotoReply, Reply, TextReply
from quest_bot.services.content_service import (
    ContentStore,
    LocalizedStrings,
    MessageKey,
)
from quest_bot.services.session_service import SessionStore
from quest_bot.states import (
    AwaitingStart,
    ChooseLanguage,
    Finished,
    InQuiz,
    LANGUAGES,
    Language,
    Session,
)

# Shown before a language is known, so both languages at once
CHOOSE_LANGUAGE_TEXT = "Выберите язык / Choose language"
CHOOSE_LANGUAGE_ERROR_TEXT = (
    "Пожалуйста, выберите язык с клавиатуры ниже. / "
    "Please select a language from the keyboard below."
)

DEFAULT_LANGUAGE = Language.EN


class QuizEngine:
    """
    Conversation state machine of the quest.

    Every operation looks up the user's session, stores the next state and
    returns the replies to deliver, in order. Nothing here talks to Telegram.
    """

    def __init__(
        self,
        content: ContentStore,
        sessions: SessionStore,
        features: Optional[Features] = None,
        map_path: Optional[Path] = None,
    ):
        features = features or Features()
        if map_path is None and features.show_map:
            features = replace(features, show_map=False)
        self.content = content
        self.sessions = sessions
        self.features = features
        self.map_path = map_path

    # Inbound events

    def handle_text(self, user_id: int, raw_text: Optional[str]) -> list[Reply]:
        """Handle a text message from the user."""
        text = (raw_text or "").strip()

        session = self.sessions.get(user_id)
        if session is None:
            return self.first_contact(user_id)

        command = parse_command(text)
        if command is not None and self.features.allows(command):
            return self.run_command(user_id, command)

        if isinstance(session, InQuiz):
            return self.evaluate_answer(user_id, text)
        return self._stage_notice(session)

    def handle_button(self, user_id: int, token: Optional[str]) -> list[Reply]:
        """Handle an inline button press."""
        press = parse_button(token)
        if press is None:
            logging.debug(f"Ignoring unknown button {token!r} from {user_id}")
            return []

        if self.sessions.get(user_id) is None:
            return self.first_contact(user_id)
        return self._dispatch_button(user_id, press)

    def _dispatch_button(self, user_id: int, press: ButtonPress) -> list[Reply]:
        action = press.action
        if action is Action.CHOOSE_LANGUAGE:
            return self.select_language(user_id, press.language)
        elif action is Action.START:
            return self.start_quiz(user_id)
        elif action is Action.HINT:
            return self.request_hint(user_id)
        elif action is Action.RESTART:
            return self.restart(user_id)
        else:
            assert_never(action)

    def run_command(self, user_id: int, command: Command) -> list[Reply]:
        """Execute a reserved text command."""
        if self.sessions.get(user_id) is None:
            return self.first_contact(user_id)

        if command is Command.RESTART:
            return self.restart(user_id)
        elif command is Command.REPEAT_QUESTION:
            session = self.sessions.get(user_id)
            if isinstance(session, InQuiz):
                return self.send_question(user_id)
            return self._stage_notice(session)
        elif command is Command.SHOW_MAP:
            return self.show_map(user_id)
        elif command is Command.REVEAL_ANSWER:
            return self.reveal_answer(user_id)
        else:
            assert_never(command)

    # Operations

    def first_contact(self, user_id: int) -> list[Reply]:
        """Greet a user seen for the first time."""
        return self._language_prompt(self.sessions.create(user_id))

    def restart(self, user_id: int) -> list[Reply]:
        """Start the conversation over from language selection."""
        return self._language_prompt(self.sessions.reset(user_id))

    def _language_prompt(self, session: Session) -> list[Reply]:
        return [
            self._commands(session),
            TextReply(CHOOSE_LANGUAGE_TEXT, self._language_controls()),
        ]

    def select_language(self, user_id: int, language: Language) -> list[Reply]:
        """Remember the chosen language and offer to start."""
        session = self.sessions.get(user_id)
        if not isinstance(session, (ChooseLanguage, AwaitingStart)):
            logging.debug(f"Language button ignored for {user_id} in {session}")
            return []

        session = self.sessions.save(user_id, AwaitingStart(language))
        logging.info(f"User {user_id} chose {LANGUAGES[language]}")
        strings = self.content.strings_for(language)
        return [
            self._commands(session),
            TextReply(
                strings[MessageKey.TO_START],
                (Control(strings[MessageKey.START], Action.START.value),),
            ),
        ]

    def start_quiz(self, user_id: int) -> list[Reply]:
        """Move from the start prompt to the first question."""
        session = self.sessions.get(user_id)
        if not isinstance(session, AwaitingStart):
            logging.debug(f"Start button ignored for {user_id} in {session}")
            return []

        session = self.sessions.save(user_id, InQuiz(session.language, 0))
        return [self._commands(session), *self.send_question(user_id)]

    def send_question(self, user_id: int) -> list[Reply]:
        """Show the current question. Clears hint progress."""
        session = self.sessions.get(user_id)
        if not isinstance(session, InQuiz):
            return []

        session = self.sessions.save(user_id, replace(session, hint_index=None))
        item = self.content.item(session.language, session.question_index)
        strings = self.content.strings_for(session.language)
        return [TextReply(item.question, (self._hint_control(strings),))]

    def request_hint(self, user_id: int) -> list[Reply]:
        """Show the next hint for the current question."""
        session = self.sessions.get(user_id)
        if not isinstance(session, InQuiz):
            logging.debug(f"Hint button ignored for {user_id} in {session}")
            return []

        item = self.content.item(session.language, session.question_index)
        strings = self.content.strings_for(session.language)
        next_index = 0 if session.hint_index is None else session.hint_index + 1

        if next_index >= len(item.hints):
            return [TextReply(strings[MessageKey.NO_MORE_HINTS])]

        self.sessions.save(user_id, replace(session, hint_index=next_index))
        is_last = next_index >= len(item.hints) - 1
        controls = () if is_last else (self._hint_control(strings),)
        return [TextReply(item.hints[next_index], controls)]

    def evaluate_answer(self, user_id: int, text: str) -> list[Reply]:
        """Check an answer to the current question."""
        session = self.sessions.get(user_id)
        if not isinstance(session, InQuiz):
            return self._stage_notice(session)

        item = self.content.item(session.language, session.question_index)
        strings = self.content.strings_for(session.language)

        if self.features.special_incorrect_answers and item.is_special_incorrect(text):
            return [TextReply(strings[MessageKey.REREAD_QUESTION])]
        if item.accepts(text):
            return self._advance(
                user_id, session, TextReply(strings[MessageKey.CORRECT_ANSWER_MESSAGE])
            )
        return [TextReply(strings[MessageKey.INCORRECT_ANSWER])]

    def reveal_answer(self, user_id: int) -> list[Reply]:
        """Tell the accepted answers and move on as if answered."""
        session = self.sessions.get(user_id)
        if not isinstance(session, InQuiz):
            return self._stage_notice(session)

        item = self.content.item(session.language, session.question_index)
        strings = self.content.strings_for(session.language)
        answers = ", ".join(f'"{answer}"' for answer in item.answers)
        reveal = TextReply(strings[MessageKey.CORRECT_ANSWER_IS].format(answers=answers))
        return [reveal, *self._advance(user_id, session)]

    def show_map(self, user_id: int) -> list[Reply]:
        """Send the quest map."""
        session = self.sessions.get(user_id)
        if isinstance(session, ChooseLanguage) or self.map_path is None:
            return self._stage_notice(session)

        strings = self.content.strings_for(session.language)
        return [
            TextReply(strings[MessageKey.WAIT_MAP_LOADING]),
            PhotoReply(self.map_path, strings[MessageKey.MAP_NOTES]),
        ]

    # Helpers

    def _advance(
        self, user_id: int, session: InQuiz, acknowledgement: Optional[TextReply] = None
    ) -> list[Reply]:
        next_index = session.question_index + 1
        total = self.content.question_count(session.language)

        if next_index >= total:
            finished = self.sessions.save(user_id, Finished(session.language, total))
            logging.info(f"User {user_id} finished the quest ({session.language.value})")
            strings = self.content.strings_for(session.language)
            return [
                TextReply(
                    strings[MessageKey.CONGRATULATIONS],
                    (self._restart_control(strings),),
                ),
                self._commands(finished),
            ]

        self.sessions.save(user_id, InQuiz(session.language, next_index))
        replies: list[Reply] = [acknowledgement] if acknowledgement else []
        return replies + self.send_question(user_id)

    def _stage_notice(self, session: Optional[Session]) -> list[Reply]:
        """Explain what the user is expected to do in the current stage."""
        if session is None or isinstance(session, ChooseLanguage):
            return [TextReply(CHOOSE_LANGUAGE_ERROR_TEXT, self._language_controls())]

        strings = self.content.strings_for(session.language)
        if isinstance(session, AwaitingStart):
            return [
                TextReply(
                    strings[MessageKey.PRESS_START],
                    (Control(strings[MessageKey.START], Action.START.value),),
                )
            ]
        if isinstance(session, Finished):
            return [
                self._commands(session),
                TextReply(strings[MessageKey.FINISHED], (self._restart_control(strings),)),
            ]
        # Only reached by commands that are not valid during the quiz
        return []

    def _commands(self, session: Session) -> CommandsReply:
        """Build the command menu for the session's stage."""
        language = getattr(session, "language", DEFAULT_LANGUAGE)
        strings = self.content.strings_for(language)

        commands = []
        if isinstance(session, InQuiz):
            if self.features.show_map:
                commands.append((Command.SHOW_MAP.value, strings[MessageKey.MAP]))
            if self.features.repeat_question:
                commands.append(
                    (Command.REPEAT_QUESTION.value, strings[MessageKey.REPEAT_QUESTION])
                )
            if self.features.reveal_answer:
                commands.append(
                    (Command.REVEAL_ANSWER.value, strings[MessageKey.CORRECT_ANSWER])
                )
        commands.append((Command.RESTART.value, strings[MessageKey.RESTART]))
        return CommandsReply(tuple(commands))

    @staticmethod
    def _language_controls() -> tuple[Control, ...]:
        return tuple(
            Control(title, language_token(language))
            for language, title in LANGUAGES.items()
        )

    @staticmethod
    def _hint_control(strings: LocalizedStrings) -> Control:
        return Control(strings[MessageKey.HINT], Action.HINT.value)

    @staticmethod
    def _restart_control(strings: LocalizedStrings) -> Control:
        return Control(strings[MessageKey.RESTART], Action.RESTART.value)

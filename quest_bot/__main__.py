import asyncio
import logging
from dataclasses import replace

from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import SimpleEventIsolation
from aiogram.fsm.strategy import FSMStrategy
from aiogram.types import BotCommand, BotCommandScopeDefault

from quest_bot import config
from quest_bot.actions import Command
from quest_bot.handlers import setup_routers
from quest_bot.services.content_service import ContentStore, MessageKey
from quest_bot.services.quiz_engine import QuizEngine
from quest_bot.services.session_service import SessionStore
from quest_bot.states import Language


async def on_startup(bot: Bot, engine: QuizEngine) -> None:
    strings = engine.content.strings_for(Language.EN)
    await bot.set_my_commands(
        [
            BotCommand(
                command=Command.RESTART.value,
                description=strings[MessageKey.RESTART],
            )
        ],
        scope=BotCommandScopeDefault(),
    )
    logging.info("Command menu updated")


def build_engine() -> QuizEngine:
    """Load content and wire the state machine."""
    content = ContentStore.load(config.data_dir)
    for language in Language:
        logging.info(
            f"Loaded {content.question_count(language)} questions for {language.value}"
        )

    features = config.features
    map_path = config.map_path
    if features.show_map and not map_path.is_file():
        logging.warning(f"Map file {map_path} not found, /map is disabled")
        features = replace(features, show_map=False)
        map_path = None

    logging.info(f"Features: {features}")
    return QuizEngine(content, SessionStore(), features, map_path)


def build_dispatcher(engine: QuizEngine) -> Dispatcher:
    """Create the dispatcher. Events of one chat are handled one at a time."""
    dp = Dispatcher(
        events_isolation=SimpleEventIsolation(),
        fsm_strategy=FSMStrategy.CHAT,
        engine=engine,
    )
    dp.include_router(setup_routers())
    dp.startup.register(on_startup)
    return dp


async def main() -> None:
    logging.basicConfig(level=config.log_level)

    if not config.bot_token:
        raise RuntimeError("❌ TELEGRAM_TOKEN is not set")

    engine = build_engine()

    bot = Bot(token=config.bot_token)
    dp = build_dispatcher(engine)
    await dp.start_polling(bot)


def run() -> None:
    """Console entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()

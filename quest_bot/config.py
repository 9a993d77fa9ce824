import os
from pathlib import Path

from dotenv import load_dotenv  # pip install python-dotenv

from quest_bot.features import Features
from quest_bot.services.content_service import DATA_DIR

# файл окружения: имя из переменной или .env в корне проекта
env_file = os.getenv("ENV_FILE", ".env")
load_dotenv(Path(__file__).parent.parent / env_file)


def env_flag(name: str, default: bool = True) -> bool:
    """Read a boolean switch from the environment."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


bot_token = os.getenv("TELEGRAM_TOKEN") or os.getenv("BOT_TOKEN")
log_level = os.getenv("LOG_LEVEL", "INFO").upper()

data_dir = Path(os.getenv("QUEST_DATA_DIR", str(DATA_DIR)))
map_path = Path(os.getenv("QUEST_MAP_PATH", str(data_dir / "map.jpg")))

features = Features(
    repeat_question=env_flag("FEATURE_REPEAT_QUESTION"),
    show_map=env_flag("FEATURE_MAP"),
    reveal_answer=env_flag("FEATURE_REVEAL_ANSWER"),
    special_incorrect_answers=env_flag("FEATURE_SPECIAL_INCORRECT"),
)

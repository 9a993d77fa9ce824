from aiogram import Router, Bot
from aiogram.types import Message

from quest_bot.services.delivery_service import DeliveryService
from quest_bot.services.quiz_engine import QuizEngine

router = Router()


@router.message()
async def handle_message(msg: Message, bot: Bot, engine: QuizEngine) -> None:
    """Handle any message: commands, answers, or stray text."""
    chat_id = msg.chat.id

    # Stickers, photos and the like count as empty text
    replies = engine.handle_text(chat_id, msg.text or "")
    await DeliveryService.deliver(bot, chat_id, replies)

from aiogram import Router, Bot
from aiogram.types import CallbackQuery

from quest_bot.services.delivery_service import DeliveryService
from quest_bot.services.quiz_engine import QuizEngine

router = Router()


@router.callback_query()
async def handle_button(cb: CallbackQuery, bot: Bot, engine: QuizEngine) -> None:
    """Handle inline button presses."""
    try:
        if cb.message is None:
            # Message is too old to know the chat
            return

        chat_id = cb.message.chat.id
        replies = engine.handle_button(chat_id, cb.data)
        await DeliveryService.deliver(bot, chat_id, replies)
    finally:
        await cb.answer()

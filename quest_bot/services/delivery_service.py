import logging
from typing import Iterable

from aiogram import Bot
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import BotCommandScopeChat, FSInputFile

from quest_bot.keyboards import build_commands, build_keyboard
from quest_bot.replies import CommandsReply, PhotoReply, Reply, TextReply


class DeliveryService:
    """Sends engine replies to a chat."""

    @staticmethod
    async def deliver(bot: Bot, chat_id: int, replies: Iterable[Reply]) -> None:
        """Send replies one by one, keeping their order."""
        for reply in replies:
            if isinstance(reply, TextReply):
                await bot.send_message(
                    chat_id, reply.text, reply_markup=build_keyboard(reply.controls)
                )
            elif isinstance(reply, PhotoReply):
                await bot.send_photo(
                    chat_id, FSInputFile(reply.path), caption=reply.caption
                )
            elif isinstance(reply, CommandsReply):
                await DeliveryService.set_commands(bot, chat_id, reply)

    @staticmethod
    async def set_commands(bot: Bot, chat_id: int, reply: CommandsReply) -> None:
        """Update the chat's command menu."""
        try:
            await bot.set_my_commands(
                build_commands(reply.commands),
                scope=BotCommandScopeChat(chat_id=chat_id),
            )
        except TelegramBadRequest as e:
            # Menu is cosmetic, the conversation goes on without it
            logging.warning(f"Failed to update commands for {chat_id}: {e}")

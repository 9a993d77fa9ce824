from unittest.mock import AsyncMock, MagicMock, call

from aiogram.exceptions import TelegramBadRequest
from aiogram.types import (
    BotCommand,
    BotCommandScopeChat,
    FSInputFile,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
)

from quest_bot.keyboards import build_commands, build_keyboard
from quest_bot.replies import CommandsReply, Control, PhotoReply, TextReply
from quest_bot.services.delivery_service import DeliveryService

CHAT_ID = 7


def test_build_keyboard_single_row():
    keyboard = build_keyboard(
        [Control("Русский", "choose_language_ru"), Control("English", "choose_language_en")]
    )

    assert keyboard == InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text="Русский", callback_data="choose_language_ru"),
                InlineKeyboardButton(text="English", callback_data="choose_language_en"),
            ]
        ]
    )


def test_build_keyboard_without_controls():
    assert build_keyboard(()) is None


def test_build_commands():
    assert build_commands([("map", "Zoo map"), ("restart", "Start over")]) == [
        BotCommand(command="map", description="Zoo map"),
        BotCommand(command="restart", description="Start over"),
    ]


async def test_deliver_keeps_order(tmp_path):
    bot = AsyncMock()
    photo = tmp_path / "map.jpg"

    await DeliveryService.deliver(
        bot,
        CHAT_ID,
        [
            CommandsReply((("restart", "Start over"),)),
            TextReply("Question?", (Control("Hint", "command_hint"),)),
            TextReply("Loading"),
            PhotoReply(photo, "Map"),
        ],
    )

    assert [name for name, _, _ in bot.mock_calls] == [
        "set_my_commands",
        "send_message",
        "send_message",
        "send_photo",
    ]
    bot.set_my_commands.assert_awaited_once_with(
        [BotCommand(command="restart", description="Start over")],
        scope=BotCommandScopeChat(chat_id=CHAT_ID),
    )
    assert bot.send_message.await_args_list == [
        call(
            CHAT_ID,
            "Question?",
            reply_markup=InlineKeyboardMarkup(
                inline_keyboard=[
                    [InlineKeyboardButton(text="Hint", callback_data="command_hint")]
                ]
            ),
        ),
        call(CHAT_ID, "Loading", reply_markup=None),
    ]

    args, kwargs = bot.send_photo.await_args
    assert args[0] == CHAT_ID
    assert isinstance(args[1], FSInputFile)
    assert args[1].path == photo
    assert kwargs == {"caption": "Map"}


async def test_command_menu_failure_does_not_stop_delivery():
    bot = AsyncMock()
    bot.set_my_commands.side_effect = TelegramBadRequest(
        method=MagicMock(), message="chat not found"
    )

    await DeliveryService.deliver(
        bot, CHAT_ID, [CommandsReply((("restart", "Start over"),)), TextReply("Hi")]
    )

    bot.send_message.assert_awaited_once_with(CHAT_ID, "Hi", reply_markup=None)


async def test_deliver_nothing():
    bot = AsyncMock()

    await DeliveryService.deliver(bot, CHAT_ID, [])

    assert bot.mock_calls == []

from aiogram import Router

from quest_bot.handlers.buttons import router as buttons_router
from quest_bot.handlers.messages import router as messages_router


def setup_routers() -> Router:
    """Setup and return the main router with all sub-routers."""
    router = Router()
    router.include_router(buttons_router)
    router.include_router(messages_router)
    return router


__all__ = ["setup_routers"]

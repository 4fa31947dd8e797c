import logging

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, InlineKeyboardButton, InlineKeyboardMarkup, Message

from pcs.db.store import get_store
from pcs.services.settings_service import reset_all, toggle_theme

logger = logging.getLogger(__name__)
router = Router()


def reset_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text="Delete everything", callback_data="reset:confirm"),
                InlineKeyboardButton(text="Cancel", callback_data="reset:cancel"),
            ]
        ]
    )


@router.message(Command("theme"))
async def cmd_theme(message: Message):
    store = await get_store(message.chat.id)
    theme = await toggle_theme(store)
    icon = "🌙" if theme == "dark" else "☀️"
    await message.answer(f"{icon} Theme set to {theme}.")


@router.message(Command("reset"))
async def cmd_reset(message: Message):
    await message.answer(
        "Reset all expenses, habits, time logs and settings? This cannot be undone.",
        reply_markup=reset_keyboard(),
    )


@router.callback_query(F.data == "reset:confirm")
async def on_reset_confirm(callback: CallbackQuery):
    store = await get_store(callback.message.chat.id)
    await reset_all(store)
    await callback.message.edit_text("All data deleted.")
    await callback.answer("Reset done.")


@router.callback_query(F.data == "reset:cancel")
async def on_reset_cancel(callback: CallbackQuery):
    await callback.message.edit_text("Reset cancelled.")
    await callback.answer("Cancelled.")

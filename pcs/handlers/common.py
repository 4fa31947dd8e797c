import logging
from datetime import date
from pathlib import Path

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import FSInputFile, Message

from pcs.categories import get_categories_str
from pcs.db.models import HABIT_KEYS

logger = logging.getLogger(__name__)
router = Router()


def parse_iso_date(text: str | None) -> date | None:
    if not text:
        return None
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        return None


async def answer_with_chart(message: Message, text: str, chart_path: str | None) -> None:
    if not chart_path:
        await message.answer(text)
        return
    try:
        await message.answer_photo(FSInputFile(chart_path), caption=text)
    finally:
        Path(chart_path).unlink(missing_ok=True)


@router.message(Command("start"))
async def cmd_start(message: Message):
    await message.answer(
        "Welcome to your Personal Control System.\n\n"
        "Track where your money, habits and hours go:\n"
        "  /spend 250 food lunch\n"
        "  /done study\n"
        "  /logtime 6 3.5\n\n"
        "Then check /dashboard for what matters most today.\n"
        "Type /help for all commands."
    )


@router.message(Command("help"))
async def cmd_help(message: Message):
    await message.answer(
        "Expenses:\n"
        "  /spend <amount> <category> [note] [YYYY-MM-DD]\n"
        "  /expenses [YYYY-MM] — month list, totals and leaks\n"
        "  /delete <id> — remove one expense\n"
        "  /clearmonth <YYYY-MM> — remove a whole month\n"
        "  /setbudget <amount> — monthly budget\n"
        "  /budget — budget status\n"
        f"  Categories: {get_categories_str()}\n\n"
        "Habits:\n"
        "  /habits — streaks\n"
        "  /done <habit> — toggle today\n"
        f"  Habits: {', '.join(HABIT_KEYS)}\n\n"
        "Time:\n"
        "  /logtime <screen hrs> <productive hrs> [YYYY-MM-DD]\n"
        "  /week — last 7 days\n\n"
        "Overview:\n"
        "  /dashboard — priorities and insights\n\n"
        "Settings:\n"
        "  /theme — switch dark/light\n"
        "  /reset — delete everything"
    )

import logging

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message

from pcs.db.store import get_store
from pcs.formatting import format_amount
from pcs.services.dashboard_service import Dashboard, build_dashboard

logger = logging.getLogger(__name__)
router = Router()


def format_dashboard(dash: Dashboard) -> str:
    if not dash.cards.has_any_data:
        return "Nothing tracked yet. Start with /spend, /done or /logtime."

    lines = ["🎯 Most important today\n"]
    lines.extend(f"{i.icon} {i.text}" for i in dash.priorities)

    cards = dash.cards
    lines += [
        "",
        f"Financial leak: {format_amount(cards.overspend, 0)}",
        f"Productivity: {cards.productivity_pct}%",
        f"Best streak: {cards.best_streak}",
        f"Time wasted: {cards.time_wasted:.1f} hrs",
    ]

    if dash.explanations:
        lines.append("")
        lines.extend(f"💡 {text}" for text in dash.explanations)
    return "\n".join(lines)


@router.message(Command("dashboard"))
async def cmd_dashboard(message: Message):
    store = await get_store(message.chat.id)
    dash = await build_dashboard(store)
    await message.answer(format_dashboard(dash))

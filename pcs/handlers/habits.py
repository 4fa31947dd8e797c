import logging
from datetime import date

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from pcs.db.models import HABIT_KEYS, HabitState, habit_label
from pcs.db.store import get_store
from pcs.metrics.spending import month_key
from pcs.metrics.states import PanelState, Severity, habit_state
from pcs.services.expense_service import get_month_summary
from pcs.services.habit_service import load_habits, parse_habit_key, toggle_habit
from pcs.services.time_service import get_week

logger = logging.getLogger(__name__)
router = Router()


def format_habits(habits: dict[str, HabitState], today: date, state: PanelState) -> str:
    lines = ["🔥 Habits\n"]
    for key, habit in habits.items():
        mark = "✅" if habit.done_on(today) else "⬜"
        lines.append(f"{mark} {habit_label(key)} — streak {habit.streak}, best {habit.longest}")
    if state.severity == Severity.EMPTY:
        lines.append("\nNothing completed yet today. Use /done <habit>.")
    elif state.severity in (Severity.WARNING, Severity.CRITICAL):
        icon = "🚨" if state.severity == Severity.CRITICAL else "⚠️"
        lines.append("")
        lines.extend(f"{icon} {msg}" for msg in state.messages)
    return "\n".join(lines)


@router.message(Command("habits"))
async def cmd_habits(message: Message):
    today = date.today()
    store = await get_store(message.chat.id)
    habits = await load_habits(store, today)
    spending = await get_month_summary(store, month_key(today))
    week = await get_week(store, today)
    await message.answer(format_habits(habits, today, habit_state(habits, spending, week, today)))


@router.message(Command("done"))
async def cmd_done(message: Message, command: CommandObject):
    key = parse_habit_key(command.args)
    if key is None:
        await message.answer(f"Usage: /done <habit>\nHabits: {', '.join(HABIT_KEYS)}")
        return

    today = date.today()
    store = await get_store(message.chat.id)
    habit = await toggle_habit(store, key, today)
    if habit.done_on(today):
        await message.answer(f"{habit_label(key)} completed today. Streak: {habit.streak} (best {habit.longest})")
    else:
        await message.answer(f"{habit_label(key)} unmarked for today. Streak: {habit.streak}")

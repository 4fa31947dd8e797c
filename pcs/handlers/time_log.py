import logging
from datetime import date

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from pcs.charts import weekly_time_chart
from pcs.db.store import get_store
from pcs.formatting import format_hours, format_percent
from pcs.handlers.common import answer_with_chart, parse_iso_date
from pcs.metrics.productivity import WeeklyProductivity, wasted_time_message
from pcs.metrics.states import PanelState, Severity, time_state
from pcs.services.time_service import get_week, load_time_logs, log_time

logger = logging.getLogger(__name__)
router = Router()

LOGTIME_USAGE = "Usage: /logtime <screen hrs> <productive hrs> [YYYY-MM-DD]"


def parse_logtime_args(args: str | None) -> tuple[str, str, date] | None:
    tokens = args.split() if args else []
    if len(tokens) not in (2, 3):
        return None
    log_date = parse_iso_date(tokens[2]) if len(tokens) == 3 else date.today()
    if log_date is None:
        return None
    return tokens[0], tokens[1], log_date


def format_week(week: WeeklyProductivity, state: PanelState) -> str:
    lines = [
        f"⏱ {week.start.isoformat()} → {week.end.isoformat()}\n",
        f"Total screen time: {format_hours(week.screen)}",
        f"Total productive time: {format_hours(week.productive)}",
        f"Productivity: {format_percent(week.ratio)}",
        "",
        wasted_time_message(week),
    ]
    if state.severity in (Severity.WARNING, Severity.CRITICAL):
        icon = "🚨" if state.severity == Severity.CRITICAL else "⚠️"
        lines.extend(f"{icon} {msg}" for msg in state.messages)
    return "\n".join(lines)


@router.message(Command("logtime"))
async def cmd_logtime(message: Message, command: CommandObject):
    parsed = parse_logtime_args(command.args)
    if parsed is None:
        await message.answer(LOGTIME_USAGE)
        return

    screen, productive, log_date = parsed
    store = await get_store(message.chat.id)
    entry = await log_time(store, log_date, screen, productive)
    if entry is None:
        await message.answer(LOGTIME_USAGE)
        return
    await message.answer(
        f"Logged {format_hours(entry.screen)} screen, {format_hours(entry.productive)} productive "
        f"for {log_date.isoformat()}."
    )


@router.message(Command("week"))
async def cmd_week(message: Message):
    store = await get_store(message.chat.id)
    logs = await load_time_logs(store)
    if not logs:
        await message.answer("No time logged yet. Use /logtime 6 3.5")
        return

    week = await get_week(store)
    text = format_week(week, time_state(week, has_logs=True))
    chart_path = await weekly_time_chart(week)
    await answer_with_chart(message, text, chart_path)

import logging
from datetime import date

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from pcs.categories import ExpenseCategory, get_categories_str, parse_category
from pcs.charts import daily_spending_chart, spending_by_category_chart
from pcs.db.store import get_store
from pcs.formatting import format_amount, progress_bar
from pcs.handlers.common import answer_with_chart, parse_iso_date
from pcs.metrics.spending import MonthlySpending, daily_totals, month_key, parse_month
from pcs.metrics.states import Severity, expense_state
from pcs.services.expense_service import add_expense, clear_month, delete_expense, get_month_summary
from pcs.services.settings_service import get_budget, set_budget

logger = logging.getLogger(__name__)
router = Router()

SPEND_USAGE = f"Usage: /spend 250 food lunch with team [2024-03-01]\nCategories: {get_categories_str()}"


def parse_spend_args(args: str | None) -> tuple[float, ExpenseCategory, str, date | None] | None:
    if not args:
        return None
    tokens = args.split()
    if len(tokens) < 2:
        return None
    try:
        amount = float(tokens[0])
    except ValueError:
        return None
    category = parse_category(tokens[1])
    if category is None:
        return None
    rest = tokens[2:]
    expense_date = parse_iso_date(rest[-1]) if rest else None
    if expense_date is not None:
        rest = rest[:-1]
    return amount, category, " ".join(rest), expense_date


def format_month_report(spending: MonthlySpending, limit: int = 15) -> str:
    lines = [f"📒 Expenses for {spending.month}\n"]
    for e in spending.expenses[:limit]:
        note = f" — {e.note}" if e.note else ""
        lines.append(f"• {e.expense_date.isoformat()} {e.category}: {format_amount(e.amount)}{note}  [{e.id}]")
    if len(spending.expenses) > limit:
        lines.append(f"... and {len(spending.expenses) - limit} more")

    lines.append(f"\nTotal: {format_amount(spending.total)}")
    lines.append(f"Remaining: {format_amount(spending.remaining)} of {format_amount(spending.budget)}")
    if spending.leak_detected:
        lines.append(f"LEAK DETECTED: {format_amount(spending.waste_total)} spent on Waste.")
    else:
        lines.append("Leaks: clear")

    state = expense_state(spending)
    if state.severity in (Severity.WARNING, Severity.CRITICAL):
        icon = "🚨" if state.severity == Severity.CRITICAL else "⚠️"
        lines.extend(f"{icon} {msg}" for msg in state.messages)
    return "\n".join(lines)


@router.message(Command("spend"))
async def cmd_spend(message: Message, command: CommandObject):
    parsed = parse_spend_args(command.args)
    if parsed is None:
        await message.answer(SPEND_USAGE)
        return

    amount, category, note, expense_date = parsed
    store = await get_store(message.chat.id)
    record = await add_expense(store, amount, category, expense_date or date.today(), note)
    if record is None:
        await message.answer(SPEND_USAGE)
        return

    text = f"Saved {format_amount(record.amount)} on {record.category} ({record.expense_date.isoformat()})"
    if record.category == ExpenseCategory.WASTE:
        text += "\n⚠️ This goes straight into your leak total."
    await message.answer(text)


@router.message(Command("expenses"))
async def cmd_expenses(message: Message, command: CommandObject):
    if command.args:
        month = parse_month(command.args)
        if month is None:
            await message.answer("Invalid month format. Use: /expenses 2024-03")
            return
    else:
        month = month_key(date.today())

    store = await get_store(message.chat.id)
    spending = await get_month_summary(store, month)
    if not spending.expenses:
        await message.answer(f"No expenses for {month}. Add one with /spend.")
        return

    chart_path = await spending_by_category_chart(spending.by_category)
    await answer_with_chart(message, format_month_report(spending), chart_path)


@router.message(Command("delete"))
async def cmd_delete(message: Message, command: CommandObject):
    if not command.args:
        await message.answer("Usage: /delete <id> (ids are listed by /expenses)")
        return

    store = await get_store(message.chat.id)
    if await delete_expense(store, command.args.strip()):
        await message.answer("Expense deleted.")
    else:
        await message.answer("No expense with that id.")


@router.message(Command("clearmonth"))
async def cmd_clear_month(message: Message, command: CommandObject):
    month = parse_month(command.args)
    if month is None:
        await message.answer("Usage: /clearmonth 2024-03")
        return

    store = await get_store(message.chat.id)
    removed = await clear_month(store, month)
    await message.answer(f"Removed {removed} expense(s) from {month}.")


@router.message(Command("setbudget"))
async def cmd_setbudget(message: Message, command: CommandObject):
    store = await get_store(message.chat.id)
    budget = await set_budget(store, command.args.strip() if command.args else None)
    if budget is None:
        await message.answer("Usage: /setbudget 10000 (must be positive)")
        return
    await message.answer(f"Monthly budget set to {format_amount(budget)}")


@router.message(Command("budget"))
async def cmd_budget(message: Message):
    today = date.today()
    store = await get_store(message.chat.id)
    spending = await get_month_summary(store, month_key(today))
    budget = await get_budget(store)

    pct = spending.total / budget * 100 if budget > 0 else 0
    text = (
        f"💰 Budget — {today.strftime('%B %Y')}\n\n"
        f"{format_amount(spending.total)} / {format_amount(budget)}\n"
        f"{progress_bar(pct)} {pct:.0f}%  ({format_amount(spending.remaining)} left)"
    )
    chart_path = await daily_spending_chart(daily_totals(spending.expenses), budget=budget)
    await answer_with_chart(message, text, chart_path)

import logging
import math
import random
import string
import time
from datetime import date

from pcs.categories import ExpenseCategory, parse_category
from pcs.db.models import ExpenseRecord
from pcs.db.store import EXPENSES_KEY, KeyValueStore
from pcs.metrics.spending import MonthlySpending, month_key, parse_month, summarize_month
from pcs.services.settings_service import get_budget

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


def new_expense_id() -> str:
    """Millisecond timestamp plus a random base-36 suffix."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{int(time.time() * 1000)}{suffix}"


async def load_expenses(store: KeyValueStore) -> list[ExpenseRecord]:
    raw = await store.get(EXPENSES_KEY)
    if not isinstance(raw, list):
        return []
    expenses = []
    for item in raw:
        try:
            expenses.append(ExpenseRecord.from_dict(item))
        except (KeyError, ValueError, TypeError, AttributeError):
            logger.warning("Skipping malformed expense record", extra={"chat_id": store.chat_id})
    return expenses


async def save_expenses(store: KeyValueStore, expenses: list[ExpenseRecord]) -> None:
    await store.set(EXPENSES_KEY, [e.to_dict() for e in expenses])


def _parse_amount(amount) -> float | None:
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value) or value <= 0:
        return None
    return value


def _parse_date(value) -> date | None:
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


async def add_expense(
    store: KeyValueStore,
    amount,
    category: ExpenseCategory | str | None,
    expense_date: date | str | None,
    note: str = "",
) -> ExpenseRecord | None:
    """Append an expense. Invalid input is ignored and returns None."""
    value = _parse_amount(amount)
    parsed_category = category if isinstance(category, ExpenseCategory) else parse_category(category)
    parsed_date = _parse_date(expense_date)
    if value is None or parsed_category is None or parsed_date is None:
        return None

    record = ExpenseRecord(
        id=new_expense_id(),
        amount=value,
        category=parsed_category,
        note=(note or "").strip(),
        expense_date=parsed_date,
    )
    async with store.lock:
        expenses = await load_expenses(store)
        expenses.append(record)
        await save_expenses(store, expenses)
    logger.info("Expense added", extra={"chat_id": store.chat_id})
    return record


async def delete_expense(store: KeyValueStore, expense_id: str) -> bool:
    async with store.lock:
        expenses = await load_expenses(store)
        kept = [e for e in expenses if e.id != expense_id]
        if len(kept) == len(expenses):
            return False
        await save_expenses(store, kept)
    return True


async def clear_month(store: KeyValueStore, month: str) -> int:
    """Delete every expense dated in `month` (YYYY-MM). Returns how many went.

    A month that is not `YYYY-MM` removes nothing.
    """
    month = parse_month(month)
    if month is None:
        return 0
    async with store.lock:
        expenses = await load_expenses(store)
        kept = [e for e in expenses if month_key(e.expense_date) != month]
        removed = len(expenses) - len(kept)
        if removed:
            await save_expenses(store, kept)
            logger.info("Cleared %d expenses for %s", removed, month, extra={"chat_id": store.chat_id})
    return removed


async def get_month_summary(store: KeyValueStore, month: str) -> MonthlySpending:
    expenses = await load_expenses(store)
    budget = await get_budget(store)
    return summarize_month(expenses, month, budget)

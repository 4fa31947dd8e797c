import asyncio
from datetime import date

import pytest

from pcs.categories import ExpenseCategory
from pcs.services.expense_service import (
    add_expense,
    clear_month,
    delete_expense,
    get_month_summary,
    load_expenses,
    new_expense_id,
)
from pcs.db.store import KeyValueStore
from pcs.services.settings_service import set_budget


async def test_add_and_load(store):
    record = await add_expense(store, 250, "food", date(2024, 3, 1), "lunch")
    assert record is not None
    assert record.category == ExpenseCategory.FOOD
    assert record.note == "lunch"

    rows = await load_expenses(store)
    assert len(rows) == 1
    assert rows[0].id == record.id
    assert rows[0].amount == 250.0
    assert rows[0].expense_date == date(2024, 3, 1)


async def test_add_accepts_string_inputs(store):
    record = await add_expense(store, "12.5", "Waste", "2024-03-02")
    assert record.amount == 12.5
    assert record.expense_date == date(2024, 3, 2)


@pytest.mark.parametrize(
    "amount, category, expense_date",
    [
        ("abc", "Food", date(2024, 3, 1)),
        (None, "Food", date(2024, 3, 1)),
        (0, "Food", date(2024, 3, 1)),
        (-5, "Food", date(2024, 3, 1)),
        (float("nan"), "Food", date(2024, 3, 1)),
        (10, "Groceries", date(2024, 3, 1)),
        (10, None, date(2024, 3, 1)),
        (10, "Food", None),
        (10, "Food", "not-a-date"),
    ],
)
async def test_invalid_input_is_a_noop(store, amount, category, expense_date):
    assert await add_expense(store, amount, category, expense_date) is None
    assert await load_expenses(store) == []


def test_ids_are_unique():
    ids = {new_expense_id() for _ in range(200)}
    assert len(ids) == 200


async def test_delete_expense(store):
    keep = await add_expense(store, 10, "Food", date(2024, 3, 1))
    drop = await add_expense(store, 20, "Travel", date(2024, 3, 1))

    assert await delete_expense(store, drop.id) is True
    assert [e.id for e in await load_expenses(store)] == [keep.id]
    assert await delete_expense(store, "missing") is False


async def test_clear_month(store):
    await add_expense(store, 10, "Food", date(2024, 3, 1))
    await add_expense(store, 20, "Food", date(2024, 3, 31))
    await add_expense(store, 30, "Food", date(2024, 4, 1))

    assert await clear_month(store, "2024-03") == 2
    rows = await load_expenses(store)
    assert [e.amount for e in rows] == [30]
    assert await clear_month(store, "") == 0


@pytest.mark.parametrize("month", ["2", "202", "2024", "2024-3-1", "24-04"])
async def test_clear_month_rejects_partial_months(store, month):
    await add_expense(store, 10, "Food", date(2024, 3, 1))
    await add_expense(store, 30, "Food", date(2024, 4, 1))

    assert await clear_month(store, month) == 0
    assert len(await load_expenses(store)) == 2


async def test_clear_month_accepts_short_month(store):
    await add_expense(store, 30, "Food", date(2024, 4, 1))
    assert await clear_month(store, "2024-4") == 1


async def test_month_summary_uses_stored_budget(store):
    await set_budget(store, 1000)
    await add_expense(store, 100, "Food", date(2024, 3, 1))
    await add_expense(store, 50, "Waste", date(2024, 3, 15))

    summary = await get_month_summary(store, "2024-03")
    assert summary.total == 150
    assert summary.waste_total == 50
    assert summary.remaining == 850


async def test_month_summary_default_budget(store):
    summary = await get_month_summary(store, "2024-03")
    assert summary.budget == 10000
    assert summary.expenses == []


async def test_malformed_records_skipped(store):
    await store.set(
        "expenses",
        [
            {"id": "ok", "amount": 5, "category": "Food", "note": "", "date": "2024-03-01"},
            {"id": "bad-category", "amount": 5, "category": "Rent", "date": "2024-03-01"},
            {"id": "bad-date", "amount": 5, "category": "Food", "date": "yesterday"},
            "not a record",
        ],
    )
    assert [e.id for e in await load_expenses(store)] == ["ok"]


async def test_non_list_blob_reads_as_empty(store):
    await store.set("expenses", {"oops": True})
    assert await load_expenses(store) == []


async def test_concurrent_adds_keep_every_record(store, test_db):
    other = KeyValueStore(test_db, store.chat_id)
    await asyncio.gather(
        add_expense(store, 100, "Food", date(2024, 3, 1)),
        add_expense(other, 50, "Waste", date(2024, 3, 2)),
        add_expense(store, 25, "Travel", date(2024, 3, 3)),
    )
    rows = await load_expenses(store)
    assert sorted(e.amount for e in rows) == [25, 50, 100]


async def test_concurrent_add_and_delete(store):
    first = await add_expense(store, 100, "Food", date(2024, 3, 1))
    await asyncio.gather(
        delete_expense(store, first.id),
        add_expense(store, 50, "Waste", date(2024, 3, 2)),
    )
    rows = await load_expenses(store)
    assert [e.amount for e in rows] == [50]

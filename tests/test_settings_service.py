from datetime import date

from pcs.db.store import ALL_KEYS
from pcs.services.expense_service import add_expense
from pcs.services.habit_service import toggle_habit
from pcs.services.settings_service import get_budget, get_theme, reset_all, set_budget, set_theme, toggle_theme
from pcs.services.time_service import log_time


async def test_budget_default(store):
    assert await get_budget(store) == 10000


async def test_set_budget(store):
    assert await set_budget(store, "2500") == 2500
    assert await get_budget(store) == 2500


async def test_invalid_budget_ignored(store):
    await set_budget(store, 3000)
    assert await set_budget(store, 0) is None
    assert await set_budget(store, "-5") is None
    assert await set_budget(store, "abc") is None
    assert await get_budget(store) == 3000


async def test_garbage_budget_falls_back_to_default(store):
    await store.set("monthlyBudget", "lots")
    assert await get_budget(store) == 10000


async def test_theme_toggle(store):
    assert await get_theme(store) == "light"
    assert await toggle_theme(store) == "dark"
    assert await get_theme(store) == "dark"
    assert await toggle_theme(store) == "light"


async def test_set_theme_rejects_unknown(store):
    assert await set_theme(store, "sepia") is None
    assert await set_theme(store, "dark") == "dark"


async def test_reset_clears_everything(store):
    await add_expense(store, 10, "Food", date(2024, 3, 1))
    await toggle_habit(store, "study", date(2024, 3, 1))
    await log_time(store, date(2024, 3, 1), 4, 2)
    await set_budget(store, 500)
    await set_theme(store, "dark")

    await reset_all(store)

    for key in ALL_KEYS:
        assert await store.get(key) is None
    assert await get_budget(store) == 10000
    assert await get_theme(store) == "light"

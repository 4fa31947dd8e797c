from datetime import date, datetime, timedelta

from pcs.metrics.states import Severity
from pcs.services.dashboard_service import build_dashboard
from pcs.services.expense_service import add_expense
from pcs.services.habit_service import toggle_habit
from pcs.services.settings_service import set_budget
from pcs.services.time_service import log_time

TODAY = date(2024, 3, 13)


async def test_empty_dashboard(store):
    dash = await build_dashboard(store, TODAY)
    assert dash.cards.has_any_data is False
    assert dash.expense_state.severity == Severity.EMPTY
    assert dash.time_state.severity == Severity.EMPTY
    assert dash.priorities[0].text == "No habits completed yet today"
    assert dash.explanations == []


async def test_dashboard_combines_collections(store):
    await set_budget(store, 1000)
    await add_expense(store, 300, "Waste", TODAY)
    await add_expense(store, 100, "Food", date(2024, 2, 20))
    await toggle_habit(store, "study", TODAY - timedelta(days=1))
    await log_time(store, TODAY, 10, 4, now=datetime(2024, 3, 13, 20))

    dash = await build_dashboard(store, TODAY)

    assert dash.spending.month == "2024-03"
    assert dash.spending.total == 300
    assert dash.expense_state.severity == Severity.CRITICAL
    assert dash.time_state.severity == Severity.WARNING
    assert dash.habits["study"].longest == 1
    assert [i.priority for i in dash.priorities] == [1, 1, 1]
    assert dash.priorities[2].text == "Rebuild streak: Study"
    assert dash.cards.time_wasted == 6
    assert dash.cards.has_any_data is True
    assert any(text.startswith("Waste is your worst category") for text in dash.explanations)


async def test_all_done_is_positive(store):
    for key in ("study", "exercise", "coding", "noJunkFood"):
        await toggle_habit(store, key, TODAY)
    dash = await build_dashboard(store, TODAY)
    assert len(dash.priorities) == 1
    assert dash.priorities[0].priority == 3
    assert dash.cards.best_streak == 1

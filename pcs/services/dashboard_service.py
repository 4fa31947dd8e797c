from dataclasses import dataclass
from datetime import date

from pcs.config import settings
from pcs.db.models import HabitState
from pcs.db.store import KeyValueStore
from pcs.metrics.insights import Insight, SummaryCards, explanatory_insights, priority_insights, summary_cards
from pcs.metrics.productivity import WeeklyProductivity, summarize_week
from pcs.metrics.spending import MonthlySpending, month_key, summarize_month
from pcs.metrics.states import PanelState, expense_state, time_state
from pcs.services.expense_service import load_expenses
from pcs.services.habit_service import load_habits
from pcs.services.settings_service import get_budget
from pcs.services.time_service import load_time_logs


@dataclass(slots=True)
class Dashboard:
    today: date
    habits: dict[str, HabitState]
    spending: MonthlySpending
    week: WeeklyProductivity
    expense_state: PanelState
    time_state: PanelState
    priorities: list[Insight]
    explanations: list[str]
    cards: SummaryCards


async def build_dashboard(store: KeyValueStore, today: date | None = None) -> Dashboard:
    today = today or date.today()
    expenses = await load_expenses(store)
    habits = await load_habits(store, today)
    time_logs = await load_time_logs(store)
    budget = await get_budget(store)

    spending = summarize_month(expenses, month_key(today), budget)
    week = summarize_week(time_logs, today)

    return Dashboard(
        today=today,
        habits=habits,
        spending=spending,
        week=week,
        expense_state=expense_state(spending),
        time_state=time_state(week, has_logs=bool(time_logs)),
        priorities=priority_insights(habits, spending, week, today, top_n=settings.top_insights),
        explanations=explanatory_insights(habits, spending, time_logs, today),
        cards=summary_cards(
            habits,
            spending,
            week,
            has_expenses=bool(expenses),
            has_time_logs=bool(time_logs),
            today=today,
        ),
    )

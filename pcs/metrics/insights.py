"""Prioritized and explanatory insights for the dashboard.

Priority insights are tiered (1 is most urgent). Every matching rule is kept,
then the list is sorted by tier and cut to the top N. Explanatory insights
describe patterns in the data and are computed independently.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Mapping

from pcs.db.models import HabitState, TimeLogEntry, habit_label
from pcs.formatting import format_amount, format_percent
from pcs.metrics.productivity import WeeklyProductivity, window_days
from pcs.metrics.spending import MonthlySpending
from pcs.metrics.states import waste_limit
from pcs.metrics.streaks import compute_streaks

DEFAULT_TOP_N = 3

LOW_PRODUCTIVITY_RATIO = 0.4
WASTED_HOURS_ALERT = 5

FAILURE_LOOKBACK_DAYS = 30
WEEKEND_FAILURE_SHARE = 0.6

NIGHT_START_HOUR = 21
NIGHT_END_HOUR = 6
NIGHT_DROP_FACTOR = 0.7


@dataclass(frozen=True, slots=True)
class Insight:
    priority: int
    icon: str
    text: str


@dataclass(slots=True)
class SummaryCards:
    overspend: float
    productivity_pct: int
    best_streak: int
    time_wasted: float
    has_any_data: bool


def broken_streaks(habits: Mapping[str, HabitState], today: date) -> list[str]:
    broken = []
    for key, habit in habits.items():
        streaks = compute_streaks(habit.history, today)
        if streaks.current == 0 and streaks.longest > 0:
            broken.append(key)
    return broken


def priority_insights(
    habits: Mapping[str, HabitState],
    spending: MonthlySpending,
    week: WeeklyProductivity,
    today: date,
    top_n: int = DEFAULT_TOP_N,
) -> list[Insight]:
    issues: list[Insight] = []

    completed_today = sum(1 for h in habits.values() if h.done_on(today))
    if habits and completed_today == 0:
        issues.append(Insight(1, "🔴", "No habits completed yet today"))

    limit = waste_limit(spending.budget)
    if spending.waste_total > limit:
        issues.append(
            Insight(
                1,
                "💸",
                f"Reduce waste spending ({format_amount(spending.waste_total, 0)} spent, "
                f"limit {format_amount(limit, 0)})",
            )
        )

    if week.ratio < LOW_PRODUCTIVITY_RATIO:
        issues.append(Insight(2, "⚡", f"Improve productivity (currently {format_percent(week.ratio)})"))

    if week.wasted > WASTED_HOURS_ALERT:
        issues.append(Insight(2, "⏳", f"You wasted {week.wasted:.1f} hours this week"))

    broken = broken_streaks(habits, today)
    if broken:
        issues.append(Insight(1, "🔥", "Rebuild streak: " + ", ".join(habit_label(k) for k in broken)))

    if not issues:
        issues.append(Insight(3, "✨", "You're doing great! Keep it up!"))

    issues.sort(key=lambda i: i.priority)
    return issues[:top_n]


def worst_category_insight(spending: MonthlySpending) -> str | None:
    top = spending.top_category
    if top is None or top.total <= 0:
        return None
    return f"{top.category} is your worst category this month ({format_amount(top.total, 0)})"


def weekend_failure_share(habits: Mapping[str, HabitState], today: date) -> float | None:
    """Share of missed habit-days over the last 30 days that fell on a weekend.

    Today is excluded since it can still be completed. A day without an entry
    counts as missed. Returns None when nothing was missed.
    """
    weekend = weekday = 0
    for offset in range(1, FAILURE_LOOKBACK_DAYS):
        day = today - timedelta(days=offset)
        is_weekend = day.weekday() >= 5
        for habit in habits.values():
            if habit.done_on(day):
                continue
            if is_weekend:
                weekend += 1
            else:
                weekday += 1
    total = weekend + weekday
    if total == 0:
        return None
    return weekend / total


def weekend_failure_insight(habits: Mapping[str, HabitState], today: date) -> str | None:
    share = weekend_failure_share(habits, today)
    if share is None or share < WEEKEND_FAILURE_SHARE:
        return None
    return "You usually fail habits on weekends"


def _is_night(hour: int) -> bool:
    return hour >= NIGHT_START_HOUR or hour < NIGHT_END_HOUR


def _log_ratio(entry: TimeLogEntry) -> float:
    return entry.productive / max(1.0, entry.screen)


def night_productivity_insight(time_logs: Mapping[date, TimeLogEntry], today: date) -> str | None:
    """Compares logs submitted at night (21:00-06:00) with daytime ones.

    Only entries from the last seven days that carry a submission time are
    considered.
    """
    night: list[float] = []
    day: list[float] = []
    for log_day in window_days(today):
        entry = time_logs.get(log_day)
        if entry is None or entry.logged_at is None:
            continue
        (night if _is_night(entry.logged_at.hour) else day).append(_log_ratio(entry))

    if not night or not day:
        return None
    night_avg = sum(night) / len(night)
    day_avg = sum(day) / len(day)
    if night_avg < day_avg * NIGHT_DROP_FACTOR:
        return "Productivity drops after 9 PM"
    return None


def explanatory_insights(
    habits: Mapping[str, HabitState],
    spending: MonthlySpending,
    time_logs: Mapping[date, TimeLogEntry],
    today: date,
) -> list[str]:
    candidates = (
        worst_category_insight(spending),
        weekend_failure_insight(habits, today),
        night_productivity_insight(time_logs, today),
    )
    return [text for text in candidates if text]


def summary_cards(
    habits: Mapping[str, HabitState],
    spending: MonthlySpending,
    week: WeeklyProductivity,
    has_expenses: bool,
    has_time_logs: bool,
    today: date,
) -> SummaryCards:
    # the card shows 0% rather than the 1.0 ratio default when nothing was logged
    productivity_pct = round(week.productive / week.screen * 100) if week.screen > 0 else 0
    best = max((compute_streaks(h.history, today).current for h in habits.values()), default=0)
    has_habit_data = any(h.history for h in habits.values())
    return SummaryCards(
        overspend=spending.overspend,
        productivity_pct=productivity_pct,
        best_streak=best,
        time_wasted=week.wasted,
        has_any_data=has_expenses or has_habit_data or has_time_logs,
    )

"""Warning/critical states of the expense, time and habit panels.

All comparisons are strict: waste of exactly 20% of the budget is a warning,
not critical, and exactly 15% is fine.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Mapping

from pcs.db.models import HabitState, habit_label
from pcs.formatting import format_amount, format_percent
from pcs.metrics.productivity import WeeklyProductivity
from pcs.metrics.spending import MonthlySpending
from pcs.metrics.streaks import compute_streaks

WASTE_WARNING_SHARE = 0.15
WASTE_CRITICAL_SHARE = 0.20

TIME_WARNING_WASTED_HOURS = 10
TIME_WARNING_RATIO = 0.5
TIME_WARNING_MIN_SCREEN = 5
TIME_CRITICAL_WASTED_HOURS = 20
TIME_CRITICAL_RATIO = 0.25
TIME_CRITICAL_MIN_SCREEN = 10

HABIT_WASTE_WARNING_AMOUNT = 5000


class Severity(StrEnum):
    EMPTY = "empty"
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(slots=True)
class PanelState:
    severity: Severity
    messages: list[str] = field(default_factory=list)


def waste_limit(budget: float) -> float:
    return budget * WASTE_CRITICAL_SHARE


def waste_severity(waste: float, budget: float) -> Severity:
    if waste > budget * WASTE_CRITICAL_SHARE:
        return Severity.CRITICAL
    if waste > budget * WASTE_WARNING_SHARE:
        return Severity.WARNING
    return Severity.OK


def time_severity(wasted: float, ratio: float, screen: float) -> Severity:
    if wasted > TIME_CRITICAL_WASTED_HOURS or (ratio < TIME_CRITICAL_RATIO and screen > TIME_CRITICAL_MIN_SCREEN):
        return Severity.CRITICAL
    if wasted > TIME_WARNING_WASTED_HOURS or (ratio < TIME_WARNING_RATIO and screen > TIME_WARNING_MIN_SCREEN):
        return Severity.WARNING
    return Severity.OK


def expense_state(spending: MonthlySpending) -> PanelState:
    if not spending.expenses:
        return PanelState(Severity.EMPTY)
    severity = waste_severity(spending.waste_total, spending.budget)
    waste = format_amount(spending.waste_total, 0)
    if severity == Severity.CRITICAL:
        limit = format_amount(waste_limit(spending.budget), 0)
        return PanelState(severity, [f"Waste spending exceeded limit ({waste} > {limit})"])
    if severity == Severity.WARNING:
        return PanelState(severity, [f"Waste spending is high ({waste})"])
    return PanelState(severity)


def time_state(week: WeeklyProductivity, has_logs: bool) -> PanelState:
    """State of the time panel. Only the messages of the worst tier are kept."""
    if not has_logs:
        return PanelState(Severity.EMPTY)

    severity = time_severity(week.wasted, week.ratio, week.screen)
    messages: list[str] = []
    if severity == Severity.CRITICAL:
        if week.wasted > TIME_CRITICAL_WASTED_HOURS:
            messages.append(
                f"You wasted {week.wasted:.1f} hours this week - that's {week.wasted / 7:.1f} hours per day!"
            )
        if week.ratio < TIME_CRITICAL_RATIO and week.screen > TIME_CRITICAL_MIN_SCREEN:
            messages.append(
                f"Productivity is critically low ({format_percent(week.ratio)}) - review your time management"
            )
    elif severity == Severity.WARNING:
        if week.wasted > TIME_WARNING_WASTED_HOURS:
            messages.append(f"You wasted {week.wasted:.1f} hours this week")
        if week.ratio < TIME_WARNING_RATIO and week.screen > TIME_WARNING_MIN_SCREEN:
            messages.append(f"Productivity is below 50% ({format_percent(week.ratio)})")
    return PanelState(severity, messages)


def habit_state(
    habits: Mapping[str, HabitState],
    spending: MonthlySpending,
    week: WeeklyProductivity,
    today: date,
) -> PanelState:
    """State of the habit panel.

    Empty until some habit is done today. Critical issues hide the warnings.
    """
    if not any(habit.done_on(today) for habit in habits.values()):
        return PanelState(Severity.EMPTY)

    critical = [
        f"{habit_label(key)} streak is broken"
        for key, habit in habits.items()
        if not habit.done_on(today) and compute_streaks(habit.history, today).current == 0
    ]
    if spending.waste_total > waste_limit(spending.budget):
        waste = format_amount(spending.waste_total, 0)
        limit = format_amount(waste_limit(spending.budget), 0)
        critical.append(f"Waste exceeded limit ({waste} > {limit})")
    if critical:
        return PanelState(Severity.CRITICAL, critical)

    warnings = []
    if week.ratio < TIME_WARNING_RATIO:
        warnings.append("Productivity down (below 50% this week)")
    if spending.waste_total > HABIT_WASTE_WARNING_AMOUNT:
        warnings.append("Waste spending is high")
    if warnings:
        return PanelState(Severity.WARNING, warnings)
    return PanelState(Severity.OK)

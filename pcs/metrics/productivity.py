from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Mapping

from pcs.db.models import TimeLogEntry

WINDOW_DAYS = 7

# No screen time counts as fully productive.
NO_SCREEN_RATIO = 1.0


@dataclass(slots=True)
class DayLog:
    day: date
    screen: float
    productive: float


@dataclass(slots=True)
class WeeklyProductivity:
    start: date
    end: date
    screen: float = 0.0
    productive: float = 0.0
    days: list[DayLog] = field(default_factory=list)

    @property
    def balance(self) -> float:
        """Screen minus productive hours, signed."""
        return self.screen - self.productive

    @property
    def wasted(self) -> float:
        return max(0.0, self.balance)

    @property
    def ratio(self) -> float:
        return self.productive / self.screen if self.screen > 0 else NO_SCREEN_RATIO

    @property
    def days_logged(self) -> int:
        return sum(1 for d in self.days if d.screen or d.productive)


def window_days(today: date, days: int = WINDOW_DAYS) -> list[date]:
    """The `days` calendar days ending today, oldest first."""
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def summarize_week(time_logs: Mapping[date, TimeLogEntry], today: date) -> WeeklyProductivity:
    days = window_days(today)
    summary = WeeklyProductivity(start=days[0], end=days[-1])
    for day in days:
        entry = time_logs.get(day)
        screen = entry.screen if entry else 0.0
        productive = entry.productive if entry else 0.0
        summary.screen += screen
        summary.productive += productive
        summary.days.append(DayLog(day=day, screen=screen, productive=productive))
    return summary


def wasted_time_message(week: WeeklyProductivity) -> str:
    if week.balance > 0:
        return f"You wasted {week.balance:.1f} hours this week"
    if week.balance < 0:
        return f"Productive time exceeded screen time by {abs(week.balance):.1f} hours"
    return "Zero wasted time detected this week"

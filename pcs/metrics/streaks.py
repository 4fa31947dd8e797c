from dataclasses import dataclass
from datetime import date, timedelta
from typing import Mapping

from pcs.db.models import HabitState

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True, slots=True)
class Streaks:
    current: int
    longest: int


def compute_streaks(history: Mapping[date, bool], today: date) -> Streaks:
    """Current and longest run of completed days in a habit history.

    An explicit False breaks a run; a missing day only breaks it through the
    date gap. The current streak counts back from today, so an unmarked today
    gives 0.
    """
    if not history:
        return Streaks(current=0, longest=0)

    longest = 0
    run = 0
    previous: date | None = None
    for day in sorted(history):
        if not history[day]:
            run = 0
        elif previous is not None and day - previous == ONE_DAY:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day

    current = 0
    day = today
    while history.get(day):
        current += 1
        day -= ONE_DAY

    return Streaks(current=current, longest=longest)


def refresh_streaks(habits: Mapping[str, HabitState], today: date) -> None:
    """Rebuild the streak caches of every habit from its history."""
    for habit in habits.values():
        streaks = compute_streaks(habit.history, today)
        habit.streak = streaks.current
        habit.longest = streaks.longest

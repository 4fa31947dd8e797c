import logging
from datetime import date

from pcs.db.models import HABIT_KEYS, HabitState
from pcs.db.store import HABITS_KEY, KeyValueStore
from pcs.metrics.streaks import compute_streaks, refresh_streaks

logger = logging.getLogger(__name__)


def default_habits() -> dict[str, HabitState]:
    return {key: HabitState() for key in HABIT_KEYS}


async def load_habits(store: KeyValueStore, today: date | None = None) -> dict[str, HabitState]:
    """Load the habit states with their streak caches rebuilt for `today`."""
    today = today or date.today()
    habits = default_habits()
    raw = await store.get(HABITS_KEY)
    if isinstance(raw, dict):
        for key in HABIT_KEYS:
            data = raw.get(key)
            if not isinstance(data, dict):
                continue
            try:
                habits[key] = HabitState.from_dict(data)
            except (ValueError, TypeError, AttributeError):
                logger.warning("Skipping malformed habit history", extra={"chat_id": store.chat_id, "key": key})
    refresh_streaks(habits, today)
    return habits


async def save_habits(store: KeyValueStore, habits: dict[str, HabitState]) -> None:
    await store.set(HABITS_KEY, {key: habit.to_dict() for key, habit in habits.items()})


def parse_habit_key(name: str | None) -> str | None:
    """Match a habit by key or label, ignoring case, spaces and underscores."""
    if not name:
        return None
    wanted = name.strip().lower().replace(" ", "").replace("_", "").replace("-", "")
    for key in HABIT_KEYS:
        if key.lower() == wanted:
            return key
    return None


async def toggle_habit(store: KeyValueStore, habit_key: str, today: date | None = None) -> HabitState | None:
    """Flip today's completion for a habit and recompute its streaks."""
    if habit_key not in HABIT_KEYS:
        return None
    today = today or date.today()
    async with store.lock:
        habits = await load_habits(store, today)
        habit = habits[habit_key]
        habit.history[today] = not habit.done_on(today)
        streaks = compute_streaks(habit.history, today)
        habit.streak = streaks.current
        habit.longest = streaks.longest
        await save_habits(store, habits)
    logger.info(
        "Habit %s %s",
        habit_key,
        "completed" if habit.history[today] else "unmarked",
        extra={"chat_id": store.chat_id},
    )
    return habit

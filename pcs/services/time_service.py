import logging
import math
from datetime import date, datetime

from pcs.db.models import TimeLogEntry
from pcs.db.store import TIME_LOGS_KEY, KeyValueStore
from pcs.metrics.productivity import WeeklyProductivity, summarize_week

logger = logging.getLogger(__name__)


async def load_time_logs(store: KeyValueStore) -> dict[date, TimeLogEntry]:
    raw = await store.get(TIME_LOGS_KEY)
    if not isinstance(raw, dict):
        return {}
    logs = {}
    for day, data in raw.items():
        try:
            logs[date.fromisoformat(day)] = TimeLogEntry.from_dict(data)
        except (ValueError, TypeError, AttributeError):
            logger.warning("Skipping malformed time log", extra={"chat_id": store.chat_id})
    return logs


async def save_time_logs(store: KeyValueStore, logs: dict[date, TimeLogEntry]) -> None:
    await store.set(TIME_LOGS_KEY, {day.isoformat(): entry.to_dict() for day, entry in sorted(logs.items())})


def _parse_hours(value) -> float | None:
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(hours) or math.isinf(hours) or hours < 0:
        return None
    return hours


async def log_time(
    store: KeyValueStore,
    log_date: date | str | None,
    screen,
    productive,
    now: datetime | None = None,
) -> TimeLogEntry | None:
    """Record screen and productive hours for a day, replacing any earlier entry."""
    if isinstance(log_date, str):
        try:
            log_date = date.fromisoformat(log_date.strip())
        except ValueError:
            return None
    screen_hours = _parse_hours(screen)
    productive_hours = _parse_hours(productive)
    if log_date is None or screen_hours is None or productive_hours is None:
        return None

    entry = TimeLogEntry(screen=screen_hours, productive=productive_hours, logged_at=now or datetime.now())
    async with store.lock:
        logs = await load_time_logs(store)
        logs[log_date] = entry
        await save_time_logs(store, logs)
    logger.info("Time logged for %s", log_date.isoformat(), extra={"chat_id": store.chat_id})
    return entry


async def get_week(store: KeyValueStore, today: date | None = None) -> WeeklyProductivity:
    return summarize_week(await load_time_logs(store), today or date.today())

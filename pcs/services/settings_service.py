import logging
import math

from pcs.config import settings
from pcs.db.store import ALL_KEYS, BUDGET_KEY, THEME_KEY, KeyValueStore

logger = logging.getLogger(__name__)

THEMES = ("dark", "light")
DEFAULT_THEME = "light"


async def get_budget(store: KeyValueStore) -> float:
    raw = await store.get(BUDGET_KEY)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return settings.default_budget
    if math.isnan(value) or value <= 0:
        return settings.default_budget
    return value


async def set_budget(store: KeyValueStore, amount) -> float | None:
    """Store a new monthly budget. Non-positive or non-numeric input is ignored."""
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value) or value <= 0:
        return None
    await store.set(BUDGET_KEY, value)
    return value


async def get_theme(store: KeyValueStore) -> str:
    raw = await store.get(THEME_KEY)
    return raw if raw in THEMES else DEFAULT_THEME


async def set_theme(store: KeyValueStore, theme: str) -> str | None:
    if theme not in THEMES:
        return None
    await store.set(THEME_KEY, theme)
    return theme


async def toggle_theme(store: KeyValueStore) -> str:
    async with store.lock:
        theme = "light" if await get_theme(store) == "dark" else "dark"
        await store.set(THEME_KEY, theme)
    return theme


async def reset_all(store: KeyValueStore) -> None:
    """Drop every collection and setting for the chat. Not recoverable."""
    async with store.lock:
        for key in ALL_KEYS:
            await store.remove(key)
    logger.warning("All data reset", extra={"chat_id": store.chat_id})

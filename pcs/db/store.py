import asyncio
import json
import logging
from collections import defaultdict
from typing import Any

import aiosqlite

from pcs.db import database

logger = logging.getLogger(__name__)

EXPENSES_KEY = "expenses"
HABITS_KEY = "habits"
TIME_LOGS_KEY = "timeLogs"
BUDGET_KEY = "monthlyBudget"
THEME_KEY = "theme"

ALL_KEYS: tuple[str, ...] = (EXPENSES_KEY, HABITS_KEY, TIME_LOGS_KEY, BUDGET_KEY, THEME_KEY)

_locks: dict[int, asyncio.Lock] = defaultdict(asyncio.Lock)


def chat_lock(chat_id: int) -> asyncio.Lock:
    return _locks[chat_id]


class KeyValueStore:
    """JSON blobs keyed by name, one namespace per chat.

    A blob that fails to decode reads as absent.
    Mutating services hold `lock` across each load, mutate, save of a
    collection. The lock is shared by every store of the same chat.
    """

    def __init__(self, db: aiosqlite.Connection, chat_id: int):
        self.db = db
        self.chat_id = chat_id

    @property
    def lock(self) -> asyncio.Lock:
        return chat_lock(self.chat_id)

    async def get(self, key: str) -> Any | None:
        cursor = await self.db.execute(
            "SELECT value FROM kv_store WHERE chat_id = ? AND key = ?",
            (self.chat_id, key),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except (json.JSONDecodeError, TypeError):
            logger.warning("Discarding undecodable value", extra={"chat_id": self.chat_id, "key": key})
            return None

    async def set(self, key: str, value: Any) -> None:
        await self.db.execute(
            """INSERT INTO kv_store (chat_id, key, value) VALUES (?, ?, ?)
            ON CONFLICT(chat_id, key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP""",
            (self.chat_id, key, json.dumps(value)),
        )
        await self.db.commit()

    async def remove(self, key: str) -> bool:
        cursor = await self.db.execute(
            "DELETE FROM kv_store WHERE chat_id = ? AND key = ?",
            (self.chat_id, key),
        )
        await self.db.commit()
        return cursor.rowcount > 0


async def get_store(chat_id: int) -> KeyValueStore:
    return KeyValueStore(await database.get_db(), chat_id)

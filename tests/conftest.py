import asyncio
import os
from collections import defaultdict

os.environ.setdefault("TELEGRAM_BOT_TOKEN", "test-token-000")

import aiosqlite
import pytest

import pcs.db.database as db_mod
import pcs.db.store as store_mod
from pcs.db.store import KeyValueStore

CHAT = 100


@pytest.fixture(autouse=True)
async def test_db(monkeypatch):
    conn = await aiosqlite.connect(":memory:")
    conn.row_factory = aiosqlite.Row
    await conn.executescript(db_mod.SCHEMA)
    await conn.commit()

    async def _get_db():
        return conn

    monkeypatch.setattr(db_mod, "get_db", _get_db)
    monkeypatch.setattr(db_mod, "_db", conn)
    monkeypatch.setattr(store_mod, "_locks", defaultdict(asyncio.Lock))

    yield conn

    await conn.close()


@pytest.fixture
def store(test_db) -> KeyValueStore:
    return KeyValueStore(test_db, CHAT)

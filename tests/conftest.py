from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

import pytest

from fxjournal.core.clock import FrozenClock
from fxjournal.models.trade import Trade
from fxjournal.services.journal_service import JournalService
from fxjournal.storage.db import Database
from fxjournal.storage.kv_store import KeyValueStore
from fxjournal.storage.migrations import apply_migrations
from fxjournal.storage.trade_repository import TradeRepository


def _logger() -> logging.Logger:
    logger = logging.getLogger("test_fxjournal")
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


def make_trade(**overrides: object) -> Trade:
    fields: dict[str, object] = {
        "id": "1",
        "instrument": "EUR/USD",
        "trade_type": "buy",
        "entry_price": 1.1000,
        "exit_price": 1.1050,
        "lot_size": 1.0,
        "entry_date": "2026-03-02",
        "entry_time": "09:30",
        "created_at": datetime(2026, 3, 2, 9, 30, tzinfo=UTC),
    }
    fields.update(overrides)
    return Trade(**fields)


@pytest.fixture()
def logger() -> logging.Logger:
    return _logger()


@pytest.fixture()
def clock() -> FrozenClock:
    # Monday
    return FrozenClock(datetime(2026, 3, 2, 10, 0, tzinfo=UTC))


@pytest.fixture()
def temp_db(tmp_path: Path) -> Database:
    db = Database(tmp_path / "test.sqlite3", wal=True)
    apply_migrations(db)
    return db


@pytest.fixture()
def store(temp_db: Database) -> KeyValueStore:
    return KeyValueStore(temp_db)


@pytest.fixture()
def repository(store: KeyValueStore, clock: FrozenClock, logger: logging.Logger) -> TradeRepository:
    return TradeRepository(store, key="forexTrades", clock=clock, logger=logger)


@pytest.fixture()
def journal(repository: TradeRepository, clock: FrozenClock, logger: logging.Logger) -> JournalService:
    return JournalService(repository=repository, clock=clock, logger=logger)

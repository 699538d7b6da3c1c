from __future__ import annotations

from dataclasses import dataclass
from logging import Logger

from ..config import AppSettings, load_settings
from ..core.clock import Clock, SystemClock
from ..models.reminder import ReminderPreferences
from ..notifications.ntfy_client import NtfyClient
from ..notifications.reminder_service import ReminderService
from ..services.journal_service import JournalService
from ..services.metrics_service import MetricsService
from ..storage.db import Database
from ..storage.kv_store import KeyValueStore
from ..storage.migrations import apply_migrations
from ..storage.trade_repository import TradeRepository
from .logging_setup import setup_logging


@dataclass(slots=True)
class RuntimeContainer:
    settings: AppSettings
    db: Database
    store: KeyValueStore
    trades: TradeRepository
    journal_service: JournalService
    metrics_service: MetricsService
    reminder_service: ReminderService
    notifier: NtfyClient
    logger: Logger
    clock: Clock

    def close(self) -> None:
        self.notifier.close()


def build_runtime(
    settings: AppSettings | None = None,
    *,
    clock: Clock | None = None,
    console_logging: bool = False,
) -> RuntimeContainer:
    settings = settings or load_settings()
    logger = setup_logging(settings.logging, console=console_logging)
    clock = clock or SystemClock()

    db = Database(
        path=settings.storage.db_path,
        wal=settings.storage.wal,
        busy_timeout_ms=settings.storage.busy_timeout_ms,
    )
    apply_migrations(db)
    store = KeyValueStore(db)

    trades = TradeRepository(store, key=settings.storage.trades_key, clock=clock, logger=logger)
    trades.load()
    journal_service = JournalService(repository=trades, clock=clock, logger=logger, timezone=settings.timezone)
    metrics_service = MetricsService(repository=trades)

    notifier = NtfyClient(settings.notifications)
    reminder_defaults = ReminderPreferences(
        enabled=settings.reminders.enabled,
        days=settings.reminders.days,
        hour=settings.reminders.hour,
        minute=settings.reminders.minute,
        message=settings.reminders.message,
    )
    reminder_service = ReminderService(
        store=store,
        key=settings.storage.reminders_key,
        notifier=notifier,
        clock=clock,
        logger=logger,
        timezone=settings.timezone,
        defaults=reminder_defaults,
    )

    return RuntimeContainer(
        settings=settings,
        db=db,
        store=store,
        trades=trades,
        journal_service=journal_service,
        metrics_service=metrics_service,
        reminder_service=reminder_service,
        notifier=notifier,
        logger=logger,
        clock=clock,
    )

from __future__ import annotations

from logging import Logger
from typing import Any

from pydantic import ValidationError

from ..core.clock import Clock
from ..models.trade import Trade, TradeInput
from .db import StorageError
from .kv_store import KeyValueStore


class TradeRepository:
    """Owned trade collection persisted as one JSON array under a fixed key.

    The in-memory list only changes after the store accepted the write, so a
    failed save leaves both the database and the snapshot untouched. Stored
    records that no longer validate are hidden from the journal but kept in the
    blob, so an unrelated add or delete never erases them. Only ``replace_all``
    drops them.
    """

    def __init__(self, store: KeyValueStore, *, key: str, clock: Clock, logger: Logger) -> None:
        self.store = store
        self.key = key
        self.clock = clock
        self.logger = logger
        self._trades: list[Trade] = []
        # Stored records that failed validation; written back untouched on every save.
        self._rejected: list[Any] = []
        self._loaded = False

    def load(self) -> list[Trade]:
        try:
            raw = self.store.get_json(self.key)
        except (StorageError, ValueError) as exc:
            self.logger.error("trades_load_error", extra={"event": {"key": self.key, "msg": str(exc)}})
            raw = None
        self._trades, self._rejected = self._parse_records(raw)
        self._loaded = True
        return list(self._trades)

    def all(self) -> list[Trade]:
        if not self._loaded:
            self.load()
        return list(self._trades)

    def get(self, trade_id: str) -> Trade | None:
        return next((t for t in self.all() if t.id == trade_id), None)

    def add(self, trade: TradeInput) -> Trade:
        current = self.all()
        now = self.clock.now()
        new_trade = Trade(
            **trade.model_dump(),
            id=self._next_id(int(now.timestamp() * 1000), current, self._rejected),
            created_at=now,
        )
        self._save([*current, new_trade])
        self.logger.info(
            "trade_added",
            extra={"event": {"trade_id": new_trade.id, "instrument": new_trade.instrument}},
        )
        return new_trade

    def delete(self, trade_id: str) -> bool:
        current = self.all()
        remaining = [t for t in current if t.id != trade_id]
        if len(remaining) == len(current):
            return False
        self._save(remaining)
        self.logger.info("trade_deleted", extra={"event": {"trade_id": trade_id}})
        return True

    def replace_all(self, trades: list[Trade]) -> None:
        ids = [t.id for t in trades]
        if len(ids) != len(set(ids)):
            raise ValueError("trade ids must be unique")
        self._save(list(trades), rejected=[])

    def _save(self, trades: list[Trade], *, rejected: list[Any] | None = None) -> None:
        kept = self._rejected if rejected is None else rejected
        try:
            self.store.set_json(self.key, [*(t.to_record() for t in trades), *kept])
        except StorageError as exc:
            self.logger.error("trades_save_error", extra={"event": {"key": self.key, "msg": str(exc)}})
            raise
        self._trades = trades
        self._rejected = list(kept)
        self._loaded = True

    def _parse_records(self, raw: Any) -> tuple[list[Trade], list[Any]]:
        if raw is None:
            return [], []
        if not isinstance(raw, list):
            self.logger.error("trades_blob_invalid", extra={"event": {"key": self.key, "type": type(raw).__name__}})
            return [], [raw]
        trades: list[Trade] = []
        rejected: list[Any] = []
        for record in raw:
            try:
                trades.append(Trade.model_validate(record))
            except ValidationError as exc:
                rejected.append(record)
                self.logger.warning(
                    "trade_record_kept_invalid",
                    extra={"event": {"id": record.get("id") if isinstance(record, dict) else None, "msg": str(exc)}},
                )
        return trades, rejected

    @staticmethod
    def _next_id(candidate: int, existing: list[Trade], rejected: list[Any]) -> str:
        taken = {t.id for t in existing}
        taken.update(str(r.get("id")) for r in rejected if isinstance(r, dict))
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

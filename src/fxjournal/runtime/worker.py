from __future__ import annotations

from dataclasses import dataclass

from ..core.scheduler import IntervalScheduler
from .app import RuntimeContainer


@dataclass(slots=True)
class ReminderWorker:
    runtime: RuntimeContainer

    def run(self, *, one_shot: bool = False, max_iterations: int | None = None) -> int:
        """Poll for due reminders until stopped; returns how many were sent."""
        scheduler = IntervalScheduler(interval_sec=self.runtime.settings.reminders.poll_interval_sec)
        next_due = self.runtime.reminder_service.next_due()
        self.runtime.logger.info(
            "reminder_worker_started",
            extra={"event": {"next_due": next_due.isoformat() if next_due else None}},
        )
        total_sent = 0
        iterations = 0
        while True:
            total_sent += self._tick()
            iterations += 1
            if one_shot:
                return total_sent
            if max_iterations is not None and iterations >= max_iterations:
                return total_sent
            scheduler.sleep_until_next()

    def _tick(self) -> int:
        try:
            sent = self.runtime.reminder_service.dispatch_due()
        except Exception as exc:
            self.runtime.logger.error(
                "reminder_cycle_error",
                extra={"event": {"type": exc.__class__.__name__, "msg": str(exc)}},
            )
            return 0
        if sent:
            self.runtime.logger.info(
                "reminders_sent",
                extra={"event": {"count": len(sent), "days": [r.day_of_week for r in sent]}},
            )
        return len(sent)

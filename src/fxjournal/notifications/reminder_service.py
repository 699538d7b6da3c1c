from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from logging import Logger
from typing import Protocol
from uuid import uuid4

from ..core.clock import Clock, to_local
from ..core.policies import DayOfWeek
from ..models.reminder import ReminderPreferences, ReminderState, ScheduledReminder
from ..storage.kv_store import KeyValueStore

REMINDER_TITLE = "Trading Reminder"
REMINDER_TAGS = "bar_chart"
REMINDER_PRIORITY = 4


class ReminderConfigError(ValueError):
    """Raised when reminder preferences cannot produce a schedule."""


class ReminderNotifier(Protocol):
    def notify(self, title: str, message: str, *, priority: int | None = None, tags: str | None = None) -> bool: ...


@dataclass(slots=True)
class ScheduleResult:
    enabled: bool
    summary: str
    scheduled: list[ScheduledReminder] = field(default_factory=list)


def next_occurrence(day_of_week: int, hour: int, minute: int, now: datetime) -> datetime:
    """Next local datetime falling on ``day_of_week`` (0=Sunday) at ``hour:minute``.

    Today counts only while the target time is still ahead of ``now``.
    """
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    current_day = DayOfWeek.from_python_weekday(now.weekday())
    days_until = int(day_of_week) - int(current_day)
    if days_until == 0 and now >= target:
        days_until = 7
    if days_until < 0:
        days_until += 7
    return target + timedelta(days=days_until)


def describe_days(days: list[int]) -> str:
    return ", ".join(DayOfWeek(day).label for day in days)


class ReminderService:
    def __init__(
        self,
        *,
        store: KeyValueStore,
        key: str,
        notifier: ReminderNotifier | None,
        clock: Clock,
        logger: Logger,
        timezone: str = "UTC",
        defaults: ReminderPreferences | None = None,
    ) -> None:
        self.store = store
        self.key = key
        self.notifier = notifier
        self.clock = clock
        self.logger = logger
        self.timezone = timezone
        self.defaults = defaults or ReminderPreferences()

    def state(self) -> ReminderState:
        raw = self.store.get_json(self.key)
        if raw is None:
            return ReminderState(preferences=self.defaults.model_copy())
        return ReminderState.model_validate(raw)

    def schedule(self, preferences: ReminderPreferences) -> ScheduleResult:
        now = self._local_now()
        if not preferences.enabled:
            self._save(ReminderState(preferences=preferences, scheduled=[], updated_at=now))
            self.logger.info("reminders_disabled")
            return ScheduleResult(enabled=False, summary="All trading reminders have been disabled.")
        if not preferences.days:
            raise ReminderConfigError("Please select at least one day for notifications.")

        scheduled = [
            ScheduledReminder(
                reminder_id=uuid4().hex,
                day_of_week=day,
                fire_at=next_occurrence(day, preferences.hour, preferences.minute, now),
                title=REMINDER_TITLE,
                body=preferences.message,
            )
            for day in preferences.days
        ]
        self._save(ReminderState(preferences=preferences, scheduled=scheduled, updated_at=now))
        at = f"{preferences.hour:02d}:{preferences.minute:02d}"
        self.logger.info(
            "reminders_scheduled",
            extra={"event": {"days": preferences.days, "at": at, "count": len(scheduled)}},
        )
        return ScheduleResult(
            enabled=True,
            summary=f"Trading reminders have been scheduled for {describe_days(preferences.days)} at {at}!",
            scheduled=scheduled,
        )

    def cancel(self) -> int:
        state = self.state()
        cancelled = len(state.scheduled)
        self._save(ReminderState(preferences=state.preferences, scheduled=[], updated_at=self._local_now()))
        self.logger.info("reminders_cancelled", extra={"event": {"count": cancelled}})
        return cancelled

    def dispatch_due(self, now: datetime | None = None) -> list[ScheduledReminder]:
        """Send every reminder whose time has come and move it to its next week."""
        local_now = to_local(now, self.timezone) if now is not None else self._local_now()
        state = self.state()
        sent: list[ScheduledReminder] = []
        updated: list[ScheduledReminder] = []
        for reminder in state.scheduled:
            if reminder.fire_at > local_now:
                updated.append(reminder)
                continue
            delivered = self._deliver(reminder)
            fire_at = next_occurrence(
                reminder.day_of_week,
                state.preferences.hour,
                state.preferences.minute,
                local_now,
            )
            rolled = reminder.model_copy(
                update={
                    "fire_at": fire_at,
                    "last_sent_at": local_now if delivered else reminder.last_sent_at,
                }
            )
            updated.append(rolled)
            if delivered:
                sent.append(reminder)
        if updated != state.scheduled:
            self._save(ReminderState(preferences=state.preferences, scheduled=updated, updated_at=local_now))
        return sent

    def next_due(self) -> datetime | None:
        scheduled = self.state().scheduled
        return min((r.fire_at for r in scheduled), default=None)

    def _deliver(self, reminder: ScheduledReminder) -> bool:
        if self.notifier is None:
            return False
        try:
            delivered = self.notifier.notify(
                reminder.title,
                reminder.body,
                priority=REMINDER_PRIORITY,
                tags=REMINDER_TAGS,
            )
        except Exception as exc:
            self.logger.error(
                "reminder_send_error",
                extra={"event": {"reminder_id": reminder.reminder_id, "msg": str(exc)}},
            )
            return False
        if not delivered:
            self.logger.warning(
                "reminder_not_delivered",
                extra={"event": {"reminder_id": reminder.reminder_id, "reason": "notifier disabled"}},
            )
        return delivered

    def _save(self, state: ReminderState) -> None:
        self.store.set_json(self.key, state.model_dump(mode="json"))

    def _local_now(self) -> datetime:
        return to_local(self.clock.now(), self.timezone)

"""Trading reminder scheduling and ntfy delivery."""

from .ntfy_client import NtfyClient
from .reminder_service import ReminderConfigError, ReminderService, next_occurrence

__all__ = ["NtfyClient", "ReminderConfigError", "ReminderService", "next_occurrence"]

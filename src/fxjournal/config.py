from __future__ import annotations

import os
from pathlib import Path

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_REMINDER_MESSAGE = "Time to check the markets and plan your trades! \U0001F4C8"


class LoggingSettings(BaseModel):
    level: str = "INFO"
    jsonl: bool = True
    log_dir: Path = Path("journal_data/logs")
    log_file: str = "fxjournal.log"
    max_bytes: int = 2 * 1024 * 1024
    backup_count: int = 3

    @property
    def log_path(self) -> Path:
        return self.log_dir / self.log_file


class StorageSettings(BaseModel):
    db_path: Path = Path("journal_data/fxjournal.sqlite3")
    wal: bool = True
    busy_timeout_ms: int = 5000
    trades_key: str = "forexTrades"
    reminders_key: str = "tradingReminders"
    export_dir: Path = Path("journal_data/exports")


class NotificationSettings(BaseModel):
    ntfy_url: str | None = None
    topic: str | None = Field(default=None, validation_alias=AliasChoices("topic", "ntfy_topic"))
    enabled: bool = Field(default=False, validation_alias=AliasChoices("enabled", "ntfy_enabled"))
    timeout_sec: float = 4.0


class ReminderSettings(BaseModel):
    enabled: bool = True
    days: list[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5])
    hour: int = Field(default=17, ge=0, le=23)
    minute: int = Field(default=0, ge=0, le=59)
    message: str = DEFAULT_REMINDER_MESSAGE
    poll_interval_sec: float = Field(default=30.0, gt=0)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=False,
    )

    env: str = "dev"
    app_name: str = "fxjournal"
    timezone: str = "UTC"

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    reminders: ReminderSettings = Field(default_factory=ReminderSettings)

    @property
    def data_dir(self) -> Path:
        return self.storage.db_path.parent

    def ensure_runtime_dirs(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.logging.log_dir.mkdir(parents=True, exist_ok=True)


def load_settings() -> AppSettings:
    env_file = resolve_env_file()
    settings = AppSettings(_env_file=env_file) if env_file else AppSettings()
    settings.ensure_runtime_dirs()
    return settings


def resolve_env_file() -> Path | None:
    """Resolve the .env file: explicit FXJOURNAL_ENV_FILE, then cwd, then project root."""
    candidates: list[Path] = []
    explicit = os.getenv("FXJOURNAL_ENV_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())

    candidates.append(Path.cwd() / ".env")
    candidates.append(Path(__file__).resolve().parents[2] / ".env")

    seen: set[str] = set()
    for path in candidates:
        resolved = path.resolve()
        key = str(resolved)
        if key in seen:
            continue
        seen.add(key)
        if resolved.is_file():
            return resolved
    return None

from __future__ import annotations

import requests

from ..config import NotificationSettings


class NtfyClient:
    """Publishes reminder pushes to an ntfy topic."""

    def __init__(self, config: NotificationSettings, session: requests.Session | None = None) -> None:
        self.config = config
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.config.enabled and self.config.ntfy_url and self.config.topic)

    def notify(
        self,
        title: str,
        message: str,
        *,
        priority: int | None = None,
        tags: str | None = None,
    ) -> bool:
        if not self.configured:
            return False
        headers = {"Title": title}
        if priority is not None:
            headers["Priority"] = str(int(priority))
        if tags:
            headers["Tags"] = tags
        resp = self.session.post(
            self._topic_url(),
            data=message.encode("utf-8"),
            headers=headers,
            timeout=self.config.timeout_sec,
        )
        resp.raise_for_status()
        return True

    def _topic_url(self) -> str:
        return f"{str(self.config.ntfy_url).rstrip('/')}/{self.config.topic}"

    def close(self) -> None:
        self.session.close()

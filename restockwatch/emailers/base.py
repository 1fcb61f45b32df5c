from __future__ import annotations

from ..watchers.base import NotificationEvent


class Notifier:
    name: str = "base"

    def notify(self, event: NotificationEvent) -> None:
        """Deliver ``event``; raise NotifyError on failure."""
        raise NotImplementedError

from __future__ import annotations
import logging

from .base import Notifier
from .templates import render_subject, render_body
from ..watchers.base import NotificationEvent

LOG = logging.getLogger("restockwatch")


class LogNotifier(Notifier):
    """Logs the email it would have sent. Used with DRY_RUN=true."""

    name = "dry-run"

    def notify(self, event: NotificationEvent) -> None:
        LOG.info("[DRY RUN] Would send email: %s\n%s", render_subject(event), render_body(event))

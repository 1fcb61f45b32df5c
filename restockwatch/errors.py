# restockwatch/errors.py
# Exception hierarchy shared by fetchers, predicates, notifiers and the watcher.

from __future__ import annotations
from typing import Optional


class WatchError(Exception):
    """Base class for every recoverable restockwatch error."""


class FetchError(WatchError):
    """Transport failure or non-success HTTP response."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.status_code = status_code


class ParseError(WatchError):
    """Fetched content is not in the shape the predicate expects.

    Predicates raise it without a URL; the watcher re-raises with the
    resource location attached.
    """

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(f"{message} ({url})" if url else message)
        self.reason = message
        self.url = url


class NotifyError(WatchError):
    """Notification could not be delivered."""


class ConfigError(Exception):
    """Missing or invalid configuration detected at startup."""

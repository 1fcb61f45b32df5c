from __future__ import annotations
from datetime import datetime, timezone
from typing import Callable, Optional

from .base import Watcher, WatchTarget, ObservationState, NotificationEvent
from ..emailers.base import Notifier
from ..errors import FetchError, NotifyError, ParseError
from ..fetchers import Fetcher
from ..utils.log import get_logger
from ..utils.state import StateStore

logger = get_logger("restockwatch.page_watcher")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# --------------------------------------------------------------------
# Page Watcher
# --------------------------------------------------------------------
class PageWatcher(Watcher):
    """Fetch one page, evaluate the target's predicate, notify on false -> true.

    poll() raises FetchError / ParseError and leaves state untouched when it
    does. A NotifyError is logged and kept on ``last_notify_error``; the state
    update stands, so the same transition is never re-sent.
    """

    name = "page"

    def __init__(
        self,
        target: WatchTarget,
        notifier: Notifier,
        fetcher: Optional[Fetcher] = None,
        state: Optional[ObservationState] = None,
        store: Optional[StateStore] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.target = target
        self.notifier = notifier
        self.fetcher = fetcher or Fetcher()
        self.store = store
        if state is None:
            state = store.load() if store else ObservationState()
        self.state = state
        self.clock = clock
        self.last_notify_error: Optional[NotifyError] = None

    def poll(self) -> ObservationState:
        url = self.target.resource_location
        logger.debug("Polling %s", url)
        result = self.fetcher.fetch(url)
        try:
            present = bool(self.target.match_predicate(result.text))
        except ParseError as e:
            raise ParseError(e.reason, url=url) from e
        except (ValueError, TypeError, UnicodeError) as e:
            raise ParseError(f"predicate could not evaluate content: {e}", url=url) from e

        now = self.clock()
        was_present = self.state.last_seen_present
        self.state.last_seen_present = present
        self.state.last_checked_at = now

        # the transition counts as observed before delivery is attempted
        self._persist()

        if present and not was_present:
            logger.info("%s: match appeared at %s", self.target.name, url)
            self._notify(NotificationEvent(self.target, now))
        elif was_present and not present:
            logger.info("%s: match gone from %s; re-armed", self.target.name, url)
        else:
            logger.info("%s: present=%s (unchanged)", self.target.name, present)
        return self.state

    def run_once(self) -> None:
        """Scheduler entry point: one cycle, never raises."""
        try:
            self.poll()
        except FetchError as e:
            logger.warning("Fetch failed, will retry next cycle: %s", e)
        except ParseError as e:
            logger.warning("Could not parse page, will retry next cycle: %s", e)
        except Exception:
            logger.exception("Watcher %s.poll() raised", self.__class__.__name__)

    # ----------------------- internal -----------------------

    def _notify(self, event: NotificationEvent) -> None:
        try:
            self.notifier.notify(event)
            self.last_notify_error = None
        except NotifyError as e:
            self.last_notify_error = e
            logger.error("Notification via %s failed for %s: %s", self.notifier.name, self.target.resource_location, e)

    def _persist(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save(self.state)
        except OSError:
            logger.exception("Failed to persist state to %s", self.store.path)

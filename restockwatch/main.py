# restockwatch/main.py
# Wiring: settings → target/predicate → fetcher + notifier → watcher → scheduler

from __future__ import annotations
import re
import sys
from typing import Mapping, Optional

from .config import Settings, load_settings
from .emailers.base import Notifier
from .emailers.dry_run import LogNotifier
from .emailers.smtp_basic import SmtpNotifier
from .errors import ConfigError
from .fetchers import Fetcher
from .predicates import build_predicate
from .scheduler import run_forever
from .utils.log import get_logger
from .utils.state import StateStore
from .watchers.base import WatchTarget
from .watchers.page_watcher import PageWatcher

logger = get_logger("restockwatch")


def build_target(settings: Settings) -> WatchTarget:
    try:
        predicate = build_predicate(
            term=settings.watch_term,
            pattern=settings.watch_pattern,
            selector=settings.watch_selector,
            case_sensitive=settings.case_sensitive,
            strip_html=settings.strip_html,
        )
    except (ValueError, re.error) as e:
        raise ConfigError(f"invalid match configuration: {e}") from e
    return WatchTarget(settings.watch_url, predicate, label=settings.watch_label)


def build_notifier(settings: Settings) -> Notifier:
    if settings.dry_run:
        return LogNotifier()
    return SmtpNotifier(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user or "",
        password=settings.smtp_password or "",
        recipients=settings.mail_to,
        mail_from=settings.mail_from,
        use_ssl=settings.smtp_ssl,
    )


def build_watcher(settings: Settings) -> PageWatcher:
    fetcher = Fetcher(
        user_agent=settings.http_user_agent,
        timeout=(settings.http_connect_timeout, settings.http_timeout),
        max_retries=settings.http_max_retries,
    )
    store = StateStore(settings.state_file) if settings.state_file else None
    return PageWatcher(build_target(settings), build_notifier(settings), fetcher=fetcher, store=store)


def main(env: Optional[Mapping[str, str]] = None) -> int:
    try:
        settings = load_settings(env)
        watcher = build_watcher(settings)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 2

    logger.info(
        "Watching %s for %s (notifier=%s)",
        settings.watch_url, watcher.target.name, watcher.notifier.name,
    )
    if settings.run_once:
        watcher.run_once()
        return 0

    run_forever(watcher.run_once, settings.poll_seconds)
    return 0


if __name__ == "__main__":
    sys.exit(main())

# restockwatch/fetchers.py
# Bounded-timeout HTTP GET with polite retry/backoff.
# Every fetch opens its own requests.Session and closes it on the way out.

from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import requests

from .errors import FetchError

LOG = logging.getLogger("restockwatch")

BROWSER_UA = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
DEFAULT_TIMEOUT = (10.0, 30.0)  # (connect, read) seconds
RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})
MAX_BACKOFF = 8.0


@dataclass(frozen=True)
class FetchResult:
    final_url: str
    status_code: int
    content_type: str
    text: str


class Fetcher:
    """HTTP client with retry/backoff for transient failures.

    Retries 429/5xx responses and connection/timeout errors up to
    ``max_retries`` attempts in total, sleeping ``Retry-After`` (when numeric)
    or an exponential backoff capped at MAX_BACKOFF. Anything else that isn't
    2xx fails immediately.
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
        max_retries: int = 3,
        backoff: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        self.user_agent = user_agent or BROWSER_UA
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.backoff = backoff
        self._sleep = sleep
        self._session_factory = session_factory

    def fetch(self, url: str) -> FetchResult:
        with self._session_factory() as s:
            s.headers.update({
                "User-Agent": self.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "en-US,en;q=0.9",
            })
            return self._get(s, url)

    def _get(self, s: requests.Session, url: str) -> FetchResult:
        backoff = self.backoff
        for attempt in range(1, self.max_retries + 1):
            last_try = attempt == self.max_retries
            try:
                r = s.get(url, timeout=self.timeout, allow_redirects=True)
            except (requests.ConnectionError, requests.Timeout) as e:
                if last_try:
                    raise FetchError(url, f"request failed after {attempt} attempt(s): {e}") from e
                LOG.debug("Fetch error for %s (%s); retrying in %ss", url, e, backoff)
                self._sleep(backoff)
                backoff = min(backoff * 2, MAX_BACKOFF)
                continue
            except requests.RequestException as e:
                raise FetchError(url, f"request failed: {e}") from e

            if r.status_code in RETRY_STATUSES and not last_try:
                delay = _retry_after(r) or backoff
                LOG.debug("HTTP backoff %ss for %s (%s)", delay, url, r.status_code)
                self._sleep(min(delay, MAX_BACKOFF))
                backoff = min(backoff * 2, MAX_BACKOFF)
                continue

            if not 200 <= r.status_code < 300:
                raise FetchError(url, f"HTTP {r.status_code}", status_code=r.status_code)

            ctype = r.headers.get("content-type", "")
            if _header_default_charset(r, ctype):
                # requests falls back to ISO-8859-1 for text/* without a charset
                r.encoding = r.apparent_encoding
            return FetchResult(
                final_url=getattr(r, "url", None) or url,
                status_code=r.status_code,
                content_type=ctype,
                text=r.text,
            )
        raise FetchError(url, "no attempts made")


def _retry_after(r: requests.Response) -> Optional[float]:
    raw = r.headers.get("Retry-After")
    if not raw:
        return None
    try:
        return max(0.0, float(raw))
    except ValueError:
        # HTTP-date form; fall back to our own backoff
        return None


def _header_default_charset(r: requests.Response, content_type: str) -> bool:
    enc = r.encoding
    if enc is None:
        return True
    return str(enc).lower() == "iso-8859-1" and "charset" not in content_type.lower()

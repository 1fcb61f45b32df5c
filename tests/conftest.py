"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta, timezone

import pytest

from restockwatch.emailers.base import Notifier
from restockwatch.errors import FetchError
from restockwatch.fetchers import FetchResult
from restockwatch.predicates import contains_term
from restockwatch.watchers.base import WatchTarget

PRODUCT_URL = "https://shop.example.com/phones"

PAGE_WITHOUT = """
<html><body>
  <h1>Phones</h1>
  <ul class="products"><li class="product">iPhone 7 - 32GB</li><li class="product">iPhone 7 Plus</li></ul>
</body></html>
"""

PAGE_WITH = """
<html><body>
  <h1>Phones</h1>
  <ul class="products"><li class="product">iPhone 7 - 32GB</li><li class="product">iPhone 8 - 64GB</li></ul>
</body></html>
"""


class FakeFetcher:
    """Serves queued page bodies; queue an exception instance to fail a fetch."""

    def __init__(self, *pages):
        self.pages = list(pages)
        self.calls = []

    def fetch(self, url):
        self.calls.append(url)
        page = self.pages.pop(0)
        if isinstance(page, Exception):
            raise page
        return FetchResult(final_url=url, status_code=200, content_type="text/html", text=page)


class RecordingNotifier(Notifier):
    name = "recording"

    def __init__(self, error=None):
        self.events = []
        self.error = error

    def notify(self, event):
        self.events.append(event)
        if self.error is not None:
            raise self.error


class StepClock:
    def __init__(self, start=datetime(2017, 9, 22, 8, 0, tzinfo=timezone.utc), step=timedelta(minutes=5)):
        self.now = start
        self.step = step

    def __call__(self):
        current = self.now
        self.now = self.now + self.step
        return current


@pytest.fixture
def target():
    return WatchTarget(PRODUCT_URL, contains_term("iPhone 8"), label="iPhone 8")


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def fetch_error():
    return FetchError(PRODUCT_URL, "HTTP 503", status_code=503)

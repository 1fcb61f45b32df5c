from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

Predicate = Callable[[str], bool]


@dataclass(frozen=True)
class WatchTarget:
    resource_location: str
    match_predicate: Predicate
    label: str = ""

    @property
    def name(self) -> str:
        return self.label or self.resource_location


@dataclass
class ObservationState:
    last_seen_present: bool = False
    last_checked_at: Optional[datetime] = None


@dataclass(frozen=True)
class NotificationEvent:
    target: WatchTarget
    timestamp: datetime


class Watcher:
    name: str = "base"

    def poll(self) -> ObservationState:
        raise NotImplementedError

    def run_once(self) -> None:
        raise NotImplementedError

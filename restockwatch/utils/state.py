# restockwatch/utils/state.py
# JSON persistence for ObservationState with atomic writes.
# Lets a cron-style one-shot run remember whether the term was already seen.

from __future__ import annotations
import json
import logging
import tempfile
from datetime import datetime
from pathlib import Path

from ..watchers.base import ObservationState

LOG = logging.getLogger("restockwatch")


class StateStore:
    """Load/save an ObservationState as a small JSON document.

    File format:
        {"last_seen_present": true, "last_checked_at": "2017-09-22T08:00:00+00:00"}

    A missing or empty file yields a fresh state. A file that can't be decoded
    is moved aside with a .bak suffix and we start fresh.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> ObservationState:
        if not self._path.exists():
            return ObservationState()
        try:
            raw = self._path.read_text(encoding="utf-8").strip()
            if not raw:
                return ObservationState()
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("state document is not an object")
            flag = data.get("last_seen_present", False)
            checked = data.get("last_checked_at")
            if not isinstance(flag, bool):
                raise ValueError(f"last_seen_present must be a boolean, got {flag!r}")
            if checked is not None and not isinstance(checked, str):
                raise ValueError(f"last_checked_at must be an ISO-8601 string, got {checked!r}")
            return ObservationState(
                last_seen_present=flag,
                last_checked_at=datetime.fromisoformat(checked) if checked else None,
            )
        except (OSError, UnicodeDecodeError, ValueError) as e:
            self._quarantine(e)
            return ObservationState()

    def save(self, state: ObservationState) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps({
            "last_seen_present": state.last_seen_present,
            "last_checked_at": state.last_checked_at.isoformat() if state.last_checked_at else None,
        })
        with tempfile.NamedTemporaryFile("w", dir=str(self._path.parent), delete=False, encoding="utf-8") as tmp:
            tmp.write(data + "\n")
            tmp_path = Path(tmp.name)
        tmp_path.replace(self._path)

    # ----------------------- internal -----------------------

    def _quarantine(self, err: Exception) -> None:
        bak = self._path.with_suffix(self._path.suffix + ".bak")
        try:
            self._path.replace(bak)
            LOG.error("State file %s unreadable (%s); moved to %s and starting fresh.", self._path, err, bak)
        except OSError:
            LOG.exception("Failed to back up unreadable state file %s; starting fresh without backup.", self._path)

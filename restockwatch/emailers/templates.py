"""
Email rendering helpers for restockwatch.


Public API:
- render_subject(event: NotificationEvent) -> str
- render_body(event: NotificationEvent) -> str
"""
from __future__ import annotations
from datetime import timezone
from typing import List

from ..watchers.base import NotificationEvent


def render_subject(event: NotificationEvent) -> str:
    """Compose a concise email subject for a discovery."""
    name = event.target.name.strip() or "Watched page"
    return f"[Restock Watch] {name} is available"


def render_body(event: NotificationEvent) -> str:
    """Render a plaintext email body with what was found, where and when."""
    t = event.target
    found_at = event.timestamp
    if found_at.tzinfo is not None:
        found_at = found_at.astimezone(timezone.utc)

    lines: List[str] = []
    if t.label:
        lines.append(f"Watching: {t.label}")
    lines.append(f"URL: {t.resource_location}")
    lines.append(f"Found at: {found_at.strftime('%Y-%m-%d %H:%M:%S')}{' UTC' if found_at.tzinfo else ''}")
    lines.append("")
    lines.append("The page now matches what you were watching for. Go get it!")
    return "\n".join(lines) + "\n"

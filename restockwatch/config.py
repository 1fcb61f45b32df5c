from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from .errors import ConfigError


# --------------------------------------------------------------------
# Utility
# --------------------------------------------------------------------
def _bool(env: Mapping[str, str], name: str, default: str = "false") -> bool:
    return env.get(name, default).strip().lower() in ("1", "true", "yes", "on")


def _str(env: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    v = env.get(name)
    if v is None or not v.strip():
        return default
    return v.strip()


def _number(env: Mapping[str, str], name: str, default: str, cast=int):
    raw = env.get(name, default)
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


def _list(env: Mapping[str, str], name: str) -> List[str]:
    return [x.strip() for x in env.get(name, "").split(",") if x.strip()]


def _secret(env: Mapping[str, str], name: str) -> Optional[str]:
    """Resolve NAME from the environment, or from the file named by NAME_FILE
    (docker/k8s style mounted secrets)."""
    v = _str(env, name)
    if v:
        return v
    path = _str(env, f"{name}_FILE")
    if not path:
        return None
    try:
        return Path(path).read_text(encoding="utf-8").strip() or None
    except OSError as e:
        raise ConfigError(f"{name}_FILE points at unreadable file {path}: {e}") from e


# --------------------------------------------------------------------
# Settings
# --------------------------------------------------------------------
@dataclass(frozen=True)
class Settings:
    # Target
    watch_url: str
    watch_term: Optional[str] = None
    watch_pattern: Optional[str] = None
    watch_selector: Optional[str] = None
    case_sensitive: bool = False
    strip_html: bool = False
    watch_label: str = ""

    # Runtime
    poll_seconds: int = 300
    run_once: bool = False
    dry_run: bool = False
    state_file: Optional[str] = None

    # HTTP
    http_connect_timeout: float = 10.0
    http_timeout: float = 30.0
    http_max_retries: int = 3
    http_user_agent: Optional[str] = None

    # SMTP / email
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_ssl: bool = False
    smtp_user: Optional[str] = field(default=None, repr=False)
    smtp_password: Optional[str] = field(default=None, repr=False)
    mail_from: Optional[str] = None
    mail_to: List[str] = field(default_factory=list)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Read Settings from the environment once at startup.

    Raises ConfigError when the target or the mail transport is incomplete.
    """
    env = os.environ if env is None else env

    url = _str(env, "WATCH_URL")
    if not url:
        raise ConfigError("WATCH_URL is required")
    if not url.lower().startswith(("http://", "https://")):
        raise ConfigError(f"WATCH_URL must be an http(s) URL, got {url!r}")

    term = _str(env, "WATCH_TERM")
    pattern = _str(env, "WATCH_PATTERN")
    selector = _str(env, "WATCH_SELECTOR")
    if not (term or pattern or selector):
        raise ConfigError("set at least one of WATCH_TERM, WATCH_PATTERN, WATCH_SELECTOR")

    dry_run = _bool(env, "DRY_RUN")
    smtp_user = _str(env, "SMTP_USER")
    smtp_password = _secret(env, "SMTP_PASSWORD")
    mail_to = _list(env, "MAIL_TO")
    if not dry_run:
        missing = [n for n, v in (("SMTP_USER", smtp_user), ("SMTP_PASSWORD", smtp_password), ("MAIL_TO", mail_to)) if not v]
        if missing:
            raise ConfigError(f"missing {', '.join(missing)} (or set DRY_RUN=true)")

    poll_seconds = _number(env, "POLL_SECONDS", "300")
    if poll_seconds < 1:
        raise ConfigError("POLL_SECONDS must be >= 1")

    return Settings(
        watch_url=url,
        watch_term=term,
        watch_pattern=pattern,
        watch_selector=selector,
        case_sensitive=_bool(env, "WATCH_CASE_SENSITIVE"),
        strip_html=_bool(env, "WATCH_STRIP_HTML"),
        watch_label=_str(env, "WATCH_LABEL", term or "") or "",
        poll_seconds=poll_seconds,
        run_once=_bool(env, "RUN_ONCE"),
        dry_run=dry_run,
        state_file=_str(env, "STATE_FILE"),
        http_connect_timeout=_number(env, "HTTP_CONNECT_TIMEOUT", "10", float),
        http_timeout=_number(env, "HTTP_TIMEOUT", "30", float),
        http_max_retries=_number(env, "HTTP_MAX_RETRIES", "3"),
        http_user_agent=_str(env, "HTTP_USER_AGENT"),
        smtp_host=_str(env, "SMTP_HOST", "smtp.gmail.com"),
        smtp_port=_number(env, "SMTP_PORT", "587"),
        smtp_ssl=_bool(env, "SMTP_SSL"),
        smtp_user=smtp_user,
        smtp_password=smtp_password,
        mail_from=_str(env, "MAIL_FROM", smtp_user),
        mail_to=mail_to,
    )

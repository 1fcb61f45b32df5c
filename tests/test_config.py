"""
Tests for environment-driven settings.
"""

import pytest

from restockwatch.config import load_settings
from restockwatch.errors import ConfigError

BASE = {
    "WATCH_URL": "https://shop.example.com/phones",
    "WATCH_TERM": "iPhone 8",
    "SMTP_USER": "me@example.com",
    "SMTP_PASSWORD": "app-password",
    "MAIL_TO": "me@example.com, partner@example.com",
}


def env(**overrides):
    e = dict(BASE)
    for k, v in overrides.items():
        if v is None:
            e.pop(k, None)
        else:
            e[k] = v
    return e


def test_defaults():
    s = load_settings(env())

    assert s.watch_url == "https://shop.example.com/phones"
    assert s.watch_term == "iPhone 8"
    assert s.watch_label == "iPhone 8"
    assert s.poll_seconds == 300
    assert s.run_once is False
    assert s.dry_run is False
    assert s.smtp_host == "smtp.gmail.com"
    assert s.smtp_port == 587
    assert s.mail_from == "me@example.com"
    assert s.mail_to == ["me@example.com", "partner@example.com"]
    assert s.state_file is None


def test_password_not_in_repr():
    assert "app-password" not in repr(load_settings(env()))


def test_overrides():
    s = load_settings(env(
        POLL_SECONDS="60", RUN_ONCE="yes", WATCH_LABEL="New iPhone", WATCH_CASE_SENSITIVE="1",
        HTTP_TIMEOUT="12.5", HTTP_MAX_RETRIES="5", SMTP_SSL="true", SMTP_PORT="465",
        MAIL_FROM="alerts@example.com", STATE_FILE="data/state.json",
    ))

    assert s.poll_seconds == 60
    assert s.run_once is True
    assert s.watch_label == "New iPhone"
    assert s.case_sensitive is True
    assert s.http_timeout == 12.5
    assert s.http_max_retries == 5
    assert s.smtp_ssl is True
    assert s.smtp_port == 465
    assert s.mail_from == "alerts@example.com"
    assert s.state_file == "data/state.json"


def test_password_from_secret_file(tmp_path):
    secret = tmp_path / "smtp_password"
    secret.write_text("from-file\n")

    s = load_settings(env(SMTP_PASSWORD=None, SMTP_PASSWORD_FILE=str(secret)))

    assert s.smtp_password == "from-file"


def test_unreadable_secret_file(tmp_path):
    with pytest.raises(ConfigError, match="SMTP_PASSWORD_FILE"):
        load_settings(env(SMTP_PASSWORD=None, SMTP_PASSWORD_FILE=str(tmp_path / "missing")))


@pytest.mark.parametrize("overrides, message", [
    ({"WATCH_URL": None}, "WATCH_URL is required"),
    ({"WATCH_URL": "ftp://shop.example.com"}, "http"),
    ({"WATCH_TERM": None}, "WATCH_TERM"),
    ({"MAIL_TO": ""}, "MAIL_TO"),
    ({"SMTP_PASSWORD": None}, "SMTP_PASSWORD"),
    ({"POLL_SECONDS": "soon"}, "POLL_SECONDS"),
    ({"POLL_SECONDS": "0"}, "POLL_SECONDS"),
])
def test_invalid(overrides, message):
    with pytest.raises(ConfigError, match=message):
        load_settings(env(**overrides))


def test_dry_run_needs_no_mail_settings():
    s = load_settings({"WATCH_URL": BASE["WATCH_URL"], "WATCH_PATTERN": r"iPhone\s*8", "DRY_RUN": "true"})

    assert s.dry_run is True
    assert s.watch_pattern == r"iPhone\s*8"
    assert s.watch_label == ""

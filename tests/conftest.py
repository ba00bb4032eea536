"""Shared fixtures for the mp-mailer test suite."""

from __future__ import annotations

import pytest

MAIL_ENV_KEYS = (
    "MAIL_HOST",
    "MAIL_PORT",
    "MAIL_AUTH",
    "MAIL_USER",
    "MAIL_PASSWORD",
    "MAIL_USE_TLS",
    "MAIL_START_TLS",
    "MAIL_TIMEOUT",
    "MAIL_X_MAILER",
    "MAIL_REPLY_TO",
    "REPLYTO",
)


@pytest.fixture(autouse=True)
def clean_mail_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without MAIL_* variables and undo anything a dotenv load adds."""
    for key in MAIL_ENV_KEYS:
        # setenv first so teardown restores the original state even when a
        # test (or load_dotenv) sets the variable directly.
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)

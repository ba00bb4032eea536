"""Unit tests for config settings & validation."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

import pytest

from mp_mailer.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    MailSettings,
    Settings,
)
from mp_mailer.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

# ---------------------------------------------------------------------------
# Concrete settings class used across generic loader tests
# ---------------------------------------------------------------------------


@dataclass
class AppSettings(Settings):
    _prefix: ClassVar[str] = "APP"

    host: str = "localhost"
    port: int = 8080
    debug: bool = False
    note: str | None = None


@dataclass
class RequiredSettings(Settings):
    _prefix: ClassVar[str] = "REQ"

    name: str = dataclasses.field()


# ---------------------------------------------------------------------------
# EnvSettingsLoader
# ---------------------------------------------------------------------------


class TestEnvSettingsLoader:
    def test_loads_string(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_HOST", "example.com")
        assert EnvSettingsLoader().load(AppSettings).host == "example.com"

    def test_loads_int(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_PORT", "9000")
        assert EnvSettingsLoader().load(AppSettings).port == 9000

    def test_loads_bool(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for truthy in ("true", "True", "1", "yes", "on"):
            monkeypatch.setenv("APP_DEBUG", truthy)
            assert EnvSettingsLoader().load(AppSettings).debug is True
        for falsy in ("false", "0", "no", "off"):
            monkeypatch.setenv("APP_DEBUG", falsy)
            assert EnvSettingsLoader().load(AppSettings).debug is False

    def test_other_annotations_keep_raw_text(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_NOTE", "a,b")
        assert EnvSettingsLoader().load(AppSettings).note == "a,b"

    def test_defaults_preserved_when_env_absent(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in ("APP_HOST", "APP_PORT", "APP_DEBUG", "APP_NOTE"):
            monkeypatch.delenv(key, raising=False)
        settings = EnvSettingsLoader().load(AppSettings)
        assert settings.host == "localhost"
        assert settings.port == 8080

    def test_uncoercible_value_raises_invalid_setting(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_PORT", "eighty")
        with pytest.raises(InvalidSettingValueError) as exc_info:
            EnvSettingsLoader().load(AppSettings)
        assert exc_info.value.setting_name == "APP_PORT"

    def test_missing_required_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("REQ_NAME", raising=False)
        with pytest.raises(MissingRequiredSettingError) as exc_info:
            EnvSettingsLoader().load(RequiredSettings)
        assert "REQ_NAME" in str(exc_info.value)


# ---------------------------------------------------------------------------
# MailSettings
# ---------------------------------------------------------------------------


class TestMailSettings:
    def test_defaults(self) -> None:
        settings = MailSettings()
        assert settings.host == "localhost"
        assert settings.port == 25
        assert settings.auth is False
        assert settings.credentials is None

    def test_loaded_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAIL_HOST", "smtp.example.com")
        monkeypatch.setenv("MAIL_PORT", "587")
        monkeypatch.setenv("MAIL_AUTH", "true")
        monkeypatch.setenv("MAIL_USER", "mailer@example.com")
        monkeypatch.setenv("MAIL_PASSWORD", "hunter2")
        monkeypatch.setenv("MAIL_START_TLS", "yes")
        monkeypatch.setenv("MAIL_TIMEOUT", "5.5")
        settings = EnvSettingsLoader().load(MailSettings)
        assert settings.host == "smtp.example.com"
        assert settings.port == 587
        assert settings.start_tls is True
        assert settings.timeout == 5.5
        assert settings.credentials == ("mailer@example.com", "hunter2")

    def test_credentials_ignored_without_auth(self) -> None:
        settings = MailSettings(user="u", password="p")
        assert settings.credentials is None

    def test_password_not_in_repr(self) -> None:
        assert "hunter2" not in repr(MailSettings(password="hunter2"))

    @pytest.mark.parametrize("port", [0, -1, 65536])
    def test_port_out_of_range(self, port: int) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            MailSettings(port=port)
        assert exc_info.value.setting_name == "port"

    def test_auth_requires_user(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            MailSettings(auth=True)

    def test_invalid_env_value_surfaces_as_config_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAIL_PORT", "70000")
        with pytest.raises(ConfigError):
            EnvSettingsLoader().load(MailSettings)


# ---------------------------------------------------------------------------
# DotenvSettingsLoader
# ---------------------------------------------------------------------------


class TestDotenvSettingsLoader:
    def test_reads_file(self, tmp_path: Path) -> None:
        env_file = tmp_path / "mail.env"
        env_file.write_text("MAIL_HOST=relay.example.org\nMAIL_X_MAILER=mp-mailer\n")
        settings = DotenvSettingsLoader(env_file).load(MailSettings)
        assert settings.host == "relay.example.org"
        assert settings.x_mailer == "mp-mailer"

    def test_environment_wins_without_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        env_file = tmp_path / "mail.env"
        env_file.write_text("MAIL_HOST=from-file\n")
        monkeypatch.setenv("MAIL_HOST", "from-env")
        assert DotenvSettingsLoader(env_file).load(MailSettings).host == "from-env"

    def test_missing_optional_file_uses_environment(self, tmp_path: Path) -> None:
        settings = DotenvSettingsLoader(tmp_path / "absent.env").load(MailSettings)
        assert settings.host == "localhost"

    def test_missing_required_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            DotenvSettingsLoader(tmp_path / "absent.env", required=True).load(MailSettings)


# ---------------------------------------------------------------------------
# Config errors
# ---------------------------------------------------------------------------


class TestConfigErrors:
    def test_missing_required_setting_stores_name(self) -> None:
        err = MissingRequiredSettingError("MAIL_HOST")
        assert err.setting_name == "MAIL_HOST"
        assert err.code == "missing_required_setting"
        assert isinstance(err, ConfigError)

    def test_invalid_setting_value_attributes(self) -> None:
        err = InvalidSettingValueError("port", 0, "must be positive")
        assert err.value == 0
        assert err.reason == "must be positive"
        assert "port" in err.message

"""Config – 12-factor settings and loaders."""

from mp_mailer.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    MailSettings,
    Settings,
    SettingsLoader,
)
from mp_mailer.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MailSettings",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]

"""Config settings – 12-factor env-based configuration."""
from mp_mailer.config.settings.base import Settings
from mp_mailer.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from mp_mailer.config.settings.mail import MailSettings

__all__ = [
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "MailSettings",
    "Settings",
    "SettingsLoader",
]

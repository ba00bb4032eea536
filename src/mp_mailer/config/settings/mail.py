"""Config settings – MailSettings (``MAIL_*`` environment variables)."""
from __future__ import annotations

import dataclasses

from mp_mailer.config.settings.base import Settings
from mp_mailer.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class MailSettings(Settings):
    """Mail server and message defaults.

    ``user`` and ``password`` are only used when ``auth`` is true.
    """

    _prefix: dataclasses.ClassVar[str] = "MAIL"

    host: str = "localhost"
    port: int = 25
    auth: bool = False
    user: str | None = None
    password: str | None = dataclasses.field(default=None, repr=False)
    use_tls: bool = False
    start_tls: bool = False
    timeout: float = 30.0
    x_mailer: str | None = None
    reply_to: str | None = None

    def _validate(self) -> None:
        if not 0 < self.port < 65536:
            raise InvalidSettingValueError("port", self.port, "must be between 1 and 65535")
        if self.auth and not self.user:
            raise InvalidSettingValueError("user", self.user, "required when auth is enabled")
        if self.timeout <= 0:
            raise InvalidSettingValueError("timeout", self.timeout, "must be positive")

    @property
    def credentials(self) -> tuple[str, str | None] | None:
        """``(user, password)`` when authentication is enabled, else ``None``."""
        if not self.auth or not self.user:
            return None
        return self.user, self.password


__all__ = ["MailSettings"]

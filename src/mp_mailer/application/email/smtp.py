"""Application email – SmtpTransport (``aiosmtplib``)."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from email.message import Message
from typing import Any, Sequence

import aiosmtplib

from mp_mailer.application.email.errors import TransportConnectionError, TransportError
from mp_mailer.application.email.transport import envelope_sender, serialize_document
from mp_mailer.config.settings import MailSettings
from mp_mailer.observability.logging import get_logger

__all__ = ["SmtpConfig", "SmtpTransport"]

_log = get_logger(__name__)


@dataclass
class SmtpConfig:
    hostname: str = "localhost"
    port: int = 25
    username: str | None = None
    password: str | None = field(default=None, repr=False)
    use_tls: bool = False
    start_tls: bool = False
    timeout: float = 30.0
    default_sender: str | None = None

    @classmethod
    def from_settings(cls, settings: MailSettings) -> "SmtpConfig":
        credentials = settings.credentials
        return cls(
            hostname=settings.host,
            port=settings.port,
            username=credentials[0] if credentials else None,
            password=credentials[1] if credentials else None,
            use_tls=settings.use_tls,
            start_tls=settings.start_tls,
            timeout=settings.timeout,
            default_sender=credentials[0] if credentials and "@" in credentials[0] else None,
        )


class SmtpTransport:
    """Transport that submits documents over SMTP using ``aiosmtplib``."""

    def __init__(self, config: SmtpConfig) -> None:
        self._config = config
        self._client: Any | None = None

    @classmethod
    def from_settings(cls, settings: MailSettings) -> "SmtpTransport":
        return cls(SmtpConfig.from_settings(settings))

    @property
    def connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        if self._client is not None:
            return
        client = aiosmtplib.SMTP(
            hostname=self._config.hostname,
            port=self._config.port,
            use_tls=self._config.use_tls,
            start_tls=self._config.start_tls,
            timeout=self._config.timeout,
        )
        try:
            await client.connect()
            if self._config.username and self._config.password:
                await client.login(self._config.username, self._config.password)
        except (aiosmtplib.SMTPException, OSError) as exc:
            if client.is_connected:
                client.close()
            raise TransportConnectionError(
                f"{self._config.hostname}:{self._config.port}",
                f"Could not connect to SMTP server {self._config.hostname}:{self._config.port}: {exc}",
                cause=exc,
            ) from exc
        self._client = client
        _log.info(
            "smtp.connected",
            host=self._config.hostname,
            port=self._config.port,
            authenticated=bool(self._config.username and self._config.password),
        )

    async def close(self) -> None:
        client, self._client = self._client, None
        if client is None:
            return
        try:
            await client.quit()
        except aiosmtplib.SMTPException as exc:
            client.close()
            raise TransportError(f"SMTP QUIT failed: {exc}", cause=exc) from exc

    async def __aenter__(self) -> "SmtpTransport":
        await self.connect()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()

    async def send(self, document: Message, recipients: Sequence[str]) -> str:
        if self._client is None:
            await self.connect()
        sender = envelope_sender(document) or self._config.default_sender
        if sender is None:
            raise TransportError("Message has no Sender or From address to use as envelope sender")
        try:
            await self._client.sendmail(sender, list(recipients), serialize_document(document))  # type: ignore[union-attr]
        except aiosmtplib.SMTPResponseException as exc:
            raise TransportError(
                f"SMTP server rejected the message: {exc.message}",
                status_code=exc.code,
                cause=exc,
            ) from exc
        except aiosmtplib.SMTPException as exc:
            raise TransportError(f"Failed to send message: {exc}", cause=exc) from exc
        msg_id = document.get("Message-ID") or str(uuid.uuid4())
        _log.info("smtp.sent", recipients=len(recipients), message_id=msg_id)
        return msg_id

"""Application email – error types raised while composing and sending."""
from __future__ import annotations

from pathlib import Path
from typing import Any

from mp_mailer.kernel.errors import (
    ApplicationError,
    ConnectionError,
    ExternalServiceError,
    ValidationError,
)

__all__ = [
    "AttachmentReadError",
    "InvalidDispositionError",
    "MessageBuildError",
    "MissingBodyError",
    "MissingRecipientsError",
    "TransportConnectionError",
    "TransportError",
    "UnknownContainerError",
]


class InvalidDispositionError(ValidationError):
    """A part was given a disposition other than ``inline`` / ``attachment``."""

    default_code = "invalid_disposition"

    def __init__(self, disposition: object) -> None:
        super().__init__(f"Unknown disposition: {disposition!r}", detail={"disposition": repr(disposition)})
        self.disposition = disposition


class MessageBuildError(ApplicationError):
    """The message could not be turned into a MIME document."""

    default_code = "message_build_error"


class MissingBodyError(MessageBuildError):
    """Neither a plain-text nor an HTML body was set."""

    default_code = "missing_body"

    def __init__(self) -> None:
        super().__init__("Message has no body.")


class MissingRecipientsError(MessageBuildError):
    """No To, Cc or Bcc address was set on a message about to be sent."""

    default_code = "missing_recipients"

    def __init__(self) -> None:
        super().__init__("Message has no recipients.")


class AttachmentReadError(MessageBuildError):
    """A file backing an attachment or embedded resource could not be read."""

    default_code = "attachment_read"

    def __init__(self, path: Path, cause: BaseException) -> None:
        super().__init__(f"Cannot attach file '{path}'", detail={"path": str(path)}, cause=cause)
        self.path = path


class UnknownContainerError(MessageBuildError):
    """A child part was appended to something that is not a multipart."""

    default_code = "unknown_container"

    def __init__(self, content_type: str) -> None:
        super().__init__(f"Unknown message container: {content_type}")
        self.content_type = content_type


class TransportError(ExternalServiceError):
    """The mail transport rejected or failed to deliver a message."""

    default_code = "transport_error"

    def __init__(self, message: str, *, service: str = "smtp", **kwargs: Any) -> None:
        super().__init__(service, message, **kwargs)


class TransportConnectionError(ConnectionError):
    """The mail transport could not connect or authenticate."""

    default_code = "transport_connection_error"

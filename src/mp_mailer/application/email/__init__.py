"""Application email – message composition, parts and transports."""
from mp_mailer.application.email.body import HtmlBody, PlainBody
from mp_mailer.application.email.composer import (
    DEFAULT_PREAMBLE,
    BodyKind,
    ContentSlots,
    Layout,
    compose,
    plan_layout,
)
from mp_mailer.application.email.delivery import deliver, transport_session
from mp_mailer.application.email.errors import (
    AttachmentReadError,
    InvalidDispositionError,
    MessageBuildError,
    MissingBodyError,
    MissingRecipientsError,
    TransportConnectionError,
    TransportError,
    UnknownContainerError,
)
from mp_mailer.application.email.in_memory import InMemoryTransport, SentMessage
from mp_mailer.application.email.message import MailMessage
from mp_mailer.application.email.part import Disposition, Part, Resource
from mp_mailer.application.email.smtp import SmtpConfig, SmtpTransport
from mp_mailer.application.email.transport import Transport, envelope_sender, serialize_document

__all__ = [
    "DEFAULT_PREAMBLE",
    "AttachmentReadError",
    "BodyKind",
    "ContentSlots",
    "Disposition",
    "HtmlBody",
    "InMemoryTransport",
    "InvalidDispositionError",
    "Layout",
    "MailMessage",
    "MessageBuildError",
    "MissingBodyError",
    "MissingRecipientsError",
    "Part",
    "PlainBody",
    "Resource",
    "SentMessage",
    "SmtpConfig",
    "SmtpTransport",
    "Transport",
    "TransportConnectionError",
    "TransportError",
    "UnknownContainerError",
    "compose",
    "deliver",
    "envelope_sender",
    "plan_layout",
    "serialize_document",
    "transport_session",
]

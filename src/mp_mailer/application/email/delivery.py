"""Application email – deliver(): build, then send inside a scoped transport session."""
from __future__ import annotations

from contextlib import asynccontextmanager
from email.message import Message
from typing import AsyncIterator

from mp_mailer.application.email.message import MailMessage
from mp_mailer.application.email.transport import Transport
from mp_mailer.observability.logging import get_logger

__all__ = ["deliver", "transport_session"]

_log = get_logger(__name__)


@asynccontextmanager
async def transport_session(transport: Transport) -> AsyncIterator[Transport]:
    """Connect *transport* and always close it on the way out.

    A failure while closing is logged, not raised, so it never hides the
    error that ended the session.
    """
    try:
        await transport.connect()
        yield transport
    finally:
        try:
            await transport.close()
        except Exception as exc:  # noqa: BLE001
            _log.warning("transport.close_failed", transport=type(transport).__name__, error=str(exc))


async def deliver(message: MailMessage, transport: Transport) -> Message:
    """Build *message* and send it through *transport*.

    The document is fully built before the transport is touched, so build
    errors never open a connection.
    """
    document, recipients = message.prepare()
    _log.info("mail.delivery_started", recipients=len(recipients), transport=type(transport).__name__)
    async with transport_session(transport) as session:
        msg_id = await session.send(document, recipients)
    _log.info("mail.delivered", recipients=len(recipients), message_id=msg_id)
    return document

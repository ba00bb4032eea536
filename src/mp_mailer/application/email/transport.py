"""Application email – Transport Protocol (port) and wire helpers."""
from __future__ import annotations

import copy
from email.message import Message
from email.utils import getaddresses
from typing import Protocol, Sequence, runtime_checkable

__all__ = ["Transport", "envelope_sender", "serialize_document"]


@runtime_checkable
class Transport(Protocol):
    """Port: hand a built MIME document to a mail server."""

    async def connect(self) -> None:
        """Open the connection (and authenticate) if not already open."""
        ...

    async def close(self) -> None:
        """Release the connection; a no-op when not connected."""
        ...

    async def send(self, document: Message, recipients: Sequence[str]) -> str:
        """Submit *document* to *recipients*; returns an opaque message-id string."""
        ...


def serialize_document(document: Message) -> bytes:
    """Return the wire bytes of *document* without its ``Bcc`` header."""
    outgoing = copy.copy(document)
    # Message.__delitem__ rebinds the header list, so *document* keeps its Bcc.
    del outgoing["Bcc"]
    return outgoing.as_bytes()


def envelope_sender(document: Message) -> str | None:
    """``Sender`` address if present, else the first ``From`` address."""
    for header in ("Sender", "From"):
        values = document.get_all(header)
        if not values:
            continue
        for _, address in getaddresses([str(v) for v in values]):
            if address:
                return address
    return None

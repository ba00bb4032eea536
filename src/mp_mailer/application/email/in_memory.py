"""Application email – InMemoryTransport for unit tests."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from email.message import Message
from typing import Sequence

from mp_mailer.application.email.errors import TransportConnectionError, TransportError

__all__ = ["InMemoryTransport", "SentMessage"]


@dataclass(frozen=True)
class SentMessage:
    document: Message
    recipients: tuple[str, ...]
    message_id: str


class InMemoryTransport:
    """Fake Transport that captures sent documents in memory.

    ``fail_on_connect`` / ``fail_on_send`` / ``fail_on_close`` make the
    matching call raise, to exercise cleanup paths.
    """

    def __init__(
        self,
        *,
        fail_on_connect: bool = False,
        fail_on_send: bool = False,
        fail_on_close: bool = False,
    ) -> None:
        self.sent: list[SentMessage] = []
        self.connected = False
        self.connect_calls = 0
        self.close_calls = 0
        self._fail_on_connect = fail_on_connect
        self._fail_on_send = fail_on_send
        self._fail_on_close = fail_on_close

    async def connect(self) -> None:
        self.connect_calls += 1
        if self._fail_on_connect:
            raise TransportConnectionError("memory", "connection refused")
        self.connected = True

    async def close(self) -> None:
        self.close_calls += 1
        self.connected = False
        if self._fail_on_close:
            raise TransportError("close failed", service="memory")

    async def send(self, document: Message, recipients: Sequence[str]) -> str:
        if not self.connected:
            await self.connect()
        if self._fail_on_send:
            raise TransportError("send failed", service="memory")
        msg_id = document.get("Message-ID") or str(uuid.uuid4())
        self.sent.append(SentMessage(document=document, recipients=tuple(recipients), message_id=msg_id))
        return msg_id

    async def __aenter__(self) -> "InMemoryTransport":
        await self.connect()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    def reset(self) -> None:
        """Clear the outbox."""
        self.sent.clear()

    # convenience helpers
    @property
    def count(self) -> int:
        return len(self.sent)

    def last(self) -> SentMessage | None:
        return self.sent[-1] if self.sent else None

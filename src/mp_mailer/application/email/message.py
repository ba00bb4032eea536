"""Application email – MailMessage builder."""
from __future__ import annotations

from email.message import Message
from email.utils import formatdate, make_msgid
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

from mp_mailer.application.email.body import (
    DEFAULT_HTML_CONTENT_TYPE,
    DEFAULT_PLAIN_CONTENT_TYPE,
    HtmlBody,
    PlainBody,
)
from mp_mailer.application.email.composer import DEFAULT_PREAMBLE, ContentSlots, compose
from mp_mailer.application.email.errors import MissingRecipientsError
from mp_mailer.application.email.mime import encode_header_value
from mp_mailer.application.email.part import Disposition, Part, Resource
from mp_mailer.kernel.errors import ValidationError
from mp_mailer.kernel.types import Address, parse_address
from mp_mailer.observability.logging import get_logger

if TYPE_CHECKING:
    from mp_mailer.application.email.transport import Transport

__all__ = ["DEFAULT_ADDRESS_CHARSET", "MailMessage"]

DEFAULT_ADDRESS_CHARSET = "UTF-8"

_log = get_logger(__name__)


def _check_header_value(name: str, value: str) -> None:
    if "\r" in value or "\n" in value:
        raise ValidationError(f"Header {name!r} value must not contain line breaks")


class MailMessage:
    """Mutable builder for one outgoing message.

    Setters return ``self`` so calls can be chained::

        doc = (
            MailMessage()
            .set_from("alice@example.com", "Alice")
            .add_to("bob@example.com")
            .set_subject("Report")
            .set_plain_text("See attached.")
            .attach_file("report.pdf")
            .build_document()
        )

    String addresses are parsed where they are set, so a malformed address
    fails at that call.  Content-ids synthesized by :meth:`embed_html` are
    unique within one instance only.
    """

    def __init__(
        self,
        *,
        multipart_preamble: str | None = DEFAULT_PREAMBLE,
        address_charset: str = DEFAULT_ADDRESS_CHARSET,
    ) -> None:
        self.multipart_preamble = multipart_preamble
        self.address_charset = address_charset
        self.sender: Address | None = None
        self.from_: list[Address] = []
        self.reply_to: list[Address] = []
        self.to: list[Address] = []
        self.cc: list[Address] = []
        self.bcc: list[Address] = []
        self.subject: str | None = None
        self.headers: list[tuple[str, str]] = []
        self.plain: PlainBody | None = None
        self.html: HtmlBody | None = None
        self.attachments: list[Part] = []
        self.embedded: list[Part] = []
        self._content_id_counter = 0

    def __repr__(self) -> str:
        return (
            f"MailMessage(subject={self.subject!r}, to={len(self.to)}, cc={len(self.cc)}, "
            f"bcc={len(self.bcc)}, attachments={len(self.attachments)}, embedded={len(self.embedded)})"
        )

    # ------------------------------------------------------------------
    # Addressing
    # ------------------------------------------------------------------

    def _address(self, address: Address | str, name: str | None) -> Address:
        if isinstance(address, Address):
            if name is None:
                return address
            return Address(address.email, name, address.charset)
        return parse_address(address, name, self.address_charset)

    def set_multipart_preamble(self, preamble: str | None) -> "MailMessage":
        self.multipart_preamble = preamble
        return self

    def set_sender(self, address: Address | str, name: str | None = None) -> "MailMessage":
        self.sender = self._address(address, name)
        return self

    def set_from(self, address: Address | str, name: str | None = None) -> "MailMessage":
        self.from_ = [self._address(address, name)]
        return self

    def set_reply_to(self, address: Address | str, name: str | None = None) -> "MailMessage":
        self.reply_to = [self._address(address, name)]
        return self

    def add_reply_to(self, address: Address | str, name: str | None = None) -> "MailMessage":
        self.reply_to.append(self._address(address, name))
        return self

    def set_to(self, address: Address | str, name: str | None = None) -> "MailMessage":
        self.to = [self._address(address, name)]
        return self

    def add_to(self, address: Address | str, name: str | None = None) -> "MailMessage":
        self.to.append(self._address(address, name))
        return self

    def set_cc(self, address: Address | str, name: str | None = None) -> "MailMessage":
        self.cc = [self._address(address, name)]
        return self

    def add_cc(self, address: Address | str, name: str | None = None) -> "MailMessage":
        self.cc.append(self._address(address, name))
        return self

    def set_bcc(self, address: Address | str, name: str | None = None) -> "MailMessage":
        self.bcc = [self._address(address, name)]
        return self

    def add_bcc(self, address: Address | str, name: str | None = None) -> "MailMessage":
        self.bcc.append(self._address(address, name))
        return self

    def set_subject(self, subject: str | None) -> "MailMessage":
        if subject is not None:
            _check_header_value("Subject", subject)
        self.subject = subject
        return self

    def add_header(self, name: str, value: str) -> "MailMessage":
        """Append a custom header; repeated names are all emitted in order.

        Content headers (``Content-*``, ``MIME-Version``) belong to the
        composed body and are rejected.
        """
        if not name or any(c in name for c in ": \t\r\n"):
            raise ValidationError(f"Invalid header name: {name!r}")
        if name.lower().startswith("content-") or name.lower() == "mime-version":
            raise ValidationError(f"Header {name!r} is set by the message body")
        _check_header_value(name, value)
        self.headers.append((name, value))
        return self

    def all_recipients(self) -> list[str]:
        """Envelope recipients: To, then Cc, then Bcc, without duplicates."""
        seen: dict[str, None] = {}
        for address in (*self.to, *self.cc, *self.bcc):
            seen.setdefault(address.email, None)
        return list(seen)

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def set_plain_text(
        self,
        text: str,
        content_type: str = DEFAULT_PLAIN_CONTENT_TYPE,
        charset: str | None = None,
    ) -> "MailMessage":
        self.plain = PlainBody(text, content_type, charset)
        return self

    def set_html_text(self, text: str, content_type: str = DEFAULT_HTML_CONTENT_TYPE) -> "MailMessage":
        self.html = HtmlBody(text, content_type)
        return self

    def attach_file(
        self,
        path: str | Path,
        name: str | None = None,
        description: str | None = None,
        content_type: str | None = None,
        disposition: Disposition | str = Disposition.ATTACHMENT,
    ) -> "MailMessage":
        self.attachments.append(
            Part.from_path(
                path,
                name=name,
                description=description,
                content_type=content_type,
                disposition=disposition,
            )
        )
        return self

    def attach_resource(
        self,
        resource: Resource,
        name: str | None = None,
        description: str | None = None,
        disposition: Disposition | str = Disposition.ATTACHMENT,
    ) -> "MailMessage":
        self.attachments.append(
            Part.from_resource(resource, name=name, description=description, disposition=disposition)
        )
        return self

    def embed_html(
        self,
        resource: Resource,
        name: str | None = None,
        description: str | None = None,
        content_id: str | None = None,
        disposition: Disposition | str = Disposition.ATTACHMENT,
    ) -> str:
        """Embed *resource* for ``cid:`` references from the HTML body; returns its content-id."""
        if content_id is None:
            content_id = self.generate_content_id()
        part = Part.from_resource(
            resource,
            name=name,
            description=description,
            content_id=content_id,
            disposition=disposition,
        )
        self.embedded.append(part)
        return part.content_id  # type: ignore[return-value]

    def embed_html_file(
        self,
        path: str | Path,
        name: str | None = None,
        description: str | None = None,
        content_type: str | None = None,
        content_id: str | None = None,
        disposition: Disposition | str = Disposition.ATTACHMENT,
    ) -> str:
        """Embed a file for ``cid:`` references from the HTML body; returns its content-id."""
        if content_id is None:
            content_id = self.generate_content_id()
        part = Part.from_path(
            path,
            name=name,
            description=description,
            content_type=content_type,
            content_id=content_id,
            disposition=disposition,
        )
        self.embedded.append(part)
        return part.content_id  # type: ignore[return-value]

    def generate_content_id(self) -> str:
        content_id = f"attachment.{self._content_id_counter}"
        self._content_id_counter += 1
        return content_id

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def snapshot(self) -> ContentSlots:
        return ContentSlots(
            plain=self.plain,
            html=self.html,
            embedded=tuple(self.embedded),
            attachments=tuple(self.attachments),
        )

    def _addressing_headers(self) -> Iterator[tuple[str, str]]:
        if self.sender is not None:
            yield "Sender", str(self.sender)
        for header, addresses in (
            ("From", self.from_),
            ("Reply-To", self.reply_to),
            ("To", self.to),
            ("Cc", self.cc),
            ("Bcc", self.bcc),
        ):
            if addresses:
                yield header, ", ".join(str(a) for a in addresses)
        if self.subject is not None:
            yield "Subject", encode_header_value(self.subject)
        for name, value in self.headers:
            yield name, encode_header_value(value)

    def build_document(self) -> Message:
        """Compose the MIME document.

        Header order: Sender, From, Reply-To, To, Cc, Bcc, Subject, custom
        headers, then the content headers of the root part.

        Raises
        ------
        MissingBodyError
            When neither plain nor HTML text is set.
        AttachmentReadError
            When a file-backed part cannot be read.
        """
        root = compose(self.snapshot(), self.multipart_preamble)
        content_headers = root.items()
        for name in dict.fromkeys(name for name, _ in content_headers):
            del root[name]
        for name, value in self._addressing_headers():
            root[name] = value
        for name, value in content_headers:
            root[name] = value
        _log.debug(
            "mail.document_built",
            content_type=root.get_content_type(),
            recipients=len(self.all_recipients()),
            custom_headers=len(self.headers),
        )
        return root

    def prepare(self) -> tuple[Message, list[str]]:
        """Build the document and stamp ``Date`` / ``Message-ID`` for sending.

        Raises
        ------
        MissingRecipientsError
            When no To, Cc or Bcc address is set.
        """
        document = self.build_document()
        recipients = self.all_recipients()
        if not recipients:
            raise MissingRecipientsError()
        if "Date" not in document:
            document["Date"] = formatdate(localtime=True)
        if "Message-ID" not in document:
            sender = self.sender or (self.from_[0] if self.from_ else None)
            document["Message-ID"] = make_msgid(domain=sender.domain if sender else None)
        return document, recipients

    async def send(self, transport: "Transport") -> Message:
        """Build and send through an already usable *transport*; returns the sent document."""
        document, recipients = self.prepare()
        await transport.send(document, recipients)
        _log.info("mail.sent", recipients=len(recipients))
        return document

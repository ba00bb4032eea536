"""Application email – Part (attachment / embedded resource) and Resource value objects."""
from __future__ import annotations

import enum
import mimetypes
from dataclasses import dataclass
from email import encoders
from email.message import Message
from email.mime.base import MIMEBase
from pathlib import Path

from mp_mailer.application.email.errors import AttachmentReadError, InvalidDispositionError
from mp_mailer.application.email.mime import append_child, encode_header_value, parse_content_type
from mp_mailer.kernel.errors import ValidationError
from mp_mailer.observability.logging import get_logger

__all__ = ["DEFAULT_CONTENT_TYPE", "Disposition", "Part", "Resource"]

DEFAULT_CONTENT_TYPE = "application/octet-stream"

_log = get_logger(__name__)


class Disposition(str, enum.Enum):
    """How a mail reader should present a part."""

    INLINE = "inline"
    ATTACHMENT = "attachment"

    @classmethod
    def coerce(cls, value: "Disposition | str") -> "Disposition":
        """Return the member for *value*; anything unknown is an :class:`InvalidDispositionError`."""
        try:
            return cls(value)
        except ValueError as exc:
            raise InvalidDispositionError(value) from exc


@dataclass(frozen=True)
class Resource:
    """In-memory content with its own declared content type."""

    data: bytes
    content_type: str = DEFAULT_CONTENT_TYPE
    name: str | None = None

    def __repr__(self) -> str:  # pragma: no cover
        return f"Resource(name={self.name!r}, content_type={self.content_type!r}, size={len(self.data)})"


@dataclass(frozen=True)
class Part:
    """One attachment or embedded resource.

    Backed by exactly one of *resource* or *path*.  A path-backed part may
    carry a ``content_type`` override; a resource-backed part always reports
    its resource's content type.  ``content_id`` is stored without angle
    brackets and emitted as ``<content_id>``.
    """

    resource: Resource | None = None
    path: Path | None = None
    name: str | None = None
    description: str | None = None
    content_type: str | None = None
    content_id: str | None = None
    disposition: Disposition = Disposition.ATTACHMENT

    def __post_init__(self) -> None:
        object.__setattr__(self, "disposition", Disposition.coerce(self.disposition))
        if (self.resource is None) == (self.path is None):
            raise ValidationError("A part needs exactly one of a resource or a file path")
        if self.resource is not None:
            if self.content_type is not None:
                raise ValidationError(
                    "A resource carries its own content type; do not pass content_type as well",
                    detail={"content_type": self.content_type},
                )
            if self.name is None:
                object.__setattr__(self, "name", self.resource.name)
        else:
            path = Path(self.path)  # type: ignore[arg-type]
            object.__setattr__(self, "path", path)
            if self.name is None:
                object.__setattr__(self, "name", path.name)
        if self.content_id is not None:
            content_id = self.content_id.strip().removeprefix("<").removesuffix(">")
            if not content_id:
                raise ValidationError("Content-ID must not be empty")
            object.__setattr__(self, "content_id", content_id)

    @classmethod
    def from_resource(
        cls,
        resource: Resource,
        *,
        name: str | None = None,
        description: str | None = None,
        content_id: str | None = None,
        disposition: Disposition | str = Disposition.ATTACHMENT,
    ) -> "Part":
        return cls(
            resource=resource,
            name=name,
            description=description,
            content_id=content_id,
            disposition=disposition,  # type: ignore[arg-type]
        )

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        *,
        name: str | None = None,
        description: str | None = None,
        content_type: str | None = None,
        content_id: str | None = None,
        disposition: Disposition | str = Disposition.ATTACHMENT,
    ) -> "Part":
        if path is None:
            raise ValidationError("File must not be None")
        return cls(
            path=Path(path),
            name=name,
            description=description,
            content_type=content_type,
            content_id=content_id,
            disposition=disposition,  # type: ignore[arg-type]
        )

    def resolve_content_type(self) -> str:
        """Resource type, then explicit override, then a guess from the file extension."""
        if self.resource is not None:
            return self.resource.content_type
        if self.content_type is not None:
            return self.content_type
        guessed, _ = mimetypes.guess_type(self.path.name)  # type: ignore[union-attr]
        return guessed or DEFAULT_CONTENT_TYPE

    def read_bytes(self) -> bytes:
        if self.resource is not None:
            return self.resource.data
        try:
            return self.path.read_bytes()  # type: ignore[union-attr]
        except OSError as exc:
            raise AttachmentReadError(self.path, exc) from exc  # type: ignore[arg-type]

    def to_mime(self) -> MIMEBase:
        """Build the base64-encoded body part for this attachment."""
        content_type = self.resolve_content_type()
        parsed = parse_content_type(content_type)
        leaf = MIMEBase(parsed.get_content_maintype(), parsed.get_content_subtype())
        leaf.replace_header("Content-Type", content_type)
        leaf.set_payload(self.read_bytes())
        encoders.encode_base64(leaf)

        if self.description is not None:
            leaf["Content-Description"] = encode_header_value(self.description)
        if self.content_id is not None:
            leaf["Content-ID"] = f"<{self.content_id}>"
        if self.name is not None:
            if self.name.isascii():
                leaf.set_param("name", self.name)
                leaf.add_header("Content-Disposition", self.disposition.value, filename=self.name)
            else:
                leaf.set_param("name", self.name, charset="utf-8")
                leaf.add_header(
                    "Content-Disposition",
                    self.disposition.value,
                    filename=("utf-8", "", self.name),
                )
        else:
            leaf.add_header("Content-Disposition", self.disposition.value)
        return leaf

    def attach(self, into: Message) -> Message:
        """Append this part to the multipart *into* and return the new body part."""
        leaf = self.to_mime()
        append_child(into, leaf)
        _log.debug(
            "mail.part_attached",
            part_name=self.name,
            content_type=leaf.get_content_type(),
            disposition=self.disposition.value,
            container=into.get_content_type(),
        )
        return leaf

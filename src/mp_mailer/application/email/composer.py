"""Application email – MIME composition engine.

Chooses the multipart layout from the populated content slots and emits the
tree.  The possible shapes are::

    text/plain | text/html                       (single body leaf)

    multipart/related                            (HTML with embedded files)
    ├── text/html
    └── image/png ...

    multipart/alternative                        (plain + HTML)
    ├── text/plain
    └── text/html | multipart/related

    multipart/mixed                              (any body + attachments)
    ├── <one of the body shapes above>
    └── application/pdf ...

Only the outermost multipart container carries the preamble.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from email.message import Message
from email.mime.multipart import MIMEMultipart

from mp_mailer.application.email.body import HtmlBody, PlainBody
from mp_mailer.application.email.errors import MissingBodyError
from mp_mailer.application.email.mime import append_child
from mp_mailer.application.email.part import Part
from mp_mailer.observability.logging import get_logger

__all__ = [
    "DEFAULT_PREAMBLE",
    "BodyKind",
    "ContentSlots",
    "Layout",
    "compose",
    "plan_layout",
]

DEFAULT_PREAMBLE = "This is a multi-part message in MIME format."

_log = get_logger(__name__)


class BodyKind(enum.Enum):
    PLAIN = "plain"
    HTML = "html"
    ALTERNATIVE = "alternative"


@dataclass(frozen=True)
class ContentSlots:
    """Immutable snapshot of everything that goes into the message content."""

    plain: PlainBody | None = None
    html: HtmlBody | None = None
    embedded: tuple[Part, ...] = ()
    attachments: tuple[Part, ...] = ()

    @property
    def has_plain(self) -> bool:
        return self.plain is not None

    @property
    def has_html(self) -> bool:
        return self.html is not None

    @property
    def has_embedded(self) -> bool:
        return bool(self.embedded)

    @property
    def has_attachments(self) -> bool:
        return bool(self.attachments)


@dataclass(frozen=True)
class Layout:
    """The nesting chosen for one set of content slots."""

    body: BodyKind
    related: bool
    mixed: bool

    @property
    def root_multipart(self) -> str | None:
        """Subtype of the outermost multipart, or ``None`` when the root is a leaf."""
        if self.mixed:
            return "mixed"
        if self.body is BodyKind.ALTERNATIVE:
            return "alternative"
        if self.body is BodyKind.HTML and self.related:
            return "related"
        return None


def plan_layout(slots: ContentSlots) -> Layout:
    """Pick the layout for *slots*.

    Embedded resources only matter next to an HTML body; attachments only
    ever wrap the body, never replace it.

    Raises
    ------
    MissingBodyError
        When neither a plain-text nor an HTML body is present.
    """
    if slots.has_plain and slots.has_html:
        body = BodyKind.ALTERNATIVE
    elif slots.has_plain:
        body = BodyKind.PLAIN
    elif slots.has_html:
        body = BodyKind.HTML
    else:
        raise MissingBodyError()
    return Layout(
        body=body,
        related=body is not BodyKind.PLAIN and slots.has_embedded,
        mixed=slots.has_attachments,
    )


def compose(slots: ContentSlots, preamble: str | None = DEFAULT_PREAMBLE) -> Message:
    """Build the content tree for *slots* and return its root.

    The root carries only content headers; addressing headers are the
    caller's business.
    """
    layout = plan_layout(slots)
    body = _build_body(slots, layout)

    if layout.mixed:
        root: Message = MIMEMultipart("mixed")
        append_child(root, body)
        for attachment in slots.attachments:
            attachment.attach(root)
    else:
        root = body

    if preamble is not None and layout.root_multipart is not None:
        root.preamble = preamble

    _log.debug(
        "mail.document_composed",
        body=layout.body.value,
        related=layout.related,
        mixed=layout.mixed,
        embedded=len(slots.embedded),
        attachments=len(slots.attachments),
    )
    return root


def _build_body(slots: ContentSlots, layout: Layout) -> Message:
    if layout.body is BodyKind.PLAIN:
        return slots.plain.to_mime()  # type: ignore[union-attr]
    if layout.body is BodyKind.HTML:
        return _build_html(slots, layout)

    alternative = MIMEMultipart("alternative")
    append_child(alternative, slots.plain.to_mime())  # type: ignore[union-attr]
    append_child(alternative, _build_html(slots, layout))
    return alternative


def _build_html(slots: ContentSlots, layout: Layout) -> Message:
    html = slots.html.to_mime()  # type: ignore[union-attr]
    if not layout.related:
        return html
    related = MIMEMultipart("related")
    append_child(related, html)
    for resource in slots.embedded:
        resource.attach(related)
    return related

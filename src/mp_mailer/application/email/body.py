"""Application email – plain-text and HTML body slots."""
from __future__ import annotations

from dataclasses import dataclass
from email import encoders
from email.message import Message
from email.mime.nonmultipart import MIMENonMultipart
from email.mime.text import MIMEText

from mp_mailer.application.email.errors import MessageBuildError
from mp_mailer.application.email.mime import parse_content_type

__all__ = [
    "DEFAULT_HTML_CONTENT_TYPE",
    "DEFAULT_PLAIN_CONTENT_TYPE",
    "HtmlBody",
    "PlainBody",
    "text_leaf",
]

DEFAULT_PLAIN_CONTENT_TYPE = "text/plain; charset=UTF-8"
DEFAULT_HTML_CONTENT_TYPE = "text/html; charset=UTF-8"


def text_leaf(text: str, content_type: str, charset: str | None = None) -> Message:
    """Build a leaf holding *text* declared as *content_type*.

    With a *charset* override, ``text/*`` types go through ``MIMEText`` with
    that charset; other families get their ``charset`` parameter set to
    it, replacing one already declared.  Without an override the
    declared type (and its own ``charset`` parameter) is used as-is.
    """
    parsed = parse_content_type(content_type)
    try:
        if parsed.get_content_maintype() == "text":
            leaf: Message = MIMEText(
                text,
                parsed.get_content_subtype(),
                charset or parsed.get_content_charset(),
            )
            for key, value in parsed.get_params()[1:]:
                if key.lower() != "charset":
                    leaf.set_param(key, value)
            return leaf

        leaf = MIMENonMultipart(parsed.get_content_maintype(), parsed.get_content_subtype())
        leaf.replace_header("Content-Type", content_type)
        if charset is not None:
            leaf.set_param("charset", charset)
        leaf.set_payload(text.encode(charset or parsed.get_content_charset() or "utf-8"))
        encoders.encode_base64(leaf)
        return leaf
    except (LookupError, UnicodeError) as exc:
        raise MessageBuildError(
            f"Cannot encode body as {content_type!r}",
            detail={"content_type": content_type, "charset": charset},
            cause=exc,
        ) from exc


@dataclass(frozen=True)
class PlainBody:
    """Plain-text body with an optional charset override."""

    text: str
    content_type: str = DEFAULT_PLAIN_CONTENT_TYPE
    charset: str | None = None

    def to_mime(self) -> Message:
        return text_leaf(self.text, self.content_type, self.charset)


@dataclass(frozen=True)
class HtmlBody:
    """HTML body."""

    text: str
    content_type: str = DEFAULT_HTML_CONTENT_TYPE

    def to_mime(self) -> Message:
        return text_leaf(self.text, self.content_type)

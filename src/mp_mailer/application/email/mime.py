"""Application email – low-level helpers over the stdlib ``email`` package.

A composed document has two kinds of node: leaves (``MIMEText`` /
``MIMEBase``) and composites (``MIMEMultipart``).  Children are only ever
added through :func:`append_child`.
"""
from __future__ import annotations

from email.header import Header
from email.message import Message

from mp_mailer.application.email.errors import UnknownContainerError

__all__ = ["append_child", "encode_header_value", "parse_content_type"]


def parse_content_type(content_type: str) -> Message:
    """Return an empty message carrying *content_type* so its parts can be queried.

    Malformed values fall back to ``text/plain`` the same way the stdlib
    parser does.
    """
    parsed = Message()
    parsed["Content-Type"] = content_type
    return parsed


def append_child(container: Message, child: Message) -> Message:
    """Append *child* to the multipart *container* and return *child*."""
    if container.get_content_maintype() != "multipart":
        raise UnknownContainerError(container.get_content_type())
    container.attach(child)
    return child


def encode_header_value(value: str, charset: str = "utf-8") -> str:
    """RFC 2047-encode *value* when it is not plain ASCII."""
    if value.isascii():
        return value
    return Header(value, charset).encode()

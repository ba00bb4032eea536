"""Mailbox address value object and parser."""

from __future__ import annotations

import dataclasses
import re
from email.utils import formataddr, getaddresses
from typing import Final

from mp_mailer.kernel.errors.domain import ValidationError

_ADDRESS_PATTERN: Final = re.compile(
    r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~\-]+"
    r"@[A-Za-z0-9](?:[A-Za-z0-9\-]*[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9\-]*[A-Za-z0-9])?)*$"
)

DEFAULT_CHARSET: Final = "utf-8"


class AddressFormatError(ValidationError):
    """An address string is not a single syntactically valid mailbox."""

    default_code = "address_format"

    def __init__(self, text: str, reason: str = "not a valid email address") -> None:
        super().__init__(f"Invalid email address {text!r}: {reason}", detail={"address": text})
        self.text = text


@dataclasses.dataclass(frozen=True, slots=True)
class Address:
    """A mailbox: ``email`` plus an optional display name.

    The domain part is normalised to lowercase; the local part is kept as
    given. ``charset`` is used to encode a non-ASCII display name.
    """

    email: str
    display_name: str | None = None
    charset: str = DEFAULT_CHARSET

    def __post_init__(self) -> None:
        email = self.email.strip()
        if not _ADDRESS_PATTERN.match(email):
            raise AddressFormatError(self.email)
        local, domain = email.rsplit("@", 1)
        object.__setattr__(self, "email", f"{local}@{domain.lower()}")
        if self.display_name is not None:
            object.__setattr__(self, "display_name", self.display_name.strip() or None)

    def __str__(self) -> str:
        return formataddr((self.display_name or "", self.email), charset=self.charset)

    @property
    def domain(self) -> str:
        """Return the domain portion of the address (everything after ``@``)."""
        return self.email.rsplit("@", 1)[1]


def parse_address(
    text: str,
    display_name: str | None = None,
    charset: str | None = None,
) -> Address:
    """Parse ``addr@example.com`` or ``Name <addr@example.com>`` into an :class:`Address`.

    An explicit *display_name* wins over a name found in *text*.

    Raises
    ------
    AddressFormatError
        When *text* is empty, holds more than one address or is malformed.
    """
    if not text or not text.strip():
        raise AddressFormatError(text or "", "address is empty")
    parsed = [pair for pair in getaddresses([text]) if pair[1]]
    if len(parsed) != 1:
        raise AddressFormatError(text, "expected exactly one address")
    name, email = parsed[0]
    return Address(
        email=email,
        display_name=display_name if display_name is not None else (name or None),
        charset=charset or DEFAULT_CHARSET,
    )


__all__ = ["Address", "AddressFormatError", "parse_address"]

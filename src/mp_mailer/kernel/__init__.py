"""Kernel – framework-agnostic building blocks."""

from mp_mailer.kernel.errors import (
    ApplicationError,
    BaseError,
    DomainError,
    InfrastructureError,
    ValidationError,
)
from mp_mailer.kernel.types import Address, AddressFormatError, parse_address

__all__ = [
    "Address",
    "AddressFormatError",
    "ApplicationError",
    "BaseError",
    "DomainError",
    "InfrastructureError",
    "ValidationError",
    "parse_address",
]

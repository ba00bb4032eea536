"""Kernel value-object types — public re-export surface.

Modules:
  address.py — Address, AddressFormatError, parse_address
"""

from mp_mailer.kernel.types.address import Address, AddressFormatError, parse_address

__all__ = ["Address", "AddressFormatError", "parse_address"]

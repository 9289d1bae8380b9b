"""Conversion between device addresses and their text form.

The text form lists the most significant byte first, which is the reverse
of the order the bytes travel on the wire. Hex digits are emitted in
lowercase; both cases are accepted when parsing.
"""
from __future__ import annotations

import re

from .errors import FormatError
from .models import ADDRESS_LENGTH, Address

SEPARATOR = ":"

_GROUP = re.compile(r"[0-9A-Fa-f]{2}")


def parse_address(text: str) -> Address:
    """Parse ``aa:bb:cc:dd:ee:ff`` into an Address.

    Args:
        text: Six colon separated two digit hex groups, most significant first

    Returns:
        Address in wire order

    Raises:
        FormatError: If the separator, group count or any group is malformed

    Example:
        >>> parse_address("00:07:80:2d:9e:f1").value
        b'\\xf1\\x9e-\\x80\\x07\\x00'
    """
    if not isinstance(text, str):
        raise FormatError(f"Address text must be a string, got {type(text).__name__}")

    groups = text.strip().split(SEPARATOR)
    if len(groups) != ADDRESS_LENGTH:
        raise FormatError(
            f"Expected {ADDRESS_LENGTH} '{SEPARATOR}' separated groups in {text!r}, "
            f"got {len(groups)}"
        )

    for group in groups:
        if not _GROUP.fullmatch(group):
            raise FormatError(f"Malformed address group {group!r} in {text!r}")

    return Address(bytes(int(group, 16) for group in reversed(groups)))


def format_address(address: Address) -> str:
    """Format an Address as lowercase ``aa:bb:cc:dd:ee:ff``."""
    return SEPARATOR.join(f"{byte:02x}" for byte in reversed(address.value))

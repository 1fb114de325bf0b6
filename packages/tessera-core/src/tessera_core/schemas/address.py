"""Address and hex literal helpers.

Account literals are 20-byte addresses written as ``0x`` followed by 40 hex
digits. Literals are validated, never trusted. Addresses returned by an
environment are opaque and are not checked here.
"""

from __future__ import annotations

import re
from typing import Annotated

from pydantic import StringConstraints, TypeAdapter

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"
"""Regex for a 20-byte hex address."""

HEX_LITERAL_PATTERN = r"^0[xX](?:[0-9a-fA-F]{2})+$"
"""Regex for a non-empty, byte-aligned hex literal."""

Address = Annotated[str, StringConstraints(pattern=ADDRESS_PATTERN)]

_ADDRESS_RE = re.compile(ADDRESS_PATTERN)
_HEX_LITERAL_RE = re.compile(HEX_LITERAL_PATTERN)
_ADDRESS_ADAPTER: TypeAdapter[str] = TypeAdapter(Address)


def is_address(value: object) -> bool:
    """Check whether value is a well-formed address string."""
    return isinstance(value, str) and _ADDRESS_RE.match(value) is not None


def is_hex_literal(value: object) -> bool:
    """Check whether value is a well-formed, byte-aligned hex string."""
    return isinstance(value, str) and _HEX_LITERAL_RE.match(value) is not None


def to_address(value: str) -> str:
    """Validate and return an address literal.

    Args:
        value: Candidate address string.

    Returns:
        The address, unchanged.

    Raises:
        pydantic.ValidationError: If value is not exactly ``0x`` + 40 hex digits.

    Example:
        >>> to_address("0xd73A01C4b9D7175EFa05f414E757e75fc1e14b9F")
        '0xd73A01C4b9D7175EFa05f414E757e75fc1e14b9F'
    """
    return _ADDRESS_ADAPTER.validate_python(value)

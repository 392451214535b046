"""Address formatting for message headers.

Examples:
    >>> format_address("foo@bar")
    'foo@bar'
    >>> format_address("foo@bar", "Foo Bar")
    '"Foo Bar" <foo@bar>'
    >>> format_address_list({"a@x": None, "b@x": "B"})
    'a@x, "B" <b@x>'
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


def format_address(email: str, name: str | None = None) -> str:
    """Render a single address.

    Args:
        email: The e-mail address.
        name: Optional display name.

    Returns:
        ``email`` unchanged when no name is given, otherwise ``"name" <email>``.
    """
    if name is None:
        return email
    return f'"{name}" <{email}>'


def format_address_list(addresses: Mapping[str, str | None]) -> str:
    """Render an email to name mapping as a comma separated header value."""
    return ", ".join(format_address(email, name) for email, name in addresses.items())


__all__ = ["format_address", "format_address_list"]

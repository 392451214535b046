"""Case-insensitive, order-preserving header storage.

A message carries few headers, so lookups scan a lower-cased index that maps
to the stored (canonical) name. The first spelling a header is stored under
is kept for its whole lifetime; later writes with a different case only
replace the value.

Examples:
    >>> store = HeaderStore()
    >>> store.set("mime-version", "1.0")
    >>> store.set("to", "foo@bar")
    >>> store.set("MIME-VERSION", "2.0")
    >>> store.as_dict()
    {'MIME-Version': '2.0', 'To': 'foo@bar'}
    >>> store.render()
    'MIME-Version: 2.0\\r\\nTo: foo@bar\\r\\n'
"""

from __future__ import annotations

from mimecraft.exceptions import MailValidationError

#: Line terminator required by RFC 5322.
CRLF = "\r\n"

_LINE_BREAKS = frozenset("\r\n")

#: Header names whose conventional spelling is not plain title case.
CANONICAL_NAMES: dict[str, str] = {
    name.lower(): name
    for name in (
        "MIME-Version",
        "Message-ID",
        "Content-ID",
        "Content-MD5",
        "Content-Transfer-Encoding",
        "Reply-To",
        "In-Reply-To",
        "X-Priority",
        "X-MSMail-Priority",
        "X-Mailer",
        "DKIM-Signature",
        "List-ID",
        "List-Unsubscribe",
        "Return-Path",
    )
}


def canonical_name(name: str) -> str:
    """Return the conventional spelling of a header name.

    Known names come from :data:`CANONICAL_NAMES`; anything else is title-cased
    segment by segment (``x-custom-id`` becomes ``X-Custom-Id``).
    """
    name = name.strip()
    known = CANONICAL_NAMES.get(name.lower())
    if known is not None:
        return known
    return "-".join(segment[:1].upper() + segment[1:].lower() for segment in name.split("-"))


class HeaderStore:
    """Ordered header mapping with case-insensitive keys."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}
        self._names: dict[str, str] = {}

    def set(self, name: str, value: str) -> None:
        """Store ``value`` under ``name``, replacing any case variant in place.

        Raises:
            MailValidationError: If ``name`` or ``value`` contains a line
                break, or ``name`` contains a colon.
        """
        if _LINE_BREAKS.intersection(name) or ":" in name:
            raise MailValidationError(f"Invalid header name: {name!r}")
        if _LINE_BREAKS.intersection(value):
            raise MailValidationError(f"Header {name!r} value must not contain line breaks")
        key = name.strip().lower()
        stored = self._names.get(key)
        if stored is None:
            stored = canonical_name(name)
            self._names[key] = stored
        self._values[stored] = value

    def get(self, name: str) -> str | None:
        """Return the value stored under any case variant of ``name``."""
        stored = self._names.get(name.strip().lower())
        if stored is None:
            return None
        return self._values[stored]

    def as_dict(self) -> dict[str, str]:
        """Return a copy of the headers in storage order."""
        return dict(self._values)

    def render(self) -> str:
        """Serialize headers as ``Name: value`` lines terminated by CRLF."""
        return "".join(f"{name}: {value}{CRLF}" for name, value in self._values.items())

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"HeaderStore({self._values!r})"


__all__ = ["CANONICAL_NAMES", "CRLF", "HeaderStore", "canonical_name"]

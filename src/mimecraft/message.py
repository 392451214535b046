"""Composition and rendering of outgoing MIME messages.

:class:`Message` collects the sender, recipients, headers, bodies and
attachments of one e-mail and renders them into the text carried by an SMTP
``DATA`` command. The rendered structure is always::

    multipart/mixed
        multipart/alternative
            text/plain        (when a plain body is set)
            text/html         (when an HTML body is set)
        inline attachments
        attachments

Attachments are stored as paths and read only while rendering, so building a
message never touches the filesystem.

Examples:
    >>> message = Message(boundary="abc123")
    >>> message.set_from("foo@bar").add_to("baz@bar", "Baz").set_subject("Hi")  # doctest: +ELLIPSIS
    <Message ...>
    >>> message.get_recipients()
    ['baz@bar']
"""

from __future__ import annotations

import logging
import os
import secrets
import string
from email.utils import formatdate
from typing import TYPE_CHECKING

from mimecraft.address import format_address, format_address_list
from mimecraft.content import encode_base64, quote_parameter, read_file, resolve_content_type
from mimecraft.exceptions import (
    AttachmentNotFoundError,
    InlineAttachmentNotFoundError,
    MailConfigurationError,
    MailValidationError,
)
from mimecraft.headers import CRLF, HeaderStore
from mimecraft.logging import TRACE_LEVEL

if TYPE_CHECKING:
    from mimecraft.transport import MailTransport

log = logging.getLogger(__name__)

#: Length of generated boundaries.
BOUNDARY_LENGTH = 32

#: Characters used in generated boundaries.
BOUNDARY_ALPHABET = string.ascii_letters + string.digits

#: Priority assumed when none was set (3 = normal).
DEFAULT_PRIORITY = 3

DEFAULT_CHARSET = "utf-8"


def generate_boundary(length: int = BOUNDARY_LENGTH) -> str:
    """Return a random alphanumeric boundary token."""
    return "".join(secrets.choice(BOUNDARY_ALPHABET) for _ in range(length))


class Message:
    """Mutable builder of a single outgoing e-mail.

    Args:
        transport: Transport used by :meth:`send`. Optional when the message
            is only rendered.
        boundary: Explicit boundary token. A random 32 character token is
            generated when omitted.
        charset: Charset declared on the text parts.

    Examples:
        >>> message = Message(boundary="abc123")
        >>> message.get_mixed_boundary(), message.get_alternative_boundary()
        ('mixed-abc123', 'alt-abc123')
    """

    format_address = staticmethod(format_address)
    format_address_list = staticmethod(format_address_list)

    def __init__(
        self,
        transport: MailTransport | None = None,
        boundary: str | None = None,
        *,
        charset: str = DEFAULT_CHARSET,
    ) -> None:
        self._transport = transport
        self._boundary = boundary if boundary is not None else generate_boundary()
        self._mixed_boundary = f"mixed-{self._boundary}"
        self._alternative_boundary = f"alt-{self._boundary}"
        self._charset = charset
        self._headers = HeaderStore()
        self._headers.set("MIME-Version", "1.0")
        self._from: tuple[str, str | None] | tuple[()] = ()
        self._to: dict[str, str | None] = {}
        self._cc: dict[str, str | None] = {}
        self._bcc: dict[str, str | None] = {}
        self._reply_to: dict[str, str | None] = {}
        self._subject: str | None = None
        self._priority = DEFAULT_PRIORITY
        self._date: str | None = None
        self._plain_message: str | None = None
        self._html_message: str | None = None
        self._attachments: list[str] = []
        self._inline_attachments: dict[str, str] = {}

    def __repr__(self) -> str:
        return f"<Message boundary={self._boundary!r} to={list(self._to)!r}>"

    def __str__(self) -> str:
        return self.render_data()

    # ------------------------------------------------------------------
    # Transport and boundaries
    # ------------------------------------------------------------------

    @property
    def transport(self) -> MailTransport | None:
        """Transport used by :meth:`send`."""
        return self._transport

    def get_boundary(self) -> str:
        return self._boundary

    def get_mixed_boundary(self) -> str:
        return self._mixed_boundary

    def get_alternative_boundary(self) -> str:
        return self._alternative_boundary

    def get_charset(self) -> str:
        return self._charset

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    def set_header(self, name: str, value: str) -> Message:
        """Set a header, replacing any case variant of ``name`` in place."""
        self._headers.set(name, value)
        return self

    def get_header(self, name: str) -> str | None:
        """Return a header value using a case-insensitive lookup."""
        return self._headers.get(name)

    def get_headers(self) -> dict[str, str]:
        """Return all headers in storage order."""
        return self._headers.as_dict()

    def render_headers(self) -> str:
        return self._headers.render()

    def set_date(self) -> Message:
        """Stamp the message with the current local date (RFC 2822)."""
        self._date = formatdate(localtime=True)
        self._headers.set("Date", self._date)
        return self

    def get_date(self) -> str | None:
        return self._date

    def set_priority(self, priority: int) -> Message:
        """Set the priority (1 = highest, 5 = lowest) and the ``X-Priority`` header.

        Header values are text: after ``set_priority(4)``, ``get_priority()``
        returns ``4`` while ``get_header("X-Priority")`` returns ``"4"``.
        """
        self._priority = priority
        self._headers.set("X-Priority", str(priority))
        return self

    def get_priority(self) -> int:
        return self._priority

    def set_subject(self, subject: str) -> Message:
        self._subject = subject
        return self

    def get_subject(self) -> str | None:
        return self._subject

    # ------------------------------------------------------------------
    # Addresses
    # ------------------------------------------------------------------

    def set_from(self, email: str, name: str | None = None) -> Message:
        """Set the sender. The ``From`` header is written at render time."""
        self._from = (email, name)
        return self

    def get_from(self) -> tuple[str, str | None] | tuple[()]:
        """Return ``(email, name)``, or an empty tuple when no sender is set."""
        return self._from

    def get_from_address(self) -> str | None:
        return self._from[0] if self._from else None

    def get_from_name(self) -> str | None:
        return self._from[1] if self._from else None

    def add_to(self, email: str, name: str | None = None) -> Message:
        self._to[email] = name
        return self

    def get_to(self) -> dict[str, str | None]:
        return dict(self._to)

    def add_cc(self, email: str, name: str | None = None) -> Message:
        self._cc[email] = name
        return self

    def get_cc(self) -> dict[str, str | None]:
        return dict(self._cc)

    def add_bcc(self, email: str, name: str | None = None) -> Message:
        """Add a blind copy recipient. Bcc addresses never appear in headers."""
        self._bcc[email] = name
        return self

    def get_bcc(self) -> dict[str, str | None]:
        return dict(self._bcc)

    def add_reply_to(self, email: str, name: str | None = None) -> Message:
        self._reply_to[email] = name
        return self

    def get_reply_to(self) -> dict[str, str | None]:
        return dict(self._reply_to)

    def get_recipients(self) -> list[str]:
        """Return the visible recipients: To then Cc, without duplicates.

        Bcc addresses are left out; see :meth:`get_envelope_recipients`.
        """
        return list(dict.fromkeys([*self._to, *self._cc]))

    def get_envelope_recipients(self) -> list[str]:
        """Return every address the transport must deliver to, Bcc included."""
        return list(dict.fromkeys([*self.get_recipients(), *self._bcc]))

    # ------------------------------------------------------------------
    # Bodies and attachments
    # ------------------------------------------------------------------

    def set_plain_message(self, message: str) -> Message:
        self._plain_message = message
        return self

    def get_plain_message(self) -> str | None:
        return self._plain_message

    def set_html_message(self, message: str) -> Message:
        self._html_message = message
        return self

    def get_html_message(self) -> str | None:
        return self._html_message

    def add_attachment(self, path: str | os.PathLike[str]) -> Message:
        """Queue a file attachment. The file is only checked when rendering."""
        self._attachments.append(os.fspath(path))
        return self

    def get_attachments(self) -> list[str]:
        return list(self._attachments)

    def set_inline_attachment(self, path: str | os.PathLike[str], content_id: str) -> Message:
        """Register a file to embed under ``content_id`` (``cid:`` in HTML bodies).

        Raises:
            MailValidationError: If ``content_id`` contains a line break.
        """
        if "\r" in content_id or "\n" in content_id:
            raise MailValidationError(f"Content-ID must not contain line breaks: {content_id!r}")
        self._inline_attachments[content_id] = os.fspath(path)
        return self

    def get_inline_attachments(self) -> dict[str, str]:
        return dict(self._inline_attachments)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def prepare_headers(self) -> None:
        """Write the address, subject and content type headers into the store."""
        if self._from:
            self._headers.set("From", format_address(*self._from))
        self._headers.set("To", format_address_list(self._to))
        if self._cc:
            self._headers.set("Cc", format_address_list(self._cc))
        if self._reply_to:
            self._headers.set("Reply-To", format_address_list(self._reply_to))
        if self._subject is not None:
            self._headers.set("Subject", self._subject)
        self._headers.set("Content-Type", f'multipart/mixed; boundary="{self._mixed_boundary}"')

    def _render_text_part(self, body: str, content_type: str) -> str:
        part = f"--{self._alternative_boundary}{CRLF}"
        part += f"Content-Type: {content_type}; charset={self._charset}{CRLF}"
        part += f"Content-Transfer-Encoding: base64{CRLF}{CRLF}"
        part += encode_base64(body.encode(self._charset)) + CRLF
        return part

    def render_plain_message(self) -> str:
        """Render the ``text/plain`` alternative, or ``""`` when unset."""
        if self._plain_message is None:
            return ""
        return self._render_text_part(self._plain_message, "text/plain")

    def render_html_message(self) -> str:
        """Render the ``text/html`` alternative, or ``""`` when unset."""
        if self._html_message is None:
            return ""
        return self._render_text_part(self._html_message, "text/html")

    def render_attachments(self) -> str:
        """Render every file attachment as a ``multipart/mixed`` part.

        Raises:
            AttachmentNotFoundError: If an attachment is not a regular file.
        """
        parts = []
        for path in self._attachments:
            if not os.path.isfile(path):
                raise AttachmentNotFoundError(path)
            filename = quote_parameter(os.path.basename(path))
            content_type = resolve_content_type(path)
            log.log(TRACE_LEVEL, "Rendering attachment %s (%s)", path, content_type)
            part = f"--{self._mixed_boundary}{CRLF}"
            part += f'Content-Type: {content_type}; name="{filename}"{CRLF}'
            part += f'Content-Disposition: attachment; filename="{filename}"{CRLF}'
            part += f"Content-Transfer-Encoding: base64{CRLF}{CRLF}"
            part += encode_base64(read_file(path)) + CRLF
            parts.append(part)
        return "".join(parts)

    def render_inline_attachments(self) -> str:
        """Render every inline attachment with its ``Content-ID``.

        Raises:
            InlineAttachmentNotFoundError: If an inline file is not a regular file.
        """
        parts = []
        for content_id, path in self._inline_attachments.items():
            if not os.path.isfile(path):
                raise InlineAttachmentNotFoundError(path, content_id)
            content_type = resolve_content_type(path)
            log.log(TRACE_LEVEL, "Rendering inline attachment %s as %s (%s)", path, content_id, content_type)
            part = f"--{self._mixed_boundary}{CRLF}"
            part += f"Content-ID: {content_id}{CRLF}"
            part += f"Content-Type: {content_type}{CRLF}"
            part += f"Content-Disposition: inline{CRLF}"
            part += f"Content-Transfer-Encoding: base64{CRLF}{CRLF}"
            part += encode_base64(read_file(path)) + CRLF
            parts.append(part)
        return "".join(parts)

    def render_data(self) -> str:
        """Render the complete message as sent after the SMTP ``DATA`` command.

        Raises:
            AttachmentNotFoundError: If an attachment or inline attachment
                is missing. Nothing is returned in that case.
            AttachmentReadError: If an attachment exists but cannot be read.
            MailValidationError: If a header value contains a line break.
        """
        self.prepare_headers()
        data = self.render_headers() + CRLF
        data += f"--{self._mixed_boundary}{CRLF}"
        data += f'Content-Type: multipart/alternative; boundary="{self._alternative_boundary}"{CRLF}{CRLF}'
        data += self.render_plain_message()
        data += self.render_html_message()
        data += f"--{self._alternative_boundary}--{CRLF}{CRLF}"
        data += self.render_inline_attachments()
        data += self.render_attachments()
        data += f"--{self._mixed_boundary}--"
        log.debug(
            "Rendered message %s: %d header(s), %d inline attachment(s), %d attachment(s)",
            self._boundary,
            len(self._headers),
            len(self._inline_attachments),
            len(self._attachments),
        )
        return data

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def send(self) -> Message:
        """Hand the message to its transport.

        Returns:
            The message itself.

        Raises:
            MailConfigurationError: If the message has no transport.
            MailTransportError: Propagated from the transport.
        """
        if self._transport is None:
            raise MailConfigurationError("No transport configured for this message")
        log.debug("Sending message %s via %s", self._boundary, type(self._transport).__name__)
        self._transport.send(self)
        return self


__all__ = [
    "BOUNDARY_LENGTH",
    "DEFAULT_PRIORITY",
    "Message",
    "generate_boundary",
]

"""Compose multipart MIME e-mail messages and hand them to a transport.

Examples:
    Render a message::

        from mimecraft import Message

        message = Message(boundary="abc123")
        message.set_from("me@example.com", "Me").add_to("you@example.com")
        message.set_subject("Report").set_plain_message("See attached.")
        message.add_attachment("report.pdf")
        payload = message.render_data()

    Send it over SMTP::

        from mimecraft.transports import SMTPTransport

        message = Message(SMTPTransport("smtp.example.com"))
        ...
        message.send()
"""

from mimecraft.address import format_address, format_address_list
from mimecraft.content import resolve_content_type
from mimecraft.exceptions import (
    AttachmentNotFoundError,
    AttachmentReadError,
    InlineAttachmentNotFoundError,
    MailConfigurationError,
    MailError,
    MailStateError,
    MailTransportError,
    MailValidationError,
)
from mimecraft.headers import HeaderStore
from mimecraft.message import Message, generate_boundary
from mimecraft.transport import MailTransport

__version__ = "0.1.0"

__all__ = [
    "AttachmentNotFoundError",
    "AttachmentReadError",
    "HeaderStore",
    "InlineAttachmentNotFoundError",
    "MailConfigurationError",
    "MailError",
    "MailStateError",
    "MailTransport",
    "MailTransportError",
    "MailValidationError",
    "Message",
    "__version__",
    "format_address",
    "format_address_list",
    "generate_boundary",
    "resolve_content_type",
]

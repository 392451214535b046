"""SMTP transport for rendered messages.

Examples:
    Send through a submission server with STARTTLS::

        from mimecraft import Message
        from mimecraft.transports import SMTPCredentials, SMTPTransport

        transport = SMTPTransport(
            "smtp.example.com",
            credentials=SMTPCredentials(username="me", password="secret"),
        )
        message = Message(transport)
        message.set_from("me@example.com").add_to("you@example.com")
        message.set_plain_message("Hello").send()
"""

from __future__ import annotations

import logging
import smtplib
import ssl
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mimecraft.exceptions import MailConfigurationError, MailTransportError, MailValidationError
from mimecraft.logging import TRACE_LEVEL
from mimecraft.transport import MailTransport

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mimecraft.message import Message

__all__ = ["SMTPCredentials", "SMTPSecurity", "SMTPTransport"]

log = logging.getLogger(__name__)

DEFAULT_PORT = 587
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class SMTPCredentials:
    """Login credentials for the SMTP server.

    Attributes:
        username: Account name, ``None`` to skip authentication.
        password: Account password.
    """

    username: str | None = None
    password: str | None = None


@dataclass(frozen=True, slots=True)
class SMTPSecurity:
    """Connection security options.

    Attributes:
        use_ssl: Connect with implicit TLS (``SMTP_SSL``, usually port 465).
        use_starttls: Upgrade a plain connection with STARTTLS when the server
            advertises it. Ignored when ``use_ssl`` is set.
        ssl_context: Context used for TLS; a default context when ``None``.
    """

    use_ssl: bool = False
    use_starttls: bool = True
    ssl_context: ssl.SSLContext | None = None


class SMTPTransport(MailTransport):
    """Deliver messages over SMTP, one connection per message.

    Args:
        host: SMTP server hostname.
        port: SMTP server port (default: 587).
        credentials: Optional login credentials.
        security: TLS options (default: STARTTLS when available).
        timeout: Socket timeout in seconds (default: 30.0).

    Raises:
        MailConfigurationError: If *host* is empty, *port* is out of range or
            *timeout* is not positive.
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        *,
        credentials: SMTPCredentials | None = None,
        security: SMTPSecurity | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if not host:
            raise MailConfigurationError("SMTP host is required")
        if not 0 < port < 65536:
            raise MailConfigurationError(f"Invalid SMTP port: {port}")
        if timeout <= 0:
            raise MailConfigurationError("Timeout must be greater than 0")

        self.host = host
        self.port = port
        self.credentials = credentials or SMTPCredentials()
        self.security = security or SMTPSecurity()
        self.timeout = timeout

    @classmethod
    def from_config(cls, section: Mapping[str, Any]) -> SMTPTransport:
        """Build a transport from a ``mail.smtp`` configuration mapping.

        Args:
            section: Mapping with ``host``, ``port``, ``timeout``,
                ``username``, ``password``, ``use_ssl`` and ``use_starttls``
                keys. Missing keys take the constructor defaults.
        """
        try:
            port = int(section.get("port", DEFAULT_PORT))
            timeout = float(section.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as e:
            raise MailConfigurationError(f"Invalid SMTP settings: {e}") from e

        return cls(
            str(section.get("host") or ""),
            port,
            credentials=SMTPCredentials(
                username=section.get("username"),
                password=section.get("password"),
            ),
            security=SMTPSecurity(
                use_ssl=bool(section.get("use_ssl", False)),
                use_starttls=bool(section.get("use_starttls", True)),
            ),
            timeout=timeout,
        )

    def _ssl_context(self) -> ssl.SSLContext:
        return self.security.ssl_context or ssl.create_default_context()

    def _connect(self) -> smtplib.SMTP:
        if self.security.use_ssl:
            return smtplib.SMTP_SSL(host=self.host, port=self.port, timeout=self.timeout, context=self._ssl_context())
        return smtplib.SMTP(host=self.host, port=self.port, timeout=self.timeout)

    def send(self, message: Message) -> None:
        """Render ``message`` and deliver it to every envelope recipient.

        Raises:
            MailValidationError: If the message has no sender or no recipient.
            MailTransportError: If the SMTP exchange fails.
        """
        sender = message.get_from_address()
        if not sender:
            raise MailValidationError("Message has no sender address")
        recipients = message.get_envelope_recipients()
        if not recipients:
            raise MailValidationError("Message has no recipients")

        payload = message.render_data().encode(message.get_charset())
        trace_enabled = log.isEnabledFor(TRACE_LEVEL)

        try:
            if trace_enabled:
                log.log(TRACE_LEVEL, "[SMTP] Connecting to %s:%d (ssl=%s)", self.host, self.port, self.security.use_ssl)
            with self._connect() as client:
                client.ehlo()
                if not self.security.use_ssl and self.security.use_starttls and client.has_extn("STARTTLS"):
                    if trace_enabled:
                        log.log(TRACE_LEVEL, "[SMTP] Upgrading connection with STARTTLS")
                    client.starttls(context=self._ssl_context())
                    client.ehlo()
                if self.credentials.username:
                    if trace_enabled:
                        log.log(TRACE_LEVEL, "[SMTP] Authenticating as: %s", self.credentials.username)
                    client.login(self.credentials.username, self.credentials.password or "")
                if trace_enabled:
                    log.log(TRACE_LEVEL, "[SMTP] MAIL FROM: <%s>", sender)
                    for recipient in recipients:
                        log.log(TRACE_LEVEL, "[SMTP] RCPT TO: <%s>", recipient)
                refused = client.sendmail(sender, recipients, payload)
        except (smtplib.SMTPException, OSError) as e:
            raise MailTransportError(f"SMTP delivery failed: {e}") from e

        if refused:
            log.warning("SMTP server refused %d recipient(s): %s", len(refused), ", ".join(refused))
        log.debug("Message sent via %s:%d to %d recipient(s)", self.host, self.port, len(recipients))

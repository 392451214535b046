"""Transport implementations for mail delivery.

Available transports:
    - SMTPTransport: Standard SMTP protocol through :mod:`smtplib`
"""

from mimecraft.transports.smtp import SMTPCredentials, SMTPSecurity, SMTPTransport

__all__ = [
    "SMTPCredentials",
    "SMTPSecurity",
    "SMTPTransport",
]

"""Specialized exceptions raised by mimecraft.

Exception hierarchy::

    MailError
        MailConfigurationError (invalid configuration, also ValueError)
        MailValidationError (unusable envelope data, also ValueError)
        MailStateError (invalid state at render time, also RuntimeError)
            AttachmentNotFoundError
                InlineAttachmentNotFoundError
            AttachmentReadError
        MailTransportError (delivery failure)
        ConfigError
            ConfigFileNotFoundError (also FileNotFoundError)
            ConfigFormatError (also ValueError)
"""

from __future__ import annotations


class MailError(Exception):
    """Base exception for all mimecraft errors."""


class MailConfigurationError(MailError, ValueError):
    """Mail configuration is invalid or incomplete.

    Raised when a transport receives bad settings, or when a message is
    sent without a transport attached.
    """


class MailValidationError(MailError, ValueError):
    """Message data cannot be used for delivery."""


class MailStateError(MailError, RuntimeError):
    """The message is in a state that cannot be rendered."""


class AttachmentNotFoundError(MailStateError):
    """An attachment path does not point to a regular file at render time.

    Attributes:
        path: The offending attachment path.
    """

    kind = "Attachment"

    def __init__(self, path: str) -> None:
        """Initialize AttachmentNotFoundError.

        Args:
            path: The attachment path that could not be read.
        """
        super().__init__(f"{self.kind} file not found: {path}")
        self.path = path


class InlineAttachmentNotFoundError(AttachmentNotFoundError):
    """An inline attachment path does not point to a regular file.

    Attributes:
        path: The offending attachment path.
        content_id: The Content-ID the attachment was registered under.
    """

    kind = "Inline attachment"

    def __init__(self, path: str, content_id: str) -> None:
        """Initialize InlineAttachmentNotFoundError.

        Args:
            path: The inline attachment path that could not be read.
            content_id: The Content-ID of the inline attachment.
        """
        super().__init__(path)
        self.content_id = content_id


class AttachmentReadError(MailStateError):
    """An attachment file exists but could not be read.

    Attributes:
        path: The offending attachment path.
    """

    def __init__(self, path: str, reason: str) -> None:
        """Initialize AttachmentReadError.

        Args:
            path: The attachment path that could not be read.
            reason: Description of the underlying OS error.
        """
        super().__init__(f"Cannot read attachment file {path}: {reason}")
        self.path = path


class MailTransportError(MailError):
    """The transport failed to deliver a message."""


class ConfigError(MailError):
    """Base exception for configuration loading errors."""


class ConfigFileNotFoundError(ConfigError, FileNotFoundError):
    """An explicitly requested configuration file does not exist."""


class ConfigFormatError(ConfigError, ValueError):
    """A configuration file could not be parsed into a mapping."""


__all__ = [
    "AttachmentNotFoundError",
    "AttachmentReadError",
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "InlineAttachmentNotFoundError",
    "MailConfigurationError",
    "MailError",
    "MailStateError",
    "MailTransportError",
    "MailValidationError",
]

"""Content type resolution and transfer encoding for message parts."""

from __future__ import annotations

import base64
import mimetypes
import os

from mimecraft.exceptions import AttachmentReadError
from mimecraft.headers import CRLF

#: Content type used when nothing better can be guessed.
DEFAULT_CONTENT_TYPE = "application/octet-stream"

#: Maximum encoded line length (RFC 2045 section 6.8).
BASE64_LINE_LENGTH = 76


def resolve_content_type(path: str | os.PathLike[str]) -> str:
    """Guess the content type of a file from its name.

    Args:
        path: Path of the file.

    Returns:
        The guessed type, or ``application/octet-stream`` when unknown.

    Examples:
        >>> resolve_content_type("logo.png")
        'image/png'
        >>> resolve_content_type("blob")
        'application/octet-stream'
    """
    content_type, _ = mimetypes.guess_type(os.fspath(path), strict=False)
    return content_type or DEFAULT_CONTENT_TYPE


def encode_base64(data: bytes) -> str:
    """Base64 encode ``data`` as CRLF terminated lines of 76 characters.

    Examples:
        >>> encode_base64(b"Hi")
        'SGk=\\r\\n'
        >>> encode_base64(b"")
        ''
    """
    encoded = base64.b64encode(data).decode("ascii")
    return "".join(
        encoded[start : start + BASE64_LINE_LENGTH] + CRLF for start in range(0, len(encoded), BASE64_LINE_LENGTH)
    )


def quote_parameter(value: str) -> str:
    r"""Escape ``value`` for use inside a quoted MIME parameter (RFC 2045).

    Only backslashes and double quotes are escaped; everything else is kept.

    Examples:
        >>> quote_parameter("Q&A.txt")
        'Q&A.txt'
        >>> quote_parameter('say "hi".txt')
        'say \\"hi\\".txt'
    """
    return value.replace("\\", "\\\\").replace('"', '\\"')


def read_file(path: str) -> bytes:
    """Return the bytes of a file.

    Raises:
        AttachmentReadError: If the file cannot be opened or read.
    """
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError as e:
        raise AttachmentReadError(path, e.strerror or str(e)) from e


__all__ = [
    "BASE64_LINE_LENGTH",
    "DEFAULT_CONTENT_TYPE",
    "encode_base64",
    "quote_parameter",
    "read_file",
    "resolve_content_type",
]

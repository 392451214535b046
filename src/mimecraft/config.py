"""YAML configuration for mimecraft.

Configuration is read from ``mimecraft.conf.yml`` (or an explicit path) and
merged over built-in defaults. Values are exposed as a :class:`box.Box` so
sections can be reached with attribute access::

    config = load_config()
    config.mail.smtp.host

Examples:
    >>> config = load_config()  # doctest: +SKIP
    >>> settings = get_mail_settings(config)  # doctest: +SKIP
    >>> settings.charset  # doctest: +SKIP
    'utf-8'
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from box import Box

from mimecraft.exceptions import ConfigFileNotFoundError, ConfigFormatError, MailConfigurationError
from mimecraft.message import BOUNDARY_LENGTH

if TYPE_CHECKING:
    from collections.abc import Mapping

log = logging.getLogger(__name__)

#: File looked up in the working directory when no path is given.
DEFAULT_CONFIG_FILENAME = "mimecraft.conf.yml"

#: RFC 2046 limits boundaries to 70 characters.
MAX_BOUNDARY_LENGTH = 70

DEFAULT_CONFIG: dict[str, Any] = {
    "mail": {
        "charset": "utf-8",
        "boundary_length": BOUNDARY_LENGTH,
        "smtp": {
            "host": "localhost",
            "port": 587,
            "timeout": 30.0,
            "username": None,
            "password": None,
            "use_ssl": False,
            "use_starttls": True,
        },
    },
}


@dataclass(frozen=True, slots=True)
class MailSettings:
    """Composition settings taken from the ``mail`` section.

    Attributes:
        charset: Charset declared on text parts.
        boundary_length: Length of generated boundaries (1..70).
    """

    charset: str = "utf-8"
    boundary_length: int = BOUNDARY_LENGTH


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into ``base`` recursively and return ``base``."""
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _deep_merge(current, value)
        else:
            base[key] = value
    return base


def load_config(path: str | Path | None = None) -> Box:
    """Load configuration merged over :data:`DEFAULT_CONFIG`.

    Args:
        path: Explicit YAML file. When omitted, ``mimecraft.conf.yml`` in the
            working directory is used if it exists.

    Returns:
        The merged configuration.

    Raises:
        ConfigFileNotFoundError: If an explicit *path* does not exist.
        ConfigFormatError: If the file is not valid YAML or not a mapping.
    """
    merged = copy.deepcopy(DEFAULT_CONFIG)

    if path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_FILENAME
        if not candidate.is_file():
            log.debug("No %s found, using defaults", DEFAULT_CONFIG_FILENAME)
            return Box(merged)
    else:
        candidate = Path(path)
        if not candidate.is_file():
            raise ConfigFileNotFoundError(f"Config file not found: {candidate}")

    log.debug("Loading config from: %s", candidate)
    try:
        data = yaml.safe_load(candidate.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigFormatError(f"Invalid YAML in {candidate}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigFormatError(f"Config root must be a mapping: {candidate}")

    return Box(_deep_merge(merged, data))


def get_mail_settings(config: Mapping[str, Any] | None = None) -> MailSettings:
    """Build :class:`MailSettings` from a loaded configuration.

    Args:
        config: Result of :func:`load_config`; defaults are used when ``None``.

    Raises:
        MailConfigurationError: If the charset is empty or the boundary
            length is not an integer.
    """
    section = (config or DEFAULT_CONFIG).get("mail") or {}
    charset = section.get("charset", "utf-8")
    if not isinstance(charset, str) or not charset.strip():
        raise MailConfigurationError("mail.charset must be a non-empty string")

    raw_length = section.get("boundary_length", BOUNDARY_LENGTH)
    if isinstance(raw_length, bool) or not isinstance(raw_length, int):
        raise MailConfigurationError(f"mail.boundary_length must be an integer, got {raw_length!r}")
    boundary_length = max(1, min(raw_length, MAX_BOUNDARY_LENGTH))
    if boundary_length != raw_length:
        log.warning("mail.boundary_length %d clamped to %d", raw_length, boundary_length)

    return MailSettings(charset=charset.strip(), boundary_length=boundary_length)


__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_FILENAME",
    "MailSettings",
    "get_mail_settings",
    "load_config",
]

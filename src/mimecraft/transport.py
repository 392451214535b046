"""Transport abstraction used by :meth:`mimecraft.message.Message.send`."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mimecraft.message import Message


class MailTransport(ABC):
    """Base class for delivery backends.

    A transport receives a fully composed :class:`~mimecraft.message.Message`
    and delivers it. It reads the payload from ``message.render_data()`` and
    the envelope from ``message.get_envelope_recipients()`` so Bcc addresses
    are delivered without being written to the headers.
    """

    @abstractmethod
    def send(self, message: Message) -> None:
        """Deliver ``message``.

        Raises:
            MailTransportError: If delivery fails.
        """


__all__ = ["MailTransport"]

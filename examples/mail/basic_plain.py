"""Plain-text mail composition using :class:`mimecraft.Message`."""

from __future__ import annotations

from mimecraft import Message


def build_plain_message() -> None:
    """Construct a plain-text message and print the DATA payload."""
    message = (
        Message()
        .set_from("sender@example.com", "Sender")
        .add_to("user@example.com")
        .set_subject("Plain Greetings")
        .set_plain_message("Hello from mimecraft!\nThis message only has a plain alternative.")
        .set_date()
    )
    print(message.render_data())


if __name__ == "__main__":  # pragma: no cover - manual example
    build_plain_message()

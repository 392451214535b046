"""Demonstrate attachments and inline resources with :class:`mimecraft.Message`."""

from __future__ import annotations

from base64 import b64decode
from pathlib import Path
from tempfile import TemporaryDirectory

from mimecraft import Message

_LOGO_BASE64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/x8AAusB9Y9dOAoAAAAASUVORK5CYII="


def build_message_with_attachments() -> None:
    """Create a message that includes an attachment and an inline PNG resource."""
    with TemporaryDirectory() as tmp_dir:
        workdir = Path(tmp_dir)

        report_path = workdir / "daily-report.txt"
        report_path.write_text("Daily metrics: 42 conversions", encoding="utf-8")

        logo_path = workdir / "logo.png"
        logo_path.write_bytes(b64decode(_LOGO_BASE64))

        message = (
            Message()
            .set_from("sender@example.com")
            .add_to("ops@example.com")
            .add_bcc("audit@example.com")
            .set_subject("Daily metrics report")
            .set_plain_message("Please find the report attached.")
            .set_html_message('<p>Please find the report attached.</p><img src="cid:company-logo" alt="logo" />')
            .add_attachment(report_path)
            .set_inline_attachment(logo_path, "company-logo")
        )

        # Files are only read here, the temporary directory must still exist.
        print(message.render_data())


if __name__ == "__main__":  # pragma: no cover - manual example
    build_message_with_attachments()

"""Integration tests for the ``mimecraft`` CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from mimecraft.cli import app
from mimecraft.exceptions import MailTransportError
from mimecraft.message import Message

# Mark all tests in this module as CLI tests
pytestmark = pytest.mark.cli

runner = CliRunner()


class RecordingTransport:
    """Stand-in for SMTPTransport capturing sent messages."""

    instances: list[RecordingTransport] = []

    def __init__(self, section: Any) -> None:
        self.section = section
        self.host = section.host
        self.port = section.port
        self.sent: list[Message] = []
        RecordingTransport.instances.append(self)

    @classmethod
    def from_config(cls, section: Any) -> RecordingTransport:
        """Mirror ``SMTPTransport.from_config``."""
        return cls(section)

    def send(self, message: Message) -> None:
        """Record the message."""
        self.sent.append(message)


class TestRender:
    """Tests for ``mimecraft render``."""

    def test_help(self) -> None:
        """The root help lists the commands."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "render" in result.output
        assert "send" in result.output

    def test_render_minimal(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Render prints the multipart skeleton."""
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["render", "--from", "foo@bar", "--boundary", "abc123"])

        assert result.exit_code == 0, result.output
        assert "From: foo@bar" in result.output
        assert 'Content-Type: multipart/mixed; boundary="mixed-abc123"' in result.output
        assert "--alt-abc123--" in result.output
        assert "--mixed-abc123--" in result.output

    def test_render_full_message(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """All composition options reach the payload."""
        monkeypatch.chdir(tmp_path)
        attachment = tmp_path / "report.txt"
        attachment.write_text("payload", encoding="utf-8")
        image = tmp_path / "logo.png"
        image.write_bytes(b"img")

        result = runner.invoke(
            app,
            [
                "render",
                "--from", "me@example.com",
                "--from-name", "Me",
                "--to", "a@example.com",
                "--to", "b@example.com",
                "--cc", "c@example.com",
                "--bcc", "hidden@example.com",
                "--reply-to", "reply@example.com",
                "--subject", "Report",
                "--text", "Hello",
                "--html", "<p>Hello</p>",
                "--attach", str(attachment),
                "--inline", f"logo={image}",
                "--priority", "1",
                "--boundary", "abc123",
            ],
        )  # fmt: skip

        assert result.exit_code == 0, result.output
        output = result.output
        assert 'From: "Me" <me@example.com>' in output
        assert "To: a@example.com, b@example.com" in output
        assert "Cc: c@example.com" in output
        assert "Reply-To: reply@example.com" in output
        assert "Subject: Report" in output
        assert "X-Priority: 1" in output
        assert "text/plain; charset=utf-8" in output
        assert "text/html; charset=utf-8" in output
        assert "Content-ID: logo" in output
        assert 'filename="report.txt"' in output
        assert "hidden@example.com" not in output

    def test_render_to_file_keeps_crlf(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Writing to a file keeps the exact payload bytes."""
        monkeypatch.chdir(tmp_path)
        target = tmp_path / "out.eml"

        result = runner.invoke(app, ["render", "--from", "foo@bar", "--boundary", "abc123", "--output", str(target)])

        assert result.exit_code == 0, result.output
        data = target.read_bytes()
        assert data.startswith(b"MIME-Version: 1.0\r\nFrom: foo@bar\r\nTo: \r\n")
        assert data.endswith(b"--mixed-abc123--")

    def test_render_missing_attachment_fails(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A missing attachment exits with code 1."""
        monkeypatch.chdir(tmp_path)
        missing = tmp_path / "missing.pdf"

        result = runner.invoke(app, ["render", "--from", "foo@bar", "--attach", str(missing)])

        assert result.exit_code == 1
        assert "--mixed-" not in result.output

    def test_render_unreadable_attachment_fails(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Read errors are reported like other mail errors, without a traceback."""
        monkeypatch.chdir(tmp_path)
        report = tmp_path / "report.txt"
        report.write_text("payload", encoding="utf-8")

        def deny(*_args: object, **_kwargs: object) -> None:
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr("mimecraft.content.open", deny, raising=False)
        result = runner.invoke(app, ["render", "--from", "foo@bar", "--attach", str(report)])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "--mixed-" not in result.output

    def test_render_subject_with_line_break_fails(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Header values with line breaks are refused."""
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["render", "--from", "foo@bar", "--subject", "Hi\r\nBcc: hidden@x"])

        assert result.exit_code == 1
        assert "Bcc: hidden@x" not in result.output

    def test_render_invalid_inline_spec(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Inline attachments must be given as CID=PATH."""
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["render", "--inline", "no-separator"])
        assert result.exit_code != 0

    def test_render_uses_configured_boundary_length(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Generated boundaries follow ``mail.boundary_length``."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "mimecraft.conf.yml").write_text("mail:\n  boundary_length: 12\n", encoding="utf-8")
        created: list[Message] = []
        original_init = Message.__init__

        def spy_init(self: Message, *args: Any, **kwargs: Any) -> None:
            original_init(self, *args, **kwargs)
            created.append(self)

        monkeypatch.setattr(Message, "__init__", spy_init)

        result = runner.invoke(app, ["render", "--from", "foo@bar"])

        assert result.exit_code == 0, result.output
        assert len(created[0].get_boundary()) == 12


class TestSend:
    """Tests for ``mimecraft send``."""

    @pytest.fixture(autouse=True)
    def _patch_transport(self, monkeypatch: pytest.MonkeyPatch) -> None:
        RecordingTransport.instances.clear()
        monkeypatch.setattr("mimecraft.cli.SMTPTransport", RecordingTransport)

    def test_send_uses_config(self, tmp_path: Path) -> None:
        """Send builds the transport from the config file and delivers."""
        config = tmp_path / "custom.yml"
        config.write_text("mail:\n  smtp:\n    host: smtp.example.com\n    port: 2525\n", encoding="utf-8")

        result = runner.invoke(
            app,
            [
                "send",
                "--config", str(config),
                "--from", "me@example.com",
                "--to", "you@example.com",
                "--bcc", "hidden@example.com",
                "--text", "Hello",
            ],
        )  # fmt: skip

        assert result.exit_code == 0, result.output
        [transport] = RecordingTransport.instances
        assert transport.host == "smtp.example.com"
        assert transport.port == 2525
        [message] = transport.sent
        assert message.get_envelope_recipients() == ["you@example.com", "hidden@example.com"]
        assert message.get_date() is not None
        assert "Sent to 2 recipient(s)" in result.output

    def test_send_reports_transport_errors(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Transport failures exit with code 1."""
        monkeypatch.chdir(tmp_path)

        def explode(self: RecordingTransport, message: Message) -> None:
            raise MailTransportError("connection refused")

        monkeypatch.setattr(RecordingTransport, "send", explode)

        result = runner.invoke(app, ["send", "--from", "me@example.com", "--to", "you@example.com"])

        assert result.exit_code == 1

    def test_send_missing_config_fails(self, tmp_path: Path) -> None:
        """An explicit missing config file exits with code 1."""
        result = runner.invoke(app, ["send", "--config", str(tmp_path / "nope.yml"), "--to", "you@example.com"])
        assert result.exit_code == 1

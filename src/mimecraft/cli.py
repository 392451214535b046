"""Command line interface for composing and sending messages.

Usage::

    mimecraft render --from me@example.com --to you@example.com --text "Hi"
    mimecraft send --config mimecraft.conf.yml --from me@example.com --to you@example.com --text "Hi"
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from mimecraft.config import get_mail_settings, load_config
from mimecraft.exceptions import MailError
from mimecraft.logging import TRACE_LEVEL, setup_logging
from mimecraft.message import Message, generate_boundary
from mimecraft.transports.smtp import SMTPTransport

console = Console()
err_console = Console(stderr=True)


app = typer.Typer(
    name="mimecraft",
    help="Compose MIME e-mail messages and send them over SMTP.",
    no_args_is_help=True,
)

FromOption = Annotated[Optional[str], typer.Option("--from", "-f", help="Sender address.")]
FromNameOption = Annotated[Optional[str], typer.Option("--from-name", help="Sender display name.")]
ToOption = Annotated[Optional[list[str]], typer.Option("--to", "-t", help="Recipient (repeatable).")]
CcOption = Annotated[Optional[list[str]], typer.Option("--cc", help="Carbon copy recipient (repeatable).")]
BccOption = Annotated[Optional[list[str]], typer.Option("--bcc", help="Blind copy recipient (repeatable).")]
ReplyToOption = Annotated[Optional[list[str]], typer.Option("--reply-to", help="Reply-To address (repeatable).")]
SubjectOption = Annotated[Optional[str], typer.Option("--subject", "-s", help="Subject line.")]
TextOption = Annotated[Optional[str], typer.Option("--text", help="Plain text body.")]
HtmlOption = Annotated[Optional[str], typer.Option("--html", help="HTML body.")]
AttachOption = Annotated[Optional[list[Path]], typer.Option("--attach", "-a", help="File attachment (repeatable).")]
InlineOption = Annotated[
    Optional[list[str]],
    typer.Option("--inline", help="Inline attachment as CID=PATH (repeatable)."),
]
BoundaryOption = Annotated[Optional[str], typer.Option("--boundary", help="Explicit MIME boundary.")]
PriorityOption = Annotated[Optional[int], typer.Option("--priority", min=1, max=5, help="X-Priority (1-5).")]
DateOption = Annotated[bool, typer.Option("--date/--no-date", help="Add a Date header.")]
ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Configuration file.")]


@app.callback()
def main(
    verbose: Annotated[int, typer.Option("--verbose", "-v", count=True, help="-v for DEBUG, -vv for TRACE.")] = 0,
) -> None:
    """Compose MIME e-mail messages and send them over SMTP."""
    if verbose:
        setup_logging(TRACE_LEVEL if verbose > 1 else logging.DEBUG, console=err_console)


def _split_inline(spec: str) -> tuple[str, str]:
    """Split a ``CID=PATH`` option value."""
    content_id, sep, path = spec.partition("=")
    if not sep or not content_id or not path:
        raise typer.BadParameter(f"Expected CID=PATH, got {spec!r}", param_hint="--inline")
    return content_id, path


def _compose(
    message: Message,
    *,
    sender: str | None,
    sender_name: str | None,
    to: list[str] | None,
    cc: list[str] | None,
    bcc: list[str] | None,
    reply_to: list[str] | None,
    subject: str | None,
    text: str | None,
    html_body: str | None,
    attachments: list[Path] | None,
    inline: list[str] | None,
    priority: int | None,
    date: bool,
) -> Message:
    """Apply command line options to ``message``."""
    if sender:
        message.set_from(sender, sender_name)
    for email in to or []:
        message.add_to(email)
    for email in cc or []:
        message.add_cc(email)
    for email in bcc or []:
        message.add_bcc(email)
    for email in reply_to or []:
        message.add_reply_to(email)
    if subject is not None:
        message.set_subject(subject)
    if text is not None:
        message.set_plain_message(text)
    if html_body is not None:
        message.set_html_message(html_body)
    for path in attachments or []:
        message.add_attachment(path)
    for spec in inline or []:
        content_id, path = _split_inline(spec)
        message.set_inline_attachment(path, content_id)
    if priority is not None:
        message.set_priority(priority)
    if date:
        message.set_date()
    return message


@app.command()
def render(
    sender: FromOption = None,
    sender_name: FromNameOption = None,
    to: ToOption = None,
    cc: CcOption = None,
    bcc: BccOption = None,
    reply_to: ReplyToOption = None,
    subject: SubjectOption = None,
    text: TextOption = None,
    html_body: HtmlOption = None,
    attachments: AttachOption = None,
    inline: InlineOption = None,
    boundary: BoundaryOption = None,
    priority: PriorityOption = None,
    date: DateOption = False,
    config_path: ConfigOption = None,
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Write the payload to a file.")] = None,
) -> None:
    """Render a message and print the SMTP DATA payload."""
    try:
        settings = get_mail_settings(load_config(config_path))
        message = Message(
            boundary=boundary or generate_boundary(settings.boundary_length),
            charset=settings.charset,
        )
        _compose(
            message,
            sender=sender,
            sender_name=sender_name,
            to=to,
            cc=cc,
            bcc=bcc,
            reply_to=reply_to,
            subject=subject,
            text=text,
            html_body=html_body,
            attachments=attachments,
            inline=inline,
            priority=priority,
            date=date,
        )
        payload = message.render_data()
    except MailError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(code=1) from e

    if output is not None:
        output.write_bytes(payload.encode(settings.charset))
        err_console.print(f"[green]Wrote[/] {len(payload)} characters to {output}")
    else:
        # Rich strips carriage returns, the payload must keep its CRLF line ends.
        typer.echo(payload)


@app.command()
def send(
    sender: FromOption = None,
    sender_name: FromNameOption = None,
    to: ToOption = None,
    cc: CcOption = None,
    bcc: BccOption = None,
    reply_to: ReplyToOption = None,
    subject: SubjectOption = None,
    text: TextOption = None,
    html_body: HtmlOption = None,
    attachments: AttachOption = None,
    inline: InlineOption = None,
    boundary: BoundaryOption = None,
    priority: PriorityOption = None,
    date: DateOption = True,
    config_path: ConfigOption = None,
) -> None:
    """Compose a message and deliver it with the configured SMTP server."""
    try:
        config = load_config(config_path)
        settings = get_mail_settings(config)
        transport = SMTPTransport.from_config(config.mail.smtp)
        message = Message(
            transport,
            boundary or generate_boundary(settings.boundary_length),
            charset=settings.charset,
        )
        _compose(
            message,
            sender=sender,
            sender_name=sender_name,
            to=to,
            cc=cc,
            bcc=bcc,
            reply_to=reply_to,
            subject=subject,
            text=text,
            html_body=html_body,
            attachments=attachments,
            inline=inline,
            priority=priority,
            date=date,
        )
        message.send()
    except MailError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(code=1) from e

    recipients = message.get_envelope_recipients()
    console.print(f"[green]Sent[/] to {len(recipients)} recipient(s) via {transport.host}:{transport.port}")


__all__ = ["app"]

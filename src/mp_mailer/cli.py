"""Command-line mailer: read a plain-text body from stdin, compose and send it."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Callable, Mapping, Sequence, TextIO

from mp_mailer.application.email import MailMessage, SmtpTransport, Transport, deliver
from mp_mailer.config.settings import DotenvSettingsLoader, MailSettings
from mp_mailer.kernel.errors import BaseError, ValidationError
from mp_mailer.observability.logging import DEFAULT_SENSITIVE_FIELDS, JsonLoggerFactory, get_logger

DEFAULT_ENV_FILE = "mail.env"

_log = get_logger(__name__)


## Parser


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser; ``-h`` adds a header, so help is ``--help`` only."""

    parser = argparse.ArgumentParser(
        prog="mp-mailer",
        add_help=False,
        description="Compose a MIME message whose plain-text body is read from stdin and send it",
    )
    parser.add_argument("--help", action="help", help="Show this help message and exit")
    parser.add_argument(
        "-a", dest="attachments", metavar="FILE", type=Path, action="append", default=[],
        help="Attach a file to the message",
    )
    parser.add_argument(
        "-b", dest="bcc", metavar="ADDRESS", action="append", default=[],
        help="Add a blind carbon-copy (Bcc) address",
    )
    parser.add_argument(
        "-c", dest="cc", metavar="ADDRESS", action="append", default=[],
        help="Add a carbon-copy (Cc) address",
    )
    parser.add_argument(
        "-e", dest="embedded", nargs=3, metavar=("FILE", "CONTENT_TYPE", "CONTENT_ID"),
        action="append", default=[],
        help="Embed a file for the HTML body, referenced as cid:CONTENT_ID",
    )
    parser.add_argument("-f", dest="sender", metavar="ADDRESS", help="Set the From address")
    parser.add_argument(
        "-h", dest="headers", metavar="NAME:VALUE", action="append", default=[],
        help="Add a header in the form name:value",
    )
    parser.add_argument(
        "-H", dest="html", metavar="FILE", type=Path,
        help="Read the HTML part of the message from a file",
    )
    parser.add_argument(
        "-p", dest="settings_file", metavar="FILE", type=Path,
        help=f"Read MAIL_* settings from an env file (default: {DEFAULT_ENV_FILE} if present)",
    )
    parser.add_argument("-s", dest="subject", metavar="SUBJECT", help="The subject of the message")
    parser.add_argument(
        "--print", dest="print_document", action="store_true",
        help="Write the composed message to stdout before sending",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Write the composed message to stdout and do not send it",
    )
    parser.add_argument(
        "--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for the JSON log written to stderr (default: WARNING)",
    )
    parser.add_argument("recipients", metavar="ADDRESS", nargs="+", help="To addresses")
    return parser


## Helpers


def load_settings(settings_file: Path | None) -> MailSettings:
    """Settings from *settings_file* (which must exist) or from the default env file if present."""
    if settings_file is not None:
        return DotenvSettingsLoader(settings_file, required=True).load(MailSettings)
    return DotenvSettingsLoader(DEFAULT_ENV_FILE).load(MailSettings)


def split_header(argument: str) -> tuple[str, str]:
    name, sep, value = argument.partition(":")
    if not sep or not name:
        raise ValidationError(f"Bad header: {argument}")
    return name.strip(), value.strip()


def build_message(
    args: argparse.Namespace,
    body: str,
    settings: MailSettings,
    environ: Mapping[str, str],
) -> MailMessage:
    """Turn parsed arguments, the stdin body and settings into a :class:`MailMessage`."""

    message = MailMessage()
    for path in args.attachments:
        message.attach_file(path)
    for address in args.bcc:
        message.add_bcc(address)
    for address in args.cc:
        message.add_cc(address)
    for filename, content_type, content_id in args.embedded:
        message.embed_html_file(
            filename,
            name=filename,
            content_type=content_type,
            content_id=content_id,
        )
    if args.sender:
        message.set_from(args.sender)
    for header in args.headers:
        message.add_header(*split_header(header))
    if args.subject is not None:
        message.set_subject(args.subject)
    if args.html is not None:
        try:
            message.set_html_text(args.html.read_text())
        except OSError as exc:
            raise ValidationError(f"Cannot read HTML file '{args.html}'", cause=exc) from exc
    for address in args.recipients:
        message.add_to(address)

    message.set_plain_text(body)

    if settings.x_mailer:
        message.add_header("X-Mailer", settings.x_mailer)
    reply_to = environ.get("REPLYTO") or settings.reply_to
    if reply_to:
        message.set_reply_to(reply_to)
    return message


## Entry point


def main(
    argv: Sequence[str] | None = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
    environ: Mapping[str, str] | None = None,
    transport_factory: Callable[[MailSettings], Transport] = SmtpTransport.from_settings,
) -> int:
    """Run the mailer; returns the process exit status."""

    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    environ = os.environ if environ is None else environ

    try:
        args = build_parser().parse_args(argv)
    except SystemExit as exc:
        # argparse exits 2 on usage errors; the mailer reports every error as 1.
        return 0 if exc.code == 0 else 1
    JsonLoggerFactory.configure(
        level=getattr(logging, args.log_level),
        sensitive_fields=DEFAULT_SENSITIVE_FIELDS,
        stream=stderr,
    )

    try:
        settings = load_settings(args.settings_file)
        message = build_message(args, stdin.read(), settings, environ)

        if args.print_document or args.dry_run:
            stdout.write(message.build_document().as_string())
            stdout.write("\n")
        if args.dry_run:
            return 0

        asyncio.run(deliver(message, transport_factory(settings)))
    except BaseError as exc:
        _log.error("mailer.failed", code=exc.code, error=exc.message)
        print(f"mp-mailer: {exc.message}", file=stderr)
        return 1
    return 0


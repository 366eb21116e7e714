"""
Command-line interface for building and inspecting MIME messages.

Usage:
    # Envelope headers as JSON
    python -m eml_mime.cli.eml headers message.eml

    # List attachments (name, type, size, md5)
    python -m eml_mime.cli.eml attachments message.eml --format json

    # Save one attachment
    python -m eml_mime.cli.eml extract message.eml report.pdf ./report.pdf

    # Compose a message with an attachment
    python -m eml_mime.cli.eml compose --to bob@example.com --subject Hi \\
        --text body.txt --attach report.pdf > out.eml
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from eml_mime.attachment import summarize_attachment
from eml_mime.building import alternatives, create_envelope, create_related, of_file, text
from eml_mime.exceptions import EmlMimeError
from eml_mime.logging_config import setup_logging
from eml_mime.models.email import Email
from eml_mime.parsing import (
    all_attachments,
    all_related_parts,
    alternative_parts,
    content_type,
    extract_envelope,
    find_attachment,
    find_related,
    inline_parts,
    parse_eml_file,
)
from eml_mime.parsing.mime_utils import MULTIPART_ALTERNATIVE, is_content_type
from eml_mime import payload
from eml_mime.version import __version__

logger = structlog.get_logger(__name__)


# ============================================================================
# COMMANDS
# ============================================================================


def cmd_headers(args: argparse.Namespace) -> int:
    email = parse_eml_file(args.input)
    print(extract_envelope(email).model_dump_json(indent=2))
    return 0


def cmd_attachments(args: argparse.Namespace) -> int:
    email = parse_eml_file(args.input)
    summaries = [summarize_attachment(a) for a in all_attachments(email)]
    logger.info("attachments_listed", path=args.input, count=len(summaries))

    if args.format == "json":
        print(json.dumps([s.model_dump() for s in summaries], ensure_ascii=False, indent=2))
    elif args.format == "jsonl":
        for summary in summaries:
            print(summary.model_dump_json())
    else:
        for summary in summaries:
            size = summary.size_bytes if summary.size_bytes is not None else "?"
            print(f"{summary.filename}\t{summary.content_type}\t{size}\t{summary.md5 or summary.error}")
    return 0


def cmd_extract(args: argparse.Namespace) -> int:
    email = parse_eml_file(args.input)
    attachment = find_attachment(email, args.name)
    if attachment is None:
        print(f"Error: No attachment named {args.name!r}", file=sys.stderr)
        return 1
    asyncio.run(attachment.to_file(args.dest))
    return 0


def cmd_inline(args: argparse.Namespace) -> int:
    email = parse_eml_file(args.input)
    for index, part in enumerate(inline_parts(email)):
        if is_content_type(part, MULTIPART_ALTERNATIVE):
            choices = ", ".join(content_type(alt) for alt in alternative_parts(part))
            print(f"{index}\t{MULTIPART_ALTERNATIVE}\t[{choices}]")
        else:
            print(f"{index}\t{content_type(part)}")
    return 0


def cmd_related(args: argparse.Namespace) -> int:
    email = parse_eml_file(args.input)
    if args.cid is None:
        for cid, part in all_related_parts(email):
            print(f"{cid}\t{content_type(part)}")
        return 0

    part = find_related(email, args.cid)
    if part is None:
        print(f"Error: No part with Content-Id {args.cid!r}", file=sys.stderr)
        return 1
    if args.output:
        asyncio.run(payload.to_file(part, args.output))
    else:
        sys.stdout.buffer.write(payload.decoded_content(part))
    return 0


async def _compose(args: argparse.Namespace) -> Email:
    bodies: List[Email] = []
    if args.text:
        bodies.append(await of_file(args.text, content_type="text/plain; charset=utf-8"))
    if args.html:
        bodies.append(await of_file(args.html, content_type="text/html; charset=utf-8"))
    if not bodies:
        bodies.append(text(""))
    body = alternatives(bodies)

    if args.related:
        resources = [(Path(path).name, await of_file(path)) for path in args.related]
        body = create_related(body, resources)

    attachments = [(Path(path).name, await of_file(path)) for path in args.attach or []]
    return create_envelope(
        body,
        to=args.to,
        cc=args.cc,
        from_=args.from_,
        subject=args.subject,
        auto_generated=args.auto_generated,
        attachments=attachments,
    )


def cmd_compose(args: argparse.Namespace) -> int:
    email = asyncio.run(_compose(args))
    data = email.to_bytes()
    if args.output:
        Path(args.output).write_bytes(data)
        logger.info("message_written", path=args.output, bytes=len(data))
    else:
        sys.stdout.buffer.write(data)
    return 0


# ============================================================================
# MAIN CLI
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eml-mime",
        description="Build and decompose MIME email messages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("headers", help="Print envelope headers as JSON")
    p.add_argument("input", help="Path to .eml file")
    p.set_defaults(func=cmd_headers)

    p = sub.add_parser("attachments", help="List attachments")
    p.add_argument("input", help="Path to .eml file")
    p.add_argument(
        "--format", "-f", choices=["text", "json", "jsonl"], default="text",
        help="Output format (default: text)",
    )
    p.set_defaults(func=cmd_attachments)

    p = sub.add_parser("extract", help="Save an attachment to disk")
    p.add_argument("input", help="Path to .eml file")
    p.add_argument("name", help="Attachment filename")
    p.add_argument("dest", help="Destination path")
    p.set_defaults(func=cmd_extract)

    p = sub.add_parser("inline", help="List inline parts")
    p.add_argument("input", help="Path to .eml file")
    p.set_defaults(func=cmd_inline)

    p = sub.add_parser("related", help="List related parts or extract one by Content-Id")
    p.add_argument("input", help="Path to .eml file")
    p.add_argument("cid", nargs="?", default=None, help="Content-Id to extract")
    p.add_argument("--output", "-o", default=None, help="Write the part here instead of stdout")
    p.set_defaults(func=cmd_related)

    p = sub.add_parser("compose", help="Compose a message and write it out")
    p.add_argument("--to", action="append", required=True, help="Recipient (repeatable)")
    p.add_argument("--cc", action="append", default=None, help="Cc recipient (repeatable)")
    p.add_argument("--from", dest="from_", default=None, help="Sender address")
    p.add_argument("--subject", "-s", required=True, help="Subject line")
    p.add_argument("--text", default=None, help="File with the plain-text body")
    p.add_argument("--html", default=None, help="File with the HTML body")
    p.add_argument("--related", action="append", default=None,
                   help="Resource referenced from the HTML by cid:<filename> (repeatable)")
    p.add_argument("--attach", action="append", default=None, help="File to attach (repeatable)")
    p.add_argument("--auto-generated", action="store_true", help="Mark as auto-generated bulk mail")
    p.add_argument("--output", "-o", default=None, help="Output path (default: stdout)")
    p.set_defaults(func=cmd_compose)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    setup_logging()
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (EmlMimeError, OSError) as e:
        logger.error("cli_failed", command=args.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

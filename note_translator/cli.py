"""
Note Translator — Command Line
================================

Usage:
    note-translator serve [--host HOST] [--port PORT]
    note-translator transcribe IMAGE... [--server URL] [--output PATH]

`transcribe` drives a ReviewSession against a running server and writes
the "copy all" export (notes separated by ---) to stdout or a file.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from note_translator.config import settings
from note_translator.client.api_client import TranscriptionClient
from note_translator.client.session import ReviewSession, load_image_file

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="note-translator")
    sub = p.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the transcription API server")
    serve.add_argument("--host", default=settings.backend_host)
    serve.add_argument("--port", type=int, default=settings.backend_port)

    tr = sub.add_parser("transcribe", help="Transcribe handwritten note images")
    tr.add_argument("images", nargs="+", help="Image files to transcribe, in order")
    tr.add_argument(
        "--server",
        default=f"http://localhost:{settings.backend_port}",
        help="Base URL of a running note-translator server",
    )
    tr.add_argument("--output", default=None, help="Write notes here instead of stdout")

    return p


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("note_translator.main:app", host=args.host, port=args.port)
    return 0


async def _transcribe(args: argparse.Namespace) -> int:
    session = ReviewSession()

    files = []
    for raw in args.images:
        path = Path(raw)
        if not path.is_file():
            print(f"skipping {raw}: not a file", file=sys.stderr)
            continue
        files.append(await load_image_file(path))

    for f in files:
        if not f.media_type.startswith("image/"):
            print(f"skipping {f.filename}: not an image", file=sys.stderr)

    session.add_images(files)
    if session.error:
        print(session.error, file=sys.stderr)
        return 2

    print(session.processing_label, file=sys.stderr)
    if not await session.submit(TranscriptionClient(base_url=args.server)):
        print(session.error, file=sys.stderr)
        return 1

    for index, note in enumerate(session.notes):
        print(f"[{index + 1}] {session.source_name(index)}: {note.title}", file=sys.stderr)

    text = session.copy_all()
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {len(session.notes)} note(s) to {args.output}", file=sys.stderr)
    else:
        print(text)
    return 0


def cmd_transcribe(args: argparse.Namespace) -> int:
    return asyncio.run(_transcribe(args))


def main(argv: list[str] | None = None) -> int:
    from note_translator.main import setup_logging

    setup_logging(sys.stderr)
    args = build_parser().parse_args(argv)
    if args.command == "serve":
        return cmd_serve(args)
    if args.command == "transcribe":
        return cmd_transcribe(args)
    raise AssertionError(f"unhandled command {args.command}")

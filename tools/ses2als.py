#!/usr/bin/env python3
"""Convert a .ses session into an Ableton Live set.

Examples
--------
    python tools/ses2als.py song.ses --templates templates/ > song.xml
    python tools/ses2als.py song.ses --options export.json -o song.als

Output ending in ``.als`` is gzip-compressed, as Live stores its sets.
"""

from __future__ import annotations

import argparse
import gzip
import logging
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ses.ableton import load_templates, session_to_ableton  # noqa: E402
from ses.container import load_session  # noqa: E402
from ses.export_options import ExportOptions, load_export_options  # noqa: E402


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert a Cool Edit Pro session into an Ableton Live set",
    )
    parser.add_argument("session", type=Path, help="Path to a .ses file")
    parser.add_argument(
        "--templates",
        type=Path,
        default=None,
        help="Directory holding Ableton.xml, AudioTrack.xml and AudioClip.xml "
        "(overrides options.template_dir)",
    )
    parser.add_argument(
        "--options",
        type=Path,
        default=None,
        help="JSON export options file",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output path (default: stdout)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log decoding and template substitution",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        options = (
            load_export_options(args.options)
            if args.options is not None
            else ExportOptions()
        )
        if args.templates is not None:
            options = options.with_template_dir(args.templates)
        if options.template_dir is None:
            parser.error("template directory required: pass --templates or set options.template_dir")

        templates = load_templates(options.template_dir)
        session = load_session(args.session)
        xml = session_to_ableton(session, templates, options)
    except (OSError, ValueError) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1

    if args.output is None:
        sys.stdout.write(xml + "\n")
    elif args.output.suffix.lower() == ".als":
        args.output.write_bytes(gzip.compress(xml.encode("utf-8")))
    else:
        args.output.write_text(xml, encoding="utf-8")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

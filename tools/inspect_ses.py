#!/usr/bin/env python3
"""Human-readable .ses session inspector.

Prints every chunk (nested ones indented) with its offset and length, then
one row per wave block with its timeline position in seconds, beats and
ticks.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ses.container import list_chunks, parse_session  # noqa: E402
from ses.model import Session  # noqa: E402
from ses.timeline import samples_to_beats, samples_to_seconds, samples_to_ticks  # noqa: E402


def fmt_table(header: List[str], rows: List[List[str]]) -> List[str]:
    widths = [
        max(len(row[i]) for row in ([header] + rows))
        for i in range(len(header))
    ]

    def fmt_row(row: List[str]) -> str:
        return "  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip()

    lines = [fmt_row(header), "  ".join("-" * w for w in widths)]
    lines.extend(fmt_row(row) for row in rows)
    return lines


def chunk_rows(data: bytes) -> List[List[str]]:
    rows = []
    for chunk in list_chunks(data):
        tag = ("  " * chunk.depth) + repr(chunk.tag)
        if chunk.wrapped:
            tag += " (LIST)"
        rows.append(
            [
                tag,
                f"0x{chunk.offset:08X}",
                str(chunk.length),
                f"0x{chunk.payload_end:08X}",
            ]
        )
    return rows


def block_rows(session: Session) -> List[List[str]]:
    rows = []
    for block in session.blocks:
        wave = session.wave_for(block)
        track = session.track_for(block)
        if session.sample_rate and session.tempo is not None:
            seconds = f"{samples_to_seconds(session, block.offset_samples):.3f}"
            beats = f"{samples_to_beats(session, block.offset_samples):.3f}"
            ticks = str(samples_to_ticks(session, block.offset_samples))
        else:
            seconds = beats = ticks = "?"
        rows.append(
            [
                str(block.id),
                f"{block.track_id} {track.title!r}" if track else f"{block.track_id} ?",
                wave.basename if wave else f"<missing {block.wave_id}>",
                str(block.offset_samples),
                str(block.size_samples),
                seconds,
                beats,
                ticks,
            ]
        )
    return rows


def render_report(data: bytes) -> str:
    session = parse_session(data)
    lines = []
    lines.append(f"sample rate: {session.sample_rate}")
    lines.append(f"filename:    {session.filename!r}")
    if session.tempo is not None:
        tempo = session.tempo
        lines.append(
            f"tempo:       {tempo.beats_per_minute:g} bpm, "
            f"{tempo.beats_per_bar} beats/bar, {tempo.ticks_per_beat} ticks/beat"
        )
    else:
        lines.append("tempo:       (none)")
    lines.append("")
    lines.extend(fmt_table(["Chunk", "Offset", "Length", "End"], chunk_rows(data)))
    lines.append("")
    track_rows = [
        [
            str(i + 1),
            repr(t.title),
            f"{t.left_volume:.3f}",
            f"{t.right_volume:.3f}",
            "yes" if t.mute else "",
        ]
        for i, t in enumerate(session.tracks)
    ]
    lines.extend(fmt_table(["Track", "Title", "Left", "Right", "Mute"], track_rows))
    lines.append("")
    lines.extend(
        fmt_table(
            ["Block", "Track", "Wave", "Offset", "Size", "Start s", "Start beat", "Start tick"],
            block_rows(session),
        )
    )
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", type=Path, help="Path to a .ses file")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every chunk and record while decoding",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        report = render_report(args.path.read_bytes())
    except (OSError, ValueError) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1

    print(report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

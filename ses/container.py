from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from .chunks import ChunkHeader, read_chunk
from .cursor import ByteCursor
from .errors import MalformedHeader
from .model import Session, SessionBuilder


logger = logging.getLogger(__name__)

MAGIC = b"COOLNESS"  # u64 0x5353454E4C4F4F43, little-endian
PREAMBLE_SIZE = len(MAGIC) + 4  # signature + u32 length


def _open_container(data: bytes) -> ByteCursor:
    """Validate the signature and top-level length; return a cursor on the first chunk."""

    if len(data) < len(MAGIC) or data[: len(MAGIC)] != MAGIC:
        raise MalformedHeader(f"bad magic: {data[:len(MAGIC)].hex()}", offset=0)
    if len(data) < PREAMBLE_SIZE:
        raise MalformedHeader(
            f"file too short for length field ({len(data)} bytes, need {PREAMBLE_SIZE})",
            offset=len(MAGIC),
        )

    cursor = ByteCursor(data)
    cursor.skip(len(MAGIC))
    declared = cursor.read_u32()
    logger.debug("file length: %d", declared)
    if len(data) != declared + PREAMBLE_SIZE:
        raise MalformedHeader(
            f"declared length {declared} + {PREAMBLE_SIZE} does not match "
            f"file size {len(data)}",
            offset=len(MAGIC),
        )
    return cursor


def parse_session(data: bytes) -> Session:
    """Decode a complete session file held in memory."""

    cursor = _open_container(data)
    builder = SessionBuilder()
    while not cursor.at_end:
        read_chunk(cursor, builder)
    session = builder.build()
    logger.debug(
        "decoded session: %d tracks, %d waves, %d blocks",
        len(session.tracks),
        len(session.waves),
        len(session.blocks),
    )
    return session


def load_session(path: Path | str) -> Session:
    """Read a ``.ses`` file from disk and decode it."""

    return parse_session(Path(path).read_bytes())


def list_chunks(data: bytes) -> List[ChunkHeader]:
    """Decode ``data`` and return the header of every chunk, nested ones included."""

    cursor = _open_container(data)
    builder = SessionBuilder()
    headers: List[ChunkHeader] = []
    while not cursor.at_end:
        read_chunk(cursor, builder, on_chunk=headers.append)
    return headers

"""Chunk walker for the session container.

Every chunk is ``[tag:4] [length:u32 LE] [payload:length]``.  A ``LIST``
chunk carries a second tag before its length naming the wrapped type, which
is always ``FILE``:

  LIST FILE [length] wav  [length] ... wav  [length] ... blk  [length] ...

The ``FILE`` container is unpacked by reading children until one that is not
a ``wav `` chunk, or until the container's declared end; that terminating
child is decoded normally.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .cursor import ByteCursor
from .errors import ChunkLengthMismatch, MalformedChunk, TruncatedInput
from .model import SessionBuilder
from .records import BlockRecord, FileHeaderRecord, TempoRecord, TrackRecord, WaveRecord


logger = logging.getLogger(__name__)

LIST_TAG = "LIST"
FILE_TAG = "FILE"
HEADER_TAG = "hdr "
TEMPO_TAG = "tmpo"
TRACKS_TAG = "trks"
WAVE_TAG = "wav "
BLOCKS_TAG = "blk "

MAX_NESTING_DEPTH = 8


@dataclass(frozen=True)
class ChunkHeader:
    tag: str  # effective tag (the inner tag for LIST-wrapped chunks)
    offset: int  # position of the first tag byte
    length: int
    payload_start: int
    wrapped: bool = False
    depth: int = 0

    @property
    def payload_end(self) -> int:
        return self.payload_start + self.length


def read_chunk_header(cursor: ByteCursor, *, depth: int = 0) -> ChunkHeader:
    offset = cursor.position
    tag = cursor.read_tag()
    wrapped = False
    if tag == LIST_TAG:
        inner = cursor.read_tag()
        if inner != FILE_TAG:
            raise MalformedChunk(
                f"expected {FILE_TAG!r} inside {LIST_TAG!r}, got {inner!r}",
                offset=offset + 4,
            )
        tag = inner
        wrapped = True
    length = cursor.read_u32()
    return ChunkHeader(
        tag=tag,
        offset=offset,
        length=length,
        payload_start=cursor.position,
        wrapped=wrapped,
        depth=depth,
    )


def _read_count(cursor: ByteCursor, what: str) -> int:
    count = cursor.read_u32()
    logger.debug("%s count: %d", what, count)
    return count


def read_chunk(
    cursor: ByteCursor,
    builder: SessionBuilder,
    *,
    depth: int = 0,
    on_chunk: Optional[Callable[[ChunkHeader], None]] = None,
) -> ChunkHeader:
    """Decode one chunk at the cursor into ``builder``.

    Parameters
    ----------
    cursor : ByteCursor
        Positioned on the first byte of a chunk tag.
    builder : SessionBuilder
        Receives every decoded record.
    depth : int
        Nesting level; children of a ``FILE`` container are read at
        ``depth + 1``.
    on_chunk : callable, optional
        Called with each :class:`ChunkHeader` (nested ones included) before
        its payload is decoded.

    Returns
    -------
    ChunkHeader
        Header of the chunk that was consumed.
    """
    if depth > MAX_NESTING_DEPTH:
        raise MalformedChunk(
            f"chunks nested deeper than {MAX_NESTING_DEPTH} levels",
            offset=cursor.position,
        )

    header = read_chunk_header(cursor, depth=depth)
    logger.debug(
        "%schunk %r at 0x%X, length %d",
        "  " * depth,
        header.tag,
        header.offset,
        header.length,
    )
    if on_chunk is not None:
        on_chunk(header)

    tag = header.tag
    if header.length > cursor.remaining:
        raise TruncatedInput(
            f"chunk {tag!r} declares {header.length} bytes, only {cursor.remaining} remain",
            offset=header.offset,
        )
    if header.length == 0 and tag not in (FILE_TAG, WAVE_TAG):
        logger.debug("empty chunk %r", tag)
        return header

    if tag == HEADER_TAG:
        record = FileHeaderRecord.from_cursor(cursor)
        logger.debug("%r", record)
        builder.set_header(record)
    elif tag == TEMPO_TAG:
        record = TempoRecord.from_cursor(cursor)
        logger.debug("%r", record)
        builder.set_tempo(record)
    elif tag == TRACKS_TAG:
        for _ in range(_read_count(cursor, "track")):
            record = TrackRecord.from_cursor(cursor)
            logger.debug("%r", record)
            builder.add_track(record)
    elif tag == FILE_TAG:
        # A wave run that reaches the end of the buffer fails on the next tag.
        while True:
            child = read_chunk(cursor, builder, depth=depth + 1, on_chunk=on_chunk)
            if child.tag != WAVE_TAG or cursor.position == header.payload_end:
                break
        # The run may end with a sibling chunk, so the container's own length
        # is not checked here; each child was checked against its own.
        return header
    elif tag == WAVE_TAG:
        record = WaveRecord.from_cursor(cursor, header.length)
        logger.debug("%r", record)
        builder.add_wave(record)
    elif tag == BLOCKS_TAG:
        for _ in range(_read_count(cursor, "block")):
            record = BlockRecord.from_cursor(cursor)
            logger.debug("%r", record)
            builder.add_block(record)
    else:
        logger.debug("skipping unknown chunk %r (%d bytes)", tag, header.length)
        cursor.skip(header.length)

    if cursor.position != header.payload_end:
        raise ChunkLengthMismatch(
            f"chunk {tag!r} declared {header.length} bytes but "
            f"{cursor.position - header.payload_start} were decoded",
            offset=header.offset,
        )
    return header

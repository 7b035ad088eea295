"""Binary record layouts found inside session chunks.

All records are packed little-endian with no alignment padding.  Sizes:

  hdr   FileHeaderRecord   344 bytes
  tmpo  TempoRecord         32 bytes
  trks  TrackRecord         96 bytes  (after a u32 count)
  blk   BlockRecord         88 bytes  (after a u32 count)
  wav   WaveRecord          variable  (16 bytes + filename)

Fields whose purpose is unknown are kept as decoded so that a record holds
everything that was in the file.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Tuple

from .cursor import ByteCursor, decode_fixed_text
from .errors import MalformedChunk


HEADER_FILENAME_SIZE = 256
TRACK_TITLE_SIZE = 36
MUTE_FLAG = 0x01
WAVE_MARKER = 19  # Observed in every wave record; meaning unknown


@dataclass(frozen=True)
class FileHeaderRecord:
    LAYOUT = struct.Struct("<IIIHHddIII256s44s")

    sample_rate: int
    samples_in_session: int
    wave_block_count: int
    bits_per_sample: int
    channels: int
    master_volume_left: float
    master_volume_right: float
    time_offset_samples: int
    save_associated_files_separately: bool
    private: bool
    filename_raw: bytes
    unknown: bytes

    @classmethod
    def from_cursor(cls, cursor: ByteCursor) -> "FileHeaderRecord":
        (
            sample_rate,
            samples_in_session,
            wave_block_count,
            bits_per_sample,
            channels,
            master_left,
            master_right,
            time_offset,
            save_separately,
            private,
            filename_raw,
            unknown,
        ) = cursor.unpack(cls.LAYOUT)
        return cls(
            sample_rate=sample_rate,
            samples_in_session=samples_in_session,
            wave_block_count=wave_block_count,
            bits_per_sample=bits_per_sample,
            channels=channels,
            master_volume_left=master_left,
            master_volume_right=master_right,
            time_offset_samples=time_offset,
            save_associated_files_separately=bool(save_separately),
            private=bool(private),
            filename_raw=filename_raw,
            unknown=unknown,
        )

    @property
    def filename(self) -> str:
        return decode_fixed_text(self.filename_raw)


@dataclass(frozen=True)
class TempoRecord:
    LAYOUT = struct.Struct("<dIId8s")

    beats_per_minute: float
    beats_per_bar: int
    ticks_per_beat: int
    beat_offset_ms: float
    unknown: bytes

    @classmethod
    def from_cursor(cls, cursor: ByteCursor) -> "TempoRecord":
        bpm, beats_per_bar, ticks_per_beat, beat_offset_ms, unknown = cursor.unpack(
            cls.LAYOUT
        )
        return cls(
            beats_per_minute=bpm,
            beats_per_bar=beats_per_bar,
            ticks_per_beat=ticks_per_beat,
            beat_offset_ms=beat_offset_ms,
            unknown=unknown,
        )


@dataclass(frozen=True)
class TrackRecord:
    LAYOUT = struct.Struct("<ddI36s40s")

    left_volume: float
    right_volume: float
    flags: int
    title_raw: bytes
    unknown: bytes

    @classmethod
    def from_cursor(cls, cursor: ByteCursor) -> "TrackRecord":
        left, right, flags, title_raw, unknown = cursor.unpack(cls.LAYOUT)
        return cls(
            left_volume=left,
            right_volume=right,
            flags=flags,
            title_raw=title_raw,
            unknown=unknown,
        )

    @property
    def title(self) -> str:
        return decode_fixed_text(self.title_raw)

    @property
    def mute(self) -> bool:
        return bool(self.flags & MUTE_FLAG)


@dataclass(frozen=True)
class BlockRecord:
    """One wave block placed on a track.

    The four u32 fields after ``wave_offset_samples`` track punch-in edit
    history.  They are decoded but nothing in the model depends on them.
    """

    LAYOUT = struct.Struct("<dddd14I")

    left_volume: float
    right_volume: float
    unknown1: float
    unknown2: float
    offset_samples: int
    size_samples: int
    id: int
    flags: int
    wave_id: int
    track_id: int
    parent_group: int
    unused: int
    wave_offset_samples: int
    punch_generation: int
    previous_punch: int
    next_punch: int
    original_index: int
    unknown: int

    @classmethod
    def from_cursor(cls, cursor: ByteCursor) -> "BlockRecord":
        return cls(*cursor.unpack(cls.LAYOUT))


@dataclass(frozen=True)
class WaveRecord:
    """Reference to an external audio file.

    The filename has no length prefix; its size is whatever the enclosing
    chunk leaves after the four u32 fields (id, marker, two trailing words).
    """

    FIXED_SIZE = 4 * 4

    id: int
    marker: int
    filename_raw: bytes
    unknown: Tuple[int, int]

    @classmethod
    def from_cursor(cls, cursor: ByteCursor, length: int) -> "WaveRecord":
        if length < cls.FIXED_SIZE:
            raise MalformedChunk(
                f"wave chunk too short ({length} bytes, need at least {cls.FIXED_SIZE})",
                offset=cursor.position,
            )
        wave_id = cursor.read_u32()
        marker = cursor.read_u32()
        filename_raw = cursor.read_fixed(length - cls.FIXED_SIZE)
        unknown = (cursor.read_u32(), cursor.read_u32())
        return cls(id=wave_id, marker=marker, filename_raw=filename_raw, unknown=unknown)

    @property
    def filename(self) -> str:
        return decode_fixed_text(self.filename_raw)

"""Decoded session model and the builder that accumulates it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import PureWindowsPath
from typing import List, Optional, Tuple

from .records import BlockRecord, FileHeaderRecord, TempoRecord, TrackRecord, WaveRecord


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tempo:
    """Tempo as stored in the file.

    Values are not range-checked on decode; a tempo with non-positive bpm or
    ticks-per-beat only fails when :mod:`ses.timeline` converts with it.
    """

    beats_per_minute: float
    beats_per_bar: int
    ticks_per_beat: int

    def to_dict(self) -> dict:
        return {
            "beats_per_minute": self.beats_per_minute,
            "beats_per_bar": self.beats_per_bar,
            "ticks_per_beat": self.ticks_per_beat,
        }


@dataclass(frozen=True)
class Track:
    left_volume: float
    right_volume: float
    title: str
    mute: bool

    def to_dict(self) -> dict:
        return {
            "left_volume": self.left_volume,
            "right_volume": self.right_volume,
            "title": self.title,
            "mute": self.mute,
        }


@dataclass(frozen=True)
class Wave:
    id: int
    filename: str

    @property
    def basename(self) -> str:
        """File name without directories, for either separator convention."""

        # PureWindowsPath splits on both "\\" and "/".
        return PureWindowsPath(self.filename).name

    def to_dict(self) -> dict:
        return {"id": self.id, "filename": self.filename}


@dataclass(frozen=True)
class Block:
    id: int
    left_volume: float
    right_volume: float
    offset_samples: int
    size_samples: int
    wave_offset_samples: int
    wave_id: int
    track_id: int  # 1-based index into Session.tracks

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "left_volume": self.left_volume,
            "right_volume": self.right_volume,
            "offset_samples": self.offset_samples,
            "size_samples": self.size_samples,
            "wave_offset_samples": self.wave_offset_samples,
            "wave_id": self.wave_id,
            "track_id": self.track_id,
        }


@dataclass(frozen=True)
class Session:
    """A fully decoded multitrack session.

    Header-derived fields and ``tempo`` stay ``None`` when the file has no
    chunk supplying them.
    """

    sample_rate: Optional[int] = None
    master_volume_left: Optional[float] = None
    master_volume_right: Optional[float] = None
    filename: Optional[str] = None
    tempo: Optional[Tempo] = None
    tracks: Tuple[Track, ...] = ()
    waves: Tuple[Wave, ...] = ()
    blocks: Tuple[Block, ...] = ()

    def track_for(self, block: Block) -> Optional[Track]:
        index = block.track_id - 1
        if 0 <= index < len(self.tracks):
            return self.tracks[index]
        return None

    def wave_for(self, block: Block) -> Optional[Wave]:
        for wave in self.waves:
            if wave.id == block.wave_id:
                return wave
        return None

    def blocks_on_track(self, track_id: int) -> List[Block]:
        return [block for block in self.blocks if block.track_id == track_id]

    def to_dict(self) -> dict:
        return {
            "sample_rate": self.sample_rate,
            "master_volume_left": self.master_volume_left,
            "master_volume_right": self.master_volume_right,
            "filename": self.filename,
            "tempo": self.tempo.to_dict() if self.tempo is not None else None,
            "tracks": [track.to_dict() for track in self.tracks],
            "waves": [wave.to_dict() for wave in self.waves],
            "blocks": [block.to_dict() for block in self.blocks],
        }


@dataclass
class SessionBuilder:
    """Collects decoded records, in file order, into a :class:`Session`."""

    sample_rate: Optional[int] = None
    master_volume_left: Optional[float] = None
    master_volume_right: Optional[float] = None
    filename: Optional[str] = None
    tempo: Optional[Tempo] = None
    tracks: List[Track] = field(default_factory=list)
    waves: List[Wave] = field(default_factory=list)
    blocks: List[Block] = field(default_factory=list)

    def set_header(self, record: FileHeaderRecord) -> None:
        self.sample_rate = record.sample_rate
        self.master_volume_left = record.master_volume_left
        self.master_volume_right = record.master_volume_right
        self.filename = record.filename

    def set_tempo(self, record: TempoRecord) -> None:
        if self.tempo is not None:
            logger.debug("replacing tempo %r", self.tempo)
        self.tempo = Tempo(
            beats_per_minute=record.beats_per_minute,
            beats_per_bar=record.beats_per_bar,
            ticks_per_beat=record.ticks_per_beat,
        )

    def add_track(self, record: TrackRecord) -> None:
        self.tracks.append(
            Track(
                left_volume=record.left_volume,
                right_volume=record.right_volume,
                title=record.title,
                mute=record.mute,
            )
        )

    def add_wave(self, record: WaveRecord) -> None:
        self.waves.append(Wave(id=record.id, filename=record.filename))

    def add_block(self, record: BlockRecord) -> None:
        self.blocks.append(
            Block(
                id=record.id,
                left_volume=record.left_volume,
                right_volume=record.right_volume,
                offset_samples=record.offset_samples,
                size_samples=record.size_samples,
                wave_offset_samples=record.wave_offset_samples,
                wave_id=record.wave_id,
                track_id=record.track_id,
            )
        )

    def build(self) -> Session:
        return Session(
            sample_rate=self.sample_rate,
            master_volume_left=self.master_volume_left,
            master_volume_right=self.master_volume_right,
            filename=self.filename,
            tempo=self.tempo,
            tracks=tuple(self.tracks),
            waves=tuple(self.waves),
            blocks=tuple(self.blocks),
        )

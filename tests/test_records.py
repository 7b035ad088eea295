from pathlib import Path
import struct
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ses.cursor import ByteCursor  # noqa: E402
from ses.errors import MalformedChunk, TruncatedInput  # noqa: E402
from ses.records import (  # noqa: E402
    BlockRecord,
    FileHeaderRecord,
    TempoRecord,
    TrackRecord,
    WaveRecord,
)
from ses_bytes import (  # noqa: E402
    block_record,
    header_payload,
    tempo_payload,
    track_record,
    wave_payload,
)


def test_record_layout_sizes() -> None:
    assert FileHeaderRecord.LAYOUT.size == 344
    assert TempoRecord.LAYOUT.size == 32
    assert TrackRecord.LAYOUT.size == 96
    assert BlockRecord.LAYOUT.size == 88


def test_file_header_record_keeps_every_field() -> None:
    data = header_payload(
        sample_rate=48000,
        filename=b"D:\\Sessions\\mix.ses",
        master_left=0.5,
        master_right=0.75,
        samples_in_session=123456,
        wave_block_count=3,
        bits_per_sample=24,
        channels=1,
    )
    cursor = ByteCursor(data)
    record = FileHeaderRecord.from_cursor(cursor)
    assert cursor.position == 344
    assert record.sample_rate == 48000
    assert record.samples_in_session == 123456
    assert record.wave_block_count == 3
    assert record.bits_per_sample == 24
    assert record.channels == 1
    assert record.master_volume_left == 0.5
    assert record.master_volume_right == 0.75
    assert record.save_associated_files_separately is True
    assert record.private is False
    assert record.filename == "D:\\Sessions\\mix.ses"
    assert len(record.filename_raw) == 256
    assert record.unknown == b"\xAB" * 44


def test_tempo_record() -> None:
    record = TempoRecord.from_cursor(ByteCursor(tempo_payload(93.5, 3, 480, 12.5)))
    assert record.beats_per_minute == 93.5
    assert record.beats_per_bar == 3
    assert record.ticks_per_beat == 480
    assert record.beat_offset_ms == 12.5
    assert record.unknown == bytes(8)


def test_track_record_title_and_mute_flag() -> None:
    record = TrackRecord.from_cursor(
        ByteCursor(track_record(b"Vox\x00leftover", left=0.1, right=0.9, flags=0x03))
    )
    assert record.title == "Vox"
    assert record.mute is True
    assert record.left_volume == 0.1
    assert record.right_volume == 0.9

    unmuted = TrackRecord.from_cursor(ByteCursor(track_record(b"Gtr", flags=0x02)))
    assert unmuted.mute is False


def test_track_title_without_terminator_uses_full_field() -> None:
    title = b"T" * 36
    record = TrackRecord.from_cursor(ByteCursor(track_record(title)))
    assert record.title == "T" * 36


def test_truncated_track_record_raises() -> None:
    with pytest.raises(TruncatedInput):
        TrackRecord.from_cursor(ByteCursor(track_record()[:-1]))


def test_block_record_decodes_edit_history_fields() -> None:
    data = block_record(
        block_id=7,
        wave_id=3,
        track_id=2,
        offset_samples=1000,
        size_samples=2000,
        wave_offset_samples=300,
        left=0.5,
        right=0.6,
        punch=(4, 5, 6, 7),
    )
    cursor = ByteCursor(data)
    record = BlockRecord.from_cursor(cursor)
    assert cursor.position == 88
    assert record.id == 7
    assert record.wave_id == 3
    assert record.track_id == 2
    assert record.offset_samples == 1000
    assert record.size_samples == 2000
    assert record.wave_offset_samples == 300
    assert record.left_volume == 0.5
    assert record.right_volume == 0.6
    assert (
        record.punch_generation,
        record.previous_punch,
        record.next_punch,
        record.original_index,
    ) == (4, 5, 6, 7)


def test_wave_record_filename_length_comes_from_chunk_length() -> None:
    payload = wave_payload(5, b"C:\\Audio\\take 2.wav") + b"NEXT"
    cursor = ByteCursor(payload)
    record = WaveRecord.from_cursor(cursor, len(payload) - 4)
    assert cursor.position == len(payload) - 4
    assert record.id == 5
    assert record.marker == 19
    assert record.filename == "C:\\Audio\\take 2.wav"
    assert record.unknown == (0, 0)


def test_wave_record_marker_is_not_validated() -> None:
    payload = wave_payload(1, b"a.wav", marker=20)
    record = WaveRecord.from_cursor(ByteCursor(payload), len(payload))
    assert record.marker == 20


def test_wave_record_with_only_fixed_fields_has_empty_name() -> None:
    payload = struct.pack("<IIII", 9, 19, 0, 0)
    record = WaveRecord.from_cursor(ByteCursor(payload), 16)
    assert record.filename == ""


@pytest.mark.parametrize("length", [0, 8, 15])
def test_wave_record_shorter_than_fixed_fields_is_malformed(length: int) -> None:
    cursor = ByteCursor(bytes(64))
    with pytest.raises(MalformedChunk, match="wave chunk too short"):
        WaveRecord.from_cursor(cursor, length)
    assert cursor.position == 0

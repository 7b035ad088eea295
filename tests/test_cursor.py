from pathlib import Path
import struct
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ses.cursor import ByteCursor, decode_fixed_text  # noqa: E402
from ses.errors import TruncatedInput  # noqa: E402


def test_little_endian_reads_advance_position() -> None:
    data = struct.pack("<HIdQ", 0x1234, 0xDEADBEEF, 120.5, 2**40 + 7)
    cursor = ByteCursor(data)
    assert cursor.read_u16() == 0x1234
    assert cursor.position == 2
    assert cursor.read_u32() == 0xDEADBEEF
    assert cursor.read_f64() == 120.5
    assert cursor.read_u64() == 2**40 + 7
    assert cursor.position == len(data)
    assert cursor.at_end
    assert cursor.remaining == 0


def test_read_tag_keeps_trailing_space() -> None:
    cursor = ByteCursor(b"wav \x00")
    assert cursor.read_tag() == "wav "
    assert cursor.position == 4


def test_read_fixed_past_end_raises_truncated() -> None:
    cursor = ByteCursor(b"\x01\x02\x03")
    cursor.read_fixed(2)
    with pytest.raises(TruncatedInput, match="need 2 bytes, only 1 remain") as excinfo:
        cursor.read_fixed(2)
    assert excinfo.value.offset == 2
    # A failed read does not move the cursor.
    assert cursor.position == 2


def test_read_u32_on_short_buffer_raises_truncated() -> None:
    with pytest.raises(TruncatedInput):
        ByteCursor(b"\x00\x00\x00").read_u32()


def test_skip_moves_forward_and_checks_bounds() -> None:
    cursor = ByteCursor(bytes(10))
    cursor.skip(7)
    assert cursor.position == 7
    cursor.skip(0)
    assert cursor.position == 7
    with pytest.raises(TruncatedInput):
        cursor.skip(4)
    cursor.skip(3)
    assert cursor.at_end


def test_skip_rejects_backward_moves() -> None:
    cursor = ByteCursor(bytes(4))
    cursor.skip(2)
    with pytest.raises(ValueError, match="forward"):
        cursor.skip(-1)
    assert cursor.position == 2


def test_unpack_reads_exactly_layout_size() -> None:
    layout = struct.Struct("<dI")
    cursor = ByteCursor(layout.pack(0.25, 9) + b"tail")
    assert cursor.unpack(layout) == (0.25, 9)
    assert cursor.position == layout.size == 12


@pytest.mark.parametrize(
    "raw, expected",
    [
        (b"Drums\x00\x00\x00", "Drums"),
        (b"Bass\x00garbage!", "Bass"),
        (b"FULLWIDTH", "FULLWIDTH"),
        (b"\x00leading", ""),
        (b"", ""),
        (b"Caf\xe9\x00", "Caf\u00e9"),
    ],
)
def test_decode_fixed_text(raw: bytes, expected: str) -> None:
    assert decode_fixed_text(raw) == expected


def test_decode_fixed_text_never_fails_on_undefined_bytes() -> None:
    # 0x81 has no Windows-1252 mapping.
    assert decode_fixed_text(b"a\x81b") == "a\ufffdb"

from __future__ import annotations

import struct

from .errors import TruncatedInput


TAG_SIZE = 4
TEXT_ENCODING = "cp1252"  # Cool Edit is a Windows application; strings are ANSI

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_F64 = struct.Struct("<d")


def decode_fixed_text(raw: bytes) -> str:
    """Decode a fixed-width string field.

    Everything from the first NUL onwards is dropped; a field with no NUL is
    used in full.  Undecodable bytes are replaced so the result is always
    valid text.
    """

    end = raw.find(b"\x00")
    if end != -1:
        raw = raw[:end]
    return raw.decode(TEXT_ENCODING, errors="replace")


class ByteCursor:
    """Forward-only little-endian reader over an immutable buffer."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def _require(self, count: int) -> None:
        if count > self.remaining:
            raise TruncatedInput(
                f"need {count} bytes, only {self.remaining} remain",
                offset=self._pos,
            )

    def read_fixed(self, count: int) -> bytes:
        if count < 0:
            raise ValueError(f"cannot read a negative byte count ({count})")
        self._require(count)
        chunk = self._data[self._pos : self._pos + count]
        self._pos += count
        return chunk

    def skip(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"cursor only moves forward (skip {count})")
        self._require(count)
        self._pos += count

    def unpack(self, layout: struct.Struct) -> tuple:
        """Read ``layout.size`` bytes and unpack them with ``layout``."""

        return layout.unpack(self.read_fixed(layout.size))

    def read_u16(self) -> int:
        return self.unpack(_U16)[0]

    def read_u32(self) -> int:
        return self.unpack(_U32)[0]

    def read_u64(self) -> int:
        return self.unpack(_U64)[0]

    def read_f64(self) -> float:
        return self.unpack(_F64)[0]

    def read_tag(self) -> str:
        """Read a 4-character chunk tag (not NUL-terminated)."""

        return self.read_fixed(TAG_SIZE).decode("latin-1")

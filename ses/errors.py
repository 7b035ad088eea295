"""Error types raised while decoding sessions and converting them."""

from __future__ import annotations

from typing import Optional


class SessionFormatError(ValueError):
    """Base class for structural problems found in a ``.ses`` file."""

    def __init__(self, message: str, *, offset: Optional[int] = None) -> None:
        if offset is not None:
            message = f"{message} (at offset 0x{offset:X})"
        super().__init__(message)
        self.offset = offset


class TruncatedInput(SessionFormatError):
    """Fewer bytes remain than a read requires."""


class MalformedHeader(SessionFormatError):
    """Bad signature, or the top-level length does not match the file size."""


class MalformedChunk(SessionFormatError):
    """A structural expectation inside a chunk failed."""


class ChunkLengthMismatch(SessionFormatError):
    """A chunk decoder did not land exactly on the chunk's declared end."""


class ConversionError(ValueError):
    """Base class for failures while re-emitting a decoded session."""


class TemplateKeyError(ConversionError):
    def __init__(self, key: str) -> None:
        super().__init__(f"key not found in template: {key}")
        self.key = key


class MissingWaveError(ConversionError):
    def __init__(self, wave_id: int, block_id: int) -> None:
        super().__init__(f"invalid wave {wave_id} for block {block_id}")
        self.wave_id = wave_id
        self.block_id = block_id


class MissingTemplateError(ConversionError):
    pass

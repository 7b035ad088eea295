"""Decoder for Cool Edit Pro multitrack session (.ses) files."""

from .container import (  # noqa: F401
    MAGIC,
    PREAMBLE_SIZE,
    list_chunks,
    load_session,
    parse_session,
)
from .chunks import ChunkHeader, read_chunk  # noqa: F401
from .cursor import ByteCursor, decode_fixed_text  # noqa: F401
from .errors import (  # noqa: F401
    ChunkLengthMismatch,
    ConversionError,
    MalformedChunk,
    MalformedHeader,
    MissingTemplateError,
    MissingWaveError,
    SessionFormatError,
    TemplateKeyError,
    TruncatedInput,
)
from .model import Block, Session, SessionBuilder, Tempo, Track, Wave  # noqa: F401

"""Convert session sample positions to seconds, beats and ticks."""

from __future__ import annotations

import sys
from typing import Tuple

import mido

from .model import Session, Tempo


def _require_tempo(session: Session) -> Tempo:
    if session.tempo is None:
        raise ValueError("session has no tempo chunk")
    if session.tempo.beats_per_minute <= 0:
        raise ValueError(f"invalid tempo {session.tempo.beats_per_minute} bpm")
    return session.tempo


def samples_to_seconds(session: Session, samples: int) -> float:
    if not session.sample_rate:
        raise ValueError("session has no sample rate")
    return samples / float(session.sample_rate)


def seconds_to_beats(session: Session, seconds: float) -> float:
    return seconds * (_require_tempo(session).beats_per_minute / 60.0)


def samples_to_beats(session: Session, samples: int) -> float:
    return seconds_to_beats(session, samples_to_seconds(session, samples))


def samples_to_ticks(session: Session, samples: int) -> int:
    """Position in ticks at the session's own ticks-per-beat resolution."""

    tempo = _require_tempo(session)
    if tempo.ticks_per_beat <= 0:
        raise ValueError(f"invalid ticks per beat {tempo.ticks_per_beat}")
    ticks = mido.second2tick(
        samples_to_seconds(session, samples),
        tempo.ticks_per_beat,
        mido.bpm2tempo(tempo.beats_per_minute),
    )
    # mido rounds already; older releases returned a float.
    return int(round(ticks))


def stereo_to_volume_pan(left: float, right: float) -> Tuple[float, float]:
    """Collapse a left/right gain pair into mono volume and pan in [-1, 1]."""

    volume = (left + right) / 2.0
    # Normalised by the sum, not the mean, so pan stays within [-1, 1].
    pan = (right - left) / max(left + right, sys.float_info.epsilon)
    return volume, pan

"""Re-emit a decoded session as an Ableton Live set.

Output is produced by flat text substitution into three XML templates
supplied by the caller.  Placeholders, by template:

  Ableton.xml              __TEMPO__ __TIME_SIGNATURE__ __AUDIO_TRACKS__
  AudioTrack.xml           __ID__ __VOLUME__ __PAN__ __MUTE__ __AUDIO_CLIPS__
  AudioClip.xml            __TIME__ __CURRENT_START__ __CURRENT_END__
                           __LOOP_START__ __LOOP_END__
                           __WARP_START_SEC_TIME__ __WARP_START_BEAT_TIME__
                           __WARP_END_SEC_TIME__ __WARP_END_BEAT_TIME__
                           __NAME__ __COLOR_INDEX__ __SAMPLE_FILE_NAME__
                           __RELATIVE_PATH_ELEMENTS__

Positions on the arrangement are in beats; loop points inside the sample
are in seconds, which is what Live expects for unwarped clips.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import MissingTemplateError, MissingWaveError, TemplateKeyError
from .export_options import ExportOptions
from .model import Block, Session, Track
from .timeline import samples_to_beats, samples_to_seconds, stereo_to_volume_pan


logger = logging.getLogger(__name__)

PROJECT_TEMPLATE = "Ableton.xml"
TRACK_TEMPLATE = "AudioTrack.xml"
CLIP_TEMPLATE = "AudioClip.xml"


@dataclass(frozen=True)
class TemplateSet:
    project: str
    track: str
    clip: str


def load_templates(directory: Path | str) -> TemplateSet:
    root = Path(directory)

    def _read(name: str) -> str:
        path = root / name
        if not path.is_file():
            raise MissingTemplateError(f"template not found: {path}")
        return path.read_text(encoding="utf-8")

    return TemplateSet(
        project=_read(PROJECT_TEMPLATE),
        track=_read(TRACK_TEMPLATE),
        clip=_read(CLIP_TEMPLATE),
    )


def format_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def fill_template(template: str, values: Mapping[str, object]) -> str:
    """Replace the first occurrence of each key in ``values``.

    Every key must be present in the template; a missing one raises
    :class:`TemplateKeyError`.  Keys are substituted in mapping order.
    """
    out = template
    for key, value in values.items():
        pos = out.find(key)
        if pos == -1:
            raise TemplateKeyError(key)
        logger.debug("replace %s", key)
        out = out[:pos] + format_value(value) + out[pos + len(key) :]
    return out


def _wave_name(session: Session, block: Block) -> str:
    wave = session.wave_for(block)
    if wave is None:
        raise MissingWaveError(block.wave_id, block.id)
    # Only the base name survives; Live locates the sample next to the set.
    return wave.basename


def render_clip(
    session: Session, block: Block, templates: TemplateSet, options: ExportOptions
) -> str:
    start_beats = samples_to_beats(session, block.offset_samples)
    duration_beats = samples_to_beats(session, block.size_samples)
    loop_start = samples_to_seconds(session, block.wave_offset_samples)
    # Loop points are both sample seconds; the end is not a beat count.
    loop_end = loop_start + samples_to_seconds(session, block.size_samples)
    name = _wave_name(session, block)
    return fill_template(
        templates.clip,
        {
            "__COLOR_INDEX__": options.color_index,
            "__TIME__": start_beats,
            "__CURRENT_START__": start_beats,
            "__CURRENT_END__": start_beats + duration_beats,
            "__LOOP_START__": loop_start,
            "__LOOP_END__": loop_end,
            # Live rebuilds warp markers once warping is switched on.
            "__WARP_START_SEC_TIME__": 0,
            "__WARP_START_BEAT_TIME__": 0,
            "__WARP_END_SEC_TIME__": options.warp_end,
            "__WARP_END_BEAT_TIME__": options.warp_end,
            "__NAME__": name,
            "__SAMPLE_FILE_NAME__": name,
            "__RELATIVE_PATH_ELEMENTS__": "",
        },
    )


def render_track(
    session: Session,
    index: int,
    track: Track,
    templates: TemplateSet,
    options: ExportOptions,
) -> str:
    """Render the track at 0-based ``index`` with every block placed on it."""

    volume, pan = stereo_to_volume_pan(track.left_volume, track.right_volume)
    clips = "".join(
        render_clip(session, block, templates, options)
        for block in session.blocks_on_track(index + 1)
    )
    return fill_template(
        templates.track,
        {
            "__ID__": options.first_track_id + index,
            "__VOLUME__": volume,
            "__PAN__": pan,
            "__MUTE__": track.mute,
            "__AUDIO_CLIPS__": clips,
        },
    )


def session_to_ableton(
    session: Session,
    templates: TemplateSet,
    options: Optional[ExportOptions] = None,
) -> str:
    if options is None:
        options = ExportOptions()
    if session.tempo is None:
        raise ValueError("session has no tempo chunk")

    tracks = "".join(
        render_track(session, index, track, templates, options)
        for index, track in enumerate(session.tracks)
    )
    orphans = [b.id for b in session.blocks if session.track_for(b) is None]
    if orphans:
        logger.warning("blocks on unknown tracks were not exported: %s", orphans)

    return fill_template(
        templates.project,
        {
            "__TEMPO__": session.tempo.beats_per_minute,
            "__TIME_SIGNATURE__": options.time_signature_base
            + session.tempo.beats_per_bar,
            "__AUDIO_TRACKS__": tracks,
        },
    )

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional


SUPPORTED_OPTIONS_VERSION = 1
MAX_COLOR_INDEX = 69  # Live's clip colour palette has 70 entries
DEFAULT_COLOR_INDEX = 20
DEFAULT_FIRST_TRACK_ID = 8  # Ids below this are taken by the template's return/master tracks
DEFAULT_TIME_SIGNATURE_BASE = 197  # Live encodes n/4 as 197 + n
DEFAULT_WARP_END = 10000.0


@dataclass(frozen=True)
class ExportOptions:
    version: int = SUPPORTED_OPTIONS_VERSION
    color_index: int = DEFAULT_COLOR_INDEX
    first_track_id: int = DEFAULT_FIRST_TRACK_ID
    time_signature_base: int = DEFAULT_TIME_SIGNATURE_BASE
    warp_end: float = DEFAULT_WARP_END
    template_dir: Optional[Path] = None

    def with_template_dir(self, template_dir: Path | str) -> "ExportOptions":
        return replace(self, template_dir=Path(template_dir))


def _require_dict(value: object, *, where: str) -> dict:
    if not isinstance(value, dict):
        raise ValueError(f"{where} must be an object")
    return value


def _int_in_range(value: object, *, where: str, low: int, high: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{where} must be an integer")
    if not (low <= value <= high):
        raise ValueError(f"{where} must be in [{low}, {high}]")
    return value


def _non_negative_number(value: object, *, where: str) -> float:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise ValueError(f"{where} must be a number")
    if value < 0:
        raise ValueError(f"{where} must be >= 0")
    return float(value)


def parse_export_options(data: object, *, base_dir: Path) -> ExportOptions:
    obj = _require_dict(data, where="options")

    unknown = set(obj) - {
        "version",
        "color_index",
        "first_track_id",
        "time_signature_base",
        "warp_end",
        "template_dir",
    }
    if unknown:
        raise ValueError(f"unknown option(s): {', '.join(sorted(unknown))}")

    version = _int_in_range(
        obj.get("version", SUPPORTED_OPTIONS_VERSION),
        where="options.version",
        low=1,
        high=65535,
    )
    if version != SUPPORTED_OPTIONS_VERSION:
        raise ValueError(
            f"unsupported options version {version}; "
            f"supported version is {SUPPORTED_OPTIONS_VERSION}"
        )

    template_dir = None
    template_raw = obj.get("template_dir")
    if template_raw is not None:
        if not isinstance(template_raw, str) or not template_raw:
            raise ValueError("options.template_dir must be a non-empty string path")
        template_dir = Path(template_raw)
        if not template_dir.is_absolute():
            template_dir = (base_dir / template_dir).resolve()

    return ExportOptions(
        version=version,
        color_index=_int_in_range(
            obj.get("color_index", DEFAULT_COLOR_INDEX),
            where="options.color_index",
            low=0,
            high=MAX_COLOR_INDEX,
        ),
        first_track_id=_int_in_range(
            obj.get("first_track_id", DEFAULT_FIRST_TRACK_ID),
            where="options.first_track_id",
            low=0,
            high=2**31 - 1,
        ),
        time_signature_base=_int_in_range(
            obj.get("time_signature_base", DEFAULT_TIME_SIGNATURE_BASE),
            where="options.time_signature_base",
            low=0,
            high=2**31 - 1,
        ),
        warp_end=_non_negative_number(
            obj.get("warp_end", DEFAULT_WARP_END), where="options.warp_end"
        ),
        template_dir=template_dir,
    )


def load_export_options(path: Path | str) -> ExportOptions:
    options_path = Path(path).expanduser().resolve()
    payload = json.loads(options_path.read_text(encoding="utf-8"))
    return parse_export_options(payload, base_dir=options_path.parent)

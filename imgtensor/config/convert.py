from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Sequence

from imgtensor.errors import ConfigurationError
from imgtensor.preprocessing.channel import (
    PreprocessStep,
    parse_preprocess_step,
    parse_preprocess_steps,
)
from imgtensor.reporting.timing import parse_report_time

DEFAULT_SCALE = 256
DEFAULT_CROP = (-1, -1)

_KNOWN_KEYS = ("preprocess", "scale", "crop", "color", "text_output", "report_time")


def parse_crop(value: Any) -> tuple[int, int]:
    """Parse a crop target into ``(height, width)``.

    Accepts the ``"height,width"`` string form or a 2-item list/tuple. Either
    value may be non-positive to disable cropping.
    """

    if isinstance(value, str):
        items: Sequence[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise ConfigurationError(f"crop must be 'height,width' or a list of 2 ints, got {value!r}")

    if len(items) != 2:
        raise ConfigurationError(f"crop must contain exactly 2 values (height,width), got {value!r}")
    try:
        if any(isinstance(v, (bool, float)) for v in items):
            raise TypeError("crop values must be integers")
        height = int(str(items[0]).strip())
        width = int(str(items[1]).strip())
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"crop must contain integers, got {value!r}") from exc
    return (height, width)


def _int(value: Any, *, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


def _bool(value: Any, *, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


def _steps(value: Any) -> tuple[PreprocessStep, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return parse_preprocess_steps(value)
    if isinstance(value, (list, tuple)):
        return tuple(parse_preprocess_step(v) for v in value)
    raise ConfigurationError(f"preprocess must be a comma separated string or a list, got {value!r}")


@dataclass(frozen=True)
class ConvertConfig:
    """Immutable settings for one conversion run.

    ``crop`` is ``(height, width)``; ``scale <= 0`` disables rescaling.
    """

    preprocess: tuple[PreprocessStep, ...] = ()
    scale: int = DEFAULT_SCALE
    crop: tuple[int, int] = DEFAULT_CROP
    color: bool = True
    text_output: bool = False
    report_time: str = ""

    def __post_init__(self) -> None:
        # Catch bad report specs before any image is touched.
        parse_report_time(self.report_time)

    @property
    def channels(self) -> int:
        return 3 if self.color else 1

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ConvertConfig":
        if not isinstance(payload, Mapping):
            raise ConfigurationError(f"config must be a dict/object, got {type(payload).__name__}")

        unknown = sorted(set(payload) - set(_KNOWN_KEYS))
        if unknown:
            raise ConfigurationError(
                f"Unknown config keys: {unknown}. Allowed keys: {', '.join(_KNOWN_KEYS)}"
            )

        defaults = cls()
        crop = payload.get("crop", None)
        scale = payload.get("scale", None)
        color = payload.get("color", None)
        text_output = payload.get("text_output", None)
        report_time = payload.get("report_time", None)

        return cls(
            preprocess=_steps(payload.get("preprocess", None)),
            scale=defaults.scale if scale is None else _int(scale, name="scale"),
            crop=defaults.crop if crop is None else parse_crop(crop),
            color=defaults.color if color is None else _bool(color, name="color"),
            text_output=(
                defaults.text_output if text_output is None else _bool(text_output, name="text_output")
            ),
            report_time=defaults.report_time if report_time is None else str(report_time),
        )

    def replace(self, **changes: Any) -> "ConvertConfig":
        """Return a copy with ``changes`` applied, skipping ``None`` values."""

        return replace(self, **{k: v for k, v in changes.items() if v is not None})

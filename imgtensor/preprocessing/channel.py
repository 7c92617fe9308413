"""Photometric normalization and planar flattening.

A configured sequence of steps resolves to three per-channel vectors
(``normalize``, ``mean``, ``std``) and a red/blue swap flag. Each pixel value
``v`` of output channel ``c`` becomes ``(v / normalize[c] - mean[c]) / std[c]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

import numpy as np
from numpy.typing import NDArray

from imgtensor.errors import ConfigurationError


class PreprocessStep(str, Enum):
    """Recognized preprocessing step names."""

    SUBTRACT128 = "subtract128"
    NORMALIZE = "normalize"
    MEAN = "mean"
    STD = "std"
    BGRTORGB = "bgrtorgb"


_SUPPORTED = ", ".join(step.value for step in PreprocessStep)


def parse_preprocess_step(raw: str | PreprocessStep) -> PreprocessStep:
    if isinstance(raw, PreprocessStep):
        return raw
    try:
        return PreprocessStep(str(raw).strip())
    except ValueError as exc:
        raise ConfigurationError(
            f"Unsupported preprocess step: {raw!r}. The supported steps are: {_SUPPORTED}."
        ) from exc


def parse_preprocess_steps(text: str | None) -> tuple[PreprocessStep, ...]:
    """Parse a comma separated step list. An empty string means no steps."""

    if text is None or not str(text).strip():
        return ()
    return tuple(parse_preprocess_step(item) for item in str(text).split(","))


@dataclass(frozen=True)
class ChannelParams:
    normalize: tuple[float, float, float] = (1.0, 1.0, 1.0)
    mean: tuple[float, float, float] = (0.0, 0.0, 0.0)
    std: tuple[float, float, float] = (1.0, 1.0, 1.0)
    swap_red_blue: bool = False

    @property
    def source_order(self) -> tuple[int, int, int]:
        """Source channel index feeding each output slot (sources are B,G,R)."""

        return (2, 1, 0) if self.swap_red_blue else (0, 1, 2)


def resolve_channel_params(steps: Iterable[PreprocessStep | str]) -> ChannelParams:
    """Fold `steps` in order; a later step overwrites what an earlier one set."""

    normalize = (1.0, 1.0, 1.0)
    mean = (0.0, 0.0, 0.0)
    std = (1.0, 1.0, 1.0)
    swap_red_blue = False

    for raw in steps:
        step = parse_preprocess_step(raw)
        if step is PreprocessStep.SUBTRACT128:
            mean = (128.0, 128.0, 128.0)
            std = (1.0, 1.0, 1.0)
            normalize = (1.0, 1.0, 1.0)
        elif step is PreprocessStep.NORMALIZE:
            normalize = (255.0, 255.0, 255.0)
        elif step is PreprocessStep.MEAN:
            mean = (0.406, 0.456, 0.485)
        elif step is PreprocessStep.STD:
            std = (0.225, 0.224, 0.229)
        elif step is PreprocessStep.BGRTORGB:
            swap_red_blue = True

    return ChannelParams(normalize=normalize, mean=mean, std=std, swap_red_blue=swap_red_blue)


def _apply(plane: np.ndarray, normalize: float, mean: float, std: float) -> NDArray[np.float32]:
    values = plane.astype(np.float32)
    values /= np.float32(normalize)
    values -= np.float32(mean)
    values /= np.float32(std)
    return values


def to_planar_buffer(image: np.ndarray, params: ChannelParams) -> NDArray[np.float32]:
    """Transform an 8-bit image into a flat channel-major float32 buffer.

    Grayscale ``(H,W)`` images use channel 0 parameters only. Color
    ``(H,W,3)`` images are read as B,G,R; output slot ``c`` takes source
    channel ``params.source_order[c]``. Each plane is row-major.
    """

    if image.ndim == 2:
        plane = _apply(image, params.normalize[0], params.mean[0], params.std[0])
        return plane.reshape(-1)

    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected shape (H,W) or (H,W,3), got {image.shape}")

    planes = [
        _apply(image[:, :, src], params.normalize[c], params.mean[c], params.std[c])
        for c, src in enumerate(params.source_order)
    ]
    return np.stack(planes, axis=0).reshape(-1)

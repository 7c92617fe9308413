"""Per-image normalization stages: rescale, crop, channel transform."""

from __future__ import annotations

from .channel import (
    ChannelParams,
    PreprocessStep,
    parse_preprocess_step,
    parse_preprocess_steps,
    resolve_channel_params,
    to_planar_buffer,
)
from .geometry import CropResult, center_crop, rescale_shorter_edge, scaled_size

__all__ = [
    "ChannelParams",
    "CropResult",
    "PreprocessStep",
    "center_crop",
    "parse_preprocess_step",
    "parse_preprocess_steps",
    "rescale_shorter_edge",
    "resolve_channel_params",
    "scaled_size",
    "to_planar_buffer",
]

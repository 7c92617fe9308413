"""Batch conversion: decode -> rescale -> crop -> channel transform -> pack.

Images are processed one at a time in input order. Any failure aborts the
whole batch before the output file is written.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, NamedTuple, Optional

import numpy as np
from numpy.typing import NDArray

from imgtensor.batch import BatchPacker, BatchTensor
from imgtensor.config.convert import ConvertConfig
from imgtensor.errors import EmptyBatch
from imgtensor.io.image import check_decoded_image, read_image
from imgtensor.preprocessing.channel import ChannelParams, resolve_channel_params, to_planar_buffer
from imgtensor.preprocessing.geometry import center_crop, rescale_shorter_edge
from imgtensor.reporting.timing import TimingReporter
from imgtensor.serialization.tensor import save_batch_tensor

logger = logging.getLogger(__name__)


class ImageResult(NamedTuple):
    buffer: NDArray[np.float32]
    height: int
    width: int


def preprocess_image(
    image: np.ndarray,
    config: ConvertConfig,
    *,
    params: Optional[ChannelParams] = None,
) -> ImageResult:
    """Run an already decoded 8-bit image through rescale, crop and channel transform."""

    check_decoded_image(image, color=config.color)
    if params is None:
        params = resolve_channel_params(config.preprocess)

    resized = rescale_shorter_edge(image, config.scale)
    crop_height, crop_width = config.crop
    cropped = center_crop(resized, crop_height, crop_width)
    buffer = to_planar_buffer(cropped.image, params)
    return ImageResult(buffer, cropped.height, cropped.width)


def convert_one_image(
    path: str | Path,
    config: ConvertConfig,
    *,
    params: Optional[ChannelParams] = None,
    reporter: Optional[TimingReporter] = None,
) -> ImageResult:
    logger.info("Converting %s", path)
    image = read_image(path, color=config.color)

    if reporter is None:
        reporter = TimingReporter(config.report_time)
    with reporter.measure("image_preprocess", "convert"):
        return preprocess_image(image, config, params=params)


def convert_images(
    paths: Iterable[str | Path],
    config: ConvertConfig,
    *,
    reporter: Optional[TimingReporter] = None,
) -> BatchTensor:
    """Convert `paths` into one ``(N, C, H, W)`` batch, in input order."""

    paths = list(paths)
    if not paths:
        raise EmptyBatch("No input images resolved: the input image list is empty")

    if reporter is None:
        reporter = TimingReporter(config.report_time)
    params = resolve_channel_params(config.preprocess)

    packer = BatchPacker(config.channels)
    for path in paths:
        result = convert_one_image(path, config, params=params, reporter=reporter)
        packer.add(result.buffer, result.height, result.width, source=path)

    with reporter.measure("image_preprocess", "pack"):
        tensor = packer.pack()
    return tensor


def run_conversion(
    config: ConvertConfig,
    paths: Iterable[str | Path],
    output_path: str | Path,
    *,
    reporter: Optional[TimingReporter] = None,
) -> BatchTensor:
    """Convert `paths` and write the batch to `output_path`.

    Nothing is written unless every image converts and packs cleanly.
    """

    tensor = convert_images(paths, config, reporter=reporter)
    save_batch_tensor(tensor, output_path, text_output=config.text_output)
    return tensor

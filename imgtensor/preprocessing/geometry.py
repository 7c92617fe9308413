"""Geometric normalization: shorter-edge rescale and clamped center crop.

Images follow OpenCV layout, ``(rows, cols)`` or ``(rows, cols, channels)``.
Sizes in this module are always given as ``(height, width)``.
"""

from __future__ import annotations

import logging
import math
from typing import NamedTuple

import numpy as np

from imgtensor.utils.optional_deps import require

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def scaled_size(rows: int, cols: int, scale: int) -> tuple[int, int]:
    """Return the ``(height, width)`` whose shorter edge equals `scale`.

    The longer edge keeps the aspect ratio and is rounded to the nearest
    integer (halves round up).
    """

    if rows > cols:
        return (_round_half_up(rows * scale / cols), int(scale))
    return (int(scale), _round_half_up(cols * scale / rows))


def rescale_shorter_edge(image: np.ndarray, scale: int) -> np.ndarray:
    """Resize `image` so its shorter edge equals `scale` (bilinear).

    ``scale <= 0`` disables rescaling and returns `image` itself.
    """

    if scale <= 0:
        return image

    cv2 = require("cv2", purpose="image resizing")

    rows, cols = int(image.shape[0]), int(image.shape[1])
    height, width = scaled_size(rows, cols, int(scale))
    logger.debug("Rescaling %dx%d -> %dx%d", rows, cols, height, width)
    # OpenCV takes (W,H) for `dsize`.
    return cv2.resize(image, (width, height), interpolation=cv2.INTER_LINEAR)


class CropResult(NamedTuple):
    """A cropped image plus the size actually used.

    `height`/`width` reflect clamping, so callers can compare them across a
    batch without inspecting the array.
    """

    image: np.ndarray
    height: int
    width: int


def center_crop(image: np.ndarray, height: int, width: int) -> CropResult:
    """Extract a centered ``height x width`` region of `image`.

    - A non-positive `height` or `width`, or a request equal to the image
      size, returns the image unchanged with its own size.
    - A request larger than the image on an axis is clamped to the image
      extent on that axis.
    - The returned region is a contiguous copy, never a view of `image`.
    """

    rows, cols = int(image.shape[0]), int(image.shape[1])
    if height <= 0 or width <= 0 or (rows == height and cols == width):
        return CropResult(image, rows, cols)

    # int() truncates toward zero, then negative offsets clamp to 0.
    x = max(int((cols - width) / 2), 0)
    y = max(int((rows - height) / 2), 0)
    width = min(width, cols)
    height = min(height, rows)
    logger.debug("Cropping %dx%d at (y=%d, x=%d) to %dx%d", rows, cols, y, x, height, width)

    region = image[y : y + height, x : x + width]
    return CropResult(region.copy(), height, width)

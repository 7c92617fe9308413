from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from imgtensor.errors import DecodeError
from imgtensor.utils.optional_deps import require

logger = logging.getLogger(__name__)


def read_image(path: str | Path, *, color: bool = True) -> np.ndarray:
    """Decode an 8-bit image from disk via OpenCV.

    Parameters
    ----------
    path:
        Image file path.
    color:
        - True: three channels in OpenCV's native B,G,R order, shape (H,W,3)
        - False: single channel, shape (H,W)
    """

    cv2 = require("cv2", purpose="image decoding")

    path_str = str(path)
    flag = cv2.IMREAD_COLOR if color else cv2.IMREAD_GRAYSCALE
    img = cv2.imread(path_str, flag)
    if img is None:
        raise DecodeError(f"Unable to decode image: {path_str}", path=path_str)

    check_decoded_image(img, color=color, path=path_str)
    logger.debug("Decoded %s with shape %s", path_str, img.shape)
    return img


def check_decoded_image(image: np.ndarray, *, color: bool, path: str | Path | None = None) -> None:
    """Validate that `image` is an 8-bit grid matching the requested color mode."""

    where = f" for {path}" if path is not None else ""
    if not isinstance(image, np.ndarray):
        raise DecodeError(f"Expected np.ndarray{where}, got {type(image)}", path=path)
    if image.dtype != np.uint8:
        raise DecodeError(f"Expected dtype=uint8{where}, got {image.dtype}", path=path)
    if color:
        if image.ndim != 3 or image.shape[2] != 3:
            raise DecodeError(f"Expected shape (H,W,3){where}, got {image.shape}", path=path)
    elif image.ndim != 2:
        raise DecodeError(f"Expected shape (H,W){where}, got {image.shape}", path=path)
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise DecodeError(f"Empty image{where}: {image.shape}", path=path)

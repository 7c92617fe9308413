from __future__ import annotations

from .image import check_decoded_image, read_image

__all__ = ["check_decoded_image", "read_image"]

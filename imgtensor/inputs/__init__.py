"""Resolution of the input image list."""

from __future__ import annotations

from .sources import parse_input_images, read_image_list_file, resolve_input_paths

__all__ = ["parse_input_images", "read_image_list_file", "resolve_input_paths"]

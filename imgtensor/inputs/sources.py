from __future__ import annotations

from pathlib import Path
from typing import Optional

from imgtensor.errors import ConfigurationError


def parse_input_images(text: str) -> list[str]:
    """Split a comma separated image list, dropping blank items."""

    return [item.strip() for item in str(text).split(",") if item.strip()]


def read_image_list_file(path: str | Path) -> list[str]:
    """Read one image path per non-blank line.

    A line may carry comma separated metadata (e.g. ``id,label,path``); only
    the last field is the image path.
    """

    list_path = Path(path)
    try:
        lines = list_path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        raise ConfigurationError(f"Unable to read image list file {str(list_path)!r}: {exc}") from exc

    out: list[str] = []
    for line in lines:
        if not line.strip():
            continue
        name = line.split(",")[-1].strip()
        if name:
            out.append(name)
    return out


def resolve_input_paths(
    input_images: Optional[str] = None,
    input_image_file: Optional[str | Path] = None,
) -> list[str]:
    """Resolve the image list from a literal list or a list file.

    The literal list takes precedence when non-empty.
    """

    if input_images:
        return parse_input_images(input_images)
    if input_image_file:
        return read_image_list_file(input_image_file)
    raise ConfigurationError(
        "No input source specified. Provide --input-images or --input-image-file."
    )

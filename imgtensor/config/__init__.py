from __future__ import annotations

from .convert import ConvertConfig, parse_crop
from .io import load_config

__all__ = ["ConvertConfig", "load_config", "parse_crop"]

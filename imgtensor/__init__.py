"""imgtensor - convert a batch of images into one packed NCHW float tensor.

Keep top-level imports lightweight: the decode and resize stages need OpenCV,
so exports are lazy-loaded on demand and `import imgtensor` stays cheap.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

__version__ = "0.1.0"

__all__ = [
    # Modules
    "config",
    "inputs",
    "io",
    "preprocessing",
    "reporting",
    "serialization",
    "utils",
    # Pipeline
    "BatchPacker",
    "BatchTensor",
    "ConvertConfig",
    "convert_images",
    "convert_one_image",
    "load_batch_tensor",
    "run_conversion",
    "save_batch_tensor",
]


_LAZY_SUBMODULES = {
    "config",
    "inputs",
    "io",
    "preprocessing",
    "reporting",
    "serialization",
    "utils",
}

_LAZY_EXPORTS = {
    "BatchPacker": ("batch", "BatchPacker"),
    "BatchTensor": ("batch", "BatchTensor"),
    "ConvertConfig": ("config.convert", "ConvertConfig"),
    "convert_images": ("pipeline", "convert_images"),
    "convert_one_image": ("pipeline", "convert_one_image"),
    "run_conversion": ("pipeline", "run_conversion"),
    "load_batch_tensor": ("serialization.tensor", "load_batch_tensor"),
    "save_batch_tensor": ("serialization.tensor", "save_batch_tensor"),
}


def __getattr__(name: str) -> Any:  # pragma: no cover - thin delegation
    if name in _LAZY_SUBMODULES:
        module = import_module(f"{__name__}.{name}")
        globals()[name] = module
        return module

    target = _LAZY_EXPORTS.get(name)
    if target is not None:
        module_name, attr = target
        module = import_module(f"{__name__}.{module_name}")
        value = getattr(module, attr)
        globals()[name] = value
        return value

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

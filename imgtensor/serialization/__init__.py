from __future__ import annotations

from .tensor import batch_to_protos, load_batch_tensor, save_batch_tensor

__all__ = ["batch_to_protos", "load_batch_tensor", "save_batch_tensor"]

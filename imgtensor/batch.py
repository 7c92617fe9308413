from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from imgtensor.errors import EmptyBatch, ShapeMismatch
from imgtensor.utils.optional_deps import require

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchTensor:
    """Packed images: ``dims == (N, C, H, W)`` and flat float32 NCHW `data`."""

    dims: tuple[int, int, int, int]
    data: NDArray[np.float32]

    def __post_init__(self) -> None:
        if len(self.dims) != 4:
            raise ValueError(f"Expected 4 dims (N,C,H,W), got {self.dims}")
        expected = int(np.prod(self.dims))
        if self.data.ndim != 1 or self.data.size != expected:
            raise ValueError(
                f"Flat data of size {expected} expected for dims {self.dims}, got shape {self.data.shape}"
            )

    @property
    def array(self) -> NDArray[np.float32]:
        """``(N, C, H, W)`` view of `data`."""

        return self.data.reshape(self.dims)

    def to_torch(self):
        torch = require("torch", extra="torch", purpose="BatchTensor.to_torch()")
        return torch.from_numpy(np.ascontiguousarray(self.array))


class BatchPacker:
    """Accumulate per-image planar buffers into one NCHW batch.

    The first image added fixes the canonical ``(H, W)``; every later image
    must match it.
    """

    def __init__(self, channels: int) -> None:
        if channels not in (1, 3):
            raise ValueError(f"channels must be 1 or 3, got {channels}")
        self.channels = int(channels)
        self.canonical_size: Optional[tuple[int, int]] = None
        self._buffers: list[NDArray[np.float32]] = []

    def __len__(self) -> int:
        return len(self._buffers)

    def add(
        self,
        buffer: NDArray[np.float32],
        height: int,
        width: int,
        *,
        source: str | Path | None = None,
    ) -> None:
        size = (int(height), int(width))
        label = f" for {source}" if source is not None else ""
        if self.canonical_size is None:
            self.canonical_size = size
        elif size != self.canonical_size:
            raise ShapeMismatch(
                f"Image size (H,W)={size}{label} does not match the batch size "
                f"{self.canonical_size} set by the first image",
                path=source,
                expected=self.canonical_size,
                actual=size,
            )

        flat = np.asarray(buffer, dtype=np.float32).reshape(-1)
        expected = self.channels * size[0] * size[1]
        if flat.size != expected:
            raise ShapeMismatch(
                f"Buffer{label} has {flat.size} values, expected C*H*W = {expected}",
                path=source,
                expected=(self.channels, *size),
                actual=(flat.size,),
            )
        self._buffers.append(flat)

    def pack(self) -> BatchTensor:
        if not self._buffers or self.canonical_size is None:
            raise EmptyBatch("No images to pack: the input image list is empty")

        height, width = self.canonical_size
        dims = (len(self._buffers), self.channels, height, width)
        data = np.concatenate(self._buffers)
        logger.info("Packed batch with dims %s", dims)
        return BatchTensor(dims=dims, data=data)

"""ImageNet-style batch conversion example.

Self-contained: writes a few synthetic images to a temp directory. It
demonstrates:

- an explicit `ConvertConfig` (shorter edge 256, center crop 224x224)
- the `normalize,mean,std,bgrtorgb` step chain
- the packed ``(N, C, H, W)`` batch written as binary `.npy` and read back
"""

from __future__ import annotations

import tempfile
from pathlib import Path

import cv2
import numpy as np

from imgtensor.config import ConvertConfig
from imgtensor.pipeline import run_conversion
from imgtensor.preprocessing import parse_preprocess_steps
from imgtensor.serialization import load_batch_tensor


def _make_bgr(h: int, w: int, value: tuple[int, int, int]) -> np.ndarray:
    img = np.zeros((h, w, 3), dtype=np.uint8)
    img[...] = value
    return img


def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        paths = []
        for i, (h, w) in enumerate([(300, 400), (512, 256), (256, 256)]):
            path = root / f"img_{i}.png"
            cv2.imwrite(str(path), _make_bgr(h, w, (40 * i, 100, 200)))
            paths.append(path)

        config = ConvertConfig(
            preprocess=parse_preprocess_steps("normalize,mean,std,bgrtorgb"),
            scale=256,
            crop=(224, 224),
        )
        out = root / "batch.npy"
        run_conversion(config, paths, out)

        tensor = load_batch_tensor(out)
        print("dims:", tensor.dims)
        print("per-channel mean of first image:", tensor.array[0].mean(axis=(1, 2)))


if __name__ == "__main__":
    main()

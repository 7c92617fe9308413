"""Persist a `BatchTensor` as binary ``.npy`` or as a JSON tensor-protos document.

The text form mirrors the tensor-protos container::

    {"protos": [{"dims": [N, C, H, W], "data_type": "FLOAT", "float_data": [...]}]}
"""

from __future__ import annotations

import io
import json
import logging
import os
from pathlib import Path

import numpy as np

from imgtensor.batch import BatchTensor
from imgtensor.errors import SerializationError
from imgtensor.utils.jsonable import to_jsonable

logger = logging.getLogger(__name__)

_NPY_MAGIC = b"\x93NUMPY"


def batch_to_protos(tensor: BatchTensor) -> dict:
    return {
        "protos": [
            {
                "dims": list(tensor.dims),
                "data_type": "FLOAT",
                "float_data": tensor.data,
            }
        ]
    }


def save_batch_tensor(tensor: BatchTensor, path: str | Path, *, text_output: bool = False) -> Path:
    """Write `tensor` to `path` atomically.

    Data is written to ``<path>.tmp`` first and then moved into place, so a
    failed write never leaves a partial file at `path`.
    """

    out_path = Path(path)
    tmp_path = out_path.with_name(out_path.name + ".tmp")
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        if text_output:
            payload = to_jsonable(batch_to_protos(tensor))
            tmp_path.write_text(json.dumps(payload), encoding="utf-8")
        else:
            with tmp_path.open("wb") as f:
                np.save(f, np.asarray(tensor.array, dtype=np.float32), allow_pickle=False)
        os.replace(tmp_path, out_path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise SerializationError(f"Unable to write output tensor {str(out_path)!r}: {exc}", path=out_path) from exc

    logger.info("Wrote %s tensor %s to %s", "text" if text_output else "binary", tensor.dims, out_path)
    return out_path


def load_batch_tensor(path: str | Path) -> BatchTensor:
    """Read a tensor written by :func:`save_batch_tensor` (either encoding)."""

    in_path = Path(path)
    try:
        with in_path.open("rb") as f:
            raw = f.read()
        if raw.startswith(_NPY_MAGIC):
            arr = np.load(io.BytesIO(raw), allow_pickle=False)
            dims = tuple(int(d) for d in arr.shape)
            data = np.asarray(arr, dtype=np.float32).reshape(-1)
        else:
            proto = json.loads(raw.decode("utf-8"))["protos"][0]
            dims = tuple(int(d) for d in proto["dims"])
            data = np.asarray(proto["float_data"], dtype=np.float32).reshape(-1)
    except OSError as exc:
        raise SerializationError(f"Unable to read tensor {str(in_path)!r}: {exc}", path=in_path) from exc
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise SerializationError(f"Malformed tensor file {str(in_path)!r}: {exc}", path=in_path) from exc

    try:
        return BatchTensor(dims=dims, data=data)  # type: ignore[arg-type]
    except ValueError as exc:
        raise SerializationError(f"Malformed tensor file {str(in_path)!r}: {exc}", path=in_path) from exc

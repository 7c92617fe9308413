from __future__ import annotations

import io
import json

import numpy as np
import pytest

from imgtensor.config.convert import ConvertConfig
from imgtensor.errors import DecodeError, EmptyBatch, ShapeMismatch
from imgtensor.pipeline import convert_images, convert_one_image, preprocess_image, run_conversion
from imgtensor.preprocessing.channel import PreprocessStep
from imgtensor.reporting.timing import TimingReporter
from imgtensor.serialization.tensor import load_batch_tensor


def _write(path, img: np.ndarray):
    import cv2

    path.parent.mkdir(parents=True, exist_ok=True)
    assert cv2.imwrite(str(path), img) is True
    return path


def test_single_gray_image_identity_end_to_end(tmp_path) -> None:
    pixels = np.arange(16, dtype=np.uint8).reshape(4, 4) * 15
    src = _write(tmp_path / "gray.png", pixels)
    out = tmp_path / "out.npy"

    cfg = ConvertConfig(scale=0, crop=(-1, -1), color=False)
    tensor = run_conversion(cfg, [src], out)

    assert tensor.dims == (1, 1, 4, 4)
    np.testing.assert_array_equal(tensor.data, pixels.reshape(-1).astype(np.float32))

    loaded = load_batch_tensor(out)
    assert loaded.dims == (1, 1, 4, 4)
    np.testing.assert_array_equal(loaded.array[0, 0], pixels.astype(np.float32))


def test_color_bgrtorgb_end_to_end(tmp_path) -> None:
    img = np.zeros((2, 2, 3), dtype=np.uint8)
    img[...] = (10, 20, 30)
    src = _write(tmp_path / "c.png", img)

    cfg = ConvertConfig(preprocess=(PreprocessStep.BGRTORGB,), scale=0)
    tensor = convert_images([src], cfg)
    assert tensor.dims == (1, 3, 2, 2)
    np.testing.assert_array_equal(tensor.array[0, 0], np.full((2, 2), 30.0))
    np.testing.assert_array_equal(tensor.array[0, 1], np.full((2, 2), 20.0))
    np.testing.assert_array_equal(tensor.array[0, 2], np.full((2, 2), 10.0))


def test_rescale_then_crop_gives_consistent_batch(tmp_path) -> None:
    paths = [
        _write(tmp_path / "a.png", np.full((8, 8, 3), 50, dtype=np.uint8)),
        _write(tmp_path / "b.png", np.full((16, 24, 3), 200, dtype=np.uint8)),
    ]
    cfg = ConvertConfig(preprocess=(PreprocessStep.SUBTRACT128,), scale=4, crop=(4, 4))
    tensor = convert_images(paths, cfg)

    assert tensor.dims == (2, 3, 4, 4)
    np.testing.assert_allclose(tensor.array[0], np.full((3, 4, 4), 50.0 - 128.0))
    np.testing.assert_allclose(tensor.array[1], np.full((3, 4, 4), 200.0 - 128.0))


def test_oversized_crop_is_clamped(tmp_path) -> None:
    src = _write(tmp_path / "small.png", np.zeros((6, 10), dtype=np.uint8))
    result = convert_one_image(src, ConvertConfig(scale=0, crop=(8, 8), color=False))
    assert (result.height, result.width) == (6, 8)
    assert result.buffer.shape == (48,)


def test_mismatched_sizes_fail_without_output(tmp_path) -> None:
    paths = [
        _write(tmp_path / "a.png", np.zeros((4, 4), dtype=np.uint8)),
        _write(tmp_path / "b.png", np.zeros((6, 6), dtype=np.uint8)),
    ]
    out = tmp_path / "out.npy"
    with pytest.raises(ShapeMismatch) as exc:
        run_conversion(ConvertConfig(scale=0, color=False), paths, out)
    assert exc.value.path == str(paths[1])
    assert not out.exists()


def test_empty_input_fails_without_output(tmp_path) -> None:
    out = tmp_path / "out.npy"
    with pytest.raises(EmptyBatch):
        run_conversion(ConvertConfig(), [], out)
    assert not out.exists()


def test_decode_error_aborts_batch(tmp_path) -> None:
    good = _write(tmp_path / "good.png", np.zeros((4, 4, 3), dtype=np.uint8))
    out = tmp_path / "out.npy"
    with pytest.raises(DecodeError) as exc:
        run_conversion(ConvertConfig(scale=0), [good, tmp_path / "missing.png"], out)
    assert "missing.png" in str(exc.value)
    assert not out.exists()


def test_preprocess_image_in_memory() -> None:
    img = np.full((10, 20), 255, dtype=np.uint8)
    cfg = ConvertConfig(preprocess=(PreprocessStep.NORMALIZE,), scale=5, crop=(4, 4), color=False)
    result = preprocess_image(img, cfg)
    assert (result.height, result.width) == (4, 4)
    np.testing.assert_allclose(result.buffer, np.ones(16))


def test_preprocess_image_rejects_mode_mismatch() -> None:
    with pytest.raises(DecodeError):
        preprocess_image(np.zeros((4, 4), dtype=np.uint8), ConvertConfig(color=True))


def test_timing_events_are_reported(tmp_path) -> None:
    paths = [
        _write(tmp_path / "a.png", np.zeros((4, 4, 3), dtype=np.uint8)),
        _write(tmp_path / "b.png", np.zeros((4, 4, 3), dtype=np.uint8)),
    ]
    stream = io.StringIO()
    reporter = TimingReporter("json|t:", stream=stream)
    convert_images(paths, ConvertConfig(scale=0), reporter=reporter)

    lines = stream.getvalue().splitlines()
    metrics = [json.loads(line[len("t:"):])["metric"] for line in lines]
    assert metrics == ["convert", "convert", "pack"]

from __future__ import annotations

import numpy as np
import pytest

from imgtensor.errors import ConfigurationError
from imgtensor.preprocessing.channel import (
    ChannelParams,
    PreprocessStep,
    parse_preprocess_steps,
    resolve_channel_params,
    to_planar_buffer,
)


def _bgr_pixel_image(b: int, g: int, r: int, rows: int = 2, cols: int = 2) -> np.ndarray:
    img = np.zeros((rows, cols, 3), dtype=np.uint8)
    img[...] = (b, g, r)
    return img


def test_default_params_are_identity() -> None:
    params = resolve_channel_params([])
    assert params == ChannelParams()

    gray = np.arange(12, dtype=np.uint8).reshape(3, 4)
    out = to_planar_buffer(gray, params)
    assert out.dtype == np.float32
    np.testing.assert_array_equal(out, gray.reshape(-1).astype(np.float32))


def test_subtract128_alone() -> None:
    params = resolve_channel_params(["subtract128"])
    gray = np.array([[0, 128], [200, 255]], dtype=np.uint8)
    out = to_planar_buffer(gray, params)
    np.testing.assert_array_equal(out, np.array([-128.0, 0.0, 72.0, 127.0], dtype=np.float32))


def test_normalize_alone() -> None:
    params = resolve_channel_params(["normalize"])
    gray = np.array([[0, 51], [102, 255]], dtype=np.uint8)
    out = to_planar_buffer(gray, params)
    np.testing.assert_allclose(out, gray.reshape(-1) / 255.0, rtol=1e-6)


def test_mean_and_std_values_per_channel() -> None:
    params = resolve_channel_params(["normalize", "mean", "std"])
    assert params.normalize == (255.0, 255.0, 255.0)
    assert params.mean == (0.406, 0.456, 0.485)
    assert params.std == (0.225, 0.224, 0.229)

    img = _bgr_pixel_image(255, 0, 51, rows=1, cols=1)
    out = to_planar_buffer(img, params)
    expected = [
        (1.0 - 0.406) / 0.225,
        (0.0 - 0.456) / 0.224,
        (0.2 - 0.485) / 0.229,
    ]
    np.testing.assert_allclose(out, expected, rtol=1e-5)


def test_later_step_overwrites_earlier_one() -> None:
    params = resolve_channel_params(["normalize", "std", "subtract128"])
    assert params.normalize == (1.0, 1.0, 1.0)
    assert params.std == (1.0, 1.0, 1.0)
    assert params.mean == (128.0, 128.0, 128.0)

    params = resolve_channel_params(["subtract128", "normalize"])
    assert params.normalize == (255.0, 255.0, 255.0)
    assert params.mean == (128.0, 128.0, 128.0)


def test_bgrtorgb_reorders_output_slots() -> None:
    img = _bgr_pixel_image(10, 20, 30)

    swapped = to_planar_buffer(img, resolve_channel_params(["bgrtorgb"]))
    np.testing.assert_array_equal(swapped, [30] * 4 + [20] * 4 + [10] * 4)

    native = to_planar_buffer(img, resolve_channel_params([]))
    np.testing.assert_array_equal(native, [10] * 4 + [20] * 4 + [30] * 4)


def test_planes_are_row_major() -> None:
    img = np.zeros((2, 3, 3), dtype=np.uint8)
    img[..., 0] = np.arange(6).reshape(2, 3)
    img[..., 1] = np.arange(6).reshape(2, 3) + 10
    img[..., 2] = np.arange(6).reshape(2, 3) + 20

    out = to_planar_buffer(img, ChannelParams())
    np.testing.assert_array_equal(out, list(range(6)) + list(range(10, 16)) + list(range(20, 26)))


def test_grayscale_uses_channel_zero_only() -> None:
    params = ChannelParams(
        normalize=(2.0, 100.0, 100.0),
        mean=(1.0, 50.0, 50.0),
        std=(0.5, 9.0, 9.0),
        swap_red_blue=True,
    )
    gray = np.array([[4, 8]], dtype=np.uint8)
    out = to_planar_buffer(gray, params)
    np.testing.assert_allclose(out, [(4 / 2 - 1) / 0.5, (8 / 2 - 1) / 0.5])


def test_parse_preprocess_steps() -> None:
    assert parse_preprocess_steps("") == ()
    assert parse_preprocess_steps(None) == ()
    assert parse_preprocess_steps("normalize, mean,std") == (
        PreprocessStep.NORMALIZE,
        PreprocessStep.MEAN,
        PreprocessStep.STD,
    )


@pytest.mark.parametrize("text", ["swaprb", "normalize,,mean", "Normalize"])
def test_unknown_step_is_configuration_error(text: str) -> None:
    with pytest.raises(ConfigurationError) as exc:
        parse_preprocess_steps(text)
    assert "subtract128" in str(exc.value)


def test_resolve_rejects_unknown_step() -> None:
    with pytest.raises(ConfigurationError):
        resolve_channel_params(["normalize", "blur"])

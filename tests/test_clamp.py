import numpy as np

from noisegen.noise.clamp import clamp


def test_scalar_clamp():
    assert clamp(-12.5, 0, 255) == 0
    assert clamp(300.0, 0, 255) == 255
    assert clamp(42.0, 0, 255) == 42


def test_scalar_result_is_int():
    assert isinstance(clamp(42.7, 0, 255), int)


def test_truncates_toward_zero():
    assert clamp(12.9, 0, 255) == 12
    assert clamp(254.999, 0, 255) == 254


def test_custom_bounds():
    assert clamp(5.0, 10, 20) == 10
    assert clamp(25.0, 10, 20) == 20
    assert clamp(15.5, 10, 20) == 15


def test_array_clamp():
    values = np.array([-1e9, -0.5, 0.0, 127.8, 255.0, 255.5, 1e9])
    out = clamp(values, 0, 255)
    assert out.dtype == np.uint8
    assert out.tolist() == [0, 0, 0, 127, 255, 255, 255]


def test_array_shape_preserved():
    values = np.linspace(-100, 400, 24).reshape(2, 3, 4)
    out = clamp(values, 0, 255)
    assert out.shape == (2, 3, 4)
    assert out.min() >= 0 and out.max() <= 255


def test_non_finite_values_saturate():
    out = clamp(np.array([np.nan, np.inf, -np.inf, 12.0]), 0, 255)
    assert out.dtype == np.uint8
    assert out.tolist() == [0, 255, 0, 12]


def test_non_finite_scalars_saturate():
    assert clamp(float('nan'), 10, 20) == 10
    assert clamp(float('inf'), 10, 20) == 20
    assert clamp(float('-inf'), 10, 20) == 10

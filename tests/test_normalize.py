"""Tests for 8-bit display normalisation."""

import numpy as np
import pytest
from sipattern.errors import InvalidDimensionError
from sipattern.normalize import (
    normalize_linear, normalize_log, normalize_to_bytes, normalize_to_image,
)


def _expected_log(values, included=None):
    values = np.asarray(values, dtype=float)
    if included is None:
        included = np.ones(values.shape, dtype=bool)
    d_min = values[included].min()
    g = np.log(values[included] - d_min + np.e) - 1.0
    out = np.zeros(values.shape, dtype=np.uint8)
    out[included] = np.clip(np.floor(g / g.max() * 255.0), 0, 255).astype(np.uint8)
    return out


class TestLinear:
    """Linear normalisation."""

    def test_unit_range(self):
        out = normalize_to_bytes(np.array([0.0, 1.0, 0.5, 1.0 / 3.0]))
        assert out.dtype == np.uint8
        assert list(out) == [0, 255, 127, 85]

    def test_shifted_range(self):
        out = normalize_linear(np.array([-2.0, 0.0, 1.0, 10.0]))
        assert list(out) == [0, int(255.0 * 2.0 / 12.0), int(255.0 * 3.0 / 12.0), 255]

    def test_large_values(self):
        out = normalize_linear(np.array([-3000.0, 6000.0, 6000.0, -10000.0]))
        scale = 255.0 / 16000.0
        assert list(out) == [int(scale * 7000.0), int(scale * 16000.0),
                             int(scale * 16000.0), 0]

    def test_mask_excludes_from_range(self):
        values = np.array([1000.0, 0.0, 1.0, 2.0])
        mask = np.array([False, True, True, True])
        out = normalize_linear(values, mask)
        assert list(out) == [0, 0, 127, 255]

    def test_constant_is_blank(self):
        out = normalize_linear(np.full(16, 3.7))
        assert out.shape == (16,)
        assert not out.any()

    def test_fully_masked_is_blank(self):
        out = normalize_linear(np.arange(4.0), np.zeros(4, dtype=bool))
        assert not out.any()


class TestLogarithmic:
    """Logarithmic normalisation g = ln(v - min + e) - 1."""

    def test_powers_of_e(self):
        values = np.exp(np.arange(4.0))
        out = normalize_to_bytes(values, logarithmic=True)
        assert out[0] == 0
        assert out[3] == 255
        np.testing.assert_array_equal(out, _expected_log(values))

    def test_negative_values(self):
        values = np.array([-3000.0, 6000.0, 6000.0, -10000.0])
        out = normalize_log(values)
        assert out[3] == 0
        assert out[1] == out[2] == 255
        np.testing.assert_array_equal(out, _expected_log(values))

    def test_wide_dynamic_range(self):
        values = np.array([32765.025, 10000.0, 1.211, 1.198])
        np.testing.assert_array_equal(normalize_log(values), _expected_log(values))

    def test_deterministic(self):
        values = np.random.default_rng(7).lognormal(size=64)
        a = normalize_log(values)
        b = normalize_log(values)
        np.testing.assert_array_equal(a, b)

    def test_mask(self):
        values = np.array([-50.0, 1.0, 10.0, 100.0])
        mask = np.array([False, True, True, True])
        out = normalize_log(values, mask)
        assert out[0] == 0
        np.testing.assert_array_equal(out, _expected_log(values, mask))

    def test_constant_is_blank(self):
        out = normalize_log(np.full(9, -2.0))
        assert not out.any()


class TestImage:
    """Square image wrapper."""

    def test_shape_and_values(self):
        image = normalize_to_image(2, np.array([0.0, 1.0, 0.5, 1.0 / 3.0]))
        assert image.shape == (2, 2)
        assert image.dtype == np.uint8
        np.testing.assert_array_equal(image, [[0, 255], [127, 85]])

    def test_size_mismatch(self):
        with pytest.raises(InvalidDimensionError):
            normalize_to_image(3, np.zeros(4))

    def test_mask_size_mismatch(self):
        with pytest.raises(InvalidDimensionError):
            normalize_to_image(2, np.zeros(4), mask=np.ones(9, dtype=bool))

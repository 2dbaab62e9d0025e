"""Tests for tone mapping."""

import numpy as np
import pytest

from pathforge.tonemapping import apply_gamma, tone_map, quantize, to_ldr, CLAMP_MAX


class TestGamma:
    """Test gamma correction."""

    def test_gamma_two_is_square_root(self):
        image = np.array([[[0.25, 0.04, 1.0]]])
        assert np.allclose(apply_gamma(image, 2.0), [[[0.5, 0.2, 1.0]]])

    def test_gamma_one_is_identity(self):
        image = np.array([[[0.1, 0.5, 0.9]]])
        assert np.allclose(apply_gamma(image, 1.0), image)

    def test_negative_values_become_black(self):
        image = np.array([[[-0.5, -1e-9, 0.0]]])
        assert np.array_equal(apply_gamma(image), np.zeros((1, 1, 3)))


class TestToneMap:
    """Test averaging, gamma and clamping."""

    def test_averages_by_sample_count(self):
        accumulated = np.full((2, 2, 3), 1.0)
        assert np.allclose(tone_map(accumulated, 4), 0.5)

    def test_clamps_bright_values(self):
        accumulated = np.full((2, 2, 3), 40.0)
        assert np.all(tone_map(accumulated, 4) == CLAMP_MAX)

    def test_output_range(self, rng):
        accumulated = rng.uniform(-1.0, 20.0, size=(5, 7, 3))
        mapped = tone_map(accumulated, 3)
        assert mapped.min() >= 0.0
        assert mapped.max() <= CLAMP_MAX

    def test_does_not_modify_input(self):
        accumulated = np.full((2, 2, 3), 4.0)
        tone_map(accumulated, 2)
        assert np.all(accumulated == 4.0)

    def test_zero_samples_raises(self):
        with pytest.raises(ValueError):
            tone_map(np.zeros((2, 2, 3)), 0)


class TestQuantize:
    """Test 8-bit conversion."""

    def test_truncates_after_scaling_by_256(self):
        mapped = np.array([[[0.0, 0.5, CLAMP_MAX]]])
        assert quantize(mapped).tolist() == [[[0, 128, 255]]]

    def test_truncation_not_rounding(self):
        # 0.9 * 256 = 230.4 and 0.003 * 256 = 0.768
        mapped = np.array([[[0.9, 0.003, 0.1]]])
        assert quantize(mapped).tolist() == [[[230, 0, 25]]]

    def test_dtype(self):
        assert quantize(np.zeros((3, 4, 3))).dtype == np.uint8


class TestToLdr:
    """Test the full pipeline from summed samples to 8-bit pixels."""

    def test_full_white(self):
        assert np.all(to_ldr(np.full((2, 3, 3), 4.0), 4) == 255)

    def test_quarter_intensity(self):
        # Average 0.25, gamma 2 gives 0.5, which quantizes to 128
        assert np.all(to_ldr(np.full((2, 3, 3), 1.0), 4) == 128)

    def test_black(self):
        assert np.all(to_ldr(np.zeros((2, 3, 3)), 10) == 0)

    def test_shape_preserved(self):
        assert to_ldr(np.zeros((5, 9, 3)), 1).shape == (5, 9, 3)

"""Tests for the brightness to thickness mapping."""

import numpy as np
import pytest

from lithophane import brightness_to_thickness


class TestBrightnessToThickness:
    def test_black_is_max_thickness(self):
        assert brightness_to_thickness(0, 0.8, 3.0) == 3.0

    def test_white_is_min_thickness(self):
        assert brightness_to_thickness(255, 0.8, 3.0) == 0.8

    def test_extremes_exact_for_other_bounds(self):
        for lo, hi in [(0.4, 10.0), (0.6, 2.2), (1.1, 1.3)]:
            assert brightness_to_thickness(0, lo, hi) == hi
            assert brightness_to_thickness(255, lo, hi) == lo

    def test_midpoint(self):
        assert brightness_to_thickness(127.5, 1.0, 3.0) == pytest.approx(2.0)

    def test_monotonic_non_increasing(self):
        values = brightness_to_thickness(np.arange(256, dtype=np.uint8), 0.8, 3.0)
        assert np.all(np.diff(values) <= 0)

    def test_array_matches_scalar(self):
        samples = np.array([0, 17, 128, 254, 255], dtype=np.uint8)
        vector = brightness_to_thickness(samples, 0.8, 3.0)
        for b, t in zip(samples, vector):
            assert t == pytest.approx(brightness_to_thickness(int(b), 0.8, 3.0))

    def test_uint8_input_does_not_overflow(self):
        samples = np.array([255], dtype=np.uint8)
        assert brightness_to_thickness(samples, 0.8, 3.0)[0] == pytest.approx(0.8)

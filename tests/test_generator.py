"""Tests for the generate entry point."""

import numpy as np
import pytest

import lithophane.generator as generator
from lithophane import (
    AdjustmentMode,
    CylinderParams,
    FlatParams,
    InsufficientImages,
    InvalidAdjustmentMode,
    InvalidDimensions,
    InvalidResolution,
    InvalidShapeType,
    PrismParams,
    generate,
    raster_size,
)


@pytest.fixture
def no_raster_work(monkeypatch):
    """Fails the test if a height map is built."""
    def forbidden(*args, **kwargs):
        raise AssertionError("height map built before validation finished")
    monkeypatch.setattr(generator, 'build_height_map', forbidden)


class TestRasterSize:
    def test_flat(self):
        assert raster_size(FlatParams(10, 5, 0.8, 3.0), 2) == (20, 10)

    def test_cylinder_uses_circumference(self):
        assert raster_size(CylinderParams(10, 5, 0.8, 3.0), 1) == (31, 5)

    def test_prism_uses_face_width(self):
        assert raster_size(PrismParams(4, 10, 5, 0.8, 3.0), 1) == (14, 5)

    def test_fractional_resolution_floors(self):
        assert raster_size(FlatParams(10, 10, 0.8, 3.0), 0.55) == (5, 5)

    @pytest.mark.parametrize("resolution", [0, -1, float('nan'), float('inf')])
    def test_bad_resolution(self, resolution):
        with pytest.raises(InvalidResolution):
            raster_size(FlatParams(10, 10, 0.8, 3.0), resolution)

    def test_rounds_to_nothing(self):
        with pytest.raises(InvalidResolution):
            raster_size(FlatParams(10, 0.4, 0.8, 3.0), 2)


class TestValidation:
    def test_prism_with_too_few_images(self, solid_image, no_raster_work):
        images = [solid_image(8, 8), solid_image(8, 8)]
        with pytest.raises(InsufficientImages):
            generate(PrismParams(4, 40, 100, 0.8, 3.0), images)

    def test_no_images(self, no_raster_work):
        with pytest.raises(InsufficientImages):
            generate(FlatParams(10, 10, 0.8, 3.0), [])

    def test_unknown_shape(self, solid_image):
        with pytest.raises(InvalidShapeType):
            generate({'kind': 'sphere'}, [solid_image(4, 4)])

    def test_inverted_thickness(self, solid_image, no_raster_work):
        with pytest.raises(InvalidDimensions):
            generate(FlatParams(10, 10, 3.0, 0.8), [solid_image(4, 4)])

    def test_prism_side_count(self, solid_image, no_raster_work):
        with pytest.raises(InvalidDimensions):
            generate(PrismParams(9, 40, 100, 0.8, 3.0), [solid_image(4, 4)] * 9)

    @pytest.mark.parametrize("shape", [
        FlatParams(None, 10, 0.8, 3.0),
        CylinderParams(80, 100, None, 3.0),
        PrismParams(None, 40, 100, 0.8, 3.0),
        PrismParams(4.5, 40, 100, 0.8, 3.0),
    ])
    def test_missing_or_non_integer_fields(self, shape, solid_image, no_raster_work):
        with pytest.raises(InvalidDimensions):
            generate(shape, [solid_image(4, 4)] * 4)

    def test_unknown_mode(self, solid_image, no_raster_work):
        with pytest.raises(InvalidAdjustmentMode):
            generate(FlatParams(10, 10, 0.8, 3.0), [solid_image(4, 4)], adjustment_mode='zoom')

    def test_bad_resolution(self, solid_image, no_raster_work):
        with pytest.raises(InvalidResolution):
            generate(FlatParams(10, 10, 0.8, 3.0), [solid_image(4, 4)], resolution=0)


class TestGenerate:
    def test_flat_vertex_count_follows_raster(self, gradient_image):
        mesh = generate(FlatParams(10, 5, 0.8, 3.0), [gradient_image(40, 20)], resolution=2)
        assert mesh.vertex_count == 2 * 20 * 10
        np.testing.assert_allclose(mesh.bounds[:, :2], [[-5, -2.5], [5, 2.5]])

    def test_cylinder_with_caps_is_watertight(self, gradient_image):
        shape = CylinderParams(20, 10, 0.8, 3.0, include_top=True, include_bottom=True)
        mesh = generate(shape, [gradient_image(30, 10)], AdjustmentMode.STRETCH, resolution=1)
        assert mesh.vertex_count == 2 * 62 * 10
        assert mesh.to_trimesh().is_watertight

    def test_prism_ignores_extra_images(self, solid_image, gradient_image):
        shape = PrismParams(3, 10, 10, 0.8, 3.0)
        images = [gradient_image(16, 16), solid_image(16, 16), solid_image(16, 16, (255, 255, 255, 255))]
        base = generate(shape, images, resolution=1)
        extra = generate(shape, images + [solid_image(16, 16)], resolution=1)
        np.testing.assert_array_equal(base.vertices, extra.vertices)
        np.testing.assert_array_equal(base.indices, extra.indices)

    def test_deterministic(self, gradient_image):
        shape = FlatParams(12, 8, 0.8, 3.0)
        first = generate(shape, [gradient_image(30, 20)], 'cover', 1.5)
        second = generate(shape, [gradient_image(30, 20)], 'cover', 1.5)
        np.testing.assert_array_equal(first.vertices, second.vertices)
        np.testing.assert_array_equal(first.indices, second.indices)
        np.testing.assert_array_equal(first.normals, second.normals)

    def test_progress_monotonic_and_complete(self, gradient_image):
        seen = []
        generate(PrismParams(4, 10, 10, 0.8, 3.0), [gradient_image(8, 8)] * 4,
                 resolution=1, progress_cb=seen.append)
        assert seen
        assert all(a <= b for a, b in zip(seen, seen[1:]))
        assert seen[-1] == pytest.approx(1.0)

    def test_accepts_any_image_sequence(self, solid_image):
        images = (solid_image(4, 4) for _ in range(1))
        mesh = generate(FlatParams(4, 4, 0.8, 3.0), images, resolution=1)
        assert mesh.vertex_count == 2 * 4 * 4

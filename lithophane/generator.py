import logging
import math
from typing import Callable, Optional, Sequence

from .errors import InsufficientImages, InvalidResolution, InvalidShapeType
from .height_map import build_height_map
from .mesh import Mesh
from .mesh_builder import build_cylinder, build_flat, build_prism
from .shapes import AdjustmentMode, CylinderParams, FlatParams, PrismParams, ShapeParams
from .utils import timed, DEFAULT_ADJUSTMENT_MODE, DEFAULT_RESOLUTION

logger = logging.getLogger(__name__)


def raster_size(shape: ShapeParams, resolution):
    """
    Target raster size in pixels for one image of the shape.

    flat: width x height; cylinder: circumference x height;
    prism: face width x height. Each axis is floor(mm * px_per_mm).
    """
    if not math.isfinite(resolution) or resolution <= 0:
        raise InvalidResolution(f"Resolution must be a positive number of px/mm, got {resolution}")
    width_mm, height_mm = shape.raster_size_mm()
    target_width = math.floor(width_mm * resolution)
    target_height = math.floor(height_mm * resolution)
    if target_width < 1 or target_height < 1:
        raise InvalidResolution(
            f"{width_mm:.2f}x{height_mm:.2f} mm at {resolution} px/mm rounds to "
            f"{target_width}x{target_height} px"
        )
    return target_width, target_height


def _require_images(images, count):
    if len(images) < count:
        raise InsufficientImages(f"Need {count} image(s), got {len(images)}")


def _generate_flat(shape: FlatParams, images, mode, size, progress_cb):
    height_map = build_height_map(images[0], *size, mode)
    return build_flat(height_map, shape.width, shape.height,
                      shape.min_thickness, shape.max_thickness, progress_cb=progress_cb)


def _generate_cylinder(shape: CylinderParams, images, mode, size, progress_cb):
    height_map = build_height_map(images[0], *size, mode)
    return build_cylinder(height_map, shape.diameter, shape.height,
                          shape.min_thickness, shape.max_thickness,
                          shape.include_top, shape.include_bottom, progress_cb=progress_cb)


def _generate_prism(shape: PrismParams, images, mode, size, progress_cb):
    height_maps = [build_height_map(image, *size, mode) for image in images[:shape.sides]]
    return build_prism(height_maps, shape.sides, shape.radius, shape.height,
                       shape.min_thickness, shape.max_thickness,
                       shape.include_top, shape.include_bottom, progress_cb=progress_cb)


# shape record type -> (images required, builder)
_GENERATORS = {
    FlatParams: (lambda shape: 1, _generate_flat),
    CylinderParams: (lambda shape: 1, _generate_cylinder),
    PrismParams: (lambda shape: shape.sides, _generate_prism),
}


@timed
def generate(shape: ShapeParams, images: Sequence, adjustment_mode=DEFAULT_ADJUSTMENT_MODE,
             resolution=DEFAULT_RESOLUTION,
             progress_cb: Optional[Callable[[float], None]] = None) -> Mesh:
    """
    Generates a lithophane mesh from decoded images and shape parameters.

    Args:
        shape: FlatParams, CylinderParams or PrismParams
        images: Decoded PIL images; flat and cylinder use the first one,
            a prism uses one per side (extras are ignored)
        adjustment_mode: AdjustmentMode or its string value
        resolution: Raster pixels per millimetre
        progress_cb: Optional callable receiving the completed fraction
            between rows of mesh construction

    All validation happens before any raster work; identical inputs always
    give identical vertex and index buffers.
    """
    entry = _GENERATORS.get(type(shape))
    if entry is None:
        raise InvalidShapeType(f"Unknown lithophane shape: {type(shape).__name__}")
    images_needed, build = entry

    shape.validate()
    mode = AdjustmentMode.parse(adjustment_mode)
    size = raster_size(shape, resolution)
    images = list(images)
    _require_images(images, images_needed(shape))

    mesh = build(shape, images, mode, size, progress_cb)
    logger.info("Generated %s lithophane: %d vertices, %d triangles (%dx%d px, %s)",
                shape.kind.value, mesh.vertex_count, mesh.triangle_count,
                size[0], size[1], mode.value)
    return mesh

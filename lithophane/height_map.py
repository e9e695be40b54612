import logging
import math
from dataclasses import dataclass

import numpy as np
from PIL import Image

from .errors import InvalidResolution
from .shapes import AdjustmentMode
from .utils import timed, BACKGROUND_RGBA, DEFAULT_ADJUSTMENT_MODE, RESAMPLE_FILTER

logger = logging.getLogger(__name__)

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


@dataclass
class HeightMap:
    """Row-major grid of brightness samples (0-255)."""
    width: int
    height: int
    samples: np.ndarray

    def __post_init__(self):
        self.samples = np.asarray(self.samples, dtype=np.uint8).reshape(-1)
        if self.width < 1 or self.height < 1:
            raise InvalidResolution(f"Height map must be at least 1x1, got {self.width}x{self.height}")
        if self.samples.size != self.width * self.height:
            raise InvalidResolution(
                f"Height map holds {self.samples.size} samples, expected {self.width}x{self.height}"
            )

    @classmethod
    def from_array(cls, grid) -> 'HeightMap':
        grid = np.asarray(grid)
        h, w = grid.shape
        return cls(width=w, height=h, samples=grid.reshape(-1))

    @property
    def grid(self) -> np.ndarray:
        return self.samples.reshape(self.height, self.width)


def to_luminance(rgba: Image.Image) -> np.ndarray:
    """Converts an image to a flat uint8 luminance array (L = 0.299R + 0.587G + 0.114B)."""
    rgb = np.asarray(rgba.convert('RGB'), dtype=np.float64)
    r, g, b = LUMA_WEIGHTS
    lum = rgb[..., 0] * r + rgb[..., 1] * g + rgb[..., 2] * b
    return np.clip(np.rint(lum), 0, 255).astype(np.uint8).reshape(-1)


def _fitted_layer(source, target_width, target_height, mode):
    """Returns the resampled image and its top-left offset on the canvas."""
    w, h = source.size
    img_ratio = w / h
    target_ratio = target_width / target_height

    if mode is AdjustmentMode.STRETCH:
        return source.resize((target_width, target_height), RESAMPLE_FILTER), (0, 0)

    if mode is AdjustmentMode.FIT:
        # whole image visible, white letterbox margins
        if img_ratio > target_ratio:
            scaled_w = target_width
            scaled_h = min(target_height, max(1, round(target_width / img_ratio)))
        else:
            scaled_h = target_height
            scaled_w = min(target_width, max(1, round(target_height * img_ratio)))
        offset = ((target_width - scaled_w) // 2, (target_height - scaled_h) // 2)
        return source.resize((scaled_w, scaled_h), RESAMPLE_FILTER), offset

    # cover: crop the source to the target ratio, centred
    if img_ratio > target_ratio:
        crop_w = h * target_ratio
        box = ((w - crop_w) / 2, 0, (w + crop_w) / 2, h)
    else:
        crop_h = w / target_ratio
        box = (0, (h - crop_h) / 2, w, (h + crop_h) / 2)
    return source.resize((target_width, target_height), RESAMPLE_FILTER, box=box), (0, 0)


def _draw_tiles(canvas, source):
    """Repeats the source at native scale from (0, 0), clipped to the canvas."""
    cw, ch = canvas.size
    w, h = source.size
    for ty in range(math.ceil(ch / h)):
        for tx in range(math.ceil(cw / w)):
            x0, y0 = tx * w, ty * h
            tile = source
            if x0 + w > cw or y0 + h > ch:
                tile = source.crop((0, 0, min(w, cw - x0), min(h, ch - y0)))
            canvas.alpha_composite(tile, dest=(x0, y0))


@timed
def build_height_map(image, target_width, target_height, mode=DEFAULT_ADJUSTMENT_MODE) -> HeightMap:
    """
    Resamples an image onto a target_width x target_height raster and
    converts it to a grid of brightness samples.

    Args:
        image: Decoded PIL image (any mode) or an RGB/RGBA numpy array
        target_width: Raster width in pixels
        target_height: Raster height in pixels
        mode: AdjustmentMode (or its string value) deciding how the image
            aspect ratio is mapped onto the raster

    Canvas areas the image does not cover, and transparent pixels, read as
    white, which maps to the thinnest wall.
    """
    mode = AdjustmentMode.parse(mode)
    target_width, target_height = int(target_width), int(target_height)
    if target_width < 1 or target_height < 1:
        raise InvalidResolution(f"Target raster must be at least 1x1 px, got {target_width}x{target_height}")

    if isinstance(image, np.ndarray):
        image = Image.fromarray(image)
    source = image.convert('RGBA')
    if source.width < 1 or source.height < 1:
        raise InvalidResolution(f"Source image is empty ({source.width}x{source.height})")

    canvas = Image.new('RGBA', (target_width, target_height), BACKGROUND_RGBA)
    if mode is AdjustmentMode.TILE:
        _draw_tiles(canvas, source)
    else:
        layer, offset = _fitted_layer(source, target_width, target_height, mode)
        canvas.alpha_composite(layer, dest=offset)

    logger.debug("Height map %dx%d from %dx%d image (%s)",
                 target_width, target_height, source.width, source.height, mode.value)
    return HeightMap(target_width, target_height, to_luminance(canvas))

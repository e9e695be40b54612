"""
Shape parameter records and enums passed from the UI layer into the core.

Every record is re-validated by the core before any raster work starts;
upstream form limits are never trusted on their own.
"""

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from .errors import InvalidAdjustmentMode, InvalidDimensions
from .utils import MAX_SIDES, MIN_SIDES


class ShapeKind(str, Enum):
    FLAT = 'flat'
    CYLINDER = 'cylinder'
    PRISM = 'prism'


class AdjustmentMode(str, Enum):
    """How a source image is fitted onto the target raster."""
    STRETCH = 'stretch'
    FIT = 'fit'
    COVER = 'cover'
    TILE = 'tile'

    @classmethod
    def parse(cls, value) -> 'AdjustmentMode':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidAdjustmentMode(f"Unknown adjustment mode: {value!r}") from None


def _require_positive(**lengths):
    for name, value in lengths.items():
        if not isinstance(value, numbers.Real) or not math.isfinite(value) or value <= 0:
            raise InvalidDimensions(f"{name} must be positive, got {value}")


def _require_thickness(min_thickness, max_thickness):
    _require_positive(min_thickness=min_thickness, max_thickness=max_thickness)
    if max_thickness <= min_thickness:
        raise InvalidDimensions(
            f"max_thickness ({max_thickness}) must be greater than min_thickness ({min_thickness})"
        )


@dataclass(frozen=True)
class FlatParams:
    width: float
    height: float
    min_thickness: float
    max_thickness: float

    kind = ShapeKind.FLAT

    def validate(self):
        _require_positive(width=self.width, height=self.height)
        _require_thickness(self.min_thickness, self.max_thickness)

    def raster_size_mm(self) -> Tuple[float, float]:
        return self.width, self.height


@dataclass(frozen=True)
class CylinderParams:
    diameter: float
    height: float
    min_thickness: float
    max_thickness: float
    include_top: bool = False
    include_bottom: bool = False

    kind = ShapeKind.CYLINDER

    def validate(self):
        _require_positive(diameter=self.diameter, height=self.height)
        _require_thickness(self.min_thickness, self.max_thickness)
        # inner shell sits at diameter/2 - min_thickness/2
        if self.diameter <= self.min_thickness:
            raise InvalidDimensions(
                f"diameter ({self.diameter}) must exceed min_thickness ({self.min_thickness})"
            )

    def raster_size_mm(self) -> Tuple[float, float]:
        return math.pi * self.diameter, self.height


@dataclass(frozen=True)
class PrismParams:
    sides: int
    radius: float
    height: float
    min_thickness: float
    max_thickness: float
    include_top: bool = False
    include_bottom: bool = False

    kind = ShapeKind.PRISM

    def validate(self):
        if not isinstance(self.sides, numbers.Real) or isinstance(self.sides, bool) \
                or not math.isfinite(self.sides) or int(self.sides) != self.sides \
                or not MIN_SIDES <= self.sides <= MAX_SIDES:
            raise InvalidDimensions(f"sides must be an integer in [{MIN_SIDES}, {MAX_SIDES}], got {self.sides}")
        _require_positive(radius=self.radius, height=self.height)
        _require_thickness(self.min_thickness, self.max_thickness)

    @property
    def side_width(self) -> float:
        return side_width(self.sides, self.radius)

    def raster_size_mm(self) -> Tuple[float, float]:
        return self.side_width, self.height


ShapeParams = Union[FlatParams, CylinderParams, PrismParams]


def side_width(sides, radius):
    """Edge length of a regular polygon with the given circumradius."""
    return 2 * radius * math.sin(math.pi / sides)

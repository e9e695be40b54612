class LithophaneError(ValueError):
    """Base class for input errors raised by the lithophane core."""

    def __init__(self, message: str):
        super().__init__(message)


class InvalidShapeType(LithophaneError):
    """Raised when a shape tag is not one of flat, cylinder or prism."""


class InvalidDimensions(LithophaneError):
    """Raised for non-positive lengths, inverted thickness bounds or bad side counts."""


class InvalidResolution(LithophaneError):
    """Raised when a raster or height map is too small to build from."""


class InsufficientImages(LithophaneError):
    """Raised when fewer images are supplied than the shape has faces."""


class InvalidAdjustmentMode(LithophaneError):
    """Raised for an unknown image adjustment mode."""

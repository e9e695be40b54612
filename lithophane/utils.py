import logging
import sys
import time
from functools import wraps

from PIL import Image

# Configuration defaults
DEFAULT_RESOLUTION = 2.0  # Raster pixels per millimetre
DEFAULT_ADJUSTMENT_MODE = 'fit'
RESAMPLE_FILTER = Image.Resampling.BILINEAR
BACKGROUND_RGBA = (255, 255, 255, 255)  # Uncovered canvas reads as white -> thinnest wall
MIN_SIDES = 3
MAX_SIDES = 8
EXPORT_NAME_TEMPLATE = 'lithophane_{kind}.stl'

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(level=logging.INFO, fmt=LOG_FORMAT):
    """Configure the root logger once at the entry point."""
    logging.basicConfig(level=level, format=fmt, handlers=[logging.StreamHandler(sys.stderr)])


def timed(func):
    """Decorator to log the execution time of a function."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        t0 = time.perf_counter()
        result = func(*args, **kwargs)
        t1 = time.perf_counter()
        logger.debug(f"[TIMING] {func.__name__:25s}: {t1 - t0:0.3f}s")
        return result

    return wrapper

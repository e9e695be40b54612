import numpy as np


def brightness_to_thickness(brightness, min_thickness, max_thickness):
    """
    Map brightness (0-255) to wall thickness.

    Brighter pixels give thinner walls, darker pixels thicker ones, so more
    light is blocked where the image is dark when the print is backlit.
    Accepts a scalar or a numpy array.

    Equivalent to ``min + (1 - b/255) * (max - min)``, written as a blend of
    the two bounds so that 0 maps to max_thickness and 255 to min_thickness
    without rounding error.
    """
    if isinstance(brightness, np.ndarray):
        brightness = brightness.astype(np.float64)
    normalized = brightness / 255
    return (1 - normalized) * max_thickness + normalized * min_thickness

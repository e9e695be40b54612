from .shape_panel import ShapePanel
from .controls_panel import ControlsPanel
from .status_banner import StatusBanner
from .image_list import ImageList

__all__ = [
    'ShapePanel', 'ControlsPanel', 'StatusBanner', 'ImageList'
]

"""
Lithophane generation package

Turns raster images into 3D-printable solids whose wall thickness encodes
image brightness: dark pixels give thick walls, bright pixels thin ones, so
the print reproduces the image when lit from behind.

Supported carrier shapes:
- Flat panel
- Cylinder (image wrapped around the axis, optional top/bottom closure)
- N-sided prism (one image per face, 3 to 8 sides, optional caps)

The result is an indexed Mesh in millimetres that can be written as binary
or ASCII STL.
"""

from .errors import (
    LithophaneError,
    InvalidShapeType,
    InvalidDimensions,
    InvalidResolution,
    InsufficientImages,
    InvalidAdjustmentMode,
)

from .shapes import (
    ShapeKind,
    AdjustmentMode,
    FlatParams,
    CylinderParams,
    PrismParams,
    side_width,
)

from .height_map import HeightMap, build_height_map, to_luminance
from .thickness import brightness_to_thickness
from .mesh import Mesh, merge_meshes, face_normals, vertex_normals

from .mesh_builder import (
    build_flat,
    build_cylinder,
    build_prism,
    build_polygon_cap,
    add_side_walls,
    face_transform,
)

from .generator import generate, raster_size
from .stl_export import export_stl, load_stl, export_filename

__version__ = "1.0.0"
__all__ = [
    # Errors
    "LithophaneError",
    "InvalidShapeType",
    "InvalidDimensions",
    "InvalidResolution",
    "InsufficientImages",
    "InvalidAdjustmentMode",

    # Parameters
    "ShapeKind",
    "AdjustmentMode",
    "FlatParams",
    "CylinderParams",
    "PrismParams",
    "side_width",

    # Height maps
    "HeightMap",
    "build_height_map",
    "to_luminance",
    "brightness_to_thickness",

    # Meshes
    "Mesh",
    "merge_meshes",
    "face_normals",
    "vertex_normals",
    "build_flat",
    "build_cylinder",
    "build_prism",
    "build_polygon_cap",
    "add_side_walls",
    "face_transform",

    # Pipeline & export
    "generate",
    "raster_size",
    "export_stl",
    "load_stl",
    "export_filename",
]

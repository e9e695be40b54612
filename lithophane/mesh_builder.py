"""
Shape-specific lithophane triangulation.

All builders emit vertices ring by ring in row-major order and triangles
counter-clockwise when seen from outside the solid, so the facet normal
(v1 - v0) x (v2 - v0) points outward.
"""

import logging
import math
from typing import Callable, Optional, Sequence

import numpy as np
import trimesh

from .errors import InsufficientImages, InvalidResolution
from .height_map import HeightMap
from .mesh import Mesh, merge_meshes, vertex_normals
from .shapes import CylinderParams, FlatParams, PrismParams, side_width
from .thickness import brightness_to_thickness
from .utils import timed

logger = logging.getLogger(__name__)

ProgressCallback = Optional[Callable[[float], None]]


def _report(progress_cb, value):
    if progress_cb:
        progress_cb(value)


def _scaled_progress(progress_cb, start, span):
    if progress_cb is None:
        return None
    return lambda v: progress_cb(start + v * span)


def _grid_quads(cols, rows, offset=0, wrap=False):
    """
    Corner indices (a, b, c, d) of every quad of a row-major vertex grid.

    a=(x, y), b=(x+1, y), c=(x, y+1), d=(x+1, y+1). With wrap=True the last
    column is joined back to column 0.
    """
    quad_cols = cols if wrap else cols - 1
    ys, xs = np.meshgrid(np.arange(rows - 1), np.arange(quad_cols), indexing='ij')
    xs_next = (xs + 1) % cols if wrap else xs + 1
    a = offset + ys * cols + xs
    b = offset + ys * cols + xs_next
    c = offset + (ys + 1) * cols + xs
    d = offset + (ys + 1) * cols + xs_next
    return a.ravel(), b.ravel(), c.ravel(), d.ravel()


def _quad_triangles(a, b, c, d, reverse=False):
    """Splits quads into (a, c, b), (b, c, d), or the mirrored winding when reverse is set."""
    if reverse:
        tris = np.stack([a, b, c, b, d, c], axis=1)
    else:
        tris = np.stack([a, c, b, b, c, d], axis=1)
    return tris.reshape(-1, 3).astype(np.int64)


def add_side_walls(cols, rows, front_offset, back_offset):
    """
    Closes the rim of a two-ring grid slab with left, right, top and bottom
    strips of quads joining the front ring to the back ring.

    Returns the (k, 3) triangle indices, wound to match a front ring
    triangulated with the default winding and a back ring with the reversed one.
    """
    ys = np.arange(rows - 1)
    xs = np.arange(cols - 1)
    strips = []

    # left
    a = front_offset + ys * cols
    strips.append(_quad_triangles(a, a + cols, a - front_offset + back_offset,
                                  a - front_offset + back_offset + cols))
    # right
    a = front_offset + ys * cols + (cols - 1)
    strips.append(_quad_triangles(a, a + cols, a - front_offset + back_offset,
                                  a - front_offset + back_offset + cols, reverse=True))
    # top
    a = front_offset + xs
    strips.append(_quad_triangles(a, a + 1, a - front_offset + back_offset,
                                  a - front_offset + back_offset + 1, reverse=True))
    # bottom
    a = front_offset + (rows - 1) * cols + xs
    strips.append(_quad_triangles(a, a + 1, a - front_offset + back_offset,
                                  a - front_offset + back_offset + 1))

    return np.concatenate(strips)


@timed
def build_flat(height_map: HeightMap, width, height, min_thickness, max_thickness,
               progress_cb: ProgressCallback = None) -> Mesh:
    """
    Builds a closed flat lithophane panel centred on the origin.

    The front ring bulges towards +Z by half the local thickness, the back
    ring is a flat plane at -min_thickness / 2. Four side walls close the rim.
    """
    FlatParams(width, height, min_thickness, max_thickness).validate()
    cols, rows = height_map.width, height_map.height
    if cols < 2 or rows < 2:
        raise InvalidResolution(f"Flat lithophane needs at least a 2x2 height map, got {cols}x{rows}")

    seg_x, seg_y = cols - 1, rows - 1
    grid = height_map.grid
    pos_x = (np.arange(cols) / seg_x - 0.5) * width

    front = np.empty((rows, cols, 3), dtype=np.float64)
    back = np.empty((rows, cols, 3), dtype=np.float64)
    for y in range(rows):
        pos_y = (0.5 - y / seg_y) * height
        front[y, :, 0] = pos_x
        front[y, :, 1] = pos_y
        front[y, :, 2] = brightness_to_thickness(grid[y], min_thickness, max_thickness) / 2
        back[y, :, 0] = pos_x
        back[y, :, 1] = pos_y
        back[y, :, 2] = -min_thickness / 2
        _report(progress_cb, (y + 1) / rows)

    vertices = np.concatenate([front.reshape(-1, 3), back.reshape(-1, 3)])
    back_offset = cols * rows

    indices = np.concatenate([
        _quad_triangles(*_grid_quads(cols, rows)),
        _quad_triangles(*_grid_quads(cols, rows, offset=back_offset), reverse=True),
        add_side_walls(cols, rows, 0, back_offset),
    ])
    return Mesh(vertices, indices, vertex_normals(vertices, indices))


@timed
def build_cylinder(height_map: HeightMap, diameter, height, min_thickness, max_thickness,
                   include_top=False, include_bottom=False,
                   progress_cb: ProgressCallback = None) -> Mesh:
    """
    Wraps a height map around the vertical axis.

    Columns map to angles 2*pi*x/width with no duplicated seam vertex; rows
    run from -height/2 to +height/2. The outer shell carries the relief, the
    inner shell is a uniform backing at radius - min_thickness/2. Top and
    bottom annuli close the tube when requested; otherwise it stays open.
    """
    CylinderParams(diameter, height, min_thickness, max_thickness).validate()
    segments, rows = height_map.width, height_map.height
    if segments < 3 or rows < 2:
        raise InvalidResolution(
            f"Cylinder lithophane needs at least 3 columns and 2 rows, got {segments}x{rows}"
        )

    radius = diameter / 2
    inner_radius = radius - min_thickness / 2
    grid = height_map.grid
    angles = 2 * math.pi * np.arange(segments) / segments
    cos_a, sin_a = np.cos(angles), np.sin(angles)

    outer = np.empty((rows, segments, 3), dtype=np.float64)
    inner = np.empty((rows, segments, 3), dtype=np.float64)
    for y in range(rows):
        pos_y = (y / (rows - 1) - 0.5) * height
        r = radius + brightness_to_thickness(grid[y], min_thickness, max_thickness) / 2
        outer[y, :, 0] = cos_a * r
        outer[y, :, 1] = pos_y
        outer[y, :, 2] = sin_a * r
        inner[y, :, 0] = cos_a * inner_radius
        inner[y, :, 1] = pos_y
        inner[y, :, 2] = sin_a * inner_radius
        _report(progress_cb, (y + 1) / rows)

    vertices = np.concatenate([outer.reshape(-1, 3), inner.reshape(-1, 3)])
    inner_offset = segments * rows

    parts = [
        _quad_triangles(*_grid_quads(segments, rows, wrap=True)),
        _quad_triangles(*_grid_quads(segments, rows, offset=inner_offset, wrap=True), reverse=True),
    ]

    xs = np.arange(segments)
    xs_next = (xs + 1) % segments
    if include_top:
        top = (rows - 1) * segments
        parts.append(_quad_triangles(top + xs, top + xs_next,
                                     inner_offset + top + xs, inner_offset + top + xs_next))
    if include_bottom:
        parts.append(_quad_triangles(xs, xs_next, inner_offset + xs, inner_offset + xs_next,
                                     reverse=True))

    indices = np.concatenate(parts)
    return Mesh(vertices, indices, vertex_normals(vertices, indices))


def face_transform(index, sides, radius):
    """
    4x4 transform placing prism face `index` around the vertical axis.

    The face is rotated about Y so its +Z front points along the outward
    direction at angle 2*pi*index/sides + pi/sides, then moved out to
    `radius` along that direction. Image +X stays left-to-right when viewed
    from outside.
    """
    beta = 2 * math.pi * index / sides + math.pi / sides
    rotation = trimesh.transformations.rotation_matrix(math.pi / 2 - beta, [0, 1, 0])
    translation = trimesh.transformations.translation_matrix(
        [math.cos(beta) * radius, 0.0, math.sin(beta) * radius]
    )
    return trimesh.transformations.concatenate_matrices(translation, rotation)


def build_polygon_cap(sides, radius, y_low, y_high) -> Mesh:
    """
    Closed regular polygon plate between y_low and y_high with circumradius
    `radius` and corners at angles 2*pi*i/sides, so edge i faces the
    outward direction of prism face i.
    """
    angles = 2 * math.pi * np.arange(sides) / sides
    ring = np.stack([np.cos(angles) * radius, np.zeros(sides), np.sin(angles) * radius], axis=1)
    upper = ring + [0.0, y_high, 0.0]
    lower = ring + [0.0, y_low, 0.0]
    vertices = np.concatenate([upper, lower])

    k = np.arange(1, sides - 1)
    zeros = np.zeros_like(k)
    upper_fan = np.stack([zeros, k + 1, k], axis=1)
    lower_fan = np.stack([zeros, k, k + 1], axis=1) + sides

    xs = np.arange(sides)
    xs_next = (xs + 1) % sides
    walls = _quad_triangles(xs, xs_next, xs + sides, xs_next + sides, reverse=True)

    indices = np.concatenate([upper_fan, lower_fan, walls]).astype(np.int64)
    return Mesh(vertices, indices, vertex_normals(vertices, indices))


@timed
def build_prism(height_maps: Sequence[HeightMap], sides, radius, height, min_thickness, max_thickness,
                include_top=False, include_bottom=False,
                progress_cb: ProgressCallback = None) -> Mesh:
    """
    Builds an N-sided prism from one flat lithophane per face.

    Faces are independent closed panels of width 2*radius*sin(pi/sides),
    merged in order without sharing vertices along their common edges.
    Optional caps are closed polygon plates of min_thickness appended after
    the faces. Each plate edge lies on the back plane of its face, at
    radius - min_thickness/2 from the axis.
    """
    PrismParams(sides, radius, height, min_thickness, max_thickness).validate()
    if len(height_maps) < sides:
        raise InsufficientImages(f"Prism with {sides} sides needs {sides} height maps, got {len(height_maps)}")

    face_width = side_width(sides, radius)
    faces = []
    for i in range(sides):
        face = build_flat(height_maps[i], face_width, height, min_thickness, max_thickness,
                          progress_cb=_scaled_progress(progress_cb, i / sides, 1 / sides))
        faces.append(face.transformed(face_transform(i, sides, radius)))

    # apothem of the plate equals the distance of the face back planes
    cap_radius = (radius - min_thickness / 2) / math.cos(math.pi / sides)
    if include_top:
        faces.append(build_polygon_cap(sides, cap_radius, height / 2 - min_thickness, height / 2))
    if include_bottom:
        faces.append(build_polygon_cap(sides, cap_radius, -height / 2, -height / 2 + min_thickness))

    logger.debug("Prism: %d faces of %.2f mm, caps top=%s bottom=%s",
                 sides, face_width, include_top, include_bottom)
    return merge_meshes(faces)

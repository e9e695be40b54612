"""
STL (triangle soup) serialization through trimesh's STL exchange module.

Each facet is stored on its own: one flat facet normal followed by its three
corner positions. Shared vertices and smooth per-vertex normals of the source
mesh are not represented in the format.
"""

import io
import logging

import numpy as np
from trimesh.exchange import stl as trimesh_stl

from .mesh import Mesh, face_normals
from .shapes import ShapeKind
from .utils import timed, EXPORT_NAME_TEMPLATE

logger = logging.getLogger(__name__)

HEADER_SIZE = 80


def export_filename(kind) -> str:
    """Download name for a shape kind, e.g. ``lithophane_prism.stl``."""
    return EXPORT_NAME_TEMPLATE.format(kind=ShapeKind(kind).value)


def _header(model_name: str) -> bytes:
    return model_name.encode('utf-8')[:HEADER_SIZE].ljust(HEADER_SIZE, b'\0')


def _ascii_name(model_name: str) -> str:
    return '_'.join(model_name.split()) or 'lithophane'


@timed
def export_stl(mesh: Mesh, model_name: str = 'lithophane', binary: bool = True) -> bytes:
    """
    Serializes a mesh as STL.

    For every triangle (a, b, c) the facet normal is the normalized
    (vb - va) x (vc - va); degenerate triangles get a zero normal.

    Args:
        mesh: Mesh to export
        model_name: Stored in the 80-byte binary header or the ASCII ``solid`` line
        binary: Binary STL when True, ASCII STL otherwise
    """
    tm = mesh.to_trimesh()
    if binary:
        # trimesh leaves the header zeroed
        data = _header(model_name) + trimesh_stl.export_stl(tm)[HEADER_SIZE:]
    else:
        tm.metadata['name'] = _ascii_name(model_name)
        data = trimesh_stl.export_stl_ascii(tm).encode('ascii')

    logger.debug("Exported %d facets (%s, %d bytes)", mesh.triangle_count,
                 'binary' if binary else 'ascii', len(data))
    return data


def load_stl(data: bytes):
    """
    Parses binary or ASCII STL produced by export_stl.

    Returns:
        (normals, triangles, name): (m, 3) float64 facet normals, (m, 3, 3)
        float64 corner positions and the model name from the header.
    """
    loaded = trimesh_stl.load_stl(io.BytesIO(data))
    if 'vertices' not in loaded:
        raise ValueError("Not a single-solid STL stream")

    triangles = np.asarray(loaded['vertices'], dtype=np.float64).reshape(-1, 3, 3)
    normals = loaded.get('face_normals')
    if normals is None:
        normals = face_normals(triangles.reshape(-1, 3), np.arange(len(triangles) * 3).reshape(-1, 3))
    normals = np.asarray(normals, dtype=np.float64).reshape(-1, 3)

    metadata = loaded.get('metadata', {})
    name = metadata.get('header', metadata.get('name', ''))
    return normals, triangles, (name or '').rstrip('\0').strip()

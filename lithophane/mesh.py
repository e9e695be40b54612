from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import trimesh


@dataclass
class Mesh:
    """
    Indexed triangle mesh in millimetres.

    vertices: (n, 3) float64 positions
    indices: (m, 3) int64 triangle corner indices, counter-clockwise seen from outside
    normals: optional (n, 3) float64 smooth per-vertex normals
    """
    vertices: np.ndarray
    indices: np.ndarray
    normals: Optional[np.ndarray] = None

    def __post_init__(self):
        self.vertices = np.asarray(self.vertices, dtype=np.float64).reshape(-1, 3)
        self.indices = np.asarray(self.indices, dtype=np.int64).reshape(-1, 3)
        if self.normals is not None:
            self.normals = np.asarray(self.normals, dtype=np.float64).reshape(-1, 3)
            if len(self.normals) != len(self.vertices):
                raise ValueError(f"{len(self.normals)} normals for {len(self.vertices)} vertices")
        if self.indices.size and (self.indices.min() < 0 or self.indices.max() >= len(self.vertices)):
            raise ValueError(f"Triangle index out of range for {len(self.vertices)} vertices")

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.indices)

    @property
    def triangles(self) -> np.ndarray:
        """(m, 3, 3) corner positions of every triangle."""
        return self.vertices[self.indices]

    @property
    def bounds(self) -> np.ndarray:
        return np.array([self.vertices.min(axis=0), self.vertices.max(axis=0)])

    def face_normals(self) -> np.ndarray:
        return face_normals(self.vertices, self.indices)

    def with_vertex_normals(self) -> 'Mesh':
        return Mesh(self.vertices, self.indices, vertex_normals(self.vertices, self.indices))

    def transformed(self, matrix) -> 'Mesh':
        """Returns a copy moved by a 4x4 homogeneous transform; normals are recomputed."""
        vertices = trimesh.transformations.transform_points(self.vertices, matrix)
        mesh = Mesh(vertices, self.indices.copy())
        return mesh.with_vertex_normals() if self.normals is not None else mesh

    def to_trimesh(self) -> trimesh.Trimesh:
        """Hands the mesh to trimesh as-is (no vertex merging or cleanup)."""
        return trimesh.Trimesh(vertices=self.vertices, faces=self.indices,
                               vertex_normals=self.normals, process=False)


def _cross(vertices, indices):
    tri = vertices[indices]
    return np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])


def _normalize_rows(vectors):
    lengths = np.linalg.norm(vectors, axis=1)
    out = np.zeros_like(vectors)
    nonzero = lengths > 0
    out[nonzero] = vectors[nonzero] / lengths[nonzero, None]
    return out


def face_normals(vertices, indices):
    """Unit facet normals from (v1 - v0) x (v2 - v0); zero for degenerate triangles."""
    return _normalize_rows(_cross(vertices, indices))


def vertex_normals(vertices, indices):
    """
    Smooth per-vertex normals as the area-weighted average of adjacent faces.

    The unnormalized cross product is twice the face area times its unit
    normal, so summing it per corner weights each face by area.
    """
    weighted = _cross(vertices, indices)
    acc = np.zeros((len(vertices), 3), dtype=np.float64)
    for corner in range(3):
        np.add.at(acc, indices[:, corner], weighted)
    return _normalize_rows(acc)


def merge_meshes(meshes: Sequence[Mesh]) -> Mesh:
    """
    Concatenates meshes in order without sharing vertices: vertex buffers are
    appended and each mesh's indices are offset by the running vertex count.
    """
    if not meshes:
        return Mesh(np.empty((0, 3)), np.empty((0, 3), dtype=np.int64))

    offsets = np.cumsum([0] + [m.vertex_count for m in meshes[:-1]])
    vertices = np.concatenate([m.vertices for m in meshes])
    indices = np.concatenate([m.indices + off for m, off in zip(meshes, offsets)])
    return Mesh(vertices, indices, vertex_normals(vertices, indices))

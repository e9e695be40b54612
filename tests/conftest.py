"""
Shared test fixtures for the lithophane test suite.

Images are built in memory with Pillow; nothing touches the filesystem.
"""

from collections import Counter

import numpy as np
import pytest
from PIL import Image

from lithophane import HeightMap


@pytest.fixture
def solid_image():
    """Factory for a uniformly coloured RGBA image."""
    def make(width, height, rgba=(0, 0, 0, 255)):
        return Image.new('RGBA', (width, height), rgba)
    return make


@pytest.fixture
def gradient_image():
    """Factory for a horizontal black-to-white gradient image."""
    def make(width, height):
        row = np.linspace(0, 255, width).astype(np.uint8)
        grid = np.tile(row, (height, 1))
        return Image.fromarray(np.dstack([grid, grid, grid]), mode='RGB')
    return make


@pytest.fixture
def random_height_map():
    """Factory for a reproducible random height map."""
    def make(width, height, seed=0):
        rng = np.random.default_rng(seed)
        return HeightMap.from_array(rng.integers(0, 256, size=(height, width), dtype=np.uint8))
    return make


def _directed_edges(indices):
    tris = np.asarray(indices).reshape(-1, 3)
    return Counter(
        (int(tri[i]), int(tri[(i + 1) % 3]))
        for tri in tris
        for i in range(3)
    )


@pytest.fixture
def assert_closed():
    """
    Asserts a triangle set is closed and consistently wound: every directed
    edge occurs once and its reverse occurs once, so every undirected edge
    borders exactly two triangles.
    """
    def check(indices):
        edges = _directed_edges(indices)
        assert edges, "no triangles"
        duplicated = [e for e, n in edges.items() if n != 1]
        assert not duplicated, f"directed edges used more than once: {duplicated[:5]}"
        open_edges = [e for e in edges if (e[1], e[0]) not in edges]
        assert not open_edges, f"boundary edges: {open_edges[:5]}"
    return check


@pytest.fixture
def boundary_edges():
    """Returns the directed edges with no opposite partner."""
    def find(indices):
        edges = _directed_edges(indices)
        return [e for e in edges if (e[1], e[0]) not in edges]
    return find

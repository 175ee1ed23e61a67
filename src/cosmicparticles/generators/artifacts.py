"""
Sculpted artifact samplers: pyramid, fluted column, profiled vase.
"""

import logging
from typing import Callable, Dict, Optional

import numpy as np

from cosmicparticles.generators.base import (
    DEFAULT_EXTENT,
    PointSet,
    make_rng,
    normalize_points,
)
from cosmicparticles.generators.colorgrade import hsl_to_rgb

logger = logging.getLogger(__name__)

PYRAMID_HEIGHT = 1.5
COLUMN_HEIGHT = 10.0
COLUMN_FLUTES = 20
COLUMN_FLUTE_DEPTH = 0.05
COLUMN_FLARE = 1.2
VASE_HEIGHT = 10.0

# Base corners of the pyramid faces, walking around the square
_PYRAMID_EDGES = np.array([
    [[-1.0, 0.0, 1.0], [1.0, 0.0, 1.0]],
    [[1.0, 0.0, 1.0], [1.0, 0.0, -1.0]],
    [[1.0, 0.0, -1.0], [-1.0, 0.0, -1.0]],
    [[-1.0, 0.0, -1.0], [-1.0, 0.0, 1.0]],
])


def generate_pyramid(num_points: int, rng: Optional[np.random.Generator] = None,
                     extent: float = DEFAULT_EXTENT) -> PointSet:
    """Four triangular faces plus the square base, picked uniformly (1 in 5)."""
    rng = make_rng(rng)
    face = rng.integers(0, 5, size=num_points)
    pts = np.zeros((num_points, 3), dtype=np.float64)

    sides = face < 4
    n_side = int(sides.sum())
    r1 = rng.random(n_side)
    r2 = rng.random(n_side)
    fold = r1 + r2 > 1.0
    r1[fold] = 1.0 - r1[fold]
    r2[fold] = 1.0 - r2[fold]

    apex = np.array([0.0, PYRAMID_HEIGHT, 0.0])
    edges = _PYRAMID_EDGES[face[sides]]
    pts[sides] = (
        apex
        + r1[:, np.newaxis] * (edges[:, 0] - apex)
        + r2[:, np.newaxis] * (edges[:, 1] - apex)
    )

    base = ~sides
    n_base = int(base.sum())
    pts[base, 0] = (rng.random(n_base) - 0.5) * 2.0
    pts[base, 2] = (rng.random(n_base) - 0.5) * 2.0

    # Sandstone
    colors = hsl_to_rgb(
        0.1 + rng.random(num_points) * 0.05, 0.6, 0.5 + rng.random(num_points) * 0.2
    )
    return PointSet(normalize_points(pts, extent), colors)


def generate_column(num_points: int, rng: Optional[np.random.Generator] = None,
                    extent: float = DEFAULT_EXTENT) -> PointSet:
    """Fluted shaft with a wider base and capital."""
    rng = make_rng(rng)
    h = rng.random(num_points) * COLUMN_HEIGHT
    theta = rng.random(num_points) * 2.0 * np.pi
    r = 1.0 + np.cos(theta * COLUMN_FLUTES) * COLUMN_FLUTE_DEPTH
    r = np.where((h < 1.0) | (h > COLUMN_HEIGHT - 1.0), r * COLUMN_FLARE, r)

    pts = np.stack([r * np.cos(theta), h, r * np.sin(theta)], axis=1)
    # Marble
    colors = hsl_to_rgb(0.0, 0.0, 0.9 + rng.random(num_points) * 0.1)
    return PointSet(normalize_points(pts, extent), colors)


def generate_vase(num_points: int, rng: Optional[np.random.Generator] = None,
                  extent: float = DEFAULT_EXTENT) -> PointSet:
    rng = make_rng(rng)
    t = rng.random(num_points)
    r = 1.5 + np.sin(t * np.pi * 2.0) * 0.5 + np.sin(t * np.pi * 4.0) * 0.2
    theta = rng.random(num_points) * 2.0 * np.pi

    pts = np.stack([r * np.cos(theta), t * VASE_HEIGHT, r * np.sin(theta)], axis=1)
    # Terracotta
    colors = hsl_to_rgb(
        0.05 + rng.random(num_points) * 0.05, 0.7, 0.4 + rng.random(num_points) * 0.2
    )
    return PointSet(normalize_points(pts, extent), colors)


ARTIFACT_GENERATORS: Dict[str, Callable[..., PointSet]] = {
    "pyramid": generate_pyramid,
    "column": generate_column,
    "vase": generate_vase,
}
DEFAULT_ARTIFACT = "pyramid"


def generate_artifact(shape: str, num_points: int,
                      rng: Optional[np.random.Generator] = None,
                      extent: float = DEFAULT_EXTENT) -> PointSet:
    builder = ARTIFACT_GENERATORS.get(shape)
    if builder is None:
        logger.debug("Unknown artifact %r, using %s", shape, DEFAULT_ARTIFACT)
        builder = ARTIFACT_GENERATORS[DEFAULT_ARTIFACT]
    return builder(num_points, rng, extent)

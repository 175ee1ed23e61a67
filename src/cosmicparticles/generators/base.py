"""
Point-set container and the shared geometry utilities used by generators.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

DEFAULT_EXTENT = 10.0


@dataclass(frozen=True)
class PointSet:
    """
    Generator output: M positions paired index-for-index with M colors.

    Both arrays are float32 with shape (M, 3) and are made read-only on
    creation. M is unrelated to the session capacity N.
    """

    positions: np.ndarray
    colors: np.ndarray

    def __post_init__(self):
        # Own copies, so freezing never touches a caller's array
        positions = np.array(self.positions, dtype=np.float32).reshape(-1, 3)
        colors = np.array(self.colors, dtype=np.float32).reshape(-1, 3)
        if positions.shape[0] != colors.shape[0]:
            raise ValueError(
                f"PointSet length mismatch: {positions.shape[0]} positions, "
                f"{colors.shape[0]} colors"
            )
        positions.flags.writeable = False
        colors.flags.writeable = False
        object.__setattr__(self, "positions", positions)
        object.__setattr__(self, "colors", colors)

    def __len__(self) -> int:
        return int(self.positions.shape[0])

    @classmethod
    def empty(cls) -> "PointSet":
        return cls(np.zeros((0, 3), dtype=np.float32), np.zeros((0, 3), dtype=np.float32))

    @classmethod
    def concat(cls, parts) -> "PointSet":
        """Join several point sets in order."""
        parts = [p for p in parts if len(p)]
        if not parts:
            return cls.empty()
        return cls(
            np.concatenate([p.positions for p in parts]),
            np.concatenate([p.colors for p in parts]),
        )


def make_rng(rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def normalize_points(points: np.ndarray, extent: float = DEFAULT_EXTENT) -> np.ndarray:
    """
    Center a point cloud on the origin and scale it uniformly.

    The axis-aligned bounding box center moves to the origin and the longest
    box side becomes ``extent``. A degenerate cloud (all points coincident)
    is only centered.

    Args:
        points: (M, 3) array.
        extent: Target length of the longest bounding-box side.

    Returns:
        New (M, 3) float32 array.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    if pts.shape[0] == 0:
        return np.zeros((0, 3), dtype=np.float32)

    lo = pts.min(axis=0)
    hi = pts.max(axis=0)
    center = (lo + hi) / 2.0
    max_dim = float((hi - lo).max())

    centered = pts - center
    if max_dim > 0.0:
        centered *= extent / max_dim
    return centered.astype(np.float32)


def resample_points(points: np.ndarray, count: int) -> np.ndarray:
    """
    Map a variable-length point list onto exactly ``count`` points.

    Output index i reads source index floor(i * L / count): nearest-by-position
    lookup, duplicating source points when upsampling. An empty source gives
    an empty result.
    """
    pts = np.asarray(points).reshape(-1, 3)
    length = pts.shape[0]
    if length == 0 or count <= 0:
        return np.zeros((0, 3), dtype=np.float32)
    idx = (np.arange(count, dtype=np.int64) * length) // count
    return pts[idx].astype(np.float32)


def sample_unit_sphere(n: int, rng: np.random.Generator) -> np.ndarray:
    """Uniform random unit vectors, (n, 3) float64."""
    theta = rng.random(n) * 2.0 * np.pi
    phi = np.arccos(2.0 * rng.random(n) - 1.0)
    sin_phi = np.sin(phi)
    return np.stack(
        [sin_phi * np.cos(theta), sin_phi * np.sin(theta), np.cos(phi)], axis=1
    )


def sample_ball(n: int, radius: float, rng: np.random.Generator) -> np.ndarray:
    """Uniform random points inside a ball (cube-root radial sampling)."""
    r = np.cbrt(rng.random(n)) * radius
    return sample_unit_sphere(n, rng) * r[:, np.newaxis]

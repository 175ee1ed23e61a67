"""
Parametric math curves and the recursive Koch curve.

Each generator samples ``num_points`` parameter values, maps them to 3D
with a small out-of-plane term for visual thickness, and normalizes the
result to the display extent. Colors run along the curve as a soft
blue-cyan-purple gradient.
"""

import math
from typing import List, Optional

import numpy as np
from scipy.spatial.transform import Rotation

from cosmicparticles.generators.base import (
    DEFAULT_EXTENT,
    PointSet,
    make_rng,
    normalize_points,
    resample_points,
)
from cosmicparticles.generators.colorgrade import curve_gradient

KOCH_DEPTH = 5
_UP = np.array([0.0, 1.0, 0.0])
_FALLBACK_AXIS = np.array([0.0, 0.0, 1.0])


def _param(num_points: int, span: float) -> np.ndarray:
    """Evenly spaced t in [0, span) with num_points samples."""
    return np.arange(num_points, dtype=np.float64) / max(num_points, 1) * span


def _finish(points: np.ndarray, rng: np.random.Generator, extent: float) -> PointSet:
    pts = normalize_points(points, extent)
    return PointSet(pts, curve_gradient(len(pts), rng))


def generate_cardioid(num_points: int, rng: Optional[np.random.Generator] = None,
                      extent: float = DEFAULT_EXTENT) -> PointSet:
    rng = make_rng(rng)
    t = _param(num_points, 2.0 * np.pi)
    a = 5.0
    x = a * (2.0 * np.cos(t) - np.cos(2.0 * t))
    y = a * (2.0 * np.sin(t) - np.sin(2.0 * t))
    z = (rng.random(num_points) - 0.5) * 2.0
    return _finish(np.stack([x, y, z], axis=1), rng, extent)


def generate_butterfly(num_points: int, rng: Optional[np.random.Generator] = None,
                       extent: float = DEFAULT_EXTENT) -> PointSet:
    """Temple Fay's butterfly curve over 6 turns, twisted out of plane."""
    rng = make_rng(rng)
    t = _param(num_points, 12.0 * np.pi)
    r = np.exp(np.cos(t)) - 2.0 * np.cos(4.0 * t) + np.sin(t / 12.0) ** 5
    x = r * np.sin(t)
    y = r * np.cos(t)
    z = r * np.sin(t * 2.0) * 0.5
    return _finish(np.stack([x, y, z], axis=1), rng, extent)


def generate_spiral(num_points: int, rng: Optional[np.random.Generator] = None,
                    extent: float = DEFAULT_EXTENT) -> PointSet:
    """Conical Archimedean spiral."""
    rng = make_rng(rng)
    t = _param(num_points, 20.0 * np.pi)
    r = 0.5 * t
    x = r * np.cos(t)
    y = r * np.sin(t)
    z = t * 0.5
    return _finish(np.stack([x, y, z], axis=1), rng, extent)


def generate_catenary(num_points: int, rng: Optional[np.random.Generator] = None,
                      extent: float = DEFAULT_EXTENT) -> PointSet:
    """Catenoid: the catenary revolved about its axis, 100 height rings per turn."""
    rng = make_rng(rng)
    i = np.arange(num_points, dtype=np.float64)
    u = i / max(num_points, 1) * 2.0 * np.pi
    v = ((i % 100) / 100.0 - 0.5) * 4.0
    c = 2.0
    x = c * np.cosh(v / c) * np.cos(u)
    y = c * np.cosh(v / c) * np.sin(u)
    z = v
    return _finish(np.stack([x, y, z], axis=1), rng, extent)


def generate_lemniscate(num_points: int, rng: Optional[np.random.Generator] = None,
                        extent: float = DEFAULT_EXTENT) -> PointSet:
    """Lemniscate of Bernoulli with a twist in z."""
    rng = make_rng(rng)
    t = _param(num_points, 2.0 * np.pi)
    a = 5.0
    denom = 1.0 + np.sin(t) ** 2
    x = a * np.cos(t) / denom
    y = a * np.sin(t) * np.cos(t) / denom
    z = x * np.sin(t * 2.0) * 0.5
    return _finish(np.stack([x, y, z], axis=1), rng, extent)


def generate_rose(num_points: int, rng: Optional[np.random.Generator] = None,
                  extent: float = DEFAULT_EXTENT, petals: int = 4) -> PointSet:
    """Rhodonea r = cos(k t); k = 4 gives 8 petals."""
    rng = make_rng(rng)
    t = _param(num_points, 2.0 * np.pi)
    r = np.cos(petals * t)
    x = r * np.cos(t)
    y = r * np.sin(t)
    z = np.sin(petals * t) * 0.5
    return _finish(np.stack([x, y, z], axis=1), rng, extent)


# ---------------------------------------------------------------------------
# Koch curve
# ---------------------------------------------------------------------------

def _koch_segment(p1: np.ndarray, p2: np.ndarray, depth: int, out: List[np.ndarray]) -> None:
    if depth == 0:
        out.append(p1)
        return

    v = (p2 - p1) / 3.0
    p3 = p1 + v
    p5 = p2 - v

    axis = np.cross(_UP, v)
    norm = np.linalg.norm(axis)
    axis = axis / norm if norm > 0.0 else _FALLBACK_AXIS
    p4 = p3 + Rotation.from_rotvec(axis * (math.pi / 3.0)).apply(v)

    _koch_segment(p1, p3, depth - 1, out)
    _koch_segment(p3, p4, depth - 1, out)
    _koch_segment(p4, p5, depth - 1, out)
    _koch_segment(p5, p2, depth - 1, out)


def koch_points(depth: int = KOCH_DEPTH, size: float = 5.0) -> np.ndarray:
    """Raw Koch-subdivided tetrahedron edges: 6 * 4**depth points."""
    r = size
    t1 = np.array([r, r, r])
    t2 = np.array([-r, -r, r])
    t3 = np.array([-r, r, -r])
    t4 = np.array([r, -r, -r])

    out: List[np.ndarray] = []
    for a, b in ((t1, t2), (t2, t3), (t3, t4), (t4, t1), (t1, t3), (t2, t4)):
        _koch_segment(a, b, depth, out)
    return np.array(out, dtype=np.float64)


def generate_koch(num_points: int, rng: Optional[np.random.Generator] = None,
                  extent: float = DEFAULT_EXTENT) -> PointSet:
    rng = make_rng(rng)
    pts = resample_points(koch_points(), num_points)
    return _finish(pts, rng, extent)

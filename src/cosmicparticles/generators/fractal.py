"""
Escape-time fractal samplers (Mandelbulb, quaternion Julia).

Vectorized with numpy: all samples iterate together under a shrinking
``alive`` mask, the same way a 2D escape-time image is rendered. Only
samples that escape inside the band ``lower < iterations < max_iter`` are
kept, and each contributes its iterate at bailout as the output point.
"""

import logging
from typing import Callable, Optional, Tuple

import numpy as np

from cosmicparticles.generators.base import (
    DEFAULT_EXTENT,
    PointSet,
    make_rng,
    normalize_points,
    sample_ball,
    sample_unit_sphere,
)
from cosmicparticles.generators.colorgrade import hsl_to_rgb

logger = logging.getLogger(__name__)

BAILOUT = 2.0

MANDELBULB_POWER = 8
MANDELBULB_RADIUS = 1.2
MANDELBULB_MAX_ITER = 12
MANDELBULB_LOWER = 2

JULIA_C = (-0.2, 0.6, 0.2, 0.0)
JULIA_RADIUS = 1.5
JULIA_MAX_ITER = 10
JULIA_LOWER = 2

# Padding shell, as a fraction of the sampling radius
SHELL_INNER = 0.95
SHELL_OUTER = 1.0


def mandelbulb_escape(
    points: np.ndarray,
    max_iter: int = MANDELBULB_MAX_ITER,
    power: int = MANDELBULB_POWER,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Escape iteration and bailout iterate for each sample.

    Uses the spherical-coordinate power formula with each sample as its own
    constant. Samples that never escape report ``max_iter`` and their last
    iterate.

    Returns:
        (counts, iterates): (M,) int32 and (M, 3) float64.
    """
    c = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    z = c.copy()
    final = np.empty_like(c)
    counts = np.full(c.shape[0], max_iter, dtype=np.int32)
    alive = np.ones(c.shape[0], dtype=bool)

    for i in range(max_iter):
        if not np.any(alive):
            break
        za = z[alive]
        r = np.linalg.norm(za, axis=1)

        escaped = r > BAILOUT
        idx = np.flatnonzero(alive)
        counts[idx[escaped]] = i
        final[idx[escaped]] = za[escaped]
        alive[idx[escaped]] = False

        keep = ~escaped
        za = za[keep]
        r = r[keep]
        with np.errstate(invalid="ignore", divide="ignore"):
            theta = np.arccos(np.clip(np.where(r > 0.0, za[:, 2] / r, 0.0), -1.0, 1.0))
        phi = np.arctan2(za[:, 1], za[:, 0])

        rp = r ** power
        theta *= power
        phi *= power
        sin_t = np.sin(theta)
        z[idx[keep]] = np.stack(
            [rp * sin_t * np.cos(phi), rp * sin_t * np.sin(phi), rp * np.cos(theta)],
            axis=1,
        ) + c[idx[keep]]

    final[alive] = z[alive]
    return counts, final


def julia_escape(
    points: np.ndarray,
    c: Tuple[float, float, float, float] = JULIA_C,
    max_iter: int = JULIA_MAX_ITER,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Quaternion Julia escape iterations for the 3D slice q = (x, y, z, 0).

    Iterates q <- q^2 + c and returns the (x, y, z) part of the iterate at
    bailout. Samples that never escape report ``max_iter``.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    q = np.zeros((pts.shape[0], 4), dtype=np.float64)
    q[:, :3] = pts
    cq = np.asarray(c, dtype=np.float64)

    counts = np.full(pts.shape[0], max_iter, dtype=np.int32)
    alive = np.ones(pts.shape[0], dtype=bool)

    for i in range(max_iter):
        norm = np.linalg.norm(q, axis=1)
        escaped = alive & (norm > BAILOUT)
        counts[escaped] = i
        alive &= ~escaped
        if not np.any(alive):
            break

        qa = q[alive]
        a, b, cc, d = qa[:, 0], qa[:, 1], qa[:, 2], qa[:, 3]
        sq = np.stack(
            [a * a - b * b - cc * cc - d * d, 2.0 * a * b, 2.0 * a * cc, 2.0 * a * d],
            axis=1,
        )
        q[alive] = sq + cq

    return counts, q[:, :3].copy()


def band_mask(counts: np.ndarray, lower: int, max_iter: int) -> np.ndarray:
    """Samples whose escape iteration lies strictly inside (lower, max_iter)."""
    counts = np.asarray(counts)
    return (counts > lower) & (counts < max_iter)


def _band_sample(
    escape_fn: Callable[[np.ndarray], Tuple[np.ndarray, np.ndarray]],
    num_points: int,
    radius: float,
    lower: int,
    max_iter: int,
    base_hue: float,
    rng: np.random.Generator,
    extent: float,
) -> PointSet:
    if num_points <= 0:
        return PointSet.empty()

    samples = sample_ball(num_points, radius, rng)
    counts, iterates = escape_fn(samples)
    keep = band_mask(counts, lower, max_iter)

    kept = iterates[keep]
    frac = (counts[keep] - lower) / max(max_iter - lower, 1)
    kept_colors = hsl_to_rgb(
        (base_hue + 0.35 * frac) % 1.0,
        0.8,
        0.35 + 0.25 * frac,
    )

    parts_pos = [kept]
    parts_col = [kept_colors]

    if len(kept) < num_points / 2:
        pad = num_points - len(kept)
        logger.debug("Escape band kept %d/%d samples; padding %d shell points",
                     len(kept), num_points, pad)
        shell_r = radius * (SHELL_INNER + (SHELL_OUTER - SHELL_INNER) * rng.random(pad))
        parts_pos.append(sample_unit_sphere(pad, rng) * shell_r[:, np.newaxis])
        parts_col.append(hsl_to_rgb(np.full(pad, base_hue), 0.5, 0.15))

    positions = normalize_points(np.concatenate(parts_pos), extent)
    return PointSet(positions, np.concatenate(parts_col))


def generate_mandelbulb(
    num_points: int,
    rng: Optional[np.random.Generator] = None,
    extent: float = DEFAULT_EXTENT,
    lower: int = MANDELBULB_LOWER,
    max_iter: int = MANDELBULB_MAX_ITER,
) -> PointSet:
    rng = make_rng(rng)
    return _band_sample(
        lambda pts: mandelbulb_escape(pts, max_iter),
        num_points, MANDELBULB_RADIUS, lower, max_iter, 0.55, rng, extent,
    )


def generate_julia(
    num_points: int,
    rng: Optional[np.random.Generator] = None,
    extent: float = DEFAULT_EXTENT,
    lower: int = JULIA_LOWER,
    max_iter: int = JULIA_MAX_ITER,
    c: Tuple[float, float, float, float] = JULIA_C,
) -> PointSet:
    rng = make_rng(rng)
    return _band_sample(
        lambda pts: julia_escape(pts, c, max_iter),
        num_points, JULIA_RADIUS, lower, max_iter, 0.8, rng, extent,
    )

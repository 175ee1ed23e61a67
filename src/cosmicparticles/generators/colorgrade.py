"""
Color helpers for particle palettes.

All functions are vectorized over particles and return float32 RGB in
[0, 1] with shape (N, 3).
"""

from typing import Tuple, Union

import numpy as np
from PIL import ImageColor

ArrayLike = Union[float, np.ndarray]


def hex_to_rgb(color: str) -> Tuple[float, float, float]:
    """Parse a CSS/hex color ("#ff3030", "0xff3030", "cyan") to floats in [0, 1]."""
    text = color.strip()
    if text.lower().startswith("0x"):
        text = "#" + text[2:]
    r, g, b = ImageColor.getrgb(text)[:3]
    return (r / 255.0, g / 255.0, b / 255.0)


def hsv_to_rgb(h: ArrayLike, s: ArrayLike, v: ArrayLike) -> np.ndarray:
    """
    Vectorized HSV to RGB conversion.

    Args:
        h, s, v: Scalars or 1D arrays broadcastable together, values in [0, 1].

    Returns:
        (N, 3) float32 array in [0, 1].
    """
    h, s, v = np.broadcast_arrays(
        np.atleast_1d(np.asarray(h, dtype=np.float32)),
        np.atleast_1d(np.asarray(s, dtype=np.float32)),
        np.atleast_1d(np.asarray(v, dtype=np.float32)),
    )
    h6 = (h * 6.0) % 6.0
    i = h6.astype(np.int32)
    f = h6 - i

    p = v * (1.0 - s)
    q = v * (1.0 - s * f)
    t = v * (1.0 - s * (1.0 - f))

    rgb = np.zeros(h.shape + (3,), dtype=np.float32)
    for sector, r_src, g_src, b_src in [
        (0, v, t, p),
        (1, q, v, p),
        (2, p, v, t),
        (3, p, q, v),
        (4, t, p, v),
        (5, v, p, q),
    ]:
        m = i == sector
        if np.any(m):
            rgb[m, 0] = r_src[m]
            rgb[m, 1] = g_src[m]
            rgb[m, 2] = b_src[m]
    return rgb


def hsl_to_rgb(h: ArrayLike, s: ArrayLike, l: ArrayLike) -> np.ndarray:
    """
    Vectorized HSL to RGB conversion (hue wraps, s and l clipped to [0, 1]).

    Returns:
        (N, 3) float32 array in [0, 1].
    """
    h = np.mod(np.asarray(h, dtype=np.float32), 1.0)
    s = np.clip(np.asarray(s, dtype=np.float32), 0.0, 1.0)
    l = np.clip(np.asarray(l, dtype=np.float32), 0.0, 1.0)

    # HSL -> HSV
    v = l + s * np.minimum(l, 1.0 - l)
    s_v = np.where(v > 0.0, 2.0 * (1.0 - l / np.maximum(v, 1e-8)), 0.0)
    return hsv_to_rgb(h, s_v, v)


def lerp_colors(c0: np.ndarray, c1: np.ndarray, t: np.ndarray) -> np.ndarray:
    """Blend (3,) colors c0 -> c1 by per-particle weights t, returning (N, 3)."""
    t = np.asarray(t, dtype=np.float32)[:, np.newaxis]
    c0 = np.asarray(c0, dtype=np.float32)
    c1 = np.asarray(c1, dtype=np.float32)
    return (c0 + (c1 - c0) * t).astype(np.float32)


def curve_gradient(n: int, rng: np.random.Generator) -> np.ndarray:
    """Blue-cyan-purple gradient along a curve, with soft random saturation/lightness."""
    if n <= 0:
        return np.zeros((0, 3), dtype=np.float32)
    t = np.arange(n, dtype=np.float32) / n
    hue = (t * 0.3 + 0.5) % 1.0
    sat = 0.6 + rng.random(n) * 0.2
    light = 0.4 + rng.random(n) * 0.2
    return hsl_to_rgb(hue, sat, light)

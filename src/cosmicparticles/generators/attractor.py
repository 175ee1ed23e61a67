"""
Lorenz attractor sampled as a single forward-Euler trajectory.

The integration is blind: a fixed step and fixed length keep the classic
parameters bounded, and any non-finite row that slips through is zeroed by
the target buffer.
"""

from typing import Optional

import numpy as np

from cosmicparticles.generators.base import DEFAULT_EXTENT, PointSet, make_rng, normalize_points
from cosmicparticles.generators.colorgrade import curve_gradient

LORENZ_SIGMA = 10.0
LORENZ_RHO = 28.0
LORENZ_BETA = 8.0 / 3.0
LORENZ_DT = 0.01
LORENZ_START = (0.1, 0.0, 0.0)


def lorenz_trajectory(
    steps: int,
    sigma: float = LORENZ_SIGMA,
    rho: float = LORENZ_RHO,
    beta: float = LORENZ_BETA,
    dt: float = LORENZ_DT,
    start=LORENZ_START,
) -> np.ndarray:
    """Integrate ``steps`` Euler steps, recording the state after each one."""
    out = np.empty((max(steps, 0), 3), dtype=np.float64)
    x, y, z = (float(v) for v in start)
    for i in range(steps):
        dx = sigma * (y - x)
        dy = x * (rho - z) - y
        dz = x * y - beta * z
        x += dx * dt
        y += dy * dt
        z += dz * dt
        out[i] = (x, y, z)
    return out


def generate_lorenz(num_points: int, rng: Optional[np.random.Generator] = None,
                    extent: float = DEFAULT_EXTENT) -> PointSet:
    rng = make_rng(rng)
    pts = normalize_points(lorenz_trajectory(num_points), extent)
    return PointSet(pts, curve_gradient(len(pts), rng))

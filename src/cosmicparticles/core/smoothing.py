"""
Exponential-approach helpers shared by the animator and the parent transform.
"""

import numpy as np


def lerp(current: float, target: float, factor: float) -> float:
    return current + (target - current) * factor


def approach_speed(rate: float, dt: float) -> float:
    """Per-tick approach fraction ``rate * dt``, clamped to [0, 1]."""
    return float(min(max(rate * dt, 0.0), 1.0))


def approach_inplace(live: np.ndarray, target: np.ndarray, speed: float,
                     scratch: np.ndarray) -> None:
    """``live += (target - live) * speed`` without allocating."""
    np.subtract(target, live, out=scratch)
    scratch *= speed
    live += scratch

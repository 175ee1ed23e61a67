"""
Fixed-capacity target buffer.

Positions and colors are preallocated (N, 3) float32 arrays. Every rebuild
rewrites them in full: generated rows are copied in, the rest is zeroed
(position at the origin, black color, invisible under additive blending).
"""

import logging
from typing import Optional

import numpy as np

from cosmicparticles.config import ParticleConfig
from cosmicparticles.generators.base import PointSet
from cosmicparticles.generators.registry import Selection, resolve_builder

logger = logging.getLogger(__name__)


class TargetBuffer:
    def __init__(self, capacity: int, config: Optional[ParticleConfig] = None):
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self.capacity = capacity
        self.config = config or ParticleConfig(num_particles=capacity)
        self.positions = np.zeros((capacity, 3), dtype=np.float32)
        self.colors = np.zeros((capacity, 3), dtype=np.float32)
        self.rebuild_count = 0
        self.filled = 0

    @property
    def flat_positions(self) -> np.ndarray:
        """3N view for renderers."""
        return self.positions.reshape(-1)

    @property
    def flat_colors(self) -> np.ndarray:
        return self.colors.reshape(-1)

    def fill(self, points: PointSet) -> int:
        """Copy ``points`` into the buffer, zero-padding; returns rows written."""
        count = min(len(points), self.capacity)
        self.positions[:count] = points.positions[:count]
        self.colors[:count] = points.colors[:count]
        self.positions[count:] = 0.0
        self.colors[count:] = 0.0

        bad = ~np.isfinite(self.positions[:count]).all(axis=1)
        if np.any(bad):
            logger.warning("Zeroing %d non-finite generated points", int(bad.sum()))
            self.positions[:count][bad] = 0.0
            self.colors[:count][bad] = 0.0

        if len(points) > self.capacity:
            logger.debug("Generator produced %d points; truncated to %d", len(points), self.capacity)
        self.filled = count
        return count

    def rebuild(self, selection: Selection, rng: np.random.Generator) -> int:
        """Run the selection's generator exactly once and refill the buffer."""
        builder = resolve_builder(selection.mode)
        points = builder(selection, self.capacity, rng, self.config)
        written = self.fill(points)
        self.rebuild_count += 1
        logger.debug(
            "Rebuilt target for %s/%s: %d of %d slots",
            selection.mode.value, selection.shape, written, self.capacity,
        )
        return written

"""
Particle session.

Ties the selection, target buffer, live animator and external collaborators
together behind two calls: ``select`` on UI changes and ``tick`` per frame.
"""

import logging
from typing import Optional

import numpy as np

from cosmicparticles.config import ControlScheme, Mode, ParticleConfig
from cosmicparticles.core.analyzer import SpectrumSource
from cosmicparticles.core.animator import LiveAnimator
from cosmicparticles.core.buffers import TargetBuffer
from cosmicparticles.core.gesture import GestureSource
from cosmicparticles.generators.registry import Selection

logger = logging.getLogger(__name__)


class ParticleSession:
    """
    One particle field for the lifetime of a view.

    The target is rebuilt synchronously, and only when the selection
    actually changes; the live buffer is left alone until the next tick.
    Collaborators are sampled at most once per tick (spectrum only in audio
    mode, gesture only under gesture control).
    """

    def __init__(
        self,
        config: Optional[ParticleConfig] = None,
        selection: Optional[Selection] = None,
        spectrum_source: Optional[SpectrumSource] = None,
        gesture_source: Optional[GestureSource] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.cfg = config or ParticleConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.cfg.seed)
        self.spectrum_source = spectrum_source
        self.gesture_source = gesture_source

        self.target = TargetBuffer(self.cfg.num_particles, self.cfg)
        self.animator = LiveAnimator(self.cfg, self.rng)

        self.selection: Optional[Selection] = None
        self.select(selection or Selection())

    @property
    def num_particles(self) -> int:
        return self.cfg.num_particles

    @property
    def rebuild_count(self) -> int:
        return self.target.rebuild_count

    def select(self, selection: Selection) -> bool:
        """Apply a selection; returns True when the target was rebuilt."""
        if selection == self.selection:
            return False
        previous = self.selection
        self.selection = selection
        written = self.target.rebuild(selection, self.rng)
        logger.info(
            "Selection %s -> %s/%s (%d points)",
            previous.mode.value if previous else "none",
            selection.mode.value, selection.shape, written,
        )
        return True

    def update(self, **changes) -> bool:
        """Change selection fields by name, e.g. ``update(mode="galaxy", shape="Rose")``."""
        return self.select(self.selection.with_changes(**changes))

    def tick(self, dt: float) -> None:
        sel = self.selection

        spectrum = None
        if sel.mode is Mode.AUDIO and self.spectrum_source is not None:
            spectrum = self.spectrum_source.sample()

        gesture = None
        if sel.control_scheme is ControlScheme.GESTURE and self.gesture_source is not None:
            gesture = self.gesture_source.sample()

        self.animator.tick(dt, self.target, sel.mode, spectrum=spectrum, gesture=gesture)

    def convergence_error(self) -> float:
        """Mean distance between live and target positions."""
        if self.num_particles == 0:
            return 0.0
        diff = self.animator.positions - self.target.positions
        return float(np.linalg.norm(diff, axis=1).mean())

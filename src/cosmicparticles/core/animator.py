"""
Live particle animator.

Owns the rendered position/color buffers and advances them once per frame:

  - static modes ease every particle toward the target buffer
  - audio mode ignores the target and writes a procedural flow field
    driven by volume and pitch
  - a gesture signal, when present, eases the parent transform

Buffers and scratch storage are allocated once; the static-mode path does
not allocate per frame.
"""

import logging
from typing import Optional

import numpy as np

from cosmicparticles.config import Mode, ParticleConfig
from cosmicparticles.core.analyzer import AudioFeatures, extract_features
from cosmicparticles.core.gesture import GestureSignal, ParentTransform
from cosmicparticles.core.smoothing import approach_inplace, approach_speed
from cosmicparticles.generators.colorgrade import hsl_to_rgb

logger = logging.getLogger(__name__)

GOLDEN_ANGLE_DEG = 137.5
GOLDEN_FRACTION = 0.618034


class LiveAnimator:
    def __init__(self, config: Optional[ParticleConfig] = None,
                 rng: Optional[np.random.Generator] = None):
        self.cfg = config or ParticleConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.cfg.seed)
        n = self.cfg.num_particles
        self.num_particles = n

        half = self.cfg.initial_cube_size / 2.0
        self.positions = ((self.rng.random((n, 3)) * 2.0 - 1.0) * half).astype(np.float32)
        self.colors = np.ones((n, 3), dtype=np.float32)

        self._scratch_pos = np.empty((n, 3), dtype=np.float32)
        self._scratch_col = np.empty((n, 3), dtype=np.float32)

        # Per-particle seeds for the audio flow; fixed so the scatter is stable
        idx = np.arange(n, dtype=np.float64)
        self._base_phase = idx / max(n, 1)
        self._seed_angle = np.radians(idx * GOLDEN_ANGLE_DEG)
        self._seed_radius = np.sqrt(np.mod(idx * GOLDEN_FRACTION, 1.0))

        self.transform = ParentTransform()
        self.time = 0.0
        self.frame_count = 0
        self.needs_update = False
        self.last_features = AudioFeatures()

    # ------------------------------------------------------------------
    # Renderer-facing views
    # ------------------------------------------------------------------

    @property
    def flat_positions(self) -> np.ndarray:
        return self.positions.reshape(-1)

    @property
    def flat_colors(self) -> np.ndarray:
        return self.colors.reshape(-1)

    def mark_rendered(self) -> None:
        self.needs_update = False

    # ------------------------------------------------------------------
    # Per-frame update
    # ------------------------------------------------------------------

    def tick(self, dt: float, target, mode=Mode.MATH,
             spectrum: Optional[np.ndarray] = None,
             gesture: Optional[GestureSignal] = None) -> None:
        """
        Advance one frame.

        Args:
            dt: Frame delta in seconds.
            target: Anything with ``positions``/``colors`` (N, 3) arrays,
                normally the session's TargetBuffer.
            mode: Current mode; audio mode switches to the flow field.
            spectrum: Latest spectrum snapshot, or None.
            gesture: Latest gesture signal, or None to leave the transform.
        """
        self.time += dt

        if Mode.parse(mode) is Mode.AUDIO:
            self._audio_step(spectrum)
        else:
            speed = approach_speed(self.cfg.catch_up_rate, dt)
            approach_inplace(self.positions, target.positions, speed, self._scratch_pos)
            approach_inplace(self.colors, target.colors, speed, self._scratch_col)

        if gesture is not None:
            self.transform.approach(gesture, self.cfg.gesture_smoothing)

        self.needs_update = True
        self.frame_count += 1

    def _audio_step(self, spectrum: Optional[np.ndarray]) -> None:
        feats = extract_features(spectrum)
        self.last_features = feats
        vol, pitch = feats.volume, feats.pitch
        t = self.time
        cfg = self.cfg

        phase = np.mod(self._base_phase + t * cfg.flow_speed, 1.0)
        x = (phase - 0.5) * cfg.band_width
        wave = (0.5 + 4.0 * vol) * np.sin(x * (0.3 + 2.0 * pitch) + 2.0 * t)

        swirl_r = (0.3 + 3.0 * vol) * self._seed_radius
        swirl_a = self._seed_angle + t * (0.5 + 2.0 * vol)

        self.positions[:, 0] = x
        self.positions[:, 1] = wave + swirl_r * np.cos(swirl_a)
        self.positions[:, 2] = swirl_r * np.sin(swirl_a)

        hue = np.mod(0.6 + 0.8 * pitch + 0.1 * phase, 1.0)
        light = (0.15 + 0.5 * vol) * (0.6 + 0.4 * np.sin(self._seed_angle + t))
        self.colors[:] = hsl_to_rgb(hue, 0.8, light)

        if pitch > cfg.sparkle_pitch_threshold:
            sparkle = self.rng.random(self.num_particles) < cfg.sparkle_chance
            self.colors[sparkle] = 1.0

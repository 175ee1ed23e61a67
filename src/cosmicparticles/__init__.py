"""Procedural particle-field generation and real-time morphing engine."""

from cosmicparticles.config import ControlScheme, Mode, ParticleConfig
from cosmicparticles.core.animator import LiveAnimator
from cosmicparticles.core.buffers import TargetBuffer
from cosmicparticles.generators.base import PointSet
from cosmicparticles.generators.registry import Selection
from cosmicparticles.pipeline import ParticleSession

__version__ = "0.1.0"
__all__ = [
    "ControlScheme",
    "Mode",
    "ParticleConfig",
    "LiveAnimator",
    "TargetBuffer",
    "PointSet",
    "Selection",
    "ParticleSession",
]

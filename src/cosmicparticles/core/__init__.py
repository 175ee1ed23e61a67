"""Per-frame engine: target buffer, live animator and collaborator adapters."""

from cosmicparticles.core.analyzer import (
    AudioFeatures,
    FileSpectrumSource,
    SpectrumBuffer,
    extract_features,
)
from cosmicparticles.core.animator import LiveAnimator
from cosmicparticles.core.buffers import TargetBuffer
from cosmicparticles.core.gesture import (
    GestureSignal,
    GestureState,
    ParentTransform,
    signal_from_landmarks,
)

__all__ = [
    "AudioFeatures",
    "FileSpectrumSource",
    "SpectrumBuffer",
    "extract_features",
    "LiveAnimator",
    "TargetBuffer",
    "GestureSignal",
    "GestureState",
    "ParentTransform",
    "signal_from_landmarks",
]

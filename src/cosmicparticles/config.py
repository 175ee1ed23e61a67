"""
Session configuration and selector enums.

Every tunable constant of the particle engine lives on ``ParticleConfig``;
selector values (mode, control scheme) are closed enums that parse loosely
and fall back to a default instead of failing.
"""

import enum
from dataclasses import dataclass
from typing import Optional


class Mode(str, enum.Enum):
    """Top-level generator family."""

    MATH = "math"
    MOLECULE = "molecule"
    GALAXY = "galaxy"
    ARTIFACT = "artifact"
    AUDIO = "audio"
    SOLAR = "solar"
    TEXT = "text"

    @classmethod
    def parse(cls, value, default: "Mode | None" = None) -> "Mode":
        """Resolve a loose selector value; unknown values give ``default``."""
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        key = _MODE_ALIASES.get(key, key)
        for member in cls:
            if member.value == key:
                return member
        return default or DEFAULT_MODE


_MODE_ALIASES = {
    "welcome": "text",
    "text3d": "text",
    "chemistry": "molecule",
    "solar_system": "solar",
    "solarsystem": "solar",
    "stars": "galaxy",
}

DEFAULT_MODE = Mode.MATH


class ControlScheme(str, enum.Enum):
    """How the parent transform is driven."""

    ORBIT = "orbit"      # renderer-side camera controls, no gesture input
    GESTURE = "gesture"  # hand-gesture signal drives the parent transform

    @classmethod
    def parse(cls, value) -> "ControlScheme":
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        if key in ("gesture", "gestures", "hand", "hands"):
            return cls.GESTURE
        return cls.ORBIT


@dataclass
class ParticleConfig:
    """Configuration shared by the target builder and the live animator."""

    num_particles: int = 30000

    # Morphing
    catch_up_rate: float = 3.0        # exponential approach rate (1/s)
    gesture_smoothing: float = 0.1    # per-tick lerp factor for the parent transform

    # Initial live cloud
    initial_cube_size: float = 20.0   # edge length of the random start cube

    # Generator display constants
    display_extent: float = 10.0      # longest bbox side after normalization
    molecule_scale: float = 4.0
    seconds_per_year: float = 10.0    # solar system: 10 s of session time = 1 Earth year

    # Audio flow field
    flow_speed: float = 0.05          # band phase advance per second
    band_width: float = 24.0
    sparkle_pitch_threshold: float = 0.5
    sparkle_chance: float = 0.02

    # Reproducibility (None = fresh entropy)
    seed: Optional[int] = None

    def __post_init__(self):
        if self.num_particles < 0:
            raise ValueError(f"num_particles must be >= 0, got {self.num_particles}")

"""
Selection value and the mode -> generator dispatch table.

The table is closed over ``Mode``: every member has exactly one builder,
resolved once per selection change.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional

import numpy as np

from cosmicparticles.config import ControlScheme, Mode, ParticleConfig
from cosmicparticles.generators.artifacts import generate_artifact
from cosmicparticles.generators.attractor import generate_lorenz
from cosmicparticles.generators.base import PointSet
from cosmicparticles.generators.curves import (
    generate_butterfly,
    generate_cardioid,
    generate_catenary,
    generate_koch,
    generate_lemniscate,
    generate_rose,
    generate_spiral,
)
from cosmicparticles.generators.fractal import generate_julia, generate_mandelbulb
from cosmicparticles.generators.galaxy import generate_galaxy
from cosmicparticles.generators.molecules import DEFAULT_MOLECULE, Molecule, generate_molecule
from cosmicparticles.generators.solar import generate_solar_system
from cosmicparticles.generators.text3d import generate_text

logger = logging.getLogger(__name__)

CURVE_GENERATORS: Dict[str, Callable[..., PointSet]] = {
    "koch": generate_koch,
    "cardioid": generate_cardioid,
    "butterfly": generate_butterfly,
    "spiral": generate_spiral,
    "catenary": generate_catenary,
    "lemniscate": generate_lemniscate,
    "rose": generate_rose,
    "lorenz": generate_lorenz,
    "mandelbulb": generate_mandelbulb,
    "julia": generate_julia,
}
DEFAULT_CURVE = "koch"

# Static stand-in target while audio mode drives particles procedurally
AUDIO_PLACEHOLDER = "vase"


def _parse_shape(value) -> str:
    return str(value or "").strip().lower()


# Loose user-facing values -> field values; fields not listed pass through
_FIELD_PARSERS = {
    "mode": Mode.parse,
    "shape": _parse_shape,
    "molecule_id": lambda value: str(value or "").strip(),
    "control_scheme": ControlScheme.parse,
    "elapsed_time": float,
}


@dataclass(frozen=True)
class Selection:
    """Everything that determines the target shape."""

    mode: Mode = Mode.MATH
    shape: str = DEFAULT_CURVE
    molecule_id: str = DEFAULT_MOLECULE
    custom_molecule: Optional[Molecule] = None
    control_scheme: ControlScheme = ControlScheme.ORBIT
    elapsed_time: float = 0.0

    @classmethod
    def create(cls, mode="math", shape: str = DEFAULT_CURVE, molecule_id: str = DEFAULT_MOLECULE,
               custom_molecule: Optional[Molecule] = None, control_scheme="orbit",
               elapsed_time: float = 0.0) -> "Selection":
        """Build from loose user-facing values."""
        return cls().with_changes(
            mode=mode,
            shape=shape,
            molecule_id=molecule_id,
            custom_molecule=custom_molecule,
            control_scheme=control_scheme,
            elapsed_time=elapsed_time,
        )

    def with_changes(self, **changes) -> "Selection":
        """Copy with fields replaced; selector values are parsed like ``create``."""
        parsed = {
            name: _FIELD_PARSERS[name](value) if name in _FIELD_PARSERS else value
            for name, value in changes.items()
        }
        return replace(self, **parsed)


Builder = Callable[[Selection, int, np.random.Generator, ParticleConfig], PointSet]


def _build_math(sel: Selection, n: int, rng: np.random.Generator, cfg: ParticleConfig) -> PointSet:
    builder = CURVE_GENERATORS.get(sel.shape)
    if builder is None:
        logger.debug("Unknown math shape %r, using %s", sel.shape, DEFAULT_CURVE)
        builder = CURVE_GENERATORS[DEFAULT_CURVE]
    return builder(n, rng, cfg.display_extent)


def _build_molecule(sel: Selection, n: int, rng: np.random.Generator, cfg: ParticleConfig) -> PointSet:
    return generate_molecule(sel.molecule_id, n, rng, sel.custom_molecule, cfg.molecule_scale)


def _build_galaxy(sel: Selection, n: int, rng: np.random.Generator, cfg: ParticleConfig) -> PointSet:
    return generate_galaxy(n, rng)


def _build_artifact(sel: Selection, n: int, rng: np.random.Generator, cfg: ParticleConfig) -> PointSet:
    return generate_artifact(sel.shape, n, rng, cfg.display_extent)


def _build_audio(sel: Selection, n: int, rng: np.random.Generator, cfg: ParticleConfig) -> PointSet:
    return generate_artifact(AUDIO_PLACEHOLDER, n, rng, cfg.display_extent)


def _build_solar(sel: Selection, n: int, rng: np.random.Generator, cfg: ParticleConfig) -> PointSet:
    return generate_solar_system(n, sel.elapsed_time, rng, cfg.seconds_per_year)


def _build_text(sel: Selection, n: int, rng: np.random.Generator, cfg: ParticleConfig) -> PointSet:
    return generate_text(n, rng)


MODE_BUILDERS: Dict[Mode, Builder] = {
    Mode.MATH: _build_math,
    Mode.MOLECULE: _build_molecule,
    Mode.GALAXY: _build_galaxy,
    Mode.ARTIFACT: _build_artifact,
    Mode.AUDIO: _build_audio,
    Mode.SOLAR: _build_solar,
    Mode.TEXT: _build_text,
}


def resolve_builder(mode) -> Builder:
    """Builder for ``mode``; anything unrecognized falls back to math."""
    resolved = Mode.parse(mode)
    if not isinstance(mode, Mode) and str(mode or "").strip().lower() != resolved.value:
        logger.debug("Mode %r resolved to %s", mode, resolved.value)
    return MODE_BUILDERS[resolved]


def generate(selection: Selection, num_points: int,
             rng: Optional[np.random.Generator] = None,
             config: Optional[ParticleConfig] = None) -> PointSet:
    """Run the generator for ``selection`` once."""
    cfg = config or ParticleConfig()
    if rng is None:
        rng = np.random.default_rng(cfg.seed)
    return resolve_builder(selection.mode)(selection, num_points, rng, cfg)

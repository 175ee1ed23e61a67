"""Shape generators: each returns a PointSet for one mode or shape."""

from cosmicparticles.generators.base import PointSet, normalize_points, resample_points
from cosmicparticles.generators.molecules import MOLECULES, Atom, Bond, BondKind, Molecule
from cosmicparticles.generators.registry import (
    CURVE_GENERATORS,
    MODE_BUILDERS,
    Selection,
    generate,
    resolve_builder,
)

__all__ = [
    "PointSet",
    "normalize_points",
    "resample_points",
    "MOLECULES",
    "Atom",
    "Bond",
    "BondKind",
    "Molecule",
    "CURVE_GENERATORS",
    "MODE_BUILDERS",
    "Selection",
    "generate",
    "resolve_builder",
]

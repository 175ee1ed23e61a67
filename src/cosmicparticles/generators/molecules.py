"""
Ball-and-stick molecule sampler.

Atoms are dense volumetric spheres in CPK colors; bonds are thin surface
cylinders (one, two or three per bond depending on order) blended between
the two end-atom colors. Ionic bonds are drawn as a wide cyan cloud instead.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from cosmicparticles.generators.base import PointSet, make_rng, sample_ball
from cosmicparticles.generators.colorgrade import hex_to_rgb, hsl_to_rgb, lerp_colors

logger = logging.getLogger(__name__)

# Relative van der Waals-style radii
RADII: Dict[str, float] = {
    "H": 0.5,
    "C": 0.85,
    "O": 0.75,
    "N": 0.75,
    "Cl": 0.9,
    "Na": 1.0,
}
DEFAULT_RADIUS = 0.7

# CPK coloring
COLORS: Dict[str, Tuple[float, float, float]] = {
    "H": hex_to_rgb("#ffffff"),
    "C": hex_to_rgb("#909090"),
    "O": hex_to_rgb("#ff3030"),
    "N": hex_to_rgb("#3050f8"),
    "Cl": hex_to_rgb("#1ff01f"),
    "Na": hex_to_rgb("#ab5cf2"),
}
UNKNOWN_ATOM_COLOR = hex_to_rgb("#ff00ff")
UNKNOWN_BOND_COLOR = hex_to_rgb("#cccccc")

ATOM_SHARE = 0.7
BOND_SEPARATION = 0.15
BOND_RADIUS = 0.05
IONIC_RADIUS = 0.4
IONIC_HUE = 0.5          # cyan
IONIC_LIGHTNESS_JITTER = 0.1
DISPLAY_SCALE = 4.0

_UP = np.array([0.0, 1.0, 0.0])
_Z = np.array([0.0, 0.0, 1.0])


class BondKind(str, enum.Enum):
    COVALENT = "covalent"
    IONIC = "ionic"


@dataclass(frozen=True)
class Atom:
    element: str
    position: Tuple[float, float, float]


@dataclass(frozen=True)
class Bond:
    a: int
    b: int
    order: int = 1
    kind: BondKind = BondKind.COVALENT


@dataclass(frozen=True)
class Molecule:
    name: str
    atoms: Tuple[Atom, ...]
    bonds: Tuple[Bond, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "Molecule":
        """
        Build from the JSON layout ``{"name", "atoms": [{"element", "pos"}],
        "bonds": [[i, j, order?, kind?]]}``.

        No validation beyond type coercion; untrusted input goes through
        ``cosmicparticles.io.ai_molecule.validate_molecule`` instead.
        """
        atoms = tuple(
            Atom(str(a["element"]), tuple(float(v) for v in a["pos"]))
            for a in data["atoms"]
        )
        bonds = []
        for raw in data.get("bonds") or ():
            order = int(raw[2]) if len(raw) > 2 and raw[2] is not None else 1
            kind = BondKind(raw[3]) if len(raw) > 3 and raw[3] is not None else BondKind.COVALENT
            bonds.append(Bond(int(raw[0]), int(raw[1]), order, kind))
        return cls(str(data.get("name", "Custom")), atoms, tuple(bonds))


def _mol(name, atoms, bonds) -> Molecule:
    return Molecule.from_dict({
        "name": name,
        "atoms": [{"element": e, "pos": p} for e, p in atoms],
        "bonds": bonds,
    })


MOLECULES: Dict[str, Molecule] = {
    "H2O": _mol("Water", [
        ("O", (0, 0, 0)),
        ("H", (0.76, 0.59, 0)),         # ~104.5 deg
        ("H", (-0.76, 0.59, 0)),
    ], [[0, 1, 1], [0, 2, 1]]),
    "CO2": _mol("Carbon Dioxide", [
        ("C", (0, 0, 0)),
        ("O", (1.16, 0, 0)),
        ("O", (-1.16, 0, 0)),
    ], [[0, 1, 2], [0, 2, 2]]),
    "Methane": _mol("Methane", [
        ("C", (0, 0, 0)),
        ("H", (0.63, 0.63, 0.63)),      # tetrahedral
        ("H", (-0.63, -0.63, 0.63)),
        ("H", (-0.63, 0.63, -0.63)),
        ("H", (0.63, -0.63, -0.63)),
    ], [[0, 1, 1], [0, 2, 1], [0, 3, 1], [0, 4, 1]]),
    "NH3": _mol("Ammonia", [
        ("N", (0, 0, 0)),
        ("H", (0.94, 0.38, 0)),         # trigonal pyramidal
        ("H", (-0.47, 0.38, 0.81)),
        ("H", (-0.47, 0.38, -0.81)),
    ], [[0, 1, 1], [0, 2, 1], [0, 3, 1]]),
    "O2": _mol("Oxygen", [
        ("O", (-0.6, 0, 0)),
        ("O", (0.6, 0, 0)),
    ], [[0, 1, 2]]),
    "N2": _mol("Nitrogen", [
        ("N", (-0.55, 0, 0)),
        ("N", (0.55, 0, 0)),
    ], [[0, 1, 3]]),
    "HCl": _mol("Hydrogen Chloride", [
        ("H", (-0.64, 0, 0)),
        ("Cl", (0.64, 0, 0)),
    ], [[0, 1, 1, "ionic"]]),
    "NaCl": _mol("Sodium Chloride", [
        ("Na", (-1.18, 0, 0)),
        ("Cl", (1.18, 0, 0)),
    ], [[0, 1, 1, "ionic"]]),
    "Ethanol": _mol("Ethanol", [
        ("C", (-0.75, 0, 0)),           # CH3
        ("C", (0.75, 0, 0)),            # CH2
        ("O", (1.25, 1.2, 0)),          # OH
        ("H", (1.8, 1.7, 0)),
        ("H", (-1.2, 0.9, 0)),
        ("H", (-1.2, -0.45, 0.78)),
        ("H", (-1.2, -0.45, -0.78)),
        ("H", (1.2, -0.45, 0.78)),
        ("H", (1.2, -0.45, -0.78)),
    ], [[0, 1, 1], [1, 2, 1], [2, 3, 1], [0, 4, 1], [0, 5, 1], [0, 6, 1],
        [1, 7, 1], [1, 8, 1]]),
}
DEFAULT_MOLECULE = "H2O"


def atom_radius(element: str) -> float:
    return RADII.get(element, DEFAULT_RADIUS)


def allocate_atom_points(molecule: Molecule, total: int) -> np.ndarray:
    """
    Split ``total`` atom points in proportion to radius**3.

    Largest-remainder rounding keeps the sum exactly ``total``; ties go to
    the earlier atom.
    """
    if not molecule.atoms or total <= 0:
        return np.zeros(len(molecule.atoms), dtype=np.int64)
    volumes = np.array([atom_radius(a.element) ** 3 for a in molecule.atoms])
    quotas = total * volumes / volumes.sum()
    counts = np.floor(quotas).astype(np.int64)
    short = total - int(counts.sum())
    if short > 0:
        order = np.argsort(-(quotas - counts), kind="stable")
        counts[order[:short]] += 1
    return counts


def _split_even(total: int, parts: int) -> list:
    """Even integer split, remainder to the first parts."""
    if parts <= 0:
        return []
    base, extra = divmod(max(total, 0), parts)
    return [base + (1 if i < extra else 0) for i in range(parts)]


def _bond_offsets(order: int, perp: np.ndarray) -> list:
    if order == 2:
        return [perp * (BOND_SEPARATION / 2.0), perp * (-BOND_SEPARATION / 2.0)]
    if order == 3:
        return [np.zeros(3), perp * BOND_SEPARATION, perp * -BOND_SEPARATION]
    return [np.zeros(3)]


def _bond_basis(direction: np.ndarray):
    """Unit axis plus two unit vectors spanning the cross-section."""
    length = float(np.linalg.norm(direction))
    axis = direction / length if length > 0.0 else _UP
    perp = np.cross(_UP, axis)
    if np.dot(perp, perp) < 0.001:
        perp = np.cross(_Z, axis)
    perp = perp / np.linalg.norm(perp)
    side = np.cross(axis, perp)
    return length, axis, perp, side


def _sample_bond(molecule: Molecule, bond: Bond, count: int,
                 rng: np.random.Generator) -> PointSet:
    atom1 = molecule.atoms[bond.a]
    atom2 = molecule.atoms[bond.b]
    start = np.asarray(atom1.position, dtype=np.float64)
    end = np.asarray(atom2.position, dtype=np.float64)
    length, axis, perp, side = _bond_basis(end - start)

    offsets = _bond_offsets(bond.order, perp)
    c1 = COLORS.get(atom1.element, UNKNOWN_BOND_COLOR)
    c2 = COLORS.get(atom2.element, UNKNOWN_BOND_COLOR)

    parts = []
    for offset, n in zip(offsets, _split_even(count, len(offsets))):
        if n == 0:
            continue
        theta = rng.random(n) * 2.0 * np.pi
        h = rng.random(n) * length
        if bond.kind is BondKind.IONIC:
            r = IONIC_RADIUS * np.sqrt(rng.random(n))
        else:
            r = np.full(n, BOND_RADIUS)

        pos = (
            start + offset
            + h[:, np.newaxis] * axis
            + (r * np.cos(theta))[:, np.newaxis] * perp
            + (r * np.sin(theta))[:, np.newaxis] * side
        )

        if bond.kind is BondKind.IONIC:
            light = 0.5 + (rng.random(n) - 0.5) * 2.0 * IONIC_LIGHTNESS_JITTER
            col = hsl_to_rgb(np.full(n, IONIC_HUE), 1.0, light)
        else:
            t = h / length if length > 0.0 else np.zeros(n)
            col = lerp_colors(c1, c2, t)
        parts.append(PointSet(pos, col))

    return PointSet.concat(parts)


def build_molecule(
    molecule: Molecule,
    num_points: int,
    rng: Optional[np.random.Generator] = None,
    scale: float = DISPLAY_SCALE,
) -> PointSet:
    """
    Sample a molecule into exactly ``num_points`` points (fewer only when it
    has no bonds): 70% atoms by volume, the rest split over bond cylinders.
    """
    rng = make_rng(rng)
    if num_points <= 0 or not molecule.atoms:
        return PointSet.empty()

    atom_total = int(np.floor(num_points * ATOM_SHARE))
    parts = []
    for atom, n in zip(molecule.atoms, allocate_atom_points(molecule, atom_total)):
        if n == 0:
            continue
        center = np.asarray(atom.position, dtype=np.float64)
        pos = center + sample_ball(int(n), atom_radius(atom.element), rng)
        col = np.tile(COLORS.get(atom.element, UNKNOWN_ATOM_COLOR), (int(n), 1))
        parts.append(PointSet(pos, col))

    bond_budget = num_points - atom_total
    for bond, n in zip(molecule.bonds, _split_even(bond_budget, len(molecule.bonds))):
        parts.append(_sample_bond(molecule, bond, n, rng))

    merged = PointSet.concat(parts)
    return PointSet(merged.positions * scale, merged.colors)


def generate_molecule(
    molecule_id: str,
    num_points: int,
    rng: Optional[np.random.Generator] = None,
    custom: Optional[Molecule] = None,
    scale: float = DISPLAY_SCALE,
) -> PointSet:
    """
    Catalogue lookup by id, or ``"custom"`` with a validated ``custom``
    molecule. Unknown ids and a custom request without data give an empty set.
    """
    if molecule_id == "custom":
        molecule = custom
    else:
        molecule = MOLECULES.get(molecule_id)
    if molecule is None:
        logger.debug("No molecule for id %r; leaving target empty", molecule_id)
        return PointSet.empty()
    return build_molecule(molecule, num_points, rng, scale)

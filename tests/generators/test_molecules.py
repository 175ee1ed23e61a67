"""Tests for the ball-and-stick molecule sampler."""

import numpy as np
import pytest

from cosmicparticles.generators.molecules import (
    BOND_RADIUS,
    COLORS,
    DISPLAY_SCALE,
    IONIC_RADIUS,
    MOLECULES,
    UNKNOWN_ATOM_COLOR,
    Atom,
    Bond,
    BondKind,
    Molecule,
    allocate_atom_points,
    build_molecule,
    generate_molecule,
)


def _distance_to_line(points, start, end):
    start = np.asarray(start, dtype=np.float64)
    axis = np.asarray(end, dtype=np.float64) - start
    axis /= np.linalg.norm(axis)
    rel = points.astype(np.float64) - start
    along = rel @ axis
    return np.linalg.norm(rel - along[:, np.newaxis] * axis, axis=1)


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------

class TestCatalogue:
    @pytest.mark.parametrize("mol_id", sorted(MOLECULES))
    def test_bond_indices_valid(self, mol_id):
        mol = MOLECULES[mol_id]
        for bond in mol.bonds:
            assert 0 <= bond.a < len(mol.atoms)
            assert 0 <= bond.b < len(mol.atoms)
            assert bond.a != bond.b
            assert bond.order in (1, 2, 3)

    def test_hcl_is_ionic(self):
        assert MOLECULES["HCl"].bonds[0].kind is BondKind.IONIC

    def test_from_dict_defaults(self):
        mol = Molecule.from_dict({
            "atoms": [{"element": "O", "pos": [0, 0, 0]}, {"element": "H", "pos": [1, 0, 0]}],
            "bonds": [[0, 1]],
        })
        assert mol.name == "Custom"
        assert mol.bonds[0] == Bond(0, 1, 1, BondKind.COVALENT)


# ---------------------------------------------------------------------------
# Budget allocation
# ---------------------------------------------------------------------------

class TestAllocation:
    def test_water_volume_ratio(self):
        counts = allocate_atom_points(MOLECULES["H2O"], 21000)
        assert counts.sum() == 21000
        assert counts[0] / counts[1] == pytest.approx((0.75 / 0.5) ** 3, rel=1e-3)
        assert counts[1] == counts[2]

    def test_largest_remainder_exact_total(self):
        for mol in MOLECULES.values():
            assert allocate_atom_points(mol, 9999).sum() == 9999

    @pytest.mark.parametrize("mol_id", sorted(MOLECULES))
    @pytest.mark.parametrize("n", [0, 1, 10, 30000])
    def test_total_is_exactly_n(self, mol_id, n, rng):
        ps = generate_molecule(mol_id, n, rng)
        assert len(ps) == n
        assert ps.positions.shape == ps.colors.shape

    def test_water_split_70_30(self, rng):
        ps = generate_molecule("H2O", 30000, rng)
        # Atoms come first, each in its own CPK color
        atom_colors = ps.colors[:21000]
        cpk_green = np.array([COLORS["O"][1], COLORS["H"][1]], dtype=np.float32)
        is_atom = np.isin(atom_colors[:, 1], cpk_green)
        assert is_atom.all()
        assert len(ps) - 21000 == 9000


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

class TestGeometry:
    def test_atoms_inside_their_spheres(self, rng):
        ps = generate_molecule("H2O", 3000, rng)
        oxygen = ps.positions[: allocate_atom_points(MOLECULES["H2O"], 2100)[0]]
        assert np.linalg.norm(oxygen, axis=1).max() <= 0.75 * DISPLAY_SCALE + 1e-4

    def test_single_bond_is_thin_shell(self, rng):
        mol = MOLECULES["H2O"]
        ps = build_molecule(mol, 30000, rng)
        first_bond = ps.positions[21000:25500] / DISPLAY_SCALE
        dist = _distance_to_line(first_bond, mol.atoms[0].position, mol.atoms[1].position)
        np.testing.assert_allclose(dist, BOND_RADIUS, atol=1e-4)

    def test_triple_bond_has_three_cylinders(self, rng):
        ps = build_molecule(MOLECULES["N2"], 3000, rng)
        bond = ps.positions[2100:] / DISPLAY_SCALE
        # N2 lies on x; offsets run along z
        centers = np.array([0.0, -0.15, 0.15])
        yz = bond[:, 1:]
        dists = np.stack(
            [np.hypot(yz[:, 0], yz[:, 1] - c) for c in centers], axis=1
        ).min(axis=1)
        np.testing.assert_allclose(dists, BOND_RADIUS, atol=1e-4)
        assert len(bond) == 900

    def test_double_bond_offsets(self, rng):
        ps = build_molecule(MOLECULES["O2"], 1000, rng)
        bond = ps.positions[700:] / DISPLAY_SCALE
        # Every point sits 0.05 around z = +-0.075
        dists = np.minimum(
            np.hypot(bond[:, 1], bond[:, 2] - 0.075),
            np.hypot(bond[:, 1], bond[:, 2] + 0.075),
        )
        np.testing.assert_allclose(dists, BOND_RADIUS, atol=1e-4)
        assert (bond[:, 2] > 0).any() and (bond[:, 2] < 0).any()

    def test_ionic_bond_is_cyan_cloud(self, rng):
        mol = MOLECULES["HCl"]
        ps = build_molecule(mol, 2000, rng)
        bond_pos = ps.positions[1400:] / DISPLAY_SCALE
        bond_col = ps.colors[1400:]
        dist = _distance_to_line(bond_pos, mol.atoms[0].position, mol.atoms[1].position)
        assert dist.max() <= IONIC_RADIUS + 1e-4
        np.testing.assert_allclose(bond_col[:, 1], bond_col[:, 2], atol=1e-5)
        assert bond_col[:, 0].max() <= 0.2 + 1e-5

    def test_covalent_bond_blends_end_colors(self, rng):
        ps = build_molecule(MOLECULES["H2O"], 3000, rng)
        bond_col = ps.colors[2100:]
        # O (ff3030) to H (ffffff): red stays full, green/blue between the two
        np.testing.assert_allclose(bond_col[:, 0], 1.0, atol=1e-6)
        assert bond_col[:, 1].min() >= COLORS["O"][1] - 1e-6
        assert bond_col[:, 1].max() <= 1.0 + 1e-6


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------

class TestEdgeCases:
    def test_unknown_id_is_empty(self, rng):
        assert len(generate_molecule("Unobtainium", 1000, rng)) == 0

    def test_custom_without_data_is_empty(self, rng):
        assert len(generate_molecule("custom", 1000, rng)) == 0

    def test_custom_molecule_used(self, rng):
        mol = Molecule("Xe2", (Atom("Xe", (0.0, 0.0, 0.0)), Atom("Xe", (2.0, 0.0, 0.0))),
                       (Bond(0, 1),))
        ps = generate_molecule("custom", 1000, rng, custom=mol)
        assert len(ps) == 1000
        # Unknown element: magenta atoms, grey bond
        np.testing.assert_allclose(ps.colors[0], UNKNOWN_ATOM_COLOR, atol=1e-6)
        np.testing.assert_allclose(ps.colors[-1], (0.8, 0.8, 0.8), atol=1e-6)

    def test_molecule_without_bonds_keeps_atom_share(self, rng):
        mol = Molecule("He", (Atom("He", (0.0, 0.0, 0.0)),))
        assert len(build_molecule(mol, 1000, rng)) == 700

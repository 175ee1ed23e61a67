"""Tests for the star-field sampler."""

import math

import numpy as np
import pytest

from cosmicparticles.generators.galaxy import (
    SPECTRAL_COLORS,
    STAR_CATALOGUE,
    celestial_to_cartesian,
    compress_distance,
    generate_galaxy,
    spectral_color,
)


class TestHelpers:
    def test_compress_distance(self):
        assert compress_distance(0.0) == 0.0
        assert compress_distance(9.0) == pytest.approx(5.0)

    def test_celestial_axes(self):
        np.testing.assert_allclose(celestial_to_cartesian(0.0, 0.0, 2.0), [2.0, 0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(celestial_to_cartesian(6.0, 0.0, 1.0), [0.0, 1.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(celestial_to_cartesian(0.0, 90.0, 1.0), [0.0, 0.0, 1.0], atol=1e-12)

    @pytest.mark.parametrize("stype,letter", [("G2", "G"), ("M1", "M"), ("b8", "B")])
    def test_spectral_color(self, stype, letter):
        assert spectral_color(stype) == SPECTRAL_COLORS[letter]

    def test_unknown_spectral_type_is_white(self):
        assert spectral_color("W5") == (1.0, 1.0, 1.0)


class TestGalaxy:
    @pytest.mark.parametrize("n", [0, 10, 26, 5000])
    def test_exactly_n_points(self, n, rng):
        ps = generate_galaxy(n, rng)
        assert len(ps) == n
        assert ps.colors.shape == ps.positions.shape

    def test_named_stars_first(self, rng):
        ps = generate_galaxy(100, rng)
        np.testing.assert_allclose(ps.positions[0], 0.0, atol=1e-6)  # the Sun
        sirius = ps.positions[1]
        assert np.linalg.norm(sirius) == pytest.approx(math.log10(9.6) * 5.0, rel=1e-5)

    def test_catalogue_truncated_for_small_n(self, rng):
        ps = generate_galaxy(10, rng)
        expected = [spectral_color(s[4]) for s in STAR_CATALOGUE[:10]]
        np.testing.assert_allclose(ps.colors, expected, atol=1e-6)

    def test_background_shell(self, rng):
        ps = generate_galaxy(2000, rng)
        bg = np.linalg.norm(ps.positions[len(STAR_CATALOGUE):], axis=1)
        assert bg.min() >= 15.0 - 1e-4
        assert bg.max() <= 30.0 + 1e-4
        # HSL lightness <= 0.5 at saturation 0.2 peaks at 0.6 per channel
        assert ps.colors[len(STAR_CATALOGUE):].max() <= 0.6 + 1e-6

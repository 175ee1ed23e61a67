"""Tests for the escape-time fractal samplers."""

import numpy as np
import pytest

from cosmicparticles.generators.base import sample_ball
from cosmicparticles.generators.fractal import (
    BAILOUT,
    JULIA_LOWER,
    JULIA_MAX_ITER,
    JULIA_RADIUS,
    MANDELBULB_LOWER,
    MANDELBULB_MAX_ITER,
    MANDELBULB_RADIUS,
    band_mask,
    generate_julia,
    generate_mandelbulb,
    julia_escape,
    mandelbulb_escape,
)

SEED = 7
N = 1000


def _band_iterates(escape_fn, radius, lower, max_iter) -> np.ndarray:
    samples = sample_ball(N, radius, np.random.default_rng(SEED))
    counts, iterates = escape_fn(samples)
    return iterates[band_mask(counts, lower, max_iter)]


def _retained(escape_fn, radius, lower, max_iter) -> int:
    return len(_band_iterates(escape_fn, radius, lower, max_iter))


def _assert_uniform_image(out: np.ndarray, src: np.ndarray):
    """``out`` is ``src`` under one uniform scale plus a shift."""
    d_out = out.astype(np.float64) - out[0]
    d_src = src - src[0]
    scale = np.linalg.norm(d_out) / np.linalg.norm(d_src)
    np.testing.assert_allclose(d_out, d_src * scale, atol=1e-3)


# ---------------------------------------------------------------------------
# Escape counts
# ---------------------------------------------------------------------------

class TestEscapeCounts:
    def test_mandelbulb_origin_never_escapes(self):
        counts, _ = mandelbulb_escape(np.array([[0.0, 0.0, 0.0], [1.9, 0.0, 0.0]]))
        np.testing.assert_array_equal(counts, [MANDELBULB_MAX_ITER, 1])

    def test_julia_counts(self):
        counts, _ = julia_escape(np.array([[1.9, 1.9, 0.0], [1.2, 1.2, 0.0]]))
        np.testing.assert_array_equal(counts, [0, 1])

    def test_julia_iterate_at_bailout(self):
        counts, iterates = julia_escape(np.array([[1.9, 1.9, 0.0], [1.2, 1.2, 0.0]]))
        # Escaped on entry: the sample itself; one step later: q^2 + c
        np.testing.assert_allclose(iterates[0], [1.9, 1.9, 0.0])
        np.testing.assert_allclose(iterates[1], [-0.2, 3.48, 0.2])

    def test_mandelbulb_interior_keeps_last_iterate(self):
        _, iterates = mandelbulb_escape(np.zeros((1, 3)))
        np.testing.assert_array_equal(iterates, 0.0)

    def test_band_is_open_interval(self):
        mask = band_mask(np.array([0, 2, 3, 11, 12]), lower=2, max_iter=12)
        np.testing.assert_array_equal(mask, [False, False, True, True, False])


# ---------------------------------------------------------------------------
# Band filter and padding
# ---------------------------------------------------------------------------

class TestMandelbulb:
    def test_retained_fraction_is_nonzero_and_reproducible(self):
        first = _retained(mandelbulb_escape, MANDELBULB_RADIUS,
                          MANDELBULB_LOWER, MANDELBULB_MAX_ITER)
        second = _retained(mandelbulb_escape, MANDELBULB_RADIUS,
                           MANDELBULB_LOWER, MANDELBULB_MAX_ITER)
        assert first > 0
        assert first == second

    def test_padding_engages_below_half(self):
        kept = _retained(mandelbulb_escape, MANDELBULB_RADIUS,
                         MANDELBULB_LOWER, MANDELBULB_MAX_ITER)
        ps = generate_mandelbulb(N, np.random.default_rng(SEED))
        expected = N if kept < N / 2 else kept
        assert len(ps) == expected

    def test_empty_band_pads_to_n(self):
        ps = generate_mandelbulb(N, np.random.default_rng(SEED), lower=MANDELBULB_MAX_ITER - 1)
        assert len(ps) == N
        assert np.isfinite(ps.positions).all()

    def test_same_seed_same_points(self):
        a = generate_mandelbulb(500, np.random.default_rng(3))
        b = generate_mandelbulb(500, np.random.default_rng(3))
        np.testing.assert_array_equal(a.positions, b.positions)

    def test_normalized(self):
        ps = generate_mandelbulb(N, np.random.default_rng(SEED))
        size = ps.positions.max(axis=0) - ps.positions.min(axis=0)
        assert size.max() == pytest.approx(10.0, abs=1e-3)

    def test_zero_points(self):
        assert len(generate_mandelbulb(0)) == 0


class TestJulia:
    def test_retained_fraction_is_nonzero(self):
        assert _retained(julia_escape, JULIA_RADIUS, JULIA_LOWER, JULIA_MAX_ITER) > 0

    def test_padding_engages_below_half(self):
        kept = _retained(julia_escape, JULIA_RADIUS, JULIA_LOWER, JULIA_MAX_ITER)
        ps = generate_julia(N, np.random.default_rng(SEED))
        expected = N if kept < N / 2 else kept
        assert len(ps) == expected

    def test_colors_in_unit_range(self):
        ps = generate_julia(N, np.random.default_rng(SEED))
        assert ps.colors.min() >= 0.0
        assert ps.colors.max() <= 1.0 + 1e-6


# ---------------------------------------------------------------------------
# Retained points are bailout iterates
# ---------------------------------------------------------------------------

class TestBailoutPoints:
    @pytest.mark.parametrize(
        "escape_fn,radius,lower,max_iter",
        [
            (mandelbulb_escape, MANDELBULB_RADIUS, MANDELBULB_LOWER, MANDELBULB_MAX_ITER),
            (julia_escape, JULIA_RADIUS, JULIA_LOWER, JULIA_MAX_ITER),
        ],
    )
    def test_band_points_lie_outside_bailout(self, escape_fn, radius, lower, max_iter):
        kept = _band_iterates(escape_fn, radius, lower, max_iter)
        assert len(kept) > 0
        assert np.linalg.norm(kept, axis=1).min() > BAILOUT

    def test_mandelbulb_emits_iterates(self):
        kept = _band_iterates(mandelbulb_escape, MANDELBULB_RADIUS,
                              MANDELBULB_LOWER, MANDELBULB_MAX_ITER)
        ps = generate_mandelbulb(N, np.random.default_rng(SEED))
        _assert_uniform_image(ps.positions[:len(kept)], kept)

    def test_julia_emits_iterates(self):
        kept = _band_iterates(julia_escape, JULIA_RADIUS, JULIA_LOWER, JULIA_MAX_ITER)
        ps = generate_julia(N, np.random.default_rng(SEED))
        _assert_uniform_image(ps.positions[:len(kept)], kept)

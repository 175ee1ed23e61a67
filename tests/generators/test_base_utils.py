"""Tests for PointSet, normalization and resampling."""

import numpy as np
import pytest

from cosmicparticles.generators.base import (
    PointSet,
    normalize_points,
    resample_points,
    sample_ball,
    sample_unit_sphere,
)


def _bbox(points: np.ndarray):
    lo = points.min(axis=0)
    hi = points.max(axis=0)
    return (lo + hi) / 2.0, (hi - lo)


# ---------------------------------------------------------------------------
# PointSet
# ---------------------------------------------------------------------------

class TestPointSet:
    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError):
            PointSet(np.zeros((3, 3)), np.zeros((2, 3)))

    def test_arrays_are_read_only(self):
        ps = PointSet(np.zeros((4, 3)), np.ones((4, 3)))
        with pytest.raises(ValueError):
            ps.positions[0, 0] = 1.0

    def test_caller_array_stays_writable(self):
        pos = np.zeros((4, 3), dtype=np.float32)
        PointSet(pos, np.ones((4, 3)))
        pos[0, 0] = 5.0
        assert pos.flags.writeable

    def test_float32_storage(self):
        ps = PointSet(np.zeros((2, 3), dtype=np.float64), np.zeros((2, 3)))
        assert ps.positions.dtype == np.float32
        assert ps.colors.dtype == np.float32

    def test_empty(self):
        ps = PointSet.empty()
        assert len(ps) == 0
        assert ps.positions.shape == (0, 3)

    def test_concat_preserves_order(self):
        a = PointSet(np.zeros((2, 3)), np.zeros((2, 3)))
        b = PointSet(np.ones((3, 3)), np.ones((3, 3)))
        merged = PointSet.concat([a, PointSet.empty(), b])
        assert len(merged) == 5
        np.testing.assert_array_equal(merged.positions[:2], 0.0)
        np.testing.assert_array_equal(merged.positions[2:], 1.0)

    def test_concat_of_nothing_is_empty(self):
        assert len(PointSet.concat([])) == 0


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

class TestNormalizePoints:
    def test_longest_side_matches_extent(self, rng):
        pts = rng.random((500, 3)) * np.array([4.0, 1.0, 0.5]) + 7.0
        out = normalize_points(pts, extent=10.0)
        center, size = _bbox(out)
        assert size.max() == pytest.approx(10.0, abs=1e-4)
        np.testing.assert_allclose(center, 0.0, atol=1e-4)

    def test_uniform_scale_keeps_proportions(self, rng):
        pts = rng.random((200, 3)) * np.array([4.0, 2.0, 1.0])
        _, before = _bbox(pts)
        _, after = _bbox(normalize_points(pts, extent=8.0))
        np.testing.assert_allclose(after / after.max(), before / before.max(), rtol=1e-4)

    def test_degenerate_input_is_only_centred(self):
        pts = np.tile([3.0, -2.0, 1.0], (5, 1))
        out = normalize_points(pts)
        np.testing.assert_array_equal(out, 0.0)

    def test_empty_input(self):
        out = normalize_points(np.zeros((0, 3)))
        assert out.shape == (0, 3)

    def test_input_not_modified(self):
        pts = np.array([[0.0, 0.0, 0.0], [2.0, 0.0, 0.0]])
        normalize_points(pts)
        np.testing.assert_array_equal(pts, [[0.0, 0.0, 0.0], [2.0, 0.0, 0.0]])


# ---------------------------------------------------------------------------
# Resampling
# ---------------------------------------------------------------------------

class TestResamplePoints:
    @pytest.mark.parametrize("source_len,count", [(1, 10), (7, 3), (10, 10), (6144, 30000)])
    def test_exact_count_and_endpoints(self, source_len, count):
        src = np.arange(source_len * 3, dtype=np.float64).reshape(-1, 3)
        out = resample_points(src, count)
        assert out.shape == (count, 3)
        np.testing.assert_array_equal(out[0], src[0])
        # Last output comes from a valid, late source index
        last_idx = int(out[-1, 0]) // 3
        assert last_idx <= source_len - 1
        assert last_idx == ((count - 1) * source_len) // count

    def test_upsampling_duplicates(self):
        src = np.array([[0.0, 0, 0], [1.0, 0, 0]])
        out = resample_points(src, 4)
        np.testing.assert_array_equal(out[:, 0], [0.0, 0.0, 1.0, 1.0])

    def test_empty_source(self):
        assert resample_points(np.zeros((0, 3)), 5).shape == (0, 3)


# ---------------------------------------------------------------------------
# Sampling
# ---------------------------------------------------------------------------

class TestSampling:
    def test_unit_sphere(self, rng):
        pts = sample_unit_sphere(1000, rng)
        np.testing.assert_allclose(np.linalg.norm(pts, axis=1), 1.0, atol=1e-9)

    def test_ball_radius(self, rng):
        pts = sample_ball(1000, 2.5, rng)
        assert np.linalg.norm(pts, axis=1).max() <= 2.5 + 1e-9

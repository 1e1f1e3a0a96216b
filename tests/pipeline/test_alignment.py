"""Tests for the time-alignment engine."""

import numpy as np
import pytest

from edirec.core.timebase import TimeBaseGroup
from edirec.pipeline.alignment import align_indices, rebase_channels

pytestmark = [pytest.mark.unit, pytest.mark.pipeline]


def check_alignment(reference, source, indices):
    """Every index is the latest source sample at or before its reference tick."""
    source = np.asarray(source)
    for r, i in zip(reference, indices):
        if r < source[0]:
            assert i == 0
            continue
        assert source[i] <= r
        assert i == len(source) - 1 or source[i + 1] > r


def test_nearest_preceding_or_equal():
    result = align_indices([0, 10, 15, 30, 45], [10, 20, 30])

    np.testing.assert_array_equal(result.indices, [0, 0, 0, 2, 2])
    assert result.n_before == 1
    assert result.n_after == 1
    assert result.n_extrapolated == 2


def test_exact_matches_pick_that_sample():
    result = align_indices([10, 20, 30], [10, 20, 30])

    np.testing.assert_array_equal(result.indices, [0, 1, 2])
    assert result.n_extrapolated == 0


def test_duplicate_source_ticks_pick_last():
    result = align_indices([20], [10, 20, 20, 30])

    np.testing.assert_array_equal(result.indices, [2])


@pytest.mark.parametrize("seed", range(5))
def test_alignment_property_random(seed):
    rng = np.random.default_rng(seed)
    reference = np.sort(rng.integers(0, 1000, size=200))
    source = np.sort(rng.integers(100, 900, size=20))

    result = align_indices(reference, source)

    assert len(result.indices) == len(reference)
    assert np.all(np.diff(result.indices) >= 0)
    check_alignment(reference, source, result.indices)
    assert result.n_before == np.count_nonzero(reference < source[0])
    assert result.n_after == np.count_nonzero(reference > source[-1])


def test_empty_reference():
    result = align_indices([], [10, 20])

    assert result.indices.shape == (0,)
    assert result.n_extrapolated == 0


def test_empty_source_raises():
    with pytest.raises(ValueError, match="empty source"):
        align_indices([10], [])


def test_rebase_channels_onto_dense_group():
    beams = TimeBaseGroup.from_arrays("gdu1", [5, 10, 15, 20, 25], {"counts1_gdu1": np.arange(5)})
    hk = TimeBaseGroup.from_arrays("timetag", [10, 20], {"energy_gdu1": np.array([1000.0, 500.0])})

    out, alignment = rebase_channels(beams, hk, {"energy_gdu1": "energy_gdu1"})

    np.testing.assert_array_equal(out["energy_gdu1"], [1000, 1000, 1000, 500, 500])
    np.testing.assert_array_equal(out["counts1_gdu1"], np.arange(5))
    assert len(out) == 5
    assert alignment.n_before == 1
    assert alignment.n_after == 1
    # Input group unchanged
    assert "energy_gdu1" not in beams


def test_rebase_channels_onto_empty_group():
    beams = TimeBaseGroup.from_arrays("gdu2", [], {"counts1_gdu2": np.array([], dtype=np.uint16)})
    hk = TimeBaseGroup.from_arrays("timetag", [], {"dwell": np.array([], dtype=np.float64)})

    out, alignment = rebase_channels(beams, hk, {"dwell": "dwell_gdu2"})

    assert len(out) == 0
    assert out["dwell_gdu2"].dtype == np.float64

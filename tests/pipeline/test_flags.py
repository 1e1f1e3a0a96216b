"""Tests for flip-flag pair reconstruction."""

import numpy as np
import pytest

from edirec.pipeline.flags import reconstruct_flags

pytestmark = [pytest.mark.unit, pytest.mark.pipeline]


def flags_at(n, positions):
    flags = np.zeros(n, dtype=np.uint8)
    flags[list(positions)] = 1
    return flags


def test_two_pairs_mark_one_past_each_closer():
    raw = flags_at(12, [2, 3, 7, 8])
    result = reconstruct_flags(raw, alternating=True)

    np.testing.assert_array_equal(np.flatnonzero(result.flags), [4, 9])
    assert result.n_pairs == 2
    assert result.n_dropped == 0
    assert result.n_clamped == 0


def test_odd_marker_count_drops_last_marker():
    raw = flags_at(12, [2, 3, 7])
    result = reconstruct_flags(raw, alternating=True)

    np.testing.assert_array_equal(np.flatnonzero(result.flags), [4])
    assert result.n_pairs == 1
    assert result.n_dropped == 1


def test_correction_past_end_is_dropped():
    raw = flags_at(6, [4, 5])
    result = reconstruct_flags(raw, alternating=True)

    assert not result.flags.any()
    assert len(result.flags) == 6
    assert result.n_clamped == 1


def test_not_alternating_passes_through():
    raw = flags_at(10, [2, 3])
    result = reconstruct_flags(raw, alternating=False)

    np.testing.assert_array_equal(result.flags, raw)
    assert result.n_pairs == 0


def test_raw_sequence_is_not_modified():
    raw = flags_at(10, [2, 3])
    before = raw.copy()
    result = reconstruct_flags(raw, alternating=True)

    np.testing.assert_array_equal(raw, before)
    assert result.flags is not raw
    assert result.flags.dtype == raw.dtype


def test_no_markers():
    result = reconstruct_flags(np.zeros(4, dtype=np.uint8), alternating=True)

    assert not result.flags.any()
    assert result.n_pairs == result.n_dropped == result.n_clamped == 0


def test_empty_sequence():
    result = reconstruct_flags(np.zeros(0, dtype=np.uint8), alternating=True)

    assert result.flags.shape == (0,)

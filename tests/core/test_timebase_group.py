"""Tests for TimeBaseGroup."""

import numpy as np
import pytest

from edirec.contracts import ContractViolation
from edirec.core.timebase import TimeBaseGroup, epoch_dim

pytestmark = pytest.mark.unit


@pytest.fixture
def group():
    return TimeBaseGroup.from_arrays(
        "gdu1", [30, 10, 20],
        {"counts_gdu1": np.array([3, 1, 2], dtype=np.uint16),
         "pads": np.array([[3, 3], [1, 1], [2, 2]])},
    )


def test_epoch_dim():
    assert epoch_dim("timetag") == "epoch_timetag"


def test_from_arrays_builds_int64_ticks(group):
    assert group.dim == "epoch_gdu1"
    assert group.timestamps.dtype == np.int64
    assert len(group) == 3
    assert group.channel_names == ["counts_gdu1", "pads"]
    assert group.dataset["pads"].dims == ("epoch_gdu1", "pads_dim1")


def test_from_arrays_rejects_length_mismatch():
    with pytest.raises(ContractViolation, match="'bad' has"):
        TimeBaseGroup.from_arrays("gdu1", [1, 2], {"bad": np.zeros(3)})


def test_take_moves_every_channel_together(group):
    ordered = group.take(group.sort_permutation())

    np.testing.assert_array_equal(ordered.timestamps, [10, 20, 30])
    np.testing.assert_array_equal(ordered["counts_gdu1"], [1, 2, 3])
    np.testing.assert_array_equal(ordered["pads"][:, 0], [1, 2, 3])
    # Original untouched
    np.testing.assert_array_equal(group.timestamps, [30, 10, 20])


def test_sort_permutation_is_stable():
    g = TimeBaseGroup.from_arrays("angle", [5, 1, 5, 1], {"order": np.arange(4)})
    ordered = g.take(g.sort_permutation())

    np.testing.assert_array_equal(ordered["order"], [1, 3, 0, 2])


def test_with_channel_adds_and_replaces(group):
    added = group.with_channel("energy_gdu1", np.full(3, 500.0), attrs={"units": "eV"})
    assert "energy_gdu1" in added
    assert "energy_gdu1" not in group
    assert added.dataset["energy_gdu1"].attrs["units"] == "eV"

    replaced = added.with_channel("energy_gdu1", np.zeros(3))
    assert not replaced["energy_gdu1"].any()


def test_with_channel_rejects_wrong_length(group):
    with pytest.raises(ContractViolation, match="'x' has shape"):
        group.with_channel("x", np.zeros(4))


def test_without_drops_channels(group):
    assert group.without(["pads"]).channel_names == ["counts_gdu1"]


def test_concat_keeps_file_order_and_channels():
    a = TimeBaseGroup.from_arrays("gdu2", [10, 30], {"c": np.array([1, 3], dtype=np.uint16)})
    b = TimeBaseGroup.from_arrays("gdu2", [20], {"c": np.array([2], dtype=np.uint16)})
    combined = TimeBaseGroup.concat([a, b])

    np.testing.assert_array_equal(combined.timestamps, [10, 30, 20])
    np.testing.assert_array_equal(combined["c"], [1, 3, 2])
    assert combined["c"].dtype == np.uint16


def test_concat_single_group_is_identity(group):
    assert TimeBaseGroup.concat([group]) is group


def test_concat_rejects_mixed_groups(group):
    other = TimeBaseGroup.from_arrays("gdu2", [1])
    with pytest.raises(ContractViolation, match="cannot concatenate"):
        TimeBaseGroup.concat([group, other])


def test_empty_group():
    g = TimeBaseGroup.from_arrays("timetag", [], {"dwell": np.zeros(0)})
    assert len(g) == 0
    assert g.sort_permutation().size == 0

"""Tests for ReconstructedRecord and BatchStatus."""

import numpy as np
import pytest

from edirec.core.record import ReconstructedRecord
from edirec.core.status import BatchStatus
from edirec.core.timebase import TimeBaseGroup

pytestmark = pytest.mark.unit


@pytest.fixture
def record():
    groups = {
        "gdu1": TimeBaseGroup.from_arrays("gdu1", [10, 20, 30], {"counts_gdu1": np.arange(3)}),
        "gdu2": TimeBaseGroup.from_arrays("gdu2", [], {"counts_gdu2": np.zeros(0)}),
        "timetag": TimeBaseGroup.from_arrays("timetag", [5, 25], {"dwell": np.array([0.5, 0.5])}),
        "angle": TimeBaseGroup.from_arrays("angle", [7], {"phi": np.array([1.0])}),
    }
    return ReconstructedRecord(groups, BatchStatus(record_mode="srvy"), {"mode": "srvy", "spacecraft": "mms1"})


def test_getitem_and_repr(record):
    assert record["gdu1"].name == "gdu1"
    assert repr(record) == "ReconstructedRecord(srvy: gdu1=3, gdu2=0, timetag=2, angle=1)"


def test_to_dataset_keeps_separate_time_bases(record):
    ds = record.to_dataset()

    assert ds.sizes["epoch_gdu1"] == 3
    assert ds.sizes["epoch_gdu2"] == 0
    assert ds["dwell"].dims == ("epoch_timetag",)
    assert ds.attrs == {"mode": "srvy", "spacecraft": "mms1"}


def test_summary(record):
    summary = record.summary()

    assert list(summary.index) == ["gdu1", "gdu2", "timetag", "angle"]
    assert summary.loc["gdu1", "n_samples"] == 3
    assert summary.loc["gdu1", "last_tick"] == 30
    assert summary.loc["timetag", "first_tick"] == 5
    assert summary.loc["gdu2", "n_samples"] == 0
    assert summary.loc["angle", "n_channels"] == 1


def test_status_extrapolation_totals():
    status = BatchStatus()
    status.add_extrapolation("a", "gdu1", "timetag", 2, 1)
    status.add_extrapolation("b", "gdu2", "timetag", 0, 4)

    assert status.total_extrapolated == 7
    assert status.extrapolation[0].file == "a"


def test_status_rejects_negative_counts():
    with pytest.raises(ValueError):
        BatchStatus().add_extrapolation("a", "gdu1", "timetag", -1, 0)

"""Tests for pipeline contracts.

These tests verify that contracts are enforced at stage boundaries.
They test contract violations directly, without defensive logic downstream.
"""

import numpy as np
import pytest
import xarray as xr

pytestmark = pytest.mark.unit

from edirec.contracts import (
    ContractViolation,
    assert_monotonic,
    assert_record,
    require,
)
from edirec.core.record import ReconstructedRecord
from edirec.core.status import BatchStatus
from edirec.core.timebase import TimeBaseGroup


def _record(burst=False, n=3, drop=None):
    groups = {}
    for name in ("gdu1", "gdu2", "timetag", "angle"):
        channels = {}
        if name.startswith("gdu"):
            shape = (n, 4) if burst else (n,)
            channels[f"counts_{name}"] = np.zeros(shape, dtype=np.uint16)
        groups[name] = TimeBaseGroup.from_arrays(name, np.arange(n), channels)
    if burst:
        for gdu in ("gdu1", "gdu2"):
            ds = groups[gdu].dataset.rename({f"counts_{gdu}_dim1": "pad"})
            groups[gdu] = TimeBaseGroup(gdu, ds)
    if drop:
        del groups[drop]
    return ReconstructedRecord(groups, BatchStatus())


class TestRequire:
    """Test the single enforcement mechanism."""

    def test_require_passes_when_true(self):
        require(True, "never raised")

    def test_require_raises_with_message(self):
        with pytest.raises(ContractViolation, match="broken invariant"):
            require(False, "broken invariant")

    def test_contract_violation_is_runtime_error(self):
        assert issubclass(ContractViolation, RuntimeError)


class TestCoindexedContract:
    """Test the co-indexing contract (checked on every group construction)."""

    def test_valid_group_passes(self):
        ds = xr.Dataset({"a": (("epoch_gdu1",), np.ones(3))}, coords={"epoch_gdu1": [1, 2, 3]})
        group = TimeBaseGroup("gdu1", ds)
        assert len(group) == 3

    def test_fails_without_tick_coordinate(self):
        ds = xr.Dataset({"a": (("epoch_gdu1",), np.ones(3))})
        with pytest.raises(ContractViolation, match="no 'epoch_gdu1' coordinate"):
            TimeBaseGroup("gdu1", ds)

    def test_fails_with_float_ticks(self):
        ds = xr.Dataset(coords={"epoch_angle": np.array([0.5, 1.5])})
        with pytest.raises(ContractViolation, match="expected integer ticks"):
            TimeBaseGroup("angle", ds)

    def test_fails_when_channel_on_other_time_base(self):
        ds = xr.Dataset(
            {"a": (("epoch_timetag",), np.ones(2))},
            coords={"epoch_gdu1": [1, 2, 3], "epoch_timetag": [1, 2]},
        )
        with pytest.raises(ContractViolation, match="'a' is not indexed by 'epoch_gdu1'"):
            TimeBaseGroup("gdu1", ds)

    def test_fails_for_scalar_channel(self):
        ds = xr.Dataset({"a": ((), 1)}, coords={"epoch_gdu1": [1, 2]})
        with pytest.raises(ContractViolation, match="not indexed"):
            TimeBaseGroup("gdu1", ds)


class TestMonotonicContract:
    """Test the merge ordering contract."""

    def test_sorted_with_ties_passes(self):
        assert_monotonic(TimeBaseGroup.from_arrays("gdu1", [1, 2, 2, 5]))

    def test_empty_passes(self):
        assert_monotonic(TimeBaseGroup.from_arrays("gdu1", []))

    def test_unsorted_fails(self):
        with pytest.raises(ContractViolation, match="not non-decreasing"):
            assert_monotonic(TimeBaseGroup.from_arrays("gdu1", [1, 3, 2]))


class TestRecordContract:
    """Test record stage contract."""

    def test_survey_record_passes(self):
        assert_record(_record(), burst=False)

    def test_burst_record_passes(self):
        assert_record(_record(burst=True), burst=True)

    def test_missing_group_fails(self):
        with pytest.raises(ContractViolation, match="missing group 'angle'"):
            assert_record(_record(drop="angle"), burst=False)

    def test_missing_counts_fails(self):
        record = _record()
        record.groups["gdu2"] = record["gdu2"].without(["counts_gdu2"])
        with pytest.raises(ContractViolation, match="missing 'counts_gdu2'"):
            assert_record(record, burst=False)

    def test_survey_counts_must_be_1d(self):
        with pytest.raises(ContractViolation, match="expected 1"):
            assert_record(_record(burst=True), burst=False)

    def test_burst_counts_need_pad_axis(self):
        with pytest.raises(ContractViolation, match="expected \\(epoch_gdu1, pad\\)"):
            assert_record(_record(burst=False), burst=True)

    def test_channel_name_shared_by_two_groups_fails(self):
        record = _record()
        record.groups["timetag"] = record["timetag"].with_channel("energy_gdu1", np.ones(3))
        record.groups["gdu1"] = record["gdu1"].with_channel("energy_gdu1", np.zeros(3))
        with pytest.raises(ContractViolation, match="channel 'energy_gdu1' in both"):
            assert_record(record, burst=False)

    def test_unsorted_group_fails(self):
        record = _record()
        record.groups["timetag"] = TimeBaseGroup.from_arrays("timetag", [3, 1, 2])
        with pytest.raises(ContractViolation, match="epoch_timetag"):
            assert_record(record, burst=False)


class TestInvariantCatalogue:
    """The documented invariants cover every stage."""

    def test_every_stage_documented(self):
        from edirec.contracts.invariants import PIPELINE_INVARIANTS, STAGE_REQUIREMENTS

        assert set(PIPELINE_INVARIANTS) == set(STAGE_REQUIREMENTS)
        assert all(PIPELINE_INVARIANTS[stage] for stage in PIPELINE_INVARIANTS)
        assert STAGE_REQUIREMENTS["flags"] == "OPTIONAL"

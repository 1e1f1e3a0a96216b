"""Record stage contract.

Enforces the guarantee that the assembled record carries every group,
the mode-dependent counts layout, and co-indexed channels.
"""

from edirec.contracts.base import require
from edirec.contracts.timebase import assert_coindexed, assert_monotonic

RECORD_GROUPS = ("gdu1", "gdu2", "timetag", "angle")
PAD_COUNT = 4


def assert_record(record, burst: bool) -> None:
    """Enforce record stage contract.

    Parameters
    ----------
    record : ReconstructedRecord
        Output of RecordAssembler.assemble()

    burst : bool
        True for the high-duty-cycle layout (four pads per detector).

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    for name in RECORD_GROUPS:
        require(
            name in record.groups,
            f"Record contract violated: missing group '{name}'"
        )
        assert_coindexed(record[name])
        assert_monotonic(record[name])

    for gdu in ("gdu1", "gdu2"):
        group = record[gdu]
        counts_name = f"counts_{gdu}"
        require(
            counts_name in group,
            f"Record contract violated: missing '{counts_name}'"
        )
        counts = group.dataset[counts_name]
        if burst:
            require(
                counts.dims == (group.dim, "pad") and counts.shape == (len(group), PAD_COUNT),
                f"Record contract violated: '{counts_name}' has dims {counts.dims} "
                f"shape {counts.shape}, expected ({group.dim}, pad) ({len(group)}, {PAD_COUNT})"
            )
        else:
            require(
                counts.ndim == 1,
                f"Record contract violated: '{counts_name}' has {counts.ndim} dims, expected 1"
            )

    seen = {}
    for name in RECORD_GROUPS:
        for channel in record[name].channel_names:
            require(
                channel not in seen,
                f"Record contract violated: channel '{channel}' in both '{seen.get(channel)}' and '{name}'"
            )
            seen[channel] = name

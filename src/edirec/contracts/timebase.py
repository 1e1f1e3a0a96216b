"""Time-base group contract.

Enforces the co-indexing invariant: every channel of a group is indexed
by the group's ticks.
"""

import numpy as np

from edirec.contracts.base import require


def assert_coindexed(group) -> None:
    """Enforce the co-indexing contract on one TimeBaseGroup.

    Parameters
    ----------
    group : TimeBaseGroup
        Group to check.

    Raises
    ------
    ContractViolation
        If a channel's leading length differs from the tick count, or the
        ticks are not integer typed.
    """
    ds = group.dataset
    n = len(group)
    require(
        group.dim in ds.coords,
        f"Time-base contract violated: group '{group.name}' has no '{group.dim}' coordinate"
    )
    require(
        ds[group.dim].dtype.kind in {"i", "u"},
        f"Time-base contract violated: '{group.dim}' dtype is {ds[group.dim].dtype}, expected integer ticks"
    )
    for name, var in ds.data_vars.items():
        require(
            var.ndim >= 1 and var.dims[0] == group.dim,
            f"Time-base contract violated: '{name}' is not indexed by '{group.dim}'"
        )
        require(
            var.shape[0] == n,
            f"Time-base contract violated: '{name}' has {var.shape[0]} samples, '{group.dim}' has {n}"
        )


def assert_monotonic(group) -> None:
    """Enforce non-decreasing ticks on a group (after merge)."""
    ticks = group.timestamps
    require(
        bool(np.all(np.diff(ticks) >= 0)),
        f"Merge contract violated: '{group.dim}' ticks are not non-decreasing"
    )

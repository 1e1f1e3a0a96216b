"""Time-base groups: one tick array plus every channel indexed by it.

A TimeBaseGroup wraps a single-dimension ``xarray.Dataset`` whose
dimension coordinate holds the ticks (int64 nanoseconds) and whose data
variables are the channels. Because every channel lives in the same
Dataset, reordering, slicing and concatenation happen to all channels in
one operation and can never drift apart.

Groups are treated as values: every method returns a new group.
"""

import logging
from typing import Iterable, Mapping, Optional, Sequence

import numpy as np
import xarray as xr

from edirec.contracts import assert_coindexed, require

__all__ = ['TimeBaseGroup', 'epoch_dim']

logger = logging.getLogger(__name__)

TICK_DTYPE = np.int64


def epoch_dim(name: str) -> str:
    """Dimension (and tick variable) name of a group, e.g. ``epoch_gdu1``."""
    return f"epoch_{name}"


class TimeBaseGroup:
    """A time base together with all of its co-indexed channels.

    Parameters
    ----------
    name : str
        Group name (``gdu1``, ``gdu2``, ``timetag``, ``angle``).
    dataset : xr.Dataset
        Dataset with an integer ``epoch_<name>`` dimension coordinate.
        Every data variable must lead with that dimension.

    Raises
    ------
    ContractViolation
        If the dataset breaks the co-indexing invariant.
    """

    def __init__(self, name: str, dataset: xr.Dataset):
        self.name = name
        self.dim = epoch_dim(name)
        self.dataset = dataset
        assert_coindexed(self)

    @classmethod
    def from_arrays(cls, name: str, timestamps, channels: Optional[Mapping[str, np.ndarray]] = None,
                    attrs: Optional[dict] = None) -> "TimeBaseGroup":
        """Build a group from a tick array and 1-D channel arrays."""
        dim = epoch_dim(name)
        ticks = np.asarray(timestamps, dtype=TICK_DTYPE)
        ds = xr.Dataset(coords={dim: ticks}, attrs=dict(attrs or {}))
        for channel, values in (channels or {}).items():
            values = np.asarray(values)
            require(
                values.shape[:1] == ticks.shape,
                f"Time-base contract violated: '{channel}' has {values.shape[:1]} samples, "
                f"'{dim}' has {ticks.shape[0]}"
            )
            ds[channel] = ((dim,) + tuple(f"{channel}_dim{i}" for i in range(1, values.ndim)), values)
        return cls(name, ds)

    @classmethod
    def concat(cls, groups: Sequence["TimeBaseGroup"]) -> "TimeBaseGroup":
        """Concatenate groups of the same name along their time base, in order."""
        require(len(groups) > 0, "Time-base contract violated: nothing to concatenate")
        name = groups[0].name
        require(
            all(g.name == name for g in groups),
            f"Time-base contract violated: cannot concatenate groups {[g.name for g in groups]}"
        )
        if len(groups) == 1:
            return groups[0]
        ds = xr.concat(
            [g.dataset for g in groups],
            dim=epoch_dim(name),
            data_vars="all",
            coords="minimal",
            join="outer",
            combine_attrs="drop_conflicts",
        )
        return cls(name, ds)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return int(self.dataset.sizes[self.dim])

    def __contains__(self, channel: str) -> bool:
        return channel in self.dataset.data_vars

    def __getitem__(self, channel: str) -> np.ndarray:
        return self.dataset[channel].values

    def __repr__(self) -> str:
        return f"TimeBaseGroup({self.name!r}, n={len(self)}, channels={self.channel_names})"

    @property
    def timestamps(self) -> np.ndarray:
        return self.dataset[self.dim].values

    @property
    def channel_names(self) -> list:
        return list(self.dataset.data_vars)

    # ------------------------------------------------------------------
    # Transformations (each returns a new group)
    # ------------------------------------------------------------------

    def with_channel(self, channel: str, values, extra_dims: Iterable[str] = (),
                     attrs: Optional[dict] = None) -> "TimeBaseGroup":
        """Return a copy of the group with ``channel`` added or replaced."""
        values = np.asarray(values)
        require(
            values.ndim >= 1 and values.shape[0] == len(self),
            f"Time-base contract violated: '{channel}' has shape {values.shape}, "
            f"'{self.dim}' has {len(self)} samples"
        )
        ds = self.dataset.copy()
        ds[channel] = ((self.dim,) + tuple(extra_dims), values, dict(attrs or {}))
        return TimeBaseGroup(self.name, ds)

    def without(self, channels: Iterable[str]) -> "TimeBaseGroup":
        """Return a copy of the group without the named channels."""
        return TimeBaseGroup(self.name, self.dataset.drop_vars(list(channels)))

    def take(self, indices) -> "TimeBaseGroup":
        """Apply one index array to the ticks and every channel together."""
        return TimeBaseGroup(self.name, self.dataset.isel({self.dim: np.asarray(indices, dtype=np.intp)}))

    def sort_permutation(self) -> np.ndarray:
        """Stable permutation that orders the ticks (ties keep input order)."""
        return np.argsort(self.timestamps, kind="stable")

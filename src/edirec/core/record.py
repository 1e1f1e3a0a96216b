"""The reconstructed record handed to downstream categorization/writing."""

import logging
from typing import Mapping

import pandas as pd
import xarray as xr

from edirec.core.status import BatchStatus
from edirec.core.timebase import TimeBaseGroup

__all__ = ['ReconstructedRecord']

logger = logging.getLogger(__name__)


class ReconstructedRecord:
    """Named time-base groups plus the batch status.

    Parameters
    ----------
    groups : mapping of str to TimeBaseGroup
        ``gdu1``, ``gdu2``, ``timetag`` and ``angle``.
    status : BatchStatus
        Diagnostics collected while reconstructing.
    attrs : dict, optional
        Record-level attributes (spacecraft, instrument, mode, ...).

    Examples
    --------
    >>> record = reconstructor.reconstruct(files)
    >>> record["gdu1"]["counts_gdu1"].shape
    (5,)
    >>> record.status.merge_performed
    True
    """

    def __init__(self, groups: Mapping[str, TimeBaseGroup], status: BatchStatus, attrs: dict = None):
        self.groups = dict(groups)
        self.status = status
        self.attrs = dict(attrs or {})

    def __getitem__(self, name: str) -> TimeBaseGroup:
        return self.groups[name]

    def __repr__(self) -> str:
        sizes = ", ".join(f"{name}={len(group)}" for name, group in self.groups.items())
        return f"ReconstructedRecord({self.attrs.get('mode', '?')}: {sizes})"

    def to_dataset(self) -> xr.Dataset:
        """Combine all groups into one Dataset with one dimension per time base.

        The tick coordinates stay separate (``epoch_gdu1``, ``epoch_gdu2``,
        ...), which is the layout the output writer expects.
        """
        ds = xr.merge([group.dataset for group in self.groups.values()],
                      compat="no_conflicts", join="outer", combine_attrs="drop")
        ds.attrs.update(self.attrs)
        return ds

    def summary(self) -> pd.DataFrame:
        """One row per group: sample count, first/last tick, channel count."""
        rows = []
        for name, group in self.groups.items():
            ticks = group.timestamps
            rows.append({
                "group": name,
                "n_samples": len(group),
                "first_tick": int(ticks[0]) if len(ticks) else None,
                "last_tick": int(ticks[-1]) if len(ticks) else None,
                "n_channels": len(group.channel_names),
            })
        return pd.DataFrame(rows).set_index("group")

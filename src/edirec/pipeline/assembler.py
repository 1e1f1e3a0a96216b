"""Shape merged groups into the final record.

Survey data exposes one counts channel per detector. Burst data samples
four detector pads at once; the pads are stacked pad-last into one
``(N, 4)`` channel with dims ``(epoch_gduN, pad)``, which is the layout
the categorization stage indexes.
"""

import logging
from typing import TYPE_CHECKING, Mapping

import numpy as np

from edirec.core.record import ReconstructedRecord
from edirec.core.status import BatchStatus
from edirec.core.timebase import TimeBaseGroup
from edirec.instrument.layout import GDUS, PAD_COUNT, counts_channels
from edirec.instrument.versions import OPTIONAL_CHANNELS, VersionPolicy

if TYPE_CHECKING:
    from edirec.instrument.filenames import DescriptorBatch

__all__ = ['RecordAssembler']

logger = logging.getLogger(__name__)


class RecordAssembler:
    """Compose a ReconstructedRecord from merged time-base groups."""

    def assemble(self, groups: Mapping[str, TimeBaseGroup], batch: "DescriptorBatch",
                 policy: VersionPolicy, status: BatchStatus) -> ReconstructedRecord:
        """Build the record.

        Parameters
        ----------
        groups : mapping of str to TimeBaseGroup
            Merged ``gdu1``, ``gdu2``, ``timetag`` and ``angle`` groups.
        batch : DescriptorBatch
            Resolved batch (mode, descriptor, files).
        policy : VersionPolicy
            Batch version policy.
        status : BatchStatus
            Diagnostics, updated with any defaulted channel.

        Returns
        -------
        ReconstructedRecord
        """
        out = {gdu: self._shape_counts(groups[gdu], gdu, batch.burst) for gdu in GDUS}

        timetag = groups["timetag"]
        for channel in OPTIONAL_CHANNELS:
            if channel not in timetag:
                timetag = timetag.with_channel(channel, policy.default_channel(channel, len(timetag)))
                status.defaulted_channels.append(f"timetag:{channel}")
                logger.debug("Defaulted absent channel %s to zeros", channel)
        out["timetag"] = timetag
        out["angle"] = groups["angle"]

        attrs = {
            "spacecraft": batch.spacecraft,
            "instrument": batch.instrument,
            "level": batch.level,
            "mode": batch.record_mode,
            "optdesc": batch.optdesc,
            "versions": ", ".join("v%d.%d.%d" % v for v in policy.versions),
        }
        return ReconstructedRecord(out, status, attrs)

    @staticmethod
    def _shape_counts(group: TimeBaseGroup, gdu: str, burst: bool) -> TimeBaseGroup:
        names = counts_channels(gdu, burst)
        attrs = {"long_name": f"{gdu.upper()} counts", "units": "counts"}
        if not burst:
            return group.without(names).with_channel(f"counts_{gdu}", group[names[0]], attrs=attrs)

        stacked = np.stack([group[name] for name in names], axis=-1)
        shaped = group.without(names).with_channel(f"counts_{gdu}", stacked, extra_dims=("pad",), attrs=attrs)
        return TimeBaseGroup(gdu, shaped.dataset.assign_coords(pad=np.arange(1, PAD_COUNT + 1)))

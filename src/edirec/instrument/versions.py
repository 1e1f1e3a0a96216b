"""Version-dependent field layout and units.

Each file's version triple is turned into a small set of capability flags
once per batch. Downstream stages read the flags; nothing else compares
version numbers.

Capabilities
------------
needs_energy_decode
    Files older than ``energy_units_version`` store energy as a 2-bit
    code; newer files already store eV.
has_flip_flag
    Files from ``flip_flag_version`` on carry the flip flag.
has_perp_fields
    Files from ``perp_fields_version`` on carry the perpendicular-mode
    channels.
"""

import logging
from typing import TYPE_CHECKING, Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict

from edirec.errors import VersionConflict

if TYPE_CHECKING:
    from edirec.schemas.internal import InternalVersionsConfig

__all__ = ['VersionPolicy', 'OPTIONAL_CHANNELS']

logger = logging.getLogger(__name__)

# channel -> (capability flag, dtype of its zero default)
OPTIONAL_CHANNELS = {
    "flip_flag": ("has_flip_flag", np.uint8),
    "perp_onechan": ("has_perp_fields", np.uint8),
    "perp_bidir": ("has_perp_fields", np.uint8),
}


class VersionPolicy(BaseModel):
    """Capability flags for one file or a whole batch. Immutable."""
    model_config = ConfigDict(extra='forbid', frozen=True)

    versions: tuple[tuple[int, int, int], ...]
    needs_energy_decode: bool
    has_flip_flag: bool
    has_perp_fields: bool
    notes: tuple[str, ...] = ()

    @classmethod
    def for_version(cls, version: tuple, rules: "InternalVersionsConfig") -> "VersionPolicy":
        """Derive the capability flags of a single version triple."""
        version = tuple(version)
        return cls(
            versions=(version,),
            needs_energy_decode=version < tuple(rules.energy_units_version),
            has_flip_flag=version >= tuple(rules.flip_flag_version),
            has_perp_fields=version >= tuple(rules.perp_fields_version),
        )

    @classmethod
    def reconcile(cls, policies: Sequence["VersionPolicy"], alternating: bool) -> "VersionPolicy":
        """Combine per-file policies into the batch policy.

        Parameters
        ----------
        policies : sequence of VersionPolicy
            One per file, in batch order.
        alternating : bool
            Whether the batch is alternating-mode data (flip flag needed).

        Raises
        ------
        VersionConflict
            If files disagree on energy units, or on flip-flag presence in
            an alternating-mode batch.
        """
        versions = tuple(dict.fromkeys(v for p in policies for v in p.versions))
        labels = ", ".join("v%d.%d.%d" % v for v in versions)

        decode = {p.needs_energy_decode for p in policies}
        if len(decode) > 1:
            raise VersionConflict(
                f"Batch mixes energy codes and energy in eV ({labels}); "
                "cannot apply one energy decoding to the batch"
            )

        flip = {p.has_flip_flag for p in policies}
        notes = []
        if len(flip) > 1:
            if alternating:
                raise VersionConflict(
                    f"Alternating-mode batch mixes files with and without the flip flag ({labels})"
                )
            notes.append(f"flip_flag absent from some files ({labels}); zero-filled")

        perp = {p.has_perp_fields for p in policies}
        if len(perp) > 1:
            notes.append(f"perpendicular-mode fields absent from some files ({labels}); zero-filled")

        for note in notes:
            logger.warning("Version note: %s", note)

        return cls(
            versions=versions,
            needs_energy_decode=decode.pop(),
            has_flip_flag=all(flip),
            has_perp_fields=any(perp),
            notes=tuple(notes),
        )

    def provides(self, channel: str) -> bool:
        """Whether an optional channel exists under this policy."""
        flag, _ = OPTIONAL_CHANNELS[channel]
        return getattr(self, flag)

    @staticmethod
    def default_channel(channel: str, n: int) -> np.ndarray:
        """Zero-filled substitute for an absent optional channel."""
        _, dtype = OPTIONAL_CHANNELS[channel]
        return np.zeros(n, dtype=dtype)

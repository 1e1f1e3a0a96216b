"""Parse instrument file names and validate a batch of them.

File names follow the mission convention::

    sc_instr_mode_level[_optdesc]_tstart_vX.Y.Z.ext
    mms1_edi_slow_l1a_amb-alt-cc_20160101_v1.2.0.cdf

The optional descriptor may be compound (``amb-alt-cc``): the part before
the first delimiter is the base descriptor, the rest is the sub-variant.

A reconstruction batch must agree on spacecraft, instrument, level and
descriptor. Modes must match, except that the two survey cadences
(``fast`` and ``slow``) may be mixed, in which case the batch is merged
into one survey record.
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Union

from pydantic import BaseModel, ConfigDict

from edirec.errors import InconsistentBatch, InvalidFileName, UnknownVariant

if TYPE_CHECKING:
    from edirec.schemas import InternalConfig

__all__ = ['FileDescriptor', 'DescriptorBatch', 'FileDescriptorResolver', 'parse_filename']

logger = logging.getLogger(__name__)

_FILENAME_RE = re.compile(
    r"^(?P<spacecraft>[a-z]+\d+)"
    r"_(?P<instrument>[a-z0-9]+)"
    r"_(?P<mode>[a-z]+)"
    r"_(?P<level>l[0-9][a-z0-9]*)"
    r"(?:_(?P<optdesc>[a-z0-9]+(?:-[a-z0-9]+)*))?"
    r"_(?P<tstart>\d{8}(?:\d{2}){0,3})"
    r"_v(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    r"(?:\.[A-Za-z0-9]+)?$"
)

# tstart length -> strptime format
_TSTART_FORMATS = {
    8: "%Y%m%d",
    10: "%Y%m%d%H",
    12: "%Y%m%d%H%M",
    14: "%Y%m%d%H%M%S",
}


class FileDescriptor(BaseModel):
    """Structured fields of one input file name. Immutable."""
    model_config = ConfigDict(extra='forbid', frozen=True)

    spacecraft: str
    instrument: str
    mode: str
    level: str
    optdesc: str = ""
    start: datetime
    version: tuple[int, int, int]
    path: str

    @property
    def version_str(self) -> str:
        return "v%d.%d.%d" % self.version

    @property
    def stem(self) -> str:
        return Path(self.path).stem


class DescriptorBatch(BaseModel):
    """A validated, ordered set of descriptors with batch-wide fields."""
    model_config = ConfigDict(extra='forbid', frozen=True)

    descriptors: tuple[FileDescriptor, ...]
    spacecraft: str
    instrument: str
    level: str
    optdesc: str
    base_optdesc: str
    sub_variant: str
    modes: tuple[str, ...]
    merge_required: bool
    alternating: bool
    burst: bool
    record_mode: str

    def __len__(self) -> int:
        return len(self.descriptors)

    @property
    def paths(self) -> list:
        return [d.path for d in self.descriptors]


def parse_filename(identifier: Union[str, Path]) -> FileDescriptor:
    """Parse one file identifier (path or bare name) into a FileDescriptor.

    Raises
    ------
    InvalidFileName
        If the name does not follow the naming convention.
    """
    name = Path(str(identifier)).name
    match = _FILENAME_RE.match(name)
    if match is None:
        raise InvalidFileName(f"Not a valid instrument file name: {name!r}")

    tstart = match["tstart"]
    try:
        start = datetime.strptime(tstart, _TSTART_FORMATS[len(tstart)])
    except ValueError as e:
        raise InvalidFileName(f"Invalid start time {tstart!r} in {name!r}: {e}") from e

    return FileDescriptor(
        spacecraft=match["spacecraft"],
        instrument=match["instrument"],
        mode=match["mode"],
        level=match["level"],
        optdesc=match["optdesc"] or "",
        start=start,
        version=(int(match["major"]), int(match["minor"]), int(match["patch"])),
        path=str(identifier),
    )


class FileDescriptorResolver:
    """Validate that a set of files can be reconstructed together.

    Parameters
    ----------
    config : InternalConfig
        Runtime configuration; only the ``resolver`` section is used.

    Examples
    --------
    >>> resolver = FileDescriptorResolver(config)
    >>> batch = resolver.resolve([
    ...     "mms1_edi_fast_l1a_amb_20160101_v0.9.0.cdf",
    ...     "mms1_edi_slow_l1a_amb_20160101_v0.9.0.cdf",
    ... ])
    >>> batch.merge_required, batch.record_mode
    (True, 'srvy')
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config.resolver

    def split_optdesc(self, optdesc: str) -> tuple:
        """Split ``amb-alt-cc`` into (``amb``, ``alt-cc``).

        Raises
        ------
        UnknownVariant
            If the sub-variant is not a known one.
        """
        delimiter = self.config.sub_variant_delimiter
        base, _, sub_variant = optdesc.partition(delimiter)
        if sub_variant not in self.config.known_sub_variants:
            raise UnknownVariant(
                f"Unknown sub-variant {sub_variant!r} in descriptor {optdesc!r} "
                f"(known: {sorted(v for v in self.config.known_sub_variants if v)})"
            )
        return base, sub_variant

    def resolve(self, identifiers: Union[str, Path, Iterable[Union[str, Path]]]) -> DescriptorBatch:
        """Parse and validate a batch of file identifiers.

        Raises
        ------
        InvalidFileName
            If any identifier cannot be parsed.
        InconsistentBatch
            If the files disagree on spacecraft, instrument, level or
            descriptor, mix incompatible modes, or the batch is empty.
        UnknownVariant
            If the descriptor's sub-variant is not recognised.
        """
        if isinstance(identifiers, (str, Path)):
            identifiers = [identifiers]
        descriptors = tuple(parse_filename(i) for i in identifiers)
        if not descriptors:
            raise InconsistentBatch("Empty batch: no files to reconstruct")

        for field in ("spacecraft", "instrument", "level", "optdesc"):
            values = {getattr(d, field) for d in descriptors}
            if len(values) > 1:
                raise InconsistentBatch(f"Files disagree on {field}: {sorted(values)}")

        first = descriptors[0]
        modes = tuple(dict.fromkeys(d.mode for d in descriptors))
        merge_required = False
        if len(modes) == 1:
            record_mode = modes[0]
        elif set(modes) == set(self.config.survey_modes):
            merge_required = True
            record_mode = self.config.merged_mode
        else:
            raise InconsistentBatch(f"Files mix incompatible telemetry modes: {sorted(modes)}")

        base_optdesc, sub_variant = self.split_optdesc(first.optdesc)

        batch = DescriptorBatch(
            descriptors=descriptors,
            spacecraft=first.spacecraft,
            instrument=first.instrument,
            level=first.level,
            optdesc=first.optdesc,
            base_optdesc=base_optdesc,
            sub_variant=sub_variant,
            modes=modes,
            merge_required=merge_required,
            alternating=sub_variant.startswith(self.config.alternating_prefix),
            burst=record_mode in self.config.burst_modes,
            record_mode=record_mode,
        )
        logger.info(
            "Resolved batch: %d file(s) %s_%s_%s_%s mode=%s merge=%s alternating=%s",
            len(batch), batch.spacecraft, batch.instrument, batch.level,
            batch.optdesc or "-", batch.record_mode, batch.merge_required, batch.alternating,
        )
        return batch

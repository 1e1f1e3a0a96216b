"""Merge per-file time-base groups into one time-ordered series each.

For every group name the per-file groups are concatenated in file order,
one stable sort permutation is computed from the concatenated ticks, and
that permutation is applied to the whole group at once, so every channel
indexed by the time base moves together.
"""

import logging
from typing import Mapping, Sequence

from edirec.contracts import assert_monotonic, require
from edirec.core.timebase import TimeBaseGroup
from edirec.errors import NoRecords

__all__ = ['merge_groups']

logger = logging.getLogger(__name__)


def merge_groups(per_file: Sequence[Mapping[str, TimeBaseGroup]]) -> dict:
    """Concatenate and time-order each group across files.

    Parameters
    ----------
    per_file : sequence of mapping of str to TimeBaseGroup
        One ``{group_name: group}`` mapping per file, in batch order. All
        mappings must carry the same group names.

    Returns
    -------
    dict of str to TimeBaseGroup
        One merged group per name. Groups with no samples anywhere are
        returned empty but with all of their channels.

    Raises
    ------
    NoRecords
        If no file has a single sample in any group.
    """
    require(len(per_file) > 0, "Merge contract violated: no files to merge")
    names = list(per_file[0])
    require(
        all(list(groups) == names for groups in per_file),
        f"Merge contract violated: files carry different groups {[list(g) for g in per_file]}"
    )

    total = sum(len(groups[name]) for groups in per_file for name in names)
    if total == 0:
        raise NoRecords(f"No samples in any of {len(per_file)} file(s)")

    merged = {}
    for name in names:
        combined = TimeBaseGroup.concat([groups[name] for groups in per_file])
        merged[name] = combined.take(combined.sort_permutation())
        assert_monotonic(merged[name])

    logger.info(
        "Merged %d file(s): %s",
        len(per_file), ", ".join(f"{name}={len(group)}" for name, group in merged.items()),
    )
    return merged

"""Align a sparse time base onto a dense one.

For every reference tick the engine picks the latest source sample at or
before it (nearest preceding or equal). Reference ticks before the first
source sample are clamped to source index 0; ticks after the last source
sample keep the last one. Both cases are counted and reported as
extrapolation, never raised.
"""

import logging
from typing import Mapping, NamedTuple

import numpy as np

from edirec.contracts import require
from edirec.core.timebase import TimeBaseGroup

__all__ = ['Alignment', 'align_indices', 'rebase_channels']

logger = logging.getLogger(__name__)


class Alignment(NamedTuple):
    indices: np.ndarray
    n_before: int
    n_after: int

    @property
    def n_extrapolated(self) -> int:
        return self.n_before + self.n_after


def align_indices(reference, source) -> Alignment:
    """Index of the latest ``source`` sample at or before each ``reference`` tick.

    Parameters
    ----------
    reference : array_like
        Dense, non-decreasing ticks to align onto.
    source : array_like
        Sparse, non-decreasing ticks being aligned.

    Returns
    -------
    Alignment
        ``indices`` has ``len(reference)`` entries with
        ``source[indices[i]] <= reference[i]`` unless ``reference[i]``
        precedes ``source[0]``, in which case ``indices[i] == 0``.

    Raises
    ------
    ValueError
        If ``source`` is empty while ``reference`` is not.

    Examples
    --------
    >>> align_indices([0, 10, 15, 30, 45], [10, 20, 30]).indices
    array([0, 0, 0, 2, 2])
    """
    reference = np.asarray(reference)
    source = np.asarray(source)
    if reference.size == 0:
        return Alignment(np.zeros(0, dtype=np.intp), 0, 0)
    if source.size == 0:
        raise ValueError("Cannot align onto an empty source time base")

    indices = np.searchsorted(source, reference, side="right") - 1
    n_before = int(np.count_nonzero(indices < 0))
    n_after = int(np.count_nonzero(reference > source[-1]))
    np.clip(indices, 0, None, out=indices)
    return Alignment(indices.astype(np.intp), n_before, n_after)


def rebase_channels(target: TimeBaseGroup, source: TimeBaseGroup,
                    names: Mapping[str, str]) -> tuple:
    """Gather source channels onto the target group's cadence.

    Parameters
    ----------
    target : TimeBaseGroup
        Dense group (e.g. per-beam GDU1).
    source : TimeBaseGroup
        Sparse group (e.g. housekeeping timetag).
    names : mapping of str to str
        Source channel name -> name in the target group.

    Returns
    -------
    (TimeBaseGroup, Alignment)
        Target group with the rebased channels, and the alignment used.
    """
    alignment = align_indices(target.timestamps, source.timestamps)
    out = target
    for src_name, dst_name in names.items():
        require(src_name in source, f"Align contract violated: '{src_name}' not in group '{source.name}'")
        values = source[src_name][alignment.indices]
        out = out.with_channel(dst_name, values, attrs=dict(source.dataset[src_name].attrs))

    if alignment.n_extrapolated:
        logger.warning(
            "Extrapolated %d %s sample(s) from %s (%d before first, %d after last)",
            alignment.n_extrapolated, target.name, source.name, alignment.n_before, alignment.n_after,
        )
    return out, alignment

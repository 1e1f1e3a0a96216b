"""Repair the flip flag of alternating-mode data.

Firmware sets the flip marker on two consecutive records at every
look-direction transition. The record *after* the second marker of each
pair is the first one in the new state, so that record, and only that
record, is flagged in the corrected sequence.
"""

import logging
from typing import NamedTuple

import numpy as np

__all__ = ['FlagReconstruction', 'reconstruct_flags']

logger = logging.getLogger(__name__)


class FlagReconstruction(NamedTuple):
    flags: np.ndarray
    n_pairs: int
    n_dropped: int
    n_clamped: int


def reconstruct_flags(flags, alternating: bool) -> FlagReconstruction:
    """Mark the first post-transition record of each marker pair.

    Parameters
    ----------
    flags : array_like
        Raw 0/1 marker sequence. Never modified.
    alternating : bool
        Only alternating-mode data carries transition pairs; otherwise the
        sequence is returned unchanged.

    Returns
    -------
    FlagReconstruction
        ``flags`` is a new array of the same length and dtype holding only
        the corrections (raw markers are not carried over). ``n_dropped``
        is 1 when the marker count is odd (the last marker has no partner),
        ``n_clamped`` counts corrections that would fall past the end.

    Examples
    --------
    >>> raw = np.zeros(12, dtype=np.uint8); raw[[2, 3, 7, 8]] = 1
    >>> np.flatnonzero(reconstruct_flags(raw, True).flags)
    array([4, 9])
    """
    raw = np.asarray(flags)
    if not alternating:
        return FlagReconstruction(raw.copy(), 0, 0, 0)

    corrected = np.zeros_like(raw)
    markers = np.flatnonzero(raw)
    closers = markers[1::2]
    n_dropped = len(markers) % 2
    targets = closers + 1
    in_range = targets < len(raw)
    n_clamped = int(np.count_nonzero(~in_range))
    corrected[targets[in_range]] = 1

    if n_dropped:
        logger.info("Unpaired flip marker at index %d dropped", markers[-1])
    if n_clamped:
        logger.info("%d flip correction(s) past the last record dropped", n_clamped)
    return FlagReconstruction(corrected, len(closers), n_dropped, n_clamped)

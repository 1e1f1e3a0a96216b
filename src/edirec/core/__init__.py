"""Core data model: time-base groups, batch status, reconstructed record."""

from edirec.core.timebase import TimeBaseGroup, epoch_dim
from edirec.core.status import BatchStatus, ExtrapolationCount
from edirec.core.record import ReconstructedRecord

__all__ = [
    'TimeBaseGroup',
    'epoch_dim',
    'BatchStatus',
    'ExtrapolationCount',
    'ReconstructedRecord',
]

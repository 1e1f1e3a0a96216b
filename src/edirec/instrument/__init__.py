"""Instrument-specific modules.

- filenames: File name parsing and batch validation
- versions: Version capability policy
- decoder: Energy, correlator and dwell decoding
- layout: Raw variable layout per time-base group
- reader: Dataset reader collaborator
"""

from edirec.instrument.filenames import (
    DescriptorBatch,
    FileDescriptor,
    FileDescriptorResolver,
    parse_filename,
)
from edirec.instrument.versions import VersionPolicy
from edirec.instrument.decoder import decode_correlator, decode_dwell, decode_energy
from edirec.instrument.reader import DatasetReader, ReadResult, ReadStatus, XarrayDatasetReader

__all__ = [
    "DescriptorBatch",
    "FileDescriptor",
    "FileDescriptorResolver",
    "parse_filename",
    "VersionPolicy",
    "decode_correlator",
    "decode_dwell",
    "decode_energy",
    "DatasetReader",
    "ReadResult",
    "ReadStatus",
    "XarrayDatasetReader",
]

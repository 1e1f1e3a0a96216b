"""Pipeline modules.

- alignment: Nearest-preceding time alignment
- flags: Flip-flag pair reconstruction
- merger: Multi-file merge
- assembler: Record shaping
- reconstructor: Stage driver
"""

from edirec.pipeline.alignment import Alignment, align_indices, rebase_channels
from edirec.pipeline.flags import FlagReconstruction, reconstruct_flags
from edirec.pipeline.merger import merge_groups
from edirec.pipeline.assembler import RecordAssembler
from edirec.pipeline.reconstructor import RecordReconstructor

__all__ = [
    "Alignment",
    "align_indices",
    "rebase_channels",
    "FlagReconstruction",
    "reconstruct_flags",
    "merge_groups",
    "RecordAssembler",
    "RecordReconstructor",
]

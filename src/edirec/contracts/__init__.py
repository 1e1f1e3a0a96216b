"""Pipeline contracts: fail-fast enforcement of stage invariants.

Contracts fail immediately and loudly when pipeline stages don't produce
their promised invariants.

Key principle:
- Pydantic validates config correctness
- ReconstructionError subclasses report unusable input batches
- Contracts validate pipeline correctness
"""

from edirec.contracts.failure import ContractViolation
from edirec.contracts.base import require
from edirec.contracts.timebase import assert_coindexed, assert_monotonic
from edirec.contracts.record import assert_record

__all__ = [
    "ContractViolation",
    "require",
    "assert_coindexed",
    "assert_monotonic",
    "assert_record",
]

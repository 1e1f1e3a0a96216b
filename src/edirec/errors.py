"""Error taxonomy for record reconstruction.

These are data errors: the input batch cannot be reconstructed. Pipeline
bugs raise ``ContractViolation`` from :mod:`edirec.contracts` instead.

Every error aborts its batch. Callers decide whether to skip the batch
or stop; ``NoRecords`` in particular is the normal outcome of a day
without data.
"""

__all__ = [
    "ReconstructionError",
    "InvalidFileName",
    "InconsistentBatch",
    "UnknownVariant",
    "NoRecords",
    "VersionConflict",
    "ReadFailure",
]


class ReconstructionError(Exception):
    """Base class for all fatal batch errors."""


class InvalidFileName(ReconstructionError):
    """File identifier does not follow the instrument naming convention."""


class InconsistentBatch(ReconstructionError):
    """Files disagree on spacecraft, instrument, level, descriptor or mode."""


class UnknownVariant(ReconstructionError):
    """Optional-descriptor sub-variant is not recognised."""


class NoRecords(ReconstructionError):
    """Every contributing file yielded zero samples for every time base."""


class VersionConflict(ReconstructionError):
    """Files imply incompatible field layouts for the same feature."""


class ReadFailure(ReconstructionError):
    """The dataset reader failed on a required variable.

    Parameters
    ----------
    path : str
        File the read was attempted on.
    variable : str
        Variable name.
    message : str
        Reader's description of the failure.
    """

    def __init__(self, path: str, variable: str, message: str):
        self.path = path
        self.variable = variable
        super().__init__(f"{path}: failed to read '{variable}': {message}")

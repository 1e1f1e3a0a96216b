"""Failure type for contract violations.

Contracts fail fast, loud, and once. All violations raise the same
exception type, allowing the caller to handle pipeline bugs uniformly.
"""


class ContractViolation(RuntimeError):
    """Raised when a pipeline contract is violated.

    This indicates a bug in pipeline logic, not a bad input batch. It means
    a stage did not produce the invariants it promised.

    Key distinction:
    - ValueError: config or argument error (handled by Pydantic / callers)
    - ReconstructionError: the input batch cannot be reconstructed
    - ContractViolation: pipeline bug (programmer error)
    """
    pass

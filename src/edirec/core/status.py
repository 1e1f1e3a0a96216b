"""Batch-level diagnostics carried alongside a reconstructed record.

Nothing in here is ever raised: extrapolation, dropped flag markers and
version defaulting are reported so the caller can judge data quality.
"""

from pydantic import BaseModel, ConfigDict, Field

__all__ = ['BatchStatus', 'ExtrapolationCount']


class ExtrapolationCount(BaseModel):
    """Reference samples outside the source time base for one rebase step."""
    model_config = ConfigDict(extra='forbid', frozen=True)

    file: str
    group: str
    source: str
    n_before: int = Field(ge=0)
    n_after: int = Field(ge=0)


class BatchStatus(BaseModel):
    """Diagnostics record for one reconstruction batch."""
    model_config = ConfigDict(extra='forbid', validate_assignment=True)

    files: list[str] = Field(default_factory=list)
    record_mode: str = ""
    merge_performed: bool = False
    extrapolation: list[ExtrapolationCount] = Field(default_factory=list)
    version_notes: list[str] = Field(default_factory=list)
    defaulted_channels: list[str] = Field(default_factory=list)
    flag_pairs: int = 0
    dropped_markers: int = 0
    clamped_markers: int = 0

    def add_extrapolation(self, file: str, group: str, source: str, n_before: int, n_after: int) -> None:
        self.extrapolation.append(
            ExtrapolationCount(file=file, group=group, source=source,
                               n_before=int(n_before), n_after=int(n_after))
        )

    @property
    def total_extrapolated(self) -> int:
        return sum(e.n_before + e.n_after for e in self.extrapolation)

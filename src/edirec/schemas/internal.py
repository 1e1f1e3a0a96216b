"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and contains NO optional fields that processing code depends on.
"""

from typing import Literal
from pydantic import ConfigDict, Field
from edirec.schemas.base import EdirecBaseModel


class InternalResolverConfig(EdirecBaseModel):
    """Runtime resolver configuration."""
    sub_variant_delimiter: str = Field(min_length=1)
    known_sub_variants: tuple[str, ...]
    alternating_prefix: str
    survey_modes: tuple[str, str]
    burst_modes: tuple[str, ...]
    merged_mode: str


class InternalVersionsConfig(EdirecBaseModel):
    """Runtime version thresholds."""
    energy_units_version: tuple[int, int, int]
    flip_flag_version: tuple[int, int, int]
    perp_fields_version: tuple[int, int, int]


class InternalDecoderConfig(EdirecBaseModel):
    """Runtime decoding tables."""
    energy_table: tuple[float, float, float, float]
    chip_counts: tuple[int, int, int]
    clock_hz: float
    dwell_divisor: float


class InternalReaderConfig(EdirecBaseModel):
    """Runtime reader configuration."""
    max_workers: int = Field(ge=1)


class InternalLoggingConfig(EdirecBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class InternalConfig(EdirecBaseModel):
    """Authoritative runtime configuration.

    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.delimiter = config.resolver.sub_variant_delimiter  # NOT .get()

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation in runtime code

    All of that happens during config resolution.
    """

    resolver: InternalResolverConfig
    versions: InternalVersionsConfig
    decoder: InternalDecoderConfig
    reader: InternalReaderConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )

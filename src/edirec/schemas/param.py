"""ParamConfig: Expert defaults for the reconstruction pipeline.

This module defines the complete default configuration. ALL pipeline
parameters must have defaults here. No runtime code should define
fallback values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal
from pydantic import Field, field_validator
from edirec.schemas.base import EdirecBaseModel, coerce_version, lowercase_names


# =============================================================================
# Nested Configuration Models
# =============================================================================

class ResolverConfig(EdirecBaseModel):
    """File descriptor resolution rules."""
    sub_variant_delimiter: str = "-"
    known_sub_variants: list[str] = Field(
        default_factory=lambda: [
            "",
            "pm2",
            "alt-cc", "alt-oc", "alt-oob", "alt-oom",
            "perp-c", "perp-ob", "perp-om",
        ],
        description="Optional-descriptor suffixes accepted after the base descriptor",
    )
    alternating_prefix: str = Field("alt", description="Sub-variant prefix of alternating-mode data")
    survey_modes: tuple[str, str] = ("fast", "slow")
    burst_modes: list[str] = Field(default_factory=lambda: ["brst"])
    merged_mode: str = Field("srvy", description="Mode label of a merged fast+slow record")

    @field_validator("survey_modes", "burst_modes", "merged_mode", mode="before")
    @classmethod
    def lowercase_modes(cls, v):
        """Mode names are lowercase in file names."""
        return lowercase_names(v)


class VersionsConfig(EdirecBaseModel):
    """Version thresholds that switch field layout and units."""
    energy_units_version: tuple[int, int, int] = Field(
        (1, 0, 0), description="First version storing energy in eV (older files store codes)"
    )
    flip_flag_version: tuple[int, int, int] = Field(
        (0, 3, 0), description="First version carrying the flip flag"
    )
    perp_fields_version: tuple[int, int, int] = Field(
        (1, 1, 0), description="First version carrying perpendicular-mode fields"
    )

    @field_validator("energy_units_version", "flip_flag_version", "perp_fields_version", mode="before")
    @classmethod
    def coerce_versions(cls, v):
        """Allow "X.Y.Z" strings for version thresholds."""
        return coerce_version(v)


class DecoderConfig(EdirecBaseModel):
    """Bitfield decoding tables."""
    energy_table: tuple[float, float, float, float] = Field(
        (0.0, 1000.0, 500.0, 250.0), description="Energy in eV for codes 0-3"
    )
    chip_counts: tuple[int, int, int] = Field(
        (255, 511, 1023), description="Chips per code for chip-count codes 0-2"
    )
    clock_hz: float = Field(2.0 ** 23, gt=0, description="Correlator base clock")
    dwell_divisor: float = Field(512.0, gt=0, description="Dwell counter ticks per second")


class ReaderConfig(EdirecBaseModel):
    """Dataset reading configuration."""
    max_workers: int = Field(1, ge=1, description="Threads for the per-file read phase")


class LoggingConfig(EdirecBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        """Normalize level names to uppercase."""
        if isinstance(v, str):
            return v.upper().strip()
        return v


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(EdirecBaseModel):
    """Expert configuration with complete defaults.

    Usage
    -----
        param = ParamConfig()
        internal = resolve_config(param, user_cfg)
    """
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    versions: VersionsConfig = Field(default_factory=VersionsConfig)
    decoder: DecoderConfig = Field(default_factory=DecoderConfig)
    reader: ReaderConfig = Field(default_factory=ReaderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

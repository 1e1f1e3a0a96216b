"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs with aliases for common naming patterns
(e.g., LOG_LEVEL → log_level, MAX_WORKERS → max_workers).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults. Validation is lenient: uppercase or
lowercase keys, "v1.0.0" or (1, 0, 0) for versions, and unknown legacy
keys are ignored.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from edirec.schemas.base import EdirecBaseModel, coerce_version, lowercase_names


class UserResolverConfig(EdirecBaseModel):
    """User-facing resolver config."""
    sub_variant_delimiter: Optional[str] = None
    known_sub_variants: Optional[list[str]] = None
    alternating_prefix: Optional[str] = None
    survey_modes: Optional[tuple[str, str]] = None
    burst_modes: Optional[list[str]] = None
    merged_mode: Optional[str] = None

    @field_validator("survey_modes", "burst_modes", "merged_mode", mode="before")
    @classmethod
    def lowercase_modes(cls, v):
        return lowercase_names(v)


class UserVersionsConfig(EdirecBaseModel):
    """User-facing version thresholds."""
    energy_units_version: Optional[tuple[int, int, int]] = None
    flip_flag_version: Optional[tuple[int, int, int]] = None
    perp_fields_version: Optional[tuple[int, int, int]] = None

    @field_validator("energy_units_version", "flip_flag_version", "perp_fields_version", mode="before")
    @classmethod
    def coerce_versions(cls, v):
        """Allow "X.Y.Z" strings."""
        if v is not None:
            return coerce_version(v)
        return v


class UserDecoderConfig(EdirecBaseModel):
    """User-facing decoder config."""
    energy_table: Optional[tuple[float, float, float, float]] = None
    chip_counts: Optional[tuple[int, int, int]] = None
    clock_hz: Optional[float] = None
    dwell_divisor: Optional[float] = None


class UserConfig(EdirecBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify what
    they want to override from ParamConfig defaults.

    Usage
    -----
        user_cfg = UserConfig(
            LOG_LEVEL="debug",
            ENERGY_UNITS_VERSION="v1.2.0",
            MAX_WORKERS=4,
        )

        internal = resolve_config(param_cfg, user_cfg)
    """

    # Flat aliases
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(None, alias="LOG_LEVEL")
    max_workers: Optional[int] = Field(None, alias="MAX_WORKERS", ge=1)
    energy_units_version: Optional[tuple[int, int, int]] = Field(None, alias="ENERGY_UNITS_VERSION")
    flip_flag_version: Optional[tuple[int, int, int]] = Field(None, alias="FLIP_FLAG_VERSION")
    perp_fields_version: Optional[tuple[int, int, int]] = Field(None, alias="PERP_FIELDS_VERSION")
    known_sub_variants: Optional[list[str]] = Field(None, alias="KNOWN_SUB_VARIANTS")

    # Nested overrides (advanced users)
    resolver: Optional[UserResolverConfig] = None
    versions: Optional[UserVersionsConfig] = None
    decoder: Optional[UserDecoderConfig] = None

    model_config = EdirecBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Normalize level names to uppercase."""
        if isinstance(v, str):
            return v.upper().strip()
        return v

    @field_validator("energy_units_version", "flip_flag_version", "perp_fields_version", mode="before")
    @classmethod
    def coerce_versions(cls, v):
        """Allow "X.Y.Z" strings."""
        if v is not None:
            return coerce_version(v)
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        # Resolver section
        resolver = {}
        if self.known_sub_variants is not None:
            resolver["known_sub_variants"] = self.known_sub_variants
        if self.resolver is not None:
            resolver.update(self.resolver.model_dump(exclude_none=True))
        if resolver:
            overrides["resolver"] = resolver

        # Versions section
        versions = {}
        if self.energy_units_version is not None:
            versions["energy_units_version"] = self.energy_units_version
        if self.flip_flag_version is not None:
            versions["flip_flag_version"] = self.flip_flag_version
        if self.perp_fields_version is not None:
            versions["perp_fields_version"] = self.perp_fields_version
        if self.versions is not None:
            versions.update(self.versions.model_dump(exclude_none=True))
        if versions:
            overrides["versions"] = versions

        # Decoder section
        if self.decoder is not None:
            decoder = self.decoder.model_dump(exclude_none=True)
            if decoder:
                overrides["decoder"] = decoder

        if self.max_workers is not None:
            overrides["reader"] = {"max_workers": self.max_workers}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides

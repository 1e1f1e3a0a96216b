"""Base Pydantic model with strict defaults for edirec configs.

All config schemas inherit from this base to ensure consistent validation
behavior across parameter, user, and internal configs.
"""

import re

from pydantic import BaseModel, ConfigDict

_VERSION_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$")


class EdirecBaseModel(BaseModel):
    """Base model for all edirec configuration schemas.

    Enforces strict validation:
    - No extra fields allowed
    - Validates assignments after initialization
    - Uses Python mode (not JSON mode)
    """

    model_config = ConfigDict(
        extra='forbid',           # Reject unknown fields
        validate_assignment=True, # Validate on field mutation
        use_enum_values=True,     # Convert enums to values
        str_strip_whitespace=True,# Strip whitespace from strings
    )


def coerce_version(v):
    """Accept "1.2.3", "v1.2.3" or a 3-sequence of ints as a version triple."""
    if isinstance(v, str):
        match = _VERSION_RE.match(v.strip())
        if match is None:
            raise ValueError(f"Invalid version string: {v!r} (expected X.Y.Z)")
        return tuple(int(part) for part in match.groups())
    return v


def lowercase_names(v):
    """Lowercase a mode name or a sequence of them; mode names are lowercase in file names."""
    if isinstance(v, str):
        return v.lower()
    if isinstance(v, (list, tuple)):
        return type(v)(m.lower() if isinstance(m, str) else m for m in v)
    return v

"""Formal pipeline invariants.

This file documents what each stage MUST produce. Use it as a reviewer
anchor and system reference.
"""

PIPELINE_INVARIANTS = {
    "resolve": [
        "All descriptors agree on spacecraft, instrument, level and optdesc",
        "Modes are identical, or exactly the two survey cadences (merge required)",
        "Sub-variant is one of the configured known sub-variants",
    ],

    "read": [
        "One TimeBaseGroup per group name per file",
        "Every channel's leading length equals its group's tick count",
        "Optional channels absent by version are zero-filled, never omitted",
    ],

    "align": [
        "Rebased channels have the target group's length",
        "source[idx[i]] <= reference[i] except clamped leading extrapolation",
        "Extrapolation counts are reported, never raised",
    ],

    "flags": [
        "Corrected flag sequence has the raw sequence's length",
        "Raw flag sequence is never written",
        "Corrections beyond the last sample are dropped",
    ],

    "merge": [
        "One stable permutation per time base, applied to every channel of it",
        "Ticks are non-decreasing within every group",
        "At least one sample across all groups (else NoRecords)",
    ],

    "record": [
        "Groups gdu1, gdu2, timetag and angle are all present",
        "Survey counts are 1-D (N,); burst counts are (N, 4) with pad last",
        "Every channel's leading length equals its group's tick count",
        "Channel names are unique across groups, so the record exports to one Dataset",
    ],
}

# Which stages are optional vs required
STAGE_REQUIREMENTS = {
    "resolve": "REQUIRED",
    "read": "REQUIRED",
    "align": "REQUIRED",
    "flags": "OPTIONAL",  # Only alternating-mode batches
    "merge": "REQUIRED",
    "record": "REQUIRED",
}

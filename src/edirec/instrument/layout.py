"""Raw variable layout of an L1A ambient-mode file.

Which variables are read into which time-base group, and which
housekeeping channels are rebased onto the per-beam cadence.
"""

from typing import NamedTuple

__all__ = ['GroupLayout', 'GROUPS', 'GDUS', 'PAD_COUNT', 'raw_layout', 'counts_channels', 'rebased_channels']

GDUS = ("gdu1", "gdu2")
GROUPS = GDUS + ("timetag", "angle")
PAD_COUNT = 4


class GroupLayout(NamedTuple):
    required: tuple
    optional: tuple = ()


def counts_channels(gdu: str, burst: bool) -> tuple:
    """Raw counts variables of one detector: one in survey, four pads in burst."""
    pads = range(1, PAD_COUNT + 1) if burst else (1,)
    return tuple(f"counts{pad}_{gdu}" for pad in pads)


def raw_layout(burst: bool) -> dict:
    """Variables to read per group for a survey or burst file."""
    layout = {gdu: GroupLayout(counts_channels(gdu, burst)) for gdu in GDUS}
    layout["timetag"] = GroupLayout(
        required=("energy_gdu1", "energy_gdu2", "dwell", "pitch_mode", "m", "n", "max_addr"),
        optional=("flip_flag", "perp_onechan", "perp_bidir"),
    )
    layout["angle"] = GroupLayout(required=("optics", "phi", "theta"))
    return layout


def rebased_channels(gdu: str) -> dict:
    """Housekeeping channel -> per-beam channel name for one detector.

    Per-beam names never repeat a housekeeping name, so all groups can
    share one Dataset.
    """
    return {
        f"energy_{gdu}": f"energy_{gdu}_beam",
        "dwell": f"dwell_{gdu}",
        "pitch_mode": f"pitch_mode_{gdu}",
    }

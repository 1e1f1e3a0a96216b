"""Decode packed telemetry fields into physical values.

Pure, stateless functions. Callers decide *whether* a field needs decoding
(see VersionPolicy); these functions only decide *how*.
"""

import numpy as np

__all__ = ['decode_energy', 'decode_correlator', 'decode_dwell']

ENERGY_TABLE = (0.0, 1000.0, 500.0, 250.0)  # eV for codes 0-3
CHIP_COUNTS = (255, 511, 1023)  # chips per code for codes 0-2
CLOCK_HZ = 2.0 ** 23
DWELL_DIVISOR = 512.0  # dwell counter runs at 512 Hz


def _lookup(codes, table, what: str) -> np.ndarray:
    codes = np.asarray(codes)
    index = codes.astype(np.int64)
    if codes.size and (
        not np.array_equal(index, codes) or index.min() < 0 or index.max() >= len(table)
    ):
        bad = np.unique(codes[(index != codes) | (index < 0) | (index >= len(table))])
        raise ValueError(f"Invalid {what} code(s) {bad[:5].tolist()}: expected 0..{len(table) - 1}")
    return np.asarray(table)[index]


def decode_energy(codes, table=ENERGY_TABLE) -> np.ndarray:
    """Map 2-bit energy codes to energy in eV.

    Parameters
    ----------
    codes : array_like
        Energy codes 0-3.
    table : sequence of float, optional
        Energy per code. Default: 0, 1000, 500, 250 eV.

    Returns
    -------
    np.ndarray
        float32 energies, same shape as ``codes``.

    Raises
    ------
    ValueError
        If any value is not a valid code. Values that are already in eV
        (e.g. 500) fail here, so a second decode can never pass silently.
    """
    return _lookup(codes, np.asarray(table, dtype=np.float32), "energy")


def decode_correlator(m, n, chip_code, chip_counts=CHIP_COUNTS, clock_hz=CLOCK_HZ):
    """Chip width and code length from the correlator parameters.

    ``t_chip = m * n / clock_hz`` and ``t_code = chips * t_chip`` where
    ``chips`` is looked up from the chip-count code.

    Parameters
    ----------
    m, n : array_like
        Chip multiplier and divisor.
    chip_code : array_like
        Chip-count code 0-2.

    Returns
    -------
    t_chip, t_code : np.ndarray
        Seconds, float64.
    """
    chips = _lookup(chip_code, np.asarray(chip_counts, dtype=np.float64), "chip-count")
    t_chip = np.asarray(m, dtype=np.float64) * np.asarray(n, dtype=np.float64) / clock_hz
    return t_chip, chips * t_chip


def decode_dwell(raw, divisor=DWELL_DIVISOR) -> np.ndarray:
    """Dwell counter to seconds."""
    return np.asarray(raw, dtype=np.float64) / divisor

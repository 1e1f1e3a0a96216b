"""Dataset reader collaborator.

The reconstruction pipeline never touches the file container directly. It
asks a reader for one named variable at a time and gets back the values,
the name and ticks of the time base they are indexed by, and a status
that separates "variable absent" (handled by version defaulting) from
"read error" (fatal for the file).

XarrayDatasetReader implements the contract over ``xarray.Dataset``
handles: a variable's time base is its leading dimension, whose
coordinate holds int64 nanosecond ticks.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, NamedTuple, Optional, Protocol, Tuple, Union

import numpy as np
import xarray as xr

__all__ = ['ReadStatus', 'ReadResult', 'DatasetReader', 'XarrayDatasetReader', 'window_slice']

logger = logging.getLogger(__name__)

TimeWindow = Tuple[Optional[int], Optional[int]]


class ReadStatus(str, Enum):
    OK = "ok"
    ABSENT = "absent"
    ERROR = "error"


class ReadResult(NamedTuple):
    values: Optional[np.ndarray]
    timebase: Optional[str]
    timestamps: Optional[np.ndarray]
    status: ReadStatus
    message: str = ""


class DatasetReader(Protocol):
    """What the pipeline needs from a reader."""

    def open(self, path: Union[str, Path]) -> Any:
        ...

    def close(self, handle: Any) -> None:
        ...

    def read(self, handle: Any, name: str, time_window: Optional[TimeWindow] = None) -> ReadResult:
        ...


def window_slice(ticks: np.ndarray, time_window: Optional[TimeWindow]) -> slice:
    """Index slice of sorted ``ticks`` inside an inclusive [start, end] window.

    Either end may be None (unbounded).
    """
    if time_window is None:
        return slice(None)
    start, end = time_window
    lo = 0 if start is None else int(np.searchsorted(ticks, start, side="left"))
    hi = len(ticks) if end is None else int(np.searchsorted(ticks, end, side="right"))
    return slice(lo, max(lo, hi))


class XarrayDatasetReader:
    """Read instrument variables from xarray-openable files.

    Notes
    -----
    - ``open`` leaves values undecoded (no time decoding, no masking) so
      integer ticks and raw codes come through untouched.
    - ``read`` never raises for a bad variable; failures are reported as
      ``ReadStatus.ERROR`` with a message.
    """

    def open(self, path: Union[str, Path]) -> xr.Dataset:
        logger.debug("Opening %s", path)
        return xr.open_dataset(path, decode_times=False, mask_and_scale=False)

    def close(self, handle: xr.Dataset) -> None:
        handle.close()

    def read(self, handle: xr.Dataset, name: str, time_window: Optional[TimeWindow] = None) -> ReadResult:
        """Read one variable and its time base, optionally windowed.

        Parameters
        ----------
        handle : xr.Dataset
            Open dataset.
        name : str
            Variable name.
        time_window : (start, end), optional
            Inclusive tick bounds; either may be None.

        Returns
        -------
        ReadResult
        """
        if name not in handle.variables:
            return ReadResult(None, None, None, ReadStatus.ABSENT, f"'{name}' not in dataset")

        var = handle[name]
        if var.ndim == 0:
            return ReadResult(None, None, None, ReadStatus.ERROR, f"'{name}' is a scalar, expected a time series")
        dim = var.dims[0]
        if dim not in handle.coords:
            return ReadResult(None, dim, None, ReadStatus.ERROR, f"'{name}' time base '{dim}' has no tick values")

        try:
            ticks = np.asarray(handle[dim].values).astype(np.int64, casting="same_kind")
            window = window_slice(ticks, time_window)
            values = np.asarray(var.values)[window]
        except (TypeError, ValueError, OSError, RuntimeError) as e:
            logger.debug("Read of '%s' failed: %s", name, e)
            return ReadResult(None, dim, None, ReadStatus.ERROR, str(e))

        return ReadResult(values, dim, ticks[window], ReadStatus.OK)

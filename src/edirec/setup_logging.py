"""Logging setup for edirec runs.

Library modules only create ``logging.getLogger(__name__)`` loggers; the
process that drives a batch calls setup_logging() once with its resolved
configuration.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from edirec.schemas import InternalConfig

__all__ = ['setup_logging']

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(config: "InternalConfig", log_path: Optional[Union[str, Path]] = None) -> None:
    """Configure the root logger with a console and optional file handler.

    Parameters
    ----------
    config : InternalConfig
        Resolved configuration; the level comes from ``config.logging.level``.
    log_path : str or Path, optional
        Also log to this file (parent directories are created).

    Examples
    --------
    >>> config = resolve_config(ParamConfig(), UserConfig(LOG_LEVEL="debug"))
    >>> setup_logging(config, "logs/edirec.log")
    >>> record = RecordReconstructor(config).reconstruct(files)
    """
    log_level = getattr(logging, config.logging.level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    # Clear existing handlers and add new ones
    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    # Console handler
    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    # File handler
    if log_path is not None:
        log_path = Path(log_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_path)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    logger.info("Logging: level=%s, file=%s", logging.getLevelName(log_level), log_path)

"""
日志配置
"""

from __future__ import annotations

import logging
from typing import Optional

from floralgallery.config import LoggingConfig

# third-party loggers that are chatty at INFO
_QUIET_LOGGERS = ("web3", "urllib3", "aiohttp.access")


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """Set the root level and format; safe to call more than once."""
    config = config or LoggingConfig()
    level = getattr(logging, config.level.strip().upper(), logging.INFO)

    logging.basicConfig(level=level, format=config.format, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

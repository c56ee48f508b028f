import logging
import sys
from typing import Any, Dict, Optional, Union

from tqdm import tqdm

from domsift.core.managers.config_manager import config_manager


class LogWithTqdm(logging.Handler):
    """
    A logging handler that redirects output to `tqdm.write()`, so log messages
    do not tear through progress bars of long extraction runs.
    """
    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg, file=sys.stderr)
            self.flush()
        except Exception:
            self.handleError(record)


def _to_level(level: Union[str, int], fallback: int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), fallback)
    return level


def configure_logger(
        general_level: Union[str, int] = 'INFO',
        module_specific_levels: Optional[Dict[str, Any]] = None,
        silenced_loggers: Optional[Dict[str, Any]] = None
) -> logging.Handler:
    """
    Configures the root logger and specific module loggers with a
    TQDM-friendly handler. Returns the installed handler.
    """
    tqdm_aware_handler = LogWithTqdm()
    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"
    )
    tqdm_aware_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(_to_level(general_level, logging.INFO))

    root_logger.handlers.clear()
    root_logger.addHandler(tqdm_aware_handler)

    if module_specific_levels:
        for name, level in module_specific_levels.items():
            logging.getLogger(name).setLevel(_to_level(level, logging.INFO))

    # Muzzle noisy loggers by setting their level high.
    if silenced_loggers:
        for name, level in silenced_loggers.items():
            logging.getLogger(name).setLevel(_to_level(level, logging.CRITICAL))

    return tqdm_aware_handler


def configure_from_settings() -> logging.Handler:
    """Applies the 'logging' section of settings.json."""
    return configure_logger(
        general_level=config_manager.get_nested("logging.level", "WARNING"),
        module_specific_levels=config_manager.get_nested("logging.module_levels", {}),
        silenced_loggers=config_manager.get_nested("logging.silenced", {}),
    )

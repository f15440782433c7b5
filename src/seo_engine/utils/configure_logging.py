import logging
from typing import Dict, Optional, Union

from tqdm import tqdm

from seo_engine.utils.config_loader import LoggingSettings

Level = Union[str, int]


class LogWithTqdm(logging.StreamHandler):
    """
    Writes records through `tqdm.write()` so lines logged while `run_batch`
    shows its progress bar end up above the bar instead of inside it.
    """
    def emit(self, record):
        try:
            tqdm.write(self.format(record), file=self.stream)
        except Exception:
            self.handleError(record)


def _to_level(level: Level, fallback: int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), fallback)
    return level


def configure_logger(
        general_level: Level = 'INFO',
        module_specific_levels: Optional[Dict[str, Level]] = None,
        silenced_loggers: Optional[Dict[str, Level]] = None
) -> logging.Handler:
    """
    Configures the root logger with a tqdm-friendly handler and applies
    per-module levels. Meant for the host application; the engine itself
    never configures logging.
    """
    handler = LogWithTqdm()
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"
    ))

    root_logger = logging.getLogger()
    root_logger.setLevel(_to_level(general_level, logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name, level in (module_specific_levels or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.INFO))

    # Muzzle noisy loggers by setting their level high.
    for name, level in (silenced_loggers or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.CRITICAL))

    return handler


def configure_from_settings(settings: LoggingSettings) -> logging.Handler:
    return configure_logger(settings.level, settings.module_levels, settings.silenced)

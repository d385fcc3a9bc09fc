import logging
import logging.handlers
from typing import Optional, Union

from tqdm import tqdm

_LOGGER_NAME = "mandelbmp"
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)

def parse_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name not in LEVELS:
        raise ValueError(f"Unknown log level {level!r}; expected one of {', '.join(LEVELS)}")
    return getattr(logging, name)

class TqdmConsoleHandler(logging.StreamHandler):
    """Console handler that writes around an active tqdm bar instead of through it."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream)
            self.flush()
        except Exception:
            self.handleError(record)

def _console_formatter() -> logging.Formatter:
    return logging.Formatter(fmt="%(levelname)s %(message)s")

def _file_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s.%(msecs)03dZ %(levelname)s %(name)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

def configure_logging(
    *,
    level: Union[int, str] = logging.INFO,
    console: bool = True,
    log_file: Optional[str] = None,
    rotate_bytes: int = 1024 * 1024,
    rotate_count: int = 3,
) -> logging.Logger:
    """Reset the mandelbmp logger to a console handler and an optional rotating file."""
    level = parse_level(level)
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    if console:
        ch = TqdmConsoleHandler()
        ch.setFormatter(_console_formatter())
        logger.addHandler(ch)
    if log_file:
        fh = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=rotate_bytes, backupCount=rotate_count, encoding="utf-8"
        )
        fh.setFormatter(_file_formatter())
        logger.addHandler(fh)
    return logger

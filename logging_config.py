"""
Shared logging setup.

- console: LOG_CONSOLE_LEVEL and above (WARNING by default)
- logs/app.log: LOG_LEVEL and above
- logs/error.log: ERROR and above
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from config import LoggingConfig

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _level(name: str, default: int) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else default


def _mk_rotating_handler(
    path: Path,
    level: int,
    fmt: logging.Formatter,
    settings: LoggingConfig,
) -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=settings.max_mb * 1024 * 1024,
        backupCount=settings.backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(fmt)
    return handler


def setup_logging(settings: LoggingConfig | None = None) -> Path:
    """Reconfigure the root logger and return the log directory."""
    settings = settings or LoggingConfig()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)

    log_dir = Path(settings.log_dir)
    fmt = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setLevel(_level(settings.console_level, logging.WARNING))
    console.setFormatter(fmt)
    root.addHandler(console)

    root.addHandler(
        _mk_rotating_handler(log_dir / "app.log", _level(settings.level, logging.INFO), fmt, settings)
    )
    root.addHandler(_mk_rotating_handler(log_dir / "error.log", logging.ERROR, fmt, settings))

    # transitions logs every state change at INFO
    logging.getLogger("transitions").setLevel(logging.WARNING)

    return log_dir

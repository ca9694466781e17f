import logging
import os
from pathlib import Path
from logging.handlers import RotatingFileHandler
from tt.common.setup import PATHS, ensure_directory

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Console output is off by default: while the TUI is up it owns the terminal, and anything written to
# stderr would tear the display.
def get_logger(
        name = "termtracker",
        level = logging.INFO,
        log_dir: Path | None = None,
        max_bytes = 5 * 1024 * 1024,
        backup_count = 5,
        persistent = True,
        console = False,
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(level)

    log_dir = log_dir or PATHS.logs
    fmt = logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT)

    # Setup persistent handler
    persistent_handler_name = f"{name}:persistent"
    if persistent and not any(h.get_name() == persistent_handler_name for h in logger.handlers):
        ensure_directory(log_dir)
        persistent_handler = RotatingFileHandler(
            filename=log_dir / f"{name}.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
            delay=True,
        )
        persistent_handler.setLevel(level)
        persistent_handler.setFormatter(fmt)
        persistent_handler.set_name(persistent_handler_name)
        logger.addHandler(persistent_handler)

        # Setup latest-only handler (always overwritten each run)
        latest_handler_name = f"{name}:latest"
        if not any(h.get_name() == latest_handler_name for h in logger.handlers):
            latest_handler = logging.FileHandler(
                filename=log_dir / "latest.log",
                mode="w",             # overwrite on each run
                encoding="utf-8",
                delay=True
            )
            latest_handler.setLevel(level)
            latest_handler.setFormatter(fmt)
            latest_handler.set_name(latest_handler_name)
            logger.addHandler(latest_handler)

    # Setup console handler
    console_handler_name = f"{name}:console"
    if console and not any(h.get_name() == console_handler_name for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(fmt)
        console_handler.set_name(console_handler_name)
        logger.addHandler(console_handler)

    # Nothing attached means nothing should be written anywhere, not even the lastResort stderr handler.
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger

# Maps TT_LOG_LEVEL (name or number) onto a logging level, defaulting to DEBUG.
def _level_from_env(default=logging.DEBUG):
    raw = os.getenv("TT_LOG_LEVEL")
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default

# TT_NO_LOG_FILES=1 keeps the logger quiet on disk, which is what the test suite wants.
log = get_logger(level=_level_from_env(), persistent=os.getenv("TT_NO_LOG_FILES", "") not in ("1", "true", "yes"))

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from prowork.config import Settings


def setup_logging(settings: Settings) -> None:
    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [console_handler]

    log_dir = settings.log_path
    log_dir_error: OSError | None = None
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        log_dir_error = exc
    else:
        file_handler = RotatingFileHandler(
            log_dir / "prowork.log", maxBytes=2_000_000, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(
        level=settings.log_level.upper(),
        handlers=handlers,
        force=True,
    )

    if log_dir_error is not None:
        logging.getLogger(__name__).warning(
            "Cannot create log directory %s (%s); logging to console only", log_dir, log_dir_error
        )

import logging
from logging.handlers import RotatingFileHandler, SysLogHandler
from typing import Optional

APP_NAME = "gatracker"


def setup_logging(
    log_file: Optional[str] = "gatracker.log",
    level: int = logging.INFO,
    handler_level: int = logging.WARNING,
) -> logging.Logger:
    """Attach file and journal handlers to the ``gatracker`` logger.

    The library never calls this itself; host applications opt in.
    """
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(level)

    handlers = []
    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5)
        handlers.append(file_handler)

    try:
        from systemd.journal import JournalHandler

        journal_handler = JournalHandler(SYSLOG_IDENTIFIER=APP_NAME)
    except Exception:  # pragma: no cover - fallback when systemd is unavailable
        try:
            journal_handler = SysLogHandler(address="/dev/log")
        except OSError:
            journal_handler = None
    if journal_handler is not None:
        handlers.append(journal_handler)

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")
    for handler in handlers:
        handler.setLevel(handler_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger

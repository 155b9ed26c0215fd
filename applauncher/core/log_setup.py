import os
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional
import structlog
from structlog.stdlib import ProcessorFormatter, BoundLogger, add_logger_name
from structlog.processors import (
    JSONRenderer,
    TimeStamper,
    add_log_level,
    StackInfoRenderer,
    format_exc_info,
)
from rich.logging import RichHandler
from structlog.dev import ConsoleRenderer


XDG_STATE_HOME = os.environ.get("XDG_STATE_HOME") or os.path.expanduser(
    "~/.local/state"
)
APP_DIR = "applauncher"

LOG_FILE_PATH = os.path.join(XDG_STATE_HOME, APP_DIR, "applauncher.log")

LOGGER_NAME = None


class SpamFilter(logging.Filter):
    """
    Drops a record when it repeats the previous message verbatim.

    A scan over a few hundred descriptors can emit the same icon or parse
    warning many times in a row; only the first one is kept.
    """

    def __init__(self, name: str = ""):
        super().__init__(name)
        self._last_message: Optional[str] = None

    def filter(self, record):
        message = record.getMessage()
        if message == self._last_message:
            return False
        self._last_message = message
        return True


def setup_logging(
    level: int = logging.DEBUG, log_file: Optional[str] = LOG_FILE_PATH
) -> BoundLogger:
    """
    Routes the launcher's logging through structlog into two handlers on the
    root logger, so scan summaries, skipped descriptors, icon misses and
    launch outcomes from every component end up in the same places:
    a rich console on stderr and, unless `log_file` is None, JSON lines in
    `$XDG_STATE_HOME/applauncher/applauncher.log` rotated at 1 MB.
    Args:
        level: Initial level; `set_level` applies the configured one later.
        log_file: Destination of the JSON log, or None for console only.
    Returns:
        The bound logger handed to every component.
    """
    shared_processors = [
        add_log_level,
        TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        StackInfoRenderer(),
        format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors
        + [
            add_logger_name,
            ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    std_logger = logging.getLogger(LOGGER_NAME)
    std_logger.setLevel(level)
    std_logger.propagate = False
    for handler in std_logger.handlers[:]:
        std_logger.removeHandler(handler)
    if log_file:
        os.makedirs(os.path.dirname(log_file), exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=1024 * 1024,
            backupCount=2,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.addFilter(SpamFilter())
        json_formatter = ProcessorFormatter(
            foreign_pre_chain=shared_processors + [add_logger_name],
            processor=JSONRenderer(),
        )
        file_handler.setFormatter(json_formatter)
        std_logger.addHandler(file_handler)
    console_handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_path=False,
        show_time=False,
    )
    console_handler.setLevel(level)
    console_handler.addFilter(SpamFilter())
    console_formatter_final = ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processor=ConsoleRenderer(colors=False),
        fmt="%(message)s",
    )
    console_handler.setFormatter(console_formatter_final)
    std_logger.addHandler(console_handler)
    return structlog.get_logger(LOGGER_NAME)


def set_level(level_name: str) -> int:
    """Applies a level by name ("DEBUG", "INFO", ...) to the logger and its handlers."""
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        level = logging.INFO
    std_logger = logging.getLogger(LOGGER_NAME)
    std_logger.setLevel(level)
    for handler in std_logger.handlers:
        handler.setLevel(level)
    return level

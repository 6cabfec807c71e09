"""
Logging for every Grayban subsystem.

All loggers handed out by :func:`get_logger` are children of one ``grayban``
logger, which owns the two handlers:

* the console handler, printing INFO and above through prompt_toolkit so the
  operator prompt is redrawn instead of torn, coloured when stderr is a TTY;
* the session file handler, writing DEBUG and above to ``logs/`` with size
  based rotation.

Library loggers that flood the console (py-cord gateway chatter, aiohttp
access lines, aiosqlite statements) are held at ERROR.
"""

import logging
from logging.handlers import RotatingFileHandler
import sys
import time
from pathlib import Path
from datetime import datetime
from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import ANSI

ROOT_LOGGER_NAME = "grayban"

LOGS_DIR: Path = (Path(__file__).parents[3] / "logs").resolve()

LOG_FORMAT: str = "[%(asctime)s] [%(levelname)s] [%(name)s:%(funcName)s:%(lineno)d] %(message)s"
DATE_FORMAT: str = "%Y-%m-%d %H-%M-%S"

LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[38;5;88m",
}
RESET_COLOR = "\033[0m"

LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3

# A restart re-execs the process; a session file written this recently is
# treated as the same session and appended to.
SESSION_REUSE_SECONDS = 60

NOISY_LOGGERS = (
    "discord",
    "discord.client",
    "discord.gateway",
    "discord.http",
    "websockets",
    "aiohttp",
    "aiohttp.access",
    "aiosqlite",
)


class ColorFormatter(logging.Formatter):
    """Formatter that paints the whole line in the colour of its level."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return line
        return f"{color}{line}{RESET_COLOR}"


class PromptToolkitHandler(logging.Handler):
    """Handler that prints through prompt_toolkit so the console prompt survives."""

    def __init__(self, formatter: logging.Formatter | None = None):
        super().__init__()
        if formatter:
            self.setFormatter(formatter)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            print_formatted_text(ANSI(self.format(record)))
        except Exception:
            self.handleError(record)


def should_use_color() -> bool:
    """True when stderr is a terminal that can render ANSI colours."""
    try:
        return sys.stderr.isatty()
    except Exception:
        return False


def session_log_path(logs_dir: Path = LOGS_DIR) -> Path:
    """Pick the log file for this process.

    The newest ``grayban-*.log`` in ``logs_dir`` is reused when it was written
    within :data:`SESSION_REUSE_SECONDS`; otherwise a fresh timestamped name
    is returned.
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    candidates = sorted(logs_dir.glob("grayban-*.log"), key=lambda p: p.stat().st_mtime)
    if candidates and time.time() - candidates[-1].stat().st_mtime < SESSION_REUSE_SECONDS:
        return candidates[-1]
    return logs_dir / f"grayban-{datetime.now().strftime(DATE_FORMAT)}.log"


def build_handlers(log_path: Path) -> list[logging.Handler]:
    plain = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = PromptToolkitHandler(
        ColorFormatter(LOG_FORMAT, datefmt=DATE_FORMAT) if should_use_color() else plain
    )
    console.setLevel(logging.INFO)

    session_file = RotatingFileHandler(
        log_path,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    session_file.setLevel(logging.DEBUG)
    session_file.setFormatter(plain)

    return [console, session_file]


def configure_root_logger() -> logging.Logger:
    """Attach the handlers to the ``grayban`` logger once and return it."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if root.handlers:
        return root

    root.setLevel(logging.DEBUG)
    root.propagate = False
    for handler in build_handlers(session_log_path()):
        root.addHandler(handler)
    return root


def get_logger(logger_name: str) -> logging.Logger:
    """Return the ``grayban.<logger_name>`` logger, configuring output on first use."""
    configure_root_logger()
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{logger_name}")


def quiet_library_loggers() -> None:
    for name in NOISY_LOGGERS:
        library_logger = logging.getLogger(name)
        library_logger.setLevel(logging.ERROR)
        library_logger.propagate = False
        library_logger.handlers.clear()


def handle_exception(exception_type, exception_instance, exception_traceback) -> None:
    """``sys.excepthook`` replacement: log the crash, let Ctrl+C exit quietly."""
    if issubclass(exception_type, KeyboardInterrupt):
        sys.__excepthook__(exception_type, exception_instance, exception_traceback)
        return
    get_logger("uncaught").critical(
        "Uncaught exception", exc_info=(exception_type, exception_instance, exception_traceback)
    )


quiet_library_loggers()
sys.excepthook = handle_exception

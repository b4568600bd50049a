"""
Logging configuration with singleton pattern.

Provides a centralized logger accessible via class methods.
All standard logging.Logger methods are accessible directly.

Each line carries the thread number (T1, T2, ...) and, while a scope is
active, a scope tag: the asset kind during a crawl, or the endpoint while the
server handles a request. When log_color is True and stdout is a TTY, the
severity is colored in the terminal only; the log file is never colored.

Example usage:
    from utils.Logger import Logger

    Logger.initialize(log_level="INFO")

    with Logger.scope("matcap"):
        Logger.info("Crawling https://example.com/512/webp/")  # ... - [T1] [matcap] Crawling ...
    Logger.warning("Skipping folder red: HTTP 404")
    Logger.exception("Failed to save texture")  # Includes traceback
"""

import contextlib
import itertools
import logging
import sys
import threading
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

_LOGGER_NAME = "TextureGateway"
_DEFAULT_LOG_FILE = "texture_gateway.log"
_DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(thread_id)s%(scope)s%(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# ANSI codes: only the severity field is wrapped
_RESET = "\033[0m"
_LEVEL_COLORS: Dict[int, str] = {
    logging.DEBUG: "\033[90m",            # gray
    logging.INFO: "\033[37m",             # white
    logging.WARNING: "\033[38;5;208m",    # orange (256-color)
    logging.ERROR: "\033[31m",            # red
    logging.CRITICAL: "\033[95m",         # bright purple
}
_EXCEPTION_COLOR = "\033[95m"

# threading.get_ident() -> 1, 2, 3, ... in order of first log call
_thread_numbers: Dict[int, int] = {}
_thread_counter = itertools.count(1)
_thread_lock = threading.Lock()


def _thread_number() -> int:
    ident = threading.get_ident()
    with _thread_lock:
        if ident not in _thread_numbers:
            _thread_numbers[ident] = next(_thread_counter)
        return _thread_numbers[ident]


class _ColoredLevelFormatter(logging.Formatter):
    """Sets record.colored_levelname; records logged with a traceback use the exception color."""

    def format(self, record: logging.LogRecord) -> str:
        color = _EXCEPTION_COLOR if record.exc_info else _LEVEL_COLORS.get(record.levelno)
        record.colored_levelname = f"{color}{record.levelname}{_RESET}" if color else record.levelname
        return super().format(record)


class _ScopeFilter(logging.Filter):
    """Fill in thread_id and scope unless the caller passed them via extra=."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "thread_id", None) is None:
            record.thread_id = f"[T{_thread_number()}] "
        scope = getattr(record, "scope", None)
        if scope is None:
            scope = Logger.get_current_scope()
        record.scope = f"[{scope}] " if scope else ""
        return True


class LoggerMeta(type):
    """Metaclass to delegate all method calls to the underlying logger."""

    def __getattr__(cls, name: str):
        if not cls._initialized:
            raise RuntimeError("Logger has not been initialized. Call Logger.initialize() first.")
        return getattr(cls._logger, name)


class Logger(metaclass=LoggerMeta):
    """Logger class providing direct access to all logging.Logger methods."""

    _logger: Optional[logging.Logger] = None
    _initialized: bool = False
    _thread_local = threading.local()

    @classmethod
    def get_thread_id(cls) -> int:
        """Return the human-friendly thread number (1, 2, 3, ...) for the current thread."""
        return _thread_number()

    @classmethod
    def get_current_scope(cls) -> Optional[str]:
        return getattr(cls._thread_local, "scope", None)

    @classmethod
    def set_current_scope(cls, scope: Optional[str]) -> None:
        """Set the scope tag shown in log output for this thread. Use None to clear."""
        cls._thread_local.scope = scope

    @classmethod
    def clear_current_scope(cls) -> None:
        cls._thread_local.scope = None

    @classmethod
    @contextlib.contextmanager
    def scope(cls, name: Optional[str]) -> Iterator[None]:
        """Tag log lines from this thread with name; the previous scope is restored on exit."""
        previous = cls.get_current_scope()
        cls.set_current_scope(name)
        try:
            yield
        finally:
            cls.set_current_scope(previous)

    @classmethod
    def initialize(
        cls,
        log_level: str = "INFO",
        log_format: Optional[str] = None,
        log_file: Optional[Union[str, Path, bool]] = None,
        log_color: bool = False,
    ) -> None:
        """
        Initialize the logger with specified settings. Later calls are ignored.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
            log_format: Custom log format string. If None, uses the default
                "time - level - [Tn] [scope] message" format.
            log_file: Path for the append-mode log file. None (or True) uses
                texture_gateway.log in the working directory; False disables file logging.
            log_color: If True and stdout is a TTY, color the levelname in stream output.
        """
        if cls._initialized:
            return

        log_format = log_format or _DEFAULT_FORMAT
        level = getattr(logging, log_level.upper(), logging.INFO)

        logger = logging.getLogger(_LOGGER_NAME)
        logger.handlers.clear()
        logger.filters.clear()
        logger.setLevel(level)
        logger.propagate = False
        logger.addFilter(_ScopeFilter())

        logger.addHandler(cls._stream_handler(level, log_format, log_color and sys.stdout.isatty()))
        if log_file is not False:
            path = Path.cwd() / _DEFAULT_LOG_FILE if log_file in (None, True) else Path(log_file)
            logger.addHandler(cls._file_handler(level, log_format, path))

        cls._logger = logger
        cls._initialized = True

    @staticmethod
    def _stream_handler(level: int, log_format: str, colored: bool) -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        if colored:
            colored_format = log_format.replace("%(levelname)s", "%(colored_levelname)s")
            handler.setFormatter(_ColoredLevelFormatter(colored_format, datefmt=_DATE_FORMAT))
        else:
            handler.setFormatter(logging.Formatter(log_format, datefmt=_DATE_FORMAT))
        return handler

    @staticmethod
    def _file_handler(level: int, log_format: str, path: Path) -> logging.Handler:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(log_format, datefmt=_DATE_FORMAT))
        return handler

    @classmethod
    def get_logger(cls, name: Optional[str] = None) -> logging.Logger:
        """
        Get the underlying logger, or a named child of it (e.g. "proxy").

        Raises:
            RuntimeError: If the logger has not been initialized.
        """
        if not cls._initialized:
            raise RuntimeError("Logger has not been initialized. Call Logger.initialize() first.")
        if name is None:
            return cls._logger
        return logging.getLogger(f"{_LOGGER_NAME}.{name}")

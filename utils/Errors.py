"""
Shared error/warning reporting for the texture gateway.

Components report problems here:
- A "crash" is a fatal problem that stops the whole run (e.g. config missing).
- An "error" fails the current operation (one request, one crawl) but the
  process keeps serving.
- A "warning" is non-fatal; the current operation continues with partial results
  (e.g. a folder listing that could not be fetched is skipped).

GatewayError is raised by the client side when the gateway server, or the remote
store behind it, does not deliver a usable response.
"""

from __future__ import annotations

from typing import NoReturn, Optional

from utils.Logger import Logger


class GatewayError(Exception):
    """A request through the gateway failed (network failure or non-2xx status)."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


def record_crash(msg: str) -> NoReturn:
    """
    Record a crash: log at exception level and raise so the run stops.

    Args:
        msg: Crash message to log and raise.

    Raises:
        RuntimeError: Always, with the given message.
    """
    Logger.exception(msg)
    raise RuntimeError(msg)


def record_error(context: str, error_msg: str, *, with_traceback: bool = False) -> None:
    """
    Record an error for one operation: the operation fails, the process continues.

    Args:
        context: What was being done (e.g. "download-texture", a URL).
        error_msg: Error message to log.
        with_traceback: If True, log at exception level (call from an except block).
    """
    message = f"{context}: {error_msg}" if context else error_msg
    if with_traceback:
        Logger.exception(message)
    else:
        Logger.error(message)


def record_warning(context: str, warning_msg: str) -> None:
    """
    Record a warning: non-fatal, processing continues.

    Args:
        context: What was being done (e.g. a folder name).
        warning_msg: Warning message to log.
    """
    message = f"{context}: {warning_msg}" if context else warning_msg
    Logger.warning(message)

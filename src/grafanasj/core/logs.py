"""Logging helpers shared by the core and the framework adapters.

The library never installs handlers; applications configure ``logging``
as they see fit and records arrive on the ``grafanasj`` logger hierarchy.
"""

import logging

logger = logging.getLogger("grafanasj")


def get_log_level_for_status(status_code: int) -> int:
    """Determine log level based on HTTP status code.

    Maps status codes to log levels:
    - 200-399 → DEBUG
    - 400-499 → WARNING
    - 500-599 → ERROR
    - Other → DEBUG (default)

    Args:
        status_code: HTTP status code of the response.

    Returns:
        A ``logging`` level constant.
    """
    if 400 <= status_code < 500:
        return logging.WARNING
    if 500 <= status_code < 600:
        return logging.ERROR
    return logging.DEBUG


def log_request(
    method: str,
    path: str,
    status_code: int,
    duration: float,
    detail: str = "",
) -> None:
    """Log one handled request at a level derived from its status code.

    Args:
        method: HTTP method.
        path: Request path.
        status_code: Response status.
        duration: Handling time in seconds.
        detail: Error message for failed requests.
    """
    extra = {
        "method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": duration * 1000,
    }
    level = get_log_level_for_status(status_code)
    if detail:
        logger.log(
            level, "%s %s %d: %s", method, path, status_code, detail, extra=extra
        )
    else:
        logger.log(level, "%s %s %d", method, path, status_code, extra=extra)


def log_exception(message: str, **attributes: str | int | float | bool) -> None:
    """Log an ERROR record with the active exception's traceback.

    Args:
        message: The log message.
        **attributes: Additional structured fields, passed as ``extra``.
    """
    logger.error(message, exc_info=True, extra=attributes)

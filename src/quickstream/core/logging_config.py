"""
Logging configuration for quickstream.

Every log line carries the session id of the request that produced it,
so interleaved streams can be told apart in the console.
"""

import logging

from quickstream.core.context import get_session_id


class SessionIdFilter(logging.Filter):
    """Logging filter that injects the session id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add session_id attribute to the log record from context."""
        record.session_id = get_session_id()  # type: ignore[attr-defined]
        return True


# Per-request client logging from the upstream producer call drowns out
# the per-session lines.
NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure logging with session id injection for all handlers.

    ``level`` is a logging constant or a level name such as ``"DEBUG"``.
    Sets up a console handler on the root logger. Safe to call more than
    once: existing root handlers are replaced, not duplicated.
    """
    if isinstance(level, str):
        names = logging.getLevelNamesMapping()
        if level.upper() not in names:
            raise ValueError(f"Unknown log level: {level}")
        level = names[level.upper()]
    log_format = "[%(asctime)s] [%(levelname)s] [%(session_id)s] %(name)s: %(message)s"

    session_id_filter = SessionIdFilter()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates on repeated calls
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(log_format))
    console_handler.addFilter(session_id_filter)

    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

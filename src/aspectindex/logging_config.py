"""Singleton logging configuration.

setup_logging() configures the root logger once per process; the CLI
calls it before decoding starts. Library code never configures
handlers, it only logs through ``logging.getLogger(__name__)``.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# Loggers that stay at WARNING unless debug mode is on
_QUIET_LOGGERS = (
    "aspectindex.index.scanner",
    "asyncio",
)

_setup_done = False


def setup_logging(level: str = "INFO", *, debug: bool = False) -> None:
    """Configure root logger. Idempotent; a second call is a no-op."""
    global _setup_done  # noqa: PLW0603
    if _setup_done:
        return
    _setup_done = True

    effective = "DEBUG" if debug else level
    logging.basicConfig(
        level=getattr(logging, effective.upper()),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )

    if not debug:
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

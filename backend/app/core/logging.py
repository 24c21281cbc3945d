"""Logging setup shared by the workflow API and the stage clients."""

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_configured = False


def configure_logging(level: str | int = "INFO") -> None:
    """Attach a single stream handler to the ``fms`` logger hierarchy."""
    global _configured
    root = logging.getLogger("fms")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root.setLevel(level)
    if _configured:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under ``fms``."""
    if name.startswith("fms."):
        return logging.getLogger(name)
    return logging.getLogger(f"fms.{name}")

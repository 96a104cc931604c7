from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler: logging.Handler | None = None


def configure_logging(level: str = "INFO") -> None:
    """
    Attach a single stream handler to the ``app`` logger hierarchy.

    Safe to call more than once (tests build the app repeatedly).
    """
    global _handler

    root = logging.getLogger("app")
    root.setLevel(level.upper())
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if _handler not in root.handlers:
        root.addHandler(_handler)


def mask_token(token: str | None, keep: int = 6) -> str:
    if not token:
        return "<empty>"
    if len(token) <= keep * 2:
        return "***"
    return f"{token[:keep]}...{token[-keep:]}"

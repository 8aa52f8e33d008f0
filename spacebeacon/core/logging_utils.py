"""Logging setup (colored console) and structured key=value lines for status transitions."""

import logging
import sys
import uuid
from typing import Optional

logger = logging.getLogger(__name__)

# ANSI color codes
_RESET = "\033[0m"
_BOLD = "\033[1m"
_GRAY = "\033[90m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_CYAN = "\033[36m"

_LEVEL_COLORS = {
    logging.DEBUG: _GRAY,
    logging.INFO: _CYAN,
    logging.WARNING: _YELLOW,
    logging.ERROR: _RED + _BOLD,
    logging.CRITICAL: _RED + _BOLD,
}


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors per log level."""

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelno, _RESET)
        record.levelname = f"{color}[{record.levelname}]{_RESET}"
        return super().format(record)


def setup_logging(debug: bool = False) -> None:
    """Configure colorful logging on stdout; uvicorn loggers propagate to root."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ColoredFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logging.root.handlers.clear()
    logging.root.addHandler(handler)
    level = logging.DEBUG if debug else logging.INFO
    logging.root.setLevel(level)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True
        lg.setLevel(level)


def _ensure_trace_id(extra: dict) -> str:
    trace_id = extra.get("trace_id")
    if not trace_id:
        trace_id = str(uuid.uuid4())[:8]
        extra["trace_id"] = trace_id
    return trace_id


def log_status_transition(
    from_state: str,
    to_state: str,
    event: str,
    trace_id: Optional[str] = None,
    extra: Optional[dict] = None,
) -> None:
    """Log a space status transition: trace_id, from_state, to_state, event, plus extra fields."""
    extra = dict(extra or {})
    if trace_id:
        extra["trace_id"] = trace_id
    _ensure_trace_id(extra)
    extra["from_state"] = from_state
    extra["to_state"] = to_state
    extra["event"] = event
    msg = "status_transition " + " ".join(f"{k}={v}" for k, v in sorted(extra.items()))
    logger.info(msg)

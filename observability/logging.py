from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Any, Dict, Optional

LOGGER_NAME = "coinprice"

_logger = logging.getLogger(LOGGER_NAME)

_REDACTED_HEADERS = ("x-cg-demo-api-key", "x-cg-pro-api-key", "authorization")


def now_ms() -> int:
    return int(time.time() * 1000)


def configure_logging(level: str = "INFO") -> None:
    """
    Route `coinprice` events to stderr. Safe to call more than once.
    """
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    if not _logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        _logger.addHandler(handler)
        _logger.propagate = False
    _logger.setLevel(resolved)


def build_log_context(**fields: Any) -> Dict[str, Any]:
    """
    Build a base context that is merged into every event of one unit of work
    (a tool call, a connection, ...). A short request_id is generated unless given.
    """
    ctx = {k: v for k, v in fields.items() if v is not None}
    ctx.setdefault("request_id", uuid.uuid4().hex[:12])
    return ctx


def redact_headers(headers: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in headers.items():
        out[k] = "***REDACTED***" if str(k).lower() in _REDACTED_HEADERS and v else v
    return out


def log_event(
    event: str,
    *,
    ctx: Optional[Dict[str, Any]] = None,
    data: Optional[Dict[str, Any]] = None,
    level: int = logging.INFO,
) -> None:
    if not _logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"ts_ms": now_ms(), "event": event}
    payload.update(ctx or {})
    payload["data"] = data or {}
    _logger.log(level, json.dumps(payload, sort_keys=True, default=str))

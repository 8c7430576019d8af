from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

import requests


@dataclass
class AppError(Exception):
    code: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


class UpstreamError(AppError):
    """Failure talking to the market-data provider."""


def classify_exception(e: Exception) -> UpstreamError:
    """
    Map common requests / decoding issues into stable error codes.
    """
    if isinstance(e, UpstreamError):
        return e
    if isinstance(e, requests.Timeout):
        return UpstreamError("upstream_timeout", f"Upstream request timed out: {e}", {})
    if isinstance(e, requests.HTTPError):
        status = getattr(e.response, "status_code", None)
        return UpstreamError("upstream_http_error", f"Upstream returned HTTP {status}", {"status": status})
    if isinstance(e, requests.ConnectionError):
        return UpstreamError("upstream_network_error", f"Could not reach upstream: {e}", {})
    if isinstance(e, requests.JSONDecodeError) or (
        isinstance(e, ValueError) and not isinstance(e, requests.RequestException)
    ):
        return UpstreamError("upstream_bad_json", f"Upstream returned malformed JSON: {e}", {})
    if isinstance(e, requests.RequestException):
        return UpstreamError("upstream_request_error", str(e), {})

    return UpstreamError("unknown_error", str(e) or e.__class__.__name__, {})

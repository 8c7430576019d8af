from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import requests

from app.core.config import settings
from errors import UpstreamError, classify_exception
from observability import build_log_context, log_event, redact_headers


@dataclass(frozen=True)
class UpstreamResult:
    """
    Outcome of a single upstream call: either `data` (parsed JSON) or `error`.
    """

    data: Any = None
    error: Optional[UpstreamError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CoinGeckoClient:
    """
    Stateless HTTP GET connector for the CoinGecko v3 API.

    - fixed base URL and credential header
    - query params with a None value are dropped
    - exactly one request per fetch (no retries, no caching)
    - never raises: every failure comes back as UpstreamResult.error
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        api_key_header: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = (base_url or settings.COINGECKO_API_HOST).rstrip("/")
        self._api_key_header = api_key_header or settings.COINGECKO_API_KEY_HEADER
        self._timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SEC

    @classmethod
    def from_settings(cls) -> "CoinGeckoClient":
        return cls(api_key=settings.COINGECKO_API_KEY)

    def headers(self) -> Dict[str, str]:
        h = {"accept": "application/json"}
        # Missing credential: send nothing and let the provider decide.
        if self._api_key:
            h[self._api_key_header] = self._api_key
        return h

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def fetch(self, path: str, params: Optional[Mapping[str, Optional[str]]] = None) -> UpstreamResult:
        url = self.url_for(path)
        query = {k: v for k, v in (params or {}).items() if v is not None}
        headers = self.headers()
        ctx = build_log_context(url=url)

        log_event(
            "upstream_call",
            ctx=ctx,
            data={"method": "GET", "headers": redact_headers(headers), "params": query},
        )
        try:
            r = requests.get(url, params=query, headers=headers, timeout=self._timeout)
            r.raise_for_status()
            data = r.json()
        except Exception as e:
            err = classify_exception(e)
            log_event(
                "upstream_error",
                ctx=ctx,
                data={"code": err.code, "error": err.message, **err.data},
                level=logging.ERROR,
            )
            return UpstreamResult(error=err)

        log_event(
            "upstream_response",
            ctx=ctx,
            data={"status": r.status_code, "reason": r.reason, "bytes": len(r.content or b"")},
        )
        return UpstreamResult(data=data)

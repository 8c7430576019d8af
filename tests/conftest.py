import os
import sys
from unittest.mock import MagicMock

import pytest

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from coingecko_client import CoinGeckoClient, UpstreamResult
from errors import UpstreamError


@pytest.fixture
def ok_client():
    """Client whose every fetch succeeds with `client.body`."""
    client = MagicMock(spec=CoinGeckoClient)
    client.body = {"bitcoin": {"usd": 67000}}
    client.fetch.side_effect = lambda path, params=None: UpstreamResult(data=client.body)
    return client


@pytest.fixture
def failing_client():
    client = MagicMock(spec=CoinGeckoClient)
    client.fetch.return_value = UpstreamResult(
        error=UpstreamError("upstream_http_error", "Upstream returned HTTP 429", {"status": 429})
    )
    return client

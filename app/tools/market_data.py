from typing import Literal, Optional, Tuple
from urllib.parse import quote

from pydantic import BaseModel, Field

from app.tools.base import ToolSpec, UpstreamRequest

TREASURY_COINS = ("bitcoin", "ethereum")
OHLC_DAYS = ("1", "7", "14", "30", "90", "180", "365")

API_STATUS_OK = "API is running"


class NoParams(BaseModel):
    pass


class CoinPriceParams(BaseModel):
    ids: Optional[str] = Field(None, description="Comma-separated list of coin IDs")
    names: Optional[str] = Field(None, description="Comma-separated list of coin names")
    symbols: Optional[str] = Field(None, description="Comma-separated list of coin symbols")
    vs_currencies: str = Field("usd", description="Comma-separated list of target currencies")


class PublicCompaniesHoldingsParams(BaseModel):
    coin_id: Literal["bitcoin", "ethereum"] = Field(
        description="Coin ID - must be either 'bitcoin' or 'ethereum'"
    )


class CoinHistoricalChartParams(BaseModel):
    id: str = Field(description="Coin ID (e.g., 'bitcoin', 'ethereum')")
    vs_currency: str = Field("usd", description="Target currency of market data (e.g., 'usd', 'eur')")
    days: str = Field(description="Data up to number of days ago (e.g., '1', '7', '30', '365')")
    precision: Optional[str] = Field(None, description="Decimal place for currency price value")


class CoinOHLCChartParams(BaseModel):
    id: str = Field(description="Coin ID (e.g., 'bitcoin', 'ethereum')")
    vs_currency: str = Field("usd", description="Target currency of price data (e.g., 'usd', 'eur')")
    days: Literal["1", "7", "14", "30", "90", "180", "365"] = Field(
        description="Data up to number of days ago, only '1', '7', '14', '30', '90', '180', '365' are allowed"
    )
    precision: Optional[str] = Field(None, description="Decimal place for currency price value")


def _segment(value: str) -> str:
    return quote(value, safe="")


def _supported_currencies_request(p: NoParams) -> UpstreamRequest:
    return UpstreamRequest("/simple/supported_vs_currencies")


def _coin_price_request(p: CoinPriceParams) -> UpstreamRequest:
    return UpstreamRequest(
        "/simple/price",
        {
            "ids": p.ids,
            "names": p.names,
            "symbols": p.symbols,
            "vs_currencies": p.vs_currencies,
        },
    )


def _public_companies_request(p: PublicCompaniesHoldingsParams) -> UpstreamRequest:
    return UpstreamRequest(f"/companies/public_treasury/{_segment(p.coin_id)}")


def _historical_chart_request(p: CoinHistoricalChartParams) -> UpstreamRequest:
    return UpstreamRequest(
        f"/coins/{_segment(p.id)}/market_chart",
        {
            "vs_currency": p.vs_currency,
            "days": p.days,
            "interval": "daily",
            # empty precision is treated as unset
            "precision": p.precision or None,
        },
    )


def _ohlc_chart_request(p: CoinOHLCChartParams) -> UpstreamRequest:
    return UpstreamRequest(
        f"/coins/{_segment(p.id)}/ohlc",
        {
            "vs_currency": p.vs_currency,
            "days": p.days,
            "precision": p.precision or None,
        },
    )


def _ping_request(p: NoParams) -> UpstreamRequest:
    return UpstreamRequest("/ping")


MARKET_TOOLS: Tuple[ToolSpec, ...] = (
    ToolSpec(
        name="getSupportedCurrencies",
        description="Get supported currencies from CoinGecko",
        params_model=NoParams,
        build_request=_supported_currencies_request,
        error_message="Failed to fetch supported currencies",
    ),
    ToolSpec(
        name="getCoinPrice",
        description="Get coin prices",
        params_model=CoinPriceParams,
        build_request=_coin_price_request,
        error_message="Failed to fetch coin prices",
    ),
    ToolSpec(
        name="getPublicCompaniesHoldings",
        description="Get public companies Bitcoin or Ethereum holdings",
        params_model=PublicCompaniesHoldingsParams,
        build_request=_public_companies_request,
        error_message="Failed to fetch public companies holdings",
    ),
    ToolSpec(
        name="getCoinHistoricalChart",
        description="Get historical chart data for a coin including price, market cap and volume",
        params_model=CoinHistoricalChartParams,
        build_request=_historical_chart_request,
        error_message="Failed to fetch historical chart data",
    ),
    ToolSpec(
        name="getCoinOHLCChart",
        description=(
            "Get coin OHLC chart (Open, High, Low, Close) data.\n"
            "Data granularity (candle's body) is automatic:\n"
            "1 - 2 days: 30 minutes\n"
            "3 - 30 days: 4 hours\n"
            "31 days and beyond: 4 days"
        ),
        params_model=CoinOHLCChartParams,
        build_request=_ohlc_chart_request,
        error_message="Failed to fetch OHLC chart data",
    ),
    ToolSpec(
        name="checkApiStatus",
        description="Check API server status",
        params_model=NoParams,
        build_request=_ping_request,
        error_message="Failed to check API status",
        render=lambda _body: API_STATUS_OK,
    ),
)

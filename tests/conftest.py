"""
Pytest configuration and shared fixtures for the Market Pulse test suite.

Raw payload fixtures mirror the shapes returned by the public APIs so that the
normalizers, providers and jobs are exercised against the same data.
"""

import pytest
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

from market_pulse.data.http_client import FetchError
from market_pulse.data.reference_data import LAST_KNOWN_COT, LAST_KNOWN_ETF
from market_pulse.indicators import (
    COT,
    COT_CFTC,
    ETF,
    FEAR_GREED,
    FUNDING,
    HASHRATE,
    LIQUIDATIONS,
    LONG_SHORT,
    NORMALIZERS,
    PRICE,
    COTCategory,
    COTReport,
    ETFFlows,
    FearGreedIndicator,
    FundingIndicator,
    HashrateIndicator,
    LiquidationsIndicator,
    LongShortIndicator,
    PriceLevels,
)
from market_pulse.indicators.fear_greed import fear_greed_signal
from market_pulse.indicators.liquidations import LiquidationWindow
from market_pulse.llm.client import LLMError


# ==============================
# Pytest Configuration
# ==============================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests for individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests for component interactions"
    )


NOW_MS = 1_770_000_000_000
HOUR_MS = 60 * 60 * 1000


# ==============================
# Raw Payload Fixtures
# ==============================

@pytest.fixture
def now_ms() -> int:
    """Fixed reference time for windowed normalizers."""
    return NOW_MS


@pytest.fixture
def fear_greed_payload() -> Dict[str, Any]:
    """alternative.me payload, most recent first, current value 12."""
    values = [12, 14, 18, 20, 22, 25, 30] + [40] * 22 + [55]
    return {
        "name": "Fear and Greed Index",
        "data": [
            {"value": str(value), "value_classification": "Extreme Fear" if i == 0 else "Fear", "timestamp": str(1770000000 - i * 86400)}
            for i, value in enumerate(values)
        ],
    }


@pytest.fixture
def hashrate_payload() -> Dict[str, Any]:
    """mempool.space payload with a steadily rising hashrate."""
    return {
        "hashrates": [
            {"timestamp": 1767400000 + i * 86400, "avgHashrate": (800 + i * 5) * 1e18}
            for i in range(30)
        ],
        "difficulty": [],
        "currentHashrate": 960e18,
        "currentDifficulty": 1.1e14,
    }


@pytest.fixture
def long_short_payload() -> Dict[str, Any]:
    """Binance positioning with crowded shorts and aggressive buyers."""
    return {
        "topTraders": [
            {"symbol": "BTCUSDT", "longAccount": "0.4444", "shortAccount": "0.5556", "longShortRatio": "0.8000", "timestamp": NOW_MS - 4 * HOUR_MS},
            {"symbol": "BTCUSDT", "longAccount": "0.4200", "shortAccount": "0.5800", "longShortRatio": "0.7241", "timestamp": NOW_MS},
        ],
        "accounts": [
            {"symbol": "BTCUSDT", "longAccount": "0.4800", "shortAccount": "0.5200", "longShortRatio": "0.9231", "timestamp": NOW_MS},
        ],
        "taker": [
            {"buySellRatio": "1.0800", "buyVol": "540", "sellVol": "500", "timestamp": NOW_MS},
        ],
    }


@pytest.fixture
def open_interest_payload() -> Dict[str, Any]:
    """Binance open interest up 6.7% over 24 hours."""
    return {
        "openInterest": {"openInterest": "80000.500", "symbol": "BTCUSDT", "time": NOW_MS},
        "ticker": {"symbol": "BTCUSDT", "price": "65000.00"},
        "history": [
            {"symbol": "BTCUSDT", "sumOpenInterest": "76000.0", "timestamp": NOW_MS - HOUR_MS},
            {"symbol": "BTCUSDT", "sumOpenInterest": "75000.0", "timestamp": NOW_MS - 24 * HOUR_MS},
        ],
    }


@pytest.fixture
def funding_payload() -> Dict[str, Any]:
    """Binance funding rates, latest BTC rate 0.02%."""
    return {
        "btc": [
            {"symbol": "BTCUSDT", "fundingRate": "0.00010000", "fundingTime": NOW_MS - 16 * HOUR_MS},
            {"symbol": "BTCUSDT", "fundingRate": "0.00030000", "fundingTime": NOW_MS - 8 * HOUR_MS},
            {"symbol": "BTCUSDT", "fundingRate": "0.00020000", "fundingTime": NOW_MS},
        ],
        "eth": [{"symbol": "ETHUSDT", "fundingRate": "0.00005000", "fundingTime": NOW_MS}],
    }


@pytest.fixture
def liquidation_orders() -> List[Dict[str, Any]]:
    """Balanced force orders: 2M USD of longs and 1.5M USD of shorts in 24h."""
    return [
        {"side": "SELL", "price": "50000", "origQty": "20", "time": NOW_MS - 30 * 60 * 1000},
        {"side": "BUY", "price": "50000", "origQty": "30", "time": NOW_MS - 2 * HOUR_MS},
        {"side": "SELL", "price": "50000", "origQty": "20", "time": NOW_MS - 5 * HOUR_MS},
        {"side": "BUY", "price": "50000", "origQty": "100", "time": NOW_MS - 25 * HOUR_MS},
    ]


@pytest.fixture
def klines() -> List[List[Any]]:
    """Fourteen daily Binance candles."""
    rows = []
    for day in range(14):
        base = 60000 + day * 500
        rows.append([
            NOW_MS - (14 - day) * 24 * HOUR_MS,
            str(base),
            str(base + 1500),
            str(base - 1000),
            str(base + 400),
            "1000.0",
            NOW_MS - (13 - day) * 24 * HOUR_MS - 1,
        ])
    return rows


@pytest.fixture
def cot_payload() -> Dict[str, Any]:
    """Reference COT payload (hedge funds 68.9% short)."""
    return dict(LAST_KNOWN_COT)


@pytest.fixture
def etf_payload() -> Dict[str, Any]:
    """Reference ETF payload (daily +145M, weekly -580M)."""
    return dict(LAST_KNOWN_ETF)


@pytest.fixture
def cftc_row() -> Dict[str, Any]:
    """One row of the CFTC Traders in Financial Futures dataset."""
    return {
        "report_date_as_yyyy_mm_dd": "2026-02-03T00:00:00.000",
        "cftc_contract_market_code": "133741",
        "dealer_positions_long_all": "6302",
        "dealer_positions_short_all": "2224",
        "pct_of_oi_dealer_long_all": "27.3",
        "pct_of_oi_dealer_short_all": "9.7",
        "asset_mgr_positions_long": "7193",
        "asset_mgr_positions_short": "891",
        "pct_of_oi_asset_mgr_long": "31.2",
        "pct_of_oi_asset_mgr_short": "3.9",
        "lev_money_positions_long": "4450",
        "lev_money_positions_short": "15875",
        "pct_of_oi_lev_money_long": "19.3",
        "pct_of_oi_lev_money_short": "68.9",
        "nonrept_positions_long_all": "1151",
        "nonrept_positions_short_all": "1191",
        "pct_of_oi_nonrept_long_all": "5.0",
        "pct_of_oi_nonrept_short_all": "5.2",
    }


# ==============================
# Collaborator Doubles
# ==============================

class StubLLMClient:
    """
    Deterministic stand-in for the language-model client.

    Returns queued responses in order; an exception in the queue is raised.
    """

    def __init__(self, *responses: Any):
        self.responses = list(responses)
        self.prompts: List[str] = []
        self.calls: List[Dict[str, Any]] = []

    async def generate(self, prompt: str, system_prompt: Optional[str] = None, **kwargs: Any) -> str:
        self.prompts.append(prompt)
        self.calls.append(kwargs)
        if not self.responses:
            raise LLMError("no stub response queued")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def stub_llm():
    """Factory for stub language-model clients."""
    return StubLLMClient


class RoutingHttpClient:
    """
    Fake HTTP client answering by URL path suffix.

    Unrouted URLs raise ``FetchError`` like an unreachable host.
    """

    def __init__(self, routes: Dict[str, Any]):
        self.routes = routes
        self.requests: List[str] = []
        self.fetch_json = AsyncMock(side_effect=self._respond)
        self.fetch_text = AsyncMock(side_effect=self._respond)
        self.fetch = AsyncMock(side_effect=self._respond)

    async def _respond(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        self.requests.append(url)
        symbol = (params or {}).get("symbol")
        for suffix, response in self.routes.items():
            route, _, route_symbol = suffix.partition("?symbol=")
            if url.endswith(route) and (not route_symbol or route_symbol == symbol):
                if isinstance(response, Exception):
                    raise response
                return response
        raise FetchError(url, "connection refused")


@pytest.fixture
def routing_client():
    """Factory for URL-routed fake HTTP clients."""
    return RoutingHttpClient


@pytest.fixture
def market_routes(
    fear_greed_payload,
    hashrate_payload,
    long_short_payload,
    open_interest_payload,
    funding_payload,
    liquidation_orders,
    klines,
) -> Dict[str, Any]:
    """Routes answering every market endpoint."""
    return {
        "/fng/": fear_greed_payload,
        "/mining/hashrate/1m": hashrate_payload,
        "/futures/data/topLongShortPositionRatio": long_short_payload["topTraders"],
        "/futures/data/globalLongShortAccountRatio": long_short_payload["accounts"],
        "/futures/data/takerlongshortRatio": long_short_payload["taker"],
        "/fapi/v1/openInterest": open_interest_payload["openInterest"],
        "/api/v3/ticker/price": open_interest_payload["ticker"],
        "/futures/data/openInterestHist": open_interest_payload["history"],
        "/fapi/v1/fundingRate?symbol=BTCUSDT": funding_payload["btc"],
        "/fapi/v1/fundingRate?symbol=ETHUSDT": funding_payload["eth"],
        "/fapi/v1/forceOrders": liquidation_orders,
        "/api/v3/klines": klines,
    }


# ==============================
# Indicator Record Builders
# ==============================

def _build_indicators(
    fear_greed: Optional[int] = None,
    hedge_funds_short: Optional[float] = None,
    institutions: Optional[str] = None,
    etf_daily: Optional[float] = None,
    etf_weekly: Optional[float] = None,
    long_short: Optional[str] = None,
    taker: Optional[float] = None,
    funding: Optional[str] = None,
    liquidations: Optional[str] = None,
    hashrate: Optional[str] = None,
    price: Optional[PriceLevels] = None,
) -> Dict[str, Any]:
    """Indicator map with only the requested records present."""
    indicators: Dict[str, Any] = {name: None for name in NORMALIZERS}
    del indicators[COT_CFTC]

    if fear_greed is not None:
        indicators[FEAR_GREED] = FearGreedIndicator(
            current=fear_greed, label="", change24h=0, change7d=0, change30d=0,
            trend="stable", history=[fear_greed], signal=fear_greed_signal(fear_greed),
        )

    if hedge_funds_short is not None or institutions is not None:
        inst_long, inst_short = {"bullish": (300, 100), "bearish": (100, 300)}.get(institutions, (100, 100))
        short_pct = hedge_funds_short if hedge_funds_short is not None else 50.0
        indicators[COT] = COTReport(
            as_of="2026-02-03",
            next_update="",
            source="test",
            categories={
                "dealers": COTCategory("Dealers", 100, 25.0, 100, 25.0),
                "assetManagers": COTCategory("Institutions", inst_long, 30.0, inst_short, 10.0),
                "leveragedFunds": COTCategory("Hedge Funds", 100, 100 - short_pct, 100, short_pct),
                "retail": COTCategory("Retail", 100, 5.0, 100, 5.0),
            },
        )

    if etf_daily is not None or etf_weekly is not None:
        indicators[ETF] = ETFFlows(date="2026-02-10", daily=etf_daily or 0.0, weekly=etf_weekly)

    if long_short is not None or taker is not None:
        indicators[LONG_SHORT] = LongShortIndicator(
            top_long=50.0, top_short=50.0, top_ratio=1.0, accounts_long=None, accounts_short=None,
            taker_buy_sell_ratio=taker, trend="stable", signal=long_short or "neutral",
        )

    if funding is not None:
        indicators[FUNDING] = FundingIndicator(
            current=0.0, avg24h=0.0, eth=None, sentiment="neutral", signal=funding,
        )

    if liquidations is not None:
        indicators[LIQUIDATIONS] = LiquidationsIndicator(
            h24=LiquidationWindow(0.0, 0.0), h1=LiquidationWindow(0.0, 0.0),
            dominant="shorts", intensity="low", signal=liquidations,
        )

    if hashrate is not None:
        indicators[HASHRATE] = HashrateIndicator(
            current=900.0, change24h=0.0, change7d=0.0, change_from_peak=0.0,
            trend="stable", signal=hashrate, interpretation="",
        )

    if price is not None:
        indicators[PRICE] = price

    return indicators


@pytest.fixture
def build_indicators():
    """Factory for indicator maps built from record-level inputs."""
    return _build_indicators


@pytest.fixture
def price_levels() -> PriceLevels:
    """Price levels with three supports and three resistances."""
    return PriceLevels(
        current=66900.0,
        week_high=68000.0,
        week_low=62500.0,
        swing_high=68000.0,
        swing_low=59000.0,
        supports=[63600.0, 60300.0, 58100.0],
        resistances=[69100.0, 71300.0, 74600.0],
    )


# ==============================
# News Fixtures
# ==============================

RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Crypto Wire</title>
    <item>
      <title>Bitcoin ETF inflows hit two-week high</title>
      <link>https://news.example.com/etf-inflows</link>
      <pubDate>Tue, 10 Feb 2026 14:00:00 GMT</pubDate>
      <description><![CDATA[<p>Spot bitcoin ETFs recorded <b>$145M</b> of net inflows.</p>]]></description>
    </item>
    <item>
      <title>Miners move coins to exchanges</title>
      <link>https://news.example.com/miners</link>
      <pubDate>Tue, 10 Feb 2026 09:30:00 GMT</pubDate>
      <description>On-chain data shows miner outflows rising.</description>
    </item>
    <item>
      <title></title>
      <link>https://news.example.com/untitled</link>
      <description>Entry without a title.</description>
    </item>
  </channel>
</rss>
"""


@pytest.fixture
def rss_feed() -> str:
    """RSS document with two titled items and one untitled item."""
    return RSS_FEED

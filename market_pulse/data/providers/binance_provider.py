"""
Providers for Binance spot and USD-M futures public endpoints.

Positioning, open interest, funding, liquidations and daily candles for the
configured symbol. Endpoints that only enrich a record are fetched through
``_optional`` so their failure does not discard the record.
"""
import asyncio
from typing import Any, Dict, Optional

from market_pulse.config.settings import settings
from market_pulse.data.http_client import HttpClient
from market_pulse.data.providers.base_provider import BaseIndicatorProvider
from market_pulse.indicators import FUNDING, LIQUIDATIONS, LONG_SHORT, OPEN_INTEREST, PRICE


class BinanceProvider(BaseIndicatorProvider):
    """Shared URL and symbol handling for the Binance providers."""

    def __init__(self, client: HttpClient, symbol: Optional[str] = None):
        super().__init__(client)
        self.symbol = symbol or settings.data.SYMBOL
        self.spot_url = settings.data.BINANCE_SPOT_URL
        self.futures_url = settings.data.BINANCE_FUTURES_URL

    def _futures(self, path: str, **params: Any):
        return self.client.fetch_json(f"{self.futures_url}{path}", params={"symbol": self.symbol, **params})

    def _spot(self, path: str, **params: Any):
        return self.client.fetch_json(f"{self.spot_url}{path}", params={"symbol": self.symbol, **params})


class LongShortProvider(BinanceProvider):
    """Top-trader positions, global accounts and taker volume over four hours."""

    name = LONG_SHORT

    async def fetch_raw(self) -> Dict[str, Any]:
        top, accounts, taker = await asyncio.gather(
            self._futures("/futures/data/topLongShortPositionRatio", period="5m", limit=48),
            self._optional(self._futures("/futures/data/globalLongShortAccountRatio", period="5m", limit=48)),
            self._optional(self._futures("/futures/data/takerlongshortRatio", period="5m", limit=48)),
        )
        return {"topTraders": top, "accounts": accounts, "taker": taker}


class OpenInterestProvider(BinanceProvider):
    """Current open interest valued at the spot price, with 24 hourly points."""

    name = OPEN_INTEREST

    async def fetch_raw(self) -> Dict[str, Any]:
        open_interest, ticker, history = await asyncio.gather(
            self._futures("/fapi/v1/openInterest"),
            self._spot("/api/v3/ticker/price"),
            self._optional(self._futures("/futures/data/openInterestHist", period="1h", limit=24)),
        )
        return {"openInterest": open_interest, "ticker": ticker, "history": history}


class FundingProvider(BinanceProvider):
    """Last 24 funding rates for the symbol and the latest ETH rate."""

    name = FUNDING

    async def fetch_raw(self) -> Dict[str, Any]:
        btc, eth = await asyncio.gather(
            self._futures("/fapi/v1/fundingRate", limit=24),
            self._optional(
                self.client.fetch_json(
                    f"{self.futures_url}/fapi/v1/fundingRate",
                    params={"symbol": "ETHUSDT", "limit": 1},
                )
            ),
        )
        return {"btc": btc, "eth": eth}


class LiquidationsProvider(BinanceProvider):
    """Recent forced liquidation orders."""

    name = LIQUIDATIONS

    async def fetch_raw(self) -> Any:
        return await self._futures("/fapi/v1/forceOrders", limit=1000)


class PriceProvider(BinanceProvider):
    """Fourteen daily spot candles."""

    name = PRICE

    async def fetch_raw(self) -> Any:
        return await self._spot("/api/v3/klines", interval="1d", limit=14)

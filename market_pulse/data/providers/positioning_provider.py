"""
Providers for institutional positioning: CFTC Commitments of Traders and spot
ETF flows.
"""
from typing import Any, Optional

from market_pulse.config.settings import settings
from market_pulse.data.http_client import FetchError, HttpClient
from market_pulse.data.providers.base_provider import BaseIndicatorProvider
from market_pulse.data.reference_data import ReferenceDataProvider
from market_pulse.indicators import COT, COT_CFTC, ETF, normalize
from market_pulse.utils.logging import get_logger

logger = get_logger(__name__)


class COTProvider(BaseIndicatorProvider):
    """
    Latest Traders in Financial Futures row for CME Bitcoin futures.

    The live report is tried first when enabled; any failure falls back to the
    reference data provider.
    """

    name = COT

    def __init__(self, client: HttpClient, reference: ReferenceDataProvider, live: Optional[bool] = None):
        super().__init__(client)
        self.reference = reference
        self.live = settings.data.COT_LIVE_ENABLED if live is None else live

    async def fetch_raw(self) -> Any:
        rows = await self.client.fetch_json(
            settings.data.CFTC_TFF_URL,
            params={
                "cftc_contract_market_code": settings.data.CFTC_MARKET_CODE,
                "$order": "report_date_as_yyyy_mm_dd DESC",
                "$limit": 1,
            },
        )
        if not isinstance(rows, list) or not rows:
            raise FetchError(settings.data.CFTC_TFF_URL, "no COT report rows")
        return rows[0]

    def fallback(self) -> Optional[Any]:
        return normalize(COT, self.reference.get_cot())

    async def collect(self) -> Optional[Any]:
        if not self.live:
            return self.fallback()
        try:
            row = await self.fetch_raw()
        except FetchError as e:
            logger.warning(f"Live COT unavailable, using reference data: {e}")
            return self.fallback()
        report = normalize(COT_CFTC, row)
        return report if report is not None else self.fallback()


class ETFProvider(BaseIndicatorProvider):
    """Spot ETF net flows from the reference data provider."""

    name = ETF

    def __init__(self, client: HttpClient, reference: ReferenceDataProvider):
        super().__init__(client)
        self.reference = reference

    async def fetch_raw(self) -> Any:
        return self.reference.get_etf_flows()

"""
Providers for the public sentiment and network sources: alternative.me Fear &
Greed index and mempool.space hashrate.
"""
from typing import Any, Optional

from market_pulse.config.settings import settings
from market_pulse.data.providers.base_provider import BaseIndicatorProvider
from market_pulse.indicators import FEAR_GREED, HASHRATE, fallback_hashrate


class FearGreedProvider(BaseIndicatorProvider):
    """Thirty days of the Fear & Greed index, most recent first."""

    name = FEAR_GREED

    async def fetch_raw(self) -> Any:
        return await self.client.fetch_json(settings.data.FEAR_GREED_URL, params={"limit": 30})


class HashrateProvider(BaseIndicatorProvider):
    """
    One month of daily hashrate averages.

    Falls back to a literal record so the dashboard always shows a value.
    """

    name = HASHRATE

    async def fetch_raw(self) -> Any:
        return await self.client.fetch_json(settings.data.MEMPOOL_HASHRATE_URL)

    def fallback(self) -> Optional[Any]:
        return fallback_hashrate()

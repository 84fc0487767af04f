"""
Indicator providers, one per market data source.
"""
from typing import List

from market_pulse.data.http_client import HttpClient
from market_pulse.data.reference_data import ReferenceDataProvider

from .base_provider import BaseIndicatorProvider
from .binance_provider import (
    FundingProvider,
    LiquidationsProvider,
    LongShortProvider,
    OpenInterestProvider,
    PriceProvider,
)
from .positioning_provider import COTProvider, ETFProvider
from .sentiment_provider import FearGreedProvider, HashrateProvider


def default_providers(client: HttpClient, reference: ReferenceDataProvider) -> List[BaseIndicatorProvider]:
    """Every provider of the market job, in document order."""
    return [
        FearGreedProvider(client),
        LongShortProvider(client),
        OpenInterestProvider(client),
        FundingProvider(client),
        LiquidationsProvider(client),
        HashrateProvider(client),
        COTProvider(client, reference),
        ETFProvider(client, reference),
        PriceProvider(client),
    ]


__all__ = [
    "BaseIndicatorProvider",
    "COTProvider",
    "ETFProvider",
    "FearGreedProvider",
    "FundingProvider",
    "HashrateProvider",
    "LiquidationsProvider",
    "LongShortProvider",
    "OpenInterestProvider",
    "PriceProvider",
    "default_providers",
]

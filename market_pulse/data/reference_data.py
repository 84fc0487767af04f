"""
Reference data for the slow-moving sources.

COT positioning is published weekly and ETF flows daily; when they cannot be
fetched live the pipeline reads them from a reference data provider. The
provider is injected so the scoring code never holds literal figures.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union

from market_pulse.data.persistence import read_json
from market_pulse.utils.logging import get_logger

logger = get_logger(__name__)

# Last published CFTC TFF report for CME Bitcoin futures (contracts).
LAST_KNOWN_COT = {
    "asOf": "2026-02-03",
    "nextUpdate": "2026-02-14",
    "source": "reference",
    "categories": {
        "dealers": {"name": "Dealers", "long": 6302, "longPct": 27.3, "short": 2224, "shortPct": 9.7},
        "assetManagers": {"name": "Institutions", "long": 7193, "longPct": 31.2, "short": 891, "shortPct": 3.9},
        "leveragedFunds": {"name": "Hedge Funds", "long": 4450, "longPct": 19.3, "short": 15875, "shortPct": 68.9},
        "retail": {"name": "Retail", "long": 1151, "longPct": 5.0, "short": 1191, "shortPct": 5.2},
    },
}

# Last known spot ETF net flows (USD millions).
LAST_KNOWN_ETF = {
    "date": "2026-02-10",
    "daily": 145,
    "weekly": -580,
    "total": 40200,
    "source": "reference",
}


class ReferenceDataProvider(ABC):
    """
    Abstract source of raw COT and ETF payloads.

    Payloads use the shapes accepted by ``normalize_cot`` and ``normalize_etf``.
    """

    @abstractmethod
    def get_cot(self) -> Optional[Dict[str, Any]]:
        """Returns the raw COT payload, or None when unavailable."""
        pass

    @abstractmethod
    def get_etf_flows(self) -> Optional[Dict[str, Any]]:
        """Returns the raw ETF flow payload, or None when unavailable."""
        pass


class StaticReferenceData(ReferenceDataProvider):
    """Serves fixed payloads, the last known figures by default."""

    def __init__(self, cot: Optional[Dict[str, Any]] = None, etf: Optional[Dict[str, Any]] = None):
        self.cot = cot if cot is not None else LAST_KNOWN_COT
        self.etf = etf if etf is not None else LAST_KNOWN_ETF

    def get_cot(self) -> Optional[Dict[str, Any]]:
        return self.cot

    def get_etf_flows(self) -> Optional[Dict[str, Any]]:
        return self.etf


class CachedReferenceData(ReferenceDataProvider):
    """
    Reads ETF flows from the scraper cache file.

    The cache holds ``{"fetchDate", "data": {"date", "daily", "weekly",
    "dailyHistory", "trend", "source"}}``. Anything missing or malformed is
    delegated to the fallback provider, as is COT.
    """

    def __init__(self, cache_path: Union[str, Path], fallback: Optional[ReferenceDataProvider] = None):
        self.cache_path = Path(cache_path)
        self.fallback = fallback or StaticReferenceData()

    def get_cot(self) -> Optional[Dict[str, Any]]:
        return self.fallback.get_cot()

    def get_etf_flows(self) -> Optional[Dict[str, Any]]:
        cache = read_json(self.cache_path)
        data = cache.get("data") if isinstance(cache, dict) else None
        if not isinstance(data, dict) or "date" not in data or "daily" not in data:
            logger.info(f"No usable ETF cache at {self.cache_path}, using fallback reference data")
            return self.fallback.get_etf_flows()
        logger.debug(f"ETF flows from cache fetched {cache.get('fetchDate')}")
        return data

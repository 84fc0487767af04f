"""
Indicator normalizers.

Each source module exposes a record dataclass and a pure normalize function.
``normalize`` dispatches by source name and converts malformed payloads into
``None`` so that a broken source never contributes to the aggregate.
"""
from typing import Any, Callable, Dict, Optional

from market_pulse.utils.logging import get_logger

from .cot import COTCategory, COTReport, normalize_cftc_row, normalize_cot
from .etf import ETFFlows, normalize_etf
from .fear_greed import FearGreedIndicator, normalize_fear_greed
from .funding import FundingIndicator, normalize_funding
from .hashrate import HashrateIndicator, classify_hashrate_trend, fallback_hashrate, normalize_hashrate
from .liquidations import LiquidationsIndicator, normalize_liquidations
from .long_short import LongShortIndicator, normalize_long_short
from .open_interest import OpenInterestIndicator, normalize_open_interest
from .price_levels import PriceLevels, normalize_price_levels

logger = get_logger(__name__)

FEAR_GREED = "fearGreed"
HASHRATE = "hashrate"
LONG_SHORT = "longShort"
OPEN_INTEREST = "openInterest"
FUNDING = "funding"
LIQUIDATIONS = "liquidations"
COT = "cot"
COT_CFTC = "cotCftc"
ETF = "etf"
PRICE = "price"

NORMALIZERS: Dict[str, Callable[..., Any]] = {
    FEAR_GREED: normalize_fear_greed,
    HASHRATE: normalize_hashrate,
    LONG_SHORT: normalize_long_short,
    OPEN_INTEREST: normalize_open_interest,
    FUNDING: normalize_funding,
    LIQUIDATIONS: normalize_liquidations,
    COT: normalize_cot,
    COT_CFTC: normalize_cftc_row,
    ETF: normalize_etf,
    PRICE: normalize_price_levels,
}


def normalize(source_name: str, raw_payload: Any, **kwargs: Any) -> Optional[Any]:
    """
    Normalize a raw payload for the given source.

    Args:
        source_name: One of the source keys defined in this module.
        raw_payload: Decoded API payload, or None when the fetch failed.
        **kwargs: Extra arguments for the source normalizer (e.g. ``now_ms``).

    Returns:
        The indicator record, or None when the payload is absent or malformed.
    """
    if source_name not in NORMALIZERS:
        raise ValueError(f"Unknown indicator source: {source_name}")
    if raw_payload is None:
        return None
    try:
        return NORMALIZERS[source_name](raw_payload, **kwargs)
    except (ValueError, KeyError, TypeError, IndexError, AttributeError) as e:
        logger.warning(f"Malformed {source_name} payload: {e}")
        return None


__all__ = [
    "COTCategory",
    "COTReport",
    "ETFFlows",
    "FearGreedIndicator",
    "FundingIndicator",
    "HashrateIndicator",
    "LiquidationsIndicator",
    "LongShortIndicator",
    "OpenInterestIndicator",
    "PriceLevels",
    "classify_hashrate_trend",
    "fallback_hashrate",
    "normalize",
    "NORMALIZERS",
    "FEAR_GREED",
    "HASHRATE",
    "LONG_SHORT",
    "OPEN_INTEREST",
    "FUNDING",
    "LIQUIDATIONS",
    "COT",
    "COT_CFTC",
    "ETF",
    "PRICE",
]

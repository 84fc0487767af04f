"""
Commitments of Traders normalizer (CFTC Traders in Financial Futures).

Both the live CFTC row and the reference-data payload are normalized into the
same four categories.
"""
from dataclasses import dataclass, field
from typing import Any, Dict

DOMINANCE_RATIO = 1.5

CATEGORY_NAMES = {
    "dealers": "Dealers",
    "assetManagers": "Institutions",
    "leveragedFunds": "Hedge Funds",
    "retail": "Retail",
}

# CFTC TFF column prefixes per category: (long, short, pct long, pct short)
CFTC_COLUMNS = {
    "dealers": (
        "dealer_positions_long_all",
        "dealer_positions_short_all",
        "pct_of_oi_dealer_long_all",
        "pct_of_oi_dealer_short_all",
    ),
    "assetManagers": (
        "asset_mgr_positions_long",
        "asset_mgr_positions_short",
        "pct_of_oi_asset_mgr_long",
        "pct_of_oi_asset_mgr_short",
    ),
    "leveragedFunds": (
        "lev_money_positions_long",
        "lev_money_positions_short",
        "pct_of_oi_lev_money_long",
        "pct_of_oi_lev_money_short",
    ),
    "retail": (
        "nonrept_positions_long_all",
        "nonrept_positions_short_all",
        "pct_of_oi_nonrept_long_all",
        "pct_of_oi_nonrept_short_all",
    ),
}


@dataclass
class COTCategory:
    name: str
    long: int
    long_pct: float
    short: int
    short_pct: float

    @property
    def net(self) -> int:
        return self.long - self.short

    @property
    def signal(self) -> str:
        return cot_signal(self.long, self.short)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "long": self.long,
            "longPct": self.long_pct,
            "short": self.short,
            "shortPct": self.short_pct,
            "net": self.net,
            "signal": self.signal,
        }


@dataclass
class COTReport:
    as_of: str
    next_update: str
    source: str
    categories: Dict[str, COTCategory] = field(default_factory=dict)

    @property
    def hedge_funds(self) -> COTCategory:
        return self.categories["leveragedFunds"]

    @property
    def institutions(self) -> COTCategory:
        return self.categories["assetManagers"]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "asOf": self.as_of,
            "nextUpdate": self.next_update,
            "source": self.source,
            "categories": {key: category.to_dict() for key, category in self.categories.items()},
        }


def cot_signal(long: int, short: int) -> str:
    if long > short * DOMINANCE_RATIO:
        return "bullish"
    if short > long * DOMINANCE_RATIO:
        return "bearish"
    return "neutral"


def normalize_cot(payload: Dict[str, Any]) -> COTReport:
    """
    Normalize a reference-data COT payload::

        {"asOf": ..., "nextUpdate": ..., "categories": {key: {long, longPct, short, shortPct}}}
    """
    raw_categories = payload["categories"]
    categories = {}
    for key, name in CATEGORY_NAMES.items():
        raw = raw_categories[key]
        categories[key] = COTCategory(
            name=raw.get("name", name),
            long=int(raw["long"]),
            long_pct=float(raw["longPct"]),
            short=int(raw["short"]),
            short_pct=float(raw["shortPct"]),
        )
    return COTReport(
        as_of=payload["asOf"],
        next_update=payload.get("nextUpdate", ""),
        source=payload.get("source", "reference"),
        categories=categories,
    )


def normalize_cftc_row(row: Dict[str, Any]) -> COTReport:
    """
    Normalize one row of the CFTC TFF public reporting dataset.
    """
    categories = {}
    for key, (long_col, short_col, long_pct_col, short_pct_col) in CFTC_COLUMNS.items():
        categories[key] = COTCategory(
            name=CATEGORY_NAMES[key],
            long=int(float(row[long_col])),
            long_pct=float(row[long_pct_col]),
            short=int(float(row[short_col])),
            short_pct=float(row[short_pct_col]),
        )
    return COTReport(
        as_of=row["report_date_as_yyyy_mm_dd"][:10],
        next_update="",
        source="cftc",
        categories=categories,
    )

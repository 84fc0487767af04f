"""
Futures long/short positioning normalizer (Binance top traders, accounts, taker volume).
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

CROWDED_SIDE_PCT = 55.0


@dataclass
class LongShortIndicator:
    top_long: float
    top_short: float
    top_ratio: float
    accounts_long: Optional[float]
    accounts_short: Optional[float]
    taker_buy_sell_ratio: Optional[float]
    trend: str
    signal: str

    def to_dict(self) -> Dict[str, Any]:
        accounts = None
        if self.accounts_long is not None:
            accounts = {"long": self.accounts_long, "short": self.accounts_short}
        return {
            "topTraders": {"long": self.top_long, "short": self.top_short, "ratio": self.top_ratio},
            "accounts": accounts,
            "takerBuySellRatio": self.taker_buy_sell_ratio,
            "trend": self.trend,
            "signal": self.signal,
        }


def _newest_first(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(rows, key=lambda row: int(row.get("timestamp", 0)), reverse=True)


def long_short_signal(long_pct: float, short_pct: float) -> str:
    if short_pct > CROWDED_SIDE_PCT:
        return "squeeze_possible"
    if long_pct > CROWDED_SIDE_PCT:
        return "dump_possible"
    return "neutral"


def normalize_long_short(payload: Dict[str, Any]) -> LongShortIndicator:
    """
    Normalize the three Binance positioning endpoints.

    Args:
        payload: ``{"topTraders": [...], "accounts": [...] | None, "taker": [...] | None}``
            where each list holds 5-minute rows over the last four hours.
    """
    top = payload["topTraders"]
    if not isinstance(top, list) or not top:
        raise ValueError("Missing top trader positioning")
    top = _newest_first(top)

    latest, four_hours_ago = top[0], top[-1]
    long_pct = round(float(latest["longAccount"]) * 100, 1)
    short_pct = round(float(latest["shortAccount"]) * 100, 1)
    ratio = float(latest["longShortRatio"])
    previous_ratio = float(four_hours_ago["longShortRatio"])

    if ratio > previous_ratio:
        trend = "more_long"
    elif ratio < previous_ratio:
        trend = "more_short"
    else:
        trend = "stable"

    accounts_long = accounts_short = None
    accounts = payload.get("accounts")
    if isinstance(accounts, list) and accounts:
        newest = _newest_first(accounts)[0]
        accounts_long = round(float(newest["longAccount"]) * 100, 1)
        accounts_short = round(float(newest["shortAccount"]) * 100, 1)

    taker_ratio = None
    taker = payload.get("taker")
    if isinstance(taker, list) and taker:
        taker_ratio = round(float(_newest_first(taker)[0]["buySellRatio"]), 2)

    return LongShortIndicator(
        top_long=long_pct,
        top_short=short_pct,
        top_ratio=round(ratio, 2),
        accounts_long=accounts_long,
        accounts_short=accounts_short,
        taker_buy_sell_ratio=taker_ratio,
        trend=trend,
        signal=long_short_signal(long_pct, short_pct),
    )

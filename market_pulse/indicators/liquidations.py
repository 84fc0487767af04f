"""
Forced-liquidation normalizer (Binance force orders).

A SELL force order closes a long position, a BUY force order closes a short.
"""
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS


@dataclass
class LiquidationWindow:
    longs: float
    shorts: float

    @property
    def total(self) -> float:
        return self.longs + self.shorts

    def to_dict(self) -> Dict[str, float]:
        return {
            "total": round(self.total / 1e6, 1),
            "longs": round(self.longs / 1e6, 1),
            "shorts": round(self.shorts / 1e6, 1),
        }


@dataclass
class LiquidationsIndicator:
    h24: LiquidationWindow
    h1: LiquidationWindow
    dominant: str
    intensity: str
    signal: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "h24": self.h24.to_dict(),
            "h1": self.h1.to_dict(),
            "dominant": self.dominant,
            "intensity": self.intensity,
            "signal": self.signal,
        }


def liquidation_intensity(total_usd_millions: float) -> str:
    if total_usd_millions > 200:
        return "extreme"
    if total_usd_millions > 100:
        return "high"
    if total_usd_millions > 50:
        return "moderate"
    return "low"


def liquidation_signal(longs: float, shorts: float) -> str:
    if longs > shorts * 2:
        return "longs_rekt"
    if shorts > longs * 2:
        return "shorts_rekt"
    return "balanced"


def normalize_liquidations(orders: Iterable[Dict[str, Any]], now_ms: Optional[int] = None) -> LiquidationsIndicator:
    """
    Sum liquidated notional per side over the last 24 hours and the last hour.

    Args:
        orders: Raw force orders with ``time`` (ms), ``side``, ``price`` and ``origQty``.
        now_ms: Reference time in milliseconds, defaults to the current time.
    """
    if not isinstance(orders, list):
        raise ValueError("Force orders payload is not a list")

    now_ms = int(time.time() * 1000) if now_ms is None else now_ms
    day_start = now_ms - DAY_MS
    hour_start = now_ms - HOUR_MS

    h24 = LiquidationWindow(0.0, 0.0)
    h1 = LiquidationWindow(0.0, 0.0)

    for order in orders:
        order_time = int(order["time"])
        if order_time < day_start:
            continue
        value = float(order["price"]) * float(order["origQty"])
        in_last_hour = order_time > hour_start
        if order["side"] == "SELL":
            h24.longs += value
            if in_last_hour:
                h1.longs += value
        else:
            h24.shorts += value
            if in_last_hour:
                h1.shorts += value

    return LiquidationsIndicator(
        h24=h24,
        h1=h1,
        dominant="longs" if h24.longs > h24.shorts else "shorts",
        intensity=liquidation_intensity(h24.total / 1e6),
        signal=liquidation_signal(h24.longs, h24.shorts),
    )

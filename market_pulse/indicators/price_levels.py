"""
Price and support/resistance level normalizer (Binance daily klines).
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

import pandas as pd

WINDOW_DAYS = 14
WEEK_DAYS = 7
LEVEL_STEP = 100

KLINE_COLUMNS = ["open_time", "open", "high", "low", "close", "volume"]


@dataclass
class PriceLevels:
    current: float
    week_high: float
    week_low: float
    swing_high: float
    swing_low: float
    supports: List[float] = field(default_factory=list)
    resistances: List[float] = field(default_factory=list)

    @property
    def midpoint(self) -> float:
        return (self.week_high + self.week_low) / 2

    @property
    def bias(self) -> str:
        return "above" if self.current > self.midpoint else "below"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current,
            "weekHigh": self.week_high,
            "weekLow": self.week_low,
            "swingHigh": self.swing_high,
            "swingLow": self.swing_low,
            "supports": self.supports,
            "resistances": self.resistances,
            "bias": self.bias,
        }


def round_level(price: float, step: int = LEVEL_STEP) -> float:
    return float(round(price / step) * step)


def pivot_levels(high: float, low: float, close: float) -> Dict[str, List[float]]:
    """
    Classic floor-trader pivots over a high/low/close range.

    Supports are returned nearest-first (descending), resistances nearest-first
    (ascending).
    """
    pivot = (high + low + close) / 3
    spread = high - low
    supports = [2 * pivot - high, pivot - spread, low - 2 * (high - pivot)]
    resistances = [2 * pivot - low, pivot + spread, high + 2 * (pivot - low)]
    return {
        "supports": [round_level(level) for level in supports],
        "resistances": [round_level(level) for level in resistances],
    }


def normalize_price_levels(klines: List[List[Any]]) -> PriceLevels:
    """
    Reduce up to 14 daily klines to weekly range, swing range and levels.
    """
    if not isinstance(klines, list) or len(klines) < 2:
        raise ValueError("Not enough daily candles")

    df = pd.DataFrame([row[:6] for row in klines], columns=KLINE_COLUMNS)
    for col in ["open", "high", "low", "close", "volume"]:
        df[col] = pd.to_numeric(df[col])
    df = df.sort_values("open_time").tail(WINDOW_DAYS)
    week = df.tail(WEEK_DAYS)

    current = float(df["close"].iloc[-1])
    week_high = float(week["high"].max())
    week_low = float(week["low"].min())
    levels = pivot_levels(week_high, week_low, current)

    return PriceLevels(
        current=round(current, 2),
        week_high=round(week_high, 2),
        week_low=round(week_low, 2),
        swing_high=round(float(df["high"].max()), 2),
        swing_low=round(float(df["low"].min()), 2),
        supports=levels["supports"],
        resistances=levels["resistances"],
    )

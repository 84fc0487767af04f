"""
Open interest normalizer (Binance futures).
"""
from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class OpenInterestIndicator:
    btc: int
    usd_billions: float
    change24h: float
    trend: str
    signal: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "btc": self.btc,
            "usdBillions": self.usd_billions,
            "change24h": self.change24h,
            "trend": self.trend,
            "signal": self.signal,
        }


def open_interest_trend(change24h: float) -> str:
    if change24h > 2:
        return "increasing"
    if change24h < -2:
        return "decreasing"
    return "stable"


def open_interest_signal(change24h: float) -> str:
    if change24h > 5:
        return "high_leverage"
    if change24h < -5:
        return "deleveraging"
    return "normal"


def normalize_open_interest(payload: Dict[str, Any]) -> OpenInterestIndicator:
    """
    Normalize ``{"openInterest": {...}, "ticker": {...}, "history": [...]}``.

    ``history`` holds hourly ``sumOpenInterest`` rows; the oldest row is the
    24h reference. Without history the change is zero.
    """
    current = float(payload["openInterest"]["openInterest"])
    price = float(payload["ticker"]["price"])

    change24h = 0.0
    history = payload.get("history")
    if isinstance(history, list) and history:
        oldest = min(history, key=lambda row: int(row.get("timestamp", 0)))
        previous = float(oldest["sumOpenInterest"])
        if previous:
            change24h = round((current - previous) / previous * 100, 1)

    return OpenInterestIndicator(
        btc=round(current),
        usd_billions=round(current * price / 1e9, 2),
        change24h=change24h,
        trend=open_interest_trend(change24h),
        signal=open_interest_signal(change24h),
    )

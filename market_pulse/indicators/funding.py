"""
Perpetual funding rate normalizer (Binance futures).

Rates are expressed in percent per funding interval.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class FundingIndicator:
    current: float
    avg24h: float
    eth: Optional[float]
    sentiment: str
    signal: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "btc": {"current": self.current, "avg24h": self.avg24h},
            "eth": self.eth,
            "sentiment": self.sentiment,
            "signal": self.signal,
        }


def funding_sentiment(rate_pct: float) -> str:
    if rate_pct > 0.05:
        return "overleveraged_long"
    if rate_pct < -0.05:
        return "overleveraged_short"
    return "neutral"


def funding_signal(rate_pct: float) -> str:
    if rate_pct > 0.1:
        return "correction_likely"
    if rate_pct < -0.1:
        return "bounce_likely"
    return "normal"


def _latest_rate(rows: List[Dict[str, Any]]) -> float:
    latest = max(rows, key=lambda row: int(row.get("fundingTime", 0)))
    return float(latest["fundingRate"]) * 100


def normalize_funding(payload: Dict[str, Any]) -> FundingIndicator:
    """
    Normalize ``{"btc": [...], "eth": [...] | None}`` funding rate rows.
    """
    btc = payload["btc"]
    if not isinstance(btc, list) or not btc:
        raise ValueError("Missing BTC funding history")

    current = _latest_rate(btc)
    avg24h = sum(float(row["fundingRate"]) for row in btc) / len(btc) * 100

    eth = payload.get("eth")
    eth_rate = round(_latest_rate(eth), 4) if isinstance(eth, list) and eth else None

    return FundingIndicator(
        current=round(current, 4),
        avg24h=round(avg24h, 4),
        eth=eth_rate,
        sentiment=funding_sentiment(current),
        signal=funding_signal(current),
    )

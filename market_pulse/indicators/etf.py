"""
Spot ETF flow normalizer.

Flows are net USD millions. No directional signal is derived here; the
aggregator reads the daily and weekly figures directly.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ETFFlows:
    date: str
    daily: float
    weekly: Optional[float] = None
    total: Optional[float] = None
    daily_history: List[Dict[str, Any]] = field(default_factory=list)
    source: str = "reference"

    @property
    def trend(self) -> str:
        return "positive_daily" if self.daily > 0 else "negative_daily"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "daily": self.daily,
            "weekly": self.weekly,
            "total": self.total,
            "trend": self.trend,
            "dailyHistory": self.daily_history,
            "source": self.source,
        }


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else round(float(value), 1)


def normalize_etf(payload: Dict[str, Any]) -> ETFFlows:
    """
    Normalize ``{"date", "daily", "weekly"?, "total"?, "dailyHistory"?, "source"?}``.
    """
    return ETFFlows(
        date=str(payload["date"]),
        daily=round(float(payload["daily"]), 1),
        weekly=_optional_float(payload.get("weekly")),
        total=_optional_float(payload.get("total")),
        daily_history=list(payload.get("dailyHistory") or []),
        source=payload.get("source", "reference"),
    )

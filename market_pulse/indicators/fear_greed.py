"""
Fear & Greed index normalizer (alternative.me).
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

EXTREME_FEAR = 15
FEAR = 25
GREED = 65
EXTREME_GREED = 80


@dataclass
class FearGreedIndicator:
    current: int
    label: str
    change24h: int
    change7d: int
    change30d: int
    trend: str
    history: List[int] = field(default_factory=list)
    signal: str = "neutral"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current,
            "label": self.label,
            "change24h": self.change24h,
            "change7d": self.change7d,
            "change30d": self.change30d,
            "trend": self.trend,
            "history7d": self.history,
            "signal": self.signal,
        }


def fear_greed_signal(value: int) -> str:
    """Contrarian reading: fear is an opportunity, greed a warning."""
    if value <= FEAR:
        return "bullish"
    if value >= GREED:
        return "bearish"
    return "neutral"


def normalize_fear_greed(payload: Dict[str, Any]) -> FearGreedIndicator:
    """
    Normalize an alternative.me ``/fng/?limit=30`` payload.

    Entries are ordered most-recent-first by the API. Deltas fall back to zero
    when the history is too short to reach the lookback.
    """
    entries = payload["data"]
    if not entries:
        raise ValueError("Empty Fear & Greed history")

    values = [int(entry["value"]) for entry in entries]
    current = values[0]
    yesterday = values[1] if len(values) > 1 else current
    week_ago = values[6] if len(values) > 6 else current
    month_ago = values[29] if len(values) > 29 else current

    if current > week_ago:
        trend = "improving"
    elif current < week_ago:
        trend = "worsening"
    else:
        trend = "stable"

    return FearGreedIndicator(
        current=current,
        label=entries[0].get("value_classification", ""),
        change24h=current - yesterday,
        change7d=current - week_ago,
        change30d=current - month_ago,
        trend=trend,
        history=values[:7],
        signal=fear_greed_signal(current),
    )

"""
Bitcoin hashrate normalizer (mempool.space).

The trend is a pure function of three percentage changes; the signal is a pure
function of the trend.
"""
from dataclasses import dataclass
from typing import Any, Dict, List

EXAHASH = 1e18

INTERPRETATIONS = {
    "crashing": "🔴 Hashrate en chute libre / Hashrate crashing: capitulation des mineurs, stress maximal sur le réseau.",
    "dropping": "🟠 Hashrate en baisse / Hashrate dropping: des mineurs éteignent leurs machines.",
    "rising": "🟢 Hashrate en hausse / Hashrate rising: les mineurs investissent, confiance long terme.",
    "stable": "⚪ Hashrate stable / Hashrate stable: réseau sain, pas de signal fort.",
    "falling": "🟡 Hashrate en léger repli / Hashrate easing: à surveiller.",
    "unknown": "⚪ Hashrate indisponible / Hashrate unavailable: valeur de repli.",
}

TREND_SIGNALS = {
    "rising": "bullish",
    "dropping": "bearish",
    "crashing": "bearish",
}


@dataclass
class HashrateIndicator:
    current: float
    change24h: float
    change7d: float
    change_from_peak: float
    trend: str
    signal: str
    interpretation: str
    unit: str = "EH/s"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current,
            "unit": self.unit,
            "change24h": self.change24h,
            "change7d": self.change7d,
            "changeFromPeak": self.change_from_peak,
            "trend": self.trend,
            "signal": self.signal,
            "interpretation": self.interpretation,
        }


def classify_hashrate_trend(change24h: float, change7d: float = 0.0, change_from_peak: float = 0.0) -> str:
    """
    Classify the hashrate trend from percentage changes.

    Branches are evaluated in order; the first match wins.
    """
    if change_from_peak < -15:
        return "crashing"
    if change24h < -2 and change_from_peak < -5:
        return "dropping"
    if change24h > 2 and change7d > 5:
        return "rising"
    if change7d > 0 and change24h >= -2:
        return "stable"
    return "falling"


def hashrate_signal(trend: str) -> str:
    return TREND_SIGNALS.get(trend, "neutral")


def _pct_change(current: float, previous: float) -> float:
    if not previous:
        return 0.0
    return (current - previous) / previous * 100


def build_hashrate(current: float, change24h: float, change7d: float, change_from_peak: float) -> HashrateIndicator:
    trend = classify_hashrate_trend(change24h, change7d, change_from_peak)
    return HashrateIndicator(
        current=round(current, 2),
        change24h=round(change24h, 2),
        change7d=round(change7d, 2),
        change_from_peak=round(change_from_peak, 2),
        trend=trend,
        signal=hashrate_signal(trend),
        interpretation=INTERPRETATIONS[trend],
    )


def normalize_hashrate(payload: Dict[str, Any]) -> HashrateIndicator:
    """
    Normalize a mempool.space ``/mining/hashrate/1m`` payload.

    ``hashrates`` holds one daily average per entry; values are in H/s.
    """
    points: List[Dict[str, Any]] = sorted(payload["hashrates"], key=lambda p: p["timestamp"])
    series = [float(p["avgHashrate"]) / EXAHASH for p in points]
    if len(series) < 2:
        raise ValueError("Not enough hashrate history")

    current = float(payload.get("currentHashrate") or 0) / EXAHASH or series[-1]
    day_ago = series[-2]
    week_ago = series[-8] if len(series) >= 8 else series[0]
    peak = max(series + [current])

    return build_hashrate(
        current=current,
        change24h=_pct_change(current, day_ago),
        change7d=_pct_change(current, week_ago),
        change_from_peak=_pct_change(current, peak),
    )


def fallback_hashrate() -> HashrateIndicator:
    """Literal record used when every hashrate source failed."""
    return HashrateIndicator(
        current=1000.0,
        change24h=0.0,
        change7d=0.0,
        change_from_peak=0.0,
        trend="unknown",
        signal="neutral",
        interpretation=INTERPRETATIONS["unknown"],
    )

"""
Core data structures for the signal generation framework.

The aggregate signal and the trading plan are recomputed from scratch on every
run; their ``to_dict`` output is the exact shape persisted in ``data.json``.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class SignalType(Enum):
    """Direction contributed by a single scoring rule."""
    BULLISH = "bullish"
    BEARISH = "bearish"


class MarketState(Enum):
    """
    Categorical market state derived from the net score.

    Each member carries its persisted key, its dashboard label and emoji, and
    the trading bias it implies.
    """
    STRONG_ACCUMULATION = ("strong_accumulation", "ACCUMULATION FORTE", "🚀", "long", "strong")
    ACCUMULATION = ("accumulation", "ZONE D'ACCUMULATION", "🎯", "long", "moderate")
    NEUTRAL = ("neutral", "PATIENCE", "⏳", "neutral", "none")
    DISTRIBUTION = ("distribution", "ZONE DE PRUDENCE", "⚠️", "short", "moderate")
    STRONG_DISTRIBUTION = ("strong_distribution", "DISTRIBUTION FORTE", "🚨", "short", "strong")

    def __init__(self, key: str, label: str, emoji: str, direction: str, strength: str):
        self.key = key
        self.label = label
        self.emoji = emoji
        self.direction = direction
        self.strength = strength

    @classmethod
    def from_key(cls, key: str) -> "MarketState":
        for state in cls:
            if state.key == key:
                return state
        raise ValueError(f"Unknown market state: {key}")


@dataclass
class SignalEntry:
    """
    One triggered scoring rule.

    Attributes:
        type: Direction of the contribution.
        weight: Points added to the matching score (1 to 3).
        reason: Human-readable explanation shown on the dashboard.
    """
    type: SignalType
    weight: int
    reason: str

    def __post_init__(self):
        if not 1 <= self.weight <= 3:
            raise ValueError("Weight must be between 1 and 3")

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "weight": self.weight, "reason": self.reason}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SignalEntry":
        return cls(type=SignalType(data["type"]), weight=int(data["weight"]), reason=data["reason"])


@dataclass
class AggregateSignal:
    """
    Output of the signal aggregator.

    Attributes:
        state: Market state classified from the net score.
        bull_score: Sum of the weights of every bullish rule that fired.
        bear_score: Sum of the weights of every bearish rule that fired.
        signals: Contributing rules, truncated to the configured maximum.
    """
    state: MarketState
    bull_score: int
    bear_score: int
    signals: List[SignalEntry] = field(default_factory=list)

    @property
    def net_score(self) -> int:
        return self.bull_score - self.bear_score

    @property
    def signal(self) -> str:
        return self.state.key

    @property
    def label(self) -> str:
        return self.state.label

    @property
    def emoji(self) -> str:
        return self.state.emoji

    def to_dict(self) -> Dict[str, Any]:
        return {
            "signal": self.state.key,
            "label": self.state.label,
            "emoji": self.state.emoji,
            "score": {"bull": self.bull_score, "bear": self.bear_score, "net": self.net_score},
            "signals": [entry.to_dict() for entry in self.signals],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AggregateSignal":
        return cls(
            state=MarketState.from_key(data["signal"]),
            bull_score=int(data["score"]["bull"]),
            bear_score=int(data["score"]["bear"]),
            signals=[SignalEntry.from_dict(entry) for entry in data.get("signals", [])],
        )


@dataclass
class PlanFactor:
    """A contributing signal re-labeled with its priority tier."""
    priority: str
    type: SignalType
    weight: int
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "priority": self.priority,
            "type": self.type.value,
            "weight": self.weight,
            "reason": self.reason,
        }


@dataclass
class TradingPlan:
    """
    Actionable zone derived from the aggregate signal and price levels.

    Attributes:
        direction: long, short or neutral.
        strength: strong, moderate or none.
        horizon: Expected holding horizon.
        entry_zone: Low/high bounds of the entry zone, None when waiting.
        invalidation: Price that invalidates the bias, None when waiting.
        targets: Price targets in the direction of the bias.
        watch: Nearest support and resistance to monitor.
        factors: Top contributing signals by priority tier.
        position_size: Suggested position size band.
    """
    direction: str
    strength: str
    horizon: str
    entry_zone: Optional[Dict[str, float]]
    invalidation: Optional[float]
    targets: List[float]
    watch: Dict[str, float]
    factors: List[PlanFactor]
    position_size: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bias": {"direction": self.direction, "strength": self.strength},
            "horizon": self.horizon,
            "levels": {
                "entryZone": self.entry_zone,
                "invalidation": self.invalidation,
                "targets": self.targets,
                "watch": self.watch,
            },
            "factors": [factor.to_dict() for factor in self.factors],
            "risk": {
                "positionSize": self.position_size,
                "stopLoss": self.invalidation,
            },
        }

"""
Trading Plan Deriver component.

Turns the aggregate signal and the normalized price levels into an actionable
zone. Levels are selected from the support/resistance arrays as-is; nothing is
recomputed here.
"""
from typing import Dict, List, Optional

from market_pulse.indicators import FearGreedIndicator, PriceLevels

from ..core import AggregateSignal, PlanFactor, SignalEntry, TradingPlan

PRIORITY_BY_WEIGHT = {3: "high", 2: "medium", 1: "low"}

SHORT_HORIZON = "24-72h"
DEFAULT_HORIZON = "1-2 weeks"

STRONG_POSITION_SIZE = "3-5%"
DEFAULT_POSITION_SIZE = "1-2%"


def _level(levels: List[float], index: int) -> Optional[float]:
    return levels[index] if len(levels) > index else None


class TradingPlanDeriver:
    """
    Derives bias, levels, factors and risk sizing from the aggregate signal.
    """

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize the plan deriver.

        Args:
            config: Configuration dictionary. ``max_factors`` caps the number of
                contributing signals re-labeled as plan factors; the extreme
                Fear & Greed bounds select the short horizon.
        """
        config = config or {}
        self.max_factors = config.get("max_factors", 3)
        self.extreme_fear = config.get("extreme_fear", 20)
        self.extreme_greed = config.get("extreme_greed", 80)

    def derive_plan(
        self,
        aggregate: AggregateSignal,
        price_levels: Optional[PriceLevels],
        fear_greed: Optional[FearGreedIndicator] = None,
    ) -> Optional[TradingPlan]:
        """
        Derive a trading plan.

        Args:
            aggregate: Output of the signal aggregator.
            price_levels: Normalized price levels, or None when unavailable.
            fear_greed: Fear & Greed record used for the horizon rule.

        Returns:
            TradingPlan, or None when price levels are absent.
        """
        if price_levels is None:
            return None

        state = aggregate.state
        supports = price_levels.supports
        resistances = price_levels.resistances

        entry_zone = None
        invalidation = None
        targets: List[float] = []

        if state.direction == "long":
            entry_zone = {"low": _level(supports, 1), "high": _level(supports, 0)}
            invalidation = _level(supports, 2)
            targets = list(resistances[:2])
        elif state.direction == "short":
            entry_zone = {"low": _level(resistances, 0), "high": _level(resistances, 1)}
            invalidation = _level(resistances, 2)
            targets = list(supports[:2])

        return TradingPlan(
            direction=state.direction,
            strength=state.strength,
            horizon=self._horizon(fear_greed),
            entry_zone=entry_zone,
            invalidation=invalidation,
            targets=targets,
            watch={"support": _level(supports, 0), "resistance": _level(resistances, 0)},
            factors=self._factors(aggregate.signals),
            position_size=STRONG_POSITION_SIZE if state.strength == "strong" else DEFAULT_POSITION_SIZE,
        )

    def _horizon(self, fear_greed: Optional[FearGreedIndicator]) -> str:
        if fear_greed is None:
            return DEFAULT_HORIZON
        if fear_greed.current <= self.extreme_fear or fear_greed.current >= self.extreme_greed:
            return SHORT_HORIZON
        return DEFAULT_HORIZON

    def _factors(self, signals: List[SignalEntry]) -> List[PlanFactor]:
        return [
            PlanFactor(
                priority=PRIORITY_BY_WEIGHT[entry.weight],
                type=entry.type,
                weight=entry.weight,
                reason=entry.reason,
            )
            for entry in signals[:self.max_factors]
        ]

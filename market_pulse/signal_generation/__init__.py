"""
Market signal engine.

Reduces normalized indicators to a bull/bear score, a categorical market state,
a trading plan and a short narrative.
"""

from .core import (
    AggregateSignal,
    MarketState,
    PlanFactor,
    SignalEntry,
    SignalType,
    TradingPlan,
)

from .signal_engine import MarketAnalysis, MarketSignalEngine

from .components import (
    classify_net_score,
    SignalAggregator,
    TradingPlanDeriver,
    NarrativeGenerator,
)

__all__ = [
    # Core classes
    "AggregateSignal",
    "MarketState",
    "PlanFactor",
    "SignalEntry",
    "SignalType",
    "TradingPlan",
    # Engine
    "MarketAnalysis",
    "MarketSignalEngine",
    # Components
    "classify_net_score",
    "SignalAggregator",
    "TradingPlanDeriver",
    "NarrativeGenerator",
]

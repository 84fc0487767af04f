"""
Components of the market signal engine.

The aggregator and the plan deriver are pure; only the narrative generator may
perform I/O through its language-model client.
"""

from .market_state import classify_net_score
from .signal_aggregator import SignalAggregator
from .trading_plan import TradingPlanDeriver
from .narrative_generator import NarrativeGenerator

__all__ = [
    "classify_net_score",
    "SignalAggregator",
    "TradingPlanDeriver",
    "NarrativeGenerator",
]

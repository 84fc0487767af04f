"""
Market state classification shared by the aggregator and the plan deriver.
"""
from ..core import MarketState

STRONG_THRESHOLD = 5
MODERATE_THRESHOLD = 2


def classify_net_score(net_score: int) -> MarketState:
    """
    Map a net score onto a market state.

    Breakpoints are evaluated in order; every integer maps to exactly one state
    with boundaries at -5, -2, 2 and 5.
    """
    if net_score >= STRONG_THRESHOLD:
        return MarketState.STRONG_ACCUMULATION
    if net_score >= MODERATE_THRESHOLD:
        return MarketState.ACCUMULATION
    if net_score <= -STRONG_THRESHOLD:
        return MarketState.STRONG_DISTRIBUTION
    if net_score <= -MODERATE_THRESHOLD:
        return MarketState.DISTRIBUTION
    return MarketState.NEUTRAL

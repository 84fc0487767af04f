"""
Market signal engine.

Wires the aggregator, the plan deriver and the narrative generator into the
analysis step of a run: indicators in, analysis, trading plan and story out.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from market_pulse.indicators import FEAR_GREED, PRICE
from market_pulse.utils.logging import get_logger

from .components import NarrativeGenerator, SignalAggregator, TradingPlanDeriver
from .core import AggregateSignal, TradingPlan

logger = get_logger(__name__)


@dataclass
class MarketAnalysis:
    """Result of one analysis pass."""
    aggregate: AggregateSignal
    plan: Optional[TradingPlan]
    story: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Fields merged into the persisted market document."""
        document: Dict[str, Any] = {"analysis": self.aggregate.to_dict()}
        if self.plan is not None:
            document["tradingPlan"] = self.plan.to_dict()
        document["story"] = self.story
        return document


class MarketSignalEngine:
    """
    Runs the scoring pipeline over a set of normalized indicators.

    Aggregation and plan derivation are synchronous; only the story may wait on
    the language model.
    """

    def __init__(self, config: Optional[Dict] = None, llm_client: Optional[Any] = None):
        """
        Initialize the engine.

        Args:
            config: Configuration dictionary with ``aggregator``, ``trading_plan``
                and ``narrative`` sections.
            llm_client: Optional language-model client for the story.
        """
        config = config or {}
        self.aggregator = SignalAggregator(config.get("aggregator", {}))
        self.plan_deriver = TradingPlanDeriver(config.get("trading_plan", {}))
        self.narrative_generator = NarrativeGenerator(llm_client, config.get("narrative", {}))

    def evaluate(self, indicators: Dict[str, Any]) -> MarketAnalysis:
        """Score the indicators and derive the trading plan."""
        aggregate = self.aggregator.aggregate(indicators)
        plan = self.plan_deriver.derive_plan(
            aggregate,
            indicators.get(PRICE),
            fear_greed=indicators.get(FEAR_GREED),
        )
        logger.info(
            f"Market state {aggregate.signal}: bull={aggregate.bull_score} "
            f"bear={aggregate.bear_score} net={aggregate.net_score}"
        )
        if plan is None:
            logger.warning("Price levels unavailable, trading plan skipped")
        return MarketAnalysis(aggregate=aggregate, plan=plan)

    async def analyze(self, indicators: Dict[str, Any]) -> MarketAnalysis:
        """Evaluate the indicators and attach the story."""
        analysis = self.evaluate(indicators)
        analysis.story = await self.narrative_generator.narrate(indicators, analysis.aggregate)
        return analysis

"""
Market job: fetch every indicator, score the market and persist ``data.json``.
"""
import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from market_pulse.config.settings import settings
from market_pulse.data.http_client import HttpClient
from market_pulse.data.persistence import atomic_write_json
from market_pulse.data.providers import BaseIndicatorProvider, default_providers
from market_pulse.data.reference_data import CachedReferenceData, ReferenceDataProvider
from market_pulse.indicators import (
    COT,
    ETF,
    FEAR_GREED,
    FUNDING,
    HASHRATE,
    LIQUIDATIONS,
    LONG_SHORT,
    OPEN_INTEREST,
    PRICE,
)
from market_pulse.llm.client import create_llm_client
from market_pulse.pipeline.common import utc_timestamp
from market_pulse.signal_generation import MarketAnalysis, MarketSignalEngine
from market_pulse.utils.logging import get_logger

logger = get_logger(__name__)

DOCUMENT_SOURCES = [FEAR_GREED, LONG_SHORT, OPEN_INTEREST, FUNDING, LIQUIDATIONS, HASHRATE, COT, ETF, PRICE]


class MarketJob:
    """
    Runs one market update.

    Providers are fanned out concurrently and each one isolates its own
    failures; scoring starts once all of them have settled.
    """

    def __init__(
        self,
        providers: List[BaseIndicatorProvider],
        engine: MarketSignalEngine,
        output_path: Union[str, Path],
    ):
        self.providers = providers
        self.engine = engine
        self.output_path = Path(output_path)

    async def collect_indicators(self) -> Dict[str, Any]:
        """
        Collect every provider concurrently.

        Returns:
            Dict[str, Any]: Source name to indicator record or None.
        """
        results = await asyncio.gather(
            *(provider.collect() for provider in self.providers),
            return_exceptions=True,
        )

        indicators: Dict[str, Any] = {}
        for provider, result in zip(self.providers, results):
            if isinstance(result, Exception):
                logger.error(f"{provider.name} provider failed: {result}")
                result = None
            indicators[provider.name] = result

        available = [name for name, record in indicators.items() if record is not None]
        logger.info(f"Collected {len(available)}/{len(indicators)} indicators: {', '.join(available)}")
        return indicators

    @staticmethod
    def build_document(indicators: Dict[str, Any], analysis: MarketAnalysis) -> Dict[str, Any]:
        """Assemble the persisted market document."""
        document: Dict[str, Any] = {"updatedAt": utc_timestamp()}
        for name in DOCUMENT_SOURCES:
            record = indicators.get(name)
            document[name] = record.to_dict() if record is not None else None
        document.update(analysis.to_dict())
        return document

    async def run(self, write: bool = True) -> Dict[str, Any]:
        """
        Execute the job.

        Args:
            write: Persist the document to ``output_path``.

        Returns:
            Dict[str, Any]: The market document.
        """
        logger.info("Fetching market data")
        indicators = await self.collect_indicators()

        logger.info("Generating analysis")
        analysis = await self.engine.analyze(indicators)

        document = self.build_document(indicators, analysis)
        if write:
            atomic_write_json(self.output_path, document)
            logger.info(f"Market data saved to {self.output_path}, signal: {analysis.aggregate.label}")
        return document


def engine_config() -> Dict[str, Any]:
    """Engine configuration from settings."""
    return {
        "aggregator": {
            "max_signals": settings.analysis.MAX_SIGNALS,
            "ranking": settings.analysis.SIGNAL_RANKING,
            "extended_bearish_rules": settings.analysis.EXTENDED_BEARISH_RULES,
        },
        "trading_plan": {"max_factors": settings.analysis.PLAN_FACTORS},
        "narrative": {
            "temperature": settings.llm.STORY_TEMPERATURE,
            "max_tokens": settings.llm.STORY_MAX_TOKENS,
        },
    }


def build_market_job(
    output_path: Optional[Union[str, Path]] = None,
    use_llm: bool = True,
    client: Optional[HttpClient] = None,
    reference: Optional[ReferenceDataProvider] = None,
) -> MarketJob:
    """Wire a market job from settings."""
    client = client or HttpClient()
    reference = reference or CachedReferenceData(settings.data.ETF_CACHE_PATH)
    engine = MarketSignalEngine(engine_config(), llm_client=create_llm_client(use_llm))
    return MarketJob(
        providers=default_providers(client, reference),
        engine=engine,
        output_path=output_path or settings.output.DATA_PATH,
    )

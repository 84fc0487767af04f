"""
News job: fetch headlines, annotate them against the last market document and
persist ``news.json``.
"""
from pathlib import Path
from typing import Any, Dict, Optional, Union

from market_pulse.config.settings import settings
from market_pulse.data.http_client import HttpClient
from market_pulse.data.persistence import atomic_write_json
from market_pulse.llm.client import create_llm_client
from market_pulse.news.news_analyzer import NewsAnalyzer, read_market_context
from market_pulse.news.news_provider import NewsProvider
from market_pulse.pipeline.common import utc_timestamp
from market_pulse.utils.logging import get_logger

logger = get_logger(__name__)


class NewsJob:
    """Runs one news update."""

    def __init__(
        self,
        provider: NewsProvider,
        analyzer: NewsAnalyzer,
        data_path: Union[str, Path],
        output_path: Union[str, Path],
    ):
        self.provider = provider
        self.analyzer = analyzer
        self.data_path = Path(data_path)
        self.output_path = Path(output_path)

    async def run(self, write: bool = True) -> Dict[str, Any]:
        """
        Execute the job.

        Args:
            write: Persist the document to ``output_path``.

        Returns:
            Dict[str, Any]: The news document.
        """
        items = await self.provider.fetch_news()

        context = read_market_context(self.data_path)
        if context is not None:
            logger.info(f"Market context: F&G={context.fear_greed}, HF short={context.hedge_funds_short}%")

        analyzed = await self.analyzer.analyze(items, context)
        published = self.analyzer.select_published(analyzed)
        narrative = await self.analyzer.generate_narrative(published, context)

        document = {
            "updatedAt": utc_timestamp(),
            "context": context.to_dict() if context is not None else None,
            "narrative": narrative,
            "news": [n.to_dict() for n in published],
        }
        if write:
            atomic_write_json(self.output_path, document)
            logger.info(f"News saved with {len(published)} articles to {self.output_path}")
        return document


def analyzer_config() -> Dict[str, Any]:
    """News analyzer configuration from settings."""
    return {
        "analysis_temperature": settings.llm.NEWS_TEMPERATURE,
        "analysis_max_tokens": settings.llm.NEWS_MAX_TOKENS,
        "narrative_temperature": settings.llm.NARRATIVE_TEMPERATURE,
        "narrative_max_tokens": settings.llm.NARRATIVE_MAX_TOKENS,
        "min_importance": settings.news.MIN_IMPORTANCE,
        "max_published": settings.news.MAX_PUBLISHED,
        "narrative_min_importance": settings.news.NARRATIVE_MIN_IMPORTANCE,
    }


def build_news_job(
    output_path: Optional[Union[str, Path]] = None,
    data_path: Optional[Union[str, Path]] = None,
    use_llm: bool = True,
    client: Optional[HttpClient] = None,
) -> NewsJob:
    """Wire a news job from settings."""
    return NewsJob(
        provider=NewsProvider(client or HttpClient()),
        analyzer=NewsAnalyzer(create_llm_client(use_llm), analyzer_config()),
        data_path=data_path or settings.output.DATA_PATH,
        output_path=output_path or settings.output.NEWS_PATH,
    )

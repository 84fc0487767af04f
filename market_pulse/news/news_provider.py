"""
News provider fetching the configured RSS feeds.
"""
import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional

from market_pulse.config.settings import settings
from market_pulse.data.http_client import FetchError, HttpClient
from market_pulse.news.rss import NewsItem, parse_feed
from market_pulse.utils.logging import get_logger

logger = get_logger(__name__)

EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class NewsProvider:
    """
    Fetches every feed concurrently and keeps the most recent items.

    A failing feed is logged and contributes no items.
    """

    def __init__(
        self,
        client: HttpClient,
        feeds: Optional[List[Dict[str, str]]] = None,
        max_items: Optional[int] = None,
        description_limit: Optional[int] = None,
    ):
        self.client = client
        self.feeds = feeds if feeds is not None else settings.news.FEEDS
        self.max_items = max_items if max_items is not None else settings.news.MAX_ITEMS
        self.description_limit = (
            description_limit if description_limit is not None else settings.news.DESCRIPTION_LIMIT
        )

    async def fetch_news(self) -> List[NewsItem]:
        """
        Fetches all feeds.

        Returns:
            List[NewsItem]: Newest first, at most ``max_items``. Undated items
            sort last.
        """
        results = await asyncio.gather(*(self._fetch_feed(feed) for feed in self.feeds))
        items = [item for feed_items in results for item in feed_items]
        items.sort(key=lambda item: item.published or EPOCH, reverse=True)
        logger.info(f"Fetched {len(items)} news items from {len(self.feeds)} feeds")
        return items[:self.max_items]

    async def _fetch_feed(self, feed: Dict[str, str]) -> List[NewsItem]:
        name = feed.get("name", feed["url"])
        try:
            text = await self.client.fetch_text(feed["url"])
        except FetchError as e:
            logger.warning(f"{name} feed unavailable: {e}")
            return []
        items = parse_feed(text, source=name, description_limit=self.description_limit)
        if not items:
            logger.warning(f"No entries found for {name}")
        return items

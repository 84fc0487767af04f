"""
One-shot batch jobs producing the dashboard documents.
"""
from .market_job import MarketJob, build_market_job
from .news_job import NewsJob, build_news_job

__all__ = ["MarketJob", "NewsJob", "build_market_job", "build_news_job"]

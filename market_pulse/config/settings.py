"""
Centralized configuration management for Market Pulse.

Configuration follows the same layering everywhere:

Tier 1: Code Defaults (this module)
- Thresholds, endpoints and output paths, version controlled.

Tier 2: Environment Variables (.env)
- Secrets (the language-model API key) and local overrides, e.g.
  ANALYSIS_SIGNAL_RANKING=weight or DATA_REQUEST_TIMEOUT_SECONDS=10.

This module uses pydantic-settings to manage configuration from environment
variables and .env files, providing a structured and validated way to
access settings throughout the application.
"""
from typing import Dict, List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """
    Configuration for the language-model client used for commentary.
    """
    model_config = SettingsConfigDict(env_prefix='LLM_')

    BASE_URL: str = "https://api.groq.com/openai/v1"
    DEFAULT_MODEL: str = "llama-3.3-70b-versatile"
    TIMEOUT_SECONDS: float = 30.0

    # Market story (data.json)
    STORY_TEMPERATURE: float = 0.7
    STORY_MAX_TOKENS: int = 300

    # Per-item news annotation (news.json)
    NEWS_TEMPERATURE: float = 0.4
    NEWS_MAX_TOKENS: int = 2500

    # News narrative paragraph (news.json)
    NARRATIVE_TEMPERATURE: float = 0.7
    NARRATIVE_MAX_TOKENS: int = 400


class DataSettings(BaseSettings):
    """
    Configuration for market data sources.
    """
    model_config = SettingsConfigDict(env_prefix='DATA_')

    SYMBOL: str = "BTCUSDT"
    REQUEST_TIMEOUT_SECONDS: float = 15.0
    USER_AGENT: str = "MarketPulse/2.0"

    # Shared request budget across all public endpoints
    RATE_LIMIT: int = 20
    RATE_PERIOD: float = 1.0

    BINANCE_SPOT_URL: str = "https://api.binance.com"
    BINANCE_FUTURES_URL: str = "https://fapi.binance.com"
    FEAR_GREED_URL: str = "https://api.alternative.me/fng/"
    MEMPOOL_HASHRATE_URL: str = "https://mempool.space/api/v1/mining/hashrate/1m"
    CFTC_TFF_URL: str = "https://publicreporting.cftc.gov/resource/gpe5-46if.json"
    CFTC_MARKET_CODE: str = "133741"  # CME Bitcoin

    COT_LIVE_ENABLED: bool = True
    ETF_CACHE_PATH: str = ".etf-cache.json"


class AnalysisSettings(BaseSettings):
    """
    Configuration for the signal aggregator and trading plan.
    """
    model_config = SettingsConfigDict(env_prefix='ANALYSIS_')

    MAX_SIGNALS: int = 5
    SIGNAL_RANKING: str = "insertion"  # insertion or weight
    EXTENDED_BEARISH_RULES: bool = False
    PLAN_FACTORS: int = 3


class NewsSettings(BaseSettings):
    """
    Configuration for the news job.
    """
    model_config = SettingsConfigDict(env_prefix='NEWS_')

    FEEDS: List[Dict[str, str]] = [
        {"name": "CoinTelegraph", "url": "https://cointelegraph.com/rss"},
        {"name": "CoinDesk", "url": "https://www.coindesk.com/arc/outboundfeeds/rss/"},
    ]
    MAX_ITEMS: int = 8
    MAX_PUBLISHED: int = 5
    MIN_IMPORTANCE: int = 3
    NARRATIVE_MIN_IMPORTANCE: int = 4
    DESCRIPTION_LIMIT: int = 500


class OutputSettings(BaseSettings):
    """
    Configuration for the persisted dashboard documents.
    """
    model_config = SettingsConfigDict(env_prefix='OUTPUT_')

    DATA_PATH: str = "data.json"
    NEWS_PATH: str = "news.json"


class Settings(BaseSettings):
    """
    Main settings object that aggregates all other settings.
    """
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    llm: LLMSettings = LLMSettings()
    data: DataSettings = DataSettings()
    analysis: AnalysisSettings = AnalysisSettings()
    news: NewsSettings = NewsSettings()
    output: OutputSettings = OutputSettings()

    # Direct environment variable access
    GROQ_API_KEY: Optional[str] = None


settings = Settings()

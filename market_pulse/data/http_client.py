"""
Shared HTTP access for every market data source.

Each request is bounded by its own timeout and goes through a shared throttler;
any transport, status or decoding problem surfaces as ``FetchError``.
"""
import asyncio
import json
from typing import Any, Dict, Optional

import aiohttp
from asyncio_throttle import Throttler

from market_pulse.config.settings import settings
from market_pulse.utils.logging import get_logger

logger = get_logger(__name__)


class FetchError(Exception):
    """Raised when a remote resource cannot be fetched or decoded."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url


class HttpClient:
    """
    Thin aiohttp wrapper used by the indicator and news providers.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        rate_limit: Optional[int] = None,
        period: Optional[float] = None,
    ):
        """
        Initialize the HTTP client.

        Args:
            timeout: Per-request timeout in seconds.
            user_agent: User-Agent header sent with every request.
            rate_limit: Number of requests allowed per period.
            period: Time period in seconds for the rate limit.
        """
        self.timeout = timeout if timeout is not None else settings.data.REQUEST_TIMEOUT_SECONDS
        self.user_agent = user_agent or settings.data.USER_AGENT
        self.throttler = Throttler(
            rate_limit if rate_limit is not None else settings.data.RATE_LIMIT,
            period if period is not None else settings.data.RATE_PERIOD,
        )

    async def fetch_text(self, url: str, params: Optional[Dict[str, Any]] = None) -> str:
        """
        GET a resource and return its body as text.

        Raises:
            FetchError: On network error, timeout, non-2xx status or a body
                that does not decode in its declared charset.
        """
        try:
            async with self.throttler, aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"User-Agent": self.user_agent},
            ) as session:
                async with session.get(url, params=params) as response:
                    response.raise_for_status()
                    return await response.text()
        except asyncio.TimeoutError:
            raise FetchError(url, f"timed out after {self.timeout}s")
        except UnicodeDecodeError as e:
            raise FetchError(url, f"undecodable body: {e.reason}") from e
        except aiohttp.ClientError as e:
            raise FetchError(url, str(e)) from e

    async def fetch(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET a resource and decode it as JSON, returning raw text when the body
        is not JSON.
        """
        text = await self.fetch_text(url, params)
        try:
            return json.loads(text)
        except ValueError:
            return text

    async def fetch_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET a resource that must be JSON.

        Raises:
            FetchError: On any fetch failure or when the body is not JSON.
        """
        text = await self.fetch_text(url, params)
        try:
            return json.loads(text)
        except ValueError as e:
            logger.debug(f"Non-JSON body from {url}: {text[:200]!r}")
            raise FetchError(url, "response body is not JSON") from e

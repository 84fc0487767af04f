"""
Abstract base class for all indicator providers in Market Pulse.
"""
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Optional

from market_pulse.data.http_client import FetchError, HttpClient
from market_pulse.indicators import normalize
from market_pulse.utils.logging import get_logger

logger = get_logger(__name__)


class BaseIndicatorProvider(ABC):
    """
    Abstract base class for all indicator providers.

    A provider fetches the raw payload of one source and hands it to the
    matching normalizer. Fetch and parse failures are isolated here: ``collect``
    never raises for them and returns the provider's fallback instead.
    """

    #: Source key understood by ``market_pulse.indicators.normalize``.
    name: str = ""

    def __init__(self, client: HttpClient):
        self.client = client

    @abstractmethod
    async def fetch_raw(self) -> Any:
        """
        Fetches the raw payload for this source.

        Returns:
            The decoded payload passed unchanged to the normalizer.

        Raises:
            FetchError: If the required endpoint cannot be fetched.
        """
        pass

    def fallback(self) -> Optional[Any]:
        """Record used when the source is unavailable; None by default."""
        return None

    async def collect(self) -> Optional[Any]:
        """
        Fetches and normalizes the source.

        Returns:
            The indicator record, the fallback record, or None.
        """
        try:
            raw = await self.fetch_raw()
        except FetchError as e:
            logger.warning(f"{self.name} fetch failed: {e}")
            return self.fallback()

        record = normalize(self.name, raw)
        if record is None:
            return self.fallback()
        return record

    async def _optional(self, request: Awaitable[Any]) -> Optional[Any]:
        """Awaits a secondary request, turning a fetch failure into None."""
        try:
            return await request
        except FetchError as e:
            logger.warning(f"{self.name} secondary fetch failed: {e}")
            return None

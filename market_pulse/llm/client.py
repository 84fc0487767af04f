"""
LLM Client for Market Pulse commentary.

Talks to an OpenAI-compatible chat completion endpoint (Groq by default). Calls
are single-attempt and bounded by a timeout; callers fall back to deterministic
text on ``LLMError``.
"""
import asyncio
from typing import Optional

import httpx
from openai import OpenAI, OpenAIError

from market_pulse.config.settings import settings
from market_pulse.utils.logging import get_logger

logger = get_logger(__name__)


class LLMError(Exception):
    """Raised when the language model cannot produce a usable response."""


class LLMClient:
    """
    A client for the language model used for the market story and news.
    """
    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """
        Initializes the LLMClient.

        Args:
            api_key: The API key. Can also be set via the GROQ_API_KEY env var.
            model: Model name, defaults to ``settings.llm.DEFAULT_MODEL``.
        """
        self.api_key = api_key or settings.GROQ_API_KEY
        if not self.api_key:
            raise ValueError("GROQ_API_KEY environment variable not set.")

        timeout = settings.llm.TIMEOUT_SECONDS
        http_client = httpx.Client(
            timeout=timeout,
            limits=httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
                keepalive_expiry=30.0,
            ),
        )

        self.client = OpenAI(
            base_url=settings.llm.BASE_URL,
            api_key=self.api_key,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )
        self.default_model = model or settings.llm.DEFAULT_MODEL
        self.last_usage = None

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 300,
        model: Optional[str] = None,
    ) -> str:
        """
        Generates a response from the configured language model.

        Args:
            prompt: The user-level prompt.
            system_prompt: Optional system-level prompt.
            temperature: Sampling temperature.
            max_tokens: Completion token cap.
            model: Model override.

        Returns:
            The trimmed textual response.

        Raises:
            LLMError: On transport, API or empty-response failure.
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        model = model or self.default_model
        try:
            chat_completion = await asyncio.to_thread(
                self.client.chat.completions.create,
                messages=messages,
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except (OpenAIError, httpx.HTTPError) as e:
            raise LLMError(f"{model} request failed: {e}") from e

        if not chat_completion.choices:
            raise LLMError(f"{model} returned no choices")
        content = chat_completion.choices[0].message.content
        if not content or not content.strip():
            raise LLMError(f"{model} returned an empty response")

        self.last_usage = chat_completion.usage
        logger.debug(f"LLM {model} responded with {len(content)} chars")
        return content.strip()


def create_llm_client(enabled: bool = True) -> Optional[LLMClient]:
    """
    Builds the client when commentary is enabled and a key is configured.

    Returns:
        LLMClient, or None so callers use their deterministic fallback.
    """
    if not enabled:
        return None
    if not settings.GROQ_API_KEY:
        logger.info("GROQ_API_KEY not set, using template commentary")
        return None
    return LLMClient()

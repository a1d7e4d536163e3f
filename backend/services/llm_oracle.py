# backend/services/llm_oracle.py
"""
LLM Oracle

Async wrapper around OpenAI chat completions. Every call carries its whole
context (system instruction + user message); the client keeps no
conversation state, so one instance is shared by all requests.
"""

import asyncio
import logging
import random
from typing import Optional

from openai import AsyncOpenAI, RateLimitError

from config import Settings
from errors import ConfigurationError

logger = logging.getLogger(__name__)


class LLMOracleError(Exception):
    """The model call failed or returned nothing usable."""


class LLMOracle:
    """
    Text-completion client used for resume Q&A and search.

    Rate-limit errors are retried with exponential backoff; any other error
    is raised to the caller as LLMOracleError.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        temperature: float = 0.1,
        max_retries: int = 5,
        client: Optional[AsyncOpenAI] = None,
    ):
        if not api_key and client is None:
            raise ConfigurationError("OPENAI_API_KEY is not configured.")

        # SDK retries are off; rate limits are handled below
        self.client = client or AsyncOpenAI(api_key=api_key, max_retries=0)
        self.model = model
        self.temperature = temperature
        self.max_retries = max_retries

        logger.info(f"LLMOracle initialized with model {self.model}")

    async def complete(self, system: str, user: str, json_mode: bool = False) -> str:
        """
        Run one chat completion.

        Args:
            system: System instruction (role and grounding rules)
            user: The user's message
            json_mode: Ask the model for a JSON object response

        Returns:
            The completion text, as returned by the model

        Raises:
            LLMOracleError: On API failure or an empty completion
        """
        kwargs = {
            "model": self.model,
            "temperature": self.temperature,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self._create_with_backoff(**kwargs)

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise LLMOracleError(f"Malformed completion response: {e}") from e
        if content is None:
            raise LLMOracleError("Model returned an empty completion")
        return content

    async def _create_with_backoff(self, **kwargs):
        """Retries calls with exponential backoff to avoid 429 rate-limit errors."""
        for attempt in range(self.max_retries):
            try:
                return await self.client.chat.completions.create(**kwargs)
            except RateLimitError:
                wait = min(20, 2 ** attempt) + random.random()
                logger.warning(f"Rate limit hit. Retrying in {wait:.1f}s...")
                await asyncio.sleep(wait)
            except Exception as e:
                raise LLMOracleError(f"OpenAI request failed: {e}") from e

        # Final attempt
        try:
            return await self.client.chat.completions.create(**kwargs)
        except Exception as e:
            raise LLMOracleError(f"OpenAI request failed: {e}") from e


def build_oracle(settings: Settings) -> LLMOracle:
    """Construct the shared oracle from settings (fails fast without a key)."""
    if not settings.openai_api_key:
        raise ConfigurationError("OPENAI_API_KEY is not configured.")
    return LLMOracle(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        temperature=settings.openai_temperature,
        max_retries=settings.oracle_max_retries,
    )

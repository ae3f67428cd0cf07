"""
Model Client - text in, text out

Architecture:
- Contract: ModelClient protocol, `await generate(prompt) -> raw text`
- Default backend: Gemini 2.5 Flash via the Google Gen AI Python SDK
  (google-genai), async surface (`client.aio`)
- Timeout: asyncio.wait_for bounded by settings.MODEL_TIMEOUT_SECONDS
- Retries: none here; a failed call raises ModelCallFailed

No parsing or business logic lives in this module. Anything that accepts a
prompt string and returns the model's raw text satisfies the contract, so
tests and alternative vendors can be swapped in freely.
"""

import asyncio
import logging
from typing import Optional, Protocol

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from bfflix.config import settings
from bfflix.errors import ModelCallFailed
from bfflix.utils.logging import preview

logger = logging.getLogger(__name__)


class ModelClient(Protocol):
    """A component that accepts a prompt string and returns raw text."""

    async def generate(self, prompt: str) -> str:
        ...


def _response_text(response) -> Optional[str]:
    """
    Pull the text out of a Gemini response.

    The response.text property can be None even when parts carry text, so
    parts are checked first.
    """
    if response.candidates:
        candidate = response.candidates[0]
        if candidate.content and candidate.content.parts:
            for part in candidate.content.parts:
                if getattr(part, "text", None):
                    return part.text
    return response.text


class GeminiModelClient:
    """
    Gemini-backed ModelClient.

    The underlying SDK client is created lazily on first use so that the app
    can start (and tests can import this module) without an API key.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GOOGLE_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.temperature = temperature if temperature is not None else settings.GEMINI_TEMPERATURE
        self.timeout_seconds = timeout_seconds or settings.MODEL_TIMEOUT_SECONDS
        self._client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        if self._client is not None:
            return self._client

        if not self.api_key:
            logger.error(
                "GOOGLE_API_KEY not configured. Recommendation service will not work. "
                "Please set GOOGLE_API_KEY in your .env file."
            )
            raise ModelCallFailed("Gemini API key is not configured")

        try:
            self._client = genai.Client(api_key=self.api_key)
        except Exception as e:
            logger.error(f"Failed to initialize Gemini client: {e}")
            raise ModelCallFailed("Gemini client could not be initialized") from e

        logger.info(f"Gemini client initialized successfully (model={self.model})")
        return self._client

    async def generate(self, prompt: str) -> str:
        """
        Send one prompt to Gemini and return the raw response text.

        Raises:
            ModelCallFailed: on missing configuration, timeout, API error,
                transport error, or an empty response
        """
        client = self._get_client()
        config = types.GenerateContentConfig(temperature=self.temperature)

        logger.info(f"Calling Gemini API (model={self.model}, timeout={self.timeout_seconds}s)")
        try:
            response = await asyncio.wait_for(
                client.aio.models.generate_content(
                    model=self.model,
                    contents=prompt,
                    config=config,
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Gemini call timed out after {self.timeout_seconds}s")
            raise ModelCallFailed("Gemini call timed out") from e
        except genai_errors.APIError as e:
            logger.error(f"Gemini API error: code={e.code}")
            raise ModelCallFailed(f"Gemini API error {e.code}") from e
        except Exception as e:
            logger.error(f"Error calling Gemini API: {e}")
            raise ModelCallFailed("Gemini call failed") from e

        text = _response_text(response)
        if not text:
            logger.error("Empty text in Gemini response")
            raise ModelCallFailed("Empty response from Gemini")

        logger.debug(f"Gemini raw response: {preview(text)}")
        return text


# Shared across requests (lazy initialization)
_model_client: Optional[GeminiModelClient] = None


def get_model_client() -> GeminiModelClient:
    """Return the process-wide Gemini model client."""
    global _model_client

    if _model_client is None:
        _model_client = GeminiModelClient()

    return _model_client

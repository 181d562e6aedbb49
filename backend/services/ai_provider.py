"""
AI provider abstraction for the generation passthrough.

One request, one response, no streaming. Gemini is called over its REST API
with httpx; Anthropic and OpenAI through their SDKs. Every failure is
raised as UpstreamError with a message safe to show the user.
"""

from __future__ import annotations

import logging

import anthropic
import httpx
import openai

from backend.config import settings
from backend.services.prompt_builder import build_generation_prompt
from engine.editor.types import UpstreamError

logger = logging.getLogger(__name__)


class MissingCredentialError(UpstreamError):
    """The server has no API key for the configured provider."""


class AIProvider:
    """Unified interface for the text-generation providers (Gemini, Anthropic, OpenAI)."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """
        Args:
            transport: Optional httpx transport for the Gemini REST calls (tests)
        """
        self.transport = transport

    async def generate(self, prompt: str) -> str:
        """
        Generate code for a user prompt with the configured provider.

        Args:
            prompt: The user's request (non-blank)

        Returns:
            Generated text

        Raises:
            MissingCredentialError: If the provider's API key is not set
            UpstreamError: On any transport or upstream failure
        """
        full_prompt = build_generation_prompt(prompt)
        provider = settings.GENERATION_PROVIDER

        if provider == "gemini":
            return await self.call_gemini(full_prompt)
        if provider == "anthropic":
            return await self.call_claude(full_prompt)
        if provider == "openai":
            return await self.call_gpt(full_prompt)
        raise UpstreamError(f"Unknown generation provider: {provider}")

    async def call_gemini(self, text: str) -> str:
        """
        Call the Gemini generateContent REST endpoint.

        Args:
            text: Full prompt text (single user turn)

        Returns:
            Concatenated text parts of the first candidate
        """
        if not settings.GEMINI_API_KEY:
            raise MissingCredentialError("Missing Gemini API key in environment")

        url = f"{settings.GEMINI_URL}/models/{settings.GEMINI_MODEL}:generateContent"
        payload = {"contents": [{"role": "user", "parts": [{"text": text}]}]}

        try:
            async with httpx.AsyncClient(
                transport=self.transport,
                timeout=settings.GENERATION_TIMEOUT_SECONDS,
            ) as client:
                response = await client.post(
                    url,
                    json=payload,
                    headers={"x-goog-api-key": settings.GEMINI_API_KEY},
                )
        except httpx.HTTPError as e:
            logger.warning("Gemini request failed: %s", e)
            raise UpstreamError("Could not reach the Gemini API.") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.warning("Gemini returned non-JSON (status %d)", response.status_code)
            raise UpstreamError("Gemini returned an invalid response.") from e

        if response.status_code >= 400:
            message = _gemini_error_message(data) or f"Gemini API error ({response.status_code})"
            logger.warning("Gemini API error %d: %s", response.status_code, message)
            raise UpstreamError(message)

        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not candidates:
            raise UpstreamError("Gemini returned an empty response.")
        parts = (candidates[0].get("content") or {}).get("parts") or []
        output = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not output.strip():
            raise UpstreamError("Gemini returned an empty response.")
        return output

    async def call_claude(self, text: str) -> str:
        """Call the Anthropic Messages API (non-streaming)."""
        if not settings.ANTHROPIC_API_KEY:
            raise MissingCredentialError("Missing Anthropic API key in environment")

        client = anthropic.AsyncAnthropic(
            api_key=settings.ANTHROPIC_API_KEY,
            timeout=settings.GENERATION_TIMEOUT_SECONDS,
            max_retries=0,
        )
        try:
            message = await client.messages.create(
                model=settings.ANTHROPIC_MODEL,
                max_tokens=settings.GENERATION_MAX_TOKENS,
                messages=[{"role": "user", "content": text}],
            )
        except anthropic.APIError as e:
            logger.warning("Claude API error: %s", e)
            raise UpstreamError(f"Anthropic API error: {e.message}") from e

        output = "".join(block.text for block in message.content if block.type == "text")
        if not output.strip():
            raise UpstreamError("Anthropic returned an empty response.")
        return output

    async def call_gpt(self, text: str) -> str:
        """Call the OpenAI chat completions API."""
        if not settings.OPENAI_API_KEY:
            raise MissingCredentialError("Missing OpenAI API key in environment")

        client = openai.AsyncOpenAI(
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.GENERATION_TIMEOUT_SECONDS,
            max_retries=0,
        )
        try:
            response = await client.chat.completions.create(
                model=settings.OPENAI_MODEL,
                messages=[{"role": "user", "content": text}],
                max_tokens=settings.GENERATION_MAX_TOKENS,
            )
        except openai.OpenAIError as e:
            logger.warning("OpenAI API error: %s", e)
            raise UpstreamError(f"OpenAI API error: {e}") from e

        output = response.choices[0].message.content if response.choices else None
        if not output or not output.strip():
            raise UpstreamError("OpenAI returned an empty response.")
        return output


def _gemini_error_message(data: object) -> str | None:
    """Pull `error.message` out of a Gemini error body."""
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return None


# Singleton instance
ai_provider = AIProvider()

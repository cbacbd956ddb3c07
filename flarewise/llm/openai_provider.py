"""
OpenAI-compatible chat completions providers (OpenAI, Groq).
"""

import httpx
import logging
import time
from typing import Optional, List, Dict, Any

from ..core.logging_config import truncate_large_data
from ..insights.errors import TransportError
from .base import LLMProvider, LLMMessage, LLMResponse

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """
    Provider for any endpoint that speaks the OpenAI chat/completions format.
    """

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        default_temperature: float = 0.3,
        default_max_tokens: int = 2048,
        timeout: float = 60.0,
    ):
        super().__init__(api_key, model, base_url, default_temperature, default_max_tokens)
        self.timeout = timeout

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _build_payload(
        self,
        messages: List[LLMMessage],
        temperature: Optional[float],
        max_tokens: Optional[int],
        model: Optional[str],
    ) -> Dict[str, Any]:
        return {
            "model": model or self.model,
            "messages": self._format_messages(messages),
            "temperature": self.default_temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.default_max_tokens,
        }

    def _parse_response(self, data: Dict[str, Any]) -> LLMResponse:
        """Pull the first choice's text out of a completions body."""
        choices = data.get("choices") or []
        if not choices:
            raise TransportError(f"{self.name} returned no choices")
        message = choices[0].get("message") or {}
        return LLMResponse(
            content=message.get("content") or "",
            model=data.get("model", self.model),
            usage=data.get("usage") or {},
            raw=data,
        )

    async def chat_completion(
        self,
        messages: List[LLMMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """
        POST to {base_url}/chat/completions and return the first choice.

        Raises:
            httpx.HTTPError: On transport failures and non-2xx responses
            TransportError: When the body carries no choices
        """
        start_time = time.time()
        payload = self._build_payload(messages, temperature, max_tokens, kwargs.get("model"))

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"LLM API call starting: provider={self.name}, model={payload['model']}, "
                f"temperature={payload['temperature']}, {len(messages)} messages"
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=self._get_headers(),
                )
                resp.raise_for_status()
                result = self._parse_response(resp.json())
        except (httpx.HTTPError, TransportError) as e:
            status_code = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
            logger.error(
                f"LLM API call failed: {self.name}: {e}",
                exc_info=True,
                extra={"extra_fields": {
                    "provider": self.name,
                    "model": payload["model"],
                    "status_code": status_code,
                    "duration_ms": round((time.time() - start_time) * 1000, 2),
                }}
            )
            raise

        logger.info(
            "LLM API call completed",
            extra={"extra_fields": {
                "provider": self.name,
                "model": result.model,
                "prompt_tokens": result.usage.get("prompt_tokens", 0),
                "completion_tokens": result.usage.get("completion_tokens", 0),
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            }}
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"LLM response text: {truncate_large_data(result.content, 500)}")
        return result


class GroqProvider(OpenAIProvider):
    """Groq's OpenAI-compatible endpoint."""

    name = "groq"

    def __init__(
        self,
        api_key: str,
        model: str = "llama3-70b-8192",
        base_url: str = "https://api.groq.com/openai/v1",
        **kwargs
    ):
        super().__init__(api_key, model=model, base_url=base_url, **kwargs)

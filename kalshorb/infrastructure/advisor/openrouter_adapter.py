"""
Adapter: OpenRouter chat-completion API.

Implements the ChatCompletionPort. Every failure mode (missing key,
transport error, timeout, non-2xx status, malformed payload) is
raised as UpstreamCompletionError so the use cases can fall back to
templated replies.
"""

import logging
from typing import Any, Optional

import httpx

from kalshorb.domain.advisor.entities import ConversationTurn
from kalshorb.domain.advisor.errors import UpstreamCompletionError
from kalshorb.domain.advisor.ports import ChatCompletionPort

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterAdapter(ChatCompletionPort):
    """Chat completions through OpenRouter's OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "mistralai/mistral-7b-instruct",
        base_url: str = OPENROUTER_BASE_URL,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        referer: str = "",
        title: str = "Kalshorb AI Advisor",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._url = base_url.rstrip("/") + "/chat/completions"
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._referer = referer
        self._title = title
        self._timeout = timeout
        self._transport = transport

        if self._api_key:
            logger.info("OpenRouter initialized: model=%s", self._model)

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "X-Title": self._title,
        }
        if self._referer:
            headers["HTTP-Referer"] = self._referer
        return headers

    async def complete(
        self,
        system_prompt: str,
        turns: list[ConversationTurn],
        max_tokens: Optional[int] = None,
        top_p: Optional[float] = None,
    ) -> str:
        """Return the first choice's message content.

        Args:
            system_prompt: System-role instruction.
            turns: Conversation turns, oldest first.
            max_tokens: Overrides the configured completion budget.
            top_p: Nucleus sampling value; omitted from the request when None.

        Returns:
            The reply text, or an empty string if the model returned none.

        Raises:
            UpstreamCompletionError: On any failure.
        """
        if not self._api_key:
            raise UpstreamCompletionError("OpenRouter API key not configured")

        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "system", "content": system_prompt}]
            + [{"role": t.role.value, "content": t.content} for t in turns],
            "temperature": self._temperature,
            "max_tokens": max_tokens or self._max_tokens,
        }
        if top_p is not None:
            payload["top_p"] = top_p

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self._url, headers=self._headers(), json=payload
                )
        except httpx.HTTPError as exc:
            raise UpstreamCompletionError(f"{type(exc).__name__}: {exc}") from exc

        if response.is_error:
            logger.error("OpenRouter API error: HTTP %d", response.status_code)
            raise UpstreamCompletionError(
                f"HTTP {response.status_code}", status_code=response.status_code
            )

        try:
            result = response.json()
            content = result["choices"][0]["message"].get("content")
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as exc:
            raise UpstreamCompletionError("malformed completion payload") from exc

        return content or ""

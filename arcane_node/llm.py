"""LLM client — HTTP connection to a text-completion backend.

The forge takes an LLM callable matching the protocol:

    async def __call__(self, stage: str, prompt: str) -> str: ...

`stage` names the forge template being run ("hero", "landmark", "guild"...).
Implementations may use it for logging or routing.

HttpLLM talks to KoboldCpp or an OpenAI-compatible completions endpoint and
is built from the "llm_connection" settings group. Tests pass an AsyncMock.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Protocol

import httpx

logger = logging.getLogger(__name__)


class LLM(Protocol):
    async def __call__(self, stage: str, prompt: str) -> str: ...


ProviderFormat = Literal["koboldcpp", "openai"]


class HttpLLM:
    """Async HTTP client for text-completion backends.

    Supported formats:
      "koboldcpp"  — POST /api/v1/generate  {"prompt", "max_length", "temperature"}
                     Response: {"results": [{"text": "..."}]}
      "openai"     — POST /v1/completions   {"model", "prompt", "max_tokens", "temperature"}
                     Response: {"choices": [{"text": "..."}]}

    Args:
        provider_url:    Base URL of the backend, e.g. "http://localhost:5001".
        api_key:         Bearer token, or empty string if not required.
        provider_format: Wire format to use. Defaults to "koboldcpp".
        model:           Model identifier, used only by the openai format.
        max_tokens:      Completion length limit.
        temperature:     Sampling temperature.
        timeout:         HTTP timeout in seconds. Defaults to 120.
    """

    def __init__(
        self,
        provider_url: str,
        api_key: str = "",
        provider_format: ProviderFormat = "koboldcpp",
        model: str = "",
        max_tokens: int = 1024,
        temperature: float = 0.8,
        timeout: float = 120.0,
    ) -> None:
        if not provider_url:
            raise LLMError("No LLM provider configured — set llm_connection.provider_url in settings")
        self._base_url = provider_url.rstrip("/")
        self._api_key = api_key
        self._format = provider_format
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._timeout = timeout

    @classmethod
    def from_config(cls, connection: dict[str, Any]) -> HttpLLM:
        """Build a client from the "llm_connection" settings group."""
        return cls(
            provider_url=connection.get("provider_url", ""),
            api_key=connection.get("api_key", ""),
            provider_format=connection.get("provider_format", "koboldcpp"),
            model=connection.get("model", ""),
            max_tokens=connection.get("max_tokens", 1024),
            temperature=connection.get("temperature", 0.8),
        )

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def _build_request(self, prompt: str) -> tuple[str, dict]:
        """Return (url, body) for the configured format."""
        if self._format == "openai":
            body: dict = {
                "prompt": prompt,
                "max_tokens": self._max_tokens,
                "temperature": self._temperature,
            }
            if self._model:
                body["model"] = self._model
            return f"{self._base_url}/v1/completions", body

        return f"{self._base_url}/api/v1/generate", {
            "prompt": prompt,
            "max_length": self._max_tokens,
            "temperature": self._temperature,
        }

    def _parse_response(self, data: dict) -> str:
        key = "choices" if self._format == "openai" else "results"
        items = data.get(key)
        if not items or "text" not in items[0]:
            raise LLMError(f"Unexpected response format from {self._format} backend")
        return items[0]["text"]

    async def __call__(self, stage: str, prompt: str) -> str:
        url, body = self._build_request(prompt)
        logger.debug("llm call stage=%s url=%s prompt_len=%d", stage, url, len(prompt))

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(url, json=body, headers=self._headers())
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise LLMError(f"Cannot connect to LLM backend at {self._base_url}") from e
        except httpx.HTTPStatusError as e:
            raise LLMError(
                f"LLM backend returned HTTP {e.response.status_code}"
            ) from e
        except httpx.TimeoutException as e:
            raise LLMError(f"LLM backend timed out after {self._timeout}s") from e

        text = self._parse_response(resp.json())
        logger.debug("llm response stage=%s len=%d", stage, len(text))
        return text


class LLMError(RuntimeError):
    """Raised when the LLM backend is unconfigured, unreachable, or returns an error."""

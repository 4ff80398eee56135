from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from greenquest.config import Config
from greenquest.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

DEPRECATIONS_HELP = (
    "Set the environment variable GROQ_MODEL to a supported model. "
    "See https://console.groq.com/docs/deprecations"
)


class GroqClient:
    """Minimal chat-completions client for Groq's OpenAI-compatible API.

    Every call is bounded by ``timeout`` seconds and is never retried; any
    failure is raised as ``UpstreamUnavailable`` for the route to surface.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        api_url: str = Config.GROQ_API_URL,
        timeout: float = Config.LLM_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_config(cls) -> "GroqClient":
        return cls(api_key=Config.GROQ_API_KEY, model=Config.GROQ_MODEL)

    async def complete(self, prompt: str, *, temperature: float, max_tokens: int) -> str:
        if not self.api_key:
            raise UpstreamUnavailable("Groq API key not configured")
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Groq request failed: %s", exc)
            raise UpstreamUnavailable(
                f"Groq request failed: {exc.__class__.__name__}",
                status_code=502,
                extra={"triedModel": self.model},
            ) from exc

        logger.debug("Groq API response status: %s", response.status_code)
        if not response.is_success:
            self._raise_for_error(response)

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamUnavailable(
                "Groq returned a non-JSON body", status_code=502, extra={"triedModel": self.model}
            ) from exc
        return _message_content(data)

    def _raise_for_error(self, response: httpx.Response) -> None:
        try:
            details: Any = response.json()
        except ValueError:
            details = {}
        logger.error("Groq API error %s: %s", response.status_code, details)
        error = details.get("error") if isinstance(details, dict) else None
        if isinstance(error, dict) and error.get("code") == "model_decommissioned":
            raise UpstreamUnavailable(
                error.get("message") or "Model decommissioned",
                status_code=422,
                code="model_decommissioned",
                extra={"triedModel": self.model, "help": DEPRECATIONS_HELP},
            )
        raise UpstreamUnavailable(
            "Groq API error",
            status_code=response.status_code,
            code="upstream_error",
            extra={"details": details, "triedModel": self.model},
        )


def _message_content(data: Dict[str, Any]) -> str:
    choices = data.get("choices") if isinstance(data, dict) else None
    if not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message") or {}
    return message.get("content") or ""

"""Async client for search-augmented providers speaking the Responses API (xAI, OpenAI)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from market_events.events.exceptions import ProviderError

from .base import EventProvider
from .config import ResponsesConfig
from .models import ProviderResponse

logger = logging.getLogger(__name__)


def extract_message(data: dict[str, Any]) -> tuple[str, list[str]]:
    """Pull the answer text and url citations out of a Responses API body.

    The answer is the first text part of the first ``message`` output item;
    citations are the ``url_citation`` annotations on that part, in the
    order the provider returned them.
    """
    output = data.get("output") or []
    message = next(
        (
            item
            for item in output
            if isinstance(item, dict) and item.get("type") == "message" and item.get("content")
        ),
        None,
    )
    if message is None:
        return "", []

    part = next(
        (p for p in message["content"] if isinstance(p, dict) and p.get("text")),
        None,
    )
    if part is None:
        return "", []

    citations = [
        annotation["url"]
        for annotation in part.get("annotations") or []
        if isinstance(annotation, dict)
        and annotation.get("type") == "url_citation"
        and annotation.get("url")
    ]
    return part["text"], citations


class ResponsesSearchProvider(EventProvider):
    """Provider that researches with built-in web/X search tools and cites its sources."""

    def __init__(
        self,
        name: str,
        model: str,
        api_key: str,
        config: ResponsesConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.name = name
        self.model = model
        self.config = config or ResponsesConfig()
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )
        logger.info(f"Initialized ResponsesSearchProvider ({self.label}, tools={self.config.tools})")

    @property
    def supports_citations(self) -> bool:
        return True

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "input": [
                {"role": "system", "content": self.config.system_prompt},
                {"role": "user", "content": prompt},
            ],
            "tools": [{"type": tool} for tool in self.config.tools],
        }

    async def invoke(self, prompt: str) -> ProviderResponse:
        try:
            response = await self._client.post("/responses", json=self._build_payload(prompt))
        except httpx.TimeoutException as e:
            raise ProviderError(f"{self.name} API request timed out: {e}", reason="timeout") from e
        except httpx.RequestError as e:
            raise ProviderError(f"{self.name} API request failed: {e}", reason="transport") from e

        if response.is_error:
            raise ProviderError(
                f"{self.name} API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                reason="http_error",
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(
                f"{self.name} API returned a non-JSON body",
                status_code=response.status_code,
                reason="invalid_body",
            ) from e

        content, citations = extract_message(data if isinstance(data, dict) else {})
        if not content.strip():
            raise ProviderError(
                f"No content received from {self.name}",
                status_code=response.status_code,
                reason="empty_response",
            )

        logger.info(
            f"{self.label} answered with {len(content)} chars and {len(citations)} citations"
        )
        return ProviderResponse(content=content, citations=citations)

    async def aclose(self) -> None:
        await self._client.aclose()
        logger.info(f"Closed ResponsesSearchProvider ({self.label})")

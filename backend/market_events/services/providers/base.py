"""Common interface for AI providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .models import ProviderResponse


class EventProvider(ABC):
    """One AI backend, chosen once at configuration time.

    Every implementation returns the same ``ProviderResponse`` shape so the
    rest of the pipeline never branches on the provider. Failures surface as
    ``ProviderError``; implementations do not retry.
    """

    name: str
    model: str

    @property
    def supports_citations(self) -> bool:
        return False

    @property
    def label(self) -> str:
        """Provider identity for logs, e.g. ``xai/grok-4-fast``."""
        return f"{self.name}/{self.model}"

    @abstractmethod
    async def invoke(self, prompt: str) -> ProviderResponse:
        """Submit ``prompt`` and return the answer text with its citations."""

    async def aclose(self) -> None:
        """Release network resources."""

    async def __aenter__(self) -> EventProvider:
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: Exception | None,
        exc_tb: Any,
    ) -> None:
        await self.aclose()

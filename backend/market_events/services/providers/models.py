"""Type-safe Pydantic models for provider responses."""

from pydantic import BaseModel, Field


class ProviderResponse(BaseModel):
    """Raw model answer plus the source URLs the provider attributed it to."""

    content: str
    citations: list[str] = Field(default_factory=list)

# src/assistant_relay/config/settings.py
from typing import Literal

from pydantic import BaseModel, Field


class SearchSettings(BaseModel):
    """
    Fixed request configuration for the web search tool. The search service
    is always asked for an advanced-depth search with a synthesized answer
    and without raw page content.
    """

    api_key_name: str = Field(
        default="TAVILY_API_KEY", description="KeyProvider name of the search-service credential."
    )
    endpoint: str = Field(
        default="https://api.tavily.com/search", description="Search-service endpoint (POST)."
    )
    search_depth: Literal["basic", "advanced"] = Field(default="advanced")
    max_results: int = Field(default=5, ge=1, le=20)
    include_answer: bool = Field(default=True)
    include_raw_content: bool = Field(default=False)
    timeout_seconds: float = Field(default=15.0, gt=0)


class ThrottleSettings(BaseModel):
    """
    Partial-persist throttle. A fragment with 0-based index ``i`` triggers a
    partial write when ``i % every_n == 0`` or when ``i < early_window`` and
    ``i % early_every == 0``.
    """

    every_n: int = Field(default=15, ge=1)
    early_window: int = Field(default=8, ge=0)
    early_every: int = Field(default=2, ge=1)

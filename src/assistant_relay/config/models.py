# src/assistant_relay/config/models.py
import logging
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .settings import SearchSettings, ThrottleSettings

logger = logging.getLogger(__name__)

class RelayConfig(BaseModel):
    """
    Configuration value object passed to the SessionController. It is
    validated once at construction; credentials are referenced by name only
    and resolved through a KeyProvider.
    """
    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    assistant_name: str = Field(default="AI Writing Assistant")
    model_name: str = Field(default="gpt-4o")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)

    openai_api_key_name: str = Field(
        default="OPENAI_API_KEY", description="KeyProvider name of the provider credential."
    )
    openai_api_base: Optional[str] = Field(
        default=None, description="Optional base URL for proxies or compatible endpoints."
    )

    search: SearchSettings = Field(default_factory=SearchSettings)
    throttle: ThrottleSettings = Field(default_factory=ThrottleSettings)

    generation_timeout_seconds: Optional[float] = Field(
        default=300.0,
        gt=0,
        description="Upper bound for one generation including tool round trips. None disables the deadline.",
    )
    unknown_tool_policy: Literal["error", "complete"] = Field(
        default="error",
        description=(
            "What to do when a tool-call request contains only unrecognized tools. "
            "'error' cancels the upstream run and surfaces an error in the transcript; "
            "'complete' finalizes the message with whatever text was received."
        ),
    )

    default_log_level: str = Field(default="INFO")

    @field_validator("default_log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        log_level_upper = value.upper()
        if log_level_upper not in valid_levels:
            logger.warning(f"Invalid log_level '{value}' in RelayConfig. Defaulting to INFO.")
            return "INFO"
        return log_level_upper

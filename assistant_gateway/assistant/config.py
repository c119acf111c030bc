"""Assistant workflow configuration with environment variable loading.

Pydantic-based configuration for the OpenAI Assistants client, the run
polling policy and message ordering. Components receive an instance at
construction; only `get_assistant_config` reads the environment.
"""

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file
load_dotenv()


class AssistantConfig(BaseModel):
    """Configuration for the assistant-run workflow.

    Attributes:
        openai_api_key: API key for the OpenAI Assistants API.
        assistant_id: Assistant that runs are started against.
        base_url: API base URL (None for OpenAI default).
        poll_interval: Base delay in seconds between run status checks.
        backoff: Growth strategy for the delay between status checks.
        backoff_step: Seconds added per poll with linear backoff.
        backoff_multiplier: Factor applied per poll with exponential backoff.
        max_poll_interval: Upper bound for any single delay.
        max_wait: Seconds after which waiting for a run gives up.
        poll_retries: Extra attempts for a failed run status read.
        message_order: ``asc`` (oldest first) or ``desc`` (newest first).
        max_concurrent_runs: Cap on runs waited on at once (None = no cap).
        request_timeout: Timeout in seconds for each upstream request.
    """

    model_config = ConfigDict(validate_default=True)

    openai_api_key: str = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", ""),
        description="API key for the OpenAI Assistants API",
    )
    assistant_id: str = Field(
        default_factory=lambda: os.getenv("ASSISTANT_ID", ""),
        description="Assistant identifier used for every run",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("OPENAI_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    poll_interval: float = Field(
        default_factory=lambda: os.getenv("ASSISTANT_POLL_INTERVAL", "1.5"),
        gt=0.0,
        description="Seconds between run status checks",
    )
    backoff: Literal["constant", "linear", "exponential"] = Field(
        default_factory=lambda: os.getenv("ASSISTANT_POLL_BACKOFF", "constant").lower(),
        description="Polling backoff strategy",
    )
    backoff_step: float = Field(
        default_factory=lambda: os.getenv("ASSISTANT_BACKOFF_STEP", "0.5"),
        ge=0.0,
        description="Increment per poll for linear backoff",
    )
    backoff_multiplier: float = Field(
        default_factory=lambda: os.getenv("ASSISTANT_BACKOFF_MULTIPLIER", "2.0"),
        ge=1.0,
        description="Growth factor per poll for exponential backoff",
    )
    max_poll_interval: float = Field(
        default_factory=lambda: os.getenv("ASSISTANT_MAX_POLL_INTERVAL", "10.0"),
        gt=0.0,
        description="Cap on the delay between two status checks",
    )
    max_wait: float = Field(
        default_factory=lambda: os.getenv("ASSISTANT_MAX_WAIT", "120"),
        gt=0.0,
        description="Maximum seconds to wait for a run to finish",
    )
    poll_retries: int = Field(
        default_factory=lambda: os.getenv("ASSISTANT_POLL_RETRIES", "0"),
        ge=0,
        le=10,
        description="Retries for a failed run status read (reads only)",
    )
    message_order: Literal["asc", "desc"] = Field(
        default_factory=lambda: os.getenv("ASSISTANT_MESSAGE_ORDER", "asc").lower(),
        description="Order of messages returned to the caller",
    )
    max_concurrent_runs: int | None = Field(
        default_factory=lambda: os.getenv("ASSISTANT_MAX_CONCURRENT_RUNS") or None,
        ge=1,
        description="Maximum number of runs awaited concurrently",
    )
    request_timeout: float = Field(
        default_factory=lambda: os.getenv("ASSISTANT_REQUEST_TIMEOUT", "30"),
        gt=0.0,
        description="Timeout for each upstream request in seconds",
    )

    @field_validator("openai_api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("OPENAI_API_KEY is required. Set it in .env")
        return v.strip()

    @field_validator("assistant_id")
    @classmethod
    def validate_assistant_id(cls, v: str) -> str:
        """Validate that an assistant identifier is configured."""
        if not v or not v.strip():
            raise ValueError("ASSISTANT_ID is required. Set it in .env")
        return v.strip()


def get_assistant_config() -> AssistantConfig:
    """Create assistant configuration from environment.

    Returns:
        Configured AssistantConfig instance.

    Raises:
        ValueError: If the API key or assistant id is not set.
    """
    return AssistantConfig()

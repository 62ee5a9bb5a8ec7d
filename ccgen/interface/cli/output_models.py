from typing import Literal
from pydantic import BaseModel, Field


class BaseOutput(BaseModel):
    schema_version: int = 1
    command: Literal["generate", "providers", "validate"]
    exit_code: int
    error: str | None = None


class GenerateOutput(BaseOutput):
    command: Literal["generate"] = "generate"
    # On errors before generation the result fields are unknown; omitted via exclude_none.
    mode: str | None = None
    output_path: str | None = None
    provider: str | None = None
    model: str | None = None
    language: str | None = None
    explanation: str | None = None
    cost_usd: float | None = None
    session_id: str | None = None
    num_turns: int | None = None


class ProviderSummary(BaseModel):
    """Summary of a provider for list output."""
    name: str
    description: str
    requires_config: bool = False


class ProviderDetail(BaseModel):
    """Detailed provider info for single provider view."""
    name: str
    description: str
    requires_config: bool = False
    config_keys: list[str] = Field(default_factory=list)
    default_model: str | None = None
    supports_abort: bool = False


class ProvidersOutput(BaseOutput):
    command: Literal["providers"] = "providers"
    providers: list[ProviderSummary] | None = None
    provider: ProviderDetail | None = None


class ValidateOutput(BaseOutput):
    """Output for validate command."""

    command: Literal["validate"] = "validate"
    mode: str | None = None
    passed: bool = False

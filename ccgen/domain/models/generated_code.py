"""Generation result models."""

from pydantic import BaseModel, ConfigDict


class ParsedResponse(BaseModel):
    """Code and explanation extracted from a raw model response."""

    model_config = ConfigDict(frozen=True)

    content: str
    language: str
    explanation: str | None = None


class GeneratedCode(BaseModel):
    """Result of one successful generation, handed to the code writer.

    cost_usd, session_id and num_turns are only reported by the agent SDK.
    """

    model_config = ConfigDict(frozen=True)

    content: str
    language: str
    explanation: str | None = None
    provider_name: str
    model_name: str
    cost_usd: float | None = None
    session_id: str | None = None
    num_turns: int | None = None

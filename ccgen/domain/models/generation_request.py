"""Per-invocation generation request."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class GenerationRequest(BaseModel):
    """What to generate and where the result goes.

    model, max_tokens and max_turns are optional; each provider applies its
    own default when they are unset.
    """

    model_config = ConfigDict(frozen=True)

    prompt: str
    output_path: Path
    model: str | None = None
    max_tokens: int | None = Field(default=None, ge=1)
    max_turns: int | None = Field(default=None, ge=1)

"""Generation settings model.

Settings are merged from defaults, user and project YAML files, environment
variables and CLI options, then validated here.

Config file structure (.ccgen/config.yml):
    prompt: Create a TypeScript function that prints Hello World
    output_file: generated/hello.ts
    model: claude-3-5-haiku-latest
    max_tokens: 2000
    max_turns: 3
"""

from pydantic import BaseModel, ConfigDict, Field


class GenerationSettings(BaseModel):
    """Validated generation settings."""

    model_config = ConfigDict(extra="forbid")

    prompt: str = Field(min_length=1)
    output_file: str = Field(min_length=1)
    model: str | None = None
    max_tokens: int = Field(default=2000, ge=1)
    max_turns: int = Field(default=3, ge=1)

"""Resolved provider configuration.

The model itself does not enforce which credentials a mode needs. That is the
job of the config resolver and, again, of the provider factory.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProviderMode(str, Enum):
    """Mutually exclusive backend selection for one run."""

    OFFICIAL = "official"
    DIRECT = "direct"
    BEDROCK = "bedrock"


class GatewayCredentials(BaseModel):
    """Connection details for the AWS Bedrock gateway."""

    model_config = ConfigDict(frozen=True)

    region: str
    model: str
    bearer_token: str | None = Field(default=None, repr=False)


class ProviderConfig(BaseModel):
    """Immutable provider selection plus the credentials it carries."""

    model_config = ConfigDict(frozen=True)

    mode: ProviderMode
    api_key: str | None = Field(default=None, repr=False)
    gateway: GatewayCredentials | None = None

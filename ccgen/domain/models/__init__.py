"""Domain models for ccgen."""

from .provider_config import GatewayCredentials, ProviderConfig, ProviderMode
from .generation_request import GenerationRequest
from .generated_code import GeneratedCode, ParsedResponse


__all__ = [
    "GatewayCredentials",
    "ProviderConfig",
    "ProviderMode",
    "GenerationRequest",
    "GeneratedCode",
    "ParsedResponse",
]

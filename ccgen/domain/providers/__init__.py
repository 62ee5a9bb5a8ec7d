from .code_provider import CodeProvider
from .provider_factory import ProviderFactory
from .official_agent_provider import OfficialAgentProvider
from .direct_api_provider import DirectApiProvider
from .managed_gateway_provider import ManagedGatewayProvider

__all__ = [
    "CodeProvider",
    "ProviderFactory",
    "OfficialAgentProvider",
    "DirectApiProvider",
    "ManagedGatewayProvider",
]

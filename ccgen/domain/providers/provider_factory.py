from typing import Any

from ccgen.domain.errors import ConfigError
from ccgen.domain.models.provider_config import ProviderConfig, ProviderMode
from .code_provider import CodeProvider
from .direct_api_provider import DirectApiProvider
from .managed_gateway_provider import ManagedGatewayProvider
from .official_agent_provider import OfficialAgentProvider


class ProviderFactory:
    """Factory for creating the code provider of a resolved config (Factory pattern).

    The mode-to-class mapping is fixed. Provider construction is where the
    credentials of a mode are enforced, so create() checks them again even
    though the config resolver already did.
    """

    _providers: dict[ProviderMode, type[CodeProvider]] = {
        ProviderMode.OFFICIAL: OfficialAgentProvider,
        ProviderMode.DIRECT: DirectApiProvider,
        ProviderMode.BEDROCK: ManagedGatewayProvider,
    }

    @classmethod
    def create(cls, config: ProviderConfig) -> CodeProvider:
        """
        Create the provider for config.mode.

        Args:
            config: Resolved provider configuration

        Returns:
            Instantiated CodeProvider holding only the credentials its mode needs

        Raises:
            ConfigError: If the mode's credentials are missing from config
        """
        if config.mode == ProviderMode.OFFICIAL:
            return OfficialAgentProvider()

        if config.mode == ProviderMode.BEDROCK:
            if config.gateway is None:
                raise ConfigError("Bedrock mode requires gateway credentials (region and model)")
            return ManagedGatewayProvider(config.gateway)

        if not config.api_key:
            raise ConfigError("Direct API mode requires an Anthropic API key")
        return DirectApiProvider(config.api_key)

    @classmethod
    def list_providers(cls) -> list[str]:
        """
        Get list of provider mode keys.

        Returns:
            List of mode identifiers
        """
        return [mode.value for mode in cls._providers]

    @classmethod
    def get_all_metadata(cls) -> list[dict[str, Any]]:
        """
        Get metadata for all providers.

        Returns:
            List of metadata dicts from each provider
        """
        return [provider_class.get_metadata() for provider_class in cls._providers.values()]

    @classmethod
    def get_metadata(cls, provider_key: str) -> dict[str, Any] | None:
        """
        Get metadata for a specific provider.

        Args:
            provider_key: Mode identifier (e.g., "official", "direct", "bedrock")

        Returns:
            Metadata dict if found, None otherwise
        """
        try:
            mode = ProviderMode(provider_key)
        except ValueError:
            return None
        return cls._providers[mode].get_metadata()

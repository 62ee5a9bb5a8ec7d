import asyncio
from abc import ABC, abstractmethod
from typing import Any

from ccgen.domain.models.generated_code import GeneratedCode
from ccgen.domain.models.generation_request import GenerationRequest


class CodeProvider(ABC):
    """Abstract interface for code generation backends (Strategy pattern)."""

    @classmethod
    def get_metadata(cls) -> dict[str, Any]:
        """Return provider metadata for discovery commands.

        Returns:
            dict with keys: name, description, requires_config, config_keys,
                           default_model, supports_system_prompt, supports_abort
        """
        return {
            "name": "unknown",
            "description": "No description available",
            "requires_config": False,
            "config_keys": [],
            "default_model": None,
            "supports_system_prompt": False,
            "supports_abort": False,
        }

    @abstractmethod
    def validate(self) -> None:
        """Verify the provider is usable before a generation starts.

        Raises:
            ProviderError: If the provider is misconfigured or its SDK/CLI is missing
        """
        ...

    @abstractmethod
    async def generate_code(
        self,
        request: GenerationRequest,
        *,
        abort: asyncio.Event | None = None,
    ) -> GeneratedCode:
        """Generate code for the request.

        Args:
            request: Prompt, output path and optional model/token/turn bounds
            abort: Optional event; providers that support it stop as soon as it is set

        Returns:
            GeneratedCode with parsed content and provider metadata

        Raises:
            ProviderError: If the backend call fails or returns an unusable response
        """
        ...

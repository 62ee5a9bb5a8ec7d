"""GenerationService - runs one code generation end to end.

Creates the provider for a resolved config, awaits its result and hands it to
the code writer.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from ccgen.application.code_writer import write_generated_code
from ccgen.domain.models.generated_code import GeneratedCode
from ccgen.domain.models.generation_request import GenerationRequest
from ccgen.domain.models.provider_config import ProviderConfig
from ccgen.domain.providers.provider_factory import ProviderFactory

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Generated code plus where it was written."""

    code: GeneratedCode
    output_path: Path


class GenerationService:
    """Service for executing a single generation.

    Centralizes:
    - Provider creation via factory
    - Abort wiring for providers that support it
    - Writing the result file
    """

    def __init__(self, provider_config: ProviderConfig) -> None:
        self._config = provider_config
        self._provider = ProviderFactory.create(provider_config)

    def execute(self, request: GenerationRequest, *, timeout: float | None = None) -> GenerationResult:
        """Run the generation synchronously.

        Args:
            request: Generation request
            timeout: Seconds before the session is aborted (agent provider only)

        Returns:
            GenerationResult with the generated code and written path

        Raises:
            ProviderError: If generation fails
            CodeWriteError: If the file cannot be written
        """
        return asyncio.run(self.run(request, timeout=timeout))

    async def run(self, request: GenerationRequest, *, timeout: float | None = None) -> GenerationResult:
        """Async implementation of execute()."""
        abort: asyncio.Event | None = None
        handle = None

        if timeout is not None:
            if self._provider.get_metadata().get("supports_abort"):
                abort = asyncio.Event()
                handle = asyncio.get_running_loop().call_later(timeout, abort.set)
            else:
                logger.warning(f"Timeout is ignored by the {self._config.mode.value} provider")

        try:
            code = await self._provider.generate_code(request, abort=abort)
        finally:
            if handle is not None:
                handle.cancel()

        output_path = write_generated_code(code, request.output_path, self._config.mode)

        logger.info(f"Code generation complete: {output_path}")
        logger.info(f"Provider: {code.provider_name}")
        if code.explanation:
            logger.info(f"Description: {code.explanation}")

        return GenerationResult(code=code, output_path=output_path)

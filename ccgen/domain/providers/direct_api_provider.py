"""Direct Anthropic API provider.

Sends one Messages API request with the system prompt in its own field and
the request template as the single user message.
"""

import asyncio
import logging
from typing import Any

import anthropic

from ccgen.domain.errors import ProviderError, UnexpectedResponseFormat
from ccgen.domain.models.generated_code import GeneratedCode
from ccgen.domain.models.generation_request import GenerationRequest
from ccgen.domain.prompt_builder import PromptBuilder
from ccgen.domain.providers.code_provider import CodeProvider
from ccgen.domain.response_parser import parse_response

logger = logging.getLogger(__name__)

PROVIDER_NAME = "Anthropic Direct API"
DEFAULT_MODEL = "claude-3-haiku-20240307"
DEFAULT_MAX_TOKENS = 2000


class DirectApiProvider(CodeProvider):
    """Code provider calling the Anthropic Messages API with an API key."""

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    @classmethod
    def get_metadata(cls) -> dict[str, Any]:
        """Return provider metadata."""
        return {
            "name": "direct",
            "description": "Anthropic Messages API with an API key",
            "requires_config": True,
            "config_keys": ["ANTHROPIC_API_KEY"],
            "default_model": DEFAULT_MODEL,
            "supports_system_prompt": True,
            "supports_abort": False,
        }

    def validate(self) -> None:
        """Verify an API key is configured.

        Raises:
            ProviderError: If the API key is empty
        """
        if not self._api_key:
            raise ProviderError("ANTHROPIC_API_KEY is not set")

    async def generate_code(
        self,
        request: GenerationRequest,
        *,
        abort: asyncio.Event | None = None,
    ) -> GeneratedCode:
        """Generate code with a single Messages API call.

        abort is accepted for interface compatibility and ignored; the SDK's
        own timeout bounds the call.

        Raises:
            UnexpectedResponseFormat: If the first content block is not text
            ProviderError: If the API call fails
        """
        logger.info("Starting code generation with the Anthropic Direct API")

        model = request.model or DEFAULT_MODEL

        try:
            async with anthropic.AsyncAnthropic(api_key=self._api_key) as client:
                response = await client.messages.create(
                    model=model,
                    max_tokens=request.max_tokens or DEFAULT_MAX_TOKENS,
                    system=PromptBuilder.default_system_prompt(),
                    messages=[
                        {
                            "role": "user",
                            "content": PromptBuilder.request_prompt(request.prompt),
                        }
                    ],
                )
        except anthropic.APIError as e:
            raise ProviderError(f"Anthropic API request failed: {e}") from e

        if not response.content or response.content[0].type != "text":
            raise UnexpectedResponseFormat("Unexpected response format from the Anthropic API")

        parsed = parse_response(response.content[0].text)

        return GeneratedCode(
            content=parsed.content,
            language=parsed.language,
            explanation=parsed.explanation,
            provider_name=PROVIDER_NAME,
            model_name=model,
        )

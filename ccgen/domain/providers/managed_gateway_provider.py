"""AWS Bedrock gateway provider.

Invokes an Anthropic model hosted on Bedrock with the Messages request
envelope and reads content[0].text from the JSON response body.
"""

import asyncio
import json
import logging
from typing import Any

import boto3
from botocore import UNSIGNED
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ccgen.domain.errors import EmptyResponseError, ProviderError, UnexpectedResponseFormat
from ccgen.domain.models.generated_code import GeneratedCode
from ccgen.domain.models.generation_request import GenerationRequest
from ccgen.domain.models.provider_config import GatewayCredentials
from ccgen.domain.prompt_builder import PromptBuilder
from ccgen.domain.providers.code_provider import CodeProvider
from ccgen.domain.response_parser import parse_response

logger = logging.getLogger(__name__)

PROVIDER_NAME = "AWS Bedrock"
ANTHROPIC_VERSION = "bedrock-2023-05-31"
DEFAULT_MAX_TOKENS = 2000


def build_request_body(prompt: str, *, max_tokens: int) -> dict[str, Any]:
    """Build the Bedrock Messages envelope for one user prompt."""
    return {
        "anthropic_version": ANTHROPIC_VERSION,
        "max_tokens": max_tokens,
        "system": PromptBuilder.default_system_prompt(),
        "messages": [
            {
                "role": "user",
                "content": PromptBuilder.request_prompt(prompt),
            }
        ],
    }


def extract_response_text(raw_body: bytes | None) -> str:
    """Decode a Bedrock response body and return content[0].text.

    Raises:
        EmptyResponseError: If the body is missing or empty
        UnexpectedResponseFormat: If the body is not JSON or lacks content[0].text
    """
    if not raw_body:
        raise EmptyResponseError("Empty response body from AWS Bedrock")

    try:
        payload = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise UnexpectedResponseFormat(f"AWS Bedrock response is not valid JSON: {e}") from e

    content = payload.get("content") if isinstance(payload, dict) else None
    if not content or not isinstance(content, list) or not isinstance(content[0], dict):
        raise UnexpectedResponseFormat("Unexpected AWS Bedrock response format")

    text = content[0].get("text")
    if not text or not isinstance(text, str):
        raise UnexpectedResponseFormat("Unexpected AWS Bedrock response format")

    return text


class ManagedGatewayProvider(CodeProvider):
    """Code provider calling Anthropic models through AWS Bedrock.

    With a bearer token the requests are sent unsigned and carry an
    Authorization: Bearer header. Without one, boto3's default credential
    chain signs them.
    """

    def __init__(self, credentials: GatewayCredentials) -> None:
        self._credentials = credentials
        self._client = self._create_client(credentials)

    @staticmethod
    def _create_client(credentials: GatewayCredentials):
        if not credentials.bearer_token:
            return boto3.client("bedrock-runtime", region_name=credentials.region)

        client = boto3.client(
            "bedrock-runtime",
            region_name=credentials.region,
            config=Config(signature_version=UNSIGNED),
        )
        token = credentials.bearer_token

        def add_bearer_header(request, **kwargs) -> None:
            request.headers["Authorization"] = f"Bearer {token}"

        client.meta.events.register("before-send.bedrock-runtime.InvokeModel", add_bearer_header)
        return client

    @classmethod
    def get_metadata(cls) -> dict[str, Any]:
        """Return provider metadata."""
        return {
            "name": "bedrock",
            "description": "Anthropic models on AWS Bedrock",
            "requires_config": True,
            "config_keys": ["AWS_REGION", "ANTHROPIC_MODEL", "AWS_BEARER_TOKEN_BEDROCK"],
            "default_model": None,
            "supports_system_prompt": True,
            "supports_abort": False,
        }

    def validate(self) -> None:
        """Verify region and model are configured.

        Raises:
            ProviderError: If region or model is empty
        """
        if not self._credentials.region or not self._credentials.model:
            raise ProviderError("AWS_REGION and ANTHROPIC_MODEL must both be set")

    async def generate_code(
        self,
        request: GenerationRequest,
        *,
        abort: asyncio.Event | None = None,
    ) -> GeneratedCode:
        """Generate code with a single InvokeModel call.

        The blocking boto3 call runs in a worker thread. abort is ignored.

        Raises:
            EmptyResponseError: If Bedrock returns no body
            UnexpectedResponseFormat: If the body lacks content[0].text
            ProviderError: If the AWS call fails
        """
        logger.info("Starting code generation with AWS Bedrock")

        model_id = request.model or self._credentials.model
        body = build_request_body(request.prompt, max_tokens=request.max_tokens or DEFAULT_MAX_TOKENS)

        logger.debug(f"Invoking Bedrock model {model_id} in {self._credentials.region}")
        raw_body = await asyncio.to_thread(self._invoke, model_id, json.dumps(body))

        parsed = parse_response(extract_response_text(raw_body))

        return GeneratedCode(
            content=parsed.content,
            language=parsed.language,
            explanation=parsed.explanation,
            provider_name=PROVIDER_NAME,
            model_name=model_id,
        )

    def _invoke(self, model_id: str, body: str) -> bytes | None:
        try:
            response = self._client.invoke_model(
                modelId=model_id,
                contentType="application/json",
                accept="application/json",
                body=body,
            )
        except (BotoCoreError, ClientError) as e:
            raise ProviderError(f"AWS Bedrock request failed: {e}") from e

        stream = response.get("body")
        if stream is None:
            return None
        return stream.read()

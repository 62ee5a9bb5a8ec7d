"""Unit tests for ManagedGatewayProvider with a mocked boto3 client."""

import asyncio
import io
import json
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from botocore import UNSIGNED
from botocore.exceptions import ClientError

from ccgen.domain.errors import EmptyResponseError, ProviderError, UnexpectedResponseFormat
from ccgen.domain.models.provider_config import GatewayCredentials
from ccgen.domain.prompt_builder import PromptBuilder
from ccgen.domain.providers.managed_gateway_provider import (
    ANTHROPIC_VERSION,
    PROVIDER_NAME,
    ManagedGatewayProvider,
    build_request_body,
    extract_response_text,
)

MODEL = "anthropic.claude-3-5-sonnet-20240620-v1:0"


def _credentials(bearer_token: str | None = None) -> GatewayCredentials:
    return GatewayCredentials(region="us-west-2", model=MODEL, bearer_token=bearer_token)


def _body(payload) -> dict:
    return {"body": io.BytesIO(json.dumps(payload).encode("utf-8"))}


@pytest.fixture
def mock_boto_client():
    with patch("ccgen.domain.providers.managed_gateway_provider.boto3.client") as mock_factory:
        yield mock_factory


class TestRequestEnvelope:

    def test_envelope_fields(self):
        body = build_request_body("add two numbers", max_tokens=100)

        assert body == {
            "anthropic_version": ANTHROPIC_VERSION,
            "max_tokens": 100,
            "system": PromptBuilder.default_system_prompt(),
            "messages": [
                {"role": "user", "content": PromptBuilder.request_prompt("add two numbers")}
            ],
        }

    def test_version_tag(self):
        assert ANTHROPIC_VERSION == "bedrock-2023-05-31"


class TestExtractResponseText:

    def test_returns_first_content_text(self):
        raw = json.dumps({"content": [{"type": "text", "text": "hello"}, {"text": "ignored"}]}).encode()

        assert extract_response_text(raw) == "hello"

    @pytest.mark.parametrize("raw", [None, b""])
    def test_missing_body_raises_empty(self, raw):
        with pytest.raises(EmptyResponseError):
            extract_response_text(raw)

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"content": []},
            {"content": [{"type": "text"}]},
            {"content": [{"text": ""}]},
            {"content": ["not a dict"]},
            {"content": "text"},
            ["content"],
        ],
    )
    def test_missing_content_text_raises(self, payload):
        with pytest.raises(UnexpectedResponseFormat):
            extract_response_text(json.dumps(payload).encode())

    def test_invalid_json_raises(self):
        with pytest.raises(UnexpectedResponseFormat, match="not valid JSON"):
            extract_response_text(b"{not json")


class TestManagedGatewayProviderClient:

    def test_ambient_credentials_when_no_token(self, mock_boto_client):
        ManagedGatewayProvider(_credentials())

        mock_boto_client.assert_called_once_with("bedrock-runtime", region_name="us-west-2")
        mock_boto_client.return_value.meta.events.register.assert_not_called()

    def test_bearer_token_sends_unsigned_with_header(self, mock_boto_client):
        ManagedGatewayProvider(_credentials(bearer_token="tok-123"))

        kwargs = mock_boto_client.call_args[1]
        assert kwargs["region_name"] == "us-west-2"
        assert kwargs["config"].signature_version is UNSIGNED

        register = mock_boto_client.return_value.meta.events.register
        register.assert_called_once()
        event_name, handler = register.call_args[0]
        assert event_name == "before-send.bedrock-runtime.InvokeModel"

        request = SimpleNamespace(headers={})
        handler(request=request)
        assert request.headers["Authorization"] == "Bearer tok-123"

    def test_validate(self, mock_boto_client):
        ManagedGatewayProvider(_credentials()).validate()

        with pytest.raises(ProviderError):
            ManagedGatewayProvider(GatewayCredentials(region="", model=MODEL)).validate()


class TestManagedGatewayProviderGenerate:

    def test_generate_parses_response(self, mock_boto_client, request_factory):
        client = mock_boto_client.return_value
        client.invoke_model.return_value = _body(
            {"content": [{"type": "text", "text": "```python\nprint(1)\n```\nDone."}]}
        )

        result = asyncio.run(ManagedGatewayProvider(_credentials()).generate_code(request_factory()))

        assert result.content == "print(1)"
        assert result.language == "python"
        assert result.explanation == "Done."
        assert result.provider_name == PROVIDER_NAME
        assert result.model_name == MODEL

    def test_invoke_model_arguments(self, mock_boto_client, request_factory):
        client = mock_boto_client.return_value
        client.invoke_model.return_value = _body({"content": [{"text": "x"}]})

        asyncio.run(
            ManagedGatewayProvider(_credentials()).generate_code(request_factory("add", max_tokens=64))
        )

        kwargs = client.invoke_model.call_args[1]
        assert kwargs["modelId"] == MODEL
        assert kwargs["contentType"] == "application/json"
        assert kwargs["accept"] == "application/json"
        assert json.loads(kwargs["body"]) == build_request_body("add", max_tokens=64)

    def test_request_model_overrides_gateway_model(self, mock_boto_client, request_factory):
        client = mock_boto_client.return_value
        client.invoke_model.return_value = _body({"content": [{"text": "x"}]})

        result = asyncio.run(
            ManagedGatewayProvider(_credentials()).generate_code(request_factory(model="other-model"))
        )

        assert client.invoke_model.call_args[1]["modelId"] == "other-model"
        assert result.model_name == "other-model"

    def test_default_max_tokens(self, mock_boto_client, request_factory):
        client = mock_boto_client.return_value
        client.invoke_model.return_value = _body({"content": [{"text": "x"}]})

        asyncio.run(ManagedGatewayProvider(_credentials()).generate_code(request_factory()))

        assert json.loads(client.invoke_model.call_args[1]["body"])["max_tokens"] == 2000

    def test_missing_body_raises_empty(self, mock_boto_client, request_factory):
        mock_boto_client.return_value.invoke_model.return_value = {}

        with pytest.raises(EmptyResponseError):
            asyncio.run(ManagedGatewayProvider(_credentials()).generate_code(request_factory()))

    def test_missing_text_raises_unexpected_format(self, mock_boto_client, request_factory):
        mock_boto_client.return_value.invoke_model.return_value = _body({"content": []})

        with pytest.raises(UnexpectedResponseFormat):
            asyncio.run(ManagedGatewayProvider(_credentials()).generate_code(request_factory()))

    def test_client_error_is_wrapped(self, mock_boto_client, request_factory):
        error = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "denied"}},
            "InvokeModel",
        )
        mock_boto_client.return_value.invoke_model.side_effect = error

        with pytest.raises(ProviderError, match="AWS Bedrock request failed") as exc_info:
            asyncio.run(ManagedGatewayProvider(_credentials()).generate_code(request_factory()))

        assert exc_info.value.__cause__ is error

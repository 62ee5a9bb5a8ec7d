from pathlib import Path

import pytest

from ccgen.domain.models.generation_request import GenerationRequest


# Environment keys read by ccgen; tests must not pick up the developer's values.
_CCGEN_ENV_KEYS = (
    "USE_OFFICIAL_CLAUDE_CODE_SDK",
    "CLAUDE_CODE_USE_BEDROCK",
    "ANTHROPIC_API_KEY",
    "AWS_REGION",
    "ANTHROPIC_MODEL",
    "AWS_BEARER_TOKEN_BEDROCK",
    "INPUT_PROMPT",
    "OUTPUT_FILE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent unit tests from accidentally using developer machine env vars.

    If a test needs an env var, it should set it explicitly via monkeypatch.
    """
    for key in _CCGEN_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def request_factory(tmp_path: Path):
    """Build GenerationRequests writing under tmp_path."""

    def _make(prompt: str = "add two numbers", **overrides) -> GenerationRequest:
        fields = {"prompt": prompt, "output_path": tmp_path / "out" / "add.ts"}
        fields.update(overrides)
        return GenerationRequest(**fields)

    return _make

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ccgen.application.config_models import GenerationSettings
from ccgen.domain.errors import ConfigError
from ccgen.domain.models.generation_request import GenerationRequest
from ccgen.domain.models.provider_config import GatewayCredentials, ProviderConfig, ProviderMode

logger = logging.getLogger(__name__)

# Environment keys
OFFICIAL_SDK_FLAG = "USE_OFFICIAL_CLAUDE_CODE_SDK"
BEDROCK_FLAG = "CLAUDE_CODE_USE_BEDROCK"
API_KEY = "ANTHROPIC_API_KEY"
REGION = "AWS_REGION"
MODEL = "ANTHROPIC_MODEL"
BEARER_TOKEN = "AWS_BEARER_TOKEN_BEDROCK"
INPUT_PROMPT = "INPUT_PROMPT"
OUTPUT_FILE = "OUTPUT_FILE"

CONFIG_DIR = ".ccgen"
CONFIG_FILE = "config.yml"


def _flag(env: Mapping[str, str], key: str) -> bool:
    return env.get(key) == "1"


def _value(env: Mapping[str, str], key: str) -> str | None:
    # Empty strings count as unset
    return env.get(key) or None


def resolve_provider_config(env: Mapping[str, str]) -> ProviderConfig:
    """
    Resolve the provider mode and its credentials from an environment mapping.

    Precedence (first match wins): official SDK flag > Bedrock flag > direct API.

    Args:
        env: Environment mapping (the CLI passes os.environ)

    Returns:
        Immutable ProviderConfig

    Raises:
        ConfigError: If the selected mode's required values are missing
    """
    if _flag(env, OFFICIAL_SDK_FLAG):
        return ProviderConfig(mode=ProviderMode.OFFICIAL)

    if _flag(env, BEDROCK_FLAG):
        region = _value(env, REGION)
        model = _value(env, MODEL)
        if not region or not model:
            raise ConfigError(f"missing region or model: set {REGION} and {MODEL}")
        return ProviderConfig(
            mode=ProviderMode.BEDROCK,
            gateway=GatewayCredentials(
                region=region,
                model=model,
                bearer_token=_value(env, BEARER_TOKEN),
            ),
        )

    api_key = _value(env, API_KEY)
    if not api_key:
        raise ConfigError(f"missing api key: set {API_KEY}")
    return ProviderConfig(mode=ProviderMode.DIRECT, api_key=api_key)


def describe_provider_config(config: ProviderConfig) -> list[str]:
    """Human-readable summary of the resolved config. Never includes secrets."""
    if config.mode == ProviderMode.OFFICIAL:
        return ["Using the official Claude Code SDK"]
    if config.mode == ProviderMode.BEDROCK:
        lines = ["Using the Anthropic SDK via AWS Bedrock"]
        if config.gateway is not None:
            lines.append(f"Region: {config.gateway.region}")
            lines.append(f"Model: {config.gateway.model}")
            if config.gateway.bearer_token:
                lines.append("Auth: bearer token")
        return lines
    return ["Using the Anthropic Direct API"]


def _defaults() -> dict[str, Any]:
    return {
        "prompt": "Create a TypeScript function that prints Hello World",
        "output_file": "generated/hello.ts",
        "model": None,
        "max_tokens": 2000,
        "max_turns": 3,
    }


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge mapping keys. For non-dict values, overlay wins.
    """
    merged: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = _deep_merge(merged[k], v)  # type: ignore[arg-type]
        else:
            merged[k] = v
    return merged


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    """
    Load YAML file and ensure root is a mapping.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except Exception as e:  # pragma: no cover
        raise ConfigError("Failed to read config file", path=path, cause=e) from e

    try:
        data = yaml.safe_load(raw)
    except Exception as e:
        raise ConfigError("Malformed YAML", path=path, cause=e) from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError("YAML root must be a mapping", path=path)

    return data


def load_generation_settings(
    env: Mapping[str, str],
    *,
    project_root: Path | None = None,
    user_home: Path | None = None,
) -> dict[str, Any]:
    """
    Load and merge generation settings with precedence (highest wins):
    CLI args (handled in CLI) > environment > project > user > defaults.

    Files:
      - user:    user_home/.ccgen/config.yml
      - project: project_root/.ccgen/config.yml

    Environment:
      - INPUT_PROMPT overrides prompt
      - OUTPUT_FILE overrides output_file
    """
    project_root = project_root or Path.cwd()
    user_home = user_home or Path.home()

    cfg: dict[str, Any] = _defaults()

    for path in (
        user_home / CONFIG_DIR / CONFIG_FILE,
        project_root / CONFIG_DIR / CONFIG_FILE,
    ):
        layer = _load_yaml_mapping(path)
        unknown = sorted(set(layer) - set(cfg))
        if unknown:
            raise ConfigError(f"Unknown config keys {unknown}", path=path)
        if layer:
            logger.debug(f"Loaded settings from {path}")
        cfg = _deep_merge(cfg, layer)

    env_overrides = {
        "prompt": _value(env, INPUT_PROMPT),
        "output_file": _value(env, OUTPUT_FILE),
    }
    cfg = _deep_merge(cfg, {k: v for k, v in env_overrides.items() if v is not None})

    return cfg


def build_generation_request(settings: Mapping[str, Any], provider_config: ProviderConfig) -> GenerationRequest:
    """
    Validate merged settings and turn them into a GenerationRequest.

    In Bedrock mode an unset model falls back to the gateway model.

    Raises:
        ConfigError: If a setting is missing or invalid
    """
    try:
        validated = GenerationSettings(**settings)
    except ValidationError as e:
        raise ConfigError(f"Invalid generation settings: {e}", cause=e) from e

    model = validated.model
    if model is None and provider_config.mode == ProviderMode.BEDROCK and provider_config.gateway:
        model = provider_config.gateway.model

    return GenerationRequest(
        prompt=validated.prompt,
        output_path=Path(validated.output_file),
        model=model,
        max_tokens=validated.max_tokens,
        max_turns=validated.max_turns,
    )

import click
import logging
import os
from pathlib import Path
from pydantic import BaseModel

from ccgen.application.config_loader import (
    build_generation_request,
    describe_provider_config,
    load_generation_settings,
    resolve_provider_config,
)
from ccgen.interface.cli.output_models import (
    GenerateOutput,
    ProviderDetail,
    ProviderSummary,
    ProvidersOutput,
    ValidateOutput,
)

logger = logging.getLogger(__name__)


def _json_emit(model: BaseModel) -> None:
    # Single-line JSON, omit None fields (e.g., GenerateOutput.output_path on error).
    click.echo(model.model_dump_json(exclude_none=True), nl=True)


def _get_json_mode(ctx: click.Context) -> bool:
    obj = ctx.obj or {}
    return bool(obj.get("json", False))


def _format_error(e: Exception) -> str:
    """Format exception into user-friendly message."""
    if isinstance(e, FileNotFoundError):
        return f"File not found: {e.filename}" if e.filename else str(e)
    if isinstance(e, KeyError):
        return f"Missing required field: {e.args[0]}"
    return str(e) or type(e).__name__


@click.group(help="Generate code from a prompt with Claude.")
@click.option("--json", "json_output", is_flag=True, help="Emit machine-readable JSON on stdout.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, json_output: bool, verbose: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj["json"] = bool(json_output)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )


@cli.command("generate")
@click.option("--prompt", type=str, help="Prompt text (overrides INPUT_PROMPT and config).")
@click.option("--output", "output_file", type=str, help="Output file (overrides OUTPUT_FILE and config).")
@click.option("--model", type=str, help="Model identifier.")
@click.option("--max-tokens", "max_tokens", type=click.IntRange(min=1), help="Maximum output tokens.")
@click.option("--max-turns", "max_turns", type=click.IntRange(min=1), help="Maximum agent turns (official SDK only).")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    help="Abort the agent session after this many seconds (official SDK only).",
)
@click.pass_context
def generate_cmd(
    ctx: click.Context,
    prompt: str | None,
    output_file: str | None,
    model: str | None,
    max_tokens: int | None,
    max_turns: int | None,
    timeout: float | None,
) -> None:
    """Generate code for a prompt and write it to a file."""
    mode: str | None = None
    try:
        from ccgen.application.generation_service import GenerationService

        provider_config = resolve_provider_config(os.environ)
        mode = provider_config.mode.value
        for line in describe_provider_config(provider_config):
            logger.info(line)

        settings = load_generation_settings(os.environ, project_root=Path.cwd(), user_home=Path.home())

        # CLI options override environment and config files
        overrides = {
            "prompt": prompt,
            "output_file": output_file,
            "model": model,
            "max_tokens": max_tokens,
            "max_turns": max_turns,
        }
        settings.update({k: v for k, v in overrides.items() if v is not None})

        request = build_generation_request(settings, provider_config)
        logger.info(f"Prompt: {request.prompt}")
        logger.info(f"Output file: {request.output_path}")

        service = GenerationService(provider_config)
        result = service.execute(request, timeout=timeout)
        code = result.code

        if _get_json_mode(ctx):
            _json_emit(
                GenerateOutput(
                    exit_code=0,
                    mode=mode,
                    output_path=str(result.output_path),
                    provider=code.provider_name,
                    model=code.model_name,
                    language=code.language,
                    explanation=code.explanation,
                    cost_usd=code.cost_usd,
                    session_id=code.session_id,
                    num_turns=code.num_turns,
                )
            )
            raise click.exceptions.Exit(0)

        click.echo(str(result.output_path))

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(
                GenerateOutput(
                    exit_code=1,
                    mode=mode,
                    error=_format_error(e),
                )
            )
            raise click.exceptions.Exit(1)
        raise click.ClickException(_format_error(e)) from e


def _provider_detail(metadata: dict) -> ProviderDetail:
    return ProviderDetail(
        name=metadata["name"],
        description=metadata["description"],
        requires_config=metadata.get("requires_config", False),
        config_keys=metadata.get("config_keys", []),
        default_model=metadata.get("default_model"),
        supports_abort=metadata.get("supports_abort", False),
    )


def _echo_provider_detail(detail: ProviderDetail) -> None:
    click.echo(f"Mode: {detail.name}")
    click.echo(f"Description: {detail.description}")
    if detail.config_keys:
        click.echo(f"Environment: {', '.join(detail.config_keys)}")
    else:
        click.echo("Environment: none")
    click.echo(f"Default model: {detail.default_model or '(backend default)'}")
    click.echo(f"Timeout/abort: {'supported' if detail.supports_abort else 'not supported'}")


@cli.command("providers")
@click.argument("mode_name", type=str, required=False)
@click.pass_context
def providers_cmd(ctx: click.Context, mode_name: str | None) -> None:
    """List provider modes or show details for one mode."""
    from ccgen.domain.providers import ProviderFactory

    json_mode = _get_json_mode(ctx)

    if mode_name is None:
        summaries = [
            ProviderSummary(
                name=m["name"],
                description=m["description"],
                requires_config=m.get("requires_config", False),
            )
            for m in ProviderFactory.get_all_metadata()
        ]
        if json_mode:
            _json_emit(ProvidersOutput(exit_code=0, providers=summaries))
            return

        click.echo(f"{'MODE':<10}{'DESCRIPTION':<50}CREDENTIALS")
        for s in summaries:
            click.echo(f"{s.name:<10}{s.description:<50}{'env' if s.requires_config else '-'}")
        return

    metadata = ProviderFactory.get_metadata(mode_name)
    if metadata is None:
        known = ", ".join(ProviderFactory.list_providers())
        message = f"Unknown mode '{mode_name}'. Known modes: {known}"
        if json_mode:
            _json_emit(ProvidersOutput(exit_code=1, error=message))
            raise click.exceptions.Exit(1)
        raise click.ClickException(message)

    detail = _provider_detail(metadata)
    if json_mode:
        _json_emit(ProvidersOutput(exit_code=0, provider=detail))
        return
    _echo_provider_detail(detail)


@cli.command("validate")
@click.pass_context
def validate_cmd(ctx: click.Context) -> None:
    """Check that the provider selected by the environment is usable."""
    mode: str | None = None
    try:
        from ccgen.domain.providers import ProviderFactory

        provider_config = resolve_provider_config(os.environ)
        mode = provider_config.mode.value

        provider = ProviderFactory.create(provider_config)
        provider.validate()

        if _get_json_mode(ctx):
            _json_emit(ValidateOutput(exit_code=0, mode=mode, passed=True))
            raise click.exceptions.Exit(0)

        click.echo(f"{mode}: OK")

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(ValidateOutput(exit_code=1, mode=mode, passed=False, error=str(e)))
            raise click.exceptions.Exit(1)
        label = mode or "config"
        raise click.ClickException(f"{label}: FAILED\n  {e}") from e

"""Inspect and write the LLM configuration file."""

import asyncio
import json

import typer
from pydantic import ValidationError

from roocode_generator.cli.commands.common import (
    CONFIG_FILE_OPTION,
    LOG_LEVEL_OPTION,
    bootstrap_from_cli,
    fail,
    mask_secret,
)
from roocode_generator.config.llm_config_service import LLMConfigService
from roocode_generator.config.schemas import LLMConfig
from roocode_generator.core.error_handler import safe_entrypoint
from roocode_generator.core.exceptions import CLIError
from roocode_generator.providers.exceptions import ModelNotFoundError

app = typer.Typer(name="config", help="Manage the LLM configuration file")


@app.command("show")
@safe_entrypoint("cli.config.show")
def show_config(
    log_level: str = LOG_LEVEL_OPTION,
    config_file: str | None = CONFIG_FILE_OPTION,
) -> None:
    """Print the effective configuration with the API key masked."""
    ctx = bootstrap_from_cli(log_level, config_file)
    result = asyncio.run(ctx["config"].load_config())
    if result.is_err():
        fail(result.error)

    data = result.unwrap().to_file_dict()
    data["apiKey"] = mask_secret(data["apiKey"])
    typer.echo(json.dumps(data, indent=2))


@app.command("validate")
@safe_entrypoint("cli.config.validate")
def validate_config(
    check_model: bool = typer.Option(
        False,
        "--check-model",
        help="Also confirm the model is offered by the provider (needs network access)",
    ),
    log_level: str = LOG_LEVEL_OPTION,
    config_file: str | None = CONFIG_FILE_OPTION,
) -> None:
    """Check that the configuration loads and names a known provider."""
    ctx = bootstrap_from_cli(log_level, config_file)
    result = asyncio.run(ctx["config"].load_config())
    if result.is_err():
        fail(result.error)

    config = result.unwrap()
    factory_result = ctx["llm"].get_provider_factory(config.provider)
    if factory_result.is_err():
        fail(factory_result.error)

    if check_model:
        models_result = asyncio.run(
            ctx["models"].list_models_for_provider(config.provider, config.api_key)
        )
        if models_result.is_err():
            fail(models_result.error)
        if config.model not in models_result.unwrap():
            fail(
                ModelNotFoundError(
                    f"Model '{config.model}' is not offered by {config.provider}",
                    provider=config.provider,
                )
            )

    typer.echo(f"Configuration is valid (provider: {config.provider}, model: {config.model})")


@app.command("init")
@safe_entrypoint("cli.config.init")
def init_config(
    provider: str = typer.Option(..., "--provider", "-p", help="Provider name"),
    model: str = typer.Option(..., "--model", "-m", help="Model identifier"),
    api_key: str = typer.Option(..., "--api-key", help="API key for the provider"),
    temperature: float = typer.Option(0.1, "--temperature", help="Sampling temperature (0-2)"),
    max_tokens: int = typer.Option(2048, "--max-tokens", help="Maximum tokens to generate"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
    log_level: str = LOG_LEVEL_OPTION,
    config_file: str | None = CONFIG_FILE_OPTION,
) -> None:
    """Write a new configuration file from the given options."""
    ctx = bootstrap_from_cli(log_level, config_file)
    service = ctx["config"]
    if not isinstance(service, LLMConfigService):
        fail(CLIError("The active configuration source is not file-backed"))

    if service.config_path.exists() and not force:
        fail(CLIError(f"{service.config_path} already exists; use --force to overwrite"))

    try:
        config = LLMConfig(
            provider=provider,
            model=model,
            api_key=api_key,
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except ValidationError as e:
        fail(CLIError(f"Invalid configuration: {e}"))

    save_result = asyncio.run(service.save_config(config))
    if save_result.is_err():
        fail(save_result.error)

    typer.echo(f"Wrote {service.config_path}")

"""Talk to the configured LLM provider and discover models."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import typer

from roocode_generator.cli.commands.common import (
    CONFIG_FILE_OPTION,
    LOG_LEVEL_OPTION,
    bootstrap_from_cli,
    fail,
)
from roocode_generator.core.app_context import AppContext
from roocode_generator.core.error_handler import safe_entrypoint
from roocode_generator.core.result import Result
from roocode_generator.providers.base import LLMProvider
from roocode_generator.providers.model_lister import ModelListerService
from roocode_generator.providers.provider_registry import ProviderRegistry
from roocode_generator.utils.logging import get_logger

app = typer.Typer(name="llm", help="Use the configured LLM provider")
log = get_logger("cli.llm")


async def _with_provider(
    ctx: AppContext, action: Callable[[LLMProvider], Awaitable[Any]]
) -> Result:
    """Resolve the active provider, run ``action(provider)`` and close transports."""
    registry: ProviderRegistry = ctx["llm"]
    try:
        provider_result = await registry.get_provider()
        if provider_result.is_err():
            return provider_result
        return Result.ok(await action(provider_result.unwrap()))
    finally:
        await ctx.aclose()


@app.command("models")
@safe_entrypoint("cli.llm.models")
def list_models(
    provider: str = typer.Argument(..., help="Provider name, e.g. openrouter"),
    api_key: str = typer.Option(..., "--api-key", help="API key for the provider"),
    log_level: str = LOG_LEVEL_OPTION,
    config_file: str | None = CONFIG_FILE_OPTION,
) -> None:
    """List the models available to API_KEY on PROVIDER, one per line."""
    ctx = bootstrap_from_cli(log_level, config_file)
    lister: ModelListerService = ctx["models"]

    result = asyncio.run(lister.list_models_for_provider(provider, api_key))
    if result.is_err():
        fail(result.error)

    for model in result.unwrap():
        typer.echo(model)


@app.command("complete")
@safe_entrypoint("cli.llm.complete")
def complete(
    user_prompt: str = typer.Argument(..., help="User prompt"),
    system: str = typer.Option(
        "You are a helpful assistant.", "--system", "-s", help="System prompt"
    ),
    log_level: str = LOG_LEVEL_OPTION,
    config_file: str | None = CONFIG_FILE_OPTION,
) -> None:
    """Send one completion request to the configured provider."""
    ctx = bootstrap_from_cli(log_level, config_file)

    async def _complete(provider):
        return await provider.get_completion(system, user_prompt)

    result = asyncio.run(_with_provider(ctx, _complete))
    if result.is_ok():
        # unwrap the provider's own Result
        result = result.unwrap()
    if result.is_err():
        fail(result.error)

    log.debug(f"Completion length: {len(result.unwrap())}")
    typer.echo(result.unwrap())


@app.command("tokens")
@safe_entrypoint("cli.llm.tokens")
def count_tokens(
    text: str = typer.Argument(..., help="Text to count"),
    log_level: str = LOG_LEVEL_OPTION,
    config_file: str | None = CONFIG_FILE_OPTION,
) -> None:
    """Count tokens in TEXT with the configured provider's tokenizer."""
    ctx = bootstrap_from_cli(log_level, config_file)
    result = asyncio.run(_with_provider(ctx, lambda provider: provider.count_tokens(text)))
    if result.is_err():
        fail(result.error)
    typer.echo(result.unwrap())


@app.command("context")
@safe_entrypoint("cli.llm.context")
def context_window(
    log_level: str = LOG_LEVEL_OPTION,
    config_file: str | None = CONFIG_FILE_OPTION,
) -> None:
    """Show the context window size of the configured model."""
    ctx = bootstrap_from_cli(log_level, config_file)
    result = asyncio.run(
        _with_provider(ctx, lambda provider: provider.get_context_window_size())
    )
    if result.is_err():
        fail(result.error)
    typer.echo(result.unwrap())

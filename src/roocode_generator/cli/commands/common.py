"""Options and helpers shared by the CLI command groups."""

import logging

import typer

from roocode_generator.core.app_context import AppContext
from roocode_generator.core.bootstrap import bootstrap
from roocode_generator.utils.logging import parse_log_level

LOG_LEVEL_OPTION = typer.Option(
    "WARNING",
    "--log-level",
    help="Logging level (e.g., DEBUG, INFO, WARNING, ERROR)",
)
CONFIG_FILE_OPTION = typer.Option(
    None,
    "--config-file",
    "-c",
    help="Path to the LLM config file (default: ./llm.config.json)",
)


def bootstrap_from_cli(log_level: str, config_file: str | None) -> AppContext:
    return bootstrap(config_file, log_level=parse_log_level(log_level, logging.WARNING))


def fail(error: BaseException) -> None:
    """Print ``error`` to stderr and exit with status 1."""
    message = getattr(error, "message", None) or str(error)
    code = getattr(error, "code", None)
    typer.echo(f"Error: {message}" + (f" ({code})" if code else ""), err=True)
    raise typer.Exit(1)


def mask_secret(value: str) -> str:
    if len(value) <= 8:
        return "****"
    return f"{value[:3]}...{value[-4:]}"

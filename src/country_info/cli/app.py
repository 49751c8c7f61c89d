"""
Main CLI application entry point.

This module contains the Typer application that resolves the provider,
sends one schema-constrained request and prints the decoded reply.
"""

from typing import Optional
import asyncio
import logging

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from country_info import VERSION
from country_info.config.env_loader import EnvFileLoader
from country_info.config.resolver import resolve_provider_config
from country_info.config.settings import CountryInfoSettings
from country_info.core.client import (
    ConfigurationError,
    CountryInfoError,
    ResponseDecodeError,
    create_chat_client,
)
from country_info.core.prompts import build_system_prompt
from country_info.core.schema import (
    CountryResponse,
    ReplyPolicy,
    decode_country_response,
    encode_country_request,
    to_display_rows,
)
from country_info.utils.log_setup import setup_logging

logger = logging.getLogger(__name__)

# Create the main Typer application
app = typer.Typer(
    name="country-info",
    help="Country Info - structured country facts from an LLM chat API",
    add_completion=False,
    rich_markup_mode="rich",
)

# Rich consoles for output; errors go to stderr
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"[bold blue]Country Info[/bold blue] version [green]{VERSION}[/green]")
        raise typer.Exit()


@app.command()
def main_command(
    country: str = typer.Option("United Kingdom", "--country", help="Name of the country to request information for"),
    base_url: str = typer.Option("", "--base-url", help="Optional base URL of an OpenAI-compatible API"),
    model: str = typer.Option("", "--model", help="Model to use for the API"),
    service_type: str = typer.Option("openai", "--service-type", help="Service type to use: openai or claude"),
    max_tokens: Optional[int] = typer.Option(None, "--max-tokens", min=1, help="Maximum tokens in the reply"),
    lenient: bool = typer.Option(False, "--lenient", help="Strip a markdown code fence around the reply before decoding"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Request structured information about a country and print it."""
    policy = ReplyPolicy.STRIP_FENCES if lenient else ReplyPolicy.STRICT

    try:
        asyncio.run(_async_country_command(
            country=country,
            base_url=base_url,
            model=model,
            service_type=service_type,
            max_tokens=max_tokens,
            policy=policy,
            verbose=verbose,
        ))
    except ResponseDecodeError as e:
        err_console.print(f"[red]Decoding error:[/red] {escape(e.message)}", soft_wrap=True)
        raise typer.Exit(1)
    except CountryInfoError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1)


async def _async_country_command(
    country: str,
    base_url: str,
    model: str,
    service_type: str,
    max_tokens: Optional[int],
    policy: ReplyPolicy,
    verbose: bool,
) -> CountryResponse:
    """Async implementation of the country command."""
    env_loader = EnvFileLoader()
    env_loader.load_env_file()

    settings = load_settings()
    setup_logging("DEBUG" if verbose else settings.log_level)
    # Logging is only configured once settings are read, so report the .env file here
    env_file = env_loader.get_loaded_file()
    if env_file is not None:
        logger.info(f"Loaded environment from: {env_file}")

    config = resolve_provider_config(
        settings,
        service_type=service_type,
        base_url=base_url,
        model=model,
        max_tokens=max_tokens,
    )

    user_message = encode_country_request(country)
    console.print(f"Encoded request: {user_message}", markup=False, highlight=False, soft_wrap=True)

    client = create_chat_client(config)
    result = await client.complete(build_system_prompt(), user_message)

    console.print("Received:")
    console.print(Text(result.text), soft_wrap=True)

    decoded = decode_country_response(result.text, policy)
    print_country_response(decoded)
    return decoded


def load_settings() -> CountryInfoSettings:
    """Load settings, reporting invalid values as configuration errors."""
    try:
        return CountryInfoSettings()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}"
            for item in e.errors()
        )
        raise ConfigurationError(f"Invalid settings: {problems}", original_error=e) from e


def print_country_response(response: CountryResponse) -> None:
    """Print a decoded response as a field/value table."""
    table = Table(title="Country Information", show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    for field, value in to_display_rows(response):
        table.add_row(field, escape(value))

    console.print(table)


def main() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()

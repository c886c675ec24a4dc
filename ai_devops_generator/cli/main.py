"""
CLI interface for the AI DevOps Generator.

Provides command-line access to serving, generation and estimation.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ai_devops_generator.config.loader import ProviderKind, load_config, with_overrides
from ai_devops_generator.core.exporter import export_for_use_case
from ai_devops_generator.core.pricing import UsageStats, estimate
from ai_devops_generator.core.prompt_builder import Environment, GenerationRequest
from ai_devops_generator.core.session import GenerationSession, SessionState
from ai_devops_generator.core.use_cases import DEFAULT_USE_CASE, USE_CASE_REGISTRY
from ai_devops_generator.exceptions import GenerationError
from ai_devops_generator.sdk.api_client import ConfigGeneratorAPI
from ai_devops_generator.sdk.generation_client import GenerationClient
from ai_devops_generator.server.logging_config import log_startup_info, setup_logging

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """AI DevOps Generator CLI."""
    if ctx.invoked_subcommand is None:
        console.print("AI DevOps Generator - Use --help to see available commands")


@app.command("use-cases")
def use_cases():
    """List the configurations that can be generated."""
    table = Table(title="Use cases")
    table.add_column("Use case", style="bold")
    table.add_column("Description")
    table.add_column("Extension")
    for definition in USE_CASE_REGISTRY.definitions.values():
        table.add_row(definition.key, definition.description, definition.file_extension)
    console.print(table)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Interface to bind"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (defaults to PORT or 3001)"),
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="YAML configuration file"),
):
    """Run the HTTP API server."""
    import uvicorn

    from ai_devops_generator.server.app import create_app

    try:
        config = with_overrides(load_config(config_path), port=port)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Configuration error:[/] {e}")
        sys.exit(EXIT_CODE_FAIL)

    setup_logging(config.log_level)
    log_startup_info(config)
    uvicorn.run(create_app(config), host=host, port=config.port, log_config=None)


@app.command()
def generate(
    tech_stack: str = typer.Argument(..., help="Description of your technology stack"),
    use_case: str = typer.Option(DEFAULT_USE_CASE, "--use-case", "-u", help="Kind of configuration to generate"),
    environment: Environment = typer.Option(Environment.DEVELOPMENT, "--environment", "-e", help="Target environment"),
    security: bool = typer.Option(True, "--security/--no-security", help="Include security best practices"),
    monitoring: bool = typer.Option(False, "--monitoring/--no-monitoring", help="Include monitoring and logging setup"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Directory to save the generated file in"),
    server: Optional[str] = typer.Option(None, "--server", "-s", help="Use a running API server instead of calling the provider"),
    provider: Optional[ProviderKind] = typer.Option(None, "--provider", help="Provider to call directly"),
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="YAML configuration file"),
):
    """Generate a DevOps configuration for a technology stack."""
    if use_case not in USE_CASE_REGISTRY:
        console.print(f"[yellow]Unknown use case '{use_case}', generating anyway[/]")

    try:
        config = with_overrides(load_config(config_path), provider=provider)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Configuration error:[/] {e}")
        sys.exit(EXIT_CODE_FAIL)

    if server:
        backend = ConfigGeneratorAPI(server, timeout=config.timeout_seconds).generate
    else:
        try:
            backend = GenerationClient(config).generate_result
        except GenerationError as e:
            console.print(f"[red]Error:[/] {e.message}")
            sys.exit(EXIT_CODE_FAIL)

    request = GenerationRequest(
        use_case=use_case,
        tech_stack_description=tech_stack,
        environment=environment,
        include_security=security,
        add_monitoring=monitoring,
    )
    session = GenerationSession(backend)
    with console.status(f"Generating {use_case}..."):
        state = asyncio.run(session.submit(request))

    if state == SessionState.FAILURE:
        console.print(f"[red]Error:[/] {session.error}")
        sys.exit(EXIT_CODE_FAIL)

    result = session.result
    console.print(result.text, markup=False, highlight=False)
    if result.usage is not None:
        _display_usage(result.usage)

    if output is not None:
        path = export_for_use_case(result.text, use_case).save(output)
        console.print(f"[green]✓[/] Saved to {path}")


@app.command("estimate")
def estimate_command(
    prompt_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File containing the prompt"),
    response_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File containing the response"),
    input_rate: float = typer.Option(0.25, "--input-rate", help="USD per 1M input tokens"),
    output_rate: float = typer.Option(1.25, "--output-rate", help="USD per 1M output tokens"),
):
    """Estimate token usage and cost for a prompt/response pair."""
    stats = estimate(
        prompt_file.read_text(encoding="utf-8"),
        response_file.read_text(encoding="utf-8"),
        input_rate,
        output_rate,
    )
    _display_usage(stats)


def _display_usage(stats: UsageStats):
    """Display usage statistics as a table."""
    table = Table(title="Usage (estimate)")
    table.add_column("Input tokens", justify="right")
    table.add_column("Output tokens", justify="right")
    table.add_column("Total tokens", justify="right")
    table.add_column("Estimated cost", justify="right")
    table.add_row(
        f"{stats.input_tokens:,}",
        f"{stats.output_tokens:,}",
        f"{stats.total_tokens:,}",
        f"${stats.estimated_cost_usd}",
    )
    console.print(table)


if __name__ == "__main__":
    app()

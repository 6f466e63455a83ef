"""
Command-line interface for the RSS dashboard.

Uses Typer to serve the API and to run one-off aggregation and source
management commands. Supports loading .env files for API key configuration.
"""

from __future__ import annotations

from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .config import AppConfig, load_config
from .feed.pipeline import run_aggregation
from .llm.commands import Analysis, execute_command, parse_reply
from .llm.prompts import analyze_system_prompt, build_article_digest, manage_system_prompt
from .llm.providers import ProviderError, create_provider
from .logging_utils import setup_llm_logger, setup_logging
from .registry import SourceRegistry, StorageError

app = typer.Typer(add_completion=False)
console = Console()

ConfigOption = typer.Option(None, "--config", "-c", exists=True, help="YAML config file.")
LogLevelOption = typer.Option(None, "--log-level", help="Logging level.")


def _load(config: Path | None, log_level: str | None) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    setup_logging(cfg.logging, Path(cfg.logging.directory))
    return cfg


def _registry(cfg: AppConfig, sources_file: Path | None) -> SourceRegistry:
    return SourceRegistry(sources_file or cfg.registry.path)


@app.command()
def serve(
    config: Path | None = ConfigOption,
    host: str | None = typer.Option(None, "--host", help="Interface to bind."),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on."),
    log_level: str | None = LogLevelOption,
):
    """Run the HTTP API."""
    import uvicorn

    from .api import create_app

    cfg = _load(config, log_level)
    uvicorn.run(
        create_app(cfg),
        host=host or cfg.server.host,
        port=port or cfg.server.port,
        log_level=cfg.logging.level.lower(),
    )


@app.command()
def articles(
    config: Path | None = ConfigOption,
    sources_file: Path | None = typer.Option(None, "--sources", "-s", help="Source list JSON file."),
    limit: int = typer.Option(30, "--limit", "-n", help="Maximum rows to print."),
    log_level: str | None = LogLevelOption,
):
    """Run one aggregation pass and print the newest articles."""
    cfg = _load(config, log_level)
    try:
        result = run_aggregation(_registry(cfg, sources_file), cfg)
    except StorageError as exc:
        console.print(f"[red]Storage error:[/red] {exc}")
        raise typer.Exit(code=1)

    table = Table(title=f"{len(result.articles)} articles")
    table.add_column("Date", no_wrap=True)
    table.add_column("Source")
    table.add_column("Title")
    for article in result.articles[:limit]:
        table.add_row(article.date[:16], article.source_name, article.title)
    console.print(table)

    for failed in result.failed_sources:
        console.print(f"[yellow]Skipped {failed.source.name}:[/yellow] {failed.error}")
    if result.warning:
        console.print(f"[yellow]Warning:[/yellow] {result.warning}")


@app.command()
def sources(
    config: Path | None = ConfigOption,
    sources_file: Path | None = typer.Option(None, "--sources", "-s", help="Source list JSON file."),
):
    """List registered sources."""
    cfg = _load(config, None)
    try:
        registered = _registry(cfg, sources_file).read_all()
    except StorageError as exc:
        console.print(f"[red]Storage error:[/red] {exc}")
        raise typer.Exit(code=1)

    table = Table(title="Sources")
    for column in ("Id", "Name", "URL", "Sector", "Category"):
        table.add_column(column)
    for source in registered:
        table.add_row(str(source.id), source.name, source.url, source.sector, source.category)
    console.print(table)


@app.command("add-source")
def add_source(
    name: str = typer.Argument(..., help="Display name."),
    url: str = typer.Argument(..., help="Feed URL."),
    sector: str | None = typer.Option(None, "--sector"),
    category: str | None = typer.Option(None, "--category"),
    config: Path | None = ConfigOption,
    sources_file: Path | None = typer.Option(None, "--sources", "-s", help="Source list JSON file."),
):
    """Register a new feed source."""
    cfg = _load(config, None)
    try:
        source = _registry(cfg, sources_file).append(name, url, sector=sector, category=category)
    except StorageError as exc:
        console.print(f"[red]Storage error:[/red] {exc}")
        raise typer.Exit(code=1)
    console.print(f"Added source #{source.id}: {source.name}")


@app.command("remove-source")
def remove_source(
    source_id: int = typer.Argument(..., help="Id of the source to delete."),
    config: Path | None = ConfigOption,
    sources_file: Path | None = typer.Option(None, "--sources", "-s", help="Source list JSON file."),
):
    """Delete a feed source by id."""
    cfg = _load(config, None)
    try:
        removed = _registry(cfg, sources_file).remove(source_id)
    except StorageError as exc:
        console.print(f"[red]Storage error:[/red] {exc}")
        raise typer.Exit(code=1)
    if not removed:
        console.print(f"[red]No source with id {source_id}[/red]")
        raise typer.Exit(code=1)
    console.print(f"Removed source #{source_id}")


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Question or management instruction."),
    config: Path | None = ConfigOption,
    sources_file: Path | None = typer.Option(None, "--sources", "-s", help="Source list JSON file."),
    api_key: str | None = typer.Option(
        None, "--api-key", help="Override provider API key (or set it in the environment / .env)."
    ),
    with_articles: bool = typer.Option(False, "--with-articles", help="Append the current article digest and analyse."),
):
    """Send a prompt to the language model and execute any returned command.

    With --with-articles the current feed digest is appended and the reply is
    treated as analysis only.
    """
    cfg = _load(config, None)
    if api_key:
        cfg.provider.api_key = api_key
    registry = _registry(cfg, sources_file)

    system = manage_system_prompt()
    if with_articles:
        try:
            result = run_aggregation(registry, cfg)
        except StorageError as exc:
            console.print(f"[red]Storage error:[/red] {exc}")
            raise typer.Exit(code=1)
        prompt = f"{prompt}\n{build_article_digest(result.articles)}"
        system = analyze_system_prompt()

    llm_logger = setup_llm_logger(cfg.logging, Path(cfg.logging.directory))
    try:
        provider = create_provider(cfg.provider, cfg.logging, llm_logger)
        reply = provider.complete(prompt, system=system)
    except (ValueError, ProviderError) as exc:
        console.print(f"[red]Provider error:[/red] {exc}")
        raise typer.Exit(code=1)

    if with_articles:
        console.print(reply)
        return

    parsed = parse_reply(reply)
    if isinstance(parsed, Analysis):
        console.print(parsed.text)
        return

    try:
        outcome = execute_command(parsed, registry)
    except StorageError as exc:
        console.print(f"[red]Storage error:[/red] {exc}")
        raise typer.Exit(code=1)
    console.print(f"[{parsed.action}] {outcome.message}")
    for match in outcome.payload.get("sources", []):
        console.print(f"  #{match['id']} {match['name']} - {match['url']}")


if __name__ == "__main__":
    app()

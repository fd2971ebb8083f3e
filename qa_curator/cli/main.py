"""
Typer CLI for the qa-curator service.

Commands:
    qa-curator domains              - List domain profiles
    qa-curator models               - Probe the local model server and list its models
    qa-curator curate FILE          - Curate QA pairs from a text file
    qa-curator curate --query Q     - Curate QA pairs from a web search (cloud only)
    qa-curator serve                - Run the HTTP API for the browser UI

Usage:
    qa-curator --help
    qa-curator curate notes.txt --domain law --backend local --model llama3:8b
    qa-curator curate --query "EU AI Act obligations" --domain technology
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from config import get_settings
from qa_curator.core.errors import CurationError
from qa_curator.core.modes import BackendMode, InputMode
from qa_curator.curation.dataset import CuratedDataset
from qa_curator.curation.export import write_export
from qa_curator.curation.session import CurationSession
from qa_curator.generation.curator import CurationRequest, QACurator
from qa_curator.generation.domains import DOMAIN_PROFILES, is_small_model
from qa_curator.integrations.model_server import LocalModelServer

app = typer.Typer(
    help="qa-curator CLI: source text -> LLM -> curated QA dataset",
    no_args_is_help=True,
)

console = Console()


# ========================================
# Rendering
# ========================================


def _render_dataset(dataset: CuratedDataset) -> None:
    table = Table(title=f"{dataset.dataset_id} ({dataset.domain}, {dataset.model_used})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Question", style="cyan")
    table.add_column("Answer")
    table.add_column("Difficulty", style="magenta")
    table.add_column("Score", justify="right", style="green")

    for i, qa in enumerate(dataset.qa_pairs, 1):
        table.add_row(str(i), qa.question, qa.answer, qa.difficulty.value, f"{qa.score:.4f}")

    console.print(table)
    level_style = "green" if dataset.quality_level.value == "advanced" else "yellow"
    console.print(
        f"Overall accuracy score: [bold]{dataset.overall_accuracy_score:.4f}[/] "
        f"([{level_style}]{dataset.quality_level.value}[/])"
    )


# ========================================
# Commands
# ========================================


@app.command()
def domains():
    """List available domain profiles."""
    table = Table(title="Domain Profiles")
    table.add_column("ID", style="cyan")
    table.add_column("Label")
    table.add_column("Max pairs", justify="right")
    table.add_column("Recommended local models", style="dim")

    for profile in DOMAIN_PROFILES.values():
        recommended = ", ".join(f"{size}: {name}" for size, name in profile.recommended_models.items())
        table.add_row(profile.id, profile.label, str(profile.max_pairs), recommended)

    console.print(table)


@app.command()
def models(
    url: str = typer.Option(None, "--url", "-u", help="Local generate URL"),
):
    """Check the local model server and list installed models."""
    settings = get_settings()
    server = LocalModelServer(url or settings.local_generate_url, settings.health_timeout_seconds)

    async def probe() -> tuple[bool, list[str]]:
        try:
            healthy = await server.health_check()
            return healthy, (await server.list_models() if healthy else [])
        finally:
            await server.close()

    healthy, names = asyncio.run(probe())
    if not healthy:
        console.print(f"[red]✗ Local server not reachable at {server.tags_url}[/]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Connected to {server.tags_url}[/]")
    if not names:
        console.print("[yellow]No models detected. Make sure models are installed.[/]")
        return
    for name in names:
        marker = " [yellow](small model - limited to 4 QA pairs)[/]" if is_small_model(name) else ""
        console.print(f"  • {name}{marker}")


@app.command()
def curate(
    source_file: Path = typer.Argument(None, help="Text file with source content", exists=True, dir_okay=False),
    text: str = typer.Option(None, "--text", "-t", help="Source text (instead of a file)"),
    query: str = typer.Option(None, "--query", "-q", help="Web search query (cloud backend only)"),
    domain: str = typer.Option(None, "--domain", "-d", help="Domain profile id"),
    backend: BackendMode = typer.Option(None, "--backend", "-b", help="cloud or local"),
    local_url: str = typer.Option(None, "--local-url", help="Local generate URL"),
    model: str = typer.Option(None, "--model", "-m", help="Local model name"),
    output_dir: Path = typer.Option(None, "--output-dir", "-o", help="Export directory"),
):
    """Generate QA pairs from a source and export the curated dataset."""
    settings = get_settings()

    if query:
        source, input_mode = query, InputMode.WEB_QUERY
    elif source_file:
        source, input_mode = source_file.read_text(encoding="utf-8"), InputMode.TEXT
    elif text:
        source, input_mode = text, InputMode.TEXT
    else:
        console.print("[red]Provide a SOURCE_FILE, --text or --query.[/]")
        raise typer.Exit(2)

    session = CurationSession.create(settings)
    session.set_backend_mode(backend or settings.default_backend)
    if local_url:
        session.backend.local_url = local_url
    if model:
        session.backend.local_model = model

    request = CurationRequest(
        source=source,
        domain=domain or settings.default_domain,
        input_mode=input_mode,
    )

    async def run() -> CuratedDataset:
        curator = QACurator(settings=settings)
        try:
            if session.backend.mode is BackendMode.LOCAL:
                await curator.refresh_local_backend(session)
            return await curator.curate(session, request)
        finally:
            await curator.close()

    with console.status("[cyan]Curating QA pairs...[/]"):
        try:
            dataset = asyncio.run(run())
        except CurationError as e:
            console.print(f"[red]AI generation error: {e}[/]")
            raise typer.Exit(1) from None

    _render_dataset(dataset)
    path = write_export(dataset, output_dir or Path(settings.export_dir))
    session.mark_exported()
    console.print(f"[green]✓ Exported {len(dataset)} QA pairs to {path}[/]")


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind host"),
    port: int = typer.Option(None, "--port", "-p", help="Bind port"),
):
    """Run the HTTP API used by the browser UI."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "qa_curator.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_level=settings.log_level.lower(),
    )


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=get_settings().log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )

    app()


if __name__ == "__main__":
    main()

"""CLI interface using typer + rich."""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from portfolio_ai.config import load_config
from portfolio_ai.export.geometry import PageGeometry
from portfolio_ai.export.layout import paginate
from portfolio_ai.export.pdf_writer import render_resume_pdf
from portfolio_ai.logging_config import setup_logging
from portfolio_ai.profile.builder import build_resume_document, resume_filename
from portfolio_ai.profile.store import ProfileNotFoundError, load_profile
from portfolio_ai.safety.store import display_uri

app = typer.Typer(
    name="portfolio-ai",
    help="Portfolio AI service: guarded AI endpoints and resume PDF export",
    no_args_is_help=True,
)
console = Console()

TRACK_HELP = "Career track: it, translation or both"


def _load_document(profile_path: Path | None, track: str):
    if track not in ("it", "translation", "both"):
        console.print(f"[red]Unknown track: {track}[/red]")
        raise typer.Exit(1)
    config = load_config()
    path = profile_path or Path(config.server.profile_path)
    try:
        profile = load_profile(path)
    except ProfileNotFoundError:
        console.print(f"[red]Profile file not found: {path}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    return config, profile, build_resume_document(profile, track)


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int = typer.Option(None, "--port", "-p", help="Port (default from config)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    config = load_config()
    setup_logging(config.server.log_level)
    uvicorn.run(
        "portfolio_ai.api.app:create_app",
        factory=True,
        host=host or config.server.host,
        port=port or config.server.port,
        reload=reload,
        log_level=config.server.log_level.lower(),
    )


@app.command()
def pdf(
    track: str = typer.Option("both", "--track", "-t", help=TRACK_HELP),
    profile: Path = typer.Option(None, "--profile", help="Profile YAML (default from config)"),
    output: Path = typer.Option(None, "--output", "-o", help="Output PDF path"),
) -> None:
    """Render the candidate's resume to a PDF file."""
    config, candidate, document = _load_document(profile, track)
    geometry = PageGeometry.from_config(config.layout)

    with console.status("Rendering PDF..."):
        pdf_bytes, pages = render_resume_pdf(document, geometry)

    out_path = output or Path(resume_filename(candidate, track))
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(pdf_bytes)
    console.print(f"[green]PDF saved: {out_path}[/green] ({len(pages)} page(s))")


@app.command()
def layout(
    track: str = typer.Option("both", "--track", "-t", help=TRACK_HELP),
    profile: Path = typer.Option(None, "--profile", help="Profile YAML (default from config)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List every text run"),
) -> None:
    """Show where each page's content lands without writing a PDF."""
    config, _, document = _load_document(profile, track)
    pages = paginate(document, PageGeometry.from_config(config.layout))

    summary = Table(title=f"Layout ({len(pages)} page(s))")
    summary.add_column("Page", justify="right")
    summary.add_column("Elements", justify="right")
    summary.add_column("First text")
    summary.add_column("Last baseline (mm)", justify="right")
    summary.add_column("Footer")
    for page in pages:
        texts = page.texts()
        summary.add_row(
            str(page.number),
            str(len(page.elements)),
            texts[0].text[:40] if texts else "",
            f"{max(t.y for t in texts):.1f}" if texts else "-",
            page.footer.text if page.footer else "",
        )
    console.print(summary)

    if verbose:
        for page in pages:
            detail = Table(title=f"Page {page.number}")
            detail.add_column("Kind")
            detail.add_column("x", justify="right")
            detail.add_column("y", justify="right")
            detail.add_column("Text")
            for run in page.texts():
                detail.add_row(run.kind, f"{run.x:.1f}", f"{run.y:.1f}", run.text[:60])
            console.print(detail)


@app.command()
def policies() -> None:
    """Show the active rate limit policies."""
    config = load_config()
    table = Table(title="Rate limit policies")
    table.add_column("Feature")
    table.add_column("Requests / window", justify="right")
    table.add_column("Max payload (chars)", justify="right")
    table.add_column("Timeout (s)", justify="right")
    for name in config.policies:
        policy = config.policy(name)
        table.add_row(
            name,
            f"{policy.max_requests_per_window} / {policy.window_seconds}s",
            str(policy.max_payload_chars),
            f"{policy.timeout_seconds:g}",
        )
    console.print(table)
    console.print(Panel(
        f"Storage: {display_uri(config.rate_limit.storage_uri)}\n"
        f"Key scope: {config.rate_limit.key_scope}\n"
        f"Health check interval: {config.rate_limit.health_check_interval_seconds}s",
        title="Rate limit store",
    ))


if __name__ == "__main__":
    app()
